"""Entry point for ``python -m cup_engine``."""

from .cli import main

main()
