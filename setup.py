from setuptools import setup, find_packages

setup(
    name="inquiry-cup",
    version="1.0.0",
    description="Inquiry Cup - performed inquiry staged as football: script validator and match replay engine",
    author="Your Name",
    packages=find_packages(include=["cup_core", "cup_core.*", "cup_engine", "cup_engine.*", "cup_dispatch", "cup_dispatch.*"]),
    include_package_data=True,
    package_data={
        "cup_dispatch": ["templates/*.j2"],
    },
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Async HTTP client (for the Matrix dispatcher)
        "httpx>=0.25.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",

        # YAML match scripts
        "pyyaml>=6.0.0",

        # Jinja2 for SSML templates
        "jinja2>=3.0.0",

        # Markdown -> HTML for Matrix formatted bodies
        "markdown>=3.4.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cup = cup_engine.cli:main",
        ],
    },
    python_requires=">=3.11",
    package_dir={"": "."},
)
