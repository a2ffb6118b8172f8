"""Match clock: period derivation and display formatting.

Both functions are pure. Explicit halftime/fulltime markers are applied by the
EventApplier on top of the period derived here.
"""

from __future__ import annotations

from typing import Optional

from cup_core.state import ClockState, MatchPeriod


def initial_clock() -> ClockState:
    return ClockState(minute=0, added=0, period=MatchPeriod.PRE)


def derive_period(minute: float, current: MatchPeriod) -> MatchPeriod:
    """Pick the period for an event stamped ``minute``.

    Rules, in priority order:
    1. pre-match + minute 0 -> first half
    2. halftime -> second half (any event after the break resumes play)
    3. minute <= 45 -> first half, otherwise second half
    """
    if current == MatchPeriod.PRE and minute == 0:
        return MatchPeriod.FIRST_HALF
    if current == MatchPeriod.HALFTIME:
        return MatchPeriod.SECOND_HALF
    if minute <= 45:
        return MatchPeriod.FIRST_HALF
    return MatchPeriod.SECOND_HALF


def advance_clock(current: ClockState, minute: float, added: Optional[float] = None) -> ClockState:
    """Return the clock after an event stamped ``minute`` (+``added``)."""
    return ClockState(
        minute=minute,
        added=added or 0,
        period=derive_period(minute, current.period),
    )


def format_clock(clock: ClockState) -> str:
    """Format the clock for display.

    Examples: "PRE", "0'", "45+2'", "HT", "FT"
    """
    if clock.period == MatchPeriod.PRE:
        return "PRE"
    if clock.period == MatchPeriod.HALFTIME:
        return "HT"
    if clock.period == MatchPeriod.FULLTIME:
        return "FT"
    if clock.added > 0:
        return f"{clock.minute}+{clock.added}'"
    return f"{clock.minute}'"
