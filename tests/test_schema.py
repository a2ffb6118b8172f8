import pytest
from pydantic import ValidationError

from cup_core.events import (
    EVENT_TYPES,
    CardColor,
    EventKind,
    GoalEvent,
    MoveEvent,
    PassEvent,
    PitchPosition,
    SpeakEvent,
    WhistleReason,
    get_event_class,
    is_speech,
)
from cup_core.match import MatchScript, PositionRole
from cup_core.pitch import ZONES, describe_zone, distance, is_near_goal
from cup_core.state import CENTER, TeamSide, default_positions

from factories import make_document, make_script


def test_parses_typed_events():
    script = make_script()

    assert script.match.home.tender.role == PositionRole.TENDER
    assert [e.kind for e in script.events] == [
        EventKind.WHISTLE,
        EventKind.PASS,
        EventKind.GOAL,
        EventKind.WHISTLE,
    ]
    assert isinstance(script.events[1], PassEvent)
    assert script.events[1].from_ == "HomeTender"
    assert script.events[0].reason == WhistleReason.KICKOFF


def test_team_code_is_upper_cased():
    script = make_script()
    assert script.match.home.code == "HOM"
    assert script.match.away.code == "AWY"


@pytest.mark.parametrize("code", ["HO", "HOME", ""])
def test_team_code_must_be_three_characters(code):
    doc = make_document()
    doc["match"]["home"]["code"] = code
    with pytest.raises(ValidationError):
        MatchScript.model_validate(doc)


@pytest.mark.parametrize("match_id", ["M1S1", "S1", "s1m001", "S1M"])
def test_match_id_pattern(match_id):
    with pytest.raises(ValidationError):
        make_script(id=match_id)


def test_season_must_be_positive():
    with pytest.raises(ValidationError):
        make_script(season=0)


@pytest.mark.parametrize("season", ["2", 1.0, True])
def test_season_must_be_an_integer(season):
    with pytest.raises(ValidationError):
        make_script(season=season)


def test_whole_minutes_stay_integers():
    script = make_script(events=[{"minute": 10, "type": "pause"}, {"minute": 12.5, "type": "pause"}])
    assert type(script.events[0].minute) is int
    assert script.events[1].minute == 12.5


def test_integer_coordinates_accepted():
    script = make_script(events=[{"minute": 1, "type": "move", "actor": "HomeForward", "position": {"x": 10, "y": -5}}])
    assert script.events[0].position == PitchPosition(x=10, y=-5)


def test_unknown_event_type_rejected():
    with pytest.raises(ValidationError):
        make_script(events=[{"minute": 1, "type": "dribble", "actor": "HomeForward"}])


@pytest.mark.parametrize("minute", [-1, 91])
def test_minute_out_of_range_rejected(minute):
    with pytest.raises(ValidationError):
        make_script(events=[{"minute": minute, "type": "pause"}])


def test_move_position_bounds():
    with pytest.raises(ValidationError):
        make_script(events=[{"minute": 1, "type": "move", "actor": "HomeForward", "position": {"x": 51, "y": 0}}])

    script = make_script(events=[{"minute": 1, "type": "move", "actor": "HomeForward", "position": {"x": -50, "y": 35}}])
    move = script.events[0]
    assert isinstance(move, MoveEvent)
    assert move.position == PitchPosition(x=-50, y=35)


def test_field_roster_length_is_not_a_schema_rule():
    doc = make_document()
    doc["match"]["away"]["field"] = doc["match"]["away"]["field"][:2]
    script = MatchScript.model_validate(doc)
    assert len(script.match.away.field) == 2


def test_card_and_speech_fields():
    script = make_script(events=[
        {"minute": 5, "type": "card", "actor": "AwayForward", "card": "red", "reason": "Dissent"},
        {"minute": 6, "type": "speak", "actor": "Ref", "text": "Off.", "tone": "cold", "direction": "points"},
    ])
    card, speak = script.events
    assert card.card == CardColor.RED
    assert isinstance(speak, SpeakEvent)
    assert speak.tone == "cold"
    assert speak.direction == "points"


def test_undeclared_keys_are_ignored():
    script = make_script(events=[{"minute": 10, "type": "goal", "actor": "HomeForward", "text": "unused"}])
    assert isinstance(script.events[0], GoalEvent)
    assert not hasattr(script.events[0], "text")


def test_document_round_trip():
    doc = make_document()
    script = MatchScript.model_validate(doc)

    expected = make_document()
    expected["match"]["home"]["code"] = "HOM"
    assert script.to_document() == expected


def test_event_registry():
    assert len(EVENT_TYPES) == len(EventKind)
    assert get_event_class("pass") is PassEvent
    with pytest.raises(KeyError):
        get_event_class("dribble")


def test_is_speech():
    script = make_script(events=[
        {"minute": 1, "type": "speak", "actor": "Ref", "text": "Play on"},
        {"minute": 1, "type": "comment", "text": "Interesting."},
        {"minute": 1, "type": "hold", "actor": "HomeForward"},
    ])
    assert [is_speech(e) for e in script.events] == [True, True, False]


# ========== Formation / pitch ==========


def test_default_positions_are_mirrored():
    home = default_positions(TeamSide.HOME)
    away = default_positions(TeamSide.AWAY)

    assert home["tender"] == PitchPosition(x=-46, y=0)
    assert away["tender"] == PitchPosition(x=46, y=0)
    for slot in home:
        assert home[slot].x == -away[slot].x
        assert home[slot].y == away[slot].y
    assert home["midfielder_left"].y == -12


def test_distance():
    assert distance(CENTER, PitchPosition(x=3, y=4)) == 5
    assert distance(ZONES["HOME_GOAL"], ZONES["AWAY_GOAL"]) == 96


def test_describe_zone_from_each_side():
    assert describe_zone(PitchPosition(x=-40, y=0)) == "deep in own half"
    assert describe_zone(PitchPosition(x=-20, y=0)) == "own defensive third"
    assert describe_zone(PitchPosition(x=-5, y=3)) == "own midfield"
    assert describe_zone(CENTER) == "center circle"
    assert describe_zone(PitchPosition(x=10, y=0)) == "opponent's midfield"
    assert describe_zone(PitchPosition(x=20, y=0)) == "attacking third"
    assert describe_zone(PitchPosition(x=40, y=0)) == "deep in opponent's half"

    # Away defends +x
    assert describe_zone(PitchPosition(x=40, y=0), TeamSide.AWAY) == "deep in own half"
    assert describe_zone(PitchPosition(x=-20, y=0), TeamSide.AWAY) == "attacking third"


def test_is_near_goal():
    assert is_near_goal(PitchPosition(x=-46, y=0), TeamSide.HOME)
    assert not is_near_goal(PitchPosition(x=-46, y=0), TeamSide.AWAY)
    assert is_near_goal(PitchPosition(x=42, y=-10), TeamSide.AWAY)
    assert not is_near_goal(PitchPosition(x=46, y=20), TeamSide.AWAY)
