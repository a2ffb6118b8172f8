import unittest
from unittest.mock import AsyncMock, patch

from cup_core.events import CardColor, PitchPosition
from cup_core.state import CENTER, MatchPeriod, TeamSide
from cup_dispatch.base import Dispatcher
from cup_engine.config import EngineOptions
from cup_engine.engine import MatchEngine

from factories import fulltime, kickoff, make_script


class RecordingDispatcher(Dispatcher):
    """Captures lifecycle calls along with a snapshot of the state seen."""

    def __init__(self, name="recorder", log=None):
        self.name = name
        self.log = log if log is not None else []

    async def on_match_start(self, state):
        self.log.append((self.name, "start", state.clock.period, state.model_copy(deep=True)))

    async def on_event(self, event, state):
        self.log.append((self.name, event.kind.value, state.event_index, state.model_copy(deep=True)))

    async def on_match_end(self, state):
        self.log.append((self.name, "end", state.clock.period, state.model_copy(deep=True)))


class FailingDispatcher(RecordingDispatcher):
    async def on_event(self, event, state):
        if event.kind.value == "goal":
            raise RuntimeError("room unavailable")
        await super().on_event(event, state)


class InitialStateTest(unittest.TestCase):
    def test_initial_state(self) -> None:
        engine = MatchEngine(make_script())
        state = engine.state

        self.assertEqual(len(state.players), 10)
        self.assertEqual(state.total_events, 4)
        self.assertEqual(state.event_index, 0)
        self.assertEqual(state.clock.period, MatchPeriod.PRE)
        self.assertEqual((state.score.home, state.score.away), (0, 0))
        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)
        self.assertEqual(state.ball.position, CENTER)
        for ps in state.players.values():
            self.assertTrue(ps.on_pitch)
            self.assertFalse(ps.has_ball)
            self.assertEqual(ps.cards, [])

    def test_formation_positions(self) -> None:
        state = MatchEngine(make_script()).state

        self.assertEqual(state.player("HomeTender").position, PitchPosition(x=-46, y=0))
        self.assertEqual(state.player("HomeDefender").position, PitchPosition(x=-30, y=0))
        self.assertEqual(state.player("HomeMidLeft").position, PitchPosition(x=-15, y=-12))
        self.assertEqual(state.player("HomeMidRight").position, PitchPosition(x=-15, y=12))
        self.assertEqual(state.player("HomeForward").position, PitchPosition(x=-5, y=0))
        self.assertEqual(state.player("AwayForward").position, PitchPosition(x=5, y=0))
        self.assertEqual(state.player("AwayTender").team, TeamSide.AWAY)

    def test_negative_pace_rejected(self) -> None:
        with self.assertRaises(ValueError):
            EngineOptions(pace_ms=-1)


class EventApplierTest(unittest.TestCase):
    """State transitions, applied one event at a time."""

    def _engine(self, *events):
        engine = MatchEngine(make_script(events=[kickoff(), *events, fulltime()]))
        return engine, engine.state, engine.applier

    def _apply(self, engine, index):
        engine.applier.apply_event(engine.events[index])

    def test_kickoff_gives_ball_to_home_tender(self) -> None:
        engine, state, _ = self._engine()
        self._apply(engine, 0)

        self.assertFalse(state.ball.dead)
        self.assertEqual(state.ball.holder, "HomeTender")
        self.assertTrue(state.player("HomeTender").has_ball)
        self.assertEqual(state.ball.position, state.player("HomeTender").position)

    def test_possession_is_exclusive(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 1, "type": "pass", "from": "HomeTender", "to": "HomeMidLeft"},
            {"minute": 2, "type": "intercept", "actor": "AwayMidRight"},
            {"minute": 3, "type": "hold", "actor": "AwayForward"},
        )
        for i in range(4):
            self._apply(engine, i)
            holders = [ps.name for ps in state.players.values() if ps.has_ball]
            self.assertEqual(holders, [state.ball.holder])

        self.assertEqual(state.ball.holder, "AwayForward")
        self.assertEqual(state.ball.position, PitchPosition(x=5, y=0))

    def test_pass_to_unknown_player_is_ignored(self) -> None:
        engine, state, _ = self._engine({"minute": 1, "type": "pass", "from": "HomeTender", "to": "Ghost"})
        self._apply(engine, 0)
        self._apply(engine, 1)

        self.assertEqual(state.ball.holder, "HomeTender")

    def test_move_overwrites_position(self) -> None:
        target = {"x": 22.5, "y": -7}
        engine, state, _ = self._engine(
            {"minute": 1, "type": "move", "actor": "HomeForward", "position": target},
            {"minute": 2, "type": "move", "actor": "Ghost", "position": target},
        )
        self._apply(engine, 1)
        self._apply(engine, 2)

        self.assertEqual(state.player("HomeForward").position, PitchPosition(x=22.5, y=-7))

    def test_stoppage_and_restart_keep_possession(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 5, "type": "whistle", "reason": "stoppage"},
            {"minute": 6, "type": "whistle", "reason": "restart"},
        )
        self._apply(engine, 0)
        self._apply(engine, 1)
        self.assertTrue(state.ball.dead)
        self.assertEqual(state.ball.holder, "HomeTender")

        self._apply(engine, 2)
        self.assertFalse(state.ball.dead)
        self.assertEqual(state.ball.holder, "HomeTender")

    def test_halftime_whistle(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 20, "type": "move", "actor": "HomeTender", "position": {"x": -40, "y": 5}},
            {"minute": 45, "type": "whistle", "reason": "halftime"},
        )
        for i in range(3):
            self._apply(engine, i)

        self.assertEqual(state.clock.period, MatchPeriod.HALFTIME)
        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)
        self.assertFalse(state.player("HomeTender").has_ball)
        self.assertEqual(state.ball.position, CENTER)

    def test_fulltime_marker_leaves_ball_position(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 30, "type": "pass", "from": "HomeTender", "to": "HomeForward"},
        )
        for i in range(3):
            self._apply(engine, i)

        self.assertEqual(state.clock.period, MatchPeriod.FULLTIME)
        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)
        self.assertEqual(state.ball.position, PitchPosition(x=-5, y=0))

    def test_dead_ball_recenters(self) -> None:
        engine, state, _ = self._engine({"minute": 8, "type": "dead_ball", "reason": "Out of play"})
        self._apply(engine, 0)
        self._apply(engine, 1)

        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)
        self.assertEqual(state.ball.position, CENTER)

    def test_home_goal(self) -> None:
        engine, state, _ = self._engine({"minute": 10, "type": "goal", "actor": "HomeForward"})
        self._apply(engine, 0)
        self._apply(engine, 1)

        self.assertEqual((state.score.home, state.score.away), (1, 0))
        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)
        self.assertEqual(state.ball.position, CENTER)

    def test_away_goal_and_unknown_scorer(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 10, "type": "goal", "actor": "AwayForward"},
            {"minute": 11, "type": "goal", "actor": "Ghost"},
        )
        for i in range(3):
            self._apply(engine, i)

        self.assertEqual((state.score.home, state.score.away), (0, 1))
        self.assertTrue(state.ball.dead)

    def test_exit_by_ball_holder(self) -> None:
        engine, state, _ = self._engine({"minute": 60, "type": "exit", "actor": "HomeTender"})
        self._apply(engine, 0)
        self._apply(engine, 1)

        self.assertFalse(state.player("HomeTender").on_pitch)
        self.assertFalse(state.player("HomeTender").has_ball)
        self.assertTrue(state.ball.dead)
        self.assertIsNone(state.ball.holder)

    def test_exit_by_other_player_keeps_ball_live(self) -> None:
        engine, state, _ = self._engine({"minute": 60, "type": "exit", "actor": "AwayMidLeft"})
        self._apply(engine, 0)
        self._apply(engine, 1)

        self.assertFalse(state.player("AwayMidLeft").on_pitch)
        self.assertFalse(state.ball.dead)
        self.assertEqual(state.ball.holder, "HomeTender")

    def test_cards_accumulate_without_exit(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 30, "type": "card", "actor": "AwayDefender", "card": "yellow"},
            {"minute": 70, "type": "card", "actor": "AwayDefender", "card": "red"},
        )
        for i in range(1, 3):
            self._apply(engine, i)

        player = state.player("AwayDefender")
        self.assertEqual(player.cards, [CardColor.YELLOW, CardColor.RED])
        self.assertTrue(player.on_pitch)

    def test_speech_and_pause_leave_state_alone(self) -> None:
        engine, state, _ = self._engine(
            {"minute": 1, "type": "speak", "actor": "HomeForward", "text": "Ready."},
            {"minute": 1, "type": "pause", "pause_ms": 10},
            {"minute": 1, "type": "penalty", "reason": "Handball"},
        )
        self._apply(engine, 0)
        before = state.model_copy(deep=True)
        for i in range(1, 4):
            self._apply(engine, i)

        self.assertEqual(state, before)


class MatchEngineRunTest(unittest.IsolatedAsyncioTestCase):
    async def test_end_to_end_scoring_match(self) -> None:
        recorder = RecordingDispatcher()
        engine = MatchEngine(make_script(), EngineOptions(dispatchers=[recorder]))

        final = await engine.run()

        self.assertIs(final, engine.state)
        self.assertEqual((final.score.home, final.score.away), (1, 0))
        self.assertEqual(final.clock.period, MatchPeriod.FULLTIME)
        self.assertTrue(final.ball.dead)
        self.assertIsNone(final.ball.holder)

        calls = [entry[1] for entry in recorder.log]
        self.assertEqual(calls, ["start", "whistle", "pass", "goal", "whistle", "end"])
        self.assertEqual(recorder.log[0][2], MatchPeriod.PRE)

    async def test_dispatchers_see_post_mutation_state(self) -> None:
        recorder = RecordingDispatcher()
        await MatchEngine(make_script(), EngineOptions(dispatchers=[recorder])).run()

        _, _, index, after_kickoff = recorder.log[1]
        self.assertEqual(index, 0)
        self.assertEqual(after_kickoff.ball.holder, "HomeTender")
        self.assertEqual(after_kickoff.clock.period, MatchPeriod.FIRST_HALF)

        _, _, index, after_pass = recorder.log[2]
        self.assertEqual(index, 1)
        self.assertEqual(after_pass.ball.holder, "HomeDefender")
        self.assertEqual(after_pass.clock.minute, 3)

        _, _, _, after_goal = recorder.log[3]
        self.assertEqual(after_goal.score.home, 1)

    async def test_dispatchers_notified_in_registration_order(self) -> None:
        log = []
        first, second = RecordingDispatcher("first", log), RecordingDispatcher("second", log)
        await MatchEngine(make_script(), EngineOptions(dispatchers=[first, second])).run()

        names = [(entry[0], entry[1]) for entry in log]
        self.assertEqual(names[:4], [("first", "start"), ("second", "start"), ("first", "whistle"), ("second", "whistle")])
        self.assertEqual(names[-2:], [("first", "end"), ("second", "end")])

    async def test_dispatcher_failure_aborts_run(self) -> None:
        log = []
        failing, later = FailingDispatcher("failing", log), RecordingDispatcher("later", log)
        engine = MatchEngine(make_script(), EngineOptions(dispatchers=[failing, later]))

        with self.assertRaisesRegex(RuntimeError, "room unavailable"):
            await engine.run()

        names = [(entry[0], entry[1]) for entry in log]
        self.assertNotIn(("later", "goal"), names)
        self.assertNotIn(("failing", "end"), names)
        self.assertEqual(engine.state.event_index, 2)

    async def test_missing_opening_whistle_still_replays(self) -> None:
        events = [
            {"minute": 0, "type": "hold", "actor": "HomeTender"},
            {"minute": 5, "type": "goal", "actor": "HomeForward"},
            fulltime(),
        ]
        final = await MatchEngine(make_script(events=events)).run()

        self.assertEqual(final.score.home, 1)
        self.assertEqual(final.clock.period, MatchPeriod.FULLTIME)

    async def test_no_pacing_when_pace_is_zero(self) -> None:
        with patch("cup_engine.engine._pause", new=AsyncMock()) as pause:
            await MatchEngine(make_script(), EngineOptions(pace_ms=0)).run()
        pause.assert_not_awaited()

    async def test_pacing_skips_final_event(self) -> None:
        with patch("cup_engine.engine._pause", new=AsyncMock()) as pause:
            await MatchEngine(make_script(), EngineOptions(pace_ms=1000)).run()

        delays = [call.args[0] for call in pause.await_args_list]
        # whistle halves, pass uses base, goal triples; nothing after the last whistle
        self.assertEqual(delays, [500, 1000, 3000])


class EventDelayTest(unittest.TestCase):
    def _delays(self, pace_ms, *events):
        engine = MatchEngine(make_script(events=list(events)), EngineOptions(pace_ms=pace_ms))
        return [engine.event_delay(e) for e in engine.events]

    def test_delay_table(self) -> None:
        delays = self._delays(
            1000,
            {"minute": 0, "type": "whistle", "reason": "kickoff"},
            {"minute": 1, "type": "goal", "actor": "HomeForward"},
            {"minute": 45, "type": "halftime"},
            {"minute": 46, "type": "pause"},
            {"minute": 46, "type": "pause", "pause_ms": 250},
            {"minute": 47, "type": "move", "actor": "HomeForward", "position": {"x": 1, "y": 1}},
            {"minute": 90, "type": "fulltime"},
        )
        self.assertEqual(delays, [500, 3000, 2000, 2000, 250, 1000, 1000])

    def test_speech_delay_scales_with_words(self) -> None:
        long_line = " ".join(["word"] * 12)
        delays = self._delays(
            1000,
            {"minute": 1, "type": "speak", "actor": "Ref", "text": "Short line."},
            {"minute": 1, "type": "announce", "actor": "pbp", "text": long_line},
            {"minute": 1, "type": "comment"},
        )
        self.assertEqual(delays, [1000, 2400, 1000])


if __name__ == "__main__":
    unittest.main()
