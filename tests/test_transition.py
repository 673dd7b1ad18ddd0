"""Tests for state appearances, interpolation and the transition engine."""

from __future__ import annotations

import pytest

from flow_insights.affect.appearance import (
    APPEARANCES,
    appearance_for,
    emotion_range_color,
    interpolate,
    parse_hex,
    to_hex,
)
from flow_insights.affect.models import (
    Classification,
    ClassificationMode,
    EmotionState,
    MouthShape,
    Scene,
)
from flow_insights.affect.transition import (
    TransitionEngine,
    advance,
    apply_classification,
    compute_frame,
    initial_transition_state,
)

NEUTRAL = appearance_for(EmotionState.NEUTRAL)
HAPPY = appearance_for(EmotionState.HAPPY)


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(clock: FakeClock) -> TransitionEngine:
    return TransitionEngine(duration_ms=500, clock=clock)


# ── Appearance ────────────────────────────────────────────────


class TestAppearance:
    def test_every_state_has_an_appearance(self):
        assert set(APPEARANCES) == set(EmotionState)

    def test_hex_round_trip(self):
        assert parse_hex("#85C1E9") == (133.0, 193.0, 233.0)
        assert to_hex(HAPPY.color) == "#85C1E9"

    def test_bad_hex_rejected(self):
        with pytest.raises(ValueError):
            parse_hex("#123")

    def test_interpolation_endpoints(self):
        assert interpolate(NEUTRAL, HAPPY, 0.0) == NEUTRAL
        assert interpolate(NEUTRAL, HAPPY, 1.0) == HAPPY

    @pytest.mark.parametrize("progress", [0.1, 0.5, 0.9])
    def test_numeric_fields_strictly_between(self, progress):
        frame = interpolate(NEUTRAL, HAPPY, progress)
        for got, a, b in zip(frame.color, NEUTRAL.color, HAPPY.color):
            assert min(a, b) < got < max(a, b)
        assert min(NEUTRAL.bounce, HAPPY.bounce) < frame.bounce < max(NEUTRAL.bounce, HAPPY.bounce)

    def test_categorical_fields_snap(self):
        frame = interpolate(NEUTRAL, HAPPY, 0.01)
        assert frame.mouth == MouthShape.SMILE
        assert frame.scene == Scene.SUNNY

    def test_jitter_blends(self):
        stressed = appearance_for(EmotionState.STRESSED)
        assert interpolate(NEUTRAL, stressed, 0.5).jitter == pytest.approx(0.75)


class TestRangeColor:
    def test_pure_frustration_is_red_with_white_text(self):
        color = emotion_range_color(100, 0, 0)
        assert (color.red, color.green, color.blue) == (255, 0, 0)
        assert color.brightness == pytest.approx(76.245)
        assert color.text_color == "#FFFFFF"

    def test_full_intensity_uses_black_text(self):
        color = emotion_range_color(100, 100, 100)
        assert (color.red, color.green, color.blue) == (255, 255, 255)
        assert color.text_color == "#000000"

    def test_missing_and_out_of_range_values(self):
        color = emotion_range_color(None, 150, -10)
        assert (color.red, color.green, color.blue) == (0, 255, 0)


# ── Pure transition functions ─────────────────────────────────


class TestTransitionFunctions:
    def test_initial_state_is_settled_neutral(self):
        state = initial_transition_state()
        assert state.target == EmotionState.NEUTRAL
        assert state.start_ms is None
        assert state.progress == 1.0
        assert compute_frame(state, 1_000, 500) == NEUTRAL

    def test_same_target_is_noop(self):
        state = initial_transition_state()
        assert apply_classification(state, EmotionState.NEUTRAL, 100, 500) is False
        assert state.start_ms is None

    def test_new_target_restarts(self):
        state = initial_transition_state()
        assert apply_classification(state, EmotionState.HAPPY, 100, 500) is True
        assert state.target == EmotionState.HAPPY
        assert state.start_ms == 100
        assert state.progress == 0.0
        assert state.previous == NEUTRAL

    def test_compute_frame_does_not_mutate(self):
        state = initial_transition_state()
        apply_classification(state, EmotionState.HAPPY, 0, 500)
        compute_frame(state, 250, 500)
        assert state.progress == 0.0

    def test_advance_pins_at_one(self):
        state = initial_transition_state()
        apply_classification(state, EmotionState.HAPPY, 0, 500)
        assert advance(state, 10_000, 500) == HAPPY
        assert state.progress == 1.0
        assert advance(state, 20_000, 500) == HAPPY
        assert state.progress == 1.0

    def test_zero_duration_settles_immediately(self):
        state = initial_transition_state()
        apply_classification(state, EmotionState.HAPPY, 0, 0)
        assert advance(state, 0, 0) == HAPPY


# ── Engine ────────────────────────────────────────────────────


class TestTransitionEngine:
    def test_update_starts_transition(self, engine, clock):
        assert engine.settled
        assert engine.update(EmotionState.HAPPY) is True
        assert not engine.settled
        assert engine.frame() == NEUTRAL

    def test_accepts_classification(self, engine):
        result = Classification(
            state=EmotionState.CALM, description="", mode=ClassificationMode.REALTIME,
        )
        engine.update(result)
        assert engine.target == EmotionState.CALM

    def test_halfway_frame(self, engine, clock):
        engine.update(EmotionState.HAPPY)
        clock.now = 250
        frame = engine.tick()
        assert engine.state.progress == pytest.approx(0.5)
        assert frame.color == pytest.approx(tuple((a + b) / 2 for a, b in zip(NEUTRAL.color, HAPPY.color)))
        assert frame.mouth == HAPPY.mouth

    def test_settles_after_duration(self, engine, clock):
        engine.update(EmotionState.HAPPY)
        clock.now = 600
        assert engine.tick() == HAPPY
        assert engine.settled

    def test_progress_never_decreases(self, engine, clock):
        engine.update(EmotionState.HAPPY)
        clock.now = 300
        engine.tick()
        clock.now = 200
        engine.tick()
        assert engine.state.progress == pytest.approx(0.6)

    def test_retarget_starts_from_rendered_frame(self, engine, clock):
        engine.update(EmotionState.HAPPY)
        clock.now = 250
        halfway = engine.frame()

        assert engine.update(EmotionState.SAD) is True
        assert engine.state.previous == halfway
        assert engine.state.start_ms == 250
        assert engine.frame() == halfway

    def test_repeated_target_does_not_restart(self, engine, clock):
        engine.update(EmotionState.HAPPY)
        clock.now = 250
        assert engine.update(EmotionState.HAPPY) is False
        assert engine.state.start_ms == 0
