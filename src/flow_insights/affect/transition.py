"""Animated transitions between emotional-state appearances.

A single :class:`TransitionState` is shared between the classifier output
and the render loop.  A new target snapshots whatever frame is currently on
screen, so retargeting mid-transition never jumps.  Progress only grows and
is pinned at 1 once the duration has elapsed.

All timings are milliseconds on a monotonic clock.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog

from flow_insights.affect.appearance import appearance_for, interpolate
from flow_insights.affect.models import (
    Classification,
    EmotionState,
    StateAppearance,
    TransitionState,
)
from flow_insights.config import get_settings

logger = structlog.get_logger(__name__)


def initial_transition_state() -> TransitionState:
    """Settled on ``neutral`` with no transition in flight."""
    return TransitionState(
        previous=appearance_for(EmotionState.NEUTRAL),
        target=EmotionState.NEUTRAL,
        start_ms=None,
        progress=1.0,
    )


def progress_at(state: TransitionState, now_ms: float, duration_ms: float) -> float:
    if state.start_ms is None:
        return state.progress
    if duration_ms <= 0:
        return 1.0
    elapsed = max(0.0, now_ms - state.start_ms)
    return max(state.progress, min(1.0, elapsed / duration_ms))


def compute_frame(state: TransitionState, now_ms: float, duration_ms: float) -> StateAppearance:
    """Appearance to draw at ``now_ms``; does not mutate ``state``."""
    progress = progress_at(state, now_ms, duration_ms)
    target = appearance_for(state.target)
    if progress >= 1.0:
        return target
    return interpolate(state.previous, target, progress)


def apply_classification(
    state: TransitionState,
    target: EmotionState,
    now_ms: float,
    duration_ms: float,
) -> bool:
    """Retarget ``state``.  Returns ``False`` when ``target`` is unchanged."""
    if target == state.target:
        return False

    previous_target = state.target
    state.previous = compute_frame(state, now_ms, duration_ms)
    state.target = target
    state.start_ms = now_ms
    state.progress = 0.0

    logger.debug(
        "transition.started",
        from_state=previous_target.value,
        to_state=target.value,
        duration_ms=duration_ms,
    )
    return True


def advance(state: TransitionState, now_ms: float, duration_ms: float) -> StateAppearance:
    """One render tick: update ``state.progress`` and return the frame."""
    state.progress = progress_at(state, now_ms, duration_ms)
    return compute_frame(state, now_ms, duration_ms)


# ── Engine ────────────────────────────────────────────────────


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class TransitionEngine:
    """Owns one :class:`TransitionState` and a clock.

    Parameters
    ----------
    duration_ms : float, optional
        Transition length; defaults to ``settings.transition_duration_ms``.
    clock : callable, optional
        Zero-argument callable returning the current time in milliseconds.
    state : TransitionState, optional
        Starting state; defaults to a settled ``neutral``.
    """

    def __init__(
        self,
        duration_ms: float | None = None,
        clock: Callable[[], float] | None = None,
        state: TransitionState | None = None,
    ) -> None:
        if duration_ms is None:
            duration_ms = get_settings().transition_duration_ms
        self.duration_ms = duration_ms
        self._clock = clock or _monotonic_ms
        self._state = state if state is not None else initial_transition_state()

    @property
    def state(self) -> TransitionState:
        return self._state

    @property
    def target(self) -> EmotionState:
        return self._state.target

    @property
    def settled(self) -> bool:
        return self._state.progress >= 1.0

    def update(self, result: Classification | EmotionState) -> bool:
        target = result.state if isinstance(result, Classification) else result
        return apply_classification(self._state, target, self._clock(), self.duration_ms)

    def tick(self) -> StateAppearance:
        return advance(self._state, self._clock(), self.duration_ms)

    def frame(self) -> StateAppearance:
        return compute_frame(self._state, self._clock(), self.duration_ms)
