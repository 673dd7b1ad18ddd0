"""Emotion classifier — ordered, threshold-driven rule chains.

Channels are consulted in a fixed precedence; the first matching rule wins
and nothing falls through once a rule has matched:

=============  ===============================================  ==========
Precedence     Channel                                          Chain
=============  ===============================================  ==========
1              explicit ``emotion``                             verbatim
2              frustration / excitement / calm indicators       ``INDICATOR_RULES``
3              flow + heart-rate :class:`DailyStats`            ``STATISTICS_RULES``
4              instantaneous flow intensity / heart rate        ``REALTIME_RULES``
=============  ===============================================  ==========

Each chain is a tuple of :class:`Rule` evaluated top-down.  Order is
load-bearing: several later rules can never fire once an earlier one has
matched (e.g. ``low_flow_high_hr_unstable`` claims part of the region of
``low_flow_high_hr``), and
when the indicator channel is populated by :func:`derive_indicators` it
often pre-empts the statistics chain entirely.  Those rules are kept
as-is and visible here rather than reordered.

Classification is a pure function of its inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from flow_insights.affect.models import (
    Classification,
    ClassificationMode,
    ClassifierInputs,
    EmotionState,
)

logger = structlog.get_logger(__name__)

DEFAULT_INDICATOR_THRESHOLD = 60.0

STATE_DESCRIPTIONS: dict[EmotionState, str] = {
    EmotionState.HAPPY: "Current state: Happy flow",
    EmotionState.SAD: "Current state: Taking a break?",
    EmotionState.SURPRISED: "Current state: Curious",
    EmotionState.NEUTRAL: "Current state: Calm & Ready",
    EmotionState.FOCUSED: "Current state: In the zone",
    EmotionState.STRESSED: "Current state: Need a pause",
    EmotionState.CALM: "Current state: Relaxed",
    EmotionState.ANXIOUS: "Current state: On edge",
}


@dataclass(frozen=True)
class Rule:
    """One ``(predicate → state)`` step of a decision chain."""

    name: str
    predicate: Callable[[ClassifierInputs], bool]
    state: EmotionState
    description: str


# ── Chains ────────────────────────────────────────────────────


def indicator_rules(threshold: float = DEFAULT_INDICATOR_THRESHOLD) -> tuple[Rule, ...]:
    """Indicator gate: frustration, then excitement, then calm."""

    def above(value: float | None) -> bool:
        return value is not None and value > threshold

    return (
        Rule("frustration_high", lambda c: above(c.frustration), EmotionState.STRESSED,
             "Elevated frustration indicator"),
        Rule("excitement_high", lambda c: above(c.excitement), EmotionState.HAPPY,
             "Elevated excitement indicator"),
        Rule("calm_high", lambda c: above(c.calm), EmotionState.CALM,
             "Elevated calm indicator"),
    )


INDICATOR_RULES = indicator_rules()

STATISTICS_RULES: tuple[Rule, ...] = (
    Rule(
        "negative_correlation_unstable_hr",
        lambda c: (c.correlation is not None and c.correlation < -0.6
                   and c.heart_rate_stats.stability < 40),
        EmotionState.ANXIOUS,
        "Flow and heart rate diverging with an unsettled heart rate",
    ),
    Rule(
        "low_flow_high_hr_unstable",
        lambda c: (c.flow_stats.average < 35 and c.heart_rate_stats.average > 90
                   and c.flow_stats.stability < 40),
        EmotionState.STRESSED,
        "Low, erratic flow with an elevated heart rate",
    ),
    Rule(
        "high_flow_stable_hr",
        lambda c: c.flow_stats.average > 70 and c.heart_rate_stats.stability > 70,
        EmotionState.FOCUSED,
        "Deep focus and stable heart rate",
    ),
    Rule(
        "high_flow_moderate_hr",
        lambda c: c.flow_stats.average > 65 and c.heart_rate_stats.average < 85,
        EmotionState.HAPPY,
        "Positive flow state",
    ),
    Rule(
        "low_flow_high_hr",
        lambda c: c.flow_stats.average < 30 and c.heart_rate_stats.average > 85,
        EmotionState.SAD,
        "Signs of stress detected",
    ),
    Rule(
        "low_flow_low_hr_stable",
        lambda c: (c.flow_stats.average < 45 and c.heart_rate_stats.average < 65
                   and c.flow_stats.stability > 60 and c.heart_rate_stats.stability > 60),
        EmotionState.CALM,
        "Relaxed and steady",
    ),
    Rule(
        "unstable_signal",
        lambda c: c.flow_stats.stability < 45 or c.heart_rate_stats.stability < 45,
        EmotionState.SURPRISED,
        "Variable mental state",
    ),
    Rule("statistics_default", lambda c: True, EmotionState.NEUTRAL, "Balanced mental state"),
)

REALTIME_RULES: tuple[Rule, ...] = (
    Rule("flow_very_high", lambda c: c.flow_intensity > 65, EmotionState.FOCUSED,
         STATE_DESCRIPTIONS[EmotionState.FOCUSED]),
    Rule("flow_high", lambda c: c.flow_intensity > 55, EmotionState.HAPPY,
         STATE_DESCRIPTIONS[EmotionState.HAPPY]),
    Rule("flow_low_hr_high", lambda c: c.flow_intensity < 25 and c.heart_rate > 95, EmotionState.SAD,
         STATE_DESCRIPTIONS[EmotionState.SAD]),
    Rule("flow_mid", lambda c: 40 < c.flow_intensity < 55, EmotionState.SURPRISED,
         STATE_DESCRIPTIONS[EmotionState.SURPRISED]),
    Rule("realtime_default", lambda c: True, EmotionState.NEUTRAL,
         STATE_DESCRIPTIONS[EmotionState.NEUTRAL]),
)


def first_match(rules: tuple[Rule, ...], inputs: ClassifierInputs) -> Rule | None:
    """Return the first rule whose predicate holds, or ``None``."""
    for rule in rules:
        if rule.predicate(inputs):
            return rule
    return None


# ── Entry points ──────────────────────────────────────────────


def classify(
    inputs: ClassifierInputs,
    *,
    indicator_threshold: float = DEFAULT_INDICATOR_THRESHOLD,
) -> Classification:
    """Map ``inputs`` to a single :class:`EmotionState`.

    Indicators at or below the threshold fall through to the statistics
    channel, then to the real-time channel; if neither is available the
    result is ``neutral``.
    """
    result = _classify(inputs, indicator_threshold)
    if inputs.custom_description:
        result = result.model_copy(update={"description": inputs.custom_description})

    logger.debug(
        "classifier.classified",
        state=result.state.value,
        mode=result.mode.value,
        rule=result.rule,
    )
    return result


def _classify(inputs: ClassifierInputs, indicator_threshold: float) -> Classification:
    if inputs.emotion is not None:
        return Classification(
            state=inputs.emotion,
            description=STATE_DESCRIPTIONS[inputs.emotion],
            mode=ClassificationMode.OVERRIDE,
            rule="override",
        )

    chains: list[tuple[ClassificationMode, tuple[Rule, ...]]] = []
    if inputs.has_indicators:
        rules = (
            INDICATOR_RULES
            if indicator_threshold == DEFAULT_INDICATOR_THRESHOLD
            else indicator_rules(indicator_threshold)
        )
        chains.append((ClassificationMode.INDICATORS, rules))
    if inputs.has_statistics:
        chains.append((ClassificationMode.STATISTICS, STATISTICS_RULES))
    if inputs.has_realtime:
        chains.append((ClassificationMode.REALTIME, REALTIME_RULES))

    for mode, rules in chains:
        rule = first_match(rules, inputs)
        if rule is not None:
            return Classification(
                state=rule.state,
                description=rule.description,
                mode=mode,
                rule=rule.name,
            )

    return Classification(
        state=EmotionState.NEUTRAL,
        description=STATE_DESCRIPTIONS[EmotionState.NEUTRAL],
        mode=ClassificationMode.DEFAULT,
        rule="default",
    )


def classify_time_point(flow: float, heart_rate: float) -> EmotionState:
    """Per-cell state for the timeline grid, from instantaneous readings."""
    if flow > 80:
        return EmotionState.FOCUSED if heart_rate > 85 else EmotionState.HAPPY
    if flow < 40:
        return EmotionState.STRESSED if heart_rate > 80 else EmotionState.SAD
    if heart_rate > 85:
        return EmotionState.SURPRISED
    return EmotionState.NEUTRAL
