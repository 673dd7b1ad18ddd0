"""Pydantic models for emotional-state classification and its animation.

These models represent:
- The discrete emotional states and their static visual appearance
- Classifier inputs (one or more input channels) and results
- The single mutable transition state driven by the render loop
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from flow_insights.models import DailyStats

# ── Enums ─────────────────────────────────────────────────────


class EmotionState(str, Enum):
    """Discrete emotional states shown to the user."""

    HAPPY = "happy"
    SAD = "sad"
    SURPRISED = "surprised"
    NEUTRAL = "neutral"
    FOCUSED = "focused"
    STRESSED = "stressed"
    CALM = "calm"
    ANXIOUS = "anxious"


class ClassificationMode(str, Enum):
    """Which input channel decided a classification."""

    OVERRIDE = "override"
    INDICATORS = "indicators"
    STATISTICS = "statistics"
    REALTIME = "realtime"
    DEFAULT = "default"


class MouthShape(str, Enum):
    SMILE = "smile"
    SMALL_SMILE = "small_smile"
    SMALL_FROWN = "small_frown"
    O = "o"
    WAVY = "wavy"


class BrowShape(str, Enum):
    GENTLE_ARCH = "gentle_arch"
    RAISED = "raised"
    DROOPED = "drooped"
    FURROWED = "furrowed"
    LEVEL = "level"


class Scene(str, Enum):
    """Ambient background scene behind the avatar."""

    SUNNY = "sunny"
    RAIN = "rain"
    SPARKLES = "sparkles"
    MEADOW = "meadow"
    FOREST = "forest"
    STORM = "storm"
    OCEAN = "ocean"
    FOG = "fog"


# ── Appearance ────────────────────────────────────────────────


class StateAppearance(BaseModel):
    """Fully resolved visual parameters for one rendered frame.

    ``color`` holds RGB channels as floats in [0, 255] so that
    interpolated frames are not quantised.
    """

    model_config = ConfigDict(frozen=True)

    color: tuple[float, float, float]
    eye_size: float
    mouth: MouthShape
    brow: BrowShape
    bounce: float
    scene: Scene
    jitter: float = 0.0


class RangeColor(BaseModel):
    """Indicator-driven RGB swatch (frustration, excitement, calm)."""

    red: int = Field(ge=0, le=255)
    green: int = Field(ge=0, le=255)
    blue: int = Field(ge=0, le=255)
    brightness: float
    text_color: str


# ── Classification ────────────────────────────────────────────


class ClassifierInputs(BaseModel):
    """Input channels for :func:`~flow_insights.affect.classifier.classify`.

    At least one channel must be present: an explicit ``emotion``, any of
    the three indicators, both statistics objects, or ``flow_intensity``.
    """

    emotion: EmotionState | None = None

    frustration: float | None = Field(None, ge=0.0, le=100.0)
    excitement: float | None = Field(None, ge=0.0, le=100.0)
    calm: float | None = Field(None, ge=0.0, le=100.0)

    flow_stats: DailyStats | None = None
    heart_rate_stats: DailyStats | None = None
    correlation: float | None = Field(None, ge=-1.0, le=1.0)

    flow_intensity: float | None = None
    heart_rate: float = 75.0

    custom_description: str | None = None

    @property
    def has_indicators(self) -> bool:
        return any(v is not None for v in (self.frustration, self.excitement, self.calm))

    @property
    def has_statistics(self) -> bool:
        return self.flow_stats is not None and self.heart_rate_stats is not None

    @property
    def has_realtime(self) -> bool:
        return self.flow_intensity is not None

    @model_validator(mode="after")
    def _require_channel(self) -> ClassifierInputs:
        if not (self.emotion or self.has_indicators or self.has_statistics or self.has_realtime):
            raise ValueError(
                "classifier inputs need an emotion override, indicators, "
                "flow/heart-rate statistics or a flow intensity"
            )
        return self


class Classification(BaseModel):
    """Result of one classification."""

    state: EmotionState
    description: str
    mode: ClassificationMode
    rule: str = ""


# ── Transition ────────────────────────────────────────────────


class TransitionState(BaseModel):
    """Animation state between the previous and the target appearance.

    ``previous`` is a snapshot of whatever was on screen when the target
    last changed, possibly itself a partial interpolation.
    """

    previous: StateAppearance
    target: EmotionState = EmotionState.NEUTRAL
    start_ms: float | None = None
    progress: float = Field(1.0, ge=0.0, le=1.0)
