"""Static state appearances, colour helpers and per-field interpolation."""

from __future__ import annotations

from flow_insights.affect.models import (
    BrowShape,
    EmotionState,
    MouthShape,
    RangeColor,
    Scene,
    StateAppearance,
)

RGB = tuple[float, float, float]


def parse_hex(color: str) -> RGB:
    """``"#RRGGBB"`` → ``(r, g, b)`` floats."""
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"expected #RRGGBB colour, got {color!r}")
    return (float(int(value[0:2], 16)), float(int(value[2:4], 16)), float(int(value[4:6], 16)))


def to_hex(color: RGB) -> str:
    """``(r, g, b)`` → ``"#RRGGBB"``, rounding and clamping each channel."""
    channels = (max(0, min(255, round(c))) for c in color)
    return "#" + "".join(f"{c:02X}" for c in channels)


def _appearance(
    color: str,
    eye_size: float,
    mouth: MouthShape,
    brow: BrowShape,
    bounce: float,
    scene: Scene,
    jitter: float = 0.0,
) -> StateAppearance:
    return StateAppearance(
        color=parse_hex(color),
        eye_size=eye_size,
        mouth=mouth,
        brow=brow,
        bounce=bounce,
        scene=scene,
        jitter=jitter,
    )


APPEARANCES: dict[EmotionState, StateAppearance] = {
    EmotionState.HAPPY: _appearance("#85C1E9", 18, MouthShape.SMILE, BrowShape.GENTLE_ARCH, 3, Scene.SUNNY),
    EmotionState.SAD: _appearance("#5BA5F5", 16, MouthShape.SMALL_FROWN, BrowShape.DROOPED, -2, Scene.RAIN),
    EmotionState.SURPRISED: _appearance("#B266FF", 20, MouthShape.O, BrowShape.RAISED, 4, Scene.SPARKLES),
    EmotionState.NEUTRAL: _appearance("#7DCFB6", 18, MouthShape.SMALL_SMILE, BrowShape.GENTLE_ARCH, 1, Scene.MEADOW),
    EmotionState.FOCUSED: _appearance("#58D68D", 18, MouthShape.SMILE, BrowShape.LEVEL, 2, Scene.FOREST),
    EmotionState.STRESSED: _appearance(
        "#EC7063", 16, MouthShape.SMALL_FROWN, BrowShape.FURROWED, -1, Scene.STORM, jitter=1.5,
    ),
    EmotionState.CALM: _appearance("#AED6F1", 17, MouthShape.SMALL_SMILE, BrowShape.GENTLE_ARCH, 0.5, Scene.OCEAN),
    EmotionState.ANXIOUS: _appearance("#F5B041", 19, MouthShape.WAVY, BrowShape.RAISED, 0, Scene.FOG, jitter=2.5),
}


def appearance_for(state: EmotionState) -> StateAppearance:
    return APPEARANCES[state]


# ── Interpolation ────────────────────────────────────────────


def lerp(a: float, b: float, progress: float) -> float:
    return a * (1 - progress) + b * progress


def interpolate(previous: StateAppearance, target: StateAppearance, progress: float) -> StateAppearance:
    """Blend two appearances at ``progress`` in [0, 1].

    Numeric fields (each colour channel, eye size, bounce, jitter) are
    linearly interpolated.  Categorical fields keep the previous value only
    at exactly ``progress == 0`` and snap to the target for any
    ``progress > 0``.
    """
    progress = max(0.0, min(1.0, progress))
    snapped = progress > 0
    return StateAppearance(
        color=tuple(lerp(a, b, progress) for a, b in zip(previous.color, target.color)),
        eye_size=lerp(previous.eye_size, target.eye_size, progress),
        mouth=target.mouth if snapped else previous.mouth,
        brow=target.brow if snapped else previous.brow,
        bounce=lerp(previous.bounce, target.bounce, progress),
        scene=target.scene if snapped else previous.scene,
        jitter=lerp(previous.jitter, target.jitter, progress),
    )


# ── Indicator colour range ───────────────────────────────────


def _channel(value: float | None) -> int:
    if value is None:
        return 0
    return min(255, max(0, round(value / 100 * 255)))


def emotion_range_color(
    frustration: float | None,
    excitement: float | None,
    calm: float | None,
) -> RangeColor:
    """Map 0–100 indicators onto red (frustration), green (excitement), blue (calm).

    ``text_color`` picks black or white for legible overlay text using
    perceived brightness.
    """
    red, green, blue = _channel(frustration), _channel(excitement), _channel(calm)
    brightness = (red * 299 + green * 587 + blue * 114) / 1000
    return RangeColor(
        red=red,
        green=green,
        blue=blue,
        brightness=brightness,
        text_color="#000000" if brightness > 125 else "#FFFFFF",
    )
