"""Affect — discrete emotional-state classification and its animation.

Architecture
------------
1. **Classifier** (`classifier.py`)
   - Ordered rule chains over four input channels: explicit override,
     frustration / excitement / calm indicators, daily flow and heart-rate
     statistics, instantaneous flow intensity
   - First match wins; unmatched input resolves to ``neutral``

2. **Appearance** (`appearance.py`)
   - Static visual parameters per state
   - Per-field interpolation: numeric fields blend, categorical fields snap

3. **Transition** (`transition.py`)
   - One mutable transition state advanced by the render loop
   - Retargeting mid-transition starts from the frame currently on screen
"""

from flow_insights.affect.models import (
    Classification,
    ClassificationMode,
    ClassifierInputs,
    EmotionState,
    StateAppearance,
    TransitionState,
)

__all__ = [
    "Classification",
    "ClassificationMode",
    "ClassifierInputs",
    "EmotionState",
    "StateAppearance",
    "TransitionState",
]
