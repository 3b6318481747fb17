"""Environment-variable-based configuration for the ghosting engine."""

from __future__ import annotations

import os

from ghosting_engine.models.enums import AUTO_SCALE_FAST_MAX_S, AUTO_SCALE_MEDIUM_MAX_S

SPLIT_STEP_FAST_MAX_S: float = float(
    os.environ.get("GHOSTING_SPLIT_STEP_FAST_MAX_S", str(AUTO_SCALE_FAST_MAX_S))
)
SPLIT_STEP_MEDIUM_MAX_S: float = float(
    os.environ.get("GHOSTING_SPLIT_STEP_MEDIUM_MAX_S", str(AUTO_SCALE_MEDIUM_MAX_S))
)
DEFAULT_SEED: int = int(os.environ.get("GHOSTING_DEFAULT_SEED", "0"))
NARRATION_RETRIES: int = int(os.environ.get("GHOSTING_NARRATION_RETRIES", "1"))
