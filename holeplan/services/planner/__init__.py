"""Shot planning engine.

Forward generation enumerates club sequences from the start position to the
green, scores every shot and commits to the best; the legacy backward
planner works from the green outwards. Interactive helpers recompute a plan
while a landing point is dragged on the map.
"""

from __future__ import annotations

from .environment import effective_reach, plays_like, plays_like_distance
from .generator import generate_forward_sequences
from .interactive import (
    DragContextCache,
    assess_shot_color_full,
    assess_shot_color_lightweight,
    compute_drag_frame_update,
    compute_full_shot_update,
    prepare_drag_context,
)
from .orchestrator import compute_hole_plan, create_error_plan
from .service import plan_hole

__all__ = [
    "DragContextCache",
    "assess_shot_color_full",
    "assess_shot_color_lightweight",
    "compute_drag_frame_update",
    "compute_full_shot_update",
    "compute_hole_plan",
    "create_error_plan",
    "effective_reach",
    "generate_forward_sequences",
    "plan_hole",
    "plays_like",
    "plays_like_distance",
    "prepare_drag_context",
]
