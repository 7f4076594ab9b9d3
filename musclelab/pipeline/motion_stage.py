from collections import Counter
from typing import List, Sequence

from musclelab.biomech.motion_analyzer import MotionAnalyzer
from musclelab.biomech.stability import calculate_stability, is_side_view
from musclelab.models.biomech_model import MotionPattern, MovementState
from musclelab.models.context import Context
from musclelab.utils.landmarks import core_visible
from musclelab.utils.logger import log


def dominant_pattern(patterns: Sequence[MotionPattern]) -> MotionPattern:
    """Most frequent steady-state tag, ties to the earliest seen."""
    steady = [p for p in patterns if p != MotionPattern.STABILIZING]
    if not steady:
        return MotionPattern.STABILIZING
    # Counter keeps first-seen order for equal counts
    return Counter(steady).most_common(1)[0][0]


def dominant_state(patterns: Sequence[MotionPattern],
                   states: Sequence[MovementState]) -> MovementState:
    steady = [s for p, s in zip(patterns, states) if p != MotionPattern.STABILIZING]
    if not steady:
        return MovementState.ISOMETRIC
    return Counter(steady).most_common(1)[0][0]


def run(ctx: Context) -> Context:
    """
    Motion stage:
    - One fresh MotionAnalyzer per session, frames fed strictly in order.
    - Stability is read from a single representative frame: the middle one
      among frames whose trunk is visible.
    """
    try:
        log("[INFO] MotionStage: Starting")

        frames = ctx.pose.frames
        if not frames:
            ctx.motion.error = "No pose frames"
            return ctx

        analyzer = MotionAnalyzer()
        patterns: List[MotionPattern] = []
        states: List[MovementState] = []
        visible_idx: List[int] = []

        for idx, frame in enumerate(frames):
            result = analyzer.analyze(frame)
            patterns.append(result.pattern)
            states.append(result.state)
            if core_visible(frame):
                visible_idx.append(idx)

        ctx.motion.patterns = patterns
        ctx.motion.states = states
        ctx.motion.dominant_pattern = dominant_pattern(patterns)
        ctx.motion.dominant_state = dominant_state(patterns, states)
        ctx.motion.frames_skipped = len(frames) - len(visible_idx)

        if visible_idx:
            rep = visible_idx[len(visible_idx) // 2]
            ctx.motion.representative_frame = rep
            ctx.motion.stability = calculate_stability(frames[rep])
            ctx.motion.is_side_view = is_side_view(frames[rep])

        ctx.motion.error = None

        log(
            f"[INFO] MotionStage: Completed pattern={ctx.motion.dominant_pattern.value} "
            f"state={ctx.motion.dominant_state.value} skipped={ctx.motion.frames_skipped}"
        )

    except Exception as e:
        ctx.motion.error = str(e)
        log(f"[ERROR] MotionStage: {e}")

    return ctx
