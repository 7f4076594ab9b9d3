from musclelab.models.context import Context
from musclelab.utils.logger import log
from musclelab.utils.vectors import normalize_landmarks


def run(ctx: Context) -> Context:
    """
    Pose stage:
    - Keep input order and frame count (frames are never re-sorted or dropped).
    - Normalize every frame by body scale so later stages are camera-distance free.
    """
    try:
        log("[INFO] PoseStage: Starting")

        frames = ctx.input.frames
        if not frames:
            ctx.pose.error = "No frames provided"
            return ctx

        ctx.pose.frames = [normalize_landmarks(f.landmarks) for f in frames]
        ctx.pose.timestamps_ms = [f.timestamp_ms for f in frames]
        ctx.pose.total_frames = len(frames)

        span_ms = frames[-1].timestamp_ms - frames[0].timestamp_ms
        ctx.pose.duration_sec = span_ms / 1000.0 if span_ms > 0 else 0.0
        ctx.pose.error = None

        log(f"[INFO] PoseStage: Completed frames={ctx.pose.total_frames}")

    except Exception as e:
        ctx.pose.error = str(e)
        log(f"[ERROR] PoseStage: {e}")

    return ctx
