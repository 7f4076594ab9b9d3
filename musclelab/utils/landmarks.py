from typing import Dict, Optional, Tuple

from musclelab.models.pose_model import Frame, Point3D

# Core trunk landmarks: if any of these drop out the subject has left the frame
CORE_LANDMARKS = ("left_shoulder", "right_shoulder", "left_hip", "right_hip")

CORE_VIS_THRESHOLD = 0.5


class LandmarkMapper:
    """
    Side-aware landmark lookup for one body side ("L" / "R").

    Joint angles are three-point angles (degrees at the middle landmark):
        shoulder = hip - shoulder - elbow
        elbow    = shoulder - elbow - wrist
        hip      = shoulder - hip - knee
        knee     = hip - knee - ankle
    """

    TRIPLETS: Dict[str, Tuple[str, str, str]] = {
        "shoulder": ("hip", "shoulder", "elbow"),
        "elbow": ("shoulder", "elbow", "wrist"),
        "hip": ("shoulder", "hip", "knee"),
        "knee": ("hip", "knee", "ankle"),
    }

    def __init__(self, side: str, vis_threshold: float = CORE_VIS_THRESHOLD):
        self.side = side.upper()
        self.prefix = "left_" if self.side == "L" else "right_"
        self.vis_threshold = vis_threshold

    def name(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def point(self, frame: Frame, key: str) -> Optional[Point3D]:
        return visible(frame, self.name(key), self.vis_threshold)

    def triplet(self, frame: Frame, joint: str) -> Optional[Tuple[Point3D, Point3D, Point3D]]:
        keys = self.TRIPLETS.get(joint)
        if keys is None:
            raise KeyError(f"Invalid joint key: {joint}")
        pts = [self.point(frame, k) for k in keys]
        if any(p is None for p in pts):
            return None
        return pts[0], pts[1], pts[2]


# -----------------------------------------------------
# Safe landmark fetch
# -----------------------------------------------------

def get(frame: Frame, name: str) -> Optional[Point3D]:
    if not frame:
        return None
    return frame.get(name)


def visible(frame: Frame, name: str, threshold: float = CORE_VIS_THRESHOLD) -> Optional[Point3D]:
    p = get(frame, name)
    if p is None or p.visibility < threshold:
        return None
    return p


def core_visible(frame: Frame, threshold: float = CORE_VIS_THRESHOLD) -> bool:
    """True when both shoulders and both hips are present and trusted."""
    if not frame:
        return False
    return all(visible(frame, n, threshold) is not None for n in CORE_LANDMARKS)


def pair_mid(frame: Frame, left: str, right: str) -> Optional[Point3D]:
    a = get(frame, left)
    b = get(frame, right)
    if a is None or b is None:
        return None
    return a.midpoint(b)
