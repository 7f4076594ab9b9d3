import math
from typing import Dict, Optional


def clamp(value: float, lo: float, hi: float) -> float:
    """NaN/inf-safe clamp; non-finite values collapse to lo."""
    if value is None or not math.isfinite(value):
        return lo
    return max(lo, min(hi, value))


def safe_divide(a: float, b: float) -> float:
    if b == 0.0 or not math.isfinite(a) or not math.isfinite(b):
        return 0.0
    out = a / b
    return out if math.isfinite(out) else 0.0


def sanitize(value: Optional[float], digits: int = 1) -> float:
    """Report-facing number: NaN / inf / None -> 0.0, rounded."""
    if value is None or not math.isfinite(value):
        return 0.0
    return round(float(value), digits)


def sanitize_map(data: Optional[Dict[str, float]], digits: int = 1) -> Dict[str, float]:
    if not data:
        return {}
    return {k: sanitize(v, digits) for k, v in data.items()}


def percent(value: float) -> float:
    return clamp(sanitize(value), 0.0, 100.0)
