import math


def clip(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))

def round_half_up(x: float) -> int:
    return math.floor(x + 0.5)

def snap(value: float, grid_size: float) -> float:
    """Nearest multiple of grid_size, halves rounded up as a browser would."""
    if grid_size <= 0:
        raise ValueError("grid_size must be positive")
    return round_half_up(value / grid_size) * grid_size

def star_ratio(current_level: int, max_level: int) -> float:
    if max_level <= 0:
        return 0.0
    return clip(current_level / max_level, 0.0, 1.0)
