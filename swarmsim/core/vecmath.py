import numpy as np


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def normalize(v: np.ndarray) -> np.ndarray:
    """Unit vector along v; the zero vector stays zero."""
    n = length(v)
    if n == 0.0:
        return np.zeros_like(v, dtype=float)
    return v / n


def clamp_length(v: np.ndarray, max_len: float) -> np.ndarray:
    n = length(v)
    if n > max_len:
        return v * (max_len / n)
    return v
