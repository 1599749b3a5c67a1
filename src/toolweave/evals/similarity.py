"""Vector similarity helpers."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> Optional[float]:
    """Cosine similarity of two vectors.

    Returns:
        Similarity in [-1, 1], or None when the vectors differ in size
        or either has zero magnitude
    """
    a = np.asarray(vector_a, dtype=np.float64)
    b = np.asarray(vector_b, dtype=np.float64)
    if a.shape != b.shape:
        return None

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0 or magnitude_b == 0:
        return None
    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


__all__ = ["cosine_similarity"]
