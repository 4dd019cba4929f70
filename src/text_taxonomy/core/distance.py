# core/distance.py

from __future__ import annotations

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity


def cosine_distance_matrix(vectors: np.ndarray) -> np.ndarray:
    """
    Symmetric N×N cosine distance matrix with a zero diagonal.

    distance = max(0, 1 - similarity); a zero-magnitude vector has
    similarity 0 with everything (distance 1). Only the upper triangle
    is computed and then mirrored, so matrix[i, j] == matrix[j, i]
    holds exactly.
    """
    vectors = np.asarray(vectors, dtype=float)
    n = vectors.shape[0]
    if n == 0:
        return np.zeros((0, 0), dtype=float)
    if vectors.ndim != 2 or vectors.shape[1] == 0:
        # No features at all: every pair is maximally distant
        upper = np.triu(np.ones((n, n), dtype=float), k=1)
        return upper + upper.T

    # sklearn leaves zero rows at zero after normalizing → similarity 0
    sim = cosine_similarity(vectors)
    dist = np.clip(1.0 - sim, 0.0, 1.0)

    upper = np.triu(dist, k=1)
    return upper + upper.T
