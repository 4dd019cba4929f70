# core/clustering.py

"""
Cluster engine: agglomerative hierarchical clustering (AGNES).

Starting with one cluster per unit, repeatedly merge the closest pair
of active clusters until one remains. Linkage policies:

    average  → size-weighted mean of the constituent pairwise distances
    complete → max of the constituent pairwise distances

Ties are broken deterministically. Every cluster lives in the slot of
its smallest unit index, and the first minimum in row-major order of
the (symmetric) working matrix is the lexicographically smallest
(slot_a, slot_b) pair.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Union

import numpy as np

from .errors import ClusteringError
from .types import ClusterNode, ClusterTree, Forest, Internal, Leaf

logger = logging.getLogger(__name__)

# Float slack allowed before a height decrease counts as non-monotonic
MONOTONIC_TOLERANCE = 1e-9


def _average_update(row_a: np.ndarray, row_b: np.ndarray, size_a: float, size_b: float) -> np.ndarray:
    return (size_a * row_a + size_b * row_b) / (size_a + size_b)


def _complete_update(row_a: np.ndarray, row_b: np.ndarray, size_a: float, size_b: float) -> np.ndarray:
    return np.maximum(row_a, row_b)


LINKAGE_UPDATES: Dict[str, Callable[..., np.ndarray]] = {
    "average": _average_update,
    "complete": _complete_update,
}


def _validate(distances: np.ndarray) -> np.ndarray:
    D = np.asarray(distances, dtype=float)
    if D.ndim != 2 or D.shape[0] != D.shape[1]:
        raise ClusteringError(f"Distance matrix must be square, got shape {D.shape}.")
    if D.shape[0] == 0:
        raise ClusteringError("Cannot cluster an empty distance matrix.")
    if not np.all(np.isfinite(D)):
        raise ClusteringError("Distance matrix contains non-finite values.")
    if not np.array_equal(D, D.T):
        raise ClusteringError("Distance matrix is not symmetric.")
    return D


# ============================================================
#   Public: agnes
# ============================================================

def agnes(distances: np.ndarray, linkage: str = "average") -> ClusterNode:
    """
    Cluster a distance matrix into one binary tree.

    Parameters
    ----------
    distances :
        Symmetric (n, n) matrix of non-negative distances.
    linkage :
        'average' or 'complete'.

    Returns
    -------
    ClusterNode
        A Leaf when n == 1, otherwise an Internal root with n leaves
        and n - 1 internal nodes.
    """
    if linkage not in LINKAGE_UPDATES:
        raise ClusteringError(f"Unknown linkage '{linkage}'.")
    update = LINKAGE_UPDATES[linkage]

    D = _validate(distances)
    n = D.shape[0]
    nodes: List[ClusterNode] = [Leaf(i) for i in range(n)]
    if n == 1:
        return nodes[0]

    # Working matrix: inactive slots and the diagonal are +inf
    W = D.copy()
    np.fill_diagonal(W, np.inf)
    sizes = np.ones(n, dtype=float)

    last_height = 0.0
    for _ in range(n - 1):
        flat = int(np.argmin(W))
        a, b = divmod(flat, n)
        height = float(W[a, b])

        if height < last_height - MONOTONIC_TOLERANCE:
            raise ClusteringError(
                f"Non-monotonic merge: height {height:.6g} after {last_height:.6g}."
            )
        height = max(height, last_height)
        last_height = height

        nodes[a] = Internal(height=height, left=nodes[a], right=nodes[b])

        merged = update(W[a], W[b], sizes[a], sizes[b])
        sizes[a] += sizes[b]
        W[a, :] = merged
        W[:, a] = merged
        W[a, a] = np.inf
        W[b, :] = np.inf
        W[:, b] = np.inf

    logger.info("Clustered %d units with %s linkage (root height %.4f)", n, linkage, last_height)
    return nodes[0]


# ============================================================
#   Tree helpers
# ============================================================

def iter_internal(node: Union[ClusterTree, None]) -> Iterator[Internal]:
    """Internal nodes, pre-order."""
    if isinstance(node, Internal):
        yield node
        yield from iter_internal(node.left)
        yield from iter_internal(node.right)
    elif isinstance(node, Forest):
        for root in node.roots:
            yield from iter_internal(root)


def merge_heights(node: ClusterTree) -> List[float]:
    return [n.height for n in iter_internal(node)]


def count_leaves(node: ClusterTree) -> int:
    return len(node.members)
