# core/cutoff.py

"""
Cutoff selector: cut the dendrogram into a forest of cleaner subtrees.

    1. percentile cutoff  → sorted merge heights at `percentile`
    2. gap detection      → adjacent sorted heights whose ratio is
                            ≥ `gap_ratio`; the height just below each
                            jump is a natural boundary
    3. effective cutoff   → min(percentile cutoff, smallest gap height)

Descending from the root, the first node at or below the cutoff on
every path becomes a subtree root.
"""

# Type hints
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import logging
import math

# External dependencies
import numpy as np

from .clustering import merge_heights
from .types import ClusterNode, ClusterTree, Forest, Internal

logger = logging.getLogger(__name__)


@dataclass
class CutoffResult:
    tree: ClusterTree
    cutoff: float
    percentile_cutoff: float
    gaps: List[float] = field(default_factory=list)
    stats: Dict[str, float] = field(default_factory=dict)

    @property
    def n_roots(self) -> int:
        if isinstance(self.tree, Forest):
            return len(self.tree.roots)
        return 1


# ------------------------------------------------------------
# Height statistics
# ------------------------------------------------------------

def compute_dendrogram_cutoff(heights: Sequence[float], percentile: float = 0.85):
    """
    Height at `percentile` of the sorted merge heights plus summary stats.

    Returns (cutoff, stats). With no heights the cutoff is +inf.
    """
    if len(heights) == 0:
        return math.inf, {"min": 0.0, "max": 0.0, "median": 0.0, "mean": 0.0}

    arr = np.sort(np.asarray(heights, dtype=float))
    idx = min(int(math.floor(len(arr) * percentile)), len(arr) - 1)
    stats = {
        "min": float(arr[0]),
        "max": float(arr[-1]),
        "median": float(np.median(arr)),
        "mean": float(arr.mean()),
    }
    return float(arr[idx]), stats


def find_height_gaps(heights: Sequence[float], min_gap_ratio: float = 1.5) -> List[float]:
    """
    Heights sitting just below a jump of at least `min_gap_ratio`
    between adjacent sorted heights. Zero heights never form a gap.
    """
    if len(heights) < 2:
        return []
    arr = np.sort(np.asarray(heights, dtype=float))
    gaps: List[float] = []
    for prev, curr in zip(arr[:-1], arr[1:]):
        if prev > 0 and curr / prev >= min_gap_ratio:
            gaps.append(float(prev))
    return gaps


def select_cutoff(
    heights: Sequence[float],
    percentile: float = 0.85,
    min_gap_ratio: float = 1.5,
) -> float:
    """Effective cutoff: the percentile cutoff, lowered to the smallest gap height."""
    cutoff, _ = compute_dendrogram_cutoff(heights, percentile)
    gaps = find_height_gaps(heights, min_gap_ratio)
    if gaps:
        cutoff = min(cutoff, min(gaps))
    return cutoff


# ------------------------------------------------------------
# Forest extraction
# ------------------------------------------------------------

def prune(node: ClusterNode, cutoff: float) -> List[ClusterNode]:
    """Subtree roots left after cutting every merge above `cutoff`."""
    if not isinstance(node, Internal) or node.height <= cutoff:
        return [node]
    return prune(node.left, cutoff) + prune(node.right, cutoff)


def apply_cutoff(
    root: ClusterNode,
    percentile: float = 0.85,
    min_gap_ratio: float = 1.5,
) -> CutoffResult:
    """
    Cut the tree at the effective cutoff.

    More than one surviving subtree yields a Forest pseudo-root;
    exactly one leaves the tree untouched.
    """
    heights = merge_heights(root)
    percentile_cutoff, stats = compute_dendrogram_cutoff(heights, percentile)
    gaps = find_height_gaps(heights, min_gap_ratio)
    cutoff = select_cutoff(heights, percentile, min_gap_ratio)

    roots = prune(root, cutoff)
    tree: ClusterTree = Forest(tuple(roots)) if len(roots) > 1 else root

    logger.info(
        "Cutoff %.4f (percentile %.4f, %d gaps) → %d subtree(s)",
        cutoff,
        percentile_cutoff,
        len(gaps),
        len(roots),
    )
    logger.debug("Merge height stats: %s; gaps: %s", stats, gaps)
    return CutoffResult(
        tree=tree,
        cutoff=cutoff,
        percentile_cutoff=percentile_cutoff,
        gaps=gaps,
        stats=stats,
    )
