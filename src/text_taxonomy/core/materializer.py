# core/materializer.py

"""
Tree materializer: convert the (possibly cut) cluster tree into the
exported TaxonomyNode hierarchy.

Nodes are visited depth-first (pre-order) and numbered 1, 2, 3, ... by
a counter owned by each `materialize` call. Malformed nodes do not
abort the run: they become inline marker leaves.
"""

from __future__ import annotations

import itertools
import logging
from typing import Iterator, List, Optional, Sequence

from .config import PipelineOptions
from .errors import MalformedClusterNode
from .naming_utils import LabelToken, compute_cluster_keywords
from .types import ClusterTree, Forest, Internal, Leaf, TaxonomyNode

logger = logging.getLogger(__name__)


def truncate_name(text: str, max_length: int = 40) -> str:
    """Display name: texts longer than `max_length` end in '...'."""
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


class TreeMaterializer:
    """
    Builds TaxonomyNode trees for one run.

    Parameters
    ----------
    texts :
        Display text of every unit, indexed by unit index.
    label_tokens :
        Per-unit label tokens (see naming_utils.tokenize_for_labels).
        If None, internal nodes get no keywords.
    options :
        Sample / keyword / name-length limits and TextRank settings.
    """

    def __init__(
        self,
        texts: Sequence[str],
        label_tokens: Optional[Sequence[Sequence[LabelToken]]] = None,
        options: Optional[PipelineOptions] = None,
    ):
        self.texts = list(texts)
        self.label_tokens = label_tokens
        self.options = options or PipelineOptions()
        self._ids: Iterator[int] = itertools.count(1)

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def materialize(self, tree: ClusterTree) -> TaxonomyNode:
        self._ids = itertools.count(1)
        return self._convert(tree)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _valid_index(self, index) -> bool:
        return isinstance(index, int) and 0 <= index < len(self.texts)

    def _leaf_indices(self, node) -> Iterator[int]:
        """Valid unit indices under `node`, depth-first, left to right."""
        if isinstance(node, Forest):
            for root in node.roots:
                yield from self._leaf_indices(root)
        elif isinstance(node, Internal):
            if node.left is not None:
                yield from self._leaf_indices(node.left)
            if node.right is not None:
                yield from self._leaf_indices(node.right)
        elif isinstance(node, Leaf) and self._valid_index(node.unit_index):
            yield node.unit_index

    def _sample_leaves(self, node) -> List[str]:
        limit = self.options.max_sample_leaves
        indices = itertools.islice(self._leaf_indices(node), limit)
        return [self.texts[i] for i in indices]

    def _keywords(self, node):
        if self.label_tokens is None:
            return [], None
        token_lists = [self.label_tokens[i] for i in self._leaf_indices(node)]
        return compute_cluster_keywords(
            token_lists,
            max_keywords=self.options.max_keywords,
            window=self.options.textrank_window,
            damping=self.options.textrank_damping,
            iterations=self.options.textrank_iterations,
        )

    def _marker(self, error: MalformedClusterNode) -> TaxonomyNode:
        logger.warning("Malformed cluster node: %s", error)
        return TaxonomyNode(
            id=next(self._ids),
            name=error.label,
            full_text=error.detail,
            value=1,
            type="leaf",
        )

    # --------------------------------------------------------
    # Conversion
    # --------------------------------------------------------

    def _convert(self, node) -> TaxonomyNode:
        if isinstance(node, Forest):
            return self._convert_forest(node)

        if isinstance(node, Internal) and node.left is not None and node.right is not None:
            return self._convert_internal(node)

        if isinstance(node, Leaf):
            if not self._valid_index(node.unit_index):
                return self._marker(
                    MalformedClusterNode(
                        f"[Error: Index {node.unit_index}]",
                        "Invalid index from clustering. Data may be too sparse or uniform.",
                    )
                )
            return self._convert_leaf(node)

        return self._marker(
            MalformedClusterNode(
                "[Malformed Node]",
                "Node structure missing index and children.",
            )
        )

    def _convert_leaf(self, node: Leaf) -> TaxonomyNode:
        full_text = self.texts[node.unit_index]
        return TaxonomyNode(
            id=next(self._ids),
            name=truncate_name(full_text, self.options.name_max_length),
            full_text=full_text,
            value=1,
            sample_leaves=[full_text],
            type="leaf",
        )

    def _convert_internal(self, node: Internal) -> TaxonomyNode:
        node_id = next(self._ids)
        keywords, label = self._keywords(node)
        out = TaxonomyNode(
            id=node_id,
            name=f"Cluster (H:{node.height:.2f})",
            height=float(node.height),
            sample_leaves=self._sample_leaves(node),
            cluster_keywords=keywords,
            cluster_label=label,
            type="cluster",
        )
        out.children = [self._convert(node.left), self._convert(node.right)]
        return out

    def _convert_forest(self, node: Forest) -> TaxonomyNode:
        k = len(node.roots)
        out = TaxonomyNode(
            id=next(self._ids),
            name=f"Forest ({k} clusters)",
            sample_leaves=self._sample_leaves(node),
            cluster_label=f"{k} top-level clusters",
            type="cluster",
        )
        out.children = [self._convert(root) for root in node.roots]
        return out
