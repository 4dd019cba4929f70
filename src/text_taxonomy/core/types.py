# core/types.py

"""
Data model shared by every pipeline stage.

    Unit          → one atomic span being clustered (paragraph, sentence, stem)
    Token         → one tagged lexical item inside a unit
    NGram         → a recurring 2–3 lemma window collapsed into one term
    Leaf/Internal → the binary cluster tree produced by the cluster engine
    TaxonomyNode  → the serializable tree handed back to the caller

Everything here is created fresh per run; nothing is cached across runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

Mode = Literal["paragraph", "sentence", "word"]
PosClass = Literal["NOUN", "VERB", "ADJ", "ADV", "OTHER"]

MODES: Tuple[str, ...] = ("paragraph", "sentence", "word")
NGRAM_SEPARATOR = "_"


# ============================================================
#   Units and tokens
# ============================================================

@dataclass(frozen=True)
class Unit:
    """
    One atomic item being clustered.

    `index` is the unit's position in input order and the only
    cross-reference later stages use. `label` is set for word units
    (the most frequent surface form of the stem).
    """

    index: int
    text: str
    label: Optional[str] = None

    @property
    def display_text(self) -> str:
        return self.label if self.label is not None else self.text


@dataclass
class Token:
    text: str
    pos: PosClass
    lemma: str
    weight: float = 1.0
    is_noun_phrase: bool = False


@dataclass(frozen=True)
class NGram:
    tokens: Tuple[str, ...]
    count: int

    @property
    def joined(self) -> str:
        return NGRAM_SEPARATOR.join(self.tokens)


# ============================================================
#   Cluster tree (tagged union)
# ============================================================

@dataclass(frozen=True)
class Leaf:
    unit_index: int

    @property
    def height(self) -> float:
        return 0.0

    @property
    def members(self) -> Tuple[int, ...]:
        return (self.unit_index,)


@dataclass(frozen=True)
class Internal:
    height: float
    left: "ClusterNode"
    right: "ClusterNode"

    @property
    def members(self) -> Tuple[int, ...]:
        """All descendant unit indices, left subtree first."""
        return self.left.members + self.right.members


@dataclass(frozen=True)
class Forest:
    """
    Non-merging pseudo-root produced by the cutoff selector when more
    than one subtree survives. It carries no merge height.
    """

    roots: Tuple["ClusterNode", ...]

    @property
    def members(self) -> Tuple[int, ...]:
        out: Tuple[int, ...] = ()
        for root in self.roots:
            out += root.members
        return out


ClusterNode = Union[Leaf, Internal]
ClusterTree = Union[Leaf, Internal, Forest]


# ============================================================
#   Export artifact
# ============================================================

@dataclass
class TaxonomyNode:
    """
    Public tree node consumed by the visualization collaborator.

    `to_dict()` produces the stable wire shape:

        { id, name, value?, children?, height?, sampleLeaves?,
          clusterKeywords?, clusterLabel?, fullText?, type }
    """

    name: str
    type: Literal["cluster", "leaf"]
    id: Optional[int] = None
    value: Optional[int] = None
    children: Optional[List["TaxonomyNode"]] = None
    height: Optional[float] = None
    sample_leaves: Optional[List[str]] = None
    cluster_keywords: Optional[List[str]] = None
    cluster_label: Optional[str] = None
    full_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.value is not None:
            out["value"] = self.value
        if self.children is not None:
            out["children"] = [child.to_dict() for child in self.children]
        if self.height is not None:
            out["height"] = self.height
        if self.sample_leaves is not None:
            out["sampleLeaves"] = list(self.sample_leaves)
        if self.cluster_keywords is not None:
            out["clusterKeywords"] = list(self.cluster_keywords)
        if self.cluster_label is not None:
            out["clusterLabel"] = self.cluster_label
        if self.full_text is not None:
            out["fullText"] = self.full_text
        out["type"] = self.type
        return out

    def iter_leaves(self):
        """Yield leaf nodes depth-first, left to right."""
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()


@dataclass
class SegmentationResult:
    """
    Output of the segmenter.

    For word mode `contexts` holds the sentence spans used as context
    documents; it is empty for the other modes.
    """

    mode: Mode
    units: List[Unit]
    contexts: List[str] = field(default_factory=list)

    @property
    def texts(self) -> List[str]:
        return [u.text for u in self.units]

    @property
    def display_texts(self) -> List[str]:
        return [u.display_text for u in self.units]
