# core/taxonomy_engine.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import numpy as np

from ..preprocessing.normalization import NormalizedCorpus, normalize_units, stem_units
from ..preprocessing.segmentation import segment
from .clustering import agnes
from .config import PipelineOptions
from .cutoff import CutoffResult, apply_cutoff
from .distance import cosine_distance_matrix
from .materializer import TreeMaterializer
from .naming_utils import LabelToken, tokenize_for_labels
from .text_utils import build_stopwords, require_nltk_resources
from .types import ClusterNode, ClusterTree, SegmentationResult, TaxonomyNode
from .vectorizer import VectorSpace, cooccurrence_vectors, tfidf_vectors

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass
class TaxonomyRun:
    """Every intermediate product of one run, plus the exported tree."""

    segmentation: SegmentationResult
    vectors: VectorSpace
    distances: np.ndarray
    root: ClusterNode
    tree: ClusterTree
    taxonomy: TaxonomyNode
    corpus: Optional[NormalizedCorpus] = None
    cutoff: Optional[CutoffResult] = None


class TaxonomyEngine:
    """
    Text → taxonomy backend engine.

    Responsibilities:
        - Segment text into units (paragraph / sentence / word)
        - Normalize and vectorize units
        - Build the pairwise distance matrix and cluster it (AGNES)
        - Optionally cut the dendrogram into a forest
        - Label clusters and materialize the exported tree

    Stages run sequentially; `progress` receives a short stage name
    before each long-running stage.
    """

    def __init__(
        self,
        options: Optional[PipelineOptions] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        self.options = options or PipelineOptions()
        self._progress = progress

    def _notify(self, message: str) -> None:
        logger.info(message)
        if self._progress is not None:
            self._progress(message)

    # ============================================================
    # Public API
    # ============================================================

    def run(self, text: str, mode: str) -> TaxonomyNode:
        return self.build(text, mode).taxonomy

    def build(self, text: str, mode: str) -> TaxonomyRun:
        opts = self.options
        require_nltk_resources()

        self._notify("Tokenizing and cleaning text...")
        seg = segment(text, mode, opts)
        stopwords = build_stopwords(opts.custom_stopwords)

        corpus: Optional[NormalizedCorpus] = None
        if mode == "word":
            self._notify("Calculating similarity matrix...")
            vectors = cooccurrence_vectors(seg.texts, seg.contexts)
        else:
            if opts.enable_enhanced_pipeline:
                corpus = normalize_units(seg.texts, opts, stopwords)
            else:
                corpus = stem_units(seg.texts, stopwords)
            self._notify("Calculating similarity matrix...")
            vectors = tfidf_vectors(
                corpus.sequences,
                corpus.weights,
                normalize_vectors=opts.normalize_vectors,
                max_df_ratio=opts.max_df_ratio,
            )
        distances = cosine_distance_matrix(vectors.matrix)

        self._notify("Running hierarchical clustering...")
        root = agnes(distances, linkage=opts.linkage)

        tree: ClusterTree = root
        cutoff: Optional[CutoffResult] = None
        if opts.auto_cutoff_for(mode):
            self._notify("Selecting dendrogram cutoff...")
            cutoff = apply_cutoff(root, opts.cutoff_percentile, opts.gap_ratio)
            tree = cutoff.tree

        self._notify("Generating taxonomy tree...")
        label_tokens = self._label_tokens(seg, corpus, stopwords)
        taxonomy = TreeMaterializer(seg.display_texts, label_tokens, opts).materialize(tree)

        return TaxonomyRun(
            segmentation=seg,
            vectors=vectors,
            distances=distances,
            root=root,
            tree=tree,
            taxonomy=taxonomy,
            corpus=corpus,
            cutoff=cutoff,
        )

    # ============================================================
    # Helpers
    # ============================================================

    def _label_tokens(
        self,
        seg: SegmentationResult,
        corpus: Optional[NormalizedCorpus],
        stopwords,
    ) -> List[List[LabelToken]]:
        """
        Label tokens per unit. The enhanced normalizer already tagged every
        unit, so its tokens are reused instead of tagging again.
        """
        if corpus is not None and corpus.tokens:
            return [[(t.text.lower(), t.pos) for t in tokens] for tokens in corpus.tokens]
        return tokenize_for_labels(seg.display_texts, stopwords)
