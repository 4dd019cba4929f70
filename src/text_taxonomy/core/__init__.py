"""
Core processing modules for the text taxonomy builder.

This package contains:

    - taxonomy_engine   → Unified backend engine (segment → ... → tree)
    - vectorizer        → Weighted TF-IDF + word-mode context vectors
    - distance          → Cosine distance matrix
    - clustering        → AGNES (average / complete linkage)
    - cutoff            → Percentile + gap dendrogram cutoff
    - naming_utils      → TextRank cluster keywords + labels
    - materializer      → Cluster tree → exported TaxonomyNode tree
    - text_utils        → NLTK resources, tokenization, tagging, stopwords
    - config / errors / types
"""

from .errors import (
    TaxonomyError,
    InsufficientData,
    LinguisticProcessingFailure,
    MalformedClusterNode,
    ClusteringError,
    UnexpectedPipelineError,
)
from .types import (
    Unit,
    Token,
    NGram,
    Leaf,
    Internal,
    Forest,
    TaxonomyNode,
    SegmentationResult,
)
from .config import PipelineOptions
from .text_utils import ensure_nltk_resources, build_stopwords
from .vectorizer import tfidf_vectors, cooccurrence_vectors
from .distance import cosine_distance_matrix
from .clustering import agnes, merge_heights
from .cutoff import apply_cutoff, compute_dendrogram_cutoff, find_height_gaps
from .naming_utils import compute_cluster_keywords, text_rank
from .materializer import TreeMaterializer

# imported last: the engine pulls in the preprocessing package
from .taxonomy_engine import TaxonomyEngine, TaxonomyRun
