# core/vectorizer.py

"""
Vectorizer: turn per-unit term sequences into a dense Units × Terms matrix.

Paragraph / sentence modes use a weighted TF-IDF:

    tf    = count(t in T) / |T|
    idf   = log10(N / (1 + docFreq(t)))
    score = tf * idf * weight(t)

with the vocabulary restricted to terms present in at most 95% of units,
and optional L2 row normalization.

Word mode bypasses TF-IDF: every stem gets a binary Units × Contexts
row marking the context sentences it occurs in.
"""

# Type hints
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import logging

# External dependencies
import numpy as np

# Sklearn dependencies
from sklearn.feature_extraction.text import CountVectorizer
from sklearn.preprocessing import normalize

from .errors import LinguisticProcessingFailure
from .text_utils import is_word, stem, tokenize_span

logger = logging.getLogger(__name__)


@dataclass
class VectorSpace:
    """
    matrix  : (n_units, n_columns) float array
    columns : column labels (vocabulary terms, or context sentences)
    """

    matrix: np.ndarray
    columns: List[str]

    @property
    def shape(self):
        return self.matrix.shape


def _identity(seq):
    return seq


# ============================================================
#   Vocabulary
# ============================================================

def build_vocabulary(
    sequences: Sequence[Sequence[str]],
    max_df_ratio: float = 0.95,
):
    """
    Fit a CountVectorizer over pre-tokenized sequences.

    Returns (counts, vocabulary) where counts is a dense
    (n_units, n_terms) int array. Terms in more than `max_df_ratio`
    of the units are dropped. If nothing survives, returns a
    zero-width matrix.
    """
    n_docs = len(sequences)
    vec = CountVectorizer(analyzer=_identity, lowercase=False, max_df=max_df_ratio)
    try:
        X = vec.fit_transform([list(s) for s in sequences])
    except ValueError:
        # Typical cases: "empty vocabulary" or
        # "After pruning, no terms remain".
        logger.info("No vocabulary terms survived document-frequency filtering")
        return np.zeros((n_docs, 0), dtype=float), []

    vocabulary = [str(t) for t in vec.get_feature_names_out()]
    return X.toarray(), vocabulary


# ============================================================
#   Weighted TF-IDF
# ============================================================

def tfidf_vectors(
    sequences: Sequence[Sequence[str]],
    weights: Optional[Mapping[str, float]] = None,
    *,
    normalize_vectors: bool = True,
    max_df_ratio: float = 0.95,
) -> VectorSpace:
    """
    Weighted TF-IDF matrix for paragraph / sentence units.

    Parameters
    ----------
    sequences :
        Per-unit term sequences (lemmas, n-grams or stems).
    weights :
        Optional term → weight map; missing terms weigh 1.0.
    normalize_vectors :
        L2-normalize each row (rows with zero norm are left as-is).
    max_df_ratio :
        Maximum document-frequency proportion kept in the vocabulary.
    """
    weights = weights or {}
    counts, vocabulary = build_vocabulary(sequences, max_df_ratio=max_df_ratio)
    n_docs = len(sequences)

    if not vocabulary:
        return VectorSpace(matrix=counts, columns=vocabulary)

    lengths = np.array([len(s) for s in sequences], dtype=float)
    safe_lengths = np.where(lengths > 0, lengths, 1.0)
    tf = counts.astype(float) / safe_lengths[:, None]

    doc_freq = (counts > 0).sum(axis=0).astype(float)
    idf = np.log10(n_docs / (1.0 + doc_freq))

    term_weights = np.array([weights.get(t, 1.0) for t in vocabulary], dtype=float)
    matrix = tf * idf[None, :] * term_weights[None, :]

    if normalize_vectors:
        matrix = normalize(matrix, norm="l2", axis=1)

    logger.info("TF-IDF matrix: %d units × %d terms", matrix.shape[0], matrix.shape[1])
    return VectorSpace(matrix=matrix, columns=vocabulary)


# ============================================================
#   Word mode: binary co-occurrence with context sentences
# ============================================================

def context_stem_sets(contexts: Sequence[str]) -> List[set]:
    """
    Stems present in each context sentence. Stopwords are kept: function
    words still carry co-occurrence signal here.
    """
    out: List[set] = []
    for ctx in contexts:
        try:
            words = tokenize_span(ctx)
        except LinguisticProcessingFailure as exc:
            logger.warning("Context sentence ignored: %s", exc)
            words = []
        out.append({stem(w) for w in words if is_word(w)})
    return out


def cooccurrence_vectors(stems: Sequence[str], contexts: Sequence[str]) -> VectorSpace:
    """Units × Contexts matrix: 1.0 where the stem occurs in the sentence."""
    stem_sets = context_stem_sets(contexts)
    matrix = np.array(
        [[1.0 if s in ctx else 0.0 for ctx in stem_sets] for s in stems],
        dtype=float,
    ).reshape(len(stems), len(stem_sets))

    logger.info("Co-occurrence matrix: %d stems × %d contexts", *matrix.shape)
    return VectorSpace(matrix=matrix, columns=list(contexts))
