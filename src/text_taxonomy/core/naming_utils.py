# core/naming_utils.py

"""
Naming utilities for clusters.

Every internal node of the cluster tree gets up to three representative
keywords and a short human-readable label. Keywords come from a
TextRank-style centrality ranking over a token co-occurrence graph
built from the node's leaf texts.

The primary public functions are:

    tokenize_for_labels(texts, stopwords)
        -> per-unit [(token, pos_class), ...], computed once per run

    compute_cluster_keywords(token_lists, ...)
        -> (keywords: List[str], label: Optional[str])
"""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import logging

import numpy as np

from .errors import LinguisticProcessingFailure
from .text_utils import is_word, pos_class, tag_span
from .types import PosClass

logger = logging.getLogger(__name__)

LabelToken = Tuple[str, PosClass]


# ------------------------------------------------------------
# Tokenization for labeling
# ------------------------------------------------------------

def tokenize_for_labels(
    texts: Sequence[str],
    stopwords: FrozenSet[str],
) -> List[List[LabelToken]]:
    """
    Lower-cased, non-stopword word tokens (length > 1) with their POS
    class, one list per unit. A unit that fails to tag gets [].
    """
    out: List[List[LabelToken]] = []
    for text in texts:
        try:
            tagged = tag_span(text)
        except LinguisticProcessingFailure as exc:
            logger.warning("No label tokens for unit: %s", exc)
            out.append([])
            continue
        out.append([
            (word.lower(), pos_class(tag))
            for word, tag in tagged
            if len(word) > 1 and is_word(word) and word.lower() not in stopwords
        ])
    return out


# ------------------------------------------------------------
# TextRank
# ------------------------------------------------------------

def text_rank(
    sequences: Sequence[Sequence[str]],
    window: int = 3,
    damping: float = 0.85,
    iterations: int = 20,
) -> List[Tuple[str, float]]:
    """
    Rank tokens by centrality in their co-occurrence graph.

    Two distinct tokens share an (undirected, unweighted) edge when they
    appear within `window` positions of each other in some sequence.
    Scores start at 1 and are iterated as

        score[i] = (1 - d) + d * Σ_{j ∈ adj(i)} score[j] / deg(j)

    Returns (token, score) pairs, best first; equal scores keep
    first-seen order.
    """
    vocab: Dict[str, int] = {}
    for seq in sequences:
        for tok in seq:
            if tok and len(tok) > 1 and tok not in vocab:
                vocab[tok] = len(vocab)
    n = len(vocab)
    if n == 0:
        return []

    edges = set()
    for seq in sequences:
        for i, tok in enumerate(seq):
            a = vocab.get(tok)
            if a is None:
                continue
            for other in seq[i + 1:i + 1 + window]:
                b = vocab.get(other)
                if b is None or a == b:
                    continue
                edges.add((min(a, b), max(a, b)))

    scores = np.ones(n, dtype=float)
    if edges:
        pairs = np.array(sorted(edges), dtype=int)
        src = np.concatenate([pairs[:, 0], pairs[:, 1]])
        dst = np.concatenate([pairs[:, 1], pairs[:, 0]])
        degree = np.bincount(src, minlength=n).astype(float)

        for _ in range(iterations):
            incoming = np.bincount(src, weights=scores[dst] / degree[dst], minlength=n)
            scores = (1.0 - damping) + damping * incoming
    elif iterations > 0:
        # isolated tokens only receive the restart mass
        scores[:] = 1.0 - damping

    tokens = list(vocab)
    order = np.argsort(-scores, kind="stable")
    return [(tokens[i], float(scores[i])) for i in order]


# ------------------------------------------------------------
# Keywords + label
# ------------------------------------------------------------

def _format_keyword(token: str, pos: Optional[PosClass]) -> str:
    if pos is None or pos == "NOUN":
        return token
    if pos == "VERB":
        return f"{token} (to {token})"
    if pos == "ADJ":
        return f"{token} (adj)"
    return f"{token} ({pos.lower()})"


def compute_cluster_keywords(
    token_lists: Sequence[Sequence[LabelToken]],
    *,
    max_keywords: int = 3,
    window: int = 3,
    damping: float = 0.85,
    iterations: int = 20,
) -> Tuple[List[str], Optional[str]]:
    """
    Representative keywords and a display label for one cluster.

    Parameters
    ----------
    token_lists :
        Label tokens of every leaf under the cluster.

    Returns
    -------
    keywords :
        Up to `max_keywords` tokens, nouns/adjectives preferred.
    label :
        Keywords joined with " / ", non-nouns carrying a POS hint
        ("protect (to protect)", "green (adj)"). None if no keywords.
    """
    # POS of each token's first occurrence across the leaves
    first_pos: Dict[str, PosClass] = {}
    for tokens in token_lists:
        for tok, pos in tokens:
            first_pos.setdefault(tok, pos)

    ranked = text_rank(
        [[tok for tok, _ in tokens] for tokens in token_lists],
        window=window,
        damping=damping,
        iterations=iterations,
    )
    candidates = [tok for tok, _ in ranked]
    preferred = [c for c in candidates if first_pos.get(c) in ("NOUN", "ADJ")]

    keywords = (preferred or candidates)[:max_keywords]
    if not keywords:
        return [], None

    label = " / ".join(_format_keyword(k, first_pos.get(k)) for k in keywords)
    return keywords, label
