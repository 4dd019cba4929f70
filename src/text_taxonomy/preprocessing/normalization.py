# preprocessing/normalization.py

"""
Linguistic normalizer for paragraph and sentence units.

For every unit we:

    1. tokenize + POS-tag (NLTK), drop stopwords / punctuation / numbers
    2. lemmatize (verbs → infinitive, nouns → singular)
    3. penalize over-general "glue" nouns
    4. chunk `(adjective)* noun+` noun phrases and boost their tokens

Across all units we then detect recurring 2–3 lemma windows (n-grams)
and collapse them into single terms inside each unit's lemma sequence.

The base pipeline (`stem_units`) skips all of this and produces plain
stopword-free Porter stems with uniform weights.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Sequence, Set, Tuple

import nltk

from ..core.config import PipelineOptions
from ..core.errors import LinguisticProcessingFailure
from ..core.text_utils import is_word, lemmatize, pos_class, stem, tag_span, tokenize_span
from ..core.types import NGram, Token

logger = logging.getLogger(__name__)


# High-frequency nouns that otherwise connect unrelated units
GLUE_WORDS = frozenset({
    "process", "level", "relationship", "structure", "element",
    "system", "type", "form", "part", "way", "thing", "aspect",
    "area", "point", "case", "example", "result", "effect",
    "use", "work", "make", "take", "give", "get", "set",
    "number", "amount", "kind", "sort", "group", "series",
})

NOUN_PHRASE_GRAMMAR = "NP: {<JJ.*>*<NN.*>+}"
NOUN_PHRASE_MIN_TOKENS = 2
NOUN_PHRASE_MAX_TOKENS = 4

_chunker: nltk.RegexpParser | None = None


def _get_chunker() -> nltk.RegexpParser:
    global _chunker
    if _chunker is None:
        _chunker = nltk.RegexpParser(NOUN_PHRASE_GRAMMAR)
    return _chunker


@dataclass
class NormalizedCorpus:
    """
    Normalizer output.

    sequences : per-unit term sequence (lemmas + collapsed n-grams)
    weights   : global term → weight map (terms absent here weigh 1.0)
    ngrams    : n-grams that survived the frequency filter
    tokens    : per-unit Token lists (empty for units that failed)
    """

    sequences: List[List[str]]
    weights: Dict[str, float] = field(default_factory=dict)
    ngrams: List[NGram] = field(default_factory=list)
    tokens: List[List[Token]] = field(default_factory=list)


# ------------------------------------------------------------
# Noun phrases
# ------------------------------------------------------------

def noun_phrase_spans(tagged: Sequence[Tuple[str, str]]) -> List[Tuple[int, int]]:
    """
    (start, end) positions of every `(adjective)* noun+` chunk of
    2–4 tokens in a tagged sequence. `end` is exclusive.
    """
    if not tagged:
        return []
    tree = _get_chunker().parse(list(tagged))

    spans: List[Tuple[int, int]] = []
    pos = 0
    for child in tree:
        if isinstance(child, nltk.Tree):
            size = len(child.leaves())
            if NOUN_PHRASE_MIN_TOKENS <= size <= NOUN_PHRASE_MAX_TOKENS:
                spans.append((pos, pos + size))
            pos += size
        else:
            pos += 1
    return spans


# ------------------------------------------------------------
# Per-unit tokenization
# ------------------------------------------------------------

def tokenize_with_lemmas(
    text: str,
    options: PipelineOptions,
    stopwords: FrozenSet[str],
) -> List[Token]:
    """
    Tagged, lemmatized and weighted tokens for one unit.

    Raises LinguisticProcessingFailure when tokenization, tagging or
    chunking fails for this span.
    """
    tagged = tag_span(text)
    try:
        spans = noun_phrase_spans(tagged)
    except Exception as exc:
        raise LinguisticProcessingFailure(text, exc) from exc

    in_phrase: Set[int] = set()
    for start, end in spans:
        in_phrase.update(range(start, end))

    tokens: List[Token] = []
    for i, (word, tag) in enumerate(tagged):
        surface = word.strip()
        lowered = surface.lower()
        if len(surface) < 2 or not is_word(surface) or lowered in stopwords:
            continue

        pos = pos_class(tag)
        lemma = lemmatize(surface, pos) if options.enable_lemmatization else lowered
        if lemma in stopwords:
            continue

        weight = 1.0
        if lemma in GLUE_WORDS:
            weight *= options.glue_word_penalty

        is_np = i in in_phrase
        if is_np:
            weight *= options.noun_phrase_boost

        tokens.append(
            Token(text=surface, pos=pos, lemma=lemma, weight=weight, is_noun_phrase=is_np)
        )
    return tokens


# ------------------------------------------------------------
# N-grams
# ------------------------------------------------------------

def detect_ngrams(
    sequences: Sequence[Sequence[str]],
    min_freq: int = 2,
    max_len: int = 3,
) -> List[NGram]:
    """
    Count every 2..max_len lemma window once per unit and keep those
    that reach `min_freq` units. Sorted by count descending; equal
    counts keep first-seen order.
    """
    counts: Dict[Tuple[str, ...], int] = {}
    for seq in sequences:
        seen: Set[Tuple[str, ...]] = set()
        for n in range(2, max_len + 1):
            for i in range(len(seq) - n + 1):
                window = tuple(seq[i:i + n])
                if window in seen:
                    continue
                seen.add(window)
                counts[window] = counts.get(window, 0) + 1

    ngrams = [NGram(tokens=k, count=c) for k, c in counts.items() if c >= min_freq]
    ngrams.sort(key=lambda g: g.count, reverse=True)
    return ngrams


def apply_ngrams(lemmas: Sequence[str], ngrams: Sequence[NGram]) -> List[str]:
    """
    Replace n-gram spans in a lemma sequence with their joined form.

    Greedy, left to right, longest match first, non-overlapping.
    """
    by_length: Dict[int, Dict[Tuple[str, ...], str]] = defaultdict(dict)
    for g in ngrams:
        by_length[len(g.tokens)][g.tokens] = g.joined
    lengths = sorted(by_length, reverse=True)

    result: List[str] = []
    i = 0
    while i < len(lemmas):
        for n in lengths:
            if i + n > len(lemmas):
                continue
            joined = by_length[n].get(tuple(lemmas[i:i + n]))
            if joined is not None:
                result.append(joined)
                i += n
                break
        else:
            result.append(lemmas[i])
            i += 1
    return result


# ------------------------------------------------------------
# Public: corpus-level normalization
# ------------------------------------------------------------

def normalize_units(
    texts: Sequence[str],
    options: PipelineOptions,
    stopwords: FrozenSet[str],
) -> NormalizedCorpus:
    """Enhanced pipeline: lemmas, glue-word penalty, noun phrases, n-grams."""
    all_tokens: List[List[Token]] = []
    lemma_sequences: List[List[str]] = []
    weight_sums: Dict[str, float] = {}
    weight_counts: Dict[str, int] = {}

    for text in texts:
        try:
            tokens = tokenize_with_lemmas(text, options, stopwords)
        except LinguisticProcessingFailure as exc:
            logger.warning("Unit contributes no tokens: %s", exc)
            tokens = []

        all_tokens.append(tokens)
        lemma_sequences.append([t.lemma for t in tokens])

        for t in tokens:
            weight_sums[t.lemma] = weight_sums.get(t.lemma, 0.0) + t.weight
            weight_counts[t.lemma] = weight_counts.get(t.lemma, 0) + 1

    weights = {k: weight_sums[k] / weight_counts[k] for k in weight_sums}

    ngrams: List[NGram] = []
    sequences = lemma_sequences
    if options.enable_ngrams:
        ngrams = detect_ngrams(lemma_sequences, options.min_ngram_freq, options.max_ngram_length)
        sequences = [apply_ngrams(seq, ngrams) for seq in lemma_sequences]
        for g in ngrams:
            weights[g.joined] = options.ngram_weight
        logger.debug("Detected %d n-grams: %s", len(ngrams), [g.joined for g in ngrams[:10]])

    n_phrase_tokens = sum(t.is_noun_phrase for toks in all_tokens for t in toks)
    logger.info(
        "Normalized %d units: %d distinct lemmas, %d noun-phrase tokens, %d n-grams",
        len(texts),
        len(weight_counts),
        n_phrase_tokens,
        len(ngrams),
    )
    return NormalizedCorpus(sequences=sequences, weights=weights, ngrams=ngrams, tokens=all_tokens)


def stem_units(texts: Sequence[str], stopwords: FrozenSet[str]) -> NormalizedCorpus:
    """Base pipeline: stopword-free Porter stems, uniform weights."""
    sequences: List[List[str]] = []
    for text in texts:
        try:
            words = tokenize_span(text)
        except LinguisticProcessingFailure as exc:
            logger.warning("Unit contributes no tokens: %s", exc)
            words = []
        sequences.append([
            stem(word)
            for word in words
            if is_word(word) and word.lower() not in stopwords
        ])
    return NormalizedCorpus(sequences=sequences)
