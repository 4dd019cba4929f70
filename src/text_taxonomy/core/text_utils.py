# core/text_utils.py

"""
Text utilities shared by segmentation, normalization and labeling.

This module provides:

    - Lazy NLTK resource lookup (downloaded once per process if missing)
    - Shared PorterStemmer / WordNetLemmatizer instances
    - Sentence splitting, word tokenization and POS tagging helpers
    - Penn Treebank tag → coarse POS class mapping
    - The stopword list (scikit-learn's English list + a few extras)
"""

# Type hints
from __future__ import annotations
from typing import FrozenSet, Iterable, List, Sequence, Tuple

import logging

# External dependencies
import nltk
import regex as re
from nltk.stem import PorterStemmer, WordNetLemmatizer

# Sklearn dependencies
from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from .errors import LinguisticProcessingFailure, UnexpectedPipelineError
from .types import PosClass

logger = logging.getLogger(__name__)


# ============================================================
#   NLTK resources
# ============================================================

# (lookup path, download package)
NLTK_RESOURCES: Tuple[Tuple[str, str], ...] = (
    ("tokenizers/punkt_tab", "punkt_tab"),
    ("taggers/averaged_perceptron_tagger_eng", "averaged_perceptron_tagger_eng"),
    ("corpora/wordnet", "wordnet"),
)

_download_attempted: set[str] = set()
_missing: set[str] = set()


def _has_resource(path: str) -> bool:
    try:
        nltk.data.find(path)
        return True
    except LookupError:
        return False


def ensure_nltk_resources() -> bool:
    """
    Make sure every NLTK data package the pipeline needs is available.

    A missing package triggers a single quiet download attempt per
    process. Returns True when all resources can be loaded.
    """
    ok = True
    for path, package in NLTK_RESOURCES:
        if _has_resource(path):
            _missing.discard(package)
            continue
        if package not in _download_attempted:
            _download_attempted.add(package)
            logger.info("Downloading NLTK resource %s", package)
            try:
                nltk.download(package, quiet=True, raise_on_error=True)
            except Exception as exc:
                logger.warning("NLTK download of %s failed: %s", package, exc)
        if _has_resource(path):
            _missing.discard(package)
        else:
            _missing.add(package)
            ok = False
    return ok


def require_nltk_resources() -> None:
    """Raise UnexpectedPipelineError if any NLTK resource is unavailable."""
    if ensure_nltk_resources():
        return
    missing = ", ".join(sorted(_missing))
    raise UnexpectedPipelineError(
        f"Missing NLTK data ({missing}). "
        f"Install it with `python -m nltk.downloader {' '.join(sorted(_missing))}`."
    )


# ============================================================
#   Shared models / global instances
# ============================================================

_stemmer: PorterStemmer | None = None
_lemmatizer: WordNetLemmatizer | None = None


def _get_stemmer() -> PorterStemmer:
    global _stemmer
    if _stemmer is None:
        _stemmer = PorterStemmer()
    return _stemmer


def _get_lemmatizer() -> WordNetLemmatizer:
    global _lemmatizer
    if _lemmatizer is None:
        _lemmatizer = WordNetLemmatizer()
    return _lemmatizer


# ============================================================
#   Stopwords
# ============================================================

# Low-content words the scikit-learn list does not cover
_EXTRA_STOPWORDS = {
    "s", "t", "don", "just", "also", "ever", "said", "say", "says",
    "went", "goes", "got", "gets", "let", "took", "taken", "knew", "known",
    "thought", "seem", "seems", "came", "come", "doing", "having",
}

# Clitics split off by the Treebank tokenizer ("dog's" → "dog", "'s")
_CLITICS = {"'s", "n't", "'re", "'ve", "'ll", "'d", "'m", "’s", "n’t"}

STOPWORDS: FrozenSet[str] = (
    frozenset(ENGLISH_STOP_WORDS) | frozenset(_EXTRA_STOPWORDS) | frozenset(_CLITICS)
)


def build_stopwords(custom: Iterable[str] = ()) -> FrozenSet[str]:
    """Default stopwords plus caller-supplied extras (lower-cased)."""
    extra = {w.lower().strip() for w in custom if w and w.strip()}
    return STOPWORDS | frozenset(extra)


# ============================================================
#   Tokenization helpers
# ============================================================

# Starts with a letter; letters, digits and inner hyphens only
_WORD_RE = re.compile(r"^\p{L}[\p{L}\p{M}\p{N}\-]*$")


def is_word(token: str) -> bool:
    """True for word tokens: no punctuation, numbers or clitics like 's / n't."""
    return bool(_WORD_RE.match(token))


def split_sentences(text: str) -> List[str]:
    """Sentence-boundary detection via NLTK's Punkt model."""
    sentences = nltk.sent_tokenize(str(text))
    return [s.strip() for s in sentences if s.strip()]


def word_tokenize(text: str) -> List[str]:
    return nltk.word_tokenize(str(text))


def tag_tokens(tokens: Sequence[str]) -> List[Tuple[str, str]]:
    """Penn Treebank POS tags for an already-tokenized span."""
    if not tokens:
        return []
    return nltk.pos_tag(list(tokens))


def tokenize_span(text: str) -> List[str]:
    """
    word_tokenize for one span, with failures re-raised as
    LinguisticProcessingFailure so callers can drop just this span.
    Missing NLTK data (LookupError) is not a per-span problem and
    propagates unchanged.
    """
    try:
        return word_tokenize(text)
    except LookupError:
        raise
    except Exception as exc:
        raise LinguisticProcessingFailure(text, exc) from exc


def tag_span(text: str) -> List[Tuple[str, str]]:
    """Tokenize and tag one span of text (see tokenize_span)."""
    tokens = tokenize_span(text)
    try:
        return tag_tokens(tokens)
    except LookupError:
        raise
    except Exception as exc:
        raise LinguisticProcessingFailure(text, exc) from exc


def pos_class(penn_tag: str) -> PosClass:
    """Map a Penn Treebank tag onto NOUN / VERB / ADJ / ADV / OTHER."""
    if penn_tag.startswith("NN"):
        return "NOUN"
    if penn_tag.startswith("VB"):
        return "VERB"
    if penn_tag.startswith("JJ"):
        return "ADJ"
    if penn_tag.startswith("RB"):
        return "ADV"
    return "OTHER"


def stem(word: str) -> str:
    return _get_stemmer().stem(word.lower())


def lemmatize(word: str, pos: PosClass) -> str:
    """
    Base form of a word: verbs → infinitive, nouns → singular,
    everything else → lowercase surface form.
    """
    w = word.lower()
    if pos == "VERB":
        return _get_lemmatizer().lemmatize(w, pos="v")
    if pos == "NOUN":
        return _get_lemmatizer().lemmatize(w, pos="n")
    return w
