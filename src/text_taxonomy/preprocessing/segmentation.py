# preprocessing/segmentation.py

"""
Segmenter: split raw text into the units that get clustered.

    paragraph → blank-line separated blocks
    sentence  → NLTK Punkt sentences
    word      → unique word stems (with display labels) plus the
                sentence spans used as context documents
"""

from __future__ import annotations

import logging
from typing import List, Optional

import pandas as pd
import regex as re

from ..core.config import PipelineOptions
from ..core.errors import InsufficientData, LinguisticProcessingFailure
from ..core.text_utils import (
    build_stopwords,
    is_word,
    pos_class,
    split_sentences,
    stem,
    tag_span,
)
from ..core.types import MODES, SegmentationResult, Unit

logger = logging.getLogger(__name__)

_BLANK_LINE_RE = re.compile(r"\n[ \t\r\f\v]*\n\s*")


# ------------------------------------------------------------
# Paragraph / sentence
# ------------------------------------------------------------

def split_paragraphs(text: str) -> List[str]:
    """Blank-line separated blocks, stripped, empties dropped."""
    blocks = _BLANK_LINE_RE.split(str(text))
    return [b.strip() for b in blocks if b.strip()]


# ------------------------------------------------------------
# Word mode
# ------------------------------------------------------------

def build_word_table(sentences: List[str], stopwords) -> pd.DataFrame:
    """
    One row per surviving word token: surface (lower-cased), stem, pos.

    Punctuation, numbers and stopwords are dropped. Sentences the
    tagger chokes on are skipped with a warning.
    """
    rows = []
    for sentence in sentences:
        try:
            tagged = tag_span(sentence)
        except LinguisticProcessingFailure as exc:
            logger.warning("Skipping sentence in word mode: %s", exc)
            continue
        for token, tag in tagged:
            surface = token.lower()
            if not is_word(surface) or surface in stopwords:
                continue
            rows.append((surface, stem(surface), pos_class(tag)))

    return pd.DataFrame(rows, columns=["surface", "stem", "pos"])


def choose_display_labels(table: pd.DataFrame) -> dict:
    """
    Most frequent surface form for every stem.

    Groups keep first-seen order, and idxmax returns the first maximum,
    so ties go to the surface form seen first.
    """
    if table.empty:
        return {}
    counts = table.groupby(["stem", "surface"], sort=False).size()
    best = counts.groupby(level="stem", sort=False).idxmax()
    return {stem_: surface for stem_, (_, surface) in best.items()}


def segment_words(text: str, options: PipelineOptions) -> SegmentationResult:
    sentences = split_sentences(text)
    stopwords = build_stopwords(options.custom_stopwords)

    table = build_word_table(sentences, stopwords)
    labels = choose_display_labels(table)

    kept = table
    if options.noun_only:
        kept = kept[kept["pos"] == "NOUN"]

    stem_counts = kept.groupby("stem", sort=False).size()
    stem_counts = stem_counts[stem_counts >= options.min_word_freq]

    units = [
        Unit(index=i, text=str(s), label=labels.get(s, str(s)))
        for i, s in enumerate(stem_counts.index)
    ]
    logger.info(
        "Word mode: %d tokens, %d unique stems kept, %d context sentences",
        len(table),
        len(units),
        len(sentences),
    )
    return SegmentationResult(mode="word", units=units, contexts=sentences)


# ------------------------------------------------------------
# Public: segment
# ------------------------------------------------------------

def segment(
    text: str,
    mode: str,
    options: Optional[PipelineOptions] = None,
) -> SegmentationResult:
    """
    Split `text` into units according to `mode`.

    Raises
    ------
    ValueError
        Unknown mode.
    InsufficientData
        Fewer than two units survived.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown mode '{mode}'. Expected one of {MODES}.")
    options = options or PipelineOptions()

    if mode == "word":
        result = segment_words(text, options)
    else:
        pieces = split_paragraphs(text) if mode == "paragraph" else split_sentences(text)
        units = [Unit(index=i, text=p) for i, p in enumerate(pieces)]
        result = SegmentationResult(mode=mode, units=units)
        logger.info("%s mode: %d units", mode.capitalize(), len(units))

    if len(result.units) < 2:
        raise InsufficientData(len(result.units))
    return result
