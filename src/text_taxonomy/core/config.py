# core/config.py

"""
Run options for one taxonomy request.

The request message carries camelCase keys (`nounOnly`, `minWordFreq`,
...). `PipelineOptions.from_dict` maps them onto snake_case fields and
fills in defaults; unknown keys are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

LINKAGES = ("average", "complete")

_CAMEL_KEYS = {
    "nounOnly": "noun_only",
    "minWordFreq": "min_word_freq",
    "customStopwords": "custom_stopwords",
    "enableEnhancedPipeline": "enable_enhanced_pipeline",
    "enableLemmatization": "enable_lemmatization",
    "enableNgrams": "enable_ngrams",
    "minNgramFreq": "min_ngram_freq",
    "maxNgramLength": "max_ngram_length",
    "nounPhraseBoost": "noun_phrase_boost",
    "glueWordPenalty": "glue_word_penalty",
    "normalizeVectors": "normalize_vectors",
    "enableAutoCutoff": "enable_auto_cutoff",
    "cutoffPercentile": "cutoff_percentile",
    "gapRatio": "gap_ratio",
    "linkage": "linkage",
}


@dataclass(frozen=True)
class PipelineOptions:
    # Word-mode filters
    noun_only: bool = False
    min_word_freq: int = 1
    custom_stopwords: Tuple[str, ...] = ()

    # Linguistic normalization (paragraph / sentence)
    enable_enhanced_pipeline: bool = True
    enable_lemmatization: bool = True
    enable_ngrams: bool = True
    min_ngram_freq: int = 2
    max_ngram_length: int = 3
    noun_phrase_boost: float = 1.3
    glue_word_penalty: float = 0.5
    ngram_weight: float = 1.2

    # Vectorization
    normalize_vectors: bool = True
    max_df_ratio: float = 0.95

    # Clustering + cutoff
    linkage: str = "average"
    enable_auto_cutoff: Optional[bool] = None  # None → on for paragraph/sentence
    cutoff_percentile: float = 0.85
    gap_ratio: float = 1.5

    # Labeling + materialization
    textrank_window: int = 3
    textrank_damping: float = 0.85
    textrank_iterations: int = 20
    max_keywords: int = 3
    max_sample_leaves: int = 5
    name_max_length: int = 40

    def __post_init__(self):
        if self.linkage not in LINKAGES:
            raise ValueError(
                f"Unknown linkage '{self.linkage}'. Expected one of {LINKAGES}."
            )
        if not 0.0 < self.cutoff_percentile <= 1.0:
            raise ValueError("cutoff_percentile must be in (0, 1].")
        if self.gap_ratio <= 1.0:
            raise ValueError("gap_ratio must be greater than 1.")
        if self.noun_phrase_boost <= 0 or self.glue_word_penalty <= 0:
            raise ValueError("Token weights must stay strictly positive.")
        if not 2 <= self.max_ngram_length <= 3:
            raise ValueError("max_ngram_length must be 2 or 3.")

        # Normalize user-supplied values that have a documented clamp
        object.__setattr__(self, "min_word_freq", max(1, int(self.min_word_freq)))
        object.__setattr__(self, "min_ngram_freq", max(1, int(self.min_ngram_freq)))
        object.__setattr__(
            self,
            "custom_stopwords",
            tuple(
                w.lower().strip()
                for w in (self.custom_stopwords or ())
                if w and w.strip()
            ),
        )

    # --------------------------------------------------------
    # Construction from a request message
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PipelineOptions":
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                logger.debug("Ignoring unknown option %r", key)
                continue
            if value is None and name != "enable_auto_cutoff":
                continue
            kwargs[name] = value

        if "custom_stopwords" in kwargs:
            kwargs["custom_stopwords"] = tuple(kwargs["custom_stopwords"])
        return cls(**kwargs)

    def auto_cutoff_for(self, mode: str) -> bool:
        """Whether the cutoff selector runs for `mode`."""
        if self.enable_auto_cutoff is None:
            return mode in ("paragraph", "sentence")
        return bool(self.enable_auto_cutoff)
