# preprocessing/__init__.py

"""
Text preprocessing for the taxonomy pipeline.

    - segmentation   → text → paragraph / sentence / word units
    - normalization  → units → weighted lemma / n-gram term sequences
"""

from .segmentation import segment, split_paragraphs
from .normalization import NormalizedCorpus, normalize_units, stem_units

__all__ = [
    "segment",
    "split_paragraphs",
    "NormalizedCorpus",
    "normalize_units",
    "stem_units",
]
