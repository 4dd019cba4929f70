# core/errors.py

"""
Typed failures raised by the taxonomy pipeline.

Two of them are terminal (InsufficientData, UnexpectedPipelineError) and
reach the caller as an `error` message. The other two are recovered where
they happen:

    - LinguisticProcessingFailure → the unit contributes no tokens
    - MalformedClusterNode        → an inline marker node in the tree
"""

from __future__ import annotations


class TaxonomyError(Exception):
    """Base class for every failure the pipeline raises on purpose."""


class InsufficientData(TaxonomyError):
    """Fewer than two units survived segmentation and filtering."""

    def __init__(self, unit_count: int):
        self.unit_count = unit_count
        super().__init__(
            "Not enough data to cluster (need at least 2 segments/words). "
            "Try adding more text."
        )


class LinguisticProcessingFailure(TaxonomyError):
    """Tokenization or tagging failed for a single span of text."""

    def __init__(self, text: str, cause: Exception | None = None):
        self.text = text
        self.cause = cause
        preview = text if len(text) <= 60 else text[:57] + "..."
        super().__init__(f"Could not process text span {preview!r}: {cause}")


class MalformedClusterNode(TaxonomyError):
    """A cluster node has neither a usable unit index nor two children."""

    def __init__(self, label: str, detail: str):
        self.label = label
        self.detail = detail
        super().__init__(f"{label}: {detail}")


class ClusteringError(TaxonomyError):
    """Invalid input to, or violated invariant of, the cluster engine."""


class UnexpectedPipelineError(TaxonomyError):
    """Any other failure, surfaced to the caller with its message unchanged."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)
