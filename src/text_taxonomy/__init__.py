"""
text_taxonomy: build a hierarchical taxonomy from unstructured text.

This package contains:

    - core           → Segment-independent pipeline stages + TaxonomyEngine
    - preprocessing  → Segmentation and linguistic normalization
    - analysis       → Export of finished trees (JSON / DataFrame / CSV)
    - worker         → Request / message boundary, background worker
    - cli            → `text-taxonomy` command
"""

from .core import (
    PipelineOptions,
    TaxonomyEngine,
    TaxonomyError,
    InsufficientData,
    UnexpectedPipelineError,
    TaxonomyNode,
)
from .worker import (
    TaxonomyRequest,
    TaxonomyWorker,
    run_request,
)

__version__ = "0.1.0"
