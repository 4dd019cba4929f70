# worker.py

"""
Request / response boundary of the pipeline.

A caller sends one request per run:

    { text, mode, options? }

and receives zero or more `progress` messages followed by exactly one
terminal `success` or `error` message. Runs are dispatched onto a
single background thread so a long O(N²) run never blocks the caller;
there is no cancellation and no retry.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from .core.config import PipelineOptions
from .core.errors import InsufficientData, TaxonomyError, UnexpectedPipelineError
from .core.taxonomy_engine import TaxonomyEngine
from .core.types import TaxonomyNode

logger = logging.getLogger(__name__)


# ============================================================
#   Messages
# ============================================================

@dataclass
class TaxonomyRequest:
    text: str
    mode: str = "paragraph"
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaxonomyRequest":
        if "text" not in data or "mode" not in data:
            raise ValueError("A request needs both 'text' and 'mode'.")
        return cls(
            text=str(data["text"]),
            mode=str(data["mode"]),
            options=dict(data.get("options") or {}),
        )


@dataclass
class ProgressMessage:
    message: str
    type: str = field(default="progress", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message}


@dataclass
class SuccessMessage:
    data: TaxonomyNode
    type: str = field(default="success", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "data": self.data.to_dict()}


@dataclass
class ErrorMessage:
    error: str
    type: str = field(default="error", init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "error": self.error}


Message = Union[ProgressMessage, SuccessMessage, ErrorMessage]
MessageCallback = Callable[[Message], None]


# ============================================================
#   Synchronous run
# ============================================================

def run_request(
    request: Union[TaxonomyRequest, Mapping[str, Any]],
    on_message: Optional[MessageCallback] = None,
) -> List[Message]:
    """
    Execute one request to completion and return every message emitted,
    the terminal one last. `on_message` sees the same messages in order.
    """
    messages: List[Message] = []

    def emit(msg: Message) -> None:
        messages.append(msg)
        if on_message is not None:
            on_message(msg)

    try:
        if not isinstance(request, TaxonomyRequest):
            request = TaxonomyRequest.from_dict(request)
        options = PipelineOptions.from_dict(request.options)
        engine = TaxonomyEngine(options, progress=lambda s: emit(ProgressMessage(s)))
        tree = engine.run(request.text, request.mode)
    except InsufficientData as exc:
        logger.info("Run rejected: %s (units=%d)", exc, exc.unit_count)
        emit(ErrorMessage(str(exc)))
    except (TaxonomyError, ValueError) as exc:
        logger.error("Run failed: %s", exc)
        emit(ErrorMessage(str(exc)))
    except Exception as exc:
        logger.exception("Unexpected pipeline error")
        error = UnexpectedPipelineError(str(exc) or "Unknown clustering or NLP error", exc)
        emit(ErrorMessage(str(error)))
    else:
        emit(SuccessMessage(tree))

    return messages


# ============================================================
#   Asynchronous dispatch
# ============================================================

class TaxonomyWorker:
    """
    Runs requests one at a time on a dedicated background thread.

    Usage:

        with TaxonomyWorker() as worker:
            future = worker.submit({"text": text, "mode": "sentence"}, print)
            terminal = future.result()
    """

    def __init__(self):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="taxonomy")

    def submit(
        self,
        request: Union[TaxonomyRequest, Mapping[str, Any]],
        on_message: Optional[MessageCallback] = None,
    ) -> "Future[Message]":
        """Queue a run; the future resolves to its terminal message."""
        return self._executor.submit(lambda: run_request(request, on_message)[-1])

    def close(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "TaxonomyWorker":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
