# analysis/export.py

"""
Export a finished taxonomy tree.

    to_json   → nested JSON, the same shape as the `success` message data
    to_frame  → flat pandas DataFrame, one row per node (pre-order)
    to_csv    → CSV of `to_frame`
"""

from __future__ import annotations

import io
import json
from typing import Iterator, Optional, Tuple

import pandas as pd

from ..core.types import TaxonomyNode

FRAME_COLUMNS = [
    "id",
    "parent_id",
    "depth",
    "type",
    "name",
    "height",
    "cluster_label",
    "full_text",
]


def to_json(tree: TaxonomyNode, indent: Optional[int] = 2) -> str:
    return json.dumps(tree.to_dict(), indent=indent, ensure_ascii=False)


def _walk(
    node: TaxonomyNode,
    parent_id: Optional[int] = None,
    depth: int = 0,
) -> Iterator[Tuple[TaxonomyNode, Optional[int], int]]:
    yield node, parent_id, depth
    for child in node.children or []:
        yield from _walk(child, node.id, depth + 1)


def to_frame(tree: TaxonomyNode) -> pd.DataFrame:
    """Flatten the tree; the root row has a missing parent_id."""
    rows = [
        {
            "id": node.id,
            "parent_id": parent_id,
            "depth": depth,
            "type": node.type,
            "name": node.name,
            "height": node.height,
            "cluster_label": node.cluster_label,
            "full_text": node.full_text,
        }
        for node, parent_id, depth in _walk(tree)
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df["parent_id"] = df["parent_id"].astype("Int64")
    return df


def to_csv(tree: TaxonomyNode, path=None) -> str:
    """
    Write the flat table as CSV to `path` (if given) and return the text.
    """
    buffer = io.StringIO()
    to_frame(tree).to_csv(buffer, index=False)
    text = buffer.getvalue()
    if path is not None:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    return text
