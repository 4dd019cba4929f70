import json

import pandas as pd

from text_taxonomy.analysis.export import FRAME_COLUMNS, to_csv, to_frame, to_json
from text_taxonomy.core.materializer import TreeMaterializer
from text_taxonomy.core.types import Internal, Leaf


def _taxonomy():
    tree = Internal(0.5, Internal(0.2, Leaf(0), Leaf(1)), Leaf(2))
    return TreeMaterializer(["first text", "second text", "third text"]).materialize(tree)


def test_to_json_matches_wire_shape() -> None:
    tree = _taxonomy()

    assert json.loads(to_json(tree)) == tree.to_dict()


def test_to_frame_has_one_row_per_node() -> None:
    df = to_frame(_taxonomy())

    assert list(df.columns) == FRAME_COLUMNS
    assert df["id"].tolist() == [1, 2, 3, 4, 5]
    assert df["depth"].tolist() == [0, 1, 2, 2, 1]
    assert pd.isna(df.loc[0, "parent_id"])
    assert df["parent_id"].tolist()[1:] == [1, 2, 2, 1]
    assert df.loc[df["type"] == "leaf", "full_text"].tolist() == [
        "first text",
        "second text",
        "third text",
    ]


def test_to_csv_writes_file(tmp_path) -> None:
    path = tmp_path / "tree.csv"

    text = to_csv(_taxonomy(), path)

    assert path.read_text(encoding="utf-8") == text
    assert text.splitlines()[0] == ",".join(FRAME_COLUMNS)
