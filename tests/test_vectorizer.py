import math

import numpy as np
import pytest
from sklearn.preprocessing import normalize

from text_taxonomy.core.vectorizer import build_vocabulary, cooccurrence_vectors, tfidf_vectors

SEQUENCES = [
    ["cat", "mammal"],
    ["cat", "small", "mammal"],
    ["car", "fuel"],
]


def test_weighted_tfidf_scores() -> None:
    space = tfidf_vectors(SEQUENCES, {"small": 2.0}, normalize_vectors=False)
    col = {term: j for j, term in enumerate(space.columns)}

    assert set(space.columns) == {"car", "cat", "fuel", "mammal", "small"}
    # present in 2 of 3 units → idf = log10(3 / 3) = 0
    assert space.matrix[0, col["cat"]] == pytest.approx(0.0)
    assert space.matrix[1, col["small"]] == pytest.approx((1 / 3) * math.log10(3 / 2) * 2.0)
    assert space.matrix[2, col["fuel"]] == pytest.approx(0.5 * math.log10(3 / 2))


def test_terms_in_almost_every_unit_are_dropped() -> None:
    sequences = [seq + ["the"] for seq in SEQUENCES]

    space = tfidf_vectors(sequences)

    assert "the" not in space.columns


def test_rows_are_unit_length_or_zero() -> None:
    space = tfidf_vectors(SEQUENCES, normalize_vectors=True)
    norms = np.linalg.norm(space.matrix, axis=1)

    # unit 0 only has zero-idf terms
    assert norms[0] == pytest.approx(0.0)
    assert norms[1] == pytest.approx(1.0)
    assert norms[2] == pytest.approx(1.0)


def test_normalizing_twice_changes_nothing() -> None:
    once = tfidf_vectors(SEQUENCES, normalize_vectors=True).matrix
    again = normalize(once, norm="l2", axis=1)

    assert np.allclose(once, again)


def test_empty_vocabulary_gives_zero_width_matrix() -> None:
    counts, vocabulary = build_vocabulary([[], []])
    assert counts.shape == (2, 0)
    assert vocabulary == []

    space = tfidf_vectors([["same"], ["same"], ["same"]])
    assert space.shape == (3, 0)


def test_word_mode_vectors_mark_context_presence(nltk_resources) -> None:
    contexts = ["The cat sat.", "The cat ran.", "The dog sat."]

    space = cooccurrence_vectors(["cat", "dog"], contexts)

    assert space.columns == contexts
    assert space.matrix.tolist() == [[1.0, 1.0, 0.0], [0.0, 0.0, 1.0]]
