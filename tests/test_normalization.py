import pytest

from text_taxonomy.core.config import PipelineOptions
from text_taxonomy.core.text_utils import build_stopwords
from text_taxonomy.core.types import NGram
from text_taxonomy.preprocessing.normalization import (
    apply_ngrams,
    detect_ngrams,
    noun_phrase_spans,
    normalize_units,
    stem_units,
    tokenize_with_lemmas,
)


def test_ngrams_are_counted_once_per_unit() -> None:
    sequences = [
        ["solar", "panel", "solar", "panel"],
        ["cheap", "solar", "panel"],
        ["wind", "turbine"],
    ]

    ngrams = detect_ngrams(sequences, min_freq=2, max_len=3)

    assert ngrams == [NGram(("solar", "panel"), 2)]


def test_ngram_frequency_threshold() -> None:
    sequences = [["wind", "turbine"], ["wind", "turbine"]]

    assert detect_ngrams(sequences, min_freq=3) == []
    assert detect_ngrams(sequences, min_freq=2)[0].joined == "wind_turbine"


def test_apply_ngrams_prefers_longest_match() -> None:
    ngrams = [
        NGram(("solar", "panel"), 3),
        NGram(("solar", "panel", "cost"), 2),
    ]

    result = apply_ngrams(["solar", "panel", "cost", "solar", "panel"], ngrams)

    assert result == ["solar_panel_cost", "solar_panel"]


def test_apply_ngrams_is_non_overlapping() -> None:
    ngrams = [NGram(("a", "b"), 2), NGram(("b", "c"), 2)]

    assert apply_ngrams(["a", "b", "c"], ngrams) == ["a_b", "c"]


def test_noun_phrase_spans() -> None:
    tagged = [
        ("green", "JJ"),
        ("forest", "NN"),
        ("fire", "NN"),
        ("burns", "VBZ"),
        ("trees", "NNS"),
    ]

    assert noun_phrase_spans(tagged) == [(0, 3)]


def test_lemmas_and_weights(nltk_resources) -> None:
    tokens = tokenize_with_lemmas(
        "The process failed and the dogs were running.",
        PipelineOptions(),
        build_stopwords(),
    )
    by_lemma = {t.lemma: t for t in tokens}

    assert "dog" in by_lemma
    assert "run" in by_lemma
    assert by_lemma["process"].weight == pytest.approx(0.5)
    assert all(len(t.text) >= 2 for t in tokens)


def test_lemmatization_can_be_disabled(nltk_resources) -> None:
    tokens = tokenize_with_lemmas(
        "Dogs chase cats.",
        PipelineOptions(enable_lemmatization=False),
        build_stopwords(),
    )

    assert [t.lemma for t in tokens] == ["dogs", "chase", "cats"]


def test_repeated_phrases_become_ngrams(nltk_resources) -> None:
    texts = ["Green forests burn quickly.", "Green forests grow slowly."]

    corpus = normalize_units(texts, PipelineOptions(), build_stopwords())

    assert corpus.sequences[0][0] == "green_forest"
    assert corpus.sequences[1][0] == "green_forest"
    assert corpus.weights["green_forest"] == pytest.approx(1.2)
    assert [g.joined for g in corpus.ngrams][0] == "green_forest"


def test_custom_stopwords_are_removed(nltk_resources) -> None:
    stopwords = build_stopwords(["forest"])

    corpus = normalize_units(["Green forests burn."], PipelineOptions(), stopwords)

    assert "forest" not in corpus.sequences[0]


def test_base_pipeline_uses_stems(nltk_resources) -> None:
    corpus = stem_units(["Cats are running."], build_stopwords())

    assert corpus.sequences == [["cat", "run"]]
    assert corpus.weights == {}


def test_noun_phrase_tokens_are_boosted(stub_nlp) -> None:
    stub_nlp.update({"green": "JJ", "runs": "VBZ"})

    tokens = tokenize_with_lemmas("Green process model runs.", PipelineOptions(), build_stopwords())
    by_lemma = {t.lemma: t for t in tokens}

    assert [t.lemma for t in tokens] == ["green", "process", "model", "runs"]
    assert by_lemma["green"].is_noun_phrase
    assert by_lemma["green"].weight == pytest.approx(1.3)
    assert by_lemma["model"].weight == pytest.approx(1.3)
    # glue word inside a phrase: 0.5 × 1.3
    assert by_lemma["process"].is_noun_phrase
    assert by_lemma["process"].weight == pytest.approx(0.65)
    assert not by_lemma["runs"].is_noun_phrase
    assert by_lemma["runs"].weight == pytest.approx(1.0)


def test_weight_map_is_mean_over_occurrences(stub_nlp) -> None:
    stub_nlp.update({"fresh": "JJ", "rises": "VBZ"})

    corpus = normalize_units(["Fresh bread.", "Bread rises."], PipelineOptions(), build_stopwords())

    assert corpus.tokens[0][1].is_noun_phrase
    assert not corpus.tokens[1][0].is_noun_phrase
    assert corpus.weights["bread"] == pytest.approx((1.3 + 1.0) / 2)
    assert corpus.weights["fresh"] == pytest.approx(1.3)
    assert corpus.weights["rises"] == pytest.approx(1.0)


def test_clitics_never_become_terms(stub_nlp) -> None:
    tokens = tokenize_with_lemmas("The dog's bone isn't here.", PipelineOptions(), build_stopwords())

    assert [t.lemma for t in tokens] == ["dog", "bone"]


def test_base_pipeline_drops_clitics(stub_nlp) -> None:
    corpus = stem_units(["The dog's bone isn't here."], build_stopwords())

    assert corpus.sequences == [["dog", "bone"]]
