import pandas as pd
import pytest

from text_taxonomy.core.config import PipelineOptions
from text_taxonomy.core.errors import InsufficientData
from text_taxonomy.preprocessing.segmentation import choose_display_labels, segment, split_paragraphs

WORD_TEXT = "The cat sat. The cat ran. The dog sat."


def test_split_paragraphs_on_blank_lines() -> None:
    text = "First block\nstill first.\n\nSecond block.\n   \n\n  Third block.  \n\n\n"

    assert split_paragraphs(text) == [
        "First block\nstill first.",
        "Second block.",
        "Third block.",
    ]


def test_display_label_is_most_frequent_surface_form() -> None:
    table = pd.DataFrame(
        [
            ("cats", "cat", "NOUN"),
            ("cat", "cat", "NOUN"),
            ("cat", "cat", "NOUN"),
            ("dogs", "dog", "NOUN"),
            ("runs", "run", "VERB"),
            ("running", "run", "VERB"),
        ],
        columns=["surface", "stem", "pos"],
    )

    assert choose_display_labels(table) == {"cat": "cat", "dog": "dogs", "run": "runs"}


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        segment("Some text.", "chapter")


def test_paragraph_units_keep_input_order(nltk_resources) -> None:
    result = segment("Alpha text.\n\nBeta text.\n\nGamma text.", "paragraph")

    assert [u.index for u in result.units] == [0, 1, 2]
    assert result.texts == ["Alpha text.", "Beta text.", "Gamma text."]
    assert result.contexts == []


def test_sentence_units(nltk_resources) -> None:
    result = segment("Cats are mammals. Cars need fuel. Dogs bark.", "sentence")

    assert result.texts == ["Cats are mammals.", "Cars need fuel.", "Dogs bark."]


def test_single_sentence_is_insufficient(nltk_resources) -> None:
    with pytest.raises(InsufficientData) as excinfo:
        segment("Hello world.", "sentence")

    assert excinfo.value.unit_count == 1
    assert "Not enough data to cluster" in str(excinfo.value)


def test_word_mode_noun_stems(nltk_resources) -> None:
    result = segment(WORD_TEXT, "word", PipelineOptions(noun_only=True))

    assert result.texts == ["cat", "dog"]
    assert result.display_texts == ["cat", "dog"]
    assert len(result.contexts) == 3


def test_word_mode_min_frequency(nltk_resources) -> None:
    result = segment(WORD_TEXT, "word", PipelineOptions(min_word_freq=2))

    assert result.texts == ["cat", "sat"]


def test_word_mode_custom_stopwords(nltk_resources) -> None:
    options = PipelineOptions(noun_only=True, custom_stopwords=("Dog",))

    with pytest.raises(InsufficientData):
        segment(WORD_TEXT, "word", options)


def test_word_mode_drops_clitics(stub_nlp) -> None:
    result = segment("The cat's toy broke. The dog's bone isn't here.", "word")

    assert "'s" not in result.texts
    assert "n't" not in result.texts
    assert len(result.texts) == 5
    assert result.texts[0] == "cat"
    assert "dog" in result.texts
    assert len(result.contexts) == 2
