import pytest

from text_taxonomy.core.config import PipelineOptions


def test_defaults_match_documented_values() -> None:
    opts = PipelineOptions()

    assert opts.noun_only is False
    assert opts.min_word_freq == 1
    assert opts.noun_phrase_boost == 1.3
    assert opts.glue_word_penalty == 0.5
    assert opts.cutoff_percentile == 0.85
    assert opts.linkage == "average"
    assert opts.enable_auto_cutoff is None


def test_from_dict_maps_camel_case_and_ignores_unknown_keys() -> None:
    opts = PipelineOptions.from_dict(
        {
            "nounOnly": True,
            "minWordFreq": 3,
            "customStopwords": [" Foo ", "BAR", ""],
            "enableAutoCutoff": False,
            "somethingElse": 42,
        }
    )

    assert opts.noun_only is True
    assert opts.min_word_freq == 3
    assert opts.custom_stopwords == ("foo", "bar")
    assert opts.enable_auto_cutoff is False


def test_min_word_freq_is_clamped_to_one() -> None:
    assert PipelineOptions(min_word_freq=0).min_word_freq == 1
    assert PipelineOptions.from_dict({"minWordFreq": -5}).min_word_freq == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"linkage": "single"},
        {"cutoff_percentile": 0.0},
        {"cutoff_percentile": 1.5},
        {"gap_ratio": 1.0},
        {"noun_phrase_boost": 0.0},
        {"max_ngram_length": 5},
    ],
)
def test_invalid_options_raise_value_error(kwargs) -> None:
    with pytest.raises(ValueError):
        PipelineOptions(**kwargs)


def test_auto_cutoff_defaults_per_mode() -> None:
    opts = PipelineOptions()
    assert opts.auto_cutoff_for("paragraph")
    assert opts.auto_cutoff_for("sentence")
    assert not opts.auto_cutoff_for("word")

    forced = PipelineOptions(enable_auto_cutoff=True)
    assert forced.auto_cutoff_for("word")
