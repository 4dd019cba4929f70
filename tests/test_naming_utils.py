import pytest

from text_taxonomy.core.naming_utils import compute_cluster_keywords, text_rank, tokenize_for_labels
from text_taxonomy.core.text_utils import build_stopwords


def test_text_rank_prefers_central_tokens() -> None:
    ranked = text_rank([["river", "bank", "water"], ["bank", "loan", "money"]], window=1)

    assert ranked[0][0] == "bank"
    assert {tok for tok, _ in ranked} == {"river", "bank", "water", "loan", "money"}


def test_text_rank_ties_keep_first_seen_order() -> None:
    ranked = text_rank([["alpha"], ["beta"], ["gamma"]])

    assert [tok for tok, _ in ranked] == ["alpha", "beta", "gamma"]
    assert all(score == pytest.approx(0.15) for _, score in ranked)


def test_text_rank_ignores_single_character_tokens() -> None:
    assert text_rank([["a", "b"]]) == []


def test_keywords_prefer_nouns_and_adjectives() -> None:
    tokens = [
        [("protect", "VERB"), ("forest", "NOUN"), ("green", "ADJ")],
        [("protect", "VERB"), ("forest", "NOUN")],
    ]

    keywords, label = compute_cluster_keywords(tokens)

    assert "protect" not in keywords
    assert keywords[0] == "forest"
    assert label == "forest / green (adj)"


def test_keywords_fall_back_to_other_classes_with_hints() -> None:
    tokens = [[("protect", "VERB"), ("quickly", "ADV")]]

    keywords, label = compute_cluster_keywords(tokens)

    assert keywords == ["protect", "quickly"]
    assert label == "protect (to protect) / quickly (adv)"


def test_no_tokens_means_no_label() -> None:
    assert compute_cluster_keywords([[], []]) == ([], None)


def test_label_tokens_drop_stopwords_and_punctuation(nltk_resources) -> None:
    result = tokenize_for_labels(["The forests are green!"], build_stopwords())

    words = [tok for tok, _ in result[0]]
    assert words == ["forests", "green"]
    assert result[0][0][1] == "NOUN"
