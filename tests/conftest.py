import os

import pytest
import regex as re
from nltk.tokenize import TreebankWordTokenizer

from text_taxonomy.core.text_utils import ensure_nltk_resources

# Set in CI so a missing NLTK download fails loudly instead of skipping
REQUIRE_NLTK_ENV = "TEXT_TAXONOMY_REQUIRE_NLTK"

_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")
_treebank = TreebankWordTokenizer()


@pytest.fixture(scope="session")
def nltk_resources() -> None:
    if ensure_nltk_resources():
        return
    message = "NLTK data (punkt_tab, tagger, wordnet) is not available"
    if os.environ.get(REQUIRE_NLTK_ENV):
        pytest.fail(message)
    pytest.skip(message)


def _stub_tokenize(text: str) -> list[str]:
    return _treebank.tokenize(text)


def _stub_tag(text: str, tags: dict[str, str]) -> list[tuple[str, str]]:
    out = []
    for token in _stub_tokenize(text):
        if token.lower() in tags:
            out.append((token, tags[token.lower()]))
        elif re.match(r"^\p{L}", token):
            out.append((token, "NN"))
        else:
            out.append((token, "."))
    return out


@pytest.fixture
def stub_nlp(monkeypatch):
    """
    Replace the data-backed NLTK calls with offline stand-ins: regex
    sentence splitting, the rule-based Treebank tokenizer, every word
    tagged NN unless listed in the returned `tags` dict, and lower-case
    lemmas. Returns the `tags` dict so tests can assign other tags.
    """
    tags: dict[str, str] = {}

    def split_sentences(text):
        return [s.strip() for s in _SENTENCE_END_RE.split(str(text)) if s.strip()]

    def tag_span(text):
        return _stub_tag(text, tags)

    def lemmatize(word, pos):
        return word.lower()

    monkeypatch.setattr("text_taxonomy.core.taxonomy_engine.require_nltk_resources", lambda: None)
    monkeypatch.setattr("text_taxonomy.preprocessing.segmentation.split_sentences", split_sentences)
    monkeypatch.setattr("text_taxonomy.preprocessing.segmentation.tag_span", tag_span)
    monkeypatch.setattr("text_taxonomy.preprocessing.normalization.tag_span", tag_span)
    monkeypatch.setattr("text_taxonomy.preprocessing.normalization.tokenize_span", _stub_tokenize)
    monkeypatch.setattr("text_taxonomy.preprocessing.normalization.lemmatize", lemmatize)
    monkeypatch.setattr("text_taxonomy.core.naming_utils.tag_span", tag_span)
    monkeypatch.setattr("text_taxonomy.core.vectorizer.tokenize_span", _stub_tokenize)
    return tags
