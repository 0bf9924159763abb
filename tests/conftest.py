"""Pytest configuration and fixtures."""

from typing import Optional, Sequence

import pytest

from nercombine.classifiers import Classifier
from nercombine.models import ClassifierOutputToken, Document, Sentence, Token


def make_sentence(words: Sequence[str], pos: Optional[Sequence[str]] = None) -> Sentence:
    """Build a tokenized sentence, optionally POS-tagged and lemmatized."""
    tokens = []
    for i, word in enumerate(words):
        if pos is None:
            tokens.append(Token(word=word))
        else:
            tokens.append(Token(word=word, pos=pos[i], lemma=word.lower()))
    return Sentence(text=" ".join(words), tokens=tokens)


def make_document(*sentences: Sequence[str], **kwargs) -> Document:
    """Build a document from word lists, one per sentence."""
    return Document(sentences=[make_sentence(words) for words in sentences], **kwargs)


class StubClassifier(Classifier):
    """Classifier returning canned output keyed by word.

    `tags` maps word to a tag or to a `(tag, normalized, fields)` triple.
    Records every call for assertions.
    """

    def __init__(
        self,
        tags: dict,
        name: str = "stub",
        uses_time_normalization: bool = False,
        applies_numeric_classifiers: bool = False,
        auxiliary_fields: tuple = (),
    ):
        self.tags = tags
        self.name = name
        self.uses_time_normalization = uses_time_normalization
        self.applies_numeric_classifiers = applies_numeric_classifiers
        self.auxiliary_fields = auxiliary_fields
        self.calls = []

    def classify(self, tokens, document=None, sentence=None):
        self.calls.append((list(tokens), document, sentence))
        output = []
        for token in tokens:
            entry = self.tags.get(token.word)
            if entry is None:
                output.append(self.background(token))
            elif isinstance(entry, tuple):
                tag, normalized, fields = entry
                output.append(self.tagged(token, tag, normalized, **fields))
            else:
                output.append(self.tagged(token, entry))
        return output


class RecallingClassifier(Classifier):
    """Tags a word PERSON if it was tagged PERSON earlier in the document."""

    name = "recall"

    def classify(self, tokens, document=None, sentence=None):
        seen = set()
        if document is not None and sentence is not None:
            for previous in document.sentences_before(sentence):
                seen.update(t.word for t in previous.tokens if t.ner == "PERSON")
        return [
            self.tagged(t, "PERSON") if t.word in seen else self.background(t)
            for t in tokens
        ]


@pytest.fixture
def paris_sentence():
    """Tokens of 'John lives in Paris .'."""
    return make_sentence(["John", "lives", "in", "Paris", "."])


@pytest.fixture
def name_classifier():
    """Classifier recognizing John and Paris."""
    return StubClassifier({"John": "PERSON", "Paris": "LOCATION"}, name="names")


@pytest.fixture
def mapping_file(tmp_path):
    """Rule mapping file for the regex classifier."""
    path = tmp_path / "rules.tab"
    path.write_text(
        "# city rules\n"
        "New York City\tLOCATION\tNYC\n"
        "New York\tLOCATION\n"
        "\n"
        "Acme Corp\\.?\tORGANIZATION\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def stub_output():
    """Factory for ClassifierOutputToken."""

    def _make(word, ner="O", normalized=None, **fields):
        return ClassifierOutputToken(word=word, ner=ner, normalized_ner=normalized, fields=fields)

    return _make
