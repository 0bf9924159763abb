"""Document- and sentence-level models."""

from datetime import date
from typing import Optional

from pydantic import Field

from .base import BaseNLPModel
from .requirement import Requirement
from .token import Token


class Sentence(BaseNLPModel):
    """
    Ordered run of tokens.

    `tokens` is None until a tokenizer has run; the NER stage treats
    that as a misconfigured pipeline.
    """

    text: Optional[str] = None
    tokens: Optional[list[Token]] = None

    @property
    def words(self) -> list[str]:
        """Token texts in order."""
        return [token.word for token in self.tokens or []]


class Document(BaseNLPModel):
    """
    Top-level annotation container.

    Holds the segmented sentences of one input text. Stages mutate the
    tokens in place; no stage allocates a new document.
    """

    text: Optional[str] = None
    doc_date: Optional[date] = Field(
        None, description="Reference date for resolving relative time expressions"
    )
    sentences: Optional[list[Sentence]] = Field(
        None, description="None until sentence segmentation has run"
    )

    @property
    def tokens(self) -> list[Token]:
        """All tokens in document order."""
        return [
            token
            for sentence in self.sentences or []
            for token in sentence.tokens or []
        ]

    def sentences_before(self, sentence: Sentence) -> list[Sentence]:
        """Sentences preceding `sentence`, matched by identity.

        Returns an empty list when `sentence` is not part of this document.
        """
        preceding = []
        for candidate in self.sentences or []:
            if candidate is sentence:
                return preceding
            preceding.append(candidate)
        return []

    def available_requirements(self) -> frozenset[Requirement]:
        """Capabilities evidenced by what is already on the document."""
        if self.sentences is None:
            return frozenset()
        if any(sentence.tokens is None for sentence in self.sentences):
            return frozenset({Requirement.SSPLIT})

        available = {Requirement.TOKENIZE, Requirement.SSPLIT}
        tokens = self.tokens
        if tokens and all(token.pos is not None for token in tokens):
            available.add(Requirement.POS)
        if tokens and all(token.lemma is not None for token in tokens):
            available.add(Requirement.LEMMA)
        if tokens and all(token.ner is not None for token in tokens):
            available.add(Requirement.NER)
        return frozenset(available)
