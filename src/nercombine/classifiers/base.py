"""Classifier interface shared by every tagger in a cascade."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from nercombine.models import (
    BACKGROUND_SYMBOL,
    ClassifierOutputToken,
    Document,
    Sentence,
    Token,
)


class Classifier(ABC):
    """Tags one sentence's tokens, one output record per token.

    Implementations must not mutate the input tokens and must not raise
    for ordinary input: a token without an entity gets the background
    tag. Configuration problems (missing model, unreadable resource)
    are raised from the constructor or loader as ClassifierLoadError.

    Subclasses declare what they need from upstream stages through
    `uses_time_normalization` and `applies_numeric_classifiers`, and
    list the auxiliary token fields they may emit in `auxiliary_fields`.
    """

    name: str = "classifier"
    uses_time_normalization: bool = False
    applies_numeric_classifiers: bool = False
    auxiliary_fields: tuple[str, ...] = ()

    background_symbol: str = BACKGROUND_SYMBOL

    @abstractmethod
    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        """Tag `tokens`, optionally consulting document-level context.

        Args:
            tokens: Tokens of one sentence, in order.
            document: Enclosing document, for global information.
            sentence: The sentence `tokens` belong to.

        Returns:
            Output records aligned one-to-one with `tokens`.
        """

    def background(self, token: Token) -> ClassifierOutputToken:
        """Output record that defers on `token`."""
        return ClassifierOutputToken(
            word=token.word, ner=self.background_symbol, source=self.name
        )

    def tagged(
        self,
        token: Token,
        tag: str,
        normalized: Optional[str] = None,
        **fields,
    ) -> ClassifierOutputToken:
        """Output record assigning `tag` to `token`."""
        return ClassifierOutputToken(
            word=token.word,
            ner=tag,
            normalized_ner=normalized,
            fields=fields,
            source=self.name,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
