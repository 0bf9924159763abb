"""Token-level models."""

from typing import Any, Optional

from pydantic import Field

from .base import BACKGROUND_SYMBOL, BaseNLPModel


class Token(BaseNLPModel):
    """
    A single token inside a sentence.

    Upstream stages fill `word`, `pos` and `lemma`; the NER stage owns
    `ner` and `normalized_ner`. Classifier-specific values (numeric type,
    timex value, ...) live in the `extra` extension map.
    """

    word: str = Field(..., description="Raw token text")
    pos: Optional[str] = Field(None, description="Part-of-speech tag")
    lemma: Optional[str] = None

    # Written by the NER stage
    ner: Optional[str] = Field(None, description="Named-entity tag")
    normalized_ner: Optional[str] = Field(
        None, description="Canonicalized entity value, e.g. '2024-05-01' or '1000.0'"
    )

    # Open-ended auxiliary fields keyed by name
    extra: dict[str, Any] = Field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Get an auxiliary field."""
        return self.extra.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set an auxiliary field."""
        self.extra[key] = value

    def to_shorter_string(self, *fields: str) -> str:
        """Render selected fields, e.g. `[word=Paris ner=LOCATION]`.

        Fields that are unset are skipped. With no arguments, word, ner
        and normalized_ner are shown.
        """
        fields = fields or ("word", "ner", "normalized_ner")
        parts = []
        for name in fields:
            value = getattr(self, name, None) if name in type(self).model_fields else self.get(name)
            if value is not None:
                parts.append(f"{name}={value}")
        return "[" + " ".join(parts) + "]"


class ClassifierOutputToken(BaseNLPModel):
    """Output of one classifier for one input token.

    Only lives for the duration of a combiner call.
    """

    word: str
    ner: Optional[str] = Field(default=BACKGROUND_SYMBOL)
    normalized_ner: Optional[str] = None
    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Auxiliary values to transfer onto the token, e.g. numeric_type",
    )
    source: Optional[str] = Field(None, description="Name of the producing classifier")

    def is_background(self, background_symbol: str = BACKGROUND_SYMBOL) -> bool:
        """Check whether the classifier deferred on this token."""
        return self.ner is None or self.ner == background_symbol

    def __str__(self) -> str:
        parts = [f"word={self.word}", f"ner={self.ner}"]
        if self.normalized_ner is not None:
            parts.append(f"normalized_ner={self.normalized_ner}")
        for key, value in self.fields.items():
            parts.append(f"{key}={value}")
        return "[" + " ".join(parts) + "]"
