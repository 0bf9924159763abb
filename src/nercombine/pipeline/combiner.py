"""Classifier Combiner - merge a cascade of classifiers into one tagging.

Merge policy, applied per token in declared classifier order:
- tag: the first classifier emitting a non-background tag wins
- normalized value: the first non-null value among classifiers that did
  not defer on the token, so a lower-priority classifier can supply the
  normalization the winner lacks
- auxiliary fields: merged key by key from classifiers that did not
  defer; the first classifier to set a key keeps it
- no classifier fires: explicit background tag, no normalized value
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence, Union

from nercombine.classifiers import (
    Classifier,
    NumberSequenceClassifier,
    TimeExpressionClassifier,
    load_classifier,
)
from nercombine.config import Settings
from nercombine.exceptions import ClassifierContractError
from nercombine.models import (
    BACKGROUND_SYMBOL,
    ClassifierOutputToken,
    Document,
    Sentence,
    Token,
)

logger = logging.getLogger(__name__)


class ClassifierCombiner:
    """Runs classifiers in priority order and merges their outputs.

    The classifier list is fixed at construction and shared read-only
    across every sentence and document the combiner sees.
    """

    def __init__(
        self,
        classifiers: Sequence[Classifier],
        background_symbol: str = BACKGROUND_SYMBOL,
        max_workers: int = 1,
    ):
        """Initialize the combiner.

        Args:
            classifiers: Classifiers in priority order, highest first.
            background_symbol: Neutral tag meaning "no entity".
            max_workers: Run classifiers concurrently when greater than 1.
        """
        if not classifiers:
            raise ValueError("ClassifierCombiner needs at least one classifier")
        self.classifiers = tuple(classifiers)
        self.background_symbol = background_symbol
        self.max_workers = max(1, max_workers)

    @classmethod
    def from_paths(
        cls,
        paths: Sequence[Union[str, Path]],
        apply_numeric_classifiers: bool = True,
        use_time_normalization: bool = True,
        max_workers: int = 1,
        ignore_case: bool = False,
    ) -> "ClassifierCombiner":
        """Build a cascade from model files followed by the built-in classifiers.

        Model files keep their declared order. The time classifier, then the
        numeric classifier, are appended after them when enabled. `ignore_case`
        makes rule mappings match regardless of case.

        Raises:
            ClassifierLoadError: If any model cannot be loaded.
        """
        classifiers: list[Classifier] = [
            load_classifier(path, ignore_case=ignore_case) for path in paths
        ]
        if use_time_normalization:
            classifiers.append(TimeExpressionClassifier())
        if apply_numeric_classifiers:
            classifiers.append(NumberSequenceClassifier())
        logger.info(
            "Classifier cascade: %s", ", ".join(c.name for c in classifiers) or "(empty)"
        )
        return cls(classifiers, max_workers=max_workers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClassifierCombiner":
        return cls.from_paths(
            settings.model_paths,
            apply_numeric_classifiers=settings.ner_apply_numeric_classifiers,
            use_time_normalization=settings.ner_use_time_normalization,
            max_workers=settings.max_workers,
            ignore_case=settings.ner_rules_ignore_case,
        )

    @property
    def uses_time_normalization(self) -> bool:
        return any(c.uses_time_normalization for c in self.classifiers)

    @property
    def applies_numeric_classifiers(self) -> bool:
        return any(c.applies_numeric_classifiers for c in self.classifiers)

    @property
    def auxiliary_fields(self) -> frozenset[str]:
        """Every auxiliary field any classifier in the cascade may emit."""
        return frozenset(
            field for c in self.classifiers for field in c.auxiliary_fields
        )

    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        """Tag one sentence with the whole cascade.

        Args:
            tokens: Tokens of one sentence. Not modified.
            document: Enclosing document, passed on for global information.
            sentence: Sentence the tokens belong to.

        Returns:
            One merged output record per token, in token order.
        """
        outputs = self._run_classifiers(tokens, document, sentence)
        return [
            self.merge_token(token, [output[i] for output in outputs])
            for i, token in enumerate(tokens)
        ]

    def merge_token(
        self,
        token: Token,
        candidates: Sequence[ClassifierOutputToken],
    ) -> ClassifierOutputToken:
        """Merge one token's outputs, given in classifier priority order."""
        fired = [c for c in candidates if not c.is_background(self.background_symbol)]
        if not fired:
            return ClassifierOutputToken(word=token.word, ner=self.background_symbol)

        winner = fired[0]
        normalized = next(
            (c.normalized_ner for c in fired if c.normalized_ner is not None), None
        )
        fields: dict = {}
        for candidate in fired:
            for key, value in candidate.fields.items():
                fields.setdefault(key, value)

        return ClassifierOutputToken(
            word=token.word,
            ner=winner.ner,
            normalized_ner=normalized,
            fields=fields,
            source=winner.source,
        )

    def _run_classifiers(
        self,
        tokens: Sequence[Token],
        document: Optional[Document],
        sentence: Optional[Sentence],
    ) -> list[list[ClassifierOutputToken]]:
        """Outputs of every classifier, in declared order."""
        if self.max_workers > 1 and len(self.classifiers) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() yields in submission order, not completion order
                outputs = list(
                    executor.map(
                        lambda c: c.classify(tokens, document, sentence),
                        self.classifiers,
                    )
                )
        else:
            outputs = [c.classify(tokens, document, sentence) for c in self.classifiers]

        for classifier, output in zip(self.classifiers, outputs):
            if len(output) != len(tokens):
                raise ClassifierContractError(
                    f"{classifier.name} returned {len(output)} outputs for {len(tokens)} tokens"
                )
        return outputs

    def __repr__(self) -> str:
        names = ", ".join(c.name for c in self.classifiers)
        return f"ClassifierCombiner([{names}])"
