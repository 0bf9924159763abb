"""NER Combiner Stage - tag every token of a document with a classifier cascade.

Expects a document that has already been sentence-split and tokenized
(plus POS-tagged and lemmatized when numeric or time classifiers are in
the cascade). For each sentence, in document order, runs the combiner
and writes the merged tag, normalized value and auxiliary fields back
onto the tokens.
"""

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Optional, Union

from nercombine.config import Settings, settings as default_settings
from nercombine.diagnostics import DiagnosticSink
from nercombine.exceptions import MissingAnnotationError
from nercombine.models import (
    NER_REQUIREMENT,
    TOKENIZE_AND_SSPLIT,
    TOKENIZE_SSPLIT_POS_LEMMA,
    ClassifierOutputToken,
    Document,
    Requirement,
    Sentence,
    Token,
)

from .base import Annotator
from .combiner import ClassifierCombiner

logger = logging.getLogger(__name__)


def required_capabilities_for(combiner: ClassifierCombiner) -> frozenset[Requirement]:
    """Upstream capabilities a cascade needs.

    Numeric and time classifiers read POS tags and lemmas; everything
    else only needs tokens grouped into sentences.
    """
    if combiner.uses_time_normalization or combiner.applies_numeric_classifiers:
        return TOKENIZE_SSPLIT_POS_LEMMA
    return TOKENIZE_AND_SSPLIT


def transfer_annotations(
    output: ClassifierOutputToken,
    token: Token,
    managed_fields: frozenset[str] = frozenset(),
) -> None:
    """Copy auxiliary classifier fields onto a token.

    Keys in `managed_fields` that the new output does not set are removed,
    so values left over from an earlier run do not survive a re-tag. Other
    keys on the token are left alone.
    """
    for key in managed_fields.difference(output.fields):
        token.extra.pop(key, None)
    for key, value in output.fields.items():
        token.set(key, value)


class NERCombinerAnnotator(Annotator):
    """Adds named-entity tags to tokens using a ClassifierCombiner.

    The annotator holds no per-document state; annotating the same
    document twice recomputes and overwrites the same values.
    """

    def __init__(
        self,
        combiner: ClassifierCombiner,
        verbose: bool = False,
        diagnostics: Optional[DiagnosticSink] = None,
    ):
        """Initialize the annotator.

        Args:
            combiner: Configured classifier cascade.
            verbose: Dump classifier output before and after write-back.
            diagnostics: Sink for verbose output. Defaults to stderr.
        """
        self.combiner = combiner
        self.verbose = verbose
        self.diagnostics = diagnostics or DiagnosticSink()
        self._required = required_capabilities_for(combiner)
        self._managed_fields = combiner.auxiliary_fields

    @classmethod
    def from_paths(
        cls,
        *paths: Union[str, Path],
        verbose: bool = False,
        apply_numeric_classifiers: bool = True,
        use_time_normalization: bool = True,
        max_workers: int = 1,
        ignore_case: bool = False,
        diagnostics: Optional[DiagnosticSink] = None,
    ) -> "NERCombinerAnnotator":
        """Load the cascade from model files.

        Raises:
            ClassifierLoadError: If any model cannot be loaded.
        """
        diagnostics = diagnostics or DiagnosticSink()
        with diagnostics.timer("Loading NER combiner model...") if verbose else nullcontext():
            combiner = ClassifierCombiner.from_paths(
                paths,
                apply_numeric_classifiers=apply_numeric_classifiers,
                use_time_normalization=use_time_normalization,
                max_workers=max_workers,
                ignore_case=ignore_case,
            )
        return cls(combiner, verbose=verbose, diagnostics=diagnostics)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        diagnostics: Optional[DiagnosticSink] = None,
    ) -> "NERCombinerAnnotator":
        settings = settings or default_settings
        diagnostics = diagnostics or DiagnosticSink()
        with diagnostics.timer("Loading NER combiner model...") if settings.ner_verbose else nullcontext():
            combiner = ClassifierCombiner.from_settings(settings)
        return cls(combiner, verbose=settings.ner_verbose, diagnostics=diagnostics)

    def annotate(self, document: Document) -> None:
        """Tag every sentence of `document` in place.

        Raises:
            MissingAnnotationError: If the document has not been sentence-split,
                or a sentence has not been tokenized.
        """
        if document.sentences is None:
            raise MissingAnnotationError(
                "Unable to find sentences in document; run sentence splitting first"
            )

        logger.debug("Adding NER annotation to %d sentences", len(document.sentences))
        for sentence in document.sentences:
            self.process_sentence(document, sentence)

    def process_sentence(self, document: Document, sentence: Sentence) -> Sentence:
        """Tag one sentence in place and return it.

        Raises:
            MissingAnnotationError: If the sentence has no token list.
        """
        tokens = sentence.tokens
        if tokens is None:
            raise MissingAnnotationError(
                "Unable to find tokens in sentence; run tokenization first"
            )

        output = self.combiner.classify(tokens, document, sentence)
        if self.verbose:
            self.diagnostics.dump("NERCombinerAnnotator direct output", output)

        for token, merged in zip(tokens, output):
            token.ner = merged.ner
            token.normalized_ner = merged.normalized_ner
            transfer_annotations(merged, token, self._managed_fields)

        if self.verbose:
            self.diagnostics.dump(
                "NERCombinerAnnotator output",
                (token.to_shorter_string("word", "ner", "normalized_ner") for token in tokens),
            )
        return sentence

    def required_capabilities(self) -> frozenset[Requirement]:
        return self._required

    def provided_capabilities(self) -> frozenset[Requirement]:
        return frozenset({NER_REQUIREMENT})

    def __repr__(self) -> str:
        return f"NERCombinerAnnotator({self.combiner!r}, verbose={self.verbose})"
