"""Annotation pipeline - check stage prerequisites, then run stages in order."""

import logging
from typing import Iterable, Optional, Sequence

from nercombine.exceptions import UnmetRequirementError
from nercombine.models import Document, Requirement

from .base import Annotator

logger = logging.getLogger(__name__)


class AnnotationPipeline:
    """Ordered list of annotators validated against their declared contracts.

    Validation happens once, before any stage runs. Stages themselves
    never re-check their requirements.
    """

    def __init__(self, annotators: Sequence[Annotator]):
        self.annotators = list(annotators)

    def validate(self, available: Iterable[Requirement] = ()) -> frozenset[Requirement]:
        """Check that every stage's requirements are met by what precedes it.

        Args:
            available: Capabilities already present before the first stage.

        Returns:
            Capabilities available after the last stage.

        Raises:
            UnmetRequirementError: For the first stage with missing requirements.
        """
        satisfied = set(available)
        for annotator in self.annotators:
            missing = annotator.required_capabilities() - satisfied
            if missing:
                raise UnmetRequirementError(annotator.name, frozenset(missing))
            satisfied |= annotator.provided_capabilities()
        return frozenset(satisfied)

    def annotate(self, document: Document, available: Optional[Iterable[Requirement]] = None) -> Document:
        """Validate, then run every stage on `document` in place.

        Args:
            document: Document to annotate.
            available: Capabilities already present. Defaults to what the
                document content evidences.
        """
        if available is None:
            available = document.available_requirements()
        self.validate(available)
        for annotator in self.annotators:
            logger.debug("Running %s", annotator.name)
            annotator.annotate(document)
        return document
