"""Annotator interface used by the pipeline scheduler."""

from abc import ABC, abstractmethod

from nercombine.models import Document, Requirement


class Annotator(ABC):
    """A pipeline stage that adds annotations to a document in place."""

    @abstractmethod
    def annotate(self, document: Document) -> None:
        """Add this annotator's annotations to the document."""

    @abstractmethod
    def required_capabilities(self) -> frozenset[Requirement]:
        """Capabilities earlier stages must provide."""

    @abstractmethod
    def provided_capabilities(self) -> frozenset[Requirement]:
        """Capabilities this annotator adds."""

    @property
    def name(self) -> str:
        return type(self).__name__
