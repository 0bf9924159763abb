"""Exceptions raised by the NER combiner.

- MissingAnnotationError  : input lacks sentences or tokens when annotating
- ClassifierLoadError     : a classifier model or resource cannot be loaded
- ClassifierContractError : a classifier returned a malformed output sequence
- UnmetRequirementError   : a pipeline stage is scheduled before its prerequisites
"""


class NERCombinerError(Exception):
    """Base class for all NER combiner errors."""


class MissingAnnotationError(NERCombinerError, ValueError):
    """Required upstream annotation (sentences, tokens) is absent."""


class ClassifierLoadError(NERCombinerError, IOError):
    """Classifier model or resource could not be loaded."""


class ClassifierContractError(NERCombinerError, RuntimeError):
    """Classifier output does not line up one-to-one with its input."""


class UnmetRequirementError(NERCombinerError, RuntimeError):
    """Pipeline stage requires capabilities no earlier stage provides."""

    def __init__(self, stage: str, missing: frozenset):
        self.stage = stage
        self.missing = missing
        names = ", ".join(sorted(str(getattr(r, "value", r)) for r in missing))
        super().__init__(f"{stage} requires [{names}] which no earlier stage provides")
