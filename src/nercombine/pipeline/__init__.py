"""Pipeline components for named-entity annotation.

1. combiner - run a classifier cascade and merge outputs by priority
2. annotator - per-sentence write-back and dependency contract
3. scheduler - order-checked execution of annotators

The annotator trusts that its requirements were checked before
`annotate` is called; AnnotationPipeline does that check.
"""

from .annotator import NERCombinerAnnotator, required_capabilities_for, transfer_annotations
from .base import Annotator
from .combiner import ClassifierCombiner
from .scheduler import AnnotationPipeline

__all__ = [
    # Interface
    "Annotator",
    # Combiner
    "ClassifierCombiner",
    # Annotator
    "NERCombinerAnnotator",
    "required_capabilities_for",
    "transfer_annotations",
    # Scheduler
    "AnnotationPipeline",
]
