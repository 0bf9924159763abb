"""Annotation models for the NER combiner.

This module defines the Pydantic models that flow through the annotation
pipeline. All models support JSON serialization, so pre-tokenized
documents can be read from and written back to disk.

Model Hierarchy:
- Document → Sentences → Tokens
- ClassifierOutputToken: per-token classifier output, one combiner call long
- Requirement: capability tokens used by the pipeline scheduler
"""

from .base import (
    BACKGROUND_SYMBOL,
    BaseNLPModel,
    EntityTag,
)
from .document import (
    Document,
    Sentence,
)
from .requirement import (
    NER_REQUIREMENT,
    TOKENIZE_AND_SSPLIT,
    TOKENIZE_SSPLIT_POS_LEMMA,
    Requirement,
)
from .token import (
    ClassifierOutputToken,
    Token,
)

__all__ = [
    # Base types
    "BACKGROUND_SYMBOL",
    "BaseNLPModel",
    "EntityTag",
    # Document
    "Document",
    "Sentence",
    # Token
    "ClassifierOutputToken",
    "Token",
    # Requirements
    "NER_REQUIREMENT",
    "Requirement",
    "TOKENIZE_AND_SSPLIT",
    "TOKENIZE_SSPLIT_POS_LEMMA",
]
