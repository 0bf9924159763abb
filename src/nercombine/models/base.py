"""Base models and common types for the NER combiner."""

from enum import Enum

from pydantic import BaseModel


# Explicit "no entity" tag written by the combiner when no classifier fires
BACKGROUND_SYMBOL = "O"


class EntityTag(str, Enum):
    """Entity tags emitted by the bundled classifiers.

    Classifiers loaded from model files may emit tags outside this set;
    tags are plain strings on tokens.
    """

    PERSON = "PERSON"
    LOCATION = "LOCATION"
    ORGANIZATION = "ORGANIZATION"
    MISC = "MISC"

    # Numeric
    NUMBER = "NUMBER"
    ORDINAL = "ORDINAL"
    PERCENT = "PERCENT"
    MONEY = "MONEY"

    # Temporal
    DATE = "DATE"
    TIME = "TIME"


class BaseNLPModel(BaseModel):
    """Base class for all annotation models."""

    class Config:
        from_attributes = True
