"""Capability tokens shared by annotators and the pipeline scheduler."""

from enum import Enum


class Requirement(str, Enum):
    """Named dependency a stage requires or provides."""

    TOKENIZE = "tokenize"
    SSPLIT = "sentence-split"
    POS = "pos-tag"
    LEMMA = "lemma"
    NER = "ner"


TOKENIZE_AND_SSPLIT = frozenset({Requirement.TOKENIZE, Requirement.SSPLIT})

TOKENIZE_SSPLIT_POS_LEMMA = frozenset(
    {Requirement.TOKENIZE, Requirement.SSPLIT, Requirement.POS, Requirement.LEMMA}
)

NER_REQUIREMENT = Requirement.NER
