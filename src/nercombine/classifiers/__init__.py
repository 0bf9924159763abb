"""Classifiers that can take part in an NER cascade.

Statistical:
1. lexicon - count-based word/tag model with document label consistency

Deterministic:
2. regexner - token-pattern rules from a mapping file
3. timex - date and time expressions with ISO normalization
4. numeric - numbers, ordinals, percentages and money

Every classifier implements the `Classifier` interface and is combined by
`nercombine.pipeline.ClassifierCombiner` in declared priority order.
"""

from .base import Classifier
from .lexicon import LexiconTagger
from .loader import load_classifier
from .numeric import NumberSequenceClassifier
from .regexner import RegexNERClassifier, TokenRule
from .timex import TimeExpressionClassifier

__all__ = [
    # Interface
    "Classifier",
    "load_classifier",
    # Statistical
    "LexiconTagger",
    # Rule-based
    "RegexNERClassifier",
    "TokenRule",
    # Numeric / temporal
    "NumberSequenceClassifier",
    "TimeExpressionClassifier",
]
