"""Build classifiers from model locations."""

import logging
from pathlib import Path
from typing import Union

from nercombine.exceptions import ClassifierLoadError

from .base import Classifier
from .lexicon import LexiconTagger
from .regexner import RegexNERClassifier

logger = logging.getLogger(__name__)


def load_classifier(path: Union[str, Path], ignore_case: bool = False) -> Classifier:
    """Load one classifier, choosing the implementation by file type.

    `.json` files are lexicon models; any other file is a rule mapping.
    `ignore_case` applies to rule mappings only.

    Raises:
        ClassifierLoadError: If the path does not exist or cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise ClassifierLoadError(f"Classifier model not found: {path}")

    logger.debug("Loading classifier from %s", path)
    if path.suffix.lower() == ".json":
        return LexiconTagger.load(path)
    return RegexNERClassifier.load(path, ignore_case=ignore_case)
