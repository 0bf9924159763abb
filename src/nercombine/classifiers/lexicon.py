"""Lexicon Tagger - count-based statistical token tagger.

Keeps per-word tag counts gathered from tagged sentences and predicts the
most probable tag for each token. Words the model has not seen often
enough fall back to document-level label consistency: if the same word
was tagged as an entity earlier in the document, that tag is reused.

Model file format (JSON):
    {
        "type": "lexicon",
        "min_count": 1,
        "min_probability": 0.5,
        "counts": {"paris": {"LOCATION": 12, "PERSON": 1}, ...}
    }
"""

import json
import logging
from collections import Counter, defaultdict
from pathlib import Path
from typing import Iterable, Optional, Sequence

from nercombine.exceptions import ClassifierLoadError
from nercombine.models import ClassifierOutputToken, Document, Sentence, Token

from .base import Classifier

logger = logging.getLogger(__name__)

MODEL_TYPE = "lexicon"


class LexiconTagger(Classifier):
    """Statistical tagger backed by word/tag counts."""

    name = "lexicon"

    def __init__(
        self,
        counts: Optional[dict[str, dict[str, int]]] = None,
        min_count: int = 1,
        min_probability: float = 0.5,
        use_global_information: bool = True,
        name: Optional[str] = None,
    ):
        """Initialize the tagger.

        Args:
            counts: Mapping of lowercased word to tag counts.
            min_count: Minimum total observations before a word is trusted.
            min_probability: Minimum share of the best tag among observations.
            use_global_information: Reuse tags from earlier sentences for
                words the model cannot decide on.
            name: Display name, usually the model file stem.
        """
        self.counts: dict[str, Counter] = {
            word: Counter(tags) for word, tags in (counts or {}).items()
        }
        self.min_count = min_count
        self.min_probability = min_probability
        self.use_global_information = use_global_information
        if name:
            self.name = name

    @classmethod
    def load(cls, path: Path, **kwargs) -> "LexiconTagger":
        """Load a tagger from a JSON model file.

        Raises:
            ClassifierLoadError: If the file is missing, not a lexicon model,
                or holds malformed counts or thresholds.
        """
        path = Path(path)
        if not path.exists():
            raise ClassifierLoadError(f"Lexicon model not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ClassifierLoadError(f"Unreadable lexicon model {path}: {e}") from e

        if not isinstance(data, dict) or data.get("type") != MODEL_TYPE:
            raise ClassifierLoadError(f"Not a lexicon model: {path}")
        counts = data.get("counts")
        if not isinstance(counts, dict):
            raise ClassifierLoadError(f"Lexicon model {path} has no counts table")

        try:
            _check_counts(counts)
            min_count = int(data.get("min_count", 1))
            min_probability = float(data.get("min_probability", 0.5))
        except (TypeError, ValueError) as e:
            raise ClassifierLoadError(f"Malformed lexicon model {path}: {e}") from e

        tagger = cls(
            counts=counts,
            min_count=min_count,
            min_probability=min_probability,
            name=kwargs.pop("name", None) or path.stem,
            **kwargs,
        )
        logger.info("Loaded lexicon model %s (%d words)", path, len(tagger.counts))
        return tagger

    def save(self, path: Path) -> None:
        """Write the model as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "type": MODEL_TYPE,
            "min_count": self.min_count,
            "min_probability": self.min_probability,
            "counts": {word: dict(tags) for word, tags in sorted(self.counts.items())},
        }
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def train(self, tagged_sentences: Iterable[Sequence[tuple[str, str]]]) -> None:
        """Accumulate counts from `(word, tag)` sequences.

        Background tags are counted too, so common words learn to defer.
        """
        for sentence in tagged_sentences:
            for word, tag in sentence:
                self.counts.setdefault(word.lower(), Counter())[tag] += 1

    def predict(self, word: str) -> Optional[str]:
        """Most probable tag for `word`, or None if the model is unsure."""
        tags = self.counts.get(word.lower())
        if not tags:
            return None
        total = sum(tags.values())
        if total < self.min_count:
            return None
        tag, count = tags.most_common(1)[0]
        if count / total < self.min_probability:
            return None
        return tag

    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        memory = {}
        if self.use_global_information and document is not None and sentence is not None:
            memory = self._document_memory(document, sentence)

        output = []
        for token in tokens:
            tag = self.predict(token.word)
            if tag is None:
                tag = memory.get(token.word.lower())
            if tag is None or tag == self.background_symbol:
                output.append(self.background(token))
            else:
                output.append(self.tagged(token, tag))
        return output

    def _document_memory(self, document: Document, sentence: Sentence) -> dict[str, str]:
        """Entity tags assigned to each word in preceding sentences.

        Only sentences before `sentence` are consulted, so re-annotating a
        document sees the same context as the first pass. The most
        frequent tag wins; ties go to the earliest seen. Words are keyed in lower case,
        matching the counts table.
        """
        seen: dict[str, Counter] = defaultdict(Counter)
        for previous in document.sentences_before(sentence):
            for token in previous.tokens or []:
                if token.ner and token.ner != self.background_symbol:
                    seen[token.word.lower()][token.ner] += 1
        return {word: tags.most_common(1)[0][0] for word, tags in seen.items()}


def _check_counts(counts: dict) -> None:
    """Raise TypeError unless `counts` maps words to {tag: int} tables."""
    for word, tags in counts.items():
        if not isinstance(tags, dict):
            raise TypeError(f"counts for {word!r} must be an object")
        for tag, count in tags.items():
            if isinstance(count, bool) or not isinstance(count, int):
                raise TypeError(f"count for {word!r}/{tag!r} must be an integer, got {count!r}")
