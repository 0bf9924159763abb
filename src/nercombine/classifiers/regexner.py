"""Rule-based tagger driven by a token-pattern mapping file.

Each non-comment line of the mapping file is tab-separated:

    pattern<TAB>TAG[<TAB>normalized value]

The pattern is a whitespace-separated sequence of regular expressions,
each matched in full against one token, so `New York( City)?` is not a
valid pattern but `New York City` and `Dr\\.? [A-Z][a-z]+` are.
At each position the longest matching rule wins; ties go to the rule
listed first.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from nercombine.exceptions import ClassifierLoadError
from nercombine.models import ClassifierOutputToken, Document, Sentence, Token

from .base import Classifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenRule:
    """One mapping-file entry."""

    patterns: tuple[re.Pattern, ...]
    tag: str
    normalized: Optional[str] = None

    def __len__(self) -> int:
        return len(self.patterns)

    def matches(self, tokens: Sequence[Token], start: int) -> bool:
        """Check whether the rule matches tokens beginning at `start`."""
        if start + len(self.patterns) > len(tokens):
            return False
        return all(
            pattern.fullmatch(tokens[start + offset].word)
            for offset, pattern in enumerate(self.patterns)
        )


def parse_rule(line: str, ignore_case: bool = False) -> TokenRule:
    """Parse one mapping-file line.

    Raises:
        ValueError: If the line has no tag or contains a bad regex.
    """
    columns = line.rstrip("\n").split("\t")
    if len(columns) < 2 or not columns[0].strip() or not columns[1].strip():
        raise ValueError(f"expected 'pattern<TAB>TAG', got {line!r}")

    flags = re.IGNORECASE if ignore_case else 0
    try:
        patterns = tuple(re.compile(part, flags) for part in columns[0].split())
    except re.error as e:
        raise ValueError(f"bad pattern {columns[0]!r}: {e}") from e

    normalized = columns[2].strip() if len(columns) > 2 and columns[2].strip() else None
    return TokenRule(patterns=patterns, tag=columns[1].strip(), normalized=normalized)


class RegexNERClassifier(Classifier):
    """Deterministic tagger applying token-sequence rules."""

    name = "regexner"

    def __init__(self, rules: Sequence[TokenRule], name: Optional[str] = None):
        self.rules = list(rules)
        if name:
            self.name = name

    @classmethod
    def load(cls, path: Path, ignore_case: bool = False, name: Optional[str] = None) -> "RegexNERClassifier":
        """Load rules from a mapping file.

        Raises:
            ClassifierLoadError: If the file is missing or any line is malformed.
        """
        path = Path(path)
        if not path.exists():
            raise ClassifierLoadError(f"Mapping file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                lines = f.readlines()
        except (OSError, UnicodeDecodeError) as e:
            raise ClassifierLoadError(f"Unreadable mapping file {path}: {e}") from e

        rules = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            try:
                rules.append(parse_rule(line, ignore_case=ignore_case))
            except ValueError as e:
                raise ClassifierLoadError(f"{path}:{line_number}: {e}") from e

        logger.info("Loaded %d rules from %s", len(rules), path)
        return cls(rules, name=name or path.stem)

    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        output: list[ClassifierOutputToken] = []
        i = 0
        while i < len(tokens):
            rule = self._longest_match(tokens, i)
            if rule is None:
                output.append(self.background(tokens[i]))
                i += 1
                continue
            for token in tokens[i:i + len(rule)]:
                output.append(self.tagged(token, rule.tag, rule.normalized))
            i += len(rule)
        return output

    def _longest_match(self, tokens: Sequence[Token], start: int) -> Optional[TokenRule]:
        best = None
        for rule in self.rules:
            if rule.matches(tokens, start) and (best is None or len(rule) > len(best)):
                best = rule
        return best
