"""Number Sequence Classifier - deterministic numeric entity tagger.

Recognizes:
- plain numbers: digits ("1,250", "3.5"), number words ("twenty-one"),
  digit + magnitude ("3 million")
- ordinals: "3rd", "first"
- percentages: "50 %", "50%", "fifty percent"
- money: "$ 20", "$20", "20 dollars"

Each recognized token gets a normalized value plus `numeric_type` and
`numeric_value` auxiliary fields. Tokens tagged CD by the POS tagger that
cannot be parsed still get NUMBER, without a normalized value.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from nercombine.models import ClassifierOutputToken, Document, EntityTag, Sentence, Token

from .base import Classifier


UNITS = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
    "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18,
    "nineteen": 19, "twenty": 20, "thirty": 30, "forty": 40,
    "fifty": 50, "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}

SCALES = {
    "thousand": 1_000,
    "million": 1_000_000,
    "billion": 1_000_000_000,
    "trillion": 1_000_000_000_000,
}

ORDINAL_WORDS = {
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5,
    "sixth": 6, "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10,
    "eleventh": 11, "twelfth": 12,
}

CURRENCY_SYMBOLS = {"$": "$", "€": "€", "£": "£", "¥": "¥", "US$": "$"}

CURRENCY_WORDS = {
    "dollar": "$", "dollars": "$",
    "euro": "€", "euros": "€",
    "pound": "£", "pounds": "£",
    "yen": "¥",
}

PERCENT_WORDS = {"%", "percent", "per-cent", "pct"}

NUMBER_PATTERN = r"[-+]?(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?|[-+]?\.\d+"
DIGITS = re.compile(NUMBER_PATTERN)
ORDINAL_SUFFIX = re.compile(r"(\d+)(?:st|nd|rd|th)", re.IGNORECASE)
INLINE_MONEY = re.compile(r"([$€£¥])(" + NUMBER_PATTERN + r")")
INLINE_PERCENT = re.compile(r"(" + NUMBER_PATTERN + r")%")


def parse_digits(word: str) -> Optional[float]:
    """Parse a digit string such as '1,250.5'."""
    if not DIGITS.fullmatch(word):
        return None
    return float(word.replace(",", ""))


def is_number_word(word: str) -> bool:
    parts = word.lower().split("-")
    return all(part in UNITS or part == "hundred" or part in SCALES for part in parts)


def parse_number_words(words: Sequence[str]) -> Optional[float]:
    """Parse a run of number words, e.g. ['two', 'hundred', 'forty-one']."""
    total, current = 0, 0
    for word in words:
        for part in word.lower().split("-"):
            if part in UNITS:
                current += UNITS[part]
            elif part == "hundred":
                current = max(current, 1) * 100
            elif part in SCALES:
                total += max(current, 1) * SCALES[part]
                current = 0
            else:
                return None
    return float(total + current)


def format_number(value: Optional[float]) -> Optional[str]:
    return None if value is None else str(float(value))


@dataclass
class NumberSpan:
    """Tokens [start, end) forming one number."""

    end: int
    value: Optional[float]
    ordinal: bool = False


@dataclass
class NumericMatch:
    end: int
    numeric_type: str
    value: Optional[float]
    normalized: Optional[str]


class NumberSequenceClassifier(Classifier):
    """Tags numbers, ordinals, percentages and money amounts."""

    name = "number"
    applies_numeric_classifiers = True
    auxiliary_fields = ("numeric_type", "numeric_value")

    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        output: list[ClassifierOutputToken] = []
        i = 0
        while i < len(tokens):
            match = self.match_at(tokens, i)
            if match is None:
                output.append(self.background(tokens[i]))
                i += 1
                continue

            fields = {"numeric_type": match.numeric_type}
            if match.value is not None:
                fields["numeric_value"] = match.value
            for token in tokens[i:match.end]:
                output.append(self.tagged(token, match.numeric_type, match.normalized, **fields))
            i = match.end
        return output

    def match_at(self, tokens: Sequence[Token], i: int) -> Optional[NumericMatch]:
        """Longest numeric expression starting at token `i`."""
        word = tokens[i].word

        currency = CURRENCY_SYMBOLS.get(word)
        if currency is not None:
            number = self.number_at(tokens, i + 1)
            if number is None or number.ordinal or number.value is None:
                return None
            return self._money(number.end, currency, number.value)

        inline = INLINE_MONEY.fullmatch(word)
        if inline:
            return self._money(i + 1, inline.group(1), parse_digits(inline.group(2)))

        inline = INLINE_PERCENT.fullmatch(word)
        if inline:
            return self._percent(i + 1, parse_digits(inline.group(1)))

        number = self.number_at(tokens, i)
        if number is None:
            return None
        if number.ordinal:
            return NumericMatch(
                end=number.end,
                numeric_type=EntityTag.ORDINAL.value,
                value=number.value,
                normalized=format_number(number.value),
            )

        following = tokens[number.end].word.lower() if number.end < len(tokens) else None
        if number.value is not None and following in PERCENT_WORDS:
            return self._percent(number.end + 1, number.value)
        if number.value is not None and following in CURRENCY_WORDS:
            return self._money(number.end + 1, CURRENCY_WORDS[following], number.value)

        return NumericMatch(
            end=number.end,
            numeric_type=EntityTag.NUMBER.value,
            value=number.value,
            normalized=format_number(number.value),
        )

    def number_at(self, tokens: Sequence[Token], i: int) -> Optional[NumberSpan]:
        """Number starting at token `i`, if any."""
        if i >= len(tokens):
            return None
        word = tokens[i].word
        lowered = word.lower()

        suffixed = ORDINAL_SUFFIX.fullmatch(word)
        if suffixed:
            return NumberSpan(end=i + 1, value=float(suffixed.group(1)), ordinal=True)
        if lowered in ORDINAL_WORDS:
            return NumberSpan(end=i + 1, value=float(ORDINAL_WORDS[lowered]), ordinal=True)

        value = parse_digits(word)
        if value is not None:
            end = i + 1
            if end < len(tokens) and tokens[end].word.lower() in SCALES:
                value *= SCALES[tokens[end].word.lower()]
                end += 1
            return NumberSpan(end=end, value=value)

        end = i
        while end < len(tokens) and is_number_word(tokens[end].word):
            end += 1
        if end > i:
            words = [token.word for token in tokens[i:end]]
            return NumberSpan(end=end, value=parse_number_words(words))

        if tokens[i].pos == "CD":
            return NumberSpan(end=i + 1, value=None)
        return None

    @staticmethod
    def _money(end: int, currency: str, value: Optional[float]) -> NumericMatch:
        return NumericMatch(
            end=end,
            numeric_type=EntityTag.MONEY.value,
            value=value,
            normalized=f"{currency}{format_number(value)}",
        )

    @staticmethod
    def _percent(end: int, value: Optional[float]) -> NumericMatch:
        return NumericMatch(
            end=end,
            numeric_type=EntityTag.PERCENT.value,
            value=value,
            normalized=f"%{format_number(value)}",
        )
