"""Time Expression Classifier - deterministic date/time tagger.

Recognizes common English date and time expressions and normalizes them
to ISO-8601-like values. Unknown components are written as X, so
"January 5" becomes "XXXX-01-05". Relative expressions ("today",
"yesterday", weekdays) resolve against `Document.doc_date` when the
document carries one.

Normalized values are also exposed as `timex_type` and `timex_value`
auxiliary fields.
"""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from nercombine.models import ClassifierOutputToken, Document, EntityTag, Sentence, Token

from .base import Classifier


MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

WEEKDAYS = {
    "monday": 1, "tuesday": 2, "wednesday": 3, "thursday": 4,
    "friday": 5, "saturday": 6, "sunday": 7,
}

RELATIVE_DAYS = {"today": 0, "yesterday": -1, "tomorrow": 1}

# Words that mark a bare four-digit number as a year
YEAR_CUES = {"in", "since", "until", "by", "during", "from", "to", "before", "after", "of"}

MERIDIEMS = {"am": 0, "a.m.": 0, "pm": 12, "p.m.": 12}

ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
SLASH_DATE = re.compile(r"(\d{1,2})/(\d{1,2})/(\d{4})")
YEAR = re.compile(r"[12]\d{3}")
DAY = re.compile(r"(\d{1,2})(?:st|nd|rd|th)?", re.IGNORECASE)
CLOCK = re.compile(r"(\d{1,2}):(\d{2})(am|pm|a\.m\.|p\.m\.)?", re.IGNORECASE)


@dataclass
class TimeMatch:
    end: int
    timex_type: str
    value: Optional[str]


def month_of(token: Token) -> Optional[int]:
    """Month number for a capitalized month name or abbreviation."""
    word = token.word
    if not word or not word[0].isupper():
        return None
    return MONTHS.get(word.lower().rstrip("."))


def day_of(token: Token) -> Optional[int]:
    match = DAY.fullmatch(token.word)
    if match and 1 <= int(match.group(1)) <= 31:
        return int(match.group(1))
    return None


def year_of(token: Token) -> Optional[int]:
    return int(token.word) if YEAR.fullmatch(token.word) else None


def format_date(year: Optional[int], month: Optional[int] = None, day: Optional[int] = None) -> str:
    parts = [f"{year:04d}" if year is not None else "XXXX"]
    if month is not None:
        parts.append(f"{month:02d}")
        if day is not None:
            parts.append(f"{day:02d}")
    return "-".join(parts)


class TimeExpressionClassifier(Classifier):
    """Tags dates and times with normalized values."""

    name = "time"
    uses_time_normalization = True
    auxiliary_fields = ("timex_type", "timex_value")

    def classify(
        self,
        tokens: Sequence[Token],
        document: Optional[Document] = None,
        sentence: Optional[Sentence] = None,
    ) -> list[ClassifierOutputToken]:
        reference = document.doc_date if document is not None else None

        output: list[ClassifierOutputToken] = []
        i = 0
        while i < len(tokens):
            match = self.match_at(tokens, i, reference)
            if match is None:
                output.append(self.background(tokens[i]))
                i += 1
                continue

            fields = {"timex_type": match.timex_type}
            if match.value is not None:
                fields["timex_value"] = match.value
            for token in tokens[i:match.end]:
                output.append(self.tagged(token, match.timex_type, match.value, **fields))
            i = match.end
        return output

    def match_at(
        self,
        tokens: Sequence[Token],
        i: int,
        reference: Optional[date] = None,
    ) -> Optional[TimeMatch]:
        """Longest date or time expression starting at token `i`."""
        token = tokens[i]
        word = token.word
        lowered = word.lower()

        iso = ISO_DATE.fullmatch(word)
        if iso:
            return self._date_match(i + 1, *map(int, iso.groups()))

        slashed = SLASH_DATE.fullmatch(word)
        if slashed:
            month, day, year = map(int, slashed.groups())
            return self._date_match(i + 1, year, month, day)

        if lowered in RELATIVE_DAYS:
            value = None
            if reference is not None:
                value = (reference + timedelta(days=RELATIVE_DAYS[lowered])).isoformat()
            return TimeMatch(end=i + 1, timex_type=EntityTag.DATE.value, value=value)

        if lowered in WEEKDAYS and word[0].isupper():
            return TimeMatch(
                end=i + 1,
                timex_type=EntityTag.DATE.value,
                value=self._weekday(WEEKDAYS[lowered], reference),
            )

        if month_of(token) is not None:
            return self._month_sequence(tokens, i)

        day = day_of(token)
        if day is not None and i + 1 < len(tokens) and month_of(tokens[i + 1]) is not None:
            month = month_of(tokens[i + 1])
            end = i + 2
            year = year_of(tokens[end]) if end < len(tokens) else None
            if year is not None:
                end += 1
            return TimeMatch(end=end, timex_type=EntityTag.DATE.value, value=format_date(year, month, day))

        if lowered in ("noon", "midnight"):
            return TimeMatch(
                end=i + 1,
                timex_type=EntityTag.TIME.value,
                value=self._time_value(12 if lowered == "noon" else 0, 0, reference),
            )

        clock = CLOCK.fullmatch(word)
        if clock:
            return self._clock(tokens, i, clock, reference)

        year = year_of(token)
        if year is not None and i > 0 and tokens[i - 1].word.lower() in YEAR_CUES:
            return TimeMatch(end=i + 1, timex_type=EntityTag.DATE.value, value=format_date(year))

        return None

    def _month_sequence(self, tokens: Sequence[Token], i: int) -> TimeMatch:
        """`Month [day][,] [year]` starting at `i`."""
        month = month_of(tokens[i])
        end = i + 1
        day = year = None

        if end < len(tokens):
            day = day_of(tokens[end])
            if day is not None:
                end += 1
        comma = end < len(tokens) and tokens[end].word == ","
        year_index = end + 1 if comma else end
        if year_index < len(tokens) and year_of(tokens[year_index]) is not None:
            year = year_of(tokens[year_index])
            end = year_index + 1

        return TimeMatch(end=end, timex_type=EntityTag.DATE.value, value=format_date(year, month, day))

    def _clock(self, tokens: Sequence[Token], i: int, clock: re.Match, reference: Optional[date]) -> Optional[TimeMatch]:
        hour, minute = int(clock.group(1)), int(clock.group(2))
        meridiem = clock.group(3)
        end = i + 1
        if meridiem is None and end < len(tokens) and tokens[end].word.lower() in MERIDIEMS:
            meridiem = tokens[end].word
            end += 1
        if meridiem is not None:
            hour = hour % 12 + MERIDIEMS[meridiem.lower()]
        if hour > 23 or minute > 59:
            return None
        return TimeMatch(end=end, timex_type=EntityTag.TIME.value, value=self._time_value(hour, minute, reference))

    @staticmethod
    def _date_match(end: int, year: int, month: int, day: int) -> Optional[TimeMatch]:
        try:
            value = date(year, month, day).isoformat()
        except ValueError:
            return None
        return TimeMatch(end=end, timex_type=EntityTag.DATE.value, value=value)

    @staticmethod
    def _weekday(weekday: int, reference: Optional[date]) -> str:
        """Weekday in the reference date's ISO week, or an unanchored week."""
        if reference is None:
            return f"XXXX-WXX-{weekday}"
        iso_year, iso_week, _ = reference.isocalendar()
        return f"{iso_year}-W{iso_week:02d}-{weekday}"

    @staticmethod
    def _time_value(hour: int, minute: int, reference: Optional[date]) -> str:
        prefix = reference.isoformat() if reference is not None else ""
        return f"{prefix}T{hour:02d}:{minute:02d}"
