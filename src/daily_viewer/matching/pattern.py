"""Moment.js style date templates used to name daily notes."""

import re
from dataclasses import dataclass
from datetime import datetime

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
MONTHS_SHORT = tuple(name[:3] for name in MONTHS)
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
WEEKDAYS_SHORT = tuple(name[:3] for name in WEEKDAYS)

# Longest tokens first so that "MMMM" is never read as "MM" + "MM".
TOKEN_RE = re.compile(
    r"\[[^\]]*\]|YYYY|YY|MMMM|MMM|MM|M|dddd|ddd|DD|D|HH|H|hh|h|mm|m|ss|s|A|a"
)

DATE_TOKENS = frozenset({"YYYY", "YY", "MMMM", "MMM", "MM", "M", "DD", "D"})

# Two-digit years at or below the pivot belong to the 2000s.
TWO_DIGIT_YEAR_PIVOT = 68

# Values used for fields the template does not mention. 2000 is a leap year
# so that a "MM-DD" template accepts 02-29.
DEFAULT_YEAR = 2000


def _alternation(names: tuple[str, ...]) -> str:
    return "(" + "|".join(names) + ")"


TOKEN_REGEX = {
    "YYYY": r"(\d{4})",
    "YY": r"(\d{2})",
    "MMMM": _alternation(MONTHS),
    "MMM": _alternation(MONTHS_SHORT),
    "MM": r"(\d{2})",
    "M": r"(\d{1,2})",
    "dddd": _alternation(WEEKDAYS),
    "ddd": _alternation(WEEKDAYS_SHORT),
    "DD": r"(\d{2})",
    "D": r"(\d{1,2})",
    "HH": r"(\d{2})",
    "H": r"(\d{1,2})",
    "hh": r"(\d{2})",
    "h": r"(\d{1,2})",
    "mm": r"(\d{2})",
    "m": r"(\d{1,2})",
    "ss": r"(\d{2})",
    "s": r"(\d{1,2})",
    "A": r"(AM|PM)",
    "a": r"(am|pm)",
}


@dataclass(frozen=True)
class Token:
    """A single piece of a template: either a field token or literal text."""

    text: str
    literal: bool = False


def tokenize(template: str) -> list[Token]:
    """Split a template into field tokens and literal runs.

    Text in square brackets is always literal, as are characters that are
    not part of a recognised token.
    """
    tokens: list[Token] = []
    pos = 0
    for match in TOKEN_RE.finditer(template):
        if match.start() > pos:
            tokens.append(Token(template[pos : match.start()], literal=True))
        text = match.group(0)
        if text.startswith("["):
            if len(text) > 2:
                tokens.append(Token(text[1:-1], literal=True))
        else:
            tokens.append(Token(text))
        pos = match.end()
    if pos < len(template):
        tokens.append(Token(template[pos:], literal=True))
    return tokens


def _format_token(token: str, value: datetime) -> str:
    hour12 = value.hour % 12 or 12
    if token == "YYYY":
        return f"{value.year:04d}"
    if token == "YY":
        return f"{value.year % 100:02d}"
    if token == "MMMM":
        return MONTHS[value.month - 1]
    if token == "MMM":
        return MONTHS_SHORT[value.month - 1]
    if token == "MM":
        return f"{value.month:02d}"
    if token == "M":
        return str(value.month)
    if token == "dddd":
        return WEEKDAYS[value.weekday()]
    if token == "ddd":
        return WEEKDAYS_SHORT[value.weekday()]
    if token == "DD":
        return f"{value.day:02d}"
    if token == "D":
        return str(value.day)
    if token == "HH":
        return f"{value.hour:02d}"
    if token == "H":
        return str(value.hour)
    if token == "hh":
        return f"{hour12:02d}"
    if token == "h":
        return str(hour12)
    if token == "mm":
        return f"{value.minute:02d}"
    if token == "m":
        return str(value.minute)
    if token == "ss":
        return f"{value.second:02d}"
    if token == "s":
        return str(value.second)
    if token == "A":
        return "AM" if value.hour < 12 else "PM"
    if token == "a":
        return "am" if value.hour < 12 else "pm"
    raise ValueError(f"Unknown token: {token}")


class DatePattern:
    """A date template such as ``YYYY-MM-DD``.

    Parsing is deterministic: fields missing from the template take fixed
    defaults, and month and weekday names are always English.
    """

    def __init__(self, template: str):
        self.template = template
        self.tokens = tuple(tokenize(template))
        self._fields = [t.text for t in self.tokens if not t.literal]
        self._regex = re.compile(
            "".join(
                re.escape(t.text) if t.literal else TOKEN_REGEX[t.text]
                for t in self.tokens
            )
        )

    def __repr__(self) -> str:
        return f"DatePattern({self.template!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DatePattern):
            return NotImplemented
        return self.template == other.template

    def __hash__(self) -> int:
        return hash(self.template)

    @property
    def has_date_tokens(self) -> bool:
        """True when the template names at least a year, month or day."""
        return any(field in DATE_TOKENS for field in self._fields)

    def format(self, value: datetime) -> str:
        """Render a datetime using this template."""
        return "".join(
            t.text if t.literal else _format_token(t.text, value) for t in self.tokens
        )

    def parse(self, text: str) -> datetime | None:
        """Parse text into a datetime without round-trip validation.

        Returns None when the text does not have the template's shape or the
        fields do not form a real date.
        """
        if not self.has_date_tokens:
            return None
        found = self._regex.fullmatch(text)
        if not found:
            return None

        year, month, day = DEFAULT_YEAR, 1, 1
        hour = minute = second = 0
        hour12: int | None = None
        meridiem: str | None = None

        for field, raw in zip(self._fields, found.groups()):
            if field == "YYYY":
                year = int(raw)
            elif field == "YY":
                two_digit = int(raw)
                year = 2000 + two_digit if two_digit <= TWO_DIGIT_YEAR_PIVOT else 1900 + two_digit
            elif field == "MMMM":
                month = MONTHS.index(raw) + 1
            elif field == "MMM":
                month = MONTHS_SHORT.index(raw) + 1
            elif field in ("MM", "M"):
                month = int(raw)
            elif field in ("DD", "D"):
                day = int(raw)
            elif field in ("HH", "H"):
                hour = int(raw)
            elif field in ("hh", "h"):
                hour12 = int(raw)
            elif field in ("mm", "m"):
                minute = int(raw)
            elif field in ("ss", "s"):
                second = int(raw)
            elif field in ("A", "a"):
                meridiem = raw.lower()
            # Weekday names carry no information of their own; the round
            # trip in match() checks them against the parsed date.

        if hour12 is not None:
            hour = hour12 % 12 + (12 if meridiem == "pm" else 0) if meridiem else hour12

        try:
            return datetime(year, month, day, hour, minute, second)
        except ValueError:
            return None

    def match(self, text: str) -> datetime | None:
        """Parse text and accept it only if formatting reproduces it exactly."""
        parsed = self.parse(text)
        if parsed is None:
            return None
        try:
            formatted = self.format(parsed)
        except ValueError:
            return None
        return parsed if formatted == text else None
