"""Command grammar and natural language date parsing for taskline."""

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

import parsedatetime
from fuzzywuzzy import fuzz, process

from .commands import (
    AddDeadline,
    AddEvent,
    AddRecurring,
    AddTodo,
    Command,
    Delete,
    Echo,
    Find,
    ListTasks,
    Mark,
    Unmark,
)
from .exceptions import InvalidInterval, MalformedCommand
from .utils.datetime import ensure_naive, round_to_seconds


logger = logging.getLogger(__name__)

WRONG_FORMAT = "That's the wrong format!"
BAD_DATE = "Dates should look like 2024-12-01T10:00 or 'next friday 3pm'"
BAD_INTERVAL = "Intervals should look like '3 days', 'week' or 'daily'"
UNKNOWN_COMMAND = "I don't know what you mean."


class DateResolver:
    """Resolves free text such as ``next friday 3pm`` to a single datetime."""

    EXPLICIT_FORMATS = [
        "%Y-%m-%d %H%M",
        "%d/%m/%Y %H%M",
        "%d/%m/%Y",
    ]

    def __init__(self):
        self.cal = parsedatetime.Calendar()

    def resolve(self, text: str, source: Optional[datetime] = None) -> Optional[datetime]:
        """Parse ``text`` into a naive local datetime, or None if it can't be read."""
        if not text or not text.strip():
            return None

        text = text.strip()

        # Exact ISO first so the command log always reads back unchanged
        try:
            parsed = datetime.fromisoformat(text)
            return ensure_naive(parsed)
        except ValueError:
            pass

        for fmt in self.EXPLICIT_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

        source_struct = source.timetuple() if source else None
        time_struct, parse_status = self.cal.parse(text, source_struct)
        if parse_status > 0:
            try:
                parsed = datetime(*time_struct[:6])
            except ValueError:
                logger.debug(f"Resolved '{text}' to an impossible date")
                return None
            logger.debug(f"Resolved '{text}' to {parsed.isoformat()}")
            return parsed

        # Partial matches: take the first, earliest-ranked candidate
        candidates = self.cal.nlp(text, source_struct)
        if candidates:
            parsed = candidates[0][0].replace(microsecond=0)
            logger.debug(f"Resolved '{text}' to {parsed.isoformat()} from {len(candidates)} candidate(s)")
            return parsed

        logger.debug(f"Could not resolve '{text}' as a date")
        return None


class RecurrenceResolver:
    """Resolves phrases such as ``every 2 weeks`` to a fixed interval."""

    UNIT_SECONDS = {
        "second": 1,
        "minute": 60,
        "hour": 3600,
        "day": 24 * 3600,
        "week": 7 * 24 * 3600,
        "fortnight": 14 * 24 * 3600,
        "month": 30 * 24 * 3600,
        "year": 365 * 24 * 3600,
    }

    UNIT_ALIASES = {
        "s": "second", "sec": "second", "secs": "second",
        "m": "minute", "min": "minute", "mins": "minute",
        "h": "hour", "hr": "hour", "hrs": "hour",
        "d": "day",
        "w": "week", "wk": "week", "wks": "week",
        "mo": "month", "mon": "month", "mos": "month",
        "y": "year", "yr": "year", "yrs": "year",
    }

    ADVERBS = {
        "hourly": "hour",
        "daily": "day",
        "weekly": "week",
        "fortnightly": "fortnight",
        "monthly": "month",
        "yearly": "year",
        "annually": "year",
    }

    WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

    PATTERN = re.compile(r"^(?P<count>[+-]?\d+(?:\.\d+)?|other)?\s*(?P<unit>[a-z]+)$")

    # Fixed reference instant for relative offsets, so results are repeatable
    REFERENCE = datetime(2000, 1, 3)

    def __init__(self):
        self.cal = parsedatetime.Calendar()

    def _unit(self, word: str) -> Optional[str]:
        word = self.UNIT_ALIASES.get(word, word)
        if word in self.UNIT_SECONDS:
            return word
        if word.endswith("s") and word[:-1] in self.UNIT_SECONDS:
            return word[:-1]
        return None

    def resolve(self, phrase: str) -> Optional[timedelta]:
        """Return the interval for ``phrase`` rounded to whole seconds, or None.

        The interval may be zero or negative; rejecting those is left to
        the caller.
        """
        phrase = " ".join(phrase.lower().split())
        if phrase.startswith("every"):
            phrase = phrase[len("every"):].strip()
        if not phrase:
            return None

        if phrase in self.ADVERBS:
            return timedelta(seconds=self.UNIT_SECONDS[self.ADVERBS[phrase]])

        if phrase.rstrip("s") in self.WEEKDAYS:
            return timedelta(seconds=self.UNIT_SECONDS["week"])

        match = self.PATTERN.match(phrase)
        if match:
            unit = self._unit(match.group("unit"))
            if unit:
                count = match.group("count")
                if count is None:
                    amount = 1.0
                elif count == "other":
                    amount = 2.0
                else:
                    amount = float(count)
                try:
                    return round_to_seconds(timedelta(seconds=amount * self.UNIT_SECONDS[unit]))
                except (OverflowError, ValueError):
                    logger.debug(f"Interval '{phrase}' is out of range")
                    return None

        # Spelled-out phrases ("two days") via parsedatetime relative offsets
        time_struct, parse_status = self.cal.parse(phrase, self.REFERENCE.timetuple())
        if parse_status > 0:
            try:
                offset = datetime(*time_struct[:6]) - self.REFERENCE
            except (OverflowError, ValueError):
                logger.debug(f"Interval '{phrase}' is out of range")
                return None
            logger.debug(f"Resolved interval '{phrase}' to {offset}")
            return round_to_seconds(offset)

        logger.debug(f"Could not resolve '{phrase}' as an interval")
        return None


class CommandParser:
    """Turns one line of user input into a typed Command."""

    def __init__(self, date_resolver: Optional[DateResolver] = None,
                 recurrence_resolver: Optional[RecurrenceResolver] = None):
        self.date_resolver = date_resolver or DateResolver()
        self.recurrence_resolver = recurrence_resolver or RecurrenceResolver()
        self.handlers: Dict[str, Callable[[Optional[str]], Command]] = {
            "todo": self._parse_todo,
            "deadline": self._parse_deadline,
            "event": self._parse_event,
            "recurring": self._parse_recurring,
            "list": self._parse_list,
            "mark": self._parse_mark,
            "unmark": self._parse_unmark,
            "delete": self._parse_delete,
            "find": self._parse_find,
            "echo": self._parse_echo,
        }

    @property
    def keywords(self) -> List[str]:
        return list(self.handlers)

    def parse(self, line: str) -> Command:
        """Parse ``line``.

        Raises:
            MalformedCommand: if the line breaks the grammar.
            InvalidInterval: if a recurrence interval is not positive.
        """
        if not line or not line.strip():
            raise MalformedCommand("Say something first!")
        if len(line.splitlines()) > 1:
            raise MalformedCommand("One command per line, please!")

        parts = line.strip().split(maxsplit=1)
        keyword = parts[0].lower()
        rest = parts[1] if len(parts) > 1 else None

        handler = self.handlers.get(keyword)
        if handler is None:
            raise MalformedCommand(self._unknown_reason(keyword), token=parts[0])

        command = handler(rest)
        logger.debug(f"Parsed '{line.strip()}' as {command!r}")
        return command

    def _unknown_reason(self, keyword: str) -> str:
        best = process.extractOne(keyword, self.keywords, scorer=fuzz.ratio, score_cutoff=70)
        if best:
            return f"{UNKNOWN_COMMAND} Did you mean '{best[0]}'?"
        return UNKNOWN_COMMAND

    def _split(self, rest: Optional[str], delimiters: str, count: int) -> List[str]:
        """Split ``rest`` on ``delimiters`` into exactly ``count`` stripped parts."""
        if rest is None:
            raise MalformedCommand(WRONG_FORMAT)

        pieces = [piece.strip() for piece in re.split(delimiters, rest, maxsplit=count - 1)]
        if len(pieces) != count:
            raise MalformedCommand(WRONG_FORMAT)
        if not pieces[0]:
            raise MalformedCommand("The description can't be empty!")
        return pieces

    def _date(self, text: str) -> datetime:
        resolved = self.date_resolver.resolve(text)
        if resolved is None:
            raise MalformedCommand(BAD_DATE, token=text)
        return resolved

    def _index(self, rest: Optional[str]) -> int:
        if rest is None:
            raise MalformedCommand(WRONG_FORMAT)

        token = rest.strip()
        if not re.fullmatch(r"[0-9]+", token):
            raise MalformedCommand(f"'{token}' isn't a number!", token=token)
        return int(token) - 1

    def _parse_todo(self, rest: Optional[str]) -> AddTodo:
        if rest is None or not rest.strip():
            raise MalformedCommand(WRONG_FORMAT)
        return AddTodo(rest.strip())

    def _parse_deadline(self, rest: Optional[str]) -> AddDeadline:
        description, when = self._split(rest, r"/by", 2)
        return AddDeadline(description, self._date(when))

    def _parse_event(self, rest: Optional[str]) -> AddEvent:
        description, start, end = self._split(rest, r"/from|/to", 3)
        starts_at = self._date(start)
        ends_at = self._date(end)
        if starts_at > ends_at:
            raise MalformedCommand("An event can't end before it starts!")
        return AddEvent(description, starts_at, ends_at)

    def _parse_recurring(self, rest: Optional[str]) -> AddRecurring:
        description, on, every = self._split(rest, r"/on|/at|/every", 3)
        anchor_at = self._date(on)

        interval = self.recurrence_resolver.resolve(f"every {every}")
        if interval is None:
            raise MalformedCommand(BAD_INTERVAL, token=every)
        if interval <= timedelta(0):
            raise InvalidInterval()
        return AddRecurring(description, anchor_at, interval)

    def _parse_list(self, rest: Optional[str]) -> ListTasks:
        return ListTasks()

    def _parse_mark(self, rest: Optional[str]) -> Mark:
        return Mark(self._index(rest), True)

    def _parse_unmark(self, rest: Optional[str]) -> Unmark:
        return Unmark(self._index(rest))

    def _parse_delete(self, rest: Optional[str]) -> Delete:
        return Delete(self._index(rest))

    def _parse_find(self, rest: Optional[str]) -> Find:
        return Find((rest or "").strip())

    def _parse_echo(self, rest: Optional[str]) -> Echo:
        if rest is None:
            raise MalformedCommand(WRONG_FORMAT)
        return Echo(rest.strip())


_default_parser: Optional[CommandParser] = None


def parse_command(line: str) -> Command:
    """Parse ``line`` with a shared default CommandParser."""
    global _default_parser
    if _default_parser is None:
        _default_parser = CommandParser()
    return _default_parser.parse(line)
