"""Parser for WhatsApp-style chat export text files."""

import re
from dataclasses import dataclass, field
from datetime import date

from meal_scoring.domain.chat import SYSTEM_AUTHOR, ChatMessage

_BRACKET_HEADER = re.compile(
    r"^\[(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}),\s+(\d{1,2}:\d{2})"
    r"(?:\s*([APap][Mm]))?\]\s(.+)$"
)
_DASH_HEADER = re.compile(
    r"^(\d{1,2}[/\-]\d{1,2}[/\-]\d{2,4}),?\s+(\d{1,2}:\d{2})"
    r"(?:\s*([APap][Mm]))?\s-\s(.+)$"
)
_TWO_DIGIT_YEAR = 100
_NOON = 12


@dataclass
class _PendingMessage:
    day: date
    time: str
    author: str
    text_lines: list[str] = field(default_factory=list)
    raw_lines: list[str] = field(default_factory=list)

    def build(self) -> ChatMessage:
        return ChatMessage(
            date=self.day,
            time=self.time,
            author=self.author,
            text="\n".join(self.text_lines).strip(),
            raw="\n".join(self.raw_lines),
        )


def parse_chat_export(text: str) -> list[ChatMessage]:
    """Split an export into messages, joining continuation lines.

    Lines before the first recognised header are ignored. Dates are read
    as day/month/year and two-digit years as 20xx.
    """
    messages: list[ChatMessage] = []
    pending: _PendingMessage | None = None
    for line in text.splitlines():
        header = _parse_header(line)
        if header is not None:
            if pending is not None:
                messages.append(pending.build())
            day, time, rest = header
            author, body = _split_author(rest)
            pending = _PendingMessage(
                day=day,
                time=time,
                author=author,
                text_lines=[body],
                raw_lines=[line],
            )
        elif pending is not None:
            pending.text_lines.append(line)
            pending.raw_lines.append(line)
    if pending is not None:
        messages.append(pending.build())
    return messages


def _parse_header(line: str) -> tuple[date, str, str] | None:
    match = _BRACKET_HEADER.match(line) or _DASH_HEADER.match(line)
    if match is None:
        return None
    date_text, time_text, meridiem, rest = match.groups()
    day = _parse_date(date_text)
    if day is None:
        return None
    return day, _parse_time(time_text, meridiem), rest


def _parse_date(value: str) -> date | None:
    day_text, month_text, year_text = re.split(r"[/\-]", value)
    year = int(year_text)
    if year < _TWO_DIGIT_YEAR:
        year += 2000
    try:
        return date(year, int(month_text), int(day_text))
    except ValueError:
        return None


def _parse_time(value: str, meridiem: str | None) -> str:
    hour_text, minute_text = value.split(":")
    hour = int(hour_text)
    if meridiem:
        suffix = meridiem.lower()
        if suffix == "pm" and hour < _NOON:
            hour += _NOON
        if suffix == "am" and hour == _NOON:
            hour = 0
    return f"{hour:02d}:{int(minute_text):02d}"


def _split_author(rest: str) -> tuple[str, str]:
    author, separator, body = rest.partition(": ")
    if not separator:
        return SYSTEM_AUTHOR, rest
    return author.strip() or "Unknown", body
