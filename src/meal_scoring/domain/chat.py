"""Models for chat export messages."""

from dataclasses import dataclass
from datetime import date

SYSTEM_AUTHOR = "System"

# Lowercase markers of media and group-event lines, in English and Spanish.
PLACEHOLDER_TOKENS = (
    "multimedia omitido",
    "omitted",
    "imagen omitida",
    "mensajes y llamadas",
    "changed the subject",
    "cambió el asunto",
    "changed to",
    "se unió usando el enlace",
)


@dataclass(frozen=True)
class ChatMessage:
    """One message parsed from a chat export."""

    date: date
    time: str
    author: str
    text: str
    raw: str

    @property
    def is_system(self) -> bool:
        return self.author == SYSTEM_AUTHOR

    @property
    def is_placeholder(self) -> bool:
        """True for empty, media-omitted and group-event messages."""
        text = self.text.lower()
        return not text or any(token in text for token in PLACEHOLDER_TOKENS)
