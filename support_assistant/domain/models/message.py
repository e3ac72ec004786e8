from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterator, List, Any
from enum import Enum

PROCESSING_TEXT = "Procesando..."


class MessageRole(str, Enum):
    USER = "user"
    BOT = "bot"


@dataclass(frozen=True)
class Message:
    """
    A single chat message. Messages are never edited once appended;
    the transcript swaps the processing placeholder for a new instance.
    """
    role: MessageRole
    text: str
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_placeholder(self) -> bool:
        return self.role == MessageRole.BOT and self.text == PROCESSING_TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "text": self.text,
            "created_at": self.created_at.isoformat()
        }


class Transcript:
    """
    Append-only ordered conversation log.

    The only in-place edit allowed is replacing the trailing processing
    placeholder with the final bot reply once resolution completes.
    """

    def __init__(self):
        self._messages: List[Message] = []

    def append(self, role: MessageRole, text: str) -> Message:
        message = Message(role=role, text=text)
        self._messages.append(message)
        return message

    def add_user(self, text: str) -> Message:
        return self.append(MessageRole.USER, text)

    def add_bot(self, text: str) -> Message:
        return self.append(MessageRole.BOT, text)

    def begin_processing(self) -> Message:
        """Append the placeholder bot message shown while a request is in flight."""
        return self.add_bot(PROCESSING_TEXT)

    def complete(self, text: str) -> Message:
        """
        Finalize the current bot turn.

        Replaces the trailing placeholder if there is one, otherwise appends
        a new bot message.

        Args:
            text: Final reply text

        Returns:
            The final bot message
        """
        final = Message(role=MessageRole.BOT, text=text)
        if self._messages and self._messages[-1].is_placeholder:
            self._messages[-1] = final
        else:
            self._messages.append(final)
        return final

    @property
    def messages(self) -> List[Message]:
        return list(self._messages)

    @property
    def last(self) -> Message:
        return self._messages[-1]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))
