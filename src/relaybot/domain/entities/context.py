"""Conversation context entities."""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

DEFAULT_CONTEXT_CAPACITY = 19


class Role(Enum):
    """Role of a turn in the conversation.

    The value is the label used when the turn is flattened into a prompt.
    """

    PERSONA = "System"
    USER = "User"
    ASSISTANT = "Assistant"

    @property
    def label(self) -> str:
        """Prompt label for this role."""
        return self.value


@dataclass(frozen=True)
class ContextEntry:
    """A single turn in the conversation.

    Attributes:
        role: Who produced the turn.
        content: Text of the turn. User turns carry the speaker prefix.
    """

    role: Role
    content: str

    @classmethod
    def user(cls, identity: str, text: str) -> "ContextEntry":
        """Create a user turn prefixed with the speaker's identity.

        Args:
            identity: Speaker nick.
            text: Cleaned message text.

        Returns:
            ContextEntry with role USER and content "<identity>: <text>".
        """
        return cls(role=Role.USER, content=f"{identity}: {text}")

    @classmethod
    def assistant(cls, text: str) -> "ContextEntry":
        """Create an assistant turn."""
        return cls(role=Role.ASSISTANT, content=text)

    def render(self) -> str:
        """Render the entry as one prompt line (with trailing newline)."""
        return f"{self.role.label}: {self.content}\n"


class ConversationWindow:
    """Capacity-bounded conversation history.

    Holds an optional persona entry pinned at index 0 followed by user and
    assistant turns in insertion order. When an append pushes the window
    past its capacity, the oldest turns are dropped and the persona is kept.
    """

    ASSISTANT_CUE = f"{Role.ASSISTANT.label}: "

    def __init__(
        self,
        persona: str | None = None,
        capacity: int = DEFAULT_CONTEXT_CAPACITY,
    ) -> None:
        """Initialize the window.

        Args:
            persona: Persona text. None disables persona mode; any string,
                including an empty one, is pinned as the persona entry.
            capacity: Maximum number of entries, persona included.

        Raises:
            ValueError: If capacity leaves no room for a turn.
        """
        minimum = 2 if persona is not None else 1
        if capacity < minimum:
            raise ValueError(
                f"capacity must be at least {minimum}, got {capacity}"
            )
        self._capacity = capacity
        self._has_persona = persona is not None
        self._entries: list[ContextEntry] = []
        if persona is not None:
            self._entries.append(ContextEntry(role=Role.PERSONA, content=persona))

    @classmethod
    def initialize(
        cls,
        persona_text: str,
        capacity: int = DEFAULT_CONTEXT_CAPACITY,
    ) -> "ConversationWindow":
        """Create a window from configured persona text.

        Empty persona text starts an empty window without persona mode.
        """
        return cls(persona=persona_text or None, capacity=capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def has_persona(self) -> bool:
        return self._has_persona

    @property
    def entries(self) -> tuple[ContextEntry, ...]:
        """Snapshot of the current entries, oldest first."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ContextEntry]:
        return iter(self.entries)

    def append(self, entry: ContextEntry) -> None:
        """Append a turn, evicting the oldest turns past capacity.

        Args:
            entry: User or assistant entry.

        Raises:
            ValueError: If entry is a persona entry.
        """
        if entry.role is Role.PERSONA:
            raise ValueError("persona entry can only be set at initialization")

        entries = [*self._entries, entry]
        if len(entries) > self._capacity:
            if self._has_persona:
                keep = self._capacity - 1
                entries = [entries[0], *entries[-keep:]]
            else:
                entries = entries[-self._capacity :]
        # Rebuilt and swapped in one step, never trimmed in place
        self._entries = entries

    def add_user_turn(self, identity: str, text: str) -> ContextEntry:
        """Append a user turn and return it."""
        entry = ContextEntry.user(identity, text)
        self.append(entry)
        return entry

    def add_assistant_turn(self, text: str) -> ContextEntry:
        """Append an assistant turn and return it."""
        entry = ContextEntry.assistant(text)
        self.append(entry)
        return entry

    def serialize(self) -> str:
        """Flatten the window into a single prompt.

        Returns:
            One "<Label>: <content>" line per entry followed by the
            "Assistant: " continuation cue.
        """
        return "".join(entry.render() for entry in self._entries) + self.ASSISTANT_CUE
