from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TicketType(Enum):
    STORY = "Story"
    BUG = "Bug"
    TASK = "Task"
    EPIC = "Epic"

    @classmethod
    def parse(cls, name: str | None) -> TicketType:
        """Map an issue type name to a TicketType; unknown names become Task."""
        lowered = (name or "").strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        return cls.TASK

    @property
    def emoji(self) -> str:
        return TYPE_EMOJI[self]


TYPE_EMOJI = {
    TicketType.BUG: "🐛",
    TicketType.STORY: "📖",
    TicketType.TASK: "✓",
    TicketType.EPIC: "🎯",
}


@dataclass
class Comment:
    author: str
    created: str
    body: str


@dataclass
class Ticket:
    key: str
    ticket_type: TicketType
    summary: str
    status: str  # raw status name as returned by JIRA
    assignee: str  # "" or "unassigned" means nobody
    # Extended fields, only populated by a detail fetch
    description: str | None = None
    priority: str | None = None
    reporter: str | None = None
    created: str | None = None
    updated: str | None = None
    labels: list[str] | None = None
    comments: list[Comment] | None = field(default=None)

    @property
    def has_details(self) -> bool:
        """True once a detail fetch has populated the extended fields."""
        return any(
            value is not None
            for value in (
                self.description,
                self.priority,
                self.reporter,
                self.created,
                self.updated,
                self.labels,
                self.comments,
            )
        )

    @property
    def assignee_name(self) -> str | None:
        """Local part of the assignee (before any '@'), or None if unassigned."""
        if not self.assignee or self.assignee == "unassigned":
            return None
        return self.assignee.split("@", 1)[0]
