"""Status ranking, colour buckets and grouping of tickets into lanes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from kanbars.models import Ticket

DEFAULT_RANK = 15

# (equals, contains, rank). First matching rule wins, so order matters:
# "in progress" must be tested before the bare "pr" review keyword.
RANK_RULES: list[tuple[tuple[str, ...], tuple[str, ...], int]] = [
    ((), ("backlog",), 0),
    (("to do",), ("todo",), 1),
    ((), ("open", "new"), 2),
    ((), ("ready for development", "ready to start"), 3),
    ((), ("in progress", "in-progress"), 10),
    ((), ("development", "in dev"), 11),
    ((), ("coding", "implementing"), 12),
    ((), ("ready to ship", "ready for deploy"), 15),
    ((), ("review", "pr"), 20),
    ((), ("testing", "qa"), 21),
    ((), ("verification", "approval"), 22),
    ((), ("staging",), 23),
    ((), ("done",), 30),
    ((), ("closed",), 31),
    ((), ("resolved",), 32),
    ((), ("shipped", "deployed"), 33),
    ((), ("complete",), 34),
]


class Bucket(Enum):
    TODO = "todo"
    PROGRESS = "progress"
    REVIEW = "review"
    DONE = "done"


# Coarser than RANK_RULES and deliberately independent of it.
BUCKET_RULES: list[tuple[tuple[str, ...], tuple[str, ...], Bucket]] = [
    (
        (),
        ("done", "closed", "resolved", "shipped", "deployed", "complete"),
        Bucket.DONE,
    ),
    (
        ("development",),
        (
            "progress",
            "in dev",
            "coding",
            "implementing",
            "ready to ship",
            "ready for deploy",
        ),
        Bucket.PROGRESS,
    ),
    (
        (),
        ("review", "testing", "qa", "verification", "approval", "staging"),
        Bucket.REVIEW,
    ),
    (("to do",), ("todo", "backlog", "open", "new", "ready"), Bucket.TODO),
]

BUCKET_COLORS = {
    Bucket.TODO: "cyan",
    Bucket.PROGRESS: "yellow",
    Bucket.REVIEW: "magenta",
    Bucket.DONE: "green",
}

BUCKET_EMOJI = {
    Bucket.TODO: "📋",
    Bucket.PROGRESS: "🔄",
    Bucket.REVIEW: "👀",
    Bucket.DONE: "✅",
}


def _matches(status: str, equals: tuple[str, ...], contains: tuple[str, ...]) -> bool:
    return status in equals or any(word in status for word in contains)


def status_rank(status: str) -> int:
    """Workflow position of a status; unknown statuses sort into the middle."""
    lowered = status.strip().lower()
    for equals, contains, rank in RANK_RULES:
        if _matches(lowered, equals, contains):
            return rank
    return DEFAULT_RANK


def status_bucket(status: str) -> Bucket:
    """Colour bucket of a status; unknown statuses use the todo palette."""
    lowered = status.strip().lower()
    for equals, contains, bucket in BUCKET_RULES:
        if _matches(lowered, equals, contains):
            return bucket
    return Bucket.TODO


def group_by_status(tickets: list[Ticket]) -> dict[str, list[Ticket]]:
    """Group tickets by their exact status string, groups ordered by rank.

    The sort is stable, so tickets keep their input order within a group and
    statuses sharing a rank keep the order in which they were first seen.
    """
    groups: dict[str, list[Ticket]] = {}
    for ticket in sorted(tickets, key=lambda t: status_rank(t.status)):
        groups.setdefault(ticket.status, []).append(ticket)
    return groups


@dataclass
class Lane:
    status: str
    tickets: list[Ticket] = field(default_factory=list)

    @property
    def bucket(self) -> Bucket:
        return status_bucket(self.status)

    def __len__(self) -> int:
        return len(self.tickets)


@dataclass
class Board:
    """Active (non-empty) lanes in rank order.

    Tickets are addressed by a single global index over the concatenation of
    all lanes; nothing holds on to ticket objects across refreshes.
    """

    lanes: list[Lane] = field(default_factory=list)

    @classmethod
    def from_tickets(cls, tickets: list[Ticket]) -> Board:
        return cls(
            lanes=[
                Lane(status, group)
                for status, group in group_by_status(tickets).items()
                if group
            ]
        )

    @property
    def total(self) -> int:
        return sum(len(lane) for lane in self.lanes)

    def locate(self, index: int) -> tuple[int, int] | None:
        """Map a global index to (lane index, offset within lane)."""
        if index < 0:
            return None
        offset = 0
        for lane_idx, lane in enumerate(self.lanes):
            if offset + len(lane) > index:
                return lane_idx, index - offset
            offset += len(lane)
        return None

    def resolve(self, index: int) -> Ticket | None:
        located = self.locate(index)
        if located is None:
            return None
        lane_idx, offset = located
        return self.lanes[lane_idx].tickets[offset]
