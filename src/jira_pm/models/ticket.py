"""Ticket records returned by the Jira operations."""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass
class Comment:
    author: str
    created_at: str
    body: str


@dataclass
class TicketRecord:
    """Full view of one issue, as returned by read."""

    key: str
    summary: str
    status: str
    priority: str
    issue_type: str
    created_at: str
    updated_at: str
    url: str
    project: Optional[str] = None
    assignee: Optional[str] = None
    assignee_email: Optional[str] = None
    reporter: Optional[str] = None
    labels: list[str] = field(default_factory=list)
    components: list[str] = field(default_factory=list)
    fix_versions: list[str] = field(default_factory=list)
    description: str = ""
    comments: list[Comment] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TicketSummary:
    """One row of a ticket listing."""

    key: str
    summary: str
    status: str
    assignee: str
    priority: str
    issue_type: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    assignee_email: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TicketList:
    total: int
    tickets: list[TicketSummary]
    query: str

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "tickets": [t.to_dict() for t in self.tickets],
            "query": self.query,
        }


@dataclass
class CreatedTicket:
    key: str
    id: str
    url: str
    self_url: Optional[str] = None

    @property
    def project(self) -> str:
        return self.key.split("-")[0]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class UpdatedTicket:
    key: str
    url: str
    updated_fields: list[str]

    def to_dict(self) -> dict:
        return asdict(self)
