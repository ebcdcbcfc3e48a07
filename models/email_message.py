from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(slots=True, frozen=True)
class EmailSummary:
    """Compact listing view of a Gmail message."""

    id: str
    thread_id: str
    subject: str
    sender: str
    snippet: str
    date: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "threadId": self.thread_id,
            "subject": self.subject,
            "from": self.sender,
            "snippet": self.snippet,
            "date": self.date,
        }


@dataclass(slots=True, frozen=True)
class ThreadMessage:
    """One message of a thread with its decoded, truncated body."""

    sender: str
    body: str
    date: str

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.sender, "body": self.body, "date": self.date}
