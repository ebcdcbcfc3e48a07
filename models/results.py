from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.email_message import EmailSummary, ThreadMessage


@dataclass(slots=True)
class UnreadEmailsResult:
    emails: List[EmailSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"emails": [email.to_dict() for email in self.emails]}


@dataclass(slots=True)
class ThreadContentResult:
    messages: List[ThreadMessage] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"messages": [message.to_dict() for message in self.messages]}


@dataclass(slots=True)
class DraftReplyResult:
    success: bool
    draft_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": self.success}
        if self.draft_id is not None:
            payload["draftId"] = self.draft_id
        return payload


@dataclass(slots=True)
class CategorizeResult:
    success: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success}
