from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True, frozen=True)
class DraftRequest:
    """Reply content supplied by the caller.

    A missing ``message_id`` means "reply to the last message in the thread";
    resolving that is left to the caller.
    """

    thread_id: str
    to: str
    subject: str
    body: str
    message_id: Optional[str] = None


@dataclass(slots=True, frozen=True)
class RawDraft:
    thread_id: str
    message: str
    raw: str
