from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Sequence

import pytest

from models.label import Label


def b64url(text: str) -> str:
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


class FakeProvider:
    """In-memory MailProvider that records every call."""

    def __init__(
        self,
        messages: Optional[List[Dict[str, Any]]] = None,
        metadata: Optional[Dict[str, Dict[str, Any]]] = None,
        threads: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        labels: Optional[List[Label]] = None,
        draft_id: Optional[str] = "r-123",
    ):
        self.messages = messages or []
        self.metadata = metadata or {}
        self.threads = threads or {}
        self.labels = labels or []
        self.draft_id = draft_id
        self.calls: List[tuple] = []
        self.drafts: List[tuple] = []
        self.modified: List[tuple] = []
        self.error: Optional[Exception] = None

    def _record(self, *call: Any) -> None:
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    def list_messages(self, query: str, max_results: int) -> List[Dict[str, Any]]:
        self._record("list_messages", query, max_results)
        return self.messages[:max_results]

    def get_message_metadata(self, message_id: str, header_names: Sequence[str]) -> Dict[str, Any]:
        self._record("get_message_metadata", message_id, tuple(header_names))
        return self.metadata.get(message_id, {})

    def get_thread(self, thread_id: str) -> List[Dict[str, Any]]:
        self._record("get_thread", thread_id)
        return self.threads.get(thread_id, [])

    def create_draft(self, thread_id: str, raw: str) -> Optional[str]:
        self._record("create_draft", thread_id)
        self.drafts.append((thread_id, raw))
        return self.draft_id

    def list_labels(self) -> List[Label]:
        self._record("list_labels")
        return list(self.labels)

    def modify_thread_labels(self, thread_id: str, add_label_ids: Sequence[str]) -> None:
        self._record("modify_thread_labels", thread_id)
        self.modified.append((thread_id, list(add_label_ids)))

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider(labels=[Label(id="Label_12", name="Work"), Label(id="Label_7", name="Receipts")])
