from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from models.label import Label


class MailProvider(Protocol):
    """Abstract Gmail-style mailbox.

    Message records use Gmail's JSON shapes: listings carry ``id`` and
    ``threadId``; metadata carries ``headers`` and ``snippet``; thread
    messages carry ``payload``, ``headers`` and ``snippet``.
    """

    def list_messages(self, query: str, max_results: int) -> List[Dict[str, Any]]:
        ...

    def get_message_metadata(self, message_id: str, header_names: Sequence[str]) -> Dict[str, Any]:
        ...

    def get_thread(self, thread_id: str) -> List[Dict[str, Any]]:
        ...

    def create_draft(self, thread_id: str, raw: str) -> Optional[str]:
        """Store ``raw`` as a draft in the thread and return the draft id."""
        ...

    def list_labels(self) -> List[Label]:
        ...

    def modify_thread_labels(self, thread_id: str, add_label_ids: Sequence[str]) -> None:
        ...
