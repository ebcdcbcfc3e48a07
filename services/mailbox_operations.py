from __future__ import annotations

import logging
import math
from typing import List, Optional

from models.draft import DraftRequest
from models.email_message import EmailSummary, ThreadMessage
from models.mime_part import parse_mime_part
from models.results import CategorizeResult, DraftReplyResult, ThreadContentResult, UnreadEmailsResult
from services.body_extractor import extract_body
from services.draft_composer import compose_draft
from services.label_resolver import LabelResolver
from services.mail_provider import MailProvider
from services.summary_builder import SUMMARY_HEADERS, build_summary, get_header

LOGGER = logging.getLogger(__name__)
UNREAD_QUERY = "is:unread"
DEFAULT_LIST_LIMIT = 10
MAX_LIST_LIMIT = 20


def effective_limit(limit: Optional[float]) -> int:
    requested = DEFAULT_LIST_LIMIT if limit is None or math.isnan(limit) else limit
    return int(max(0, min(requested, MAX_LIST_LIMIT)))


class MailboxOperations:
    """The operations offered to the agent runtime.

    Each public method is an error boundary: any failure is logged once and
    turned into an empty or unsuccessful result instead of an exception.
    """

    def __init__(self, provider: MailProvider, body_depth: int = 1):
        self._provider = provider
        self._labels = LabelResolver(provider)
        self._body_depth = body_depth

    def list_unread_emails(self, limit: Optional[float] = None) -> UnreadEmailsResult:
        try:
            count = effective_limit(limit)
            if count == 0:
                return UnreadEmailsResult()
            summaries: List[EmailSummary] = []
            for message in self._provider.list_messages(UNREAD_QUERY, count)[:count]:
                message_id = message.get("id")
                if not message_id:
                    continue
                details = self._provider.get_message_metadata(message_id, SUMMARY_HEADERS)
                summaries.append(
                    build_summary(
                        message_id,
                        message.get("threadId"),
                        details.get("headers"),
                        details.get("snippet"),
                    )
                )
            return UnreadEmailsResult(emails=summaries)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error listing unread emails")
            return UnreadEmailsResult()

    def get_thread_content(self, thread_id: str) -> ThreadContentResult:
        try:
            messages = [
                ThreadMessage(
                    sender=get_header(message.get("headers"), "From"),
                    body=extract_body(
                        parse_mime_part(message.get("payload")),
                        message.get("snippet"),
                        max_depth=self._body_depth,
                    ),
                    date=get_header(message.get("headers"), "Date"),
                )
                for message in self._provider.get_thread(thread_id)
            ]
            return ThreadContentResult(messages=messages)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error getting thread %s", thread_id)
            return ThreadContentResult()

    def draft_reply(
        self,
        thread_id: str,
        to: str,
        subject: str,
        body: str,
        message_id: Optional[str] = None,
    ) -> DraftReplyResult:
        try:
            draft = compose_draft(
                DraftRequest(thread_id=thread_id, to=to, subject=subject, body=body, message_id=message_id)
            )
            draft_id = self._provider.create_draft(draft.thread_id, draft.raw)
            return DraftReplyResult(success=True, draft_id=draft_id or None)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error drafting reply in thread %s", thread_id)
            return DraftReplyResult(success=False)

    def categorize_thread(self, thread_id: str, label_name: str) -> CategorizeResult:
        try:
            resolution = self._labels.resolve(label_name)
            if not resolution.found:
                return CategorizeResult(success=False)
            LOGGER.info("Adding %s label %s to thread %s", resolution.source, resolution.label_id, thread_id)
            self._provider.modify_thread_labels(thread_id, [resolution.label_id])
            return CategorizeResult(success=True)
        except Exception:  # noqa: BLE001
            LOGGER.exception("Error categorizing thread %s", thread_id)
            return CategorizeResult(success=False)
