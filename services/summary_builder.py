from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from models.email_message import EmailSummary

DEFAULT_SUBJECT = "(No Subject)"
DEFAULT_SENDER = "Unknown"
DEFAULT_DATE = ""
SUMMARY_HEADERS = ("Subject", "From", "Date")


def get_header(headers: Optional[Sequence[Any]], name: str) -> str:
    """Return the value of the first header called exactly ``name``, or ``""``."""

    for header in headers or []:
        if isinstance(header, Mapping) and header.get("name") == name:
            value = header.get("value")
            return value if isinstance(value, str) else ""
    return ""


def build_summary(
    message_id: str,
    thread_id: Optional[str],
    headers: Optional[Sequence[Any]],
    snippet: Optional[str],
) -> EmailSummary:
    return EmailSummary(
        id=message_id,
        thread_id=thread_id or "",
        subject=get_header(headers, "Subject") or DEFAULT_SUBJECT,
        sender=get_header(headers, "From") or DEFAULT_SENDER,
        snippet=snippet or "",
        date=get_header(headers, "Date") or DEFAULT_DATE,
    )
