from __future__ import annotations

import base64
import logging

import pytest

from services.mailbox_operations import MailboxOperations, effective_limit

from conftest import FakeProvider, b64url


def _listing(count: int) -> FakeProvider:
    messages = [{"id": f"m{i}", "threadId": f"t{i}"} for i in range(count)]
    metadata = {
        f"m{i}": {
            "headers": [{"name": "Subject", "value": f"Subject {i}"}, {"name": "From", "value": "a@b.com"}],
            "snippet": f"snippet {i}",
        }
        for i in range(count)
    }
    return FakeProvider(messages=messages, metadata=metadata)


@pytest.mark.parametrize(
    ("limit", "expected"),
    [
        (None, 10),
        (5, 5),
        (20, 20),
        (50, 20),
        (0, 0),
        (-3, 0),
        (7.9, 7),
        (float("inf"), 20),
        (float("-inf"), 0),
        (float("nan"), 10),
    ],
)
def test_effective_limit(limit, expected) -> None:
    assert effective_limit(limit) == expected


def test_list_unread_emails_uses_default_limit_and_order() -> None:
    provider = _listing(30)
    result = MailboxOperations(provider).list_unread_emails()

    assert [email.id for email in result.emails] == [f"m{i}" for i in range(10)]
    assert provider.calls[0] == ("list_messages", "is:unread", 10)
    assert provider.calls[1] == ("get_message_metadata", "m0", ("Subject", "From", "Date"))
    first = result.to_dict()["emails"][0]
    assert first == {
        "id": "m0",
        "threadId": "t0",
        "subject": "Subject 0",
        "from": "a@b.com",
        "snippet": "snippet 0",
        "date": "",
    }


def test_list_unread_emails_caps_at_twenty() -> None:
    provider = _listing(30)
    result = MailboxOperations(provider).list_unread_emails(limit=100)
    assert len(result.emails) == 20
    assert provider.calls[0] == ("list_messages", "is:unread", 20)


def test_list_unread_emails_with_zero_limit_skips_provider() -> None:
    provider = _listing(3)
    assert MailboxOperations(provider).list_unread_emails(limit=0).emails == []
    assert provider.calls == []


def test_list_unread_emails_skips_records_without_id() -> None:
    provider = _listing(2)
    provider.messages.insert(1, {"threadId": "orphan"})
    result = MailboxOperations(provider).list_unread_emails(limit=5)
    assert [email.id for email in result.emails] == ["m0", "m1"]


def test_list_unread_emails_degrades_on_provider_error(caplog) -> None:
    provider = _listing(3)
    provider.error = RuntimeError("network down")
    with caplog.at_level(logging.ERROR):
        result = MailboxOperations(provider).list_unread_emails()
    assert result.to_dict() == {"emails": []}
    assert len([r for r in caplog.records if "Error listing unread emails" in r.getMessage()]) == 1


def test_get_thread_content_extracts_each_message() -> None:
    provider = FakeProvider(
        threads={
            "t1": [
                {
                    "payload": {
                        "mimeType": "multipart/alternative",
                        "parts": [
                            {"mimeType": "text/html", "body": {"data": b64url("<b>Hi</b>")}},
                            {"mimeType": "text/plain", "body": {"data": b64url("Hi")}},
                        ],
                    },
                    "headers": [{"name": "From", "value": "x@y.z"}, {"name": "Date", "value": "today"}],
                    "snippet": "Hi",
                },
                {"payload": {"mimeType": "text/html"}, "headers": [], "snippet": "only a snippet"},
            ]
        }
    )
    result = MailboxOperations(provider).get_thread_content("t1")
    assert result.to_dict() == {
        "messages": [
            {"from": "x@y.z", "body": "Hi", "date": "today"},
            {"from": "", "body": "only a snippet", "date": ""},
        ]
    }


def test_get_thread_content_degrades_on_error() -> None:
    provider = FakeProvider()
    provider.error = RuntimeError("404")
    assert MailboxOperations(provider).get_thread_content("missing").messages == []


def test_draft_reply_submits_encoded_message() -> None:
    provider = FakeProvider(draft_id="r-99")
    result = MailboxOperations(provider).draft_reply("t1", "a@b.com", "Re: Hi", "Thanks!")

    assert result.to_dict() == {"success": True, "draftId": "r-99"}
    thread_id, raw = provider.drafts[0]
    assert thread_id == "t1"
    decoded = base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4)).decode("utf-8")
    assert decoded.startswith("To: a@b.com\r\nSubject: Re: Hi\r\nIn-Reply-To: \r\n")


def test_draft_reply_without_returned_id() -> None:
    provider = FakeProvider(draft_id=None)
    assert MailboxOperations(provider).draft_reply("t1", "a@b.com", "s", "b").to_dict() == {"success": True}


def test_draft_reply_failure() -> None:
    provider = FakeProvider()
    provider.error = RuntimeError("auth")
    assert MailboxOperations(provider).draft_reply("t1", "a@b.com", "s", "b").to_dict() == {"success": False}


def test_categorize_thread_with_system_label(provider) -> None:
    result = MailboxOperations(provider).categorize_thread("t1", "important")
    assert result.success is True
    assert provider.modified == [("t1", ["IMPORTANT"])]
    assert "list_labels" not in provider.call_names()


def test_categorize_thread_with_custom_label(provider) -> None:
    assert MailboxOperations(provider).categorize_thread("t1", "work").success is True
    assert provider.modified == [("t1", ["Label_12"])]


def test_categorize_thread_missing_label_does_not_modify(provider) -> None:
    assert MailboxOperations(provider).categorize_thread("t1", "Nonexistent").success is False
    assert provider.modified == []


def test_categorize_thread_provider_error(provider) -> None:
    provider.error = RuntimeError("rate limited")
    assert MailboxOperations(provider).categorize_thread("t1", "Work").to_dict() == {"success": False}
