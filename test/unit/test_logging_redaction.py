from __future__ import annotations

from desk_api_client.observability.logger import _scrub_event_dict


def test_logger_scrubs_secrets_from_exception_strings() -> None:
    event = {
        "event": "test",
        "exception": "RuntimeError: Authorization: Bearer abc123",
    }
    scrubbed = _scrub_event_dict(None, "", dict(event))
    assert "abc123" not in scrubbed["exception"]


def test_logger_scrubs_oauth_signature_from_request_urls() -> None:
    event = {
        "event": "desk.request.failed",
        "path": "attachments/1?oauth_token=at&oauth_signature=sig",
        "consumer_secret": "cs",
    }
    scrubbed = _scrub_event_dict(None, "", dict(event))
    assert "sig" not in scrubbed["path"].split("oauth_signature=", 1)[1]
    assert "=at&" not in scrubbed["path"]
    assert scrubbed["consumer_secret"] == "[redacted]"
