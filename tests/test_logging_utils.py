import logging

from finance_backend.logging_utils import ContextFilter, set_log_context, user_fingerprint


def test_user_fingerprint_is_short_and_stable():
    first = user_fingerprint("3f2a9c0d4e5b6a7c8d9e0f1a2b3c4d5e")

    assert first == user_fingerprint("3f2a9c0d4e5b6a7c8d9e0f1a2b3c4d5e")
    assert len(first) == 12
    assert user_fingerprint(None) == "-"
    assert user_fingerprint("") == "-"


def test_log_context_holds_fingerprint_not_user_id():
    user_id = "3f2a9c0d4e5b6a7c8d9e0f1a2b3c4d5e"
    set_log_context(request_id="abc123", user_id=user_id)
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)

    ContextFilter().filter(record)

    assert record.request_id == "abc123"
    assert record.user_id == user_fingerprint(user_id)
    assert record.user_id != user_id
