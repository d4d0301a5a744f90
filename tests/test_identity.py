import json
import logging
import threading

import pytest

from finance_backend.errors import AuthError, NotFoundError, ValidationError, auth_error_message
from finance_backend.identity import LocalIdentityProvider


@pytest.fixture
def provider(tmp_path):
    return LocalIdentityProvider(str(tmp_path / "users.json"), min_password_length=6)


def test_register_and_sign_in(provider, tmp_path):
    user_id = provider.register("Ana@Example.com ", "secret1", "secret1", name="Ana")

    assert provider.sign_in("ana@example.com", "secret1") == user_id
    stored = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
    assert stored[user_id]["email"] == "ana@example.com"
    assert "secret1" not in json.dumps(stored)


def test_users_survive_reload(provider, tmp_path):
    user_id = provider.register("ana@example.com", "secret1", "secret1")

    reloaded = LocalIdentityProvider(str(tmp_path / "users.json"))

    assert reloaded.sign_in("ana@example.com", "secret1") == user_id


def test_registration_validation_runs_before_anything_is_stored(provider, tmp_path):
    with pytest.raises(ValidationError, match="do not match"):
        provider.register("ana@example.com", "secret1", "secret2")
    with pytest.raises(ValidationError, match="at least 6"):
        provider.register("ana@example.com", "abc", "abc")

    assert not (tmp_path / "users.json").exists()


@pytest.mark.parametrize(
    "email, password, code",
    [
        ("nobody@example.com", "secret1", "user-not-found"),
        ("ana@example.com", "wrong-pass", "wrong-password"),
        ("not-an-email", "secret1", "invalid-email"),
    ],
)
def test_sign_in_errors(provider, email, password, code):
    provider.register("ana@example.com", "secret1", "secret1")

    with pytest.raises(AuthError) as excinfo:
        provider.sign_in(email, password)

    assert excinfo.value.code == code
    assert excinfo.value.message == auth_error_message(code)


def test_duplicate_email(provider):
    provider.register("ana@example.com", "secret1", "secret1")

    with pytest.raises(AuthError) as excinfo:
        provider.register("ANA@example.com", "secret2", "secret2")

    assert excinfo.value.code == "email-already-in-use"
    assert excinfo.value.status_code == 409


def test_unknown_error_code_has_generic_message():
    assert auth_error_message("auth/network-request-failed") == "Could not process the request. Please try again."


def test_change_password(provider):
    user_id = provider.register("ana@example.com", "secret1", "secret1")

    with pytest.raises(AuthError):
        provider.change_password(user_id, "nope", "newsecret", "newsecret")
    with pytest.raises(ValidationError):
        provider.change_password(user_id, "secret1", "newsecret", "different")

    provider.change_password(user_id, "secret1", "newsecret", "newsecret")
    assert provider.sign_in("ana@example.com", "newsecret") == user_id


def test_profile_defaults_and_updates(provider):
    user_id = provider.register("ana@example.com", "secret1", "secret1", name="Ana")

    profile = provider.get_profile(user_id)
    assert profile["displayName"] == "Ana"
    assert profile["riskProfile"] == "moderate"
    assert profile["currency"] == "BRL"

    updated = provider.update_profile(user_id, {"occupation": "Nurse", "monthlyIncome": "4200", "riskProfile": "Aggressive", "passwordHash": "x"})
    assert updated["occupation"] == "Nurse"
    assert updated["monthlyIncome"] == 4200.0
    assert updated["riskProfile"] == "aggressive"
    assert "passwordHash" not in updated

    with pytest.raises(ValidationError):
        provider.update_profile(user_id, {"riskProfile": "reckless"})
    with pytest.raises(NotFoundError):
        provider.get_profile("ghost")


def test_concurrent_registrations_are_all_persisted(tmp_path):
    provider = LocalIdentityProvider(str(tmp_path / "users.json"))
    errors = []

    def register(index):
        try:
            provider.register(f"user{index}@example.com", "secret1", "secret1")
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=register, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    stored = json.loads((tmp_path / "users.json").read_text(encoding="utf-8"))
    assert len(stored) == 8


def test_logs_never_carry_the_raw_user_id(provider, caplog):
    caplog.set_level(logging.INFO)

    user_id = provider.register("ana@example.com", "secret1", "secret1")
    with pytest.raises(AuthError):
        provider.sign_in("ana@example.com", "wrong-secret")

    assert "user registered" in caplog.text
    assert user_id not in caplog.text
