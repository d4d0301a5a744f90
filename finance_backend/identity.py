"""Identity boundary.

The rest of the system only ever sees the opaque user id returned here.
`LocalIdentityProvider` keeps accounts in a JSON file with salted password
hashes; a hosted provider would implement the same interface.
"""
from __future__ import annotations

import re
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict

from werkzeug.security import check_password_hash, generate_password_hash

from .data_model import SCENARIOS
from .data_model.values import to_number
from .engine.storage import load_json, save_json
from .errors import AuthError, NotFoundError, StoreError, ValidationError
from .logging_utils import get_logger, user_fingerprint

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PROFILE_FIELDS = (
    "displayName",
    "occupation",
    "monthlyIncome",
    "financialGoal",
    "riskProfile",
    "currency",
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def validate_new_password(password: str, confirm_password: str, min_length: int) -> None:
    if password != confirm_password:
        raise ValidationError("Passwords do not match.")
    if len(password or "") < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters.")


def default_profile(email: str, name: str) -> Dict[str, Any]:
    now = _now_iso()
    return {
        "displayName": name,
        "email": email,
        "occupation": "",
        "monthlyIncome": 0.0,
        "financialGoal": "",
        "riskProfile": "moderate",
        "currency": "BRL",
        "createdAt": now,
        "updatedAt": now,
    }


class IdentityProvider(ABC):
    @abstractmethod
    def register(self, email: str, password: str, confirm_password: str, name: str = "") -> str:
        ...

    @abstractmethod
    def sign_in(self, email: str, password: str) -> str:
        ...

    @abstractmethod
    def change_password(self, user_id: str, current_password: str, new_password: str, confirm_password: str) -> None:
        ...

    @abstractmethod
    def get_profile(self, user_id: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        ...


class LocalIdentityProvider(IdentityProvider):
    def __init__(self, users_path: str = "user_data/users.json", min_password_length: int = 6) -> None:
        self.users_path = users_path
        self.min_password_length = min_password_length
        self.users: Dict[str, dict] = load_json(users_path, {})
        self._lock = threading.RLock()

    def _save(self) -> None:
        try:
            save_json(self.users_path, self.users)
        except OSError as exc:
            raise StoreError("Could not save your account. Please try again.") from exc

    def _find_by_email(self, email: str) -> tuple[str, dict] | None:
        for user_id, record in self.users.items():
            if record.get("email") == email:
                return user_id, record
        return None

    def _require_user(self, user_id: str) -> dict:
        record = self.users.get(user_id)
        if record is None:
            raise NotFoundError("User not found.")
        return record

    @staticmethod
    def _normalize_email(email: str) -> str:
        clean = str(email or "").strip().lower()
        if not EMAIL_PATTERN.match(clean):
            raise AuthError("invalid-email")
        return clean

    def register(self, email: str, password: str, confirm_password: str, name: str = "") -> str:
        validate_new_password(password, confirm_password, self.min_password_length)
        clean_email = self._normalize_email(email)
        password_hash = generate_password_hash(password)
        with self._lock:
            if self._find_by_email(clean_email) is not None:
                logger.info("registration rejected: email already in use")
                raise AuthError("email-already-in-use")

            user_id = uuid.uuid4().hex
            self.users[user_id] = {
                "email": clean_email,
                "passwordHash": password_hash,
                "profile": default_profile(clean_email, str(name or "").strip()),
            }
            self._save()
        logger.info("user registered user=%s", user_fingerprint(user_id))
        return user_id

    def sign_in(self, email: str, password: str) -> str:
        clean_email = self._normalize_email(email)
        found = self._find_by_email(clean_email)
        if found is None:
            raise AuthError("user-not-found")
        user_id, record = found
        if not check_password_hash(record.get("passwordHash", ""), password or ""):
            logger.warning("sign-in failed user=%s", user_fingerprint(user_id))
            raise AuthError("wrong-password")
        return user_id

    def change_password(self, user_id: str, current_password: str, new_password: str, confirm_password: str) -> None:
        record = self._require_user(user_id)
        validate_new_password(new_password, confirm_password, self.min_password_length)
        if not check_password_hash(record.get("passwordHash", ""), current_password or ""):
            raise AuthError("wrong-password")
        password_hash = generate_password_hash(new_password)
        with self._lock:
            record["passwordHash"] = password_hash
            self._save()

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        record = self._require_user(user_id)
        return dict(record.get("profile") or default_profile(record["email"], ""))

    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        record = self._require_user(user_id)
        profile = self.get_profile(user_id)
        for key in PROFILE_FIELDS:
            if key in changes:
                profile[key] = changes[key]

        profile["displayName"] = str(profile.get("displayName") or "").strip()
        risk = str(profile.get("riskProfile") or "moderate").strip().lower()
        if risk not in SCENARIOS:
            raise ValidationError(f"Risk profile must be one of: {', '.join(SCENARIOS)}.")
        profile["riskProfile"] = risk
        income = to_number(profile.get("monthlyIncome"), "Monthly income", default=0.0)
        if income < 0:
            raise ValidationError("Monthly income cannot be negative.")
        profile["monthlyIncome"] = income

        with self._lock:
            if "email" in changes and changes["email"]:
                clean_email = self._normalize_email(changes["email"])
                owner = self._find_by_email(clean_email)
                if owner is not None and owner[0] != user_id:
                    raise AuthError("email-already-in-use")
                record["email"] = clean_email
                profile["email"] = clean_email

            profile["updatedAt"] = _now_iso()
            record["profile"] = profile
            self._save()
        return dict(profile)
