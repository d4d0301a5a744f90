"""Snapshot persistence behind one small interface.

Local-only mode and the hosted document store are two implementations of
`SnapshotStore`; callers never branch on which one they hold.
"""
from __future__ import annotations

import json
import math
import os
import re
import tempfile
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from typing import Any, Dict

from ..config import Settings
from ..data_model import Snapshot
from ..errors import StoreError
from ..logging_utils import get_logger, user_fingerprint

logger = get_logger(__name__)

LOCAL_KEY = "financialData"


def ensure_user_data_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, list):
        return [_sanitize_json_compat(item) for item in value]
    return value


def load_json(path: str, default: Any) -> Any:
    """Read a JSON document; missing, empty or corrupt files give `default`."""
    if not os.path.exists(path):
        return default
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return default
            return _sanitize_json_compat(json.loads(raw_text))
    except (json.JSONDecodeError, OSError):
        logger.warning("unreadable json file path=%s", path)
        return default


def save_json(path: str, data: Any) -> None:
    ensure_user_data_dir(path)
    clean = _sanitize_json_compat(data)
    # One temp file per writer; concurrent saves to the same path must not share it
    fd, tmp_path = tempfile.mkstemp(dir=os.path.dirname(path) or ".", prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(clean, f, allow_nan=False)
        os.replace(tmp_path, path)
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise


class SnapshotStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Snapshot | None:
        """Return the stored snapshot, or None when nothing is stored under `key`."""

    @abstractmethod
    def put(self, key: str, snapshot: Snapshot) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class InMemorySnapshotStore(SnapshotStore):
    def __init__(self) -> None:
        self._docs: Dict[str, dict] = {}

    def get(self, key: str) -> Snapshot | None:
        doc = self._docs.get(key)
        return Snapshot.from_dict(doc) if doc is not None else None

    def put(self, key: str, snapshot: Snapshot) -> None:
        # Stored as plain dicts so callers can't alias the saved state
        self._docs[key] = _sanitize_json_compat(snapshot.to_dict())

    def delete(self, key: str) -> None:
        self._docs.pop(key, None)


class LocalSnapshotStore(SnapshotStore):
    """One JSON file per key under `base_dir`."""

    def __init__(self, base_dir: str = "user_data/snapshots") -> None:
        self.base_dir = base_dir

    def path_for(self, key: str) -> str:
        safe = re.sub(r"[^A-Za-z0-9_.-]+", "_", key).strip("._") or LOCAL_KEY
        return os.path.join(self.base_dir, f"{safe}.json")

    def get(self, key: str) -> Snapshot | None:
        data = load_json(self.path_for(key), None)
        if not isinstance(data, dict):
            return None
        return Snapshot.from_dict(data)

    def put(self, key: str, snapshot: Snapshot) -> None:
        try:
            save_json(self.path_for(key), snapshot.to_dict())
        except OSError as exc:
            raise StoreError("Could not save your data. Please try again.") from exc
        logger.info("snapshot saved key=%s expenses=%d goals=%d", user_fingerprint(key), len(snapshot.expenses), len(snapshot.goals))

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as exc:
            raise StoreError("Could not delete your data. Please try again.") from exc


class RemoteSnapshotStore(SnapshotStore):
    """Thin HTTP client for a hosted JSON document store.

    Documents live at `{base_url}/users/{key}`; GET, PUT and DELETE are used
    as-is. A 404 on read means the user has no data yet. Failures are not
    retried.
    """

    def __init__(self, base_url: str, api_key: str | None = None, timeout: float = 5.0) -> None:
        if not base_url:
            raise ValueError("RemoteSnapshotStore needs a base URL.")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def _url(self, key: str) -> str:
        return f"{self.base_url}/users/{urllib.parse.quote(key, safe='')}"

    def _request(self, method: str, key: str, payload: dict | None = None) -> str:
        data = json.dumps(payload, allow_nan=False).encode("utf-8") if payload is not None else None
        headers = {"Accept": "application/json"}
        if data is not None:
            headers["Content-Type"] = "application/json"
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        req = urllib.request.Request(self._url(key), data=data, headers=headers, method=method)
        with urllib.request.urlopen(req, timeout=self.timeout) as resp:
            return resp.read().decode("utf-8")

    def get(self, key: str) -> Snapshot | None:
        try:
            body = self._request("GET", key)
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                return None
            logger.warning("remote store read failed key=%s status=%s", user_fingerprint(key), exc.code)
            raise StoreError("Could not load your data. Please try again.") from exc
        except (urllib.error.URLError, OSError) as exc:
            logger.warning("remote store unreachable key=%s error=%s", user_fingerprint(key), exc)
            raise StoreError("Could not load your data. Please try again.") from exc

        if not body.strip():
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as exc:
            raise StoreError("The data store returned an invalid document.") from exc
        if not isinstance(parsed, dict):
            raise StoreError("The data store returned an invalid document.")
        return Snapshot.from_dict(_sanitize_json_compat(parsed))

    def put(self, key: str, snapshot: Snapshot) -> None:
        try:
            self._request("PUT", key, _sanitize_json_compat(snapshot.to_dict()))
        except (urllib.error.URLError, OSError) as exc:
            logger.warning("remote store write failed key=%s error=%s", user_fingerprint(key), exc)
            raise StoreError("Could not save your data. Please try again.") from exc

    def delete(self, key: str) -> None:
        try:
            self._request("DELETE", key)
        except urllib.error.HTTPError as exc:
            if exc.code == 404:
                return
            raise StoreError("Could not delete your data. Please try again.") from exc
        except (urllib.error.URLError, OSError) as exc:
            raise StoreError("Could not delete your data. Please try again.") from exc


def build_store(settings: Settings) -> SnapshotStore:
    if settings.store == "memory":
        return InMemorySnapshotStore()
    if settings.store == "remote":
        return RemoteSnapshotStore(settings.remote_url, api_key=settings.remote_token or None, timeout=settings.remote_timeout)
    return LocalSnapshotStore(settings.snapshots_dir)
