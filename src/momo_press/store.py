"""Key-value store and typed repositories for app-side user data."""

import hashlib
import hmac
import json
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from momo_press.errors import InvalidCredentialsError, UserExistsError, UserNotFoundError
from momo_press.utils import is_valid_phone, normalize_phone

logger = logging.getLogger(__name__)

USERS_KEY = "momopress_users"
CURRENT_USER_KEY = "momopress_current_user"
REMEMBERED_PHONE_KEY = "momopress_remembered_phone"

STEP_KEY = "momopress_onboarding_step"
THEME_KEY = "momopress_theme"
MONTHLY_LIMIT_KEY = "momopress_monthly_limit"
CUSTOM_MESSAGES_KEY = "momopress_custom_messages"
WEEKLY_CHECKS_KEY = "momopress_weekly_checks"

RECENT_KEY = "recentTransactions"
MAX_RECENT = 10

MIN_PASSWORD_LENGTH = 6
_HASH_ITERATIONS = 100_000


class KeyValueStore(ABC):
    """String-keyed store of string blobs."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    def get_json(self, key: str, default: Any = None) -> Any:
        """Decode a JSON blob, returning ``default`` if absent."""
        raw = self.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set_json(self, key: str, value: Any) -> None:
        self.set(key, json.dumps(value))


class MemoryStore(KeyValueStore):
    """In-process store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Store persisted as a single JSON object, rewritten on each change."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)  # type: ignore[no-any-return]

    def _write(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        tmp_path.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


def hash_password(password: str, salt: str | None = None) -> str:
    """Return ``salt$digest`` for a password."""
    if salt is None:
        salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _HASH_ITERATIONS)
    return f"{salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt), stored)


@dataclass(frozen=True)
class User:
    """Registered app user."""

    full_name: str
    phone: str
    password_hash: str
    created_at: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(
            full_name=data["fullName"],
            phone=data["phone"],
            password_hash=data["password"],
            created_at=data.get("createdAt", ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "fullName": self.full_name,
            "phone": self.phone,
            "password": self.password_hash,
            "createdAt": self.created_at,
        }


@dataclass(frozen=True)
class Session:
    """The signed-in user."""

    full_name: str
    phone: str
    login_time: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


class UserRepository:
    """User list, current session and remembered phone."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def _load(self) -> list[User]:
        return [User.from_dict(u) for u in self.store.get_json(USERS_KEY, [])]

    def _save(self, users: list[User]) -> None:
        self.store.set_json(USERS_KEY, [u.to_dict() for u in users])

    def all(self) -> list[User]:
        return self._load()

    def find(self, phone: str) -> User | None:
        """Look up a user by phone number in any accepted format."""
        phone = normalize_phone(phone)
        for user in self._load():
            if user.phone == phone:
                return user
        return None

    def register(self, full_name: str, phone: str, password: str) -> User:
        """
        Create a new account.

        Args:
            full_name: Display name
            phone: Rwandan MTN number in any accepted format
            password: At least 6 characters

        Returns:
            The stored User

        Raises:
            ValueError: If a field fails validation
            UserExistsError: If the phone number is already registered
        """
        if not full_name.strip():
            raise ValueError("Full name is required")
        if not is_valid_phone(phone):
            raise ValueError("Please enter a valid Rwandan MTN number (078/079...)")
        _check_password(password)

        users = self._load()
        normalized = normalize_phone(phone)
        if any(u.phone == normalized for u in users):
            raise UserExistsError("This phone number is already registered")

        user = User(
            full_name=full_name.strip(),
            phone=normalized,
            password_hash=hash_password(password),
            created_at=_now(),
        )
        users.append(user)
        self._save(users)
        logger.info("Registered user %s", normalized)
        return user

    def authenticate(self, phone: str, password: str, remember: bool = False) -> Session:
        """
        Sign a user in and record the session.

        Raises:
            UserNotFoundError: If no account exists for the phone number
            InvalidCredentialsError: If the password is wrong
        """
        user = self.find(phone)
        if user is None:
            raise UserNotFoundError("Account not found. Please sign up.")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsError("Incorrect password")

        if remember:
            self.store.set(REMEMBERED_PHONE_KEY, user.phone)
        else:
            self.store.delete(REMEMBERED_PHONE_KEY)

        session = Session(full_name=user.full_name, phone=user.phone, login_time=_now())
        self.store.set_json(CURRENT_USER_KEY, {
            "fullName": session.full_name,
            "phone": session.phone,
            "loginTime": session.login_time,
        })
        return session

    def current_session(self) -> Session | None:
        data = self.store.get_json(CURRENT_USER_KEY)
        if not data:
            return None
        return Session(full_name=data["fullName"], phone=data["phone"], login_time=data["loginTime"])

    def sign_out(self) -> None:
        self.store.delete(CURRENT_USER_KEY)

    def remembered_phone(self) -> str | None:
        return self.store.get(REMEMBERED_PHONE_KEY)

    def reset_password(self, phone: str, new_password: str) -> None:
        """
        Replace a user's password.

        Raises:
            ValueError: If the new password is too short
            UserNotFoundError: If no account exists for the phone number
        """
        _check_password(new_password)
        normalized = normalize_phone(phone)
        users = self._load()

        for i, user in enumerate(users):
            if user.phone == normalized:
                users[i] = User(
                    full_name=user.full_name,
                    phone=user.phone,
                    password_hash=hash_password(new_password),
                    created_at=user.created_at,
                )
                self._save(users)
                return

        raise UserNotFoundError("No account found with this phone number")


class SettingsRepository:
    """Onboarding progress and personalization toggles."""

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    @property
    def onboarding_step(self) -> int:
        try:
            return int(self.store.get(STEP_KEY) or "0")
        except ValueError:
            return 0

    @onboarding_step.setter
    def onboarding_step(self, step: int) -> None:
        self.store.set(STEP_KEY, str(step))

    @property
    def theme(self) -> str:
        return "light" if self.store.get(THEME_KEY) == "light" else "dark"

    @theme.setter
    def theme(self, value: str) -> None:
        if value not in ("dark", "light"):
            raise ValueError(f"Unknown theme: {value!r}")
        self.store.set(THEME_KEY, value)

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme

    @property
    def monthly_limit(self) -> str:
        return self.store.get(MONTHLY_LIMIT_KEY) or ""

    @monthly_limit.setter
    def monthly_limit(self, value: str) -> None:
        self.store.set(MONTHLY_LIMIT_KEY, value or "0")

    @property
    def custom_messages(self) -> bool:
        return self.store.get(CUSTOM_MESSAGES_KEY) == "true"

    @custom_messages.setter
    def custom_messages(self, enabled: bool) -> None:
        self.store.set(CUSTOM_MESSAGES_KEY, "true" if enabled else "false")

    @property
    def weekly_checks(self) -> bool:
        return self.store.get(WEEKLY_CHECKS_KEY) == "true"

    @weekly_checks.setter
    def weekly_checks(self, enabled: bool) -> None:
        self.store.set(WEEKLY_CHECKS_KEY, "true" if enabled else "false")


class RecentRecipients:
    """Most-recently-used send-money recipients, newest first."""

    def __init__(self, store: KeyValueStore, limit: int = MAX_RECENT) -> None:
        self.store = store
        self.limit = limit

    def entries(self) -> list[dict[str, str]]:
        return self.store.get_json(RECENT_KEY, [])  # type: ignore[no-any-return]

    def add(self, recipient: str, kind: str) -> list[dict[str, str]]:
        """
        Record a recipient.

        An existing recipient moves to the front unchanged; a new one is
        inserted at the front and the oldest entry is dropped past the limit.
        """
        recent = self.entries()
        for i, entry in enumerate(recent):
            if entry["recipient"] == recipient:
                recent.insert(0, recent.pop(i))
                break
        else:
            recent.insert(0, {
                "recipient": recipient,
                "type": kind,
                "name": "Phone Number" if kind == "Money Transfer" else "Merchant",
                "date": _now(),
            })

        del recent[self.limit:]
        self.store.set_json(RECENT_KEY, recent)
        return recent
