"""Client-side session state and role-based view selection.

The authenticated identity lives in an explicit ``AppState`` whose
persistence goes through a storage port, so a restored state routes the
same way the state it was saved from did.
"""

import enum
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol

from pydantic import ValidationError

from .client import StorefrontClient
from .models.user import Role
from .schemas import Identity, SessionResponse

logger = logging.getLogger(__name__)

STORAGE_KEY = "user"


class Storage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def clear(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self):
        self._items: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def clear(self, key: str) -> None:
        self._items.pop(key, None)


class FileStorage:
    """Key/value strings kept in a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            items = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("ignoring unreadable storage file %s", self.path)
            return {}
        if not isinstance(items, dict):
            logger.warning("ignoring storage file %s without a JSON object", self.path)
            return {}
        return items

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(items), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def clear(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)


class View(str, enum.Enum):
    AUTH = "/auth"
    MERCHANT = "/merchant"
    SHOP = "/shop"


def home_view(identity: Optional[Identity]) -> View:
    if identity is None:
        return View.AUTH
    return View.MERCHANT if identity.role == Role.MERCHANT.value else View.SHOP


def resolve_view(identity: Optional[Identity], path: str) -> View:
    """Return the view to render for ``path``.

    A view the identity may not reach redirects to its home view.
    """
    if path == View.MERCHANT.value and identity is not None:
        return View.MERCHANT if identity.role == Role.MERCHANT.value else View.SHOP
    if path == View.SHOP.value and identity is not None:
        return View.SHOP if identity.role == Role.CUSTOMER.value else View.MERCHANT
    return home_view(identity)


class AppState:
    """Either anonymous (``session`` is None) or authenticated."""

    def __init__(self, storage: Storage, session: Optional[SessionResponse] = None):
        self.storage = storage
        self.session = session

    @classmethod
    def restore(cls, storage: Storage) -> "AppState":
        raw = storage.get(STORAGE_KEY)
        if raw is None:
            return cls(storage)
        try:
            session = SessionResponse.model_validate_json(raw)
        except ValidationError:
            logger.warning("discarding unreadable stored session")
            storage.clear(STORAGE_KEY)
            return cls(storage)
        return cls(storage, session)

    @property
    def identity(self) -> Optional[Identity]:
        if self.session is None:
            return None
        return Identity(id=self.session.id, username=self.session.username, role=self.session.role)

    @property
    def token(self) -> Optional[str]:
        return self.session.token if self.session else None

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def authenticate(self, session: SessionResponse) -> None:
        self.session = session
        self.storage.set(STORAGE_KEY, session.model_dump_json())

    def logout(self) -> None:
        self.session = None
        self.storage.clear(STORAGE_KEY)

    def route(self, path: str) -> View:
        return resolve_view(self.identity, path)


class ClientSession:
    """Runs auth calls through the API and applies the state transitions.

    Failures leave the state untouched and surface as ``ClientError``.
    """

    def __init__(self, client: StorefrontClient, state: AppState):
        self.client = client
        self.state = state

    def login(self, username: str, password: str) -> View:
        self.state.authenticate(self.client.login(username, password))
        return home_view(self.state.identity)

    def register(self, username: str, password: str, role: str) -> View:
        self.state.authenticate(self.client.register(username, password, role))
        return home_view(self.state.identity)

    def logout(self) -> View:
        self.state.logout()
        return View.AUTH
