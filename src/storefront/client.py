"""HTTP client for the storefront API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from .schemas import Identity, ProductCreated, ProductOut, SessionResponse

logger = logging.getLogger(__name__)


class ClientError(Exception):
    """A failed client call; ``str(exc)`` is the message to show the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ApiError(ClientError):
    """The server answered with an error status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ConnectionFailed(ClientError):
    def __init__(self, message: str = "Connection error"):
        super().__init__(message)


class StorefrontClient:
    """Thin wrapper issuing one request per call.

    ``http`` is anything exposing ``request(method, url, json=..., headers=...)``
    and returning a response with ``status_code`` and ``json()``; it defaults
    to a ``requests.Session``.
    """

    def __init__(self, base_url: str = "http://localhost:3000", http=None):
        self.base_url = base_url.rstrip("/")
        self.http = http if http is not None else requests.Session()

    def _call(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            response = self.http.request(
                method, f"{self.base_url}{path}", json=payload, headers=headers
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ConnectionFailed() from exc

        try:
            data = response.json()
        except ValueError:
            data = None
        if response.status_code >= 400:
            message = None
            if isinstance(data, dict):
                message = data.get("error")
            raise ApiError(message or "Something went wrong", response.status_code)
        return data

    def register(self, username: str, password: str, role: str) -> SessionResponse:
        data = self._call(
            "POST",
            "/api/register",
            {"username": username, "password": password, "role": role},
        )
        return SessionResponse.model_validate(data)

    def login(self, username: str, password: str) -> SessionResponse:
        data = self._call(
            "POST", "/api/login", {"username": username, "password": password}
        )
        return SessionResponse.model_validate(data)

    def list_products(self) -> List[ProductOut]:
        return [ProductOut.model_validate(item) for item in self._call("GET", "/api/products")]

    def current_identity(self, token: str) -> Identity:
        """Ask the server who ``token`` belongs to."""
        return Identity.model_validate(self._call("GET", "/api/session", token=token))

    def create_product(
        self,
        name: str,
        description: str,
        price: float,
        merchant_id: int,
        image_url: str = "",
    ) -> ProductCreated:
        payload = {
            "name": name,
            "description": description,
            "price": price,
            "imageUrl": image_url,
            "merchantId": merchant_id,
        }
        return ProductCreated.model_validate(self._call("POST", "/api/products", payload))
