# inventory_dashboard/services/backend_client.py
from __future__ import annotations

import requests
from flask import current_app, session

from inventory_dashboard.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

VALID_STATUSES = ("approved", "rejected")

_STATUS_ERRORS = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


class InventoryBackendClient:
    """
    Thin client for the external inventory backend.
    Every response is an envelope {success, message?, data?}; `data` is returned.
    No retries: a failed call raises and the operator decides what to do.
    """

    def __init__(self, base_url: str, access_token: str | None = None, timeout: float = 10,
                 session: requests.Session | None = None, sanction_resolve_path: str = ""):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.sanction_resolve_path = sanction_resolve_path or ""

    @classmethod
    def from_config(cls, config, access_token: str | None = None) -> "InventoryBackendClient":
        return cls(
            base_url=config["BACKEND_BASE_URL"],
            access_token=access_token,
            timeout=config.get("BACKEND_TIMEOUT", 10),
            sanction_resolve_path=config.get("SANCTION_RESOLVE_PATH", ""),
        )

    # -----------------------------
    # Transport
    # -----------------------------
    def _headers(self, auth: bool, json_body: bool) -> dict:
        headers = {}
        if json_body:
            headers["Content-Type"] = "application/json"
        if auth:
            if not self.access_token:
                raise AuthError("Authentication token not found")
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(self, method: str, path: str, *, auth: bool = True, params=None,
                 json=None, files=None):
        url = f"{self.base_url}{path}"
        # multipart bodies get their Content-Type (with boundary) from requests
        headers = self._headers(auth, json_body=files is None)

        current_app.logger.debug(f"[backend] {method} {url} params={params}")
        try:
            resp = self.session.request(
                method, url,
                headers=headers, params=params, json=json, files=files,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"[backend] {method} {url} failed: {e}")
            raise UpstreamError("Inventory backend is unreachable", path=path)

        try:
            body = resp.json()
        except ValueError:
            raise UpstreamError(
                f"Inventory backend returned a non-JSON response ({resp.status_code})",
                path=path,
            )
        if not isinstance(body, dict):
            body = {"success": resp.ok, "data": body}

        message = body.get("message")
        if not resp.ok:
            error_cls = _STATUS_ERRORS.get(resp.status_code)
            if error_cls is None:
                status = resp.status_code if resp.status_code >= 500 else 502
                raise UpstreamError(message or "Inventory backend request failed", status_code=status, path=path)
            raise error_cls(message or "Inventory backend request failed", path=path)

        if body.get("success") is False:
            raise UpstreamError(message or "Inventory backend reported a failure", path=path)

        return body.get("data")

    @staticmethod
    def _check_status(status: str):
        if status not in VALID_STATUSES:
            raise ValidationError("Valid status is required (approved or rejected)", status=status)

    # -----------------------------
    # Auth
    # -----------------------------
    def login(self, nim: str, password: str) -> dict:
        return self._request("POST", "/auth/login", auth=False, json={"nim": nim, "password": password}) or {}

    def register(self, name: str, email: str, nim: str, password: str) -> dict:
        payload = {"name": name, "email": email, "nim": nim, "password": password}
        return self._request("POST", "/auth/register", auth=False, json=payload) or {}

    # -----------------------------
    # Items
    # -----------------------------
    def list_items(self, page: int = 1, limit: int = 10) -> list:
        return self._request("GET", "/item", params={"page": page, "limit": limit}) or []

    def get_item(self, item_id: str) -> dict:
        return self._request("GET", f"/item/{item_id}")

    def create_item(self, name: str, quantity: int) -> dict:
        return self._request("POST", "/item", json={"name": name, "quantity": quantity})

    def update_item(self, item_id: str, name: str, quantity: int) -> dict:
        return self._request("PUT", f"/item/{item_id}", json={"name": name, "quantity": quantity})

    def delete_item(self, item_id: str):
        return self._request("DELETE", f"/item/{item_id}")

    # -----------------------------
    # Borrow / return legs
    # -----------------------------
    def list_borrows(self, page: int = 1, limit: int = 100) -> list:
        return self._request("GET", "/borrow", params={"page": page, "limit": limit}) or []

    def set_borrow_status(self, borrow_id: str, status: str) -> dict:
        self._check_status(status)
        return self._request("POST", f"/borrow/{borrow_id}/status", json={"status": status})

    def list_returns(self, page: int = 1, limit: int = 100) -> list:
        return self._request("GET", "/return", params={"page": page, "limit": limit}) or []

    def create_return(self, item_id: str, borrow_date: str, return_date: str, damaged_item=None) -> dict:
        """damaged_item: (filename, stream, mimetype) or None."""
        # plain fields as (None, value) parts so the body is always multipart
        files = {
            "itemId": (None, item_id),
            "borrowDate": (None, borrow_date),
            "returnDate": (None, return_date),
        }
        if damaged_item:
            files["damagedItem"] = damaged_item
        return self._request("POST", "/return", files=files)

    def set_return_status(self, return_id: str, status: str) -> dict:
        self._check_status(status)
        return self._request("POST", f"/return/{return_id}/status", json={"status": status})

    def set_status(self, leg: str, transaction_id: str, status: str) -> dict:
        if leg == "borrow":
            return self.set_borrow_status(transaction_id, status)
        if leg == "return":
            return self.set_return_status(transaction_id, status)
        raise ValidationError(f"Unknown leg: {leg}", leg=leg)

    # -----------------------------
    # Sanctions
    # -----------------------------
    def resolve_sanction(self, transaction_id: str) -> bool:
        """
        Returns False when no resolution endpoint is configured; the backend
        has no confirmed endpoint for this.
        """
        if not self.sanction_resolve_path:
            return False
        path = self.sanction_resolve_path.format(id=transaction_id)
        self._request("POST", path, json={"id": transaction_id})
        return True


def session_client() -> InventoryBackendClient:
    """Client carrying the operator's token from the session cookie."""
    return InventoryBackendClient.from_config(current_app.config, session.get("access_token"))
