from flask import current_app, session

from inventory_dashboard.errors import UpstreamError, ValidationError
from inventory_dashboard.services.backend_client import InventoryBackendClient


class AuthService:
    @staticmethod
    def _client():
        return InventoryBackendClient.from_config(current_app.config)

    @staticmethod
    def login(nim: str, password: str) -> dict:
        if not nim or not password:
            raise ValidationError("NIM and password are required")

        data = AuthService._client().login(nim, password)
        token = data.get("accessToken")
        if not token:
            raise UpstreamError("Login response did not include an access token", nim=nim)

        session.clear()
        session["access_token"] = token
        session["refresh_token"] = data.get("refreshToken")
        session["nim"] = nim
        current_app.logger.info(f"[auth] Login successful nim={nim}")
        return data

    @staticmethod
    def register(name: str, email: str, nim: str, password: str) -> dict:
        if not name or not email or not nim or not password:
            raise ValidationError("name/email/nim/password are required")

        user = AuthService._client().register(name=name, email=email, nim=nim, password=password)
        current_app.logger.info(f"[auth] Registered nim={nim}")
        return user

    @staticmethod
    def logout():
        nim = session.get("nim")
        session.clear()
        current_app.logger.info(f"[auth] Logout nim={nim}")
