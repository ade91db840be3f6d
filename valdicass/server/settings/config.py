from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from valdicass.server.errors import ConfigurationError

load_dotenv()

# Must be a verified sender in SendGrid
SENDER_EMAIL = "walter@valdicass.com"
QUOTE_EMAIL_SUBJECT = "Your Valdicass Quote is Ready"


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()] or ["*"]


class Settings(BaseModel):
    app_name: str = "Valdicass SendGrid Server"
    environment: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "dev"))
    log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "5001")))
    public_base_url: str = Field(
        default_factory=lambda: os.getenv("PUBLIC_BASE_URL", "http://localhost:5001")
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "*"))
    )

    sendgrid_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("SENDGRID_API_KEY", "").strip() or None
    )
    sendgrid_timeout: float = Field(
        default_factory=lambda: float(os.getenv("SENDGRID_TIMEOUT", "30"))
    )

    firebase_credentials: str = Field(
        default_factory=lambda: os.getenv("FIREBASE_CREDENTIALS", "serviceAccountKey.json")
    )
    quotes_collection: str = Field(
        default_factory=lambda: os.getenv("QUOTES_COLLECTION", "quotes")
    )

    def require_sendgrid_key(self) -> str:
        if not self.sendgrid_api_key:
            raise ConfigurationError("SENDGRID_API_KEY not set.")
        return self.sendgrid_api_key

    def require_firebase_credentials(self) -> Path:
        path = Path(self.firebase_credentials)
        if not path.is_file():
            raise ConfigurationError(f"Firebase credentials file not found: {path}")
        return path

    def validate_startup(self) -> None:
        """Raise ConfigurationError if the process cannot serve requests."""
        self.require_sendgrid_key()
        self.require_firebase_credentials()

    def masked(self) -> dict:
        data = self.model_dump()
        key = data.get("sendgrid_api_key")
        if key:
            data["sendgrid_api_key"] = key[:4] + "…" if len(key) > 8 else "***"
        return data


settings = Settings()
