from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import auth, credentials
from firebase_admin.exceptions import FirebaseError

from valdicass.server.errors import Forbidden, TokenVerificationError, Unauthenticated

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class Caller:
    """Verified identity of the caller, passed explicitly to downstream steps."""

    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


def init_firebase_app(credentials_path: str) -> firebase_admin.App:
    """Return the default Firebase app, initialising it once per process."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        cred = credentials.Certificate(credentials_path)
        return firebase_admin.initialize_app(cred)


class FirebaseTokenVerifier:
    def __init__(self, app: Optional[firebase_admin.App] = None) -> None:
        self.app = app

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            return auth.verify_id_token(token, app=self.app)
        except (ValueError, FirebaseError) as e:
            raise TokenVerificationError(str(e)) from e


def parse_bearer(header: Optional[str]) -> str:
    if not header or not header.startswith(BEARER_PREFIX):
        raise Unauthenticated()
    return header[len(BEARER_PREFIX):]


def authenticate(header: Optional[str], verifier) -> Caller:
    """
    Turn an Authorization header into a Caller.

    No header (or no "Bearer " prefix) -> Unauthenticated (401).
    Token the provider rejects        -> Forbidden (403).
    """
    token = parse_bearer(header)
    try:
        decoded = verifier.verify(token)
    except TokenVerificationError as e:
        logger.error("Invalid token: %s", e)
        raise Forbidden("Forbidden: Invalid token.") from e

    uid = decoded.get("uid") or decoded.get("sub")
    if not uid:
        logger.error("Verified token carries no uid")
        raise Forbidden("Forbidden: Invalid token.")

    return Caller(uid=str(uid), email=decoded.get("email"), claims=dict(decoded))
