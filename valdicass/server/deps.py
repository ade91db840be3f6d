from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Header, Request

from valdicass.server.settings.config import Settings
from valdicass.services.email_client import SendGridMailer
from valdicass.services.identity import Caller, FirebaseTokenVerifier, authenticate, init_firebase_app
from valdicass.services.quote_store import FirestoreQuoteStore


def init_providers(app: FastAPI, settings: Settings) -> None:
    """
    Create the process-wide provider clients that were not injected.

    Raises ConfigurationError when something required is missing, which stops
    the server before it accepts requests.
    """
    state = app.state

    if state.mailer is None:
        state.mailer = SendGridMailer(
            settings.require_sendgrid_key(), timeout=settings.sendgrid_timeout
        )

    if state.quote_store is None or state.token_verifier is None:
        fb_app = init_firebase_app(str(settings.require_firebase_credentials()))
        if state.quote_store is None:
            state.quote_store = FirestoreQuoteStore.from_app(fb_app, settings.quotes_collection)
        if state.token_verifier is None:
            state.token_verifier = FirebaseTokenVerifier(fb_app)


# ==============================
# DEPENDENCIES
# ==============================

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_quote_store(request: Request):
    return request.app.state.quote_store


def get_mailer(request: Request):
    return request.app.state.mailer


def require_caller(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> Caller:
    return authenticate(authorization, request.app.state.token_verifier)
