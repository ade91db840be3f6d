from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from valdicass.server.errors import EmailDeliveryError
from valdicass.server.schemas.quote import OutgoingEmail

logger = logging.getLogger(__name__)

API_URL = "https://api.sendgrid.com/v3/mail/send"


# ---------------------------------------------------------
# SendGrid v3 mail/send
# ---------------------------------------------------------

def build_payload(message: OutgoingEmail) -> Dict[str, Any]:
    return {
        "personalizations": [{"to": [{"email": message.to}]}],
        "from": {"email": message.from_email},
        "subject": message.subject,
        # SendGrid requires text/plain before text/html
        "content": [
            {"type": "text/plain", "value": message.text},
            {"type": "text/html", "value": message.html},
        ],
    }


class SendGridMailer:
    """
    Thin client for SendGrid's mail/send endpoint.

    One instance (and one HTTP session) per process. Every failure surfaces as
    EmailDeliveryError; nothing is retried.
    """

    def __init__(
        self,
        api_key: str,
        *,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def send(self, message: OutgoingEmail) -> None:
        try:
            resp = self.session.post(API_URL, json=build_payload(message), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("SendGrid network error: %s", e)
            raise EmailDeliveryError() from e

        if resp.status_code >= 400:
            logger.error("SendGrid Response Error %s: %s", resp.status_code, _error_detail(resp))
            raise EmailDeliveryError()

    def close(self) -> None:
        self.session.close()


def _error_detail(resp: requests.Response) -> Any:
    try:
        body = resp.json()
    except ValueError:
        return resp.text
    return body.get("errors", body) if isinstance(body, dict) else body
