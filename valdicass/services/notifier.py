from __future__ import annotations

import base64
import html
import logging
from typing import Dict, Optional
from urllib.parse import quote as url_quote

from valdicass.server.errors import BadRequest, InternalError, RelayError
from valdicass.server.schemas.quote import OutgoingEmail, Quote
from valdicass.server.settings.config import QUOTE_EMAIL_SUBJECT, SENDER_EMAIL, Settings
from valdicass.services.identity import Caller
from valdicass.services.quote_access import authorize_send

logger = logging.getLogger(__name__)

# 1x1 transparent GIF89a, 43 bytes
TRACKING_PIXEL = base64.b64decode(
    "R0lGODlhAQABAIAAAP///wAAACH5BAEAAAAALAAAAAABAAEAAAICRAEAOw=="
)
TRACKING_PIXEL_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
}


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# ==============================
# SEND QUOTE EMAIL
# ==============================

def tracking_pixel_url(base_url: str, quote_id: str) -> str:
    return f"{base_url.rstrip('/')}/trackOpen/{url_quote(quote_id, safe='')}"


def build_quote_email(quote: Quote, client_email: str, *, public_base_url: str) -> OutgoingEmail:
    total = quote.display_total
    pixel = tracking_pixel_url(public_base_url, quote.id)
    body_html = (
        f"<strong>Your quote total is ${html.escape(total)}</strong><br />\n"
        f'<img src="{html.escape(pixel)}" alt="" width="1" height="1" style="display:none;" />\n'
    )
    return OutgoingEmail(
        to=client_email,
        from_email=SENDER_EMAIL,
        subject=QUOTE_EMAIL_SUBJECT,
        text=f"Quote Total: ${total}",
        html=body_html,
    )


def send_quote_email(
    caller: Caller,
    quote_id: Optional[str],
    client_email: Optional[str],
    *,
    store,
    mailer,
    settings: Settings,
) -> Dict[str, object]:
    logger.info("sendQuoteEmail: quote=%s client=%s caller=%s", quote_id, client_email, caller.uid)

    if _blank(quote_id) or _blank(client_email):
        raise BadRequest("Missing quoteId or clientEmail.")

    try:
        quote = authorize_send(store, quote_id, caller)
        message = build_quote_email(
            quote, client_email.strip(), public_base_url=settings.public_base_url
        )
        # EmailDeliveryError propagates as-is; the mailer already logged the detail
        mailer.send(message)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Unknown error sending quote %s", quote_id)
        raise InternalError("Failed to send quote.") from e

    logger.info("Email successfully sent to %s for quote %s", message.to, quote.id)
    return {"success": True, "message": "Quote sent successfully."}


# ==============================
# RECORD VIEW
# ==============================

def record_view(store, quote_id: Optional[str]) -> str:
    """
    Mark a quote as viewed and refresh viewedAt.

    Repeating the call keeps viewed=True and only moves the timestamp.
    """
    if _blank(quote_id):
        raise BadRequest("Missing quoteId")

    quote_id = quote_id.strip()
    store.mark_viewed(quote_id)
    logger.info("Quote %s marked as viewed", quote_id)
    return quote_id


def mark_viewed(store, quote_id: Optional[str]) -> Dict[str, object]:
    try:
        record_view(store, quote_id)
    except RelayError:
        raise
    except Exception as e:
        logger.exception("Error marking quote %s viewed", quote_id)
        raise InternalError("Failed to mark quote as viewed") from e
    return {"success": True}


def track_open(store, quote_id: str) -> bytes:
    """
    Record an open from the tracking pixel and return the pixel bytes.

    The pixel is returned whether or not the update worked so the email
    never shows a broken image.
    """
    try:
        record_view(store, quote_id)
    except Exception:
        logger.exception("Failed to track open for quote %s", quote_id)
    return TRACKING_PIXEL
