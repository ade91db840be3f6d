from typing import Optional

from fastapi import APIRouter, Depends

from valdicass.server.deps import get_mailer, get_quote_store, get_settings, require_caller
from valdicass.server.schemas.quote import QuoteViewedIn, SendQuoteEmailIn
from valdicass.server.settings.config import Settings
from valdicass.services.identity import Caller
from valdicass.services.notifier import mark_viewed, send_quote_email

router = APIRouter(tags=["quotes"])


@router.post("/sendQuoteEmail", summary="Send a quote to a client (owner only)")
def post_send_quote_email(
    payload: Optional[SendQuoteEmailIn] = None,
    caller: Caller = Depends(require_caller),
    store=Depends(get_quote_store),
    mailer=Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    payload = payload or SendQuoteEmailIn()
    return send_quote_email(
        caller,
        payload.quote_id,
        payload.client_email,
        store=store,
        mailer=mailer,
        settings=settings,
    )


@router.post("/quoteViewed", summary="Mark a quote as viewed (no auth)")
def post_quote_viewed(
    payload: Optional[QuoteViewedIn] = None,
    store=Depends(get_quote_store),
):
    payload = payload or QuoteViewedIn()
    return mark_viewed(store, payload.quote_id)
