from __future__ import annotations

import logging

from valdicass.server.errors import Forbidden, NotFound
from valdicass.server.schemas.quote import Quote
from valdicass.services.identity import Caller

logger = logging.getLogger(__name__)


def authorize_send(store, quote_id: str, caller: Caller) -> Quote:
    """
    Load a quote and make sure the caller created it.

    Missing document -> NotFound. Creator is createdBy, falling back to userId,
    compared to the caller uid after trimming (case-sensitive).
    """
    quote = store.get(quote_id.strip())
    if quote is None:
        raise NotFound("Quote not found.")

    creator = quote.creator_id
    logger.debug("Quote %s creator=%r caller=%r", quote.id, creator, caller.uid)

    if creator is None or creator.strip() != str(caller.uid).strip():
        logger.warning("Unauthorized send attempt for quote %s by %s", quote.id, caller.uid)
        raise Forbidden("You do not have permission to send this quote.")

    return quote
