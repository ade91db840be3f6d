# valdicass/server/schemas/quote.py
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class Quote(BaseModel):
    """
    A quote document as stored in Firestore.

    Only the fields the send path reads are modelled. viewed/viewedAt are
    written by mark_viewed and never read back, so other writers may store
    anything there.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    total: Any = None
    created_by: Optional[Any] = Field(default=None, alias="createdBy")
    user_id: Optional[Any] = Field(default=None, alias="userId")

    @property
    def creator_id(self) -> Optional[str]:
        # createdBy wins; userId covers older documents
        creator = self.created_by or self.user_id
        if creator is None or creator == "":
            return None
        return str(creator)

    @property
    def display_total(self) -> str:
        total = self.total
        if isinstance(total, float) and total.is_integer():
            return str(int(total))
        return "" if total is None else str(total)


class SendQuoteEmailIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quote_id: Optional[str] = Field(default=None, alias="quoteId")
    client_email: Optional[str] = Field(default=None, alias="clientEmail")


class QuoteViewedIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    quote_id: Optional[str] = Field(default=None, alias="quoteId")


class OutgoingEmail(BaseModel):
    to: str
    from_email: str
    subject: str
    text: str
    html: str
