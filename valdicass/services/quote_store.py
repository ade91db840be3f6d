from __future__ import annotations

import logging
from typing import Optional

from firebase_admin import firestore
from google.api_core import exceptions as gcloud_exceptions

from valdicass.server.errors import NotFound
from valdicass.server.schemas.quote import Quote

logger = logging.getLogger(__name__)


class FirestoreQuoteStore:
    """
    Read/partial-update access to the quotes collection.

    Documents are created elsewhere; this store never creates or deletes them.
    """

    def __init__(self, client, collection: str = "quotes") -> None:
        self.client = client
        self.collection = collection

    @classmethod
    def from_app(cls, app, collection: str = "quotes") -> "FirestoreQuoteStore":
        return cls(firestore.client(app=app), collection)

    def _doc(self, quote_id: str):
        return self.client.collection(self.collection).document(quote_id)

    def get(self, quote_id: str) -> Optional[Quote]:
        snap = self._doc(quote_id).get()
        if not snap.exists:
            return None
        data = snap.to_dict() or {}
        return Quote(id=snap.id, **{k: v for k, v in data.items() if k != "id"})

    def mark_viewed(self, quote_id: str) -> None:
        try:
            self._doc(quote_id).update(
                {
                    "viewed": True,
                    "viewedAt": firestore.SERVER_TIMESTAMP,
                }
            )
        except gcloud_exceptions.NotFound as e:
            raise NotFound() from e
