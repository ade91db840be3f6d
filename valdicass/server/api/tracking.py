from fastapi import APIRouter, Depends
from fastapi.responses import Response

from valdicass.server.deps import get_quote_store
from valdicass.services.notifier import TRACKING_PIXEL_HEADERS, track_open

router = APIRouter(tags=["tracking"])  # hit by mail clients, never authenticated


@router.get("/trackOpen/{quote_id}", summary="Open-tracking pixel")
def get_track_open(quote_id: str, store=Depends(get_quote_store)):
    pixel = track_open(store, quote_id)
    return Response(content=pixel, media_type="image/gif", headers=TRACKING_PIXEL_HEADERS)
