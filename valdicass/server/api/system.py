from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["system"])


@router.get("/", response_class=PlainTextResponse)
def status(request: Request):
    return f"{request.app.state.settings.app_name} is running!"


@router.get("/health")
def health():
    return {"status": "ok"}

