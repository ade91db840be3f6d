import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from valdicass.server.api import quotes, system, tracking
from valdicass.server.deps import init_providers
from valdicass.server.errors import register_error_handlers
from valdicass.server.settings.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    s: Settings = app.state.settings
    logger.info("%s is starting...", s.app_name)
    init_providers(app, s)
    logger.info("%s running on %s:%s", s.app_name, s.host, s.port)
    yield
    mailer = app.state.mailer
    if hasattr(mailer, "close"):
        mailer.close()
    logger.info("%s shutting down", s.app_name)


def create_app(
    settings: Optional[Settings] = None,
    *,
    quote_store=None,
    token_verifier=None,
    mailer=None,
) -> FastAPI:
    """
    Build the app. Providers passed in are used as-is; anything left as None is
    created from settings at startup.
    """
    settings = settings or default_settings

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings
    app.state.quote_store = quote_store
    app.state.token_verifier = token_verifier
    app.state.mailer = mailer

    # The tracking pixel and the web frontend are served from other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Routers
    app.include_router(system.router)
    app.include_router(tracking.router)      # /trackOpen/{id}, no auth
    app.include_router(quotes.router)        # /sendQuoteEmail (Bearer), /quoteViewed (no auth)

    return app


app = create_app()
