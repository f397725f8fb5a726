# SPDX-License-Identifier: GPL-3.0-only

from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from composer import MessageComposer
from config import RelayConfig
from errors import RelayError
from logutils import get_logger
from mailer import EmailSender, build_sender
from routers.v1.api import router as v1_router
from utils import get_env_var

logger = get_logger(__name__)


def http_exception_handler(_, exc: HTTPException):
    logger.error(exc.detail)
    return JSONResponse({"ok": False, "error": exc.detail}, status_code=exc.status_code)


def relay_exception_handler(_, exc: RelayError):
    logger.error("%s: %s", type(exc).__name__, exc.message)
    return JSONResponse({"ok": False, "error": exc.message}, status_code=exc.status_code)


def internal_exception_handler(_, exc: Exception):
    logger.exception(exc)
    return JSONResponse(
        {"ok": False, "error": "Oops! Something went wrong. Please try again later."},
        status_code=500,
    )


def health():
    return {"ok": True}


def create_app(
    config: Optional[RelayConfig] = None, sender: Optional[EmailSender] = None
) -> FastAPI:
    """Assemble the relay application.

    Args:
        config (RelayConfig, optional): Defaults to ``RelayConfig.from_env()``.
        sender (EmailSender, optional): Defaults to the configured provider.

    Returns:
        FastAPI: The application with routes, CORS and error handlers.
    """
    config = config or RelayConfig.from_env()

    docs_url = None if config.environment == "production" else "/docs"
    redoc_url = None if config.environment == "production" else "/redoc"

    app = FastAPI(docs_url=docs_url, redoc_url=redoc_url)
    app.state.config = config
    app.state.composer = MessageComposer(config)
    app.state.sender = sender or build_sender(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        allow_credentials=False,
        max_age=86400,
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RelayError, relay_exception_handler)
    app.add_exception_handler(Exception, internal_exception_handler)

    for path in ("/", "/health", "/healthz"):
        app.add_api_route(path, health, methods=["GET"])

    # The shop form posts to /send; /v1/send is the versioned path.
    app.include_router(v1_router)
    app.include_router(v1_router, prefix="/v1")

    logger.info(
        "Relay ready: provider=%s, origins=%s",
        app.state.sender.name,
        ", ".join(config.cors_origins),
    )
    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        create_app(), host="0.0.0.0", port=int(get_env_var("PORT", "10000"))
    )
