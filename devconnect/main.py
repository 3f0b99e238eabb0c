import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse

import sentry_sdk

from devconnect.config import config
from devconnect.domain import exceptions
from devconnect.log_config import configure_logging

from devconnect.entrypoints.routers.post import router as post_router

if config.SENTRY_DSN:
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        send_default_pii=True,
    )

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["HEAD", "GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.add_middleware(CorrelationIdMiddleware)

app.include_router(post_router)

@app.exception_handler(HTTPException)
async def http_exception_handle_logging(request, exc):
    logger.error(f"HTTPException: {exc.status_code} {exc.detail}")
    return await http_exception_handler(request, exc)

@app.exception_handler(exceptions.StoreFailure)
async def store_failure_handler(request, exc):
    logger.error(f"StoreFailure: {exc} ({exc.cause!r})")
    return JSONResponse(status_code=503, content={"detail": {"storefailure": "Storage unavailable"}})

@app.get("/")
async def root():
    return {"message": "Server is running"}
