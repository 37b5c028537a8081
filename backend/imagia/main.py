# imagia/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imagia.config import settings
from imagia.core import events
from imagia.core.bootstrap import ensure_default_admin
from imagia.core.db import init_db, close_db
from imagia.core.envelope import error
from imagia.core.errors import ApiError

from imagia.api.routers import admin, prompts, users

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS; the bearer token travels back in the Authorization response header
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    expose_headers=["Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info("[http] %s %s -> %s (%.1f ms) ip=%s",
                request.method, request.url.path, response.status_code,
                (time.perf_counter() - started) * 1000,
                request.client.host if request.client else "-")
    return response


# ------------------------------------------------------------------------------
# Error envelope: {"status": "ERROR", "message": ..., "data": None}
# ------------------------------------------------------------------------------
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    level = "ERROR" if exc.status_code >= 500 else "WARN"
    await events.record_event(level, exc.category, f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error(exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = sorted({".".join(str(p) for p in e.get("loc", ())[1:]) or "body" for e in exc.errors()})
    message = f"Invalid fields: {', '.join(fields)}"
    await events.warn("SERVER", f"{request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=error(message))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Routing errors (404 unknown path, 405 wrong method)
    return JSONResponse(status_code=exc.status_code, content=error(str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("[server] unhandled error on %s %s", request.method, request.url.path)
    await events.error("SERVER", f"{request.method} {request.url.path}: {type(exc).__name__}")
    return JSONResponse(status_code=500, content=error("Internal server error"))


@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    await events.info("SERVER", f"{settings.APP_NAME} started (env={settings.env})")


@app.on_event("shutdown")
async def on_shutdown():
    await close_db()


# REST
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(prompts.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)


@app.get("/healthz")
def healthz():
    return {"ok": True}
