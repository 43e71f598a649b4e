"""Entry point for the vault HTTP service."""

import time
import uuid

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.logging_config import setup_logging
from vault.config import VAULT_HOST, VAULT_PORT
from vault.exceptions import (
    AlreadyExistsError,
    BackendError,
    NotFoundError,
    ValidationError,
    VaultError,
)
from vault.routes import file_router, group_router
from vault.schemas import ErrorResponse
from vault.vault import Vault

logger = setup_logging('vault')

app = FastAPI(
    title="Vault",
    description="Chunked content store over an opaque blob backend",
    version="1.0.0"
)

app.include_router(file_router)
app.include_router(group_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    logger.info(f"Request started: {request.method} {request.url.path} [request_id={request_id}]")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id
    return response


@app.on_event("startup")
async def startup_event():
    """
    Open the metadata store and blob backend unless one was injected.
    """
    if getattr(app.state, "vault", None) is None:
        app.state.vault = Vault.from_config()
    logger.info("Vault service started")


@app.on_event("shutdown")
async def shutdown_event():
    vault = getattr(app.state, "vault", None)
    if vault is not None:
        vault.close()
    logger.info("Vault service shutting down...")


def _error_response(request: Request, exc: VaultError, status_code: int, code: str) -> JSONResponse:
    request_id = getattr(request.state, 'request_id', 'unknown')
    if status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}")
    else:
        logger.warning(f"{type(exc).__name__}: {exc} [request_id={request_id}] path={request.url.path}")
    return JSONResponse(status_code=status_code, content=ErrorResponse(detail=str(exc), code=code).model_dump())


@app.exception_handler(AlreadyExistsError)
async def already_exists_handler(request: Request, exc: AlreadyExistsError):
    return _error_response(request, exc, status.HTTP_409_CONFLICT, "ALREADY_EXISTS")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error_response(request, exc, status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return _error_response(request, exc, status.HTTP_404_NOT_FOUND, "NOT_FOUND")


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE if exc.retryable else status.HTTP_502_BAD_GATEWAY
    return _error_response(request, exc, status_code, "BACKEND_ERROR")


@app.exception_handler(VaultError)
async def vault_error_handler(request: Request, exc: VaultError):
    return _error_response(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")


@app.get("/health")
def health_check():
    """
    Reports whether the metadata store and blob backend respond.
    """
    vault: Vault = app.state.vault

    try:
        vault.store.conn.execute("SELECT 1")
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {e}"

    try:
        backend_status = "ok" if vault.backend.ping() else "unavailable"
    except Exception as e:
        backend_status = f"error: {e}"

    ready = db_status == "ok" and backend_status == "ok"
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"ready": ready, "database": db_status, "backend": backend_status}
    )


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run("vault.main:app", host=VAULT_HOST, port=VAULT_PORT)


if __name__ == "__main__":
    main()
