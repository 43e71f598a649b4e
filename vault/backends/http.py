"""HTTP client for a remote blob service."""

from typing import Optional

import httpx

from common.logging_config import get_logger
from vault.backends.base import BlobBackend
from vault.exceptions import BackendError, PartNotFoundError

logger = get_logger(__name__)


class HttpBlobBackend(BlobBackend):
    """
    Talks to a blob service exposing:

        POST   /blobs        multipart ``file`` field -> {"id": "<blob id>"}
        GET    /blobs/{id}   raw bytes
        DELETE /blobs/{id}

    Requests are sent once. Failures are reported as ``BackendError`` with
    ``retryable`` set for connection errors, timeouts and 5xx responses.
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 60.0):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.session = httpx.Client(base_url=base_url, timeout=timeout, headers=headers)
        logger.info(f"Initialized HttpBlobBackend [base_url={base_url}]")

    def close(self) -> None:
        self.session.close()

    def _request(self, method: str, endpoint: str, operation: str, part_id: Optional[str] = None, **kwargs) -> httpx.Response:
        try:
            response = self.session.request(method, endpoint, **kwargs)
        except (httpx.ConnectError, httpx.TimeoutException) as e:
            raise BackendError(
                f"{operation} failed: {type(e).__name__}: {e}",
                operation=operation,
                part_id=part_id,
                retryable=True,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(
                f"{operation} failed: {e}", operation=operation, part_id=part_id
            ) from e

        logger.debug(f"Response received: {method} {endpoint} status={response.status_code}")

        if response.status_code == 404 and part_id is not None:
            raise PartNotFoundError(part_id)

        if response.status_code >= 400:
            raise BackendError(
                f"{operation} failed with status {response.status_code}: {response.text[:200]}",
                operation=operation,
                part_id=part_id,
                retryable=response.status_code >= 500 or response.status_code == 429,
            )

        return response

    def store(self, label: str, content: bytes) -> str:
        response = self._request(
            "POST", "/blobs", "store",
            files={"file": (label, content, "application/octet-stream")},
        )
        try:
            blob_id = response.json()["id"]
        except (ValueError, KeyError) as e:
            raise BackendError(
                f"store returned no blob id for '{label}'", operation="store"
            ) from e
        return str(blob_id)

    def fetch(self, blob_id: str) -> bytes:
        return self._request("GET", f"/blobs/{blob_id}", "fetch", part_id=blob_id).content

    def remove(self, blob_id: str) -> None:
        self._request("DELETE", f"/blobs/{blob_id}", "remove", part_id=blob_id)

    def ping(self) -> bool:
        try:
            response = self.session.get("/health")
        except httpx.HTTPError:
            return False
        return response.status_code == 200
