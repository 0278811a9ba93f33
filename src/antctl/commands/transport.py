from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import httpx

from ..core.exceptions import RequestCancelledError, RequestError
from ..core.logging_utils import log_event

logger = logging.getLogger("antctl.transport")


@dataclass(frozen=True)
class BackendRequest:
    method: str
    path: str
    params: Mapping[str, str] = field(default_factory=dict)


class BackendClient:
    """Synchronous httpx client bound to one backend component."""

    def __init__(
        self,
        base_url: str,
        *,
        backend: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        verify: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.backend = backend
        self.base_url = base_url
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            verify=verify,
            transport=transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def _check_cancelled(
        self, cancel: Optional[threading.Event], request: BackendRequest
    ) -> None:
        if cancel is not None and cancel.is_set():
            log_event(
                logger,
                logging.INFO,
                "backend.request.cancelled",
                backend=self.backend,
                method=request.method,
                path=request.path,
            )
            raise RequestCancelledError(
                f"Request to {self.backend} ({request.method} {request.path}) was cancelled"
            )

    def send(
        self, request: BackendRequest, *, cancel: Optional[threading.Event] = None
    ) -> bytes:
        """Issue ``request`` and return the raw body of a 2xx response."""
        self._check_cancelled(cancel, request)
        url = f"{self.base_url}{request.path}"
        log_event(
            logger,
            logging.DEBUG,
            "backend.request",
            backend=self.backend,
            method=request.method,
            url=url,
            params=dict(request.params),
        )
        try:
            response = self._client.request(
                request.method, request.path, params=dict(request.params) or None
            )
            response.raise_for_status()
        except httpx.TimeoutException as exc:
            log_event(
                logger,
                logging.INFO,
                "backend.request.timeout",
                backend=self.backend,
                url=url,
                exc=exc,
            )
            raise RequestCancelledError(
                f"Request to {self.backend} at {url} timed out"
            ) from exc
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            body_preview = (exc.response.text or "").strip().replace("\n", " ")[:200]
            hint = f": {body_preview}" if body_preview else ""
            log_event(
                logger,
                logging.WARNING,
                "backend.request.failed",
                backend=self.backend,
                url=url,
                status_code=status_code,
            )
            raise RequestError(
                f"{self.backend} at {url} returned HTTP {status_code}{hint}",
                backend=self.backend,
                url=url,
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            log_event(
                logger,
                logging.WARNING,
                "backend.request.failed",
                backend=self.backend,
                url=url,
                exc=exc,
            )
            raise RequestError(
                f"Failed to reach {self.backend} at {url}: {exc}",
                backend=self.backend,
                url=url,
            ) from exc
        self._check_cancelled(cancel, request)
        return response.content

    def download(
        self,
        request: BackendRequest,
        destination: Path,
        *,
        chunk_size: int = 64 * 1024,
    ) -> int:
        """Stream a response body into ``destination``; returns bytes written."""
        url = f"{self.base_url}{request.path}"
        written = 0
        try:
            with self._client.stream(
                request.method, request.path, params=dict(request.params) or None
            ) as response:
                response.raise_for_status()
                destination.parent.mkdir(parents=True, exist_ok=True)
                with destination.open("wb") as handle:
                    for chunk in response.iter_bytes(chunk_size):
                        handle.write(chunk)
                        written += len(chunk)
        except httpx.TimeoutException as exc:
            raise RequestCancelledError(
                f"Download from {self.backend} at {url} timed out"
            ) from exc
        except httpx.HTTPStatusError as exc:
            raise RequestError(
                f"{self.backend} at {url} returned HTTP {exc.response.status_code}",
                backend=self.backend,
                url=url,
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise RequestError(
                f"Failed to reach {self.backend} at {url}: {exc}",
                backend=self.backend,
                url=url,
            ) from exc
        log_event(
            logger,
            logging.INFO,
            "backend.download.completed",
            backend=self.backend,
            url=url,
            destination=str(destination),
            bytes=written,
        )
        return written
