"""Authenticated HTTP adapter for the Deepself API."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

import requests

from deepself.config.settings import DeepselfSettings
from deepself.core.exceptions import (
    InvalidResponseError,
    MissingCredentialsError,
    TransportError,
)
from deepself.core.schema import RemoteCallSpec


SERVICE_NAME = "Deepself"
CANCEL_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class CallSuccess:
    """2xx response with its parsed JSON body."""

    status_code: int
    body: Any


@dataclass(frozen=True)
class CallFailure:
    """Non-2xx response with the raw body text, never JSON-parsed."""

    status_code: int
    raw_text: str


CallOutcome = Union[CallSuccess, CallFailure]


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


class _InflightRequest:
    """One streamed request on a daemon worker that the caller can abort.

    The worker reads the body itself, so closing the response (or the
    call's own session before headers arrive) from the calling thread
    tears down the connection and unblocks the worker.
    """

    def __init__(self, session: requests.Session, request_kwargs: Dict[str, Any]) -> None:
        self.session = session
        self.request_kwargs = dict(request_kwargs, stream=True)
        self.finished = threading.Event()
        self.response: Optional[requests.Response] = None
        self.error: Optional[Exception] = None
        self._aborted = False
        self._lock = threading.Lock()

    def run(self) -> None:
        try:
            response = self.session.request(**self.request_kwargs)
            with self._lock:
                self.response = response
                aborted = self._aborted
            if aborted:
                response.close()
                return
            # consume the body here so an abort can interrupt the read
            response.content
        except Exception as exc:
            self.error = exc
        finally:
            self.finished.set()

    def abort(self) -> None:
        with self._lock:
            self._aborted = True
            response = self.response
        if response is not None:
            response.close()
        self.session.close()

    def result(self) -> requests.Response:
        if self.error is not None:
            raise self.error
        return self.response


class DeepselfClient:
    """One shared session that performs single-attempt, bearer-authenticated calls.

    Cancellable calls run on a session of their own from ``session_factory``
    so that aborting one never closes connections used by another.
    """

    def __init__(
        self,
        settings: DeepselfSettings,
        *,
        session: Optional[requests.Session] = None,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.settings = settings
        self._session = session or requests.Session()
        self._session_factory = session_factory or requests.Session
        self._logger = logger or logging.getLogger(__name__)

    def build_url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}{path}"

    def build_headers(
        self,
        spec: RemoteCallSpec,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, str]:
        """Merge default, configured, per-call and caller headers (caller wins)."""
        headers = {
            "Authorization": f"Bearer {self.settings.api_key}",
            "Content-Type": "application/json",
        }
        headers.update(self.settings.extra_headers)
        headers.update(spec.headers or {})
        headers.update(overrides or {})
        return headers

    def call(
        self,
        spec: RemoteCallSpec,
        *,
        headers: Optional[Mapping[str, str]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> CallOutcome:
        """Perform exactly one request and classify its outcome.

        Raises MissingCredentialsError before touching the network when no
        API key is configured, TransportError when no HTTP response was
        received (including cancellation), and InvalidResponseError when a
        2xx body is not JSON.
        """
        if not self.settings.has_api_key:
            raise MissingCredentialsError(self.settings.config_hint)

        request_kwargs: Dict[str, Any] = {
            "method": spec.method,
            "url": self.build_url(spec.path),
            "headers": self.build_headers(spec, headers),
        }
        if spec.body is not None:
            request_kwargs["data"] = json.dumps(spec.body)
        if self.settings.request_timeout is not None:
            request_kwargs["timeout"] = self.settings.request_timeout

        self._logger.info("Deepself API call: %s %s", spec.method, spec.path)

        try:
            if cancel_event is None:
                response = self._session.request(**request_kwargs)
            else:
                response = self._request_cancellable(request_kwargs, cancel_event)
        except requests.RequestException as exc:
            raise TransportError(f"Deepself API request failed: {exc}") from exc

        return self._classify(response)

    def _request_cancellable(
        self,
        request_kwargs: Dict[str, Any],
        cancel_event: threading.Event,
    ) -> requests.Response:
        if cancel_event.is_set():
            raise TransportError("Deepself API request cancelled", cancelled=True)

        inflight = _InflightRequest(self._session_factory(), request_kwargs)
        worker = threading.Thread(target=inflight.run, name="deepself-http", daemon=True)
        worker.start()
        while not inflight.finished.wait(CANCEL_POLL_SECONDS):
            if cancel_event.is_set():
                inflight.abort()
                self._logger.warning(
                    "Deepself API call cancelled: %s %s",
                    request_kwargs["method"],
                    request_kwargs["url"],
                )
                raise TransportError("Deepself API request cancelled", cancelled=True)
        inflight.session.close()
        return inflight.result()

    def _classify(self, response: requests.Response) -> CallOutcome:
        status_code = response.status_code
        if not is_success_status(status_code):
            raw_text = response.text
            self._logger.debug("Deepself API failure status=%s body=%s", status_code, raw_text)
            return CallFailure(status_code=status_code, raw_text=raw_text)

        if not response.content:
            return CallSuccess(status_code=status_code, body={})
        try:
            body = response.json()
        except ValueError as exc:
            raise InvalidResponseError(status_code, response.text) from exc
        return CallSuccess(status_code=status_code, body=body)

    def close(self) -> None:
        self._session.close()
