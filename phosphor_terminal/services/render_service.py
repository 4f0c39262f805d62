from __future__ import annotations

import concurrent.futures
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Tuple

import numpy as np

from ..processing.parameters import EffectParameters
from ..utils.errors import format_user_error
from ..utils.logger import get_logger

logger = get_logger(__name__)

ResultCallback = Callable[[int, np.ndarray, str], None]
ErrorCallback = Callable[[int, Exception], None]


class RendererProtocol(Protocol):
    def process(
        self, image: np.ndarray, params: Optional[EffectParameters] = None
    ) -> Tuple[np.ndarray, str]: ...


@dataclass(frozen=True)
class RenderRequest:
    """Handle for one submitted render."""

    request_id: int
    future: concurrent.futures.Future


@dataclass(frozen=True)
class RenderResult:
    request_id: int
    image: np.ndarray
    strategy: str


class RenderService:
    """
    Runs renders off the caller's thread, keeping only the newest request.

    Each submit() supersedes every earlier request: a queued one is
    cancelled, a running one finishes but its result is dropped. Only the
    latest request reaches ``on_result`` / ``on_error``.
    """

    def __init__(
        self,
        renderer: Optional[RendererProtocol] = None,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        if renderer is None:
            from ..processing.processing_strategy import EffectContext
            renderer = EffectContext()
        self._renderer = renderer
        self._on_result = on_result
        self._on_error = on_error

        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="render"
        )
        self._lock = threading.Lock()
        self._latest_id = 0
        self._pending: Optional[RenderRequest] = None
        self._latest_result: Optional[RenderResult] = None

    def submit(self, image: np.ndarray, params: Optional[EffectParameters] = None) -> RenderRequest:
        """
        Queue a render and supersede all earlier ones.

        The caller must not mutate ``image`` until this request completes.
        """
        with self._lock:
            self._latest_id += 1
            request_id = self._latest_id
            previous = self._pending
            future = self._executor.submit(self._run, request_id, image, params)
            request = RenderRequest(request_id, future)
            self._pending = request

        if previous is not None and previous.future.cancel():
            logger.debug("Cancelled queued render %d", previous.request_id)
        return request

    def is_latest(self, request_id: int) -> bool:
        with self._lock:
            return request_id == self._latest_id

    def _run(self, request_id: int, image: np.ndarray, params: Optional[EffectParameters]):
        if not self.is_latest(request_id):
            logger.debug("Skipping superseded render %d", request_id)
            return None

        try:
            rendered, strategy = self._renderer.process(image, params)
        except Exception as e:
            if not self.is_latest(request_id):
                return None
            logger.error("Render %d failed: %s", request_id, format_user_error(e))
            if self._on_error is not None:
                self._on_error(request_id, e)
                return None
            raise

        with self._lock:
            if request_id != self._latest_id:
                logger.debug("Discarding result of superseded render %d", request_id)
                return None
            result = RenderResult(request_id, rendered, strategy)
            self._latest_result = result

        if self._on_result is not None:
            self._on_result(request_id, rendered, strategy)
        return result

    def latest_result(self) -> Optional[RenderResult]:
        """Most recent result delivered for a non-superseded request."""
        with self._lock:
            return self._latest_result

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "RenderService":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
