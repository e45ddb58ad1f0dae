"""
Background Workers (Threading)
==============================
Runs sampling requests off the caller's thread.

Why is this file needed?
------------------------
1. Responsiveness: A large request can keep the draw-reject loop busy for a
   while. Interactive callers push it to a worker thread instead.
2. Superseding: Rapid input changes produce a stream of requests where only
   the newest matters. Older requests are cancelled if still queued and their
   results are discarded if they finish late. The core itself stays stateless
   and needs no cancellation support.

Classes:
    ResampleWorker: Single-slot background sampler with newest-wins delivery.

Functions:
    sample_many: Run independent requests in parallel, results in input order.
"""
from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import functools
import logging
import threading
from typing import Callable, Iterable, Optional

from orbitalcloud.config import SamplerSettings
from orbitalcloud.model.request import SampleRequest, SampleResult
from orbitalcloud.sampling.sampler import OrbitalSampler

logger = logging.getLogger(__name__)


def sample_many(
    requests: Iterable[SampleRequest],
    settings: Optional[SamplerSettings] = None,
    max_workers: Optional[int] = None,
) -> list[SampleResult]:
    """
    Sample independent requests concurrently.

    The element table and settings are immutable, and every request owns its
    generator, so no coordination is needed between the threads.

    Args:
        requests: Requests to run.
        settings: Shared tunables.
        max_workers: Thread count (executor default if None).

    Returns:
        Results in the same order as `requests`.
    """
    sampler = OrbitalSampler(settings)
    requests = list(requests)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(sampler.sample, requests))


class ResampleWorker:
    """
    Background sampler where each new request supersedes the previous one.

    Callbacks run on the worker thread and only for the newest request. The
    generation check and the callback run under the worker lock, so a
    concurrent submit() waits until an in-flight delivery has finished and a
    result can never be delivered after it was superseded. Callbacks may call
    submit() themselves, but must not wait on another thread that does.
    """

    def __init__(
        self,
        settings: Optional[SamplerSettings] = None,
        on_result: Optional[Callable[[SampleRequest, SampleResult], None]] = None,
        on_error: Optional[Callable[[SampleRequest, BaseException], None]] = None,
        max_workers: int = 1,
    ) -> None:
        """
        Args:
            settings: Tunables passed to the sampler.
            on_result: Called with (request, result) for the newest request.
            on_error: Called with (request, exception) for the newest request.
            max_workers: Threads in the pool. With more than one, a
                superseded request may still run to completion, but its result
                is discarded.
        """
        self._sampler = OrbitalSampler(settings)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="orbitalcloud")
        self._on_result = on_result
        self._on_error = on_error
        self._lock = threading.RLock()
        self._generation = 0
        self._current: Optional[Future[SampleResult]] = None
        self._current_request: Optional[SampleRequest] = None

    def __enter__(self) -> ResampleWorker:
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    @property
    def generation(self) -> int:
        """Number of requests submitted so far."""
        return self._generation

    def submit(self, request: SampleRequest) -> Future[SampleResult]:
        """
        Queue `request`, superseding anything submitted earlier.

        Returns:
            Future of this request's result.
        """
        with self._lock:
            if self._current is not None and self._current.cancel():
                logger.debug(f"Cancelled queued request {self._current_request}.")
            self._generation += 1
            generation = self._generation
            future = self._executor.submit(self._sampler.sample, request)
            self._current = future
            self._current_request = request

        future.add_done_callback(functools.partial(self._deliver, generation, request))
        return future

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def latest(self, timeout: Optional[float] = None) -> Optional[SampleResult]:
        """
        Wait for the newest request's result.

        Raises:
            concurrent.futures.TimeoutError: If it does not finish in time.
            Exception: Whatever the sampler raised for the newest request.

        Returns:
            The result, or None if nothing was ever submitted.
        """
        with self._lock:
            future = self._current
        if future is None:
            return None
        return future.result(timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _deliver(self, generation: int, request: SampleRequest, future: Future[SampleResult]) -> None:
        if future.cancelled():
            return
        with self._lock:
            if generation != self._generation:
                logger.debug(f"Discarding superseded result for {request}.")
                return

            error = future.exception()
            if error is not None:
                logger.error(f"Error in ResampleWorker for {request}: {error}")
                if self._on_error is not None:
                    self._on_error(request, error)
                return

            if self._on_result is not None:
                self._on_result(request, future.result())
