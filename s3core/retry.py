# -*- coding: utf-8 -*-
# MinIO Python Library for Amazon S3 Compatible Cloud Storage, (C)
# [2014] - [2025] MinIO, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Attempt strategy, error classification and retry loops.

Every S3 operation runs inside a bounded attempt sequence. An attempt
either returns a result, raises a terminal error or asks for a retry;
after the last permitted attempt the last error is raised.
"""

from __future__ import absolute_import, annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Optional, TypeVar

from urllib3.exceptions import (HTTPError, MaxRetryError, NewConnectionError,
                                ProtocolError)

from .error import InvalidResponseError, S3CoreException, S3Error, ServerError

T = TypeVar("T")

_RETRYABLE_CODES = (
    "InternalError",
    "NoSuchBucket",
    "NoSuchUpload",
    "RequestTimeout",
    "ServiceUnavailable",
    "SlowDown",
)
_RETRYABLE_STATUSES = (500, 502, 503, 504)


@dataclass(frozen=True)
class AttemptStrategy:
    """
    Policy of repeated attempts.

    Attempts are allowed while `total` seconds did not elapse since the
    start of the sequence, and at least `min_attempts` attempts are made
    regardless of elapsed time. Consecutive attempts are at least `delay`
    seconds apart.
    """
    total: float = 5.0
    delay: float = 0.2
    min_attempts: int = 5
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)
    sleep: Callable[[float], Any] = field(default=time.sleep, repr=False)

    def __post_init__(self):
        if self.min_attempts < 1:
            raise ValueError("min_attempts must be at least 1")
        if self.total < 0 or self.delay < 0:
            raise ValueError("total and delay must not be negative")

    @classmethod
    def single(cls) -> AttemptStrategy:
        """Strategy making exactly one attempt."""
        return cls(total=0, delay=0, min_attempts=1)

    def start(self) -> Attempt:
        """Begin a new sequence of attempts."""
        return Attempt(self)


class Attempt:
    """Sequence of attempts of an AttemptStrategy."""

    def __init__(self, strategy: AttemptStrategy):
        self._strategy = strategy
        now = strategy.clock()
        self._last = now
        self._end = now + strategy.total
        self._count = 0
        self._force = True

    @property
    def count(self) -> int:
        """Number of attempts made so far."""
        return self._count

    def _next_sleep(self, now: float) -> float:
        return max(self._strategy.delay - (now - self._last), 0)

    def next(self) -> bool:
        """
        Wait for the next attempt if needed and tell whether it may be
        made.
        """
        now = self._strategy.clock()
        sleep = self._next_sleep(now)
        if (
                not self._force and
                now + sleep >= self._end and
                self._count >= self._strategy.min_attempts
        ):
            return False
        self._force = False
        if sleep > 0 and self._count > 0:
            self._strategy.sleep(sleep)
            now = self._strategy.clock()
        self._count += 1
        self._last = now
        return True

    def has_next(self) -> bool:
        """
        Tell whether another attempt is permitted; once True, the following
        next() is guaranteed to return True.
        """
        if self._force or self._count < self._strategy.min_attempts:
            return True
        now = self._strategy.clock()
        if now + self._next_sleep(now) < self._end:
            self._force = True
            return True
        return False


def has_code(exc: Optional[BaseException], code: str) -> bool:
    """Check whether exc is an S3 error with the given error code."""
    return isinstance(exc, S3Error) and exc.code == code


def should_retry(exc: Optional[BaseException]) -> bool:
    """
    Classify exc as retryable or terminal.

    Service errors with a transient code or 5xx status, connection
    failures and dropped connections are retryable. Timeouts are not;
    they are surfaced to the caller.
    """
    if isinstance(exc, MaxRetryError):
        exc = exc.reason
    if isinstance(exc, S3Error):
        return (
            exc.code in _RETRYABLE_CODES or
            exc.status_code in _RETRYABLE_STATUSES
        )
    if isinstance(exc, (ServerError, InvalidResponseError)):
        return exc.status_code in _RETRYABLE_STATUSES
    return isinstance(exc, (NewConnectionError, ProtocolError))


def _last_error(error: Optional[BaseException]) -> BaseException:
    """Return the last error of an attempt sequence which ran out."""
    if error is None:
        # AttemptStrategy always grants a first attempt.
        return RuntimeError("attempt sequence ended without any attempt")
    return error


def retry(
        strategy: AttemptStrategy,
        func: Callable[..., T],
        *args: Any,
        **kwargs: Any,
) -> T:
    """Call func in a sequence of attempts and return its result."""
    error: Optional[BaseException] = None
    attempt = strategy.start()
    while attempt.next():
        try:
            return func(*args, **kwargs)
        except (S3CoreException, HTTPError) as exc:
            if not (should_retry(exc) and attempt.has_next()):
                raise
            error = exc
    raise _last_error(error)


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a listing."""
    items: list[T]
    is_truncated: bool
    markers: dict[str, str] = field(default_factory=dict)
    prefixes: list[str] = field(default_factory=list)


def paginate(
        strategy: AttemptStrategy,
        fetch: Callable[[dict[str, str]], Page[T]],
) -> tuple[list[T], list[str]]:
    """
    Fetch pages until one is not truncated and return all items and
    prefixes in page order.

    `fetch` gets the markers of the previous page (empty for the first
    page). Each page fetch is an attempt sequence of its own; a successful
    page restarts the sequence for the next one.
    """
    items: list[T] = []
    prefixes: list[str] = []
    markers: dict[str, str] = {}
    error: Optional[BaseException] = None
    attempt = strategy.start()
    while attempt.next():
        try:
            page = fetch(markers)
        except (S3CoreException, HTTPError) as exc:
            if not (should_retry(exc) and attempt.has_next()):
                raise
            error = exc
            continue
        items.extend(page.items)
        prefixes.extend(page.prefixes)
        if not page.is_truncated:
            return items, prefixes
        markers = page.markers
        attempt = strategy.start()
    raise _last_error(error)
