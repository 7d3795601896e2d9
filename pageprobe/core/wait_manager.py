from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Union

from pageprobe.core.contracts import WaitOptions
from pageprobe.core.errors import WaitTimeoutError
from pageprobe.core.reporting import report

logger = logging.getLogger("pageprobe.wait")

Predicate = Callable[[], Awaitable[bool]]
FailureMessage = Union[str, Callable[[], str]]


@dataclass
class WaitOutcome:
    satisfied: bool
    attempts: int
    elapsed_ms: float
    detail: str


class ConvergencePoller:
    """One wait invocation: poll a predicate until it has held true for the stability window.

    The predicate is re-evaluated every ``polling_ms`` until either it has
    returned true on every evaluation for at least ``stability_ms`` (measured
    from the latest false -> true transition) or ``timeout_ms`` has elapsed.
    A single false evaluation resets the stability clock.
    """

    def __init__(self, predicate: Predicate, options: WaitOptions) -> None:
        self._predicate = predicate
        self._options = options
        self._attempts = 0
        self._true_since: Optional[float] = None

    async def _evaluate(self) -> bool:
        self._attempts += 1
        if not self._options.wrap_predicate_execution_inside_try_catch:
            return bool(await self._predicate())
        try:
            return bool(await self._predicate())
        except Exception as exc:
            report(logger, f"[Wait] attempt {self._attempts} raised {type(exc).__name__}: {exc}", self._options.verbose)
            return False

    async def run(self) -> WaitOutcome:
        options = self._options
        start = time.monotonic()
        timeout_s = max(options.timeout_ms, 0) / 1000
        stability_s = max(options.stability_ms, 0) / 1000
        polling_s = max(options.polling_ms, 1) / 1000
        report(logger, f"[Wait] polling with {options.to_dict()}", options.verbose)

        while True:
            result = await self._evaluate()
            now = time.monotonic()

            if result:
                if self._true_since is None:
                    self._true_since = now
                    report(logger, f"[Wait] predicate became true after {(now - start) * 1000:.0f}ms", options.verbose)
                stable_for = now - self._true_since
                if stable_for >= stability_s:
                    return WaitOutcome(
                        satisfied=True,
                        attempts=self._attempts,
                        elapsed_ms=(now - start) * 1000,
                        detail=f"stable for {stable_for * 1000:.0f}ms",
                    )
            elif self._true_since is not None:
                report(logger, "[Wait] predicate flipped back to false, stability reset", options.verbose)
                self._true_since = None

            if now - start >= timeout_s:
                return self._timed_out(start, now)

            await asyncio.sleep(min(polling_s, timeout_s - (now - start)))
            now = time.monotonic()
            if now - start >= timeout_s:
                return self._timed_out(start, now)

    def _timed_out(self, start: float, now: float) -> WaitOutcome:
        return WaitOutcome(
            satisfied=False,
            attempts=self._attempts,
            elapsed_ms=(now - start) * 1000,
            detail="timeout",
        )


async def wait_until(
    predicate: Predicate,
    failure_message: FailureMessage,
    options: WaitOptions | None = None,
) -> bool:
    options = options or WaitOptions()
    outcome = await ConvergencePoller(predicate, options).run()
    if outcome.satisfied:
        report(logger, f"[Wait] satisfied after {outcome.attempts} attempt(s), {outcome.detail}", options.verbose)
        return True

    message = failure_message() if callable(failure_message) else failure_message
    report(
        logger,
        f"[Wait] timed out after {outcome.elapsed_ms:.0f}ms and {outcome.attempts} attempt(s): {message}",
        options.verbose,
    )
    if options.throw_on_timeout:
        raise WaitTimeoutError(message)
    return False
