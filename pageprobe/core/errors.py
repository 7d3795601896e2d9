from __future__ import annotations


class PageProbeError(Exception):
    """Base class for every error raised by pageprobe."""


class WaitTimeoutError(PageProbeError, TimeoutError):
    """A convergence wait did not become stably true before its timeout."""


class SelectorConfigurationError(PageProbeError, ValueError):
    """A selector chain was built with an invalid argument."""


class NoPageAttachedError(PageProbeError, RuntimeError):
    pass


class DriverError(PageProbeError):
    """The driver failed while evaluating something against the live page."""


class ElementDetachedError(DriverError):
    """The element (or its document) went away while it was being evaluated."""


# Fragments of Playwright error messages raised when a handle outlives its node,
# its frame or its page.
DETACHMENT_MARKERS: tuple[str, ...] = (
    "not attached",
    "detached",
    "execution context was destroyed",
    "cannot find context",
    "target closed",
    "target page, context or browser has been closed",
    "has been disposed",
    "jshandle is disposed",
    "frame was detached",
    "node is detached",
)


def is_detachment_error(exc: BaseException) -> bool:
    message = str(exc).lower()
    return any(marker in message for marker in DETACHMENT_MARKERS)


class ElementNotActionableError(PageProbeError):
    """An action needed a present, attached element and did not get one."""
