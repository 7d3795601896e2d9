"""pageprobe: reliable observation of live, mutating pages for end-to-end UI tests."""

from pageprobe.core import (
    PageProbe,
    ProbeConfig,
    SelectorFluent,
    WaitOptions,
    WaitTimeoutError,
    wait_until,
)

__all__ = ["PageProbe", "ProbeConfig", "SelectorFluent", "WaitOptions", "WaitTimeoutError", "wait_until"]
