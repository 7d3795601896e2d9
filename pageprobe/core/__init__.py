"""Core module: lazy selectors, convergence waits and element state predicates."""

from pageprobe.core.contracts import (
    ClientRect,
    ComputedStyle,
    Point,
    ProbeConfig,
    SelectOptionInfo,
    WaitOptions,
)
from pageprobe.core.driver import ElementDriver, PlaywrightDriver
from pageprobe.core.errors import (
    DriverError,
    ElementDetachedError,
    ElementNotActionableError,
    NoPageAttachedError,
    PageProbeError,
    SelectorConfigurationError,
    WaitTimeoutError,
)
from pageprobe.core.expectations import SelectorExpectation
from pageprobe.core.probe import PageProbe
from pageprobe.core.query_steps import QueryStep, StepKind
from pageprobe.core.selector import SelectorFluent
from pageprobe.core.wait_manager import ConvergencePoller, wait_until

__all__ = [
    "ClientRect",
    "ComputedStyle",
    "ConvergencePoller",
    "DriverError",
    "ElementDetachedError",
    "ElementDriver",
    "ElementNotActionableError",
    "NoPageAttachedError",
    "PageProbe",
    "PageProbeError",
    "PlaywrightDriver",
    "Point",
    "ProbeConfig",
    "QueryStep",
    "SelectOptionInfo",
    "SelectorConfigurationError",
    "SelectorExpectation",
    "SelectorFluent",
    "StepKind",
    "WaitOptions",
    "WaitTimeoutError",
    "wait_until",
]
