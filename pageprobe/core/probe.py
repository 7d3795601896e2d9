"""
PageProbe - entry point of the library.

Attach it to a Playwright page (the caller owns the browser), then build lazy
selectors, run convergence waits and assertions against whatever page or
frame is currently in scope:

    probe = PageProbe()
    probe.attach(page)
    rows = probe.selector('[role="row"]')
    await probe.expect_that(rows.nth(-1)).is_visible()
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

from playwright.async_api import Frame, Page

from pageprobe.core.contracts import ProbeConfig, WaitOptions
from pageprobe.core.driver import ElementDriver, PlaywrightDriver
from pageprobe.core.errors import NoPageAttachedError
from pageprobe.core.expectations import SelectorExpectation
from pageprobe.core.selector import SelectorFluent
from pageprobe.core.wait_manager import FailureMessage, Predicate, wait_until

logger = logging.getLogger("pageprobe.probe")


class PageProbe:
    """Owns the driver, the page/frame scope and the default wait options."""

    def __init__(
        self,
        config: Optional[ProbeConfig] = None,
        driver: Optional[ElementDriver] = None,
    ) -> None:
        """
        Initialize PageProbe.

        Args:
            config: Probe configuration, uses defaults if not provided
            driver: Element driver, a PlaywrightDriver if not provided
        """
        self.config = config or ProbeConfig()
        self._driver: ElementDriver = driver or PlaywrightDriver()
        self._page: Optional[Any] = None
        self._frame: Optional[Any] = None
        self._default_wait = self.config.default_wait

    @property
    def driver(self) -> ElementDriver:
        return self._driver

    @property
    def default_wait(self) -> WaitOptions:
        return self._default_wait

    def with_default_wait_options(self, **overrides: Any) -> "PageProbe":
        self._default_wait = self._default_wait.merge(**overrides)
        return self

    def attach(self, page: Union[Page, Any]) -> "PageProbe":
        self._page = page
        self._frame = None
        logger.info("[Probe] Attached to page")
        return self

    def detach(self) -> None:
        self._page = None
        self._frame = None
        logger.info("[Probe] Detached from page")

    @property
    def page(self) -> Optional[Any]:
        return self._page

    def switch_to_frame(self, frame: Union[Frame, Any]) -> "PageProbe":
        if self._page is None:
            raise NoPageAttachedError("Cannot switch to frame because no browser has been launched")
        self._frame = frame
        return self

    def switch_back_to_page(self) -> "PageProbe":
        self._frame = None
        return self

    def current_page_or_frame(self, error_message: Optional[str] = None) -> Any:
        if self._page is None:
            raise NoPageAttachedError(error_message or "No page attached: call attach(page) first")
        return self._frame if self._frame is not None else self._page

    def selector(self, selector: str) -> SelectorFluent:
        return SelectorFluent.root(self, selector)

    def selector_from_state(self, state: Union[dict[str, Any], str]) -> SelectorFluent:
        return SelectorFluent.from_state(self, state)

    async def wait_until(
        self,
        predicate: Predicate,
        failure_message: FailureMessage,
        **overrides: Any,
    ) -> bool:
        return await wait_until(predicate, failure_message, self._default_wait.merge(**overrides))

    def expect_that(self, selector: Union[SelectorFluent, str]) -> SelectorExpectation:
        if isinstance(selector, str):
            selector = self.selector(selector)
        return SelectorExpectation(selector, self._default_wait)
