from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pageprobe.core import handle_actions as action
from pageprobe.core.contracts import WaitOptions
from pageprobe.core.driver import ElementDriver, Handle
from pageprobe.core.errors import ElementDetachedError, ElementNotActionableError
from pageprobe.core.reporting import report
from pageprobe.core.wait_manager import wait_until

if TYPE_CHECKING:
    from pageprobe.core.selector import SelectorFluent

logger = logging.getLogger("pageprobe.action")


async def _wait_for_actionable_handle(
    selector: "SelectorFluent",
    driver: ElementDriver,
    verb: str,
    options: WaitOptions,
) -> Handle:
    report(logger, f"[Action] waiting for the selector to appear in DOM before {verb} ...", options.verbose)
    await wait_until(
        selector.exists,
        f"Cannot {verb} on '{selector}' because this selector was not found in DOM",
        options.merge(throw_on_timeout=True),
    )

    report(logger, "[Action] waiting for the selector to be visible ...", options.verbose)
    await wait_until(
        lambda: selector.is_visible(options.verbose),
        f"Cannot {verb} on '{selector}' because this selector is not visible",
        options.merge(throw_on_timeout=True),
    )

    report(logger, "[Action] waiting for the selector to stop moving ...", options.verbose)
    await wait_until(
        lambda: _is_still(selector, driver, options.verbose),
        f"Cannot {verb} on '{selector}' because this selector is moving",
        options.merge(throw_on_timeout=True),
    )

    handle = await selector.get_handle()
    if handle is None:
        raise ElementNotActionableError(f"Cannot {verb} on '{selector}' because this selector disappeared from DOM")
    return handle


async def _is_still(selector: "SelectorFluent", driver: ElementDriver, verbose: bool) -> bool:
    handle = await selector.get_handle()
    if handle is None:
        return False
    return not await action.is_handle_moving(driver, handle, verbose)


async def hover_on_selector(selector: "SelectorFluent", driver: ElementDriver, options: WaitOptions) -> None:
    handle = await _wait_for_actionable_handle(selector, driver, "hover", options)
    try:
        await driver.hover(handle)
    except ElementDetachedError as exc:
        raise ElementNotActionableError(f"Cannot hover on '{selector}' because it was detached from DOM") from exc
    report(logger, f"[Action] hovered on {selector}", options.verbose)


async def click_on_selector(selector: "SelectorFluent", driver: ElementDriver, options: WaitOptions) -> None:
    await _wait_for_actionable_handle(selector, driver, "click", options)

    await wait_until(
        selector.is_enabled,
        f"Cannot click on '{selector}' because this selector is disabled",
        options.merge(throw_on_timeout=True),
    )

    handle = await selector.get_handle()
    if handle is None:
        raise ElementNotActionableError(f"Cannot click on '{selector}' because this selector disappeared from DOM")
    try:
        await driver.click(handle)
    except ElementDetachedError as exc:
        raise ElementNotActionableError(f"Cannot click on '{selector}' because it was detached from DOM") from exc
    report(logger, f"[Action] clicked on {selector}", options.verbose)
