"""
State predicates and extractors on a single element handle.

Every function accepts ``None`` for an absent handle and answers without
raising: positive predicates are False, the "not visible" predicates are True.
A handle detached from the document while being evaluated is folded into the
negative answer as well, since that happens routinely while polling a page
that re-renders.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from pageprobe.core.contracts import ClientRect, SelectOptionInfo
from pageprobe.core.driver import ElementDriver, Handle
from pageprobe.core.errors import ElementDetachedError
from pageprobe.core.reporting import report

logger = logging.getLogger("pageprobe.handle")

MOVEMENT_SAMPLE_INTERVAL_MS = 50
MOVEMENT_EPSILON = 0.5


async def is_handle_visible(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False

    try:
        style = await driver.computed_style(handle)
        if style.is_transparent:
            report(logger, "[Handle] not visible because it is transparent", verbose)
            return False

        if style.position == "absolute":
            rect = await driver.client_rect(handle)
            if rect.top + rect.height < 0 or rect.left + rect.width < 0:
                report(logger, "[Handle] not visible because it is out of screen", verbose)
                return False

        return await driver.is_visible(handle)
    except ElementDetachedError as exc:
        logger.warning("[Handle] visibility check failed: %s", exc)
        report(logger, "[Handle] not visible because it has been detached from DOM", verbose)
        return False


async def is_handle_not_visible(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    return not await is_handle_visible(driver, handle, verbose)


async def is_handle_visible_in_viewport(
    driver: ElementDriver,
    handle: Optional[Handle],
    verbose: bool = False,
) -> bool:
    if handle is None:
        return False

    try:
        ratio = await driver.intersection_ratio(handle)
        report(logger, f"[Handle] visible ratio is {ratio}", verbose)
        if ratio <= 0:
            report(logger, "[Handle] not visible in the current viewport", verbose)
            return False

        style = await driver.computed_style(handle)
        if style.is_transparent or style.visibility == "hidden":
            return False

        rect = await driver.client_rect(handle)
        return not rect.is_empty
    except ElementDetachedError as exc:
        logger.warning("[Handle] viewport visibility check failed: %s", exc)
        report(logger, "[Handle] not visible in viewport because it has been detached from DOM", verbose)
        return False


async def is_handle_not_visible_in_viewport(
    driver: ElementDriver,
    handle: Optional[Handle],
    verbose: bool = False,
) -> bool:
    return not await is_handle_visible_in_viewport(driver, handle, verbose)


def _has_moved(before: ClientRect, after: ClientRect) -> bool:
    return any(
        abs(first - second) > MOVEMENT_EPSILON
        for first, second in (
            (before.top, after.top),
            (before.left, after.left),
            (before.width, after.width),
            (before.height, after.height),
        )
    )


async def is_handle_moving(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    """Two geometry samples MOVEMENT_SAMPLE_INTERVAL_MS apart; any change beyond epsilon means moving."""
    if handle is None:
        return False

    try:
        before = await driver.client_rect(handle)
        await asyncio.sleep(MOVEMENT_SAMPLE_INTERVAL_MS / 1000)
        after = await driver.client_rect(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not moving because it has been detached from DOM", verbose)
        return False

    moving = _has_moved(before, after)
    if moving:
        report(logger, f"[Handle] is moving: {before} -> {after}", verbose)
    return moving


async def is_handle_enabled(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False
    try:
        return not await driver.is_disabled(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not enabled because it has been detached from DOM", verbose)
        return False


async def is_handle_disabled(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False
    try:
        return await driver.is_disabled(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not disabled because it has been detached from DOM", verbose)
        return False


async def is_handle_read_only(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False
    try:
        return await driver.is_read_only(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not read-only because it has been detached from DOM", verbose)
        return False


async def is_handle_checked(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False
    try:
        return await driver.is_checked(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not checked because it has been detached from DOM", verbose)
        return False


async def is_handle_unchecked(driver: ElementDriver, handle: Optional[Handle], verbose: bool = False) -> bool:
    if handle is None:
        return False
    try:
        return not await driver.is_checked(handle)
    except ElementDetachedError:
        report(logger, "[Handle] not unchecked because it has been detached from DOM", verbose)
        return False


async def get_inner_text_of_handle(driver: ElementDriver, handle: Optional[Handle]) -> Optional[str]:
    if handle is None:
        return None
    try:
        return await driver.inner_text(handle)
    except ElementDetachedError:
        return None


async def get_value_of_handle(driver: ElementDriver, handle: Optional[Handle]) -> Optional[str]:
    if handle is None:
        return None
    try:
        return await driver.input_value(handle)
    except ElementDetachedError:
        return None


async def get_attribute_of_handle(driver: ElementDriver, handle: Optional[Handle], name: str) -> Optional[str]:
    if handle is None:
        return None
    try:
        return await driver.get_attribute(handle, name)
    except ElementDetachedError:
        return None


async def get_class_list_of_handle(driver: ElementDriver, handle: Optional[Handle]) -> list[str]:
    if handle is None:
        return []
    try:
        return await driver.class_list(handle)
    except ElementDetachedError:
        return []


async def get_client_rectangle_of_handle(driver: ElementDriver, handle: Optional[Handle]) -> Optional[ClientRect]:
    if handle is None:
        return None
    try:
        return await driver.client_rect(handle)
    except ElementDetachedError:
        return None


async def get_all_options_of_handle(driver: ElementDriver, handle: Optional[Handle]) -> list[SelectOptionInfo]:
    if handle is None:
        return []
    try:
        return await driver.select_options(handle)
    except ElementDetachedError:
        return []


async def has_handle_text(driver: ElementDriver, handle: Optional[Handle], expected: str) -> bool:
    text = await get_inner_text_of_handle(driver, handle)
    if text is None:
        return False
    return expected in text.strip()


async def has_handle_exact_text(driver: ElementDriver, handle: Optional[Handle], expected: str) -> bool:
    text = await get_inner_text_of_handle(driver, handle)
    if text is None:
        return False
    return text == expected


async def has_handle_value(driver: ElementDriver, handle: Optional[Handle], expected: str) -> bool:
    value = await get_value_of_handle(driver, handle)
    if value is None:
        return False
    return expected in value.strip()


async def has_handle_placeholder(driver: ElementDriver, handle: Optional[Handle], expected: str) -> bool:
    placeholder = await get_attribute_of_handle(driver, handle, "placeholder")
    if placeholder is None:
        return False
    return expected in placeholder.strip()


async def has_handle_attribute(
    driver: ElementDriver,
    handle: Optional[Handle],
    attribute_name: str,
    expected_value: str,
) -> bool:
    actual = await get_attribute_of_handle(driver, handle, attribute_name)
    if actual is None:
        return False
    return actual == expected_value


async def has_handle_class(driver: ElementDriver, handle: Optional[Handle], expected_class: str) -> bool:
    if handle is None:
        return False
    return expected_class in await get_class_list_of_handle(driver, handle)


async def has_not_handle_class(driver: ElementDriver, handle: Optional[Handle], expected_class: str) -> bool:
    if handle is None:
        return True
    return expected_class not in await get_class_list_of_handle(driver, handle)
