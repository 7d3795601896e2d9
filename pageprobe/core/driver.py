from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Union

from playwright.async_api import ElementHandle, Error as PlaywrightError, Frame, Page

from pageprobe.core.contracts import ClientRect, ComputedStyle, SelectOptionInfo
from pageprobe.core.errors import (
    DriverError,
    ElementDetachedError,
    SelectorConfigurationError,
    is_detachment_error,
)

Handle = Any
Scope = Union[Page, Frame]

SELECTOR_SYNTAX_MARKERS: tuple[str, ...] = (
    "is not a valid selector",
    "unexpected token",
    "syntaxerror",
    "unknown engine",
)


class ElementDriver(Protocol):
    """Capabilities the query algebra and the state predicates consume from the browser."""

    async def query_all(self, selector: str, scope: Any) -> list[Handle]:
        ...

    async def query_all_within(self, selector: str, handle: Handle) -> list[Handle]:
        ...

    async def parent_of(self, handle: Handle) -> Optional[Handle]:
        ...

    async def next_sibling_of(self, handle: Handle) -> Optional[Handle]:
        ...

    async def previous_sibling_of(self, handle: Handle) -> Optional[Handle]:
        ...

    async def inner_text(self, handle: Handle) -> Optional[str]:
        ...

    async def input_value(self, handle: Handle) -> Optional[str]:
        ...

    async def get_attribute(self, handle: Handle, name: str) -> Optional[str]:
        ...

    async def class_list(self, handle: Handle) -> list[str]:
        ...

    async def computed_style(self, handle: Handle) -> ComputedStyle:
        ...

    async def client_rect(self, handle: Handle) -> ClientRect:
        ...

    async def intersection_ratio(self, handle: Handle) -> float:
        ...

    async def is_visible(self, handle: Handle) -> bool:
        ...

    async def is_disabled(self, handle: Handle) -> bool:
        ...

    async def is_read_only(self, handle: Handle) -> bool:
        ...

    async def is_checked(self, handle: Handle) -> bool:
        ...

    async def select_options(self, handle: Handle) -> list[SelectOptionInfo]:
        ...

    async def hover(self, handle: Handle) -> None:
        ...

    async def click(self, handle: Handle) -> None:
        ...


_COMPUTED_STYLE_JS = """
el => {
    const style = window.getComputedStyle(el);
    return {
        opacity: style ? String(style.opacity) : "1",
        visibility: style ? String(style.visibility) : "visible",
        position: style ? String(style.position) : "static",
    };
}
"""

_CLIENT_RECT_JS = """
el => {
    const rect = el.getBoundingClientRect();
    return {top: rect.top, left: rect.left, width: rect.width, height: rect.height};
}
"""

_INTERSECTION_RATIO_JS = """
el => new Promise(resolve => {
    const observer = new IntersectionObserver(entries => {
        resolve(entries[0].intersectionRatio);
        observer.disconnect();
    });
    observer.observe(el);
})
"""

_SELECT_OPTIONS_JS = """
el => {
    if (!el.options) return [];
    return Array.from(el.options).map(option => ({
        value: option.value,
        label: option.label,
        selected: option.selected,
    }));
}
"""


class PlaywrightDriver:
    """ElementDriver over playwright.async_api element handles.

    Every Playwright error is re-raised as ElementDetachedError when its
    message says the node, frame or page went away, as
    SelectorConfigurationError when the selector string itself is invalid,
    and as DriverError otherwise.
    """

    @contextmanager
    def _translate_errors(self, operation: str) -> Iterator[None]:
        try:
            yield
        except PlaywrightError as exc:
            message = str(exc)
            if is_detachment_error(exc):
                raise ElementDetachedError(f"{operation} failed: {message}") from exc
            lowered = message.lower()
            if any(marker in lowered for marker in SELECTOR_SYNTAX_MARKERS):
                raise SelectorConfigurationError(f"{operation} failed: {message}") from exc
            raise DriverError(f"{operation} failed: {message}") from exc

    async def query_all(self, selector: str, scope: Scope) -> list[ElementHandle]:
        with self._translate_errors(f"query_selector_all('{selector}')"):
            return list(await scope.query_selector_all(selector))

    async def query_all_within(self, selector: str, handle: ElementHandle) -> list[ElementHandle]:
        with self._translate_errors(f"query_selector_all('{selector}') within handle"):
            return list(await handle.query_selector_all(selector))

    async def _relative(self, handle: ElementHandle, expression: str) -> Optional[ElementHandle]:
        with self._translate_errors(f"evaluate_handle({expression})"):
            js_handle = await handle.evaluate_handle(expression)
            element = js_handle.as_element()
            if element is None:
                await js_handle.dispose()
            return element

    async def parent_of(self, handle: ElementHandle) -> Optional[ElementHandle]:
        return await self._relative(handle, "el => el.parentElement")

    async def next_sibling_of(self, handle: ElementHandle) -> Optional[ElementHandle]:
        return await self._relative(handle, "el => el.nextElementSibling")

    async def previous_sibling_of(self, handle: ElementHandle) -> Optional[ElementHandle]:
        return await self._relative(handle, "el => el.previousElementSibling")

    async def inner_text(self, handle: ElementHandle) -> Optional[str]:
        with self._translate_errors("innerText"):
            return await handle.evaluate("el => (typeof el.innerText === 'string' ? el.innerText : el.textContent)")

    async def input_value(self, handle: ElementHandle) -> Optional[str]:
        with self._translate_errors("value"):
            return await handle.evaluate(
                "el => (el.value === undefined || el.value === null) ? null : String(el.value)"
            )

    async def get_attribute(self, handle: ElementHandle, name: str) -> Optional[str]:
        with self._translate_errors(f"getAttribute('{name}')"):
            return await handle.get_attribute(name)

    async def class_list(self, handle: ElementHandle) -> list[str]:
        with self._translate_errors("classList"):
            return list(await handle.evaluate("el => Array.from(el.classList || [])"))

    async def computed_style(self, handle: ElementHandle) -> ComputedStyle:
        with self._translate_errors("getComputedStyle"):
            payload = await handle.evaluate(_COMPUTED_STYLE_JS)
        return ComputedStyle(
            opacity=str(payload.get("opacity", "1")),
            visibility=str(payload.get("visibility", "visible")),
            position=str(payload.get("position", "static")),
        )

    async def client_rect(self, handle: ElementHandle) -> ClientRect:
        with self._translate_errors("getBoundingClientRect"):
            payload = await handle.evaluate(_CLIENT_RECT_JS)
        return ClientRect.from_dict(payload or {})

    async def intersection_ratio(self, handle: ElementHandle) -> float:
        with self._translate_errors("IntersectionObserver"):
            ratio = await handle.evaluate(_INTERSECTION_RATIO_JS)
        return float(ratio or 0.0)

    async def is_visible(self, handle: ElementHandle) -> bool:
        with self._translate_errors("ElementHandle.is_visible()"):
            return await handle.is_visible()

    async def is_disabled(self, handle: ElementHandle) -> bool:
        with self._translate_errors("ElementHandle.is_disabled()"):
            return await handle.is_disabled()

    async def is_read_only(self, handle: ElementHandle) -> bool:
        with self._translate_errors("readOnly"):
            return bool(await handle.evaluate("el => el.readOnly === true"))

    async def is_checked(self, handle: ElementHandle) -> bool:
        with self._translate_errors("checked"):
            return bool(await handle.evaluate("el => el.checked === true"))

    async def select_options(self, handle: ElementHandle) -> list[SelectOptionInfo]:
        with self._translate_errors("options"):
            payload = await handle.evaluate(_SELECT_OPTIONS_JS)
        return [
            SelectOptionInfo(
                value=str(item.get("value", "")),
                label=str(item.get("label", "")),
                selected=bool(item.get("selected", False)),
            )
            for item in payload or []
        ]

    async def hover(self, handle: ElementHandle) -> None:
        with self._translate_errors("ElementHandle.hover()"):
            await handle.hover()

    async def click(self, handle: ElementHandle) -> None:
        with self._translate_errors("ElementHandle.click()"):
            await handle.click()
