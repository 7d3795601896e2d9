from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pageprobe.core.driver import ElementDriver, Handle
from pageprobe.core.errors import DriverError, ElementDetachedError, SelectorConfigurationError


class StepKind(str, Enum):
    ROOT = "root"
    FIND = "find"
    WITH_TEXT = "with_text"
    WITH_EXACT_TEXT = "with_exact_text"
    WITH_VALUE = "with_value"
    WITH_PLACEHOLDER = "with_placeholder"
    WITH_ARIA_LABEL = "with_aria_label"
    NTH = "nth"
    PARENT = "parent"
    NEXT_SIBLING = "next_sibling"
    PREVIOUS_SIBLING = "previous_sibling"


SELECTOR_STEPS = frozenset({StepKind.ROOT, StepKind.FIND})
TEXT_STEPS = frozenset(
    {
        StepKind.WITH_TEXT,
        StepKind.WITH_EXACT_TEXT,
        StepKind.WITH_VALUE,
        StepKind.WITH_PLACEHOLDER,
        StepKind.WITH_ARIA_LABEL,
    }
)
STRUCTURAL_STEPS = frozenset({StepKind.PARENT, StepKind.NEXT_SIBLING, StepKind.PREVIOUS_SIBLING})


def validate_css_selector(selector: Any) -> str:
    if not isinstance(selector, str) or not selector.strip():
        raise SelectorConfigurationError(f"Invalid selector {selector!r}: expected a non-empty string")
    return selector


def validate_index(index: Any) -> int:
    # bool is an int subclass; nth(True) is always a caller mistake.
    if isinstance(index, bool) or not isinstance(index, int):
        raise SelectorConfigurationError(f"Invalid nth index {index!r}: expected an integer")
    return index


def validate_text(text: Any) -> str:
    if not isinstance(text, str):
        raise SelectorConfigurationError(f"Invalid text {text!r}: expected a string")
    return text


@dataclass(frozen=True)
class QueryStep:
    """One replayable transformation of a handle sequence."""

    kind: StepKind
    selector: Optional[str] = None
    text: Optional[str] = None
    index: Optional[int] = None

    @classmethod
    def root(cls, selector: str) -> "QueryStep":
        return cls(kind=StepKind.ROOT, selector=validate_css_selector(selector))

    @classmethod
    def find(cls, selector: str) -> "QueryStep":
        return cls(kind=StepKind.FIND, selector=validate_css_selector(selector))

    @classmethod
    def filter(cls, kind: StepKind, text: str) -> "QueryStep":
        if kind not in TEXT_STEPS:
            raise SelectorConfigurationError(f"'{kind.value}' is not a text filter step")
        return cls(kind=kind, text=validate_text(text))

    @classmethod
    def nth(cls, index: int) -> "QueryStep":
        return cls(kind=StepKind.NTH, index=validate_index(index))

    @classmethod
    def structural(cls, kind: StepKind) -> "QueryStep":
        if kind not in STRUCTURAL_STEPS:
            raise SelectorConfigurationError(f"'{kind.value}' is not a structural step")
        return cls(kind=kind)

    def describe(self) -> str:
        """Chaining-history fragment for this step, e.g. ``.nth(-1)``."""
        if self.kind == StepKind.ROOT:
            return f"selector({self.selector})"
        if self.kind == StepKind.FIND:
            return f".find({self.selector})"
        if self.kind in TEXT_STEPS:
            return f".{self.kind.value}({self.text})"
        if self.kind == StepKind.NTH:
            return f".nth({self.index})"
        return f".{self.kind.value}()"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.kind.value}
        if self.kind in SELECTOR_STEPS:
            payload["selector"] = self.selector
        elif self.kind in TEXT_STEPS:
            payload["text"] = self.text
        elif self.kind == StepKind.NTH:
            payload["index"] = self.index
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "QueryStep":
        if not isinstance(payload, dict):
            raise SelectorConfigurationError(f"Invalid step record: {payload!r}")
        name = payload.get("name")
        try:
            kind = StepKind(name)
        except ValueError as exc:
            raise SelectorConfigurationError(f"Step '{name}' is not yet implemented") from exc

        if kind == StepKind.ROOT:
            return cls.root(payload.get("selector"))
        if kind == StepKind.FIND:
            return cls.find(payload.get("selector"))
        if kind in TEXT_STEPS:
            return cls.filter(kind, payload.get("text"))
        if kind == StepKind.NTH:
            return cls.nth(payload.get("index"))
        return cls.structural(kind)


def get_nth_handle(index: int, handles: list[Handle]) -> list[Handle]:
    """Pick one handle by 1-based index; negative indexes count from the end."""
    count = len(handles)
    if index == 0 or abs(index) > count:
        return []
    if index > 0:
        return [handles[index - 1]]
    return [handles[count + index]]


async def _query_all_within(selector: str, handles: list[Handle], driver: ElementDriver) -> list[Handle]:
    result: list[Handle] = []
    for handle in handles:
        try:
            result.extend(await driver.query_all_within(selector, handle))
        except ElementDetachedError:
            continue
    return result


async def _relatives_of(
    handles: list[Handle],
    relative: Callable[[Handle], Awaitable[Optional[Handle]]],
) -> list[Handle]:
    result: list[Handle] = []
    for handle in handles:
        try:
            found = await relative(handle)
        except ElementDetachedError:
            continue
        if found is not None:
            result.append(found)
    return result


def _contains(actual: Optional[str], expected: str) -> bool:
    if actual is None:
        return False
    return expected in actual.strip()


def _equals(actual: Optional[str], expected: str) -> bool:
    if actual is None:
        return False
    return actual == expected


async def handle_matches(step: QueryStep, handle: Handle, driver: ElementDriver) -> bool:
    text = step.text or ""
    if step.kind == StepKind.WITH_TEXT:
        return _contains(await driver.inner_text(handle), text)
    if step.kind == StepKind.WITH_EXACT_TEXT:
        return _equals(await driver.inner_text(handle), text)
    if step.kind == StepKind.WITH_VALUE:
        return _contains(await driver.input_value(handle), text)
    if step.kind == StepKind.WITH_PLACEHOLDER:
        return _contains(await driver.get_attribute(handle, "placeholder"), text)
    if step.kind == StepKind.WITH_ARIA_LABEL:
        return _equals(await driver.get_attribute(handle, "aria-label"), text)
    raise SelectorConfigurationError(f"'{step.kind.value}' is not a text filter step")


async def _filter_handles(step: QueryStep, handles: list[Handle], driver: ElementDriver) -> list[Handle]:
    result: list[Handle] = []
    for handle in handles:
        try:
            matched = await handle_matches(step, handle, driver)
        except DriverError:
            matched = False
        if matched:
            result.append(handle)
    return result


async def apply_step(
    step: QueryStep,
    handles: list[Handle],
    driver: ElementDriver,
    scope: Any,
) -> list[Handle]:
    """Run one step against the live document; absence is an empty list, never an error."""
    if step.kind == StepKind.ROOT:
        try:
            return list(await driver.query_all(step.selector or "", scope))
        except ElementDetachedError:
            return []

    if step.kind == StepKind.FIND:
        return await _query_all_within(step.selector or "", handles, driver)

    if step.kind in TEXT_STEPS:
        return await _filter_handles(step, handles, driver)

    if step.kind == StepKind.NTH:
        return get_nth_handle(step.index or 0, handles)

    if step.kind == StepKind.PARENT:
        return await _relatives_of(handles, driver.parent_of)

    if step.kind == StepKind.NEXT_SIBLING:
        return await _relatives_of(handles, driver.next_sibling_of)

    if step.kind == StepKind.PREVIOUS_SIBLING:
        return await _relatives_of(handles, driver.previous_sibling_of)

    raise SelectorConfigurationError(f"Step '{step.kind.value}' is not yet implemented")
