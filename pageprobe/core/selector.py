from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from pageprobe.core import handle_actions as action
from pageprobe.core.contracts import ClientRect, Point, SelectOptionInfo, WaitOptions
from pageprobe.core.driver import Handle
from pageprobe.core.errors import SelectorConfigurationError
from pageprobe.core.query_steps import QueryStep, StepKind, apply_step
from pageprobe.core.selector_actions import click_on_selector, hover_on_selector

if TYPE_CHECKING:
    from pageprobe.core.probe import PageProbe

logger = logging.getLogger("pageprobe.selector")

HISTORY_SEPARATOR = "\n  "


class SelectorFluent:
    """
    Lazy, replayable description of a set of elements.

    Building a chain (find, with_text, nth, parent, ...) does no I/O and
    returns a new selector; the receiver is never modified. Every terminal
    call (get_all_handles, count, exists, is_visible, ...) replays the whole
    chain against the current page, so two calls may legitimately disagree
    when the page changed in between.

    Example:
        rows = probe.selector('[role="row"]')
        await rows.for_each(handle_row)
    """

    def __init__(self, probe: "PageProbe", steps: tuple[QueryStep, ...], history: str) -> None:
        if not steps or steps[0].kind != StepKind.ROOT:
            raise SelectorConfigurationError("A selector chain must start with a root query")
        self._probe = probe
        self._steps = steps
        self._history = history

    @classmethod
    def root(cls, probe: "PageProbe", selector: str) -> "SelectorFluent":
        step = QueryStep.root(selector)
        return cls(probe, (step,), step.describe())

    @classmethod
    def from_state(cls, probe: "PageProbe", state: dict[str, Any] | str) -> "SelectorFluent":
        if isinstance(state, str):
            try:
                payload = json.loads(state)
            except json.JSONDecodeError as exc:
                raise SelectorConfigurationError(f"Invalid selector state JSON: {state!r}") from exc
        else:
            payload = state
        try:
            raw_steps = payload["steps"]
            history = payload["history"]
        except (KeyError, TypeError) as exc:
            raise SelectorConfigurationError(f"Invalid selector state: {payload!r}") from exc
        if not isinstance(raw_steps, list):
            raise SelectorConfigurationError(f"Invalid selector steps: {raw_steps!r}")
        if not isinstance(history, str):
            raise SelectorConfigurationError(f"Invalid selector history: {history!r}")
        steps = tuple(QueryStep.from_dict(item) for item in raw_steps)
        return cls(probe, steps, history)

    @property
    def steps(self) -> tuple[QueryStep, ...]:
        return self._steps

    def to_state(self) -> dict[str, Any]:
        return {
            "steps": [step.to_dict() for step in self._steps],
            "history": self._history,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_state(), separators=(",", ":"), ensure_ascii=True)

    def __str__(self) -> str:
        return self._history

    def __repr__(self) -> str:
        return f"SelectorFluent({self._history!r})"

    def _chain(self, step: QueryStep) -> "SelectorFluent":
        history = f"{self._history}{HISTORY_SEPARATOR}{step.describe()}"
        return SelectorFluent(self._probe, self._steps + (step,), history)

    def find(self, selector: str) -> "SelectorFluent":
        return self._chain(QueryStep.find(selector))

    def with_text(self, text: str) -> "SelectorFluent":
        """Keep elements whose trimmed inner text contains ``text``."""
        return self._chain(QueryStep.filter(StepKind.WITH_TEXT, text))

    def with_exact_text(self, text: str) -> "SelectorFluent":
        """Keep elements whose inner text is exactly ``text``; use it to find empty elements."""
        return self._chain(QueryStep.filter(StepKind.WITH_EXACT_TEXT, text))

    def with_value(self, text: str) -> "SelectorFluent":
        return self._chain(QueryStep.filter(StepKind.WITH_VALUE, text))

    def with_placeholder(self, text: str) -> "SelectorFluent":
        return self._chain(QueryStep.filter(StepKind.WITH_PLACEHOLDER, text))

    def with_aria_label(self, text: str) -> "SelectorFluent":
        """Keep elements whose aria-label matches ``text`` exactly."""
        return self._chain(QueryStep.filter(StepKind.WITH_ARIA_LABEL, text))

    def parent(self) -> "SelectorFluent":
        return self._chain(QueryStep.structural(StepKind.PARENT))

    def next_sibling(self) -> "SelectorFluent":
        return self._chain(QueryStep.structural(StepKind.NEXT_SIBLING))

    def previous_sibling(self) -> "SelectorFluent":
        return self._chain(QueryStep.structural(StepKind.PREVIOUS_SIBLING))

    def nth(self, index: int) -> "SelectorFluent":
        """
        Take the nth element found at the previous step.

        Args:
            index: 1-based; nth(1) is the first element, nth(-1) the last one.
        """
        return self._chain(QueryStep.nth(index))

    async def _execute_steps(self) -> list[Handle]:
        root_selector = self._steps[0].selector
        scope = self._probe.current_page_or_frame(
            f"Cannot query selector '{root_selector}' because no browser has been launched"
        )
        driver = self._probe.driver
        handles: list[Handle] = []
        for step in self._steps:
            handles = await apply_step(step, list(handles), driver, scope)
        return handles

    async def get_all_handles(self) -> list[Handle]:
        """All elements matching the chain right now; empty when nothing matches."""
        return await self._execute_steps()

    async def get_handle(self) -> Optional[Handle]:
        """First element matching the chain right now, or None."""
        handles = await self._execute_steps()
        if not handles:
            return None
        return handles[0]

    async def count(self) -> int:
        handles = await self._execute_steps()
        return len(handles)

    async def exists(self) -> bool:
        return await self.get_handle() is not None

    async def does_not_exist(self) -> bool:
        return await self.get_handle() is None

    async def for_each(self, func: Callable[["SelectorFluent", int], Awaitable[None]]) -> None:
        """
        Call ``func(self.nth(index), index)`` for index 1..count().

        The count is taken once; each item is re-resolved by position when
        ``func`` uses it, so items added or removed during the loop can be
        skipped or visited twice.
        """
        selectors_count = await self.count()
        for index in range(1, selectors_count + 1):
            await func(self.nth(index), index)

    def _verbose(self, verbose: Optional[bool]) -> bool:
        if verbose is None:
            return self._probe.default_wait.verbose
        return verbose

    async def is_visible(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_visible(self._probe.driver, handle, self._verbose(verbose))

    async def is_not_visible(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_not_visible(self._probe.driver, handle, self._verbose(verbose))

    async def is_visible_in_viewport(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_visible_in_viewport(self._probe.driver, handle, self._verbose(verbose))

    async def is_not_visible_in_viewport(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_not_visible_in_viewport(self._probe.driver, handle, self._verbose(verbose))

    async def is_moving(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_moving(self._probe.driver, handle, self._verbose(verbose))

    async def is_enabled(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_enabled(self._probe.driver, handle, self._verbose(verbose))

    async def is_disabled(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_disabled(self._probe.driver, handle, self._verbose(verbose))

    async def is_read_only(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_read_only(self._probe.driver, handle, self._verbose(verbose))

    async def is_not_read_only(self, verbose: Optional[bool] = None) -> bool:
        return not await self.is_read_only(verbose)

    async def is_checked(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_checked(self._probe.driver, handle, self._verbose(verbose))

    async def is_unchecked(self, verbose: Optional[bool] = None) -> bool:
        handle = await self.get_handle()
        return await action.is_handle_unchecked(self._probe.driver, handle, self._verbose(verbose))

    async def has_text(self, expected: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_text(self._probe.driver, handle, expected)

    async def has_exact_text(self, expected: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_exact_text(self._probe.driver, handle, expected)

    async def has_value(self, expected: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_value(self._probe.driver, handle, expected)

    async def has_placeholder(self, expected: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_placeholder(self._probe.driver, handle, expected)

    async def has_attribute_with_value(self, attribute_name: str, expected_value: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_attribute(self._probe.driver, handle, attribute_name, expected_value)

    async def has_class(self, expected_class: str) -> bool:
        handle = await self.get_handle()
        return await action.has_handle_class(self._probe.driver, handle, expected_class)

    async def does_not_have_class(self, expected_class: str) -> bool:
        handle = await self.get_handle()
        return await action.has_not_handle_class(self._probe.driver, handle, expected_class)

    async def inner_text(self) -> Optional[str]:
        handle = await self.get_handle()
        return await action.get_inner_text_of_handle(self._probe.driver, handle)

    async def value(self) -> Optional[str]:
        handle = await self.get_handle()
        return await action.get_value_of_handle(self._probe.driver, handle)

    async def class_list(self) -> list[str]:
        handle = await self.get_handle()
        return await action.get_class_list_of_handle(self._probe.driver, handle)

    async def get_attribute(self, attribute_name: str) -> Optional[str]:
        handle = await self.get_handle()
        return await action.get_attribute_of_handle(self._probe.driver, handle, attribute_name)

    async def placeholder(self) -> Optional[str]:
        return await self.get_attribute("placeholder")

    async def client_rectangle(self) -> Optional[ClientRect]:
        handle = await self.get_handle()
        return await action.get_client_rectangle_of_handle(self._probe.driver, handle)

    async def position(self) -> Optional[Point]:
        """Center of the bounding box."""
        rect = await self.client_rectangle()
        if rect is None:
            return None
        return Point(x=rect.left + rect.width / 2, y=rect.top + rect.height / 2)

    async def left_position(self) -> Optional[Point]:
        rect = await self.client_rectangle()
        if rect is None:
            return None
        return Point(x=rect.left, y=rect.top + rect.height / 2)

    async def right_position(self) -> Optional[Point]:
        rect = await self.client_rectangle()
        if rect is None:
            return None
        return Point(x=rect.right, y=rect.top + rect.height / 2)

    async def options(self) -> list[SelectOptionInfo]:
        handle = await self.get_handle()
        return await action.get_all_options_of_handle(self._probe.driver, handle)

    async def all_selected_options(self) -> list[SelectOptionInfo]:
        return [option for option in await self.options() if option.selected]

    async def selected_option(self) -> Optional[SelectOptionInfo]:
        for option in await self.options():
            if option.selected:
                return option
        return None

    def _wait_options(self, overrides: dict[str, Any]) -> WaitOptions:
        return self._probe.default_wait.merge(**overrides)

    async def hover(self, **wait_overrides: Any) -> None:
        logger.debug("[Selector] hover on %s", self._history.replace("\n", " "))
        await hover_on_selector(self, self._probe.driver, self._wait_options(wait_overrides))

    async def click(self, **wait_overrides: Any) -> None:
        logger.debug("[Selector] click on %s", self._history.replace("\n", " "))
        await click_on_selector(self, self._probe.driver, self._wait_options(wait_overrides))
