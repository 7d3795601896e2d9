from __future__ import annotations

from typing import Any, Awaitable, Callable

from pageprobe.core.contracts import WaitOptions
from pageprobe.core.selector import SelectorFluent
from pageprobe.core.wait_manager import wait_until


class SelectorExpectation:
    """Assertions that wait for a selector to reach a state and stay there.

    Each check is a convergence wait on one selector predicate. On timeout a
    WaitTimeoutError is raised whose message carries the selector's full
    chaining history.
    """

    def __init__(self, selector: SelectorFluent, options: WaitOptions) -> None:
        self._selector = selector
        self._options = options

    @property
    def selector(self) -> SelectorFluent:
        return self._selector

    async def _expect(
        self,
        predicate: Callable[[], Awaitable[bool]],
        failure: str,
        overrides: dict[str, Any],
    ) -> None:
        options = self._options.merge(**overrides).merge(throw_on_timeout=True)
        await wait_until(predicate, f"Selector '{self._selector}' {failure}", options)

    async def exists(self, **overrides: Any) -> None:
        await self._expect(self._selector.exists, "was not found in DOM.", overrides)

    async def does_not_exist(self, **overrides: Any) -> None:
        await self._expect(self._selector.does_not_exist, "is still present in DOM.", overrides)

    async def is_visible(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_visible, "is not visible.", overrides)

    async def is_not_visible(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_not_visible, "is visible.", overrides)

    async def is_visible_in_viewport(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_visible_in_viewport, "is not visible in the current viewport.", overrides)

    async def is_not_visible_in_viewport(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_not_visible_in_viewport, "is visible in the current viewport.", overrides)

    async def is_enabled(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_enabled, "is not enabled.", overrides)

    async def is_disabled(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_disabled, "is not disabled.", overrides)

    async def is_read_only(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_read_only, "is not read-only.", overrides)

    async def is_not_read_only(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_not_read_only, "is read-only.", overrides)

    async def is_checked(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_checked, "is not checked.", overrides)

    async def is_unchecked(self, **overrides: Any) -> None:
        await self._expect(self._selector.is_unchecked, "is checked.", overrides)

    async def is_not_moving(self, **overrides: Any) -> None:
        async def predicate() -> bool:
            return await self._selector.exists() and not await self._selector.is_moving()

        await self._expect(predicate, "is still moving.", overrides)

    async def has_text(self, expected: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_text(expected),
            f"does not contain text '{expected}'.",
            overrides,
        )

    async def has_exact_text(self, expected: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_exact_text(expected),
            f"does not have exact text '{expected}'.",
            overrides,
        )

    async def has_value(self, expected: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_value(expected),
            f"does not have value '{expected}'.",
            overrides,
        )

    async def has_placeholder(self, expected: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_placeholder(expected),
            f"does not have placeholder '{expected}'.",
            overrides,
        )

    async def has_attribute_with_value(self, attribute_name: str, expected_value: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_attribute_with_value(attribute_name, expected_value),
            f"does not have attribute '{attribute_name}' with value '{expected_value}'.",
            overrides,
        )

    async def has_class(self, expected_class: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.has_class(expected_class),
            f"does not have class '{expected_class}'.",
            overrides,
        )

    async def does_not_have_class(self, expected_class: str, **overrides: Any) -> None:
        await self._expect(
            lambda: self._selector.does_not_have_class(expected_class),
            f"has class '{expected_class}'.",
            overrides,
        )

    async def has_count(self, expected: int, **overrides: Any) -> None:
        async def predicate() -> bool:
            return await self._selector.count() == expected

        await self._expect(predicate, f"does not match {expected} element(s).", overrides)
