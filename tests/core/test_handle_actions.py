import pytest

from pageprobe.core import handle_actions as action
from pageprobe.core.contracts import ClientRect, ComputedStyle, SelectOptionInfo


@pytest.mark.asyncio
async def test_absent_handle_answers_negatively(driver) -> None:
    assert await action.is_handle_visible(driver, None) is False
    assert await action.is_handle_not_visible(driver, None) is True
    assert await action.is_handle_visible_in_viewport(driver, None) is False
    assert await action.is_handle_not_visible_in_viewport(driver, None) is True
    assert await action.is_handle_moving(driver, None) is False
    assert await action.is_handle_enabled(driver, None) is False
    assert await action.is_handle_disabled(driver, None) is False
    assert await action.is_handle_checked(driver, None) is False
    assert await action.is_handle_unchecked(driver, None) is False
    assert await action.get_inner_text_of_handle(driver, None) is None
    assert await action.get_all_options_of_handle(driver, None) == []
    assert await action.has_not_handle_class(driver, None, "foo") is True


@pytest.mark.asyncio
async def test_visible_element(document, driver) -> None:
    element = document.add("div", text="hello")

    assert await action.is_handle_visible(driver, element) is True
    assert await action.is_handle_not_visible(driver, element) is False


@pytest.mark.asyncio
async def test_transparent_element_is_not_visible(document, driver) -> None:
    element = document.add("div", style=ComputedStyle(opacity="0"))

    assert await action.is_handle_visible(driver, element) is False


@pytest.mark.asyncio
async def test_absolute_element_out_of_screen_is_not_visible(document, driver) -> None:
    above = document.add(
        "div",
        style=ComputedStyle(position="absolute"),
        rect=ClientRect(top=-500, left=10, width=100, height=20),
    )
    left_of = document.add(
        "div",
        style=ComputedStyle(position="absolute"),
        rect=ClientRect(top=10, left=-300, width=100, height=20),
    )
    partly_off = document.add(
        "div",
        style=ComputedStyle(position="absolute"),
        rect=ClientRect(top=-10, left=10, width=100, height=20),
    )

    assert await action.is_handle_visible(driver, above) is False
    assert await action.is_handle_visible(driver, left_of) is False
    assert await action.is_handle_visible(driver, partly_off) is True


@pytest.mark.asyncio
async def test_detached_element_is_not_visible(document, driver) -> None:
    element = document.add("div")
    document.remove(element)

    assert await action.is_handle_visible(driver, element) is False
    assert await action.is_handle_not_visible(driver, element) is True
    assert await action.is_handle_enabled(driver, element) is False
    assert await action.get_value_of_handle(driver, element) is None
    assert await action.get_class_list_of_handle(driver, element) == []


@pytest.mark.asyncio
async def test_viewport_visibility(document, driver) -> None:
    inside = document.add("div")
    scrolled_away = document.add("div", ratio=0.0)
    hidden = document.add("div", style=ComputedStyle(visibility="hidden"))
    collapsed = document.add("div", rect=ClientRect(top=10, left=10, width=0, height=0))

    assert await action.is_handle_visible_in_viewport(driver, inside) is True
    assert await action.is_handle_visible_in_viewport(driver, scrolled_away) is False
    assert await action.is_handle_not_visible_in_viewport(driver, scrolled_away) is True
    assert await action.is_handle_visible_in_viewport(driver, hidden) is False
    assert await action.is_handle_visible_in_viewport(driver, collapsed) is False


@pytest.mark.asyncio
async def test_moving_element_is_detected_between_two_samples(document, driver) -> None:
    still = document.add("div")
    sliding = document.add("div", velocity=12.0)
    jitter = document.add("div", velocity=0.25)

    assert await action.is_handle_moving(driver, still) is False
    assert await action.is_handle_moving(driver, sliding) is True
    assert await action.is_handle_moving(driver, jitter) is False


@pytest.mark.asyncio
async def test_enabled_read_only_and_checked_states(document, driver) -> None:
    field = document.add("input", disabled=True, read_only=True)
    box = document.add("input", attrs={"type": "checkbox"}, checked=True)

    assert await action.is_handle_enabled(driver, field) is False
    assert await action.is_handle_disabled(driver, field) is True
    assert await action.is_handle_read_only(driver, field) is True
    assert await action.is_handle_checked(driver, box) is True
    assert await action.is_handle_unchecked(driver, box) is False


@pytest.mark.asyncio
async def test_content_comparisons(document, driver) -> None:
    element = document.add(
        "input",
        text="  Hello world  ",
        value=" typed ",
        attrs={"placeholder": " Your name ", "data-state": "open", "class": "btn primary"},
    )

    assert await action.has_handle_text(driver, element, "Hello") is True
    assert await action.has_handle_text(driver, element, "hello") is False
    assert await action.has_handle_exact_text(driver, element, "Hello world") is False
    assert await action.has_handle_exact_text(driver, element, "  Hello world  ") is True
    assert await action.has_handle_value(driver, element, "typed") is True
    assert await action.has_handle_placeholder(driver, element, "Your name") is True
    assert await action.has_handle_attribute(driver, element, "data-state", "open") is True
    assert await action.has_handle_attribute(driver, element, "data-state", "ope") is False
    assert await action.has_handle_attribute(driver, element, "missing", "") is False
    assert await action.has_handle_class(driver, element, "primary") is True
    assert await action.has_not_handle_class(driver, element, "secondary") is True


@pytest.mark.asyncio
async def test_select_options(document, driver) -> None:
    options = [
        SelectOptionInfo(value="1", label="One", selected=False),
        SelectOptionInfo(value="2", label="Two", selected=True),
    ]
    select = document.add("select", options=options)
    div = document.add("div")

    assert await action.get_all_options_of_handle(driver, select) == options
    assert await action.get_all_options_of_handle(driver, div) == []


@pytest.mark.asyncio
async def test_transparent_element_is_not_visible_in_viewport(document, driver) -> None:
    element = document.add("div", style=ComputedStyle(opacity="0"))

    assert await action.is_handle_visible_in_viewport(driver, element) is False
    assert await action.is_handle_not_visible_in_viewport(driver, element) is True


@pytest.mark.asyncio
async def test_detached_element_is_neither_moving_nor_in_viewport(document, driver) -> None:
    element = document.add("div", velocity=12.0)
    document.remove(element)

    assert await action.is_handle_moving(driver, element) is False
    assert await action.is_handle_visible_in_viewport(driver, element) is False
    assert await action.is_handle_not_visible_in_viewport(driver, element) is True
