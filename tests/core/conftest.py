"""In-memory document and ElementDriver used by the core tests."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

import pytest

from pageprobe.core.contracts import ClientRect, ComputedStyle, ProbeConfig, SelectOptionInfo, WaitOptions
from pageprobe.core.errors import DriverError, ElementDetachedError
from pageprobe.core.probe import PageProbe

_COMPOUND = re.compile(r"""(#[\w-]+)|(\.[\w-]+)|\[([\w-]+)(?:=(?:"([^"]*)"|'([^']*)'|([^\]]*)))?\]""")
_TAG = re.compile(r"^[a-zA-Z][\w-]*")


@dataclass(eq=False)
class FakeElement:
    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    text: str = ""
    value: Optional[str] = None
    style: ComputedStyle = field(default_factory=ComputedStyle)
    rect: ClientRect = field(default_factory=lambda: ClientRect(top=10, left=10, width=100, height=20))
    ratio: float = 1.0
    disabled: bool = False
    read_only: bool = False
    checked: bool = False
    options: list[SelectOptionInfo] = field(default_factory=list)
    velocity: float = 0.0
    detached: bool = False
    broken: bool = False
    parent: Optional["FakeElement"] = None
    children: list["FakeElement"] = field(default_factory=list)

    def __repr__(self) -> str:
        ident = self.attrs.get("id")
        return f"<{self.tag}{'#' + ident if ident else ''}>"

    def descendants(self) -> list["FakeElement"]:
        result: list[FakeElement] = []
        for child in self.children:
            result.append(child)
            result.extend(child.descendants())
        return result

    def matches(self, selector: str) -> bool:
        rest = selector.strip()
        tag_match = _TAG.match(rest)
        if tag_match:
            if tag_match.group(0).lower() != self.tag.lower():
                return False
            rest = rest[tag_match.end():]
        position = 0
        while position < len(rest):
            part = _COMPOUND.match(rest, position)
            if part is None:
                raise DriverError(f"'{selector}' is not a valid selector")
            ident, cls, attr, dq, sq, bare = part.groups()
            if ident and self.attrs.get("id") != ident[1:]:
                return False
            if cls and cls[1:] not in self.attrs.get("class", "").split():
                return False
            if attr:
                if attr not in self.attrs:
                    return False
                expected = next((v for v in (dq, sq, bare) if v is not None), None)
                if expected is not None and self.attrs[attr] != expected:
                    return False
            position = part.end()
        return True


class FakeDocument:
    def __init__(self) -> None:
        self.root = FakeElement(tag="html")
        self.body = self.add("body", parent=self.root)

    def add(self, tag: str, parent: Optional[FakeElement] = None, **kwargs: Any) -> FakeElement:
        attrs = kwargs.pop("attrs", {})
        element = FakeElement(tag=tag, attrs=dict(attrs), **kwargs)
        owner = parent if parent is not None else getattr(self, "body", self.root)
        element.parent = owner
        owner.children.append(element)
        return element

    def remove(self, element: FakeElement) -> None:
        if element.parent is not None:
            element.parent.children.remove(element)
        element.parent = None
        for node in [element, *element.descendants()]:
            node.detached = True


class FakeDriver:
    def __init__(self) -> None:
        self.calls: list[tuple[str, FakeElement]] = []
        self.evaluations = 0

    def _live(self, handle: FakeElement) -> FakeElement:
        self.evaluations += 1
        if handle.detached:
            raise ElementDetachedError("Element is not attached to the DOM")
        if handle.broken:
            raise DriverError("evaluation failed")
        return handle

    async def query_all(self, selector: str, scope: FakeDocument) -> list[FakeElement]:
        return [element for element in scope.root.descendants() if element.matches(selector)]

    async def query_all_within(self, selector: str, handle: FakeElement) -> list[FakeElement]:
        element = self._live(handle)
        return [child for child in element.descendants() if child.matches(selector)]

    async def parent_of(self, handle: FakeElement) -> Optional[FakeElement]:
        return self._live(handle).parent

    def _sibling(self, handle: FakeElement, offset: int) -> Optional[FakeElement]:
        element = self._live(handle)
        if element.parent is None:
            return None
        siblings = element.parent.children
        index = siblings.index(element) + offset
        if 0 <= index < len(siblings):
            return siblings[index]
        return None

    async def next_sibling_of(self, handle: FakeElement) -> Optional[FakeElement]:
        return self._sibling(handle, 1)

    async def previous_sibling_of(self, handle: FakeElement) -> Optional[FakeElement]:
        return self._sibling(handle, -1)

    async def inner_text(self, handle: FakeElement) -> Optional[str]:
        return self._live(handle).text

    async def input_value(self, handle: FakeElement) -> Optional[str]:
        return self._live(handle).value

    async def get_attribute(self, handle: FakeElement, name: str) -> Optional[str]:
        return self._live(handle).attrs.get(name)

    async def class_list(self, handle: FakeElement) -> list[str]:
        return self._live(handle).attrs.get("class", "").split()

    async def computed_style(self, handle: FakeElement) -> ComputedStyle:
        return self._live(handle).style

    async def client_rect(self, handle: FakeElement) -> ClientRect:
        element = self._live(handle)
        rect = element.rect
        if element.velocity:
            element.rect = ClientRect(
                top=rect.top,
                left=rect.left + element.velocity,
                width=rect.width,
                height=rect.height,
            )
        return rect

    async def intersection_ratio(self, handle: FakeElement) -> float:
        return self._live(handle).ratio

    async def is_visible(self, handle: FakeElement) -> bool:
        element = self._live(handle)
        return not element.rect.is_empty and element.style.visibility != "hidden"

    async def is_disabled(self, handle: FakeElement) -> bool:
        return self._live(handle).disabled

    async def is_read_only(self, handle: FakeElement) -> bool:
        return self._live(handle).read_only

    async def is_checked(self, handle: FakeElement) -> bool:
        return self._live(handle).checked

    async def select_options(self, handle: FakeElement) -> list[SelectOptionInfo]:
        return list(self._live(handle).options)

    async def hover(self, handle: FakeElement) -> None:
        self.calls.append(("hover", self._live(handle)))

    async def click(self, handle: FakeElement) -> None:
        element = self._live(handle)
        self.calls.append(("click", element))
        if element.attrs.get("type") == "checkbox":
            element.checked = not element.checked


FAST_WAIT = WaitOptions(timeout_ms=500, stability_ms=0, polling_ms=5)


@pytest.fixture
def document() -> FakeDocument:
    return FakeDocument()


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def probe(document: FakeDocument, driver: FakeDriver) -> PageProbe:
    return PageProbe(config=ProbeConfig(default_wait=FAST_WAIT), driver=driver).attach(document)


@pytest.fixture
def grid(document: FakeDocument) -> FakeDocument:
    """Three [role="row"] rows, each holding a label cell and one checkbox."""
    table = document.add("div", attrs={"role": "grid", "id": "grid"})
    for number in range(1, 4):
        row = document.add("div", parent=table, attrs={"role": "row", "id": f"row{number}"})
        document.add("span", parent=row, text=f"  Row {number}  ", attrs={"class": "label"})
        document.add("input", parent=row, value="", attrs={"type": "checkbox", "id": f"check{number}"})
    return document


@pytest.fixture
def make_document():
    return FakeDocument
