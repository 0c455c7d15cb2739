"""Shared fixtures: an in-memory page with a small CSS selector engine.

FakePage implements PageCapability over a tree of FakeElement nodes so
discovery, resolution and execution can be tested without a browser. The
selector engine covers the subset the scanners and the resolver emit: tag,
#id, .class, [attr], [attr="v"], [attr*="v"], :has-text("v"), :visible,
:nth-of-type(n), :first-of-type, comma lists, descendant and child combinators.
"""

import re
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from uiscout.browser.page_capability import PageCapability
from uiscout.config.settings import ScoutConfig
from uiscout.errors import PageUnavailableError


class FakeElement:
    """A DOM node with attributes, own text, children and interaction state."""

    def __init__(
        self,
        tag: str,
        children: Sequence["FakeElement"] = (),
        text: str = "",
        visible: bool = True,
        attrs: Optional[Dict[str, str]] = None,
        reveals: Sequence["FakeElement"] = (),
    ):
        self.tag = tag
        self.text = text
        self.visible = visible
        self.attrs = dict(attrs or {})
        self.children = list(children)
        self.parent: Optional["FakeElement"] = None
        self.reveals = list(reveals)
        self.value = self.attrs.get("value")
        self.checked = "checked" in self.attrs
        for child in self.children:
            child.parent = self

    def __repr__(self) -> str:
        return f"<{self.tag} {self.attrs}>"

    @property
    def text_content(self) -> str:
        return self.text + "".join(child.text_content for child in self.children)

    @property
    def is_displayed(self) -> bool:
        node: Optional[FakeElement] = self
        while node is not None:
            if not node.visible:
                return False
            node = node.parent
        return True

    def descendants(self) -> List["FakeElement"]:
        found = []
        for child in self.children:
            found.append(child)
            found.extend(child.descendants())
        return found

    def ancestors(self) -> List["FakeElement"]:
        found = []
        node = self.parent
        while node is not None:
            found.append(node)
            node = node.parent
        return found


def element(tag: str, *children: FakeElement, text: str = "", visible: bool = True,
            reveals: Sequence[FakeElement] = (), **attrs: str) -> FakeElement:
    """Build a FakeElement; ``class_`` and ``data_testid`` become ``class``
    and ``data-testid``."""
    normalized = {key.rstrip("_").replace("_", "-"): value for key, value in attrs.items()}
    return FakeElement(tag, children, text=text, visible=visible, attrs=normalized,
                       reveals=reveals)


# Selector engine

_IDENT = r"(?:\\.|[\w-])+"
_QUOTED = r'"(?:\\.|[^"\\])*"'
_TOKEN = re.compile(
    rf"(?P<tag>^(?:\*|[a-zA-Z][\w-]*))"
    rf"|#(?P<id>{_IDENT})"
    rf"|\.(?P<cls>{_IDENT})"
    rf"|\[(?P<attr>[\w-]+)(?:(?P<op>\*?=)(?P<val>{_QUOTED}))?\]"
    rf"|:has-text\((?P<has_text>{_QUOTED})\)"
    rf"|:nth-of-type\((?P<nth>\d+)\)"
    rf"|(?P<first>:first-of-type)"
    rf"|(?P<visible>:visible)"
)


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _split_outside(selector: str, separator: Callable[[str], bool]) -> List[str]:
    parts, current, depth, quoted = [], "", 0, False
    i = 0
    while i < len(selector):
        char = selector[i]
        if char == "\\" and i + 1 < len(selector):
            current += selector[i: i + 2]
            i += 2
            continue
        if char == '"':
            quoted = not quoted
        elif not quoted and char in "([":
            depth += 1
        elif not quoted and char in ")]":
            depth -= 1
        if not quoted and depth == 0 and separator(char):
            if current.strip():
                parts.append(current.strip())
            current = ""
        else:
            current += char
        i += 1
    if current.strip():
        parts.append(current.strip())
    return parts


def _parse_compound(compound: str) -> List[Tuple[str, Any]]:
    conditions: List[Tuple[str, Any]] = []
    position = 0
    while position < len(compound):
        match = _TOKEN.match(compound, position)
        if match is None or match.end() == position:
            raise ValueError(f"Unsupported selector: {compound}")
        if match.group("tag") and position == 0:
            if match.group("tag") != "*":
                conditions.append(("tag", match.group("tag").lower()))
        elif match.group("id"):
            conditions.append(("id", _unescape(match.group("id"))))
        elif match.group("cls"):
            conditions.append(("class", _unescape(match.group("cls"))))
        elif match.group("attr"):
            value = match.group("val")
            conditions.append((
                "attr",
                (match.group("attr"), match.group("op"), _unescape(value[1:-1]) if value else None),
            ))
        elif match.group("has_text"):
            conditions.append(("has_text", _unescape(match.group("has_text")[1:-1])))
        elif match.group("nth"):
            conditions.append(("nth", int(match.group("nth"))))
        elif match.group("first"):
            conditions.append(("nth", 1))
        elif match.group("visible"):
            conditions.append(("visible", True))
        position = match.end()
    return conditions


def _matches_compound(node: FakeElement, conditions: List[Tuple[str, Any]]) -> bool:
    for kind, value in conditions:
        if kind == "tag" and node.tag != value:
            return False
        if kind == "id" and node.attrs.get("id") != value:
            return False
        if kind == "class" and value not in node.attrs.get("class", "").split():
            return False
        if kind == "attr":
            name, op, expected = value
            if name not in node.attrs:
                return False
            if op == "=" and node.attrs[name] != expected:
                return False
            if op == "*=" and expected not in node.attrs[name]:
                return False
        if kind == "has_text" and value.lower() not in node.text_content.lower():
            return False
        if kind == "nth":
            siblings = node.parent.children if node.parent else [node]
            same_type = [s for s in siblings if s.tag == node.tag]
            if len(same_type) < value or same_type[value - 1] is not node:
                return False
        if kind == "visible" and not node.is_displayed:
            return False
    return True


def _parse_chain(alternative: str) -> List[Tuple[str, List[Tuple[str, Any]]]]:
    """Compounds paired with the combinator joining them to the previous one."""
    chain = []
    combinator = " "
    for part in _split_outside(alternative, str.isspace):
        if part == ">":
            combinator = ">"
            continue
        chain.append((combinator, _parse_compound(part)))
        combinator = " "
    return chain


def _matches(node: FakeElement, selector: str) -> bool:
    for alternative in _split_outside(selector, lambda c: c == ","):
        if _matches_chain(node, _parse_chain(alternative)):
            return True
    return False


def _matches_chain(node: FakeElement, chain: List[Tuple[str, List[Tuple[str, Any]]]]) -> bool:
    combinator, conditions = chain[-1]
    if not _matches_compound(node, conditions):
        return False
    if len(chain) == 1:
        return True
    if combinator == ">":
        return node.parent is not None and _matches_chain(node.parent, chain[:-1])
    return any(_matches_chain(ancestor, chain[:-1]) for ancestor in node.ancestors())


def _scope_of(node: FakeElement, keywords: Sequence[str]) -> Optional[str]:
    if node.attrs.get("id"):
        return f"#{node.attrs['id']}"
    for class_name in node.attrs.get("class", "").split():
        if any(keyword in class_name for keyword in keywords):
            return f".{class_name}"
    return None


class FakePage(PageCapability):
    """In-memory PageCapability over a FakeElement tree."""

    def __init__(self, *children: FakeElement, url: str = "https://example.com",
                 title: str = "Example"):
        self.root = FakeElement("body", children)
        self._url = url
        self._title = title
        self.closed = False
        self.failing_selectors: Dict[str, Exception] = {}
        self.interactions: List[Tuple[str, FakeElement, Optional[str]]] = []
        self.screenshots: List[str] = []
        self.waits: List[int] = []

    def _check_open(self) -> None:
        if self.closed:
            raise PageUnavailableError("Target page, context or browser has been closed")

    def _select(self, selector: str, scope: Optional[FakeElement] = None) -> List[FakeElement]:
        self._check_open()
        if selector in self.failing_selectors:
            raise self.failing_selectors[selector]
        candidates = (scope or self.root).descendants()
        return [node for node in candidates if _matches(node, selector)]

    def _record(self, action: str, handle: FakeElement, value: Optional[str] = None) -> None:
        self._check_open()
        self.interactions.append((action, handle, value))

    # Queries

    async def locate_all(self, selector: str) -> List[FakeElement]:
        return self._select(selector)

    async def first(self, selector: str) -> Optional[FakeElement]:
        matches = self._select(selector)
        return matches[0] if matches else None

    async def count(self, selector: str) -> int:
        return len(self._select(selector))

    async def locate_within(self, handle: FakeElement, selector: str) -> List[FakeElement]:
        self._check_open()
        if selector == "xpath=ancestor::label":
            return [a for a in handle.ancestors() if a.tag == "label"][:1]
        if selector == "xpath=preceding-sibling::label":
            if handle.parent is None:
                return []
            siblings = handle.parent.children
            before = siblings[: siblings.index(handle)]
            return [s for s in reversed(before) if s.tag == "label"]
        return self._select(selector, scope=handle)

    # Reads

    async def get_attribute(self, handle: FakeElement, name: str) -> Optional[str]:
        self._check_open()
        return handle.attrs.get(name)

    async def text_content(self, handle: FakeElement) -> Optional[str]:
        self._check_open()
        return handle.text_content

    async def all_text_contents(self, handle: FakeElement, selector: str) -> List[str]:
        return [node.text_content for node in self._select(selector, scope=handle)]

    async def tag_name(self, handle: FakeElement) -> str:
        self._check_open()
        return handle.tag

    async def structural_scope(self, handle: FakeElement, keywords: Sequence[str]) -> Optional[str]:
        self._check_open()
        for ancestor in handle.ancestors():
            if ancestor is self.root:
                break
            scope = _scope_of(ancestor, keywords)
            if scope:
                return scope
        return None

    async def sibling_path(self, handle: FakeElement,
                           keywords: Optional[Sequence[str]]) -> List[str]:
        self._check_open()
        steps: List[str] = []
        node = handle
        while node.parent is not None:
            parent = node.parent
            same_tag = [s for s in parent.children if s.tag == node.tag]
            steps.insert(0, f"{node.tag}:nth-of-type({same_tag.index(node) + 1})")
            if parent is self.root:
                break
            if keywords is not None and _scope_of(parent, keywords):
                break
            node = parent
        return steps

    async def value_of(self, handle: FakeElement) -> Optional[str]:
        self._check_open()
        return handle.value

    # Checks

    async def is_visible(self, handle: FakeElement, timeout_ms: int) -> bool:
        self._check_open()
        return handle.is_displayed

    async def first_visible(self, selector: str, timeout_ms: int) -> Optional[FakeElement]:
        found = await self.first(selector)
        if found is not None and found.is_displayed:
            return found
        return None

    async def is_enabled(self, handle: FakeElement, timeout_ms: int) -> bool:
        self._check_open()
        return "disabled" not in handle.attrs

    async def is_checked(self, handle: FakeElement) -> bool:
        self._check_open()
        return handle.checked

    # Interactions

    async def click(self, handle: FakeElement) -> None:
        self._record("click", handle)
        if handle.attrs.get("type") == "radio":
            handle.checked = True

    async def fill(self, handle: FakeElement, value: str) -> None:
        if "disabled" in handle.attrs:
            raise RuntimeError("Element is not enabled")
        self._record("fill", handle, value)
        handle.value = value

    async def hover(self, handle: FakeElement) -> None:
        self._record("hover", handle)
        for revealed in handle.reveals:
            revealed.visible = True

    async def focus(self, handle: FakeElement) -> None:
        self._record("focus", handle)

    async def select(self, handle: FakeElement, value: str) -> None:
        self._record("select", handle, value)
        handle.value = value

    async def check(self, handle: FakeElement) -> None:
        self._record("check", handle)
        handle.checked = True

    async def uncheck(self, handle: FakeElement) -> None:
        self._record("uncheck", handle)
        handle.checked = False

    async def press(self, handle: FakeElement, key: str) -> None:
        self._record("press", handle, key)

    async def screenshot(self, handle: FakeElement, path: str) -> None:
        self._record("screenshot", handle, path)
        self.screenshots.append(path)

    async def take_screenshot(self, path: str) -> None:
        self._check_open()
        self.screenshots.append(path)

    # Page level

    async def wait_for_timeout(self, ms: int) -> None:
        self._check_open()
        self.waits.append(ms)

    async def url(self) -> str:
        return self._url

    async def title(self) -> str:
        self._check_open()
        return self._title


@pytest.fixture
def el():
    """Element builder: ``el("button", text="Save", id="save")``."""
    return element


@pytest.fixture
def make_page():
    """FakePage constructor: ``make_page(el(...), el(...))``."""
    return FakePage


@pytest.fixture
def config(tmp_path):
    """Fast configuration writing screenshots under tmp_path."""
    return ScoutConfig(
        visibility_timeout_ms=0,
        tooltip_timeout_ms=0,
        dynamic_settle_ms=0,
        step_settle_ms=0,
        screenshot_dir=str(tmp_path / "screenshots"),
    )
