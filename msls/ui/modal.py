"""Modal dialog focus trap over a minimal element tree.

Element and Document model just enough of a DOM for focus management:
attributes, children, and the document's active element. ModalDialog records
the focused element on open, moves focus inside, keeps Tab/Shift+Tab within
its focusable descendants, closes on Escape or a direct backdrop click when
enabled, and restores focus on close.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum

_DISABLEABLE_TAGS = frozenset({"button", "input", "select", "textarea"})


class ModalSize(str, Enum):
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"
    FULL = "full"


class Element:
    """A node with a tag, attributes and children, attached to one Document."""

    def __init__(self, tag: str, attrs: dict[str, str] | None = None) -> None:
        self.tag = tag.lower()
        self.attrs: dict[str, str] = dict(attrs or {})
        self.children: list[Element] = []
        self.parent: Element | None = None
        self.document: Document | None = None

    def __repr__(self) -> str:
        return f"<{self.tag} {self.attrs}>"

    def append(self, child: Element) -> Element:
        child.parent = self
        self.children.append(child)
        if self.document is not None:
            child._attach(self.document)
        return child

    def remove(self, child: Element) -> None:
        self.children.remove(child)
        child.parent = None
        child._attach(None)

    def _attach(self, document: Document | None) -> None:
        self.document = document
        for child in self.children:
            child._attach(document)

    def descendants(self) -> Iterator[Element]:
        """Depth-first, document order (excluding self)."""
        for child in self.children:
            yield child
            yield from child.descendants()

    @property
    def disabled(self) -> bool:
        return "disabled" in self.attrs

    def is_focusable(self) -> bool:
        """Match the focusable selector set used by the dialog."""
        if self.tag in _DISABLEABLE_TAGS and not self.disabled:
            return True
        if self.tag == "a" and "href" in self.attrs:
            return True
        tabindex = self.attrs.get("tabindex")
        return tabindex is not None and tabindex != "-1"

    def focus(self) -> None:
        if self.document is not None:
            self.document.active_element = self


class Document:
    """Owner of the element tree and the currently focused element."""

    def __init__(self) -> None:
        self.body = Element("body")
        self.body._attach(self)
        self.active_element: Element = self.body

    def create_element(self, tag: str, **attrs: str) -> Element:
        return Element(tag, attrs)


@dataclass
class KeyEvent:
    key: str
    shift_key: bool = False
    default_prevented: bool = field(default=False, init=False)

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass
class ClickEvent:
    target: Element
    current_target: Element


class ModalDialog:
    """Focus-trapped overlay around a content container."""

    def __init__(
        self,
        content: Element,
        *,
        title: str = "",
        size: ModalSize = ModalSize.MD,
        close_on_escape: bool = True,
        close_on_backdrop: bool = True,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self.content = content
        self.title = title
        self.size = size
        self.close_on_escape = close_on_escape
        self.close_on_backdrop = close_on_backdrop
        self._listeners: list[Callable[[], None]] = [on_close] if on_close else []
        self._previously_focused: Element | None = None
        self.is_open = False

    @property
    def size_class(self) -> str:
        return f"modal__panel--{self.size.value}"

    def on_close(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def focusable_elements(self) -> list[Element]:
        return [el for el in self.content.descendants() if el.is_focusable()]

    def open(self) -> None:
        """Record the focused element, then focus the first focusable descendant."""
        if self.is_open:
            return
        document = self.content.document
        self._previously_focused = document.active_element if document else None
        self.content.attrs.setdefault("role", "dialog")
        self.content.attrs.setdefault("aria-modal", "true")
        self.content.attrs.setdefault("tabindex", "-1")
        self.is_open = True
        focusables = self.focusable_elements()
        if focusables:
            focusables[0].focus()
        else:
            self.content.focus()

    def close(self) -> None:
        """Notify listeners and give focus back to the element focused before open."""
        if not self.is_open:
            return
        self.is_open = False
        for listener in list(self._listeners):
            listener()
        self._restore_focus()

    def _restore_focus(self) -> None:
        previous = self._previously_focused
        self._previously_focused = None
        if previous is not None and previous.document is not None:
            previous.focus()

    def handle_keydown(self, event: KeyEvent) -> None:
        if not self.is_open:
            return
        if event.key == "Escape":
            if self.close_on_escape:
                event.prevent_default()
                self.close()
            return
        if event.key == "Tab":
            self._handle_tab(event)

    def _handle_tab(self, event: KeyEvent) -> None:
        focusables = self.focusable_elements()
        event.prevent_default()
        if not focusables:
            return
        document = self.content.document
        active = document.active_element if document else None
        try:
            index = focusables.index(active) if active is not None else -1
        except ValueError:
            index = -1
        if event.shift_key:
            target = focusables[-1] if index <= 0 else focusables[index - 1]
        else:
            target = focusables[0] if index in (-1, len(focusables) - 1) else focusables[index + 1]
        target.focus()

    def handle_backdrop_click(self, event: ClickEvent) -> None:
        """Close only for clicks on the backdrop itself, when enabled."""
        if not self.is_open:
            return
        if event.target is event.current_target and self.close_on_backdrop:
            self.close()
