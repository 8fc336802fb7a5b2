"""Capability contract for components that take part in focus traversal."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

FocusHook = Callable[[], Any]


@dataclass(eq=False)
class Component:
    """A node of a screen's component tree.

    Every capability is optional. ``None`` means the capability is absent,
    which disables the matching behaviour: not focusable, hidden, leaf, or
    no hook. Two components are the same focus target when their ``id``
    values match.
    """

    id: str
    focusable: bool | None = None
    visible: bool | None = None
    children: Sequence[Component] | None = None
    on_focus: FocusHook | None = None
    on_blur: FocusHook | None = None
    widget: Any = field(default=None, repr=False)
    focused: bool = False

    @property
    def navigable(self) -> bool:
        """True when the component belongs in a tab order."""
        return self.focusable is True and self.visible is True

    def iter_children(self) -> Sequence[Component]:
        return self.children or ()


@dataclass
class Screen:
    """A UI container owning a component tree."""

    name: str
    root: Component | None = None
