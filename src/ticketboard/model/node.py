"""Reactive tree nodes with change notification and bubbling."""

from __future__ import annotations

from typing import Any, Callable

Callback = Callable[["Node | ListNode", str, Any, Any], None]


def _wrap(value: Any, parent: Node | ListNode, key: str) -> Any:
    """Auto-wrap dicts as Nodes. Reparent existing Nodes/ListNodes."""
    if isinstance(value, dict):
        return Node(_parent=parent, _key=key, **value)
    if isinstance(value, (Node, ListNode)):
        object.__setattr__(value, "_parent", parent)
        object.__setattr__(value, "_key", key)
    return value


def _emit(node: Node | ListNode, key: str, old: Any, new: Any) -> None:
    """Fire local watchers for key, then bubble up the parent chain."""
    for cb in list(node._watchers.get(key, ())):
        cb(node, key, old, new)
    child = node
    while child._parent is not None:
        parent = child._parent
        for cb in list(parent._watchers.get(child._key, ())):
            cb(node, key, old, new)
        child = parent


class _Watchable:
    """Shared watch/path plumbing for Node and ListNode."""

    def watch(self, key: str, callback: Callback) -> Callable[[], None]:
        """Watch a key for changes. Returns an unwatch callable."""
        key = str(key)
        self._watchers.setdefault(key, []).append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    @property
    def path(self) -> str:
        """Dotted path from root to this node."""
        parts: list[str] = []
        current: Node | ListNode | None = self
        while current is not None and current._key is not None:
            parts.append(current._key)
            current = current._parent
        return ".".join(reversed(parts))


class Node(_Watchable):
    """Reactive dict-like tree node.

    Data lives in an internal dict and is accessed with attribute syntax.
    Setting a value to None deletes the key. Dict values become child
    Nodes. Changes fire watchers and bubble up through the parent chain.
    """

    def __init__(
        self,
        _parent: Node | ListNode | None = None,
        _key: str | None = None,
        **data: Any,
    ) -> None:
        object.__setattr__(self, "_children", {})
        object.__setattr__(self, "_watchers", {})
        object.__setattr__(self, "_parent", None)
        object.__setattr__(self, "_key", _key)
        for k, v in data.items():
            setattr(self, k, v)
        object.__setattr__(self, "_parent", _parent)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._children.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return
        old = self._children.get(name)
        if value is None:
            self._children.pop(name, None)
        else:
            value = _wrap(value, parent=self, key=name)
            self._children[name] = value
        if old != value:
            _emit(self, name, old, value)

    def __contains__(self, key: str) -> bool:
        return key in self._children

    def keys(self):
        return self._children.keys()

    def items(self):
        return self._children.items()

    def __repr__(self) -> str:
        p = self.path
        keys = ", ".join(self._children.keys())
        label = f"Node({p})" if p else "Node"
        return f"<{label} [{keys}]>"


class ListNode(_Watchable):
    """Ordered, id-keyed collection with change notification.

    Items are addressed by string id and kept in insertion order unless
    placed explicitly with ``insert``. Setting an id to None deletes it.
    Structural reorders fire a single ``"*"`` event with the old and new
    key lists.
    """

    def __init__(
        self,
        _parent: Node | None = None,
        _key: str | None = None,
    ) -> None:
        object.__setattr__(self, "_by_id", {})
        object.__setattr__(self, "_order", [])
        object.__setattr__(self, "_watchers", {})
        object.__setattr__(self, "_parent", _parent)
        object.__setattr__(self, "_key", _key)

    def __getitem__(self, key: str) -> Any:
        return self._by_id.get(str(key))

    def __setitem__(self, key: str, value: Any) -> None:
        key = str(key)
        old = self._by_id.get(key)
        if value is None:
            if old is None:
                return
            self._order.remove(key)
            del self._by_id[key]
            _emit(self, key, old, None)
            return
        value = _wrap(value, parent=self, key=key)
        if old is None:
            self._order.append(key)
        self._by_id[key] = value
        if old != value:
            _emit(self, key, old, value)

    def insert(self, key: str, value: Any, position: int | None = None) -> None:
        """Add or replace an item and place it at position (default: end)."""
        key = str(key)
        if key in self._by_id:
            self._order.remove(key)
        old = self._by_id.get(key)
        value = _wrap(value, parent=self, key=key)
        if position is None or position >= len(self._order):
            self._order.append(key)
        else:
            self._order.insert(max(position, 0), key)
        self._by_id[key] = value
        _emit(self, key, old, value)

    def move(self, key: str, position: int) -> None:
        """Move an existing item to position as one structural change."""
        key = str(key)
        old_keys = list(self._order)
        self._order.remove(key)
        position = max(0, min(position, len(self._order)))
        self._order.insert(position, key)
        if old_keys != self._order:
            _emit(self, "*", old_keys, list(self._order))

    def index(self, key: str) -> int:
        """Position of key in display order. Raises ValueError if absent."""
        return self._order.index(str(key))

    def __iter__(self):
        return (self._by_id[k] for k in list(self._order))

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, key: str) -> bool:
        return str(key) in self._by_id

    def keys(self) -> list[str]:
        return list(self._order)

    def items(self) -> list[tuple[str, Any]]:
        return [(k, self._by_id[k]) for k in self._order]

    def replace(self, other: ListNode) -> None:
        """Replace all items with other's, preserving this node's watchers."""
        old_keys = list(self._order)
        for key in old_keys:
            if key not in other:
                self[key] = None
        for key, value in other.items():
            self[key] = value
        new_keys = other.keys()
        if self._order != new_keys:
            object.__setattr__(self, "_order", list(new_keys))
            _emit(self, "*", old_keys, list(new_keys))

    def __repr__(self) -> str:
        p = self.path
        ids = ", ".join(self._order)
        label = f"ListNode({p})" if p else "ListNode"
        return f"<{label} [{ids}]>"
