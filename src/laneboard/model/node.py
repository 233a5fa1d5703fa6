"""Reactive state nodes with change notification and bubbling."""

from __future__ import annotations

from typing import Any, Callable

Callback = Callable[["Node", str, Any, Any], None]


def _wrap(value: Any, parent: Node, key: str) -> Any:
    """Auto-wrap dicts as Nodes. Reparent existing Nodes."""
    if isinstance(value, dict):
        return Node(_parent=parent, _key=key, **value)
    if isinstance(value, Node):
        object.__setattr__(value, "_parent", parent)
        object.__setattr__(value, "_key", key)
    return value


def _emit(node: Node, key: str, old: Any, new: Any) -> None:
    """Fire local watchers for key, then bubble up the parent chain."""
    for cb in list(node._watchers.get(key, ())):
        cb(node, key, old, new)
    child = node
    while child._parent is not None:
        parent = child._parent
        for cb in list(parent._watchers.get(child._key, ())):
            cb(node, key, old, new)
        child = parent


class Node:
    """Reactive dict-like state node.

    Values are read and written with attribute syntax. Setting a value
    to None deletes the key. Dict values become child Nodes. Changes
    fire watchers and bubble up through the parent chain, so a watcher
    on ``session.state`` for ``"sync"`` sees ``state.sync.status`` change.

    Board snapshots are stored as plain leaf values; because they are
    immutable, replacing one is the only way the board changes.
    """

    def __init__(
        self,
        _parent: Node | None = None,
        _key: str | None = None,
        **data: Any,
    ) -> None:
        object.__setattr__(self, "_children", {})
        object.__setattr__(self, "_watchers", {})
        object.__setattr__(self, "_parent", None)
        object.__setattr__(self, "_key", _key)
        object.__setattr__(self, "_version", 0)
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
        if old is not value and old != value:
            self._version += 1
            _emit(self, name, old, value)

    def __contains__(self, key: str) -> bool:
        return key in self._children

    def watch(self, key: str, callback: Callback) -> Callable[[], None]:
        """Watch a key for changes. Returns an unwatch callable."""
        self._watchers.setdefault(key, []).append(callback)

        def unwatch() -> None:
            callbacks = self._watchers.get(key, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unwatch

    def keys(self):
        """Return children keys."""
        return self._children.keys()

    def items(self):
        """Return children items."""
        return self._children.items()

    def to_dict(self) -> dict[str, Any]:
        """Convert back to plain dicts, recursively."""
        return {k: v.to_dict() if isinstance(v, Node) else v for k, v in self._children.items()}

    def __repr__(self) -> str:
        label = f"Node({self._key})" if self._key else "Node"
        return f"<{label} [{', '.join(self._children)}]>"
