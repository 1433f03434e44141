"""Scope management: node side table and the assembler's context stack."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

from .model import ArrayKind, NodeInfo


class NodeTable:
    """Side table mapping container identity → :class:`NodeInfo`.

    Registered nodes are also held here so their ids cannot be recycled while
    the table is alive.
    """

    def __init__(self) -> None:
        self._info: dict[int, NodeInfo] = {}
        self._nodes: dict[int, Any] = {}

    def __contains__(self, node: Any) -> bool:
        return id(node) in self._info

    def __len__(self) -> int:
        return len(self._info)

    def register(self, node: Any, parent: Any = None, name: str | None = None) -> NodeInfo:
        """Record *node*'s parent, keeping a previously recorded name when *name* is None."""
        info = self._info.get(id(node))
        if info is None:
            info = NodeInfo()
            self._info[id(node)] = info
            self._nodes[id(node)] = node
        info.parent = parent
        if name is not None:
            info.name = name
        return info

    def info(self, node: Any) -> NodeInfo | None:
        return self._info.get(id(node))

    def parent(self, node: Any) -> Any:
        info = self.info(node)
        return info.parent if info else None

    def name(self, node: Any) -> str | None:
        info = self.info(node)
        return info.name if info else None

    def kind(self, node: Any) -> ArrayKind | None:
        info = self.info(node)
        return info.kind if info else None

    def set_kind(self, node: Any, kind: ArrayKind) -> ArrayKind:
        """Tag an array with *kind* unless it already has one; returns the kind in effect."""
        info = self._info.get(id(node)) or self.register(node)
        if info.kind is None:
            info.kind = kind
        return info.kind


class ScopeStack:
    """Stack of insertion targets.  The root is never permanently removed."""

    def __init__(self, root: dict[str, Any]) -> None:
        self.root = root
        self._scopes: list[Any] = [root]

    def __len__(self) -> int:
        return len(self._scopes)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._scopes)

    @property
    def scopes(self) -> Sequence[Any]:
        return tuple(self._scopes)

    @property
    def top(self) -> Any:
        return self._scopes[-1]

    def push(self, scope: Any) -> None:
        self._scopes.append(scope)

    def pop(self) -> Any:
        """Remove and return the top scope; an emptied stack falls back to ``[root]``."""
        scope = self._scopes.pop()
        if not self._scopes:
            self._scopes = [self.root]
        return scope

    def reset(self, scope: Any = None) -> None:
        self._scopes = [self.root]
        if scope is not None:
            self._scopes.append(scope)


def is_relative(key: str) -> bool:
    """``.key`` (or ``+.key``) addresses the current scope."""
    return key.lstrip("+").startswith(".")


def resolve_target(key: str, scopes: Sequence[Any], root: Any) -> tuple[Any, bool]:
    """Return ``(target, relative)`` for *key* without touching any state.

    Relative keys target the innermost scope; anything else targets *root*
    and the caller is expected to reset its stack.
    """
    if is_relative(key) and scopes:
        return scopes[-1], True
    return root, False
