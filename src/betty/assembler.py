"""Assembler: interprets preprocessed instructions into the output tree."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .instruction import Instruction, InstructionType
from .keypath import get_path, has_path, normalize_keypath, set_path, strip_marker
from .model import ArrayKind
from .options import ParseOptions
from .scope import NodeTable, ScopeStack, resolve_target

logger = logging.getLogger(__name__)


class Assembler:
    """Builds a tree from an instruction stream.

    State is per document: the ``root`` object, the scope ``stack`` whose top
    receives new values, and the ``nodes`` side table recording each
    container's parent, name and array kind.
    """

    def __init__(self, options: ParseOptions | None = None) -> None:
        self.options = ParseOptions.coerce(options)
        self.root: dict[str, Any] = {}
        self.nodes = NodeTable()
        self.nodes.register(self.root)
        self.stack = ScopeStack(self.root)
        self._handlers: dict[InstructionType, Callable[[str | None, str | None], None]] = {
            InstructionType.VALUE: self.value,
            InstructionType.SIMPLE: self.simple,
            InstructionType.OBJECT: self.object,
            InstructionType.CLOSE_OBJECT: self.close_object,
            InstructionType.ARRAY: self.array,
            InstructionType.CLOSE_ARRAY: self.close_array,
            InstructionType.BUFFER: self.buffer,
            InstructionType.FLUSH: self.flush,
            InstructionType.SKIPPED: self.skipped,
        }

    def assemble(self, instructions: list[Instruction]) -> dict[str, Any]:
        self._log("Assembling result object...")
        for instruction in instructions:
            self._log(f"  {instruction}")
            self._handlers[instruction.type](instruction.key, instruction.value)
        return self.root

    def _log(self, message: str) -> None:
        self.options.trace(logger, message)

    # -- Helpers --------------------------------------------------------

    def _keypath(self, key: str) -> list[str]:
        return normalize_keypath(key, self.options.on_field_name)

    def _target(self, key: str) -> Any:
        target, relative = resolve_target(key, self.stack.scopes, self.root)
        if not relative:
            self.stack.reset()
        return target

    def _scalar(self, text: str, key: str) -> Any:
        return self.options.on_value(text.strip(), key)

    def _is_array(self, node: Any, kind: ArrayKind) -> bool:
        return isinstance(node, list) and self.nodes.kind(node) == kind

    def append(self, target: Any, key: str, value: Any) -> None:
        """Insert *value* under *key* in an object or array target."""
        if isinstance(target, list):
            self._add_to_array(target, key, value)
        else:
            set_path(target, self._keypath(key), value, self.nodes, self.options)

    def _add_to_array(self, target: list[Any], key: str, value: Any) -> None:
        kind = self.nodes.kind(target)

        if kind == ArrayKind.FREEFORM:
            record_type = self.options.on_field_name(key.lstrip(".+"))
            if isinstance(value, str):
                value = self._scalar(value, record_type)
            record = {"type": record_type, "value": value}
            self.nodes.register(record, target)
            if isinstance(value, (dict, list)):
                # named closes inside a record walk back to the array
                self.nodes.register(value, target)
            target.append(record)
            return

        if kind == ArrayKind.SIMPLE:
            self._log(f"  Dropping keyed value {key!r} in simple array")
            return

        self.nodes.set_kind(target, ArrayKind.STANDARD)
        path = self._keypath(key)
        if not path:
            return
        last = target[-1] if target else None
        if not isinstance(last, dict) or has_path(last, path):
            last = {}
            target.append(last)
            self.nodes.register(last, target)
        set_path(last, path, value, self.nodes, self.options)

    def _close_named(self, node: Any, name: str, arrays_only: bool) -> None:
        """Walk up from *node* to the container called *name* and resume in its parent."""
        name = strip_marker(self.options.on_field_name(name))
        while node is not self.root:
            if self.nodes.name(node) == name and (not arrays_only or isinstance(node, list)):
                break
            parent = self.nodes.parent(node)
            if parent is None:
                node = self.root
                break
            node = parent

        if node is self.root:
            self._log(f"  No open scope named {name!r}, returning to root")
            self.stack.reset()
            return
        parent = self.nodes.parent(node)
        self.stack.push(self.root if parent is None else parent)

    # -- Instruction handlers -------------------------------------------

    def value(self, key: str | None, text: str | None) -> None:
        self.append(self.stack.top, key or "", text or "")

    def simple(self, marker: str | None, text: str | None) -> None:
        top = self.stack.top
        if not isinstance(top, list):
            return
        kind = self.nodes.kind(top)
        if kind in (None, ArrayKind.SIMPLE):
            self.nodes.set_kind(top, ArrayKind.SIMPLE)
            top.append(self._scalar(text or "", self.nodes.name(top) or ""))
        elif kind == ArrayKind.FREEFORM:
            record = {"type": "text", "value": self._scalar((marker or "") + (text or ""), "text")}
            self.nodes.register(record, top)
            top.append(record)

    def object(self, key: str | None, _value: str | None = None) -> None:
        key = key or ""
        target = self._target(key)
        path = self._keypath(key)
        if not path:
            return
        existing = get_path(target, path) if isinstance(target, dict) else None
        obj = existing if isinstance(existing, dict) else {}
        self.nodes.register(obj, name=strip_marker(path[-1]))
        self.append(target, key, obj)
        self.stack.push(obj)

    def close_object(self, name: str | None = None, _value: str | None = None) -> None:
        popped = self.stack.pop()
        if name:
            self._close_named(popped, name, arrays_only=False)

    def array(self, key: str | None, _value: str | None = None) -> None:
        key = key or ""
        target = self._target(key)
        path = self._keypath(key)
        if not path:
            return
        array: list[Any] = []
        self.nodes.register(array, name=strip_marker(path[-1]))
        if any(segment.startswith("+") for segment in path):
            self.nodes.set_kind(array, ArrayKind.FREEFORM)
        self.append(target, key, array)
        self.stack.push(array)

    def close_array(self, name: str | None = None, _value: str | None = None) -> None:
        if name:
            popped = self.stack.pop()
            self._close_named(popped, name, arrays_only=True)
            return
        while not isinstance(self.stack.top, list) and self.stack.top is not self.root:
            self.stack.pop()
        if isinstance(self.stack.top, list):
            self.stack.pop()

    def buffer(self, _key: str | None, text: str | None) -> None:
        top = self.stack.top
        if not self._is_array(top, ArrayKind.FREEFORM):
            return
        for line in (text or "").split("\n"):
            if not line.strip():
                continue
            record = {"type": "text", "value": self._scalar(line, "text")}
            self.nodes.register(record, top)
            top.append(record)

    # flush and skipped were fully handled by the reader and preprocessor
    def flush(self, _key: str | None = None, _value: str | None = None) -> None:
        pass

    def skipped(self, _key: str | None = None, _value: str | None = None) -> None:
        pass


def assemble(instructions: list[Instruction],
             options: ParseOptions | None = None) -> dict[str, Any]:
    """Run a fresh :class:`Assembler` over preprocessed *instructions*."""
    return Assembler(options).assemble(instructions)
