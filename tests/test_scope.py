"""Tests for betty.scope."""

from betty.model import ArrayKind
from betty.scope import NodeTable, ScopeStack, is_relative, resolve_target


class TestNodeTable:
    def test_register_and_lookup(self):
        table = NodeTable()
        parent, child = {}, {}
        table.register(child, parent, "child")
        assert child in table
        assert table.parent(child) is parent
        assert table.name(child) == "child"
        assert table.kind(child) is None

    def test_identity_not_equality(self):
        table = NodeTable()
        a, b = {}, {}
        table.register(a, None, "a")
        assert b not in table
        assert table.name(b) is None

    def test_reregister_keeps_name(self):
        table = NodeTable()
        node, p1, p2 = {}, {}, {}
        table.register(node, p1, "n")
        table.register(node, p2)
        assert table.parent(node) is p2
        assert table.name(node) == "n"

    def test_kind_is_fixed_once_set(self):
        table = NodeTable()
        arr: list = []
        assert table.set_kind(arr, ArrayKind.SIMPLE) == ArrayKind.SIMPLE
        assert table.set_kind(arr, ArrayKind.FREEFORM) == ArrayKind.SIMPLE
        assert table.kind(arr) == ArrayKind.SIMPLE


class TestScopeStack:
    def test_starts_at_root(self):
        root: dict = {}
        stack = ScopeStack(root)
        assert stack.top is root
        assert len(stack) == 1

    def test_push_pop(self):
        root, child = {}, {}
        stack = ScopeStack(root)
        stack.push(child)
        assert stack.pop() is child
        assert stack.top is root

    def test_pop_below_root_resets(self):
        root: dict = {}
        stack = ScopeStack(root)
        assert stack.pop() is root
        assert stack.top is root
        assert len(stack) == 1

    def test_reset_with_scope(self):
        root, a, b = {}, {}, {}
        stack = ScopeStack(root)
        stack.push(a)
        stack.reset(b)
        assert list(stack) == [root, b]


class TestResolveTarget:
    def test_relative_key_uses_top(self):
        root, top = {}, {}
        assert resolve_target(".x", [root, top], root) == (top, True)

    def test_absolute_key_uses_root(self):
        root, top = {}, {}
        target, relative = resolve_target("x", [root, top], root)
        assert target is root
        assert relative is False

    def test_plus_before_dot_is_relative(self):
        assert is_relative("+.notes")
        assert is_relative(".+notes")
        assert not is_relative("+notes")
