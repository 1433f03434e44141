"""Tests for betty.preprocess."""

from betty.instruction import Instruction, InstructionType as I
from betty.preprocess import merge_buffer, preprocess


def V(key, value):
    return Instruction(I.VALUE, key, value)


def S(value):
    return Instruction(I.SIMPLE, "*", value)


def B(value):
    return Instruction(I.BUFFER, None, value)


FLUSH = Instruction(I.FLUSH)
SKIPPED = Instruction(I.SKIPPED)


def run(*instructions):
    return [(i.type, i.key, i.value) for i in preprocess(list(instructions))]


class TestMergeBuffer:
    def test_joins(self):
        assert merge_buffer(["a\n", "b\n"]) == "a\nb\n"

    def test_strips_one_leading_backslash(self):
        assert merge_buffer(["\\:a\n", "\\:b\n"]) == ":a\n\\:b\n"

    def test_backslash_on_later_line(self):
        assert merge_buffer(["text\n", "\\* x\n"]) == "text\n* x\n"

    def test_inner_backslash_kept(self):
        assert merge_buffer(["a \\b\n"]) == "a \\b\n"


class TestPreprocess:
    def test_consecutive_buffers_merge(self):
        assert run(B("a\n"), B("b\n")) == [(I.BUFFER, None, "a\nb\n")]

    def test_blank_buffers_are_dropped(self):
        assert run(B("\n"), Instruction(I.OBJECT, "x")) == [(I.OBJECT, "x", None)]

    def test_structural_flushes_pending_first(self):
        assert run(B("x\n"), Instruction(I.OBJECT, "a")) == [
            (I.BUFFER, None, "x\n"),
            (I.OBJECT, "a", None),
        ]

    def test_flush_extends_open_value(self):
        assert run(V("k", " v\n"), B("more\n"), FLUSH) == [(I.VALUE, "k", " v\nmore\n")]

    def test_input_is_not_mutated(self):
        value = V("k", " v\n")
        preprocess([value, B("more\n"), FLUSH])
        assert value.value == " v\n"

    def test_text_between_values_stays_separate(self):
        assert run(V("a", " 1\n"), B("text\n"), V("b", " 2\n")) == [
            (I.VALUE, "a", " 1\n"),
            (I.BUFFER, None, "text\n"),
            (I.VALUE, "b", " 2\n"),
        ]

    def test_simple_inside_value_is_folded(self):
        assert run(V("a", " 1\n"), S(" two\n"), FLUSH) == [(I.VALUE, "a", " 1\n* two\n")]

    def test_value_inside_simple_is_folded(self):
        assert run(S(" a\n"), V("k", " v\n"), FLUSH) == [(I.SIMPLE, "*", " a\nk: v\n")]

    def test_consecutive_simples(self):
        assert run(S(" a\n"), S(" b\n")) == [(I.SIMPLE, "*", " a\n"), (I.SIMPLE, "*", " b\n")]

    def test_flush_without_open_value_emits_buffer(self):
        assert run(B("x\n"), FLUSH) == [(I.BUFFER, None, "x\n")]

    def test_structural_closes_open_value(self):
        assert run(V("a", " 1\n"), Instruction(I.OBJECT, "o"), B("t\n"), FLUSH) == [
            (I.VALUE, "a", " 1\n"),
            (I.OBJECT, "o", None),
            (I.BUFFER, None, "t\n"),
        ]

    def test_skipped_closes_open_value(self):
        assert run(V("a", " 1\n"), SKIPPED, B("x\n"), FLUSH) == [
            (I.VALUE, "a", " 1\n"),
            (I.SKIPPED, None, None),
            (I.BUFFER, None, "x\n"),
        ]

    def test_dangling_buffer_is_emitted(self):
        assert run(Instruction(I.ARRAY, "+n"), B("prose\n")) == [
            (I.ARRAY, "+n", None),
            (I.BUFFER, None, "prose\n"),
        ]

    def test_escaped_end_is_merged_into_value(self):
        assert run(V("k", " first\n"), B("\\:end\n"), FLUSH) == [
            (I.VALUE, "k", " first\n:end\n"),
        ]
