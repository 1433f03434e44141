"""Tests for betty.options."""

import logging

import pytest

from betty.errors import OptionsError
from betty.options import ParseOptions


def test_defaults():
    opts = ParseOptions()
    assert opts.verbose is False
    assert opts.allow_duplicate_keys is True
    assert opts.on_field_name("Key") == "Key"
    assert opts.on_value(" v ", "k") == " v "


def test_coerce_none_and_instance():
    opts = ParseOptions(verbose=True)
    assert ParseOptions.coerce(None) == ParseOptions()
    assert ParseOptions.coerce(opts) is opts


def test_coerce_mapping_with_aliases():
    opts = ParseOptions.coerce({"allowDuplicateKeys": False, "verbose": True})
    assert opts.allow_duplicate_keys is False
    assert opts.verbose is True


def test_overrides_win():
    opts = ParseOptions.coerce({"verbose": True}, verbose=False)
    assert opts.verbose is False


def test_unknown_name():
    with pytest.raises(OptionsError, match="unknown parse option"):
        ParseOptions.coerce({"strict": True})


def test_non_callable_transform():
    with pytest.raises(OptionsError):
        ParseOptions(on_value="upper")
    with pytest.raises(TypeError):
        ParseOptions(on_field_name=None)


def test_bad_options_type():
    with pytest.raises(OptionsError):
        ParseOptions.coerce(["verbose"])


def test_trace_only_when_verbose(caplog):
    log = logging.getLogger("betty.test")
    with caplog.at_level(logging.DEBUG, logger="betty.test"):
        ParseOptions().trace(log, "hidden")
        ParseOptions(verbose=True).trace(log, "a\nb\tc")
    assert [r.getMessage() for r in caplog.records] == ["a\\nb\\tc"]
