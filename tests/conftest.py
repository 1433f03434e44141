"""Shared fixtures for the betty test suite."""

import pytest


BETTY_DOCUMENT = """\
hello: world
{options}
test: true
x: false
longer::
this is a block

It can contain markup

[and]
it won't care

this: isn't a field
::longer
multiline: this is a standard
multiline value
:end
{.child}
block: true
{}
{}
not: in options

[+free.form]
this is a test block
key: value
{.quote}
text: Correctly parses.
{}
{quote}
error: This should exit the array.

:skip
skipped: entirely
:endskip

[strings]
* test
* a
* b
* longer string goes here: the sequel
[]

[list]
a: 1
b: 2
{.c.x}
d: 1
lengthy::
deeply nested multiline
::lengthy
{}
a: 3
a: 4
[]

[parent]
[.nested]
* one
* two
[]
[]

{named}
{.sub}
{.inner}
prop: This is a named object
{/sub}
outer: Closing only one level
{/named}
closing: out of list
timestamp: 2020-02-10T15:00:00.000Z
:ignore
ignored: true
"""


@pytest.fixture
def betty_document() -> str:
    """A document exercising every construct, including :skip and :ignore."""
    return BETTY_DOCUMENT
