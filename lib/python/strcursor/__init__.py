#!/usr/bin/env python3
#
# Streaming byte and code point cursors.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' Streaming cursors for hand written lexers and parsers:
    inspect and consume a blocking byte stream one byte or one Unicode
    code point at a time, with look-ahead, prefix matching and line
    and column tracking, without reading the whole input into memory.

    There are two cursors:
    * `ByteCursor`: the units are raw bytes (`int`s)
    * `CodePointCursor`: the units are the code points (single
      character `str`s) of a UTF-8 encoded stream

    Both share the same methods:
    * `peek()`, `peek_at(n)`: inspect the next or the `n`th unit
    * `current()`: consume and return the next unit
    * `advance(n)`: consume `n` units
    * `has_prefix(p)`, `consume(p)`: test for and consume a `str` or
      bytes prefix
    * `done()`: test for the end of the data
    * `line`, `lineno`, `column`: position information
    * `read(size)`, `readinto(b)`: read the unconsumed data as a binary file
    * `unused()`: retire the cursor, returning a reader for the unconsumed data

    A unit fetching method returns `None` if no unit is available
    and a consuming method returns `False`;
    the cursor's `status` says why.

    Example:

        >>> from strcursor import CodePointCursor
        >>> cur = CodePointCursor.from_text('let x = 1\\nlet y = 2\\n')
        >>> cur.consume('let ')
        True
        >>> cur.current()
        'x'
        >>> cur.column
        6
'''

from .bytecursor import ByteCursor
from .codepoint import CodePointCursor, MAX_UTF8_WIDTH
from .cursor import Cursor
from .scratch import DEFAULT_CAPACITY, LookaheadError, Status
from .unused import UnusedReader

__version__ = '20261019'

DISTINFO = {
    'keywords': ["python3"],
    'classifiers': [
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Development Status :: 4 - Beta",
        "Topic :: Text Processing",
    ],
    'install_requires': [
        'cs.buffer',
        'cs.deco',
        'cs.gimmicks',
        'cs.pfx',
        'icontract',
        'typeguard',
    ],
}

__all__ = (
    'ByteCursor',
    'CodePointCursor',
    'Cursor',
    'DEFAULT_CAPACITY',
    'LookaheadError',
    'MAX_UTF8_WIDTH',
    'Status',
    'UnusedReader',
)
