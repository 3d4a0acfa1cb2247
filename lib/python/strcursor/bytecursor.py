#!/usr/bin/env python3
#
# A cursor whose units are raw bytes.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' `ByteCursor`, a streaming cursor whose units are raw bytes.
'''

from icontract import require

from .cursor import Cursor
from .scratch import Status

class ByteCursor(Cursor):
  ''' A cursor over the bytes of a binary stream.

      Each unit is an `int` in the range `0` to `255`.
      Look-ahead is bounded by the scratch buffer capacity:
      asking for more raises `LookaheadError`.

      Example:

          >>> bcur = ByteCursor.from_bytes(b'ab\\ncd')
          >>> bcur.peek_at(2)
          98
          >>> bcur.consume(b'ab\\n')
          True
          >>> bcur.lineno, bcur.column
          (2, 1)
          >>> bcur.current()
          99
          >>> bcur.line
          b'c'
  '''

  NEWLINE = b'\n'
  EMPTY = b''

  def _ensure(self, n):
    self.status = status = self.scratch.ensure(n)
    return status is Status.OK

  @require(lambda n: n >= 1)
  def peek_at(self, n):
    if not self._ensure(n):
      return None
    scratch = self.scratch
    return scratch.buf[scratch.position + n - 1]

  @require(lambda n: n >= 0)
  def advance(self, n):
    if n == 0:
      return True
    if not self._ensure(n):
      return False
    scratch = self.scratch
    start = scratch.position
    scratch.position = start + n
    self._offset += n
    self._track(bytes(scratch.buf[start:start + n]))
    return True

  def has_prefix_bytes(self, bs):
    n = len(bs)
    if n == 0:
      return True
    if not self._ensure(n):
      return False
    scratch = self.scratch
    return scratch.buf.startswith(bs, scratch.position, scratch.length)

  def has_prefix_text(self, s):
    return self.has_prefix_bytes(s.encode('utf-8'))

  def consume_text(self, s):
    return self.consume_bytes(s.encode('utf-8'))

  def _unit_count(self, prefix):
    return len(prefix)
