#!/usr/bin/env python3
#
# The reader handed back when a cursor is retired.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' The unused remainder of a retired cursor: its buffered but
    unconsumed bytes followed by the rest of its stream.
'''

from io import RawIOBase

from .scratch import readinto_from

class UnusedReader(RawIOBase):
  ''' A two phase binary reader: first the captured `pending` bytes,
      then whatever the `stream` supplies.

      This is made by `Cursor.unused()`.
  '''

  def __init__(self, pending, stream):
    super().__init__()
    self.pending = memoryview(bytes(pending))
    self.stream = stream

  def __str__(self):
    return f'{self.__class__.__name__}(pending:{len(self.pending)})'

  def readable(self):
    return True

  def readinto(self, b):
    ''' Read into `b`, draining the pending bytes before touching the stream.
    '''
    mv = memoryview(b).cast('B')
    pending = self.pending
    if pending:
      n = min(len(mv), len(pending))
      mv[:n] = pending[:n]
      self.pending = pending[n:]
      return n
    if self.stream is None:
      return 0
    return readinto_from(self.stream, mv)
