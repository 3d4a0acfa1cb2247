#!/usr/bin/env python3
#
# The capability contract shared by the byte and code point cursors.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' The `Cursor` abstract base class: the capability contract shared
    by `ByteCursor` and `CodePointCursor`, and the machinery they have
    in common:
    * line and column bookkeeping on consumption
    * the file-like passthrough `read`/`readinto`,
      so that a cursor can be handed to another byte oriented consumer
    * `unused()`, retiring the cursor
    * promotion of various data sources to a cursor

    The "unit" of a cursor is what `peek()` and `current()` return:
    an `int` byte for a `ByteCursor`
    and a single character `str` for a `CodePointCursor`.
    Methods which fetch a unit return `None` when no unit is available;
    the `status` attribute then says why.
'''

from abc import ABC, abstractmethod
from io import BytesIO

from typeguard import typechecked

from cs.buffer import CornuCopyBuffer
from cs.deco import Promotable
from cs.gimmicks import debug
from cs.pfx import pfx_call

from .scratch import DEFAULT_CAPACITY, ScratchBuffer, Status
from .unused import UnusedReader

# pylint: disable=too-many-instance-attributes
class Cursor(Promotable, ABC):
  ''' Abstract base class for a streaming cursor over a binary `stream`.

      Subclasses set `NEWLINE` and `EMPTY` to the line break and the
      empty string of their unit type and implement
      `peek_at`, `advance`, `has_prefix_bytes` and `has_prefix_text`.
  '''

  NEWLINE = None
  EMPTY = None

  def __init__(self, stream, *, capacity=DEFAULT_CAPACITY):
    self.scratch = ScratchBuffer(stream, capacity)
    self.status = Status.OK
    self.retired = False
    self._offset = 0
    self._lineno = 1
    self._column = 1
    self._line = []

  def __str__(self):
    return (
        f'{self.__class__.__name__}'
        f'(offset:{self._offset},line:{self._lineno},col:{self._column})'
    )

  __repr__ = __str__

  @property
  def capacity(self):
    ''' The scratch buffer capacity.
    '''
    return self.scratch.capacity

  @property
  def offset(self):
    ''' The number of bytes consumed so far.
    '''
    return self._offset

  @property
  def lineno(self):
    ''' The current line number, counting from `1`.
    '''
    return self._lineno

  @property
  def column(self):
    ''' The current column number, counting from `1`.
    '''
    return self._column

  @property
  def line(self):
    ''' The units consumed since the last line break.
        Reading this also joins the pending line fragments into one.
    '''
    line = self.EMPTY.join(self._line)
    self._line[:] = [line] if line else []
    return line

  def _track(self, consumed):
    ''' Update the line and column state for the `consumed` units.
    '''
    newline = self.NEWLINE
    nlpos = consumed.rfind(newline)
    if nlpos < 0:
      self._column += len(consumed)
      if consumed:
        self._line.append(consumed)
      return
    self._lineno += consumed.count(newline)
    tail = consumed[nlpos + 1:]
    self._column = len(tail) + 1
    self._line[:] = [tail] if tail else []

  @abstractmethod
  def peek_at(self, n):
    ''' Return the unit `n` positions ahead without consuming it,
        where `peek_at(1)` is the next unit.
        Return `None` if there are not `n` units available.
    '''
    raise NotImplementedError

  def peek(self):
    ''' Return the next unit without consuming it, or `None`.
    '''
    return self.peek_at(1)

  @abstractmethod
  def advance(self, n):
    ''' Consume `n` units, updating the line and column state.
        Return `True` on success.
        Return `False` without consuming anything if fewer than
        `n` units are available.
    '''
    raise NotImplementedError

  def current(self):
    ''' Consume and return the next unit, or return `None` if no unit
        is available.
    '''
    unit = self.peek_at(1)
    if unit is not None:
      self.advance(1)
    return unit

  def __iter__(self):
    return self

  def __next__(self):
    unit = self.current()
    if unit is None:
      raise StopIteration
    return unit

  @abstractmethod
  def has_prefix_bytes(self, bs) -> bool:
    ''' Test whether the unconsumed data commences with the bytes `bs`.
    '''
    raise NotImplementedError

  @abstractmethod
  def has_prefix_text(self, s: str) -> bool:
    ''' Test whether the unconsumed data commences with the text `s`.
    '''
    raise NotImplementedError

  @abstractmethod
  def _unit_count(self, prefix):
    ''' The number of units in `prefix`, a `str` or a bytes-like.
    '''
    raise NotImplementedError

  def consume_bytes(self, bs) -> bool:
    ''' If the unconsumed data commences with the bytes `bs`,
        consume them and return `True`, otherwise return `False`.
    '''
    if not self.has_prefix_bytes(bs):
      return False
    return self.advance(self._unit_count(bs))

  def consume_text(self, s: str) -> bool:
    ''' If the unconsumed data commences with the text `s`,
        consume it and return `True`, otherwise return `False`.
    '''
    if not self.has_prefix_text(s):
      return False
    return self.advance(self._unit_count(s))

  def has_prefix(self, prefix) -> bool:
    ''' Test for `prefix`, either a `str` or a bytes-like.
    '''
    if isinstance(prefix, str):
      return self.has_prefix_text(prefix)
    return self.has_prefix_bytes(prefix)

  def consume(self, prefix) -> bool:
    ''' Consume `prefix`, either a `str` or a bytes-like, if present.
    '''
    if isinstance(prefix, str):
      return self.consume_text(prefix)
    return self.consume_bytes(prefix)

  def done(self) -> bool:
    ''' Test whether the cursor has no more units.

        *Warning*: this may block reading from the stream.
    '''
    return self.peek_at(1) is None

  def _unqueue(self):
    ''' Return any decoded but unconsumed units to the scratch buffer
        as raw bytes.
        The base implementation has nothing to return.
    '''

  def readable(self):
    return True

  def readinto(self, b):
    ''' Read into `b` like a raw file.
        Buffered but unconsumed bytes are returned first;
        when there are none, a single read is made from the stream.

        This does not update the line and column state.
    '''
    self._unqueue()
    mv = memoryview(b).cast('B')
    scratch = self.scratch
    n = scratch.take_into(mv)
    if n == 0 and len(mv) > 0:
      n = scratch.stream_readinto(mv)
      if n is None:
        return None
      if scratch.eof:
        self.status = Status.EOF
    self._offset += n
    return n

  def read1(self, size=-1):
    ''' Read up to `size` bytes with at most one stream read.
    '''
    if size is None or size < 0:
      size = max(len(self.scratch), self.capacity)
    buf = bytearray(size)
    n = self.readinto(buf)
    if n is None:
      return None
    return bytes(buf[:n])

  def read(self, size=-1):
    ''' Read up to `size` bytes, or all remaining data if `size`
        is omitted or negative.
        This returns short only at the end of the stream.
    '''
    if size is None or size < 0:
      chunks = []
      while True:
        bs = self.read1()
        if not bs:
          break
        chunks.append(bs)
      return b''.join(chunks)
    buf = bytearray(size)
    mv = memoryview(buf)
    got = 0
    while got < size:
      n = self.readinto(mv[got:])
      if not n:
        break
      got += n
    return bytes(buf[:got])

  def unused(self):
    ''' Retire the cursor and return an `UnusedReader` supplying
        everything not yet consumed:
        the buffered but unconsumed bytes followed by the rest of the stream.

        This may be called only once.
        After the call the cursor reports exhaustion.
    '''
    if self.retired:
      raise RuntimeError(f'{self}: unused() already called')
    self._unqueue()
    pending = self.scratch.unconsumed()
    stream = None if self.scratch.eof else self.scratch.stream
    self.scratch.detach()
    self.retired = True
    self.status = Status.EOF
    debug("%s: retired with %d bytes pending", self, len(pending))
    return UnusedReader(pending, stream)

  @classmethod
  def from_bytes(cls, bs, **kw):
    ''' Return a cursor over the bytes `bs`.
    '''
    return cls(BytesIO(bs), **kw)

  @classmethod
  @typechecked
  def from_text(cls, text: str, encoding: str = 'utf-8', **kw):
    ''' Return a cursor over `text` encoded with `encoding`.
    '''
    return cls(BytesIO(text.encode(encoding)), **kw)

  @classmethod
  def from_filename(cls, filename, **kw):
    ''' Return a cursor over the contents of the file named `filename`.

        The file is closed when the returned cursor is garbage collected;
        callers wanting timely closure should open the file themselves.
    '''
    return cls(pfx_call(open, filename, 'rb'), **kw)

  @classmethod
  def promote(cls, obj, **kw):
    ''' Promote `obj` to a cursor.

        Promotes:
        * an instance of `cls`: returned unchanged
        * a bytes-like object: a cursor over its bytes
        * an object with a `readinto`, `read1` or `read` method:
          a cursor reading from it
        * a filename or a file descriptor:
          a cursor reading from `CornuCopyBuffer.promote(obj)`
        * an iterable of bytes-like chunks:
          a cursor reading from a `CornuCopyBuffer` over the nonempty chunks
    '''
    if isinstance(obj, cls):
      return obj
    if isinstance(obj, (bytes, bytearray, memoryview)):
      return cls.from_bytes(obj, **kw)
    if any(hasattr(obj, method) for method in ('readinto', 'read1', 'read')):
      return cls(obj, **kw)
    if isinstance(obj, (int, str)):
      return cls(CornuCopyBuffer.promote(obj), **kw)
    # an empty chunk would read as the end of the data
    return cls(CornuCopyBuffer(chunk for chunk in obj if chunk), **kw)
