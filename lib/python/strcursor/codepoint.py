#!/usr/bin/env python3
#
# A cursor whose units are decoded Unicode code points.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' `CodePointCursor`, a streaming cursor whose units are the Unicode
    code points of a UTF-8 encoded stream.

    Raw bytes are pulled into the scratch buffer and decoded
    incrementally into a read-ahead queue of code points.
    A sequence split across refills stays in the scratch buffer until
    the rest of it arrives.
    An undecodable sequence halts decoding:
    the code points before it remain available
    and the cursor's `status` becomes `Status.INVALID`.
'''

from codecs import utf_8_decode

from icontract import require
from typeguard import typechecked

from cs.deco import fmtdoc
from cs.gimmicks import debug

from .cursor import Cursor
from .scratch import DEFAULT_CAPACITY, Status

# the longest UTF-8 encoding of a code point
MAX_UTF8_WIDTH = 4

# consecutive unproductive refills before the stream is deemed stalled
STALL_LIMIT = 2

def utf8_width(ch):
  ''' The length of the UTF-8 encoding of the character `ch`.
  '''
  o = ord(ch)
  if o < 0x80:
    return 1
  if o < 0x800:
    return 2
  if o < 0x10000:
    return 3
  return 4

class ReadAheadQueue:
  ''' A FIFO of decoded code points and their encoded byte widths,
      kept in a pair of ring arrays which double in size when full.
  '''

  def __init__(self, size=16):
    self._chars = [''] * size
    self._widths = [0] * size
    self._head = 0
    self._count = 0

  def __len__(self):
    return self._count

  def __str__(self):
    return f'{self.__class__.__name__}({self.prefix(self._count)!r})'

  def _grow(self):
    size = len(self._chars)
    head = self._head
    self._chars = self._chars[head:] + self._chars[:head] + [''] * size
    self._widths = self._widths[head:] + self._widths[:head] + [0] * size
    self._head = 0

  def append(self, ch, width):
    ''' Append the character `ch`, decoded from `width` bytes.
    '''
    if self._count == len(self._chars):
      self._grow()
    i = (self._head + self._count) % len(self._chars)
    self._chars[i] = ch
    self._widths[i] = width
    self._count += 1

  def extend(self, text):
    ''' Append the characters of `text`, computing their widths.
    '''
    for ch in text:
      self.append(ch, utf8_width(ch))

  def __getitem__(self, index):
    ''' Return the character `index` places from the head.
    '''
    if not 0 <= index < self._count:
      raise IndexError(f'index {index} out of range (len={self._count})')
    return self._chars[(self._head + index) % len(self._chars)]

  def prefix(self, n):
    ''' Return the leading `n` characters as a `str`.
    '''
    size = len(self._chars)
    head = self._head
    end = head + n
    if end <= size:
      return ''.join(self._chars[head:end])
    return ''.join(self._chars[head:]) + ''.join(self._chars[:end - size])

  def popleft(self, n):
    ''' Remove the leading `n` characters.
        Return a `(text,nbytes)` tuple of the removed characters
        and the number of bytes they were decoded from.
    '''
    if n > self._count:
      raise IndexError(f'cannot pop {n} from {self._count} entries')
    text = self.prefix(n)
    size = len(self._chars)
    head = self._head
    nbytes = 0
    for i in range(head, head + n):
      nbytes += self._widths[i % size]
    self._head = (head + n) % size
    self._count -= n
    if self._count == 0:
      self._head = 0
    return text, nbytes

  def clear(self):
    ''' Empty the queue, returning its contents as a `str`.
    '''
    text, _ = self.popleft(self._count)
    return text

class CodePointCursor(Cursor):
  ''' A cursor over the code points of a UTF-8 encoded binary stream.

      Each unit is a single character `str`.
      Unlike `ByteCursor`, look-ahead is not bounded by the scratch
      buffer capacity: the read-ahead queue grows as required.

      Example:

          >>> rcur = CodePointCursor.from_text('Alice\\nBob')
          >>> rcur.consume('Alice\\nB')
          True
          >>> rcur.lineno, rcur.column, rcur.line
          (2, 2, 'B')
          >>> rcur.peek_at(2)
          'b'
  '''

  NEWLINE = '\n'
  EMPTY = ''

  @fmtdoc
  @require(lambda capacity: capacity >= MAX_UTF8_WIDTH)
  @typechecked
  def __init__(self, stream, *, capacity: int = DEFAULT_CAPACITY):
    ''' Initialise the cursor.

        Parameters:
        * `stream`: the binary source, not owned by the cursor
        * `capacity`: the scratch buffer size,
          default `{DEFAULT_CAPACITY}`, at least `{MAX_UTF8_WIDTH}`
    '''
    super().__init__(stream, capacity=capacity)
    self.queue = ReadAheadQueue()
    self.invalid = False

  def decode_more(self):
    ''' Decode the complete code points in the scratch buffer
        onto the read-ahead queue.
        Return the number of code points added.

        An incomplete trailing sequence is left in the scratch buffer.
        An invalid sequence is also left in the scratch buffer
        and sets `self.invalid`.
    '''
    scratch = self.scratch
    if self.invalid or scratch.position >= scratch.length:
      return 0
    data = memoryview(scratch.buf)[scratch.position:scratch.length]
    try:
      text, consumed = utf_8_decode(data, 'strict', False)
    except UnicodeDecodeError as e:
      text, consumed = utf_8_decode(data[:e.start], 'strict', False)
      self.invalid = True
      debug(
          "%s: invalid UTF-8 %r: %s", self, bytes(e.object[e.start:e.end]),
          e.reason
      )
    scratch.position += consumed
    self.queue.extend(text)
    return len(text)

  def ensure_code_points(self, n):
    ''' Arrange that at least `n` code points are in the read-ahead queue.
        Return `Status.OK` on success, otherwise the reason for failure.
        The result is also saved as `self.status`.
    '''
    queue = self.queue
    if len(queue) >= n:
      self.status = Status.OK
      return Status.OK
    scratch = self.scratch
    stalls = 0
    while True:
      self.decode_more()
      if len(queue) >= n:
        status = Status.OK
        break
      if self.invalid:
        status = Status.INVALID
        break
      if scratch.exhausted:
        status = Status.SHORT if queue else Status.EOF
        break
      if scratch.eof:
        # an incomplete sequence remains at the end of the stream
        debug("%s: %d undecodable bytes at end of stream", self, len(scratch))
        status = Status.INVALID
        break
      if scratch.fill() > 0:
        stalls = 0
        continue
      if scratch.eof:
        continue
      stalls += 1
      if stalls >= STALL_LIMIT:
        debug("%s: stream stalled, releasing the buffer", self)
        scratch.release()
        status = Status.STALLED
        break
    self.status = status
    return status

  @require(lambda n: n >= 1)
  def peek_at(self, n):
    if self.ensure_code_points(n) is not Status.OK:
      return None
    return self.queue[n - 1]

  @require(lambda n: n >= 0)
  def advance(self, n):
    if n == 0:
      return True
    if self.ensure_code_points(n) is not Status.OK:
      return False
    text, nbytes = self.queue.popleft(n)
    self._offset += nbytes
    self._track(text)
    return True

  def has_prefix_text(self, s):
    n = len(s)
    if n == 0:
      return True
    if self.ensure_code_points(n) is not Status.OK:
      return False
    return self.queue.prefix(n) == s

  def has_prefix_bytes(self, bs):
    try:
      s = str(bs, 'utf-8')
    except UnicodeDecodeError:
      return False
    return self.has_prefix_text(s)

  def _unit_count(self, prefix):
    if isinstance(prefix, str):
      return len(prefix)
    return len(str(prefix, 'utf-8'))

  def _unqueue(self):
    ''' Return the decoded but unconsumed code points
        to the front of the scratch buffer as UTF-8.
    '''
    if self.queue:
      self.scratch.push(self.queue.clear().encode('utf-8'))
    self.invalid = False
