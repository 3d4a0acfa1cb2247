#!/usr/bin/env python3
#
# The fixed size staging buffer shared by the cursors.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' The scratch buffer refill protocol shared by the cursors:
    a fixed capacity `bytearray` of raw bytes pulled from a blocking
    stream, compacted and refilled on demand.

    A `ScratchBuffer` has three ordinates into its `buf`:
    * `position`: the number of leading bytes already consumed
    * `length`: the number of valid bytes
    * `capacity`: the configured size of the staging area

    with `0 <= position <= length <= len(buf)`.
    Consumers inspect `buf[position:length]` directly
    and advance `position` as they consume.
'''

from enum import Enum, unique

from icontract import require
from typeguard import typechecked

from cs.deco import fmtdoc
from cs.gimmicks import debug
from cs.pfx import Pfx

# ten worst case UTF-8 code points
DEFAULT_CAPACITY = 40

@unique
class Status(Enum):
  ''' The outcome of a request for more data.
  '''
  OK = 'ok'
  SHORT = 'insufficient data'
  EOF = 'exhausted'
  INVALID = 'undecodable data'
  STALLED = 'stalled stream'

  def __bool__(self):
    return self is Status.OK

class LookaheadError(ValueError):
  ''' Raised for a request for more look-ahead than a buffer can ever hold.
  '''

  def __init__(self, wanted, capacity):
    super().__init__(
        f'look-ahead of {wanted} bytes exceeds buffer capacity {capacity}'
    )
    self.wanted = wanted
    self.capacity = capacity

def readinto_from(stream, mv):
  ''' Read into the memoryview `mv` from `stream` with the most frugal
      method it offers, preferring a single fetch:
      `readinto1`, then `read1`, then `readinto`, then `read`.
      Return the number of bytes read, `0` at end of stream,
      or `None` if a non-blocking `stream` has nothing available.

      Note that `CornuCopyBuffer.readinto` fills the whole of `mv`
      and raises `EOFError` if the data run out, so its `read1` must
      be preferred.
  '''
  readinto = getattr(stream, 'readinto1', None)
  if readinto is not None:
    return readinto(mv)
  read = getattr(stream, 'read1', None)
  if read is None:
    readinto = getattr(stream, 'readinto', None)
    if readinto is not None:
      return readinto(mv)
    read = stream.read
  bs = read(len(mv))
  if bs is None:
    return None
  n = len(bs)
  mv[:n] = bs
  return n

class ScratchBuffer:
  ''' A fixed capacity byte buffer fed from a blocking `stream`.
  '''

  @fmtdoc
  @require(lambda capacity: capacity > 0)
  @typechecked
  def __init__(self, stream, capacity: int = DEFAULT_CAPACITY):
    ''' Initialise the buffer.

        Parameters:
        * `stream`: the binary source, not owned by the buffer
        * `capacity`: the staging size, default `{DEFAULT_CAPACITY}`
    '''
    self.stream = stream
    self.capacity = capacity
    self.buf = bytearray(capacity)
    self.position = 0
    self.length = 0
    self.eof = False

  def __str__(self):
    return (
        f'{self.__class__.__name__}'
        f'(pos:{self.position},len:{self.length},cap:{self.capacity}'
        f'{",eof" if self.eof else ""})'
    )

  def __len__(self):
    ''' The number of unconsumed bytes in the buffer.
    '''
    return self.length - self.position

  @property
  def exhausted(self):
    ''' Whether the stream has ended and nothing remains buffered.
    '''
    return self.eof and self.position >= self.length

  def release(self):
    ''' Drop the buffer storage, permanently.
        The buffer reports exhaustion from here on.
    '''
    debug("%s: release", self)
    self.eof = True
    self.buf = bytearray()
    self.position = 0
    self.length = 0

  def fill(self):
    ''' Compact the unconsumed bytes to the front of the buffer
        and perform a single read from the stream into the free space.
        Return the number of bytes added.

        The return is `0` if the buffer is full,
        if the stream has ended or if it had nothing available.
    '''
    if self.eof:
      if self.position >= self.length and self.buf:
        self.release()
      return 0
    offset = self.length - self.position
    buf = self.buf
    if self.position > 0:
      buf[:offset] = buf[self.position:self.length]
      self.position = 0
      self.length = offset
    if offset >= len(buf):
      return 0
    with Pfx("%s.fill", self):
      nread = readinto_from(self.stream, memoryview(buf)[offset:])
    if nread is None:
      return 0
    if nread == 0:
      self.eof = True
      if offset == 0:
        self.release()
      return 0
    self.length = offset + nread
    return nread

  def ensure(self, n):
    ''' Arrange that at least `n` unconsumed bytes are buffered.
        Return `Status.OK` on success, `Status.EOF` if the buffer is
        exhausted, or `Status.SHORT` if the stream stopped producing
        before `n` bytes were available.

        Raises `LookaheadError` if `n` exceeds the buffer capacity.
    '''
    if self.length - self.position >= n:
      return Status.OK
    if self.exhausted:
      if self.buf:
        self.release()
      return Status.EOF
    if n > self.capacity:
      raise LookaheadError(n, self.capacity)
    while self.length - self.position < n:
      if not self.fill():
        break
    if self.length - self.position >= n:
      return Status.OK
    if self.exhausted:
      if self.buf:
        self.release()
      return Status.EOF
    return Status.SHORT

  def unconsumed(self):
    ''' Return the unconsumed bytes as a `bytes`.
    '''
    return bytes(self.buf[self.position:self.length])

  def take_into(self, mv):
    ''' Copy up to `len(mv)` unconsumed bytes into the memoryview `mv`,
        consuming them. Return the number of bytes copied.
    '''
    n = min(len(mv), self.length - self.position)
    if n > 0:
      mv[:n] = self.buf[self.position:self.position + n]
      self.position += n
    return n

  def push(self, bs):
    ''' Push the bytes `bs` back onto the front of the unconsumed data.
        The buffer grows beyond its capacity if they do not fit.
    '''
    if not bs:
      return
    pending = bytes(bs) + self.buf[self.position:self.length]
    if len(pending) > len(self.buf):
      self.buf = bytearray(pending)
    else:
      self.buf[:len(pending)] = pending
    self.position = 0
    self.length = len(pending)

  def stream_readinto(self, mv):
    ''' Read directly from the stream into `mv`, bypassing the buffer.
        Return the number of bytes read, or `None` if nothing
        was available from a non-blocking stream.
    '''
    if self.eof:
      return 0
    with Pfx("%s.stream_readinto", self):
      nread = readinto_from(self.stream, mv)
    if nread == 0:
      self.eof = True
    return nread

  def detach(self):
    ''' Detach from the stream and release the buffer.
        Return the stream.
    '''
    stream = self.stream
    self.stream = None
    self.release()
    return stream
