#!/usr/bin/env python3
#
# Self tests for strcursor.cursor, exercised through both cursor classes.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' Unit tests for the strcursor.cursor module.
'''

from io import BytesIO
from os.path import join as joinpath
import sys
from tempfile import TemporaryDirectory
import unittest

from strcursor.bytecursor import ByteCursor
from strcursor.codepoint import CodePointCursor
from strcursor.cursor import Cursor
from strcursor.scratch import Status

SAMPLE = 'first line\nsecond: はろ〜\n\nlast 𝄞 line'
SAMPLE_BYTES = SAMPLE.encode('utf-8')

def units_of(cls, text):
  ''' The units of `text` as seen by a cursor of class `cls`.
  '''
  if cls is ByteCursor:
    return list(text.encode('utf-8'))
  return list(text)

class FailingStream:
  ''' A stream whose reads fail.
  '''

  def readinto(self, b):
    raise OSError('boom')

class TestCursorCommon(unittest.TestCase):
  ''' Properties shared by all cursors.
  '''

  CLASSES = ByteCursor, CodePointCursor

  def test_is_cursor(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        self.assertTrue(issubclass(cls, Cursor))
        self.assertRaises(TypeError, Cursor, BytesIO(b''))

  def test_current_concatenation(self):
    for cls in self.CLASSES:
      for capacity in 4, 7, 40:
        with self.subTest(cls=cls.__name__, capacity=capacity):
          cur = cls.from_bytes(SAMPLE_BYTES, capacity=capacity)
          self.assertEqual(list(cur), units_of(cls, SAMPLE))
          self.assertTrue(cur.done())
          self.assertEqual(cur.offset, len(SAMPLE_BYTES))

  def test_peek_is_idempotent(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls.from_text(SAMPLE)
        cur.advance(3)
        unit = cur.peek()
        for _ in range(5):
          self.assertEqual(cur.peek(), unit)
          self.assertEqual(cur.peek_at(1), unit)
        self.assertEqual(cur.offset, 3)
        self.assertEqual(cur.current(), unit)

  def test_prefix_then_consume(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls.from_text(SAMPLE)
        for prefix in 'first', b' line\n', 'second: はろ':
          self.assertTrue(cur.has_prefix(prefix))
          before = cur.offset
          self.assertTrue(cur.consume(prefix))
          nbytes = len(
              prefix.encode('utf-8') if isinstance(prefix, str) else prefix
          )
          self.assertEqual(cur.offset, before + nbytes)
        self.assertFalse(cur.has_prefix('〜\n\nlost'))
        self.assertFalse(cur.consume('〜\n\nlost'))
        self.assertTrue(cur.consume('〜\n'))

  def test_line_and_column(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls.from_text(SAMPLE)
        seen = []
        while not cur.done():
          seen.append(cur.current())
          # lineno counts the breaks consumed,
          # column counts the units since the last break
          newline = cls.NEWLINE[0]
          breaks = seen.count(newline)
          self.assertEqual(cur.lineno, 1 + breaks)
          since = seen[::-1].index(newline) if breaks else len(seen)
          self.assertEqual(cur.column, 1 + since)
          self.assertEqual(len(cur.line), since)
        self.assertEqual(cur.lineno, 4)
        last = 'last 𝄞 line'
        self.assertEqual(
            cur.line, last.encode('utf-8') if cls is ByteCursor else last
        )

  def test_unused_reconstructs(self):
    for cls in self.CLASSES:
      for split in 0, 1, 11, 20, len(SAMPLE):
        with self.subTest(cls=cls.__name__, split=split):
          cur = cls.from_text(SAMPLE, capacity=8)
          consumed = []
          for _ in range(split):
            unit = cur.current()
            if unit is None:
              break
            consumed.append(unit)
          # look ahead before retiring
          cur.peek_at(3)
          if cls is ByteCursor:
            head = bytes(consumed)
          else:
            head = ''.join(consumed).encode('utf-8')
          self.assertEqual(head + cur.unused().read(), SAMPLE_BYTES)

  def test_short_versus_eof(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls.from_bytes(b'abc')
        self.assertIsNone(cur.peek_at(5))
        self.assertIs(cur.status, Status.SHORT)
        self.assertFalse(cur.done())
        self.assertTrue(cur.advance(3))
        self.assertIsNone(cur.peek())
        self.assertIs(cur.status, Status.EOF)

  def test_stream_errors_propagate(self):
    for cls in self.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls(FailingStream())
        with self.assertRaises(OSError) as cm:
          cur.peek()
        message = str(cm.exception)
        self.assertIn('ScratchBuffer(', message)
        self.assertIn('.fill: boom', message)

  def test_str(self):
    cur = ByteCursor.from_bytes(b'a\nb')
    cur.advance(3)
    self.assertEqual(str(cur), 'ByteCursor(offset:3,line:2,col:2)')
    self.assertEqual(repr(cur), str(cur))

class TestPromote(unittest.TestCase):
  ''' Tests for `Cursor.promote` and the factory methods.
  '''

  def test_promote_bytes(self):
    for obj in b'abc', bytearray(b'abc'), memoryview(b'abc'):
      with self.subTest(obj=obj):
        cur = ByteCursor.promote(obj)
        self.assertIsInstance(cur, ByteCursor)
        self.assertEqual(cur.read(), b'abc')

  def test_promote_chunks(self):
    cur = CodePointCursor.promote([b'ab', 'é'.encode('utf-8')[:1], b'\xa9c'])
    self.assertIsInstance(cur, CodePointCursor)
    self.assertEqual(''.join(cur), 'abéc')

  def test_promote_chunks_to_end(self):
    for cls in TestCursorCommon.CLASSES:
      with self.subTest(cls=cls.__name__):
        cur = cls.promote([b'ab', b'', b'cd'])
        self.assertEqual(list(cur), units_of(cls, 'abcd'))
        self.assertIs(cur.status, Status.EOF)
        self.assertTrue(cur.done())

  def test_promote_filename(self):
    with TemporaryDirectory() as tmpdirpath:
      filename = joinpath(tmpdirpath, 'sample.txt')
      with open(filename, 'wb') as f:
        f.write(SAMPLE_BYTES)
      cur = CodePointCursor.promote(filename, capacity=5)
      self.assertEqual(''.join(cur), SAMPLE)
      self.assertIs(cur.status, Status.EOF)

  def test_promote_file(self):
    cur = ByteCursor.promote(BytesIO(b'xyz'), capacity=2)
    self.assertEqual(cur.capacity, 2)
    self.assertEqual(list(cur), [ord('x'), ord('y'), ord('z')])

  def test_promote_instance(self):
    cur = ByteCursor.from_bytes(b'xyz')
    self.assertIs(ByteCursor.promote(cur), cur)

  def test_from_text_encoding(self):
    cur = ByteCursor.from_text('é', encoding='latin-1')
    self.assertEqual(cur.read(), b'\xe9')

  def test_from_filename(self):
    with TemporaryDirectory() as tmpdirpath:
      filename = joinpath(tmpdirpath, 'sample.txt')
      with open(filename, 'wb') as f:
        f.write(SAMPLE_BYTES)
      cur = CodePointCursor.from_filename(filename)
      self.assertEqual(''.join(cur), SAMPLE)
      cur.scratch.stream.close()
      cur.unused()
      self.assertRaises(
          FileNotFoundError, ByteCursor.from_filename,
          joinpath(tmpdirpath, 'missing')
      )

def selftest(argv):
  unittest.main(__name__, None, argv)

if __name__ == '__main__':
  selftest(sys.argv)
