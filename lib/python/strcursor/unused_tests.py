#!/usr/bin/env python3
#
# Self tests for strcursor.unused.
#   - Cameron Simpson <cs@cskk.id.au> 19oct2026
#

''' Unit tests for the strcursor.unused module.
'''

from io import BytesIO
import sys
import unittest

from strcursor.bytecursor import ByteCursor
from strcursor.codepoint import CodePointCursor
from strcursor.scratch import Status
from strcursor.unused import UnusedReader

class TestUnusedReader(unittest.TestCase):
  ''' Tests for `UnusedReader`.
  '''

  def test_pending_then_stream(self):
    rdr = UnusedReader(b'abc', BytesIO(b'defgh'))
    self.assertTrue(rdr.readable())
    buf = bytearray(2)
    self.assertEqual(rdr.readinto(buf), 2)
    self.assertEqual(buf, b'ab')
    # the pending bytes are drained before the stream is touched
    self.assertEqual(rdr.readinto(buf), 1)
    self.assertEqual(buf[:1], b'c')
    self.assertEqual(rdr.read(), b'defgh')
    self.assertEqual(rdr.read(), b'')

  def test_no_stream(self):
    rdr = UnusedReader(bytearray(b'xyz'), None)
    self.assertEqual(rdr.read(2), b'xy')
    self.assertEqual(rdr.read(2), b'z')
    self.assertEqual(rdr.read(2), b'')

  def test_empty(self):
    rdr = UnusedReader(b'', None)
    self.assertEqual(rdr.read(), b'')
    self.assertEqual(str(rdr), 'UnusedReader(pending:0)')

class TestRetirement(unittest.TestCase):
  ''' Tests for `Cursor.unused`.
  '''

  def test_retire_once(self):
    for cls in ByteCursor, CodePointCursor:
      with self.subTest(cls=cls.__name__):
        cur = cls.from_bytes(b'head:tail', capacity=4)
        self.assertTrue(cur.consume(b'head'))
        rest = cur.unused()
        self.assertRaises(RuntimeError, cur.unused)
        self.assertEqual(rest.read(), b':tail')
        self.assertIs(cur.status, Status.EOF)
        self.assertTrue(cur.done())
        self.assertIsNone(cur.peek())
        self.assertIsNone(cur.current())
        self.assertFalse(cur.advance(1))
        self.assertEqual(cur.read(), b'')

  def test_retire_at_end(self):
    cur = ByteCursor.from_bytes(b'ab')
    self.assertTrue(cur.advance(2))
    self.assertTrue(cur.done())
    self.assertEqual(cur.unused().read(), b'')

  def test_stream_not_closed(self):
    stream = BytesIO(b'0123456789')
    cur = ByteCursor(stream, capacity=4)
    self.assertEqual(cur.current(), ord('0'))
    self.assertEqual(cur.unused().read(3), b'123')
    self.assertFalse(stream.closed)
    self.assertEqual(stream.read(), b'456789')

def selftest(argv):
  unittest.main(__name__, None, argv)

if __name__ == '__main__':
  selftest(sys.argv)
