# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""PostgreSQL adapter tests."""

import types
import unittest
from unittest import mock

import psycopg
from psycopg.adapt import AdaptersMap, PyFormat
from psycopg.pq import Format
from psycopg.rows import dict_row
from psycopg.types import TypeInfo
import semver

from semver64 import postgres
from semver64.requirement import VersionReq

_OID = 16500


def _context():
  return types.SimpleNamespace(adapters=AdaptersMap(psycopg.adapters))


class AdapterTest(unittest.TestCase):
  """Dumper and loader tests."""

  def test_accepts(self):
    """Only the semver64 type is accepted."""
    self.assertTrue(postgres.accepts('semver64'))
    self.assertFalse(postgres.accepts('semver'))
    self.assertFalse(postgres.accepts('bytea'))

  def test_binary(self):
    """Binary values go through the codec."""
    version = semver.Version.parse('1.2.3-foo+bar')
    dumped = postgres.Semver64BinaryDumper(semver.Version).dump(version)
    self.assertEqual(b'\x00' * 7 + b'\x01' + b'\x00' * 7 + b'\x02' +
                     b'\x00' * 7 + b'\x03' + b'foo+bar', bytes(dumped))

    loaded = postgres.Semver64BinaryLoader(_OID).load(memoryview(dumped))
    self.assertEqual('1.2.3-foo+bar', str(loaded))

  def test_text(self):
    """Text values use the canonical string form."""
    version = semver.Version.parse('1.2.0-bar')
    dumped = postgres.Semver64Dumper(semver.Version).dump(version)
    self.assertEqual(b'1.2.0-bar', bytes(dumped))
    self.assertEqual(version, postgres.Semver64Loader(_OID).load(dumped))


class RegisterTest(unittest.TestCase):
  """Registration tests."""

  def test_register(self):
    """Test registering with known type info."""
    context = _context()
    info = postgres.register_semver64(context,
                                      TypeInfo('semver64', _OID, _OID + 1))
    self.assertEqual(_OID, info.oid)

    adapters = context.adapters
    self.assertTrue(
        issubclass(
            adapters.get_loader(_OID, Format.BINARY),
            postgres.Semver64BinaryLoader))
    self.assertTrue(
        issubclass(
            adapters.get_loader(_OID, Format.TEXT), postgres.Semver64Loader))

    dumper = adapters.get_dumper(semver.Version, PyFormat.BINARY)
    self.assertTrue(issubclass(dumper, postgres.Semver64BinaryDumper))
    self.assertEqual(_OID, dumper.oid)
    self.assertEqual(_OID, adapters.get_dumper(semver.Version,
                                               PyFormat.TEXT).oid)

  def test_wrong_type(self):
    """Types other than semver64 are rejected."""
    with self.assertRaises(postgres.UnsupportedTypeError):
      postgres.register_semver64(_context(), TypeInfo('semver', _OID, 0))

  @mock.patch.object(TypeInfo, 'fetch', return_value=None)
  def test_missing_type(self, mock_fetch):
    """The extension must be installed."""
    context = _context()
    with self.assertRaises(postgres.UnsupportedTypeError):
      postgres.register_semver64(context)
    mock_fetch.assert_called_once_with(context, 'semver64')

  @mock.patch.object(TypeInfo, 'fetch')
  def test_fetches_type(self, mock_fetch):
    """Type info is looked up when not given."""
    mock_fetch.return_value = TypeInfo('semver64', _OID, _OID + 1)
    self.assertEqual(_OID, postgres.register_semver64(_context()).oid)


class FindMatchingTest(unittest.TestCase):
  """Two phase lookup tests."""

  def setUp(self):
    patcher = mock.patch.object(postgres.psycopg, 'RawCursor')
    self.mock_cursor_cls = patcher.start()
    self.addCleanup(patcher.stop)
    self.cursor = self.mock_cursor_cls.return_value.__enter__.return_value

  def test_find_matching(self):
    """Rows from the SQL filter are re-checked."""
    rows = [
        {
            'id': 1,
            'version': semver.Version.parse('1.2.0')
        },
        {
            'id': 2,
            'version': semver.Version.parse('1.2.5-rc.1')
        },
        {
            'id': 3,
            'version': semver.Version.parse('1.2.9+build')
        },
    ]
    self.cursor.fetchall.return_value = rows
    conn = mock.Mock()

    result = postgres.find_matching(conn, VersionReq.parse('~1.2'), 'crates',
                                    'version')
    self.assertEqual([1, 3], [row['id'] for row in result])

    self.mock_cursor_cls.assert_called_once_with(
        conn, row_factory=dict_row)
    self.cursor.execute.assert_called_once_with(
        'SELECT * FROM "crates" WHERE '
        '("crates"."version" >= $1 AND "crates"."version" < $2) '
        'ORDER BY "crates"."version" ASC',
        [semver.Version(1, 2, 0), semver.Version(1, 3, 0)],
        binary=True)

  def test_unsorted(self):
    """Test without ORDER BY."""
    self.cursor.fetchall.return_value = []
    result = postgres.find_matching(
        mock.Mock(), VersionReq.parse('=1.0.0'), 'crates', 'v', sort=False)
    self.assertEqual([], result)
    self.cursor.execute.assert_called_once_with(
        'SELECT * FROM "crates" WHERE "crates"."v" = $1',
        [semver.Version(1, 0, 0)],
        binary=True)

  def test_null_versions_skipped(self):
    """Rows without a version never match, even an unconstrained requirement."""
    self.cursor.fetchall.return_value = [
        {
            'id': 1,
            'v': semver.Version(1, 0, 0)
        },
        {
            'id': 2,
            'v': None
        },
    ]
    result = postgres.find_matching(mock.Mock(), VersionReq.parse('*'), 't', 'v')
    self.assertEqual([1], [row['id'] for row in result])
    self.cursor.execute.assert_called_once_with(
        'SELECT * FROM "t" WHERE TRUE ORDER BY "t"."v" ASC', [], binary=True)


if __name__ == '__main__':
  unittest.main()
