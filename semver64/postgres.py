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
"""psycopg adapters for the semver64 PostgreSQL type."""

import logging
from typing import Any, Dict, List, Optional

import psycopg
from psycopg.abc import AdaptContext, Buffer
from psycopg.adapt import Dumper, Loader
from psycopg.pq import Format
from psycopg.rows import dict_row
from psycopg.types import TypeInfo
import semver

from . import config
from . import range_query
from . import version_codec
from .requirement import VersionReq


class UnsupportedTypeError(Exception):
  """The database type is not a semver64 column type."""


def accepts(type_name: str) -> bool:
  """Whether values of the named database type can use the codec."""
  return type_name == config.TYPE_NAME


class Semver64BinaryDumper(Dumper):
  """Dumps `semver.Version` in the semver64 binary format."""

  format = Format.BINARY

  def dump(self, obj: semver.Version) -> Buffer:
    return version_codec.encode(obj)


class Semver64Dumper(Dumper):
  """Dumps `semver.Version` as text."""

  def dump(self, obj: semver.Version) -> Buffer:
    return str(obj).encode('utf-8')


class Semver64BinaryLoader(Loader):
  """Loads semver64 binary values."""

  format = Format.BINARY

  def load(self, data: Buffer) -> semver.Version:
    return version_codec.decode(data)


class Semver64Loader(Loader):
  """Loads semver64 text values."""

  def load(self, data: Buffer) -> semver.Version:
    return semver.Version.parse(bytes(data).decode('utf-8'))


def register_semver64(context: AdaptContext,
                      info: Optional[TypeInfo] = None) -> TypeInfo:
  """Register the semver64 adapters on a connection or cursor.

  Args:
    context: Where to register the adapters. Must be a connection when `info`
      is not given, since the type has to be looked up.
    info: The type's catalog entry, if already fetched.

  Returns:
    The registered type info.
  """
  if info is None:
    info = TypeInfo.fetch(context, config.TYPE_NAME)
    if info is None:
      raise UnsupportedTypeError(
          f'Type {config.TYPE_NAME!r} not found, is the extension installed?')

  if not accepts(info.name):
    raise UnsupportedTypeError(f'Cannot use the semver64 codec for type '
                               f'{info.name!r}')

  adapters = context.adapters
  attrs = {'oid': info.oid}
  # The binary dumper is registered last so that it is preferred.
  adapters.register_dumper(
      semver.Version, type('Semver64Dumper', (Semver64Dumper,), attrs))
  adapters.register_dumper(
      semver.Version,
      type('Semver64BinaryDumper', (Semver64BinaryDumper,), attrs))
  adapters.register_loader(info.oid, Semver64Loader)
  adapters.register_loader(info.oid, Semver64BinaryLoader)

  logging.info('Registered semver64 adapters for oid %d', info.oid)
  return info


def find_matching(conn: psycopg.Connection,
                  req: VersionReq,
                  table: str,
                  field: str,
                  sort: bool = True) -> List[Dict[str, Any]]:
  """Fetch rows whose version column satisfies a requirement.

  The SQL filter selects a superset of the matching rows, which is then
  narrowed down with an exact check. The semver64 adapters must have been
  registered on the connection.
  """
  query = range_query.gen_query(req, field, table, sort=sort)
  sql = f'SELECT * FROM "{table}" WHERE {query.sql}'

  with psycopg.RawCursor(conn, row_factory=dict_row) as cursor:
    cursor.execute(sql, query.bounds, binary=True)
    candidates = cursor.fetchall()

  # NULL columns never satisfy a requirement, even `*`.
  rows = [
      row for row in candidates
      if row[field] is not None and range_query.matches(req, row[field])
  ]
  logging.info('%s: %d of %d candidate rows satisfy %s', table, len(rows),
               len(candidates), req)
  return rows
