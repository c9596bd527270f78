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
"""Binary codec for the semver64 column type.

Layout:

  +----------------+----------------+----------------+-------------------+
  | major (u64 BE) | minor (u64 BE) | patch (u64 BE) | UTF-8 suffix      |
  +----------------+----------------+----------------+-------------------+

The suffix is empty for release versions. Otherwise it holds the pre-release
identifiers without their leading '-', followed by '+' and the build metadata
when there is any. The '-' is reinserted on decode whenever the suffix does not
start with '+'.
"""

import logging
import struct
from typing import Union

import semver

_PREFIX = struct.Struct('>QQQ')
PREFIX_SIZE = _PREFIX.size  # 24 bytes.

_U64_MAX = 2**64 - 1

Buffer = Union[bytes, bytearray, memoryview]


class CodecError(ValueError):
  """Base class for semver64 decoding errors."""


class InsufficientDataError(CodecError):
  """Fewer than 24 bytes were available for the numeric prefix."""


class InvalidEncodingError(CodecError):
  """The suffix is not valid UTF-8."""


class InvalidFormatError(CodecError):
  """The reconstructed version string is not valid SemVer."""


def _suffix(version: semver.Version) -> str:
  """Build the stored suffix, without the pre-release hyphen."""
  suffix = version.prerelease or ''
  if version.build:
    suffix += '+' + version.build

  return suffix


def encode(version: semver.Version) -> bytes:
  """Encode a version to its semver64 binary representation."""
  for name, value in (('major', version.major), ('minor', version.minor),
                      ('patch', version.patch)):
    if not 0 <= value <= _U64_MAX:
      raise ValueError(f'{name} component out of range: {value}')

  prefix = _PREFIX.pack(version.major, version.minor, version.patch)
  return prefix + _suffix(version).encode('utf-8')


def decode(data: Buffer) -> semver.Version:
  """Decode a semver64 binary value."""
  data = bytes(data)
  if len(data) < PREFIX_SIZE:
    raise InsufficientDataError(
        f'Need {PREFIX_SIZE} bytes for the version prefix, got {len(data)}')

  major, minor, patch = _PREFIX.unpack_from(data)
  try:
    suffix = data[PREFIX_SIZE:].decode('utf-8')
  except UnicodeDecodeError as e:
    raise InvalidEncodingError(f'Invalid UTF-8 in version suffix: {e}') from e

  if not suffix:
    return semver.Version(major, minor, patch)

  if suffix.startswith('+'):
    text = f'{major}.{minor}.{patch}{suffix}'
  else:
    text = f'{major}.{minor}.{patch}-{suffix}'

  try:
    return semver.Version.parse(text)
  except ValueError as e:
    logging.warning('Stored semver64 value is not valid SemVer: %r', text)
    raise InvalidFormatError(str(e)) from e
