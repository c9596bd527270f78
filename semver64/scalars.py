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
"""Scalar marshalling for API layers exposing versions as strings."""

from typing import Any, Callable

import semver

from .requirement import VersionReq


class ScalarError(Exception):
  """Base class for scalar input errors."""


class ScalarParseError(ScalarError):
  """Input was a string but could not be parsed."""


class ScalarTypeError(ScalarError):
  """Input was not a string."""

  def __init__(self, scalar_name: str, value: Any):
    super().__init__(f'Expected type "{scalar_name}", found {value!r}')
    self.value = value


class Scalar:
  """A named scalar type backed by a parser and its string form."""

  def __init__(self, name: str, description: str,
               parser: Callable[[str], Any]):
    self.name = name
    self.description = description
    self._parser = parser

  def parse(self, value: Any) -> Any:
    """Parse an input value."""
    if not isinstance(value, str):
      raise ScalarTypeError(self.name, value)

    try:
      return self._parser(value)
    except ValueError as e:
      raise ScalarParseError(str(e)) from e

  def serialize(self, value: Any) -> str:
    """Output the canonical string form."""
    return str(value)


VERSION = Scalar('Version', 'Semantic Versioning https://semver.org',
                 semver.Version.parse)

VERSION_REQ = Scalar('VersionReq',
                     'Semantic Version requirement https://semver.org',
                     VersionReq.parse)
