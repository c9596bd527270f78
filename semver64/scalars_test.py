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
"""Scalar marshalling tests."""

import unittest

import semver

from semver64 import scalars
from semver64.requirement import Op, Predicate, VersionReq


class ScalarsTest(unittest.TestCase):
  """Scalar tests."""

  def test_names(self):
    self.assertEqual('Version', scalars.VERSION.name)
    self.assertEqual('VersionReq', scalars.VERSION_REQ.name)

  def test_version(self):
    """Test parsing and serializing versions."""
    version = scalars.VERSION.parse('1.2.3-foo+bar')
    self.assertEqual(semver.Version.parse('1.2.3-foo+bar'), version)
    self.assertEqual('1.2.3-foo+bar', scalars.VERSION.serialize(version))

  def test_version_req(self):
    """Test parsing and serializing requirements."""
    req = scalars.VERSION_REQ.parse('>=1.2, <2')
    self.assertEqual(
        VersionReq([Predicate(Op.GT_EQ, 1, 2), Predicate(Op.LT, 2)]), req)
    self.assertEqual('>=1.2, <2', scalars.VERSION_REQ.serialize(req))

  def test_parse_error(self):
    """Parser errors keep the parser's message."""
    with self.assertRaisesRegex(scalars.ScalarParseError, 'not valid SemVer'):
      scalars.VERSION.parse('1.2')
    with self.assertRaisesRegex(scalars.ScalarParseError,
                                'Invalid version requirement'):
      scalars.VERSION_REQ.parse('latest')

  def test_type_error(self):
    """Non string input is a type mismatch."""
    with self.assertRaises(scalars.ScalarTypeError) as cm:
      scalars.VERSION.parse(123)
    self.assertEqual(123, cm.exception.value)
    self.assertIn('"Version"', str(cm.exception))

    with self.assertRaises(scalars.ScalarTypeError):
      scalars.VERSION_REQ.parse(None)


if __name__ == '__main__':
  unittest.main()
