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
"""SemVer range requirements.

A requirement such as '>=1.2, <1.5' is a sequence of predicates, each anchoring
an operator to a (possibly partial) version:

    >>> req = VersionReq.parse('^1.2')
    >>> req.predicates[0]
    Predicate(op=<Op.COMPATIBLE: '^'>, major=1, minor=2, patch=None, pre=())
    >>> str(req)
    '^1.2'
"""

from __future__ import annotations

import enum
import re
from typing import Iterator, Optional, Tuple, Union

from attr import attrib, attrs


class Op(enum.Enum):
  """Comparison and range operators."""
  EXACT = '='
  GT = '>'
  GT_EQ = '>='
  LT = '<'
  LT_EQ = '<='
  TILDE = '~'
  COMPATIBLE = '^'


class WildcardLevel(enum.Enum):
  """Most significant component written as a wildcard."""
  PATCH = 'patch'
  MINOR = 'minor'
  MAJOR = 'major'


@attrs(frozen=True, slots=True)
class Wildcard:
  """Wildcard operator, e.g. '1.2.*' is Wildcard(WildcardLevel.PATCH)."""
  level: WildcardLevel = attrib()

  def __attrs_post_init__(self):
    if not isinstance(self.level, WildcardLevel):
      raise TypeError(f'Expected a WildcardLevel, got {self.level!r}')


Operator = Union[Op, Wildcard]


def _to_identifiers(value) -> Tuple[str, ...]:
  """Accepts 'alpha.1', ('alpha', 1) or None."""
  if not value:
    return ()
  if isinstance(value, str):
    return tuple(value.split('.'))

  return tuple(str(identifier) for identifier in value)


def _check_component(instance, attribute, value):
  """Validates an optional unsigned version component."""
  del instance  # Unused.
  if value is None and attribute.name != 'major':
    return

  if isinstance(value, bool) or not isinstance(value, int) or value < 0:
    raise ValueError(f'{attribute.name} must be an unsigned integer, '
                     f'got {value!r}')


@attrs(frozen=True, slots=True)
class Predicate:
  """A single operator/version rule within a requirement."""
  op: Operator = attrib()
  major: int = attrib(validator=_check_component)
  minor: Optional[int] = attrib(default=None, validator=_check_component)
  patch: Optional[int] = attrib(default=None, validator=_check_component)
  pre: Tuple[str, ...] = attrib(default=(), converter=_to_identifiers)

  def __attrs_post_init__(self):
    if not isinstance(self.op, (Op, Wildcard)):
      raise TypeError(f'Unknown operator: {self.op!r}')

    if self.patch is not None and self.minor is None:
      raise ValueError('patch given without minor')

    if self.op == Wildcard(WildcardLevel.MAJOR) and (self.minor is not None or
                                                     self.patch is not None):
      raise ValueError('bare wildcard cannot carry minor or patch')

  @property
  def prerelease(self) -> Optional[str]:
    """The pre-release tag as python-semver expects it."""
    return '.'.join(self.pre) or None

  def __str__(self):
    if isinstance(self.op, Wildcard):
      if self.op.level == WildcardLevel.MAJOR:
        return '*'
      if self.op.level == WildcardLevel.MINOR:
        return f'{self.major}.*'
      return f'{self.major}.{self.minor or 0}.*'

    result = f'{self.op.value}{self.major}'
    if self.minor is not None:
      result += f'.{self.minor}'
    if self.patch is not None:
      result += f'.{self.patch}'
    if self.pre:
      result += '-' + self.prerelease

    return result


_NUMBER = r'0|[1-9]\d*'
_COMPONENT = rf'{_NUMBER}|[*xX]'
_IDENTIFIERS = r'[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*'

_PREDICATE_PATTERN = re.compile(r'^(?P<op>>=|<=|~>|=|>|<|~|\^)?\s*v?'
                                rf'(?P<major>{_COMPONENT})'
                                rf'(?:\.(?P<minor>{_COMPONENT}))?'
                                rf'(?:\.(?P<patch>{_COMPONENT}))?'
                                rf'(?:-(?P<pre>{_IDENTIFIERS}))?'
                                rf'(?:\+(?P<build>{_IDENTIFIERS}))?$')

_OPS = {
    '=': Op.EXACT,
    '>': Op.GT,
    '>=': Op.GT_EQ,
    '<': Op.LT,
    '<=': Op.LT_EQ,
    '~': Op.TILDE,
    '~>': Op.TILDE,
    '^': Op.COMPATIBLE,
}

_WILDCARD_LEVELS = (WildcardLevel.MAJOR, WildcardLevel.MINOR,
                    WildcardLevel.PATCH)


def _is_wildcard(component: Optional[str]) -> bool:
  return component in ('*', 'x', 'X')


def parse_predicate(text: str) -> Predicate:
  """Parse a single predicate such as '>=1.2.3' or '1.*'."""
  match = _PREDICATE_PATTERN.match(text.strip())
  if not match:
    raise ValueError(f'Invalid version requirement: {text!r}')

  components = [match.group('major'), match.group('minor'), match.group('patch')]
  wildcard_index = None
  for i, component in enumerate(components):
    if _is_wildcard(component):
      wildcard_index = i
      break

  if wildcard_index is not None:
    # Anything after a wildcard must also be a wildcard.
    if any(c is not None and not _is_wildcard(c)
           for c in components[wildcard_index:]):
      raise ValueError(f'Invalid wildcard placement: {text!r}')
    if match.group('pre'):
      raise ValueError(f'Pre-release not allowed with a wildcard: {text!r}')
    components = components[:wildcard_index]

  numbers = [int(c) for c in components if c is not None]
  pre = match.group('pre')
  if pre:
    if len(numbers) != 3:
      raise ValueError(f'Pre-release requires a full version: {text!r}')
    for identifier in pre.split('.'):
      if identifier.isdigit() and len(identifier) > 1 and identifier[0] == '0':
        raise ValueError(f'Leading zero in pre-release identifier: {text!r}')

  op_text = match.group('op')
  if wildcard_index is not None and op_text in (None, '='):
    op = Wildcard(_WILDCARD_LEVELS[wildcard_index])
  elif wildcard_index == 0:
    if op_text in ('>', '<'):
      raise ValueError(f'Cannot compare against a bare wildcard: {text!r}')
    op = Wildcard(WildcardLevel.MAJOR)
  else:
    op = _OPS[op_text] if op_text else Op.COMPATIBLE

  major = numbers[0] if numbers else 0
  minor = numbers[1] if len(numbers) > 1 else None
  patch = numbers[2] if len(numbers) > 2 else None
  return Predicate(op, major, minor, patch, pre)


@attrs(frozen=True, slots=True)
class VersionReq:
  """An ordered sequence of predicates."""
  predicates: Tuple[Predicate, ...] = attrib(converter=tuple)

  @classmethod
  def parse(cls, text: str) -> VersionReq:
    """Parse a comma separated requirement string."""
    if not isinstance(text, str):
      raise TypeError(f'Expected a string, got {type(text).__name__}')

    parts = text.split(',')
    if not text.strip() or any(not part.strip() for part in parts):
      raise ValueError(f'Invalid version requirement: {text!r}')

    return cls([parse_predicate(part) for part in parts])

  def __iter__(self) -> Iterator[Predicate]:
    return iter(self.predicates)

  def __len__(self):
    return len(self.predicates)

  def __str__(self):
    return ', '.join(str(predicate) for predicate in self.predicates)
