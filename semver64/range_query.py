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
"""Compiles version requirements into SQL range filters.

Each predicate becomes a clause over a semver64 column plus the boundary
versions to bind to its placeholders. Clauses are OR'ed together, so the filter
is a superset of what the requirement accepts: SQL compares the numeric triple
but knows nothing about pre-release matching rules. Rows returned by the query
must be re-checked with `matches` before being treated as satisfying the
requirement.
"""

import collections
import logging
from typing import Iterable, List, Optional

import semver

from . import config
from .requirement import Op, Predicate, Wildcard, WildcardLevel

RangeQuery = collections.namedtuple('RangeQuery', 'sql bounds next_index')

_COMPARISONS = {
    Op.GT: '>',
    Op.GT_EQ: '>=',
    Op.LT: '<',
    Op.LT_EQ: '<=',
}

# Operators covering a half-open [lower, upper) range.
_RANGES = (Op.TILDE, Op.COMPATIBLE, Wildcard(WildcardLevel.PATCH),
           Wildcard(WildcardLevel.MINOR))

_UNCONSTRAINED = Wildcard(WildcardLevel.MAJOR)


def _version(major, minor=0, patch=0, prerelease=None) -> semver.Version:
  return semver.Version(major, minor, patch, prerelease or None)


def _quoted(table: str, field: str) -> str:
  return f'"{table}"."{field}"'


def lower_bound(predicate: Predicate) -> Optional[semver.Version]:
  """Inclusive lower edge of a predicate.

  For comparisons this is the single bound. `None` when the predicate is
  unconstrained.
  """
  op = predicate.op
  minor = predicate.minor or 0
  patch = predicate.patch or 0
  if op == Op.EXACT or op in _COMPARISONS or op in (Op.TILDE, Op.COMPATIBLE):
    return _version(predicate.major, minor, patch, predicate.prerelease)

  if op == Wildcard(WildcardLevel.PATCH):
    return _version(predicate.major, minor)

  if op == Wildcard(WildcardLevel.MINOR):
    return _version(predicate.major)

  if op == _UNCONSTRAINED:
    return None

  raise ValueError(f'Unsupported operator: {op!r}')


def upper_bound(predicate: Predicate) -> Optional[semver.Version]:
  """Exclusive upper edge of a range predicate.

  `None` for comparisons and unconstrained predicates.
  """
  op = predicate.op
  major, minor, patch = predicate.major, predicate.minor, predicate.patch
  if op == Op.EXACT or op in _COMPARISONS or op == _UNCONSTRAINED:
    return None

  if op == Op.TILDE:
    if minor is not None:
      return _version(major, minor + 1)
    return _version(major + 1)

  if op == Op.COMPATIBLE:
    # The left-most non-zero component may not change.
    if major == 0 and not minor and patch is not None:
      return _version(0, 0, patch + 1)
    if major == 0 and minor is not None:
      return _version(0, minor + 1)
    return _version(major + 1)

  if op == Wildcard(WildcardLevel.PATCH):
    return _version(major, (minor or 0) + 1)

  if op == Wildcard(WildcardLevel.MINOR):
    return _version(major + 1)

  raise ValueError(f'Unsupported operator: {op!r}')


def _clause(predicate: Predicate, field: str, table: str, index: int,
            qualify_comparisons: bool):
  """Returns the SQL clause and the number of placeholders it uses."""
  op = predicate.op
  column = _quoted(table, field)
  if op == Op.EXACT:
    return f'{column} = ${index + 1}', 1

  if op in _COMPARISONS:
    target = column if qualify_comparisons else field
    return f'{target} {_COMPARISONS[op]} ${index + 1}', 1

  if op in _RANGES:
    return (f'({column} >= ${index + 1} AND {column} < ${index + 2})', 2)

  if op == _UNCONSTRAINED:
    # Matches everything, no parameters to bind.
    return 'TRUE', 0

  raise ValueError(f'Unsupported operator: {op!r}')


def gen_query(predicates: Iterable[Predicate],
              field: str,
              table: str,
              start_index: int = 0,
              sort: bool = False,
              qualify_comparisons: Optional[bool] = None) -> RangeQuery:
  """Compile predicates into a SQL filter.

  Args:
    predicates: Predicates to compile, e.g. a `VersionReq`.
    field: semver64 column name.
    table: Table the column belongs to.
    start_index: Number of placeholders already used by the enclosing query.
      The first placeholder written is `$<start_index + 1>`.
    sort: Whether to append an ascending ORDER BY on the column.
    qualify_comparisons: Use the table-qualified column for >, >=, < and <=
      clauses. Defaults to `config.qualify_comparisons`.

  Returns:
    A `RangeQuery` of the SQL text, the versions to bind in placeholder order,
    and the index to pass as `start_index` when chaining further clauses.
  """
  if qualify_comparisons is None:
    qualify_comparisons = config.qualify_comparisons

  clauses: List[str] = []
  bounds: List[semver.Version] = []
  index = start_index
  for predicate in predicates:
    clause, used = _clause(predicate, field, table, index, qualify_comparisons)
    clauses.append(clause)
    index += used

    lower = lower_bound(predicate)
    upper = upper_bound(predicate)
    bounds.extend(bound for bound in (lower, upper) if bound is not None)

  sql = ' OR '.join(clauses)
  if sort:
    sql += f' ORDER BY {_quoted(table, field)} ASC'

  logging.debug('Compiled %d predicates into %r', len(clauses), sql)
  return RangeQuery(sql, bounds, index)


def predicate_matches(predicate: Predicate, version: semver.Version) -> bool:
  """Whether a version satisfies a single predicate.

  The pre-release opt-in rule is left to `matches`. Missing components count
  as zero against the bound `gen_query` binds, so '<=1.2' accepts 1.2.0 but
  not 1.2.1. The exception is '>', which excludes the whole partial range:
  '>1.2' starts at 1.3.0 and '>1' at 2.0.0.
  """
  op = predicate.op
  if op == _UNCONSTRAINED:
    return True

  if op in _RANGES:
    return (lower_bound(predicate).compare(version) <= 0 and
            version.compare(upper_bound(predicate)) < 0)

  if op == Op.GT and predicate.patch is None:
    if predicate.minor is None:
      return version.major > predicate.major
    return (version.major, version.minor) > (predicate.major, predicate.minor)

  result = version.compare(lower_bound(predicate))
  if op == Op.EXACT:
    return result == 0
  if op == Op.GT:
    return result > 0
  if op == Op.GT_EQ:
    return result >= 0
  if op == Op.LT:
    return result < 0
  if op == Op.LT_EQ:
    return result <= 0

  raise ValueError(f'Unsupported operator: {op!r}')


def _allows_prerelease(predicates: List[Predicate],
                       version: semver.Version) -> bool:
  """Whether a predicate opts into pre-releases of the version's release.

  Pre-release versions only match when some predicate carries a pre-release
  tag on the same major.minor.patch.
  """
  return any(predicate.pre and
             (predicate.major, predicate.minor, predicate.patch) ==
             (version.major, version.minor, version.patch)
             for predicate in predicates)


def matches(predicates: Iterable[Predicate], version: semver.Version) -> bool:
  """Exact check of a version against all predicates of a requirement.

  This is the second phase of a `gen_query` lookup: apply it to every row the
  SQL filter returns.
  """
  predicates = list(predicates)
  if not all(predicate_matches(p, version) for p in predicates):
    return False

  if version.prerelease:
    return _allows_prerelease(predicates, version)

  return True
