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
"""Package wide settings."""
import os
import typing

# Name of the PostgreSQL column type provided by the semver64 extension.
TYPE_NAME = 'semver64'

_TRUTHY = ('1', 'true', 'yes', 'on')

# When set, comparison operators (>, >=, <, <=) reference the quoted,
# table-qualified column like every other clause does. When unset they use the
# bare column name.
qualify_comparisons = os.getenv('SEMVER64_QUALIFY_COMPARISONS',
                                '').lower() in _TRUTHY

_google_cloud_project: typing.Optional[str] = None


def set_qualify_comparisons(enabled: bool):
  """Configures whether comparison clauses are table-qualified."""
  global qualify_comparisons
  qualify_comparisons = enabled


def get_google_cloud_project() -> str:
  """Determine the Google Cloud project used for logging.

  Returns an empty string when not running against a project.
  """
  global _google_cloud_project
  if _google_cloud_project is None:
    _google_cloud_project = os.getenv('GOOGLE_CLOUD_PROJECT', '')

  return _google_cloud_project


def set_google_cloud_project(project: typing.Optional[str]):
  """Overrides the Google Cloud project. `None` re-reads the environment."""
  global _google_cloud_project
  _google_cloud_project = project
