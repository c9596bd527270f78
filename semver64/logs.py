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
"""Logging setup."""

import logging
from typing import Any, Callable, Dict, Optional

from google.cloud import logging as google_logging

from . import config

_REPORTED_ERROR_TYPE = (
    'type.googleapis.com/google.devtools.clouderrorreporting.v1beta1.'
    'ReportedErrorEvent')


def _report_fields(record: logging.LogRecord,
                   service_context: Dict[str, str]) -> Dict[str, Any]:
  """Error Reporting fields for a record logged without a traceback.

  https://cloud.google.com/error-reporting/docs/formatting-error-messages
  """
  return {
      '@type': _REPORTED_ERROR_TYPE,
      'serviceContext': dict(service_context),
      'context': {
          'reportLocation': {
              'filePath': record.pathname,
              'lineNumber': record.lineno,
              'functionName': record.funcName,
          }
      },
  }


def error_reporting_filter(
    service_name: str,
    service_version: Optional[str] = None
) -> Callable[[logging.LogRecord], bool]:
  """Returns a logging filter that turns plain error records into reports.

  Records with a traceback are already picked up by Error Reporting and are
  left alone, as is anything below ERROR. Fields a caller passed through
  `extra={'json_fields': ...}` are kept.
  """
  service_context = {'service': service_name}
  if service_version:
    service_context['version'] = service_version

  def add_report_fields(record: logging.LogRecord) -> bool:
    fields = getattr(record, 'json_fields', None) or {}
    if record.levelno >= logging.ERROR and not record.exc_info:
      fields = {**_report_fields(record, service_context), **fields}
    record.json_fields = fields
    return True

  return add_report_fields


def setup_logging(service_name: str,
                  level: int = logging.INFO,
                  service_version: Optional[str] = None):
  """Set up logging for a service using the semver64 adapters.

  Logs go to Cloud Logging, with Error Reporting fields, when a Google Cloud
  project is configured. Otherwise they go to stderr.
  """
  project = config.get_google_cloud_project()
  if project:
    logging_client = google_logging.Client(project=project)
    logging_client.setup_logging(log_level=level)
    logging.getLogger().addFilter(
        error_reporting_filter(service_name, service_version))
  else:
    logging.basicConfig(
        format=f'%(asctime)s {service_name} %(levelname)s %(message)s')

  logging.getLogger().setLevel(level)
  # Suppress noisy logs in our dependencies.
  logging.getLogger('psycopg').setLevel(logging.WARNING)
