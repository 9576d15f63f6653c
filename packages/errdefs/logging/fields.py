"""Canonical logging field names for error translation events.

These constants define a stable key set for structured logs and context
propagation, so every transport adapter reports errors with the same keys.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EXCEPTION = "exception"
EVENT = "event"

# Error classification fields.
ERROR_KIND = "error_kind"
HTTP_STATUS = "http_status"
GRPC_CODE = "grpc_code"

# Status detail protocol fields.
TYPE_URL = "type_url"
DETAIL_INDEX = "detail_index"
DETAIL_SKIPPED_EVENT = "status_detail_skipped"
DETAIL_UNENCODABLE_EVENT = "status_detail_unencodable"
STATUS_ABORT_EVENT = "status_abort"
HTTP_ERROR_RESPONSE_EVENT = "http_error_response"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
