from .auth import TokenManager
from .client import ApiClient, create_api_call, precondition_failure
from .errors import TIMEOUT_MESSAGE, extract_error_message
from .normalize import decimal_to_string, normalize_entity, normalize_list, parse_decimal_fields
from .result import ApiFailure, ApiResult, ApiSuccess

__all__ = [
    "TokenManager",
    "ApiClient",
    "create_api_call",
    "precondition_failure",
    "TIMEOUT_MESSAGE",
    "extract_error_message",
    "decimal_to_string",
    "normalize_entity",
    "normalize_list",
    "parse_decimal_fields",
    "ApiFailure",
    "ApiResult",
    "ApiSuccess",
]
