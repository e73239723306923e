from .date_helpers import DateHelpers
from .constants import AppConstants, ResponseMessages, TemplateCategory
from .result import ServiceResult, ErrorCode

__all__ = [
    "DateHelpers",
    "AppConstants",
    "ResponseMessages",
    "TemplateCategory",
    "ServiceResult",
    "ErrorCode",
]
