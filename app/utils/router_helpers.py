from fastapi import HTTPException, status
from typing import Callable, Any
from functools import wraps
import logging

from .constants import ResponseMessages
from .result import ServiceResult, ErrorCode

# Import all service exceptions
from ..services.task_service import (
    TaskServiceError,
    TaskNotFoundError,
    UserNotFoundError,
    PermissionDeniedError,
    BusinessRuleViolationError,
)
from ..services.template_service import (
    TemplateServiceError,
    TemplateNotFoundError,
    TemplatePermissionError,
)
from ..services.suggestion_service import (
    SuggestionServiceError,
    SuggestionNotFoundError,
    SuggestionPermissionError,
)

logger = logging.getLogger(__name__)

_RESULT_STATUS = {
    ErrorCode.INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.TRANSACTION_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def handle_service_errors(func: Callable) -> Callable:
    """Decorator to standardize service error handling in routers"""

    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        # Permission/Access Errors -> 403 Forbidden
        except (
            PermissionDeniedError,
            TemplatePermissionError,
            SuggestionPermissionError,
        ) as e:
            logger.warning(f"Permission denied: {str(e)}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

        except (
            TaskNotFoundError,
            UserNotFoundError,
            TemplateNotFoundError,
            SuggestionNotFoundError,
        ) as e:
            logger.warning(f"Resource not found: {str(e)}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

        # Business Rule Violations -> 400 Bad Request
        except BusinessRuleViolationError as e:
            logger.warning(f"Business rule violation: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # General Service Errors -> 400 Bad Request
        except (
            TaskServiceError,
            TemplateServiceError,
            SuggestionServiceError,
        ) as e:
            logger.warning(f"Service error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # Validation Errors -> 400 Bad Request
        except ValueError as e:
            logger.warning(f"Validation error: {str(e)}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        # Unexpected errors -> 500 Internal Server Error
        except Exception as e:
            logger.error(
                f"Unexpected error in {func.__name__}: {str(e)}", exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An unexpected error occurred",
            )

    return wrapper


def unwrap_result(result: ServiceResult) -> Any:
    """Return the data of a successful result, raise the matching HTTP error otherwise"""
    if result.success:
        return result.data

    status_code = _RESULT_STATUS.get(
        result.error_code, status.HTTP_400_BAD_REQUEST
    )
    if status_code >= 500:
        logger.error(f"Service failure: {result.error} ({result.details})")
    detail = {"error": result.error}
    if result.details is not None:
        detail["details"] = result.details
    raise HTTPException(status_code=status_code, detail=detail)


class RouterResponse:
    """Plain-dict responses for routes without a response model"""

    @staticmethod
    def success(data: Any = None, message: str = ResponseMessages.SUCCESS) -> dict:
        response = {"success": True, "message": message}
        if data is not None:
            response["data"] = data
        return response

    @staticmethod
    def deleted(message: str = ResponseMessages.DELETED) -> dict:
        return {"success": True, "message": message}
