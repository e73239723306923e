from datetime import datetime
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel, Field
from ..utils.constants import ResponseMessages
from ..utils.date_helpers import DateHelpers

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Envelope for every successful data response"""

    success: bool = True
    message: str = ResponseMessages.SUCCESS
    timestamp: datetime = Field(default_factory=DateHelpers.utcnow)
    data: Optional[T] = None


class ResponseFactory:
    @staticmethod
    def success(
        data: T = None, message: str = ResponseMessages.SUCCESS
    ) -> SuccessResponse[T]:
        return SuccessResponse(data=data, message=message)

    @staticmethod
    def created(
        data: T = None, message: str = ResponseMessages.CREATED
    ) -> SuccessResponse[T]:
        # Status code comes from the route decorator
        return SuccessResponse(data=data, message=message)
