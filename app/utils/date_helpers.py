from datetime import datetime, timezone
from typing import Optional, Tuple
from dateutil import parser as date_parser


class DateHelpers:
    @staticmethod
    def utcnow() -> datetime:
        """Naive UTC now; all stored timestamps are naive UTC"""
        return datetime.now(timezone.utc).replace(tzinfo=None)

    @staticmethod
    def to_naive_utc(value: datetime) -> datetime:
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @staticmethod
    def combine_date_time(
        due_date: Optional[str], due_time: Optional[str]
    ) -> Optional[datetime]:
        """Combine "YYYY-MM-DD" and "HH:mm" strings; None when there is no date.

        Raises ValueError when the strings cannot be parsed.
        """
        if not due_date:
            return None
        text = f"{due_date}T{due_time or '00:00'}"
        try:
            return DateHelpers.to_naive_utc(date_parser.isoparse(text))
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid due date/time: {text}") from e

    @staticmethod
    def get_month_boundaries(year: int, month: int) -> Tuple[datetime, datetime]:
        """Get start and end datetime for a given month"""
        start_date = datetime(year, month, 1)

        if month == 12:
            end_date = datetime(year + 1, 1, 1)
        else:
            end_date = datetime(year, month + 1, 1)

        return start_date, end_date

    @staticmethod
    def today_key() -> str:
        return DateHelpers.utcnow().date().isoformat()
