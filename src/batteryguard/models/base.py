from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from batteryguard.utils.time import TimeUtils

ValidatorCallable = Callable[[type[Any], Any], Any]


class TimeStampModel(BaseModel):
    """Base model with timestamp normalization utilities.

    Stored timestamps may come back naive or in a local offset; every
    model built on this class holds them as timezone-aware UTC datetimes
    so elapsed-time arithmetic never mixes naive and aware values.
    """

    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        """Convert a datetime to UTC with timezone information.

        Args:
            v: Naive or aware datetime

        Returns:
            datetime: Timezone-aware datetime object in UTC
        """
        return TimeUtils.ensure_utc(v)

    @staticmethod
    def timestamp_validator(field_name: str) -> ValidatorCallable:
        """Factory method to create timestamp field validators.

        Args:
            field_name: The field name to validate

        Returns:
            A validator method for the specified field
        """

        @field_validator(field_name, mode="after")
        def validate_timestamp(cls: type[Any], v: Any) -> Any:
            if isinstance(v, datetime):
                return TimeStampModel.normalize_timestamp(v)
            return v

        return validate_timestamp
