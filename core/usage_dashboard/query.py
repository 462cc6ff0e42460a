"""Dashboard query parameters and their validation."""

from datetime import date, datetime, timezone
from typing import Any, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator, model_validator,
)
from pydantic_core import PydanticCustomError

from .errors import QueryValidationError

TimeRange = Literal["1d", "7d", "30d", "all"]
DEFAULT_RANGE = "7d"

_DATETIME = TypeAdapter(datetime)


class DashboardQuery(BaseModel):
    """
    Either a preset range or an explicit from/to pair.

    When from/to are given they take precedence over ``range``.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    range: TimeRange = DEFAULT_RANGE
    from_: Optional[datetime] = Field(default=None, alias="from")
    to: Optional[datetime] = None

    @field_validator("range", mode="before")
    @classmethod
    def _default_range(cls, value: Any) -> Any:
        return DEFAULT_RANGE if value in (None, "") else value

    @field_validator("from_", "to", mode="before")
    @classmethod
    def _parse_instant(cls, value: Any) -> Optional[datetime]:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, str):
            try:
                parsed = _DATETIME.validate_python(value.strip())
            except ValidationError:
                raise PydanticCustomError(
                    "invalid_date", "Invalid ISO-8601 date: {value}", {"value": value}
                )
        else:
            raise PydanticCustomError("invalid_date", "Expected an ISO-8601 date string")
        # Naive values are UTC
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    @model_validator(mode="after")
    def _check_bounds(self) -> "DashboardQuery":
        if (self.from_ is None) != (self.to is None):
            raise PydanticCustomError(
                "from_to_pair", "Both 'from' and 'to' must be provided together"
            )
        if self.from_ is not None and self.from_ > self.to:
            raise PydanticCustomError(
                "from_after_to", "'from' must be before or equal to 'to'"
            )
        return self

    @property
    def is_custom(self) -> bool:
        return self.from_ is not None and self.to is not None

    def to_params(self) -> dict[str, str]:
        """Query-string form, as accepted by the HTTP API."""
        if self.is_custom:
            return {"from": self.from_.isoformat(), "to": self.to.isoformat()}
        return {"range": self.range}


def parse_query(
    params: Union[DashboardQuery, Mapping[str, Any], None] = None,
) -> DashboardQuery:
    """
    Validate raw query parameters.

    Raises:
        QueryValidationError: with one ``{path, message}`` entry per problem.
    """
    if isinstance(params, DashboardQuery):
        return params
    try:
        return DashboardQuery.model_validate(dict(params or {}))
    except ValidationError as e:
        details = [
            # Cross-field errors have no location of their own; they are about "from".
            {"path": list(err["loc"]) or ["from"], "message": err["msg"]}
            for err in e.errors()
        ]
        raise QueryValidationError(details) from e
