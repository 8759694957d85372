"""Base model classes for the Interview Data client."""

from collections.abc import Mapping
from typing import Any, Dict, TypeVar

from pydantic import BaseModel as PydanticBaseModel, ValidationError

from ..utils.exceptions import MalformedRecordError

RecordT = TypeVar("RecordT", bound="Record")


class BaseModel(PydanticBaseModel):
    """Base model with common functionality."""

    class Config:
        """Pydantic configuration."""
        use_enum_values = False
        validate_assignment = True
        extra = "ignore"


class Record(BaseModel):
    """A typed row read from or confirmed by the backend.

    Rows enter the application only through :meth:`from_row`, so a missing or
    mistyped column surfaces as :class:`MalformedRecordError` at the backend
    boundary instead of as a half-populated object further up.
    """

    @classmethod
    def from_row(cls: type[RecordT], row: Any) -> RecordT:
        """Validate a backend row and build the record.

        Args:
            row: Mapping of column name to value as returned by the backend.

        Returns:
            The typed record.

        Raises:
            MalformedRecordError: If the row is not a mapping or a required
                field is missing or has the wrong type.
        """
        record_type = cls.__name__
        if not isinstance(row, Mapping):
            raise MalformedRecordError(
                f"{record_type} row must be a mapping, got {type(row).__name__}",
                record_type=record_type,
            )

        try:
            return cls.model_validate(dict(row))
        except ValidationError as e:
            errors = e.errors(include_url=False)
            first = errors[0]
            field_name = ".".join(str(part) for part in first["loc"]) or None
            raise MalformedRecordError(
                f"Invalid {record_type} row: field '{field_name}' {first['msg'].lower()}",
                record_type=record_type,
                field_name=field_name,
                details={"errors": [
                    {"loc": err["loc"], "type": err["type"], "msg": err["msg"]} for err in errors
                ]},
            ) from e

    def to_row(self) -> Dict[str, Any]:
        """Return the record as an ordered column-name to value mapping."""
        return self.model_dump(mode="json")
