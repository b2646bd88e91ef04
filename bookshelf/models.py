# bookshelf/models.py
import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError


INVALID_CREATE_BODY = (
    "Invalid body. Expected { title: string, author: string, available: boolean }."
)
NOTHING_TO_UPDATE = "Nothing to update. Provide title, author, or available."
INVALID_ID = "Invalid id."

_ID_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


class InvalidBookRequest(ValueError):
    """A request rejected before touching the store (HTTP 400)."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Book(BaseModel):
    id: int
    title: str
    author: str
    available: bool


class CreateBookRequest(BaseModel):
    # JSON types must match exactly: no "true" -> True, no 1 -> "1"
    model_config = ConfigDict(strict=True, extra="ignore")

    title: str
    author: str
    available: bool


class UpdateBookRequest(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")

    title: Optional[str] = None
    author: Optional[str] = None
    available: Optional[bool] = None


_UPDATE_FIELD_TYPES = {"title": str, "author": str, "available": bool}


def parse_create_request(payload: Any) -> CreateBookRequest:
    if not isinstance(payload, dict):
        raise InvalidBookRequest(INVALID_CREATE_BODY)
    try:
        return CreateBookRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidBookRequest(INVALID_CREATE_BODY) from exc


def parse_update_request(payload: Any) -> UpdateBookRequest:
    """Keep the correctly typed fields of ``payload``, ignoring the rest.

    Raises ``InvalidBookRequest`` when no usable field remains. Fields are
    left unset (not ``None``) when absent so callers can rely on
    ``model_dump(exclude_unset=True)``.
    """
    fields = {}
    if isinstance(payload, dict):
        for name, expected in _UPDATE_FIELD_TYPES.items():
            if isinstance(payload.get(name), expected):
                fields[name] = payload[name]
    if not fields:
        raise InvalidBookRequest(NOTHING_TO_UPDATE)
    return UpdateBookRequest.model_validate(fields)


def parse_book_id(raw: str) -> int:
    """Read the leading decimal integer of a path segment.

    Only ASCII digits count and anything after the first run of them is
    ignored: ``"12abc"`` gives 12, ``"1.5"`` gives 1 and ``"0_1"`` gives 0.
    A segment that does not start with a digit (after optional whitespace
    and sign) is rejected.
    """
    m = _ID_PREFIX.match(raw)
    if m is None:
        raise InvalidBookRequest(INVALID_ID)
    return int(m.group(1))
