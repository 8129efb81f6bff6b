from __future__ import annotations

from typing import Annotated, Any, Generic, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, HttpUrl, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .utils import OBJECT_ID_PATTERN

_http_url = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    # validate only; the link is kept exactly as submitted
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        raise ValueError("invalid http(s) URL") from None
    return value


ObjectId = Annotated[str, StringConstraints(pattern=OBJECT_ID_PATTERN)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Url = Annotated[str, AfterValidator(_check_url)]

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for request bodies: camelCase on the wire, unknown fields rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )


class OutModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ErrorEnvelope(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
    requestId: Optional[str] = None


class Health(BaseModel):
    status: str = "ok"


class Version(BaseModel):
    version: str = "1.0.0"


class Page(OutModel, Generic[T]):
    results: list[T]
    page: int
    limit: int
    total_pages: int
    total_results: int
