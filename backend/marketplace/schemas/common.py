"""
Base schema and the error envelope shared by every endpoint.

The wire format is camelCase; Python code uses snake_case attribute names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(BaseModel):
    param: str
    msg: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: Optional[list[ErrorDetail]] = None


class MessageResponse(ApiModel):
    success: bool = True
    message: str
