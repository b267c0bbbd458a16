"""
SOAP response envelope model.
"""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T", bound=BaseModel)


class ResponseEnvelope(BaseModel, Generic[T]):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    header: Optional[str] = Field(default=None, alias="Header")
    body: Optional[T] = Field(default=None, alias="Body")
