from pydantic import BaseModel, Field
from typing import Any, Optional
import uuid


def _rid():
    return uuid.uuid4().hex


class SuccessResponse(BaseModel):
    """Success envelope: data, success flag, request_id, and a count for list payloads"""
    success: Optional[bool] = Field(default=True)
    request_id: str = Field(default_factory=_rid)
    count: Optional[int] = None
    data: Optional[Any] = None

    @classmethod
    def of_list(cls, items):
        return cls(data=items, count=len(items))
