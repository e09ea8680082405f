from pydantic import Field

from ..enums import BulkAction
from .base import BaseSchema, CreatedAtSchema


class FailedCallback(CreatedAtSchema):
    id: int | str
    queue_name: str = ""
    request_data: str = ""
    response_code: int | None = None
    response_content: str = ""


class BulkActionRequest(BaseSchema):
    ids: list[int | str] = Field(..., min_length=1)
    action: BulkAction
