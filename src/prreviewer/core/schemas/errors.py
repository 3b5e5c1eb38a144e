"""Error envelope returned by every failing endpoint."""
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str = Field(..., description="Stable machine-readable code, e.g. NOT_FOUND")
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
