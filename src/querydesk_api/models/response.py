from pydantic import BaseModel
from typing import Any, Dict, Optional


class SuccessResponse(BaseModel):
    success: bool = True
    data: Optional[Dict[str, Any]] = None
    executionTime: Optional[str] = None
    query: Optional[str] = None
    queryType: Optional[str] = None
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str
    query: Optional[str] = None
