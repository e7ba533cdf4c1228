from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class ExecuteRequest(BaseModel):
    # Left untyped so non-string input yields the engine's InvalidInput envelope.
    query: Any = None
    queryType: Optional[str] = None

    model_config = ConfigDict(extra="ignore")
