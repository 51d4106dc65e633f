from pydantic import BaseModel
from typing import Dict, Any

class MessageResponse(BaseModel):
    status_code: int
    message: str

class HealthResponse(BaseModel):
    status_code: int
    message: str
    data: Dict[str, Any]
