from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional


class ChatRequest(BaseModel):
    """Inbound chat message; ``userId`` is accepted but not used by the core."""
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class ChatResponse(BaseModel):
    intent: str
    response: str


class ErrorResponse(BaseModel):
    error: str
    intent: Optional[str] = None
    response: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    directory: str


class DoctorOut(BaseModel):
    id: Optional[str] = None
    name: str
    specialty: str
    days: List[str]
    start_hour: int
    end_hour: int
    slot_duration: int = 30


class AdminSummaryRequest(BaseModel):
    appointments: List[Dict[str, Any]] = []
    conversations: List[Dict[str, Any]] = []


class AdminTotals(BaseModel):
    appointments: int
    pending: int
    completed: int
    conversations: int


class AdminSummaryResponse(BaseModel):
    totals: AdminTotals
    by_status: Dict[str, int]
    by_specialty: Dict[str, int]
    appointments: List[Dict[str, Any]]
    conversations: List[Dict[str, Any]]
