"""
Response envelope: {message, data, proofs}.

Mirrors what BaseAgent builds, so endpoints can declare it as response_model.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict


class Proofs(BaseModel):
    """Where a response came from and how it was produced."""
    trace_id: Optional[str] = Field(None, description="Request trace ID")
    status: Optional[str] = Field(None, description="success or failed")
    user_role: Optional[str] = Field(None, description="Caller role (ADMIN/PATIENT)")
    algorithm: Optional[str] = Field(None, description="Ranking algorithm identifier")
    sources: Optional[List[Any]] = Field(None, description="Data service tables read")
    validation: Optional[str] = Field(None, description="Set to failed on invalid input")

    model_config = ConfigDict(extra="allow")


class AgentResponse(BaseModel):
    message: str = Field(..., description="User-facing message")
    data: Optional[Dict[str, Any]] = Field(None, description="Endpoint-specific payload")
    proofs: Optional[Proofs] = Field(None, description="Tracing and provenance")

    model_config = ConfigDict(extra="allow")
