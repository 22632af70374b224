"""
Pydantic schemas for API request/response validation.

Request and response bodies use camelCase keys, matching the JSON the
pipeline's to_dict() produces.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response for API errors."""
    detail: str
    field: Optional[str] = None
    code: Optional[str] = None


class ProductivityPatternsSchema(BaseModel):
    """Optional self-reported working patterns."""
    peak_energy_times: List[str] = Field(default_factory=list, alias="peakEnergyTimes")
    hyperfocus_triggers: List[str] = Field(default_factory=list, alias="hyperfocusTriggers")
    context_switch_tolerance: Optional[str] = Field(default=None, alias="contextSwitchTolerance")
    preferred_frameworks: List[str] = Field(default_factory=list, alias="preferredFrameworks")

    class Config:
        populate_by_name = True


class BrainDumpRequest(BaseModel):
    """
    Request body for POST /api/brain-dump.

    energyState is matched case-insensitively ("medium" and "Medium" both work).
    There is no tier field: the tier is resolved server-side from userId.
    Blank input is rejected by the pipeline with a 400, like whitespace-only input.
    """
    input: str = Field(..., max_length=20000)
    energy_state: str = Field(..., alias="energyState")
    user_id: str = Field(default="demo-user", alias="userId")
    project_id: Optional[str] = Field(default=None, alias="projectId")
    cognitive_type: Optional[str] = Field(default=None, alias="cognitiveType")
    productivity_patterns: Optional[ProductivityPatternsSchema] = Field(
        default=None, alias="productivityPatterns"
    )

    class Config:
        populate_by_name = True


class BrainDumpResponse(BaseModel):
    """Multi-framework view of one brain dump."""
    frameworks: Dict[str, Any]
    semantic: Dict[str, Any]
    orchestration: Optional[Dict[str, Any]] = None
    metadata: Dict[str, Any]


class TierResponse(BaseModel):
    """Frameworks a tier may run."""
    tier: str
    frameworks: List[str]
