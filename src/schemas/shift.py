from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import Field

from src.schemas.common import CamelModel

ShiftType = Literal["day", "night", "ICU", "emergency", "other"]
Department = Literal["ICU", "Pediatrics", "ER", "Oncology", "General", "Other"]
WorkloadIntensity = Literal["low", "moderate", "high", "critical"]


class ShiftContext(CamelModel):
    shift_type: ShiftType
    department: Department
    workload_intensity: WorkloadIntensity
    critical_incident_occurred: bool = False
    shift_start: Optional[datetime] = None
    shift_end: Optional[datetime] = None


class ShiftAnalysisRequest(CamelModel):
    shift_context: ShiftContext
    competencies: Dict[str, float]


class ShiftAnalysis(CamelModel):
    shift_type: ShiftType
    department: Department
    workload_intensity: WorkloadIntensity
    normalized_ei_score: float = Field(alias="normalizedEIScore")
    fatigue_adjustment: float
    recommended_modules: List[str]
    context_notes: str
    normalized_competencies: Dict[str, float] = Field(default_factory=dict)
