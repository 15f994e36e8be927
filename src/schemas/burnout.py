from datetime import datetime
from typing import Any, List, Literal, Optional

from src.schemas.common import CamelModel

RiskLevel = Literal["low", "moderate", "high", "critical"]


class BurnoutShiftContext(CamelModel):
    """Shift details as far as the client knows them; burnout only reads workload and incidents."""
    shift_type: Optional[str] = None
    department: Optional[str] = None
    workload_intensity: Optional[str] = None
    critical_incident_occurred: Optional[bool] = None


class BurnoutDetectionRequest(CamelModel):
    emotional_state: Optional[str] = None
    motivation_level: Optional[int] = None
    # Raw reflection records; only their motivationLevel is read.
    recent_reflections: Optional[List[Any]] = None
    shift_context: Optional[BurnoutShiftContext] = None


class BurnoutRisk(CamelModel):
    level: RiskLevel
    indicators: List[str]
    recommendations: List[str]
    referral_needed: bool
    detected_at: datetime
    last_updated: datetime
