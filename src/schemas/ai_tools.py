from typing import List, Optional

from src.schemas.common import CamelModel
from src.schemas.training import NurseProfile


class DiaryConversionRequest(CamelModel):
    diary_text: str = ""
    nurse_profile: Optional[NurseProfile] = None


class DiaryAnalysis(CamelModel):
    mood: str
    emotional_state: str
    current_challenges: str
    motivation_level: str  # "1".."10"
    insights: List[str]
    suggestions: List[str]
    using_fallback: bool = False
    model: Optional[str] = None


class ReframeRequest(CamelModel):
    thought: str = ""


class ReframeResponse(CamelModel):
    emotion: str
    validation: str
    perspective: str
    reflection_prompt: str
    using_fallback: bool = False


class EmotionalAnalysisRequest(CamelModel):
    text: str = ""
    nurse_profile: Optional[NurseProfile] = None


class EmotionalAnalysis(CamelModel):
    mood: str
    emotional_state: str
    motivation_level: int  # 1..10
    insights: List[str]
    suggestions: List[str]
    using_fallback: bool = False
    model: Optional[str] = None


class CounterFrameRequest(CamelModel):
    action: str = ""
    assumption: str = ""


class CounterFrameResponse(CamelModel):
    counter_frame: str
    using_fallback: bool = False


class ReappraisalRequest(CamelModel):
    action: str = ""
    concern: str = ""


class ReappraisalResponse(CamelModel):
    reappraisal: str
    suggested_action: str
    using_fallback: bool = False
