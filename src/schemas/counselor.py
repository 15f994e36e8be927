from typing import List, Literal, Optional

from pydantic import Field

from src.schemas.common import CamelModel
from src.schemas.training import NurseProfile, TrainingModule

CounselorAction = Literal["chat", "suggest_tool", "generate_quest", "open_tool"]


class ChatMessage(CamelModel):
    role: str  # "user"; anything else is treated as the counselor
    content: str


class ChatRequest(CamelModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class ChatResponse(CamelModel):
    message: str
    using_fallback: bool = False
    model: Optional[str] = None


class RecentQuest(CamelModel):
    title: str
    ei_domain: Optional[str] = None
    completed: bool = False


class CounselorRequest(CamelModel):
    messages: List[ChatMessage] = Field(default_factory=list)
    user_context: NurseProfile = Field(default_factory=NurseProfile)
    recent_quests: List[RecentQuest] = Field(default_factory=list)
    action: Optional[CounselorAction] = None
    tool_id: Optional[str] = None


class AiTool(CamelModel):
    id: str
    name: str
    description: str
    route: str


class QuestOffer(CamelModel):
    description: str


class CounselorResponse(CamelModel):
    type: Literal["message", "quest_generated", "open_tool"] = "message"
    message: str
    suggested_tool: Optional[AiTool] = None
    quest_offer: Optional[QuestOffer] = None
    quest: Optional[TrainingModule] = None
    tool_id: Optional[str] = None
    route: Optional[str] = None
    using_fallback: bool = False
    model: Optional[str] = None
