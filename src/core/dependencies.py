# src/core/dependencies.py
# Request-scoped accessors for the services built in main.lifespan.

from fastapi import Request

from services.assessment_engine.engine import AssessmentEngine
from services.assessment_engine.program_planner import ProgramPlanner
from src.agents.counselor_agent import CounselorAgent
from src.agents.parent_agent import ParentAgent
from src.agents.support_agent import SupportAgent


def get_assessment_engine(request: Request) -> AssessmentEngine:
    return request.app.state.assessment_engine


def get_program_planner(request: Request) -> ProgramPlanner:
    return request.app.state.program_planner


def get_parent_agent(request: Request) -> ParentAgent:
    return request.app.state.parent_agent


def get_support_agent(request: Request) -> SupportAgent:
    return request.app.state.support_agent


def get_counselor_agent(request: Request) -> CounselorAgent:
    return request.app.state.counselor_agent
