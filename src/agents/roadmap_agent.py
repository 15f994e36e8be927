# src/agents/roadmap_agent.py
import json
import logging
import uuid
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from services.assessment_engine.definitions import DOMAIN_LABELS, NEUTRAL_DOMAIN_SCORE
from services.assessment_engine.models import CANONICAL_DOMAINS, Domain, EIProgram
from services.assessment_engine.program_planner import ProgramPlanner
from src.agents.coercion import as_boosts, as_int, as_text, first_present
from src.agents.errors import InvalidAgentResponseError
from src.agents.fallbacks import ROADMAP_BALANCED_MODULES, ROADMAP_GAP_MODULES
from src.llm.client import GenerationClient
from src.llm.errors import GenerationError, JSONExtractionError
from src.llm.json_utils import parse_json_response
from src.schemas.assessment import AssessmentResult
from src.schemas.training import NurseProfile, RoadmapGenerationResult, RoadmapSummary, TrainingModule

logger = logging.getLogger(__name__)

MODULES_PER_WEEK = 3
MIN_FALLBACK_MODULES = 2
DEFAULT_FOCUS_AREA = "Self-Awareness & Recognition"
DEFAULT_MODULE_POINTS = 35

# Focus-area keyword -> assessment domain, checked in order
FOCUS_AREA_KEYWORDS = [
    (("Self-Awareness",), Domain.SELF_AWARENESS),
    (("Self-Management", "Emotional Regulation", "Stress"), Domain.SELF_MANAGEMENT),
    (("Social Awareness", "Empathy"), Domain.SOCIAL_AWARENESS),
    (("Relationship", "Team"), Domain.RELATIONSHIP_MANAGEMENT),
]

ROADMAP_RESPONSE_FORMAT = """Return ONLY a valid JSON object with this EXACT structure:
{
  "modules": [
    {
      "title": "Specific Module Title",
      "description": "Detailed, actionable description for nurses",
      "type": "Training Module|Weekly Challenge|Professional Goal",
      "difficulty": "Beginner|Intermediate|Advanced",
      "eiPoints": 35,
      "eiDomain": "Self-Awareness & Recognition|Emotional Regulation|Empathy & Patient Care|Team Communication|Stress Management",
      "week": 1,
      "day": 1,
      "competencyBoosts": {"Self-Awareness": 2, "Self-Management": 1, "Resilience": 1}
    }
  ],
  "roadmap": {
    "focusAreas": ["List of areas to focus on"],
    "strengths": ["List of strengths to leverage"],
    "timeline": "N weeks",
    "message": "Personalized roadmap message"
  }
}"""


def score_label(score: float) -> str:
    if score < 50:
        return "(NEEDS IMPROVEMENT)"
    if score < 70:
        return "(MODERATE)"
    return "(STRONG)"


def domain_for_focus_area(focus_area: str) -> Optional[Domain]:
    for keywords, domain in FOCUS_AREA_KEYWORDS:
        if any(keyword in focus_area for keyword in keywords):
            return domain
    return None


def difficulty_for_score(score: float, points: int) -> Tuple[str, int]:
    """Difficulty follows the targeted domain's score; points never drop below the band's floor."""
    if score < 40:
        return "Beginner", max(40, points)
    if score < 60:
        return "Intermediate", max(35, points)
    return "Advanced", max(30, points)


class RoadmapAgent:
    """
    Builds a sequenced module plan for a program from an assessment.
    """

    def __init__(self, client: GenerationClient, planner: ProgramPlanner):
        self.client = client
        self.planner = planner

    async def generate_roadmap(
        self,
        assessment: AssessmentResult,
        program: Optional[EIProgram] = None,
        nurse_profile: Optional[NurseProfile] = None,
    ) -> RoadmapGenerationResult:
        """
        Generates the program's modules, falling back to gap-based modules
        when generation fails or the reply is unusable.

        Args:
            assessment: The nurse's scored assessment.
            program: Program to plan for. Selected by the planner when omitted.
            nurse_profile: Optional profile details for the prompt.

        Raises:
            GenerationConfigError: the generation service has no credentials.
        """
        selected_program = program or self.planner.select_program(assessment.domain_scores)["program"]
        logger.info(f"Generating roadmap for program: {selected_program.name}")

        prompt = self.build_prompt(assessment, selected_program, nurse_profile)
        try:
            text = await self.client.generate_with_retry(prompt)
            logger.debug(f"Roadmap response received: {text[:200]}...")
            parsed = parse_json_response(text)

            raw_modules = parsed.get("modules")
            if not isinstance(raw_modules, list):
                raise InvalidAgentResponseError("Invalid roadmap format")
            modules = self.normalize_modules(raw_modules, assessment, selected_program)
        except (GenerationError, JSONExtractionError, InvalidAgentResponseError, ValidationError) as e:
            logger.warning(f"Roadmap generation falling back to gap-based modules: {e}")
            return self.fallback_roadmap(assessment, selected_program)

        logger.info(f"Successfully generated {len(modules)} modules for roadmap")
        return RoadmapGenerationResult(
            modules=modules,
            roadmap=self._parse_summary(parsed.get("roadmap"), assessment, selected_program),
            using_fallback=False,
        )

    def build_prompt(
        self,
        assessment: AssessmentResult,
        program: EIProgram,
        nurse_profile: Optional[NurseProfile] = None,
    ) -> str:
        score_lines = "\n".join(
            f"  * {DOMAIN_LABELS[d]}: {assessment.domain_scores[d]:g}/100 {score_label(assessment.domain_scores[d])}"
            for d in CANONICAL_DOMAINS
        )
        weekly_lines = "\n".join(
            f"Week {w.week}: {w.theme} ({w.focus_area}) - {w.module_count} modules"
            for w in program.weekly_structure
        )
        profile_section = ""
        if nurse_profile is not None:
            current = nurse_profile.stats or nurse_profile.competencies
            profile_section = (
                f"NURSE PROFILE:\n- Name: {nurse_profile.name}\n- Level: {nurse_profile.display_level}\n"
                f"- Current Competencies: {json.dumps(current)}\n"
            )

        return f"""You are an AI training module generator for SoloLvlUp, a healthcare EI development platform. Generate a personalized development roadmap based on this EI assessment and program structure:

ASSESSMENT RESULTS:
- Tool: {assessment.tool}
- Overall Baseline Score: {assessment.baseline_score:g}/100
- Domain Scores:
{score_lines}
- Strengths: {', '.join(d.value for d in assessment.strengths)}
- Development Areas: {', '.join(d.value for d in assessment.gaps)}

PROGRAM STRUCTURE:
- Program: {program.name}
- Duration: {program.duration} weeks
- Focus Domains: {', '.join(program.focus_domains)}
- Total Modules: {program.total_modules}

WEEKLY STRUCTURE:
{weekly_lines}

{profile_section}
INSTRUCTIONS:
1. Generate {program.total_modules} training modules following the weekly structure
2. Assign each module to a specific week and day based on the program structure
3. Prioritize domains with scores BELOW 50 (create more modules for these areas)
4. Adjust difficulty based on domain scores:
   - Scores < 40: "Beginner" modules (40-60 points)
   - Scores 40-60: "Intermediate" modules (35-50 points)
   - Scores > 60: "Advanced" modules (30-40 points)
5. Focus competency boosts on the LOWEST scoring domains
6. Make modules practical for healthcare/nursing settings
7. Ensure modules are achievable within a shift or day

{ROADMAP_RESPONSE_FORMAT}"""

    @staticmethod
    def domain_score(focus_area: str, assessment: AssessmentResult) -> float:
        domain = domain_for_focus_area(focus_area)
        if domain is None:
            return NEUTRAL_DOMAIN_SCORE
        return assessment.domain_scores[domain]

    def normalize_modules(
        self,
        raw_modules: List[Any],
        assessment: AssessmentResult,
        program: EIProgram,
    ) -> List[TrainingModule]:
        batch = uuid.uuid4().hex[:8]
        modules = []
        for index, raw in enumerate(raw_modules):
            if not isinstance(raw, dict):
                logger.debug(f"Skipping non-object roadmap module at index {index}")
                continue
            focus_area = as_text(first_present(raw, "eiDomain", "ei_domain", "realm"), DEFAULT_FOCUS_AREA)
            points = as_int(first_present(raw, "eiPoints", "ei_points", "xp"), DEFAULT_MODULE_POINTS)
            difficulty, points = difficulty_for_score(self.domain_score(focus_area, assessment), points)
            boosts = first_present(raw, "competencyBoosts", "competency_boosts", "statBoosts")

            modules.append(TrainingModule(
                id=str(raw.get("id") or f"roadmap-module-{batch}-{index}"),
                title=raw.get("title") or "EI Development Module",
                description=raw.get("description") or "A training module to enhance your emotional intelligence",
                type=raw.get("type") or "Training Module",
                difficulty=difficulty,
                ei_points=points,
                ei_domain=focus_area,
                competency_boosts=as_boosts(boosts, {}),
                program_id=program.id,
                week=raw.get("week") or index // MODULES_PER_WEEK + 1,
                day=raw.get("day") or index % MODULES_PER_WEEK + 1,
            ))
        return modules

    def _default_summary(self, assessment: AssessmentResult, program: EIProgram, message: str) -> RoadmapSummary:
        return RoadmapSummary(
            focus_areas=[d.value for d in assessment.gaps],
            strengths=[d.value for d in assessment.strengths],
            timeline=f"{program.duration} weeks",
            message=message,
        )

    def _parse_summary(self, raw: Any, assessment: AssessmentResult, program: EIProgram) -> RoadmapSummary:
        if isinstance(raw, dict):
            try:
                return RoadmapSummary.model_validate(raw)
            except ValidationError as e:
                logger.debug(f"Ignoring malformed roadmap summary: {e}")
        return self._default_summary(assessment, program, f"Your personalized {program.name} is ready!")

    def fallback_roadmap(self, assessment: AssessmentResult, program: EIProgram) -> RoadmapGenerationResult:
        """One curated module per gap domain, padded with balanced modules."""
        batch = uuid.uuid4().hex[:8]
        modules: List[TrainingModule] = []
        for gap_index, gap in enumerate(assessment.gaps):
            template = ROADMAP_GAP_MODULES.get(gap)
            if template is None:
                continue
            modules.append(TrainingModule(
                **template,
                id=f"roadmap-fallback-{batch}-{gap_index}",
                program_id=program.id,
                week=gap_index // MODULES_PER_WEEK + 1,
                day=gap_index % MODULES_PER_WEEK + 1,
            ))

        if len(modules) < MIN_FALLBACK_MODULES:
            for template in ROADMAP_BALANCED_MODULES:
                modules.append(TrainingModule(
                    **{**template, "id": f"{template['id']}-{batch}"},
                    program_id=program.id,
                ))

        return RoadmapGenerationResult(
            modules=modules,
            roadmap=self._default_summary(
                assessment,
                program,
                f"This {program.name} addresses your development areas while building on your strengths.",
            ),
            using_fallback=True,
        )
