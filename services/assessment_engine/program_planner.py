# services/assessment_engine/program_planner.py
# Selects an EI training program template from assessment domain scores.

import logging
from typing import Dict, Any, List, Mapping, Optional, Tuple

from .definitions import DOMAIN_FOCUS_AREAS, DOMAIN_LABELS
from .loader import get_program_catalog
from .models import (
    CANONICAL_DOMAINS,
    Domain,
    EIProgram,
    ProgramCatalog,
    ProgramNotFoundError,
    ProgramWeekNotFoundError,
    WeeklyStructure,
)

logger = logging.getLogger(__name__)

COMPREHENSIVE_PROGRAM_ID = "comprehensive-balanced-6w"
SELF_MANAGEMENT_PROGRAM_ID = "self-management-intensive-6w"
SOCIAL_AWARENESS_PROGRAM_ID = "social-awareness-intensive-6w"
FOCUSED_PROGRAM_ID = "focused-development-4w"
MAINTENANCE_PROGRAM_ID = "maintenance-excellence-2w"

# Program duration (weeks) -> expected improvement per focus domain
EXPECTED_IMPROVEMENT_BY_DURATION = {6: 15, 4: 10}
DEFAULT_EXPECTED_IMPROVEMENT = 5


def _coerce_scores(domain_scores: Mapping[Any, float]) -> Dict[Domain, float]:
    """Accepts Domain or plain string keys; every canonical domain must be present."""
    scores = {Domain(key): float(value) for key, value in domain_scores.items()}
    missing = [d.value for d in CANONICAL_DOMAINS if d not in scores]
    if missing:
        raise ValueError(f"Domain scores missing for: {', '.join(missing)}")
    return scores


class ProgramPlanner:
    """
    Chooses a program template from the catalog in ``assets/ei_programs.yml``.
    """

    def __init__(self, catalog: Optional[ProgramCatalog] = None):
        self.catalog = catalog or get_program_catalog()
        self.thresholds = self.catalog.thresholds
        self._programs_by_id: Dict[str, EIProgram] = {p.id: p for p in self.catalog.programs}
        logger.info(f"ProgramPlanner initialized with {len(self._programs_by_id)} program templates")

    def get_available_programs(self) -> List[EIProgram]:
        return list(self.catalog.programs)

    def get_program_by_id(self, program_id: str) -> Optional[EIProgram]:
        return self._programs_by_id.get(program_id)

    def require_program(self, program_id: str) -> EIProgram:
        program = self.get_program_by_id(program_id)
        if program is None:
            raise ProgramNotFoundError(f"Program '{program_id}' not found")
        return program

    def get_week(self, program_id: str, week: int) -> Tuple[EIProgram, WeeklyStructure]:
        """
        Raises:
            ProgramNotFoundError: unknown program id.
            ProgramWeekNotFoundError: the program has no such week.
        """
        program = self.require_program(program_id)
        for week_structure in program.weekly_structure:
            if week_structure.week == week:
                return program, week_structure
        raise ProgramWeekNotFoundError(
            f"Week {week} not found in program '{program_id}' ({program.duration} weeks)"
        )

    def select_program(self, domain_scores: Mapping[Any, float]) -> Dict[str, Any]:
        """
        Picks a program template for an assessment.

        Args:
            domain_scores: The assessment's four domain scores (0-100).

        Returns:
            A recommendation dict with ``program``, ``rationale``,
            ``priority_domains`` and ``estimated_outcomes``.
        """
        scores = _coerce_scores(domain_scores)
        lowest_domain, lowest_score = self._find_lowest_domain(scores)
        average_score = sum(scores.values()) / len(scores)
        gap_count = sum(1 for s in scores.values() if s < self.thresholds.gap_domain_cutoff)

        if lowest_score < self.thresholds.intensive:
            if gap_count >= 2:
                program_id = COMPREHENSIVE_PROGRAM_ID
            elif lowest_domain == Domain.SELF_MANAGEMENT:
                program_id = SELF_MANAGEMENT_PROGRAM_ID
            else:
                program_id = SOCIAL_AWARENESS_PROGRAM_ID
        elif average_score < self.thresholds.focused:
            program_id = FOCUSED_PROGRAM_ID
        else:
            program_id = MAINTENANCE_PROGRAM_ID

        program = self.require_program(program_id)
        logger.info(
            f"Selected program '{program_id}' (lowest: {lowest_domain.value}={lowest_score:.1f}, "
            f"average: {average_score:.1f}, gaps: {gap_count})"
        )

        return {
            "program": program,
            "rationale": self._build_rationale(lowest_domain, lowest_score, average_score, gap_count),
            "priority_domains": self._priority_domains(scores),
            "estimated_outcomes": self._estimate_outcomes(program),
        }

    def _find_lowest_domain(self, scores: Dict[Domain, float]) -> Tuple[Domain, float]:
        # First minimum in canonical order wins ties
        lowest = CANONICAL_DOMAINS[0]
        for domain in CANONICAL_DOMAINS[1:]:
            if scores[domain] < scores[lowest]:
                lowest = domain
        return lowest, scores[lowest]

    def _build_rationale(self, lowest_domain: Domain, lowest_score: float, average_score: float, gap_count: int) -> str:
        label = DOMAIN_LABELS[lowest_domain]
        if lowest_score < self.thresholds.intensive:
            if gap_count >= 2:
                return (
                    f"Your assessment shows multiple areas needing development ({gap_count} domains below "
                    f"{self.thresholds.gap_domain_cutoff:g}). A comprehensive 6-week program will provide "
                    f"balanced growth across all EI competencies."
                )
            return (
                f"Your {label} score ({round(lowest_score)}) indicates a need for intensive development. "
                f"This 6-week program focuses specifically on building these foundational skills."
            )
        if average_score < self.thresholds.focused:
            return (
                f"Your overall EI profile shows moderate development needs (average: {round(average_score)}). "
                f"This 4-week focused program will strengthen your {label} while building on your existing strengths."
            )
        return (
            f"Your strong EI profile (average: {round(average_score)}) indicates you're ready for a maintenance "
            f"program. This 2-week program will help you maintain excellence and continue growing."
        )

    @staticmethod
    def _priority_domains(scores: Dict[Domain, float]) -> List[str]:
        ranked = sorted(CANONICAL_DOMAINS, key=lambda d: scores[d])
        return [DOMAIN_FOCUS_AREAS[d] for d in ranked[:2]]

    @staticmethod
    def _estimate_outcomes(program: EIProgram) -> List[Dict[str, Any]]:
        improvement = EXPECTED_IMPROVEMENT_BY_DURATION.get(program.duration, DEFAULT_EXPECTED_IMPROVEMENT)
        return [{"domain": domain, "expected_improvement": improvement} for domain in program.focus_domains]
