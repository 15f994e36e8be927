import yaml
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, Callable, TypeVar

from services.assessment_engine.models import QuestionBank, ProgramCatalog

ASSETS_DIR = Path(__file__).resolve().parents[2] / "assets"
TEIQUE_SF_QUESTIONS_PATH = ASSETS_DIR / "teique_sf_questions.yml"
EI_PROGRAMS_PATH = ASSETS_DIR / "ei_programs.yml"

T = TypeVar("T")


class ReferenceDataError(ValueError):
    """Raised when reference data fails validation not covered by Pydantic."""
    pass


def load_question_bank_data(data: Dict[str, Any]) -> QuestionBank:
    """
    Validates raw question bank data and checks that question ids are unique.
    """
    bank = QuestionBank.model_validate(data)

    if not bank.questions:
        raise ReferenceDataError(f"Question bank for '{bank.tool}' has no questions")
    if bank.likert_min >= bank.likert_max:
        raise ReferenceDataError(
            f"Invalid Likert range {bank.likert_min}..{bank.likert_max} for '{bank.tool}'"
        )

    question_ids = set()
    for question in bank.questions:
        if question.id in question_ids:
            raise ReferenceDataError(f"Duplicate question ID '{question.id}' in question bank '{bank.tool}'")
        question_ids.add(question.id)

    return bank


def load_program_catalog_data(data: Dict[str, Any]) -> ProgramCatalog:
    """
    Validates program templates: unique ids and a weekly structure that
    matches each program's declared duration.
    """
    catalog = ProgramCatalog.model_validate(data)

    program_ids = set()
    for program in catalog.programs:
        if program.id in program_ids:
            raise ReferenceDataError(f"Duplicate program ID found: {program.id}")
        program_ids.add(program.id)

        weeks = [w.week for w in program.weekly_structure]
        if weeks != list(range(1, program.duration + 1)):
            raise ReferenceDataError(
                f"Program '{program.id}' declares {program.duration} weeks but has weekly structure {weeks}"
            )

    return catalog


def _load_yaml(file_path: Path, parse: Callable[[Dict[str, Any]], T]) -> T:
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ReferenceDataError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise ReferenceDataError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise ReferenceDataError(f"YAML file is empty or invalid: {file_path}")

    return parse(data)


def load_question_bank_from_file(file_path: Path) -> QuestionBank:
    return _load_yaml(Path(file_path), load_question_bank_data)


def load_program_catalog_from_file(file_path: Path) -> ProgramCatalog:
    return _load_yaml(Path(file_path), load_program_catalog_data)


@lru_cache(maxsize=None)
def get_teique_sf_question_bank() -> QuestionBank:
    """Read-only TEIQue-SF reference questions, loaded once per process."""
    return load_question_bank_from_file(TEIQUE_SF_QUESTIONS_PATH)


@lru_cache(maxsize=None)
def get_program_catalog() -> ProgramCatalog:
    return load_program_catalog_from_file(EI_PROGRAMS_PATH)
