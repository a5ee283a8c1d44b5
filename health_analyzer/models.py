"""Pydantic models for assessment inputs, results, chat and auth schemas."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _parse_number(value: Any) -> float | None:
    # Blank, unparseable and zero all mean "not entered".
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number == 0:
        return None
    return number


def _parse_choice(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


Number = Annotated[float | None, BeforeValidator(_parse_number)]
Choice = Annotated[str, BeforeValidator(_parse_choice)]


def number_field(label: str, unit: str = "") -> Any:
    return Field(default=None, json_schema_extra={"label": label, "unit": unit, "kind": "number"})


def choice_field(label: str, choices: dict[str, str]) -> Any:
    return Field(default="", json_schema_extra={"label": label, "choices": choices, "kind": "choice"})


class AssessmentInput(BaseModel):
    """Flat form record. Never rejects input; bad values degrade to empty."""

    model_config = ConfigDict(extra="ignore")


# -- Results --


class FactorContribution(BaseModel):
    factor: str
    points: int
    note: str | None = None


class LabValue(BaseModel):
    name: str
    value: str
    status: str


class AssessmentResult(BaseModel):
    domain: str
    risk_level: str
    score: int
    confidence: int
    recommendations: list[str] = []
    contributions: list[FactorContribution] = []


class AnemiaResult(AssessmentResult):
    anemia_type: str
    lab_values: list[LabValue] = []


class LungResult(AssessmentResult):
    possible_conditions: list[str] = []


class CancerResult(AssessmentResult):
    risk_factors: list[str] = []
    screening_tests: list[str] = []


class DiabetesResult(AssessmentResult):
    key_factors: list[str] = []


class FieldSpec(BaseModel):
    name: str
    label: str
    kind: str
    unit: str = ""
    choices: dict[str, str] = {}


class AnalyzerInfo(BaseModel):
    domain: str
    title: str
    levels: list[str]
    analysis_delay: float = 2.0
    fields: list[FieldSpec]


# -- Chat --


class ChatRequest(BaseModel):
    session_id: str
    message: str


class ChatMessage(BaseModel):
    id: str
    role: str
    content: str
    timestamp: datetime


# -- Auth --


class User(BaseModel):
    uid: str
    name: str = ""
    email: str
    project_id: str = ""
    created_time: int | None = None
    last_login_time: int | None = None


class OTPRequest(BaseModel):
    email: str


class LoginRequest(BaseModel):
    email: str
    code: str


class AuthStatus(BaseModel):
    is_authenticated: bool
    user: User | None = None
