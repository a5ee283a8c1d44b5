"""Analyzer lookup by domain name."""

from dataclasses import dataclass
from typing import Any, Callable

from health_analyzer.analyzers import anemia, cancer, diabetes, heart, kidney, liver, lung
from health_analyzer.models import (
    AnalyzerInfo,
    AnemiaResult,
    AssessmentResult,
    CancerResult,
    DiabetesResult,
    FieldSpec,
    LungResult,
)
from health_analyzer.scoring import Rubric, field_specs


@dataclass(frozen=True)
class Analyzer:
    rubric: Rubric
    assess: Callable[[Any], AssessmentResult]
    analysis_delay: float
    result_model: type[AssessmentResult] = AssessmentResult

    @property
    def domain(self) -> str:
        return self.rubric.domain

    def empty_values(self) -> dict[str, str]:
        return {name: "" for name in self.rubric.input_model.model_fields}


_ANALYZERS: dict[str, Analyzer] = {
    module.RUBRIC.domain: Analyzer(module.RUBRIC, module.assess, module.ANALYSIS_DELAY_SECONDS, result_model)
    for module, result_model in (
        (anemia, AnemiaResult),
        (cancer, CancerResult),
        (diabetes, DiabetesResult),
        (heart, AssessmentResult),
        (kidney, AssessmentResult),
        (liver, AssessmentResult),
        (lung, LungResult),
    )
}


def get_analyzer(domain: str) -> Analyzer:
    if domain not in _ANALYZERS:
        raise KeyError(f"Analyzer {domain} not found")
    return _ANALYZERS[domain]


def list_domains() -> list[str]:
    return sorted(_ANALYZERS.keys())


def describe(domain: str) -> AnalyzerInfo:
    analyzer = get_analyzer(domain)
    rubric = analyzer.rubric
    return AnalyzerInfo(
        domain=rubric.domain,
        title=rubric.title,
        levels=rubric.levels,
        analysis_delay=analyzer.analysis_delay,
        fields=[FieldSpec(**spec) for spec in field_specs(rubric.input_model)],
    )


def assess(domain: str, data: Any) -> AssessmentResult:
    return get_analyzer(domain).assess(data)
