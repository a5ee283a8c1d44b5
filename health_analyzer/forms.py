"""Per-analyzer form state: created empty, edited field by field, submitted once."""

from typing import Any

from health_analyzer.models import AssessmentResult
from health_analyzer.registry import get_analyzer


class AssessmentForm:
    def __init__(self, domain: str):
        self.analyzer = get_analyzer(domain)
        self.values: dict[str, Any] = self.analyzer.empty_values()
        self.result: AssessmentResult | None = None

    @property
    def domain(self) -> str:
        return self.analyzer.domain

    def update(self, field: str, value: Any) -> None:
        if field not in self.values:
            raise KeyError(f"Field {field} not defined for {self.domain}")
        self.values[field] = value

    def submit(self) -> AssessmentResult:
        self.result = self.analyzer.assess(dict(self.values))
        return self.result

    def accept(self, data: dict) -> AssessmentResult:
        """Adopt a result the service already computed for these values."""
        self.result = self.analyzer.result_model.model_validate(data)
        return self.result

    def reset(self) -> None:
        self.values = self.analyzer.empty_values()
        self.result = None

    def is_pristine(self) -> bool:
        return self.result is None and self.values == self.analyzer.empty_values()
