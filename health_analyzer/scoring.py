"""Weighted rule accumulator and bucket ladder shared by every analyzer.

A rubric is plain data: a tuple of factors, each an ordered chain of bands,
and a ladder of buckets ordered from the highest cutoff down. Scoring walks
every factor, takes the first band that matches, and sums the points.
"""

import math
import operator
from dataclasses import dataclass, field
from typing import Any, Callable

from health_analyzer.models import AssessmentInput, FactorContribution

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "ge": operator.ge,
    "lt": operator.lt,
    "le": operator.le,
    "eq": operator.eq,
    "in": lambda value, options: value in options,
}


@dataclass(frozen=True)
class Band:
    op: str
    threshold: Any
    points: int
    note: str | None = None
    tags: tuple[str, ...] = ()

    def __post_init__(self):
        if self.op not in OPERATORS:
            raise ValueError(f"Unknown band operator: {self.op}")

    def matches(self, value: Any) -> bool:
        return OPERATORS[self.op](value, self.threshold)


@dataclass(frozen=True)
class Factor:
    name: str
    source: str | Callable[[AssessmentInput], Any]
    bands: tuple[Band, ...]

    def value_of(self, record: AssessmentInput) -> Any:
        if callable(self.source):
            return self.source(record)
        return getattr(record, self.source)

    def evaluate(self, record: AssessmentInput) -> Band | None:
        """Return the first matching band, or None when the value is missing."""
        value = self.value_of(record)
        if value is None or value == "":
            return None
        for band in self.bands:
            if band.matches(value):
                return band
        return None


@dataclass(frozen=True)
class Contribution:
    factor: str
    band: Band

    @property
    def points(self) -> int:
        return self.band.points


@dataclass
class ScoreCard:
    total: int = 0
    contributions: list[Contribution] = field(default_factory=list)

    @property
    def notes(self) -> list[str]:
        return [c.band.note for c in self.contributions if c.band.note]

    @property
    def tags(self) -> list[str]:
        return [tag for c in self.contributions for tag in c.band.tags]

    def as_models(self) -> list[FactorContribution]:
        return [
            FactorContribution(factor=c.factor, points=c.points, note=c.band.note)
            for c in self.contributions
            if c.points
        ]


@dataclass(frozen=True)
class Bucket:
    label: str
    min_score: int | None
    confidence_base: int
    confidence_span: int
    confidence_cap: int = 95


@dataclass
class Evaluation:
    record: AssessmentInput
    card: ScoreCard
    bucket: Bucket
    confidence: int

    @property
    def level(self) -> str:
        return self.bucket.label


@dataclass(frozen=True)
class Rubric:
    domain: str
    title: str
    input_model: type[AssessmentInput]
    factors: tuple[Factor, ...]
    buckets: tuple[Bucket, ...]

    def __post_init__(self):
        if not self.buckets or self.buckets[-1].min_score is not None:
            raise ValueError(f"{self.domain}: the last bucket must be the catch-all")
        cutoffs = [b.min_score for b in self.buckets[:-1]]
        if any(c is None for c in cutoffs) or cutoffs != sorted(cutoffs, reverse=True):
            raise ValueError(f"{self.domain}: bucket cutoffs must descend")

    @property
    def levels(self) -> list[str]:
        """Bucket labels from lowest to highest risk."""
        return [b.label for b in reversed(self.buckets)]

    def parse(self, data: AssessmentInput | dict | None) -> AssessmentInput:
        if isinstance(data, self.input_model):
            return data
        if isinstance(data, AssessmentInput):
            data = data.model_dump()
        return self.input_model.model_validate(data or {})

    def score(self, record: AssessmentInput) -> ScoreCard:
        card = ScoreCard()
        for factor in self.factors:
            band = factor.evaluate(record)
            if band is None:
                continue
            card.total += band.points
            card.contributions.append(Contribution(factor.name, band))
        return card

    def bucket_for(self, total: int) -> Bucket:
        for bucket in self.buckets:
            if bucket.min_score is None or total >= bucket.min_score:
                return bucket
        raise AssertionError("unreachable: catch-all bucket missing")

    def confidence(self, total: int) -> int:
        """Cosmetic percentage: grows with how deep the score sits in its bucket."""
        bucket = self.bucket_for(total)
        index = self.buckets.index(bucket)
        if len(self.buckets) == 1:
            progress = 1.0
        elif bucket.min_score is None:
            ceiling = self.buckets[index - 1].min_score
            progress = (ceiling - total) / ceiling if ceiling > 0 else 1.0
        else:
            if index > 0:
                width = self.buckets[index - 1].min_score - bucket.min_score
            elif self.buckets[1].min_score is not None:
                width = bucket.min_score - self.buckets[1].min_score
            else:
                width = bucket.min_score
            progress = (total - bucket.min_score) / width if width > 0 else 1.0
        progress = min(max(progress, 0.0), 1.0)
        value = bucket.confidence_base + bucket.confidence_span * progress
        return int(math.floor(min(value, bucket.confidence_cap) + 0.5))

    def evaluate(self, data: AssessmentInput | dict | None) -> Evaluation:
        record = self.parse(data)
        card = self.score(record)
        return Evaluation(
            record=record,
            card=card,
            bucket=self.bucket_for(card.total),
            confidence=self.confidence(card.total),
        )


def unique(items: list[str], limit: int | None = None) -> list[str]:
    """De-duplicate keeping first occurrence, then truncate."""
    seen: dict[str, None] = dict.fromkeys(items)
    result = list(seen)
    return result[:limit] if limit is not None else result


def field_specs(input_model: type[AssessmentInput]) -> list[dict]:
    specs = []
    for name, info in input_model.model_fields.items():
        extra = info.json_schema_extra or {}
        specs.append({
            "name": name,
            "label": extra.get("label", name),
            "kind": extra.get("kind", "number"),
            "unit": extra.get("unit", ""),
            "choices": extra.get("choices", {}),
        })
    return specs
