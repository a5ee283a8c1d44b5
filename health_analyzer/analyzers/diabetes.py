"""Simplified diabetes risk predictor."""

from health_analyzer.models import AssessmentInput, DiabetesResult, Number, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric

ANALYSIS_DELAY_SECONDS = 2.0
NO_FACTORS = "Normal range values detected"

FIRST_RECOMMENDATION = {
    "high": "Consult an endocrinologist immediately for comprehensive evaluation",
    "medium": "Schedule regular check-ups with your healthcare provider",
    "low": "Maintain current healthy lifestyle habits",
}

GENERAL_RECOMMENDATIONS = [
    "Follow a balanced diet with controlled carbohydrate intake",
    "Engage in regular physical exercise (150 minutes per week)",
    "Monitor blood sugar levels regularly",
    "Maintain a healthy weight through diet and exercise",
]


class DiabetesInput(AssessmentInput):
    pregnancies: Number = number_field("Pregnancies")
    glucose: Number = number_field("Glucose Level", "mg/dL")
    blood_pressure: Number = number_field("Blood Pressure", "mmHg")
    skin_thickness: Number = number_field("Skin Thickness", "mm")
    insulin: Number = number_field("Insulin Level", "μU/mL")
    bmi: Number = number_field("BMI", "kg/m²")
    diabetes_pedigree: Number = number_field("Diabetes Pedigree Function")
    age: Number = number_field("Age", "years")


RUBRIC = Rubric(
    domain="diabetes",
    title="Smart Diabetes Predictor",
    input_model=DiabetesInput,
    factors=(
        Factor("glucose", "glucose", (
            Band("gt", 140, 3, "Elevated glucose levels"),
            Band("gt", 100, 1, "Borderline glucose levels"),
        )),
        Factor("bmi", "bmi", (
            Band("gt", 30, 2, "Obesity (BMI > 30)"),
            Band("gt", 25, 1, "Overweight (BMI > 25)"),
        )),
        Factor("age", "age", (Band("gt", 45, 1, "Age over 45"),)),
        Factor("blood_pressure", "blood_pressure", (Band("gt", 140, 1, "High blood pressure"),)),
    ),
    buckets=(
        Bucket("high", 4, 85, 10, 95),
        Bucket("medium", 2, 75, 15, 90),
        Bucket("low", None, 80, 15, 95),
    ),
)


def assess(data) -> DiabetesResult:
    evaluation = RUBRIC.evaluate(data)
    level = evaluation.level
    recommendations = [FIRST_RECOMMENDATION[level], *GENERAL_RECOMMENDATIONS]
    return DiabetesResult(
        domain=RUBRIC.domain,
        risk_level=level,
        score=evaluation.card.total,
        confidence=evaluation.confidence,
        recommendations=recommendations[:5 if level == "high" else 4],
        contributions=evaluation.card.as_models(),
        key_factors=evaluation.card.notes or [NO_FACTORS],
    )
