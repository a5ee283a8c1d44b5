"""Liver function risk rubric, including the derived AST/ALT ratio."""

from health_analyzer.models import AssessmentInput, AssessmentResult, Choice, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric

ANALYSIS_DELAY_SECONDS = 2.0
MAX_RECOMMENDATIONS = 5

TRANSAMINASE_BANDS = (Band("gt", 200, 4), Band("gt", 100, 3), Band("gt", 80, 2), Band("gt", 40, 1))


class LiverInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    gender: Choice = choice_field("Gender", {"Male": "Male", "Female": "Female"})
    total_bilirubin: Number = number_field("Total Bilirubin", "mg/dL")
    direct_bilirubin: Number = number_field("Direct Bilirubin", "mg/dL")
    alkaline_phosphotase: Number = number_field("Alkaline Phosphatase", "IU/L")
    alamine_aminotransferase: Number = number_field("ALT (Alanine Aminotransferase)", "IU/L")
    aspartate_aminotransferase: Number = number_field("AST (Aspartate Aminotransferase)", "IU/L")
    total_proteins: Number = number_field("Total Proteins", "g/dL")
    albumin: Number = number_field("Albumin", "g/dL")
    albumin_globulin_ratio: Number = number_field("Albumin/Globulin Ratio")


def ast_alt_ratio(record: LiverInput) -> float | None:
    if record.aspartate_aminotransferase is None or record.alamine_aminotransferase is None:
        return None
    return record.aspartate_aminotransferase / record.alamine_aminotransferase


RUBRIC = Rubric(
    domain="liver",
    title="LivoScan - Liver Function Analyzer",
    input_model=LiverInput,
    factors=(
        Factor("age", "age", (Band("gt", 65, 2), Band("gt", 50, 1))),
        Factor("total_bilirubin", "total_bilirubin", (Band("gt", 3.0, 4), Band("gt", 2.0, 3), Band("gt", 1.2, 2))),
        Factor("direct_bilirubin", "direct_bilirubin", (Band("gt", 1.0, 3), Band("gt", 0.5, 2), Band("gt", 0.3, 1))),
        Factor("alkaline_phosphotase", "alkaline_phosphotase", (Band("gt", 300, 3), Band("gt", 200, 2), Band("gt", 147, 1))),
        Factor("alamine_aminotransferase", "alamine_aminotransferase", TRANSAMINASE_BANDS),
        Factor("aspartate_aminotransferase", "aspartate_aminotransferase", TRANSAMINASE_BANDS),
        Factor("ast_alt_ratio", ast_alt_ratio, (Band("gt", 2.0, 2), Band("gt", 1.5, 1))),
        Factor("total_proteins", "total_proteins", (Band("lt", 6.0, 2), Band("gt", 8.5, 1))),
        Factor("albumin", "albumin", (Band("lt", 3.0, 3), Band("lt", 3.5, 2))),
        Factor("albumin_globulin_ratio", "albumin_globulin_ratio", (Band("lt", 1.0, 2), Band("gt", 2.5, 1))),
    ),
    buckets=(
        Bucket("High Risk", 15, 85, 10, 95),
        Bucket("Moderate Risk", 10, 75, 15, 90),
        Bucket("Mild Dysfunction", 5, 70, 20, 90),
        Bucket("Normal Function", None, 80, 15, 95),
    ),
)

RECOMMENDATIONS = {
    "High Risk": [
        "Immediate hepatology consultation required",
        "Consider hospitalization for severe cases",
        "Complete abstinence from alcohol and hepatotoxic drugs",
        "Antiviral therapy if viral hepatitis detected",
        "Monitor for complications (ascites, varices)",
        "Low-sodium diet (<2g/day) if fluid retention",
        "Regular liver function monitoring (weekly)",
    ],
    "Moderate Risk": [
        "Gastroenterologist consultation recommended",
        "Identify and treat underlying causes",
        "Avoid alcohol and hepatotoxic medications",
        "Vaccination for Hepatitis A & B if not immune",
        "Weight management if obesity present",
        "Monthly liver function tests",
        "Consider liver biopsy if indicated",
    ],
    "Mild Dysfunction": [
        "Follow-up with primary physician",
        "Limit alcohol consumption significantly",
        "Review all medications for hepatotoxicity",
        "Maintain healthy weight through diet and exercise",
        "Increase intake of antioxidant-rich foods",
        "Bi-monthly liver function monitoring",
        "Stay hydrated and get adequate sleep",
    ],
    "Normal Function": [
        "Continue maintaining healthy lifestyle",
        "Moderate alcohol consumption or avoid completely",
        "Regular exercise and balanced nutrition",
        "Annual liver function screening",
        "Maintain healthy weight",
        "Stay hydrated (8-10 glasses water daily)",
        "Avoid unnecessary medications and supplements",
    ],
}


def assess(data) -> AssessmentResult:
    evaluation = RUBRIC.evaluate(data)
    return AssessmentResult(
        domain=RUBRIC.domain,
        risk_level=evaluation.level,
        score=evaluation.card.total,
        confidence=evaluation.confidence,
        recommendations=RECOMMENDATIONS[evaluation.level][:MAX_RECOMMENDATIONS],
        contributions=evaluation.card.as_models(),
    )
