"""Anemia risk rubric with MCV-based type classification.

Hemoglobin only scores when it falls outside the sex-specific normal range;
the severity bands then differ between male and everyone else. The anemia
type is a secondary label taken from MCV and, apart from the +1 already in
the MCV factor, does not feed back into the score.
"""

from health_analyzer.models import AnemiaResult, AssessmentInput, Choice, LabValue, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric

ANALYSIS_DELAY_SECONDS = 2.0
MAX_RECOMMENDATIONS = 6
SPECIALIST_THRESHOLD = 3

MICROCYTIC = "Microcytic Anemia (Iron Deficiency)"
MACROCYTIC = "Macrocytic Anemia (B12/Folate Deficiency)"
NORMOCYTIC = "Normocytic Anemia"
NO_SIGNIFICANT_ANEMIA = "No Significant Anemia"

NORMAL_HB = {"male": (13.8, 17.2), "female": (12.1, 15.1)}
HB_SEVERITY = {"male": (11, 13), "female": (10, 12)}
NORMAL_HCT = {"male": 41, "female": 36}

YES_NO = {"no": "No", "yes": "Yes"}


class AnemiaInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    gender: Choice = choice_field("Gender", {"male": "Male", "female": "Female"})
    hemoglobin: Number = number_field("Hemoglobin", "g/dL")
    hematocrit: Number = number_field("Hematocrit", "%")
    mcv: Number = number_field("MCV (Mean Corpuscular Volume)", "fL")
    mch: Number = number_field("MCH (Mean Corpuscular Hemoglobin)", "pg")
    mchc: Number = number_field("MCHC", "g/dL")
    rdw: Number = number_field("RDW (Red Cell Distribution Width)", "%")
    wbc: Number = number_field("White Blood Cells", "×10³/μL")
    platelets: Number = number_field("Platelets", "×10³/μL")
    ferritin: Number = number_field("Ferritin", "ng/mL")
    vitamin_b12: Number = number_field("Vitamin B12", "pg/mL")
    folate: Number = number_field("Folate", "ng/mL")
    fatigue: Choice = choice_field("Fatigue", {"none": "None", "mild": "Mild", "moderate": "Moderate", "severe": "Severe"})
    breathlessness: Choice = choice_field("Breathlessness", YES_NO)
    cold_hands: Choice = choice_field("Cold Hands/Feet", YES_NO)
    pale_skin: Choice = choice_field("Pale Skin", YES_NO)


def _sex(record: AnemiaInput) -> str:
    return "male" if record.gender == "male" else "female"


def hemoglobin_is_normal(record: AnemiaInput) -> bool:
    low, high = NORMAL_HB[_sex(record)]
    return record.hemoglobin is not None and low <= record.hemoglobin <= high


def hemoglobin_severity(record: AnemiaInput) -> int | None:
    """3 for a severe deficit, 2 for moderate, 1 for any other abnormal value."""
    if record.hemoglobin is None or hemoglobin_is_normal(record):
        return None
    severe, moderate = HB_SEVERITY[_sex(record)]
    if record.hemoglobin < severe:
        return 3
    if record.hemoglobin < moderate:
        return 2
    return 1


YES = (Band("eq", "yes", 1),)

RUBRIC = Rubric(
    domain="anemia",
    title="IronIQ - Anemia Detection",
    input_model=AnemiaInput,
    factors=(
        Factor("hemoglobin", hemoglobin_severity, (Band("eq", 3, 3), Band("eq", 2, 2), Band("eq", 1, 1))),
        Factor("mcv", "mcv", (Band("lt", 80, 1), Band("gt", 100, 1))),
        Factor("ferritin", "ferritin", (Band("lt", 15, 2, "Iron deficiency"),)),
        Factor("vitamin_b12", "vitamin_b12", (Band("lt", 200, 2, "B12 deficiency"),)),
        Factor("folate", "folate", (Band("lt", 2, 1, "Folate deficiency"),)),
        Factor("rdw", "rdw", (Band("gt", 14.5, 1, "Increased RDW"),)),
        Factor("fatigue", "fatigue", (Band("eq", "severe", 2), Band("eq", "moderate", 1))),
        Factor("breathlessness", "breathlessness", YES),
        Factor("cold_hands", "cold_hands", YES),
        Factor("pale_skin", "pale_skin", YES),
    ),
    # Confidence is score-linear for anemia, see confidence() below.
    buckets=(
        Bucket("Severe", 8, 60, 0, 95),
        Bucket("High", 5, 60, 0, 95),
        Bucket("Moderate", 3, 60, 0, 95),
        Bucket("Low", None, 60, 0, 95),
    ),
)


def anemia_type(record: AnemiaInput) -> str:
    if record.mcv is None:
        return "Normal"
    if record.mcv < 80:
        return MICROCYTIC
    if record.mcv > 100:
        return MACROCYTIC
    return NORMOCYTIC


def confidence(score: int) -> int:
    return max(60, min(95, 60 + score * 5))


def _fmt(value: float) -> str:
    return f"{value:g}"


def lab_values(record: AnemiaInput) -> list[LabValue]:
    sex = _sex(record)
    labs = []

    def add(name: str, value: float | None, unit: str, status: str) -> None:
        if value is None:
            labs.append(LabValue(name=name, value="—", status="Not provided"))
        else:
            labs.append(LabValue(name=name, value=f"{_fmt(value)}{unit}", status=status))

    add("Hemoglobin", record.hemoglobin, " g/dL", "Normal" if hemoglobin_is_normal(record) else "Low")
    hct = record.hematocrit
    add("Hematocrit", hct, "%", "Normal" if hct is not None and hct >= NORMAL_HCT[sex] else "Low")
    mcv = record.mcv
    if mcv is None or 80 <= mcv <= 100:
        mcv_status = "Normal"
    else:
        mcv_status = "Low" if mcv < 80 else "High"
    add("MCV", mcv, " fL", mcv_status)
    ferritin = record.ferritin
    add("Ferritin", ferritin, " ng/mL", "Normal" if ferritin is not None and ferritin >= 15 else "Low")
    return labs


def recommendations_for(kind: str, score: int) -> list[str]:
    recommendations = []
    if "Iron Deficiency" in kind:
        recommendations += [
            "Increase iron-rich foods (red meat, spinach, lentils)",
            "Take iron supplements as prescribed by doctor",
            "Combine iron intake with vitamin C for better absorption",
        ]
    if "B12/Folate" in kind:
        recommendations += [
            "Include B12 sources: meat, fish, dairy products",
            "Add folate-rich foods: leafy greens, citrus fruits",
            "Consider B12 injections if severely deficient",
        ]
    if score >= SPECIALIST_THRESHOLD:
        recommendations += [
            "Consult hematologist for detailed evaluation",
            "Get complete blood workup including reticulocyte count",
        ]
    recommendations += [
        "Regular monitoring of blood parameters",
        "Maintain balanced diet with adequate protein",
        "Avoid excessive tea/coffee with iron-rich meals",
    ]
    return recommendations[:MAX_RECOMMENDATIONS]


def assess(data) -> AnemiaResult:
    evaluation = RUBRIC.evaluate(data)
    record = evaluation.record
    score = evaluation.card.total
    kind = anemia_type(record)
    return AnemiaResult(
        domain=RUBRIC.domain,
        risk_level=evaluation.level,
        score=score,
        confidence=confidence(score),
        recommendations=recommendations_for(kind, score),
        contributions=evaluation.card.as_models(),
        anemia_type=NO_SIGNIFICANT_ANEMIA if score < 2 else kind,
        lab_values=lab_values(record),
    )
