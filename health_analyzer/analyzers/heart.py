"""Cardiovascular disease risk rubric."""

from health_analyzer.models import AssessmentInput, AssessmentResult, Choice, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric

ANALYSIS_DELAY_SECONDS = 2.0
MAX_RECOMMENDATIONS = 4


class HeartInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    sex: Choice = choice_field("Sex", {"M": "Male", "F": "Female"})
    chest_pain: Choice = choice_field("Chest Pain Type", {
        "TA": "Typical Angina",
        "ATA": "Atypical Angina",
        "NAP": "Non-Anginal Pain",
        "ASY": "Asymptomatic",
    })
    resting_bp: Number = number_field("Resting Blood Pressure", "mmHg")
    cholesterol: Number = number_field("Cholesterol", "mg/dL")
    fasting_bs: Choice = choice_field("Fasting Blood Sugar > 120 mg/dL", {"Yes": "Yes", "No": "No"})
    resting_ecg: Choice = choice_field("Resting ECG", {
        "Normal": "Normal",
        "ST": "ST-T Wave Abnormality",
        "LVH": "Left Ventricular Hypertrophy",
    })
    max_hr: Number = number_field("Maximum Heart Rate", "bpm")
    exercise_angina: Choice = choice_field("Exercise Induced Angina", {"Y": "Yes", "N": "No"})
    oldpeak: Number = number_field("ST Depression (Oldpeak)")
    st_slope: Choice = choice_field("ST Slope", {"Up": "Upsloping", "Flat": "Flat", "Down": "Downsloping"})


RUBRIC = Rubric(
    domain="heart",
    title="CardioGuard - Heart Risk Analyzer",
    input_model=HeartInput,
    factors=(
        Factor("age", "age", (Band("gt", 60, 3), Band("gt", 45, 2), Band("gt", 35, 1))),
        Factor("sex", "sex", (Band("eq", "M", 1),)),
        Factor("resting_bp", "resting_bp", (Band("gt", 140, 3), Band("gt", 120, 2))),
        Factor("cholesterol", "cholesterol", (Band("gt", 240, 3), Band("gt", 200, 2))),
        Factor("fasting_bs", "fasting_bs", (Band("eq", "Yes", 2),)),
        Factor("chest_pain", "chest_pain", (Band("eq", "ASY", 3), Band("eq", "NAP", 2), Band("eq", "ATA", 1))),
        Factor("max_hr", "max_hr", (Band("lt", 100, 2), Band("lt", 150, 1))),
        Factor("exercise_angina", "exercise_angina", (Band("eq", "Y", 2),)),
        Factor("oldpeak", "oldpeak", (Band("gt", 2, 3), Band("gt", 1, 2), Band("gt", 0, 1))),
    ),
    buckets=(
        Bucket("High Risk", 15, 85, 10, 95),
        Bucket("Moderate Risk", 8, 75, 15, 90),
        Bucket("Low Risk", None, 70, 20, 90),
    ),
)

RECOMMENDATIONS = {
    "High Risk": [
        "Immediate consultation with cardiologist recommended",
        "Consider stress test and ECG evaluation",
        "Start cardiac medication as prescribed",
        "Adopt heart-healthy diet (low sodium, low saturated fat)",
        "Begin supervised exercise program",
        "Monitor blood pressure daily",
        "Quit smoking and limit alcohol consumption",
    ],
    "Moderate Risk": [
        "Schedule regular check-ups with your doctor",
        "Monitor blood pressure and cholesterol levels",
        "Maintain healthy weight through diet and exercise",
        "Include 30 minutes of moderate exercise daily",
        "Follow Mediterranean or DASH diet",
        "Manage stress through relaxation techniques",
        "Get adequate sleep (7-9 hours nightly)",
    ],
    "Low Risk": [
        "Continue maintaining healthy lifestyle",
        "Regular cardiovascular exercise 3-4 times per week",
        "Eat plenty of fruits, vegetables, and whole grains",
        "Maintain healthy weight and BMI",
        "Annual health check-ups recommended",
        "Stay hydrated and limit processed foods",
        "Practice stress management techniques",
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
