"""Respiratory health rubric with possible-condition tagging."""

from health_analyzer.models import AssessmentInput, Choice, LungResult, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric, unique

ANALYSIS_DELAY_SECONDS = 2.5
MAX_RECOMMENDATIONS = 5
MAX_CONDITIONS = 4

SEVERITY = {"none": "None", "mild": "Mild", "moderate": "Moderate", "severe": "Severe"}


class LungInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    gender: Choice = choice_field("Gender", {"male": "Male", "female": "Female"})
    smoking_history: Choice = choice_field("Smoking History", {
        "never": "Never Smoked",
        "former": "Former Smoker",
        "current": "Current Smoker",
    })
    years_of_smoking: Number = number_field("Years of Smoking", "years")
    pack_years: Number = number_field("Pack Years")
    chronic_cough: Choice = choice_field("Chronic Cough", SEVERITY)
    shortness_of_breath: Choice = choice_field("Shortness of Breath", {
        "none": "None",
        "mild": "Mild (with exertion)",
        "moderate": "Moderate (with minimal activity)",
        "severe": "Severe (at rest)",
    })
    chest_pain: Choice = choice_field("Chest Pain", SEVERITY)
    wheezing: Choice = choice_field("Wheezing", {"none": "None", "occasional": "Occasional", "frequent": "Frequent"})
    fatigue_weakness: Choice = choice_field("Fatigue / Weakness", SEVERITY)
    weight_loss: Choice = choice_field("Unexplained Weight Loss", {
        "none": "None",
        "mild": "Mild (< 5 lbs)",
        "moderate": "Moderate (5-15 lbs)",
        "significant": "Significant (> 15 lbs)",
    })
    respiratory_rate: Number = number_field("Respiratory Rate", "breaths/min")
    oxygen_saturation: Number = number_field("Oxygen Saturation (SpO2)", "%")
    peak_flow: Number = number_field("Peak Flow", "L/min")
    chest_xray: Choice = choice_field("Chest X-ray", {
        "normal": "Normal",
        "suspicious": "Suspicious findings",
        "abnormal": "Clearly abnormal",
        "not_done": "Not done",
    })
    family_history: Choice = choice_field("Family History of Lung Disease", {"yes": "Yes", "no": "No"})
    occupational_exposure: Choice = choice_field("Occupational Exposure", {
        "none": "None",
        "low": "Low (office work)",
        "moderate": "Moderate (chemicals, dust)",
        "high": "High (mining, construction)",
    })
    allergies: Choice = choice_field("Allergies / Asthma", {
        "none": "None",
        "mild": "Mild allergies",
        "moderate": "Moderate allergies/asthma",
        "severe": "Severe asthma",
    })


def expected_peak_flow(record: LungInput) -> float:
    under_forty = record.age is None or record.age < 40
    if record.gender == "male":
        return 600 if under_forty else 500
    return 450 if under_forty else 380


def peak_flow_percentage(record: LungInput) -> float | None:
    if record.peak_flow is None:
        return None
    return record.peak_flow / expected_peak_flow(record) * 100


RUBRIC = Rubric(
    domain="lung",
    title="PneumoAI - Lung Health Detector",
    input_model=LungInput,
    factors=(
        Factor("age", "age", (Band("gt", 65, 3), Band("gt", 50, 2), Band("gt", 40, 1))),
        Factor("smoking_history", "smoking_history", (
            Band("eq", "current", 5, tags=("COPD", "Lung Cancer Risk", "Emphysema")),
            Band("eq", "former", 3, tags=("COPD Risk", "Residual Damage")),
        )),
        Factor("pack_years", "pack_years", (Band("gt", 30, 4), Band("gt", 20, 3), Band("gt", 10, 2))),
        Factor("chronic_cough", "chronic_cough", (
            Band("eq", "severe", 3, tags=("Chronic Bronchitis", "COPD")),
            Band("eq", "moderate", 2),
            Band("eq", "mild", 1),
        )),
        Factor("shortness_of_breath", "shortness_of_breath", (
            Band("eq", "severe", 4, tags=("Asthma", "COPD", "Pulmonary Embolism")),
            Band("eq", "moderate", 2, tags=("Exercise Intolerance", "Mild Asthma")),
            Band("eq", "mild", 1),
        )),
        Factor("chest_pain", "chest_pain", (
            Band("eq", "severe", 3, tags=("Pneumonia", "Pleuritis", "Pulmonary Embolism")),
            Band("eq", "moderate", 2),
        )),
        Factor("wheezing", "wheezing", (
            Band("eq", "frequent", 3, tags=("Asthma", "COPD", "Allergic Bronchitis")),
            Band("eq", "occasional", 1),
        )),
        Factor("weight_loss", "weight_loss", (
            Band("eq", "significant", 4, tags=("Lung Cancer", "Advanced COPD", "Tuberculosis")),
            Band("eq", "moderate", 2),
        )),
        Factor("respiratory_rate", "respiratory_rate", (Band("gt", 24, 3), Band("gt", 20, 2))),
        Factor("oxygen_saturation", "oxygen_saturation", (Band("lt", 90, 4), Band("lt", 95, 3), Band("lt", 98, 1))),
        Factor("peak_flow", peak_flow_percentage, (
            Band("lt", 50, 4, tags=("Severe Airway Obstruction", "Acute Asthma")),
            Band("lt", 70, 3, tags=("Moderate Airway Obstruction",)),
            Band("lt", 80, 2),
        )),
        Factor("chest_xray", "chest_xray", (
            Band("eq", "abnormal", 4, tags=("Pneumonia", "Lung Cancer", "Pulmonary Fibrosis")),
            Band("eq", "suspicious", 2),
        )),
        Factor("family_history", "family_history", (Band("eq", "yes", 2),)),
        Factor("occupational_exposure", "occupational_exposure", (
            Band("eq", "high", 3, tags=("Occupational Lung Disease", "Asbestosis")),
            Band("eq", "moderate", 1),
        )),
        Factor("allergies", "allergies", (
            Band("eq", "severe", 2, tags=("Allergic Asthma", "Hypersensitivity Pneumonitis")),
        )),
    ),
    buckets=(
        Bucket("High Risk", 20, 85, 10, 95),
        Bucket("Moderate Risk", 12, 75, 15, 90),
        Bucket("Mild Risk", 6, 70, 20, 90),
        Bucket("Healthy Lungs", None, 80, 15, 95),
    ),
)

RECOMMENDATIONS = {
    "High Risk": [
        "Immediate pulmonology consultation required",
        "Complete pulmonary function tests (PFTs)",
        "High-resolution CT scan of chest",
        "Consider bronchoscopy if indicated",
        "Immediate smoking cessation if applicable",
        "Oxygen therapy evaluation if hypoxic",
        "Pulmonary rehabilitation program",
        "Regular monitoring for disease progression",
    ],
    "Moderate Risk": [
        "Pulmonologist consultation recommended",
        "Spirometry and lung function testing",
        "Chest CT scan if symptoms persist",
        "Smoking cessation program if needed",
        "Bronchodilator therapy trial",
        "Avoid respiratory irritants and pollutants",
        "Annual influenza and pneumonia vaccines",
        "Regular follow-up every 3-6 months",
    ],
    "Mild Risk": [
        "Regular monitoring by primary physician",
        "Basic spirometry screening annually",
        "Smoking cessation if applicable",
        "Regular cardiovascular exercise as tolerated",
        "Avoid secondhand smoke and air pollution",
        "Maintain healthy weight",
        "Stay up-to-date with vaccinations",
        "Practice breathing exercises",
    ],
    "Healthy Lungs": [
        "Continue maintaining excellent lung health",
        "Regular aerobic exercise (30 min, 5x/week)",
        "Avoid smoking and secondhand smoke",
        "Annual health screenings",
        "Practice deep breathing exercises",
        "Maintain good indoor air quality",
        "Stay hydrated and eat antioxidant-rich foods",
        "Get adequate sleep and manage stress",
    ],
}


def assess(data) -> LungResult:
    evaluation = RUBRIC.evaluate(data)
    return LungResult(
        domain=RUBRIC.domain,
        risk_level=evaluation.level,
        score=evaluation.card.total,
        confidence=evaluation.confidence,
        recommendations=RECOMMENDATIONS[evaluation.level][:MAX_RECOMMENDATIONS],
        contributions=evaluation.card.as_models(),
        possible_conditions=unique(evaluation.card.tags, MAX_CONDITIONS),
    )
