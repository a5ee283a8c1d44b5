"""General cancer risk rubric.

Physical activity and diet quality carry protective (negative) bands, so the
total here can drop below zero. Gender and age also contribute zero-point
bands whose only effect is to suggest age- and sex-appropriate screening.
"""

from health_analyzer.models import AssessmentInput, CancerResult, Choice, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric, unique

ANALYSIS_DELAY_SECONDS = 3.0
MAX_RECOMMENDATIONS = 4
MAX_RISK_FACTORS = 6
MAX_SCREENING_TESTS = 6


class CancerInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    gender: Choice = choice_field("Gender", {"male": "Male", "female": "Female"})
    bmi: Number = number_field("BMI", "kg/m²")
    smoking_history: Choice = choice_field("Smoking History", {
        "never": "Never smoked",
        "former": "Former smoker",
        "current": "Current smoker",
        "former_heavy": "Former heavy smoker (>20 pack-years)",
        "heavy_current": "Heavy current smoker (>20 pack-years)",
    })
    alcohol_consumption: Choice = choice_field("Alcohol Consumption", {
        "none": "None/Rare",
        "light": "Light (1-7 drinks/week)",
        "moderate": "Moderate (8-14 drinks/week)",
        "heavy": "Heavy (>14 drinks/week)",
    })
    physical_activity: Choice = choice_field("Physical Activity", {
        "none": "Sedentary (no exercise)",
        "minimal": "Minimal (<150 min/week)",
        "regular": "Regular (150-300 min/week)",
        "high": "High (>300 min/week)",
    })
    diet_quality: Choice = choice_field("Diet Quality", {
        "poor": "Poor (processed foods, low fruits/vegetables)",
        "average": "Average (mixed diet)",
        "good": "Good (balanced, some fruits/vegetables)",
        "excellent": "Excellent (Mediterranean/plant-based)",
    })
    family_history: Choice = choice_field("Family History", {
        "none": "No family history",
        "distant": "Distant relatives only",
        "moderate": "First/second degree relatives",
        "strong": "Strong family history (multiple relatives)",
    })
    medical_history: Choice = choice_field("Medical History", {
        "none": "No significant history",
        "low_risk": "Minor conditions only",
        "moderate_risk": "Some cancer-related conditions",
        "high_risk": "High-risk conditions (immunodeficiency, etc.)",
    })
    previous_cancer: Choice = choice_field("Previous Cancer", {"no": "No", "yes": "Yes"})
    chronic_inflammation: Choice = choice_field("Chronic Inflammation", {
        "none": "None",
        "mild": "Mild (occasional flares)",
        "moderate": "Moderate (IBD, etc.)",
        "severe": "Severe/chronic conditions",
    })
    sun_exposure: Choice = choice_field("Sun Exposure", {
        "minimal": "Minimal (always protected)",
        "moderate": "Moderate (some protection)",
        "high": "High (regular unprotected exposure)",
        "excessive": "Excessive (frequent burns/tanning)",
    })
    occupational_exposure: Choice = choice_field("Occupational Exposure", {
        "none": "No significant exposure",
        "low": "Low exposure (office work)",
        "moderate": "Moderate (chemicals, radiation)",
        "high": "High (mining, asbestos, etc.)",
    })
    vaccination_status: Choice = choice_field("Vaccination Status", {
        "complete": "Up-to-date (HPV, Hep B, etc.)",
        "incomplete": "Some missing vaccinations",
        "none": "No relevant vaccinations",
    })
    reproductive_history: Choice = choice_field("Reproductive History (female)", {
        "low_risk": "Low risk profile",
        "average": "Average risk profile",
        "high_risk": "High-risk factors (nulliparity, late menopause, etc.)",
    })


def female_reproductive_history(record: CancerInput) -> str | None:
    return record.reproductive_history if record.gender == "female" else None


RUBRIC = Rubric(
    domain="cancer",
    title="OncoGuard - Cancer Risk Analyzer",
    input_model=CancerInput,
    factors=(
        Factor("age", "age", (
            Band("ge", 70, 5, "Advanced age (≥70)"),
            Band("ge", 60, 4, "Older age (60-69)"),
            Band("ge", 50, 3, "Middle age (50-59)"),
            Band("ge", 40, 2, "Age over 40"),
        )),
        Factor("gender", "gender", (
            Band("eq", "female", 0, tags=("Mammography (40+)", "Cervical screening (21+)")),
            Band("eq", "male", 0, tags=("Prostate screening (50+)",)),
        )),
        Factor("reproductive_history", female_reproductive_history, (
            Band("eq", "high_risk", 2, "High-risk reproductive factors"),
        )),
        Factor("smoking_history", "smoking_history", (
            Band("eq", "heavy_current", 6, "Heavy current smoking", ("Low-dose CT (lung)", "Head & neck examination")),
            Band("eq", "current", 4, "Current smoking", ("Lung screening",)),
            Band("eq", "former_heavy", 3, "Former heavy smoker", ("Lung screening",)),
            Band("eq", "former", 2, "Former smoker"),
        )),
        Factor("alcohol_consumption", "alcohol_consumption", (
            Band("eq", "heavy", 3, "Heavy alcohol use", ("Liver imaging", "Upper endoscopy")),
            Band("eq", "moderate", 1, "Moderate alcohol use"),
        )),
        Factor("family_history", "family_history", (
            Band("eq", "strong", 4, "Strong family history", ("Genetic counseling", "Enhanced screening")),
            Band("eq", "moderate", 2, "Family history present", ("Earlier screening",)),
        )),
        Factor("bmi", "bmi", (
            Band("ge", 35, 3, "Severe obesity (BMI ≥35)"),
            Band("ge", 30, 2, "Obesity (BMI 30-35)"),
            Band("ge", 25, 1, "Overweight (BMI 25-30)"),
        )),
        Factor("physical_activity", "physical_activity", (
            Band("eq", "none", 2, "Sedentary lifestyle"),
            Band("eq", "minimal", 1, "Insufficient physical activity"),
            Band("eq", "regular", -1),
            Band("eq", "high", -2),
        )),
        Factor("diet_quality", "diet_quality", (
            Band("eq", "poor", 2, "Poor diet quality"),
            Band("eq", "average", 1),
            Band("eq", "excellent", -1),
        )),
        Factor("sun_exposure", "sun_exposure", (
            Band("eq", "excessive", 2, "Excessive sun exposure", ("Dermatology screening",)),
            Band("eq", "moderate", 1, tags=("Annual skin check",)),
        )),
        Factor("occupational_exposure", "occupational_exposure", (
            Band("eq", "high", 3, "High occupational exposure", ("Occupational health screening",)),
            Band("eq", "moderate", 1, "Moderate occupational exposure"),
        )),
        Factor("medical_history", "medical_history", (
            Band("eq", "high_risk", 3, "High-risk medical conditions", ("Targeted screening",)),
            Band("eq", "moderate_risk", 1, "Some risk conditions"),
        )),
        Factor("vaccination_status", "vaccination_status", (
            Band("eq", "incomplete", 1, "Incomplete vaccinations"),
        )),
        Factor("chronic_inflammation", "chronic_inflammation", (
            Band("eq", "severe", 2, "Severe chronic inflammation"),
            Band("eq", "moderate", 1, "Chronic inflammatory condition"),
        )),
        Factor("previous_cancer", "previous_cancer", (
            Band("eq", "yes", 4, "Previous cancer history", ("Enhanced surveillance",)),
        )),
        Factor("age_screening", "age", (
            Band("ge", 50, 0, tags=("Colonoscopy", "Annual physical exam")),
            Band("ge", 45, 0, tags=("Annual physical exam",)),
        )),
    ),
    buckets=(
        Bucket("Very High Risk", 18, 85, 10, 95),
        Bucket("High Risk", 12, 80, 15, 95),
        Bucket("Moderate Risk", 7, 75, 20, 95),
        Bucket("Low Risk", 3, 70, 25, 95),
        Bucket("Very Low Risk", None, 75, 20, 95),
    ),
)

RECOMMENDATIONS = {
    "Very High Risk": [
        "Immediate oncology consultation required",
        "Comprehensive genetic counseling and testing",
        "Enhanced multi-organ screening program",
        "Consider preventive interventions where appropriate",
        "Aggressive lifestyle modification program",
        "Regular monitoring every 3-6 months",
        "Participation in high-risk screening protocols",
        "Consider chemoprevention if eligible",
    ],
    "High Risk": [
        "Consultation with oncologist or genetic counselor",
        "Accelerated and enhanced screening protocols",
        "Annual comprehensive cancer screening",
        "Immediate smoking cessation if applicable",
        "Weight management and dietary counseling",
        "Consider preventive medications where indicated",
        "Regular follow-up every 6 months",
        "Family screening recommendations",
    ],
    "Moderate Risk": [
        "Follow standard cancer screening guidelines",
        "Annual health check-ups with primary physician",
        "Lifestyle modification program",
        "Age-appropriate cancer screening tests",
        "Maintain healthy weight and diet",
        "Regular physical activity (150 min/week)",
        "Limit alcohol consumption",
        "Annual skin and self-examinations",
    ],
    "Low Risk": [
        "Continue healthy lifestyle practices",
        "Follow routine screening recommendations",
        "Maintain regular physical activity",
        "Healthy diet rich in fruits and vegetables",
        "Limit processed foods and red meat",
        "Avoid tobacco and limit alcohol",
        "Sun protection and skin awareness",
        "Biennial health check-ups",
    ],
    "Very Low Risk": [
        "Excellent! Continue current healthy practices",
        "Maintain optimal weight and fitness level",
        "Continue nutritious, balanced diet",
        "Regular exercise and stress management",
        "Follow age-appropriate screening only",
        "Sun safety and skin protection",
        "Avoid known carcinogens",
        "Health check-ups every 2-3 years",
    ],
}


def assess(data) -> CancerResult:
    evaluation = RUBRIC.evaluate(data)
    return CancerResult(
        domain=RUBRIC.domain,
        risk_level=evaluation.level,
        score=evaluation.card.total,
        confidence=evaluation.confidence,
        recommendations=RECOMMENDATIONS[evaluation.level][:MAX_RECOMMENDATIONS],
        contributions=evaluation.card.as_models(),
        risk_factors=unique(evaluation.card.notes, MAX_RISK_FACTORS),
        screening_tests=unique(evaluation.card.tags, MAX_SCREENING_TESTS),
    )
