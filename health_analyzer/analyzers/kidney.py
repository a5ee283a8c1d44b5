"""Chronic kidney disease risk rubric."""

from health_analyzer.models import AssessmentInput, AssessmentResult, Choice, Number, choice_field, number_field
from health_analyzer.scoring import Band, Bucket, Factor, Rubric

ANALYSIS_DELAY_SECONDS = 2.5
MAX_RECOMMENDATIONS = 5

YES_NO = {"yes": "Yes", "no": "No"}
NORMAL_ABNORMAL = {"normal": "Normal", "abnormal": "Abnormal"}
PRESENT = {"present": "Present", "notpresent": "Not Present"}


class KidneyInput(AssessmentInput):
    age: Number = number_field("Age", "years")
    blood_pressure: Number = number_field("Blood Pressure (systolic)", "mmHg")
    specific_gravity: Number = number_field("Specific Gravity")
    albumin: Choice = choice_field("Albumin", {
        "0": "0 - Normal",
        "1": "1 - Trace",
        "2": "2 - Mild",
        "3": "3 - Moderate",
        "4": "4 - High",
        "5": "5 - Very High",
    })
    sugar: Choice = choice_field("Sugar", {"0": "0 - Normal", "1": "1 - Trace", "2": "2 - Present", "3": "3 - High"})
    red_blood_cells: Choice = choice_field("Red Blood Cells", NORMAL_ABNORMAL)
    pus_cell: Choice = choice_field("Pus Cells", NORMAL_ABNORMAL)
    pus_cell_clumps: Choice = choice_field("Pus Cell Clumps", PRESENT)
    bacteria: Choice = choice_field("Bacteria", PRESENT)
    blood_glucose_random: Number = number_field("Random Blood Glucose", "mg/dL")
    blood_urea: Number = number_field("Blood Urea", "mg/dL")
    serum_creatinine: Number = number_field("Serum Creatinine", "mg/dL")
    sodium: Number = number_field("Sodium", "mEq/L")
    potassium: Number = number_field("Potassium", "mEq/L")
    haemoglobin: Number = number_field("Haemoglobin", "g/dL")
    packed_cell_volume: Number = number_field("Packed Cell Volume", "%")
    white_blood_cell_count: Number = number_field("White Blood Cell Count", "cells/cumm")
    red_blood_cell_count: Number = number_field("Red Blood Cell Count", "millions/cmm")
    hypertension: Choice = choice_field("Hypertension", YES_NO)
    diabetes_mellitus: Choice = choice_field("Diabetes Mellitus", YES_NO)
    coronary_artery_disease: Choice = choice_field("Coronary Artery Disease", YES_NO)
    appetite: Choice = choice_field("Appetite", {"good": "Good", "poor": "Poor"})
    pedal_edema: Choice = choice_field("Pedal Edema", YES_NO)
    anemia: Choice = choice_field("Anemia", YES_NO)


RUBRIC = Rubric(
    domain="kidney",
    title="NephroTrack - Kidney Health Monitor",
    input_model=KidneyInput,
    factors=(
        Factor("age", "age", (Band("gt", 70, 3), Band("gt", 60, 2), Band("gt", 50, 1))),
        Factor("blood_pressure", "blood_pressure", (Band("gt", 140, 3), Band("gt", 120, 2))),
        Factor("serum_creatinine", "serum_creatinine", (Band("gt", 1.5, 4), Band("gt", 1.2, 3), Band("gt", 1.0, 2))),
        Factor("blood_urea", "blood_urea", (Band("gt", 50, 3), Band("gt", 40, 2), Band("gt", 30, 1))),
        Factor("albumin", "albumin", (
            Band("in", ("4", "5"), 4),
            Band("eq", "3", 3),
            Band("eq", "2", 2),
            Band("eq", "1", 1),
        )),
        Factor("red_blood_cells", "red_blood_cells", (Band("eq", "abnormal", 2),)),
        Factor("pus_cell", "pus_cell", (Band("eq", "abnormal", 2),)),
        Factor("hypertension", "hypertension", (Band("eq", "yes", 2),)),
        Factor("diabetes_mellitus", "diabetes_mellitus", (Band("eq", "yes", 3),)),
        Factor("coronary_artery_disease", "coronary_artery_disease", (Band("eq", "yes", 2),)),
        Factor("appetite", "appetite", (Band("eq", "poor", 2),)),
        Factor("pedal_edema", "pedal_edema", (Band("eq", "yes", 3),)),
        Factor("anemia", "anemia", (Band("eq", "yes", 2),)),
        Factor("haemoglobin", "haemoglobin", (Band("lt", 10, 3), Band("lt", 12, 2))),
        Factor("sodium", "sodium", (Band("gt", 145, 2), Band("lt", 135, 2))),
        Factor("potassium", "potassium", (Band("gt", 5.0, 2), Band("lt", 3.5, 2))),
    ),
    buckets=(
        Bucket("High Risk", 20, 85, 10, 95),
        Bucket("Moderate Risk", 12, 75, 15, 90),
        Bucket("Mild Impairment", 6, 70, 20, 90),
        Bucket("Normal Function", None, 80, 15, 95),
    ),
)

RECOMMENDATIONS = {
    "High Risk": [
        "Immediate nephrology consultation required",
        "Consider dialysis preparation if GFR <15",
        "Strict dietary protein restriction (0.6-0.8g/kg)",
        "Monitor fluid intake and electrolyte balance",
        "Regular kidney function tests (weekly)",
        "Blood pressure control <130/80 mmHg",
        "Avoid nephrotoxic medications",
    ],
    "Moderate Risk": [
        "Regular monitoring by nephrologist",
        "Moderate protein restriction (0.8-1.0g/kg)",
        "Control diabetes and hypertension",
        "Monthly kidney function tests",
        "Stay hydrated but avoid fluid overload",
        "Limit sodium intake (<2g per day)",
        "Monitor for complications",
    ],
    "Mild Impairment": [
        "Bi-annual kidney function screening",
        "Maintain healthy protein intake",
        "Control underlying conditions",
        "Regular blood pressure monitoring",
        "Stay well hydrated (8-10 glasses water)",
        "Limit processed foods and excess salt",
        "Regular exercise as tolerated",
    ],
    "Normal Function": [
        "Continue maintaining healthy lifestyle",
        "Annual kidney function screening",
        "Maintain adequate hydration",
        "Regular exercise and healthy diet",
        "Monitor blood pressure regularly",
        "Avoid excessive use of pain medications",
        "Limit alcohol and quit smoking",
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
