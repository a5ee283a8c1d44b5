"""Per-domain outputs beyond the risk level."""

import pytest

from health_analyzer.analyzers import anemia, cancer, diabetes, heart, kidney, liver, lung


class TestAnemia:
    def test_lab_values_report_missing_entries(self):
        result = anemia.assess({"hemoglobin": "9", "gender": "male", "ferritin": "10"})
        labs = {lab.name: lab for lab in result.lab_values}
        assert labs["Hemoglobin"].value == "9 g/dL"
        assert labs["Hemoglobin"].status == "Low"
        assert labs["Ferritin"].status == "Low"
        assert labs["Hematocrit"].value == "—"
        assert labs["Hematocrit"].status == "Not provided"

    def test_severity_ranges_depend_on_gender(self):
        male = anemia.assess({"hemoglobin": "10.5", "gender": "male"})
        female = anemia.assess({"hemoglobin": "10.5", "gender": "female"})
        assert male.score == 3
        assert female.score == 2

    def test_missing_gender_uses_female_ranges(self):
        assert anemia.assess({"hemoglobin": "10.5"}).score == 2

    def test_normal_hemoglobin_scores_nothing(self):
        result = anemia.assess({"hemoglobin": "14", "gender": "male"})
        assert result.score == 0
        assert result.anemia_type == anemia.NO_SIGNIFICANT_ANEMIA

    def test_low_score_hides_type(self):
        result = anemia.assess({"mcv": "110"})
        assert result.score == 1
        assert result.anemia_type == anemia.NO_SIGNIFICANT_ANEMIA

    def test_macrocytic_type_and_recommendations(self):
        result = anemia.assess({"mcv": "110", "vitamin_b12": "150", "hemoglobin": "11", "gender": "female"})
        assert result.anemia_type == anemia.MACROCYTIC
        assert "Include B12 sources: meat, fish, dairy products" in result.recommendations
        assert "Consult hematologist for detailed evaluation" in result.recommendations
        assert len(result.recommendations) <= 6

    def test_confidence_grows_with_score(self):
        assert anemia.assess({}).confidence == 60
        severe = anemia.assess({
            "hemoglobin": "8", "gender": "male", "mcv": "70", "ferritin": "5",
            "fatigue": "severe", "pale_skin": "yes",
        })
        assert severe.risk_level == "Severe"
        assert severe.confidence == 95


class TestLung:
    def test_possible_conditions_capped_and_deduplicated(self):
        result = lung.assess({"smoking_history": "current", "chest_xray": "abnormal"})
        assert result.possible_conditions == ["COPD", "Lung Cancer Risk", "Emphysema", "Pneumonia"]

    def test_peak_flow_against_expected_for_young_male(self):
        record = lung.LungInput(gender="male", age="30", peak_flow="250")
        assert lung.expected_peak_flow(record) == 600
        result = lung.assess({"gender": "male", "age": "30", "peak_flow": "250"})
        assert result.score == 4
        assert "Severe Airway Obstruction" in result.possible_conditions

    def test_peak_flow_for_older_female(self):
        result = lung.assess({"gender": "female", "age": "50", "peak_flow": "300"})
        # age 50 is over 40 (1) and 300/380 is under 80% (2)
        assert result.score == 3

    def test_missing_peak_flow_contributes_nothing(self):
        assert lung.assess({"gender": "male"}).score == 0


class TestCancer:
    def test_female_screening_suggestions(self):
        result = cancer.assess({"gender": "female", "age": "55"})
        assert result.score == 3
        assert result.risk_level == "Low Risk"
        assert result.screening_tests == [
            "Mammography (40+)",
            "Cervical screening (21+)",
            "Colonoscopy",
            "Annual physical exam",
        ]
        assert result.risk_factors == ["Middle age (50-59)"]

    def test_reproductive_history_only_counts_for_women(self):
        male = cancer.assess({"gender": "male", "reproductive_history": "high_risk"})
        female = cancer.assess({"gender": "female", "reproductive_history": "high_risk"})
        assert male.score == 0
        assert female.score == 2

    def test_very_high_risk(self):
        result = cancer.assess({
            "age": "72",
            "smoking_history": "heavy_current",
            "family_history": "strong",
            "previous_cancer": "yes",
        })
        assert result.score == 19
        assert result.risk_level == "Very High Risk"
        assert len(result.screening_tests) <= 6
        assert len(result.risk_factors) <= 6


class TestDiabetes:
    def test_high_risk_recommendations(self):
        result = diabetes.assess({"glucose": "150", "bmi": "32"})
        assert result.risk_level == "high"
        assert len(result.recommendations) == 5
        assert result.recommendations[0].startswith("Consult an endocrinologist")
        assert result.key_factors == ["Elevated glucose levels", "Obesity (BMI > 30)"]

    def test_medium_risk(self):
        result = diabetes.assess({"glucose": "120", "age": "50"})
        assert result.score == 2
        assert result.risk_level == "medium"
        assert len(result.recommendations) == 4

    def test_no_factors_placeholder(self):
        result = diabetes.assess({})
        assert result.risk_level == "low"
        assert result.key_factors == [diabetes.NO_FACTORS]


class TestKidney:
    def test_albumin_grades(self):
        assert kidney.assess({"albumin": "5"}).score == 4
        assert kidney.assess({"albumin": "2"}).score == 2
        assert kidney.assess({"albumin": "0"}).score == 0

    def test_electrolytes_out_of_range_either_way(self):
        assert kidney.assess({"sodium": "130"}).score == 2
        assert kidney.assess({"sodium": "150"}).score == 2
        assert kidney.assess({"sodium": "140"}).score == 0


class TestLiver:
    def test_ast_alt_ratio_scored(self):
        result = liver.assess({"aspartate_aminotransferase": "90", "alamine_aminotransferase": "40"})
        factors = {c.factor: c.points for c in result.contributions}
        assert factors == {"aspartate_aminotransferase": 2, "ast_alt_ratio": 2}

    def test_ratio_needs_both_values(self):
        result = liver.assess({"aspartate_aminotransferase": "90"})
        assert result.score == 2


class TestRecommendationLimits:
    @pytest.mark.parametrize("module,limit", [(heart, 4), (cancer, 4), (kidney, 5), (liver, 5), (lung, 5)],
                             ids=lambda v: v.RUBRIC.domain if hasattr(v, "RUBRIC") else str(v))
    def test_every_level_capped(self, module, limit):
        assert module.MAX_RECOMMENDATIONS == limit
        assert all(len(advice) > limit for advice in module.RECOMMENDATIONS.values())
        assert module.assess({}).recommendations == module.RECOMMENDATIONS[module.RUBRIC.levels[0]][:limit]

    def test_high_risk_heart_keeps_leading_advice(self):
        result = heart.assess({"age": "65", "sex": "M", "chest_pain": "ASY", "resting_bp": "150",
                               "cholesterol": "250", "fasting_bs": "Yes", "max_hr": "90", "oldpeak": "2.5"})
        assert result.recommendations == heart.RECOMMENDATIONS["High Risk"][:4]
