"""Tests for analyzer lookup and the assessment form lifecycle."""

import pytest

from health_analyzer.forms import AssessmentForm
from health_analyzer.models import AnemiaResult, AssessmentResult, CancerResult, DiabetesResult, LungResult
from health_analyzer.registry import describe, get_analyzer, list_domains


class TestListDomains:
    def test_returns_all_analyzers(self):
        assert list_domains() == ["anemia", "cancer", "diabetes", "heart", "kidney", "liver", "lung"]


class TestGetAnalyzer:
    def test_valid_domain(self):
        analyzer = get_analyzer("heart")
        assert analyzer.domain == "heart"
        assert analyzer.analysis_delay == 2.0

    def test_invalid_domain_raises(self):
        with pytest.raises(KeyError):
            get_analyzer("spleen")

    @pytest.mark.parametrize("domain,delay", [("kidney", 2.5), ("lung", 2.5), ("cancer", 3.0), ("liver", 2.0)])
    def test_analysis_delays(self, domain, delay):
        assert get_analyzer(domain).analysis_delay == delay


class TestDescribe:
    def test_field_metadata(self):
        info = describe("heart")
        fields = {f.name: f for f in info.fields}
        assert info.title == "CardioGuard - Heart Risk Analyzer"
        assert info.levels == ["Low Risk", "Moderate Risk", "High Risk"]
        assert fields["age"].kind == "number"
        assert fields["age"].unit == "years"
        assert fields["chest_pain"].kind == "choice"
        assert "ASY" in fields["chest_pain"].choices

    def test_every_domain_describable(self):
        for domain in list_domains():
            info = describe(domain)
            assert info.fields
            assert len(info.levels) >= 3


class TestAssessmentForm:
    def test_starts_empty(self):
        form = AssessmentForm("diabetes")
        assert all(value == "" for value in form.values.values())
        assert form.result is None
        assert form.is_pristine()

    def test_submit_scores_current_values(self):
        form = AssessmentForm("diabetes")
        form.update("glucose", "150")
        form.update("bmi", "32")
        result = form.submit()
        assert result.risk_level == "high"
        assert form.result is result

    def test_reset_round_trip(self):
        form = AssessmentForm("heart")
        form.update("age", "65")
        form.update("sex", "M")
        form.submit()
        form.reset()
        assert form.is_pristine()
        assert form.values == AssessmentForm("heart").values

    def test_unknown_field_rejected(self):
        form = AssessmentForm("heart")
        with pytest.raises(KeyError):
            form.update("shoe_size", "42")

    def test_unknown_domain_rejected(self):
        with pytest.raises(KeyError):
            AssessmentForm("spleen")

    def test_accept_service_result(self):
        form = AssessmentForm("anemia")
        form.update("hemoglobin", "9")
        form.update("gender", "male")
        form.update("mcv", "70")
        payload = get_analyzer("anemia").assess(form.values).model_dump(mode="json")
        result = form.accept(payload)
        assert isinstance(result, AnemiaResult)
        assert form.result.anemia_type == result.anemia_type
        assert form.result.lab_values
        form.reset()
        assert form.is_pristine()

    @pytest.mark.parametrize("domain,model", [
        ("anemia", AnemiaResult),
        ("cancer", CancerResult),
        ("diabetes", DiabetesResult),
        ("lung", LungResult),
        ("heart", AssessmentResult),
    ])
    def test_result_model_matches_assess(self, domain, model):
        analyzer = get_analyzer(domain)
        assert analyzer.result_model is model
        assert type(analyzer.assess({})) is model
