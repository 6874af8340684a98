"""
Валидация формы wizard: правила полей и частичная проверка по списку полей.
"""
import pytest

from app.schemas.content import OnboardingData
from app.schemas.forms import validate_fields, validate_onboarding

ADA = {
    "name": "Ada Lovelace",
    "role": "Engineer",
    "bio": "First programmer.",
    "email": "ada@example.com",
    "github": "https://github.com/ada",
    "linkedin": "https://linkedin.com/in/ada",
}


def _data(**overrides) -> dict:
    data = OnboardingData().model_dump(mode="json", by_alias=True)
    data.update(overrides)
    return data


class TestPersonalInfo:
    def test_valid_personal_info(self):
        result = validate_fields(_data(personalInfo=ADA), ["personalInfo"])
        assert result.valid
        assert result.errors == []

    def test_blank_personal_info_reports_required_fields(self):
        result = validate_fields(_data(), ["personalInfo"])

        assert not result.valid
        fields = {e.field for e in result.errors}
        assert {"personalInfo.name", "personalInfo.role", "personalInfo.bio"} <= fields
        assert "Name is required" in result.messages_for("personalInfo.name")

    def test_github_must_point_to_github(self):
        info = {**ADA, "github": "https://gitlab.com/ada"}
        result = validate_fields(_data(personalInfo=info), ["personalInfo"])

        assert not result.valid
        assert result.messages_for("personalInfo.github") == ["Please enter a valid GitHub URL"]

    def test_linkedin_must_be_absolute_url(self):
        info = {**ADA, "linkedin": "linkedin.com/in/ada"}
        result = validate_fields(_data(personalInfo=info), ["personalInfo"])
        assert result.messages_for("personalInfo.linkedin")

    def test_invalid_email(self):
        info = {**ADA, "email": "not-an-email"}
        result = validate_fields(_data(personalInfo=info), ["personalInfo"])
        assert result.messages_for("personalInfo.email") == ["Please enter a valid email address"]

    def test_optional_urls_accept_empty_string(self):
        info = {**ADA, "twitter": "", "website": ""}
        assert validate_fields(_data(personalInfo=info), ["personalInfo"]).valid

    @pytest.mark.parametrize("twitter", ["https://twitter.com/ada", "https://x.com/ada"])
    def test_twitter_accepts_both_hosts(self, twitter):
        info = {**ADA, "twitter": twitter}
        assert validate_fields(_data(personalInfo=info), ["personalInfo"]).valid

    def test_twitter_rejects_other_host(self):
        info = {**ADA, "twitter": "https://mastodon.social/@ada"}
        result = validate_fields(_data(personalInfo=info), ["personalInfo"])
        assert result.messages_for("personalInfo.twitter")

    def test_bio_length_limit(self):
        info = {**ADA, "bio": "x" * 501}
        result = validate_fields(_data(personalInfo=info), ["personalInfo"])
        assert result.messages_for("personalInfo.bio") == ["Bio must be less than 500 characters"]


class TestContactForm:
    def test_formspree_requires_endpoint(self):
        result = validate_fields(_data(contactForm={"service": "formspree", "endpoint": ""}), ["contactForm"])
        assert not result.valid
        assert result.messages_for("contactForm")

    def test_none_service_is_valid_without_endpoint(self):
        result = validate_fields(_data(contactForm={"service": "none", "endpoint": ""}), ["contactForm"])
        assert result.valid

    def test_netlify_needs_no_endpoint(self):
        result = validate_fields(_data(contactForm={"service": "netlify"}), ["contactForm"])
        assert result.valid

    def test_custom_endpoint_must_be_url(self):
        result = validate_fields(_data(contactForm={"service": "custom", "endpoint": "not a url"}), ["contactForm"])
        assert not result.valid

    def test_formspree_with_endpoint(self):
        config = {"service": "formspree", "endpoint": "https://formspree.io/f/abc"}
        assert validate_fields(_data(contactForm=config), ["contactForm"]).valid

    def test_unknown_service_rejected(self):
        result = validate_fields(_data(contactForm={"service": "emailjs"}), ["contactForm"])
        assert not result.valid


class TestCollections:
    def test_project_requires_tags(self):
        projects = [{"title": "X", "description": "Y", "tags": []}]
        result = validate_fields(_data(projects=projects), ["projects"])

        assert not result.valid
        assert result.errors[0].field == "projects.0.tags"

    def test_project_optional_urls(self):
        projects = [{"title": "X", "description": "Y", "tags": ["a"], "githubUrl": "", "liveUrl": "https://x.dev"}]
        assert validate_fields(_data(projects=projects), ["projects"]).valid

    def test_project_bad_live_url(self):
        projects = [{"title": "X", "description": "Y", "tags": ["a"], "liveUrl": "x.dev"}]
        result = validate_fields(_data(projects=projects), ["projects"])
        assert [e.field for e in result.errors] == ["projects.0.liveUrl"]

    def test_work_experience_color_enum(self):
        jobs = [{"title": "Dev", "company": "Acme", "period": "2020", "color": "red"}]
        assert not validate_fields(_data(workExperience=jobs), ["workExperience"]).valid

    def test_education_requires_school(self):
        education = [{"degree": "BSc", "school": "", "period": "2016"}]
        result = validate_fields(_data(education=education), ["education"])
        assert result.messages_for("education.0.school") == ["School is required"]

    def test_skills_limit(self):
        assert validate_fields(_data(skills=["s"] * 50), ["skills"]).valid
        assert not validate_fields(_data(skills=["s"] * 51), ["skills"]).valid

    def test_empty_skills_allowed(self):
        assert validate_fields(_data(skills=[]), ["skills"]).valid


class TestPartialValidation:
    def test_only_named_fields_are_checked(self):
        # personalInfo пустой и невалидный, но проверяем только skills
        data = _data(skills=["Python"])
        assert validate_fields(data, ["skills"]).valid
        assert not validate_fields(data, ["personalInfo", "skills"]).valid

    def test_empty_field_list_is_valid(self):
        assert validate_fields(_data(), []).valid

    def test_snake_case_names_accepted(self):
        result = validate_fields(_data(personalInfo=ADA), ["personal_info", "contact_form"])
        assert result.valid

    def test_snake_case_keys_in_mapping(self):
        assert validate_fields({"personal_info": ADA}, ["personalInfo"]).valid

        bad = {"contact_form": {"service": "formspree", "endpoint": ""}}
        result = validate_fields(bad, ["contact_form"])
        assert not result.valid
        assert result.messages_for("contactForm") == ["Endpoint is required for formspree"]

    def test_unknown_field_raises(self):
        with pytest.raises(KeyError):
            validate_fields(_data(), ["theme"])

    def test_missing_field_uses_blank_value(self):
        assert validate_fields({}, ["skills", "contactForm"]).valid
        assert not validate_fields({}, ["personalInfo"]).valid

    def test_accepts_model_instance(self):
        data = OnboardingData.model_validate(_data(personalInfo=ADA))
        assert validate_fields(data, ["personalInfo"]).valid

    def test_full_aggregate(self):
        assert validate_onboarding(_data(personalInfo=ADA)).valid
        assert not validate_onboarding(_data()).valid
