"""Unit tests for the normalized résumé record."""

import json

import pytest

from resumeforge.contexts.templating.exceptions import InvalidResumeStructureError
from resumeforge.contexts.templating.resume_data_structure import (
    EducationEntry,
    AdditionalSection,
    ExperienceEntry,
    PersonalInfo,
    Project,
    QRCodeDirective,
    ResumeDocument,
    Skill,
    normalize_honors,
)
from resumeforge.contexts.templating.template_ids import VisualTemplate


class TestFromDict:
    """Test building documents from the persisted layout."""

    @pytest.mark.unit
    def test_sample_fields(self, sample_resume):
        info = sample_resume.personal_info
        assert info.full_name == "Jane Doe"
        assert info.profession_title == "Senior Software Engineer"
        assert info.linkedin == "janedoe"
        assert len(sample_resume.experience) == 3
        assert sample_resume.template is VisualTemplate.MODERN
        assert sample_resume.id == "l9x2k3abcdefghij"
        assert sample_resume.created_at == "2025-01-02T09:30:00.000"

    @pytest.mark.unit
    def test_snake_case_keys_accepted(self):
        doc = ResumeDocument.from_dict(
            {
                "personal_info": {"full_name": "Sam Lee", "profession_title": "Analyst"},
                "experience": [{"company": "Acme", "start_date": "2020", "end_date": "2021"}],
                "additional_sections": [{"title": "Languages", "items": ["French"]}],
            }
        )
        assert doc.personal_info.full_name == "Sam Lee"
        assert doc.personal_info.profession_title == "Analyst"
        assert doc.experience[0].start_date == "2020"
        assert doc.additional_sections[0].items == ("French",)

    @pytest.mark.unit
    def test_absent_sections_are_empty(self, minimal_resume):
        assert minimal_resume.experience == ()
        assert minimal_resume.skills == ()
        assert minimal_resume.additional_sections == ()
        assert minimal_resume.personal_info.email == ""

    @pytest.mark.unit
    def test_unknown_template_falls_back_to_modern(self):
        doc = ResumeDocument.from_dict({"personalInfo": {"fullName": "A"}, "template": "classic"})
        assert doc.template is VisualTemplate.MODERN

    @pytest.mark.unit
    def test_known_template(self):
        doc = ResumeDocument.from_dict({"personalInfo": {"fullName": "A"}, "template": "Elegant"})
        assert doc.template is VisualTemplate.ELEGANT

    @pytest.mark.unit
    def test_current_flag_from_string(self):
        entry = ExperienceEntry.from_dict({"company": "Acme", "current": "true"})
        assert entry.current is True


class TestStructureErrors:
    """Test structural preconditions raise InvalidResumeStructureError."""

    @pytest.mark.unit
    def test_not_a_mapping(self):
        with pytest.raises(InvalidResumeStructureError):
            ResumeDocument.from_dict(["not", "a", "mapping"])

    @pytest.mark.unit
    def test_missing_personal_info(self):
        with pytest.raises(InvalidResumeStructureError, match="personalInfo is required"):
            ResumeDocument.from_dict({"experience": []})

    @pytest.mark.unit
    def test_missing_full_name(self):
        with pytest.raises(InvalidResumeStructureError, match="fullName"):
            ResumeDocument.from_dict({"personalInfo": {"fullName": "   "}})

    @pytest.mark.unit
    def test_list_field_not_a_list(self):
        with pytest.raises(InvalidResumeStructureError, match="experience"):
            ResumeDocument.from_dict({"personalInfo": {"fullName": "A"}, "experience": "Acme"})

    @pytest.mark.unit
    def test_entry_not_a_mapping(self):
        with pytest.raises(InvalidResumeStructureError):
            ResumeDocument.from_dict({"personalInfo": {"fullName": "A"}, "skills": ["Go"]})

    @pytest.mark.unit
    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            ResumeDocument.from_dict({"personalInfo": "Jane"})


class TestHonors:
    """Test honors normalization from both stored shapes."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw,expected",
        [
            (None, ()),
            ("", ()),
            ("   ", ()),
            ("Dean's List", ("Dean's List",)),
            (["Dean's List", "", "Summa Cum Laude"], ("Dean's List", "Summa Cum Laude")),
        ],
    )
    def test_normalize_honors(self, raw, expected):
        assert normalize_honors(raw) == expected

    @pytest.mark.unit
    def test_string_honors_from_sample(self, sample_resume):
        assert sample_resume.education[0].honors == ("Magna Cum Laude",)

    @pytest.mark.unit
    def test_honors_written_back_as_list(self):
        entry = EducationEntry.from_dict({"institution": "MIT", "honors": "Cum Laude"})
        assert entry.to_dict()["honors"] == ["Cum Laude"]


class TestDirectConstruction:
    """Test records built in code are coerced like parsed ones."""

    @pytest.mark.unit
    def test_bare_string_honors(self):
        entry = EducationEntry(institution="MIT", degree="BS", honors="Magna Cum Laude")
        assert entry.honors == ("Magna Cum Laude",)

    @pytest.mark.unit
    def test_list_fields_become_tuples(self):
        assert ExperienceEntry(achievements=["Shipped v2", ""]).achievements == ("Shipped v2",)
        assert Project(technologies=["Go"]).technologies == ("Go",)
        assert AdditionalSection(title="Languages", items="English").items == ("English",)

    @pytest.mark.unit
    def test_record_lists_become_tuples(self):
        doc = ResumeDocument(
            personal_info=PersonalInfo(full_name="Ann Lee"),
            education=[EducationEntry(institution="MIT")],
        )
        assert doc.education == (EducationEntry(institution="MIT"),)
        hash(doc)


class TestQRCodeDirective:
    """Test QR directive parsing."""

    @pytest.mark.unit
    def test_default_disabled(self):
        assert QRCodeDirective.from_dict(None) == QRCodeDirective(enabled=False, type="none")

    @pytest.mark.unit
    def test_unknown_type_becomes_none(self):
        directive = QRCodeDirective.from_dict({"enabled": True, "type": "github"})
        assert directive.enabled is True
        assert directive.type == "none"

    @pytest.mark.unit
    def test_parsed_on_personal_info(self):
        info = PersonalInfo.from_dict(
            {"fullName": "A", "qrCode": {"enabled": True, "type": "LinkedIn"}}
        )
        assert info.qr_code == QRCodeDirective(enabled=True, type="linkedin")


@pytest.mark.unit
def test_display_end_date_present_when_current():
    """Test current positions always show Present regardless of endDate."""
    entry = ExperienceEntry(start_date="2021", end_date="2022", current=True)
    assert entry.display_end_date == "Present"
    assert ExperienceEntry(end_date="2022").display_end_date == "2022"


@pytest.mark.unit
def test_to_dict_round_trips_through_json(sample_resume):
    """Test the persisted layout reloads to an equal document."""
    data = json.loads(json.dumps(sample_resume.to_dict()))
    assert data["personalInfo"]["fullName"] == "Jane Doe"
    assert "startDate" in data["experience"][0]
    assert ResumeDocument.from_dict(data) == sample_resume


class TestFingerprint:
    """Test content fingerprints."""

    @pytest.mark.unit
    def test_equal_documents_share_fingerprint(self, sample_data):
        first = ResumeDocument.from_dict(sample_data)
        second = ResumeDocument.from_dict(dict(sample_data))
        assert first is not second
        assert first.fingerprint() == second.fingerprint()

    @pytest.mark.unit
    def test_content_change_alters_fingerprint(self, sample_resume):
        changed = sample_resume.evolve(
            personal_info=PersonalInfo(full_name="John Roe", email="john@example.com")
        )
        assert changed.fingerprint() != sample_resume.fingerprint()

    @pytest.mark.unit
    def test_persistence_fields_ignored(self, sample_resume):
        relabeled = sample_resume.evolve(
            id="other-id",
            name="Renamed",
            template=VisualTemplate.TECH,
            updated_at="2026-01-01T00:00:00.000",
        )
        assert relabeled.fingerprint() == sample_resume.fingerprint()

    @pytest.mark.unit
    def test_entry_ids_ignored(self, sample_resume):
        entries = tuple(Skill(name=s.name, category=s.category, id="x") for s in sample_resume.skills)
        assert sample_resume.evolve(skills=entries).fingerprint() == sample_resume.fingerprint()


@pytest.mark.unit
def test_evolve_leaves_original_unchanged(sample_resume):
    evolved = sample_resume.evolve(name="Copy")
    assert evolved.name == "Copy"
    assert sample_resume.name == "Jane Doe - Base"


@pytest.mark.unit
def test_from_file_json(tmp_path, sample_resume):
    """Test .json files load through the JSON reader."""
    json_path = tmp_path / "resume.json"
    json_path.write_text(json.dumps(sample_resume.to_dict()), encoding="utf-8")

    assert ResumeDocument.from_file(json_path) == sample_resume
