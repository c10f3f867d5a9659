import pytest

from cv_ingest.extractors.name_resolver import (
    NameContext,
    contextual_scoring,
    is_valid_person_name,
    name_from_email,
    name_from_filename,
    name_similarity,
    resolve_name,
    score_candidate,
    split_name,
)


@pytest.mark.parametrize("candidate", ["john@doe.com", "PROJECT MANAGER", "a", "123456", "", "jane doe", "Visit www.site.org"])
def test_invalid_names(candidate):
    assert not is_valid_person_name(candidate)


@pytest.mark.parametrize("candidate", ["Jane Doe", "Al", "Ludwig van Beethoven", "Mary-Jane O'Neil", "Cvetkovic Ana"])
def test_valid_names(candidate):
    assert is_valid_person_name(candidate)


def test_non_name_keyword_disqualifies():
    assert not is_valid_person_name("Sales Manager")
    assert not is_valid_person_name("Curriculum Vitae")


def test_name_similarity():
    assert name_similarity("John Smith", "John Smith") == 1.0
    assert name_similarity("John Smith", "Smith") == 0.8
    partial = name_similarity("John Allan Smith", "John Smith")
    assert 0.0 < partial < 1.0
    assert name_similarity("John Smith", None) == 0.0


def test_split_name():
    assert split_name("John Allan Smith") == ("John Allan", "Smith")
    assert split_name("Jane Doe") == ("Jane", "Doe")
    assert split_name("Madonna") == ("Madonna", None)
    assert split_name(None) == (None, None)


def test_name_from_email_separators():
    assert name_from_email("jane.doe@example.com") == "Jane Doe"
    assert name_from_email("jane_doe42@example.com") == "Jane Doe"
    assert name_from_email("jane-doe@example.com") == "Jane Doe"


def test_name_from_compact_email_needs_document():
    text = "Contact Jane Doe today"
    assert name_from_email("janedoe@example.com", text) == "Jane Doe"
    assert name_from_email("jdoe42@example.com", text) == "Jane Doe"
    assert name_from_email("janedoe@example.com") is None


def test_name_from_filename():
    assert name_from_filename("Jane_Doe_Resume.pdf") == "Jane Doe"
    assert name_from_filename("resume-john-smith-final.docx") == "John Smith"
    assert name_from_filename("CV_2024.pdf") is None
    assert name_from_filename(None) is None


def test_email_cross_validation_anywhere_in_document():
    lines = ["CURRICULUM VITAE", "Contact: jane.doe@example.com", "Profile", "I am Jane Doe, a marketer."]
    result = resolve_name(lines)
    assert result.name == "Jane Doe"
    assert result.strategy == "email_cross_validated"
    assert result.confidence == 1.0


def test_email_cross_validation_title_cases_all_caps():
    result = resolve_name(["JOHN SMITH", "john.smith@example.com"])
    assert result.name == "John Smith"
    assert result.strategy == "email_cross_validated"


def test_filename_cross_validation():
    lines = ["Resume", "Skills and stuff", "Prepared by Maria Lopez"]
    result = resolve_name(lines, file_name="maria_lopez_cv.pdf")
    assert result.name == "Maria Lopez"
    assert result.strategy == "filename_cross_validated"


def test_contextual_scoring_accepts_name_near_contact_info():
    lines = ["John Smith", "(555) 123-4567", "Marketing Manager", "ABC Corp"]
    result = resolve_name(lines)
    assert result.name == "John Smith"
    assert result.strategy == "contextual_scoring"
    assert result.confidence == pytest.approx(0.7)
    assert "Marketing Manager" in [c.text for c in result.rejected]


def test_contextual_scoring_below_threshold(settings):
    lines = ["lorem ipsum dolor"] * 12 + ["John Smith"]
    result = resolve_name(lines, settings=settings)
    assert result.name is None
    assert result.strategy is None
    assert [(c.text, c.confidence) for c in result.candidates] == [("John Smith", pytest.approx(0.3))]


def test_threshold_is_configurable(settings):
    lines = ["lorem ipsum dolor"] * 12 + ["John Smith"]
    result = resolve_name(lines, settings=settings.model_copy(update={"name_confidence_threshold": 0.3}))
    assert result.name == "John Smith"


def test_score_weights(settings):
    ctx = NameContext(
        lines=["Jane Doe", "jane.doe@example.com"],
        email_name="Jane Doe",
        filename_name="Jane Doe",
        settings=settings,
    )
    assert score_candidate("Jane Doe", 0, ctx) == 1.0
    assert score_candidate("Marketing Director", 0, ctx) < 0.7


def test_contextual_scoring_returns_none_without_candidates(settings):
    assert contextual_scoring(NameContext(lines=["lorem ipsum"], settings=settings)) is None


def test_section_header_blocks_context_bonus(settings):
    ctx = NameContext(lines=["SKILLS", "Jane Doe", "jane@x.org"], settings=settings)
    # valid (0.3) + first five lines (0.2); no contact bonus next to a heading
    assert score_candidate("Jane Doe", 1, ctx) == pytest.approx(0.5)


def test_email_fallback():
    result = resolve_name(["Dear reader", "Contact me: sam.rivers@example.com"])
    assert result.name == "Sam Rivers"
    assert result.strategy == "email_fallback"


def test_custom_strategy_order():
    lines = ["Jane Doe", "(555) 123-4567"]
    result = resolve_name(lines, strategies=[contextual_scoring])
    assert result.strategy == "contextual_scoring"


def test_prose_starting_with_heading_word_keeps_context_bonus(settings):
    ctx = NameContext(lines=["Work closely with clients daily", "Jane Doe", "jane@x.org"], settings=settings)
    # valid (0.3) + first five lines (0.2) + contact nearby (0.2)
    assert score_candidate("Jane Doe", 1, ctx) == pytest.approx(0.7)
