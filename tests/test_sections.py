from cv_ingest.extractors.sections import (
    extract_certifications,
    extract_education,
    extract_languages,
    extract_skills,
    extract_summary,
    find_section,
    section_heading,
)


def test_section_heading():
    assert section_heading("SKILLS") == ("skills", "")
    assert section_heading("Technical   Skills") == ("skills", "")
    assert section_heading("Skills: Python, SQL") == ("skills", "Python, SQL")
    assert section_heading("Work Experience") == ("experience", "")
    assert section_heading("Skills are important to me") is None


def test_find_section_stops_at_next_heading(sample_lines):
    assert find_section(sample_lines, "languages") == ["English, Spanish"]
    assert find_section(sample_lines, "awards") is None


def test_sample_skills(sample_lines):
    assert extract_skills(sample_lines) == [
        "Microsoft Office",
        "Mailchimp",
        "Event Planning",
        "Social Media",
        "Google Analytics",
    ]


def test_inline_skills_vocabulary_and_proficiency():
    lines = ["Skills: python, sql | Excel", "EXPERIENCE", "Proficient in Canva, Trello and Asana."]
    assert extract_skills(lines) == ["python", "sql", "Excel", "Canva", "Trello", "Asana"]


def test_vocabulary_uses_canonical_spelling():
    assert extract_skills(["Managed crm records and sharepoint sites"]) == ["CRM", "SharePoint"]


def test_vocabulary_is_configurable(settings):
    custom = settings.model_copy(update={"skill_vocabulary": ("Phlebotomy",)})
    assert extract_skills(["Certified in phlebotomy and Excel"], custom) == ["Phlebotomy"]


def test_languages_strip_bullets():
    lines = ["LANGUAGES", "• English", "• Spanish (fluent)", "INTERESTS", "Hiking"]
    assert extract_languages(lines) == ["English", "Spanish (fluent)"]


def test_certifications(sample_lines):
    assert extract_certifications(sample_lines) == ["Google Analytics Certification"]
    assert extract_certifications(["Jane Doe"]) == []


def test_education_from_section(sample_lines):
    entries = extract_education(sample_lines)
    assert [(e.degree, e.institution) for e in entries] == [
        ("Bachelor of Arts in Communication", "University of California, Santa Barbara"),
    ]


def test_inline_degree_and_institution():
    entries = extract_education(["EDUCATION", "MBA, London Business School, 2015"])
    assert [(e.degree, e.institution) for e in entries] == [("MBA", "London Business School")]


def test_education_without_section_needs_institution():
    lines = ["Jane Doe", "Master of Science, Institute of Technology", "Completed a diploma course online"]
    entries = extract_education(lines)
    assert [(e.degree, e.institution) for e in entries] == [("Master of Science", "Institute of Technology")]


def test_summary_section(sample_lines):
    assert extract_summary(sample_lines).startswith("Marketing and communications professional")


def test_summary_falls_back_to_intro_prose():
    lines = [
        "Jane Doe",
        "jane@example.com",
        "Creative marketer with a passion for storytelling and community outreach",
        "EXPERIENCE",
        "Marketing Manager",
    ]
    assert extract_summary(lines) == "Creative marketer with a passion for storytelling and community outreach"


def test_short_summary_is_dropped():
    assert extract_summary(["Jane Doe", "SUMMARY", "Hard worker.", "SKILLS", "Excel"]) is None


def test_summary_needs_a_heading():
    assert extract_summary(["Some long line of prose text that says many things about me and my work"]) is None


def test_heading_lookalike_is_not_a_heading():
    # dotted capital I matches under IGNORECASE but folds to a different string
    assert section_heading("EDUCATİON") is None
    assert section_heading("Education outreach to 40 local schools") is None
