import pytest

from cv_ingest.cv_pipeline.text_normalizer import normalize

MESSY = "  12 Managed budgets\r\n\r\n\r\n2019 - 2021\n12345678901 Ref\nab\n42\nraft edit copy\nM organized files\n\tTabs\t\there  "


def test_normalize_steps():
    result = normalize(MESSY)
    assert result.lines == [
        "Managed budgets",
        "2019 - 2021",
        "Ref",
        "Draft edit copy",
        "Manage organized files",
        "Tabs here",
    ]
    assert result.cleaned_text == "\n".join(result.lines)


@pytest.mark.parametrize(
    "raw",
    [
        MESSY,
        "Jane Doe\r\njane@example.com\r\n\r\n\r\n\r\nMarketing Manager",
        "1 2 3 Listed item\n• rovide support\nLine with separator",
        ("Sentence number one is right here. " * 60).strip(),
        "",
    ],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once.cleaned_text) == once


def test_year_lines_survive():
    result = normalize("Marketing Manager\n2020 - Present\n2016 to 2019")
    assert result.lines == ["Marketing Manager", "2020 - Present", "2016 to 2019"]


def test_truncation_repairs():
    result = normalize("rovide weekly reports\nevelop new campaigns\nssist the director\noordinate events\ndDrafting letters")
    assert result.lines == [
        "Provide weekly reports",
        "Develop new campaigns",
        "Assist the director",
        "Coordinate events",
        "Drafting letters",
    ]


def test_repairs_do_not_touch_normal_words():
    result = normalize("I'm organized and detail oriented\nProvide support")
    assert result.lines == ["I'm organized and detail oriented", "Provide support"]


def test_extra_repairs_from_settings(settings):
    custom = settings.model_copy(update={"extra_truncation_repairs": ((r"\bangage\b", "Manage"),)})
    assert normalize("angage the budget", custom).lines == ["Manage the budget"]


def test_long_line_is_resplit():
    raw = ("Sentence number one is right here. " * 60).strip()
    result = normalize(raw)
    assert len(result.lines) == 60
    assert all(10 <= len(line) <= 200 for line in result.lines)


def test_unicode_is_composed():
    result = normalize("Jose\u0301 Garci\u0301a")
    assert result.lines == ["Jos\u00e9 Garc\u00eda"]


def test_control_characters_are_removed():
    result = normalize("Jane\x00Doe\x07 Analyst")
    assert result.lines == ["Jane Doe Analyst"]


def test_empty_input():
    result = normalize(None)
    assert result.lines == []
    assert result.cleaned_text == ""
