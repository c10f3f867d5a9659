import json

import pytest
from pydantic import ValidationError

from cv_ingest.cv_pipeline.cv_parser import parse_document, parse_raw_document, parse_text
from cv_ingest.schemas import (
    ExtractionBackend,
    FailureReason,
    ParsedDocument,
    ParseOutcome,
    RawDocument,
)

SIMPLE_CV = "Jane Doe\njane.doe@example.com\n(555) 123-4567\nMarketing Manager\nABC Corp\n2019 - 2021"


def test_plain_text_cv(settings):
    outcome = parse_document(SIMPLE_CV.encode("utf-8"), "text/plain", ".txt", file_name="jane.txt", settings=settings)
    assert outcome.success
    assert outcome.reason is None
    doc = outcome.document
    info = doc.personal_info
    assert (info.first_name, info.last_name) == ("Jane", "Doe")
    assert info.email == "jane.doe@example.com"
    assert info.phone == "(555) 123-4567"
    assert len(doc.work_experience) == 1
    entry = doc.work_experience[0]
    assert (entry.job_title, entry.company) == ("Marketing Manager", "ABC Corp")
    assert (entry.start_date, entry.end_date, entry.is_current_position) == ("2019", "2021", False)
    assert doc.document_type == "Text"
    assert doc.original_file_name == "jane.txt"


@pytest.mark.parametrize(
    "content,mime,ext",
    [
        (b"", "application/pdf", ".pdf"),
        (b"\x00\x01\x02\x03\xff\xfe\x80" * 200, "application/msword", ".doc"),
    ],
)
def test_unextractable_documents_return_a_reason(settings, content, mime, ext):
    outcome = parse_document(content, mime, ext, settings=settings)
    assert not outcome.success
    assert outcome.reason == FailureReason.UNEXTRACTABLE_DOCUMENT
    assert outcome.document is None
    assert outcome.diagnostics.backend_used is None
    assert not outcome.needs_review


def test_full_sample_with_diagnostics(settings, sample_cv):
    outcome = parse_document(sample_cv.encode("utf-8"), "text/plain", ".txt", settings=settings)
    doc = outcome.document
    assert doc.personal_info.name == "Jane Doe"
    assert doc.personal_info.linkedin == "https://www.linkedin.com/in/janedoe"
    assert [e.company for e in doc.work_experience] == ["Casa Pacifica Centers", "California Museum of Art"]
    assert doc.work_experience[0].is_current_position
    assert [e.degree for e in doc.education] == ["Bachelor of Arts in Communication"]
    assert "Mailchimp" in doc.skills
    assert doc.languages == ["English", "Spanish"]
    assert doc.certifications == ["Google Analytics Certification"]
    assert doc.summary.startswith("Marketing and communications professional")

    diag = outcome.diagnostics
    assert diag.backend_used == ExtractionBackend.PLAIN
    assert [a.backend for a in diag.backend_attempts] == [ExtractionBackend.PLAIN]
    assert diag.name_strategy == "email_cross_validated"
    assert diag.line_count == 25
    assert not outcome.needs_review


def test_word_document(settings, make_docx):
    content = make_docx(SIMPLE_CV.splitlines())
    outcome = parse_document(content, "", ".docx", file_name="Jane_Doe.docx", settings=settings)
    assert outcome.success
    assert outcome.document.document_type == "Word Document"
    assert outcome.diagnostics.backend_used == ExtractionBackend.DOCX_TEXT
    assert outcome.document.work_experience[0].company == "ABC Corp"


def test_pdf_document(settings, make_pdf):
    pytest.importorskip("pdfplumber")
    outcome = parse_document(make_pdf(SIMPLE_CV.splitlines()), "application/pdf", ".pdf", settings=settings)
    assert outcome.success
    assert outcome.document.document_type == "PDF"
    assert outcome.document.personal_info.name == "Jane Doe"
    assert outcome.document.personal_info.email == "jane.doe@example.com"


def test_raw_document_derives_extension(settings):
    raw = RawDocument(content=SIMPLE_CV.encode("utf-8"), file_name="Jane.TXT")
    assert raw.file_extension == ".txt"
    outcome = parse_raw_document(raw, settings)
    assert outcome.document.document_type == "Text"


def test_parse_text_never_raises():
    doc = parse_text("")
    assert isinstance(doc, ParsedDocument)
    assert doc.personal_info.name is None
    assert doc.work_experience == []
    assert doc.document_type == "Text"


def test_partial_result_needs_review(settings):
    outcome = parse_document(b"lorem ipsum dolor sit amet consectetur", "text/plain", ".txt", settings=settings)
    assert outcome.success
    assert outcome.document.personal_info.name is None
    assert outcome.needs_review


def test_outcome_serializes_to_json(settings):
    failed = parse_document(b"", "text/plain", ".txt", settings=settings)
    assert json.loads(failed.model_dump_json())["reason"] == "unextractable_document"

    parsed = parse_document(SIMPLE_CV.encode("utf-8"), "text/plain", ".txt", settings=settings)
    data = json.loads(parsed.model_dump_json())
    assert data["document"]["personal_info"]["email"] == "jane.doe@example.com"
    assert data["diagnostics"]["backend_used"] == "plain"


def test_outcome_is_either_document_or_reason():
    with pytest.raises(ValidationError):
        ParseOutcome(success=True)
    with pytest.raises(ValidationError):
        ParseOutcome(success=False)
    with pytest.raises(ValidationError):
        ParseOutcome(success=False, reason=FailureReason.UNEXTRACTABLE_DOCUMENT, document=ParsedDocument())


def test_dotted_capital_i_heading_does_not_crash(settings):
    content = "Ayşe Yılmaz\nayşe@example.com\nEDUCATİON\nBSc Computing, Ankara University\n".encode()
    outcome = parse_document(content, "text/plain", ".txt", settings=settings)
    assert outcome.success
    assert [(e.degree, e.institution) for e in outcome.document.education] == [
        ("BSc Computing", "Ankara University"),
    ]
