from io import BytesIO

import pytest

from cv_ingest.schemas.settings import ParserSettings

SAMPLE_CV = """Jane Doe
jane.doe@example.com | (555) 123-4567
LinkedIn: linkedin.com/in/janedoe
Address: 12 Ocean Avenue, Ventura, CA
PROFESSIONAL SUMMARY
Marketing and communications professional with ten years of experience in nonprofit outreach.
EXPERIENCE
Marketing Manager
Casa Pacifica Centers
2020 - Present
• Drafted newsletters and donor updates
• Managed the social media calendar
Communications Assistant
California Museum of Art
2016 - 2019
• Coordinated gallery events
EDUCATION
Bachelor of Arts in Communication
University of California, Santa Barbara
SKILLS
Microsoft Office, Mailchimp, Event Planning
LANGUAGES
English, Spanish
CERTIFICATIONS
Google Analytics Certification
"""


@pytest.fixture
def settings():
    return ParserSettings()


@pytest.fixture
def sample_cv():
    return SAMPLE_CV


@pytest.fixture
def sample_lines():
    return [line for line in SAMPLE_CV.splitlines() if line.strip()]


@pytest.fixture
def make_docx():
    docx = pytest.importorskip("docx")

    def _make(paragraphs, table_rows=None):
        doc = docx.Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table_rows:
            table = doc.add_table(rows=len(table_rows), cols=len(table_rows[0]))
            for r, row in enumerate(table_rows):
                for c, value in enumerate(row):
                    table.cell(r, c).text = value
        buf = BytesIO()
        doc.save(buf)
        return buf.getvalue()

    return _make


@pytest.fixture
def make_pdf():
    fitz = pytest.importorskip("fitz")

    def _make(lines):
        doc = fitz.open()
        page = doc.new_page()
        y = 72
        for line in lines:
            page.insert_text((72, y), line, fontsize=11)
            y += 16
        data = doc.tobytes()
        doc.close()
        return data

    return _make


@pytest.fixture
def make_png():
    Image = pytest.importorskip("PIL.Image")

    def _make():
        buf = BytesIO()
        Image.new("RGB", (40, 20), "white").save(buf, format="PNG")
        return buf.getvalue()

    return _make
