"""Configuration loaded from environment variables, plus the default heuristic tables."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env: try package dir then project root
_base = Path(__file__).resolve().parent
for _env_path in (_base / ".env", _base.parent / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()  # also allow process env


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "")  # unset: loggers inherit the root level

# OCR (last-resort backend; slow, so off unless enabled)
OCR_ENABLED: bool = _env_bool("OCR_ENABLED", False)
OCR_TIMEOUT_SECONDS: float = float(os.getenv("OCR_TIMEOUT_SECONDS", "30"))
OCR_LANGUAGE: str = os.getenv("OCR_LANGUAGE", "eng")
OCR_ZOOM: float = 2.0  # ~144 DPI
OCR_MAX_PAGES: int = 5

# Field inference
NAME_CONFIDENCE_THRESHOLD: float = float(os.getenv("NAME_CONFIDENCE_THRESHOLD", "0.7"))
MAX_CANDIDATE_LINES: int = int(os.getenv("MAX_CANDIDATE_LINES", "20"))
MIN_DESCRIPTION_LENGTH: int = int(os.getenv("MIN_DESCRIPTION_LENGTH", "5"))
LONG_LINE_THRESHOLD: int = 1000

# Optional JSON file with ParserSettings overrides (keyword lists etc.)
SETTINGS_FILE: str = os.getenv("CV_INGEST_SETTINGS_FILE", "")

# Upload limits: enforced by callers via services.upload_validator, never by the pipeline
MAX_FILE_SIZE_BYTES: int = 10 * 1024 * 1024
ALLOWED_EXTENSIONS: tuple = (".pdf", ".docx", ".doc", ".txt")
EXTENSION_MIME_TYPES: dict = {
    ".pdf": ("application/pdf",),
    ".docx": ("application/vnd.openxmlformats-officedocument.wordprocessingml.document",),
    ".doc": ("application/msword",),
    ".txt": ("text/plain",),
}

# Centralized heuristic tables (extensible: every entry can be overridden through ParserSettings).
# Organization / job-title words: a name candidate containing one is penalised.
JOB_TITLE_KEYWORDS: tuple = (
    "Marketing", "Communication", "Consultant", "Manager", "Director", "Specialist",
    "Coordinator", "Assistant", "Analyst", "Attendant", "Professional", "Center",
    "Centers", "University", "College", "Corporation", "Company", "Museum", "Art",
    "Pacifica", "California", "Thousand", "Oaks", "Gallery", "Communications",
    "Sprout", "Social", "Microsoft", "Adobe", "SharePoint", "Mailchimp", "Constant",
    "Contact", "Blackbaud", "eTapestry", "Creative", "Suite", "Office", "LinkedIn",
    "Software", "Technologies", "Solutions", "Services", "Systems", "Platform",
    "Application", "Digital", "Media", "Network", "Online", "Web", "Internet",
)

# Words that can never be part of a person's name.
NON_NAME_KEYWORDS: tuple = (
    "Manager", "LLC", "BSc", "MSc", "PhD", "Experience", "Resume", "CV",
    "Curriculum", "Vitae", "Education", "Skills", "Work", "History",
    "Employment", "Position", "Role", "Title", "Department", "Inc",
    "Corporation", "Company", "Ltd", "Limited", "Consulting", "Services",
    "Social", "Media", "Software", "Platform", "Application", "System",
    "Digital", "Online", "Web", "Internet", "Technology", "Tech",
    "Solutions", "Network", "Cloud", "Database", "Analytics", "Tools",
    "Sprout", "Mailchimp", "Constant", "Contact", "SharePoint", "Adobe",
    "Microsoft", "Office", "Suite", "Creative", "LinkedIn", "Facebook",
    "Twitter", "Instagram", "YouTube", "Google",
)

# Lowercase particles allowed inside a name ("Ludwig van Beethoven").
NAME_PARTICLES: tuple = ("de", "van", "von", "la", "le", "du", "da", "del", "della")

# A line ending in one of these is a job-title candidate.
ROLE_KEYWORDS: tuple = (
    "Consultant", "Manager", "Director", "Specialist", "Coordinator", "Assistant",
    "Analyst", "Attendant", "Engineer", "Developer", "Officer", "Executive",
    "Administrator", "Designer", "Supervisor", "Advisor", "Associate", "Intern",
)

# A line containing one of these is an employer.
COMPANY_KEYWORDS: tuple = (
    "Center", "Centers", "Centre", "Centres", "Museum", "Corp", "Corporation", "Company",
    "Inc", "LLC", "Ltd", "Limited", "Plc", "Foundation", "Association", "University",
    "College", "Group", "Agency", "Trust", "Charity", "Council", "Hospital", "Institute",
)

# Fixed skill vocabulary scanned across the whole document.
SKILL_VOCABULARY: tuple = (
    "Microsoft Office", "Adobe Creative Suite", "SharePoint", "Mailchimp",
    "Sprout Social", "Constant Contact", "Blackbaud eTapestry", "HIPAA",
    "Content Management", "Project Management", "Social Media", "CRM",
    "Digital Filing", "Newsletter", "Blog", "Website Content",
    "Excel", "PowerPoint", "Salesforce", "HubSpot", "WordPress", "Canva",
    "Photoshop", "InDesign", "Google Analytics", "SQL", "Python",
)

# Known extraction truncation artifacts: (regex, replacement), applied in order.
# Fitted on real documents; kept as a compatibility table, not a general rule.
TRUNCATION_REPAIRS: tuple = (
    (r"Responsible for the dDrafting", "Responsible for drafting"),
    (r"dDrafting", "Drafting"),
    (r"Manage and maintainaintain", "Manage and maintain"),
    (r"maintainaintain", "maintain"),
    (r"(?i)\braft[ \t]+(edit|editing|written)\b", r"Draft \1"),
    (r"\bM[ \t]+((?i:organized|manage|maintaining))\b", r"Manage \1"),
    (r"(?i)\brovide\b", "Provide"),
    (r"(?i)\bevelop\b", "Develop"),
    (r"(?i)\bssist\b", "Assist"),
    (r"(?i)\boordinate\b", "Coordinate"),
)
