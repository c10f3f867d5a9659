import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from cv_ingest.__main__ import EXIT_OK, EXIT_UNEXTRACTABLE, EXIT_UNREADABLE, main

SIMPLE_CV = "Jane Doe\njane.doe@example.com\n(555) 123-4567\nMarketing Manager\nABC Corp\n2019 - 2021"
REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def restore_log_streams():
    """main() points package handlers at the current stderr, which capsys closes after each test."""
    handlers = [
        handler
        for name in list(logging.root.manager.loggerDict)
        if name.startswith("cv_ingest")
        for handler in logging.getLogger(name).handlers
        if isinstance(handler, logging.StreamHandler)
    ]
    streams = [handler.stream for handler in handlers]
    yield
    for handler, stream in zip(handlers, streams):
        handler.stream = stream


def test_parses_text_file(tmp_path, capsys):
    path = tmp_path / "jane.txt"
    path.write_text(SIMPLE_CV, encoding="utf-8")
    assert main([str(path)]) == EXIT_OK
    data = json.loads(capsys.readouterr().out)
    assert data["success"] is True
    assert data["document"]["personal_info"]["email"] == "jane.doe@example.com"


def test_missing_file(tmp_path):
    assert main([str(tmp_path / "missing.pdf")]) == EXIT_UNREADABLE


def test_unextractable_file(tmp_path, capsys):
    path = tmp_path / "legacy.doc"
    path.write_bytes(b"\x00\x01\x02\x03\xff\xfe\x80" * 200)
    assert main([str(path), "--no-ocr"]) == EXIT_UNEXTRACTABLE
    assert json.loads(capsys.readouterr().out)["reason"] == "unextractable_document"


def test_threshold_and_settings_file(tmp_path, capsys):
    cv = tmp_path / "notes.txt"
    cv.write_text("\n".join(["lorem ipsum dolor"] * 12 + ["John Smith"]), encoding="utf-8")
    assert main([str(cv)]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["document"]["personal_info"]["name"] is None

    assert main([str(cv), "--threshold", "0.3"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["document"]["personal_info"]["name"] == "John Smith"

    overrides = tmp_path / "settings.json"
    overrides.write_text(json.dumps({"name_confidence_threshold": 0.3}), encoding="utf-8")
    assert main([str(cv), "--settings", str(overrides)]) == EXIT_OK
    assert json.loads(capsys.readouterr().out)["document"]["personal_info"]["name"] == "John Smith"


@pytest.mark.parametrize("threshold", ["5", "-0.1", "abc"])
def test_out_of_range_threshold_is_rejected(tmp_path, threshold):
    path = tmp_path / "jane.txt"
    path.write_text(SIMPLE_CV, encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main([str(path), "--threshold", threshold])
    assert exc.value.code == 2


def test_logs_stay_off_stdout(tmp_path):
    path = tmp_path / "jane.txt"
    path.write_text(SIMPLE_CV, encoding="utf-8")
    env = {**os.environ, "LOG_LEVEL": "INFO"}
    result = subprocess.run(
        [sys.executable, "-m", "cv_ingest", str(path)],
        capture_output=True,
        text=True,
        env=env,
        cwd=REPO_ROOT,
    )
    assert result.returncode == EXIT_OK
    assert json.loads(result.stdout)["document"]["personal_info"]["name"] == "Jane Doe"
    assert "| INFO |" in result.stderr
