"""Unit tests for crxforge.utils."""

from __future__ import annotations

import json

import pytest

from crxforge import utils
from crxforge.manifest.validator import ValidationIssue, ValidationResult

pytestmark = pytest.mark.unit


class TestJson:
    def test_load_json(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"a": [1, 2]}', encoding="utf-8")
        assert utils.load_json(path) == {"a": [1, 2]}

    def test_load_json_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            utils.load_json(tmp_path / "missing.json")

    def test_load_json_invalid(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{nope", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            utils.load_json(path)

    def test_dump_json_format(self):
        assert utils.dump_json({"name": "é", "n": 1}) == '{\n  "name": "é",\n  "n": 1\n}\n'


class TestOutput:
    def test_debug_hidden_by_default(self, capsys):
        utils.set_debug(False)
        utils.print_debug("secret")
        assert "secret" not in capsys.readouterr().out

    def test_debug_shown_when_enabled(self, capsys):
        utils.set_debug(True)
        try:
            utils.print_debug("visible")
        finally:
            utils.set_debug(False)
        assert "visible" in capsys.readouterr().out

    def test_validation_result_success(self, capsys):
        utils.print_validation_result(ValidationResult(valid=True), title="demo")
        assert "no problems found" in capsys.readouterr().out

    def test_validation_result_lists_every_issue(self, capsys):
        result = ValidationResult.from_issues(
            [
                ValidationIssue(field="name", message="Field required"),
                ValidationIssue(field="version", message="Version must be 1-4 dot-separated integers"),
            ]
        )
        utils.print_validation_result(result)
        out = capsys.readouterr().out
        assert "name" in out
        assert "version" in out
