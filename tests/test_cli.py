import json
from pathlib import Path

import pytest

from rustline.cli import build_parser, main
from rustline.completions import Shell, generate_completions
from rustline.doc import generate_doc, DocFormat
from rustline.export import ExportConfig, ExportFormat, export_pipeline

EMPTY_STAGE = '''
use rustline::prelude::*;

fn main() -> Result<(), Box<dyn std::error::Error>> {
    pipeline!(
        agent_any(),
        stages!(
            stage!("Empty", steps!())
        )
    )
}
'''

DOCUMENTED = '''
//! rustline:title = "Test Pipeline"

fn main() {
    pipeline!(
        agent_any(),
        stages!(
            stage!("Build", steps!(
                sh!("cargo build")
            ))
        )
    )
}
'''


@pytest.fixture
def empty_stage_file(tmp_path: Path) -> Path:
    path = tmp_path / "empty.rs"
    path.write_text(EMPTY_STAGE, encoding="utf-8")
    return path


@pytest.fixture
def documented_file(tmp_path: Path) -> Path:
    path = tmp_path / "ci.rs"
    path.write_text(DOCUMENTED, encoding="utf-8")
    return path


def test_check_missing_file_fails(tmp_path, capsys):
    assert main(["check", str(tmp_path / "missing.rs")]) == 1
    assert "not found" in capsys.readouterr().err


def test_lint_text_reports_empty_stage(empty_stage_file, capsys):
    assert main(["lint", str(empty_stage_file)]) == 0
    assert "P004" in capsys.readouterr().out


def test_lint_json_with_error_severity(empty_stage_file, capsys):
    assert main(["lint", str(empty_stage_file), "-f", "json", "-s", "error"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data
    assert all(item["severity"] == {"severity": "error"} for item in data)


def test_doc_to_output_file(documented_file, tmp_path):
    target = tmp_path / "doc.md"
    assert main(["doc", str(documented_file), "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == generate_doc(documented_file, DocFormat.MARKDOWN)


def test_export_defaults_name_to_file_stem(documented_file, capsys):
    assert main(["export", str(documented_file), "-f", "github"]) == 0
    assert "name: ci\n" in capsys.readouterr().out


def test_export_to_output_file(documented_file, tmp_path):
    target = tmp_path / "Jenkinsfile"
    assert main(["export", str(documented_file), "-f", "jenkins", "-o", str(target), "-n", "CI"]) == 0
    expected = export_pipeline(
        documented_file, ExportConfig(format=ExportFormat.JENKINSFILE, name="CI")
    )
    assert target.read_text(encoding="utf-8") == expected


def test_completions_stdout(capsys):
    assert main(["completions", "bash"]) == 0
    assert capsys.readouterr().out == generate_completions(Shell.BASH) + "\n"


def test_completions_power_shell_to_file(tmp_path):
    target = tmp_path / "profile.ps1"
    assert main(["completions", "power-shell", "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == generate_completions(Shell.POWERSHELL)


def test_export_requires_format(documented_file):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["export", str(documented_file)])


def test_no_command_is_an_error():
    with pytest.raises(SystemExit):
        main([])


def test_lint_missing_file_fails(tmp_path):
    assert main(["lint", str(tmp_path / "nope.rs")]) == 1