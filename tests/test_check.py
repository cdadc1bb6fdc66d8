import subprocess
from unittest import mock

import pytest

from rustline.check import CheckError, check_pipeline, is_rust_script_available

VALID_PIPELINE = """
#!/usr/bin/env rust-script
//! cargo
//! [dependencies]
//! rustline = "0.1"
//!

use rustline::prelude::*;

fn main() -> Result<(), Box<dyn std::error::Error>> {
    let pipeline = pipeline!(
        agent_any(),
        stages!(stage!("Test", steps!(sh!("echo test"))))
    );
    Ok(())
}
"""


def _completed(returncode, stdout=b"", stderr=b""):
    return subprocess.CompletedProcess([], returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def pipeline_file(tmp_path):
    path = tmp_path / "valid.rs"
    path.write_text(VALID_PIPELINE)
    return path


def test_check_pipeline_nonexistent_file():
    with pytest.raises(CheckError, match="not found"):
        check_pipeline("/nonexistent/pipeline.rs", False)


@mock.patch("subprocess.run")
def test_check_pipeline_valid_file(run, pipeline_file):
    run.return_value = _completed(0)
    assert check_pipeline(pipeline_file, False) is None
    args = run.call_args.args[0]
    assert args == ["rust-script", "--check", str(pipeline_file)]


@mock.patch("subprocess.run")
def test_check_pipeline_cargo_output_flag(run, pipeline_file):
    run.return_value = _completed(0)
    assert check_pipeline(pipeline_file, True) is None
    assert run.call_args.args[0] == [
        "rust-script",
        "--check",
        str(pipeline_file),
        "--cargo-output",
    ]


@mock.patch("subprocess.run")
def test_check_pipeline_compile_error(run, pipeline_file, capsys):
    run.return_value = _completed(1, stderr=b"error[E0425]: cannot find value")
    with pytest.raises(CheckError, match="Pipeline validation failed for"):
        check_pipeline(pipeline_file, False)
    assert "E0425" in capsys.readouterr().err


@mock.patch("subprocess.run", side_effect=FileNotFoundError("rust-script"))
def test_check_pipeline_missing_checker(run, pipeline_file):
    with pytest.raises(CheckError, match="Failed to execute rust-script --check"):
        check_pipeline(pipeline_file, False)


@mock.patch("subprocess.run")
def test_rust_script_available(run):
    run.return_value = _completed(0, stdout=b"rust-script 0.34.0\n")
    assert is_rust_script_available() is True
    assert run.call_args.args[0] == ["rust-script", "--version"]


@mock.patch("subprocess.run")
def test_rust_script_not_working(run):
    run.return_value = _completed(2)
    assert is_rust_script_available() is False


@mock.patch("subprocess.run", side_effect=FileNotFoundError("rust-script"))
def test_rust_script_cannot_start(run):
    with pytest.raises(CheckError, match="availability"):
        is_rust_script_available()