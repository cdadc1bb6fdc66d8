from pathlib import Path

from rustline.export import (
    ExportConfig,
    ExportFormat,
    export_github_actions,
    export_gitlab_ci,
    export_jenkinsfile,
    export_pipeline,
    parse_pipeline,
    save_export,
)

SIMPLE = '''
use rustline::prelude::*;

fn main() -> Result<(), Box<dyn std::error::Error>> {
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

TWO_STAGES = '''
use rustline::prelude::*;

fn main() -> Result<(), Box<dyn std::error::Error>> {
    pipeline!(
        agent_any(),
        stages!(
            stage!("Build", steps!(
                sh!("cargo build --release")
            )),
            stage!("Test", steps!(
                sh!("cargo test")
            ))
        )
    )
}
'''

DOCKER = '''
use rustline::prelude::*;

fn main() -> Result<(), Box<dyn std::error::Error>> {
    pipeline!(
        agent_docker!("rust:1.70"),
        stages!(
            stage!("Build", steps!(sh!("cargo build")))
        )
    )
}
'''


def test_parse_simple_pipeline():
    pipeline = parse_pipeline(SIMPLE)
    assert len(pipeline.stages) == 1
    assert pipeline.stages[0].name == "Build"


def test_export_github_actions():
    pipeline = parse_pipeline(TWO_STAGES)
    config = ExportConfig(format=ExportFormat.GITHUB_ACTIONS, output=None, name="CI")
    output = export_github_actions(pipeline, config)
    assert "name: CI" in output
    assert "jobs:" in output
    assert "build:" in output
    assert "test:" in output
    assert "    needs: [build]\n" in output


def test_export_gitlab_ci():
    pipeline = parse_pipeline(DOCKER)
    config = ExportConfig(format=ExportFormat.GITLAB_CI, output=None, name="CI")
    output = export_gitlab_ci(pipeline, config)
    assert "stages:" in output
    assert "build:" in output
    assert "image: rust:1.70" in output


def test_agent_not_detected_without_macro_bang():
    assert parse_pipeline(SIMPLE).agent is None


def test_agent_any_with_macro():
    pipeline = parse_pipeline('pipeline!(agent_any!(), stages!())')
    assert pipeline.agent.agent_type == "any"


def test_agent_label_and_kubernetes():
    assert parse_pipeline('agent_label!("linux")').agent.label == "linux"
    k8s = parse_pipeline('agent_kubernetes!("pod")').agent
    assert k8s.agent_type == "kubernetes"
    assert k8s.label == "pod"


def test_environment_and_name_extraction():
    content = '//! rustline:name = "Nightly"\nenvironment!("RUST_LOG" => "debug")\n'
    pipeline = parse_pipeline(content)
    assert pipeline.name == "Nightly"
    assert [(e.key, e.value) for e in pipeline.environment] == [("RUST_LOG", "debug")]


def test_stage_needs_chain():
    pipeline = parse_pipeline(TWO_STAGES)
    assert pipeline.stages[0].needs == []
    assert pipeline.stages[1].needs == ["Build"]


def test_each_stage_has_generic_shell_step():
    pipeline = parse_pipeline(TWO_STAGES)
    for stage in pipeline.stages:
        assert [(s.step_type, s.command) for s in stage.steps] == [("shell", "echo step")]


def test_github_job_names_are_kebab_case():
    content = 'stage!("Unit Tests", steps!(sh!("x")))'
    config = ExportConfig(format=ExportFormat.GITHUB_ACTIONS, name="CI")
    output = export_github_actions(parse_pipeline(content), config)
    assert "  unit-tests:\n" in output


def test_gitlab_tags_for_non_docker_agent():
    content = 'agent_any!()\nstage!("Build", steps!(sh!("x")))'
    config = ExportConfig(format=ExportFormat.GITLAB_CI, name="CI")
    output = export_gitlab_ci(parse_pipeline(content), config)
    assert "  tags:\n    - rust\n" in output
    assert "    - echo step\n" in output


def test_jenkinsfile_contents():
    config = ExportConfig(format=ExportFormat.JENKINSFILE, name="CI")
    output = export_jenkinsfile(parse_pipeline(TWO_STAGES), config)
    assert output.startswith("pipeline {\n    agent any\n")
    assert "        stage('Build') {\n" in output
    assert "                sh 'echo step'\n" in output
    assert "echo 'Pipeline failed'" in output


def test_jenkinsfile_docker_agent():
    config = ExportConfig(format=ExportFormat.JENKINSFILE, name="CI")
    output = export_jenkinsfile(parse_pipeline(DOCKER), config)
    assert output.startswith("        DOCKER_IMAGE = 'rust:1.70'\n")
    assert "agent docker { image '${DOCKER_IMAGE}' }" in output


def test_export_pipeline_from_file_and_save(tmp_path: Path):
    source = tmp_path / "ci.rs"
    source.write_text(TWO_STAGES, encoding="utf-8")
    config = ExportConfig(format=ExportFormat.GITLAB_CI, name="CI")
    exported = export_pipeline(source, config)
    assert exported == export_gitlab_ci(parse_pipeline(TWO_STAGES), config)

    target = tmp_path / "out.yml"
    save_export(exported, target)
    assert target.read_text(encoding="utf-8") == exported