# rustline

Command-line tools and a small library for pipeline scripts written with
`pipeline!`, `stage!`, `steps!` and `sh!` declarations.

## Installation

```
pip install .
```

## Command line

Validate a pipeline script. This runs `rust-script --check` on the file, so
`rust-script` must be on `PATH`:

```
rustline check examples/basic.rs
rustline check --cargo-output examples/basic.rs
```

Lint a pipeline for common problems: a missing agent (P001), stages without a
timeout (P002), unreliable commands such as `git clone` or `curl` without retry
(P003), empty stages (P004), possible hard-coded passwords (P005) and missing
post-conditions (P007):

```
rustline lint pipeline.rs
rustline lint pipeline.rs --format json --severity warning
```

Generate documentation from `//! rustline:title = "..."`, `rustline:description`,
`rustline:author`, `rustline:tags` and `rustline:param` comments, plus the stages,
`sh!` steps and `environment!` names found in the script:

```
rustline doc pipeline.rs
rustline doc pipeline.rs --format html --output pipeline.html
```

Export a pipeline to another CI system (`--format` is one of `github`,
`gitlab`, `jenkins`; `--name` defaults to the file name without extension):

```
rustline export pipeline.rs --format github --name CI
rustline export pipeline.rs --format gitlab --output .gitlab-ci.yml
rustline export pipeline.rs --format jenkins --output Jenkinsfile
```

Generate shell completions (`bash`, `zsh`, `fish` or `power-shell`):

```
rustline completions bash
rustline completions zsh --output ~/.zsh/completion/_rustline
```

The command exits with status 1 and prints `Error: ...` when a file cannot be
read or validation fails.

## Library

```python
from rustline.shell import ShellCommand, expand_variables, jenkins_shell_config
from rustline.lint import LintConfig, lint_content, format_lint_messages, OutputFormat

print(expand_variables("echo ${BUILD_NUMBER}", {"BUILD_NUMBER": "42"}))  # echo 42

config = jenkins_shell_config("/tmp", "my-job", 7, "Build", None)
result = ShellCommand(config).execute("echo ${JOB_NAME}")
assert result.is_success()

with open("pipeline.rs") as handle:
    messages = lint_content(handle.read(), LintConfig())
print(format_lint_messages(messages, OutputFormat.TEXT))
```

`ShellCommand.execute` raises `CommandFailedError` on a non-zero exit and
`ShellIOError` if the shell cannot be started; `execute_with_timeout` raises
`CommandTimeoutError`. All three derive from `PipelineError`.

Other modules:

- `rustline.context`: `PipelineContext`, `HealthStatus`, `HealthState`,
  `ExecutorCapabilities`
- `rustline.temp_files`: `TempFileManager` for the `@tmp/`, `@libs/` and
  `@script@libs/` directories of a workspace (usable as a context manager that
  cleans up on exit), and `JenkinsPathResolver`
- `rustline.check`: `check_pipeline`, `is_rust_script_available`, `CheckError`
- `rustline.doc`: `parse_pipeline_doc`, `render_markdown`, `render_json`,
  `render_html`, `generate_doc`, `save_doc`
- `rustline.export`: `parse_pipeline`, `export_github_actions`,
  `export_gitlab_ci`, `export_jenkinsfile`, `export_pipeline`, `save_export`
- `rustline.completions`: `generate_completions`, `save_completions`,
  `default_completions_path`, `list_available_shells`

## What it does not do

- It does not run whole pipelines. There is no executor that walks stages,
  parallel branches, matrices, retries or post-conditions; the library only
  runs single shell commands and holds context and health types.
- Export does not analyse step bodies: every exported stage gets one generic
  shell step (`echo step`), and each stage depends on the one before it.
- Parsing is by regular expressions over the script text, not by compiling it.

## Running the tests

```
pip install .[test]
pytest
```