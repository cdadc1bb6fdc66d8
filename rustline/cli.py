"""Command-line entry point for the pipeline tools."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rustline import check, completions, doc, export, lint

_VERSION = "0.1.0"

_SEVERITIES = {
    "info": lint.LintSeverity.INFO,
    "warning": lint.LintSeverity.WARNING,
    "error": lint.LintSeverity.ERROR,
}
_LINT_FORMATS = {"text": lint.OutputFormat.TEXT, "json": lint.OutputFormat.JSON}
_DOC_FORMATS = {
    "markdown": doc.DocFormat.MARKDOWN,
    "json": doc.DocFormat.JSON,
    "html": doc.DocFormat.HTML,
}
_EXPORT_FORMATS = {
    "github": export.ExportFormat.GITHUB_ACTIONS,
    "gitlab": export.ExportFormat.GITLAB_CI,
    "jenkins": export.ExportFormat.JENKINSFILE,
}
_SHELLS = {
    "bash": completions.Shell.BASH,
    "zsh": completions.Shell.ZSH,
    "fish": completions.Shell.FISH,
    "power-shell": completions.Shell.POWERSHELL,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rustline", description="CLI tools for rustline pipelines"
    )
    parser.add_argument("-V", "--version", action="version", version=f"rustline {_VERSION}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("check", help="Validate pipeline syntax using rust-script")
    p.add_argument("file", type=Path, help="Pipeline file to validate")
    p.add_argument("-c", "--cargo-output", action="store_true", help="Show cargo build output")

    p = sub.add_parser("lint", help="Analyze pipeline for best practices")
    p.add_argument("file", type=Path, help="Pipeline file to lint")
    p.add_argument("-f", "--format", choices=list(_LINT_FORMATS), default="text")
    p.add_argument("-s", "--severity", choices=list(_SEVERITIES), default="info")
    p.add_argument("--suggestions", action="store_true", help="Show suggestions")

    p = sub.add_parser("doc", help="Generate documentation from pipeline comments")
    p.add_argument("file", type=Path, help="Pipeline file to document")
    p.add_argument("-o", "--output", type=Path, help="Output file (stdout if not specified)")
    p.add_argument("-f", "--format", choices=list(_DOC_FORMATS), default="markdown")

    p = sub.add_parser("export", help="Export pipeline to CI/CD formats")
    p.add_argument("file", type=Path, help="Pipeline file to export")
    p.add_argument("-f", "--format", choices=list(_EXPORT_FORMATS), required=True)
    p.add_argument("-o", "--output", type=Path, help="Output file (stdout if not specified)")
    p.add_argument("-n", "--name", help="Pipeline name (defaults to filename)")

    p = sub.add_parser("completions", help="Generate shell completions")
    p.add_argument("shell", choices=list(_SHELLS), help="Shell type")
    p.add_argument("-o", "--output", type=Path, help="Output file (stdout if not specified)")

    return parser


def _run(args: argparse.Namespace) -> None:
    if args.command == "check":
        check.check_pipeline(args.file, args.cargo_output)
    elif args.command == "lint":
        config = lint.LintConfig(
            min_severity=_SEVERITIES[args.severity],
            show_suggestions=args.suggestions,
            format=_LINT_FORMATS[args.format],
        )
        messages = lint.lint_pipeline(args.file, config)
        print(lint.format_lint_messages(messages, config.format))
    elif args.command == "doc":
        documentation = doc.generate_doc(args.file, _DOC_FORMATS[args.format])
        if args.output is not None:
            doc.save_doc(documentation, args.output)
        else:
            print(documentation)
    elif args.command == "export":
        config = export.ExportConfig(
            format=_EXPORT_FORMATS[args.format],
            output=None,
            name=args.name or args.file.stem or "pipeline",
        )
        exported = export.export_pipeline(args.file, config)
        if args.output is not None:
            export.save_export(exported, args.output)
        else:
            print(exported)
    elif args.command == "completions":
        script = completions.generate_completions(_SHELLS[args.shell])
        if args.output is not None:
            completions.save_completions(script, args.output)
        else:
            print(script)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, run the chosen command and return an exit status."""
    args = build_parser().parse_args(argv)
    try:
        _run(args)
    except (check.CheckError, OSError, ValueError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())