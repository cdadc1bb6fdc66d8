"""Shell completion scripts for the ``rustline`` command."""

from __future__ import annotations

import enum
import os
from pathlib import Path

PROGRAM = "rustline"

_SUBCOMMANDS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("check", "Validate pipeline syntax using rust-script", ("--cargo-output",)),
    ("lint", "Analyze pipeline for best practices", ("--format", "--severity", "--suggestions")),
    ("doc", "Generate documentation from pipeline comments", ("--output", "--format")),
    ("export", "Export pipeline to CI/CD formats", ("--format", "--output", "--name")),
    ("completions", "Generate shell completions", ("--output",)),
)
_GLOBAL_OPTIONS = ("-h", "--help", "-V", "--version")


class Shell(enum.Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
    ELVISH = "elvish"


def _names() -> list[str]:
    return [name for name, _, _ in _SUBCOMMANDS]


def _bash() -> str:
    top = " ".join([*_names(), *_GLOBAL_OPTIONS])
    lines = [
        f"_{PROGRAM}() {{",
        "    local cur cmd opts",
        "    COMPREPLY=()",
        '    cur="${COMP_WORDS[COMP_CWORD]}"',
        '    cmd="${COMP_WORDS[1]}"',
        "",
        "    if [[ ${COMP_CWORD} -eq 1 ]]; then",
        f'        COMPREPLY=( $(compgen -W "{top}" -- "${{cur}}") )',
        "        return 0",
        "    fi",
        "",
        '    case "${cmd}" in',
    ]
    for name, _, options in _SUBCOMMANDS:
        lines += [
            f"        {name})",
            f'            opts="{" ".join((*options, "--help"))}"',
            "            ;;",
        ]
    lines += [
        "        *)",
        '            opts=""',
        "            ;;",
        "    esac",
        "",
        "    if [[ ${cur} == -* ]]; then",
        '        COMPREPLY=( $(compgen -W "${opts}" -- "${cur}") )',
        "        return 0",
        "    fi",
        '    COMPREPLY=( $(compgen -f -- "${cur}") )',
        "}",
        "",
        f"complete -F _{PROGRAM} -o bashdefault -o default {PROGRAM}",
        "",
    ]
    return "\n".join(lines)


def _zsh() -> str:
    lines = [f"#compdef {PROGRAM}", "", f"_{PROGRAM}() {{", "    local -a commands", "    commands=("]
    lines += [f"        '{name}:{description}'" for name, description, _ in _SUBCOMMANDS]
    lines += [
        "    )",
        "    _arguments -C \\",
        "        '(-h --help)'{-h,--help}'[Print help]' \\",
        "        '(-V --version)'{-V,--version}'[Print version]' \\",
        "        '1: :->command' \\",
        "        '*:: :->args'",
        "    case $state in",
        "        command)",
        f"            _describe -t commands '{PROGRAM} commands' commands",
        "            ;;",
        "        args)",
        "            _files",
        "            ;;",
        "    esac",
        "}",
        "",
        f'_{PROGRAM} "$@"',
        "",
    ]
    return "\n".join(lines)


def _fish() -> str:
    lines = [
        f"complete -c {PROGRAM} -s h -l help -d 'Print help'",
        f"complete -c {PROGRAM} -s V -l version -d 'Print version'",
    ]
    for name, description, options in _SUBCOMMANDS:
        lines.append(
            f'complete -c {PROGRAM} -n "__fish_use_subcommand" -f -a {name} -d \'{description}\''
        )
        lines += [
            f'complete -c {PROGRAM} -n "__fish_seen_subcommand_from {name}" -l {option[2:]}'
            for option in options
        ]
    lines.append("")
    return "\n".join(lines)


def _powershell() -> str:
    words = ", ".join(f"'{word}'" for word in [*_names(), *_GLOBAL_OPTIONS])
    lines = [
        f"Register-ArgumentCompleter -Native -CommandName '{PROGRAM}' -ScriptBlock {{",
        "    param($wordToComplete, $commandAst, $cursorPosition)",
        f"    $commands = @({words})",
        '    $commands | Where-Object { $_ -like "$wordToComplete*" } | ForEach-Object {',
        "        [System.Management.Automation.CompletionResult]::new($_, $_, 'ParameterValue', $_)",
        "    }",
        "}",
        "",
    ]
    return "\n".join(lines)


def _elvish() -> str:
    words = " ".join([*_names(), *_GLOBAL_OPTIONS])
    lines = [
        f"set edit:completion:arg-completer[{PROGRAM}] = {{|@words|",
        "    if (== (count $words) 2) {",
        f"        put {words}",
        "    }",
        "}",
        "",
    ]
    return "\n".join(lines)


_GENERATORS = {
    Shell.BASH: _bash,
    Shell.ZSH: _zsh,
    Shell.FISH: _fish,
    Shell.POWERSHELL: _powershell,
    Shell.ELVISH: _elvish,
}


def generate_completions(shell: Shell) -> str:
    """Return the completion script for ``shell``."""
    return _GENERATORS[shell]()


def save_completions(completions: str, output_path: str | os.PathLike[str]) -> None:
    with open(output_path, "w", encoding="utf-8", newline="") as handle:
        handle.write(completions)


def default_completions_path(shell: Shell) -> Path:
    """Conventional install location for the shell's completion script.

    Creates the completion directory for zsh and fish. Raises RuntimeError
    if HOME is not set.
    """
    home = os.environ.get("HOME")
    if home is None:
        raise RuntimeError("HOME environment variable not set")
    base = Path(home)
    if shell is Shell.BASH:
        return base / ".bash_completion.d" / PROGRAM
    if shell is Shell.ZSH:
        directory = base / ".zsh" / "completion"
        directory.mkdir(parents=True, exist_ok=True)
        return directory / f"_{PROGRAM}"
    if shell is Shell.FISH:
        directory = base / ".config" / "fish" / "completions"
        directory.mkdir(parents=True, exist_ok=True)
        return directory / f"{PROGRAM}.fish"
    if shell is Shell.POWERSHELL:
        return base / "Documents" / "PowerShell" / "Microsoft.PowerShell_profile.ps1"
    if shell is Shell.ELVISH:
        return base / ".elvish" / "rc.elv"
    raise ValueError(f"Unsupported shell: {shell}")


def list_available_shells() -> list[tuple[Shell, str, str]]:
    """Supported shells with their command-line names and descriptions."""
    return [
        (Shell.BASH, "bash", "Bash (most Linux/macOS systems)"),
        (Shell.ZSH, "zsh", "Zsh (popular on macOS)"),
        (Shell.FISH, "fish", "Fish (user-friendly shell)"),
        (Shell.POWERSHELL, "powershell", "PowerShell (Windows/multi-platform)"),
        (Shell.ELVISH, "elvish", "Elvish (experimental shell)"),
    ]