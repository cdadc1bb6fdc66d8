from pathlib import Path

import pytest

from rustline.completions import (
    Shell,
    default_completions_path,
    generate_completions,
    list_available_shells,
    save_completions,
)


@pytest.mark.parametrize("shell", [Shell.BASH, Shell.ZSH, Shell.FISH])
def test_generate_completions(shell):
    completions = generate_completions(shell)
    assert completions
    assert "rustline" in completions


@pytest.mark.parametrize("shell", list(Shell))
def test_every_shell_completes_subcommands(shell):
    completions = generate_completions(shell)
    for name in ("check", "lint", "doc", "export", "completions"):
        assert name in completions


def test_list_available_shells():
    shells = list_available_shells()
    assert shells
    kinds = [s for s, _, _ in shells]
    assert Shell.BASH in kinds
    assert Shell.ZSH in kinds


def test_save_completions_round_trip(tmp_path: Path):
    target = tmp_path / "rustline.bash"
    script = generate_completions(Shell.BASH)
    save_completions(script, target)
    assert target.read_text(encoding="utf-8") == script


def test_default_path_bash(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert default_completions_path(Shell.BASH) == tmp_path / ".bash_completion.d" / "rustline"


def test_default_path_zsh_creates_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = default_completions_path(Shell.ZSH)
    assert path == tmp_path / ".zsh" / "completion" / "_rustline"
    assert path.parent.is_dir()


def test_default_path_fish_creates_directory(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    path = default_completions_path(Shell.FISH)
    assert path == tmp_path / ".config" / "fish" / "completions" / "rustline.fish"
    assert path.parent.is_dir()


def test_default_path_without_home(monkeypatch):
    monkeypatch.delenv("HOME", raising=False)
    with pytest.raises(RuntimeError, match="HOME"):
        default_completions_path(Shell.BASH)