"""Unit tests for shorthand repository references."""

from __future__ import annotations

from pathlib import Path

import pytest

from devtasks.repos import (
    RepositoryReference,
    clone_commands,
    clone_repository,
    filter_dependencies,
    parse_reference,
)


class _ShellStub:
    def __init__(self, output: str = ""):
        self.output = output
        self.commands: list[str] = []

    def __call__(self, command: str) -> str:
        self.commands.append(command)
        return self.output


def test_parse_reference_without_ref() -> None:
    assert parse_reference("ckeditor/foo") == RepositoryReference(repo_path="ckeditor/foo", ref="")


def test_parse_reference_with_ref() -> None:
    parsed = parse_reference("ckeditor/foo#v1.2")
    assert parsed == RepositoryReference(repo_path="ckeditor/foo", ref="v1.2")
    assert parsed.clone_url == "git@github.com:ckeditor/foo"


def test_parse_reference_empty_ref() -> None:
    assert parse_reference("ckeditor/foo#") == RepositoryReference(repo_path="ckeditor/foo", ref="")


@pytest.mark.parametrize("reference", ["other/foo", "ckeditor/", "^1.0.0", "", "xckeditor/foo", "ckeditor/#v1"])
def test_parse_reference_misses(reference: str) -> None:
    assert parse_reference(reference) is None


def test_clone_commands_with_ref() -> None:
    assert clone_commands("ckeditor5-foo", "ckeditor/ckeditor5-foo#v2", "/work") == [
        "cd /work",
        "git clone git@github.com:ckeditor/ckeditor5-foo ckeditor5-foo",
        "cd ckeditor5-foo",
        "git checkout v2",
    ]


def test_clone_commands_without_ref() -> None:
    assert clone_commands("ckeditor5-foo", "ckeditor/ckeditor5-foo", Path("/work")) == [
        "cd /work",
        "git clone git@github.com:ckeditor/ckeditor5-foo ckeditor5-foo",
    ]


def test_clone_commands_quotes_paths() -> None:
    commands = clone_commands("ckeditor5-foo", "ckeditor/ckeditor5-foo", "/my work")
    assert commands[0] == "cd '/my work'"


def test_clone_commands_quote_repository_path() -> None:
    assert clone_commands("ckeditor5-foo", "ckeditor/foo;touch /tmp/x", "/work")[1] == (
        "git clone 'git@github.com:ckeditor/foo;touch /tmp/x' ckeditor5-foo"
    )
    assert clone_commands("ckeditor5-foo", "ckeditor/foo\n", "/work")[1] == (
        "git clone 'git@github.com:ckeditor/foo\n' ckeditor5-foo"
    )


def test_clone_commands_clone_into_package_directory() -> None:
    assert clone_commands("ckeditor5-foo", "ckeditor/foo#v2", "/work") == [
        "cd /work",
        "git clone git@github.com:ckeditor/foo ckeditor5-foo",
        "cd ckeditor5-foo",
        "git checkout v2",
    ]


def test_clone_commands_not_ours() -> None:
    assert clone_commands("lodash", "^4.0.0", "/work") == []


def test_clone_repository_runs_single_compound_command(monkeypatch: pytest.MonkeyPatch) -> None:
    shell = _ShellStub("Cloning into 'ckeditor5-foo'...\n")
    monkeypatch.setattr("devtasks.repos.run_shell", shell)

    output = clone_repository("ckeditor5-foo", "ckeditor/ckeditor5-foo#master", "/work")

    assert output == "Cloning into 'ckeditor5-foo'...\n"
    assert shell.commands == [
        "cd /work && git clone git@github.com:ckeditor/ckeditor5-foo ckeditor5-foo && cd ckeditor5-foo && git checkout master"
    ]


def test_clone_repository_skips_foreign_reference(monkeypatch: pytest.MonkeyPatch) -> None:
    shell = _ShellStub()
    monkeypatch.setattr("devtasks.repos.run_shell", shell)

    assert clone_repository("lodash", "^4.0.0", "/work") is None
    assert shell.commands == []


def test_filter_dependencies_keeps_repository_siblings() -> None:
    assert filter_dependencies({"ckeditor5-foo": "ckeditor/foo#v2", "lodash": "^4.0.0"}) == {
        "ckeditor5-foo": "ckeditor/foo#v2"
    }


def test_filter_dependencies_requires_both_prefix_and_reference() -> None:
    dependencies = {
        "ckeditor5-core": "^0.1.0",
        "other": "ckeditor/other",
        "ckeditor5-ui": "ckeditor/ckeditor5-ui",
    }
    assert filter_dependencies(dependencies) == {"ckeditor5-ui": "ckeditor/ckeditor5-ui"}


def test_filter_dependencies_returns_none_when_nothing_matches() -> None:
    assert filter_dependencies({"lodash": "^4.0.0"}) is None
    assert filter_dependencies({}) is None
    assert filter_dependencies(None) is None


def test_filter_dependencies_preserves_order() -> None:
    dependencies = {"ckeditor5-b": "ckeditor/b", "ckeditor5-a": "ckeditor/a"}
    assert list(filter_dependencies(dependencies) or {}) == ["ckeditor5-b", "ckeditor5-a"]
