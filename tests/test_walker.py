#!/usr/bin/env python3
"""
Tests for tersegrep/search/walker.py - ignore rules, filters and path display.
"""
import os
from pathlib import Path

import pytest

from tersegrep.search.walker import (
    display_path,
    is_supported_text_file,
    iter_candidate_files,
    looks_binary,
    matches_file_type,
)

pytestmark = pytest.mark.unit


def _rel(root, paths):
    return sorted(p.relative_to(root).as_posix() for p in paths)


def test_matches_file_type_aliases():
    p = Path("src/app.tsx")
    assert matches_file_type(p, "ts")
    assert matches_file_type(p, "typescript")
    assert matches_file_type(p, ".TS")
    assert not matches_file_type(p, "rust")
    assert matches_file_type(Path("lib.hpp"), "c++")
    assert matches_file_type(Path("notes.mdx"), "markdown")
    assert matches_file_type(Path("deploy.yaml"), "yaml")
    assert not matches_file_type(Path("deploy.yml"), "yaml")
    assert matches_file_type(Path("anything.bin"), "")


def test_blocked_extensions():
    assert not is_supported_text_file(Path("logo.PNG"))
    assert not is_supported_text_file(Path("Cargo.lock"))
    assert not is_supported_text_file(Path("mod.wasm"))
    assert is_supported_text_file(Path("main.rs"))
    assert is_supported_text_file(Path("Makefile"))


def test_looks_binary_only_checks_prefix():
    assert looks_binary(b"abc\x00def")
    assert not looks_binary(b"plain text")
    assert not looks_binary(b"a" * 5000 + b"\x00")


def test_walk_skips_hidden_and_blocked(tmp_path):
    (tmp_path / ".hidden").mkdir()
    (tmp_path / ".hidden" / "a.py").write_text("x\n")
    (tmp_path / ".env").write_text("x\n")
    (tmp_path / "pic.png").write_bytes(b"\x89PNG")
    (tmp_path / "keep.py").write_text("x\n")
    assert _rel(tmp_path, iter_candidate_files(tmp_path)) == ["keep.py"]


def test_walk_honours_gitignore_at_each_level(tmp_path):
    (tmp_path / ".gitignore").write_text("build/\n*.log\n")
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.py").write_text("x\n")
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / ".gitignore").write_text("generated.py\n")
    (tmp_path / "pkg" / "generated.py").write_text("x\n")
    (tmp_path / "pkg" / "real.py").write_text("x\n")
    (tmp_path / "pkg" / "trace.log").write_text("x\n")
    (tmp_path / "generated.py").write_text("x\n")

    assert _rel(tmp_path, iter_candidate_files(tmp_path)) == ["generated.py", "pkg/real.py"]


def test_walk_honours_ignore_file_and_negation(tmp_path):
    (tmp_path / ".ignore").write_text("*.txt\n!keep.txt\n")
    (tmp_path / "drop.txt").write_text("x\n")
    (tmp_path / "keep.txt").write_text("x\n")
    assert _rel(tmp_path, iter_candidate_files(tmp_path)) == ["keep.txt"]


def test_walk_honours_repo_exclude_and_global_ignore(tmp_path, tmp_path_factory, monkeypatch):
    info = tmp_path / ".git" / "info"
    info.mkdir(parents=True)
    (info / "exclude").write_text("secret.py\n")
    config = tmp_path_factory.mktemp("xdg")
    (config / "git").mkdir(parents=True)
    (config / "git" / "ignore").write_text("*.tmp.py\n")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config))

    (tmp_path / "secret.py").write_text("x\n")
    (tmp_path / "scratch.tmp.py").write_text("x\n")
    (tmp_path / "main.py").write_text("x\n")
    assert _rel(tmp_path, iter_candidate_files(tmp_path)) == ["main.py"]


def test_walk_from_subdirectory_uses_repository_rules(tmp_path):
    repo = tmp_path / "repo"
    (repo / ".git" / "info").mkdir(parents=True)
    (repo / ".git" / "info" / "exclude").write_text("local.py\n")
    (repo / ".gitignore").write_text("generated/\nsecret.py\n/top_only.py\n")
    src = repo / "src"
    (src / "generated").mkdir(parents=True)
    (src / "generated" / "gen.py").write_text("x\n")
    (src / ".ignore").write_text("")
    for name in ("local.py", "main.py", "secret.py", "top_only.py"):
        (src / name).write_text("x\n")

    assert _rel(src, iter_candidate_files(src)) == ["main.py", "top_only.py"]


def test_anchored_parent_rule_is_relative_to_its_directory(tmp_path):
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".gitignore").write_text("/src/build/\n")
    src = repo / "src"
    (src / "build").mkdir(parents=True)
    (src / "build" / "out.py").write_text("x\n")
    (src / "app.py").write_text("x\n")

    assert _rel(src, iter_candidate_files(src)) == ["app.py"]


def test_walk_type_filter(tmp_path):
    (tmp_path / "app.tsx").write_text("x\n")
    (tmp_path / "app.py").write_text("x\n")
    assert _rel(tmp_path, iter_candidate_files(tmp_path, "ts")) == ["app.tsx"]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_walk_does_not_follow_symlinks(tmp_path):
    (tmp_path / "real.py").write_text("x\n")
    try:
        os.symlink(tmp_path / "real.py", tmp_path / "link.py")
    except OSError:
        pytest.skip("cannot create symlinks here")
    assert _rel(tmp_path, iter_candidate_files(tmp_path)) == ["real.py"]


def test_walk_single_file_root(tmp_path):
    f = tmp_path / "one.py"
    f.write_text("x\n")
    assert list(iter_candidate_files(f)) == [f]
    assert list(iter_candidate_files(f, "rust")) == []


def test_display_path(tmp_path):
    f = tmp_path / "src" / "auth.rs"
    f.parent.mkdir()
    f.write_text("x\n")
    assert display_path(f, tmp_path) == "src/auth.rs"
    assert display_path(f, f) == "auth.rs"
    assert display_path(Path("./src/auth.rs"), Path(".")) == "src/auth.rs"
