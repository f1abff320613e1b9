#!/usr/bin/env python3
"""
walker.py - Candidate file enumeration for a search root.

Walks the tree top-down, pruning hidden entries and anything matched by
.gitignore/.ignore files (including those above the root, up to the
repository top), the repository exclude file or the user's global
git ignore file. Files are then filtered by an extension blacklist and an
optional file-type alias.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import pathspec

from tersegrep.config import BINARY_SNIFF_BYTES
from tersegrep.logger import get_logger

logger = get_logger(__name__)

IGNORE_FILE_NAMES = (".gitignore", ".ignore")

BLOCKED_EXTS = frozenset({
    # images / documents
    "png", "jpg", "jpeg", "gif", "webp", "ico", "pdf",
    # archives
    "zip", "gz", "tar", "7z",
    # media
    "mp3", "mp4", "mov",
    # databases
    "db", "sqlite",
    # fonts
    "woff", "woff2", "ttf", "otf",
    # lockfiles / compiled artifacts
    "lock", "jar", "class", "wasm",
})

FILE_TYPE_ALIASES: Dict[str, Tuple[str, ...]] = {
    "rust": ("rs",),
    "rs": ("rs",),
    "python": ("py",),
    "py": ("py",),
    "javascript": ("js", "jsx", "mjs", "cjs"),
    "js": ("js", "jsx", "mjs", "cjs"),
    "typescript": ("ts", "tsx"),
    "ts": ("ts", "tsx"),
    "go": ("go",),
    "java": ("java",),
    "c": ("c", "h"),
    "cpp": ("cc", "cpp", "cxx", "hpp", "hh", "hxx"),
    "c++": ("cc", "cpp", "cxx", "hpp", "hh", "hxx"),
    "markdown": ("md", "mdx"),
    "md": ("md", "mdx"),
    "json": ("json",),
}

# (directory relative to root, path of root inside the file's own directory,
#  compiled patterns); "" means the root itself
_Rule = Tuple[str, str, pathspec.PathSpec]


def file_extension(path: Path) -> str:
    return path.suffix[1:].lower() if path.suffix else ""


def is_supported_text_file(path: Path) -> bool:
    """False for extensions that are never worth reading as text."""
    return file_extension(path) not in BLOCKED_EXTS


def matches_file_type(path: Path, file_type: str) -> bool:
    """Match a path against a type filter such as "ts", "python" or "yaml".

    Known aliases expand to their extension family; anything else is
    compared to the extension directly. An empty filter matches all files.
    """
    wanted = file_type.lstrip(".").lower()
    if not wanted:
        return True
    ext = file_extension(path)
    return ext in FILE_TYPE_ALIASES.get(wanted, (wanted,))


def looks_binary(data: bytes) -> bool:
    return b"\x00" in data[:BINARY_SNIFF_BYTES]


def display_path(path: Path, root: Path) -> str:
    """Path shown to the user: relative to root, else to cwd, else as given."""
    if path == root and root.is_file():
        return root.name
    try:
        rel = path.relative_to(root)
    except ValueError:
        try:
            rel = path.resolve().relative_to(Path.cwd().resolve())
        except (ValueError, OSError):
            rel = path
    text = rel.as_posix()
    while text.startswith("./"):
        text = text[2:]
    return text


def _read_spec(path: Path) -> Optional[pathspec.PathSpec]:
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError:
        return None
    spec = pathspec.GitIgnoreSpec.from_lines(lines)
    return spec if spec.patterns else None


def _global_ignore_file() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME", "").strip()
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "git" / "ignore"


def find_repo_root(start: Path) -> Optional[Path]:
    """Nearest directory at or above start that holds a .git entry."""
    start = start.resolve()
    for candidate in (start, *start.parents):
        if (candidate / ".git").exists():
            return candidate
    return None


def _prefix(root: Path, anchor: Path) -> str:
    rel = root.relative_to(anchor).as_posix()
    return "" if rel == "." else rel


def _root_rules(root: Path) -> List[_Rule]:
    """Rules that apply before the walk starts.

    The global ignore file always applies. Inside a repository so do the
    repository's info/exclude file and the ignore files of every directory
    between the repository top and the search root, each matched relative
    to where it lives.
    """
    resolved = root.resolve()
    repo = find_repo_root(resolved)
    anchor = repo if repo is not None else resolved
    repo_prefix = _prefix(resolved, anchor)

    rules: List[_Rule] = []
    sources = [_global_ignore_file()]
    if repo is not None:
        sources.append(repo / ".git" / "info" / "exclude")
    for candidate in sources:
        if candidate.is_file():
            spec = _read_spec(candidate)
            if spec is not None:
                rules.append(("", repo_prefix, spec))

    if repo is not None and resolved != repo:
        ancestors = [d for d in resolved.parents if d == repo or repo in d.parents]
        for directory in reversed(ancestors):
            for name in IGNORE_FILE_NAMES:
                spec = _read_spec(directory / name)
                if spec is not None:
                    rules.append(("", _prefix(resolved, directory), spec))
    return rules


def _is_ignored(rules: List[_Rule], rel: str, is_dir: bool) -> bool:
    for base, prefix, spec in rules:
        if base:
            if not rel.startswith(base + "/"):
                continue
            sub = rel[len(base) + 1:]
        else:
            sub = rel
        if prefix:
            sub = f"{prefix}/{sub}"
        if spec.match_file(sub + "/" if is_dir else sub):
            return True
    return False


def iter_candidate_files(root: Path, file_type: Optional[str] = None) -> Iterator[Path]:
    """Yield searchable files under root in a stable (sorted) order.

    Hidden entries and ignored paths are pruned, symlinks are not followed,
    and directories that cannot be listed are skipped silently.
    """
    root = Path(root)
    if root.is_file():
        if is_supported_text_file(root) and (not file_type or matches_file_type(root, file_type)):
            yield root
        return

    rules_by_dir: Dict[str, List[_Rule]] = {}
    base_rules = _root_rules(root)

    def _on_error(exc: OSError) -> None:
        logger.debug(f"walk entry skipped: {exc}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        rel = os.path.relpath(dirpath, root)
        rel_dir = "" if rel in (".", "") else rel.replace(os.sep, "/")

        if rel_dir:
            parent = rel_dir.rsplit("/", 1)[0] if "/" in rel_dir else ""
            rules = list(rules_by_dir.get(parent, base_rules))
        else:
            rules = list(base_rules)
        for name in IGNORE_FILE_NAMES:
            spec = _read_spec(Path(dirpath) / name)
            if spec is not None:
                rules.append((rel_dir, "", spec))
        rules_by_dir[rel_dir] = rules

        keep = []
        for d in sorted(dirnames):
            if d.startswith("."):
                continue
            sub = f"{rel_dir}/{d}" if rel_dir else d
            if _is_ignored(rules, sub, True):
                continue
            keep.append(d)
        dirnames[:] = keep

        for f in sorted(filenames):
            if f.startswith("."):
                continue
            p = Path(dirpath) / f
            if p.is_symlink():
                continue
            sub = f"{rel_dir}/{f}" if rel_dir else f
            if _is_ignored(rules, sub, False):
                continue
            if not is_supported_text_file(p):
                continue
            if file_type and not matches_file_type(p, file_type):
                continue
            yield p
