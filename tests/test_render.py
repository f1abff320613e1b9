#!/usr/bin/env python3
"""
Tests for tersegrep/search/render.py - text report and JSON document.
"""
import json

import pytest

from tersegrep.logger import SerializationError
from tersegrep.search.aggregate import SearchHit, Snippet
from tersegrep.search.ranking import SearchOutcome
from tersegrep.search.render import RenderMode, compact_path, render, render_json, render_text

pytestmark = pytest.mark.unit


@pytest.fixture
def outcome():
    return SearchOutcome(
        scanned_files=5,
        skipped_large=1,
        skipped_binary=2,
        hits=[
            SearchHit(
                path="src/auth.rs",
                score=10.57,
                matched_lines=3,
                snippets=[
                    Snippet([(4, "pub fn refresh_token(session: &Session) -> String {")], ("refresh", "token", "session")),
                    Snippet([(2, "pub struct Session {}")], ("session",)),
                ],
            ),
            SearchHit(
                path="src/session.rs",
                score=3.04,
                matched_lines=1,
                snippets=[Snippet([(9, "let session = load();")], ("session",))],
            ),
        ],
    )


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

def test_text_report_layout(outcome):
    text = render_text(outcome, "refresh token session", max_results=8)
    assert text == (
        "🧠 2F for 'refresh token session' (scan 5F)\n"
        "\n"
        "📄 src/auth.rs [10.6]\n"
        "     4: pub fn refresh_token(session: &Session) -> String {\n"
        "       ~ refresh, token, session\n"
        "\n"
        "     2: pub struct Session {}\n"
        "       ~ session\n"
        "\n"
        "  +1 more lines\n"
        "\n"
        "📄 src/session.rs [3.0]\n"
        "     9: let session = load();\n"
        "       ~ session\n"
        "\n"
    )


def test_compact_text_hides_terms(outcome):
    text = render_text(outcome, "q", max_results=8, compact=True)
    assert "~" not in text
    assert "     4: pub fn refresh_token" in text


def test_text_reports_cutoff(outcome):
    text = render_text(outcome, "q", max_results=1)
    assert "src/session.rs" not in text
    assert text.endswith("... +1F\n")


def test_text_zero_hits():
    assert render_text(SearchOutcome(scanned_files=3), "nothing", 8) == "🧠 0 for 'nothing'\n"


class TestCompactPath:
    def test_short_path_unchanged(self):
        assert compact_path("src/auth.rs") == "src/auth.rs"

    def test_long_deep_path_is_shortened(self):
        path = "crates/engine/src/very/deeply/nested/module/hierarchy/handlers/auth.rs"
        assert len(path) > 58
        assert compact_path(path) == "crates/.../handlers/auth.rs"

    def test_long_shallow_path_unchanged(self):
        path = "a" * 40 + "/" + "b" * 20 + "/c.rs"
        assert compact_path(path) == path


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def test_json_document(outcome):
    doc = json.loads(render_json(outcome, "refresh token session", ".", max_results=1))
    assert doc["query"] == "refresh token session"
    assert doc["path"] == "."
    assert doc["total_hits"] == 2
    assert doc["shown_hits"] == 1
    assert doc["scanned_files"] == 5
    assert doc["skipped_large"] == 1
    assert doc["skipped_binary"] == 2
    hit = doc["hits"][0]
    assert hit["path"] == "src/auth.rs"
    assert hit["score"] == pytest.approx(10.57)
    assert hit["matched_lines"] == 3
    assert hit["snippets"][0]["lines"] == [
        {"line": 4, "text": "pub fn refresh_token(session: &Session) -> String {"}
    ]
    assert hit["snippets"][0]["matched_terms"] == ["refresh", "token", "session"]


def test_json_zero_hits_is_valid():
    doc = json.loads(render_json(SearchOutcome(scanned_files=4), "q", "src", 8))
    assert doc["total_hits"] == 0
    assert doc["shown_hits"] == 0
    assert doc["hits"] == []


def test_json_keeps_unicode():
    hits = [SearchHit("ü.py", 3.0, 1, [Snippet([(1, "größe")], ("größe",))])]
    text = render_json(SearchOutcome(scanned_files=1, hits=hits), "größe", ".", 8)
    assert "größe" in text


def test_json_rejects_nan():
    hits = [SearchHit("a.py", float("nan"), 1)]
    with pytest.raises(SerializationError):
        render_json(SearchOutcome(hits=hits), "q", ".", 8)


def test_json_and_text_agree_on_order(outcome):
    doc = json.loads(render(outcome, "q", ".", 8, RenderMode.JSON))
    text = render(outcome, "q", ".", 8, RenderMode.TEXT)
    text_paths = [line.split(" ")[1] for line in text.splitlines() if line.startswith("📄")]
    assert [h["path"] for h in doc["hits"]] == text_paths


@pytest.mark.parametrize(
    "json_output,compact,mode",
    [
        (False, False, RenderMode.TEXT),
        (False, True, RenderMode.COMPACT_TEXT),
        (True, False, RenderMode.JSON),
        (True, True, RenderMode.COMPACT_JSON),
    ],
)
def test_render_mode_from_flags(json_output, compact, mode):
    assert RenderMode.from_flags(json_output, compact) is mode
