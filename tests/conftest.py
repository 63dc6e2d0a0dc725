"""Shared pytest fixtures for the ElectroInit test suite.

Provides reusable fixtures for:
- Sample Electron release-feed payloads
- A mocked httpx client for the release feed
- Scaffold plans and pre-populated cache trees
- A scripted prompter that replays canned answers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from electroinit.scaffolder import ScaffoldPlan
from electroinit.utils import OSFamily


# ---------------------------------------------------------------------------
# Release feed
# ---------------------------------------------------------------------------

SAMPLE_RELEASES: list[dict[str, Any]] = [
    {"version": "31.0.0-beta.3", "node": "20.14.0"},
    {"tag_name": "v30.1.3", "node": "20.x"},
    {"version": "30.1.2", "node": "20.14.0"},
    {"version": "30.0.9", "node": "20.11.1"},
    {"version": "29.4.6", "node": "20.9.0"},
    {"version": "28.3.3", "node": "18.18.2"},
    {"version": "27.3.11", "deps": {"node": "18.17.1"}},
    {"tag_name": "v26.6.10", "node": "18.16.1"},
    {"version": "nightly", "node": "22.0.0"},
    {"version": "25.9.8"},
]


@pytest.fixture
def sample_releases() -> list[dict[str, Any]]:
    """Raw release-feed entries covering the shapes the feed can contain."""
    return [dict(entry) for entry in SAMPLE_RELEASES]


def make_feed_response(payload: Any, status_code: int = 200) -> MagicMock:
    """Build a mock httpx response returning *payload* from ``.json()``."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    return response


def make_async_client(response: MagicMock | None = None, error: Exception | None = None) -> AsyncMock:
    """Build a mock ``httpx.AsyncClient`` usable as an async context manager."""
    client = AsyncMock()
    if error is not None:
        client.get = AsyncMock(side_effect=error)
    else:
        client.get = AsyncMock(return_value=response)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


@pytest.fixture
def mock_feed(sample_releases):
    """Patch ``httpx.AsyncClient`` so the release feed returns ``sample_releases``.

    Usage:
        def test_something(mock_feed):
            with mock_feed:
                releases = await ReleaseFeedClient().fetch_releases()
    """
    client = make_async_client(make_feed_response(sample_releases))
    return patch("httpx.AsyncClient", return_value=client)


# ---------------------------------------------------------------------------
# Scaffold plans and trees
# ---------------------------------------------------------------------------


@pytest.fixture
def make_plan(tmp_path: Path):
    """Factory for ``ScaffoldPlan`` objects targeting ``tmp_path/app``."""

    def _make(**overrides: Any) -> ScaffoldPlan:
        fields: dict[str, Any] = {
            "target_dir": tmp_path / "app",
            "project_name": "app",
            "backend": "node",
            "use_mirror": False,
            "runtime_version": "30.1.2",
            "os_family": OSFamily.POSIX,
            "enable_audit": False,
        }
        fields.update(overrides)
        return ScaffoldPlan(**fields)

    return _make


@pytest.fixture
def cache_tree(tmp_path: Path) -> Path:
    """A cached scaffold with excluded top-level entries and nested lookalikes."""
    root = tmp_path / "init_src"
    (root / "src" / "frontend" / "dist").mkdir(parents=True)
    (root / "src" / "frontend" / "dist" / "index.html").write_text("<html></html>\n")
    (root / "src" / "backend").mkdir(parents=True)
    (root / "src" / "backend" / "index.js").write_text("// backend\n")
    (root / "dist").mkdir()
    (root / "dist" / "bundle.js").write_text("// build output\n")
    (root / "logs").mkdir()
    (root / "logs" / "app.log").write_text("log line\n")
    (root / ".git").mkdir()
    (root / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (root / "package.json").write_text('{"name": "init-src"}\n')
    return root


def snapshot(root: Path) -> dict[str, bytes]:
    """Map every file under *root* (POSIX relative path) to its bytes."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------


class ScriptedPrompter:
    """Prompter that answers from a queue and records every question.

    Answers are matched by a substring of the question; unmatched questions
    get their default.
    """

    def __init__(self, answers: dict[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.questions: list[str] = []

    def _lookup(self, question: str, default: Any) -> Any:
        self.questions.append(question)
        for key, value in self.answers.items():
            if key in question:
                return value
        return default

    def ask(self, question: str, default: str = "") -> str:
        return self._lookup(question, default)

    def confirm(self, question: str, default: bool = False) -> bool:
        return self._lookup(question, default)


@pytest.fixture
def scripted_prompter():
    """Factory for ``ScriptedPrompter`` instances."""
    return ScriptedPrompter
