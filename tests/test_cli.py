from __future__ import annotations

import json

import pytest

from relevance_engine.cli import main

PRIMARY = "Sarah Johnson approved the AWS budget of $5,000 on March 3rd, 2025."
SECONDARY = "The AWS budget review happens after Sarah Johnson signs off."


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DEFAULT_STRATEGY", "OPENAI_API_KEY", "EMBEDDING_MODEL", "OBSERVABILITY_METRICS_ENABLED"):
        monkeypatch.delenv(name, raising=False)


def test_score_prints_score_and_explanation(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["score", PRIMARY, SECONDARY])

    captured = capsys.readouterr()
    assert exit_code == 0
    lines = captured.out.splitlines()
    assert lines[0] == "score=0.318 (relevant)"
    assert lines[1].startswith("Moderate relevance detected.")


def test_score_as_json(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--json", "--strategy", "entity-topic", "score", PRIMARY, SECONDARY])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert set(payload["components"]) == {"entityOverlap", "topicSimilarity"}


def test_samples_scores_every_bundled_case(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--json", "samples"])

    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert exit_code == 0
    assert [row["sample"] for row in rows] == ["high-relevance", "medium-relevance", "low-relevance"]
    assert all(0.0 <= row["score"] <= 1.0 for row in rows)


def test_blank_text_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["score", "", SECONDARY])

    captured = capsys.readouterr()
    assert exit_code == 2
    assert "Both primaryText and secondaryText are required" in captured.err


def test_semantic_without_api_key_exits_with_error(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--strategy", "semantic", "score", PRIMARY, SECONDARY])

    assert exit_code == 2
    assert "OpenAI API key is not configured" in capsys.readouterr().err


def test_options_may_follow_the_subcommand(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["score", PRIMARY, SECONDARY, "--strategy", "entity-topic", "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == 0
    assert set(payload["components"]) == {"entityOverlap", "topicSimilarity"}


def test_options_before_the_subcommand_are_kept(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["--json", "samples", "--strategy", "entity-topic"])

    rows = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert exit_code == 0
    assert all(set(row["components"]) == {"entityOverlap", "topicSimilarity"} for row in rows)
