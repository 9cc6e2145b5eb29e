"""Tests for candidate selection, fallback and detection enrichment."""

import json
import logging

import pytest

from stackplan.core.config import Settings
from stackplan.detector import Candidate, Framework, MemoryProbe, detect, detect_json
from stackplan.detector.orchestrator import (
    FALLBACK_NOTE,
    confidence,
    detect_runtime_version,
    dominant_language,
    pick_best,
)


def _candidate(framework: Framework, score: float, language: str = "Python") -> Candidate:
    return Candidate(framework=framework, score=score, language=language, signals=[framework.value])


class TestPickBest:
    def test_highest_score_wins(self):
        best = pick_best([
            _candidate(Framework.FLASK, 2.0),
            _candidate(Framework.DJANGO, 7.0),
            _candidate(Framework.FASTAPI, 5.5),
        ])
        assert best.framework == Framework.DJANGO

    def test_tie_keeps_first(self):
        best = pick_best([_candidate(Framework.FLASK, 5.0), _candidate(Framework.FASTAPI, 5.0)])
        assert best.framework == Framework.FLASK

    def test_framework_displaces_generic_docker_on_tie(self):
        best = pick_best([
            _candidate(Framework.GENERIC_DOCKER, 2.0),
            _candidate(Framework.FLASK, 2.0),
        ])
        assert best.framework == Framework.FLASK

    def test_generic_docker_never_displaces_framework_on_tie(self):
        best = pick_best([
            _candidate(Framework.FLASK, 2.0),
            _candidate(Framework.GENERIC_DOCKER, 2.0),
        ])
        assert best.framework == Framework.FLASK

    def test_empty_list_raises(self):
        with pytest.raises(ValueError):
            pick_best([])


class TestConfidence:
    @pytest.mark.parametrize(
        "score,ceiling,expected",
        [(3.0, 6.0, 0.5), (7.5, 6.0, 1.0), (0.0, 6.0, 0.0), (-1.0, 6.0, 0.0)],
    )
    def test_clamped(self, score, ceiling, expected):
        assert confidence(score, ceiling) == expected

    def test_ceiling_from_settings(self):
        probe = MemoryProbe({"artisan": "", "composer.lock": ""})
        detection = detect(probe, Settings(confidence_ceiling=10.0))
        assert detection.confidence == 0.5


class TestDominantLanguage:
    def test_most_files_wins(self):
        assert dominant_language({".py": 3, ".js": 1, ".ts": 1}) == "Python"

    def test_js_and_ts_share_a_bucket(self):
        assert dominant_language({".py": 3, ".js": 2, ".tsx": 2}) == "JavaScript/TypeScript"

    def test_tie_broken_by_name(self):
        assert dominant_language({".rb": 2, ".go": 2}) == "Go"

    def test_unmapped_extensions(self):
        assert dominant_language({".md": 1}) == "Other"

    def test_empty_tree(self):
        assert dominant_language({}) == "Unknown"


class TestRuntimeVersion:
    def test_python_version_file_preferred(self):
        probe = MemoryProbe({".python-version": "3.11.7\n", "runtime.txt": "python-3.10.0"})
        assert detect_runtime_version(probe, "Python") == "3.11.7"

    def test_node_version_file(self):
        probe = MemoryProbe({".node-version": "18"})
        assert detect_runtime_version(probe, "TypeScript") == "18"

    def test_unsupported_language(self):
        assert detect_runtime_version(MemoryProbe({".nvmrc": "20"}), "Rust") == ""


class TestFallback:
    def test_unrecognised_project(self):
        detection = detect(MemoryProbe({"README.md": "# notes"}))

        assert detection.framework == "Unknown"
        assert detection.is_unknown
        assert detection.language == "Other"
        assert detection.confidence == 0.0
        assert detection.signals == ["no strong framework signals"]
        assert detection.build_plan == ["# Please provide build steps"]
        assert detection.run_plan == ["# Please provide run command"]
        assert detection.healthcheck.path == "/"
        assert detection.meta["note"] == FALLBACK_NOTE
        assert "port" not in detection.meta

    def test_empty_project(self):
        detection = detect(MemoryProbe({}))

        assert detection.framework == "Unknown"
        assert detection.language == "Unknown"

    def test_real_directory(self, tmp_path):
        (tmp_path / "notes.txt").write_text("hello")
        assert detect(tmp_path).framework == "Unknown"
        assert detect(str(tmp_path)).framework == "Unknown"

    def test_logs_result(self, caplog):
        with caplog.at_level(logging.INFO, logger="stackplan.detector.orchestrator"):
            detect(MemoryProbe({}))

        assert "Detection complete: framework=Unknown" in caplog.text


class TestDeterminism:
    def test_same_tree_same_json(self, tmp_path):
        (tmp_path / "manage.py").write_text("")
        (tmp_path / "requirements.txt").write_text("django\n")

        assert detect_json(tmp_path) == detect_json(tmp_path)

    def test_json_shape(self, tmp_path):
        (tmp_path / "artisan").write_text("")
        (tmp_path / "composer.lock").write_text("{}")

        data = json.loads(detect_json(tmp_path))

        assert list(data) == [
            "framework",
            "language",
            "confidence",
            "signals",
            "build_plan",
            "run_plan",
            "healthcheck",
            "env_schema",
            "meta",
        ]
        assert data["framework"] == "Laravel"
        assert data["healthcheck"] == {"path": "/health", "expect": 200, "timeout_seconds": 30}
        assert list(data["meta"]) == sorted(data["meta"])
