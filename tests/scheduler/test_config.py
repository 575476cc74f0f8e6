"""Tests for solver settings loading."""

import json
import logging

from term_planner.scheduler.config import SolverSettings, load_settings


class TestSolverSettings:
    """Tests for SolverSettings.from_dict."""

    def test_defaults(self):
        settings = SolverSettings()
        assert settings.mip_timeout_ms == 4_900
        assert settings.hybrid_timeout_ms == 2_500
        assert settings.max_classes_for_exact == 14
        assert settings.retry_timed_out_horizons is False

    def test_camel_and_snake_keys(self):
        settings = SolverSettings.from_dict({"mipTimeoutMs": 1_000, "num_workers": 4})
        assert settings.mip_timeout_ms == 1_000
        assert settings.num_workers == 4

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = SolverSettings.from_dict({"colour": "blue"})
        assert settings == SolverSettings()
        assert "colour" in caplog.text

    def test_wrong_types_keep_defaults(self):
        settings = SolverSettings.from_dict({
            "mipTimeoutMs": "fast",
            "retryTimedOutHorizons": 1,
            "maxClassesForExact": True,
        })
        assert settings == SolverSettings()

    def test_boolean_setting(self):
        assert SolverSettings.from_dict({"logSearchProgress": True}).log_search_progress is True


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_missing_file(self, tmp_path):
        assert load_settings(tmp_path / "absent.json") == SolverSettings()

    def test_no_path(self):
        assert load_settings() == SolverSettings()

    def test_reads_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"oracleTimeoutMs": 250, "maxHorizonSliceMs": 60}))
        settings = load_settings(path)
        assert settings.oracle_timeout_ms == 250
        assert settings.max_horizon_slice_ms == 60

    def test_non_object_file(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with caplog.at_level(logging.WARNING):
            assert load_settings(path) == SolverSettings()
        assert "does not hold an object" in caplog.text
