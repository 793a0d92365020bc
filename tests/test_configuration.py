"""Tests for settings, configuration manager, exceptions and shared utilities."""
import json
import logging

import pytest

from holdfix.shared.configuration import config_manager
from holdfix.shared.configuration.config_manager import ConfigManager, get_config, initialize_config
from holdfix.shared.configuration.settings import (
    ApplicationSettings, ClassificationSettings, LoggingSettings, RepairSettings, WirelengthSettings
)
from holdfix.shared.exceptions import (
    ConfigurationError, DesignLoadError, HoldFixException, ModelCorruptionError, NetModelError,
    RoutingError, ValidationError
)
from holdfix.shared.utils.logging_utils import REPAIR_LOGGERS, get_context_logger, setup_logging
from holdfix.shared.utils.performance_utils import PhaseTracker, timing_context
from holdfix.shared.utils.validation_utils import validate_threshold, validate_top_k


class TestSettings:
    """Defaults and validation of settings dataclasses."""

    def test_defaults(self):
        settings = ApplicationSettings()

        assert settings.wirelength.length_weight == 10
        assert settings.wirelength.zero_length_floor == 3
        assert settings.wirelength.skip_source_patterns == ["CLK", "BUFG"]
        assert settings.classification.top_k == 10
        assert settings.repair.min_wire_length == 100
        assert settings.repair.restore_on_failure is True
        assert not any(settings.validate().values())

    def test_invalid_values_reported_per_category(self):
        settings = ApplicationSettings(
            wirelength=WirelengthSettings(length_weight=0),
            classification=ClassificationSettings(skew_axis="diagonal"),
            repair=RepairSettings(max_attempts_per_connection=0),
            logging=LoggingSettings(level="LOUD"),
        )

        errors = settings.validate()

        assert len(errors["wirelength"]) == 1
        assert len(errors["classification"]) == 1
        assert len(errors["repair"]) == 1
        assert len(errors["logging"]) == 1


class TestConfigManager:
    """JSON load and save."""

    def test_missing_file_uses_defaults(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.json")

        assert manager.get_settings().repair.min_wire_length == 100
        assert not manager.get_config_info()["config_exists"]

    def test_load_partial_file(self, tmp_path):
        path = tmp_path / "holdfix.json"
        path.write_text(json.dumps({
            "repair": {"min_wire_length": 120, "restore_on_failure": False},
            "classification": {"skew_axis": "row"},
        }))

        settings = ConfigManager(path).get_settings()

        assert settings.repair.min_wire_length == 120
        assert settings.repair.restore_on_failure is False
        assert settings.repair.max_attempts_per_connection == 32
        assert settings.classification.skew_axis == "row"

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "out" / "holdfix.json"
        manager = ConfigManager(path)
        manager.update_wirelength_settings(length_weight=7)
        manager.update_repair_settings(max_connections=5)

        assert manager.save()
        reloaded = ConfigManager(path).get_settings()

        assert reloaded.wirelength.length_weight == 7
        assert reloaded.repair.max_connections == 5

    def test_create_if_missing(self, tmp_path):
        path = tmp_path / "fresh.json"
        ConfigManager(path, create_if_missing=True)
        assert path.exists()

    def test_broken_json_is_not_loaded(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        manager = ConfigManager(path)

        assert not manager.load()
        assert manager.get_settings().repair.min_wire_length == 100

    def test_validate_or_raise(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.json")
        manager.update_classification_settings(top_k=-2)

        with pytest.raises(ConfigurationError) as exc_info:
            manager.validate_or_raise()

        assert exc_info.value.error_code == "CONFIG_INVALID"
        assert "classification" in exc_info.value.details

    def test_reset_category(self, tmp_path):
        manager = ConfigManager(tmp_path / "absent.json")
        manager.update_repair_settings(min_wire_length=5)
        manager.update_wirelength_settings(length_weight=4)
        manager.reset_category_to_defaults("repair")

        assert manager.get_settings().repair.min_wire_length == 100
        assert manager.get_settings().wirelength.length_weight == 4

        manager.reset_to_defaults()
        assert manager.get_settings().wirelength.length_weight == 10

    def test_global_config(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_manager, "_config_manager", None)
        path = tmp_path / "global.json"
        path.write_text(json.dumps({"repair": {"min_wire_length": 90}}))

        manager = initialize_config(path)

        assert get_config() is manager
        assert get_config().get_settings().repair.min_wire_length == 90


class TestExceptions:
    """Exception taxonomy."""

    def test_error_code_in_message(self):
        assert str(HoldFixException("bad", error_code="E1")) == "[E1] bad"
        assert str(HoldFixException("bad")) == "bad"

    def test_hierarchy(self):
        assert issubclass(NetModelError, ConfigurationError)
        assert issubclass(ModelCorruptionError, RoutingError)
        assert issubclass(DesignLoadError, HoldFixException)
        assert issubclass(ValidationError, HoldFixException)

    def test_context_fields(self):
        error = ModelCorruptionError("unknown node", net_id="n1", node_id="INT/X")
        assert error.net_id == "n1"
        assert error.node_id == "INT/X"
        assert DesignLoadError("unreadable", file_path="d.json").file_path == "d.json"

    def test_default_codes(self):
        assert ValidationError("bad").error_code == "INVALID_VALUE"
        assert str(NetModelError("no alternate source")) == "[NET_MODEL] no alternate source"
        assert ConfigurationError("x", error_code="CONFIG_MISSING").error_code == "CONFIG_MISSING"

    def test_to_dict_carries_design_location(self):
        error = ModelCorruptionError("unknown node", net_id="n1", node_id="INT/X")

        assert error.to_dict() == {
            "error": "ModelCorruptionError",
            "code": "MODEL_CORRUPTION",
            "message": "unknown node",
            "net_id": "n1",
            "node_id": "INT/X",
        }
        assert "details" not in error.to_dict()
        assert ValidationError("bad", field="top_k", value=-1).to_dict()["value"] == -1


class TestUtils:
    """Validation, logging and timing helpers."""

    @pytest.mark.parametrize("value", [-1, "100", None, True])
    def test_invalid_thresholds(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_threshold(value)
        assert exc_info.value.field == "threshold"

    def test_valid_threshold_and_top_k(self):
        validate_threshold(0)
        validate_threshold(100)
        validate_top_k(0)

    def test_context_logger_prefix(self, caplog):
        log = get_context_logger("holdfix.test", net="n1", sink="S.A1")
        with caplog.at_level(logging.INFO, logger="holdfix.test"):
            log.info("hello")

        assert "[net=n1 sink=S.A1] hello" in caplog.text
        assert caplog.records[-1].filename == "test_configuration.py"

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "holdfix.log"
        settings = LoggingSettings(level="DEBUG", console_output=False, file_output=True,
                                   log_file=str(log_file), component_levels={"holdfix.noisy": "ERROR"})
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging(settings)
            logging.getLogger("holdfix.test").info("written")
            for handler in root.handlers:
                handler.flush()

            assert "written" in log_file.read_text()
            assert logging.getLogger("holdfix.noisy").level == logging.ERROR
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            logging.getLogger("holdfix.noisy").setLevel(logging.NOTSET)

    def test_repair_trace_lowers_repair_loggers(self):
        settings = LoggingSettings(console_output=False, repair_trace=True,
                                   component_levels={"holdfix.infrastructure.routing.maze_router": "WARNING"})
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging(settings)

            assert root.level == logging.INFO
            assert logging.getLogger("holdfix.domain.services.repair_scheduler").level == logging.DEBUG
            assert logging.getLogger("holdfix.domain.services.wirelength").level == logging.DEBUG
            assert logging.getLogger("holdfix.infrastructure.routing.maze_router").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
            for name in REPAIR_LOGGERS:
                logging.getLogger(name).setLevel(logging.NOTSET)

    def test_timing_context_fills_stats(self):
        with timing_context("phase") as stats:
            sum(range(1000))

        assert stats["elapsed_s"] >= 0
        assert "rss_delta_mb" in stats

    def test_phase_tracker(self):
        tracker = PhaseTracker("run")
        tracker.start("a").start("b").stop()

        assert list(tracker.summary()) == ["a", "b"]
        assert tracker.total_s >= 0
