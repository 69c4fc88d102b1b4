"""Tests for base exception classes and the error code registry."""

import pytest

from mission_engine.exceptions import (
    ConfigInvalidError,
    ConfigurationError,
    MissionEngineError,
    MissionFailedError,
    PreflightFailedError,
    SafetyAbortError,
    StateTransitionError,
    UnsupportedCommandKindError,
)


class TestMissionEngineError:
    def test_default_error_code(self):
        assert MissionEngineError("boom").error_code == "INTERNAL_ERROR"

    def test_message_and_context(self):
        error = MissionEngineError("boom", context={"command_id": 3})
        assert error.message == "boom"
        assert error.context == {"command_id": 3}

    def test_empty_context_by_default(self):
        assert MissionEngineError("boom").context == {}

    def test_to_dict(self):
        error = MissionEngineError("boom", context={"key": "value"})
        assert error.to_dict() == {
            "error_code": "INTERNAL_ERROR",
            "message": "boom",
            "context": {"key": "value"},
        }

    def test_to_log_dict_names_exception_type(self):
        result = SafetyAbortError("low battery").to_log_dict()
        assert result["error_code"] == "SAFETY_VIOLATION"
        assert result["exception_type"] == "SafetyAbortError"

    def test_str(self):
        assert str(MissionEngineError("boom")) == "boom"
        assert "context" in str(MissionEngineError("boom", context={"id": 1}))

    def test_repr(self):
        result = repr(ConfigInvalidError("bad file"))
        assert "ConfigInvalidError" in result
        assert "CONFIG_INVALID" in result

    def test_single_catch_block(self):
        with pytest.raises(MissionEngineError):
            raise PreflightFailedError("no battery")


class TestRegistry:
    @pytest.mark.parametrize(
        ("error_code", "error_class"),
        [
            ("STATE_TRANSITION_ERROR", StateTransitionError),
            ("CONFIGURATION_ERROR", ConfigurationError),
            ("CONFIG_INVALID", ConfigInvalidError),
            ("UNSUPPORTED_COMMAND_KIND", UnsupportedCommandKindError),
            ("MISSION_FAILED", MissionFailedError),
            ("PREFLIGHT_FAILED", PreflightFailedError),
            ("SAFETY_VIOLATION", SafetyAbortError),
        ],
    )
    def test_lookup_by_error_code(self, error_code, error_class):
        assert MissionEngineError.get_by_error_code(error_code) is error_class

    def test_unknown_code(self):
        assert MissionEngineError.get_by_error_code("NOPE") is None


class TestSubclassContext:
    def test_config_invalid_source_and_field(self):
        error = ConfigInvalidError("bad", source="missions/a.json", field="commands.0")
        assert error.context == {"source": "missions/a.json", "field": "commands.0"}

    def test_config_invalid_without_details(self):
        assert ConfigInvalidError("bad").context == {}

    def test_unsupported_kind(self):
        error = UnsupportedCommandKindError("nope", kind="FLIP", command_id=4)
        assert error.context == {"kind": "FLIP", "command_id": 4}
        assert isinstance(error, ConfigurationError)

    def test_preflight_failures(self):
        error = PreflightFailedError("failed", failures=["Mission has no commands"])
        assert error.context["failures"] == ["Mission has no commands"]
        assert isinstance(error, MissionFailedError)

    def test_safety_abort(self):
        error = SafetyAbortError("aborted", check_name="battery_level", command_id=2)
        assert error.context == {"check_name": "battery_level", "command_id": 2}

    def test_safety_abort_keeps_zero_command_id(self):
        error = SafetyAbortError("aborted", command_id=0)
        assert error.context == {"command_id": 0}
