"""Tests for input loading and validation."""

import pytest

from ai_pr_review.config import (
    INPUT_DEFAULTS,
    input_env_name,
    parse_configuration,
    parse_exclude_patterns,
    parse_float,
    parse_int,
    read_inputs,
    require_secrets,
    validate_inputs,
)
from ai_pr_review.errors import ConfigurationError, InputRangeError


class TestValidateInputs:
    """Tests for numeric range validation."""

    @pytest.mark.parametrize("value", ["1", "4096", "32768"])
    def test_max_tokens_in_range(self, valid_inputs, value):
        valid_inputs["max_tokens"] = value
        validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["0", "-1", "32769", "40000", "abc", ""])
    def test_max_tokens_out_of_range(self, valid_inputs, value):
        valid_inputs["max_tokens"] = value
        with pytest.raises(InputRangeError) as exc_info:
            validate_inputs(valid_inputs)
        assert exc_info.value.field == "max_tokens"
        assert "`max_tokens`" in str(exc_info.value)
        assert "32768" in str(exc_info.value)

    @pytest.mark.parametrize("value", ["0", "0.0", "1.5", "2"])
    def test_temperature_in_range(self, valid_inputs, value):
        valid_inputs["temperature"] = value
        validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["-0.1", "2.01", "nope"])
    def test_temperature_out_of_range(self, valid_inputs, value):
        valid_inputs["temperature"] = value
        with pytest.raises(InputRangeError, match="temperature"):
            validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["0", "5"])
    def test_retries_in_range(self, valid_inputs, value):
        valid_inputs["retries"] = value
        validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["-1", "6", "many"])
    def test_retries_out_of_range(self, valid_inputs, value):
        valid_inputs["retries"] = value
        with pytest.raises(InputRangeError, match="retries"):
            validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["1", "600", "", "soon"])
    def test_timeout_in_range_or_absent(self, valid_inputs, value):
        """An absent or unparseable timeout is tolerated."""
        valid_inputs["request_timeout_seconds"] = value
        validate_inputs(valid_inputs)

    @pytest.mark.parametrize("value", ["0", "601"])
    def test_timeout_out_of_range(self, valid_inputs, value):
        valid_inputs["request_timeout_seconds"] = value
        with pytest.raises(InputRangeError, match="request_timeout_seconds"):
            validate_inputs(valid_inputs)

    def test_stops_at_first_violation(self, valid_inputs):
        valid_inputs["max_tokens"] = "0"
        valid_inputs["retries"] = "9"
        with pytest.raises(InputRangeError) as exc_info:
            validate_inputs(valid_inputs)
        assert exc_info.value.field == "max_tokens"

    def test_range_error_is_value_error(self, valid_inputs):
        valid_inputs["retries"] = "9"
        with pytest.raises(ValueError):
            validate_inputs(valid_inputs)


class TestParsing:
    """Tests for the lenient number parsers."""

    def test_parse_int_uses_leading_digits(self):
        assert parse_int("12abc") == 12
        assert parse_int(" 7 ") == 7
        assert parse_int("abc") is None
        assert parse_int(None) is None

    def test_parse_float(self):
        assert parse_float("0.5x") == 0.5
        assert parse_float(".25") == 0.25
        assert parse_float("1e-1") == 0.1
        assert parse_float("") is None

    def test_exclude_patterns_drop_empty_entries(self):
        assert parse_exclude_patterns("*.lock, dist/*, ,") == frozenset({"*.lock", "dist/*"})
        assert parse_exclude_patterns("") == frozenset()


class TestParseConfiguration:
    """Tests for building the Configuration."""

    def test_builds_configuration(self, valid_inputs):
        config = parse_configuration(valid_inputs)

        assert config.model == "google/gemini-2.5-pro"
        assert config.max_tokens == 4096
        assert config.temperature == 0.3
        assert config.retries == 3
        assert config.request_timeout_seconds == 120
        assert config.timeout_ms == 120000
        assert config.exclude_patterns == frozenset({"*.lock", "dist/*"})
        assert config.custom_rules_path is None
        assert config.post_comment is True

    @pytest.mark.parametrize("value,expected", [("TRUE", True), ("True", True), ("false", False), ("yes", False)])
    def test_post_comment_matches_true_case_insensitively(self, valid_inputs, value, expected):
        valid_inputs["post_comment"] = value
        assert parse_configuration(valid_inputs).post_comment is expected

    def test_unparseable_timeout_is_none(self, valid_inputs):
        valid_inputs["request_timeout_seconds"] = ""
        config = parse_configuration(valid_inputs)
        assert config.request_timeout_seconds is None
        assert config.timeout_ms is None

    def test_custom_rules_path(self, valid_inputs):
        valid_inputs["custom_review_rules"] = ".github/review-rules.yml"
        assert parse_configuration(valid_inputs).custom_rules_path == ".github/review-rules.yml"

    def test_invalid_input_raises(self, valid_inputs):
        valid_inputs["max_tokens"] = "40000"
        with pytest.raises(InputRangeError, match="max_tokens"):
            parse_configuration(valid_inputs)


class TestSecrets:
    """Tests for required secrets."""

    def test_returns_secrets(self, valid_inputs):
        secrets = require_secrets(valid_inputs)
        assert secrets.github_token == "ghs_test"
        assert secrets.openrouter_api_key == "sk-or-test"

    def test_secrets_hidden_from_repr(self, valid_inputs):
        assert "sk-or-test" not in repr(require_secrets(valid_inputs))

    @pytest.mark.parametrize("name", ["github_token", "openrouter_api_key"])
    def test_missing_secret(self, valid_inputs, name):
        valid_inputs[name] = "  "
        with pytest.raises(ConfigurationError, match=name):
            require_secrets(valid_inputs)


class TestReadInputs:
    """Tests for reading inputs from the environment."""

    def test_env_name(self):
        assert input_env_name("max_tokens") == "INPUT_MAX_TOKENS"
        assert input_env_name("post comment") == "INPUT_POST_COMMENT"

    def test_reads_and_defaults(self):
        environ = {
            "INPUT_GITHUB_TOKEN": " ghs_abc ",
            "INPUT_MODEL": "anthropic/claude-sonnet-4",
            "INPUT_MAX_TOKENS": "",
        }
        inputs = read_inputs(environ)

        assert inputs["github_token"] == "ghs_abc"
        assert inputs["openrouter_api_key"] == ""
        assert inputs["model"] == "anthropic/claude-sonnet-4"
        assert inputs["max_tokens"] == INPUT_DEFAULTS["max_tokens"]
        assert inputs["post_comment"] == "true"
