"""Tests for the pydantic models and error types."""

import pytest
from pydantic import ValidationError

from promotion_advisor.config import Config
from promotion_advisor.errors import (
    ErrorCode,
    FileLoadError,
    SuggestionEngineError,
    is_file_load_error,
    is_suggestion_engine_error,
)
from promotion_advisor.models import (
    FileDiffResult,
    NumericRule,
    PromotionConfig,
    StopRuleSuggestion,
    StopRuleType,
    TransformSuggestion,
    VersionFormatRule,
)


def test_diff_result_accepts_camel_case_payload():
    payload = {
        "changedFiles": [{
            "path": "app.yaml",
            "rawParsedSource": {"a": 1},
            "rawParsedDest": {"a": 2},
            "processedSourceContent": {"a": 1},
            "processedDestContent": {"a": 2},
            "skipPaths": ["b"],
        }],
        "addedFiles": ["new.yaml"],
    }

    diff = FileDiffResult.model_validate(payload)

    assert diff.changed_files[0].raw_parsed_dest == {"a": 2}
    assert diff.changed_files[0].skip_paths == ["b"]
    assert diff.added_files == ["new.yaml"]
    assert diff.deleted_files == []


def test_stop_rule_discriminated_by_type():
    suggestion = StopRuleSuggestion.model_validate({
        "rule": {"type": "versionFormat", "path": "image.tag", "vPrefix": "forbidden"},
        "confidence": 0.95,
        "reason": "Enforces forbidden v-prefix for image.tag",
    })

    assert isinstance(suggestion.rule, VersionFormatRule)
    assert suggestion.rule.v_prefix == "forbidden"


def test_unknown_stop_rule_type_is_rejected():
    with pytest.raises(ValidationError):
        StopRuleSuggestion.model_validate({
            "rule": {"type": "regex", "path": "x"}, "confidence": 0.5, "reason": "r",
        })


def test_invalid_v_prefix_is_rejected():
    with pytest.raises(ValidationError):
        VersionFormatRule(path="tag", v_prefix="sometimes")


def test_transform_suggestion_bounds():
    with pytest.raises(ValidationError):
        TransformSuggestion(find="a", replace="b", confidence=1.2, occurrences=2)
    with pytest.raises(ValidationError):
        TransformSuggestion(find="a", replace="b", confidence=0.5, occurrences=1)


def test_rule_serializes_with_aliases_and_without_empty_bounds():
    suggestion = StopRuleSuggestion(rule=NumericRule(path="replicas", min=1), confidence=0.7,
                                    reason="r", affected_paths=["replicas"], affected_files=["a.yaml"])

    dumped = suggestion.model_dump(by_alias=True, exclude_none=True)

    assert dumped["rule"] == {"type": "numeric", "path": "replicas", "min": 1}
    assert dumped["affectedFiles"] == ["a.yaml"]


def test_promotion_config_lookups():
    config = PromotionConfig.model_validate({
        "source": "./uat",
        "destination": "./prod",
        "skipPath": {"**/*.yaml": ["metadata.annotations"]},
        "transforms": {"**/*.yaml": {"content": [{"find": "uat", "replace": "prod"}]}},
        "stopRules": {"**/*.yaml": [{"type": "numeric", "path": "replicas", "min": 1}]},
        "outputFormat": {"indent": 2},
    })

    assert config.skip_path == {"**/*.yaml": ["metadata.annotations"]}
    assert config.has_content_transform("uat", "prod")
    assert not config.has_content_transform("prod", "uat")
    assert config.has_stop_rule(StopRuleType.NUMERIC, "replicas")
    assert config.has_stop_rule("numeric", "replicas")
    assert not config.has_stop_rule(StopRuleType.NUMERIC, "spec.replicas")


def test_error_rendering():
    error = FileLoadError("Failed to parse YAML file", code=ErrorCode.YAML_PARSE_ERROR,
                          path="prod/app.yaml", cause=ValueError("bad indent"), hints=["Check tabs"])

    text = str(error)

    assert text.startswith("File Load Error: Failed to parse YAML file")
    assert "  Path: prod/app.yaml" in text
    assert "  Reason: File is not valid YAML" in text
    assert "  Details: bad indent" in text
    assert "    - Check tabs" in text
    assert error.to_dict()["code"] == "YAML_PARSE_ERROR"
    assert is_file_load_error(error)
    assert not is_suggestion_engine_error(error)
    assert is_suggestion_engine_error(SuggestionEngineError("x", code=ErrorCode.ANALYSIS_FAILED))


def test_config_defaults_validate():
    config = Config(confidence_threshold=0.5, glob_pattern="apps/**/*.yml")

    config.validate()
    assert config.tool_name


def test_config_validation_rejects_bad_values():
    with pytest.raises(ValueError):
        Config(confidence_threshold=2.0).validate()
    with pytest.raises(ValueError):
        Config(glob_pattern="").validate()
