"""Shared data models for the Config Promotion Advisor."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# A parsed YAML tree: None | bool | int | float | str | list | dict.
YamlValue = Any


class StopRuleType(str, Enum):
    """Kinds of stop rule the engine can suggest."""
    SEMVER_MAJOR_UPGRADE = "semverMajorUpgrade"
    SEMVER_DOWNGRADE = "semverDowngrade"
    VERSION_FORMAT = "versionFormat"
    NUMERIC = "numeric"


class _AliasedModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Input Models
class ChangedFile(_AliasedModel):
    """A file present on both sides whose content differs."""
    path: str = Field(..., description="File path relative to the source/destination roots")
    original_path: Optional[str] = Field(None, alias="originalPath",
                                         description="Filename before any filename transform")
    raw_parsed_source: YamlValue = Field(None, alias="rawParsedSource",
                                         description="Source tree before content transforms")
    raw_parsed_dest: YamlValue = Field(None, alias="rawParsedDest",
                                       description="Destination tree before content transforms")
    processed_source_content: YamlValue = Field(None, alias="processedSourceContent",
                                                description="Source tree after content transforms")
    processed_dest_content: YamlValue = Field(None, alias="processedDestContent",
                                              description="Destination tree after content transforms")
    skip_paths: List[str] = Field(default_factory=list, alias="skipPaths",
                                  description="JSONPath patterns excluded from analysis for this file")


class FileDiffResult(_AliasedModel):
    """Result of comparing a source folder against a destination folder."""
    changed_files: List[ChangedFile] = Field(default_factory=list, alias="changedFiles")
    added_files: List[str] = Field(default_factory=list, alias="addedFiles")
    deleted_files: List[str] = Field(default_factory=list, alias="deletedFiles")
    unchanged_files: List[str] = Field(default_factory=list, alias="unchangedFiles")


class TransformRule(_AliasedModel):
    """A find/replace rule from the active configuration."""
    find: str = Field(..., description="Regex pattern to find")
    replace: str = Field(..., description="Replacement string")


class TransformRules(_AliasedModel):
    """Content and filename transform rules configured for one glob pattern."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    content: List[TransformRule] = Field(default_factory=list)
    filename: List[TransformRule] = Field(default_factory=list)


class ConfiguredStopRule(_AliasedModel):
    """A stop rule already present in the active configuration (any kind)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = Field(..., description="Stop rule kind, e.g. semverDowngrade or regex")
    path: Optional[str] = Field(None, description="JSONPath the rule guards, if any")


class PromotionConfig(_AliasedModel):
    """
    Read-only view of the host tool's configuration.

    Only transforms and stopRules are consulted by the engine, to suppress
    suggestions that are already adopted. skipPath is used by the file-diff
    collaborator to resolve per-file skip patterns.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    source: Optional[str] = Field(None, description="Source folder (e.g. ./uat)")
    destination: Optional[str] = Field(None, description="Destination folder (e.g. ./prod)")
    skip_path: Dict[str, List[str]] = Field(default_factory=dict, alias="skipPath",
                                            description="Glob pattern to JSONPaths skipped during sync")
    transforms: Dict[str, TransformRules] = Field(default_factory=dict,
                                                  description="Glob pattern to transform rules")
    stop_rules: Dict[str, List[ConfiguredStopRule]] = Field(default_factory=dict, alias="stopRules",
                                                            description="Glob pattern to stop rules")

    def has_content_transform(self, find: str, replace: str) -> bool:
        for rules in self.transforms.values():
            for rule in rules.content:
                if rule.find == find and rule.replace == replace:
                    return True
        return False

    def has_stop_rule(self, rule_type: Union[StopRuleType, str], path: str) -> bool:
        type_name = rule_type.value if isinstance(rule_type, StopRuleType) else rule_type
        for rules in self.stop_rules.values():
            for rule in rules:
                if rule.type == type_name and rule.path == path:
                    return True
        return False


# Suggested Stop Rules
class SemverMajorUpgradeRule(_AliasedModel):
    """Blocks changes that bump the major version at a path."""
    type: Literal["semverMajorUpgrade"] = "semverMajorUpgrade"
    path: str = Field(..., description="JSONPath to the semver field")


class SemverDowngradeRule(_AliasedModel):
    """Blocks changes that lower the version at a path."""
    type: Literal["semverDowngrade"] = "semverDowngrade"
    path: str = Field(..., description="JSONPath to the semver field")


class VersionFormatRule(_AliasedModel):
    """Enforces a consistent leading 'v' on version strings at a path."""
    type: Literal["versionFormat"] = "versionFormat"
    path: str = Field(..., description="JSONPath to the version field")
    v_prefix: Literal["required", "forbidden", "allowed"] = Field(..., alias="vPrefix")


class NumericRule(_AliasedModel):
    """Keeps a numeric value inside [min, max]."""
    type: Literal["numeric"] = "numeric"
    path: str = Field(..., description="JSONPath to the numeric field")
    min: Optional[Union[int, float]] = Field(None, description="Minimum allowed value (inclusive)")
    max: Optional[Union[int, float]] = Field(None, description="Maximum allowed value (inclusive)")


SuggestedStopRule = Annotated[
    Union[SemverMajorUpgradeRule, SemverDowngradeRule, VersionFormatRule, NumericRule],
    Field(discriminator="type"),
]


# Output Models
class ValuePair(_AliasedModel):
    """One concrete old/new value observed at a path."""
    old_value: str = Field(..., alias="oldValue", description="Destination (current) value")
    target_value: str = Field(..., alias="targetValue", description="Source (desired) value")
    path: str = Field(..., description="Generalized JSONPath of the value")


class TransformSuggestion(_AliasedModel):
    """A suggested content transform rule."""
    find: str
    replace: str
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0-1)")
    occurrences: int = Field(..., ge=2, description="Number of value pairs backing the rule")
    affected_files: List[str] = Field(default_factory=list, alias="affectedFiles")
    examples: List[ValuePair] = Field(default_factory=list, max_length=3)


class StopRuleSuggestion(_AliasedModel):
    """A suggested stop rule with the evidence behind it."""
    rule: SuggestedStopRule
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0-1)")
    reason: str = Field(..., description="Human-readable justification")
    affected_paths: List[str] = Field(default_factory=list, alias="affectedPaths")
    affected_files: List[str] = Field(default_factory=list, alias="affectedFiles")


class SuggestionMetadata(_AliasedModel):
    files_analyzed: int = Field(..., alias="filesAnalyzed")
    changed_files: int = Field(..., alias="changedFiles")
    timestamp: str = Field(..., description="UTC ISO-8601 generation time")


class SuggestionResult(_AliasedModel):
    """Transform and stop-rule suggestions grouped by glob pattern."""
    transforms: Dict[str, List[TransformSuggestion]] = Field(default_factory=dict)
    stop_rules: Dict[str, List[StopRuleSuggestion]] = Field(default_factory=dict, alias="stopRules")
    metadata: SuggestionMetadata

    def all_transforms(self) -> List[TransformSuggestion]:
        return [t for suggestions in self.transforms.values() for t in suggestions]

    def all_stop_rules(self) -> List[StopRuleSuggestion]:
        return [s for suggestions in self.stop_rules.values() for s in suggestions]

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# Engine-internal records
@dataclass
class ValueDifference:
    """A single leaf whose destination value differs from the source value."""
    file_path: str
    json_path: str
    old_value: YamlValue
    target_value: YamlValue


@dataclass
class PatternOccurrence:
    """Accumulated evidence for one find→replace candidate."""
    find: str
    replace: str
    files: List[str] = field(default_factory=list)
    examples: List[ValuePair] = field(default_factory=list)

    def add(self, file_path: str, example: ValuePair) -> None:
        if file_path not in self.files:
            self.files.append(file_path)
        self.examples.append(example)


@dataclass
class PathValueCollection:
    """All leaf values seen under one generalized path, and where they came from."""
    values: List[YamlValue] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    def add_file(self, file_path: str) -> None:
        if file_path not in self.files:
            self.files.append(file_path)
