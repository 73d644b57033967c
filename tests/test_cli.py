"""Tests for the folder diff collaborator and the command line front end."""

import json

import pytest
import yaml

from promotion_advisor.cli import main
from promotion_advisor.errors import ErrorCode, FileLoadError
from promotion_advisor.file_diff import (
    compute_file_diff,
    extract_yaml_tree,
    get_skip_paths_for_file,
    load_promotion_config,
)


def _write(root, rel, data):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else yaml.safe_dump(data), encoding="utf-8")


@pytest.fixture
def environments(tmp_path):
    """uat (source) and prod (destination) folders with one renamed environment value."""
    uat, prod = tmp_path / "uat", tmp_path / "prod"
    _write(uat, "apps/web.yaml", {"cluster": "prod-cluster", "region": "prod-east",
                                 "image": {"tag": "1.4.0"}})
    _write(prod, "apps/web.yaml", {"cluster": "uat-cluster", "region": "uat-east",
                                  "image": {"tag": "1.3.0"}})
    _write(uat, "apps/same.yml", {"a": 1})
    _write(prod, "apps/same.yml", {"a": 1})
    _write(uat, "only-source.yaml", {"x": 1})
    _write(prod, "only-dest.yaml", {"y": 1})
    _write(uat, ".hidden/ignored.yaml", {"z": 1})
    _write(uat, "README.md", "not yaml")
    return uat, prod


def test_extract_yaml_tree(environments):
    uat, _ = environments

    assert extract_yaml_tree(uat) == ["apps/same.yml", "apps/web.yaml", "only-source.yaml"]


def test_compute_file_diff(environments):
    uat, prod = environments

    diff = compute_file_diff(uat, prod)

    assert [f.path for f in diff.changed_files] == ["apps/web.yaml"]
    assert diff.unchanged_files == ["apps/same.yml"]
    assert diff.added_files == ["only-source.yaml"]
    assert diff.deleted_files == ["only-dest.yaml"]
    changed = diff.changed_files[0]
    assert changed.raw_parsed_source["cluster"] == "prod-cluster"
    assert changed.processed_dest_content == changed.raw_parsed_dest


def test_get_skip_paths_for_file():
    skip_path = {"**/*.yaml": ["metadata.labels"], "apps/*.yaml": ["image.tag"], "*.yml": ["x"]}

    assert get_skip_paths_for_file("apps/web.yaml", skip_path) == ["metadata.labels", "image.tag"]
    assert get_skip_paths_for_file("top.yaml", skip_path) == ["metadata.labels"]
    assert get_skip_paths_for_file("top.json", skip_path) == []
    assert get_skip_paths_for_file("top.yaml", None) == []


def test_load_promotion_config_rejects_bad_files(tmp_path):
    _write(tmp_path, "list.yaml", "- a\n- b\n")
    _write(tmp_path, "broken.yaml", "transforms: [unclosed\n")

    with pytest.raises(FileLoadError) as exc_info:
        load_promotion_config(tmp_path / "list.yaml")
    assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    with pytest.raises(FileLoadError) as exc_info:
        load_promotion_config(tmp_path / "broken.yaml")
    assert exc_info.value.code == ErrorCode.YAML_PARSE_ERROR

    with pytest.raises(FileLoadError) as exc_info:
        load_promotion_config(tmp_path / "missing.yaml")
    assert exc_info.value.code == ErrorCode.FILE_READ_ERROR


def test_cli_prints_diff_summary(environments, capsys):
    uat, prod = environments

    exit_code = main(["--source", str(uat), "--dest", str(prod)])

    assert exit_code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary == {
        "added": ["only-source.yaml"],
        "deleted": ["only-dest.yaml"],
        "changed": ["apps/web.yaml"],
        "unchanged": ["apps/same.yml"],
    }


def test_cli_suggest_prints_yaml(environments, capsys):
    uat, prod = environments

    exit_code = main(["--source", str(uat), "--dest", str(prod), "--suggest"])

    assert exit_code == 0
    parsed = yaml.safe_load(capsys.readouterr().out)
    assert parsed["transforms"]["**/*.yaml"]["content"] == [{"find": "uat", "replace": "prod"}]
    assert parsed["stopRules"]["**/*.yaml"] == [
        {"type": "versionFormat", "path": "image.tag", "vPrefix": "forbidden"},
        {"type": "semverDowngrade", "path": "image.tag"},
        {"type": "semverMajorUpgrade", "path": "image.tag"},
    ]


def test_cli_suggest_json(environments, capsys):
    uat, prod = environments

    exit_code = main(["--source", str(uat), "--dest", str(prod), "--suggest", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    transform = payload["transforms"]["**/*.yaml"][0]
    assert transform["find"] == "uat"
    assert transform["affectedFiles"] == ["apps/web.yaml"]
    assert payload["metadata"]["changedFiles"] == 1


def test_cli_respects_existing_config(environments, tmp_path, capsys):
    uat, prod = environments
    _write(tmp_path, "config.yaml", {
        "source": str(uat),
        "destination": str(prod),
        "skipPath": {"apps/*.yaml": ["image.tag"]},
        "transforms": {"**/*.yaml": {"content": [{"find": "uat", "replace": "prod"}]}},
    })

    exit_code = main(["--source", str(uat), "--dest", str(prod), "--config", str(tmp_path / "config.yaml"),
                      "--suggest", "--json"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["transforms"]["**/*.yaml"] == []
    assert payload["stopRules"]["**/*.yaml"] == []


def test_cli_reports_invalid_yaml(environments, capsys):
    uat, prod = environments
    _write(prod, "apps/web.yaml", "cluster: [unclosed\n")

    exit_code = main(["--source", str(uat), "--dest", str(prod), "--suggest"])

    assert exit_code == 1
    err = capsys.readouterr().err
    assert "File Load Error" in err
    assert "web.yaml" in err


def test_cli_rejects_threshold_out_of_range(environments, capsys):
    uat, prod = environments

    exit_code = main(["--source", str(uat), "--dest", str(prod), "--suggest", "--threshold", "1.5"])

    assert exit_code == 2
    assert "--threshold" in capsys.readouterr().err
