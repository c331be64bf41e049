"""Tests for the proxyplane CLI."""

from __future__ import annotations

import json
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from proxyplane.cli.describe import resolve_target
from proxyplane.cli.main import cli
from tests import assets

runner = CliRunner()


class TestCliGroup:
    def test_given_version_flag_when_invoked_then_prints_version(self) -> None:
        # When
        result = runner.invoke(cli, ["--version"])

        # Then
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_given_help_when_invoked_then_lists_describe(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "describe" in result.output


class TestResolveTarget:
    """Importing classes named on the command line."""

    @pytest.mark.parametrize("path", ["tests.assets:ValueHolder", "tests.assets.ValueHolder"])
    def test_given_import_path_when_resolved_then_class(self, path: str) -> None:
        assert resolve_target(path) is assets.ValueHolder

    @pytest.mark.parametrize(
        "path", ["ValueHolder", "tests.assets:Missing", "no_such_module_xyz:Thing"]
    )
    def test_given_bad_path_when_resolved_then_bad_parameter(self, path: str) -> None:
        with pytest.raises(click.BadParameter):
            resolve_target(path)


class TestDescribeCommand:
    """proxyplane describe output."""

    def test_given_json_flag_when_described_then_model_serialized(self) -> None:
        # When
        result = runner.invoke(cli, ["describe", "tests.assets:BaseClass", "--json"])

        # Then
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["type"] == "tests.assets.BaseClass"
        props = {p["name"]: p for p in data["properties"]}
        assert props["__private_property"]["visibility"] == "private"
        assert props["_protected_property"]["referenceable"] is True
        methods = {m["name"]: m for m in data["methods"]}
        assert methods["public_method"]["interceptable"] is True
        assert methods["_BaseClass__private_method"]["interceptable"] is False

    def test_given_table_output_when_described_then_sections_printed(self) -> None:
        # When
        result = runner.invoke(cli, ["describe", "tests.assets:ValueHolder"])

        # Then
        assert result.exit_code == 0, result.output
        assert "tests.assets.ValueHolder" in result.stdout
        assert "Properties" in result.stdout
        assert "Methods" in result.stdout
        assert "get" in result.stdout

    def test_given_unsupported_target_when_described_then_error_exit(self) -> None:
        # When
        result = runner.invoke(cli, ["describe", "tests.assets:FinalClass"])

        # Then
        assert result.exit_code == 1
        assert "TARGET_IS_FINAL" in result.output

    def test_given_unsupported_target_with_json_when_described_then_error_document(
        self,
    ) -> None:
        # When
        result = runner.invoke(cli, ["describe", "tests.assets:AbstractShape", "--json"])

        # Then
        assert result.exit_code == 1
        error = json.loads(result.stdout)
        assert error["error"] == "TARGET_IS_ABSTRACT"
        assert error["details"]["abstract_methods"] == ["area"]

    def test_given_unknown_module_when_described_then_usage_error(self) -> None:
        result = runner.invoke(cli, ["describe", "no_such_module_xyz:Thing"])

        assert result.exit_code == 2


class TestConfigOption:
    """proxyplane --config FILE."""

    def test_given_config_disabling_dunders_when_described_then_dunders_not_intercepted(
        self, tmp_path: Path
    ) -> None:
        # Given
        config_file = tmp_path / "proxyplane.yaml"
        config_file.write_text("proxy:\n  intercept_dunder_methods: false\n")

        # When
        result = runner.invoke(
            cli, ["--config", str(config_file), "describe", "tests.assets:Bag", "--json"]
        )

        # Then
        assert result.exit_code == 0, result.output
        methods = {m["name"]: m for m in json.loads(result.stdout)["methods"]}
        assert methods["__len__"]["interceptable"] is False

    def test_given_default_config_when_described_then_dunders_intercepted(self) -> None:
        result = runner.invoke(cli, ["describe", "tests.assets:Bag", "--json"])

        assert result.exit_code == 0, result.output
        methods = {m["name"]: m for m in json.loads(result.stdout)["methods"]}
        assert methods["__len__"]["interceptable"] is True

    def test_given_missing_config_file_when_invoked_then_error_exit(self, tmp_path: Path) -> None:
        # When
        result = runner.invoke(
            cli, ["--config", str(tmp_path / "absent.yaml"), "describe", "tests.assets:Bag"]
        )

        # Then
        assert result.exit_code == 1
        assert "CONFIG_FILE_NOT_FOUND" in result.output
