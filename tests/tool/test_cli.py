"""Tests for the cloud-provider-config command line tool."""

from pathlib import Path

import pytest
import yaml
from pytest_golden.plugin import GoldenTestFixture

from cloud_provider_config.tool.cli import main

TESTDATA = Path("tests/testdata")


@pytest.mark.golden_test("testdata/*.yaml")
def test_cli_golden(golden: GoldenTestFixture, tmp_path: Path) -> None:
    """Test commands in golden files."""
    output_file = tmp_path / "output.yaml"
    main(golden["args"] + ["--output-file", str(output_file)])
    assert output_file.read_text() == golden.out["stdout"]


def test_generate(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test writing the manifest into an install dir."""
    main(
        [
            "generate",
            "--install-config",
            str(TESTDATA / "install-config-aws-c2s.yaml"),
            "--output-dir",
            str(tmp_path),
        ]
    )
    manifest = tmp_path / "manifests" / "cloud-provider-config.yaml"
    assert capsys.readouterr().out.strip() == str(manifest)
    doc = yaml.safe_load(manifest.read_text())
    assert doc["metadata"] == {
        "name": "cloud-provider-config",
        "namespace": "openshift-config",
    }
    assert doc["data"] == {"ca-bundle.pem": "BUNDLE"}


def test_generate_noop(tmp_path: Path) -> None:
    """Test nothing is written for platforms without a cloud provider."""
    main(
        [
            "generate",
            "--install-config",
            str(TESTDATA / "install-config-none.yaml"),
            "--infra-id",
            "abcde",
            "--output-dir",
            str(tmp_path),
        ]
    )
    assert not (tmp_path / "manifests").exists()


def test_unknown_platform(capsys: pytest.CaptureFixture[str]) -> None:
    """Test the error reported for an unknown platform."""
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                "show",
                "--install-config",
                str(TESTDATA / "install-config-unknown.yaml"),
                "--infra-id",
                "abcde",
            ]
        )
    assert exc_info.value.code == 1
    assert "cloud-provider-config error:  invalid Platform" in capsys.readouterr().err


def test_malformed_install_config(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A malformed install config is reported without a traceback."""
    install_config = tmp_path / "install-config.yaml"
    install_config.write_text("metadata: my-cluster\nplatform:\n  none: {}\n")
    with pytest.raises(SystemExit) as exc_info:
        main(
            [
                "show",
                "--install-config",
                str(install_config),
                "--infra-id",
                "abcde",
            ]
        )
    assert exc_info.value.code == 1
    err = capsys.readouterr().err
    assert "cloud-provider-config error:  Invalid install config metadata" in err
    assert "Traceback" not in err
