import json

import pytest
import yaml
from click.testing import CliRunner

from CLI.hcl_cli import main

SOURCE = [
    {"block": ["variable", "env"], "attributes": {"default": "dev"}},
    {
        "block": ["resource", "aws_instance", "web"],
        "attributes": {"ami": "ami-123", "name": {"$template": ["web-", {"$var": "env"}]}},
        "child": [{"block": "lifecycle", "attributes": {"create_before_destroy": True}}],
    },
]

EXPECTED = (
    'variable "env" {\n'
    '  default = "dev"\n'
    '}\n'
    '\n'
    'resource "aws_instance" "web" {\n'
    '  ami = "ami-123"\n'
    '  name = "web-${var.env}"\n'
    '\n'
    '  lifecycle {\n'
    '    create_before_destroy = true\n'
    '  }\n'
    '}\n'
)


@pytest.fixture
def runner(tmp_path):
    return CliRunner(env={"HOME": str(tmp_path / "home")})


@pytest.fixture
def source(tmp_path):
    path = tmp_path / "infra.json"
    path.write_text(json.dumps(SOURCE))
    return path


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "hclscript v0.1.0" in result.output


def test_compile_to_stdout(runner, source):
    result = runner.invoke(main, ["compile", str(source), "--stdout", "--no-verify"])
    assert result.exit_code == 0, result.output
    assert result.output == EXPECTED


def test_compile_writes_main_tf(runner, source, tmp_path):
    out_dir = tmp_path / "IaC"
    result = runner.invoke(main, ["compile", str(source), "--out", str(out_dir)])
    assert result.exit_code == 0, result.output
    assert (out_dir / "main.tf").read_text(encoding="utf-8") == EXPECTED
    assert "Wrote" in result.output


def test_compile_failure_exits_nonzero(runner, tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text(json.dumps({"block": ["resource", "a", "b"], "child": [{"block": []}]}))
    result = runner.invoke(main, ["compile", str(broken), "--out", str(tmp_path / "IaC")])
    assert result.exit_code == 1
    assert "invalid block path" in result.output
    assert not (tmp_path / "IaC").exists()


def test_check(runner, source):
    result = runner.invoke(main, ["check", str(source)])
    assert result.exit_code == 0, result.output
    assert "2 block(s) compiled and verified" in result.output


def test_init_creates_config(runner, tmp_path):
    result = runner.invoke(main, ["init"])
    assert result.exit_code == 0, result.output
    config = yaml.safe_load((tmp_path / "home" / ".hclscript" / "config.yaml").read_text())
    assert config["format"]["indent_width"] == 2
    assert config["verify"] is True


def test_config_file_sets_format(runner, source, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("format:\n  indent_width: 4\n")
    result = runner.invoke(main, ["--config", str(config), "compile", str(source), "--stdout"])
    assert result.exit_code == 0, result.output
    assert '    ami = "ami-123"\n' in result.output
    assert "        create_before_destroy = true\n" in result.output


def test_invalid_config_is_reported(runner, source, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("format:\n  indent_size: 4\n")
    result = runner.invoke(main, ["--config", str(config), "compile", str(source), "--stdout"])
    assert result.exit_code == 1
    assert "indent_size" in result.output


def test_undecodable_source_is_reported(runner, tmp_path):
    source = tmp_path / "infra.json"
    source.write_bytes(b"\xff")
    result = runner.invoke(main, ["compile", str(source), "--stdout"])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Compilation failed" in result.output


def test_config_without_format_section(runner, source, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("verify: false\n")
    result = runner.invoke(main, ["--config", str(config), "compile", str(source), "--stdout"])
    assert result.exit_code == 0, result.output
    assert result.output == EXPECTED
