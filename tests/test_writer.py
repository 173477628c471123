import re

import pytest

from converter.main import convert_file, main_convert
from converter.writer import HCLVerificationError, verify_hcl, write_terraform_file
from transpiler import ConfigNode, InvalidBlockPath, compile_document, func, var


def normalize(value):
    """Strip python-hcl2 version differences: quoted keys/strings and metadata keys."""
    if isinstance(value, dict):
        return {
            normalize(k): normalize(v)
            for k, v in value.items()
            if not (isinstance(k, str) and k.startswith("__"))
        }
    if isinstance(value, list):
        return [normalize(v) for v in value]
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def decoded(value):
    """Undo HCL string escapes that some python-hcl2 versions leave in parsed strings."""
    return re.sub(r'\\(["\\])', r'\1', value).replace("$${", "${")


@pytest.fixture
def document(web_instance):
    return compile_document([
        ConfigNode(["terraform"], children=[ConfigNode(["backend", "s3"], {"bucket": "state"})]),
        ConfigNode(["variable", "env"], {"type": func("string"), "default": "dev"}),
        web_instance,
        ConfigNode(["output", "name"], {
            "value": "web-" + var("env"),
            "quote": 'He said "hi" \\ ok',
            "literal": "price ${literal}",
            "ports": [80, 443],
            "rules": [{"from": 80}, {"from": 443}],
        }),
    ])


def test_generated_document_parses(document):
    parsed = normalize(verify_hcl(document))
    assert set(parsed) == {"terraform", "variable", "resource", "output"}

    resource = parsed["resource"][0]["aws_instance"]["web"]
    assert resource["ami"] == "ami-123"
    assert "lifecycle" in resource
    assert "instance_type" in resource

    assert parsed["variable"][0]["env"]["default"] == "dev"
    assert "s3" in parsed["terraform"][0]["backend"][0]
    output = parsed["output"][0]["name"]
    assert set(output) == {"value", "quote", "literal", "ports", "rules"}
    assert output["value"] == "web-${var.env}"
    assert decoded(output["quote"]) == 'He said "hi" \\ ok'
    assert decoded(output["literal"]) == "price ${literal}"
    assert output["ports"] == [80, 443]


def test_dollar_before_splice_parses_as_interpolation():
    content = compile_document(ConfigNode(["locals"], {"cost": "cost $" + var("price")}))
    cost = normalize(verify_hcl(content))["locals"][0]["cost"]
    assert "${var.price}" in cost
    assert "$${" not in cost


def test_verify_rejects_broken_hcl():
    with pytest.raises(HCLVerificationError):
        verify_hcl('resource "a" {\n  x = \n')


def test_write_terraform_file(tmp_path):
    target = tmp_path / "nested" / "dir" / "main.tf"
    assert write_terraform_file(target, "terraform {\n}\n") == target
    assert target.read_text(encoding="utf-8") == "terraform {\n}\n"


def test_main_convert(tmp_path):
    source = tmp_path / "infra.yaml"
    source.write_text("block: [module, vpc]\nattributes:\n  source: ./modules/vpc\n  cidr: {'$var': cidr}\n")
    output = main_convert(source, tmp_path / "IaC")
    assert output == tmp_path / "IaC" / "main.tf"
    assert output.read_text(encoding="utf-8") == (
        'module "vpc" {\n'
        '  source = "./modules/vpc"\n'
        '  cidr = var.cidr\n'
        '}\n'
    )
    assert convert_file(source) == output.read_text(encoding="utf-8")


def test_main_convert_writes_nothing_on_error(tmp_path):
    source = tmp_path / "infra.json"
    source.write_text('{"block": []}')
    with pytest.raises(InvalidBlockPath):
        main_convert(source, tmp_path / "IaC")
    assert not (tmp_path / "IaC").exists()
