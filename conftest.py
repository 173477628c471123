import pytest

from transpiler import ConfigNode, var, func


@pytest.fixture
def web_instance():
    return ConfigNode(
        block_path=["resource", "aws_instance", "web"],
        attributes={
            "ami": "ami-123",
            "instance_type": var("instance_type"),
            "tags": func('tomap({Name = "x"})'),
        },
        children=[ConfigNode(["lifecycle"], {"create_before_destroy": True})],
    )


@pytest.fixture
def web_instance_hcl():
    return (
        'resource "aws_instance" "web" {\n'
        '  ami = "ami-123"\n'
        '  instance_type = var.instance_type\n'
        '  tags = tomap({Name = "x"})\n'
        '\n'
        '  lifecycle {\n'
        '    create_before_destroy = true\n'
        '  }\n'
        '}'
    )
