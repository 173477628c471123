import logging
from pathlib import Path
from typing import Optional, Union

from transpiler.compiler import HCLCompiler
from transpiler.formatting import FormatOptions
from .loader import load_nodes
from .writer import verify_hcl, write_terraform_file

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = 'IaC'
DEFAULT_OUTPUT_FILE = 'main.tf'


def convert_file(source: Union[str, Path], options: Optional[FormatOptions] = None, verify: bool = False) -> str:
    """Load a node document and compile it to HCL text."""
    nodes = load_nodes(source)
    content = HCLCompiler(options).compile_document(nodes)
    if verify:
        verify_hcl(content)
    return content


def main_convert(source: Union[str, Path], output_dir: Union[str, Path] = DEFAULT_OUTPUT_DIR,
                 options: Optional[FormatOptions] = None, verify: bool = True,
                 filename: str = DEFAULT_OUTPUT_FILE) -> Path:
    """Compile ``source`` and write the result to ``output_dir/filename``.

    Nothing is written when loading, compilation or verification fails.
    """
    content = convert_file(source, options=options, verify=verify)
    output_path = write_terraform_file(Path(output_dir) / filename, content)
    logger.info("Converted %s -> %s", source, output_path)
    return output_path
