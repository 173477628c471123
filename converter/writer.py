import logging
import hcl2
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)


class HCLVerificationError(Exception):
    """Generated text could not be parsed back as HCL."""


def verify_hcl(content: str) -> Dict[str, Any]:
    """Parse generated HCL with python-hcl2 and return the parsed structure."""
    try:
        parsed = hcl2.loads(content)
    except Exception as e:
        raise HCLVerificationError(f"Generated HCL does not parse: {e}") from e
    logger.debug("Verified HCL document with top-level keys: %s", ", ".join(parsed))
    return parsed


def write_terraform_file(filepath: Union[str, Path], content: str) -> Path:
    """Write Terraform content to a file, creating parent directories."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(content)
    logger.info("Generated Terraform file: %s", filepath)
    return filepath
