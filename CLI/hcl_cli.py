from typing import Any, Dict, Optional
import click
import yaml
import os
import sys
import logging
from pathlib import Path
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from transpiler.compiler import HCLCompiler
from transpiler.errors import EncodingError
from transpiler.formatting import FormatOptions
from converter.loader import LoaderError, load_nodes
from converter.main import DEFAULT_OUTPUT_FILE, convert_file
from converter.writer import HCLVerificationError, verify_hcl, write_terraform_file

VERSION = "0.1.0"

DEFAULT_CONFIG = {
    'output_dir': './IaC',
    'verify': True,
    'format': FormatOptions().to_dict(),
}

_log_handlers = []

class CLIError(Exception):
    """Custom exception for hclscript CLI errors"""
    pass

def config_dir() -> str:
    return os.path.join(os.path.expanduser('~'), '.hclscript')

def setup_logging(debug: bool = False):
    """Configure logging for the CLI"""

    # Create logs directory if it doesn't exist
    log_dir = os.path.join(config_dir(), 'logs')
    os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    # Re-running the group (tests, nested invocations) replaces our handlers
    for handler in _log_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _log_handlers.clear()

    # Set up file handler
    log_file = os.path.join(log_dir, 'hclscript.log')
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)

    # Set up console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)

    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger.setLevel(logging.DEBUG)
    for handler in (file_handler, console_handler):
        root_logger.addHandler(handler)
        _log_handlers.append(handler)

def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load CLI settings, falling back to ~/.hclscript/config.yaml and then to defaults"""
    if config_path is None:
        default_path = os.path.join(config_dir(), 'config.yaml')
        if not os.path.exists(default_path):
            return {**DEFAULT_CONFIG, 'format_options': FormatOptions()}
        config_path = default_path

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise CLIError(f"Config file {config_path} must contain a mapping")

    config = {**DEFAULT_CONFIG, **data}
    try:
        config['format_options'] = FormatOptions.from_yaml(config_path)
    except (TypeError, ValueError) as e:
        raise CLIError(f"Invalid format settings in {config_path}: {e}") from e
    return config

def init_config_dir() -> str:
    """Initialize configuration directory"""
    os.makedirs(config_dir(), exist_ok=True)

    # Create default configuration if it doesn't exist
    config_file = os.path.join(config_dir(), 'config.yaml')
    if not os.path.exists(config_file):
        with open(config_file, 'w') as f:
            yaml.safe_dump(DEFAULT_CONFIG, f, sort_keys=False)
    return config_file

def version_callback(ctx, param, value):
    """Print version information"""
    if not value or ctx.resilient_parsing:
        return
    click.echo(f"hclscript v{VERSION}")
    ctx.exit()

def report_error(console: Console, title: str, error: Exception):
    console.print(f"\n[red]✗ {title}:[/red] {escape(str(error))}")
    if isinstance(error, EncodingError) and error.path:
        console.print(f"[yellow]  at:[/yellow] {escape(' > '.join(str(p) for p in error.path))}")


@click.group()
@click.option('--debug/--no-debug', default=False, help='Enable debug mode')
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              default=None, help='Path to a config.yaml (default: ~/.hclscript/config.yaml)')
@click.option('--version', is_flag=True, callback=version_callback,
              expose_value=False, is_eager=True, help='Show version information')
@click.pass_context
def main(ctx, debug, config_path):
    """hclscript - compile node documents (JSON/YAML) into Terraform HCL"""
    setup_logging(debug)
    try:
        ctx.obj = load_config(config_path)
    except (CLIError, yaml.YAMLError) as e:
        report_error(Console(), "Could not load configuration", e)
        sys.exit(1)
    if debug:
        click.echo(click.style("Debug mode enabled", fg="yellow"), err=True)


@main.command(name='compile')
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option('--out', 'output_dir', default=None, help='Directory for the generated main.tf')
@click.option('--stdout', 'to_stdout', is_flag=True, help='Print the HCL instead of writing a file')
@click.option('--verify/--no-verify', default=None, help='Re-parse the output with python-hcl2')
@click.pass_obj
def compile_command(config, source, output_dir, to_stdout, verify):
    """Compile a node document into HCL"""
    console = Console()
    if verify is None:
        verify = config['verify']

    try:
        content = convert_file(source, options=config['format_options'], verify=verify)
    except (EncodingError, LoaderError, HCLVerificationError) as e:
        report_error(console, "Compilation failed", e)
        sys.exit(1)

    if to_stdout:
        click.echo(content, nl=False)
        return

    output_path = write_terraform_file(Path(output_dir or config['output_dir']) / DEFAULT_OUTPUT_FILE, content)
    console.print(f"\n[green]✓ Wrote {escape(str(output_path))}[/green]")


@main.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def check(config, source):
    """Compile and verify a node document without writing anything"""
    console = Console()
    try:
        nodes = load_nodes(source)
        content = HCLCompiler(config['format_options']).compile_document(nodes)
        verify_hcl(content)
    except (EncodingError, LoaderError, HCLVerificationError) as e:
        report_error(console, "Check failed", e)
        sys.exit(1)

    table = Table(title="Top-level blocks")
    table.add_column("Block", style="cyan")
    table.add_column("Labels")
    table.add_column("Attributes", justify="right")
    table.add_column("Nested blocks", justify="right")
    for node in nodes:
        nested = sum(1 for _ in node.walk()) - 1
        table.add_row(node.keyword, " ".join(node.labels), str(len(node.attributes)), str(nested))
    console.print(table)
    console.print(f"\n[green]✓ {len(nodes)} block(s) compiled and verified[/green]")


@main.command()
def init():
    """Create ~/.hclscript/config.yaml with default settings"""
    config_file = init_config_dir()
    click.echo(click.style(f"\n✓ Configuration at {config_file}", fg="green"))


if __name__ == '__main__':
    main()
