"""Command-line console for threat report extraction."""

import click
from pathlib import Path
import logging
from colorama import init, Fore, Style
from pydantic import ValidationError

# Initialize colorama for cross-platform colored output
init(autoreset=True)

from cti_extractor.config import get_config
from cti_extractor.extraction import (
    ErrorKind,
    ExtractionResult,
    ExtractionSession,
    GeminiExtractor,
)
from cti_extractor.export import (
    clipboard_text,
    write_indicators_csv,
    write_json,
    write_stix_bundle,
)
from cti_extractor.indicators import IndicatorKind, defang, refang, validate_indicator
from cti_extractor.render import render_dashboard

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _echo_result(result: ExtractionResult, view: str, defanged: bool):
    if view == 'json':
        click.echo(clipboard_text(result, defanged=defanged))
        return

    mode = 'DEFANGED' if defanged else 'LIVE'
    click.echo(f"{Fore.CYAN}=== Threat Intelligence Dashboard ({mode}) ==={Style.RESET_ALL}\n")
    for title, body in render_dashboard(result, defanged=defanged):
        click.echo(f"{Fore.CYAN}{title}:{Style.RESET_ALL}")
        click.echo(body)
        click.echo()


def _default_defang() -> bool:
    return click.get_current_context().obj['config'].defang_by_default()


def _load_result(path: str) -> ExtractionResult:
    try:
        return ExtractionResult.from_json(Path(path).read_text(encoding='utf-8'))
    except ValidationError as e:
        raise click.ClickException(f"{path} is not a valid extraction result: {e.error_count()} error(s)")


@click.group()
@click.option('--config', type=click.Path(exists=True), help='Path to custom config file')
@click.pass_context
def cli(ctx, config):
    """
    CTI Extractor CLI

    Turns unstructured threat reports into structured intelligence and
    validates, defangs and exports the extracted indicators.
    """
    ctx.ensure_object(dict)
    ctx.obj['config'] = get_config(config)
    logging.getLogger().setLevel(ctx.obj['config'].get_log_level())


@cli.command()
@click.argument('input_file', type=click.File('r', encoding='utf-8'))
@click.option('--api-key', envvar='GEMINI_API_KEY', help='Gemini API key (env: GEMINI_API_KEY)')
@click.option('--model', help='Model name (overrides config)')
@click.option('--view', type=click.Choice(['dashboard', 'json']), help='Output view')
@click.option('--defang/--no-defang', 'defanged', default=_default_defang, show_default='from config',
              help='Defang indicator values')
@click.option('--download', 'download_dir', type=click.Path(file_okay=False),
              help='Directory to save the raw result JSON')
@click.option('--save', is_flag=True,
              help='Save the raw result JSON to the configured export directory')
@click.option('--stix', 'stix_path', type=click.Path(dir_okay=False),
              help='Also write a STIX 2.1 bundle to this path')
@click.pass_context
def extract(ctx, input_file, api_key, model, view, defanged, download_dir, save, stix_path):
    """
    Extract structured intelligence from a report (use - for stdin).
    """
    config = ctx.obj['config']
    text = input_file.read()

    if not text.strip():
        click.echo(f"{Fore.YELLOW}Input is empty, nothing to extract{Style.RESET_ALL}")
        return

    settings = config.get_model_settings()
    if model:
        settings['name'] = model
    session = ExtractionSession(GeminiExtractor.from_settings(api_key, settings))

    click.echo(f"{Fore.YELLOW}Processing intelligence with {settings.get('name')}...{Style.RESET_ALL}",
               err=True)
    state = session.submit(text)

    if state.error is not None:
        if state.error.kind == ErrorKind.AUTH:
            click.echo(f"{Fore.RED}{state.error}{Style.RESET_ALL}", err=True)
            click.echo("Provide a valid key with --api-key or GEMINI_API_KEY and retry.", err=True)
        else:
            click.echo(f"{Fore.RED}Error: {state.error}{Style.RESET_ALL}", err=True)
        ctx.exit(1)

    result = state.result
    _echo_result(result, view or config.get('display.view', 'dashboard'), defanged)

    if save and not download_dir:
        download_dir = config.get('export.directory', '.')

    if download_dir:
        path = write_json(result, download_dir)
        click.echo(f"{Fore.GREEN}Saved result to {path}{Style.RESET_ALL}", err=True)

    if stix_path:
        path = write_stix_bundle(result, stix_path)
        click.echo(f"{Fore.GREEN}Saved STIX bundle to {path}{Style.RESET_ALL}", err=True)


@cli.command()
@click.argument('result_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--view', type=click.Choice(['dashboard', 'json']), help='Output view')
@click.option('--defang/--no-defang', 'defanged', default=_default_defang, show_default='from config',
              help='Defang indicator values')
@click.pass_context
def show(ctx, result_file, view, defanged):
    """
    Display a saved extraction result.
    """
    config = ctx.obj['config']
    result = _load_result(result_file)

    _echo_result(result, view or config.get('display.view', 'dashboard'), defanged)


@cli.command()
@click.argument('result_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', help='Output file path (directory for json, defaults to the configured export directory)')
@click.option('--format', 'output_format', type=click.Choice(['json', 'csv', 'stix']),
              required=True, help='Export format')
@click.option('--defang/--no-defang', 'defanged', default=False,
              help='Defang indicator values (csv only)')
@click.pass_context
def export(ctx, result_file, output, output_format, defanged):
    """
    Export a saved extraction result.

    JSON exports are always written raw, under a timestamped filename.
    """
    if not output and output_format != 'json':
        raise click.UsageError(f"--output is required for {output_format} exports")

    result = _load_result(result_file)

    if output_format == 'json':
        path = write_json(result, output or ctx.obj['config'].get('export.directory', '.'))
    elif output_format == 'csv':
        path = write_indicators_csv(result, output, defanged=defanged)
    else:
        path = write_stix_bundle(result, output)

    click.echo(f"{Fore.GREEN}Exported to {path}{Style.RESET_ALL}")


@cli.command()
@click.argument('kind')
@click.argument('value')
@click.pass_context
def validate(ctx, kind, value):
    """
    Check an indicator VALUE against the syntax for KIND.

    KIND is one of: ipv4-addr, domain-name, file-hash-md5, file-hash-sha1,
    file-hash-sha256, url, email-addr. Other kinds are accepted as valid.
    """
    if IndicatorKind.from_tag(kind) is None:
        click.echo(f"{Fore.YELLOW}Unknown kind '{kind}', not checked{Style.RESET_ALL}", err=True)

    if validate_indicator(kind, value):
        click.echo(f"{Fore.GREEN}VALID{Style.RESET_ALL} {kind} {defang(value)}")
    else:
        click.echo(f"{Fore.RED}INVALID{Style.RESET_ALL} {kind} {defang(value)}")
        ctx.exit(1)


@cli.command('defang')
@click.argument('values', nargs=-1, required=True)
def defang_command(values):
    """
    Defang indicator values for safe sharing.
    """
    for value in values:
        click.echo(defang(value))


@cli.command('refang')
@click.argument('values', nargs=-1, required=True)
def refang_command(values):
    """
    Restore defanged indicator values (best effort).
    """
    for value in values:
        click.echo(refang(value))


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == '__main__':
    main()
