#!/usr/bin/env python3
"""
PIAWE Calculator - CLI Entry Point

Calculates Pre-Injury Average Weekly Earnings from a worker's payslip
history under the rules of each Australian workers' compensation
jurisdiction.
"""

import click
import sys
import logging
from pathlib import Path

from piawe import __version__
from piawe.calculator import calculate_piawe
from piawe.config import Config
from piawe.jurisdictions import get_rules, rule_table
from piawe.loader import RecordLoader
from piawe.models import Jurisdiction
from piawe.reporting import CalculationReporter, setup_logging

logger = logging.getLogger(__name__)

JURISDICTION_CHOICE = click.Choice([j.value for j in Jurisdiction], case_sensitive=False)


def _load_config(config: str) -> Config:
    if Path(config).exists():
        return Config.load(config)
    logger.debug(f"No configuration file at {config}, using defaults")
    return Config.default()


@click.group()
@click.version_option(version=__version__)
def cli():
    """PIAWE Calculator - jurisdiction-aware pre-injury earnings."""
    pass


@cli.command()
@click.argument('payslips_file', type=click.Path(dir_okay=False))
@click.option(
    '--injury-date', '-d',
    required=True,
    help='Date of injury (YYYY-MM-DD)'
)
@click.option(
    '--jurisdiction', '-j',
    type=JURISDICTION_CHOICE,
    default=None,
    help='Jurisdiction code (defaults to the configured jurisdiction)'
)
@click.option(
    '--adjustments', '-a',
    type=click.Path(dir_okay=False),
    default=None,
    help='JSON or CSV file of manual adjustments'
)
@click.option(
    '--config', '-c',
    default='piawe.toml',
    help='Path to configuration file'
)
@click.option(
    '--output', '-o',
    default=None,
    help='Output directory for the calculation record'
)
@click.option(
    '--verbose', '-v',
    is_flag=True,
    help='Enable verbose logging'
)
def calculate(payslips_file: str, injury_date: str, jurisdiction: str, adjustments: str,
              config: str, output: str, verbose: bool):
    """Calculate PIAWE from a payslip history file."""
    try:
        cfg = _load_config(config)
        setup_logging(cfg, verbose)

        loader = RecordLoader()
        payslips, embedded_adjustments = loader.load(payslips_file)
        if adjustments:
            embedded_adjustments.extend(loader.load_adjustments(adjustments))

        code = (jurisdiction or cfg.calculation.default_jurisdiction).upper()
        calculation = calculate_piawe(payslips, injury_date, code, embedded_adjustments)

        reporter = CalculationReporter(cfg)
        reporter.display_summary(calculation)
        saved = reporter.save_calculation(calculation, output)
        click.echo(f"Calculation saved to {saved}")

        if calculation.has_errors:
            click.echo(f"⚠️  Completed with {len(calculation.errors)} error-severity issue(s)", err=True)
            sys.exit(2)

    except (OSError, ValueError) as e:
        click.echo(f"❌ Calculation failed: {e}", err=True)
        if verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


@cli.command()
@click.argument('jurisdiction', type=JURISDICTION_CHOICE, required=False)
def rules(jurisdiction: str):
    """Show jurisdiction rule sets."""
    reporter = CalculationReporter(Config.default())
    if jurisdiction:
        selected = get_rules(jurisdiction.upper())
        reporter.display_rules([selected])
        reporter.display_formula(selected)
    else:
        reporter.display_rules(rule_table().values())


@cli.command()
@click.option(
    '--config', '-c',
    default='piawe.toml',
    help='Path to configuration file'
)
def validate_config(config: str):
    """Validate configuration file."""
    try:
        click.echo("🔍 Validating configuration...")
        cfg = Config.load(config)
        click.echo(f"✅ Configuration loaded: {config}")
        click.echo(f"✅ Default jurisdiction: {cfg.calculation.default_jurisdiction}")

        output_path = Path(cfg.output.output_folder)
        if not output_path.exists():
            click.echo(f"⚠️  Creating output folder: {output_path}")
            output_path.mkdir(parents=True, exist_ok=True)
        else:
            click.echo(f"✅ Output folder exists: {output_path}")

        click.echo("🎉 Configuration validation successful!")

    except Exception as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)


@cli.command()
def setup():
    """Interactive setup wizard for first-time configuration."""
    click.echo("🔧 PIAWE Calculator Setup")
    click.echo("=" * 50)

    if Path("piawe.toml").exists():
        if not click.confirm("Configuration file already exists. Overwrite?"):
            click.echo("Setup cancelled.")
            return

    jurisdiction = click.prompt(
        "Default jurisdiction",
        type=JURISDICTION_CHOICE,
        default='NSW'
    ).upper()
    output_folder = click.prompt("Output folder", default="output")
    log_level = click.prompt(
        "Log level",
        type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
        default='INFO'
    )

    Path(output_folder).mkdir(exist_ok=True)

    config_content = f"""[calculation]
default_jurisdiction = "{jurisdiction}"

[output]
log_level = "{log_level}"
log_file = "piawe.log"
output_folder = "{output_folder}"
json_indent = 2
console_summary = true
"""

    with open("piawe.toml", 'w') as f:
        f.write(config_content)

    click.echo("✅ Configuration saved to piawe.toml")
    click.echo("\n🎉 Setup complete! You can now run:")
    click.echo("  piawe calculate payslips.json --injury-date 2024-01-15")


if __name__ == "__main__":
    cli()
