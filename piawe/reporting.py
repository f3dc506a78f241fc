"""Console summaries and JSON output for PIAWE calculations."""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional
from rich.console import Console
from rich.table import Table

from .config import Config
from .models import IssueSeverity, JurisdictionRules, PIAWECalculation, PIAWEResult

logger = logging.getLogger(__name__)


def setup_logging(config: Config, verbose: bool = False):
    """Configure logging based on config."""
    log_level = logging.DEBUG if verbose else config.output.level
    handlers = [logging.StreamHandler()]
    if config.output.log_file:
        handlers.append(logging.FileHandler(config.output.log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )


class CalculationReporter:
    """Writes calculation records and prints summaries."""

    def __init__(self, config: Config, console: Optional[Console] = None):
        self.config = config
        self.console = console or Console()

    def save_calculation(self, calculation: PIAWECalculation, output_path: Optional[str] = None) -> Path:
        """Save the calculation record as JSON, using camelCase field names."""
        output_dir = Path(output_path or self.config.output.output_folder)
        output_dir.mkdir(parents=True, exist_ok=True)

        timestamp = calculation.created_at.strftime("%Y%m%d_%H%M%S")
        file_path = output_dir / f"piawe_{calculation.jurisdiction.value}_{timestamp}.json"

        with open(file_path, 'w') as f:
            json.dump(
                calculation.model_dump(mode="json", by_alias=True),
                f,
                indent=self.config.output.json_indent,
            )

        logger.info(f"Calculation saved to {file_path}")
        return file_path

    def _period_rows(self, table: Table, label: str, result: PIAWEResult):
        table.add_row(
            label,
            f"{result.included_weeks}",
            f"{result.excluded_weeks}",
            f"${result.ordinary_earnings:,.2f}",
            f"${result.overtime_earnings:,.2f}",
            f"${result.allowances_total:,.2f}",
            f"${result.bonuses_total:,.2f}",
            f"${result.commissions_total + result.other_income_total:,.2f}",
            f"${result.total_earnings:,.2f}",
            f"${result.average_weekly:,.2f}",
        )

    def display_summary(self, calculation: PIAWECalculation):
        """Display calculation summary to console."""
        if not self.config.output.console_summary:
            return

        self.console.print(
            f"\n[bold cyan]PIAWE Calculation - {calculation.jurisdiction.value}[/bold cyan]"
        )

        periods = Table(title="Reference Periods")
        periods.add_column("Period", style="cyan")
        for column in ("Included", "Excluded", "Ordinary", "Overtime", "Allowances",
                       "Bonuses", "Comm./Other", "Total", "Average"):
            periods.add_column(column, justify="right")

        self._period_rows(periods, "52-week", calculation.period_52_week)
        self._period_rows(periods, "13-week", calculation.period_13_week)
        self.console.print(periods)

        self.console.print(f"[bold]Injury Date:[/bold] {calculation.injury_date.isoformat()}")
        self.console.print(f"[bold]Method Used:[/bold] {calculation.method_used}")
        if calculation.pre_adjustment_piawe != calculation.final_piawe:
            self.console.print(
                f"[bold]Before Adjustments:[/bold] ${calculation.pre_adjustment_piawe:,.2f}"
            )
        self.console.print(f"[bold green]Final PIAWE:[/bold green] ${calculation.final_piawe:,.2f}")

        if calculation.adjustments:
            adjustments = Table(title="Adjustments Applied")
            adjustments.add_column("Type", style="cyan")
            adjustments.add_column("Description")
            adjustments.add_column("Amount", justify="right", style="yellow")
            for adj in calculation.adjustments:
                adjustments.add_row(adj.type.value, adj.description or adj.reason, f"${adj.amount:,.2f}")
            self.console.print(adjustments)

        if calculation.validation_issues:
            issues = Table(title="Validation Issues")
            issues.add_column("Severity")
            issues.add_column("Type", style="cyan")
            issues.add_column("Message")
            issues.add_column("Suggested Action", style="dim")
            for issue in calculation.validation_issues:
                colour = "red" if issue.severity == IssueSeverity.ERROR else "yellow"
                issues.add_row(
                    f"[{colour}]{issue.severity.value.upper()}[/{colour}]",
                    issue.type.value,
                    issue.message,
                    issue.suggested_action or "",
                )
            self.console.print(issues)
        else:
            self.console.print("[green]No validation issues[/green]")

    def display_rules(self, rules: Iterable[JurisdictionRules]):
        """Display jurisdiction rule sets."""
        table = Table(title="Jurisdiction Rules")
        table.add_column("Code", style="cyan")
        table.add_column("Periods")
        table.add_column("Overtime")
        table.add_column("Bonus Test")
        table.add_column("Average Of")
        table.add_column("Min Weeks", justify="right")
        table.add_column("Weekly Cap", justify="right", style="yellow")
        table.add_column("Legislation", style="dim")

        for r in rules:
            periods = ", ".join(str(p) for p in (r.default_reference_period,) + r.alternative_reference_periods)
            cap = r.max_weekly_amount
            table.add_row(
                r.jurisdiction.value,
                periods,
                r.overtime_inclusion.value,
                "regular only" if r.bonus_regularity_required else "all",
                r.average_basis.value,
                str(r.primary_min_weeks),
                f"${cap:,.2f}" if cap is not None else "-",
                r.legislative_reference,
            )

        self.console.print(table)

    def display_formula(self, rules: JurisdictionRules):
        self.console.print(f"\n[bold]{rules.jurisdiction.value} formula[/bold]")
        self.console.print(rules.formula)
