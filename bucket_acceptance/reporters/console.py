"""Console reporter using Rich library for formatted CLI output.

Provides colorful, formatted output during a run including:
- Scenario headers and progress
- Per-check results with pass/fail indicators
- Final summary table comparing all scenarios
"""

from rich.console import Console
from rich.table import Table
from rich import box
from rich.rule import Rule

from bucket_acceptance.reporters.base import Reporter
from bucket_acceptance.models import CheckResult, ScenarioResult, ResultStatus
from bucket_acceptance.checks import CHECK_DEFINITIONS


# Short labels for the summary table columns, in display order
CHECK_SHORT_NAMES = {
    "bucket_name": "Name",
    "bucket_arn": "ARN",
    "kms_key_output": "KMS:Out",
    "bucket_exists": "Exists",
    "encryption": "SSE",
    "kms_encryption": "SSE:KMS",
    "versioning": "Ver",
    "public_access_block": "PAB",
    "bucket_policy": "Policy",
    "https_enforced": "HTTPS",
    "lifecycle": "LC",
    "environment_validation": "EnvVal",
}


class ConsoleReporter(Reporter):
    """Rich-based console reporter for CLI output.

    Displays formatted, colorful output during a run:
    - Headers when each scenario starts
    - Pass/fail indicators for each check
    - Summary table at the end

    Args:
        quiet: If True, suppress per-check output (only show summary)
        console: Optional Console to print to (defaults to stdout)
    """

    def __init__(self, quiet: bool = False, console: Console = None):
        # Use legacy_windows=True for ASCII-safe output on Windows consoles
        self.console = console or Console(legacy_windows=True)
        self.quiet = quiet

    def on_check_start(self, scenario_name: str, check_id: str) -> None:
        """Called when a check starts.

        Currently a no-op for console reporter.
        """
        pass

    def on_check_complete(self, scenario_name: str, result: CheckResult) -> None:
        """Displays pass/fail indicator with check details."""
        if self.quiet:
            return

        check_def = CHECK_DEFINITIONS.get(result.check_id, {})
        check_name = check_def.get("name", result.check_id)

        if result.status == ResultStatus.PASS:
            status_text = "[green][PASS][/green]"
        elif result.status == ResultStatus.FAIL:
            status_text = "[red][FAIL][/red]"
        else:
            status_text = "[yellow][ERROR][/yellow]"

        self.console.print(f"  {status_text}: {check_name}")

        if result.error_message and result.status != ResultStatus.PASS:
            self.console.print(f"     [dim]{result.error_message}[/dim]")

    def on_scenario_start(self, scenario_name: str) -> None:
        self.console.print()
        self.console.print(
            Rule(f"[bold cyan]Scenario: {scenario_name}[/bold cyan]", style="cyan", characters="-")
        )

    def on_scenario_complete(self, result: ScenarioResult) -> None:
        """Displays summary of scenario results."""
        if result.status == ResultStatus.PASS:
            status = "[bold green]PASSED[/bold green]"
        elif result.status == ResultStatus.FAIL:
            status = "[bold red]FAILED[/bold red]"
        else:
            status = "[bold yellow]ERROR[/bold yellow]"

        duration_str = ""
        if result.duration_seconds > 0:
            duration_str = f" in {result.duration_seconds:.1f}s"

        self.console.print()
        self.console.print(f"{result.scenario_name}: {status}{duration_str}")

        if result.bucket_name and not self.quiet:
            self.console.print(f"   [dim]bucket_name={result.bucket_name}[/dim]")

        if result.error_message:
            self.console.print(f"   [dim red]{result.error_message}[/dim red]")

    def on_run_complete(self, results: dict[str, ScenarioResult]) -> None:
        """Displays a summary table comparing all scenarios."""
        if not results:
            self.console.print("[yellow]No results to display.[/yellow]")
            return

        self.console.print()
        self.console.print(
            Rule("[bold]Bucket Module Acceptance Summary[/bold]", style="magenta", characters="-")
        )

        # Only show columns for checks some scenario actually ran
        check_ids = [
            check_id for check_id in CHECK_SHORT_NAMES
            if any(check_id in r.checks for r in results.values())
        ]

        table = Table(
            title="",
            show_header=True,
            header_style="bold magenta",
            border_style="dim",
            box=box.ASCII,
        )

        table.add_column("Scenario", style="cyan", no_wrap=True)
        for check_id in check_ids:
            table.add_column(CHECK_SHORT_NAMES[check_id], justify="center", no_wrap=True)
        table.add_column("Status", justify="center", no_wrap=True)

        for scenario_result in results.values():
            row_data = [scenario_result.scenario_name]

            for check_id in check_ids:
                check_result = scenario_result.checks.get(check_id)
                if check_result is None:
                    symbol = "[dim]-[/dim]"
                elif check_result.status == ResultStatus.PASS:
                    symbol = "[green]OK[/green]"
                elif check_result.status == ResultStatus.FAIL:
                    symbol = "[red]X[/red]"
                else:
                    symbol = "[yellow]?[/yellow]"
                row_data.append(symbol)

            if scenario_result.status == ResultStatus.PASS:
                status_symbol = "[green]PASS[/green]"
            elif scenario_result.status == ResultStatus.FAIL:
                status_symbol = "[red]FAIL[/red]"
            else:
                status_symbol = "[yellow]ERROR[/yellow]"
            row_data.append(status_symbol)

            table.add_row(*row_data)

        self.console.print(table)
        self.console.print()
