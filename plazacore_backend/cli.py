import json

import click
from flask import Flask

from .utils.billing import parse_date


def register_commands(app: Flask) -> None:
    """Batch jobs for operators and host schedulers."""

    @app.cli.command("generate-rent-bills")
    @click.option("--date", "run_date", default=None, help="Run as if today were YYYY-MM-DD.")
    def generate_rent_bills_command(run_date):
        """Run the monthly rent bill generation."""
        from .utils.rent_cycle import generate_rent_bills

        today = parse_date(run_date, "date") if run_date else None
        click.echo(json.dumps(generate_rent_bills(today), indent=2))

    @app.cli.command("generate-salaries")
    @click.option("--month", type=int, required=True)
    @click.option("--year", type=int, required=True)
    def generate_salaries_command(month, year):
        """Create pending salary records for active staff."""
        from .utils.payroll import generate_monthly_salaries

        result = generate_monthly_salaries(month, year)
        click.echo(result["message"])

    @app.cli.command("generate-recurring-expenses")
    def generate_recurring_expenses_command():
        """Turn due recurring expenses into plaza utility bills."""
        from .utils.expenses import generate_recurring_expenses

        click.echo(json.dumps(generate_recurring_expenses(), indent=2))
