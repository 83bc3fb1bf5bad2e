from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from .envelope import (
    Scenario,
    ScenarioFileError,
    default_scenario,
    load_scenario,
    save_scenario,
)
from .model import closing_costs, compare_profiles, compare_scenario
from .optimizer import (
    OptimizationVariable,
    find_optimized_value,
    optimize_profile,
    suggest_target_year,
)

app = typer.Typer(help="Compare building wealth by buying a home versus renting.")

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _default_scenario_path() -> Optional[str]:
    return os.environ.get("RENT_VS_BUY_SCENARIO")


def _default_log_level() -> str:
    return os.environ.get("RENT_VS_BUY_LOG_LEVEL", "WARNING")


@app.callback()
def main(
    log_level: str = typer.Option(
        default_factory=_default_log_level,
        help="Logging level (env RENT_VS_BUY_LOG_LEVEL if omitted).",
    ),
) -> None:
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        typer.echo(f"Error: unknown log level '{log_level}'", err=True)
        raise typer.Exit(code=1)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _load(path: Optional[str]) -> Scenario:
    if not path:
        return default_scenario()
    try:
        return load_scenario(path)
    except ScenarioFileError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


def _money(value: Optional[float]) -> str:
    return "n/a" if value is None else f"${value:,.0f}"


@app.command()
def run(
    scenario: Optional[str] = typer.Argument(
        default_factory=_default_scenario_path,
        help="Exported scenario JSON (env RENT_VS_BUY_SCENARIO if omitted).",
    ),
    show_table: bool = typer.Option(
        False, help="If set, dump the yearly rows as JSON."
    ),
) -> None:
    """
    Simulate every profile in the scenario against the shared rent settings.
    """
    data = _load(scenario)
    settings = data.global_settings
    rent = data.rent_settings
    results = compare_profiles(data.profiles, settings, rent)

    typer.echo(f"Forecast: {settings.forecast_years} years")
    typer.echo(
        f"Rent: ${rent.monthly_rent:,.0f}/month, +{rent.annual_rent_increase:g}%/year"
    )

    for profile in data.profiles:
        result = results[profile.id]
        typer.echo("")
        typer.echo(f"Profile: {profile.label} ({profile.id})")
        typer.echo(f"Purchase price: ${profile.purchase_price:,.0f}")
        typer.echo(f"Down payment: ${result.down_payment:,.0f}")
        typer.echo(f"Closing costs: ${result.total_closing_costs:,.0f}")
        typer.echo(f"Loan amount: ${result.loan_amount:,.0f}")
        typer.echo(f"Monthly P&I: ${result.monthly_payment:,.2f}")
        last = result.final_row
        if last is not None:
            typer.echo(f"Net house wealth (year {last.year}): {_money(last.net_house_wealth)}")
            typer.echo(
                f"Net renter wealth (year {last.year}): {_money(last.net_renter_wealth)}"
            )
        typer.echo(f"Better outcome: {result.better_option}")
        if result.breakeven_year is None:
            typer.echo("Breakeven: none within forecast")
        else:
            typer.echo(
                f"Breakeven year: {result.breakeven_year} "
                f"(~{result.precise_breakeven:.2f} years)"
            )

    if show_table:
        payload = {
            profile_id: [asdict(row) for row in result.rows]
            for profile_id, result in results.items()
        }
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def optimize(
    scenario: Optional[str] = typer.Argument(
        default_factory=_default_scenario_path,
        help="Exported scenario JSON (env RENT_VS_BUY_SCENARIO if omitted).",
    ),
    profile_id: Optional[str] = typer.Option(
        None, "--profile", help="Profile id to optimize (first profile if omitted)."
    ),
    target_year: Optional[int] = typer.Option(
        None, min=1, help="Breakeven year to reach (suggested from current if omitted)."
    ),
    variable: Optional[OptimizationVariable] = typer.Option(
        None, help="Solve for a single variable instead of all three."
    ),
) -> None:
    """
    Find the price, interest rate or down payment that reaches a breakeven target.
    """
    data = _load(scenario)
    try:
        profile = data.profile(profile_id) if profile_id else data.profiles[0]
    except KeyError:
        typer.echo(f"Error: no profile with id '{profile_id}'", err=True)
        raise typer.Exit(code=1)

    settings = data.global_settings
    rent = data.rent_settings

    if variable is not None:
        current = compare_scenario(profile, settings, rent)
        target = target_year or suggest_target_year(current.breakeven_year)
        value = find_optimized_value(target, variable, profile, settings, rent)
        typer.echo(f"Profile: {profile.label} ({profile.id})")
        typer.echo(f"Target breakeven year: {target}")
        typer.echo(f"{variable.value}: {_format_value(variable, value)}")
        return

    summary = optimize_profile(profile, settings, rent, target_year=target_year)
    typer.echo(f"Profile: {profile.label} ({profile.id})")
    if summary.breakeven_year is None:
        typer.echo("Current breakeven: none within forecast")
    else:
        typer.echo(
            f"Current breakeven: year {summary.breakeven_year} "
            f"(~{summary.precise_breakeven:.2f} years)"
        )
    if not summary.solved:
        typer.echo("Already breaking even in year 1; nothing to optimize.")
        return
    typer.echo(f"Target breakeven year: {summary.target_year}")
    typer.echo(f"price: {_format_value(OptimizationVariable.PRICE, summary.price)}")
    typer.echo(f"rate: {_format_value(OptimizationVariable.RATE, summary.rate)}")
    down = _format_value(OptimizationVariable.DOWN_PAYMENT, summary.down_payment_pct)
    typer.echo(f"downpayment: {down}")


@app.command("export-defaults")
def export_defaults(
    path: Path = typer.Argument(..., help="Where to write the scenario JSON."),
) -> None:
    """
    Write the built-in default scenario so it can be edited and fed back in.
    """
    scenario = default_scenario()
    try:
        save_scenario(scenario, path)
    except ScenarioFileError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    costs = closing_costs(scenario.profiles[0])
    typer.echo(f"Wrote {path} (default closing costs ${costs.total:,.0f})")


def _format_value(variable: OptimizationVariable, value: Optional[float]) -> str:
    if value is None:
        return "not reachable"
    if variable is OptimizationVariable.PRICE:
        return f"${value:,.0f}"
    return f"{value:.2f}%"


if __name__ == "__main__":
    app()
