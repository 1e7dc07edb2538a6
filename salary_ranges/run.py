"""Benchmark runner: validates sources and builds the salary range tables."""

import argparse
import logging
import sys
from pathlib import Path

import yaml
from rich.console import Console
from rich.table import Table

from salary_ranges import benchmark
from salary_ranges.config import BenchmarkConfig, apply_overrides, get_env_config, load_benchmark_config
from salary_ranges.utils.cache import FingerprintCache

console = Console()

CONFIG_FILE = Path(__file__).parent.parent / "salary_ranges.yaml"


def load_config() -> dict:
    if CONFIG_FILE.exists():
        with open(CONFIG_FILE) as f:
            return yaml.safe_load(f) or {}

    # Fall back to pyproject.toml metadata
    return dict(get_env_config())


def resolve_config(args: argparse.Namespace) -> BenchmarkConfig:
    settings = load_config()
    env = args.env or settings.pop("env", "production")
    settings.pop("env", None)
    config = apply_overrides(load_benchmark_config(env), settings)

    cli_overrides: dict = {}
    if args.data_dir:
        cli_overrides["data_dir"] = args.data_dir
    if args.output_dir:
        cli_overrides["output_dir"] = args.output_dir
    if args.format:
        cli_overrides["output_format"] = args.format
    if args.region:
        cli_overrides["regions"] = args.region
    return apply_overrides(config, cli_overrides)


def validate_sources(config: BenchmarkConfig) -> bool:
    match benchmark.validate(config):
        case {"status": "ok", "regions": regions}:
            console.print(f"[green]All required sources present for {regions}[/green]")
        case {"status": "error", "message": msg}:
            console.print(f"[red]{msg}[/red]")
            return False
        case other:
            console.print(f"[red]Unknown validation result: {other}[/red]")
            return False

    try:
        inputs = benchmark.load_benchmark_inputs(config)
        results = benchmark.check_tables(inputs, config)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Source tables unusable: {exc}[/red]")
        return False

    table = Table(title="Source Table Validation")
    table.add_column("Table")
    table.add_column("Rows", justify="right")
    table.add_column("Valid")
    table.add_column("Details")

    for r in results:
        status = "[green]✓[/green]" if r["valid"] else "[red]✗[/red]"
        detail = "; ".join(r["errors"][:3]) or "OK"
        table.add_row(r["table"], r["rows"], status, detail)

    console.print(table)
    return all(r["valid"] for r in results)


def print_summary(summary) -> None:
    table = Table(title="Benchmark Coverage")
    table.add_column("Region")
    table.add_column("Rows", justify="right")
    table.add_column("With range", justify="right")
    table.add_column("With internal data", justify="right")

    for row in summary.itertuples(index=False):
        table.add_row(row.region, str(row.rows), str(row.with_range), str(row.with_internal))
    console.print(table)


def main():
    parser = argparse.ArgumentParser(description="Build compensation benchmark tables")
    parser.add_argument("--validate", action="store_true", help="Only validate sources, don't build")
    parser.add_argument("--env", type=str, help="Environment: production, staging or development")
    parser.add_argument("--data-dir", type=str, help="Directory holding the source tables")
    parser.add_argument("--output-dir", type=str, help="Directory for the benchmark outputs")
    parser.add_argument("--format", choices=["csv", "parquet", "json", "excel"], help="Output format")
    parser.add_argument("--region", action="append", help="Restrict to a region (repeatable)")
    parser.add_argument("--no-usd", action="store_true", help="Skip the reference-currency table")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = resolve_config(args)
    except ValueError as exc:
        console.print(f"[red]Invalid configuration: {exc}[/red]")
        sys.exit(1)

    if args.validate:
        if not validate_sources(config):
            sys.exit(1)
        return

    console.print(f"[bold]Building salary benchmarks ({config.env})...[/bold]")
    cache = FingerprintCache(ttl_seconds=config.cache.ttl_seconds) if config.cache.enabled else None
    try:
        tables = benchmark.run(config, include_reference_currency=not args.no_usd, cache=cache)
    except (FileNotFoundError, ValueError) as exc:
        console.print(f"[red]Build aborted: {exc}[/red]")
        sys.exit(1)

    print_summary(tables["summary"])
    console.print("[bold green]Benchmark build complete.[/bold green]")


if __name__ == "__main__":
    main()
