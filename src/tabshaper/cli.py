"""Command-line interface for the tabshaper toolkit."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
import pandas as pd

from tabshaper.core.exceptions import TabshaperError
from tabshaper.core.utils import ConfigManager, LoggerFactory, SeedManager, Timer, ToolkitConfig
from tabshaper.features.stats import find_skewness
from tabshaper.reporting import TransformationReport

# Global objects
config_manager = ConfigManager(Path("configs"))
logger = LoggerFactory.get_logger("tabshaper.cli")


def _load_table(data_path: str) -> pd.DataFrame:
    df = pd.read_csv(data_path)
    logger.info(f"Loaded {data_path}: {df.shape[0]} rows x {df.shape[1]} columns")
    return df


def _load_config(config_file: Optional[str]) -> ToolkitConfig:
    if config_file:
        return config_manager.validate_config(config_manager.load_config(config_file), ToolkitConfig)
    try:
        return config_manager.load_toolkit_config("report")
    except FileNotFoundError:
        logger.info(f"No report config in {config_manager.config_dir}; using defaults")
        return ToolkitConfig()


def _fail(action: str, error: Exception) -> None:
    click.echo(f"❌ {action} failed: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option("--config-dir", type=click.Path(exists=True, file_okay=False),
              help="Configuration directory path")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def cli(config_dir: Optional[str], debug: bool):
    """tabshaper - imputation, transformation and binning of tabular data."""
    global config_manager
    config_manager = ConfigManager(Path(config_dir) if config_dir else Path("configs"))
    if debug:
        LoggerFactory.set_level("DEBUG")
        logger.debug("Debug mode enabled")


@cli.command()
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--target", "-t", default=None, help="Target column (binary for optimal binning)")
@click.option("--format", "output_format", type=click.Choice(["pdf", "html"], case_sensitive=False),
              default=None, help="Report format (defaults to the configured one)")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False),
              help="Output file (default: transformation_report.<format> in the output dir)")
@click.option("--config", "config_file", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
def report(data_path: str, target: Optional[str], output_format: Optional[str],
           output_path: Optional[str], config_file: Optional[str]):
    """Generate a transformation report for a CSV file."""
    try:
        config = _load_config(config_file)
        LoggerFactory.set_level(config.logging_level)
        SeedManager.set_seed(config.imputation.seed)
        df = _load_table(data_path)

        with Timer(logger, "transformation report"):
            result = TransformationReport(config).generate(
                df,
                target=target,
                output_format=output_format or config.report.output_format,
                output_path=output_path,
            )

        click.echo(f"✅ Report saved to {result.output_path}")
        click.echo(f"   Rows: {result.shape[0]:,} | Columns: {result.shape[1]} | Entries: {len(result.entries)}")
        if result.errors:
            click.echo(f"   ⚠️  {len(result.errors)} stage(s) failed:")
            for entry in result.errors:
                click.echo(f"      {entry.column} [{entry.stage}] {entry.error_type}: {entry.message}")
    except (TabshaperError, OSError, ValueError) as e:
        _fail("Report", e)


@cli.command()
@click.argument("data_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--thres", type=float, default=None, help="Threshold on |skewness| (default 0)")
@click.option("--index/--names", default=True, show_default=True,
              help="Report column positions or column names")
@click.option("--value", is_flag=True, help="Also print the skewness of each flagged column")
def skewness(data_path: str, thres: Optional[float], index: bool, value: bool):
    """List the skewed numeric columns of a CSV file."""
    try:
        df = _load_table(data_path)
        found = find_skewness(df, index=index, value=value, thres=thres)
        if value:
            if found.empty:
                click.echo("No skewed columns found")
            for key, skew in found.items():
                click.echo(f"{key}\t{skew}")
        else:
            if not found:
                click.echo("No skewed columns found")
            for key in found:
                click.echo(str(key))
    except (TabshaperError, OSError, ValueError) as e:
        _fail("Skewness scan", e)


if __name__ == "__main__":
    cli()
