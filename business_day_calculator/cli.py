"""
CLI interface for the business day calculator.
"""

import logging
import sys
from datetime import date, datetime
from typing import Optional

import click

from business_day_calculator import __version__
from business_day_calculator.config.manager import ConfigManager
from business_day_calculator.core.calculator import BusinessDayCalculator
from business_day_calculator.core.closing import calculate_closing_summary, group_by_business_day
from business_day_calculator.core.scheduler import closing_window
from business_day_calculator.core.time_parser import parse_time_of_day, parse_time_of_day_strict
from business_day_calculator.data.loader import TransactionLoader
from business_day_calculator.data.schemas import BusinessDayConfig, Config
from business_day_calculator.output.exporter import ResultExporter
from business_day_calculator.output.formatter import ConsoleFormatter

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def parse_date(date_str: str) -> date:
    """Parse date string in various formats."""
    formats = ["%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y"]
    for fmt in formats:
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    raise ValueError(
        f"Invalid date format: {date_str}. Use YYYY-MM-DD, DD.MM.YYYY, or DD/MM/YYYY"
    )


def parse_timestamp(timestamp_str: str) -> datetime:
    """Parse an ISO 8601 (optionally with offset or Z) or DD.MM.YYYY HH:MM timestamp."""
    try:
        return datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in ("%d.%m.%Y %H:%M:%S", "%d.%m.%Y %H:%M"):
        try:
            return datetime.strptime(timestamp_str, fmt)
        except ValueError:
            continue
    raise ValueError(
        f"Invalid timestamp: {timestamp_str}. Use YYYY-MM-DDTHH:MM[:SS] or DD.MM.YYYY HH:MM"
    )


def load_settings(config_path: Optional[str]) -> Config:
    """Load configuration from file and environment."""
    return ConfigManager(config_path).load_config()


def build_calculator(
    cfg: Config,
    start_time: Optional[str],
    end_time: Optional[str],
    strict: bool,
    clear_end_time: bool = False,
) -> BusinessDayCalculator:
    """
    Create a calculator from the config and command line overrides.

    With clear_end_time the configured end hour is ignored and the business
    day lasts until the next start.
    """
    if clear_end_time and end_time:
        raise ValueError("--end-time and --no-end-time cannot be combined")

    end_hour = None if clear_end_time else (end_time or cfg.business_day_end_hour)
    business_day = BusinessDayConfig(
        auto_start_time=start_time or cfg.auto_start_time,
        business_day_end_hour=end_hour,
    )
    parser = parse_time_of_day_strict if strict else parse_time_of_day
    return BusinessDayCalculator(business_day, parser=parser)


def business_day_options(func):
    """Options shared by every command that computes business days."""
    func = click.option(
        "--config", "-c",
        type=click.Path(exists=True),
        help="Path to config file (optional)",
    )(func)
    func = click.option(
        "--strict",
        is_flag=True,
        default=False,
        help="Reject malformed or out-of-range times instead of reading them as 0",
    )(func)
    func = click.option(
        "--no-end-time", "clear_end_time",
        is_flag=True,
        default=False,
        help="Ignore the configured end hour, the business day runs until the next start",
    )(func)
    func = click.option(
        "--end-time", "-e",
        help="Business day end (HH:MM), overrides the config",
    )(func)
    func = click.option(
        "--start-time", "-s",
        help="Business day start (HH:MM), overrides the config",
    )(func)
    return func


@click.group()
@click.version_option(version=__version__, prog_name="business-day")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose):
    """Business Day Calculator - Bucket POS sales into business days that may cross midnight."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command(name="range")
@click.option(
    "--date", "-d", "anchor",
    required=True,
    help="Anchor date (YYYY-MM-DD, DD.MM.YYYY, or DD/MM/YYYY)",
)
@business_day_options
def range_command(anchor, start_time, end_time, strict, clear_end_time, config):
    """Show the start and end of the business day starting on a date."""
    formatter = ConsoleFormatter()

    try:
        anchor_date = parse_date(anchor)
        cfg = load_settings(config)
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)

        formatter.print_config(calculator.config, calculator.hours())
        formatter.print_range(
            datetime.combine(anchor_date, datetime.min.time()),
            calculator.range_for(anchor_date),
        )

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        logger.debug("Detailed error:", exc_info=True)
        sys.exit(1)


@main.command()
@click.option(
    "--timestamp", "-t",
    required=True,
    help="Transaction timestamp (YYYY-MM-DDTHH:MM[:SS] or DD.MM.YYYY HH:MM)",
)
@business_day_options
def bucket(timestamp, start_time, end_time, strict, clear_end_time, config):
    """Show which business day a transaction timestamp belongs to."""
    formatter = ConsoleFormatter()

    try:
        cfg = load_settings(config)
        moment = cfg.wall_clock(parse_timestamp(timestamp))
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)

        formatter.print_bucket(moment, calculator.business_day_of(moment))

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        logger.debug("Detailed error:", exc_info=True)
        sys.exit(1)


@main.command()
@click.option(
    "--from", "-f", "start_date",
    required=True,
    help="First anchor date (YYYY-MM-DD, DD.MM.YYYY, or DD/MM/YYYY)",
)
@click.option(
    "--to", "-t", "end_date",
    required=True,
    help="Last anchor date (YYYY-MM-DD, DD.MM.YYYY, or DD/MM/YYYY)",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Write the ranges to this CSV file (optional)",
)
@business_day_options
def days(start_date, end_date, output, start_time, end_time, strict, clear_end_time, config):
    """List the business days anchored on each date of a period."""
    formatter = ConsoleFormatter()

    try:
        first = parse_date(start_date)
        last = parse_date(end_date)

        if last < first:
            formatter.print_error("End date must be after start date")
            sys.exit(1)

        cfg = load_settings(config)
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)
        ranges = calculator.days_between(first, last)

        formatter.print_ranges(ranges)

        if output:
            exporter = ResultExporter(output_directory=cfg.output_directory)
            path = exporter.export_ranges_csv(ranges, output)
            formatter.print_success(f"Ranges saved to {path}")

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        logger.debug("Detailed error:", exc_info=True)
        sys.exit(1)


@main.command()
@business_day_options
def hours(start_time, end_time, strict, clear_end_time, config):
    """Show how many hours the configured business day lasts."""
    formatter = ConsoleFormatter()

    try:
        cfg = load_settings(config)
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)
        formatter.print_config(calculator.config, calculator.hours())

    except ValueError as e:
        formatter.print_error(str(e))
        sys.exit(1)


@main.command()
@click.option(
    "--file", "-i", "transactions_file",
    required=True,
    type=click.Path(exists=True),
    help="Transactions export (.json or .csv)",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    help="Output file path (optional), with --format both the extension is replaced by .json and .csv",
)
@click.option(
    "--format",
    type=click.Choice(["json", "csv", "both", "console"]),
    default="console",
    help="Output format (default: console)",
)
@business_day_options
def summary(transactions_file, output, format, start_time, end_time, strict, clear_end_time, config):
    """Summarize a transactions export per business day."""
    formatter = ConsoleFormatter()

    try:
        cfg = load_settings(config)
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)

        transactions = TransactionLoader(cfg.timezone).load(transactions_file)
        summaries = group_by_business_day(transactions, calculator.config, calculator.parser)

        if format in ("console", "both"):
            formatter.print_business_day_summaries(summaries)

        if format in ("json", "csv", "both"):
            exporter = ResultExporter(output_directory=cfg.output_directory)

            if format == "json":
                path = exporter.export_json(summaries, output)
                formatter.print_success(f"Result saved to {path}")
            elif format == "csv":
                path = exporter.export_csv(summaries, output)
                formatter.print_success(f"Result saved to {path}")
            else:  # both
                json_path, csv_path = exporter.export_both(summaries, output)
                formatter.print_success(f"Results saved to:\n  - {json_path}\n  - {csv_path}")

    except (ValueError, FileNotFoundError) as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        logger.debug("Detailed error:", exc_info=True)
        sys.exit(1)


@main.command()
@click.option(
    "--at", "-a", "closed_at",
    help="Closing instant (default: now in the venue timezone)",
)
@click.option(
    "--file", "-i", "transactions_file",
    type=click.Path(exists=True),
    help="Transactions export to summarize for the closing (optional)",
)
@business_day_options
def close(closed_at, transactions_file, start_time, end_time, strict, clear_end_time, config):
    """Show the business day a closing at the given instant would cover."""
    formatter = ConsoleFormatter()

    try:
        cfg = load_settings(config)
        calculator = build_calculator(cfg, start_time, end_time, strict, clear_end_time)
        moment = cfg.wall_clock(parse_timestamp(closed_at)) if closed_at else cfg.now()

        window = closing_window(moment, calculator.config, calculator.parser)
        formatter.print_closing_window(window)

        if transactions_file:
            transactions = TransactionLoader(cfg.timezone).load(transactions_file)
            formatter.print_summary(
                calculate_closing_summary(transactions, window.start, window.end)
            )

    except (ValueError, FileNotFoundError) as e:
        formatter.print_error(str(e))
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Unexpected error: {e}")
        logger.debug("Detailed error:", exc_info=True)
        sys.exit(1)


@main.command()
@click.option(
    "--host", "-h",
    default=None,
    help="Host to bind to (default: from config or 0.0.0.0)",
)
@click.option(
    "--port", "-p",
    type=int,
    default=None,
    help="Port to bind to (default: from config or 8000)",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to config file (optional)",
)
def serve(host, port, config):
    """Start the FastAPI server."""
    formatter = ConsoleFormatter()

    try:
        import uvicorn

        cfg = load_settings(config)

        # Use provided values or fall back to config
        api_host = host or cfg.api_host
        api_port = port or cfg.api_port

        formatter.console.print(f"Starting API server at http://{api_host}:{api_port}")
        formatter.console.print("Press Ctrl+C to stop")
        formatter.console.print()

        uvicorn.run(
            "business_day_calculator.api:app",
            host=api_host,
            port=api_port,
            reload=False,
        )

    except ImportError:
        formatter.print_error("uvicorn is required for the API server. Install it with: pip install uvicorn")
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
