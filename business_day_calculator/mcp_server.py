"""
MCP Server for the Business Day Calculator.

This module provides an MCP (Model Context Protocol) server that exposes
the business day calculations to MCP clients.

Supports two transport modes:
- stdio: For local desktop integration
- sse: For HTTP-based integration (Docker, remote servers)
"""

import argparse
import logging
import os
from datetime import date, datetime
from typing import Optional

from mcp.server.fastmcp import FastMCP

from business_day_calculator.config.manager import ConfigManager
from business_day_calculator.core.calculator import BusinessDayCalculator
from business_day_calculator.data.schemas import BusinessDayConfig

logger = logging.getLogger(__name__)

# Load configuration
config_manager = ConfigManager()
config = config_manager.load_config()


def _calculator(
    auto_start_time: Optional[str],
    business_day_end_hour: Optional[str],
) -> BusinessDayCalculator:
    """Build a calculator from tool arguments, falling back to the config."""
    return BusinessDayCalculator(
        BusinessDayConfig(
            auto_start_time=auto_start_time or config.auto_start_time,
            business_day_end_hour=business_day_end_hour or config.business_day_end_hour,
        )
    )


def business_day_range(
    anchor_date: str,
    auto_start_time: Optional[str] = None,
    business_day_end_hour: Optional[str] = None,
) -> dict:
    """
    Get the start and end of the business day starting on a date.

    Args:
        anchor_date: Date in format YYYY-MM-DD (e.g., "2024-03-15")
        auto_start_time: Business day start as HH:MM (default: from config)
        business_day_end_hour: Business day end as HH:MM (default: same as start)

    Returns:
        Dictionary with start and end as ISO timestamps.

    Examples:
        >>> business_day_range("2024-03-15", "22:00", "05:00")
    """
    try:
        anchor = date.fromisoformat(anchor_date)
    except ValueError as e:
        return {"error": f"Invalid date format. Use YYYY-MM-DD. Details: {str(e)}"}

    result = _calculator(auto_start_time, business_day_end_hour).range_for(anchor)
    return {"start": result.start.isoformat(), "end": result.end.isoformat()}


def transaction_business_day(
    timestamp: str,
    auto_start_time: Optional[str] = None,
) -> dict:
    """
    Find the business day a transaction timestamp belongs to.

    A sale before the business day start time belongs to the previous
    calendar day's business day. Timestamps with a UTC offset (e.g. "Z")
    are converted to the venue's wall-clock time first.

    Args:
        timestamp: ISO timestamp (e.g., "2024-03-15T02:30:00")
        auto_start_time: Business day start as HH:MM (default: from config)

    Returns:
        Dictionary with the business day identifier (its start instant).
    """
    try:
        moment = config.wall_clock(datetime.fromisoformat(timestamp.replace("Z", "+00:00")))
    except ValueError as e:
        return {"error": f"Invalid timestamp. Use ISO 8601. Details: {str(e)}"}

    business_day = _calculator(auto_start_time, None).business_day_of(moment)
    return {"timestamp": moment.isoformat(), "business_day": business_day.isoformat()}


def business_days_in_range(
    start_date: str,
    end_date: str,
    auto_start_time: Optional[str] = None,
    business_day_end_hour: Optional[str] = None,
) -> dict:
    """
    List the business days anchored on each date of a period.

    Args:
        start_date: First date, YYYY-MM-DD
        end_date: Last date (inclusive), YYYY-MM-DD
        auto_start_time: Business day start as HH:MM (default: from config)
        business_day_end_hour: Business day end as HH:MM (default: same as start)

    Returns:
        Dictionary with the count and a list of start/end pairs.
    """
    try:
        first = date.fromisoformat(start_date)
        last = date.fromisoformat(end_date)
    except ValueError as e:
        return {"error": f"Invalid date format. Use YYYY-MM-DD. Details: {str(e)}"}

    ranges = _calculator(auto_start_time, business_day_end_hour).days_between(first, last)
    return {
        "count": len(ranges),
        "business_days": [
            {"start": r.start.isoformat(), "end": r.end.isoformat()} for r in ranges
        ],
    }


def hours_in_business_day(
    auto_start_time: Optional[str] = None,
    business_day_end_hour: Optional[str] = None,
) -> dict:
    """
    Number of whole hours in a business day (minutes are ignored).

    Args:
        auto_start_time: Business day start as HH:MM (default: from config)
        business_day_end_hour: Business day end as HH:MM (default: same as start)

    Examples:
        >>> hours_in_business_day("22:00", "05:00")
        {"hours": 7}
    """
    return {"hours": _calculator(auto_start_time, business_day_end_hour).hours()}


TOOLS = (
    business_day_range,
    transaction_business_day,
    business_days_in_range,
    hours_in_business_day,
)


def create_mcp_server(host: str = "127.0.0.1", port: int = 8000) -> FastMCP:
    """Create and configure the MCP server with tools."""
    mcp = FastMCP("Business Day Calculator", host=host, port=port)

    for tool in TOOLS:
        mcp.tool()(tool)

    return mcp


def main():
    """Run the MCP server with configurable transport.

    Transport can be set via:
    - Command line: --transport sse --port 8080
    - Environment: MCP_TRANSPORT=sse MCP_PORT=8080 MCP_HOST=0.0.0.0
    """
    parser = argparse.ArgumentParser(description="Business Day Calculator MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="Transport mode: stdio (default) or sse for HTTP",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", os.environ.get("FASTMCP_HOST", "0.0.0.0")),
        help="Host to bind to (SSE mode only, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", os.environ.get("FASTMCP_PORT", "8080"))),
        help="Port to listen on (SSE mode only, default: 8080)",
    )

    args = parser.parse_args()

    mcp = create_mcp_server(host=args.host, port=args.port)
    logger.info(f"Starting MCP server with {args.transport} transport")

    if args.transport == "sse":
        mcp.run(transport="sse")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
