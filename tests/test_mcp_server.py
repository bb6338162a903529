"""
Tests for the MCP server tools.
"""

import asyncio

import pytest

from business_day_calculator import mcp_server
from business_day_calculator.data.schemas import Config


@pytest.fixture(autouse=True)
def venue_config(monkeypatch):
    """Berlin venue opening at 06:00 with no end hour."""
    cfg = Config(auto_start_time="06:00", timezone="Europe/Berlin")
    monkeypatch.setattr(mcp_server, "config", cfg)
    return cfg


class TestServer:
    """Tests for create_mcp_server."""

    def test_registers_tools(self):
        mcp = mcp_server.create_mcp_server()

        tools = asyncio.run(mcp.list_tools())

        assert {tool.name for tool in tools} == {
            "business_day_range",
            "transaction_business_day",
            "business_days_in_range",
            "hours_in_business_day",
        }


class TestTools:
    """Tests for the tool functions."""

    def test_business_day_range(self):
        result = mcp_server.business_day_range("2024-03-15", "22:00", "05:00")

        assert result == {
            "start": "2024-03-15T22:00:00",
            "end": "2024-03-16T05:00:59.999000",
        }

    def test_business_day_range_uses_config(self):
        result = mcp_server.business_day_range("2024-03-15")
        assert result["start"] == "2024-03-15T06:00:00"

    def test_business_day_range_invalid_date(self):
        result = mcp_server.business_day_range("15.03.2024")
        assert "error" in result

    def test_transaction_business_day(self):
        result = mcp_server.transaction_business_day("2024-03-15T02:30:00")
        assert result["business_day"] == "2024-03-14T06:00:00"

    def test_transaction_business_day_utc(self):
        """05:30 UTC is 06:30 in Berlin, after the start."""
        result = mcp_server.transaction_business_day("2024-03-15T05:30:00Z")

        assert result["timestamp"] == "2024-03-15T06:30:00"
        assert result["business_day"] == "2024-03-15T06:00:00"

    def test_transaction_business_day_invalid(self):
        result = mcp_server.transaction_business_day("yesterday")
        assert "error" in result

    def test_business_days_in_range(self):
        result = mcp_server.business_days_in_range("2024-03-15", "2024-03-17", "22:00", "05:00")

        assert result["count"] == 3
        assert result["business_days"][2]["start"] == "2024-03-17T22:00:00"

    def test_business_days_in_range_invalid(self):
        result = mcp_server.business_days_in_range("2024-03-15", "soon")
        assert "error" in result

    def test_hours_in_business_day(self):
        assert mcp_server.hours_in_business_day("22:00", "05:00") == {"hours": 7}
        assert mcp_server.hours_in_business_day() == {"hours": 24}
