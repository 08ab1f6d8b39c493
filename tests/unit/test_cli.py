"""
Unit tests for the command line tools.
"""

import json

import pytest

from scopeperth.cli import api_server, report


class TestReportParser:
    """Tests for the report argument parser."""

    def test_defaults(self):
        args = report.build_parser().parse_args([])
        filters = report.filters_from_args(args)
        assert filters.min_bedrooms == 3
        assert filters.available_only is True
        assert filters.max_price is None

    def test_include_under_offer(self):
        args = report.build_parser().parse_args(["--include-under-offer", "--max-price", "900000"])
        filters = report.filters_from_args(args)
        assert filters.available_only is False
        assert filters.max_price == 900_000

    def test_availability_flags_exclusive(self):
        with pytest.raises(SystemExit):
            report.build_parser().parse_args(["--available-only", "--include-under-offer"])


class TestBuildReport:
    """Tests for build_report and print_report."""

    def test_sections(self, service):
        filters = report.filters_from_args(report.build_parser().parse_args([]))
        result = report.build_report(service, filters, scorecard=True, inspections=True)
        assert result["stats"]["total"] == 3
        assert result["top_suburbs"] == []
        assert {row["suburb"] for row in result["scorecard"]} == {"KARRINYUP", "SCARBOROUGH"}
        assert result["inspections"][0]["label"] == "This Weekend"
        assert result["inspections"][0]["listings"][0]["id"] == "101"
        json.dumps(result)

    def test_optional_sections_omitted(self, service):
        result = report.build_report(service, report.filters_from_args(report.build_parser().parse_args([])))
        assert "scorecard" not in result
        assert "inspections" not in result

    def test_print_report(self, service, capsys):
        filters = report.filters_from_args(report.build_parser().parse_args(["--suburb", "Scarborough"]))
        report.print_report(report.build_report(service, filters, scorecard=True, inspections=True))
        out = capsys.readouterr().out
        assert "ScopePerth Dashboard Report" in out
        assert "Listings:     2" in out
        assert "12 Beach Road, Scarborough" in out

    def test_main_requires_credentials(self, test_config, monkeypatch):
        monkeypatch.setattr(test_config.supabase, "url", "")
        with pytest.raises(SystemExit) as exc:
            report.main([])
        assert exc.value.code == 1


class TestApiServerParser:
    """Tests for the API server argument parser."""

    def test_options(self):
        args = api_server.build_parser().parse_args(["--port", "8080", "--debug"])
        assert args.port == 8080
        assert args.debug is True
        assert args.host is None
