"""
Unit tests for the console logging helpers.
"""

import re

from infra_cdk.utils.logging_utils import (
    log_error,
    log_progress,
    log_section_complete,
    log_section_start,
)

TIMESTAMP = r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\]"


class TestLoggingUtils:
    """Test the message format of each helper."""

    def test_section_start_with_details(self, capsys):
        log_section_start("CDK synth", "region=us-east-1")
        out = capsys.readouterr().out.strip()
        assert re.fullmatch(rf"{TIMESTAMP} Starting: CDK synth - region=us-east-1", out)

    def test_section_complete_without_details(self, capsys):
        log_section_complete("CDK synth")
        out = capsys.readouterr().out.strip()
        assert re.fullmatch(rf"{TIMESTAMP} Completed: CDK synth", out)

    def test_progress(self, capsys):
        log_progress("Database Tunnel", "waiting")
        out = capsys.readouterr().out.strip()
        assert re.fullmatch(rf"{TIMESTAMP} Database Tunnel: waiting", out)

    def test_error_accepts_exception(self, capsys):
        log_error("CDK synth", ValueError("boom"))
        out = capsys.readouterr().out.strip()
        assert re.fullmatch(rf"{TIMESTAMP} Error in CDK synth: boom", out)
