"""Reporters for check outcomes."""

from statecheck.reporters.console import ConsoleReporter
from statecheck.reporters.json import JSONReporter

__all__ = [
    "ConsoleReporter",
    "JSONReporter",
]
