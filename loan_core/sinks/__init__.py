"""Output sinks for exporting records and derived reports."""

from loan_core.sinks.console import ConsoleSink
from loan_core.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "JsonFileSink"]
