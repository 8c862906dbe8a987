"""
SDK for Claude Token Monitor.

Provides programmatic access to usage monitoring.
"""

from .monitor import UsageMonitor, get_current_usage, get_usage_pattern, get_usage_summary

__all__ = ["UsageMonitor", "get_current_usage", "get_usage_pattern", "get_usage_summary"]
