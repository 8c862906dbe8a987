"""
Core modules for Claude Token Monitor.

This package contains the aggregation, threshold and error-handling
logic that sits on top of the ccusage reports.
"""
