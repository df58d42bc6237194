"""Shared helpers for dates, money, logging and output sanitization."""
