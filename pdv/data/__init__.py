"""Spreadsheet export."""
