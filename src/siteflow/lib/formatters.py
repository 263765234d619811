"""
Output Formatting Functions.

This module provides consistent formatting functions for timestamps
and tables across siteflow commands.

Functions
---------
format_timestamp : Format epoch seconds as YYYY-MM-DD HH:MM:SS
format_table : Format data as ASCII table with headers

Classes
-------
CapitalizedHelpFormatter : Custom argparse formatter with capitalized section titles
"""

import argparse
from datetime import UTC, datetime


class CapitalizedHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """
    Custom help formatter that capitalizes section titles.

    Extends RawDescriptionHelpFormatter to:
    - Capitalize "usage:" to "Usage:"
    - Add newline after usage for better readability
    - Preserve raw formatting for description text
    """

    def add_usage(self, usage, actions, groups, prefix=None):
        if prefix is None:
            prefix = "Usage:\n  "
        return super().add_usage(usage, actions, groups, prefix)


def create_subparsers(parser: argparse.ArgumentParser, dest: str, **kwargs) -> argparse._SubParsersAction:
    """
    Create subparsers with consistent formatting applied automatically.

    Every parser added through the returned action gets the
    CapitalizedHelpFormatter and an "Options" title.

    Parameters
    ----------
    parser : argparse.ArgumentParser
        Parent parser to add subparsers to
    dest : str
        Destination attribute name for storing the subcommand
    **kwargs
        Additional arguments passed to add_subparsers()

    Returns
    -------
    argparse._SubParsersAction
        Subparsers object with the formatting patch applied

    Examples
    --------
    >>> parser = argparse.ArgumentParser()
    >>> subparsers = create_subparsers(parser, "subcommand", title="Subcommands")
    >>> sub = subparsers.add_parser("test", help="Test command")
    """
    defaults = {
        "help": "",
        "title": "Subcommands",
    }
    defaults.update(kwargs)

    subparsers = parser.add_subparsers(dest=dest, **defaults)

    # Monkey-patch add_parser to automatically apply formatting
    original_add_parser = subparsers.add_parser

    def custom_add_parser(*args, **parse_kwargs):
        if "formatter_class" not in parse_kwargs:
            parse_kwargs["formatter_class"] = CapitalizedHelpFormatter
        subparser = original_add_parser(*args, **parse_kwargs)
        subparser._optionals.title = "Options"
        return subparser

    subparsers.add_parser = custom_add_parser

    return subparsers


def format_timestamp(epoch: float | None) -> str:
    """
    Format epoch seconds as a UTC YYYY-MM-DD HH:MM:SS string.

    Parameters
    ----------
    epoch : float or None
        Seconds since the Unix epoch.

    Returns
    -------
    str
        Formatted timestamp, or an empty string when unset or invalid.

    Examples
    --------
    >>> format_timestamp(1762511400)
    '2025-11-07 10:30:00'
    >>> format_timestamp(None)
    ''
    """
    if not epoch:
        return ""
    try:
        dt = datetime.fromtimestamp(float(epoch), UTC)
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError, TypeError):
        return ""


def format_table(headers: list[str], rows: list[list[str]], column_widths: list[int] = None) -> str:
    """
    Format data as ASCII table with headers and rows.

    Parameters
    ----------
    headers : list of str
        Column headers.
    rows : list of list of str
        Table rows, where each row is a list of cell values.
    column_widths : list of int, optional
        Fixed column widths. If None, auto-calculated from data.

    Returns
    -------
    str
        Formatted ASCII table with aligned columns and separator line.

    Examples
    --------
    >>> headers = ["Name", "Age", "City"]
    >>> rows = [["Alice", "30", "NYC"], ["Bob", "25", "SF"]]
    >>> print(format_table(headers, rows))
    Name   Age  City
    ----------------
    Alice  30   NYC
    Bob    25   SF
    """
    if not headers or not rows:
        return ""

    if column_widths is None:
        column_widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(column_widths):
                    column_widths[i] = max(column_widths[i], len(str(cell)))

    header_row = "  ".join(h.ljust(w) for h, w in zip(headers, column_widths))
    separator = "-" * len(header_row)

    formatted_rows = []
    for row in rows:
        formatted_row = "  ".join(str(cell).ljust(w) for cell, w in zip(row, column_widths))
        formatted_rows.append(formatted_row)

    return "\n".join([header_row, separator] + formatted_rows)
