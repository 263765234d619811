"""Pretty output and formatting utilities for siteflow CLI."""

import json
import sys
from typing import Any

from siteflow.lib.formatters import format_table

# Global color state
_color_enabled = None  # None = auto-detect, True = force on, False = force off


def set_color_enabled(enabled: bool) -> None:
    """
    Set global color output preference.

    Parameters
    ----------
    enabled : bool
        True to enable colors, False to disable.
    """
    global _color_enabled
    _color_enabled = enabled


# ANSI color codes
class Colors:
    """
    ANSI color codes for terminal output.
    """

    RESET = "\033[0m"

    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def supports_color() -> bool:
    """
    Check if the terminal supports color output.

    Returns
    -------
    bool
        True if stdout is a TTY and platform is not Windows.
    """
    if _color_enabled is not None:
        return _color_enabled

    return sys.stdout.isatty() and not sys.platform.startswith("win")


def colorize(text: str, color: str) -> str:
    """
    Colorize text if terminal supports it.

    Parameters
    ----------
    text : str
        Text to colorize.
    color : str
        ANSI color code from the Colors class.

    Returns
    -------
    str
        Colorized text if supported, plain text otherwise.
    """
    if supports_color():
        return f"{color}{text}{Colors.RESET}"
    return text


def error(message: str) -> None:
    """
    Print error message with red X symbol to stderr.

    Parameters
    ----------
    message : str
        Error message to display.
    """
    symbol = colorize("✗", Colors.RED)
    print(f"{symbol} {message}", file=sys.stderr)


def warning(message: str) -> None:
    """
    Print warning message with yellow warning symbol.

    Parameters
    ----------
    message : str
        Warning message to display.
    """
    symbol = colorize("⚠", Colors.YELLOW)
    print(f"{symbol} {message}")


def info(message: str) -> None:
    """
    Print informational message with indentation.

    Parameters
    ----------
    message : str
        Informational message to display.
    """
    print(f"  {message}")


def print_key_value(key: str, value: str, indent: int = 0) -> None:
    """
    Print key-value pair with formatting and indentation.

    Parameters
    ----------
    key : str
        Key to print (displayed in cyan).
    value : str
        Value to print.
    indent : int, optional
        Indentation level (number of 2-space indents), by default 0.
    """
    indent_str = "  " * indent
    key_colored = colorize(key, Colors.CYAN)
    print(f"{indent_str}{key_colored}: {value}")


def _display_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def output_record(record: dict[str, Any], output_format: str = "normal") -> None:
    """
    Print a single record.

    In normal mode each field is printed as ``key: value``; multi-line
    values (such as log output) are printed below their key. In json mode
    the record is printed as indented JSON.

    Parameters
    ----------
    record : dict[str, Any]
        Record to print.
    output_format : {"normal", "json"}, optional
        Output format, by default "normal".
    """
    if output_format == "json":
        print(json.dumps(record, indent=2))
        return

    width = max((len(key) for key in record), default=0)
    for key, value in record.items():
        text = _display_value(value)
        if "\n" in text:
            print_key_value(key.ljust(width), "")
            for line in text.rstrip("\n").splitlines():
                print(f"  {line}")
        else:
            print_key_value(key.ljust(width), text)
    print()


def output_record_list(
    records: list[dict[str, Any]],
    output_format: str = "normal",
    titles: dict[str, str] | None = None,
) -> None:
    """
    Print a list of records.

    In normal mode the records are printed as a table whose columns are
    the keys of the first record. In json mode the list is printed as
    indented JSON.

    Parameters
    ----------
    records : list[dict[str, Any]]
        Records to print.
    output_format : {"normal", "json"}, optional
        Output format, by default "normal".
    titles : dict[str, str] or None, optional
        Column title overrides keyed by record key.
    """
    if output_format == "json":
        print(json.dumps(records, indent=2))
        return

    if not records:
        return

    titles = titles or {}
    keys = list(records[0].keys())
    headers = [titles.get(key, key.replace("_", " ").capitalize()) for key in keys]
    rows = [[_display_value(record.get(key)) for key in keys] for record in records]

    print(format_table(headers, rows))
    print()
