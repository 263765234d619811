"""Workflows command for inspecting site workflows.

Available subcommands:
    siteflow workflows list    List workflows for a site
    siteflow workflows show    Show a workflow and its operations
    siteflow workflows logs    Show operation logs from a workflow
    siteflow workflows watch   Stream new and finished workflows
"""

from .handlers import handle
from .parser import register_parser

__all__ = ["register_parser", "handle"]
