"""siteflow: inspect and watch site workflows on a hosting platform."""

__version__ = "0.1.0"
