"""Veilpost: anonymous feedback on shareable posts."""

__version__ = "0.1.0"
