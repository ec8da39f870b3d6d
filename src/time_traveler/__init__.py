"""Synthesis of history learning units from encyclopedia summaries."""

__version__ = "0.1.0"
