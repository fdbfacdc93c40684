"""Reflect: personal knowledge base for vim commands, daily reports and notes."""

__version__ = "0.1.0"
