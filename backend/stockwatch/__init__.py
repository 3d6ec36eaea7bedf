"""Stockwatch: simulated stock ticks pushed live to subscribed users."""

__version__ = "0.1.0"
