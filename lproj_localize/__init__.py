"""Locale table bookkeeping for marker-literal Swift sources."""

__version__ = '1.0.0'
