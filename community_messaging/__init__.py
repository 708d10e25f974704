"""Conversation aggregation and realtime delivery for the community platform."""

__version__ = "0.1.0"
