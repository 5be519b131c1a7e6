"""Helpers to drive the CLI end to end and parse its human readable output."""
