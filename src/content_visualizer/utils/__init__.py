"""Utility functions for the Content Visualizer."""

from .cron import CronExpression, CronField, CRON_FIELDS
from .validation import ValidationUtils

__all__ = ["CronExpression", "CronField", "CRON_FIELDS", "ValidationUtils"]
