"""CAD drawing recognition services: commands, errors, quotas, classification, reports and archiving."""

__version__ = "0.10.0"