"""
docflow - Declarative transformation pipelines for structured records.

Pipelines are built from JSON or YAML specifications into ordered chains of
field processors and applied to JSON records.
"""

__version__ = "0.1.0"
