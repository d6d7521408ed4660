# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Meal signup service: virtual meal slots and commitments."""

__version__ = "1.0.0"
