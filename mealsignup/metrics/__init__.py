# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Metrics package: Prometheus collectors live in ``prometheus``."""
