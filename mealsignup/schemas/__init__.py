# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Schemas package: HTTP request/response contracts."""
