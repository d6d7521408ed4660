# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Domain package: pure data types shared by every layer."""
