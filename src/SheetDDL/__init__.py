"""
SheetDDL - infer SQL column types from spreadsheet-like data and emit CREATE TABLE.
"""

__version__ = "1.0.0"
