"""Core decoding modules.

WHY: The core package is the whole decoder: everything else (CLI,
formatters) only drives the iterator defined here and reads its records.

HOW: encoding.py picks the codec from the byte-order-mark, lines.py pulls
raw lines, fields.py converts single lines, parser.py sequences them into
records defined in ir.py, and errors.py defines the per-record error.

RULES:
- No printing here; diagnostics go through logging at DEBUG level
- Record errors are returned as values, I/O errors are raised
"""
