"""
Expense Kernel

Pure domain core for group expense splitting:
- Integer minor-unit amounts, never floats
- ISO 4217 currency validation
- Typed errors with machine-readable codes
- Structured JSON logging
"""

__version__ = "0.1.0"
