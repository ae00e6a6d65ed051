"""
Payroll Kernel

The pure core of attendance-to-payroll computation:
- Typed, coded exceptions for configuration failures
- Structured JSON logging with context propagation
- Immutable domain values for profiles, attendance and results
"""

__version__ = "0.1.0"
