"""
Statement Kernel

The fixed-stage pipeline that turns raw line items into validated,
formatted financial statements:
- Immutable line items and report envelopes
- A rule-set protocol for statement-specific behaviour
- A driver that runs every rule-set through the same stage order
- Typed validation errors carrying the observed discrepancy
"""

__version__ = "0.1.0"
