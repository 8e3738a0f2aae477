"""MetaProp - Core record-to-property translation modules.

Provides:
- Record decoding (CSV rows, JSON objects) into validated MetaProp entities
- Type and grouping resolution, display formatting
- Storage-kind-correct value application against a target store
- Batch runner with a per-record failure report
"""

__version__ = "0.1.0"
