"""FCR / PO document generator.

CSV ingestion, per-row normalization and fixed-template formatting for FCR
(First Carrier Receipt) boxes, invoice aggregation for PO files, copy
tracking, report export and a PostgreSQL project store.
"""

__version__ = "1.0.0"
