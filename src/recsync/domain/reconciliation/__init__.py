"""Record reconciliation pipeline.

Raw feed records flow forward through four stages: ``normalize_records`` builds
canonical records, ``validate_records`` partitions them, ``SchemaPreflight``
confirms the store contract once per run and ``Reconciler`` applies the accepted
batch as one conditional bulk update. ``ReconciliationPipeline`` composes them
and assembles the report.
"""

from __future__ import annotations

from .apply import Reconciler
from .normalize import normalize_records
from .pipeline import ReconciliationPipeline
from .preflight import DEFAULT_BULK_CONTRACT, BulkContract, SchemaPreflight, contract_issues
from .validate import validate_records

__all__ = [
    "DEFAULT_BULK_CONTRACT",
    "BulkContract",
    "Reconciler",
    "ReconciliationPipeline",
    "SchemaPreflight",
    "contract_issues",
    "normalize_records",
    "validate_records",
]
