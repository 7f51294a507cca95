"""Services for reconciliation errors and document numbering.

Import the reconciliation engine from
``timebill.services.reconciliation_service``.
"""

from timebill.services.errors import (
    NoRateConfiguredError,
    NotFoundError,
    NoUnbilledWorkError,
    ReconciliationError,
    StoreError,
)
from timebill.services.document_numbers import (
    generate_contract_number,
    generate_invoice_number,
    sanitize_name,
)

__all__ = [
    "NoRateConfiguredError",
    "NotFoundError",
    "NoUnbilledWorkError",
    "ReconciliationError",
    "StoreError",
    "generate_contract_number",
    "generate_invoice_number",
    "sanitize_name",
]
