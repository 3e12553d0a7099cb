"""Write tracking and compensating rollback for multi-step workflows."""

from storefront_tenancy.rollback.compensating import CompensatingRollback, RollbackReport
from storefront_tenancy.rollback.ledger import WriteLedger

__all__ = ["CompensatingRollback", "RollbackReport", "WriteLedger"]
