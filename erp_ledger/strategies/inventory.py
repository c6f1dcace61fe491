"""
Inventory movement posting.

    receipt, positive adjustment:
        Dr Inventory
            Cr Inventory Clearing
    issue, negative adjustment:
        Dr Cost of Goods Sold
            Cr Inventory

Transfers move stock between warehouses without changing its
value, so they have no financial legs. Neither do movements
whose cost resolves to zero.
"""

import logging

from erp_ledger.schemas.documents import InventoryBatch, MovementType
from erp_ledger.strategies.base import AccountResolver, PostingStrategy, ProposedEntry

logger = logging.getLogger(__name__)


class InventoryMovementStrategy(PostingStrategy):

    source_type = "inventory_movement"

    def propose(
        self, document: InventoryBatch, accounts: AccountResolver
    ) -> ProposedEntry:
        entry = ProposedEntry(
            posting_date=document.movement_date,
            memo=f"Inventory movements {document.id}",
        )

        for movement in document.movements:
            if movement.movement_type == MovementType.TRANSFER:
                continue
            value = movement.value
            if value == 0:
                logger.debug(
                    "Skipping zero-cost %s of %s",
                    movement.movement_type.value, movement.product_id,
                )
                continue

            description = (
                f"{movement.movement_type.value.capitalize()} "
                f"{movement.product_id}"
            )
            stock_in = movement.movement_type == MovementType.RECEIPT or (
                movement.movement_type == MovementType.ADJUSTMENT
                and movement.quantity > 0
            )
            if stock_in:
                entry.debit(accounts.role("inventory"), value, description)
                entry.credit(accounts.role("inventory_clearing"), value, description)
            else:
                entry.debit(accounts.role("cogs"), value, description)
                entry.credit(accounts.role("inventory"), value, description)

        return entry
