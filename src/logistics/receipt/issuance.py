"""Receipt commands — issue, revise, re-price and delete."""

from datetime import date

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.receipt.receipt import Charges, Receipt
from logistics.sequence.sequence import next_identifier, peek_identifier
from logistics.shared.errors import ConflictError

logger = structlog.get_logger(__name__)

RECEIPT_PREFIX = "RCP"


def next_receipt_number(today: date | None = None) -> str:
    return next_identifier(RECEIPT_PREFIX, Receipt, "receipt_number", "issued_at", today=today)


def peek_receipt_number(today: date | None = None) -> str:
    return peek_identifier(RECEIPT_PREFIX, Receipt, "receipt_number", "issued_at", today=today)


@logistics.command(part_of="Receipt")
class IssueReceipt:
    """Issue a receipt. Charge totals are computed, so none is accepted here."""

    consolidation_id = Identifier(required=True)
    total_parcels = Integer(required=True, min_value=1)
    total_weight = Float(min_value=0.0)
    service_fee = Float(min_value=0.0)
    handling_fee = Float(min_value=0.0)
    discount = Float(min_value=0.0)
    issued_by = Identifier()
    receipt_number = String(max_length=50)


@logistics.command(part_of="Receipt")
class UpdateReceipt:
    receipt_id = Identifier(required=True)
    consolidation_id = Identifier()
    total_parcels = Integer(min_value=1)
    total_weight = Float(min_value=0.0)
    issued_by = Identifier()
    # Charge components; when any is given all three are re-applied
    service_fee = Float(min_value=0.0)
    handling_fee = Float(min_value=0.0)
    discount = Float(min_value=0.0)


@logistics.command(part_of="Receipt")
class UpdateReceiptCharges:
    receipt_id = Identifier(required=True)
    service_fee = Float(min_value=0.0)
    handling_fee = Float(min_value=0.0)
    discount = Float(min_value=0.0)


@logistics.command(part_of="Receipt")
class DeleteReceipt:
    receipt_id = Identifier(required=True)


def _charges_from(command) -> Charges:
    return Charges.from_components(
        service_fee=command.service_fee,
        handling_fee=command.handling_fee,
        discount=command.discount,
    )


@logistics.command_handler(part_of=Receipt)
class ReceiptHandler:
    @handle(IssueReceipt)
    def issue_receipt(self, command):
        repo = current_domain.repository_for(Receipt)

        receipt_number = command.receipt_number
        if receipt_number:
            if repo.find_by_number(receipt_number) is not None:
                raise ConflictError({"receipt_number": [f"Receipt number '{receipt_number}' already exists"]})
        else:
            receipt_number = next_receipt_number()

        receipt = Receipt.issue(
            receipt_number=receipt_number,
            consolidation_id=command.consolidation_id,
            total_parcels=command.total_parcels,
            total_weight=command.total_weight,
            charges=_charges_from(command),
            issued_by=command.issued_by,
        )
        repo.add(receipt)

        logger.info(
            "Receipt issued",
            receipt_id=str(receipt.id),
            receipt_number=receipt_number,
            consolidation_id=command.consolidation_id,
            total=receipt.charges.total,
        )
        return str(receipt.id)

    @handle(UpdateReceipt)
    def update_receipt(self, command):
        repo = current_domain.repository_for(Receipt)
        receipt = repo.get(command.receipt_id)
        receipt.update_details(
            consolidation_id=command.consolidation_id,
            total_parcels=command.total_parcels,
            total_weight=command.total_weight,
            issued_by=command.issued_by,
        )
        if any(v is not None for v in (command.service_fee, command.handling_fee, command.discount)):
            receipt.update_charges(_charges_from(command))
        repo.add(receipt)

    @handle(UpdateReceiptCharges)
    def update_charges(self, command):
        repo = current_domain.repository_for(Receipt)
        receipt = repo.get(command.receipt_id)
        receipt.update_charges(_charges_from(command))
        repo.add(receipt)

    @handle(DeleteReceipt)
    def delete_receipt(self, command):
        repo = current_domain.repository_for(Receipt)
        receipt = repo.get(command.receipt_id)
        repo._dao.delete(receipt)
