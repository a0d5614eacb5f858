"""Customer request commands and handler."""

from datetime import date

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from logistics.domain import logistics
from logistics.request.request import CustomerRequest
from logistics.sequence.sequence import next_identifier, peek_identifier
from logistics.shared.errors import ConflictError

logger = structlog.get_logger(__name__)

REQUEST_PREFIX = "REQ"


def next_request_number(today: date | None = None) -> str:
    return next_identifier(REQUEST_PREFIX, CustomerRequest, "request_number", "submitted_at", today=today)


def peek_request_number(today: date | None = None) -> str:
    return peek_identifier(REQUEST_PREFIX, CustomerRequest, "request_number", "submitted_at", today=today)


@logistics.command(part_of="CustomerRequest")
class SubmitRequest:
    customer_id = Identifier(required=True)
    notes = Text()
    request_number = String(max_length=50)


@logistics.command(part_of="CustomerRequest")
class UpdateRequestStatus:
    request_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    processed_by = Identifier()
    notes = Text()


@logistics.command(part_of="CustomerRequest")
class ApproveRequest:
    request_id = Identifier(required=True)
    processed_by = Identifier(required=True)
    consolidation_id = Identifier()


@logistics.command(part_of="CustomerRequest")
class RejectRequest:
    request_id = Identifier(required=True)
    processed_by = Identifier(required=True)
    reason = String(required=True, max_length=1000)


@logistics.command(part_of="CustomerRequest")
class ProcessRequest:
    request_id = Identifier(required=True)
    processed_by = Identifier(required=True)
    consolidation_id = Identifier(required=True)


@logistics.command(part_of="CustomerRequest")
class UpdateRequest:
    request_id = Identifier(required=True)
    customer_id = Identifier()
    notes = Text()


@logistics.command(part_of="CustomerRequest")
class DeleteRequest:
    request_id = Identifier(required=True)


@logistics.command_handler(part_of=CustomerRequest)
class CustomerRequestHandler:
    @handle(SubmitRequest)
    def submit_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)

        request_number = command.request_number
        if request_number:
            if repo.find_by_number(request_number) is not None:
                raise ConflictError({"request_number": [f"Request number '{request_number}' already exists"]})
        else:
            request_number = next_request_number()

        customer_request = CustomerRequest.submit(
            request_number=request_number,
            customer_id=command.customer_id,
            notes=command.notes,
        )
        repo.add(customer_request)
        logger.info(
            "Request submitted",
            request_id=str(customer_request.id),
            request_number=request_number,
            customer_id=command.customer_id,
        )
        return str(customer_request.id)

    @handle(UpdateRequestStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        customer_request.change_status(
            command.status,
            processed_by=command.processed_by,
            notes=command.notes,
        )
        repo.add(customer_request)

    @handle(ApproveRequest)
    def approve_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        customer_request.approve(command.processed_by, consolidation_id=command.consolidation_id)
        repo.add(customer_request)

    @handle(RejectRequest)
    def reject_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        customer_request.reject(command.processed_by, command.reason)
        repo.add(customer_request)

    @handle(ProcessRequest)
    def process_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        customer_request.process(command.processed_by, command.consolidation_id)
        repo.add(customer_request)

    @handle(UpdateRequest)
    def update_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        customer_request.update_details(customer_id=command.customer_id, notes=command.notes)
        repo.add(customer_request)

    @handle(DeleteRequest)
    def delete_request(self, command):
        repo = current_domain.repository_for(CustomerRequest)
        customer_request = repo.get(command.request_id)
        repo._dao.delete(customer_request)
