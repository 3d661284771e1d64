"""
Module: marketplace_kernel.selectors.contract_selector
Responsibility: Contract reads scoped to the requesting profile.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - get_contract() only returns a contract to its client or contractor.
    - list_contracts() never returns a terminated contract.
"""

from sqlalchemy import or_, select

from marketplace_kernel.domain.dtos import ContractInfo
from marketplace_kernel.exceptions import ContractNotFoundError, NotContractPartyError
from marketplace_kernel.logging_config import get_logger
from marketplace_kernel.models.contract import Contract, ContractStatus
from marketplace_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.contract")


class ContractSelector(BaseSelector[Contract]):
    """Selector for contracts visible to a requester."""

    def get_contract(self, contract_id: int, requester_id: int) -> ContractInfo:
        """
        Get a contract the requester is a party to.

        Raises:
            ContractNotFoundError: If no contract has this id.
            NotContractPartyError: If the requester is neither client nor
                contractor on the contract.
        """
        contract = self.session.get(Contract, contract_id)
        if contract is None:
            raise ContractNotFoundError(contract_id)
        if not contract.has_party(requester_id):
            logger.warning(
                "contract_access_denied",
                extra={"contract_id": contract_id, "requester_id": requester_id},
            )
            raise NotContractPartyError(contract_id, requester_id)
        return ContractInfo.from_model(contract)

    def list_contracts(self, requester_id: int) -> list[ContractInfo]:
        """Non-terminated contracts where the requester is client or contractor."""
        stmt = (
            select(Contract)
            .where(
                or_(
                    Contract.client_id == requester_id,
                    Contract.contractor_id == requester_id,
                ),
                Contract.status != ContractStatus.TERMINATED.value,
            )
            .order_by(Contract.id)
        )
        contracts = self.session.execute(stmt).scalars().all()
        return [ContractInfo.from_model(c) for c in contracts]
