"""Ticket Service Interfaces"""

from nft_ticketing.service.ticket.app.interface.i_blockchain_service_client import (
    IBlockchainServiceClient,
)
from nft_ticketing.service.ticket.app.interface.i_credential_signer import ICredentialSigner
from nft_ticketing.service.ticket.app.interface.i_event_service_client import IEventServiceClient
from nft_ticketing.service.ticket.app.interface.i_ipfs_service_client import IIpfsServiceClient
from nft_ticketing.service.ticket.app.interface.i_ledger_repo import ILedgerRepo
from nft_ticketing.service.ticket.app.interface.i_purchase_repo import IPurchaseRepo
from nft_ticketing.service.ticket.app.interface.i_qr_code_renderer import IQrCodeRenderer
from nft_ticketing.service.ticket.app.interface.i_ticket_repo import ITicketRepo
from nft_ticketing.service.ticket.app.interface.i_ticket_type_repo import ITicketTypeRepo

__all__ = [
    'IBlockchainServiceClient',
    'ICredentialSigner',
    'IEventServiceClient',
    'IIpfsServiceClient',
    'ILedgerRepo',
    'IPurchaseRepo',
    'IQrCodeRenderer',
    'ITicketRepo',
    'ITicketTypeRepo',
]
