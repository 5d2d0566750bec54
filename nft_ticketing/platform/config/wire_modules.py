"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from nft_ticketing.service.ticket.app.command import (
    check_in_use_case,
    confirm_payment_and_request_mint_use_case,
    create_ticket_type_use_case,
    fail_purchase_use_case,
    generate_qr_code_use_case,
    initiate_purchase_use_case,
    prepare_metadata_use_case,
    process_event_settlement_use_case,
    publish_ticket_type_use_case,
    reap_expired_reservations_use_case,
    update_ticket_type_use_case,
)
from nft_ticketing.service.ticket.app.query import (
    get_analytics_use_case,
    get_purchase_use_case,
    get_settlement_use_case,
    get_ticket_type_use_case,
    list_tickets_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    initiate_purchase_use_case,
    prepare_metadata_use_case,
    confirm_payment_and_request_mint_use_case,
    fail_purchase_use_case,
    generate_qr_code_use_case,
    check_in_use_case,
    reap_expired_reservations_use_case,
    create_ticket_type_use_case,
    update_ticket_type_use_case,
    publish_ticket_type_use_case,
    process_event_settlement_use_case,
    get_purchase_use_case,
    list_tickets_use_case,
    get_ticket_type_use_case,
    get_settlement_use_case,
    get_analytics_use_case,
]
