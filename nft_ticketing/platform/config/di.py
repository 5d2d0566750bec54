"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from nft_ticketing.platform.config.core_setting import Settings
from nft_ticketing.platform.database.orm_db_setting import Database
from nft_ticketing.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from nft_ticketing.service.ticket.app.service.credential_issuer import CredentialIssuer
from nft_ticketing.service.ticket.app.service.inventory_ledger import InventoryLedger
from nft_ticketing.service.ticket.app.service.nft_metadata_builder import NftMetadataBuilder
from nft_ticketing.service.ticket.driven_adapter.client.blockchain_service_client import (
    BlockchainServiceClient,
)
from nft_ticketing.service.ticket.driven_adapter.client.event_service_client import (
    EventServiceClient,
)
from nft_ticketing.service.ticket.driven_adapter.client.ipfs_service_client import (
    IpfsServiceClient,
)
from nft_ticketing.service.ticket.driven_adapter.crypto.secp256k1_credential_signer import (
    Secp256k1CredentialSigner,
)
from nft_ticketing.service.ticket.driven_adapter.qr.segno_qr_code_renderer import (
    SegnoQrCodeRenderer,
)


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # New session per unit of work; every use case instance gets its own
    unit_of_work = providers.Factory(
        SqlAlchemyUnitOfWork, session_factory=database.provided.new_session
    )

    # Collaborator clients (one pooled httpx.AsyncClient each)
    event_service_client = providers.Singleton(
        EventServiceClient,
        base_url=config_service.provided.EVENT_SERVICE_URL,
        timeout=config_service.provided.EVENT_SERVICE_TIMEOUT,
    )
    blockchain_service_client = providers.Singleton(
        BlockchainServiceClient,
        base_url=config_service.provided.BLOCKCHAIN_SERVICE_URL,
        read_timeout=config_service.provided.BLOCKCHAIN_READ_TIMEOUT,
        verify_timeout=config_service.provided.BLOCKCHAIN_VERIFY_TIMEOUT,
        mint_timeout=config_service.provided.BLOCKCHAIN_MINT_TIMEOUT,
    )
    ipfs_service_client = providers.Singleton(
        IpfsServiceClient,
        base_url=config_service.provided.IPFS_SERVICE_URL,
        timeout=config_service.provided.IPFS_PIN_TIMEOUT,
    )

    # Check-in credentials
    credential_signer = providers.Singleton(
        Secp256k1CredentialSigner,
        private_key_hex=config_service.provided.CHECKIN_SIGNING_KEY.get_secret_value.call(),
    )
    credential_issuer = providers.Singleton(
        CredentialIssuer,
        signer=credential_signer,
        max_age_seconds=config_service.provided.CHECKIN_CREDENTIAL_MAX_AGE_SECONDS,
        clock_skew_seconds=config_service.provided.CHECKIN_CLOCK_SKEW_SECONDS,
        refresh_after_seconds=config_service.provided.CHECKIN_CREDENTIAL_REFRESH_SECONDS,
    )
    qr_code_renderer = providers.Singleton(
        SegnoQrCodeRenderer,
        scale=config_service.provided.QR_CODE_SCALE,
        border=config_service.provided.QR_CODE_BORDER,
    )

    # Stateless domain services
    inventory_ledger = providers.Singleton(InventoryLedger)
    nft_metadata_builder = providers.Singleton(NftMetadataBuilder)


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    for client in (
        container.event_service_client(),
        container.blockchain_service_client(),
        container.ipfs_service_client(),
    ):
        await client.aclose()
    container.reset_singletons()
