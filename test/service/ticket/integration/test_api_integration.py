"""
HTTP surface through the real app, lifespan and DI wiring

Collaborator clients are replaced through container overrides; the database
is the per-test SQLite file.
"""

from collections.abc import Iterator
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from nft_ticketing.main import app
from nft_ticketing.platform.config.di import container
from nft_ticketing.service.ticket.app.dto.blockchain_dto import RegisteredTicketType
from test.service.ticket.unit.helpers import BUYER, EVENT_ID, SESSION_ID


@pytest.fixture
def api_blockchain_client(mock_blockchain_client: Mock) -> Mock:
    mock_blockchain_client.register_ticket_type = AsyncMock(
        return_value=RegisteredTicketType(blockchain_ticket_type_id='3', transaction_hash='0xreg')
    )
    return mock_blockchain_client


@pytest.fixture
def client(
    api_blockchain_client: Mock, mock_event_client: Mock
) -> Iterator[TestClient]:
    ipfs_client = AsyncMock()
    with (
        container.blockchain_service_client.override(api_blockchain_client),
        container.event_service_client.override(mock_event_client),
        container.ipfs_service_client.override(ipfs_client),
        TestClient(app) as test_client,
    ):
        yield test_client


def _create_ticket_type(client: TestClient, *, name: str = 'VIP', total_quantity: int = 5) -> dict:
    response = client.post(
        '/api/ticket_type',
        json={
            'event_id': EVENT_ID,
            'session_id': SESSION_ID,
            'name': name,
            'total_quantity': total_quantity,
            'price_wei': '1000',
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestTicketTypeApi:
    def test_create_publish_and_read(self, client: TestClient) -> None:
        # Create a draft
        created = _create_ticket_type(client)
        assert created['is_published'] is False
        assert created['contract_session_id'] == '7'

        # Publish on-chain
        published = client.post(f'/api/ticket_type/{created["id"]}/publish')
        assert published.status_code == 200, published.text
        assert published.json()['blockchain_ticket_type_id'] == '3'

        # Read back with a fresh availability count
        availability = client.get(f'/api/ticket_type/{created["id"]}/availability')
        assert availability.json() == {'ticket_type_id': created['id'], 'available_quantity': 5}

    def test_duplicate_name_is_conflict(self, client: TestClient) -> None:
        _create_ticket_type(client)

        response = client.post(
            '/api/ticket_type',
            json={
                'event_id': EVENT_ID,
                'session_id': SESSION_ID,
                'name': 'VIP',
                'total_quantity': 1,
                'price_wei': '1',
            },
        )

        assert response.status_code == 409
        assert response.json()['code'] == 'ALREADY_EXISTS'

    def test_unknown_ticket_type_is_not_found(self, client: TestClient) -> None:
        response = client.get('/api/ticket_type/does-not-exist')

        assert response.status_code == 404
        assert response.json()['code'] == 'NOT_FOUND'

    def test_invalid_body_is_bad_request(self, client: TestClient) -> None:
        response = client.post('/api/ticket_type', json={'event_id': EVENT_ID})

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_ARGUMENT'


@pytest.mark.integration
class TestPurchaseApi:
    def test_initiate_and_oversell(self, client: TestClient) -> None:
        # Arrange
        ticket_type_id = _create_ticket_type(client)['id']
        client.post(f'/api/ticket_type/{ticket_type_id}/publish')

        # Act
        first = client.post(
            '/api/purchase',
            json={'ticket_type_id': ticket_type_id, 'buyer_address': BUYER, 'quantity': 3},
        )
        second = client.post(
            '/api/purchase',
            json={'ticket_type_id': ticket_type_id, 'buyer_address': BUYER, 'quantity': 3},
        )

        # Assert
        assert first.status_code == 201, first.text
        assert first.json()['price_to_pay_wei'] == '3000'
        assert second.status_code == 412
        assert 'only 2 available' in second.json()['detail']

        purchase = client.get(f'/api/purchase/{first.json()["purchase_id"]}')
        assert purchase.status_code == 200
        assert purchase.json()['purchase']['status'] == 'INITIATED'
        assert len(purchase.json()['tickets']) == 3

    def test_unpublished_type_cannot_be_bought(self, client: TestClient) -> None:
        ticket_type_id = _create_ticket_type(client)['id']

        response = client.post(
            '/api/purchase',
            json={'ticket_type_id': ticket_type_id, 'buyer_address': BUYER, 'quantity': 1},
        )

        assert response.status_code == 412
        assert response.json()['code'] == 'FAILED_PRECONDITION'

    def test_bad_wallet_is_invalid_argument(self, client: TestClient) -> None:
        response = client.post(
            '/api/purchase',
            json={'ticket_type_id': 'any', 'buyer_address': 'not-a-wallet', 'quantity': 1},
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'INVALID_ARGUMENT'


@pytest.mark.integration
def test_health(client: TestClient) -> None:
    assert client.get('/health').json()['status'] == 'healthy'
