"""
Pytest configuration and shared fixtures.
"""
import pytest
from typing import Any, Dict, List

from solapi.config import AgentConfig
from solapi.service import SolapiMessageService

BASE_URL = "https://api.solapi.com"


class FakeTransport:
    """In-memory transport recording every call and replaying queued responses."""

    def __init__(self, responses: List[Any] = None):
        self.responses = list(responses or [])
        self.calls = []

    async def fetch(self, auth_info, request_config, payload=None):
        self.calls.append((auth_info, request_config, payload))
        response = self.responses.pop(0) if self.responses else {}
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def urls(self) -> List[str]:
        return [config.url for _, config, _ in self.calls]

    @property
    def methods(self) -> List[str]:
        return [config.method for _, config, _ in self.calls]


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def service(fake_transport) -> SolapiMessageService:
    return SolapiMessageService(
        "test-key",
        "test-secret",
        fake_transport,
        base_url=BASE_URL,
        agent=AgentConfig(sdk_version="python/test", os_platform="linux | 3.12"),
    )


@pytest.fixture
def sample_message() -> Dict[str, Any]:
    """Caller supplied message mapping."""
    return {
        "to": "010-1234-5678",
        "from": "02-930-2266",
        "text": "Hello from tests",
    }


@pytest.fixture
def sample_send_response() -> Dict[str, Any]:
    """Detailed send response with one registered message."""
    return {
        "failedMessageList": [],
        "groupInfo": {
            "groupId": "G4V20240101000000ABCDEFGHIJKLMNO",
            "count": {
                "total": 1,
                "registeredFailed": 0,
                "registeredSuccess": 1,
            },
        },
    }


@pytest.fixture
def sample_template() -> Dict[str, Any]:
    """Alimtalk template payload as returned by the API."""
    return {
        "templateId": "KA01TP230101000000000000000001",
        "name": "Order shipped",
        "channelId": "KA01PF230101000000000000000001",
        "content": "#{name}님, 주문 #{order}이 발송되었습니다. #{name}님 감사합니다.",
        "status": "APPROVED",
        "isHidden": False,
        "messageType": "BA",
        "emphasizeType": "NONE",
        "buttons": [
            {"buttonName": "배송조회", "buttonType": "DS"},
        ],
        "dateCreated": "2024-01-01T00:00:00.000Z",
        "dateUpdated": "2024-01-02T09:30:00.000Z",
    }


@pytest.fixture
def sample_channel() -> Dict[str, Any]:
    """Kakao channel payload as returned by the API."""
    return {
        "channelId": "KA01PF230101000000000000000001",
        "searchId": "solapi",
        "accountId": "19010100000000",
        "phoneNumber": "01012345678",
        "sharedAccountIds": ["19010100000001"],
        "dateCreated": "2024-01-01T00:00:00.000Z",
        "dateUpdated": "2024-01-01T00:00:00.000Z",
    }
