import pytest
import pytest_asyncio
import respx

from nordigen_client.core import NordigenClient, Token

BASE_URL = "https://ob.nordigen.com"

TOKEN = Token(
    access="access-token",
    access_expires=86400,
    refresh="refresh-token",
    refresh_expires=2592000,
)


@pytest.fixture
def token():
    return TOKEN


@pytest.fixture
def api():
    """Mock the Nordigen API; routes are registered per test."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        yield mock


@pytest_asyncio.fixture
async def client():
    async with NordigenClient(base_url=BASE_URL, auditor=None, token=TOKEN) as nordigen:
        yield nordigen


@pytest_asyncio.fixture
async def anonymous_client():
    async with NordigenClient(base_url=BASE_URL, auditor=None) as nordigen:
        yield nordigen


class RecordingAuditor:
    """Keeps every audited request/response for later assertions."""

    def __init__(self):
        self.counter = 0
        self.requests = []
        self.responses = []

    def id(self):
        self.counter += 1
        return f"req-{self.counter}"

    def request(self, request_id, request):
        self.requests.append((request_id, request))

    def response(self, request_id, response):
        self.responses.append((request_id, response))


@pytest.fixture
def auditor():
    return RecordingAuditor()
