"""Shared fixtures: fake resolvers and an ASGI client factory."""

import pytest
from httpx import AsyncClient, ASGITransport

from pageserver.config import Settings
from pageserver.main import create_app
from pageserver.resolver import AssetNotFoundError


async def generate_stream(chunks):
    for chunk in chunks:
        yield chunk


class FakeFileStream:
    def __init__(self, chunks, type=""):
        self.type = type
        self.stream = generate_stream(chunks)


class FakeResolver:
    """Records every lookup key; serves canned files or raises ``error``."""

    def __init__(self, files=None, error=None):
        self.files = files or {}
        self.error = error
        self.calls = []

    async def get_file_stream(self, key):
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        if key not in self.files:
            raise AssetNotFoundError(key)
        chunks, type_tag = self.files[key]
        return FakeFileStream(chunks, type_tag)


@pytest.fixture
def settings(tmp_path):
    return Settings(_env_file=None, PUBLIC_DIR=str(tmp_path))


@pytest.fixture
async def make_client(settings):
    """Build an AsyncClient around an app wired to the given resolver."""
    clients = []

    def _make(resolver, app_settings=None):
        app = create_app(app_settings or settings, resolver=resolver)
        c = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        clients.append(c)
        return c

    yield _make
    for c in clients:
        await c.aclose()
