"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortener.database.memory import InMemoryMappingStore
from shortener.service import URLShortenerService
from shortener.shortcode import ShortCodeGenerator
from shortener.common.logging_config import setup_logging
from web_app import create_app


class SequenceGenerator(ShortCodeGenerator):
    """Generator that hands out a fixed list of codes, repeating the last one."""

    def __init__(self, codes):
        super().__init__(default_length=6)
        self.codes = list(codes)
        self.calls = 0

    def generate(self) -> str:
        index = min(self.calls, len(self.codes) - 1)
        self.calls += 1
        return self.codes[index]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def store(logger):
    """Create in-memory mapping store."""
    return InMemoryMappingStore(logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
async def service(store, short_code_generator, logger):
    """Create service instance."""
    service = URLShortenerService(
        store=store,
        short_code_generator=short_code_generator,
        logger=logger,
        base_url="http://sho.rt",
    )
    yield service
    await service.close()


@pytest.fixture
def config():
    """Test configuration."""
    return Config(base_url="http://testserver")


@pytest.fixture
def app(service, config, logger):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config, logger=logger)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]


@pytest.fixture
def sequence_generator():
    """Factory for generators that return a fixed list of codes."""
    return SequenceGenerator
