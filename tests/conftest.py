"""Shared test fixtures for extratable."""

from __future__ import annotations

import pytest
import pytest_asyncio

from extratable.codec import JsonCodec
from extratable.config import Settings, get_settings
from extratable.host import BlockHandle
from extratable.models import Page, Store
from extratable.session import EditSessionController
from tests.fakes import FakeHost, RecordingNotifier
from tests.helpers import DOC_PATH, SAMPLE_DATA, block_document, make_page, make_store


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def codec() -> JsonCodec:
    return JsonCodec()


@pytest.fixture
def host() -> FakeHost:
    return FakeHost({DOC_PATH: block_document(SAMPLE_DATA)})


@pytest.fixture
def block() -> BlockHandle:
    return BlockHandle(DOC_PATH, 0)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def controller(
    codec: JsonCodec, host: FakeHost, settings: Settings, notifier: RecordingNotifier
) -> EditSessionController:
    return EditSessionController(codec, host, settings, notifier)


@pytest_asyncio.fixture
async def store(codec: JsonCodec, host: FakeHost, block: BlockHandle) -> Store:
    text = await host.read_block(block)
    assert text is not None
    return await codec.parse(text)


@pytest.fixture
def grid() -> Page:
    """A 4x4 page with values "r<row>c<col>"."""
    return make_page([[f"r{r}c{c}" for c in range(4)] for r in range(4)])


@pytest.fixture
def grid_store(grid: Page) -> Store:
    return make_store(**{"1": grid})
