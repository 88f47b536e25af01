"""Store doubles shared by the use case tests."""

from unittest.mock import AsyncMock

import pytest


def _bump_version(medicine, expected_version):
    return medicine.model_copy(update={"version": expected_version + 1})


def _assign_ids(updates, records):
    return [record.with_id(index + 1) for index, record in enumerate(records)]


@pytest.fixture
def mock_medicine_store():
    store = AsyncMock()
    store.update.side_effect = _bump_version
    store.find_by_identity.return_value = None
    return store


@pytest.fixture
def mock_sale_store():
    store = AsyncMock()
    store.commit_sales.side_effect = _assign_ids
    return store


@pytest.fixture
def mock_audit_sink():
    return AsyncMock()


@pytest.fixture
def mock_image_store():
    store = AsyncMock()
    store.upload.return_value = "/media/abc123.png"
    return store
