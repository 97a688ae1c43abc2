"""
Pytest configuration and fixtures.
"""
from unittest.mock import MagicMock

import pytest

from media_sizes.clients.host_client import InMemoryHost
from media_sizes.clients.interfaces import IResizeClient
from media_sizes.services.hook_registry import HookRegistry


@pytest.fixture
def host():
    """Host with one enabled size stored as site options and one JPEG attachment."""
    return InMemoryHost(
        size_names=["thumbnail"],
        options={
            "thumbnail_size_w": 150,
            "thumbnail_size_h": 150,
            "thumbnail_crop": "true",
        },
        mime_types={1: "image/jpeg", 2: "text/plain"},
    )


@pytest.fixture
def hooks():
    """Empty hook registry."""
    return HookRegistry()


@pytest.fixture
def resize_client():
    """Resize collaborator returning a fixed thumbnail result."""
    client = MagicMock(spec=IResizeClient)
    client.get_size.return_value = {"width": 150, "height": 150, "file": "thumb.jpg"}
    return client


@pytest.fixture
def resize_client_factory(resize_client):
    """Factory handing out the shared mock resize collaborator."""
    return MagicMock(return_value=resize_client)


@pytest.fixture
def original_image_data():
    """Stored metadata of a 1200x800 upload."""
    return {"width": 1200, "height": 800, "file": "2026/10/photo.jpg"}
