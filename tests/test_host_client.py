"""
Tests for the in-process host adapter.
"""
from media_sizes.clients.host_client import InMemoryHost


def test_with_default_sizes_seeds_options():
    """Test that core sizes are enabled and stored as site options."""
    host = InMemoryHost.with_default_sizes()

    assert host.get_enabled_size_names() == ["thumbnail", "medium", "medium_large", "large"]
    assert host.get_config_value("thumbnail_size_w") == 150
    assert host.get_config_value("thumbnail_crop") is True
    assert host.get_config_value("medium_large_size_h") == 0
    assert host.get_theme_size_overrides() == {}


def test_add_and_remove_image_size():
    """Test registering a theme size enables it once."""
    host = InMemoryHost(size_names=["thumbnail"])

    host.add_image_size("hero", 1920, "600", crop=("center", "top"))
    host.add_image_size("hero", 1920, 640)

    assert host.get_enabled_size_names() == ["thumbnail", "hero"]
    assert host.get_theme_size_overrides()["hero"] == {"width": 1920, "height": 640, "crop": False}

    assert host.remove_image_size("hero") is True
    assert host.remove_image_size("hero") is False
    assert host.get_enabled_size_names() == ["thumbnail"]


def test_getters_return_copies():
    """Test that callers cannot mutate host state through returned values."""
    host = InMemoryHost(size_names=["thumbnail"], theme_sizes={"hero": {"width": 10}})

    host.get_enabled_size_names().append("medium")
    host.get_theme_size_overrides()["hero"]["width"] = 99

    assert host.get_enabled_size_names() == ["thumbnail"]
    assert host.get_theme_size_overrides()["hero"]["width"] == 10


def test_mime_types():
    """Test attachment MIME lookup."""
    host = InMemoryHost()
    host.set_mime_type(5, "image/png")

    assert host.get_mime_type(5) == "image/png"
    assert host.get_mime_type(6) is None
