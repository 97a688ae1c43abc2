"""
Tests for size normalization, metadata assembly and size injection.
"""
import logging
from unittest.mock import MagicMock, patch

import pytest

from media_sizes.clients.host_client import InMemoryHost
from media_sizes.config import settings
from media_sizes.models.sizes import SizeSpec
from media_sizes.services.hook_registry import (
    HOOK_ATTACHMENT_METADATA,
    HOOK_INTERMEDIATE_SIZES_ADVANCED,
)
from media_sizes.services.image_sizes import (
    ImageSizes,
    ImageSizesContext,
    maybe_inject_image_sizes,
    register_image_sizes,
)
from media_sizes.services.size_registry import SizeRegistryResolver
from media_sizes.utils.errors import ErrorCodes, ResizeError


@pytest.fixture
def context(host, hooks, resize_client_factory):
    """Context over the fixture host with the mock resize collaborator."""
    return ImageSizesContext(
        host=host,
        hooks=hooks,
        resolver=SizeRegistryResolver(host, hooks),
        resize_client_factory=resize_client_factory,
    )


def test_standardize_empty_record():
    """Test that a record without width or height is rejected."""
    assert ImageSizes.standardize_size_data({}) is None
    assert ImageSizes.standardize_size_data({"crop": True}) is None
    assert ImageSizes.standardize_size_data({"width": None, "height": None}) is None


def test_standardize_fills_defaults():
    """Test that missing keys get None/False defaults."""
    spec = ImageSizes.standardize_size_data({"height": 100})

    assert spec.model_dump() == {"width": None, "height": 100, "crop": False}


def test_standardize_keeps_extra_keys():
    """Test that unknown keys survive normalization."""
    spec = ImageSizes.standardize_size_data({"width": 300, "quality": 80})

    assert spec.model_dump() == {"width": 300, "height": None, "crop": False, "quality": 80}


def test_standardize_coerces_option_values():
    """Test that string option values become typed values."""
    spec = ImageSizes.standardize_size_data({"width": "150", "height": "", "crop": "1"})

    assert spec.width == 150
    assert spec.height is None
    assert spec.crop is True


def test_standardize_blank_dimensions_rejected():
    """Test that blank strings do not count as a dimension."""
    assert ImageSizes.standardize_size_data({"width": "", "height": ""}) is None


def test_standardize_crop_alignment():
    """Test that a two-element crop descriptor is kept as a tuple."""
    spec = ImageSizes.standardize_size_data({"width": 150, "height": 150, "crop": ["left", "top"]})

    assert spec.crop == ("left", "top")
    assert spec.is_cropped


def test_standardize_invalid_record_logs_warning(caplog):
    """Test that invalid records are dropped instead of raising."""
    with caplog.at_level(logging.WARNING, logger="media_sizes"):
        assert ImageSizes.standardize_size_data({"width": "wide"}) is None
        assert ImageSizes.standardize_size_data({"width": 10, "crop": ["middle", "top"]}) is None

    assert len([r for r in caplog.records if "InvalidSizeData" in r.message]) == 2


def test_standardize_non_mapping():
    """Test that junk returned by a transformer is skipped."""
    assert ImageSizes.standardize_size_data("thumbnail") is None
    assert ImageSizes.standardize_size_data(None) is None


def test_standardize_accepts_size_spec():
    """Test that an already normalized spec passes through."""
    spec = ImageSizes.standardize_size_data(SizeSpec(width=50))
    assert spec == SizeSpec(width=50, height=None, crop=False)


def test_generate_sizes_meta_omits_failed_sizes(hooks):
    """Test that a size whose resize fails is left out of the result."""
    host = InMemoryHost(
        size_names=["thumbnail", "medium"],
        theme_sizes={
            "thumbnail": {"width": 150, "height": 150, "crop": True},
            "medium": {"width": 300, "height": None, "crop": False},
        },
    )

    def get_size(spec):
        if spec.width == 300:
            return ResizeError(code=ErrorCodes.RESIZE_FAILED, message="failed")
        return {"width": 150, "height": 150, "file": "thumb.jpg"}

    client = MagicMock()
    client.get_size.side_effect = get_size

    image_sizes = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), client)

    assert image_sizes.generate_sizes_meta() == {
        "thumbnail": {"width": 150, "height": 150, "file": "thumb.jpg"}
    }
    assert client.get_size.call_count == 2


def test_generate_sizes_meta_survives_collaborator_errors(hooks, caplog):
    """Test that an exception from the collaborator only drops that size."""
    host = InMemoryHost(
        size_names=["small", "broken"],
        theme_sizes={"small": {"width": 100}, "broken": {"width": 200}},
    )

    def get_size(spec):
        if spec.width == 200:
            raise RuntimeError("decoder crashed")
        return {"width": 100, "height": 66, "file": "small.jpg"}

    client = MagicMock()
    client.get_size.side_effect = get_size

    with caplog.at_level(logging.WARNING, logger="media_sizes"):
        result = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), client).generate_sizes_meta()

    assert list(result) == ["small"]
    assert any("ResizeFailed" in r.message and "size=broken" in r.message for r in caplog.records)


def test_generate_sizes_meta_skips_empty_specs(hooks, resize_client):
    """Test that sizes without dimensions never reach the collaborator."""
    host = InMemoryHost(size_names=["unset"])

    result = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), resize_client).generate_sizes_meta()

    assert result == {}
    resize_client.get_size.assert_not_called()


def test_generate_sizes_meta_uses_filtered_sizes(host, hooks, resize_client):
    """Test that sizes added by the advanced hook are generated in order."""
    def add_banner(sizes, metadata):
        sizes["banner"] = {"width": 1200, "height": 300, "crop": True}
        return sizes

    hooks.add_filter(HOOK_INTERMEDIATE_SIZES_ADVANCED, add_banner)

    result = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), resize_client).generate_sizes_meta()

    assert list(result) == ["thumbnail", "banner"]
    specs = [call.args[0] for call in resize_client.get_size.call_args_list]
    assert specs == [
        SizeSpec(width=150, height=150, crop=True),
        SizeSpec(width=1200, height=300, crop=True),
    ]


def test_inject_end_to_end(context, resize_client, resize_client_factory):
    """Test the thumbnail scenario from empty metadata."""
    data = {}

    result = maybe_inject_image_sizes(data, 1, context)

    assert result == {"sizes": {"thumbnail": {"width": 150, "height": 150, "file": "thumb.jpg"}}}
    assert result is data
    resize_client_factory.assert_called_once_with(data, "image/jpeg")
    resize_client.get_size.assert_called_once_with(SizeSpec(width=150, height=150, crop=True))


def test_inject_keeps_existing_sizes(context, resize_client_factory):
    """Test that metadata with sizes is returned unchanged on every call."""
    data = {"sizes": {"thumbnail": {"width": 100, "height": 100, "file": "t.jpg"}}}
    expected = {"sizes": {"thumbnail": {"width": 100, "height": 100, "file": "t.jpg"}}}

    assert maybe_inject_image_sizes(data, 1, context) == expected
    assert maybe_inject_image_sizes(data, 1, context) == expected
    resize_client_factory.assert_not_called()


def test_inject_replaces_empty_sizes(context):
    """Test that an empty sizes mapping does not block injection."""
    result = maybe_inject_image_sizes({"sizes": {}}, 1, context)
    assert list(result["sizes"]) == ["thumbnail"]


def test_inject_skips_non_images(context, resize_client_factory):
    """Test MIME gating for non-image attachments."""
    data = {"file": "notes.txt"}

    result = maybe_inject_image_sizes(data, 2, context)

    assert result == {"file": "notes.txt"}
    assert "sizes" not in result
    resize_client_factory.assert_not_called()


def test_inject_skips_unknown_attachment(context):
    """Test that an attachment without a MIME type is left alone."""
    assert maybe_inject_image_sizes({}, 404, context) == {}


def test_inject_mime_pattern_from_settings(context):
    """Test that the MIME gate follows IMAGE_MIME_PATTERN."""
    with patch.object(settings, "IMAGE_MIME_PATTERN", r"^(image|text)/"):
        result = maybe_inject_image_sizes({}, 2, context)
    assert "sizes" in result


def test_register_image_sizes_runs_after_default_priority(context, resize_client_factory):
    """Test that earlier callbacks can provide sizes the injector then keeps."""
    def provide_sizes(data, attachment_id):
        data["sizes"] = {"full": {"width": 800, "height": 600, "file": "full.jpg"}}
        return data

    inject = register_image_sizes(context)
    context.hooks.add_filter(HOOK_ATTACHMENT_METADATA, provide_sizes)

    assert context.hooks.get_filters(HOOK_ATTACHMENT_METADATA) == [provide_sizes, inject]

    result = context.hooks.apply_filters(HOOK_ATTACHMENT_METADATA, {}, 1)

    assert result == {"sizes": {"full": {"width": 800, "height": 600, "file": "full.jpg"}}}
    resize_client_factory.assert_not_called()


def test_register_image_sizes_custom_priority(context):
    """Test registering the injector ahead of other callbacks."""
    other = MagicMock(side_effect=lambda data, attachment_id: data)
    context.hooks.add_filter(HOOK_ATTACHMENT_METADATA, other)

    inject = register_image_sizes(context, priority=1)

    assert context.hooks.get_filters(HOOK_ATTACHMENT_METADATA) == [inject, other]


def test_standardize_numeric_crop():
    """Test that any non-zero number enables cropping."""
    assert ImageSizes.standardize_size_data({"width": 10, "crop": 2}).crop is True
    assert ImageSizes.standardize_size_data({"width": 10, "crop": 0}).crop is False


def test_generate_sizes_meta_failing_transformer_returns_empty(host, hooks, resize_client):
    """Test that a broken advanced-hook transformer leaves the attachment without sizes."""
    def broken_plugin(sizes, metadata):
        raise RuntimeError("plugin bug")

    hooks.add_filter(HOOK_INTERMEDIATE_SIZES_ADVANCED, broken_plugin)

    result = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), resize_client).generate_sizes_meta()

    assert result == {}
    resize_client.get_size.assert_not_called()


def test_inject_failing_transformer_does_not_raise(context):
    """Test that the metadata hook still returns when a transformer raises."""
    def broken_plugin(sizes, metadata):
        raise RuntimeError("plugin bug")

    context.hooks.add_filter(HOOK_INTERMEDIATE_SIZES_ADVANCED, broken_plugin)
    register_image_sizes(context)

    result = context.hooks.apply_filters(HOOK_ATTACHMENT_METADATA, {}, 1)

    assert result == {"sizes": {}}


def test_generate_sizes_meta_logs_resize_failed_code(hooks, caplog):
    """Test that a raising collaborator is recorded as RESIZE_FAILED."""
    host = InMemoryHost(size_names=["small"], theme_sizes={"small": {"width": 100}})
    client = MagicMock()
    client.get_size.side_effect = RuntimeError("decoder crashed")

    with caplog.at_level(logging.DEBUG, logger="media_sizes"):
        result = ImageSizes(1, {}, SizeRegistryResolver(host, hooks), client).generate_sizes_meta()

    assert result == {}
    assert any(
        "SizeSkipped" in r.message and f"reason={ErrorCodes.RESIZE_FAILED}" in r.message
        for r in caplog.records
    )
