"""
Wiring for the media-sizes plugin: logging setup, context construction and
the host-side metadata read.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from media_sizes.clients.interfaces import IHostMediaSource, ResizeClientFactory
from media_sizes.clients.resize_client import DimensionResizeClient
from media_sizes.config import settings
from media_sizes.services.hook_registry import (
    HOOK_ATTACHMENT_METADATA,
    HOOK_INTERMEDIATE_SIZES,
    HOOK_INTERMEDIATE_SIZES_ADVANCED,
    HookRegistry,
    skip_intermediate_sizes,
)
from media_sizes.services.image_sizes import ImageSizesContext, register_image_sizes
from media_sizes.services.size_registry import SizeRegistryResolver

logger = logging.getLogger("media_sizes")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    """Configure the root logger with a stream handler and an optional file handler."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(stream_handler)

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)


def create_context(
    host: IHostMediaSource,
    resize_client_factory: ResizeClientFactory = DimensionResizeClient,
    hooks: Optional[HookRegistry] = None,
) -> ImageSizesContext:
    """
    Build the shared collaborators and register the size injector.

    Args:
        host: Host configuration source and attachment records
        resize_client_factory: Builds a resize collaborator per attachment
        hooks: Existing hook registry to register into (new one if omitted)

    Returns:
        ImageSizesContext to keep for the lifetime of the process
    """
    hooks = hooks if hooks is not None else HookRegistry()

    if settings.SUPPRESS_INTERMEDIATE_FILES:
        hooks.add_filter(HOOK_INTERMEDIATE_SIZES, skip_intermediate_sizes)
        hooks.add_filter(HOOK_INTERMEDIATE_SIZES_ADVANCED, skip_intermediate_sizes)

    resolver = SizeRegistryResolver(host, hooks, suppressed=skip_intermediate_sizes)
    context = ImageSizesContext(host, hooks, resolver, resize_client_factory)
    register_image_sizes(context)

    logger.info("ConfigStart")
    logger.info(f"Config LOG_LEVEL={settings.LOG_LEVEL}")
    logger.info(f"Config TRACE_CALLS={settings.TRACE_CALLS}")
    logger.info(f"Config INJECT_PRIORITY={settings.INJECT_PRIORITY}")
    logger.info(f"Config IMAGE_MIME_PATTERN={settings.IMAGE_MIME_PATTERN}")
    logger.info(f"Config SUPPRESS_INTERMEDIATE_FILES={settings.SUPPRESS_INTERMEDIATE_FILES}")
    logger.info(
        f"Config Host={type(host).__name__} "
        f"ResizeClient={getattr(resize_client_factory, '__name__', type(resize_client_factory).__name__)}"
    )
    logger.info("ConfigEnd")
    return context


def get_attachment_metadata(
    context: ImageSizesContext,
    attachment_id: int,
    data: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Read attachment metadata through the attachment metadata hook.

    Args:
        context: Shared collaborators
        attachment_id: Attachment identifier
        data: Stored metadata ({} if none)

    Returns:
        Metadata as returned by the hook chain
    """
    data = data if data is not None else {}
    return context.hooks.apply_filters(HOOK_ATTACHMENT_METADATA, data, attachment_id)
