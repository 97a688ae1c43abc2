"""
In-process host adapter backed by plain dictionaries.

Used when the plugin runs outside a full host (tests, scripts, previews) and
as the reference implementation of IHostMediaSource.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from media_sizes.clients.interfaces import IHostMediaSource
from media_sizes.utils.size_defaults import (
    CORE_IMAGE_SIZES,
    CROP_OPTION,
    HEIGHT_OPTION,
    WIDTH_OPTION,
)

logger = logging.getLogger("media_sizes")


class InMemoryHost(IHostMediaSource):
    """Host adapter holding size names, theme sizes, site options and MIME types."""

    def __init__(
        self,
        size_names: Optional[Iterable[str]] = None,
        theme_sizes: Optional[Dict[str, Dict[str, Any]]] = None,
        options: Optional[Dict[str, Any]] = None,
        mime_types: Optional[Dict[int, str]] = None,
    ):
        """
        Initialize host adapter.

        Args:
            size_names: Enabled size names in order
            theme_sizes: Theme/plugin registered sizes (name -> {width, height, crop})
            options: Site options (e.g. "thumbnail_size_w" -> 150)
            mime_types: Attachment id -> MIME type
        """
        self._size_names: List[str] = list(size_names or [])
        self._theme_sizes: Dict[str, Dict[str, Any]] = dict(theme_sizes or {})
        self._options: Dict[str, Any] = dict(options or {})
        self._mime_types: Dict[int, str] = dict(mime_types or {})

    @classmethod
    def with_default_sizes(cls) -> "InMemoryHost":
        """Create a host seeded with the core sizes stored as site options."""
        host = cls()
        for name, (width, height, crop) in CORE_IMAGE_SIZES.items():
            host.enable_size(name)
            host.set_option(WIDTH_OPTION.format(name=name), width)
            host.set_option(HEIGHT_OPTION.format(name=name), height)
            host.set_option(CROP_OPTION.format(name=name), crop)
        return host

    def enable_size(self, name: str) -> None:
        if name not in self._size_names:
            self._size_names.append(name)

    def add_image_size(
        self,
        name: str,
        width: int = 0,
        height: int = 0,
        crop: Union[bool, tuple] = False,
    ) -> None:
        """Register a theme size and enable it."""
        self._theme_sizes[name] = {"width": int(width), "height": int(height), "crop": crop}
        self.enable_size(name)
        logger.debug(f"ImageSizeAdded name={name} width={width} height={height} crop={crop}")

    def remove_image_size(self, name: str) -> bool:
        if name not in self._theme_sizes:
            return False
        del self._theme_sizes[name]
        if name in self._size_names:
            self._size_names.remove(name)
        return True

    def set_option(self, key: str, value: Any) -> None:
        self._options[key] = value

    def set_mime_type(self, attachment_id: int, mime_type: str) -> None:
        self._mime_types[attachment_id] = mime_type

    def get_enabled_size_names(self) -> List[str]:
        return list(self._size_names)

    def get_theme_size_overrides(self) -> Dict[str, Dict[str, Any]]:
        return {name: dict(record) for name, record in self._theme_sizes.items()}

    def get_config_value(self, key: str) -> Optional[Any]:
        return self._options.get(key)

    def get_mime_type(self, attachment_id: int) -> Optional[str]:
        return self._mime_types.get(attachment_id)
