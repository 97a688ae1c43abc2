"""
Interfaces for the host system and the resize collaborator.
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from media_sizes.models.sizes import SizeSpec
from media_sizes.utils.errors import ResizeError


class IHostMediaSource(ABC):
    """Interface for the host system's size configuration and attachment records."""

    @abstractmethod
    def get_enabled_size_names(self) -> List[str]:
        """
        Get the names of the enabled intermediate sizes, in order.

        Returns:
            Ordered list of size names (before hook filtering)
        """
        pass

    @abstractmethod
    def get_theme_size_overrides(self) -> Dict[str, Dict[str, Any]]:
        """
        Get sizes registered by themes/plugins.

        Returns:
            Mapping of size name to a record with optional width, height and crop keys
        """
        pass

    @abstractmethod
    def get_config_value(self, key: str) -> Optional[Any]:
        """
        Get a site-wide configuration value.

        Args:
            key: Option name, e.g. "thumbnail_size_w"

        Returns:
            The stored value, or None if the option is not set
        """
        pass

    @abstractmethod
    def get_mime_type(self, attachment_id: int) -> Optional[str]:
        """
        Get the MIME type of an attachment.

        Args:
            attachment_id: Attachment identifier

        Returns:
            MIME type string, or None if unknown
        """
        pass


class IResizeClient(ABC):
    """Interface for the per-attachment resize collaborator."""

    @abstractmethod
    def get_size(self, spec: SizeSpec) -> Union[Mapping[str, Any], ResizeError]:
        """
        Produce metadata for one intermediate size.

        Args:
            spec: Normalized size definition

        Returns:
            Size metadata mapping on success; ResizeError on failure
        """
        pass


# Builds a resize collaborator from attachment metadata and MIME type
ResizeClientFactory = Callable[[Dict[str, Any], str], IResizeClient]
