"""
Size registry resolution and host filtering.

The resolver merges the host's enabled size names with per-size values from
theme registrations (preferred) or site options, and caches the result for
as long as the resolver object lives. Callers construct one resolver per
process and pass it into every call.
"""
import copy
import logging
from typing import Any, Dict, Mapping, Optional

from media_sizes.clients.interfaces import IHostMediaSource
from media_sizes.services.hook_registry import (
    HOOK_INTERMEDIATE_SIZES,
    HOOK_INTERMEDIATE_SIZES_ADVANCED,
    HookRegistry,
    Transformer,
    skip_intermediate_sizes,
)
from media_sizes.utils.logging import trace_calls
from media_sizes.utils.size_defaults import CROP_OPTION, HEIGHT_OPTION, WIDTH_OPTION

logger = logging.getLogger("media_sizes")

SizeRegistry = Dict[str, Dict[str, Any]]


class SizeRegistryResolver:
    """Builds and caches the size name -> {width, height, crop} registry."""

    def __init__(
        self,
        host: IHostMediaSource,
        hooks: HookRegistry,
        suppressed: Transformer = skip_intermediate_sizes,
    ):
        """
        Initialize resolver.

        Args:
            host: Host configuration source
            hooks: Hook registry used to filter enabled size names
            suppressed: Transformer kept out of the size hooks while resolving
        """
        self._host = host
        self._hooks = hooks
        self._suppressed = suppressed
        self._registry: Optional[SizeRegistry] = None

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    @property
    def suppressed(self) -> Transformer:
        return self._suppressed

    @property
    def is_resolved(self) -> bool:
        return self._registry is not None

    @trace_calls
    def resolve(self) -> SizeRegistry:
        """
        Get the size registry, building it on first use.

        Returns:
            The cached registry; the same object on every call until reset()
        """
        if self._registry is not None:
            return self._registry

        overrides = self._host.get_theme_size_overrides() or {}

        with self._hooks.suspended(HOOK_INTERMEDIATE_SIZES, self._suppressed):
            names = self._hooks.apply_filters(
                HOOK_INTERMEDIATE_SIZES, list(self._host.get_enabled_size_names())
            )

        registry: SizeRegistry = {}
        for name in names or []:
            override = overrides.get(name) or {}
            registry[name] = {
                "width": self._dimension(name, override, "width", WIDTH_OPTION),
                "height": self._dimension(name, override, "height", HEIGHT_OPTION),
                "crop": self._crop(name, override),
            }

        self._registry = registry
        logger.info(f"RegistryResolved count={len(registry)} names={','.join(registry)}")
        return registry

    def reset(self) -> None:
        """Drop the cached registry so the next resolve() rebuilds it."""
        self._registry = None
        logger.debug("RegistryReset")

    def _dimension(self, name: str, override: Mapping[str, Any], key: str, option: str) -> Any:
        if override.get(key) is not None:
            try:
                return int(float(override[key]))
            except (TypeError, ValueError, OverflowError):
                logger.warning(
                    f"InvalidSizeOverride size={name} key={key} value={override[key]!r}"
                )
                return None
        return self._host.get_config_value(option.format(name=name))

    def _crop(self, name: str, override: Mapping[str, Any]) -> Any:
        if override.get("crop") is not None:
            return override["crop"]
        return self._host.get_config_value(CROP_OPTION.format(name=name))


def apply_host_filters(
    hooks: HookRegistry,
    registry: SizeRegistry,
    attachment_metadata: Mapping[str, Any],
    suppressed: Transformer = skip_intermediate_sizes,
) -> SizeRegistry:
    """
    Run the registry through the advanced size hook for one attachment.

    Args:
        hooks: Hook registry
        registry: Resolved size registry (not modified)
        attachment_metadata: Attachment metadata passed as hook context
        suppressed: Transformer kept out of the hook for this call

    Returns:
        Filtered registry; {} when the chain raises or returns something that is not a mapping
    """
    try:
        with hooks.suspended(HOOK_INTERMEDIATE_SIZES_ADVANCED, suppressed):
            sizes = hooks.apply_filters(
                HOOK_INTERMEDIATE_SIZES_ADVANCED, copy.deepcopy(registry), attachment_metadata
            )
    except Exception as e:
        logger.warning(
            f"FilteredSizesFailed hook={HOOK_INTERMEDIATE_SIZES_ADVANCED} error={type(e).__name__}",
            exc_info=True,
        )
        return {}

    if not isinstance(sizes, Mapping):
        logger.warning(f"FilteredSizesInvalid type={type(sizes).__name__} fallback=empty")
        return {}
    return dict(sizes)
