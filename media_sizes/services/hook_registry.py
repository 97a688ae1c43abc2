"""
Ordered hook chains for extensibility points.

Each hook name owns a list of transformer callables. A transformer receives
the current value plus any extra context args and returns the replacement
value. Transformers run in ascending priority; equal priorities run in
registration order.
"""
import itertools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Mapping, NamedTuple, Optional

from media_sizes.config import settings

logger = logging.getLogger("media_sizes")

# Enabled size names, before the registry is built
HOOK_INTERMEDIATE_SIZES = "intermediate_image_sizes"
# Resolved size registry, before sizes are generated for an attachment
HOOK_INTERMEDIATE_SIZES_ADVANCED = "intermediate_image_sizes_advanced"
# Attachment metadata as read/generated by the host
HOOK_ATTACHMENT_METADATA = "attachment_metadata"

Transformer = Callable[..., Any]


class _Registration(NamedTuple):
    priority: int
    sequence: int
    callback: Transformer


def skip_intermediate_sizes(sizes: Any, *args: Any) -> Any:
    """
    Default host transformer that blanks size lists and registries.

    Registered on both size hooks so the host never writes intermediate
    files of its own; size metadata is produced by this plugin instead.
    """
    if isinstance(sizes, Mapping):
        return {}
    return []


class HookRegistry:
    """Registry of ordered transformer chains keyed by hook name."""

    def __init__(self):
        """Initialize an empty registry."""
        self._hooks: Dict[str, List[_Registration]] = {}
        self._sequence = itertools.count()

    def add_filter(
        self,
        hook_name: str,
        callback: Transformer,
        priority: Optional[int] = None,
    ) -> None:
        """
        Register a transformer on a hook.

        Args:
            hook_name: Hook name
            callback: Transformer called as callback(value, *args)
            priority: Lower runs first (default from config)
        """
        if priority is None:
            priority = settings.DEFAULT_FILTER_PRIORITY
        self._insert(hook_name, _Registration(priority, next(self._sequence), callback))
        logger.debug(
            f"FilterAdded hook={hook_name} callback={_callback_name(callback)} priority={priority}"
        )

    def remove_filter(self, hook_name: str, callback: Transformer) -> bool:
        """
        Remove every registration of a transformer from a hook.

        Returns:
            True if anything was removed
        """
        return bool(self._pop(hook_name, callback))

    def has_filter(self, hook_name: str, callback: Optional[Transformer] = None) -> bool:
        registrations = self._hooks.get(hook_name, [])
        if callback is None:
            return bool(registrations)
        return any(reg.callback == callback for reg in registrations)

    def get_filters(self, hook_name: str) -> List[Transformer]:
        """Get the transformers of a hook in execution order."""
        return [reg.callback for reg in self._hooks.get(hook_name, [])]

    def apply_filters(self, hook_name: str, value: Any, *args: Any) -> Any:
        """
        Run a value through a hook chain.

        Args:
            hook_name: Hook name
            value: Initial value
            *args: Extra context passed to every transformer

        Returns:
            Value returned by the last transformer (or the input if none ran)
        """
        # Snapshot so transformers may add/remove filters while running
        for registration in list(self._hooks.get(hook_name, [])):
            value = registration.callback(value, *args)
        return value

    @contextmanager
    def suspended(self, hook_name: str, callback: Transformer) -> Iterator[None]:
        """
        Temporarily remove a transformer from a hook.

        Registrations are restored on exit at their original priority and
        position, including when the block raises.
        """
        removed = self._pop(hook_name, callback)
        if removed:
            logger.debug(f"FilterSuspended hook={hook_name} callback={_callback_name(callback)}")
        try:
            yield
        finally:
            for registration in removed:
                self._insert(hook_name, registration)
            if removed:
                logger.debug(f"FilterRestored hook={hook_name} callback={_callback_name(callback)}")

    def _insert(self, hook_name: str, registration: _Registration) -> None:
        registrations = self._hooks.setdefault(hook_name, [])
        registrations.append(registration)
        registrations.sort(key=lambda reg: (reg.priority, reg.sequence))

    def _pop(self, hook_name: str, callback: Transformer) -> List[_Registration]:
        registrations = self._hooks.get(hook_name, [])
        removed = [reg for reg in registrations if reg.callback == callback]
        if removed:
            self._hooks[hook_name] = [reg for reg in registrations if reg.callback != callback]
        return removed


def _callback_name(callback: Transformer) -> str:
    return getattr(callback, "__qualname__", None) or type(callback).__name__
