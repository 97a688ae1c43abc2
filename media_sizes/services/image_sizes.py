"""
Intermediate size metadata for image attachments.

maybe_inject_image_sizes() is registered on the attachment metadata hook at a
low priority so earlier callbacks may fill in sizes themselves; it only acts
on images whose metadata has no sizes yet.
"""
import logging
import re
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from media_sizes.clients.interfaces import IHostMediaSource, IResizeClient, ResizeClientFactory
from media_sizes.config import settings
from media_sizes.models.sizes import SizeSpec
from media_sizes.services.hook_registry import HOOK_ATTACHMENT_METADATA, HookRegistry, Transformer
from media_sizes.services.size_registry import SizeRegistry, SizeRegistryResolver, apply_host_filters
from media_sizes.utils.errors import ErrorCodes, ResizeError
from media_sizes.utils.logging import trace_calls

logger = logging.getLogger("media_sizes")


class ImageSizesContext:
    """Collaborators shared by every metadata call in a process."""

    def __init__(
        self,
        host: IHostMediaSource,
        hooks: HookRegistry,
        resolver: SizeRegistryResolver,
        resize_client_factory: ResizeClientFactory,
    ):
        """
        Initialize context.

        Args:
            host: Host configuration source and attachment records
            hooks: Hook registry shared with the host
            resolver: Size registry resolver (owns the registry cache)
            resize_client_factory: Builds a resize collaborator per attachment
        """
        self.host = host
        self.hooks = hooks
        self.resolver = resolver
        self.resize_client_factory = resize_client_factory


class ImageSizes:
    """Generates the sizes metadata of one attachment."""

    def __init__(
        self,
        attachment_id: int,
        data: Dict[str, Any],
        resolver: SizeRegistryResolver,
        resize_client: IResizeClient,
    ):
        self.attachment_id = attachment_id
        self.data = data
        self.resolver = resolver
        self.resize_client = resize_client
        self.resolver.resolve()

    def filtered_sizes(self) -> SizeRegistry:
        return apply_host_filters(
            self.resolver.hooks,
            self.resolver.resolve(),
            self.data,
            suppressed=self.resolver.suppressed,
        )

    @staticmethod
    def standardize_size_data(size_data: Any) -> Optional[SizeSpec]:
        """
        Standardize and validate a size record.

        Args:
            size_data: Record with at least width or height; crop optional

        Returns:
            SizeSpec with width/height defaulting to None and crop to False;
            None if neither width nor height is set or the record is invalid
        """
        if isinstance(size_data, SizeSpec):
            size_data = size_data.model_dump()
        if not isinstance(size_data, Mapping):
            return None
        if size_data.get("width") is None and size_data.get("height") is None:
            return None

        try:
            spec = SizeSpec.model_validate(dict(size_data))
        except ValidationError as e:
            logger.warning(f"InvalidSizeData data={dict(size_data)!r} errors={e.error_count()}")
            return None

        # Blank strings only become None during validation
        if spec.width is None and spec.height is None:
            return None
        return spec

    @trace_calls
    def generate_sizes_meta(self) -> Dict[str, Dict[str, Any]]:
        """
        Get sizes for the attachment metadata.

        Returns:
            Mapping of size name to resize result; sizes that fail are left out
        """
        metadata: Dict[str, Dict[str, Any]] = {}

        for size, size_data in self.filtered_sizes().items():
            spec = self.standardize_size_data(size_data)
            if spec is None:
                logger.debug(f"SizeSkipped attachment={self.attachment_id} size={size} reason=empty")
                continue

            resized = self._resize(size, spec)
            if isinstance(resized, Mapping):
                metadata[size] = dict(resized)
            else:
                code = getattr(resized, "code", type(resized).__name__)
                logger.debug(f"SizeSkipped attachment={self.attachment_id} size={size} reason={code}")

        logger.info(
            f"SizesGenerated attachment={self.attachment_id} count={len(metadata)} "
            f"names={','.join(metadata)}"
        )
        return metadata

    def _resize(self, size: str, spec: SizeSpec) -> Any:
        try:
            return self.resize_client.get_size(spec)
        except Exception as e:
            logger.warning(
                f"ResizeFailed attachment={self.attachment_id} size={size} error={type(e).__name__}",
                exc_info=True,
            )
            return ResizeError(
                code=ErrorCodes.RESIZE_FAILED,
                message=f"Resize collaborator raised {type(e).__name__}.",
                details={"size": size},
            )


def _sizes_already_exist(data: Mapping[str, Any]) -> bool:
    sizes = data.get("sizes")
    return isinstance(sizes, Mapping) and bool(sizes)


@trace_calls
def maybe_inject_image_sizes(
    data: Dict[str, Any],
    attachment_id: int,
    context: ImageSizesContext,
) -> Dict[str, Any]:
    """
    Inject image sizes into attachment metadata.

    Args:
        data: Attachment metadata (updated in place)
        attachment_id: Attachment identifier
        context: Shared collaborators

    Returns:
        The attachment metadata
    """
    if _sizes_already_exist(data):
        return data

    mime_type = context.host.get_mime_type(attachment_id) or ""
    if not re.match(settings.IMAGE_MIME_PATTERN, mime_type):
        logger.debug(f"SizesNotInjected attachment={attachment_id} mime={mime_type or 'unknown'}")
        return data

    resize_client = context.resize_client_factory(data, mime_type)
    image_sizes = ImageSizes(attachment_id, data, context.resolver, resize_client)
    data["sizes"] = image_sizes.generate_sizes_meta()
    return data


def register_image_sizes(
    context: ImageSizesContext,
    priority: Optional[int] = None,
) -> Transformer:
    """
    Register the size injector on the attachment metadata hook.

    Args:
        context: Shared collaborators
        priority: Hook priority (default INJECT_PRIORITY, after default filters)

    Returns:
        The registered callback, for later removal
    """
    if priority is None:
        priority = settings.INJECT_PRIORITY

    def inject_image_sizes(data: Dict[str, Any], attachment_id: int) -> Dict[str, Any]:
        return maybe_inject_image_sizes(data, attachment_id, context)

    context.hooks.add_filter(HOOK_ATTACHMENT_METADATA, inject_image_sizes, priority)
    return inject_image_sizes
