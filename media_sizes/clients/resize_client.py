"""
Default resize collaborator.

Computes the output box of each size from the original dimensions stored in
attachment metadata and points the size at the original file with resize
query args, for file services that render intermediate sizes on request.
No pixels are read or written here.
"""
import logging
import posixpath
from typing import Any, Dict, Mapping, Optional, Union

from media_sizes.clients.interfaces import IResizeClient
from media_sizes.models.sizes import SizeSpec
from media_sizes.utils.errors import ErrorCodes, ResizeError
from media_sizes.utils.image_dimensions import resize_dimensions

logger = logging.getLogger("media_sizes")


class DimensionResizeClient(IResizeClient):
    """Resize collaborator that produces size metadata without resampling."""

    def __init__(self, data: Dict[str, Any], mime_type: str):
        """
        Initialize resize client for one attachment.

        Args:
            data: Attachment metadata (expects width, height and file keys)
            mime_type: Attachment MIME type
        """
        self.data = data
        self.mime_type = mime_type
        self.width = self._as_int(data.get("width"))
        self.height = self._as_int(data.get("height"))
        self.file = data.get("file") or ""

    @staticmethod
    def _as_int(value: Any) -> Optional[int]:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def get_size(self, spec: SizeSpec) -> Union[Mapping[str, Any], ResizeError]:
        if not self.width or not self.height:
            return ResizeError(
                code=ErrorCodes.MISSING_DIMENSIONS,
                message="Attachment metadata has no original width/height.",
                details={"file": self.file},
            )

        target_width = spec.width or 0
        target_height = spec.height or 0
        if target_width < 0 or target_height < 0:
            return ResizeError(
                code=ErrorCodes.INVALID_DIMENSIONS,
                message="Size dimensions must not be negative.",
                details={"width": spec.width, "height": spec.height},
            )

        dims = resize_dimensions(self.width, self.height, target_width, target_height, spec.crop)
        if dims is None:
            return ResizeError(
                code=ErrorCodes.NO_RESIZE_NEEDED,
                message="Size would not be smaller than the original image.",
                details={"width": spec.width, "height": spec.height},
            )

        new_width, new_height = dims[0], dims[1]
        return {
            "file": self._size_filename(new_width, new_height, spec.is_cropped),
            "width": new_width,
            "height": new_height,
            "mime-type": self.mime_type,
        }

    def _size_filename(self, width: int, height: int, cropped: bool) -> str:
        # Sizes are stored next to the original, so only the basename is kept
        basename = posixpath.basename(self.file)
        operation = "resize" if cropped else "fit"
        return f"{basename}?{operation}={width},{height}"
