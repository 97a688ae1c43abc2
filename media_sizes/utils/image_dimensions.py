"""
Dimension math for intermediate sizes.

This module provides functions to:
- Constrain dimensions proportionally inside a bounding box
- Compute the output box (and source crop region) for a size definition
"""
from typing import Optional, Tuple, Union

from media_sizes.models.sizes import CropPosition


def constrain_dimensions(
    current_width: int,
    current_height: int,
    max_width: int = 0,
    max_height: int = 0,
) -> Tuple[int, int]:
    """
    Scale dimensions down proportionally so they fit inside a bounding box.

    Args:
        current_width: Source width in pixels
        current_height: Source height in pixels
        max_width: Box width; 0 means unbounded
        max_height: Box height; 0 means unbounded

    Returns:
        Tuple of (width, height) in pixels, never upscaled
    """
    if not max_width and not max_height:
        return current_width, current_height

    width_ratio = 1.0
    height_ratio = 1.0
    if max_width > 0 and current_width > 0 and current_width > max_width:
        width_ratio = max_width / current_width
    if max_height > 0 and current_height > 0 and current_height > max_height:
        height_ratio = max_height / current_height

    smaller_ratio = min(width_ratio, height_ratio)
    larger_ratio = max(width_ratio, height_ratio)

    # The larger ratio only wins if it still fits both bounds
    if (max_width and round(current_width * larger_ratio) > max_width) or (
        max_height and round(current_height * larger_ratio) > max_height
    ):
        ratio = smaller_ratio
    else:
        ratio = larger_ratio

    width = max(1, int(round(current_width * ratio)))
    height = max(1, int(round(current_height * ratio)))
    return width, height


def _crop_offset(free: int, position: str, start: str, end: str) -> int:
    if position == start:
        return 0
    if position == end:
        return free
    return free // 2


def resize_dimensions(
    original_width: int,
    original_height: int,
    target_width: int,
    target_height: int,
    crop: Union[bool, CropPosition] = False,
) -> Optional[Tuple[int, int, int, int, int, int]]:
    """
    Compute the output box for a size.

    Args:
        original_width: Source width in pixels
        original_height: Source height in pixels
        target_width: Size width; 0 means unbounded
        target_height: Size height; 0 means unbounded
        crop: False to fit, True to crop centered, or an (x, y) alignment

    Returns:
        Tuple of (new_width, new_height, src_x, src_y, src_width, src_height),
        or None if the size cannot be produced (bad input or would upscale)
    """
    if original_width <= 0 or original_height <= 0:
        return None
    if target_width <= 0 and target_height <= 0:
        return None

    if crop is not False:
        aspect_ratio = original_width / original_height
        new_width = min(target_width, original_width)
        new_height = min(target_height, original_height)
        if not new_width:
            new_width = int(new_height * aspect_ratio)
        if not new_height:
            new_height = int(new_width / aspect_ratio)

        size_ratio = max(new_width / original_width, new_height / original_height)
        crop_width = int(round(new_width / size_ratio))
        crop_height = int(round(new_height / size_ratio))

        x_position, y_position = crop if isinstance(crop, tuple) else ("center", "center")
        src_x = _crop_offset(original_width - crop_width, x_position, "left", "right")
        src_y = _crop_offset(original_height - crop_height, y_position, "top", "bottom")
    else:
        crop_width = original_width
        crop_height = original_height
        src_x = 0
        src_y = 0
        new_width, new_height = constrain_dimensions(
            original_width, original_height, target_width, target_height
        )

    # Never upscale; an exact match on either side still counts as a size
    if (
        new_width >= original_width
        and new_height >= original_height
        and target_width != original_width
        and target_height != original_height
    ):
        return None

    return new_width, new_height, src_x, src_y, crop_width, crop_height

