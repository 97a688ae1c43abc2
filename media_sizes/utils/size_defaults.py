"""
Host core image size defaults and crop alignment values.
"""
# Core sizes seeded as site options: name -> (width, height, crop)
CORE_IMAGE_SIZES = {
    "thumbnail": (150, 150, True),
    "medium": (300, 300, False),
    "medium_large": (768, 0, False),
    "large": (1024, 1024, False),
}

# Site option key templates
WIDTH_OPTION = "{name}_size_w"
HEIGHT_OPTION = "{name}_size_h"
CROP_OPTION = "{name}_crop"

# Crop alignment descriptor values
CROP_X_POSITIONS = ("left", "center", "right")
CROP_Y_POSITIONS = ("top", "center", "bottom")
