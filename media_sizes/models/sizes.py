"""
Pydantic models for image size definitions.
"""
from typing import Any, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from media_sizes.utils.size_defaults import CROP_X_POSITIONS, CROP_Y_POSITIONS

CropPosition = Tuple[str, str]


class SizeSpec(BaseModel):
    """A normalized intermediate size: target box plus crop mode."""

    model_config = ConfigDict(extra="allow")

    width: Optional[int] = Field(default=None, description="Target width in pixels; None or 0 means unbounded")
    height: Optional[int] = Field(default=None, description="Target height in pixels; None or 0 means unbounded")
    crop: Union[bool, CropPosition] = Field(
        default=False,
        description="False to fit inside the box, True to crop centered, or an (x, y) alignment",
    )

    @field_validator("width", "height", mode="before")
    @classmethod
    def _blank_dimension(cls, value: Any) -> Any:
        # Site options store unset dimensions as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("crop", mode="before")
    @classmethod
    def _blank_crop(cls, value: Any) -> Any:
        if value is None or value == "":
            return False
        if isinstance(value, list):
            return tuple(value)
        # Any non-zero number enables cropping
        if isinstance(value, (int, float)):
            return bool(value)
        return value

    @field_validator("crop")
    @classmethod
    def _check_alignment(cls, value: Union[bool, CropPosition]) -> Union[bool, CropPosition]:
        if isinstance(value, tuple):
            x, y = value
            if x not in CROP_X_POSITIONS or y not in CROP_Y_POSITIONS:
                raise ValueError(f"crop alignment must be (x, y) in {CROP_X_POSITIONS} x {CROP_Y_POSITIONS}")
        return value

    @property
    def is_cropped(self) -> bool:
        return self.crop is not False
