"""Image capture infrastructure package."""

from .data_url_encoder import DataUrlImageEncoder, sniff_image_type

__all__ = ["DataUrlImageEncoder", "sniff_image_type"]
