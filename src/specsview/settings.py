"""Presentation settings for specsview."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ViewerSettings:
    """Fixed presentation settings. There are no config files or flags."""

    banner_text: str = "System Information"
    banner_font: str = "standard"
    banner_color: str = "#FFA500"
    page_size: int = 10
    farewell: str = "Thank you for using My Laptop Specs Viewer!"
