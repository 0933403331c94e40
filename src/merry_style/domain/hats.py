"""Hat colors and aspect-ratio buckets offered to the user."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class HatColorInfo:
    """Display metadata for a hat color."""

    name: str
    hex: str
    value: str


class HatColor(Enum):
    """Hat colors in the order they are presented."""

    RED = HatColorInfo(name="Red", hex="#D42426", value="Red")
    GREEN = HatColorInfo(name="Green", hex="#165B33", value="Green")
    BLUE = HatColorInfo(name="Blue", hex="#2563EB", value="Blue")
    GOLD = HatColorInfo(name="Gold", hex="#F59E0B", value="Gold")
    PINK = HatColorInfo(name="Pink", hex="#EC4899", value="Pink")
    PURPLE = HatColorInfo(name="Purple", hex="#9333EA", value="Purple")

    @property
    def display_name(self) -> str:
        return self.value.name

    @property
    def hex(self) -> str:
        return self.value.hex

    @property
    def prompt_value(self) -> str:
        """Color text placed verbatim into the generation prompt."""
        return self.value.value

    @classmethod
    def from_name(cls, name: str) -> "HatColor | None":
        """Look up a color by display name, ignoring case."""
        needle = name.strip().lower()
        for color in cls:
            if color.display_name.lower() == needle:
                return color
        return None


DEFAULT_HAT_COLOR = HatColor.RED


class AspectRatio(Enum):
    """Aspect-ratio buckets supported by the image model."""

    SQUARE = "1:1"
    LANDSCAPE_4_3 = "4:3"
    PORTRAIT_3_4 = "3:4"
    WIDESCREEN = "16:9"
    VERTICAL = "9:16"

    @property
    def ratio(self) -> float:
        """Canonical width / height for the bucket."""
        width, height = self.value.split(":")
        return int(width) / int(height)


DEFAULT_ASPECT_RATIO = AspectRatio.SQUARE
