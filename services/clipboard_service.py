from models.color import Color
from repositories.clipboard_repository import ClipboardRepository

REPRESENTATIONS = ("hex", "rgb")


class ClipboardService:
    """
    Business logic for copying a color. Delegates the actual write to
    ClipboardRepository.
    """

    def __init__(self):
        self.repository = ClipboardRepository()

    @staticmethod
    def format_color(color: Color, representation: str = "hex") -> str:
        if representation == "hex":
            return color.hex
        if representation == "rgb":
            return color.rgb_text
        raise ValueError(f"Representation must be one of {REPRESENTATIONS}, got {representation!r}")

    def copy_color(self, color: Color, representation: str = "hex") -> str:
        text = self.format_color(color, representation)
        self.repository.copy(text)
        return text
