import pyperclip
from models.errors import ClipboardWriteFailure


class ClipboardRepository:
    """
    Thin access layer over the system clipboard.
    """

    @staticmethod
    def copy(text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as err:
            raise ClipboardWriteFailure(f"Could not write to clipboard: {err}") from err
