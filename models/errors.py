class ColorPickerError(Exception):
    """Base class for every failure raised by the color picker."""


class CaptureUnavailable(ColorPickerError):
    """No frame could be obtained (camera not ready, unreadable snapshot)."""


class OutOfBoundsSample(ColorPickerError, IndexError):
    """
    A sample window does not fit inside the pixel buffer.
    Raised instead of clamping, since clamping would bias the average.
    """


class ClipboardWriteFailure(ColorPickerError):
    """Copying text to the system clipboard failed."""
