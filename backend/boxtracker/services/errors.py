class BoxTrackerException(Exception):
    pass


class QrCodeFormatError(BoxTrackerException):
    """Scanned text is not a boxtracker-{id} payload."""
    pass
