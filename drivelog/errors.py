class DriveLogError(Exception):
    """Base class for every error raised by drivelog."""


class PersistenceError(DriveLogError):
    """Reading from or writing to the blob store failed."""


class ValidationError(DriveLogError):
    """The trip form cannot be committed.

    ``errors`` maps form field names to a human readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid trip details: {fields}")


class EmptyCollectionError(DriveLogError):
    """An export or email was requested while the log is empty."""


class DeliveryError(DriveLogError):
    """A file could not be shared or downloaded, or the user cancelled."""


class DuplicateRecordError(DriveLogError):
    """A record with the same id is already in the log."""


class SessionStateError(DriveLogError):
    """The trip session is not in a phase that allows the operation."""
