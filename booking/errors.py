class BookingError(RuntimeError):
    """Base class for booking failures surfaced to the API layer."""
    pass


class MissingFieldsError(BookingError):
    """Raised when a submission lacks one of the minimum required fields."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


class BookingStoreError(BookingError):
    """Raised when the backing store fails to read or append rows."""
    pass


class StoreNotConfiguredError(BookingStoreError):
    """Raised when a store is built without the settings it needs."""
    pass
