"""
Custom exceptions for the bus fee manager.
"""


class BusManagerError(Exception):
    """Base class for all errors reported by the bus fee manager."""
    pass


class RecordNotFoundError(BusManagerError):
    """A record required by an operation does not exist."""
    pass


class StoreCapacityError(BusManagerError):
    """The record store cannot accept another record."""
    pass


class PersistenceError(BusManagerError):
    """A data file could not be opened, read, written or decoded."""
    pass
