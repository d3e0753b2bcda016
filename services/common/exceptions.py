"""Errors raised while fetching and extracting collection schedules."""

from typing import Optional


class ScheduleUnavailableError(Exception):
    """
    No collection data could be produced for an address.

    Covers network failures, upstream HTTP errors, pages that cannot be
    recognised and addresses without any collection dates.
    """

    def __init__(
        self,
        message: str,
        street: Optional[str] = None,
        street_number: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.street = street
        self.street_number = street_number

    def __str__(self) -> str:
        if self.street is None:
            return self.message
        address = f"{self.street} {self.street_number or ''}".strip()
        return f"{self.message} (address: {address})"
