"""
Location Gate

Guards read access to statistics with the account's declared location.

RULES:
- Unset: every asserted location is allowed, including none at all.
  The account has not opted into location-based protection.
- Set: only an exact, case-sensitive match is allowed. The asserted
  value is compared as given, without trimming.
"""

from typing import Optional

from txstats.models.transaction import AccountLocation, Authorization


class InvalidLocationError(ValueError):
    """Location is empty after trimming whitespace."""
    pass


class LocationGate:
    """Holds the account location and authorizes statistics reads."""

    def __init__(self):
        self._location = AccountLocation()

    @property
    def location(self) -> AccountLocation:
        return self._location

    def set_location(self, candidate: str) -> str:
        """
        Store `candidate` trimmed of surrounding whitespace.

        Returns:
            The stored value

        Raises:
            InvalidLocationError: If nothing is left after trimming.
                The stored location is unchanged.
        """
        trimmed = candidate.strip()
        if not trimmed:
            raise InvalidLocationError("Location must not be empty")
        self._location = AccountLocation(value=trimmed)
        return trimmed

    def clear_location(self) -> None:
        self._location = AccountLocation()

    def authorize(self, asserted_location: Optional[str]) -> Authorization:
        if not self._location.is_set:
            return Authorization.ALLOWED
        if asserted_location == self._location.value:
            return Authorization.ALLOWED
        return Authorization.DENIED
