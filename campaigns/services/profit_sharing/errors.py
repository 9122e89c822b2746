"""Shared error classes and failure codes for profit sharing."""

from __future__ import annotations

from typing import Final

SEASON_NOT_FOUND: Final = "404_SEASON_NOT_FOUND"
SEASON_NOT_ELIGIBLE: Final = "400_SEASON_NOT_ELIGIBLE"
NO_ELIGIBLE_DONORS: Final = "400_NO_ELIGIBLE_DONORS"
INSUFFICIENT_DONORS: Final = "400_INSUFFICIENT_DONORS"
PROFIT_SHARING_FAILED: Final = "500_PROFIT_SHARING_FAILED"


class ProfitSharingError(RuntimeError):
    """Base exception raised by the profit-sharing engine."""

    def __init__(self, message: str, code: str = "500_PROFIT_SHARING_FAILED") -> None:
        super().__init__(message)
        self.code = code


class StoreError(ProfitSharingError):
    """Raised when a season, donation or donor store fails."""

    def __init__(self, message: str, code: str = "500_STORE_FAILURE") -> None:
        super().__init__(message, code=code)


class ProfitSharingConfigError(ProfitSharingError):
    """Raised when thresholds are configured with unusable values."""

    def __init__(self, message: str, code: str = "500_CONFIGURATION") -> None:
        super().__init__(message, code=code)


def status_code_for(code: str) -> int:
    """Map a failure code onto the HTTP-equivalent status a caller should use."""
    if code == SEASON_NOT_FOUND:
        return 404
    if code in (SEASON_NOT_ELIGIBLE, NO_ELIGIBLE_DONORS, INSUFFICIENT_DONORS):
        return 400
    return 500
