"""Exceptions for use in Swiss Doubles"""

# Swiss Doubles
# Copyright (C) 2025  Swiss Doubles developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


# ========== Base Application Exception ==========


class SwissDoublesException(Exception):
    """Base exception for all Swiss Doubles errors.

    All custom exceptions in the package inherit from this class, so callers
    in the session layer can catch every engine error with one except clause.
    """

    pass


# ========== Pairing Exceptions ==========


class PairingException(SwissDoublesException):
    """Base exception for pairing-related errors."""

    pass


class NotEnoughPlayersException(PairingException):
    """Raised when too few active players remain to form a single match."""

    def __init__(self, active_count: int, required: int) -> None:
        self.active_count = active_count
        self.required = required
        super().__init__(
            f"Need at least {required} active players to generate a round, "
            f"have {active_count}"
        )


class InvalidPairingException(PairingException):
    """Raised when a set of matches does not split the active players cleanly."""

    pass


# ========== Tournament Exceptions ==========


class TournamentException(SwissDoublesException):
    """Base exception for tournament-related errors."""

    pass


class TournamentStateException(TournamentException):
    """Raised when tournament is in an invalid state for the requested operation."""

    pass


class RoundNotFoundException(TournamentException):
    """Raised when a requested round does not exist."""

    pass


class RoundNotCompleteException(TournamentStateException):
    """Raised when the previous round still has matches awaiting scores."""

    pass


class DuplicatePlayerException(TournamentException):
    """Raised when attempting to add a player that already exists."""

    pass


# ========== Player Exceptions ==========


class PlayerException(SwissDoublesException):
    """Base exception for player-related errors."""

    pass


class PlayerNotFoundException(PlayerException):
    """Raised when a requested player cannot be found."""

    pass


class PlayerInUseException(PlayerException):
    """Raised when deleting a player that matches still reference."""

    pass


# ========== Table Exceptions ==========


class TableException(SwissDoublesException):
    """Base exception for table-related errors."""

    pass


class TableNotFoundException(TableException):
    """Raised when a requested table cannot be found."""

    pass


# ========== Result Exceptions ==========


class ResultException(SwissDoublesException):
    """Base exception for result recording errors."""

    pass


class InvalidResultException(ResultException):
    """Raised when a result is invalid (e.g., scores do not add up)."""

    pass


class DuplicateResultException(ResultException):
    """Raised when attempting to record a result that already exists."""

    pass


class ResultNotFoundException(ResultException):
    """Raised when a requested match cannot be found."""

    pass


# ========== Configuration Exceptions ==========


class ConfigurationException(SwissDoublesException):
    """Base exception for configuration errors."""

    pass


class InvalidConfigurationException(ConfigurationException):
    """Raised when configuration data is invalid."""

    pass
