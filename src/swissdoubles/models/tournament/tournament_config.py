"""TournamentSettings data class."""

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

from dataclasses import dataclass
from typing import Any, Dict

from swissdoubles.constants import DEFAULT_POINTS_PER_MATCH, DEFAULT_POOL_SIZE
from swissdoubles.exceptions import InvalidConfigurationException


@dataclass
class TournamentSettings:
    """Tournament configuration settings.

    Attributes
    ----------
    points_per_match : int
        Total both teams' scores must add up to in a completed match.
    table_assignment : bool
        Whether generated matches are handed tables.
    pool_size : int
        Group size used when splitting the final standings into pools.
    """

    points_per_match: int = DEFAULT_POINTS_PER_MATCH
    table_assignment: bool = False
    pool_size: int = DEFAULT_POOL_SIZE

    @property
    def bye_score(self) -> int:
        """Score stored on each side of a bye match (an even split)."""
        return self.points_per_match // 2

    def validate(self) -> None:
        """Raise InvalidConfigurationException if a setting is out of range."""
        if self.points_per_match < 1:
            raise InvalidConfigurationException(
                f"points_per_match must be at least 1, got {self.points_per_match}"
            )
        if self.pool_size < 2:
            raise InvalidConfigurationException(
                f"pool_size must be at least 2, got {self.pool_size}"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize settings to dictionary."""
        return {
            "points_per_match": self.points_per_match,
            "table_assignment": self.table_assignment,
            "pool_size": self.pool_size,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TournamentSettings":
        """Deserialize settings from dictionary."""
        return cls(
            points_per_match=data.get("points_per_match", DEFAULT_POINTS_PER_MATCH),
            table_assignment=data.get("table_assignment", False),
            pool_size=data.get("pool_size", DEFAULT_POOL_SIZE),
        )
