"""A doubles player in a tournament."""

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

from swissdoubles.constants import TIE_SCORE, WIN_SCORE


@dataclass
class Player:
    """
    Player registered in a doubles tournament.

    Players are never deleted once a match references them; withdrawing a
    player clears ``is_active`` so they drop out of future rounds while their
    history keeps counting for everyone they played with or against.

    Attributes
    ----------
    id : str
        Unique identifier for the player.
    name : str
        Display name.
    wins, losses, ties : int
        Cumulative record. Byes are included as a win or a tie depending on
        how many byes the tournament has handed out.
    points_for, points_against : int
        Sum of match points scored by and against the player's teams.
    twenties : int
        Bonus statistic, summed over the player's matches.
    bye_count : int
        Number of rounds the player has sat out.
    is_active : bool
        Whether the player takes part in future rounds.

    Notes
    -----
    The record fields are a cache of what the match history says. The
    pairing engine never reads them; it derives standings from matches.
    """

    id: str
    name: str
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: int = 0
    points_against: int = 0
    twenties: int = 0
    bye_count: int = 0
    is_active: bool = True

    @property
    def point_diff(self) -> int:
        """Points for minus points against."""
        return self.points_for - self.points_against

    @property
    def score(self) -> int:
        """Standings points for the stored record."""
        return self.wins * WIN_SCORE + self.ties * TIE_SCORE

    @property
    def record(self) -> str:
        """Record formatted as ``W-L-T``."""
        return f"{self.wins}W-{self.losses}L-{self.ties}T"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize player to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "twenties": self.twenties,
            "bye_count": self.bye_count,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        """Deserialize player from dictionary."""
        return cls(
            id=str(data["id"]),
            name=data["name"],
            wins=data.get("wins", 0),
            losses=data.get("losses", 0),
            ties=data.get("ties", 0),
            points_for=data.get("points_for", 0),
            points_against=data.get("points_against", 0),
            twenties=data.get("twenties", 0),
            bye_count=data.get("bye_count", 0),
            is_active=data.get("is_active", True),
        )

    def __str__(self) -> str:
        return self.name
