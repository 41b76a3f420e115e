"""Match data class."""

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
from typing import Any, Dict, Optional, Tuple

from swissdoubles.constants import TEAM_SIZE
from swissdoubles.type_hints import PlayerId, TeamIds, TeamKey


@dataclass
class Match:
    """A single doubles match, or a bye pseudo-match.

    A regular match has two teams of two. A bye has a single player in
    ``team1`` and no ``team2``; it is created completed with an even score
    split, since nobody enters a score for it.

    Attributes
    ----------
    id : str
        Unique identifier for the match.
    round_number : int
        Round the match belongs to (1-indexed).
    team1 : tuple of str
        Player ids of the first team (one id for a bye).
    team2 : tuple of str or None
        Player ids of the second team, ``None`` for a bye.
    score1, score2 : int or None
        Match points per team, ``None`` until played.
    twenties1, twenties2 : int
        Bonus count per team.
    table_id : str or None
        Table the match is played at, if tables are assigned.
    completed : bool
        Whether the score has been entered.
    is_bye : bool
        Whether this is a bye pseudo-match.
    """

    id: str
    round_number: int
    team1: TeamIds
    team2: Optional[TeamIds] = None
    score1: Optional[int] = None
    score2: Optional[int] = None
    twenties1: int = 0
    twenties2: int = 0
    table_id: Optional[str] = None
    completed: bool = False
    is_bye: bool = False

    def __post_init__(self) -> None:
        self.team1 = tuple(self.team1)
        if self.team2 is not None:
            self.team2 = tuple(self.team2)
        if self.is_bye:
            if self.team2 is not None or len(self.team1) != 1:
                raise ValueError(f"Bye match {self.id} must hold exactly one player")
        elif (
            self.team2 is None
            or len(self.team1) != TEAM_SIZE
            or len(self.team2) != TEAM_SIZE
        ):
            raise ValueError(f"Match {self.id} must have two teams of {TEAM_SIZE}")

    @property
    def is_regular(self) -> bool:
        """True for a match between two teams."""
        return not self.is_bye

    @property
    def player_ids(self) -> Tuple[PlayerId, ...]:
        """Every player id in the match, team1 first."""
        return self.team1 + (self.team2 or ())

    @property
    def team1_key(self) -> TeamKey:
        return frozenset(self.team1)

    @property
    def team2_key(self) -> Optional[TeamKey]:
        return frozenset(self.team2) if self.team2 is not None else None

    def involves(self, player_id: PlayerId) -> bool:
        """Check if the player appears in this match."""
        return player_id in self.player_ids

    def side_of(self, player_id: PlayerId) -> Optional[int]:
        """Return 1 or 2 for the player's team, ``None`` if absent."""
        if player_id in self.team1:
            return 1
        if self.team2 is not None and player_id in self.team2:
            return 2
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize match to dictionary."""
        return {
            "id": self.id,
            "round_number": self.round_number,
            "team1": list(self.team1),
            "team2": list(self.team2) if self.team2 is not None else None,
            "score1": self.score1,
            "score2": self.score2,
            "twenties1": self.twenties1,
            "twenties2": self.twenties2,
            "table_id": self.table_id,
            "completed": self.completed,
            "is_bye": self.is_bye,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize match from dictionary."""
        team2 = data.get("team2")
        return cls(
            id=str(data["id"]),
            round_number=data["round_number"],
            team1=tuple(data["team1"]),
            team2=tuple(team2) if team2 is not None else None,
            score1=data.get("score1"),
            score2=data.get("score2"),
            twenties1=data.get("twenties1", 0),
            twenties2=data.get("twenties2", 0),
            table_id=data.get("table_id"),
            completed=data.get("completed", False),
            is_bye=data.get("is_bye", team2 is None),
        )
