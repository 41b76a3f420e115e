"""Audit records describing how a round was paired."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from dateutil.parser import isoparse

from swissdoubles.type_hints import Phase


@dataclass
class PairingLogEntry:
    """One decision taken while pairing a round.

    Attributes
    ----------
    timestamp : datetime
        When the round was generated.
    round_number : int
        Round the decision belongs to.
    phase : str
        Pairing phase, e.g. ``"bye_selection"``.
    decision : str
        Short human readable statement of what was decided.
    details : list of str
        Supporting facts and the rule that produced the decision.
    """

    timestamp: datetime
    round_number: int
    phase: Phase
    decision: str
    details: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "round_number": self.round_number,
            "phase": self.phase,
            "decision": self.decision,
            "details": list(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PairingLogEntry":
        return cls(
            timestamp=isoparse(data["timestamp"]),
            round_number=data["round_number"],
            phase=data["phase"],
            decision=data["decision"],
            details=list(data.get("details", [])),
        )


@dataclass
class PlayerSnapshot:
    """A standings row frozen at the moment a round was paired."""

    rank: int
    name: str
    wins: int
    losses: int
    ties: int
    point_diff: int
    bye_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rank": self.rank,
            "name": self.name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "point_diff": self.point_diff,
            "bye_count": self.bye_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerSnapshot":
        return cls(**{key: data[key] for key in cls.__dataclass_fields__})


@dataclass
class MatchPairingLog:
    """Final pairing of one match (or bye) with its justification."""

    team1: List[str]
    team2: Optional[List[str]]
    is_bye: bool
    reasoning: str
    table: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team1": list(self.team1),
            "team2": list(self.team2) if self.team2 is not None else None,
            "is_bye": self.is_bye,
            "reasoning": self.reasoning,
            "table": self.table,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchPairingLog":
        team2 = data.get("team2")
        return cls(
            team1=list(data["team1"]),
            team2=list(team2) if team2 is not None else None,
            is_bye=data.get("is_bye", team2 is None),
            reasoning=data.get("reasoning", ""),
            table=data.get("table"),
        )


@dataclass
class RoundLog:
    """Complete audit record for one generated round.

    Attributes
    ----------
    round_number : int
        Round the log describes.
    generated_at : datetime
        When the round was generated.
    player_count : int
        Active players at generation time.
    byes_needed : int
        Number of players sitting out.
    seed : int or None
        Seed of the random generator used, ``None`` for manual rounds.
        Replaying the same inputs with this seed and timestamp reproduces
        the round and this log exactly.
    entries : list of PairingLogEntry
        Decisions in the order they were taken.
    standings_snapshot : list of PlayerSnapshot
        Standings before pairing.
    final_pairings : list of MatchPairingLog
        The resulting matches and byes.
    """

    round_number: int
    generated_at: datetime
    player_count: int
    byes_needed: int
    seed: Optional[int] = None
    entries: List[PairingLogEntry] = field(default_factory=list)
    standings_snapshot: List[PlayerSnapshot] = field(default_factory=list)
    final_pairings: List[MatchPairingLog] = field(default_factory=list)

    def entries_for(self, phase: Phase) -> List[PairingLogEntry]:
        """Return the entries of a single phase."""
        return [entry for entry in self.entries if entry.phase == phase]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize round log to dictionary."""
        return {
            "round_number": self.round_number,
            "generated_at": self.generated_at.isoformat(),
            "player_count": self.player_count,
            "byes_needed": self.byes_needed,
            "seed": self.seed,
            "entries": [e.to_dict() for e in self.entries],
            "standings_snapshot": [s.to_dict() for s in self.standings_snapshot],
            "final_pairings": [p.to_dict() for p in self.final_pairings],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundLog":
        """Deserialize round log from dictionary."""
        return cls(
            round_number=data["round_number"],
            generated_at=isoparse(data["generated_at"]),
            player_count=data["player_count"],
            byes_needed=data["byes_needed"],
            seed=data.get("seed"),
            entries=[PairingLogEntry.from_dict(e) for e in data.get("entries", [])],
            standings_snapshot=[
                PlayerSnapshot.from_dict(s) for s in data.get("standings_snapshot", [])
            ],
            final_pairings=[
                MatchPairingLog.from_dict(p) for p in data.get("final_pairings", [])
            ],
        )
