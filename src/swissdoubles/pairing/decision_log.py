"""Decision log recording for round pairing.

The recorder is write-only from the point of view of the pairing code: the
bye, team and match steps push entries into it but never read them back, so
the log cannot influence which pairings are produced.
"""

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

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from swissdoubles.models.pairing import (
    MatchPairingLog,
    PairingLogEntry,
    PlayerSnapshot,
    RoundLog,
)
from swissdoubles.type_hints import Phase


def format_diff(value: int) -> str:
    """Format a point differential with an explicit sign."""
    return f"+{value}" if value >= 0 else str(value)


class DecisionLogRecorder:
    """Collects the decisions taken while pairing one round.

    Args:
        round_number: Round being paired
        timestamp: Generation time stamped on the log and every entry
    """

    def __init__(self, round_number: int, timestamp: datetime) -> None:
        self.round_number = round_number
        self.timestamp = timestamp
        self._entries: List[PairingLogEntry] = []
        self._snapshot: List[PlayerSnapshot] = []
        self._pairings: List[MatchPairingLog] = []

    def record(
        self, phase: Phase, decision: str, details: Optional[Iterable[str]] = None
    ) -> None:
        """Append a decision entry."""
        self._entries.append(
            PairingLogEntry(
                timestamp=self.timestamp,
                round_number=self.round_number,
                phase=phase,
                decision=decision,
                details=list(details or []),
            )
        )

    def snapshot_standings(self, standings: Sequence) -> None:
        """Freeze the pre-round standings.

        Args:
            standings: Ranked ``Standing`` rows, leader first
        """
        self._snapshot = [
            PlayerSnapshot(
                rank=s.rank,
                name=s.name,
                wins=s.stats.wins,
                losses=s.stats.losses,
                ties=s.stats.ties,
                point_diff=s.stats.point_diff,
                bye_count=s.stats.bye_count,
            )
            for s in standings
        ]

    def add_pairing(
        self,
        team1: Sequence[str],
        team2: Optional[Sequence[str]],
        reasoning: str,
        table: Optional[str] = None,
    ) -> None:
        """Record a final match (or a bye when ``team2`` is None)."""
        self._pairings.append(
            MatchPairingLog(
                team1=list(team1),
                team2=list(team2) if team2 is not None else None,
                is_bye=team2 is None,
                reasoning=reasoning,
                table=table,
            )
        )

    def build(
        self, player_count: int, byes_needed: int, seed: Optional[int]
    ) -> RoundLog:
        """Assemble the RoundLog from everything recorded so far."""
        return RoundLog(
            round_number=self.round_number,
            generated_at=self.timestamp,
            player_count=player_count,
            byes_needed=byes_needed,
            seed=seed,
            entries=list(self._entries),
            standings_snapshot=list(self._snapshot),
            final_pairings=list(self._pairings),
        )
