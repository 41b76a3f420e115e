"""Round management for tournaments.

This module handles round-related operations: checking that a round may be
generated, calling the pairing engine, retracting rounds, and building
rounds entered by hand.
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

from collections import Counter
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from swissdoubles.constants import (
    MAX_TOTAL_ROUNDS,
    MIN_TOTAL_ROUNDS,
    PHASE_MANUAL_ENTRY,
    REASON_MANUAL_ROUND,
    TEAM_SIZE,
)
from swissdoubles.exceptions import (
    InvalidPairingException,
    RoundNotCompleteException,
    RoundNotFoundException,
    TournamentStateException,
)
from swissdoubles.models.match import Match
from swissdoubles.models.pairing import PairingResult
from swissdoubles.models.player import Player
from swissdoubles.models.table import Table
from swissdoubles.models.tournament import TournamentSettings
from swissdoubles.pairing import generate_round_pairings
from swissdoubles.pairing.byes import create_bye_match
from swissdoubles.pairing.decision_log import DecisionLogRecorder
from swissdoubles.pairing.matchups import assign_tables
from swissdoubles.pairing.standings import average_twenties, calculate_standings
from swissdoubles.type_hints import MaybeTeamIds, TeamIds
from swissdoubles.utils import generate_id, setup_logger

logger = setup_logger(__name__)

# (team1, team2) as entered by hand; team2 None marks a bye
ManualPairing = Tuple[TeamIds, MaybeTeamIds]


def clamp_total_rounds(value: int) -> int:
    """Clamp a round count to the supported range."""
    return max(MIN_TOTAL_ROUNDS, min(MAX_TOTAL_ROUNDS, int(value)))


class RoundManager:
    """Manages round progression for a tournament.

    The manager holds no match state of its own. The Tournament aggregate
    passes in its current players and matches and merges whatever comes
    back, so the manager can be shared freely between calls.

    This class is responsible for:
    - Enforcing that round n-1 is finished before round n is generated
    - Calling the pairing engine with the history before the round
    - Retracting a round's matches
    - Validating and logging rounds entered by hand
    """

    def __init__(self, total_rounds: int):
        self.total_rounds = clamp_total_rounds(total_rounds)

    # ========== Queries ==========

    @staticmethod
    def latest_round(matches: Sequence[Match]) -> int:
        """Highest round number with any match, 0 when none."""
        return max((m.round_number for m in matches), default=0)

    @staticmethod
    def round_matches(matches: Sequence[Match], round_number: int) -> List[Match]:
        return [m for m in matches if m.round_number == round_number]

    @staticmethod
    def history_before(matches: Sequence[Match], round_number: int) -> List[Match]:
        return [m for m in matches if m.round_number < round_number]

    def round_is_complete(self, matches: Sequence[Match], round_number: int) -> bool:
        """True when the round exists and all its regular matches are scored."""
        in_round = self.round_matches(matches, round_number)
        return bool(in_round) and all(m.completed for m in in_round if m.is_regular)

    def pending_matches(
        self, matches: Sequence[Match], round_number: int
    ) -> List[Match]:
        return [
            m
            for m in self.round_matches(matches, round_number)
            if m.is_regular and not m.completed
        ]

    # ========== Generation ==========

    def check_can_generate(self, matches: Sequence[Match], round_number: int) -> None:
        """Raise if round ``round_number`` may not be generated now.

        Raises:
            TournamentStateException: Round number out of range or skips ahead
            RoundNotCompleteException: The previous round has unscored matches
        """
        if round_number < 1:
            raise TournamentStateException(f"Invalid round number: {round_number}")
        if round_number > self.total_rounds:
            raise TournamentStateException(
                f"Cannot generate round {round_number}: tournament has "
                f"{self.total_rounds} rounds"
            )
        latest = self.latest_round(matches)
        if round_number > latest + 1:
            raise TournamentStateException(
                f"Cannot generate round {round_number} before round {latest + 1}"
            )
        if round_number > 1 and not self.round_is_complete(matches, round_number - 1):
            pending = len(self.pending_matches(matches, round_number - 1))
            raise RoundNotCompleteException(
                f"Round {round_number - 1} has {pending} match(es) awaiting scores"
            )

    def generate(
        self,
        players: Sequence[Player],
        matches: Sequence[Match],
        round_number: int,
        tables: Sequence[Table],
        settings: TournamentSettings,
        seed: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ) -> PairingResult:
        """Check preconditions and run the pairing engine for a round.

        Only matches from earlier rounds are passed to the engine, so a round
        being regenerated never sees its own stale matches.
        """
        self.check_can_generate(matches, round_number)
        result = generate_round_pairings(
            players,
            self.history_before(matches, round_number),
            round_number,
            tables,
            settings=settings,
            seed=seed,
            generated_at=generated_at,
        )
        logger.info(
            f"Generated round {round_number}: {len(result.regular_matches)} matches, "
            f"{len(result.bye_player_ids)} bye(s)"
        )
        return result

    def retract_round(
        self, matches: Sequence[Match], round_number: int
    ) -> List[Match]:
        """Return ``matches`` without the given round.

        Raises:
            RoundNotFoundException: The round has no matches
        """
        if not self.round_matches(matches, round_number):
            raise RoundNotFoundException(f"Round {round_number} does not exist")
        remaining = [m for m in matches if m.round_number != round_number]
        logger.info(
            f"Retracted round {round_number} "
            f"({len(matches) - len(remaining)} matches)"
        )
        return remaining

    # ========== Manual Entry ==========

    def check_partition(
        self, players: Sequence[Player], pairings: Sequence[ManualPairing]
    ) -> None:
        """Raise unless ``pairings`` seat every active player exactly once.

        Raises:
            InvalidPairingException: Wrong team sizes, unknown or inactive
                players, duplicates or missing players
        """
        active = {p.id for p in players if p.is_active}
        seen: Counter = Counter()
        for team1, team2 in pairings:
            if team2 is None:
                if len(team1) != 1:
                    raise InvalidPairingException("A bye must hold exactly one player")
            elif len(team1) != TEAM_SIZE or len(team2) != TEAM_SIZE:
                raise InvalidPairingException(
                    f"Each team must have {TEAM_SIZE} players"
                )
            seen.update(team1)
            seen.update(team2 or ())

        unknown = sorted(pid for pid in seen if pid not in active)
        if unknown:
            raise InvalidPairingException(
                f"Not active players in this tournament: {', '.join(unknown)}"
            )
        repeated = sorted(pid for pid, n in seen.items() if n > 1)
        if repeated:
            raise InvalidPairingException(
                f"Players seated more than once: {', '.join(repeated)}"
            )
        missing = sorted(active - set(seen))
        if missing:
            raise InvalidPairingException(
                f"Active players missing from the round: {', '.join(missing)}"
            )

    def build_manual_round(
        self,
        players: Sequence[Player],
        matches: Sequence[Match],
        round_number: int,
        pairings: Sequence[ManualPairing],
        tables: Sequence[Table],
        settings: TournamentSettings,
        generated_at: datetime,
    ) -> PairingResult:
        """Turn hand-entered pairings into matches plus a manual-entry log."""
        if round_number < 1 or round_number > self.total_rounds:
            raise TournamentStateException(
                f"Round {round_number} is outside 1..{self.total_rounds}"
            )
        latest = self.latest_round(matches)
        if round_number > latest + 1:
            raise TournamentStateException(
                f"Cannot enter round {round_number} before round {latest + 1}"
            )
        self.check_partition(players, pairings)

        history = self.history_before(matches, round_number)
        names = {p.id: p.name for p in players}
        recorder = DecisionLogRecorder(round_number, generated_at)
        recorder.snapshot_standings(calculate_standings(players, history))

        regular = [(t1, t2) for t1, t2 in pairings if t2 is not None]
        byes = [t1[0] for t1, t2 in pairings if t2 is None]
        recorder.record(
            PHASE_MANUAL_ENTRY,
            f"Round {round_number} entered manually",
            [f"{len(regular)} match(es)", f"{len(byes)} bye(s)"],
        )

        slots = assign_tables(len(regular), tables, settings.table_assignment, recorder)
        new_matches: List[Match] = []
        for (team1, team2), table in zip(regular, slots):
            new_matches.append(
                Match(
                    id=generate_id(),
                    round_number=round_number,
                    team1=tuple(team1),
                    team2=tuple(team2),
                    table_id=table.id if table is not None else None,
                )
            )
            recorder.add_pairing(
                [names[pid] for pid in team1],
                [names[pid] for pid in team2],
                REASON_MANUAL_ROUND,
                table=table.name if table is not None else None,
            )

        twenties = average_twenties(history, {p.id for p in players})
        for player_id in byes:
            new_matches.append(
                create_bye_match(player_id, round_number, settings, twenties)
            )
            recorder.add_pairing([names[player_id]], None, REASON_MANUAL_ROUND)

        active_count = sum(1 for p in players if p.is_active)
        log = recorder.build(active_count, len(byes), seed=None)
        logger.info(f"Built manual round {round_number}: {len(new_matches)} matches")
        return PairingResult(matches=new_matches, log=log)
