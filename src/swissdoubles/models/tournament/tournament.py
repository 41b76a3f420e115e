"""Tournament aggregate."""

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

import dataclasses
import functools
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from swissdoubles.constants import (
    DEFAULT_TOTAL_ROUNDS,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_SETUP,
    TOURNAMENT_STATUSES,
)
from swissdoubles.controllers.tournament import (
    ManualPairing,
    ResultRecorder,
    RoundManager,
    clamp_total_rounds,
)
from swissdoubles.exceptions import (
    DuplicatePlayerException,
    PlayerInUseException,
    PlayerNotFoundException,
    ResultNotFoundException,
    RoundNotCompleteException,
    RoundNotFoundException,
    TableException,
    TableNotFoundException,
    TournamentStateException,
)
from swissdoubles.models.match import Match
from swissdoubles.models.pairing import PairingResult, RoundLog
from swissdoubles.models.player import Player
from swissdoubles.models.table import Table
from swissdoubles.pairing.standings import (
    Standing,
    calculate_standings,
    refresh_player_records,
    split_into_pools,
    twenties_leaderboard,
)
from swissdoubles.utils import generate_id, setup_logger

from .tournament_config import TournamentSettings

logger = setup_logger(__name__)


def synchronized(method):
    """Run the method while holding the tournament's lock."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class Tournament:
    """Main tournament management class.

    The Tournament owns players, tables, matches and round logs, and is the
    only object the session layer mutates. Round generation is delegated to
    the stateless pairing engine through the RoundManager; score entry goes
    through the ResultRecorder. Every read-engine-write sequence runs under
    one re-entrant lock so concurrent administrators cannot lose updates.

    Players' record fields are refreshed from the match history after every
    change to the matches.
    """

    def __init__(
        self,
        name: str,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        settings: Optional[TournamentSettings] = None,
        players: Optional[List[Player]] = None,
        tables: Optional[List[Table]] = None,
    ) -> None:
        """Initialize a new tournament.

        Args
        ----
        name: Tournament name
        total_rounds: Number of rounds to play, clamped to 1..20
        settings: Scoring and table settings
        players: Initial players
        tables: Initial tables
        """
        self._lock = threading.RLock()
        self.name = name
        self.settings = settings or TournamentSettings()
        self.settings.validate()
        self.round_manager = RoundManager(total_rounds)
        self.result_recorder = ResultRecorder(self.settings)

        self.players: Dict[str, Player] = {p.id: p for p in players or []}
        self.tables: Dict[str, Table] = {t.id: t for t in tables or []}
        self.matches: List[Match] = []
        self.round_logs: Dict[int, RoundLog] = {}
        self.current_round = 0
        self.status = STATUS_SETUP

    # ========== Properties ==========

    @property
    def total_rounds(self) -> int:
        """Get number of rounds."""
        return self.round_manager.total_rounds

    @total_rounds.setter
    def total_rounds(self, value: int) -> None:
        """Set number of rounds, clamped to the supported range."""
        with self._lock:
            if value < self.current_round:
                raise TournamentStateException(
                    f"Cannot set {value} rounds: round {self.current_round} "
                    "already exists"
                )
            self.round_manager.total_rounds = clamp_total_rounds(value)

    @property
    def is_final_round(self) -> bool:
        return self.current_round >= self.total_rounds

    # ========== Player Management ==========

    def get_player(self, player_id: str) -> Player:
        player = self.players.get(player_id)
        if player is None:
            raise PlayerNotFoundException(f"Player {player_id} not found")
        return player

    def get_player_list(self, active_only: bool = False) -> List[Player]:
        """Get list of tournament players in registration order."""
        players = list(self.players.values())
        if active_only:
            return [p for p in players if p.is_active]
        return players

    @synchronized
    def add_player(self, name: str, player_id: Optional[str] = None) -> Player:
        """Register a player, also allowed once the tournament is running.

        Raises:
            DuplicatePlayerException: The id or name is already registered
        """
        name = name.strip()
        if not name:
            raise ValueError("Player name cannot be empty")
        player_id = player_id or generate_id()
        if player_id in self.players:
            raise DuplicatePlayerException(f"Player id {player_id} already exists")
        if any(p.name.casefold() == name.casefold() for p in self.players.values()):
            raise DuplicatePlayerException(f"Player {name} already exists")

        player = Player(id=player_id, name=name)
        self.players[player.id] = player
        logger.info(f"Added player: {player.name} ({player.id})")
        return player

    @synchronized
    def remove_player(self, player_id: str) -> Player:
        """Delete a player that no match references.

        Raises:
            PlayerNotFoundException: Unknown player
            PlayerInUseException: A match references the player; deactivate
                them instead
        """
        player = self.get_player(player_id)
        if any(m.involves(player_id) for m in self.matches):
            raise PlayerInUseException(
                f"{player.name} has played matches; deactivate instead of removing"
            )
        del self.players[player_id]
        logger.info(f"Removed player: {player.name} ({player_id})")
        return player

    @synchronized
    def set_player_active(self, player_id: str, is_active: bool) -> Player:
        """Set whether a player takes part in future rounds."""
        player = self.get_player(player_id)
        player.is_active = is_active
        logger.info(f"Set {player.name} active status to: {is_active}")
        return player

    # ========== Table Management ==========

    def get_table_list(self) -> List[Table]:
        """Tables in assignment order."""
        return sorted(self.tables.values(), key=lambda t: t.order)

    @synchronized
    def add_table(self, name: str, table_id: Optional[str] = None) -> Table:
        order = max((t.order for t in self.tables.values()), default=-1) + 1
        table = Table(id=table_id or generate_id(), name=name, order=order)
        self.tables[table.id] = table
        logger.info(f"Added table: {table.name} ({table.id})")
        return table

    @synchronized
    def remove_table(self, table_id: str) -> Table:
        """Delete a table; matches seated there lose their table."""
        table = self.tables.pop(table_id, None)
        if table is None:
            raise TableNotFoundException(f"Table {table_id} not found")
        self.matches = [
            dataclasses.replace(m, table_id=None) if m.table_id == table_id else m
            for m in self.matches
        ]
        for idx, remaining in enumerate(self.get_table_list()):
            remaining.order = idx
        logger.info(f"Removed table: {table.name} ({table_id})")
        return table

    @synchronized
    def reorder_tables(self, table_ids: Sequence[str]) -> List[Table]:
        """Set table order to the order of ``table_ids``.

        Raises:
            TableNotFoundException: An id is not a known table
            TableException: ``table_ids`` does not list every table once
        """
        for table_id in table_ids:
            if table_id not in self.tables:
                raise TableNotFoundException(f"Table {table_id} not found")
        if sorted(table_ids) != sorted(self.tables):
            raise TableException("Reorder must list every table exactly once")
        for idx, table_id in enumerate(table_ids):
            self.tables[table_id].order = idx
        return self.get_table_list()

    # ========== Round Management ==========

    def _apply_round(self, result: PairingResult, round_number: int) -> None:
        """Replace a round's matches and log with ``result``."""
        self.matches = [
            m for m in self.matches if m.round_number != round_number
        ] + list(result.matches)
        self.round_logs[round_number] = result.log
        self.current_round = self.round_manager.latest_round(self.matches)
        self._refresh_records()

    def _refresh_records(self) -> None:
        refreshed = refresh_player_records(list(self.players.values()), self.matches)
        self.players = {p.id: p for p in refreshed}

    def _require_status(self, *allowed: str) -> None:
        if self.status not in allowed:
            raise TournamentStateException(
                f"Tournament is {self.status}, expected {' or '.join(allowed)}"
            )

    @synchronized
    def start(
        self, seed: Optional[int] = None, generated_at: Optional[datetime] = None
    ) -> List[Match]:
        """Leave setup and generate round 1.

        Raises:
            TournamentStateException: Not in setup
            NotEnoughPlayersException: Fewer than four active players
        """
        self._require_status(STATUS_SETUP)
        self.settings.validate()
        result = self.round_manager.generate(
            self.get_player_list(),
            self.matches,
            1,
            self.get_table_list(),
            self.settings,
            seed=seed,
            generated_at=generated_at,
        )
        self._apply_round(result, 1)
        self.status = STATUS_ACTIVE
        logger.info(f"Started tournament {self.name}")
        return list(result.matches)

    @synchronized
    def generate_next_round(
        self, seed: Optional[int] = None, generated_at: Optional[datetime] = None
    ) -> List[Match]:
        """Generate round ``current_round + 1``.

        Raises:
            TournamentStateException: Not active, or all rounds generated
            RoundNotCompleteException: The current round has unscored matches
        """
        self._require_status(STATUS_ACTIVE)
        round_number = self.current_round + 1
        result = self.round_manager.generate(
            self.get_player_list(),
            self.matches,
            round_number,
            self.get_table_list(),
            self.settings,
            seed=seed,
            generated_at=generated_at,
        )
        self._apply_round(result, round_number)
        return list(result.matches)

    @synchronized
    def regenerate_round(
        self,
        round_number: Optional[int] = None,
        seed: Optional[int] = None,
        generated_at: Optional[datetime] = None,
    ) -> List[Match]:
        """Throw away the latest round and pair it again from scratch.

        Any scores already entered for the round are discarded along with its
        matches and log.

        Raises:
            RoundNotFoundException: The round does not exist
            TournamentStateException: The round is not the latest one
        """
        self._require_status(STATUS_ACTIVE)
        round_number = round_number or self.current_round
        if round_number != self.current_round:
            raise TournamentStateException(
                f"Only the latest round ({self.current_round}) can be regenerated"
            )
        remaining = self.round_manager.retract_round(self.matches, round_number)
        scored = sum(
            1
            for m in self.round_manager.round_matches(self.matches, round_number)
            if m.is_regular and m.completed
        )
        if scored:
            logger.warning(
                f"Regenerating round {round_number} discards {scored} entered score(s)"
            )
        result = self.round_manager.generate(
            self.get_player_list(),
            remaining,
            round_number,
            self.get_table_list(),
            self.settings,
            seed=seed,
            generated_at=generated_at,
        )
        self._apply_round(result, round_number)
        return list(result.matches)

    @synchronized
    def replace_round(
        self,
        round_number: int,
        pairings: Sequence[ManualPairing],
        generated_at: Optional[datetime] = None,
    ) -> List[Match]:
        """Set a round's matches by hand, replacing any generated ones.

        Args:
            round_number: Round to enter, at most one past the latest round
            pairings: ``(team1_ids, team2_ids)`` per match, ``team2_ids``
                None for a bye
            generated_at: Timestamp for the manual-entry log

        Raises:
            InvalidPairingException: The pairings do not seat every active
                player exactly once
            TournamentStateException: Round number out of range, or the
                tournament is completed
        """
        self._require_status(STATUS_SETUP, STATUS_ACTIVE)
        result = self.round_manager.build_manual_round(
            self.get_player_list(),
            self.matches,
            round_number,
            pairings,
            self.get_table_list(),
            self.settings,
            generated_at or datetime.now(timezone.utc),
        )
        self._apply_round(result, round_number)
        self.status = STATUS_ACTIVE
        logger.info(f"Round {round_number} replaced by manual entry")
        return list(result.matches)

    @synchronized
    def delete_round(self, round_number: int) -> None:
        """Remove a round's matches and log.

        The current round becomes the highest round that still has matches.
        """
        self.matches = self.round_manager.retract_round(self.matches, round_number)
        self.round_logs.pop(round_number, None)
        self.current_round = self.round_manager.latest_round(self.matches)
        if self.current_round == 0:
            self.status = STATUS_SETUP
        elif self.status == STATUS_COMPLETED:
            self.status = STATUS_ACTIVE
        self._refresh_records()

    # ========== Result Management ==========

    def get_match(self, match_id: str) -> Match:
        for match in self.matches:
            if match.id == match_id:
                return match
        raise ResultNotFoundException(f"Match {match_id} not found")

    def _store_match(self, updated: Match) -> None:
        self.matches = [updated if m.id == updated.id else m for m in self.matches]
        self._refresh_records()

    @synchronized
    def submit_score(
        self,
        match_id: str,
        score1: int,
        score2: int,
        twenties1: int = 0,
        twenties2: int = 0,
    ) -> Match:
        """Enter the result of a pending match.

        Raises:
            ResultNotFoundException: Unknown match
            InvalidResultException: Scores fail validation
            DuplicateResultException: The match already has a result
        """
        match = self.get_match(match_id)
        updated = self.result_recorder.record(
            match, score1, score2, twenties1, twenties2
        )
        self._store_match(updated)
        return updated

    @synchronized
    def edit_score(
        self,
        match_id: str,
        score1: int,
        score2: int,
        twenties1: int = 0,
        twenties2: int = 0,
    ) -> Match:
        """Correct the result of a match, scored or not."""
        match = self.get_match(match_id)
        updated = self.result_recorder.record(
            match, score1, score2, twenties1, twenties2, overwrite=True
        )
        self._store_match(updated)
        return updated

    @synchronized
    def clear_score(self, match_id: str) -> Match:
        """Put a scored match back to pending."""
        updated = self.result_recorder.clear(self.get_match(match_id))
        self._store_match(updated)
        return updated

    # ========== Lifecycle ==========

    @synchronized
    def complete(self) -> None:
        """Finish the tournament once the latest round is fully scored.

        Raises:
            TournamentStateException: Not active
            RoundNotCompleteException: The latest round has unscored matches
        """
        self._require_status(STATUS_ACTIVE)
        if not self.round_manager.round_is_complete(self.matches, self.current_round):
            raise RoundNotCompleteException(
                f"Round {self.current_round} still has matches awaiting scores"
            )
        self.status = STATUS_COMPLETED
        logger.info(
            f"Tournament {self.name} completed after {self.current_round} rounds"
        )

    @synchronized
    def reset(self) -> None:
        """Drop every round and return to setup, keeping players and tables."""
        self.matches = []
        self.round_logs = {}
        self.current_round = 0
        self.status = STATUS_SETUP
        self._refresh_records()
        logger.info(f"Tournament {self.name} reset")

    # ========== Standings and Queries ==========

    @synchronized
    def get_standings(self, active_only: bool = True) -> List[Standing]:
        """Current standings derived from all matches."""
        return calculate_standings(
            self.get_player_list(), self.matches, active_only=active_only
        )

    @synchronized
    def get_twenties_leaderboard(self) -> List[Standing]:
        return twenties_leaderboard(self.get_player_list(), self.matches)

    @synchronized
    def get_pools(self) -> List[Tuple[str, List[Standing]]]:
        """Current standings cut into groups of ``settings.pool_size``."""
        return split_into_pools(self.get_standings(), self.settings.pool_size)

    def get_round_matches(self, round_number: int) -> List[Match]:
        """Matches of one round, regular matches first.

        Raises:
            RoundNotFoundException: The round has no matches
        """
        matches = self.round_manager.round_matches(self.matches, round_number)
        if not matches:
            raise RoundNotFoundException(f"Round {round_number} does not exist")
        return matches

    def get_round_log(self, round_number: int) -> RoundLog:
        log = self.round_logs.get(round_number)
        if log is None:
            raise RoundNotFoundException(f"No pairing log for round {round_number}")
        return log

    def get_round_logs(self) -> List[RoundLog]:
        """All round logs in round order."""
        return [self.round_logs[n] for n in sorted(self.round_logs)]

    # ========== Serialization ==========

    @synchronized
    def to_dict(self) -> Dict[str, Any]:
        """Serialize tournament to dictionary."""
        return {
            "name": self.name,
            "status": self.status,
            "current_round": self.current_round,
            "total_rounds": self.total_rounds,
            "settings": self.settings.to_dict(),
            "players": [p.to_dict() for p in self.players.values()],
            "tables": [t.to_dict() for t in self.get_table_list()],
            "matches": [m.to_dict() for m in self.matches],
            "round_logs": [log.to_dict() for log in self.get_round_logs()],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize tournament from dictionary."""
        tournament = cls(
            name=data["name"],
            total_rounds=data.get("total_rounds", DEFAULT_TOTAL_ROUNDS),
            settings=TournamentSettings.from_dict(data.get("settings", {})),
            players=[Player.from_dict(p) for p in data.get("players", [])],
            tables=[Table.from_dict(t) for t in data.get("tables", [])],
        )
        tournament.matches = [Match.from_dict(m) for m in data.get("matches", [])]
        for log_data in data.get("round_logs", []):
            log = RoundLog.from_dict(log_data)
            tournament.round_logs[log.round_number] = log
        tournament.current_round = data.get(
            "current_round", tournament.round_manager.latest_round(tournament.matches)
        )
        status = data.get("status", STATUS_SETUP)
        if status not in TOURNAMENT_STATUSES:
            raise TournamentStateException(f"Unknown tournament status: {status}")
        tournament.status = status
        tournament._refresh_records()
        logger.info(f"Loaded tournament: {tournament.name}")
        return tournament
