"""Doubles Swiss round pairing.

Composes standings, bye selection, team formation and opponent formation
into one call that produces a round. The function is pure: it reads the
players and match history it is given, never mutates them, and returns new
Match records plus the round's decision log. All randomness comes from a
``random.Random`` seeded per call, and the seed is stored on the log so the
round can be replayed exactly.
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

import random
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from swissdoubles.constants import (
    MIN_PLAYERS,
    PHASE_HISTORY_AUDIT,
    REASON_RANDOM_ROUND,
    REASON_SWISS_ROUND,
)
from swissdoubles.exceptions import NotEnoughPlayersException
from swissdoubles.models.match import Match
from swissdoubles.models.pairing import PairingResult
from swissdoubles.models.player import Player
from swissdoubles.models.table import Table
from swissdoubles.models.tournament import (
    MatchupHistory,
    PartnerHistory,
    TournamentSettings,
)
from swissdoubles.pairing.byes import byes_needed, create_bye_match, select_byes
from swissdoubles.pairing.decision_log import DecisionLogRecorder
from swissdoubles.pairing.matchups import assign_tables, form_matchups
from swissdoubles.pairing.standings import average_twenties, calculate_standings
from swissdoubles.pairing.teams import form_teams
from swissdoubles.utils import generate_id, setup_logger

logger = setup_logger(__name__)

SEED_RANGE = 2**32


def new_seed() -> int:
    """Draw a fresh seed from the operating system's entropy source."""
    return random.SystemRandom().randrange(SEED_RANGE)


def _audit_history(
    players: Sequence[Player],
    existing_matches: Sequence[Match],
    round_number: int,
    recorder: DecisionLogRecorder,
) -> List[Match]:
    """Drop matches that cannot belong to the history of this round.

    Matches from this round or later are ignored. Player ids that are not
    registered are left in place, since standings only aggregate known
    players, but each one is flagged.
    """
    history = []
    future = []
    for match in existing_matches:
        if match.round_number >= round_number:
            future.append(match)
        else:
            history.append(match)

    if future:
        logger.warning(
            f"Ignoring {len(future)} match(es) from round {round_number} or later"
        )
        recorder.record(
            PHASE_HISTORY_AUDIT,
            f"Ignored {len(future)} match(es) from round {round_number} or later",
            [f"Match {m.id} (round {m.round_number})" for m in future],
        )

    known = {p.id for p in players}
    unknown = Counter(
        pid for m in history for pid in m.player_ids if pid not in known
    )
    for pid, count in sorted(unknown.items()):
        logger.warning(
            f"Match history references unknown player {pid} in {count} match(es)"
        )
        recorder.record(
            PHASE_HISTORY_AUDIT,
            f"Unknown player id {pid} in match history",
            [
                f"Referenced by {count} match(es)",
                "Excluded from standings, partner and bye counts",
            ],
        )
    return history


def generate_round_pairings(
    players: Sequence[Player],
    existing_matches: Sequence[Match],
    round_number: int,
    tables: Sequence[Table] = (),
    *,
    settings: Optional[TournamentSettings] = None,
    seed: Optional[int] = None,
    generated_at: Optional[datetime] = None,
) -> PairingResult:
    """Generate the matches for one round.

    Args:
        players: Every registered player, inactive ones included
        existing_matches: Match history from all earlier rounds
        round_number: Round to generate (1-based)
        tables: Tables to hand out when table assignment is enabled
        settings: Tournament settings, defaults when omitted
        seed: Seed for every random choice; a fresh one is drawn and
            recorded on the log when omitted
        generated_at: Timestamp stamped on the log, now when omitted

    Returns:
        PairingResult holding one match per team pairing followed by one bye
        match per player sitting out, and the round's RoundLog

    Raises:
        NotEnoughPlayersException: Fewer than four active players
    """
    settings = settings or TournamentSettings()
    if seed is None:
        seed = new_seed()
    if generated_at is None:
        generated_at = datetime.now(timezone.utc)

    active = [p for p in players if p.is_active]
    if len(active) < MIN_PLAYERS:
        raise NotEnoughPlayersException(len(active), MIN_PLAYERS)

    rng = random.Random(seed)
    recorder = DecisionLogRecorder(round_number, generated_at)
    bye_count = byes_needed(len(active))

    history = _audit_history(players, existing_matches, round_number, recorder)
    standings = calculate_standings(players, history)
    recorder.snapshot_standings(standings)
    recorder.record(
        PHASE_HISTORY_AUDIT,
        f"Starting Round {round_number}",
        [
            f"Active players: {len(active)}",
            f"Completed matches in history: {sum(m.completed for m in history)}",
            f"Byes needed: {bye_count}",
            f"Seed: {seed}",
        ],
    )
    logger.info(
        f"Pairing round {round_number}: {len(active)} active players, "
        f"{bye_count} byes, seed {seed}"
    )

    byes = select_byes(standings, round_number, bye_count, rng, recorder)
    sitting_out = {b.standing.player_id for b in byes}
    playing = [s for s in standings if s.player_id not in sitting_out]

    teams = form_teams(
        playing, round_number, PartnerHistory.from_matches(history), rng, recorder
    )
    pairings = form_matchups(
        teams, round_number, MatchupHistory.from_matches(history), rng, recorder
    )
    slots = assign_tables(len(pairings), tables, settings.table_assignment, recorder)

    reasoning = REASON_RANDOM_ROUND if round_number == 1 else REASON_SWISS_ROUND
    matches: List[Match] = []
    for (team1, team2), table in zip(pairings, slots):
        matches.append(
            Match(
                id=generate_id(rng),
                round_number=round_number,
                team1=team1.ids,
                team2=team2.ids,
                table_id=table.id if table is not None else None,
            )
        )
        recorder.add_pairing(
            team1.names,
            team2.names,
            reasoning,
            table=table.name if table is not None else None,
        )

    twenties = average_twenties(history, {p.id for p in players})
    for bye in byes:
        matches.append(
            create_bye_match(
                bye.standing.player_id, round_number, settings, twenties, rng
            )
        )
        recorder.add_pairing([bye.standing.name], None, bye.reasoning)

    log = recorder.build(len(active), bye_count, seed)
    logger.debug(f"Round {round_number} generated {len(matches)} matches")
    return PairingResult(matches=matches, log=log)
