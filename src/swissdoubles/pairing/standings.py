"""Standings calculation for doubles tournaments.

Standings are always derived from the match history rather than from the
record fields stored on players, so a corrected score is reflected the next
time standings are asked for.
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

import dataclasses
import math
import string
from dataclasses import dataclass
from typing import Collection, Dict, Iterable, List, Optional, Sequence, Tuple

from swissdoubles.constants import (
    BYE_WIN_THRESHOLD,
    PLAYERS_PER_MATCH,
    TIE_SCORE,
    WIN_SCORE,
)
from swissdoubles.models.match import Match
from swissdoubles.models.player import Player
from swissdoubles.type_hints import PlayerId, StandingsKey


@dataclass
class PlayerStats:
    """Record of one player derived from completed matches."""

    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: int = 0
    points_against: int = 0
    twenties: int = 0
    bye_count: int = 0

    @property
    def score(self) -> int:
        return self.wins * WIN_SCORE + self.ties * TIE_SCORE

    @property
    def point_diff(self) -> int:
        return self.points_for - self.points_against

    @property
    def record(self) -> str:
        return f"{self.wins}W-{self.losses}L-{self.ties}T"


@dataclass
class Standing:
    """A player's position in the standings.

    Attributes
    ----------
    rank : int
        1-based position, 1 is the leader.
    player : Player
        The player.
    stats : PlayerStats
        Record derived from the match history.
    """

    rank: int
    player: Player
    stats: PlayerStats

    @property
    def player_id(self) -> PlayerId:
        return self.player.id

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def score(self) -> int:
        return self.stats.score

    @property
    def key(self) -> StandingsKey:
        """Sort key, larger is better: score, point diff, points for."""
        return (self.stats.score, self.stats.point_diff, self.stats.points_for)


def _is_known(match: Match, known_ids: Optional[Collection[PlayerId]]) -> bool:
    return known_ids is None or all(pid in known_ids for pid in match.player_ids)


def count_byes(
    matches: Iterable[Match], known_ids: Optional[Collection[PlayerId]] = None
) -> int:
    """Count the completed bye matches handed out tournament-wide.

    When ``known_ids`` is given, byes held by any other id are not counted.
    """
    return sum(
        1 for m in matches if m.is_bye and m.completed and _is_known(m, known_ids)
    )


def byes_count_as_wins(
    matches: Iterable[Match], known_ids: Optional[Collection[PlayerId]] = None
) -> bool:
    """Whether byes score as a win under the current bye count.

    One lone bye is a free win. As soon as a second bye exists every bye,
    including earlier ones, is read as a tie.
    """
    return count_byes(matches, known_ids) <= BYE_WIN_THRESHOLD


def compute_player_stats(
    player_ids: Iterable[PlayerId],
    matches: Sequence[Match],
    known_ids: Optional[Collection[PlayerId]] = None,
) -> Dict[PlayerId, PlayerStats]:
    """Aggregate completed matches into a record per player.

    Only ids listed in ``player_ids`` get a record; any other id a match
    mentions is ignored. Byes held by ids outside ``known_ids`` do not count
    towards the bye threshold.

    Args:
        player_ids: Players to compute records for
        matches: Full match history
        known_ids: Every registered player id, defaults to ``player_ids``

    Returns:
        Dictionary of player id to PlayerStats
    """
    stats: Dict[PlayerId, PlayerStats] = {pid: PlayerStats() for pid in player_ids}
    bye_is_win = byes_count_as_wins(
        matches, set(stats) if known_ids is None else known_ids
    )

    for match in matches:
        if not match.completed:
            continue

        if match.is_bye:
            record = stats.get(match.team1[0])
            if record is None:
                continue
            record.bye_count += 1
            record.points_for += match.score1 or 0
            record.points_against += match.score2 or 0
            record.twenties += match.twenties1
            if bye_is_win:
                record.wins += 1
            else:
                record.ties += 1
            continue

        if match.score1 is None or match.score2 is None:
            continue

        sides = (
            (match.team1, match.score1, match.score2, match.twenties1),
            (match.team2, match.score2, match.score1, match.twenties2),
        )
        for team, scored, conceded, twenties in sides:
            for pid in team:
                record = stats.get(pid)
                if record is None:
                    continue
                record.points_for += scored
                record.points_against += conceded
                record.twenties += twenties
                if scored > conceded:
                    record.wins += 1
                elif scored < conceded:
                    record.losses += 1
                else:
                    record.ties += 1

    return stats


def calculate_standings(
    players: Sequence[Player], matches: Sequence[Match], active_only: bool = True
) -> List[Standing]:
    """Rank players from the match history.

    Ordering is by standings points (win 2, tie 1, loss 0, byes per the bye
    policy), then point differential, then points for. Players still level
    keep their input order.

    Args:
        players: Players to rank, inactive ones are skipped unless
            ``active_only`` is False
        matches: Full match history
        active_only: Drop inactive players from the ordering

    Returns:
        Standings, leader first
    """
    ranked = [p for p in players if p.is_active or not active_only]
    if not ranked:
        return []

    known_ids = {p.id for p in players}
    stats = compute_player_stats((p.id for p in ranked), matches, known_ids)
    standings = [Standing(rank=0, player=p, stats=stats[p.id]) for p in ranked]
    # sorted() is stable, so full ties keep input order
    standings = sorted(standings, key=lambda s: s.key, reverse=True)
    for idx, standing in enumerate(standings):
        standing.rank = idx + 1
    return standings


def sort_by_standings(
    players: Sequence[Player], matches: Sequence[Match]
) -> List[Player]:
    """Return the active players in standings order."""
    return [s.player for s in calculate_standings(players, matches)]


def average_twenties(
    matches: Iterable[Match], known_ids: Optional[Collection[PlayerId]] = None
) -> int:
    """Average twenties per player per match over completed regular matches.

    Each team's twenties count once for each of the four seats in a match,
    so the average is the total divided by four times the match count,
    rounded half up. Zero when nothing has been played yet. When
    ``known_ids`` is given, matches seating any other id are left out.
    """
    played = [
        m
        for m in matches
        if m.completed and not m.is_bye and _is_known(m, known_ids)
    ]
    if not played:
        return 0
    total = sum((m.twenties1 or 0) + (m.twenties2 or 0) for m in played)
    return int(math.floor(total / (len(played) * PLAYERS_PER_MATCH) + 0.5))


def twenties_leaderboard(
    players: Sequence[Player], matches: Sequence[Match]
) -> List[Standing]:
    """Active players with at least one twenty, most twenties first."""
    standings = calculate_standings(players, matches)
    leaders = [s for s in standings if s.stats.twenties > 0]
    leaders.sort(key=lambda s: s.stats.twenties, reverse=True)
    for idx, standing in enumerate(leaders):
        standing.rank = idx + 1
    return leaders


def refresh_player_records(
    players: Sequence[Player], matches: Sequence[Match]
) -> List[Player]:
    """Return copies of ``players`` whose record fields match the history.

    Inactive players keep their record too; only their place in future
    rounds changes.
    """
    stats = compute_player_stats((p.id for p in players), matches)
    refreshed = []
    for player in players:
        record = stats[player.id]
        refreshed.append(
            dataclasses.replace(
                player,
                wins=record.wins,
                losses=record.losses,
                ties=record.ties,
                points_for=record.points_for,
                points_against=record.points_against,
                twenties=record.twenties,
                bye_count=record.bye_count,
            )
        )
    return refreshed


def split_into_pools(
    standings: Sequence[Standing], pool_size: int
) -> List[Tuple[str, List[Standing]]]:
    """Cut standings into consecutive groups for post-event play.

    Pools are named ``Pool A``, ``Pool B`` and so on in standings order; the
    last pool holds whoever is left over and may be smaller.
    """
    if pool_size < 2:
        raise ValueError(f"pool_size must be at least 2, got {pool_size}")
    pools = []
    for idx, start in enumerate(range(0, len(standings), pool_size)):
        label = string.ascii_uppercase[idx] if idx < 26 else str(idx + 1)
        pools.append((f"Pool {label}", list(standings[start : start + pool_size])))
    return pools
