"""Round pairing engine for doubles Swiss tournaments."""

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

from swissdoubles.pairing.byes import ByeAssignment, byes_needed, select_byes
from swissdoubles.pairing.decision_log import DecisionLogRecorder
from swissdoubles.pairing.doubles_swiss import generate_round_pairings
from swissdoubles.pairing.matchups import assign_tables, form_matchups
from swissdoubles.pairing.standings import (
    PlayerStats,
    Standing,
    calculate_standings,
    compute_player_stats,
    refresh_player_records,
    sort_by_standings,
    split_into_pools,
    twenties_leaderboard,
)
from swissdoubles.pairing.teams import DoublesTeam, form_teams

__all__ = [
    "ByeAssignment",
    "DecisionLogRecorder",
    "DoublesTeam",
    "PlayerStats",
    "Standing",
    "assign_tables",
    "byes_needed",
    "calculate_standings",
    "compute_player_stats",
    "form_matchups",
    "form_teams",
    "generate_round_pairings",
    "refresh_player_records",
    "select_byes",
    "sort_by_standings",
    "split_into_pools",
    "twenties_leaderboard",
]
