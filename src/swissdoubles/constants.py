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

# --- Constants ---

# Standings points per match outcome
WIN_SCORE = 2
TIE_SCORE = 1
LOSS_SCORE = 0

# A bye is a win while at most this many byes exist tournament-wide,
# and a tie for everyone once there are more.
BYE_WIN_THRESHOLD = 1

# Doubles: two players per team, two teams per match
TEAM_SIZE = 2
PLAYERS_PER_MATCH = 4
MIN_PLAYERS = PLAYERS_PER_MATCH

# Tournament defaults (crokinole style scoring)
DEFAULT_POINTS_PER_MATCH = 8
DEFAULT_POOL_SIZE = 8
DEFAULT_TOTAL_ROUNDS = 4
MIN_TOTAL_ROUNDS = 1
MAX_TOTAL_ROUNDS = 20

# Tournament status values
STATUS_SETUP = "setup"
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
TOURNAMENT_STATUSES = (STATUS_SETUP, STATUS_ACTIVE, STATUS_COMPLETED)

# Decision log phases
PHASE_HISTORY_AUDIT = "history_audit"
PHASE_BYE_SELECTION = "bye_selection"
PHASE_TEAM_FORMATION = "team_formation"
PHASE_MATCH_PAIRING = "match_pairing"
PHASE_MANUAL_ENTRY = "manual_entry"

# Bye selection rules (quoted verbatim in the decision log)
BYE_RULE_RANDOM_FIRST_ROUND = "random selection (round 1)"
BYE_RULE_SHARE_BEFORE_REPEAT = "players must share byes before repeats"
BYE_RULE_LOWEST_RANKED = "lowest-ranked eligible player"
BYE_RULE_RANDOM_TIE_BREAK = "random tie-break among equally ranked players"

# Per-match reasoning strings
REASON_RANDOM_ROUND = "Random pairing (Round 1)"
REASON_SWISS_ROUND = "Swiss pairing based on combined team standings"
REASON_MANUAL_ROUND = "Entered manually by tournament director"

# Upper bound on tentative pairs tried by the repeat-free pairing search
SEARCH_NODE_BUDGET = 50_000
# The budget actually used is this many pairs per item, capped at the above
SEARCH_NODES_PER_ITEM = 100

# Match id alphabet (same shape as the lobby's short ids)
ID_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz_-"
ID_LENGTH = 8

# Logging
LOG_LEVEL_ENV = "SWISSDOUBLES_LOG_LEVEL"
LOG_DIR_ENV = "SWISSDOUBLES_LOG_DIR"
LOG_FILE_NAME = "swiss-doubles.log"
