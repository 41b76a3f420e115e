"""Type hints used in Swiss Doubles."""

from typing import Dict, FrozenSet, List, Literal, Optional, Tuple

# Decision log phases (for type hints)
Phase = Literal[
    "history_audit",
    "bye_selection",
    "team_formation",
    "match_pairing",
    "manual_entry",
]

TournamentStatus = Literal["setup", "active", "completed"]

PlayerId = str
# Two player ids playing together this round
Team = Tuple[PlayerId, PlayerId]
# Order independent identity of a team
TeamKey = FrozenSet[PlayerId]
# team1 vs team2
Matchup = Tuple[Team, Team]
# one or two player ids as stored on a match
TeamIds = Tuple[PlayerId, ...]
MaybeTeamIds = Optional[TeamIds]

# Player id -> set of former partners
PartnerMap = Dict[PlayerId, set]
StandingsKey = Tuple[int, int, int]
Details = List[str]

#  LocalWords:  TeamKey Matchup
