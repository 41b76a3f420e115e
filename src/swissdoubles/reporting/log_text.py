"""Plain-text export of round pairing logs.

The export is what a tournament director hands to a player who asks why they
were paired the way they were: a summary of the rules, then for every round
the standings going in, each decision taken, and the final pairings.
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

from pathlib import Path
from typing import List, Sequence

from swissdoubles.models.pairing import RoundLog
from swissdoubles.pairing.decision_log import format_diff
from swissdoubles.utils import setup_logger

logger = setup_logger(__name__)

RULE = "=" * 65
THIN_RULE = "-" * 65
NAME_WIDTH = 20

NO_LOGS_MESSAGE = (
    "No pairing logs available yet. Start a tournament and generate rounds "
    "to see logs."
)

ALGORITHM_SUMMARY = """
ROUND 1:
  * Partners: Randomly assigned
  * Matchups: Randomly assigned
  * Byes: Randomly selected (if player count not divisible by 4)

ROUND 2+:
  * Standings calculated: Score -> Point diff -> Points for
    - Score = Wins x 2 + Ties x 1
    - Point diff = Points for - Points against
  * Partners: Nearest-ranked player who has not been a partner before
    - Repeat partners only when no repeat-free teams exist
  * Matchups: Teams with the closest combined standings play each other
    - Repeat team matchups only when no repeat-free schedule exists
  * Byes:
    - Given to the lowest ranked player with the fewest byes
    - No one gets 2 byes until everyone has had 1
    - Random choice among players tied on byes and standings

SCORING:
  * Win = 2 points
  * Tie = 1 point
  * Loss = 0 points
  * Bye = Win (2 points) while it is the only bye of the tournament,
    Tie (1 point) for every bye once there are two or more;
    stored as an even score split with the average 20s
"""


def _format_round(log: RoundLog) -> List[str]:
    lines = [
        RULE,
        f"ROUND {log.round_number}",
        f"Generated: {log.generated_at.isoformat()}",
        f"Players: {log.player_count} | Byes needed: {log.byes_needed}",
    ]
    if log.seed is not None:
        lines.append(f"Seed: {log.seed}")
    lines += [RULE, ""]

    lines += [
        "STANDINGS BEFORE PAIRING:",
        THIN_RULE,
        "Rank  Player                W   L   T   +/-  Byes",
        THIN_RULE,
    ]
    for p in log.standings_snapshot:
        name = p.name[:NAME_WIDTH].ljust(NAME_WIDTH)
        lines.append(
            f"{p.rank:>4}  {name}  {p.wins:>2}  {p.losses:>2}  {p.ties:>2}  "
            f"{format_diff(p.point_diff):>4}  {p.bye_count}"
        )
    lines.append("")

    lines += ["PAIRING DECISIONS:", THIN_RULE]
    for entry in log.entries:
        lines.append(f"[{entry.phase.upper()}] {entry.decision}")
        lines += [f"    -> {detail}" for detail in entry.details]
    lines.append("")

    lines += ["FINAL PAIRINGS:", THIN_RULE]
    for match in log.final_pairings:
        if match.is_bye:
            lines.append(f"  BYE: {' + '.join(match.team1)}")
        else:
            table = f"[{match.table}] " if match.table else ""
            lines.append(
                f"  {table}{' + '.join(match.team1)}  vs  {' + '.join(match.team2)}"
            )
        lines.append(f"        Reason: {match.reasoning}")
    lines += ["", ""]
    return lines


def generate_log_text(logs: Sequence[RoundLog]) -> str:
    """Render round logs, in round order, as a plain-text report."""
    if not logs:
        return NO_LOGS_MESSAGE

    lines = [
        RULE,
        "                    SWISS PAIRING LOG",
        RULE,
        "",
        "ALGORITHM SUMMARY:",
        THIN_RULE,
        ALGORITHM_SUMMARY,
    ]
    for log in sorted(logs, key=lambda item: item.round_number):
        lines += _format_round(log)
    return "\n".join(lines)


def save_log_text(logs: Sequence[RoundLog], output_path: Path) -> Path:
    """Write the report to ``output_path``, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(generate_log_text(logs), encoding="utf-8")
    logger.info(f"Pairing log saved to: {output_path}")
    return output_path
