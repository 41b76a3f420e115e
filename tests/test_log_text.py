import pytest

from swissdoubles.models.pairing import (
    MatchPairingLog,
    PairingLogEntry,
    PlayerSnapshot,
    RoundLog,
)
from swissdoubles.reporting import generate_log_text, save_log_text
from swissdoubles.reporting.log_text import NO_LOGS_MESSAGE


@pytest.fixture
def round_log(fixed_time):
    def _make(round_number, seed=42):
        return RoundLog(
            round_number=round_number,
            generated_at=fixed_time,
            player_count=5,
            byes_needed=1,
            seed=seed,
            entries=[
                PairingLogEntry(
                    fixed_time,
                    round_number,
                    "bye_selection",
                    "Selected Eve for bye",
                    ["Previous byes: 0"],
                )
            ],
            standings_snapshot=[
                PlayerSnapshot(1, "Alice", 1, 0, 0, 4, 0),
                PlayerSnapshot(2, "Eve", 0, 1, 0, -4, 0),
            ],
            final_pairings=[
                MatchPairingLog(
                    ["Alice", "Bob"],
                    ["Carol", "Dan"],
                    False,
                    "Closest standings",
                    table="Table 1",
                ),
                MatchPairingLog(["Eve"], None, True, "Bye: lowest ranked"),
            ],
        )

    return _make


def test_no_logs_gives_placeholder():
    assert generate_log_text([]) == NO_LOGS_MESSAGE


def test_rounds_are_written_in_order(round_log):
    text = generate_log_text([round_log(3), round_log(1), round_log(2)])

    positions = [text.index(f"ROUND {n}\n") for n in (1, 2, 3)]
    assert positions == sorted(positions)
    assert "ALGORITHM SUMMARY:" in text


def test_round_section_contents(round_log):
    text = generate_log_text([round_log(1)])

    assert "Seed: 42" in text
    assert "Players: 5 | Byes needed: 1" in text
    assert "[BYE_SELECTION] Selected Eve for bye" in text
    assert "    -> Previous byes: 0" in text
    assert "[Table 1] Alice + Bob  vs  Carol + Dan" in text
    assert "  BYE: Eve" in text
    assert "Reason: Bye: lowest ranked" in text
    assert "-4" in text


def test_manual_round_has_no_seed_line(round_log):
    text = generate_log_text([round_log(1, seed=None)])

    assert "Seed:" not in text


def test_save_log_text_writes_file(round_log, tmp_path):
    output = tmp_path / "logs" / "pairing_log.txt"

    written = save_log_text([round_log(1)], output)

    assert written == output
    assert output.read_text(encoding="utf-8") == generate_log_text([round_log(1)])
