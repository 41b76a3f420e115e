import pytest

from swissdoubles import Tournament, TournamentSettings
from swissdoubles.constants import (
    PHASE_MANUAL_ENTRY,
    STATUS_ACTIVE,
    STATUS_COMPLETED,
    STATUS_SETUP,
)
from swissdoubles.exceptions import (
    DuplicatePlayerException,
    DuplicateResultException,
    InvalidConfigurationException,
    InvalidPairingException,
    InvalidResultException,
    NotEnoughPlayersException,
    PlayerInUseException,
    ResultNotFoundException,
    RoundNotCompleteException,
    RoundNotFoundException,
    TableException,
    TournamentStateException,
)


def _tournament(count=8, **kwargs):
    tournament = Tournament("Club night", **kwargs)
    for i in range(1, count + 1):
        tournament.add_player(f"Player {i:02d}", player_id=f"P{i:02d}")
    return tournament


def _score_round(tournament, round_number, score1=5, score2=3):
    for match in tournament.get_round_matches(round_number):
        if match.is_regular and not match.completed:
            tournament.submit_score(match.id, score1, score2)


def _first_regular(tournament):
    return next(m for m in tournament.matches if m.is_regular)


def test_total_rounds_are_clamped():
    assert Tournament("big", total_rounds=50).total_rounds == 20
    assert Tournament("tiny", total_rounds=0).total_rounds == 1


def test_invalid_settings_are_rejected():
    with pytest.raises(InvalidConfigurationException):
        Tournament("bad", settings=TournamentSettings(points_per_match=0))


def test_duplicate_and_empty_names_are_rejected():
    tournament = _tournament(2)

    with pytest.raises(DuplicatePlayerException):
        tournament.add_player("player 01")
    with pytest.raises(DuplicatePlayerException):
        tournament.add_player("Someone", player_id="P02")
    with pytest.raises(ValueError):
        tournament.add_player("   ")


def test_start_generates_round_one(fixed_time):
    tournament = _tournament(8)

    matches = tournament.start(seed=1, generated_at=fixed_time)

    assert tournament.status == STATUS_ACTIVE
    assert tournament.current_round == 1
    assert len(matches) == 2
    assert tournament.get_round_log(1).seed == 1


def test_start_needs_four_active_players():
    tournament = _tournament(3)

    with pytest.raises(NotEnoughPlayersException):
        tournament.start(seed=1)
    assert tournament.status == STATUS_SETUP
    assert tournament.matches == []


def test_start_only_from_setup(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)

    with pytest.raises(TournamentStateException):
        tournament.start(seed=1, generated_at=fixed_time)


def test_next_round_waits_for_scores(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)

    with pytest.raises(RoundNotCompleteException):
        tournament.generate_next_round(seed=2, generated_at=fixed_time)


def test_scores_must_add_up_to_points_per_match(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    match = _first_regular(tournament)

    with pytest.raises(InvalidResultException):
        tournament.submit_score(match.id, 5, 4)
    with pytest.raises(InvalidResultException):
        tournament.submit_score(match.id, -1, 9)
    with pytest.raises(InvalidResultException):
        tournament.submit_score(match.id, 4, 4, twenties1=-2)
    assert not tournament.get_match(match.id).completed


def test_score_updates_player_records(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    match = _first_regular(tournament)

    tournament.submit_score(match.id, 6, 2, twenties1=3)

    for pid in match.team1:
        player = tournament.get_player(pid)
        assert (player.wins, player.points_for, player.twenties) == (1, 6, 3)
    for pid in match.team2:
        assert tournament.get_player(pid).losses == 1


def test_second_submission_is_a_duplicate_but_edit_is_allowed(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    match = _first_regular(tournament)
    tournament.submit_score(match.id, 6, 2)

    with pytest.raises(DuplicateResultException):
        tournament.submit_score(match.id, 2, 6)

    edited = tournament.edit_score(match.id, 2, 6)
    assert (edited.score1, edited.score2) == (2, 6)
    assert tournament.get_player(match.team1[0]).losses == 1


def test_clear_score_puts_match_back_to_pending(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    match = _first_regular(tournament)
    tournament.submit_score(match.id, 6, 2)

    cleared = tournament.clear_score(match.id)

    assert not cleared.completed
    assert cleared.score1 is None
    assert tournament.get_player(match.team1[0]).wins == 0


def test_byes_take_no_score(fixed_time):
    tournament = _tournament(9)
    tournament.start(seed=1, generated_at=fixed_time)
    bye = next(m for m in tournament.matches if m.is_bye)

    with pytest.raises(InvalidResultException):
        tournament.submit_score(bye.id, 8, 0)
    with pytest.raises(InvalidResultException):
        tournament.edit_score(bye.id, 8, 0)


def test_unknown_match_is_reported(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)

    with pytest.raises(ResultNotFoundException):
        tournament.submit_score("nope", 4, 4)


def test_full_event_runs_to_completion(fixed_time):
    tournament = _tournament(12, total_rounds=3)
    tournament.start(seed=1, generated_at=fixed_time)
    for round_number in (2, 3):
        _score_round(tournament, round_number - 1)
        tournament.generate_next_round(seed=round_number, generated_at=fixed_time)
    _score_round(tournament, 3)

    with pytest.raises(TournamentStateException):
        tournament.generate_next_round(seed=4, generated_at=fixed_time)

    assert tournament.is_final_round
    tournament.complete()
    assert tournament.status == STATUS_COMPLETED
    assert len(tournament.get_round_logs()) == 3


def test_complete_needs_a_scored_round(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)

    with pytest.raises(RoundNotCompleteException):
        tournament.complete()


def test_player_with_matches_can_only_be_deactivated(fixed_time):
    tournament = _tournament(9)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)

    with pytest.raises(PlayerInUseException):
        tournament.remove_player("P01")

    tournament.set_player_active("P01", False)
    matches = tournament.generate_next_round(seed=2, generated_at=fixed_time)

    assert all(not m.involves("P01") for m in matches)
    assert [m for m in matches if m.is_bye] == []


def test_late_entrant_joins_next_round(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)

    tournament.add_player("Latecomer", player_id="LATE")
    matches = tournament.generate_next_round(seed=2, generated_at=fixed_time)

    assert any(m.involves("LATE") for m in matches)
    assert len([m for m in matches if m.is_bye]) == 1


def test_unused_player_can_be_removed():
    tournament = _tournament(5)

    tournament.remove_player("P05")

    assert "P05" not in tournament.players


def test_delete_round_steps_back(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)
    tournament.generate_next_round(seed=2, generated_at=fixed_time)

    tournament.delete_round(2)
    assert tournament.current_round == 1
    assert 2 not in tournament.round_logs
    assert tournament.status == STATUS_ACTIVE

    tournament.delete_round(1)
    assert tournament.current_round == 0
    assert tournament.status == STATUS_SETUP
    assert all(p.wins == 0 for p in tournament.get_player_list())

    with pytest.raises(RoundNotFoundException):
        tournament.delete_round(1)


def test_manual_round_replaces_generation(fixed_time):
    tournament = _tournament(9)

    matches = tournament.replace_round(
        1,
        [
            (("P01", "P02"), ("P03", "P04")),
            (("P05", "P06"), ("P07", "P08")),
            (("P09",), None),
        ],
        generated_at=fixed_time,
    )

    assert tournament.status == STATUS_ACTIVE
    assert len(matches) == 3
    bye = matches[-1]
    assert bye.is_bye and bye.completed and bye.team1 == ("P09",)
    log = tournament.get_round_log(1)
    assert log.seed is None
    assert log.entries_for(PHASE_MANUAL_ENTRY)[0].decision == (
        "Round 1 entered manually"
    )


@pytest.mark.parametrize(
    "pairings",
    [
        # P08 missing
        [(("P01", "P02"), ("P03", "P04")), (("P05", "P06"), ("P07",))],
        # P01 twice
        [(("P01", "P02"), ("P03", "P04")), (("P01", "P06"), ("P07", "P08"))],
        # unknown player
        [(("P01", "P02"), ("P03", "P04")), (("P05", "P06"), ("P07", "X"))],
    ],
)
def test_manual_round_must_seat_everyone_once(pairings):
    tournament = _tournament(8)

    with pytest.raises(InvalidPairingException):
        tournament.replace_round(1, pairings)
    assert tournament.matches == []


def test_regenerate_with_same_seed_reproduces_round(fixed_time):
    tournament = _tournament(10)
    original = tournament.start(seed=42, generated_at=fixed_time)

    regenerated = tournament.regenerate_round(seed=42, generated_at=fixed_time)

    assert [m.to_dict() for m in regenerated] == [m.to_dict() for m in original]
    assert len(tournament.matches) == len(original)


def test_only_latest_round_can_be_regenerated(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)
    tournament.generate_next_round(seed=2, generated_at=fixed_time)

    with pytest.raises(TournamentStateException):
        tournament.regenerate_round(1, seed=3, generated_at=fixed_time)


def test_total_rounds_cannot_drop_below_played_rounds(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)
    tournament.generate_next_round(seed=2, generated_at=fixed_time)

    with pytest.raises(TournamentStateException):
        tournament.total_rounds = 1
    tournament.total_rounds = 6
    assert tournament.total_rounds == 6


def test_tables_are_assigned_and_released(fixed_time):
    tournament = _tournament(8, settings=TournamentSettings(table_assignment=True))
    first = tournament.add_table("Table 1", table_id="T1")
    tournament.add_table("Table 2", table_id="T2")
    tournament.start(seed=1, generated_at=fixed_time)
    assert {m.table_id for m in tournament.matches} == {"T1", "T2"}

    tournament.remove_table(first.id)

    assert "T1" not in {m.table_id for m in tournament.matches}
    assert tournament.tables["T2"].order == 0


def test_reorder_tables_needs_every_table():
    tournament = _tournament(4)
    tournament.add_table("Table 1", table_id="T1")
    tournament.add_table("Table 2", table_id="T2")

    assert [t.id for t in tournament.reorder_tables(["T2", "T1"])] == ["T2", "T1"]
    with pytest.raises(TableException):
        tournament.reorder_tables(["T1"])


def test_pools_follow_pool_size():
    tournament = _tournament(10, settings=TournamentSettings(pool_size=4))

    pools = tournament.get_pools()

    assert [(name, len(group)) for name, group in pools] == [
        ("Pool A", 4),
        ("Pool B", 4),
        ("Pool C", 2),
    ]


def test_reset_keeps_players_and_drops_rounds(fixed_time):
    tournament = _tournament(8)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)

    tournament.reset()

    assert tournament.status == STATUS_SETUP
    assert tournament.matches == [] and tournament.round_logs == {}
    assert len(tournament.players) == 8
    assert all(p.wins == p.losses == 0 for p in tournament.get_player_list())


def test_snapshot_survives_serialization(fixed_time):
    tournament = _tournament(9)
    tournament.start(seed=1, generated_at=fixed_time)
    _score_round(tournament, 1)

    restored = Tournament.from_dict(tournament.to_dict())

    assert restored.to_dict() == tournament.to_dict()
    assert restored.get_round_log(1).generated_at == fixed_time


def test_unknown_status_is_rejected():
    data = _tournament(4).to_dict()
    data["status"] = "paused"

    with pytest.raises(TournamentStateException):
        Tournament.from_dict(data)
