from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from matchday.models import MatchStatus, MotmAward, Player
from matchday.services import motm_service
from matchday.services.motm_service import determine_motm_awards, pick_motm, list_motm_awards
from matchday.test.utils_common_methods import TestUtils
from matchday.utils.logger_config import test_logger as logger

utils = TestUtils()

FINISHED_AT = datetime(2025, 7, 20, 12, 0, 0)
GRACE = timedelta(minutes=10)
AFTER_WINDOW = FINISHED_AT + timedelta(minutes=10)


def _finished_match(db_session: Session, **kwargs):
    return utils.setup_match(db_session, status=MatchStatus.finished, updated_at=FINISHED_AT, **kwargs)


def _votes_for(player, count, at=FINISHED_AT + timedelta(minutes=1)):
    return [(player, at)] * count


# ─────────────────────────────
# Selección del ganador
# ─────────────────────────────

def test_pick_motm_highest_count():
    assert pick_motm({7: 2, 3: 5, 9: 1}) == 3


def test_pick_motm_tie_goes_to_lowest_id():
    assert pick_motm({20: 3, 10: 3, 5: 1}) == 10
    assert pick_motm({10: 3, 20: 3, 5: 1}) == 10


def test_pick_motm_threshold():
    assert pick_motm({4: 9}, threshold=10) is None
    assert pick_motm({4: 10}, threshold=10) == 4


def test_pick_motm_without_votes():
    assert pick_motm({}) is None


# ─────────────────────────────
# Pasada batch
# ─────────────────────────────

@pytest.mark.nivel("medio")
def test_award_created_after_window_closes(db_session: Session):
    match, home, away = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 3) + _votes_for(away[0], 1))

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert summary.processed_count == 1
    assert summary.awarded_matches == ["Rojos vs Azules"]

    award = db_session.query(MotmAward).filter_by(match_id=match.id).one()
    assert award.player_id == home[0].id
    assert award.vote_count == 3

    winner = db_session.get(Player, home[0].id)
    assert winner.motm_awards == 1


@pytest.mark.nivel("medio")
def test_match_skipped_while_window_open(db_session: Session):
    match, home, _ = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 2))

    summary = determine_motm_awards(
        db_session, now=FINISHED_AT + timedelta(minutes=9), grace_period=GRACE, threshold=0
    )

    assert summary.processed_count == 1
    assert summary.awarded_matches == []
    assert db_session.query(MotmAward).count() == 0


@pytest.mark.nivel("medio")
def test_live_and_scheduled_matches_are_not_candidates(db_session: Session):
    live, home, _ = utils.setup_match(db_session, status=MatchStatus.live, home_name="L1", away_name="L2")
    utils.add_votes(db_session, live, _votes_for(home[0], 2))
    utils.setup_match(db_session, status=MatchStatus.scheduled, home_name="S1", away_name="S2")

    summary = determine_motm_awards(db_session, now=datetime.utcnow() + timedelta(days=1), threshold=0)

    assert summary.processed_count == 0
    assert db_session.query(MotmAward).count() == 0


@pytest.mark.nivel("medio")
def test_no_votes_means_no_award(db_session: Session):
    _finished_match(db_session)

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert summary.processed_count == 1
    assert summary.awarded_matches == []
    assert db_session.query(MotmAward).count() == 0


@pytest.mark.nivel("medio")
def test_second_run_awards_nothing_new(db_session: Session):
    match, home, _ = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[1], 2))

    first = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)
    second = determine_motm_awards(db_session, now=AFTER_WINDOW + timedelta(hours=1), grace_period=GRACE, threshold=0)

    assert len(first.awarded_matches) == 1
    assert second.processed_count == 0
    assert second.awarded_matches == []

    awards = db_session.query(MotmAward).all()
    assert len(awards) == 1
    assert awards[0].player_id == home[1].id
    assert db_session.get(Player, home[1].id).motm_awards == 1


@pytest.mark.nivel("medio")
def test_tie_resolved_by_lowest_player_id(db_session: Session):
    match, home, away = _finished_match(db_session)
    # A y B empatan en 3, C tiene 1
    player_a, player_b, player_c = away[2], home[1], home[0]
    utils.add_votes(
        db_session,
        match,
        _votes_for(player_a, 3) + _votes_for(player_b, 3) + _votes_for(player_c, 1),
    )
    expected = min(player_a.id, player_b.id)

    determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    award = db_session.query(MotmAward).filter_by(match_id=match.id).one()
    assert award.player_id == expected
    assert award.vote_count == 3


@pytest.mark.nivel("medio")
def test_threshold_gate(db_session: Session):
    below, home_below, _ = _finished_match(db_session, home_name="H1", away_name="A1")
    utils.add_votes(db_session, below, _votes_for(home_below[0], 9), prefix="below")

    reached, home_reached, _ = _finished_match(db_session, home_name="H2", away_name="A2")
    utils.add_votes(db_session, reached, _votes_for(home_reached[0], 10), prefix="reached")

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=10)

    assert summary.processed_count == 2
    assert summary.awarded_matches == ["H2 vs A2"]
    assert db_session.query(MotmAward).filter_by(match_id=below.id).first() is None
    award = db_session.query(MotmAward).filter_by(match_id=reached.id).one()
    assert award.player_id == home_reached[0].id


@pytest.mark.nivel("medio")
def test_late_votes_are_excluded(db_session: Session):
    """
    Partido terminado a las 12:00 con 10 minutos de gracia: el voto de las
    12:05 cuenta, los de las 12:11 no.
    """
    match, home, away = _finished_match(db_session)
    p1, p2 = home[0], away[0]
    utils.add_votes(
        db_session,
        match,
        [(p1, datetime(2025, 7, 20, 12, 5, 0))]
        + [(p2, datetime(2025, 7, 20, 12, 11, 0))] * 3,
    )

    determine_motm_awards(db_session, now=datetime(2025, 7, 20, 12, 30, 0), grace_period=GRACE, threshold=0)

    award = db_session.query(MotmAward).filter_by(match_id=match.id).one()
    assert award.player_id == p1.id
    assert award.vote_count == 1


@pytest.mark.nivel("medio")
def test_vote_exactly_at_window_end_counts(db_session: Session):
    match, home, away = _finished_match(db_session)
    utils.add_votes(
        db_session,
        match,
        [(away[0], FINISHED_AT + GRACE), (away[0], FINISHED_AT + GRACE), (home[0], FINISHED_AT)],
    )

    determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert db_session.query(MotmAward).filter_by(match_id=match.id).one().player_id == away[0].id


@pytest.mark.nivel("medio")
def test_scenario_threshold_reached_before_window_end(db_session: Session):
    match, home, _ = _finished_match(db_session)
    p1 = home[0]
    utils.add_votes(db_session, match, [(p1, FINISHED_AT + timedelta(minutes=i % 10)) for i in range(10)])

    early = determine_motm_awards(db_session, now=FINISHED_AT + timedelta(minutes=9), grace_period=GRACE, threshold=10)
    assert early.awarded_matches == []

    on_time = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=10)
    assert len(on_time.awarded_matches) == 1
    assert db_session.query(MotmAward).filter_by(match_id=match.id).one().player_id == p1.id


@pytest.mark.nivel("medio")
def test_finished_match_without_updated_at_is_skipped(db_session: Session):
    match, home, _ = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 2))
    match.updated_at = None
    db_session.commit()

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert summary.awarded_matches == []
    assert db_session.query(MotmAward).count() == 0


@pytest.mark.nivel("alto")
def test_failure_on_one_match_does_not_stop_the_pass(db_session: Session, monkeypatch):
    broken, home_broken, _ = _finished_match(db_session, home_name="B1", away_name="B2")
    utils.add_votes(db_session, broken, _votes_for(home_broken[0], 2), prefix="broken")
    ok, home_ok, _ = _finished_match(db_session, home_name="OK1", away_name="OK2")
    utils.add_votes(db_session, ok, _votes_for(home_ok[0], 2), prefix="ok")
    broken_id = broken.id

    original = motm_service.count_votes_in_window

    def flaky_count(db, match_id, ends_at):
        if match_id == broken_id:
            raise RuntimeError("timeout leyendo votos")
        return original(db, match_id, ends_at)

    monkeypatch.setattr(motm_service, "count_votes_in_window", flaky_count)

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)
    logger.info(f"Resumen con fallo parcial: {summary}")

    assert summary.processed_count == 2
    assert summary.awarded_matches == ["OK1 vs OK2"]
    assert db_session.query(MotmAward).filter_by(match_id=broken_id).first() is None


@pytest.mark.nivel("alto")
def test_counter_failure_keeps_award(db_session: Session, monkeypatch):
    match, home, _ = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 2))

    def broken_increment(db, player_id, delta=1):
        raise RuntimeError("rpc caído")

    monkeypatch.setattr(motm_service, "increment_player_motm_awards", broken_increment)

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert len(summary.awarded_matches) == 1
    assert db_session.query(MotmAward).filter_by(match_id=match.id).one().player_id == home[0].id
    assert db_session.get(Player, home[0].id).motm_awards == 0


@pytest.mark.nivel("alto")
def test_existing_award_from_concurrent_run_is_respected(db_session: Session, monkeypatch):
    match, home, away = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 2))
    match_id = match.id
    other_player_id = away[0].id

    original = motm_service.count_votes_in_window

    def concurrent_award(db, m_id, ends_at):
        # Otra corrida inserta el premio entre la consulta de candidatos y el insert
        db.add(MotmAward(match_id=m_id, player_id=other_player_id, vote_count=2))
        db.commit()
        return original(db, m_id, ends_at)

    monkeypatch.setattr(motm_service, "count_votes_in_window", concurrent_award)

    summary = determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)

    assert summary.awarded_matches == []
    awards = db_session.query(MotmAward).filter_by(match_id=match_id).all()
    assert len(awards) == 1
    assert awards[0].player_id == other_player_id


@pytest.mark.nivel("alto")
def test_candidate_query_failure_aborts_pass(db_session: Session, monkeypatch):
    def broken_query(db):
        raise RuntimeError("base no disponible")

    monkeypatch.setattr(motm_service, "get_matches_pending_motm", broken_query)

    with pytest.raises(RuntimeError):
        determine_motm_awards(db_session, now=AFTER_WINDOW)


# ─────────────────────────────
# HTTP
# ─────────────────────────────

@pytest.mark.nivel("medio")
def test_determine_endpoint_and_public_list(client: TestClient, db_session: Session):
    match, home, _ = utils.setup_match(
        db_session,
        status=MatchStatus.finished,
        updated_at=datetime.utcnow() - timedelta(hours=1),
    )
    utils.add_votes(db_session, match, _votes_for(home[2], 2, at=datetime.utcnow() - timedelta(minutes=55)))

    res = client.post("/motm/determine", headers=utils.scheduler_headers())
    assert res.status_code == 200, res.text
    assert res.json() == {"processed_count": 1, "awarded_matches": ["Rojos vs Azules"]}

    res = client.get("/motm/awards")
    assert res.status_code == 200
    awards = res.json()
    assert len(awards) == 1
    assert awards[0]["player_id"] == home[2].id
    assert awards[0]["player_name"] == home[2].name
    assert awards[0]["match_label"] == "Rojos vs Azules"

    res = client.post("/motm/determine", headers=utils.scheduler_headers())
    assert res.json() == {"processed_count": 0, "awarded_matches": []}


@pytest.mark.nivel("medio")
def test_admin_revokes_award(client: TestClient, db_session: Session):
    match, home, _ = _finished_match(db_session)
    utils.add_votes(db_session, match, _votes_for(home[0], 2))
    determine_motm_awards(db_session, now=AFTER_WINDOW, grace_period=GRACE, threshold=0)
    award_id = db_session.query(MotmAward).one().id

    _, fan_headers = utils.create_voter(client, db_session, "hincha")
    res = client.delete(f"/motm/awards/{award_id}", headers=fan_headers)
    assert res.status_code == 403

    admin_headers = utils.create_admin(client, db_session)
    res = client.delete(f"/motm/awards/{award_id}", headers=admin_headers)
    assert res.status_code == 204

    assert db_session.query(MotmAward).count() == 0
    assert db_session.get(Player, home[0].id).motm_awards == 0
    assert list_motm_awards(db_session) == []

    res = client.delete(f"/motm/awards/{award_id}", headers=admin_headers)
    assert res.status_code == 404
