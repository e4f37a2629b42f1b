from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from matchday.database import get_db
from matchday.exceptions import VoteError
from matchday.models import MatchStatus, User
from matchday.schemas.team_schema import PlayerResponse
from matchday.schemas.vote_schema import (
    VoteCreate,
    VoteResponse,
    VotableMatchResponse,
    VoteResultsResponse,
    MatchCandidatesResponse,
)
from matchday.services.auth_service import get_current_user_optional
from matchday.services.match_service import get_match
from matchday.services.vote_service import (
    cast_vote,
    get_votable_match,
    get_vote_results,
    get_match_candidates,
    has_user_voted,
)
from matchday.utils.voting_window import voting_ends_at
from matchday.utils.logger_config import app_logger as logger

router = APIRouter(prefix="/votes", tags=["votes"])


def _raise_http(error: VoteError):
    raise HTTPException(status_code=error.status_code, detail=error.detail)


@router.get("/current", response_model=VotableMatchResponse)
def current_votable_match(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    """
    Partido con la votación abierta (si hay) y si el usuario ya votó.
    """
    match = get_votable_match(db, datetime.utcnow())
    if not match:
        return VotableMatchResponse()

    match = get_match(match.id, db)
    ends_at = voting_ends_at(match) if match.status == MatchStatus.finished else None
    voted = bool(current_user) and has_user_voted(db, current_user.id, match.id)

    return VotableMatchResponse(match=match, voting_ends_at=ends_at, has_voted=voted)


@router.get("/matches/{match_id}/candidates", response_model=MatchCandidatesResponse)
def match_candidates(match_id: int, db: Session = Depends(get_db)):
    try:
        players = get_match_candidates(db, match_id)
    except VoteError as e:
        _raise_http(e)

    return MatchCandidatesResponse(
        match_id=match_id,
        players=[PlayerResponse.model_validate(p) for p in players],
    )


@router.post("/matches/{match_id}", response_model=VoteResponse, status_code=status.HTTP_201_CREATED)
def vote_for_player(
    match_id: int,
    data: VoteCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    try:
        result = cast_vote(db, current_user, match_id, data.player_id)
    except VoteError as e:
        logger.info(f"Voto rechazado en match {match_id}: {type(e).__name__}")
        _raise_http(e)

    vote = result.vote
    return VoteResponse(
        id=vote.id,
        match_id=vote.match_id,
        player_id=vote.player_id,
        created_at=vote.created_at,
        warning=result.warning,
    )


@router.get("/matches/{match_id}/results", response_model=VoteResultsResponse)
def vote_results(
    match_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional),
):
    try:
        counts = get_vote_results(db, current_user, match_id)
    except VoteError as e:
        _raise_http(e)

    leading = min(counts, key=lambda pid: (-counts[pid], pid)) if counts else None
    return VoteResultsResponse(
        match_id=match_id,
        total_votes=sum(counts.values()),
        votes=counts,
        leading_player_id=leading,
    )
