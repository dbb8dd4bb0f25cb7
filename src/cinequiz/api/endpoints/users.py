"""Participation, submission and score endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, Query

from cinequiz.api.dependencies import (
    ClientIpDep,
    IdentityDep,
    MailerDep,
    NowDep,
    ParticipationGateDep,
    SessionDep,
)
from cinequiz.core.errors import MissingAddress
from cinequiz.models import User
from cinequiz.schemas.user import (
    IncrementScoreRequest,
    MovieSolvedResponse,
    ParticipationResponse,
    ScoreResponse,
    SubmitUserRequest,
    SubmitUserResponse,
    UserInfo,
    UserScoreResponse,
)
from cinequiz.services import users as user_service

router = APIRouter(tags=["users"])


def _user_info(user: User) -> UserInfo:
    return UserInfo(
        email=user.email,
        wallet_address=user.wallet_address,
        is_email_verified=user.is_email_verified,
        correct_answers=user.correct_answers,
    )


def _require_address(wallet_address: str | None) -> str:
    if not wallet_address or not wallet_address.strip():
        raise MissingAddress()
    return wallet_address


@router.get(
    "/check-participation",
    summary="Has the caller already submitted today",
    response_model=ParticipationResponse,
    response_model_exclude_none=True,
)
async def check_participation(
    db: SessionDep,
    identity: IdentityDep,
    gate: ParticipationGateDep,
    now: NowDep,
    admin_code: Annotated[str | None, Query(alias="adminCode")] = None,
    test_mode: Annotated[bool, Query(alias="testMode")] = False,
) -> ParticipationResponse:
    status = gate.has_participated_today(db, identity, now, admin_code, test_mode)
    if status.has_participated and status.user is not None:
        return ParticipationResponse(has_participated=True, user_info=_user_info(status.user))
    return ParticipationResponse(has_participated=status.has_participated)


@router.get(
    "/check-movie-solved",
    summary="Has the caller solved today's movie",
    response_model=MovieSolvedResponse,
    response_model_exclude_none=True,
)
async def check_movie_solved(
    db: SessionDep,
    now: NowDep,
    wallet_address: Annotated[str | None, Query(alias="walletAddress")] = None,
) -> MovieSolvedResponse:
    address = _require_address(wallet_address)
    solved, title = user_service.is_movie_solved(db, address, now)
    return MovieSolvedResponse(is_solved=solved, movie_title=title if solved else None)


@router.post(
    "/submit-user",
    summary="Register or update an identity and trigger email verification",
    response_model=SubmitUserResponse,
)
def submit_user(
    payload: SubmitUserRequest,
    db: SessionDep,
    client_ip: ClientIpDep,
    mailer: MailerDep,
    gate: ParticipationGateDep,
    now: NowDep,
    admin_code: Annotated[str | None, Header(alias="admin-code")] = None,
    test_mode: Annotated[str | None, Header(alias="test-mode")] = None,
) -> SubmitUserResponse:
    """Record today's prize-eligible submission.

    Declared synchronously so the SMTP exchange runs in the worker threadpool.
    """
    result = user_service.submit(
        db,
        payload.wallet_address,
        payload.email,
        now,
        admin_code=admin_code,
        test_mode=(test_mode or "").lower() == "true",
        client_ip=client_ip,
        mailer=mailer,
        gate=gate,
    )
    return SubmitUserResponse(
        message=result.message,
        requires_verification=result.requires_verification,
    )


@router.post(
    "/increment-score",
    summary="Credit a correct guess once per movie",
    response_model=ScoreResponse,
)
async def increment_score(payload: IncrementScoreRequest, db: SessionDep) -> ScoreResponse:
    state = user_service.increment_score(db, payload.wallet_address, payload.movie_title)
    return ScoreResponse(
        message="Score updated successfully" if state.credited else "Movie already solved",
        new_score=state.new_score,
        solved_movies=state.solved_movies,
    )


@router.get(
    "/user-score",
    summary="Current score of an identity",
    response_model=UserScoreResponse,
)
async def get_user_score(
    db: SessionDep,
    wallet_address: Annotated[str | None, Query(alias="walletAddress")] = None,
) -> UserScoreResponse:
    state = user_service.get_score(db, _require_address(wallet_address))
    return UserScoreResponse(
        correct_answers=state.new_score,
        solved_movies=state.solved_movies,
    )
