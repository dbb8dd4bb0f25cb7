"""Submission, verification state and score bookkeeping for players."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cinequiz.core.errors import (
    AlreadyParticipated,
    DuplicateRegistration,
    InvalidTitle,
    UserNotFound,
)
from cinequiz.db.time import local_date, next_rotation, start_of_day, utcnow
from cinequiz.models import SolvedMovie, User
from cinequiz.services.identity import Identity, validate_email_address, validate_wallet_address
from cinequiz.services.mailer import Mailer, get_mailer
from cinequiz.services.movie_selector import daily_movie
from cinequiz.services.participation import ParticipationGate, is_bypass
from cinequiz.services.storage import insert_if_absent
from cinequiz.services.verification import issue_verification, mark_verified, verification_link

__all__ = [
    "ScoreState",
    "SubmissionResult",
    "get_score",
    "get_user",
    "increment_score",
    "is_movie_solved",
    "submit",
]

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 300

MSG_BYPASS = "Information submitted successfully (Admin/Test mode)"
MSG_SUBMITTED = "Information submitted successfully! Thank you for participating."
MSG_CHECK_EMAIL = (
    "Please check your email to verify your account. "
    "Check your spam folder if you don't see it."
)


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a prize-eligible submission."""

    message: str
    requires_verification: bool
    created: bool = False


@dataclass(frozen=True)
class ScoreState:
    """Score of an identity after a credit request."""

    new_score: int
    solved_movies: list[str] = field(default_factory=list)
    credited: bool = False


def get_user(db: Session, wallet_address: str) -> User:
    """Return the user for ``wallet_address`` or raise ``UserNotFound``."""
    user = db.get(User, validate_wallet_address(wallet_address))
    if user is None:
        raise UserNotFound()
    return user


def submit(
    db: Session,
    wallet_address: str,
    email: str,
    now: datetime,
    *,
    admin_code: str | None = None,
    test_mode: bool = False,
    client_ip: str | None = None,
    mailer: Mailer | None = None,
    gate: ParticipationGate | None = None,
) -> SubmissionResult:
    """Register or update an identity and record today's participation.

    Formats are validated before anything is written. Unless the bypass is
    active, an identity may submit once per calendar day. The record is
    upserted on the wallet address. Identities whose email is not verified get
    a fresh verification token by email; participation is only recorded once
    the email was handed to the mail provider, so a failed send can be retried
    by submitting again.

    Raises:
        InvalidAddress: Malformed wallet address
        InvalidEmail: Malformed email address
        AlreadyParticipated: Identity already submitted today
        DuplicateRegistration: Email belongs to another wallet
        MailDeliveryError: Verification email could not be sent
    """
    wallet = validate_wallet_address(wallet_address)
    email = validate_email_address(email)
    bypass = is_bypass(admin_code, test_mode)
    gate = gate or ParticipationGate()

    if not bypass:
        status = gate.has_participated_today(db, Identity("wallet", wallet), now)
        if status.has_participated:
            logger.info("Rejected second submission of the day")
            raise AlreadyParticipated(reset_at=next_rotation(now), now=now)

    owner = (
        db.query(User)
        .filter(User.email == email, User.wallet_address != wallet)
        .first()
    )
    if owner is not None:
        raise DuplicateRegistration()

    user = db.get(User, wallet)
    created = user is None
    if user is None:
        user = User(
            wallet_address=wallet,
            email=email,
            is_email_verified=False,
            correct_answers=0,
            created_at=now,
        )
        db.add(user)
    elif user.email != email:
        # A new address has to be proven again.
        user.email = email
        user.is_email_verified = False
    user.submitted_ip = client_ip

    if bypass or user.is_email_verified:
        if bypass:
            mark_verified(user)
        _write_registration(db, commit=False)
        _claim_participation(db, wallet, now, bypass=bypass)
        db.commit()
        logger.info("Submission recorded (created=%s, bypass=%s)", created, bypass)
        return SubmissionResult(
            message=MSG_BYPASS if bypass else MSG_SUBMITTED,
            requires_verification=False,
            created=created,
        )

    token = issue_verification(user, now)
    _write_registration(db)

    (mailer or get_mailer()).send_verification(email, verification_link(token))

    _claim_participation(db, wallet, now, bypass=False)
    db.commit()
    logger.info("Submission pending email verification (created=%s)", created)
    return SubmissionResult(message=MSG_CHECK_EMAIL, requires_verification=True, created=created)


def _write_registration(db: Session, *, commit: bool = True) -> None:
    try:
        if commit:
            db.commit()
        else:
            db.flush()
    except IntegrityError as err:
        db.rollback()
        raise DuplicateRegistration() from err


def _claim_participation(db: Session, wallet: str, now: datetime, *, bypass: bool) -> None:
    """Stamp today's participation unless a concurrent submission got there first.

    Without the bypass the UPDATE only matches a user whose last participation
    is before the start of the current reference-zone day.
    """
    query = db.query(User).filter(User.wallet_address == wallet)
    if not bypass:
        day_start = start_of_day(local_date(now))
        query = query.filter(
            or_(
                User.last_participation_at.is_(None),
                User.last_participation_at < day_start,
            )
        )
    claimed = query.update({User.last_participation_at: now}, synchronize_session=False)
    if not claimed:
        db.rollback()
        logger.info("Rejected concurrent submission of the day")
        raise AlreadyParticipated(reset_at=next_rotation(now), now=now)


def increment_score(db: Session, wallet_address: str, movie_title: str) -> ScoreState:
    """Credit ``movie_title`` to the identity once.

    The solved-set membership row is inserted with ``ON CONFLICT DO NOTHING``
    and the counter only moves when that insert took effect, both inside one
    transaction. Repeated or concurrent calls for the same title are no-ops.

    Raises:
        InvalidTitle: If the title is blank or too long
        UserNotFound: If the wallet address has never submitted
    """
    title = movie_title.strip()
    if not title:
        raise InvalidTitle()
    if len(title) > MAX_TITLE_LENGTH:
        raise InvalidTitle(f"Movie title must be at most {MAX_TITLE_LENGTH} characters")
    user = get_user(db, wallet_address)
    wallet = user.wallet_address

    credited = insert_if_absent(
        db,
        SolvedMovie,
        {"wallet_address": wallet, "movie_title": title, "solved_at": utcnow()},
        index_elements=["wallet_address", "movie_title"],
    )
    if credited:
        db.query(User).filter(User.wallet_address == wallet).update(
            {User.correct_answers: User.correct_answers + 1},
            synchronize_session=False,
        )
    db.commit()
    db.refresh(user)

    if credited:
        logger.info("Credited solved movie (score=%d)", user.correct_answers)
    return ScoreState(
        new_score=user.correct_answers,
        solved_movies=user.solved_titles,
        credited=credited,
    )


def get_score(db: Session, wallet_address: str) -> ScoreState:
    """Return the identity's current score."""
    user = get_user(db, wallet_address)
    return ScoreState(new_score=user.correct_answers, solved_movies=user.solved_titles)


def is_movie_solved(db: Session, wallet_address: str, now: datetime) -> tuple[bool, str]:
    """Return whether today's movie is in the identity's solved set.

    Returns:
        Tuple of (solved, title of today's movie)
    """
    wallet = validate_wallet_address(wallet_address)
    movie = daily_movie(db, now)
    solved = db.get(SolvedMovie, (wallet, movie.title)) is not None
    return solved, movie.title
