"""User, participation and score schemas."""

from pydantic import Field

from .common import CamelModel


class SubmitUserRequest(CamelModel):
    """Registration payload sent after a correct guess.

    Formats are checked by the service layer so that failures carry
    dedicated error codes.
    """

    email: str
    wallet_address: str


class SubmitUserResponse(CamelModel):
    """Submission outcome."""

    message: str
    requires_verification: bool = False


class UserInfo(CamelModel):
    """Public view of a stored identity."""

    email: str
    wallet_address: str
    is_email_verified: bool
    correct_answers: int


class ParticipationResponse(CamelModel):
    """Whether the caller already submitted today."""

    has_participated: bool
    user_info: UserInfo | None = None


class MovieSolvedResponse(CamelModel):
    """Whether the caller already solved today's movie."""

    is_solved: bool
    movie_title: str | None = None


class IncrementScoreRequest(CamelModel):
    """Credits a correct guess.

    The title is checked by the service layer, like the submission fields.
    """

    wallet_address: str
    movie_title: str


class ScoreResponse(CamelModel):
    """Score after an increment request."""

    message: str
    new_score: int = Field(..., ge=0)
    solved_movies: list[str]


class UserScoreResponse(CamelModel):
    """Current score of an identity."""

    correct_answers: int = Field(..., ge=0)
    solved_movies: list[str]
