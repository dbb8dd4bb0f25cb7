"""Async HTTP client for the CineQuiz API.

This module provides the CineQuizClient class used by the game controller and
the wallet connector. Every call has a bounded timeout; non-2xx responses are
raised as ApiError carrying the server's machine-readable error code.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from cinequiz.schemas import (
    AttemptCountResponse,
    AttemptResponse,
    CheckAnswerResponse,
    DailyMovieResponse,
    MessageResponse,
    MovieSolvedResponse,
    ParticipationResponse,
    ScoreResponse,
    SubmitUserResponse,
    UserScoreResponse,
    WalletConnectResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class ApiError(RuntimeError):
    """Raised when the API answers with an error or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        code: str | None = None,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.payload = payload or {}

    @property
    def rate_limited(self) -> bool:
        return self.status_code == httpx.codes.TOO_MANY_REQUESTS


@dataclass(frozen=True)
class BypassOptions:
    """Admin/test bypass values forwarded to the API."""

    admin_code: str | None = None
    test_mode: bool = False


class CineQuizClient:
    """Thin typed wrapper over the REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> CineQuizClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_data: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.request(
                method,
                path,
                params=clean_params or None,
                json=json_data,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("Request %s %s failed: %s", method, path, exc)
            raise ApiError(f"Request failed: {exc}") from exc

        if response.is_success:
            return response

        payload: dict[str, Any] = {}
        try:
            body = response.json()
            if isinstance(body, dict):
                payload = body
        except ValueError:
            pass
        message = payload.get("message") or response.text or f"HTTP {response.status_code}"
        raise ApiError(
            str(message),
            status_code=response.status_code,
            code=payload.get("error"),
            payload=payload,
        )

    async def daily_movie(self) -> DailyMovieResponse:
        response = await self._request("GET", "/api/daily-movie")
        return DailyMovieResponse.model_validate(response.json())

    async def check_answer(self, answer: str) -> CheckAnswerResponse:
        response = await self._request("POST", "/api/check-answer", json_data={"answer": answer})
        return CheckAnswerResponse.model_validate(response.json())

    async def get_attempts(self, wallet_address: str | None = None) -> AttemptCountResponse:
        response = await self._request(
            "GET", "/api/attempt", params={"walletAddress": wallet_address}
        )
        return AttemptCountResponse.model_validate(response.json())

    async def record_attempt(self, wallet_address: str | None = None) -> AttemptResponse:
        response = await self._request(
            "POST", "/api/attempt", params={"walletAddress": wallet_address}
        )
        return AttemptResponse.model_validate(response.json())

    async def reset_attempts(self, wallet_address: str | None = None) -> MessageResponse:
        response = await self._request(
            "POST", "/api/reset-attempts", params={"walletAddress": wallet_address}
        )
        return MessageResponse.model_validate(response.json())

    async def check_participation(
        self,
        wallet_address: str | None,
        bypass: BypassOptions | None = None,
    ) -> ParticipationResponse:
        bypass = bypass or BypassOptions()
        params: dict[str, Any] = {"walletAddress": wallet_address, "adminCode": bypass.admin_code}
        if bypass.test_mode:
            params["testMode"] = "true"
        response = await self._request("GET", "/api/check-participation", params=params)
        return ParticipationResponse.model_validate(response.json())

    async def check_movie_solved(self, wallet_address: str) -> MovieSolvedResponse:
        response = await self._request(
            "GET", "/api/check-movie-solved", params={"walletAddress": wallet_address}
        )
        return MovieSolvedResponse.model_validate(response.json())

    async def submit_user(
        self,
        email: str,
        wallet_address: str,
        bypass: BypassOptions | None = None,
    ) -> SubmitUserResponse:
        bypass = bypass or BypassOptions()
        headers: dict[str, str] = {}
        if bypass.admin_code:
            headers["admin-code"] = bypass.admin_code
        if bypass.test_mode:
            headers["test-mode"] = "true"
        response = await self._request(
            "POST",
            "/api/submit-user",
            json_data={"email": email, "walletAddress": wallet_address},
            headers=headers,
        )
        return SubmitUserResponse.model_validate(response.json())

    async def increment_score(self, wallet_address: str, movie_title: str) -> ScoreResponse:
        response = await self._request(
            "POST",
            "/api/increment-score",
            json_data={"walletAddress": wallet_address, "movieTitle": movie_title},
        )
        return ScoreResponse.model_validate(response.json())

    async def user_score(self, wallet_address: str) -> UserScoreResponse:
        response = await self._request(
            "GET", "/api/user-score", params={"walletAddress": wallet_address}
        )
        return UserScoreResponse.model_validate(response.json())

    async def wallet_connect(self) -> WalletConnectResponse:
        response = await self._request("POST", "/api/wallet-connect")
        return WalletConnectResponse.model_validate(response.json())

    async def verify_email(self, token: str) -> str:
        response = await self._request("GET", f"/verify-email/{token}")
        return response.text
