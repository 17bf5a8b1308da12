"""HTTP client for the tournament funding API.

Read calls return parsed models and raise TournamentClientError on failure.
Actions (create, pay, invest, report) never raise: they return an ActionResult
carrying either the updated tournament or a human-readable error.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from solcraft.models.enums import TournamentOutcome, TournamentStatus
from solcraft.schemas.investment_schemas import InvestmentRead
from solcraft.schemas.player_schemas import PlayerProfileRead
from solcraft.schemas.tournament_schemas import TournamentRead
from solcraft.services import fee_service

logger = structlog.get_logger(__name__)

NOT_LOGGED_IN = "You must be logged in to perform this action."


class TournamentClientError(Exception):
    """Raised by read calls when the API cannot be reached or answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class ActionResult:
    success: bool
    tournament: Optional[TournamentRead] = None
    error: Optional[str] = None


def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        message = body.get("message") or body.get("detail")
        if isinstance(message, str) and message:
            return message
    return default


ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: Type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise TournamentClientError(f"Unexpected {model.__name__} data: {e.errors()[0]['msg']}")


def _parse_list(model: Type[ModelT], data: Any) -> List[ModelT]:
    if not isinstance(data, list):
        raise TournamentClientError(f"Unexpected {model.__name__} data: expected a list")
    return [_parse(model, item) for item in data]


def _decimal_text(value: Any) -> Optional[str]:
    # Amounts go over the wire as strings so no float rounding happens on the way
    parsed = fee_service.parse_amount(value)
    return str(parsed) if parsed is not None else None


class TournamentClient:
    """Synchronous client bound to one API base URL and, optionally, one user's token.

    Usage:
        with TournamentClient("http://localhost:8000/api", access_token=token) as client:
            result = client.pay_initial_fee(tournament_id=3, amount="7")
    """

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        headers = {"Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        self._client = httpx.Client(base_url=self.base_url, headers=headers, timeout=timeout, transport=transport)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "TournamentClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # --- reads ---

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            response = self._client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", path=path, error=str(e))
            raise TournamentClientError(str(e) or "Network error")
        if response.is_error:
            raise TournamentClientError(_error_message(response, f"Request failed ({response.status_code})"), response.status_code)
        try:
            return response.json()
        except ValueError:
            logger.warning("api_unexpected_response", path=path, status_code=response.status_code)
            raise TournamentClientError("Unexpected response from server", response.status_code)

    def _tournaments(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[TournamentRead]:
        return _parse_list(TournamentRead, self._get(path, params))

    def list_tournaments(self, status: Optional[TournamentStatus] = None, creator_id: Optional[int] = None) -> List[TournamentRead]:
        params: Dict[str, Any] = {}
        if status is not None:
            params["status"] = TournamentStatus(status).value
        if creator_id is not None:
            params["creator_id"] = creator_id
        return self._tournaments("/tournaments", params or None)

    def list_open_tournaments(self) -> List[TournamentRead]:
        return self._tournaments("/tournaments/open")

    def list_my_tournaments(self) -> List[TournamentRead]:
        if not self.is_authenticated:
            raise TournamentClientError(NOT_LOGGED_IN, 401)
        return self._tournaments("/tournaments/mine")

    def get_tournament(self, tournament_id: int) -> TournamentRead:
        return _parse(TournamentRead, self._get(f"/tournaments/{tournament_id}"))

    def list_investments(self, tournament_id: int) -> List[InvestmentRead]:
        return _parse_list(InvestmentRead, self._get(f"/tournaments/{tournament_id}/investments"))

    def get_my_investments(self, tournament_id: int) -> List[InvestmentRead]:
        if not self.is_authenticated:
            raise TournamentClientError(NOT_LOGGED_IN, 401)
        return _parse_list(InvestmentRead, self._get(f"/tournaments/{tournament_id}/investments/me"))

    def get_player_profile(self, user_id: int) -> PlayerProfileRead:
        return _parse(PlayerProfileRead, self._get(f"/players/{user_id}/profile"))

    # --- actions ---

    def _post_action(self, path: str, payload: Dict[str, Any], default_error: str) -> ActionResult:
        if not self.is_authenticated:
            return ActionResult(success=False, error=NOT_LOGGED_IN)
        try:
            response = self._client.post(path, json=payload)
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", path=path, error=str(e))
            return ActionResult(success=False, error=str(e) or default_error)

        if response.is_error:
            return ActionResult(success=False, error=_error_message(response, default_error))

        try:
            tournament = TournamentRead.model_validate(response.json()["tournament"])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.warning("api_unexpected_response", path=path, error=str(e))
            return ActionResult(success=False, error="Unexpected response from server")
        return ActionResult(success=True, tournament=tournament)

    def create_tournament(self, fields: Dict[str, Any]) -> ActionResult:
        """
        Creates a tournament. `fields` uses the API's field names; `target_pool_amount`
        and `name` are required, amounts may be numbers or numeric strings.
        """
        name = (fields.get("name") or "").strip()
        if not name:
            return ActionResult(success=False, error="Tournament name is required")

        target = _decimal_text(fields.get("target_pool_amount"))
        if target is None:
            return ActionResult(success=False, error="Target pool amount must be a positive number")

        payload: Dict[str, Any] = {
            "name": name,
            "description": fields.get("description"),
            "game_type": fields.get("game_type") or "Poker",
            "target_pool_amount": target,
        }

        ranking = fields.get("player_ranking")
        if ranking is not None:
            parsed_ranking = fee_service.parse_ranking(ranking)
            if parsed_ranking is None:
                return ActionResult(success=False, error=f"Unknown ranking tier: {ranking}")
            payload["player_ranking"] = parsed_ranking.value

        buy_in = fields.get("tournament_buy_in")
        if buy_in not in (None, ""):
            try:
                buy_in_amount = Decimal(str(buy_in))
            except ArithmeticError:
                return ActionResult(success=False, error="Tournament buy-in must be a number")
            if not buy_in_amount.is_finite() or buy_in_amount < 0:
                return ActionResult(success=False, error="Tournament buy-in must be a number")
            payload["tournament_buy_in"] = str(buy_in_amount)

        for optional in ("external_tournament_url", "funding_end_time"):
            if fields.get(optional):
                value = fields[optional]
                payload[optional] = value.isoformat() if hasattr(value, "isoformat") else value

        return self._post_action("/tournaments", payload, "Error creating the tournament")

    def pay_initial_fee(self, tournament_id: int, amount) -> ActionResult:
        amount_text = _decimal_text(amount)
        if amount_text is None:
            return ActionResult(success=False, error="Payment amount must be a positive number")
        return self._post_action(
            "/tournaments/pay_initial_fee",
            {"tournament_id": tournament_id, "amount": amount_text},
            "Error paying the initial fee",
        )

    def pay_guarantee(self, tournament_id: int, amount) -> ActionResult:
        amount_text = _decimal_text(amount)
        if amount_text is None:
            return ActionResult(success=False, error="Payment amount must be a positive number")
        return self._post_action(
            "/tournaments/pay_guarantee",
            {"tournament_id": tournament_id, "amount": amount_text},
            "Error paying the guarantee",
        )

    def invest_in_tournament(self, tournament_id: int, amount) -> ActionResult:
        amount_text = _decimal_text(amount)
        if amount_text is None:
            return ActionResult(success=False, error="Investment amount must be a positive number")
        return self._post_action(
            f"/tournaments/{tournament_id}/invest",
            {"amount": amount_text},
            "Error investing in the tournament",
        )

    def report_results(
        self,
        tournament_id: int,
        outcome,
        winnings_amount=None,
        notes: Optional[str] = None,
    ) -> ActionResult:
        try:
            parsed_outcome = TournamentOutcome(outcome)
        except ValueError:
            return ActionResult(success=False, error=f"Unknown outcome: {outcome}")

        payload: Dict[str, Any] = {"tournament_id": tournament_id, "outcome": parsed_outcome.value}
        if winnings_amount not in (None, ""):
            winnings_text = _decimal_text(winnings_amount)
            if winnings_text is None:
                return ActionResult(success=False, error="Winnings must be a positive number")
            payload["winnings_amount"] = winnings_text
        if notes:
            payload["notes"] = notes
        return self._post_action("/tournaments/report_results", payload, "Error reporting the tournament results")
