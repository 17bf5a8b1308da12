from fastapi.testclient import TestClient

from solcraft.models import TournamentStatus

API = "/api"


def _create(client, headers, **overrides):
    payload = {"name": "Sunday Million Backing", "target_pool_amount": "100"}
    payload.update(overrides)
    return client.post(f"{API}/tournaments", json=payload, headers=headers)


class TestTournamentLifecycle:

    def test_full_lifecycle(self, client: TestClient, player, investor, admin, auth_headers):
        player_headers = auth_headers(player)

        response = _create(client, player_headers)
        assert response.status_code == 201
        tournament = response.json()["tournament"]
        tournament_id = tournament["id"]
        assert tournament["status"] == "pending_initial_payment"
        assert tournament["initial_platform_fee_amount"] == 7.0
        assert tournament["player_guarantee_amount_required"] == 25.0

        response = client.post(
            f"{API}/tournaments/pay_initial_fee",
            json={"tournament_id": tournament_id, "amount": "7"},
            headers=player_headers,
        )
        assert response.status_code == 200
        assert response.json()["tournament"]["status"] == "pending_guarantee"

        response = client.post(
            f"{API}/tournaments/pay_guarantee",
            json={"tournament_id": tournament_id, "amount": "25"},
            headers=player_headers,
        )
        assert response.json()["tournament"]["status"] == "funding_open"

        open_ids = [t["id"] for t in client.get(f"{API}/tournaments/open").json()]
        assert open_ids == [tournament_id]

        response = client.post(f"{API}/tournaments/{tournament_id}/invest", json={"amount": "100"}, headers=auth_headers(investor))
        assert response.status_code == 200
        assert response.json()["tournament"]["status"] == "funding_complete"
        assert response.json()["tournament"]["current_pool_amount"] == 100.0

        for step in ("funds_transferred_to_player", "in_progress", "awaiting_results"):
            response = client.patch(
                f"{API}/tournaments/{tournament_id}/status", json={"status": step}, headers=auth_headers(admin)
            )
            assert response.status_code == 200
            assert response.json()["tournament"]["status"] == step

        response = client.post(
            f"{API}/tournaments/report_results",
            json={"tournament_id": tournament_id, "outcome": "won", "winnings_amount": "250"},
            headers=player_headers,
        )
        assert response.status_code == 200
        assert response.json()["tournament"]["status"] == "completed_won"
        assert response.json()["tournament"]["winnings_amount"] == 250.0

    def test_create_requires_authentication(self, client: TestClient):
        response = _create(client, headers={})
        assert response.status_code == 401
        assert response.json() == {"message": "Not authenticated"}

    def test_invalid_token(self, client: TestClient):
        response = _create(client, headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json() == {"message": "Could not validate credentials"}

    def test_create_validation_error_uses_message_body(self, client: TestClient, player, auth_headers):
        response = _create(client, auth_headers(player), target_pool_amount="-5")
        assert response.status_code == 422
        assert response.json()["message"].startswith("target_pool_amount")

    def test_create_rejects_amounts_beyond_six_decimals(self, client: TestClient, player, auth_headers):
        response = _create(client, auth_headers(player), target_pool_amount="0.0000001")
        assert response.status_code == 422
        assert response.json()["message"].startswith("target_pool_amount")

    def test_create_rejects_fees_that_round_to_zero(self, client: TestClient, player, auth_headers):
        response = _create(client, auth_headers(player), target_pool_amount="0.000001")
        assert response.status_code == 400
        assert "too small" in response.json()["message"]
        assert client.get(f"{API}/tournaments").json() == []

    def test_create_without_profile(self, client: TestClient, player_without_profile, auth_headers):
        response = _create(client, auth_headers(player_without_profile))
        assert response.status_code == 400
        assert "player profile" in response.json()["message"]


class TestPaymentRoutes:

    def test_guarantee_before_fee_leaves_state_unchanged(self, client: TestClient, player, auth_headers, make_tournament):
        tournament = make_tournament(player)

        response = client.post(
            f"{API}/tournaments/pay_guarantee",
            json={"tournament_id": tournament.id, "amount": "25"},
            headers=auth_headers(player),
        )
        assert response.status_code == 409
        assert "message" in response.json()

        current = client.get(f"{API}/tournaments/{tournament.id}").json()
        assert current["status"] == "pending_initial_payment"
        assert current["player_guarantee_paid"] is False

    def test_sub_scale_payment_is_rejected(self, client: TestClient, player, auth_headers, make_tournament):
        tournament = make_tournament(player)
        response = client.post(
            f"{API}/tournaments/pay_initial_fee",
            json={"tournament_id": tournament.id, "amount": "0.0000005"},
            headers=auth_headers(player),
        )
        assert response.status_code == 422
        assert response.json()["message"].startswith("amount")

        current = client.get(f"{API}/tournaments/{tournament.id}").json()
        assert current["status"] == "pending_initial_payment"
        assert current["initial_platform_fee_paid"] is False

    def test_other_user_cannot_pay(self, client: TestClient, player, investor, auth_headers, make_tournament):
        tournament = make_tournament(player)
        response = client.post(
            f"{API}/tournaments/pay_initial_fee",
            json={"tournament_id": tournament.id, "amount": "7"},
            headers=auth_headers(investor),
        )
        assert response.status_code == 403

    def test_unknown_tournament(self, client: TestClient, player, auth_headers):
        response = client.post(
            f"{API}/tournaments/pay_initial_fee",
            json={"tournament_id": 999, "amount": "7"},
            headers=auth_headers(player),
        )
        assert response.status_code == 404
        assert response.json() == {"message": "Tournament not found"}


class TestInvestRoutes:

    def test_overfill_rejected(self, client: TestClient, player, investor, auth_headers, make_tournament):
        tournament = make_tournament(player, status=TournamentStatus.FUNDING_OPEN, current="80")
        response = client.post(f"{API}/tournaments/{tournament.id}/invest", json={"amount": "25"}, headers=auth_headers(investor))
        assert response.status_code == 400
        assert "20 SOL" in response.json()["message"]

        assert client.get(f"{API}/tournaments/{tournament.id}").json()["current_pool_amount"] == 80.0
        assert client.get(f"{API}/tournaments/{tournament.id}/investments").json() == []

    def test_investments_listed_for_tournament_and_investor(self, client: TestClient, player, investor, auth_headers, make_tournament):
        tournament = make_tournament(player, status=TournamentStatus.FUNDING_OPEN)
        headers = auth_headers(investor)
        client.post(f"{API}/tournaments/{tournament.id}/invest", json={"amount": "10"}, headers=headers)
        client.post(f"{API}/tournaments/{tournament.id}/invest", json={"amount": "15"}, headers=headers)

        everyone = client.get(f"{API}/tournaments/{tournament.id}/investments").json()
        assert [inv["amount"] for inv in everyone] == [10.0, 15.0]

        mine = client.get(f"{API}/tournaments/{tournament.id}/investments/me", headers=headers).json()
        assert len(mine) == 2
        assert client.get(f"{API}/tournaments/{tournament.id}/investments/me", headers=auth_headers(player)).json() == []

        portfolio = client.get(f"{API}/investments/me", headers=headers).json()
        assert portfolio["total_invested"] == 25.0
        assert portfolio["tournaments_backed"] == 1

    def test_invest_requires_open_funding(self, client: TestClient, player, investor, auth_headers, make_tournament):
        tournament = make_tournament(player, status=TournamentStatus.PENDING_GUARANTEE)
        response = client.post(f"{API}/tournaments/{tournament.id}/invest", json={"amount": "10"}, headers=auth_headers(investor))
        assert response.status_code == 409


class TestStatusAndListingRoutes:

    def test_unknown_status_is_rejected(self, client: TestClient, player, admin, auth_headers, make_tournament):
        tournament = make_tournament(player)
        response = client.patch(f"{API}/tournaments/{tournament.id}/status", json={"status": "paused"}, headers=auth_headers(admin))
        assert response.status_code == 400
        assert "paused" in response.json()["message"]

    def test_unknown_status_filter(self, client: TestClient):
        response = client.get(f"{API}/tournaments", params={"status": "paused"})
        assert response.status_code == 400

    def test_list_filters(self, client: TestClient, player, investor, auth_headers, make_tournament):
        open_one = make_tournament(player, status=TournamentStatus.FUNDING_OPEN)
        make_tournament(player, status=TournamentStatus.CANCELLED)

        by_status = client.get(f"{API}/tournaments", params={"status": "funding_open"}).json()
        assert [t["id"] for t in by_status] == [open_one.id]
        assert len(client.get(f"{API}/tournaments", params={"creator_id": player.id}).json()) == 2

        assert len(client.get(f"{API}/tournaments/mine", headers=auth_headers(player)).json()) == 2
        assert client.get(f"{API}/tournaments/mine", headers=auth_headers(investor)).json() == []

    def test_get_missing_tournament(self, client: TestClient):
        response = client.get(f"{API}/tournaments/12345")
        assert response.status_code == 404
        assert response.json() == {"message": "Tournament not found"}


class TestFeeAndPlayerRoutes:

    def test_fee_quote(self, client: TestClient):
        response = client.post(f"{API}/fees/quote", json={"ranking": "gold", "target_pool_amount": "100"})
        assert response.status_code == 200
        assert response.json() == {
            "ranking": "GOLD",
            "target_pool_amount": 100.0,
            "initial_fee_amount": 7.0,
            "initial_fee_pct": 7.0,
            "guarantee_amount": 25.0,
            "guarantee_pct": 25.0,
        }

    def test_fee_quote_invalid(self, client: TestClient):
        response = client.post(f"{API}/fees/quote", json={"ranking": "DIAMOND", "target_pool_amount": 100})
        assert response.status_code == 400

    def test_player_profile(self, client: TestClient, player, investor):
        response = client.get(f"{API}/players/{player.id}/profile")
        assert response.status_code == 200
        assert response.json()["ranking"] == "GOLD"

        assert client.get(f"{API}/players/{investor.id}/profile").status_code == 404
