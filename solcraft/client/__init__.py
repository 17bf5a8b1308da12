from .tournament_client import ActionResult, TournamentClient, TournamentClientError
