from .view import InvestorDashboard, PlayerDashboard, TournamentCard, build_card, creation_fee_preview
