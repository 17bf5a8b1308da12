# Import all models here to ensure they are registered with Base
from .user import User
from .player_profile import PlayerProfile
from .tournament import Tournament
from .investment import TournamentInvestment
from .enums import PlayerRanking, TournamentStatus, TournamentOutcome
