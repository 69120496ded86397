# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from courtdraw.models.match import Match  # noqa: F401
from courtdraw.models.participant import Participant  # noqa: F401
from courtdraw.models.tournament import Tournament  # noqa: F401
