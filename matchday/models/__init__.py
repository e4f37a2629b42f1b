from matchday.models.user import User
from matchday.models.team import Team
from matchday.models.player import Player
from matchday.models.match import Match, MatchStatus
from matchday.models.match_event import MatchEvent, MatchEventType
from matchday.models.match_vote import MatchVote
from matchday.models.motm_award import MotmAward
from matchday.models.notification import Notification
