from schemas.shared import CamelModel, MessageResponse, PaginationMeta
from schemas.auth import ChangePasswordRequest, LoginRequest, RegisterRequest, SessionResponse, SessionUserResponse
from schemas.access import AccessDecisionResponse
from schemas.match import MatchCalendar, MatchCalendarEntry, MatchCalendarForm, MatchHistory, MatchHistoryForm
from schemas.team import RosterPlayer, Team, TeamDetailResponse, TeamForm
from schemas.talent import (
    FollowResponse, PhotoUploadResponse, Talent, TalentDetailResponse, TalentOnboardingForm,
    TalentProfileResponse, TalentSearchItem, TalentSearchResponse, TalentUpdateForm,
)
from schemas.scout import Scout, ScoutDashboardResponse, ScoutForm, ScoutingReport, ScoutingReportForm
from schemas.user import BackupRequest, CascadeDeleteResponse, SystemStats, User, UserForm, UserListResponse

__all__ = [
    "CamelModel", "MessageResponse", "PaginationMeta",
    "ChangePasswordRequest", "LoginRequest", "RegisterRequest", "SessionResponse", "SessionUserResponse",
    "AccessDecisionResponse",
    "MatchCalendar", "MatchCalendarEntry", "MatchCalendarForm", "MatchHistory", "MatchHistoryForm",
    "RosterPlayer", "Team", "TeamDetailResponse", "TeamForm",
    "FollowResponse", "PhotoUploadResponse", "Talent", "TalentDetailResponse", "TalentOnboardingForm",
    "TalentProfileResponse", "TalentSearchItem", "TalentSearchResponse", "TalentUpdateForm",
    "Scout", "ScoutDashboardResponse", "ScoutForm", "ScoutingReport", "ScoutingReportForm",
    "BackupRequest", "CascadeDeleteResponse", "SystemStats", "User", "UserForm", "UserListResponse",
]
