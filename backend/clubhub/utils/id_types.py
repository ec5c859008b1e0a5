from typing import NewType

AdminId = NewType("AdminId", int)
ClubId = NewType("ClubId", int)
PlayerId = NewType("PlayerId", int)
PlayerRoleId = NewType("PlayerRoleId", int)
TournamentId = NewType("TournamentId", int)
TournamentParticipantId = NewType("TournamentParticipantId", int)
TournamentPlayerStatsId = NewType("TournamentPlayerStatsId", int)
MatchId = NewType("MatchId", int)
MatchResultId = NewType("MatchResultId", int)
PointSystemTemplateId = NewType("PointSystemTemplateId", int)
StagePointId = NewType("StagePointId", int)
ConditionalRuleId = NewType("ConditionalRuleId", int)
PlayerTransferId = NewType("PlayerTransferId", int)
PlayerClubStatsId = NewType("PlayerClubStatsId", int)
