from heliclockter import datetime_utc
from pydantic import BaseModel, Field

from clubhub.models.db.shared import BaseModelORM
from clubhub.utils.id_types import ClubId, PlayerClubStatsId, PlayerId, PlayerTransferId


class TransferBody(BaseModel):
    player_id: PlayerId
    to_club_id: ClubId | None = None
    transfer_date: datetime_utc | None = None
    notes: str | None = Field(default=None, max_length=500)


class PlayerTransferInsertable(BaseModelORM):
    player_id: PlayerId
    from_club_id: ClubId | None = None
    to_club_id: ClubId | None = None
    transfer_date: datetime_utc
    notes: str | None = None


class PlayerTransfer(PlayerTransferInsertable):
    id: PlayerTransferId


class PlayerTransferWithNames(PlayerTransfer):
    player_name: str
    from_club_name: str | None = None
    to_club_name: str | None = None


class PlayerClubStats(BaseModelORM):
    id: PlayerClubStatsId
    player_id: PlayerId
    club_id: ClubId | None = None
    joined_at: datetime_utc
    left_at: datetime_utc | None = None
