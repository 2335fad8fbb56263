from __future__ import annotations

"""Wire models for the history/session API payloads.

Field names follow the upstream JSON (camelCase); the Python attributes are
snake_case and either form is accepted on input.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from analytics.stats.types import PlayerDataPIT, StatsPIT, coerce_int, coerce_optional_int
from sessions.types import Session


def assume_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive and aware datetimes cannot be compared; treat naive as UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class StatsPITModel(_WireModel):
    winstreak: Optional[int] = None
    games_played: Optional[int] = Field(None, alias="gamesPlayed")
    wins: Optional[int] = None
    losses: Optional[int] = None
    beds_broken: Optional[int] = Field(None, alias="bedsBroken")
    beds_lost: Optional[int] = Field(None, alias="bedsLost")
    final_kills: Optional[int] = Field(None, alias="finalKills")
    final_deaths: Optional[int] = Field(None, alias="finalDeaths")
    kills: Optional[int] = None
    deaths: Optional[int] = None

    def to_domain(self) -> StatsPIT:
        # winstreak may be hidden upstream; every other counter defaults to 0
        return StatsPIT(
            winstreak=coerce_optional_int(self.winstreak),
            games_played=coerce_int(self.games_played),
            wins=coerce_int(self.wins),
            losses=coerce_int(self.losses),
            beds_broken=coerce_int(self.beds_broken),
            beds_lost=coerce_int(self.beds_lost),
            final_kills=coerce_int(self.final_kills),
            final_deaths=coerce_int(self.final_deaths),
            kills=coerce_int(self.kills),
            deaths=coerce_int(self.deaths),
        )


class PlayerDataPITModel(_WireModel):
    id: str = ""
    data_format_version: int = Field(1, alias="dataFormatVersion")
    uuid: str
    queried_at: datetime = Field(..., alias="queriedAt")
    experience: Optional[float] = None
    solo: StatsPITModel = Field(default_factory=StatsPITModel)
    doubles: StatsPITModel = Field(default_factory=StatsPITModel)
    threes: StatsPITModel = Field(default_factory=StatsPITModel)
    fours: StatsPITModel = Field(default_factory=StatsPITModel)
    overall: StatsPITModel = Field(default_factory=StatsPITModel)

    @field_validator("queried_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return assume_utc(value)

    def to_domain(self) -> PlayerDataPIT:
        experience = self.experience if self.experience is not None else 0
        if float(experience).is_integer():
            experience = int(experience)
        return PlayerDataPIT(
            id=self.id,
            uuid=self.uuid,
            queried_at=self.queried_at,
            experience=experience,
            solo=self.solo.to_domain(),
            doubles=self.doubles.to_domain(),
            threes=self.threes.to_domain(),
            fours=self.fours.to_domain(),
            overall=self.overall.to_domain(),
            data_format_version=self.data_format_version,
        )


class SessionModel(_WireModel):
    start: PlayerDataPITModel
    end: PlayerDataPITModel
    consecutive: bool
    extrapolated: bool = False

    def to_domain(self) -> Session:
        return Session(
            start=self.start.to_domain(),
            end=self.end.to_domain(),
            extrapolated=self.extrapolated,
            consecutive=self.consecutive,
        )


def snapshot_payload(player_data: PlayerDataPIT) -> dict:
    """Serialize a snapshot back to the upstream JSON shape."""

    def stats_payload(stats: StatsPIT) -> dict:
        return {
            "winstreak": stats.winstreak,
            "gamesPlayed": stats.games_played,
            "wins": stats.wins,
            "losses": stats.losses,
            "bedsBroken": stats.beds_broken,
            "bedsLost": stats.beds_lost,
            "finalKills": stats.final_kills,
            "finalDeaths": stats.final_deaths,
            "kills": stats.kills,
            "deaths": stats.deaths,
        }

    return {
        "id": player_data.id,
        "dataFormatVersion": player_data.data_format_version,
        "uuid": player_data.uuid,
        "queriedAt": player_data.queried_at.isoformat(),
        "experience": player_data.experience,
        "solo": stats_payload(player_data.solo),
        "doubles": stats_payload(player_data.doubles),
        "threes": stats_payload(player_data.threes),
        "fours": stats_payload(player_data.fours),
        "overall": stats_payload(player_data.overall),
    }


def session_payload(session: Session) -> dict:
    return {
        "start": snapshot_payload(session.start),
        "end": snapshot_payload(session.end),
        "extrapolated": session.extrapolated,
        "consecutive": session.consecutive,
    }
