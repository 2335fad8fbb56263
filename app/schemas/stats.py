from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from analytics.stats.types import GamemodeKey, StatKey, VariantKey

from .playerdata import PlayerDataPITModel, SessionModel, assume_utc


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ComputeStatsRequest(_Request):
    snapshot: PlayerDataPITModel
    history: List[PlayerDataPITModel] = Field(default_factory=list)
    gamemode: GamemodeKey = "overall"
    variant: VariantKey = "overall"
    stats: Optional[List[StatKey]] = None  # None -> every stat


class LevelRequest(_Request):
    experience: float = Field(..., ge=0)


class ProgressionRequest(_Request):
    tracking_history: Optional[List[PlayerDataPITModel]] = Field(None, alias="trackingHistory")
    current: Optional[PlayerDataPITModel] = None
    stat: StatKey
    gamemode: GamemodeKey = "overall"
    tracking_end: Optional[datetime] = Field(None, alias="trackingEnd")
    reference_date: Optional[datetime] = Field(None, alias="referenceDate")

    @field_validator("tracking_end", "reference_date")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return assume_utc(value)


class ExtrapolateSessionsRequest(_Request):
    sessions: List[SessionModel] = Field(default_factory=list)
    history: Optional[List[PlayerDataPITModel]] = None


class ChartDataRequest(_Request):
    histories: List[List[PlayerDataPITModel]] = Field(default_factory=list)


class IntervalsRequest(_Request):
    type: Literal["contained", "until"] = "contained"
    date: datetime
