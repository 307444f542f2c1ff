"""Data contract for play-by-play bundles exchanged with the fetch, filter and publish services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

EASTERN_TZ = ZoneInfo("America/New_York")

_WIRE_CONFIG = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Team(BaseModel):
    model_config = _WIRE_CONFIG

    id: str = Field(default="", alias="teamId")
    tricode: str = Field(default="", alias="triCode")


class Period(BaseModel):
    model_config = _WIRE_CONFIG

    current: int = Field(
        default=0,
        alias="Current",
        validation_alias=AliasChoices("Current", "current"),
    )


class FormattedPlay(BaseModel):
    model_config = _WIRE_CONFIG

    description: str = ""


class PlayEvent(BaseModel):
    model_config = _WIRE_CONFIG

    clock: str = ""
    description: str = ""
    person_id: str = Field(default="", alias="personId")
    team_id: str = Field(default="", alias="teamId")
    visiting_team_score: str = Field(default="", alias="vTeamScore")
    home_team_score: str = Field(default="", alias="hTeamScore")
    is_score_change: bool = Field(default=False, alias="isScoreChange")
    formatted: FormattedPlay = Field(default_factory=FormattedPlay)


class GameSnapshot(BaseModel):
    """
    State of a game at one poll. A new snapshot is decoded on every fetch.
    """

    model_config = _WIRE_CONFIG

    id: str = Field(default="", alias="gameId")
    start_time_utc: Optional[datetime] = Field(default=None, alias="startTimeUTC")
    visiting_team: Team = Field(default_factory=Team, alias="vTeam")
    home_team: Team = Field(default_factory=Team, alias="hTeam")
    period: Period = Field(default_factory=Period)
    active: bool = Field(default=False, alias="isGameActivated")

    @property
    def game_code(self) -> str:
        """Filter-service key: visiting team tricode followed by home team tricode."""
        return f"{self.visiting_team.tricode}{self.home_team.tricode}"

    def game_date(self) -> str | None:
        """Start date of the game (YYYYMMDD) in US/Eastern."""
        if self.start_time_utc is None:
            return None
        start = self.start_time_utc
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        return start.astimezone(EASTERN_TZ).strftime("%Y%m%d")


class PlayByPlayBundle(GameSnapshot):
    """A snapshot plus its chronological plays; the game fields sit at the top level."""

    plays: list[PlayEvent] = Field(
        default_factory=list,
        alias="Plays",
        validation_alias=AliasChoices("Plays", "plays"),
    )

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot.model_validate(self.model_dump(exclude={"plays"}))

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
