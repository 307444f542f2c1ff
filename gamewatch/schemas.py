from pydantic import BaseModel


class ActiveGamesResponse(BaseModel):
    games: list[str]


class LogEntryOut(BaseModel):
    timestamp: str
    level: str
    logger: str
    message: str


class LogsResponse(BaseModel):
    entries: list[LogEntryOut]
