# logrelay/models.py
from typing import Optional

from pydantic import BaseModel, StrictStr, field_validator

SUCCESS_MESSAGE = "Log entry written successfully"


class LogRequest(BaseModel):
    data: StrictStr

    @field_validator("data")
    @classmethod
    def must_be_utf8(cls, v: str) -> str:
        # json.loads lets lone surrogates ("\ud800") through; the log file cannot hold them
        try:
            v.encode("utf-8")
        except UnicodeEncodeError:
            raise ValueError("data is not valid UTF-8 text") from None
        return v


class LogResponse(BaseModel):
    status: str
    message: str

    @classmethod
    def success(cls) -> "LogResponse":
        return cls(status="success", message=SUCCESS_MESSAGE)


class TelegramMessage(BaseModel):
    chat_id: str
    text: str
    parse_mode: Optional[str] = None
