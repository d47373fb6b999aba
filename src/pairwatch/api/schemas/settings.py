from typing import Optional

from pydantic import BaseModel


class SettingValue(BaseModel):
    value: str


class SettingResponse(BaseModel):
    key: str
    value: Optional[str]
