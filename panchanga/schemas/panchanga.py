"""Daily Panchanga record schemas."""

from __future__ import annotations

from datetime import date as date_cls, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    tz: str


class AyanamsaVM(BaseModel):
    name: str
    degrees: float


class VaraVM(BaseModel):
    number: int
    name: Optional[str] = None
    computed_at: str = "sunrise"


class TithiVM(BaseModel):
    number: int
    name: Optional[str] = None
    paksha: Literal["Shukla", "Krishna"]
    end: Optional[datetime] = None


class NakshatraVM(BaseModel):
    number: int
    name: Optional[str] = None
    pada: int
    end: Optional[datetime] = None


class YogaVM(BaseModel):
    number: int
    name: Optional[str] = None
    end: Optional[datetime] = None


class KaranaVM(BaseModel):
    number: int
    name: Optional[str] = None
    kind: Literal["Fixed", "Movable"]
    end: Optional[datetime] = None


class MoonVM(BaseModel):
    illumination_pct: float
    phase_angle: float
    waxing: bool
    phase_type: str


class WindowVM(BaseModel):
    kind: str
    start: datetime
    end: datetime


class MaasVM(BaseModel):
    name: Optional[str] = None
    system: str = "purnimanta"
    lunar_day: int
    paksha: Literal["Shukla", "Krishna"]
    is_adhika: bool = False


class SankrantiVM(BaseModel):
    sign: str
    name: str
    instant: datetime


class SignVM(BaseModel):
    number: int
    name: str
    upto: Optional[datetime] = None


class SamvatVM(BaseModel):
    year: int
    name: str


class SamvatsaraVM(BaseModel):
    name: str
    number: int


class PravishteVM(BaseModel):
    days_since_sankranti: int
    current_rashi: str
    last_sankranti_date: date_cls


class DailyPanchanga(BaseModel):
    date: date_cls
    location: Location

    sunrise: datetime
    sunset: datetime
    next_sunrise: datetime
    moonrise: Optional[datetime] = None
    moonset: Optional[datetime] = None

    ayanamsa: AyanamsaVM
    vara: VaraVM

    tithi: TithiVM
    nakshatra: NakshatraVM
    yoga: YogaVM
    karana: KaranaVM
    next_tithi: Optional[TithiVM] = None
    next_nakshatra: Optional[NakshatraVM] = None
    next_yoga: Optional[YogaVM] = None
    next_karana: Optional[KaranaVM] = None

    moon: MoonVM
    rahu_kalam: WindowVM
    yamagandam: WindowVM
    gulika_kalam: Optional[WindowVM] = None
    abhijit: Optional[WindowVM] = None

    maas: MaasVM
    sankranti: Optional[SankrantiVM] = None
    sun_sign: SignVM
    moon_sign: SignVM

    vikrama_samvat: SamvatVM
    shaka_samvat: SamvatVM
    samvatsara: SamvatsaraVM
    pravishte: Optional[PravishteVM] = None

    meta: dict = Field(default_factory=dict)
