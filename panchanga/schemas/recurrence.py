"""Recurring event schemas consumed by the recurrence engine."""

from __future__ import annotations

from datetime import date as date_cls
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RecurrenceType(str, Enum):
    NONE = "none"
    YEARLY_LUNAR = "yearly_lunar"
    MONTHLY_LUNAR = "monthly_lunar"
    YEARLY_SANKRANTI = "yearly_sankranti"


class AdhikaPolicy(str, Enum):
    EXCLUDE = "exclude"
    ONLY = "only"
    BOTH = "both"


class RecurrenceRule(BaseModel):
    type: RecurrenceType = RecurrenceType.NONE
    tithi: Optional[int] = Field(default=None, ge=1, le=30)
    maas: Optional[str] = None
    sankranti: Optional[str] = None
    adhika_policy: AdhikaPolicy = AdhikaPolicy.EXCLUDE


class Event(BaseModel):
    id: str
    name: str
    rule: RecurrenceRule = Field(default_factory=RecurrenceRule)


class DateWindow(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: date_cls
    end: date_cls

    @model_validator(mode="after")
    def _ordered(self) -> "DateWindow":
        if self.end < self.start:
            raise ValueError("window end precedes start")
        return self


class Occurrence(BaseModel):
    date: date_cls
    end_date: Optional[date_cls] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    notes: Optional[str] = None
