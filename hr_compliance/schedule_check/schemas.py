"""Schedule-check Pydantic v2 schemas."""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_Days = Optional[int]


class ScheduleCheckFields(BaseModel):
    """All thresholds and durations, in days. ``None`` = not configured."""

    passport_check_days: _Days = Field(None, ge=0)
    visa_check_days: _Days = Field(None, ge=0)
    dbs_check_days: _Days = Field(None, ge=0)
    immigration_check_days: _Days = Field(None, ge=0)
    rtw_check_days: _Days = Field(None, ge=0)
    spot_check_days: _Days = Field(None, ge=0)
    appraisal_check_days: _Days = Field(None, ge=0)
    supervision_check_days: _Days = Field(None, ge=0)
    disciplinary_check_days: _Days = Field(None, ge=0)
    qa_check_days: _Days = Field(None, ge=0)

    spot_check_duration: _Days = Field(None, ge=0)
    supervision_duration: _Days = Field(None, ge=0)
    qa_check_duration: _Days = Field(None, ge=0)


class ScheduleCheckCreate(ScheduleCheckFields):
    company_id: uuid.UUID


class ScheduleCheckUpdate(ScheduleCheckFields):
    """Partial update — only fields present in the body are written."""


class ScheduleCheckOut(ScheduleCheckFields):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[uuid.UUID] = None
    company_id: uuid.UUID


class EffectiveThresholds(BaseModel):
    """Threshold actually used per category after defaults are applied."""

    company_id: uuid.UUID
    thresholds: dict[str, int]
