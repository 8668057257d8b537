"""Brand profile model — supplied whole by the caller, never mutated."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BrandColors(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    primary_text: str = Field(default="", alias="primaryText")  # dominant logo color
    text: str = ""  # dedicated text color; falls back to primary_text
    background: str = ""


class ContactInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    phone: str = ""
    email: str = ""
    website: str = ""
    address: str = ""


class BrandProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    business_name: str = ""
    tagline: str = ""
    logo_url: str = ""
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    colors: BrandColors = Field(default_factory=BrandColors)
