from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ColorContext = Literal["heading", "text", "background", "link", "button"]
FontContext = Literal["heading", "body"]
ButtonVariant = Literal["primary", "secondary", "outline", "ghost"]


class ColorFrequency(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    color: str
    normalized_color: str = Field(..., alias="normalizedColor")
    count: int
    contexts: List[ColorContext] = Field(default_factory=list)


class FontFrequency(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    font: str
    normalized_font: str = Field(..., alias="normalizedFont")
    count: int
    contexts: List[FontContext] = Field(default_factory=list)


class ButtonStyleInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wa_class: str = Field(..., alias="waClass")
    count: int
    suggested_variant: ButtonVariant = Field(..., alias="suggestedVariant")


class ExtractedTheme(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    primary_color: Optional[str] = Field(None, alias="primaryColor")
    accent_color: Optional[str] = Field(None, alias="accentColor")
    colors: List[ColorFrequency] = Field(default_factory=list)
    heading_font: Optional[str] = Field(None, alias="headingFont")
    body_font: Optional[str] = Field(None, alias="bodyFont")
    fonts: List[FontFrequency] = Field(default_factory=list)
    button_styles: List[ButtonStyleInfo] = Field(default_factory=list, alias="buttonStyles")
    confidence: float = Field(0.5, ge=0.0, le=1.0)
