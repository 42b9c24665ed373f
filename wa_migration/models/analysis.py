from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


ScriptPurpose = Literal[
    "carousel",
    "lightbox",
    "accordion",
    "tabs",
    "analytics",
    "countdown",
    "form-validation",
    "smooth-scroll",
    "sticky-header",
    "lazy-load",
    "social-share",
    "modal",
    "tooltip",
    "animation",
    "menu-toggle",
    "unknown",
]

ReplacementType = Literal["block", "built-in", "remove", "manual"]


class ScriptReplacement(BaseModel):
    """Native alternative offered for a classified script.

    ``remove``/``built-in`` mean the script can be dropped, ``block`` points
    at a native block type and ``manual`` hands the decision to a reviewer.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: ReplacementType
    block_type: Optional[str] = Field(None, alias="blockType")
    action: str
    instructions: str


class ScriptAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    purpose: ScriptPurpose
    description: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    replacement: Optional[ScriptReplacement] = None
    snippet: str = Field("", max_length=200)
