from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


WarningType = Literal["script", "unsupported_embed", "complex_html", "external_resource"]
WarningSeverity = Literal["info", "warning", "error"]


class Block(BaseModel):
    """One typed unit of migrated content.

    ``data`` follows the shape the block registry expects for ``type``;
    ``meta`` holds presentational extras.  ``children`` is only used by
    container block types.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: str
    version: int = 1
    data: Dict[str, Any] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)
    children: Optional[List["Block"]] = None


class ConversionWarning(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: WarningType
    severity: WarningSeverity
    message: str
    recommendation: str
    html_snippet: Optional[str] = Field(None, alias="htmlSnippet", max_length=200)


class ConversionStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_elements: int = Field(0, alias="totalElements")
    converted_blocks: int = Field(0, alias="convertedBlocks")
    skipped_elements: int = Field(0, alias="skippedElements")
    warnings: int = 0


class WidgetMapping(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    wa_type: str = Field(..., alias="waType")
    murmurant_type: str = Field(..., alias="murmurantType")
    position: int


class ConversionResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    blocks: List[Block] = Field(default_factory=list)
    warnings: List[ConversionWarning] = Field(default_factory=list)
    stats: ConversionStats = Field(default_factory=ConversionStats)
    widget_mapping: List[WidgetMapping] = Field(default_factory=list, alias="widgetMapping")


Block.model_rebuild()
