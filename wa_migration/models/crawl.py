"""
Input records handed over by the site crawler.

Only the fields the conversion pipeline reads are modelled; anything else
present in a crawl report JSON is ignored on load.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CrawlModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CustomHtmlBlock(_CrawlModel):
    html_snippet: str = Field("", alias="htmlSnippet")
    location: str = ""
    contains_script: bool = Field(False, alias="containsScript")
    contains_iframe: bool = Field(False, alias="containsIframe")
    contains_form: bool = Field(False, alias="containsForm")
    external_urls: List[str] = Field(default_factory=list, alias="externalUrls")


class EmbedInfo(_CrawlModel):
    type: str = "iframe"
    src: str
    domain: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None


class ImageInfo(_CrawlModel):
    src: str
    alt: Optional[str] = None
    is_external: bool = Field(False, alias="isExternal")


class PageContent(_CrawlModel):
    url: str
    title: str = ""
    custom_html: List[CustomHtmlBlock] = Field(default_factory=list, alias="customHtml")
    embeds: List[EmbedInfo] = Field(default_factory=list)
    images: List[ImageInfo] = Field(default_factory=list)


class CrawlConfig(_CrawlModel):
    base_url: str = Field("", alias="baseUrl")


class CrawlReport(_CrawlModel):
    config: CrawlConfig = Field(default_factory=CrawlConfig)
    pages: List[PageContent] = Field(default_factory=list)
