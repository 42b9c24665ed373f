from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


WaWidgetType = Literal[
    "events",
    "store-catalog",
    "store-product",
    "store-cart",
    "search",
    "social-profile",
    "custom-menu",
    "slideshow",
    "photo-album",
    "login",
    "member-directory",
    "donation",
    "membership-app",
    "content",
    "unknown",
]

Alignment = Literal["left", "center", "right"]
Orientation = Literal["horizontal", "vertical"]


class _Props(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class EventLink(_Props):
    title: str
    url: str
    date: Optional[str] = None


class EventsWidgetProps(_Props):
    kind: Literal["events"] = "events"
    view: Literal["list", "calendar", "unknown"] = "unknown"
    timezone: Optional[str] = None
    event_count: int = Field(0, alias="eventCount")
    events: List[EventLink] = Field(default_factory=list)


class CatalogProduct(_Props):
    name: str = ""
    price: str = ""
    image_url: Optional[str] = Field(None, alias="imageUrl")
    product_url: str = Field("", alias="productUrl")


class StoreCatalogWidgetProps(_Props):
    kind: Literal["store-catalog"] = "store-catalog"
    products: List[CatalogProduct] = Field(default_factory=list)
    product_count: int = Field(0, alias="productCount")


class StoreProductWidgetProps(_Props):
    kind: Literal["store-product"] = "store-product"
    name: str = ""
    price: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")


class SearchWidgetProps(_Props):
    kind: Literal["search"] = "search"
    placeholder: str = "Enter search string"
    alignment: Alignment = "left"
    action_url: Optional[str] = Field(None, alias="actionUrl")


class SocialPlatform(_Props):
    name: str
    url: str


class SocialProfileWidgetProps(_Props):
    kind: Literal["social-profile"] = "social-profile"
    orientation: Orientation = "horizontal"
    alignment: Alignment = "left"
    platforms: List[SocialPlatform] = Field(default_factory=list)


class MenuItem(_Props):
    label: str
    url: str
    has_submenu: bool = Field(False, alias="hasSubmenu")


class CustomMenuWidgetProps(_Props):
    kind: Literal["custom-menu"] = "custom-menu"
    orientation: Orientation = "horizontal"
    alignment: Alignment = "left"
    items: List[MenuItem] = Field(default_factory=list)


class SlideImage(_Props):
    src: str
    caption: Optional[str] = None


class SlideshowWidgetProps(_Props):
    kind: Literal["slideshow"] = "slideshow"
    transition_time: int = Field(3000, alias="transitionTime")  # milliseconds
    transition_effect: str = Field("simpleFade", alias="transitionEffect")
    auto_advance: bool = Field(True, alias="autoAdvance")
    image_count: int = Field(0, alias="imageCount")
    images: List[SlideImage] = Field(default_factory=list)


class AlbumImage(_Props):
    src: str
    thumbnail: Optional[str] = None
    caption: Optional[str] = None


class PhotoAlbumWidgetProps(_Props):
    kind: Literal["photo-album"] = "photo-album"
    album_id: Optional[str] = Field(None, alias="albumId")
    image_count: int = Field(0, alias="imageCount")
    images: List[AlbumImage] = Field(default_factory=list)


class Padding(_Props):
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


class ContentWidgetProps(_Props):
    kind: Literal["content"] = "content"
    padding: Padding = Field(default_factory=Padding)
    editable_area_id: Optional[str] = Field(None, alias="editableAreaId")
    is_stretch: bool = Field(False, alias="isStretch")


class EmptyWidgetProps(_Props):
    """Widgets recognised by class name but with nothing worth extracting."""

    kind: Literal[
        "store-cart",
        "login",
        "member-directory",
        "donation",
        "membership-app",
        "unknown",
    ] = "unknown"


WidgetProperties = Annotated[
    Union[
        EventsWidgetProps,
        StoreCatalogWidgetProps,
        StoreProductWidgetProps,
        SearchWidgetProps,
        SocialProfileWidgetProps,
        CustomMenuWidgetProps,
        SlideshowWidgetProps,
        PhotoAlbumWidgetProps,
        ContentWidgetProps,
        EmptyWidgetProps,
    ],
    Field(discriminator="kind"),
]


class ExtractedWidgetConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: WaWidgetType
    style_variant: Optional[str] = Field(None, alias="styleVariant")
    properties: WidgetProperties
    raw_classes: List[str] = Field(default_factory=list, alias="rawClasses")
    location: str = ""
