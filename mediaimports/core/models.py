"""Data models shared by the resolver, the binding mapper and the renderer."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Literal, Optional, Tuple, Union


DEFAULT_IMAGE_EXTENSIONS: Tuple[str, ...] = (
    "jpeg",
    "jpg",
    "png",
    "gif",
    "webp",
    "bmp",
    "tiff",
    "tif",
    "ico",
    "cur",
    "icns",
    "psd",
    "tga",
    "dds",
    "jp2",
    "j2c",
    "svg",
)

DEFAULT_VIDEO_EXTENSIONS: Tuple[str, ...] = ("mp4", "webm", "ogv")


class AssetClass(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True, slots=True)
class HashOptions:
    delimiter: str = "-"
    length: Optional[int] = None
    algo: str = "md5"


@dataclass(frozen=True, slots=True)
class Base64Options:
    max_size: int = 8192


@dataclass(frozen=True, slots=True)
class ResolutionConfig:
    """Normalized options for one compilation unit.

    ``hash`` and ``base64`` are ``None`` when the feature is disabled.
    """

    base_dir: str = field(default_factory=os.getcwd)
    pathname_prefix: str = ""
    output_root: Optional[str] = None
    image_extensions: Tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    video_extensions: Tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS
    hash: Optional[HashOptions] = None
    base64: Optional[Base64Options] = None

    def classify(self, path: str) -> Optional[AssetClass]:
        ext = extension_of(path)
        if not ext:
            return None
        if ext in self.video_extensions:
            return AssetClass.VIDEO
        if ext in self.image_extensions:
            return AssetClass.IMAGE
        return None

    def handles(self, path: str) -> bool:
        return self.classify(path) is not None


@dataclass(frozen=True, slots=True)
class ProbeResult:
    width: int
    height: int
    type: str


@dataclass(frozen=True, slots=True)
class MediaDescriptor:
    """Resolved description of one media reference."""

    pathname: str
    src: str
    width: int
    height: int
    aspect_ratio: float
    height_to_width_ratio: float
    type: str
    content: Optional[str] = None
    hash: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the public field names, leaving out absent fields."""
        data = {
            "pathname": self.pathname,
            "src": self.src,
            "hash": self.hash,
            "type": self.type,
            "width": self.width,
            "height": self.height,
            "aspectRatio": self.aspect_ratio,
            "content": self.content,
            "heightToWidthRatio": self.height_to_width_ratio,
        }
        return {key: value for key, value in data.items() if value is not None}


SpecifierKind = Literal["default", "named", "namespace"]
StatementKind = Literal["import", "export"]


@dataclass(frozen=True, slots=True)
class Specifier:
    """One entry of an import/export specifier list.

    ``imported`` is the name looked up in the descriptor, ``local`` is the
    name the output binding receives. For ``default`` specifiers both are the
    bound name (``default`` for ``export {default} from``).
    """

    kind: SpecifierKind
    imported: str
    local: str


@dataclass(frozen=True, slots=True)
class Statement:
    kind: StatementKind
    source: str
    specifiers: Tuple[Specifier, ...] = ()


BindingValue = Union[str, int, float, Dict[str, Any]]


@dataclass(frozen=True, slots=True)
class Binding:
    name: str
    value: BindingValue
    exported: bool = False


def extension_of(path: str) -> str:
    """Lowercase final extension without the dot (``"jpg"`` for ``a/b.JPG``)."""
    name = path.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()
