"""
Metadata probing for media assets.

Raster images are measured with Pillow, SVG documents by reading the root
element's ``width``/``height``/``viewBox`` attributes, and videos by running
``ffprobe`` and reading its flat key=value report.
"""
from __future__ import annotations

import mimetypes
import re
import shutil
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

from bs4 import BeautifulSoup
from loguru import logger
from PIL import Image, UnidentifiedImageError

from .core.errors import MediaIOError, ProbeFailed, ProbeUnavailable
from .core.models import AssetClass, ProbeResult, extension_of
from .core.storage import read_text


FFPROBE_ARGS: List[str] = [
    "-v",
    "error",
    "-of",
    "flat=s=_",
    "-select_streams",
    "v:0",
    "-show_entries",
    "stream=height,width",
]

_WIDTH_RE = re.compile(r"(?:^|_)width=\"?(\d+)", re.MULTILINE)
_HEIGHT_RE = re.compile(r"(?:^|_)height=\"?(\d+)", re.MULTILINE)
_LENGTH_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$")


class MetadataProber(ABC):
    """
    Strategy interface for measuring an asset.
    """

    @abstractmethod
    def probe(self, path: str, asset_class: AssetClass) -> ProbeResult:
        """Returns width, height and type token for the asset at ``path``."""


class ImageProber(MetadataProber):
    def probe(self, path: str, asset_class: AssetClass = AssetClass.IMAGE) -> ProbeResult:
        if extension_of(path) == "svg":
            return self._probe_svg(path)
        try:
            with Image.open(path) as im:
                width, height = im.size
                mime = Image.MIME.get(im.format or "", "")
                fmt = (im.format or "").lower()
        except FileNotFoundError as exc:
            raise ProbeFailed(f"Image not found: {path}", path) from exc
        except (UnidentifiedImageError, OSError) as exc:
            raise ProbeFailed(f"Unable to read image {path}: {exc}", path) from exc
        return ProbeResult(width=width, height=height, type=mime_subtype(mime) or fmt)

    def _probe_svg(self, path: str) -> ProbeResult:
        try:
            text = read_text(path)
        except (MediaIOError, UnicodeDecodeError) as exc:
            raise ProbeFailed(f"Unable to read SVG {path}: {exc}", path) from exc

        soup = BeautifulSoup(text, "html.parser")
        root = soup.find("svg")
        if root is None:
            raise ProbeFailed(f"No <svg> root element in {path}", path)

        width = _svg_length(root.get("width"))
        height = _svg_length(root.get("height"))
        if width is None or height is None:
            # html.parser lowercases attribute names
            view_box = root.get("viewbox") or root.get("viewBox")
            if view_box:
                parts = re.split(r"[\s,]+", view_box.strip())
                if len(parts) == 4:
                    try:
                        vb_width, vb_height = float(parts[2]), float(parts[3])
                    except ValueError:
                        vb_width = vb_height = None
                    if vb_width is not None and vb_height is not None:
                        if width is None and height is None:
                            width, height = vb_width, vb_height
                        elif width is None and vb_height:
                            width = height * vb_width / vb_height
                        elif height is None and vb_width:
                            height = width * vb_height / vb_width
        if width is None or height is None:
            raise ProbeFailed(f"SVG has no usable width/height or viewBox: {path}", path)
        return ProbeResult(width=round(width), height=round(height), type="svg")


class VideoProber(MetadataProber):
    """Measures the first video stream with ``ffprobe``.

    ffprobe is an external process; it blocks until the report is produced.
    """

    def __init__(self, executable: str = "ffprobe") -> None:
        self.executable = executable

    def probe(self, path: str, asset_class: AssetClass = AssetClass.VIDEO) -> ProbeResult:
        binary = shutil.which(self.executable)
        if binary is None:
            raise ProbeUnavailable(f"{self.executable} is not installed or not executable", path)
        if not Path(path).is_file():
            raise ProbeFailed(f"Video not found: {path}", path)

        cmd = [binary, *FFPROBE_ARGS, path]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ProbeUnavailable(f"{self.executable} could not be started: {exc}", path) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip()
            raise ProbeFailed(f"{self.executable} failed for {path}: {detail}", path) from exc

        width, height = parse_ffprobe_report(proc.stdout, path)
        return ProbeResult(width=width, height=height, type=video_type(path))


class LocalProber(MetadataProber):
    """Dispatches to the image or video prober by asset class."""

    def __init__(
        self,
        image: Optional[MetadataProber] = None,
        video: Optional[MetadataProber] = None,
    ) -> None:
        self._probers: Dict[AssetClass, MetadataProber] = {
            AssetClass.IMAGE: image or ImageProber(),
            AssetClass.VIDEO: video or VideoProber(),
        }

    def probe(self, path: str, asset_class: AssetClass) -> ProbeResult:
        return self._probers[asset_class].probe(path, asset_class)


def parse_ffprobe_report(report: str, path: str | None = None) -> tuple[int, int]:
    """Extract width/height from a flat ffprobe report; last occurrence wins."""
    widths = _WIDTH_RE.findall(report)
    heights = _HEIGHT_RE.findall(report)
    if not widths or not heights:
        raise ProbeFailed(f"ffprobe report has no width/height for {path}", path)
    return int(widths[-1]), int(heights[-1])


def mime_subtype(mime: str) -> str:
    """``image/svg+xml`` -> ``svg``; returns ``""`` for an empty MIME type."""
    if not mime or "/" not in mime:
        return ""
    return mime.split("/", 1)[1].split("+", 1)[0].lower()


def video_type(path: str) -> str:
    mime, _ = mimetypes.guess_type(path, strict=False)
    if mime and mime.startswith("video/"):
        return mime_subtype(mime)
    return extension_of(path)


def _svg_length(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = _LENGTH_RE.match(value)
    if not match:
        return None
    return float(match.group(1))
