from __future__ import annotations

import sys
from pathlib import Path

import pytest
from PIL import Image

sys.path.append(str(Path(__file__).resolve().parents[1]))

from mediaimports.core.models import AssetClass, ProbeResult
from mediaimports.probing import MetadataProber


class StubProber(MetadataProber):
    """Returns a fixed probe result and records every call."""

    def __init__(self, width: int = 280, height: int = 280, type: str = "jpeg") -> None:
        self.result = ProbeResult(width=width, height=height, type=type)
        self.calls: list[tuple[str, AssetClass]] = []

    def probe(self, path: str, asset_class: AssetClass) -> ProbeResult:
        self.calls.append((path, asset_class))
        return self.result


def make_jpeg(path: Path, size: tuple[int, int] = (280, 280)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, (200, 40, 40)).save(path, "JPEG")
    return path


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    make_jpeg(tmp_path / "media-file.jpg")
    return tmp_path


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Layout mirroring a JS project: ``<root>/test/files/media-file.jpg``."""
    make_jpeg(tmp_path / "test" / "files" / "media-file.jpg")
    (tmp_path / "test" / "files" / "media-file.webm").write_bytes(b"\x1aE\xdf\xa3" + b"\0" * 9000)
    return tmp_path
