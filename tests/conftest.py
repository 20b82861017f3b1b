"""Shared test fixtures for the bundlepatch test suite.

Collaborators (patch tool, signer, archiver) are replaced with in-process
fakes that record their calls. No external tools are executed.
"""

import zipfile
from pathlib import Path
from typing import AsyncIterator, Sequence
from unittest.mock import AsyncMock, patch

import pytest

from bundlepatch.pipeline.types import RunConfiguration
from bundlepatch.tools.archive import ZipArchiver
from bundlepatch.tools.signer import SignOptions


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

class FakePatcher:
    """Appends a marker to each artifact and records the call."""

    def __init__(self, marker: bytes = b"+patched"):
        self.marker = marker
        self.calls: list[tuple[Path, Path, Path]] = []

    async def patch(self, input_path: Path, output_path: Path, tmp_dir: Path) -> None:
        self.calls.append((Path(input_path), Path(output_path), Path(tmp_dir)))
        data = Path(input_path).read_bytes()
        Path(output_path).write_bytes(data + self.marker)


class FakeSigner:
    """Records sign() calls and yields one progress line per artifact."""

    def __init__(self):
        self.calls: list[tuple[list[Path], SignOptions]] = []

    async def sign(self, paths: Sequence[Path], options: SignOptions) -> AsyncIterator[str]:
        self.calls.append((list(paths), options))
        for path in paths:
            yield f"signed {Path(path).name}"


class RecordingArchiver:
    """Wraps ZipArchiver and records each call."""

    def __init__(self):
        self.inner = ZipArchiver()
        self.decompress_calls: list[tuple[Path, Path]] = []
        self.compress_calls: list[tuple[Path, Path]] = []

    async def decompress(self, bundle_path: Path, dest_dir: Path) -> None:
        self.decompress_calls.append((Path(bundle_path), Path(dest_dir)))
        await self.inner.decompress(bundle_path, dest_dir)

    async def compress(self, source_dir: Path, bundle_path: Path) -> None:
        self.compress_calls.append((Path(source_dir), Path(bundle_path)))
        await self.inner.compress(source_dir, bundle_path)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_bundle(path: Path, entries: dict[str, bytes]) -> Path:
    """Write a zip bundle with the given entry name -> content mapping."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return path


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def patcher() -> FakePatcher:
    return FakePatcher()


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def archiver() -> RecordingArchiver:
    return RecordingArchiver()


@pytest.fixture
def permission_fixup():
    """Replace the chmod fix-up with an AsyncMock."""
    with patch(
        "bundlepatch.pipeline.stages.grant_owner_read_write", new_callable=AsyncMock
    ) as mock_fixup:
        yield mock_fixup


@pytest.fixture
def xapk_bundle(tmp_path) -> Path:
    """An XAPK with a split manifest listing three artifacts out of order."""
    manifest = (
        '{"package_name": "com.example.app", "split_apks": ['
        '{"file": "config.xxhdpi.apk", "id": "config.xxhdpi"},'
        '{"file": "com.example.app.apk", "id": "base"},'
        '{"file": "config.arm64_v8a.apk", "id": "config.arm64_v8a"}]}'
    )
    return write_bundle(tmp_path / "input" / "app.xapk", {
        "manifest.json": manifest.encode(),
        "com.example.app.apk": b"base",
        "config.arm64_v8a.apk": b"arm64",
        "config.xxhdpi.apk": b"xxhdpi",
        "icon.png": b"png",
    })


@pytest.fixture
def make_config(tmp_path, patcher, signer, archiver):
    """Factory for RunConfiguration pointing at tmp_path."""

    def _make(input_path: Path, **overrides) -> RunConfiguration:
        values = {
            "input_path": input_path,
            "output_path": tmp_path / "output" / "app-patched.xapk",
            "tmp_dir": tmp_path / "work",
            "signer": signer,
            "patcher": patcher,
            "archiver": archiver,
        }
        values.update(overrides)
        return RunConfiguration(**values)

    return _make
