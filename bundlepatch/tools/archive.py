"""Bundle archive transcoding.

XAPK and APKS bundles are plain zip containers. ZipArchiver unpacks one
into a working directory and packs a working directory back into a
bundle. zipfile is blocking, so both operations run in a worker thread.
"""

import asyncio
import logging
import zipfile
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class Archiver(Protocol):
    async def decompress(self, bundle_path: Path, dest_dir: Path) -> None:
        """Extract bundle_path into dest_dir, creating it if needed."""

    async def compress(self, source_dir: Path, bundle_path: Path) -> None:
        """Write every file under source_dir into a new bundle at bundle_path."""


class ZipArchiver:
    """Archiver for zip-based bundles."""

    def __init__(self, compression: int = zipfile.ZIP_DEFLATED):
        self.compression = compression

    async def decompress(self, bundle_path: Path, dest_dir: Path) -> None:
        logger.info("Extracting %s into %s", bundle_path, dest_dir)
        await asyncio.to_thread(self._extract, Path(bundle_path), Path(dest_dir))

    async def compress(self, source_dir: Path, bundle_path: Path) -> None:
        logger.info("Compressing %s into %s", source_dir, bundle_path)
        await asyncio.to_thread(self._pack, Path(source_dir), Path(bundle_path))

    def _extract(self, bundle_path: Path, dest_dir: Path) -> None:
        dest_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(bundle_path) as archive:
            archive.extractall(dest_dir)
            logger.debug("Extracted %d entries", len(archive.namelist()))

    def _pack(self, source_dir: Path, bundle_path: Path) -> None:
        bundle_path.parent.mkdir(parents=True, exist_ok=True)
        files = sorted((p for p in source_dir.rglob("*") if p.is_file()), key=str)
        with zipfile.ZipFile(bundle_path, "w", compression=self.compression) as archive:
            for path in files:
                archive.write(path, path.relative_to(source_dir).as_posix())
        logger.debug("Packed %d files", len(files))
