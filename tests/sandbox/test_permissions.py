"""Tests for the post-extraction permission fix-up."""

import os
import stat
import sys
from unittest.mock import AsyncMock, patch

import pytest

from bundlepatch.sandbox.permissions import grant_owner_read_write, needs_permission_fixup


class TestGrantOwnerReadWrite:
    @pytest.mark.asyncio
    async def test_runs_chmod_on_unix(self, tmp_path):
        with patch("sys.platform", "linux"), patch(
            "bundlepatch.sandbox.permissions.run_tool", new_callable=AsyncMock
        ) as mock_run:
            await grant_owner_read_write(tmp_path)

        mock_run.assert_awaited_once_with(["chmod", "-R", "u+rw", str(tmp_path)])

    @pytest.mark.asyncio
    async def test_skipped_on_windows(self, tmp_path):
        with patch("sys.platform", "win32"), patch(
            "bundlepatch.sandbox.permissions.run_tool", new_callable=AsyncMock
        ) as mock_run:
            await grant_owner_read_write(tmp_path)

        mock_run.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.skipif(sys.platform == "win32", reason="needs chmod")
    async def test_restores_owner_write_bit(self, tmp_path):
        target = tmp_path / "nested" / "base.apk"
        target.parent.mkdir()
        target.write_bytes(b"apk")
        os.chmod(target, stat.S_IRUSR)

        await grant_owner_read_write(tmp_path)

        mode = target.stat().st_mode
        assert mode & stat.S_IRUSR
        assert mode & stat.S_IWUSR


def test_needs_permission_fixup_follows_platform():
    with patch("sys.platform", "darwin"):
        assert needs_permission_fixup() is True
    with patch("sys.platform", "win32"):
        assert needs_permission_fixup() is False
