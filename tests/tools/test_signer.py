"""Tests for the uber-apk-signer wrapper. The JVM is never started."""

from pathlib import Path
from unittest.mock import patch

import pytest

from bundlepatch.core.config import Settings
from bundlepatch.tools.signer import SignOptions, UberApkSigner


async def _fake_stream(lines):
    for line in lines:
        yield line


class TestBuildCommand:
    def test_skips_zipalign_when_disabled(self):
        signer = UberApkSigner(jar_path="/opt/uber.jar", java_path="/usr/bin/java")

        command = signer.build_command(
            [Path("/b/base.apk"), Path("/b/config.en.apk")], SignOptions(zipalign=False)
        )

        assert command == [
            "/usr/bin/java", "-jar", "/opt/uber.jar",
            "--allowResign", "--overwrite", "--skipZipAlign",
            "--apks", "/b/base.apk", "/b/config.en.apk",
        ]

    def test_keeps_zipalign_by_default(self):
        command = UberApkSigner(jar_path="u.jar").build_command(
            [Path("/b/base.apk")], SignOptions()
        )
        assert "--skipZipAlign" not in command
        assert command[:3] == ["java", "-jar", "u.jar"]

    def test_from_settings(self):
        settings = Settings(java_path="/jdk/bin/java", uber_apk_signer_jar="/tools/signer.jar")

        signer = UberApkSigner.from_settings(settings)

        assert signer.java_path == "/jdk/bin/java"
        assert signer.jar_path == "/tools/signer.jar"
        assert signer.limits.memory_bytes == settings.rlimit_as_bytes


class TestSign:
    @pytest.mark.asyncio
    async def test_yields_non_blank_lines(self):
        signer = UberApkSigner(jar_path="u.jar")

        with patch(
            "bundlepatch.tools.signer.stream_tool",
            return_value=_fake_stream(["source:", "", "  base.apk", "   "]),
        ) as mock_stream:
            lines = [line async for line in signer.sign([Path("/b/base.apk")], SignOptions(zipalign=False))]

        assert lines == ["source:", "  base.apk"]
        command = mock_stream.call_args.args[0]
        assert command[-2:] == ["--apks", "/b/base.apk"]

    @pytest.mark.asyncio
    async def test_no_paths_does_not_start_tool(self):
        signer = UberApkSigner(jar_path="u.jar")

        with patch("bundlepatch.tools.signer.stream_tool") as mock_stream:
            lines = [line async for line in signer.sign([], SignOptions())]

        assert lines == []
        mock_stream.assert_not_called()
