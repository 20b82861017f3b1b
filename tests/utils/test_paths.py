from pathlib import Path

from bundlepatch.utils.paths import artifact_scratch_dir, artifact_stem, find_files


def _touch(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")


class TestFindFiles:
    def test_shallow_glob(self, tmp_path):
        _touch(tmp_path / "b.apk")
        _touch(tmp_path / "a.apk")
        _touch(tmp_path / "sub" / "c.apk")

        assert find_files(tmp_path, "*.apk") == [tmp_path / "a.apk", tmp_path / "b.apk"]

    def test_recursive_glob(self, tmp_path):
        _touch(tmp_path / "b.apk")
        _touch(tmp_path / "sub" / "deeper" / "c.apk")
        _touch(tmp_path / "sub" / "a.apk")

        assert find_files(tmp_path, "*.apk", recursive=True) == [
            tmp_path / "b.apk",
            tmp_path / "sub" / "a.apk",
            tmp_path / "sub" / "deeper" / "c.apk",
        ]

    def test_skips_directories_matching_pattern(self, tmp_path):
        (tmp_path / "folder.apk").mkdir()
        _touch(tmp_path / "real.apk")

        assert find_files(tmp_path, "*.apk") == [tmp_path / "real.apk"]

    def test_root_with_glob_metacharacters(self, tmp_path):
        root = tmp_path / "odd[dir]*"
        _touch(root / "base.apk")

        assert find_files(root, "*.apk") == [root / "base.apk"]

    def test_missing_root_yields_nothing(self, tmp_path):
        assert find_files(tmp_path / "absent", "*.apk") == []


class TestScratchDir:
    def test_stem_strips_extension(self):
        assert artifact_stem(Path("/b/config.arm64_v8a.apk")) == "config.arm64_v8a"

    def test_scratch_dir_joins_tmp_dir_and_stem(self):
        assert artifact_scratch_dir(Path("/tmp/run"), Path("/tmp/run/bundle/base.apk")) == Path(
            "/tmp/run/base"
        )
