"""Tests for weight file discovery."""

import pytest

from subweight.exceptions import ParsingError, TooManyFilesError
from subweight.file_ops import list_files, read_text


@pytest.fixture
def weights_dir(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    for name in ("a/pallet_x.rs", "a/pallet_y.rs", "a/mod.rs", "b/pallet_z.rs", "b/notes.md"):
        (tmp_path / name).write_text("")
    return tmp_path


class TestListFiles:
    """Test glob expansion."""

    def test_skips_mod_rs(self, weights_dir):
        files = list_files(weights_dir, "a/*.rs", 10)
        assert [f.name for f in files] == ["pallet_x.rs", "pallet_y.rs"]

    def test_comma_separated_patterns(self, weights_dir):
        files = list_files(weights_dir, "b/*.rs, a/*.rs", 10)
        assert [f.name for f in files] == ["pallet_x.rs", "pallet_y.rs", "pallet_z.rs"]

    def test_deduplicates(self, weights_dir):
        files = list_files(weights_dir, "a/pallet_x.rs,a/*.rs", 10)
        assert [f.name for f in files] == ["pallet_x.rs", "pallet_y.rs"]

    def test_no_match(self, weights_dir):
        assert list_files(weights_dir, "c/*.rs", 10) == []

    def test_too_many_files(self, weights_dir):
        with pytest.raises(TooManyFilesError) as exc:
            list_files(weights_dir, "a/*.rs", 1)
        assert exc.value.message == "Found too many files. Found: 2, Max: 1"

    def test_limit_is_inclusive(self, weights_dir):
        assert len(list_files(weights_dir, "a/*.rs", 2)) == 2


class TestReadText:
    def test_reads(self, tmp_path):
        path = tmp_path / "w.rs"
        path.write_text("fn")
        assert read_text(path) == "fn"

    def test_missing(self, tmp_path):
        with pytest.raises(ParsingError):
            read_text(tmp_path / "missing.rs")
