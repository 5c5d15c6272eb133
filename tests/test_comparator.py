from __future__ import annotations
import hashlib
import shutil
from pathlib import Path

import pytest

from hashwalk import comparator
from hashwalk.comparator import ComparisonResult, compare
from hashwalk.errors import ComparisonTargetHashError, ManifestHashError


@pytest.fixture
def manifest(tmp_path: Path) -> Path:
	p = tmp_path / "manifest.csv"
	p.write_text('"RelativePath","FileName","Algorithm","Hash"\n', encoding="utf-8")
	return p


def _digest(p: Path) -> str:
	return hashlib.sha256(p.read_bytes()).hexdigest()


def test_no_target_means_no_comparison(manifest: Path) -> None:
	res = compare(manifest, "sha256")

	assert res.hash == _digest(manifest)
	assert res.is_match is None
	assert res.to_dict() == {"csv": str(manifest), "hash": res.hash}


def test_literal_digest_match(manifest: Path) -> None:
	res = compare(manifest, "sha256", _digest(manifest))

	assert res.is_match is True
	assert res.to_dict()["compare"] == _digest(manifest)
	assert res.to_dict()["isMatch"] is True


def test_literal_comparison_is_exact(manifest: Path) -> None:
	assert compare(manifest, "sha256", "not-a-file-checksum").is_match is False
	assert compare(manifest, "sha256", _digest(manifest).upper()).is_match is False


def test_file_target_with_same_content_matches(manifest: Path, tmp_path: Path) -> None:
	previous = tmp_path / "previous.csv"
	shutil.copyfile(manifest, previous)

	res = compare(manifest, "sha256", str(previous))

	assert res.is_match is True
	assert res.compare == str(previous)


def test_file_target_with_other_content_differs(manifest: Path, tmp_path: Path) -> None:
	other = tmp_path / "other.csv"
	other.write_text("something else\n", encoding="utf-8")

	assert compare(manifest, "sha256", str(other)).is_match is False


def test_directory_target_is_treated_as_literal(manifest: Path, tmp_path: Path) -> None:
	res = compare(manifest, "sha256", str(tmp_path))

	assert res.is_match is False
	assert res.compare == str(tmp_path)


def test_missing_manifest_is_fatal(tmp_path: Path) -> None:
	with pytest.raises(ManifestHashError):
		compare(tmp_path / "gone.csv", "sha256")


def test_unreadable_target_is_fatal(manifest: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
	target = tmp_path / "target.csv"
	target.write_text("x", encoding="utf-8")
	real_hash_file = comparator.hash_file

	def fake_hash_file(path, algorithm, chunk_size=1024):
		if Path(path) == target:
			raise PermissionError(13, "Permission denied", str(path))
		return real_hash_file(path, algorithm, chunk_size)

	monkeypatch.setattr(comparator, "hash_file", fake_hash_file)

	with pytest.raises(ComparisonTargetHashError, match="Permission denied"):
		compare(manifest, "sha256", str(target))


def test_result_serialization_keeps_false_match() -> None:
	res = ComparisonResult(csv=Path("/tmp/m.csv"), hash="ab", compare="cd", is_match=False)

	assert res.to_dict() == {"csv": "/tmp/m.csv", "hash": "ab", "compare": "cd", "isMatch": False}


def test_empty_target_means_no_comparison(manifest: Path) -> None:
	res = compare(manifest, "sha256", "")

	assert res.compare is None
	assert res.is_match is None
