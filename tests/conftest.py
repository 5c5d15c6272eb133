from __future__ import annotations
from pathlib import Path

import pytest


@pytest.fixture
def data_tree(tmp_path: Path) -> Path:
	"""Small tree created in non-sorted order."""
	root = tmp_path / "data"
	(root / "zeta").mkdir(parents=True)
	(root / "alpha" / "nested").mkdir(parents=True)
	(root / "zeta" / "z.txt").write_text("zzz\n", encoding="utf-8")
	(root / "alpha" / "nested" / "deep.bin").write_bytes(b"\x00\x01\x02")
	(root / "alpha" / "a.txt").write_text("aaa\n", encoding="utf-8")
	(root / "top.txt").write_text("top\n", encoding="utf-8")
	return root
