from __future__ import annotations
import os
from pathlib import Path

import pytest


def make_symlink(target: Path, link: Path, target_is_directory: bool = False) -> None:
	try:
		os.symlink(target, link, target_is_directory=target_is_directory)
	except (OSError, NotImplementedError) as e:
		pytest.skip(f"symlinks unavailable: {e}")
