from __future__ import annotations
from pathlib import Path

import pytest

from hashwalk.config import DEFAULT_CONFIG_NAME, HashWalkConfig, load_config
from hashwalk.errors import ConfigError, UnsupportedAlgorithmError
from hashwalk.hasher import CHUNK_SIZE


def test_defaults_without_config_file(tmp_path: Path) -> None:
	cfg = load_config(cwd=tmp_path)

	assert cfg == HashWalkConfig()
	assert cfg.algorithm == "sha256"
	assert cfg.chunk_size == CHUNK_SIZE
	assert cfg.audit is True
	assert cfg.timestamped_error_markers is True


def test_implicit_config_in_working_directory(tmp_path: Path) -> None:
	(tmp_path / DEFAULT_CONFIG_NAME).write_text(
		"algorithm: SHA512\ncsv_directory: manifests\nchunk_size: 4096\naudit: false\ntimestamped_error_markers: false\n",
		encoding="utf-8",
	)

	cfg = load_config(cwd=tmp_path)

	assert cfg.algorithm == "sha512"
	assert cfg.csv_directory == Path("manifests")
	assert cfg.chunk_size == 4096
	assert cfg.audit is False
	assert cfg.timestamped_error_markers is False


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
	p = tmp_path / "empty.yaml"
	p.write_text("", encoding="utf-8")

	assert load_config(p) == HashWalkConfig()


def test_explicit_missing_config_is_an_error(tmp_path: Path) -> None:
	with pytest.raises(ConfigError, match="Unable to read config"):
		load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
	"text, message",
	[
		("colour: blue\n", "Unknown config keys"),
		("- sha256\n", "must be a mapping"),
		("chunk_size: 0\n", "chunk_size"),
		("chunk_size: true\n", "chunk_size"),
		("audit: maybe\n", "audit must be true or false"),
		("algorithm: [unterminated\n", "Invalid YAML"),
	],
)
def test_malformed_config(tmp_path: Path, text: str, message: str) -> None:
	p = tmp_path / "bad.yaml"
	p.write_text(text, encoding="utf-8")

	with pytest.raises(ConfigError, match=message):
		load_config(p)


def test_config_algorithm_is_validated(tmp_path: Path) -> None:
	p = tmp_path / "algo.yaml"
	p.write_text("algorithm: whirlpool\n", encoding="utf-8")

	with pytest.raises(UnsupportedAlgorithmError):
		load_config(p)
