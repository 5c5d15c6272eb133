from __future__ import annotations
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError
from .hasher import CHUNK_SIZE, normalize_algorithm

DEFAULT_CONFIG_NAME = "hashwalk.yaml"


@dataclass
class HashWalkConfig:
	algorithm: str = "sha256"
	csv_directory: Optional[Path] = None
	chunk_size: int = CHUNK_SIZE
	audit: bool = True
	# ERROR_<CODE>_<millis> when true, ERROR_<CODE> otherwise
	timestamped_error_markers: bool = True


def _from_mapping(data: Dict[str, Any], source: Path) -> HashWalkConfig:
	known = {f.name for f in fields(HashWalkConfig)}
	unknown = sorted(set(data) - known)
	if unknown:
		raise ConfigError(f"Unknown config keys in {source}: {', '.join(unknown)}")
	cfg = HashWalkConfig()
	if "algorithm" in data:
		cfg.algorithm = normalize_algorithm(str(data["algorithm"]))
	if data.get("csv_directory") is not None:
		cfg.csv_directory = Path(str(data["csv_directory"])).expanduser()
	if "chunk_size" in data:
		size = data["chunk_size"]
		if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
			raise ConfigError(f"chunk_size must be a positive integer in {source}")
		cfg.chunk_size = size
	for key in ("audit", "timestamped_error_markers"):
		if key in data:
			if not isinstance(data[key], bool):
				raise ConfigError(f"{key} must be true or false in {source}")
			setattr(cfg, key, data[key])
	return cfg


def load_config(path: Optional[Path] = None, cwd: Optional[Path] = None) -> HashWalkConfig:
	"""Load configuration from `path`, or from ./hashwalk.yaml when present.

	An explicit path must exist; the implicit one is optional.
	"""
	if path is None:
		path = Path(cwd or Path.cwd()) / DEFAULT_CONFIG_NAME
		if not path.exists():
			return HashWalkConfig()
	path = Path(path)
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as e:
		raise ConfigError(f"Unable to read config {path}: {e}") from e
	try:
		data = yaml.safe_load(text)
	except yaml.YAMLError as e:
		raise ConfigError(f"Invalid YAML in {path}: {e}") from e
	if data is None:
		return HashWalkConfig()
	if not isinstance(data, dict):
		raise ConfigError(f"Config {path} must be a mapping")
	return _from_mapping(data, path)
