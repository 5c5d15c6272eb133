from __future__ import annotations
import json
from pathlib import Path
from typing import Optional

import click

from hashwalk import __version__
from hashwalk.audit import AuditTrail
from hashwalk.config import load_config
from hashwalk.diagnostics import debug, is_debug, report_error, set_debug
from hashwalk.errors import AuditError, HashWalkError
from hashwalk.hasher import SUPPORTED_ALGORITHMS, normalize_algorithm, supported_algorithms
from hashwalk.pipeline import HashWalkRun
from hashwalk.temp_manager import ManifestDirectory

EPILOG = """\b
Examples:
  hashwalk --path ./data
  hashwalk --path ./data --compare checksums.csv --algorithm sha256
  hashwalk --path ./data --compare <checksum_string> --algorithm sha256
  hashwalk --verify-supported
"""


def _fail(ctx: click.Context, err: HashWalkError, audit: Optional[AuditTrail], run_id: Optional[str]) -> None:
	if audit is not None and run_id is not None:
		try:
			audit.scan_failed(run_id, err)
		except AuditError as audit_err:
			debug(f"Audit trail not updated: {audit_err.message}")
	report_error(err.to_dict(debug=is_debug()))
	ctx.exit(1)


@click.command(epilog=EPILOG, context_settings={"help_option_names": ["--help", "-h"]})
@click.version_option(__version__, prog_name="hashwalk")
@click.option("--path", "scan_path", help="Directory to scan (required unless using --verify-supported)")
@click.option("--compare", "compare", help="Manifest CSV file path or checksum string")
@click.option("--algorithm", "algorithm", help=f"Hash algorithm ({', '.join(SUPPORTED_ALGORITHMS)}) [default: sha256]")
@click.option("--csv-directory", "--csvDirectory", "csv_directory", type=click.Path(file_okay=False), help="Directory to write generated CSV (default: OS temp + /hashwalk)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file (default: ./hashwalk.yaml when present)")
@click.option("--no-audit", is_flag=True, help="Do not append this run to the audit trail")
@click.option("--debug", "debug_flag", is_flag=True, help="Enable detailed error logging")
@click.option("--verify-supported", "-v", "verify_supported", is_flag=True, help="Test which algorithms are supported in the environment")
@click.pass_context
def cli(
	ctx: click.Context,
	scan_path: Optional[str],
	compare: Optional[str],
	algorithm: Optional[str],
	csv_directory: Optional[str],
	config_path: Optional[str],
	no_audit: bool,
	debug_flag: bool,
	verify_supported: bool,
) -> None:
	"""Hash every file under a directory into a CSV manifest, then hash the
	manifest and optionally compare it with a previous manifest or checksum."""
	set_debug(debug_flag)
	if verify_supported:
		click.echo(json.dumps(supported_algorithms()))
		return

	# an empty target means no comparison
	compare = compare or None
	audit: Optional[AuditTrail] = None
	run_id: Optional[str] = None
	try:
		if not scan_path:
			raise HashWalkError("Missing required argument: --path")
		cfg = load_config(Path(config_path) if config_path else None)
		algo = normalize_algorithm(algorithm or cfg.algorithm)
		out_dir = ManifestDirectory(Path(csv_directory) if csv_directory else cfg.csv_directory)
		if cfg.audit and not no_audit:
			audit = AuditTrail(out_dir.audit_dir)
			run_id = audit.scan_started(scan_path, algo, compare)
		run = HashWalkRun(
			scan_path,
			algo,
			out_dir.base,
			compare=compare,
			chunk_size=cfg.chunk_size,
			timestamped_error_markers=cfg.timestamped_error_markers,
		)
		result = run.execute()
		debug(f"Scanned {len(run.files)} files into {result.csv}")
		if audit is not None and run_id is not None:
			audit.scan_completed(run_id, result, run.rows)
	except HashWalkError as e:
		_fail(ctx, e, audit, run_id)
		return
	except OSError as e:
		err = HashWalkError(str(e))
		err.__traceback__ = e.__traceback__
		_fail(ctx, err, audit, run_id)
		return

	click.echo(json.dumps(result.to_dict()))


def main() -> None:
	cli()


if __name__ == "__main__":
	main()
