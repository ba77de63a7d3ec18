# linkaudit — Link checking through an external engine (lychee)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from abc import ABC, abstractmethod
import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from typing import Iterable, List, Optional

from pydantic import ValidationError

from .errors import EngineInvocationError, EngineOutputError
from .models import CheckResult, EngineOutput
from .report import write_engine_output
from ..utils.io import read_bytes, write_lines


logger = logging.getLogger(__name__)

DEFAULT_ENGINE = "lychee"


class CheckOptions:
	def __init__(
		self,
		concurrency: Optional[int] = None,
		timeout: Optional[int] = None,
		excludes: Optional[Iterable[str]] = None,
		config_file: Optional[str] = None,
		output_format: Optional[str] = None,
		output_file: Optional[str] = None,
		no_progress: bool = False,
		verbose: bool = False,
		strict_output: bool = False,
	):
		self.concurrency = concurrency
		self.timeout = timeout
		self.excludes: List[str] = list(excludes or [])
		self.config_file = config_file
		self.output_format = output_format
		self.output_file = output_file
		self.no_progress = no_progress
		self.verbose = verbose
		self.strict_output = strict_output

	def replace(self, **changes) -> "CheckOptions":
		"""Return a copy with the given fields overridden."""
		values = dict(vars(self))
		values.update(changes)
		return CheckOptions(**values)


class LinkEngine(ABC):
	"""Runs a link checker over the URLs in urls_file, leaving a JSON report at output_file."""

	@abstractmethod
	def run(self, urls_file: str, output_file: str, options: CheckOptions) -> None:
		...


class LycheeEngine(LinkEngine):
	def __init__(self, executable: str = DEFAULT_ENGINE) -> None:
		self.executable = executable

	def build_args(self, urls_file: str, output_file: str, options: CheckOptions) -> List[str]:
		args: List[str] = []
		if options.concurrency is not None:
			args += ["--max-concurrency", str(options.concurrency)]
		if options.timeout is not None:
			args += ["--timeout", str(options.timeout)]
		args += ["--files-from", urls_file]
		# always JSON so the results can be parsed
		args += ["--format", "json", "--output", output_file]
		if options.no_progress:
			args.append("--no-progress")
		if options.config_file:
			args += ["--config", options.config_file]
		for pattern in options.excludes:
			args += ["--exclude", pattern]
		return args

	def run(self, urls_file: str, output_file: str, options: CheckOptions) -> None:
		cmd = [self.executable] + self.build_args(urls_file, output_file, options)
		logger.log(logging.INFO if options.verbose else logging.DEBUG, "Running: %s", shlex.join(cmd))
		try:
			# stdout/stderr are inherited so the engine's progress shows as-is.
			# A non-zero exit means broken links were found, not that the run failed.
			proc = subprocess.run(cmd, check=False)
		except OSError as e:
			raise EngineInvocationError(f"could not run {self.executable}: {e}") from e
		logger.debug("%s exited with status %d", self.executable, proc.returncode)


def is_engine_installed(executable: str = DEFAULT_ENGINE) -> bool:
	return shutil.which(executable) is not None


def decode_output(raw: bytes) -> EngineOutput:
	try:
		return EngineOutput.model_validate_json(raw)
	except ValidationError as e:
		raise EngineOutputError(f"failed to parse engine output: {e}") from e


def check_urls(urls: List[str], options: CheckOptions, engine: Optional[LinkEngine] = None) -> CheckResult:
	"""Check every link found on the given pages and return the aggregated result.

	An empty page list returns an empty result without starting the engine. If the
	engine leaves no JSON report behind, every page is counted as passed unless
	options.strict_output is set, in which case EngineOutputError is raised.
	"""
	if not urls:
		return CheckResult()
	engine = engine or LycheeEngine()

	try:
		scratch = tempfile.TemporaryDirectory(prefix="linkaudit-")
	except OSError as e:
		raise EngineInvocationError(f"could not create scratch directory: {e}") from e

	with scratch as tmp:
		urls_file = os.path.join(tmp, "urls.txt")
		output_file = os.path.join(tmp, "output.json")
		try:
			write_lines(urls_file, urls)
		except OSError as e:
			raise EngineInvocationError(f"could not write URL list: {e}") from e

		engine.run(urls_file, output_file, options)

		try:
			raw = read_bytes(output_file)
		except OSError as e:
			if options.strict_output:
				raise EngineOutputError(f"engine produced no output: {e}") from e
			logger.warning(
				"Engine wrote no report; counting %d pages as passed. A crashed engine looks the same.",
				len(urls),
			)
			return CheckResult(passed_count=len(urls))

		output = decode_output(raw)
		result = output.to_result()

		if options.output_file:
			write_engine_output(options.output_file, options.output_format or "", raw, output, len(urls))
			logger.info("Report written to %s", options.output_file)

	return result
