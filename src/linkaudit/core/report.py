# linkaudit — Report rendering and writers
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import List

from .models import EngineOutput, FullReport
from ..utils.io import write_bytes, write_text


MARKDOWN_FORMATS = ("markdown", "md")


def format_markdown(output: EngineOutput, page_count: int) -> str:
	"""Short human-readable summary. Failure detail stays in the JSON output."""
	lines: List[str] = [
		"# Link Audit Report",
		"",
		"## Summary",
		"",
		f"- **Pages checked**: {page_count}",
		f"- **Total links**: {output.total}",
		f"- **Passed**: {output.successful}",
		f"- **Failed**: {output.errors}",
		f"- **Excluded**: {output.excludes}",
		"",
	]
	if output.errors == 0:
		lines.append("All links are valid!")
	else:
		lines.append("See JSON output for failure details.")
	return "\n".join(lines) + "\n"


def write_engine_output(path: str, fmt: str, raw: bytes, output: EngineOutput, page_count: int) -> None:
	"""Write the engine's report: markdown summary if asked for, else the raw JSON bytes."""
	if (fmt or "").lower() in MARKDOWN_FORMATS:
		write_text(path, format_markdown(output, page_count))
	else:
		write_bytes(path, raw)


def write_report(report: FullReport, path: str) -> None:
	write_text(path, report.model_dump_json(indent=2))
