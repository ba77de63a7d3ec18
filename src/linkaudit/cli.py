# linkaudit — CLI (Typer)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import typer
from typing import List, Optional
from rich import print
from rich.markup import escape

from .config import Settings
from .core.audit import run_grouped, run_merged
from .core.checker import CheckOptions, LycheeEngine, is_engine_installed
from .core.errors import LinkAuditError
from .core.models import CheckResult
from .core.report import write_report
from .core.sitemap import FetchResult, fetch_grouped
from .logging_config import configure_logging

EXIT_ERROR = 1
EXIT_BROKEN_LINKS = 2

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _fail(message: str) -> typer.Exit:
	print(f"[bold red]Error:[/bold red] {escape(message)}")
	return typer.Exit(code=EXIT_ERROR)


def _print_dry_run(fetch_result: FetchResult, per_sitemap: bool) -> None:
	if per_sitemap:
		for sm_url, urls in fetch_result.sitemaps.items():
			print(f"=== {escape(sm_url)} ({len(urls)} URLs) ===")
			for u in urls:
				typer.echo(u)
			typer.echo()
	else:
		for u in fetch_result.all_urls:
			typer.echo(u)


def _print_group(sitemap_url: str, page_count: int, result: Optional[CheckResult]) -> None:
	if result is None:
		print(f"Checking {escape(sitemap_url)} ({page_count} pages)...")
	elif result.failed_count > 0:
		print(f"  [red]FAILED:[/red] {result.failed_count} broken links")
	else:
		print(f"  [green]OK:[/green] {result.passed_count} links passed")


@app.command()
def audit(
	sitemap_url: str = typer.Argument(..., help="Sitemap or sitemap index URL"),
	output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
	output_format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: compact, json, markdown"),
	concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", help="Maximum concurrent requests for lychee"),
	timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Request timeout in seconds"),
	exclude: Optional[List[str]] = typer.Option(None, "--exclude", "-e", help="Exclude URLs matching pattern (repeatable)"),
	no_progress: bool = typer.Option(False, "--no-progress", help="Disable progress output"),
	verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
	config: Optional[str] = typer.Option(None, "--config", help="Path to lychee config file"),
	dry_run: bool = typer.Option(False, "--dry-run", help="Fetch sitemap and list URLs without checking links"),
	per_sitemap: bool = typer.Option(False, "--per-sitemap", help="Report results grouped by source sitemap"),
	strict_output: bool = typer.Option(False, "--strict-output", help="Fail if lychee leaves no JSON report"),
	log_level: Optional[str] = typer.Option(None, help="Log level"),
):
	"""Audit all links on the pages listed in a sitemap (or sitemap index)."""
	cfg = Settings()
	configure_logging(level=log_level or cfg.log_level, log_dir=cfg.log_dir)

	if not dry_run and not is_engine_installed(cfg.engine):
		raise _fail(f"{cfg.engine} is not installed. Install it from: https://github.com/lycheeverse/lychee")

	print(f"Fetching sitemap from {escape(sitemap_url)}...")
	try:
		fetch_result = fetch_grouped(sitemap_url, cfg=cfg)
	except LinkAuditError as e:
		raise _fail(str(e))
	print(f"Found {len(fetch_result.all_urls)} pages in {len(fetch_result.sitemaps)} sitemap(s)\n")

	if dry_run:
		_print_dry_run(fetch_result, per_sitemap)
		return

	fmt = output_format or cfg.output_format
	options = CheckOptions(
		concurrency=concurrency if concurrency is not None else cfg.concurrency,
		timeout=timeout if timeout is not None else cfg.timeout,
		excludes=exclude,
		config_file=config,
		output_format=fmt,
		output_file=output,
		no_progress=no_progress,
		verbose=verbose,
		strict_output=strict_output,
	)
	engine = LycheeEngine(cfg.engine)

	if per_sitemap:
		report = run_grouped(fetch_result, options, engine, on_group=_print_group)
		for skipped in report.skipped:
			print(f"  [yellow]Error:[/yellow] {escape(skipped.sitemap_url)}: {escape(skipped.reason)}")
		print("\n=== Summary ===")
		print(f"Total pages: {report.total_pages} | Passed: {report.total_passed} | Failed: {report.total_failed}")
		if output:
			try:
				write_report(report, output)
			except OSError as e:
				raise _fail(f"failed to write report: {e}")
			print(f"Report written to {escape(output)}")
		if report.has_failures:
			raise typer.Exit(code=EXIT_BROKEN_LINKS)
		return

	try:
		result = run_merged(fetch_result, options, engine)
	except LinkAuditError as e:
		raise _fail(f"link check failed: {e}")
	except OSError as e:
		raise _fail(f"failed to write output file: {e}")

	# lychee prints its own summary unless progress is off or output is JSON
	if no_progress or fmt == "json":
		print(
			f"\nPages checked: {len(fetch_result.all_urls)} | Passed: {result.passed_count} "
			f"| Failed: {result.failed_count} | Excluded: {result.excluded_count}"
		)
	if result.failed_count > 0:
		raise typer.Exit(code=EXIT_BROKEN_LINKS)


@app.command("print-config")
def print_config():
	"""Print effective configuration from environment."""
	cfg = Settings()
	print(cfg.model_dump())


def main():
	app()


if __name__ == "__main__":
	main()
