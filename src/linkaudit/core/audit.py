# linkaudit — Merged and per-sitemap audit runs
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Callable, List, Optional

from .checker import CheckOptions, LinkEngine, check_urls
from .errors import LinkAuditError
from .models import CheckResult, FullReport, SkippedGroup
from .sitemap import FetchResult


logger = logging.getLogger(__name__)

CheckFn = Callable[[List[str], CheckOptions, Optional[LinkEngine]], CheckResult]


def run_merged(fetch_result: FetchResult, options: CheckOptions, engine: Optional[LinkEngine] = None) -> CheckResult:
	return check_urls(fetch_result.all_urls, options, engine)


def run_grouped(
	fetch_result: FetchResult,
	options: CheckOptions,
	engine: Optional[LinkEngine] = None,
	check: CheckFn = check_urls,
	on_group: Optional[Callable[[str, int, Optional[CheckResult]], None]] = None,
) -> FullReport:
	"""Check each sitemap group on its own and collect a FullReport.

	A group whose check raises LinkAuditError or OSError is recorded under
	report.skipped and the remaining groups still run. on_group, if given, is called
	before each check with a None result and again afterwards with the result.
	"""
	group_options = options.replace(output_format="json", output_file=None, no_progress=True)
	report = FullReport()
	for sitemap_url, urls in fetch_result.sitemaps.items():
		if on_group:
			on_group(sitemap_url, len(urls), None)
		try:
			result = check(urls, group_options, engine)
		except (LinkAuditError, OSError) as e:
			logger.error("Check failed for %s: %s", sitemap_url, e)
			report.skipped.append(SkippedGroup(sitemap_url=sitemap_url, reason=str(e)))
			continue
		report.add(sitemap_url, len(urls), result)
		if on_group:
			on_group(sitemap_url, len(urls), result)
	return report
