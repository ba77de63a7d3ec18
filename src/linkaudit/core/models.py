# linkaudit — Result and engine-output models
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


EXCLUDED_STATUS = "excluded"


class LinkStatus(BaseModel):
	model_config = ConfigDict(frozen=True)

	url: str
	status: str
	code: Optional[int] = None
	source_url: str


class CheckResult(BaseModel):
	"""Counts and per-link outcomes from one engine run."""

	model_config = ConfigDict(frozen=True)

	passed_count: int = 0
	failed_count: int = 0
	excluded_count: int = 0
	links: List[LinkStatus] = Field(default_factory=list)


class EngineStatus(BaseModel):
	text: str = ""
	code: Optional[int] = None


class EngineLink(BaseModel):
	url: str
	status: EngineStatus = Field(default_factory=EngineStatus)


class EngineOutput(BaseModel):
	"""The subset of lychee's JSON report that linkaudit reads. Unknown keys are ignored."""

	total: int = 0
	successful: int = 0
	errors: int = 0
	excludes: int = 0
	success_map: Dict[str, List[EngineLink]] = Field(default_factory=dict)
	error_map: Dict[str, List[EngineLink]] = Field(default_factory=dict)
	excluded_map: Dict[str, List[EngineLink]] = Field(default_factory=dict)

	@field_validator("success_map", "error_map", "excluded_map", mode="before")
	@classmethod
	def _null_map(cls, v: Any) -> Any:
		return {} if v is None else v

	def to_result(self) -> CheckResult:
		links: List[LinkStatus] = []
		for source, entries in self.success_map.items():
			links.extend(
				LinkStatus(url=e.url, status=e.status.text, code=e.status.code, source_url=source)
				for e in entries
			)
		for source, entries in self.error_map.items():
			links.extend(
				LinkStatus(url=e.url, status=e.status.text, code=e.status.code, source_url=source)
				for e in entries
			)
		# excluded entries carry no status of their own
		for source, entries in self.excluded_map.items():
			links.extend(LinkStatus(url=e.url, status=EXCLUDED_STATUS, source_url=source) for e in entries)
		return CheckResult(
			passed_count=self.successful,
			failed_count=self.errors,
			excluded_count=self.excludes,
			links=links,
		)


class SitemapReport(BaseModel):
	sitemap_url: str
	page_count: int
	result: CheckResult


class SkippedGroup(BaseModel):
	sitemap_url: str
	reason: str


class FullReport(BaseModel):
	sitemaps: List[SitemapReport] = Field(default_factory=list)
	skipped: List[SkippedGroup] = Field(default_factory=list)
	total_pages: int = 0
	total_passed: int = 0
	total_failed: int = 0

	@property
	def has_failures(self) -> bool:
		return any(s.result.failed_count > 0 for s in self.sitemaps)

	def add(self, sitemap_url: str, page_count: int, result: CheckResult) -> None:
		self.sitemaps.append(SitemapReport(sitemap_url=sitemap_url, page_count=page_count, result=result))
		self.total_pages += page_count
		self.total_passed += result.passed_count
		self.total_failed += result.failed_count
