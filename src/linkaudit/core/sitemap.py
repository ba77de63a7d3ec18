# linkaudit — Sitemap fetching, classification and grouping
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import xml.etree.ElementTree as ET
from typing import Dict, List, NamedTuple, Optional, Set

import requests

from .errors import SitemapFetchError
from ..config import Settings
from ..utils.net import XML_ACCEPT, build_session


logger = logging.getLogger(__name__)

INDEX = "index"
URLSET = "urlset"


class SitemapDocument(NamedTuple):
	"""A fetched sitemap classified as either an index or a leaf urlset."""

	kind: str
	locations: List[str]


class SkippedSitemap(NamedTuple):
	url: str
	reason: str


class FetchResult:
	"""Page URLs grouped by source sitemap plus a flat first-seen-order view.

	Groups keep duplicates; all_urls holds each URL once, compared as plain strings.
	"""

	def __init__(self) -> None:
		self.sitemaps: Dict[str, List[str]] = {}
		self.all_urls: List[str] = []
		self.skipped: List[SkippedSitemap] = []
		self._seen: Set[str] = set()

	def add(self, source: str, urls: List[str]) -> None:
		self.sitemaps[source] = urls
		for u in urls:
			if u not in self._seen:
				self._seen.add(u)
				self.all_urls.append(u)


def _local_name(tag: str) -> str:
	return tag.rsplit("}", 1)[-1]


def _locs(root: ET.Element, entry: str, keep_blank: bool = False) -> List[str]:
	out: List[str] = []
	for el in root.findall(f"{{*}}{entry}"):
		loc = el.find("{*}loc")
		u = (loc.text or "").strip() if loc is not None else ""
		if u or keep_blank:
			out.append(u)
	return out


def parse_index(content: bytes) -> List[str]:
	"""Return child sitemap locations. Raises ValueError if the root is not <sitemapindex>.

	Every <sitemap> entry yields one item; a missing or blank <loc> comes back as "".
	"""
	root = ET.fromstring(content)
	if _local_name(root.tag) != "sitemapindex":
		raise ValueError(f"expected <sitemapindex>, got <{_local_name(root.tag)}>")
	return _locs(root, "sitemap", keep_blank=True)


def parse_urlset(content: bytes) -> List[str]:
	"""Return page locations. Raises ValueError if the root is not <urlset>."""
	root = ET.fromstring(content)
	if _local_name(root.tag) != "urlset":
		raise ValueError(f"expected <urlset>, got <{_local_name(root.tag)}>")
	return _locs(root, "url")


def classify(content: bytes) -> SitemapDocument:
	"""Try the index interpretation first; fall back to a leaf urlset.

	An index wins only when it has at least one <sitemap> entry, blank or not.
	Errors from the urlset attempt propagate to the caller.
	"""
	try:
		children = parse_index(content)
	except (ET.ParseError, ValueError):
		children = []
	if children:
		return SitemapDocument(INDEX, children)
	return SitemapDocument(URLSET, parse_urlset(content))


class SitemapResolver:
	"""Resolve a sitemap or a one-level sitemap index into grouped page URLs."""

	def __init__(self, session: requests.Session, timeout: float = 30.0) -> None:
		self.session = session
		self.timeout = timeout

	def _get(self, url: str) -> bytes:
		r = self.session.get(url, headers={"Accept": XML_ACCEPT}, timeout=self.timeout)
		if r.status_code != 200:
			raise SitemapFetchError(f"sitemap {url} returned status {r.status_code}")
		return r.content

	def resolve(self, url: str) -> FetchResult:
		try:
			content = self._get(url)
		except requests.RequestException as e:
			raise SitemapFetchError(f"failed to fetch sitemap {url}: {e}") from e
		try:
			doc = classify(content)
		except (ET.ParseError, ValueError) as e:
			raise SitemapFetchError(f"failed to parse sitemap XML from {url}: {e}") from e

		res = FetchResult()
		if doc.kind == URLSET:
			res.add(url, doc.locations)
			return res

		logger.info("Sitemap index %s lists %d sitemaps", url, len(doc.locations))
		for child in doc.locations:
			if not child:
				logger.warning("Skipping sitemap entry with blank <loc> in %s", url)
				res.skipped.append(SkippedSitemap(child, "blank <loc>"))
				continue
			try:
				urls = parse_urlset(self._get(child))
			except (requests.RequestException, SitemapFetchError, ET.ParseError, ValueError) as e:
				logger.warning("Skipping sitemap %s: %s", child, e)
				res.skipped.append(SkippedSitemap(child, str(e)))
				continue
			res.add(child, urls)
		return res


def fetch_grouped(
	url: str,
	session: Optional[requests.Session] = None,
	timeout: Optional[float] = None,
	cfg: Optional[Settings] = None,
) -> FetchResult:
	"""Resolve url with a session and timeout taken from settings unless given."""
	cfg = cfg or Settings()
	if session is None:
		session = build_session(cfg.user_agent, retries=cfg.retries, backoff=cfg.backoff)
	if timeout is None:
		timeout = cfg.sitemap_timeout
	return SitemapResolver(session, timeout=timeout).resolve(url)
