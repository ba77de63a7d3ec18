import pytest
import requests

from linkaudit.config import Settings
from linkaudit.core.errors import SitemapFetchError
from linkaudit.core.sitemap import INDEX, URLSET, SitemapResolver, classify, fetch_grouped, parse_urlset


NS = 'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"'


def urlset(*locs):
	body = "".join(f"<url><loc>{u}</loc></url>" for u in locs)
	return f"<urlset {NS}>{body}</urlset>"


def index(*locs):
	body = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in locs)
	return f"<sitemapindex {NS}>{body}</sitemapindex>"


class MockSession:
	def __init__(self, mapping):
		self.mapping = mapping
		self.calls = []

	def get(self, url, headers=None, timeout=None):
		self.calls.append((url, headers))

		class R:
			def __init__(self, text, status_code=200):
				self.content = text.encode("utf-8")
				self.status_code = status_code

		value = self.mapping[url]
		if isinstance(value, Exception):
			raise value
		if isinstance(value, tuple):
			return R(*value)
		return R(value)


def resolve(mapping, url="https://example.com/sitemap.xml"):
	return SitemapResolver(MockSession(mapping)).resolve(url)


def test_leaf_urlset_dedupes_flat_list_only():
	res = resolve({"https://example.com/sitemap.xml": urlset("/a", "/b", "/a")})
	assert res.all_urls == ["/a", "/b"]
	assert res.sitemaps == {"https://example.com/sitemap.xml": ["/a", "/b", "/a"]}
	assert res.skipped == []


def test_requests_xml_content():
	s = MockSession({"https://example.com/sitemap.xml": urlset("/a")})
	SitemapResolver(s).resolve("https://example.com/sitemap.xml")
	assert s.calls[0][1]["Accept"] == "application/xml, text/xml"


def test_index_groups_by_child_and_skips_failures():
	mapping = {
		"https://example.com/sitemap.xml": index(
			"https://example.com/s1.xml",
			"https://example.com/broken.xml",
			"https://example.com/s2.xml",
			"https://example.com/missing.xml",
			"https://example.com/down.xml",
		),
		"https://example.com/s1.xml": urlset("/a", "/b"),
		"https://example.com/broken.xml": "<urlset><url><loc>/x",
		"https://example.com/s2.xml": urlset("/b", "/c"),
		"https://example.com/missing.xml": ("not found", 404),
		"https://example.com/down.xml": requests.ConnectionError("refused"),
	}
	res = resolve(mapping)
	assert list(res.sitemaps) == ["https://example.com/s1.xml", "https://example.com/s2.xml"]
	assert res.sitemaps["https://example.com/s2.xml"] == ["/b", "/c"]
	assert res.all_urls == ["/a", "/b", "/c"]
	assert [s.url for s in res.skipped] == [
		"https://example.com/broken.xml",
		"https://example.com/missing.xml",
		"https://example.com/down.xml",
	]


def test_index_children_are_not_resolved_as_indexes():
	mapping = {
		"https://example.com/sitemap.xml": index("https://example.com/nested.xml"),
		"https://example.com/nested.xml": index("https://example.com/deeper.xml"),
	}
	res = resolve(mapping)
	assert res.all_urls == []
	assert res.sitemaps == {}
	assert [s.url for s in res.skipped] == ["https://example.com/nested.xml"]


def test_index_with_all_children_failing_is_empty_not_error():
	mapping = {
		"https://example.com/sitemap.xml": index("https://example.com/gone.xml"),
		"https://example.com/gone.xml": ("", 500),
	}
	res = resolve(mapping)
	assert res.all_urls == []
	assert len(res.skipped) == 1


def test_empty_urlset_is_empty_list():
	res = resolve({"https://example.com/sitemap.xml": f"<urlset {NS}></urlset>"})
	assert res.all_urls == []
	assert res.sitemaps == {"https://example.com/sitemap.xml": []}


def test_top_level_non_200_is_fatal():
	with pytest.raises(SitemapFetchError):
		resolve({"https://example.com/sitemap.xml": ("<html/>", 404)})


def test_top_level_network_error_is_fatal():
	with pytest.raises(SitemapFetchError):
		resolve({"https://example.com/sitemap.xml": requests.Timeout("slow")})


def test_top_level_malformed_xml_is_fatal():
	with pytest.raises(SitemapFetchError):
		resolve({"https://example.com/sitemap.xml": "<html><body>Sitemap</body></html>"})


def test_classify_prefers_non_empty_index():
	doc = classify(index("https://example.com/a.xml").encode())
	assert doc.kind == INDEX
	assert doc.locations == ["https://example.com/a.xml"]
	doc = classify(urlset("/a").encode())
	assert doc.kind == URLSET


def test_parse_urlset_without_namespace_ignores_blank_locs():
	xml = b"<urlset><url><loc> /a </loc></url><url><loc></loc></url><url/></urlset>"
	assert parse_urlset(xml) == ["/a"]


def test_fetch_grouped_with_session():
	s = MockSession({"https://example.com/sitemap.xml": urlset("/a", "/b")})
	res = fetch_grouped("https://example.com/sitemap.xml", session=s)
	assert res.all_urls == ["/a", "/b"]


def test_index_with_only_blank_loc_is_empty_not_error():
	mapping = {"https://example.com/sitemap.xml": f"<sitemapindex {NS}><sitemap><loc> </loc></sitemap></sitemapindex>"}
	res = resolve(mapping)
	assert res.all_urls == []
	assert res.sitemaps == {}
	assert [s.reason for s in res.skipped] == ["blank <loc>"]


def test_index_blank_loc_skipped_alongside_valid_child():
	mapping = {
		"https://example.com/sitemap.xml": (
			f"<sitemapindex {NS}><sitemap><loc></loc></sitemap>"
			"<sitemap><loc>https://example.com/s1.xml</loc></sitemap></sitemapindex>"
		),
		"https://example.com/s1.xml": urlset("/a"),
	}
	res = resolve(mapping)
	assert res.all_urls == ["/a"]
	assert len(res.skipped) == 1


def test_fetch_grouped_uses_configured_timeout(monkeypatch):
	monkeypatch.setenv("LINKAUDIT_SITEMAP_TIMEOUT", "7")
	seen = []

	class TimedSession(MockSession):
		def get(self, url, headers=None, timeout=None):
			seen.append(timeout)
			return super().get(url, headers=headers, timeout=timeout)

	s = TimedSession({"https://example.com/sitemap.xml": urlset("/a")})
	fetch_grouped("https://example.com/sitemap.xml", session=s, cfg=Settings())
	assert seen == [7.0]
