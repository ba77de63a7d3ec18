# linkaudit — Networking utilities (requests session with retries)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


XML_ACCEPT = "application/xml, text/xml"


def build_session(user_agent: str, retries: int = 3, backoff: float = 0.5) -> requests.Session:
	"""Build a requests Session that asks for XML and retries transient failures.

	Sitemap hosts often serve a rendered HTML page for browsers, so the Accept header
	explicitly requests the XML representation.
	"""
	s = requests.Session()
	s.headers.update(
		{
			"User-Agent": user_agent,
			"Accept": XML_ACCEPT,
		}
	)
	retry = Retry(
		total=retries,
		backoff_factor=backoff,
		status_forcelist=(429, 500, 502, 503, 504),
		allowed_methods=frozenset({"GET", "HEAD"}),
		raise_on_status=False,
	)
	adapter = HTTPAdapter(max_retries=retry)
	s.mount("http://", adapter)
	s.mount("https://", adapter)
	return s
