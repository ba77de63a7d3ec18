# linkaudit — Error hierarchy
# Author: Sachin Chhetri
# Year: 2025
# License: MIT


class LinkAuditError(Exception):
	"""Base class for failures that abort a fetch or a check."""


class SitemapFetchError(LinkAuditError):
	"""Top-level sitemap could not be fetched or parsed."""


class EngineInvocationError(LinkAuditError):
	"""The link-checking engine could not be started."""


class EngineOutputError(LinkAuditError):
	"""The engine's structured output was missing (strict mode) or undecodable."""
