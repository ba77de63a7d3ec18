# linkaudit — Configuration via Pydantic BaseSettings
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
	"""Application settings with sane defaults.

	Environment variables are prefixed with LINKAUDIT_. CLI flags can override.
	"""

	model_config = SettingsConfigDict(env_prefix="LINKAUDIT_", env_file=".env", extra="ignore")

	user_agent: str = Field(default="linkaudit/0.1 (+https://github.com/lycheeverse/lychee)")
	sitemap_timeout: float = Field(default=30.0)
	retries: int = Field(default=3)
	backoff: float = Field(default=0.5)
	engine: str = Field(default="lychee")
	concurrency: int = Field(default=20)
	timeout: int = Field(default=30)
	output_format: str = Field(default="compact")
	log_level: str = Field(default="INFO")
	log_dir: str = Field(default="logs")
