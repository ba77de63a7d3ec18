# linkaudit — Logging configuration (rotating file + stderr)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import logging.handlers
import os
from typing import Optional


def configure_logging(level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
	"""Configure root logger with a stream handler and, if log_dir is set, a rotating file.

	The format is single-line and includes time, level, logger, and message.
	"""
	fmt = (
		"%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"
	)

	root = logging.getLogger()
	root.setLevel(getattr(logging, level.upper(), logging.INFO))

	# Clear existing handlers in case of re-init
	for h in list(root.handlers):
		root.removeHandler(h)

	# stderr keeps stdout free for URL listings and the engine's own output
	stream = logging.StreamHandler()
	stream.setFormatter(logging.Formatter(fmt))
	root.addHandler(stream)

	if not log_dir:
		return
	os.makedirs(log_dir, exist_ok=True)
	log_path = os.path.join(log_dir, "linkaudit.log")
	file_handler = logging.handlers.RotatingFileHandler(
		log_path, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
	)
	file_handler.setFormatter(logging.Formatter(fmt))
	root.addHandler(file_handler)
