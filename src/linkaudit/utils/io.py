# linkaudit — IO helpers (directories, report files)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import os
from typing import Iterable, Union


def ensure_dirs(*paths: str) -> None:
	for p in paths:
		if p:
			os.makedirs(p, exist_ok=True)


def write_bytes(path: str, data: bytes) -> None:
	ensure_dirs(os.path.dirname(os.path.abspath(path)))
	with open(path, "wb") as f:
		f.write(data)


def write_text(path: str, text: str) -> None:
	write_bytes(path, text.encode("utf-8"))


def write_lines(path: str, lines: Iterable[str]) -> None:
	"""Write one entry per line, newline separated, without a trailing newline."""
	with open(path, "w", encoding="utf-8") as f:
		f.write("\n".join(lines))


def read_bytes(path: Union[str, os.PathLike]) -> bytes:
	with open(path, "rb") as f:
		return f.read()
