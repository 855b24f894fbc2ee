"""Local configuration for pagecraft."""

from __future__ import annotations

import os


DEFAULT_HTML_PARSER = "lxml"
DEFAULT_TAILWIND_CDN_URL = "https://cdn.tailwindcss.com"
DEFAULT_PAGE_PATH = "index.html"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_INPUT_CHARS = 2_000_000

# BeautifulSoup tree builder used for every parse ("lxml", "html.parser", "html5lib").
PAGECRAFT_HTML_PARSER = os.getenv("PAGECRAFT_HTML_PARSER", DEFAULT_HTML_PARSER)
PAGECRAFT_TAILWIND_CDN_URL = os.getenv("PAGECRAFT_TAILWIND_CDN_URL", DEFAULT_TAILWIND_CDN_URL)
PAGECRAFT_DEFAULT_PAGE_PATH = os.getenv("PAGECRAFT_DEFAULT_PAGE_PATH", DEFAULT_PAGE_PATH)
PAGECRAFT_LOG_LEVEL = os.getenv("PAGECRAFT_LOG_LEVEL", DEFAULT_LOG_LEVEL)
PAGECRAFT_MAX_INPUT_CHARS = int(os.getenv("PAGECRAFT_MAX_INPUT_CHARS", str(DEFAULT_MAX_INPUT_CHARS)))
