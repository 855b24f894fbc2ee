"""Configuration for the server."""

from pagecraft.config import PAGECRAFT_MAX_INPUT_CHARS

MAX_INPUT_CHARS: int = PAGECRAFT_MAX_INPUT_CHARS

APP_TITLE = "pagecraft"
APP_DESCRIPTION = "Convert between HTML and editable component trees"
APP_VERSION = "0.1.0"
