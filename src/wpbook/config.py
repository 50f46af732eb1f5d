"""Local configuration for wpbook."""

from __future__ import annotations

import os


DEFAULT_BASE_URL = "https://ebooktest.ilearn.guru/wp-json/wp/v2"
DEFAULT_FETCH_TIMEOUT_S = 30.0
DEFAULT_FETCH_MAX_ATTEMPTS = 3
DEFAULT_FETCH_BACKOFF_S = 1.0
DEFAULT_PER_PAGE = 100
DEFAULT_USER_AGENT = "wpbook/0.1"

# REST base of the WordPress site, e.g. https://example.com/wp-json/wp/v2
WPBOOK_BASE_URL = os.getenv("WPBOOK_BASE_URL", DEFAULT_BASE_URL).rstrip("/")
# Optional application-password credentials; anonymous when either is empty.
WPBOOK_USERNAME = os.getenv("WPBOOK_USERNAME", "")
WPBOOK_PASSWORD = os.getenv("WPBOOK_PASSWORD", "")
WPBOOK_FETCH_TIMEOUT_S = float(os.getenv("WPBOOK_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
WPBOOK_FETCH_MAX_ATTEMPTS = int(os.getenv("WPBOOK_FETCH_MAX_ATTEMPTS", str(DEFAULT_FETCH_MAX_ATTEMPTS)))
WPBOOK_FETCH_BACKOFF_S = float(os.getenv("WPBOOK_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
WPBOOK_PER_PAGE = int(os.getenv("WPBOOK_PER_PAGE", str(DEFAULT_PER_PAGE)))
WPBOOK_USER_AGENT = os.getenv("WPBOOK_USER_AGENT", DEFAULT_USER_AGENT)
WPBOOK_LOG_LEVEL = os.getenv("WPBOOK_LOG_LEVEL", "INFO")

# Custom post types registered on the site.
WPBOOK_BOOK_TYPE = os.getenv("WPBOOK_BOOK_TYPE", "book")
WPBOOK_CHAPTER_TYPE = os.getenv("WPBOOK_CHAPTER_TYPE", "chapter")
WPBOOK_TOPIC_TYPE = os.getenv("WPBOOK_TOPIC_TYPE", "chaptertopic")
WPBOOK_SECTION_TYPE = os.getenv("WPBOOK_SECTION_TYPE", "topicsection")
