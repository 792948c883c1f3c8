from __future__ import annotations

# Shared request identity. The source site serves different (or no) markup to
# clients without a browser-like User-Agent, so every request carries one.
DEFAULT_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
ACCEPT_LANGUAGE = "ca-ES,ca;q=0.9,es;q=0.8,en;q=0.7"


def build_headers(user_agent: str | None = None) -> dict[str, str]:
    """Return the fixed header set sent with every page request."""
    return {
        "User-Agent": user_agent or DEFAULT_UA,
        "Accept": ACCEPT_HTML,
        "Accept-Language": ACCEPT_LANGUAGE,
    }


__all__ = ["DEFAULT_UA", "build_headers"]
