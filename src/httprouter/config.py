"""
=============================================================================
ROUTER CONFIGURATION
=============================================================================

Centralized settings for the router and its command-line entry point.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    Priority (highest to lowest):

    1. Command-line arguments       python -m httprouter app:setup --log-level DEBUG
    2. Environment variables        HTTPROUTER_LOG_LEVEL=DEBUG
    3. Default values               (in this dataclass)

=============================================================================
"""

import os
from dataclasses import dataclass


LOG_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RouterConfig:
    """
    Configuration for routing one request.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    MOUNTING
    - script_name

    RESPONSES
    - redirect_status, json_ensure_ascii

    REQUEST PARSING
    - max_request_size

    LOGGING
    - log_level, log_format, access_log

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # MOUNTING
    # ─────────────────────────────────────────────────────────────────────

    script_name: str = ""
    """
    Prefix the application is mounted under (e.g. "/shop/index.py").
    Stripped from the request path before routing; used by UrlBuilder.
    """

    # ─────────────────────────────────────────────────────────────────────
    # RESPONSES
    # ─────────────────────────────────────────────────────────────────────

    redirect_status: int = 307
    """
    Status used by redirect() when none is given.
    307 keeps the request method, unlike 302.
    """

    json_ensure_ascii: bool = False
    """
    Escape non-ASCII characters in JSON responses.
    False keeps UTF-8 text readable ("café" rather than "caf\\u00e9").
    """

    # ─────────────────────────────────────────────────────────────────────
    # REQUEST PARSING
    # ─────────────────────────────────────────────────────────────────────

    max_request_size: int = 10 * 1024 * 1024  # 10 MB
    """
    Raw requests larger than this are rejected with 413.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """
    Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    DEBUG traces every route match and convention resolution.
    """

    log_format: str = "text"
    """
    Access log format: 'text' (Apache-like) or 'json'.
    """

    access_log: bool = True
    """
    Emit one access log entry per dispatched request.
    """

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """
        Create configuration from environment variables.

        HTTPROUTER_SCRIPT_NAME       Mount prefix (default: "")
        HTTPROUTER_REDIRECT_STATUS   Default redirect status (default: 307)
        HTTPROUTER_MAX_REQUEST_SIZE  Max raw request bytes (default: 10 MB)
        HTTPROUTER_LOG_LEVEL         Logging level (default: INFO)
        HTTPROUTER_LOG_FORMAT        text | json (default: text)
        HTTPROUTER_ACCESS_LOG        0 disables the access log (default: 1)
        """
        return cls(
            script_name=os.getenv("HTTPROUTER_SCRIPT_NAME", ""),
            redirect_status=int(os.getenv("HTTPROUTER_REDIRECT_STATUS", "307")),
            max_request_size=int(os.getenv("HTTPROUTER_MAX_REQUEST_SIZE", str(10 * 1024 * 1024))),
            log_level=os.getenv("HTTPROUTER_LOG_LEVEL", "INFO"),
            log_format=os.getenv("HTTPROUTER_LOG_FORMAT", "text"),
            access_log=os.getenv("HTTPROUTER_ACCESS_LOG", "1") not in ("0", "false", "no"),
        )

    def validate(self) -> None:
        """Fail fast on invalid values."""
        if not 300 <= self.redirect_status < 400:
            raise ValueError(f"Invalid redirect_status: {self.redirect_status}. Must be 3xx.")

        if self.max_request_size < 1024:
            raise ValueError("max_request_size must be >= 1024")

        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"Invalid log_level: {self.log_level}")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format}. Must be 'text' or 'json'.")

        if self.script_name and not self.script_name.startswith("/"):
            raise ValueError("script_name must start with '/'")
