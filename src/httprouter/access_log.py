"""
=============================================================================
ACCESS LOG
=============================================================================

One structured log entry per dispatched request, written to the namespaced
"httprouter.access" logger:

    text:  - - [19/Oct/2026:10:00:00 +0000] "GET /products/2" 200 31 0.42ms a1b2c3d4
    json:  {"request_id": "a1b2c3d4", "method": "GET", "path": "/products/2", ...}

Route it like any other logger:

    logging.getLogger("httprouter.access").addHandler(file_handler)

=============================================================================
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass, asdict
from typing import Optional

from .config import RouterConfig


logger = logging.getLogger("httprouter.access")


@dataclass
class RequestLog:
    """Structured log entry for one dispatch."""

    request_id: str
    method: str
    path: str
    client_ip: str
    status_code: Optional[int]
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        entry = asdict(self)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        status = self.status_code if self.status_code is not None else "-"
        return (
            f'{self.client_ip or "-"} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {status} '
            f'{self.content_length} {self.duration_ms:.2f}ms {self.request_id}'
        )


def new_request_id() -> str:
    """Short random id used to correlate log lines of one request."""
    return str(uuid.uuid4())[:8]


def log_request(
    request,
    response,
    started: float,
    request_id: str,
    log_format: str = "text",
) -> RequestLog:
    """
    Emit the access log entry for ``request``.

    Args:
        request: The RequestContext that was dispatched.
        response: The HTTPResponse produced, or None when nothing matched.
        started: ``time.perf_counter()`` value taken before dispatch.
        request_id: Correlation id.
        log_format: "text" or "json".
    """
    entry = RequestLog(
        request_id=request_id,
        method=request.method,
        path=request.path,
        client_ip=request.client_address[0],
        status_code=int(response.status) if response is not None else None,
        content_length=len(response.body) if response is not None else 0,
        duration_ms=(time.perf_counter() - started) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )

    if log_format == "json":
        logger.info(json.dumps(entry.to_dict()))
    else:
        logger.info(entry.to_text())
    return entry


def configure_logging(config: RouterConfig) -> None:
    """Configure the root logger and the "httprouter" logger from ``config``."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("httprouter").setLevel(level)
