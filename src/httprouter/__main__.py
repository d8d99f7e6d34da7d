"""
=============================================================================
HTTPROUTER CLI ENTRY POINT
=============================================================================

Dispatches ONE raw HTTP request through an application and writes the raw
HTTP response to stdout, CGI style: one request per process.

=============================================================================
USAGE
=============================================================================

    # Request from stdin
    printf 'GET /products/2 HTTP/1.1\\r\\nHost: localhost\\r\\n\\r\\n' \\
        | python -m httprouter shop.app:setup

    # Request from a file, application mounted below /shop/index.py
    python -m httprouter shop.app:setup --request req.http \\
        --script-name /shop/index.py

    # Trace every route match
    python -m httprouter shop.app:setup --log-level DEBUG < req.http

APP is "module:function"; the function receives the Router and registers
routes on it.

=============================================================================
"""

import argparse
import importlib
import logging
import sys
from typing import Callable, List, Optional

from . import __version__
from .access_log import configure_logging
from .config import RouterConfig, LOG_FORMATS, LOG_LEVELS
from .http.request import HTTPParseError, RequestParser
from .http.response import error_response
from .http.status_codes import HTTPStatus
from .router import dispatch


logger = logging.getLogger(__name__)


def load_app(target: str) -> Callable:
    """Import "module:function" and return the function."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"APP must look like 'module:function', got {target!r}")

    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ValueError(f"{module_name!r} has no attribute {attr!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="httprouter",
        description="Dispatch one raw HTTP request through an httprouter application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httprouter shop.app:setup < request.http
  python -m httprouter shop.app:setup --request request.http --https
  python -m httprouter shop.app:setup --script-name /shop/index.py
        """,
    )

    parser.add_argument("app", help="Application setup function, as module:function")

    parser.add_argument(
        "--request", "-r",
        default=None,
        help="File holding the raw HTTP request (default: stdin)",
    )

    parser.add_argument(
        "--script-name", "-s",
        default=None,
        help="Mount prefix stripped from the path (default: $HTTPROUTER_SCRIPT_NAME)",
    )

    parser.add_argument(
        "--https",
        action="store_true",
        help="Treat the request as received over TLS",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (default: $HTTPROUTER_LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Access log format (default: text)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httprouter {__version__}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = RouterConfig.from_env()
    if args.script_name is not None:
        config.script_name = args.script_name
    if args.log_level is not None:
        config.log_level = args.log_level
    if args.log_format is not None:
        config.log_format = args.log_format
    config.validate()

    configure_logging(config)
    setup = load_app(args.app)

    if args.request:
        with open(args.request, "rb") as f:
            raw = f.read()
    else:
        raw = sys.stdin.buffer.read()

    parser = RequestParser(
        max_request_size=config.max_request_size,
        script_name=config.script_name,
    )

    try:
        request = parser.parse(raw, https=args.https)
    except HTTPParseError as e:
        logger.warning("Rejected request: %s", e)
        response = error_response(str(e), e.status_code)
    else:
        response = dispatch(request, setup, config=config)
        if response is None:
            response = error_response(f"No route matches {request.path}", HTTPStatus.NOT_FOUND)

    sys.stdout.buffer.write(response.to_bytes())
    sys.stdout.buffer.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
