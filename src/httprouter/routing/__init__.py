"""
=============================================================================
ROUTING
=============================================================================

    pattern.py     PatternMatcher: "METHOD path-regex" vs "METHOD PATH"
    invoker.py     RouteInvoker: calls a matched target inside an error boundary
    controller.py  ControllerDispatcher: naming-convention method resolution
    url.py         UrlBuilder: current / application-relative URLs

=============================================================================
"""

from .pattern import PatternMatcher, RouteSignature, compile_signature
from .invoker import RouteInvoker
from .controller import ControllerDispatcher, DispatchVariant, MethodTable
from .url import UrlBuilder

__all__ = [
    "PatternMatcher",
    "RouteSignature",
    "compile_signature",
    "RouteInvoker",
    "ControllerDispatcher",
    "DispatchVariant",
    "MethodTable",
    "UrlBuilder",
]
