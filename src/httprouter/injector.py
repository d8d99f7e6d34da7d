"""
=============================================================================
INJECTOR
=============================================================================

The router needs exactly one thing from a dependency-injection container:

    create(identifier, args) → instance

``Injector`` is the default implementation. Any object with a compatible
``create`` method can be passed to the Router instead.

=============================================================================
IDENTIFIERS
=============================================================================

    ┌────────────────────────────┬────────────────────────────────────────┐
    │ identifier                 │ resolved as                            │
    ├────────────────────────────┼────────────────────────────────────────┤
    │ "products"                 │ registered alias (register())          │
    │ ProductsController         │ the class itself                       │
    │ "shop.controllers.Products"│ imported: module "shop.controllers"    │
    │ "shop.controllers:Products"│ imported: same, explicit separator     │
    └────────────────────────────┴────────────────────────────────────────┘

Constructor arguments passed to ``create`` follow any registered ones.

=============================================================================
LIFETIME
=============================================================================

Instances are created fresh on every ``create`` call. A registration made
with ``shared=True`` is created once per Injector and reused afterwards;
build one Injector per request to keep shared instances request scoped.

=============================================================================
"""

import importlib
import logging
from typing import Any, Callable, Dict, Optional, Sequence

from .errors import InvalidCallback


logger = logging.getLogger(__name__)


class Injector:
    """
    Minimal object factory.

    Example:
        injector = Injector()
        injector.register("products", ProductsController, args=("Shop",))
        controller = injector.create("products")
    """

    def __init__(self):
        self._registry: Dict[str, Dict[str, Any]] = {}
        self._shared: Dict[str, Any] = {}

    def register(
        self,
        identifier: str,
        factory: Callable[..., Any],
        args: Sequence[Any] = (),
        shared: bool = False,
    ) -> "Injector":
        """
        Register a factory (usually a class) under ``identifier``.

        Args:
            identifier: Alias used by routes and ``create``.
            factory: Callable producing the instance.
            args: Constructor arguments placed before those given to ``create``.
            shared: Create once and reuse for this injector.

        Returns:
            Self for method chaining.
        """
        self._registry[identifier] = {"factory": factory, "args": tuple(args), "shared": shared}
        self._shared.pop(identifier, None)
        return self

    def create(self, identifier: Any, args: Sequence[Any] = ()) -> Any:
        """
        Build an instance for ``identifier``.

        Raises:
            InvalidCallback: The identifier cannot be resolved to a factory.
        """
        if isinstance(identifier, str) and identifier in self._registry:
            entry = self._registry[identifier]
            if entry["shared"] and identifier in self._shared:
                return self._shared[identifier]

            instance = entry["factory"](*entry["args"], *args)
            if entry["shared"]:
                self._shared[identifier] = instance
            return instance

        factory = self.resolve(identifier)
        logger.debug("creating %s", getattr(factory, "__qualname__", factory))
        return factory(*args)

    def resolve(self, identifier: Any) -> Callable[..., Any]:
        """Turn a class or dotted import path into a factory."""
        if isinstance(identifier, type):
            return identifier
        if not isinstance(identifier, str):
            raise InvalidCallback(identifier)

        factory = _import_object(identifier)
        if factory is None or not callable(factory):
            raise InvalidCallback(identifier)
        return factory


def _import_object(path: str) -> Optional[Any]:
    # "pkg.mod:Name" or "pkg.mod.Name"
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")

    if not module_name or not attr:
        return None

    try:
        module = importlib.import_module(module_name)
    except ImportError:
        logger.debug("cannot import %r", module_name)
        return None

    return getattr(module, attr, None)
