"""
Function catalog.

Holds the named functions, consumers and suppliers exposed over HTTP.
Entries are registered programmatically or loaded from functions.yml,
where each entry points at an importable ``module:attribute`` handler.
"""

import importlib
import logging
import os
import string
from typing import Any, Dict, Optional, Set

import yaml

from ..config import config
from ..core.exceptions import FunctionRegistrationError
from ..models.function import FunctionEntity, FunctionKind
from .function_inspector import resolve_function_type
from .invocation import FunctionInvocationWrapper

logger = logging.getLogger("function_web.function_catalog")

# Served by built-in routes ahead of the catalog.
RESERVED_NAMES = frozenset({"health"})


def import_handler(handler: str) -> Any:
    """
    Import ``package.module:attribute[.nested]``.

    A class is instantiated without arguments so that callable classes can be
    declared directly.
    """
    module_name, sep, attribute_path = handler.partition(":")
    if not sep or not module_name or not attribute_path:
        raise ValueError(f"handler must look like 'module:attribute', got {handler!r}")

    target: Any = importlib.import_module(module_name)
    for attribute in attribute_path.split("."):
        target = getattr(target, attribute)
    if isinstance(target, type):
        target = target()
    if not callable(target):
        raise TypeError(f"{handler} is not callable")
    return target


class FunctionCatalog:
    def __init__(self, attributes_provider: Optional[Any] = None, config_path: Optional[str] = None):
        self.attributes_provider = attributes_provider
        self.config_path = config_path or config.FUNCTIONS_CONFIG_PATH
        self._registry: Dict[str, FunctionInvocationWrapper] = {}
        self._loaded: Set[str] = set()

    def register(
        self, name: str, target: Any, kind: Optional[FunctionKind] = None
    ) -> FunctionInvocationWrapper:
        """
        Register a callable under a name, replacing any previous entry.

        Raises:
            FunctionRegistrationError: name is reserved by a built-in route,
                target is not callable or its type hints cannot be inspected
        """
        if name in RESERVED_NAMES:
            raise FunctionRegistrationError(name, "name is reserved")
        if not callable(target):
            raise FunctionRegistrationError(name, "target is not callable")
        try:
            function_type = resolve_function_type(target, kind)
        except (TypeError, ValueError) as e:
            raise FunctionRegistrationError(name, e) from e

        wrapper = FunctionInvocationWrapper(name, target, function_type, self.attributes_provider)
        self._registry[name] = wrapper
        logger.debug(f"Registered {function_type.kind.value} '{name}'")
        return wrapper

    def unregister(self, name: str) -> None:
        self._registry.pop(name, None)
        self._loaded.discard(name)

    def lookup(self, kind: FunctionKind, name: Optional[str]) -> Optional[FunctionInvocationWrapper]:
        """
        Find a registered callable of the given kind.

        Returns:
            The invocation wrapper, or None when the name is unknown or
            registered with a different kind
        """
        if not name:
            return None
        wrapper = self._registry.get(name)
        if wrapper is None or wrapper.kind is not kind:
            return None
        return wrapper

    def get_names(self, kind: Optional[FunctionKind] = None) -> Set[str]:
        return {
            name
            for name, wrapper in self._registry.items()
            if kind is None or wrapper.kind is kind
        }

    def load_functions_config(self) -> Dict[str, FunctionEntity]:
        """
        Load functions.yml and register every declared handler.

        Returns:
            Dict of function name -> declared entity (only the ones registered)
        """
        entities: Dict[str, FunctionEntity] = {}
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                # Substitute environment variables using string.Template.
                template = string.Template(f.read())
                content = template.safe_substitute(os.environ.copy())
                cfg = yaml.safe_load(content) or {}
        except FileNotFoundError:
            logger.warning(f"Functions config not found at {self.config_path}")
            return entities
        except yaml.YAMLError as e:
            logger.error(f"Error parsing functions config: {e}")
            return entities

        for name, data in (cfg.get("functions") or {}).items():
            entity = FunctionEntity.from_dict(name, data)
            try:
                self.register(name, import_handler(entity.handler), entity.kind)
            except (ImportError, AttributeError, TypeError, ValueError, FunctionRegistrationError) as e:
                logger.error(f"Skipping function '{name}' ({entity.handler}): {e}")
                continue
            self._loaded.add(name)
            entities[name] = entity

        logger.info(f"Loaded {len(entities)} functions from {self.config_path}")
        return entities

    def reload(self) -> Dict[str, FunctionEntity]:
        """Drop the entries loaded from functions.yml and load it again."""
        for name in list(self._loaded):
            self.unregister(name)
        return self.load_functions_config()
