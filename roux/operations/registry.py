"""
Operation Registry for resolving ordinary operations by name.

The registry maps operation names to OperationHandler instances. Recipe
compilation looks up every non flow-control operation here; flow-control
primitives are handled by roux.flow_control and are never registered.
"""

from roux.operations.base import OperationHandler
from roux.schemas.ops import Op


class OperationRegistry:
    """
    Registry of ordinary operations by name.

    Usage:
        registry = OperationRegistry.create_default()
        registry.register(MyHandler())

        handler = registry.get("To Upper case")
    """

    def __init__(self) -> None:
        """Initialize an empty operation registry."""
        self._handlers: dict[str, OperationHandler] = {}

    def register(self, handler: OperationHandler) -> None:
        """
        Register a handler under its name.

        Args:
            handler: OperationHandler instance

        Raises:
            ValueError: If the name is empty or is a flow-control operation
        """
        if not handler.name:
            raise ValueError(f"Handler {handler!r} has no name")
        if Op.lookup(handler.name) is not None:
            raise ValueError(f"'{handler.name}' is a flow-control operation and cannot be registered")
        self._handlers[handler.name] = handler

    def get(self, name: str) -> OperationHandler:
        """
        Get the handler for an operation name.

        Raises:
            KeyError: If no handler is registered under name
        """
        if name not in self._handlers:
            registered = sorted(self._handlers.keys())
            raise KeyError(
                f"No operation registered with name: {name}. "
                f"Registered: {registered}"
            )
        return self._handlers[name]

    def has(self, name: str) -> bool:
        """Check if an operation is registered."""
        return name in self._handlers

    def list_operations(self) -> list[str]:
        """List registered operation names, sorted."""
        return sorted(self._handlers.keys())

    @classmethod
    def create_default(cls) -> "OperationRegistry":
        """
        Create a registry with the built-in operations.

        Returns:
            OperationRegistry with the text operations registered
        """
        from roux.operations.text import TEXT_OPERATIONS

        registry = cls()
        for handler_cls in TEXT_OPERATIONS:
            registry.register(handler_cls())
        return registry
