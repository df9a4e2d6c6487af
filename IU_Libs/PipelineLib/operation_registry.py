"""
Operation Registry.

Maps operation names to executors so pipelines can be driven from data
(JSON recipes, the command line). An executor takes the pipeline and a
parameter dict and returns the pipeline.

Classes:
    OperationRegistry: Registry for pipeline operations

Functions:
    get_default_registry: Get the global default registry (singleton)
    register_default_operations: Register every ImagePipeline operation
"""

import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from IU_Libs.errors import ImageUtilError, InvalidParameterError
from IU_Libs.PipelineLib.image_pipeline import ImagePipeline

logger = logging.getLogger(__name__)

# Type alias for executor function
OperationExecutor = Callable[[ImagePipeline, Dict[str, Any]], ImagePipeline]


class OperationRegistry:
    """
    Registry for pipeline operations.

    Example:
        >>> registry = OperationRegistry()
        >>> registry.register("greyscale", method_executor("greyscale"), tags=["color"])
        >>> registry.execute("greyscale", pipeline, {})
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._executors: Dict[str, OperationExecutor] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        name: str,
        executor: OperationExecutor,
        description: str = "",
        tags: Optional[List[str]] = None,
    ) -> None:
        """
        Register an operation.

        Args:
            name: Operation name used in recipes (e.g., "resize")
            executor: Callable accepting (pipeline, params)
            description: Human-readable description
            tags: Optional list of tags for categorization

        Raises:
            ValueError: If name is empty or executor is not callable
            RuntimeError: If name is already registered
        """
        name = str(name).strip()

        if not name:
            raise ValueError("Operation name cannot be empty")

        if not callable(executor):
            raise ValueError(f"executor must be callable, got {type(executor)}")

        if name in self._executors:
            raise RuntimeError(
                f"Operation '{name}' is already registered. "
                f"Use unregister() first to replace it."
            )

        self._executors[name] = executor
        self._metadata[name] = {
            "description": str(description),
            "tags": list(tags) if tags else [],
        }

        logger.debug(f"Registered operation: {name}")

    def unregister(self, name: str) -> bool:
        """
        Unregister an operation.

        Returns:
            True if unregistered, False if name was not registered
        """
        name = str(name).strip()

        if name in self._executors:
            del self._executors[name]
            del self._metadata[name]
            logger.debug(f"Unregistered operation: {name}")
            return True

        return False

    def get_executor(self, name: str) -> OperationExecutor:
        """
        Get the executor for an operation.

        Raises:
            InvalidParameterError: If the operation is not registered
        """
        name = str(name).strip()

        if name not in self._executors:
            available = ", ".join(self.list_operations())
            raise InvalidParameterError(
                f"Unknown operation '{name}'. Available operations: {available}"
            )

        return self._executors[name]

    def has_operation(self, name: str) -> bool:
        return str(name).strip() in self._executors

    def execute(
        self,
        name: str,
        pipeline: ImagePipeline,
        params: Optional[Dict[str, Any]] = None,
    ) -> ImagePipeline:
        """
        Run an operation on a pipeline.

        Raises:
            InvalidParameterError: If the operation is unknown
            Exception: Any exception raised by the executor
        """
        executor = self.get_executor(name)
        return executor(pipeline, dict(params or {}))

    def list_operations(self) -> List[str]:
        """Sorted list of registered operation names."""
        return sorted(self._executors.keys())

    def get_metadata(self, name: str) -> Dict[str, Any]:
        """
        Get metadata (description, tags) for an operation.

        Raises:
            KeyError: If name is not registered
        """
        name = str(name).strip()

        if name not in self._metadata:
            raise KeyError(f"No metadata for operation: {name}")

        return dict(self._metadata[name])

    def get_all_metadata(self) -> Dict[str, Dict[str, Any]]:
        return {name: dict(meta) for name, meta in self._metadata.items()}

    def filter_by_tag(self, tag: str) -> List[str]:
        """Sorted operation names carrying ``tag`` (case-insensitive)."""
        tag = str(tag).strip().lower()
        return sorted([
            name
            for name, meta in self._metadata.items()
            if tag in [t.lower() for t in meta.get("tags", [])]
        ])

    def clear(self) -> None:
        """Clear all registered operations. Use with caution."""
        self._executors.clear()
        self._metadata.clear()
        logger.warning("Operation registry cleared")


def method_executor(method_name: str) -> OperationExecutor:
    """
    Build an executor that calls ``ImagePipeline.<method_name>(**params)``.

    Parameters are checked against the method signature. Unknown or missing
    parameters and values the operation cannot convert raise
    InvalidParameterError.
    """
    method = getattr(ImagePipeline, method_name)
    signature = inspect.signature(method)
    accepted = [p for p in signature.parameters if p != "self"]

    def executor(pipeline: ImagePipeline, params: Dict[str, Any]) -> ImagePipeline:
        unknown = sorted(set(params) - set(accepted))
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameter(s) for '{method_name}': {', '.join(unknown)}. "
                f"Accepted: {', '.join(accepted) or 'none'}"
            )

        try:
            signature.bind(pipeline, **params)
        except TypeError as e:
            raise InvalidParameterError(f"Invalid parameters for '{method_name}': {e}") from e

        try:
            return getattr(pipeline, method_name)(**params)
        except ImageUtilError:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(
                f"Invalid value for '{method_name}' {params}: {e}"
            ) from e

    executor.__name__ = f"execute_{method_name}"
    return executor


# Global singleton registry
_default_registry: Optional[OperationRegistry] = None


def get_default_registry() -> OperationRegistry:
    """
    Get the global default registry (singleton).

    Creates the registry on first call and registers the default operations.
    """
    global _default_registry

    if _default_registry is None:
        _default_registry = OperationRegistry()
        register_default_operations(_default_registry)

    return _default_registry


DEFAULT_OPERATIONS = [
    ("resize", "Resize with exact, portrait, landscape, crop or auto policy", ["geometry"]),
    ("rotate", "Rotate counter-clockwise by an angle or a small random angle", ["geometry"]),
    ("blur", "Gaussian or selective blur", ["color", "filter"]),
    ("brightness", "Shift brightness by -255..255", ["color", "filter"]),
    ("contrast", "Change contrast by -255..255", ["color", "filter"]),
    ("greyscale", "Convert to greyscale", ["color", "filter"]),
    ("smooth", "Smooth with a weighted 3x3 kernel", ["color", "filter"]),
    ("sepia", "Greyscale, darken and tint", ["color", "filter"]),
    ("sharpen", "Enable or disable sharpening on export", ["filter"]),
    ("pixelate", "Replace blocks with their mean color", ["artistic", "filter"]),
    ("rasterbate", "Halftone discs on a white background", ["artistic", "filter"]),
    ("scatter", "Swap pixels with random neighbours", ["artistic", "filter", "random"]),
    ("noise", "Random brightness jitter", ["artistic", "filter", "random"]),
    ("interlace", "Black out odd scanlines", ["artistic", "filter"]),
    ("watermark", "Merge a watermark into a corner", ["composition"]),
    ("mask", "Frame the image with a PNG mask", ["composition"]),
]


def register_default_operations(registry: OperationRegistry) -> None:
    """Register every chainable ImagePipeline operation under its method name."""
    for name, description, tags in DEFAULT_OPERATIONS:
        registry.register(
            name=name,
            executor=method_executor(name),
            description=description,
            tags=tags,
        )

    logger.debug(f"Registered {len(DEFAULT_OPERATIONS)} default operations")
