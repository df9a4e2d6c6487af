"""
JSON recipes: ordered lists of pipeline operations.

A recipe is a list of steps such as::

    [
        {"op": "resize", "width": 400, "height": 300, "policy": "crop"},
        {"op": "sepia"},
        {"op": "watermark", "overlay": "logo.png", "corner": "TR"}
    ]

or an object holding that list under "steps".
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from IU_Libs.constants import FIELD_OP, FIELD_STEPS
from IU_Libs.errors import InvalidParameterError
from IU_Libs.PipelineLib.image_pipeline import ImagePipeline
from IU_Libs.PipelineLib.operation_registry import OperationRegistry, get_default_registry

logger = logging.getLogger(__name__)


def validate_steps(data: Any) -> List[Dict[str, Any]]:
    """
    Check recipe data and return its list of steps.

    Raises:
        InvalidParameterError: If the data is not a list of {"op": ...} dicts
    """
    if isinstance(data, dict):
        if FIELD_STEPS not in data:
            raise InvalidParameterError(f"Recipe object must have a '{FIELD_STEPS}' list")
        data = data[FIELD_STEPS]

    if not isinstance(data, list):
        raise InvalidParameterError(f"Recipe must be a list of steps, got {type(data).__name__}")

    steps = []
    for index, step in enumerate(data):
        if not isinstance(step, dict):
            raise InvalidParameterError(f"Step {index} must be an object, got {type(step).__name__}")
        op = step.get(FIELD_OP)
        if not isinstance(op, str) or not op.strip():
            raise InvalidParameterError(f"Step {index} is missing the '{FIELD_OP}' field")
        steps.append(dict(step))

    return steps


def load_recipe(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a recipe from a JSON file.

    Raises:
        OSError: If the file cannot be read
        InvalidParameterError: If the JSON is malformed or not a recipe
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Recipe {path} is not valid JSON: {e}") from e

    steps = validate_steps(data)
    logger.debug(f"Loaded recipe {path} with {len(steps)} step(s)")
    return steps


def apply_recipe(
    pipeline: ImagePipeline,
    steps: Any,
    registry: Optional[OperationRegistry] = None,
) -> ImagePipeline:
    """
    Run recipe steps on a pipeline, in order.

    Args:
        pipeline: Pipeline to transform
        steps: List of {"op": name, **params} dicts (or {"steps": [...]})
        registry: Operation registry (default registry if None)

    Returns:
        The pipeline

    Raises:
        InvalidParameterError: If a step names an unknown operation or parameter
    """
    registry = registry if registry is not None else get_default_registry()

    for step in validate_steps(steps):
        params = dict(step)
        op = params.pop(FIELD_OP).strip()
        logger.debug(f"Recipe step: {op} {params}")
        pipeline = registry.execute(op, pipeline, params)

    return pipeline
