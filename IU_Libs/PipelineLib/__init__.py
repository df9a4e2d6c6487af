"""
PipelineLib - Stateful image pipeline, operation registry and recipes
"""

from IU_Libs.PipelineLib.pipeline_state import PipelineStage, PipelineState
from IU_Libs.PipelineLib.image_pipeline import ImagePipeline
from IU_Libs.PipelineLib.operation_registry import (
    OperationRegistry,
    method_executor,
    get_default_registry,
    register_default_operations,
)
from IU_Libs.PipelineLib.recipe import validate_steps, load_recipe, apply_recipe

__all__ = [
    "PipelineStage",
    "PipelineState",
    "ImagePipeline",
    "OperationRegistry",
    "method_executor",
    "get_default_registry",
    "register_default_operations",
    "validate_steps",
    "load_recipe",
    "apply_recipe",
]
