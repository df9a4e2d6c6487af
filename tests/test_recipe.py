"""
Tests for JSON recipes.
"""

import json

import pytest

from IU_Libs.errors import InvalidParameterError, UnsupportedFormatError
from IU_Libs.PipelineLib.image_pipeline import ImagePipeline
from IU_Libs.PipelineLib.operation_registry import OperationRegistry
from IU_Libs.PipelineLib.recipe import apply_recipe, load_recipe, validate_steps
from IU_Libs.RasterLib.raster import Raster


@pytest.fixture
def pipeline():
    return ImagePipeline.load(Raster.new(40, 20, (200, 100, 50, 255)), seed=3)


class TestValidateSteps:
    """Test recipe validation."""

    def test_list_form(self):
        steps = validate_steps([{"op": "greyscale"}, {"op": "blur", "kind": "selective"}])

        assert [step["op"] for step in steps] == ["greyscale", "blur"]

    def test_object_form(self):
        assert validate_steps({"steps": [{"op": "sepia"}]}) == [{"op": "sepia"}]

    def test_object_without_steps(self):
        with pytest.raises(InvalidParameterError):
            validate_steps({"op": "sepia"})

    def test_not_a_list(self):
        with pytest.raises(InvalidParameterError):
            validate_steps("greyscale")

    def test_step_not_an_object(self):
        with pytest.raises(InvalidParameterError):
            validate_steps(["greyscale"])

    def test_missing_op(self):
        with pytest.raises(InvalidParameterError):
            validate_steps([{"kind": "gaussian"}])


class TestLoadRecipe:
    """Test reading recipe files."""

    def test_load(self, tmp_path):
        path = tmp_path / "recipe.json"
        path.write_text(json.dumps({"steps": [{"op": "resize", "width": 10, "height": 10}]}))

        assert load_recipe(path) == [{"op": "resize", "width": 10, "height": 10}]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "recipe.json"
        path.write_text("[{\"op\": ")

        with pytest.raises(InvalidParameterError):
            load_recipe(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_recipe(tmp_path / "missing.json")


class TestApplyRecipe:
    """Test running recipes."""

    def test_steps_run_in_order(self, pipeline):
        apply_recipe(
            pipeline,
            [
                {"op": "resize", "width": 20, "height": 20, "policy": "crop"},
                {"op": "rotate", "angle": 90},
                {"op": "greyscale"},
            ],
        )

        assert pipeline.working.size == (20, 20)
        r, g, b, _ = pipeline.working.get_pixel(5, 5)
        assert r == g == b

    def test_unknown_operation(self, pipeline):
        with pytest.raises(InvalidParameterError):
            apply_recipe(pipeline, [{"op": "explode"}])

    def test_unconvertible_value(self, pipeline):
        with pytest.raises(InvalidParameterError):
            apply_recipe(pipeline, [{"op": "pixelate", "block_size": "big"}])
        with pytest.raises(InvalidParameterError):
            apply_recipe(pipeline, [{"op": "brightness", "value": "lots"}])

    def test_missing_required_parameter(self, pipeline):
        with pytest.raises(InvalidParameterError):
            apply_recipe(pipeline, [{"op": "watermark"}])

    def test_typed_errors_pass_through(self, pipeline):
        with pytest.raises(UnsupportedFormatError):
            apply_recipe(pipeline, [{"op": "mask", "overlay": "frame.jpg"}])

    def test_custom_registry(self, pipeline):
        seen = []
        registry = OperationRegistry()
        registry.register("mark", lambda p, params: seen.append(params) or p)

        apply_recipe(pipeline, [{"op": "mark", "value": 1}], registry=registry)

        assert seen == [{"value": 1}]

    def test_recipe_step_not_modified(self, pipeline):
        steps = [{"op": "brightness", "value": 10}]

        apply_recipe(pipeline, steps)

        assert steps == [{"op": "brightness", "value": 10}]
