"""
Fluent image pipeline.

ImagePipeline wraps one PipelineState and exposes every operation as a
chainable method. The first filter on an image that was never resized
resizes it to its own size, and the first export runs the pending sharpen.

Example:
    >>> (ImagePipeline.open("photo.jpg", seed=3)
    ...     .resize(400, 300, "crop")
    ...     .sepia()
    ...     .watermark("logo.png", transparency=60, corner="TR")
    ...     .save("out/photo.jpg", quality=85))
"""

import logging
from pathlib import Path
from typing import Any, Optional, Sequence, Union

import numpy as np

from IU_Libs.CodecLib.image_codec import encode, format_for_path, load_raster
from IU_Libs.CodecLib.optimizer import ImageOptimizer
from IU_Libs.CodecLib.output_writer import OutputWriter, SaveOptions
from IU_Libs.CompositeLib.compositor import alpha_merge, build_mask_canvas, watermark_position
from IU_Libs.constants import (
    DEFAULT_BLUR_KIND,
    DEFAULT_BRIGHTNESS,
    DEFAULT_CHMOD,
    DEFAULT_CONTRAST,
    DEFAULT_NOISE_INTENSITY,
    DEFAULT_PIXELATE_BLOCK,
    DEFAULT_QUALITY,
    DEFAULT_RASTERBATE_BLOCK,
    DEFAULT_RESIZE_POLICY,
    DEFAULT_ROTATE_BACKGROUND,
    DEFAULT_SCATTER_INTENSITY,
    DEFAULT_SEPIA_BRIGHTNESS,
    DEFAULT_SEPIA_RGB,
    DEFAULT_SMOOTH,
    DEFAULT_WATERMARK_CORNER,
    DEFAULT_WATERMARK_PADDING,
    DEFAULT_WATERMARK_TRANSPARENCY,
    MASK_EXTENSIONS,
    PERCENT_MAX,
)
from IU_Libs.FiltersLib import artistic_filters, color_filters
from IU_Libs.PipelineLib.pipeline_state import PipelineStage, PipelineState
from IU_Libs.RasterLib.color_utils import clamp
from IU_Libs.RasterLib.raster import Raster
from IU_Libs.RasterLib.resampler import ResizePolicy, get_dimensions, resize, round_dimensions
from IU_Libs.RasterLib.rotator import rotate
from IU_Libs.RasterLib.sharpener import sharpen_if_needed

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Overlay = Union[Raster, str, Path]


class ImagePipeline:
    """
    Chainable transformations on a single image.

    Every operation except the exports returns ``self``. Randomized filters
    (scatter, noise, random rotation) draw from the pipeline's own
    ``numpy.random.Generator``; pass ``seed`` for repeatable output.

    Args:
        seed: Seed for the pipeline's random generator
        optimizer: External optimizer used by save()
    """

    def __init__(self, seed: Optional[int] = None, optimizer: Optional[ImageOptimizer] = None):
        self._state = PipelineState()
        self.rng = np.random.default_rng(seed)
        self.optimizer = optimizer

    @classmethod
    def load(
        cls,
        raster: Raster,
        seed: Optional[int] = None,
        optimizer: Optional[ImageOptimizer] = None,
    ) -> "ImagePipeline":
        """Start a pipeline from a decoded raster (the raster is copied)."""
        pipeline = cls(seed=seed, optimizer=optimizer)
        pipeline._state = PipelineState.from_raster(raster)
        return pipeline

    @classmethod
    def open(
        cls,
        path: PathLike,
        seed: Optional[int] = None,
        optimizer: Optional[ImageOptimizer] = None,
    ) -> "ImagePipeline":
        """Start a pipeline from a .jpg/.jpeg/.png/.gif file."""
        raster = load_raster(path)
        logger.debug(f"Opened {path} ({raster.width}x{raster.height})")
        return cls.load(raster, seed=seed, optimizer=optimizer)

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def working(self) -> Optional[Raster]:
        return self._state.working

    def _working(self, operation: str) -> Raster:
        """Working raster for an operation, resizing to the source size if needed."""
        if self._state.stage is PipelineStage.UNRESIZED:
            logger.debug(f"Implicit resize to source size before {operation}")
            self.resize(self._state.source_width, self._state.source_height, ResizePolicy.EXACT)
        return self._state.require_working(operation)

    # ========================================================================
    # Geometry
    # ========================================================================

    def resize(
        self,
        width: int,
        height: int,
        policy: Union[ResizePolicy, str] = DEFAULT_RESIZE_POLICY,
    ) -> "ImagePipeline":
        """
        Resize the source into a fresh working raster.

        Always starts from the untouched source, discarding earlier work,
        and re-arms the one-time sharpen pass.

        Args:
            width: Target width
            height: Target height
            policy: 'exact', 'portrait', 'landscape', 'crop' or 'auto'
        """
        source = self._state.require_source("resize")
        policy = ResizePolicy.parse(policy)

        if policy is ResizePolicy.CROP:
            # Cropping leaves the target size as the reference for sharpening
            optimal_width, optimal_height = round_dimensions(int(width), int(height))
        else:
            optimal = get_dimensions(source.width, source.height, int(width), int(height), policy)
            optimal_width, optimal_height = round_dimensions(*optimal)
        working = resize(source, width, height, policy)

        self._state.set_resized(working, optimal_width, optimal_height)
        logger.debug(
            f"Resized {source.width}x{source.height} -> {working.width}x{working.height} "
            f"({policy.value})"
        )
        return self

    def rotate(self, angle: Any = "random", background: Any = DEFAULT_ROTATE_BACKGROUND) -> "ImagePipeline":
        """
        Rotate counter-clockwise.

        Args:
            angle: Degrees (clamped to -360..360) or 'random' (-6..6)
            background: Hex color, 'alpha' for transparent, or RGB(A) tuple
        """
        working = self._working("rotate")
        self._state.working = rotate(working, angle, background, rng=self.rng)
        return self

    # ========================================================================
    # Color filters
    # ========================================================================

    def blur(self, kind: str = DEFAULT_BLUR_KIND) -> "ImagePipeline":
        self._state.working = color_filters.blur(self._working("blur"), kind)
        return self

    def brightness(self, value: int = DEFAULT_BRIGHTNESS) -> "ImagePipeline":
        self._state.working = color_filters.brightness(self._working("brightness"), value)
        return self

    def contrast(self, value: int = DEFAULT_CONTRAST) -> "ImagePipeline":
        self._state.working = color_filters.contrast(self._working("contrast"), value)
        return self

    def greyscale(self) -> "ImagePipeline":
        self._state.working = color_filters.greyscale(self._working("greyscale"))
        return self

    def smooth(self, value: int = DEFAULT_SMOOTH) -> "ImagePipeline":
        self._state.working = color_filters.smooth(self._working("smooth"), value)
        return self

    def sepia(
        self,
        rgb: Union[str, Sequence[int]] = DEFAULT_SEPIA_RGB,
        brightness: int = DEFAULT_SEPIA_BRIGHTNESS,
    ) -> "ImagePipeline":
        self._state.working = color_filters.sepia(self._working("sepia"), rgb, brightness)
        return self

    def sharpen(self, enabled: bool = True) -> "ImagePipeline":
        """Enable or disable the automatic sharpen pass on export."""
        self._state.sharpen_enabled = bool(enabled)
        return self

    # ========================================================================
    # Artistic filters
    # ========================================================================

    def pixelate(self, block_size: int = DEFAULT_PIXELATE_BLOCK) -> "ImagePipeline":
        artistic_filters.pixelate(self._working("pixelate"), block_size)
        return self

    def rasterbate(self, block_size: int = DEFAULT_RASTERBATE_BLOCK) -> "ImagePipeline":
        self._state.working = artistic_filters.rasterbate(self._working("rasterbate"), block_size)
        return self

    def scatter(self, intensity: int = DEFAULT_SCATTER_INTENSITY) -> "ImagePipeline":
        artistic_filters.scatter(self._working("scatter"), intensity, rng=self.rng)
        return self

    def noise(self, intensity: int = DEFAULT_NOISE_INTENSITY) -> "ImagePipeline":
        artistic_filters.noise(self._working("noise"), intensity, rng=self.rng)
        return self

    def interlace(self) -> "ImagePipeline":
        artistic_filters.interlace(self._working("interlace"))
        return self

    # ========================================================================
    # Compositing
    # ========================================================================

    def watermark(
        self,
        overlay: Overlay,
        transparency: int = DEFAULT_WATERMARK_TRANSPARENCY,
        padding: int = DEFAULT_WATERMARK_PADDING,
        corner: str = DEFAULT_WATERMARK_CORNER,
    ) -> "ImagePipeline":
        """
        Merge a watermark into one corner.

        Args:
            overlay: Raster or .jpg/.jpeg/.png/.gif path
            transparency: Blend percentage 0-100 (clamped)
            padding: Distance from the edges in pixels
            corner: 'TL', 'TR', 'BL' or 'BR'
        """
        working = self._working("watermark")
        mark = overlay if isinstance(overlay, Raster) else load_raster(overlay)
        percent = clamp(int(transparency), 0, PERCENT_MAX)

        x, y = watermark_position(
            working.width, working.height, mark.width, mark.height, padding, corner
        )
        alpha_merge(working, mark, x, y, percent=percent)
        return self

    def mask(
        self,
        overlay: Overlay,
        top: int = 0,
        left: int = 0,
        background: Any = None,
    ) -> "ImagePipeline":
        """
        Frame the image with a mask overlay; the result takes the mask's size.

        Args:
            overlay: Raster or .png path
            top: y offset of the image under the mask
            left: x offset of the image under the mask
            background: Hex color of the uncovered area (transparent if empty)
        """
        working = self._working("mask")
        mask_raster = overlay if isinstance(overlay, Raster) else load_raster(overlay, MASK_EXTENSIONS)
        self._state.working = build_mask_canvas(
            working, mask_raster, top, left, background or None
        )
        return self

    # ========================================================================
    # Export
    # ========================================================================

    def finalize(self) -> Raster:
        """Run the pending sharpen pass and return the working raster."""
        self._working("finalize")
        sharpen_if_needed(self._state)
        self._state.exported = True
        return self._state.working

    def render(
        self,
        image_format: str,
        quality: int = DEFAULT_QUALITY,
        destroy: bool = True,
    ) -> bytes:
        """
        Encode the image.

        Args:
            image_format: 'jpg', 'png', 'gif' or a file name with that extension
            quality: 0-100 (clamped)
            destroy: Release the working raster afterwards

        Returns:
            Encoded bytes
        """
        name = str(image_format)
        data = encode(self.finalize(), Path(name).suffix or name, quality)
        if destroy:
            self._state.release()
        return data

    def save(
        self,
        path: PathLike,
        quality: int = DEFAULT_QUALITY,
        destroy: bool = True,
        chmod: Optional[int] = DEFAULT_CHMOD,
    ) -> Path:
        """
        Encode and write the image.

        Args:
            path: Output file (.jpg/.jpeg/.png/.gif) in a writable directory
            quality: 0-100 (clamped)
            destroy: Release the working raster afterwards
            chmod: Permission bits for the file (None to leave as created)

        Returns:
            Final path of the saved file
        """
        writer = OutputWriter(SaveOptions(quality=quality, chmod=chmod))
        final_path = writer.resolve_path(path)

        data = encode(self.finalize(), format_for_path(final_path), writer.options.quality)
        saved = writer.write(data, final_path, optimizer=self.optimizer)

        if destroy:
            self._state.release()
        return saved

    def __repr__(self) -> str:
        return f"ImagePipeline(stage={self._state.stage.value}, working={self._state.working!r})"
