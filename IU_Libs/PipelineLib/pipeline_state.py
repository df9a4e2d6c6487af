"""
Per-image pipeline state.

Classes:
    PipelineStage: Lifecycle of the working raster
    PipelineState: Source and working rasters plus sharpen bookkeeping
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from IU_Libs.errors import PipelineStateError
from IU_Libs.RasterLib.raster import Raster


class PipelineStage(Enum):
    EMPTY = "empty"            # no source loaded
    UNRESIZED = "unresized"    # source loaded, no working raster yet
    RESIZED = "resized"        # working raster present
    RELEASED = "released"      # working raster dropped after a destructive export


@dataclass
class PipelineState:
    """State of one image going through the pipeline.

    Attributes:
        source: Decoded source raster (never modified)
        working: Raster the operations apply to (None until resized)
        source_width: Width of the source
        source_height: Height of the source
        optimal_width: Width computed by the last resize (target width after a crop)
        optimal_height: Height computed by the last resize (target height after a crop)
        sharpen_enabled: Sharpen once on the first export (default True)
        exported: Set after the first export, cleared by resize
        stage: Current PipelineStage
    """
    source: Optional[Raster] = None
    working: Optional[Raster] = None
    source_width: int = 0
    source_height: int = 0
    optimal_width: int = 0
    optimal_height: int = 0
    sharpen_enabled: bool = True
    exported: bool = False
    stage: PipelineStage = PipelineStage.EMPTY

    @classmethod
    def from_raster(cls, raster: Raster) -> "PipelineState":
        if not isinstance(raster, Raster):
            raise TypeError(f"Expected Raster, got {type(raster)}")
        return cls(
            source=raster.copy(),
            source_width=raster.width,
            source_height=raster.height,
            stage=PipelineStage.UNRESIZED,
        )

    def require_source(self, operation: str) -> Raster:
        if self.stage is PipelineStage.EMPTY or self.source is None:
            raise PipelineStateError(f"Cannot {operation}: no image loaded")
        return self.source

    def require_working(self, operation: str) -> Raster:
        if self.stage is PipelineStage.EMPTY:
            raise PipelineStateError(f"Cannot {operation}: no image loaded")
        if self.stage is PipelineStage.RELEASED:
            raise PipelineStateError(
                f"Cannot {operation}: image was released by a destructive save or render; "
                f"resize again to start over"
            )
        if self.working is None:
            raise PipelineStateError(f"Cannot {operation}: image has not been resized")
        return self.working

    def set_resized(self, working: Raster, optimal_width: int, optimal_height: int) -> None:
        self.working = working
        self.optimal_width = int(optimal_width)
        self.optimal_height = int(optimal_height)
        self.exported = False
        self.stage = PipelineStage.RESIZED

    def release(self) -> None:
        self.working = None
        self.stage = PipelineStage.RELEASED

    def to_dict(self) -> Dict[str, Any]:
        """Summary for logging and debugging (excludes pixel data)."""
        return {
            "stage": self.stage.value,
            "source_size": [self.source_width, self.source_height],
            "working_size": list(self.working.size) if self.working is not None else None,
            "optimal_size": [self.optimal_width, self.optimal_height],
            "sharpen_enabled": self.sharpen_enabled,
            "exported": self.exported,
        }
