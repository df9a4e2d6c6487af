"""
External lossless optimizers (jpegtran, pngcrush).

Tool paths are plain configuration: nothing is looked up on PATH unless
``OptimizerConfig.detect()`` is called explicitly. Optimization is best
effort; any failure is logged and reported as False so the caller can fall
back to the unoptimized file.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from IU_Libs.CodecLib.image_codec import format_for_path, normalize_format

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


@dataclass
class OptimizerConfig:
    """Paths of the external optimizers.

    Attributes:
        jpegtran_path: jpegtran executable used for JPEG output (None = off)
        pngcrush_path: pngcrush executable used for PNG output (None = off)
    """
    jpegtran_path: Optional[str] = None
    pngcrush_path: Optional[str] = None

    def __post_init__(self):
        """Drop configured paths that are not executable files."""
        for name in ("jpegtran_path", "pngcrush_path"):
            value = getattr(self, name)
            if value is None:
                continue
            value = str(value)
            if not _is_executable(value):
                logger.warning(f"Ignoring {name}: {value} is not an executable file")
                value = None
            setattr(self, name, value)

    @classmethod
    def detect(cls) -> "OptimizerConfig":
        """Look both tools up on PATH."""
        return cls(
            jpegtran_path=shutil.which("jpegtran"),
            pngcrush_path=shutil.which("pngcrush"),
        )

    def tool_for(self, image_format: str) -> Optional[str]:
        pil_format = normalize_format(image_format)
        if pil_format == "JPEG":
            return self.jpegtran_path
        if pil_format == "PNG":
            return self.pngcrush_path
        return None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptimizerConfig":
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


class ImageOptimizer:
    """Runs the configured optimizer on an encoded temp file."""

    def __init__(self, config: Optional[OptimizerConfig] = None):
        self.config = config if config is not None else OptimizerConfig()

    def supports(self, image_format: str) -> bool:
        return self.config.tool_for(image_format) is not None

    def build_command(self, image_format: str, tmp_path: PathLike, final_path: PathLike) -> List[str]:
        """
        Command line that optimizes ``tmp_path`` into ``final_path``.

        Raises:
            ValueError: If no tool is configured for the format
        """
        tool = self.config.tool_for(image_format)
        if tool is None:
            raise ValueError(f"No optimizer configured for {image_format}")

        if normalize_format(image_format) == "JPEG":
            return [
                tool, "-copy", "none", "-optimize", "-progressive",
                "-outfile", str(final_path), str(tmp_path),
            ]
        return [tool, "-q", str(tmp_path), str(final_path)]

    def optimize(
        self,
        tmp_path: PathLike,
        final_path: PathLike,
        image_format: Optional[str] = None,
    ) -> bool:
        """
        Optimize ``tmp_path`` into ``final_path``.

        Args:
            tmp_path: Encoded input file (left in place)
            final_path: Output file written by the tool
            image_format: Format name (taken from final_path if None)

        Returns:
            True if the tool produced a non-empty output file
        """
        image_format = image_format or format_for_path(final_path)
        if not self.supports(image_format):
            return False

        command = self.build_command(image_format, tmp_path, final_path)
        logger.debug(f"Running optimizer: {' '.join(command)}")

        try:
            result = subprocess.run(command, capture_output=True, text=True, check=False)
        except OSError as e:
            logger.warning(f"Optimizer {command[0]} could not be started: {e}")
            return False

        if result.returncode != 0:
            logger.warning(
                f"Optimizer {command[0]} exited with {result.returncode}: {result.stderr.strip()}"
            )
            return False

        final = Path(final_path)
        if not final.is_file() or final.stat().st_size == 0:
            logger.warning(f"Optimizer {command[0]} produced no output at {final}")
            return False

        return True
