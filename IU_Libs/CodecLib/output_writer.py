"""
Filesystem writer for encoded images.

Writes encoded bytes to their final path, optionally going through an
external optimizer via a ``<base>_tmp<ext>`` temp file, then applies the
configured permissions.

Classes:
    SaveOptions: Quality, permissions and directory handling
    OutputWriter: Path validation and the write / optimize / chmod sequence
"""

import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

from IU_Libs.CodecLib.image_codec import format_for_path
from IU_Libs.CodecLib.optimizer import ImageOptimizer
from IU_Libs.constants import (
    DEFAULT_CHMOD,
    DEFAULT_QUALITY,
    QUALITY_MAX,
    QUALITY_MIN,
    TMP_SUFFIX,
)
from IU_Libs.RasterLib.color_utils import clamp

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass
class SaveOptions:
    """Options for saving an image.

    Attributes:
        quality: Encoding quality 0-100 (clamped, default 80)
        chmod: Permission bits applied to the saved file (None = leave as is)
        create_directories: Create a missing output directory (default False)
        overwrite: Replace an existing file (default True)
    """
    quality: int = DEFAULT_QUALITY
    chmod: Optional[int] = DEFAULT_CHMOD
    create_directories: bool = False
    overwrite: bool = True

    def __post_init__(self):
        self.quality = clamp(int(self.quality), QUALITY_MIN, QUALITY_MAX)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SaveOptions":
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


class OutputWriter:
    """Writes encoded image bytes to disk."""

    def __init__(self, options: Optional[SaveOptions] = None):
        self.options = options if options is not None else SaveOptions()

    def resolve_path(self, path: PathLike) -> Path:
        """
        Validate the output path.

        Args:
            path: Output file path with a .jpg/.jpeg/.png/.gif extension

        Returns:
            Absolute path inside an existing, writable directory

        Raises:
            UnsupportedFormatError: If the extension is not supported
            OSError: If the directory is missing (and may not be created)
                     or not writable
        """
        path = Path(path).expanduser()
        format_for_path(path)

        directory = path.parent.resolve()
        if not directory.is_dir():
            if not self.options.create_directories:
                raise OSError(f"Image directory does not exist: {directory}")
            directory.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created output directory {directory}")

        if not os.access(directory, os.W_OK):
            raise OSError(f"Image directory unwritable: {directory}")

        return directory / path.name

    @staticmethod
    def temp_path_for(final_path: Path) -> Path:
        """``photo.jpg`` -> ``photo_tmp.jpg`` in the same directory."""
        return final_path.with_name(f"{final_path.stem}{TMP_SUFFIX}{final_path.suffix}")

    def write(
        self,
        data: bytes,
        path: PathLike,
        optimizer: Optional[ImageOptimizer] = None,
    ) -> Path:
        """
        Write encoded image bytes.

        When ``optimizer`` handles the format, the bytes go to a temp file
        that the optimizer turns into the final file. If optimization fails
        the temp file is moved into place instead.

        Args:
            data: Encoded image
            path: Output file path
            optimizer: Optional external optimizer

        Returns:
            Final path of the written file

        Raises:
            FileExistsError: If the file exists and overwrite is disabled
            OSError: If the file cannot be written
        """
        final_path = self.resolve_path(path)
        if final_path.exists() and not self.options.overwrite:
            raise FileExistsError(
                f"Output file already exists: {final_path}. Set overwrite=True to replace."
            )

        image_format = format_for_path(final_path)
        if optimizer is not None and optimizer.supports(image_format):
            tmp_path = self.temp_path_for(final_path)
            tmp_path.write_bytes(data)

            if optimizer.optimize(tmp_path, final_path, image_format):
                tmp_path.unlink()
            else:
                logger.warning(f"Optimization failed, keeping unoptimized {final_path.name}")
                os.replace(tmp_path, final_path)
        else:
            final_path.write_bytes(data)

        if self.options.chmod is not None:
            os.chmod(final_path, self.options.chmod)

        logger.info(f"Saved {len(data)} bytes to {final_path}")
        return final_path
