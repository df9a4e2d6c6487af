"""
Image Util command line.

Runs one recipe of operations on one image and saves the result:

    python image_util.py photo.jpg out/photo.jpg --resize 400 300 --policy crop \
        --recipe sepia.json --quality 85
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from IU_Libs.CodecLib.optimizer import ImageOptimizer, OptimizerConfig
from IU_Libs.constants import DEFAULT_QUALITY, DEFAULT_RESIZE_POLICY
from IU_Libs.errors import ImageUtilError
from IU_Libs.PipelineLib.image_pipeline import ImagePipeline
from IU_Libs.PipelineLib.recipe import apply_recipe, load_recipe
from IU_Libs.RasterLib.resampler import ResizePolicy

logger = logging.getLogger("image_util")


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Resize, filter, composite and save a single image",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    p.add_argument("input", help="Input image (.jpg, .jpeg, .png, .gif)")
    p.add_argument("output", help="Output image (.jpg, .jpeg, .png, .gif)")

    p.add_argument("--recipe", "-r", default=None, help="JSON recipe of operations to apply")
    p.add_argument("--resize", nargs=2, type=int, metavar=("W", "H"), default=None,
                   help="Resize before running the recipe")
    p.add_argument("--policy", default=DEFAULT_RESIZE_POLICY,
                   choices=[policy.value for policy in ResizePolicy], help="Resize policy")
    p.add_argument("--quality", "-q", type=int, default=DEFAULT_QUALITY, help="Output quality 0-100")
    p.add_argument("--no-sharpen", action="store_true", help="Disable sharpening on save")
    p.add_argument("--seed", type=int, default=None, help="Seed for random filters")

    # External optimizers
    p.add_argument("--jpegtran", default=None, help="Path to jpegtran for JPEG output")
    p.add_argument("--pngcrush", default=None, help="Path to pngcrush for PNG output")

    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def run(args: argparse.Namespace) -> Path:
    optimizer = None
    if args.jpegtran or args.pngcrush:
        optimizer = ImageOptimizer(
            OptimizerConfig(jpegtran_path=args.jpegtran, pngcrush_path=args.pngcrush)
        )

    pipeline = ImagePipeline.open(args.input, seed=args.seed, optimizer=optimizer)
    pipeline.sharpen(not args.no_sharpen)

    if args.resize:
        width, height = args.resize
        pipeline.resize(width, height, args.policy)

    if args.recipe:
        apply_recipe(pipeline, load_recipe(args.recipe))

    return pipeline.save(args.output, quality=args.quality)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        saved = run(args)
    except (ImageUtilError, OSError) as e:
        logger.error(f"Failed to process {args.input}: {e}")
        return 1

    print(saved)
    return 0


if __name__ == "__main__":
    sys.exit(main())
