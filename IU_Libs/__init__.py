"""
IU_Libs - Image Util Library Modules

This package contains the in-memory raster transformation engine,
organized into specialized sub-packages:

- RasterLib: Pixel buffer, resampling, convolution, sharpening and rotation
- FiltersLib: Artistic block filters and color filter delegations
- CompositeLib: Alpha-aware merging for watermarks and masks
- CodecLib: Decoding/encoding, external optimizers and file output
- PipelineLib: Fluent single-image pipeline, operation registry and recipes
"""

__version__ = "0.1.0"
