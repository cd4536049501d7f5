"""Caption overlay package.

This package contains the image-overlay pipeline: rendering the caption
template, converting its text to glyph outlines, rasterizing the result
and compositing it onto a cropped base image. The HTTP layer in
``main.py`` calls :func:`overlays.pipeline.process_image_overlay`; see the
individual modules for details.
"""
