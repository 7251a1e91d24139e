"""Image loading for card rendering.

Image references arrive as opaque URIs (plain paths or file:// URIs).
Images are returned as RGBA Pillow images and cached per URI.
"""

import logging
import os
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from PIL import Image, ImageOps

logger = logging.getLogger(__name__)


def uri_to_path(uri):
    """Resolve a plain path or file:// URI to a filesystem Path.

    Returns:
        Path, or None for URI schemes that are not local files
    """
    if uri is None:
        return None
    parsed = urlparse(str(uri))
    if parsed.scheme == 'file':
        return Path(url2pathname(unquote(parsed.path)))
    # Windows drive letters parse as a one-letter scheme
    if parsed.scheme and len(parsed.scheme) > 1:
        return None
    return Path(os.path.expanduser(str(uri)))


class ImageLoader:
    """Loads and caches card images."""

    def __init__(self):
        self._cache = {}

    def load(self, uri):
        """Load an image as RGBA.

        Returns:
            PIL.Image.Image, or None if the image cannot be loaded
        """
        if uri in self._cache:
            return self._cache[uri]

        path = uri_to_path(uri)
        if path is None:
            logger.warning("Unsupported image reference: %s", uri)
            return None

        try:
            with Image.open(path) as img:
                # Respect camera orientation before converting
                image = ImageOps.exif_transpose(img).convert('RGBA')
        except (OSError, ValueError) as e:
            logger.warning("Error loading image from %s: %s", uri, e)
            return None

        self._cache[uri] = image
        return image

    def clear(self):
        self._cache.clear()


def fit_image(image, size, fit):
    """Fit an image into a box.

    Args:
        image: RGBA image
        size: (width, height) in whole pixels
        fit: 'cover' crops to fill the box, 'contain' letterboxes with
            transparency

    Returns:
        RGBA image of exactly ``size``
    """
    width, height = max(1, int(size[0])), max(1, int(size[1]))
    if fit == 'cover':
        return ImageOps.fit(image, (width, height), Image.Resampling.LANCZOS)
    contained = ImageOps.contain(image, (width, height), Image.Resampling.LANCZOS)
    canvas = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    offset = ((width - contained.width) // 2, (height - contained.height) // 2)
    canvas.paste(contained, offset, contained)
    return canvas
