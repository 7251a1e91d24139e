"""Static Card Renderer Service.

Renders a card layout to a Pillow image without any interaction: every
element sits on its stored card-space position at scale 1 with no pan,
rotated about its own centre. The result is what the editor shows at rest,
rasterized for saving as PNG.
"""

import logging
import os
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from constants import (
    CARD_BACKGROUND_COLOR, CARD_HEIGHT, CARD_WIDTH, DEBUG_GRID_COLOR,
    DEBUG_GRID_DIVISIONS, DEBUG_GRID_LABEL_COLOR, PHOTO_BORDER_COLOR,
    PHOTO_BORDER_WIDTH, TEMPLATE_PLACEHOLDER_COLOR, TEXT_COLOR, TEXT_FONT_SIZE,
)
from models.card_elements import ElementId, ElementKind
from services.card_layout import build_layout
from services.image_loader import ImageLoader, fit_image
from utils.coordinate_transforms import grid_lines

logger = logging.getLogger(__name__)

_FONT_CANDIDATES = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Arial Bold.ttf",
    "/Library/Fonts/Arial Bold.ttf",
    "C:/Windows/Fonts/arialbd.ttf",
]


def load_font(font_path=None, size=TEXT_FONT_SIZE):
    """Load the card text font.

    Tries an explicit path, then common bold system fonts, then Pillow's
    built-in font.
    """
    candidates = [font_path] if font_path else []
    candidates += _FONT_CANDIDATES
    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            try:
                return ImageFont.truetype(candidate, size)
            except OSError as e:
                logger.warning("Could not load font %s: %s", candidate, e)
    logger.debug("No TrueType font found, using Pillow default font")
    return ImageFont.load_default(size=size)


def composite(card, tile, left, top):
    """Alpha-composite ``tile`` onto ``card`` at a possibly negative offset"""
    crop_left = max(0, -left)
    crop_top = max(0, -top)
    if crop_left >= tile.width or crop_top >= tile.height:
        return
    if crop_left or crop_top:
        tile = tile.crop((crop_left, crop_top, tile.width, tile.height))
    card.alpha_composite(tile, (max(0, left), max(0, top)))


class CardRenderer:
    """Rasterizes card layouts.

    Args:
        image_loader: ImageLoader used for template, photo and logos
        font_path: Optional TrueType font for text fields
        size: Card size in card units (rendered 1:1 to pixels)
    """

    def __init__(self, image_loader=None, font_path=None, size=(CARD_WIDTH, CARD_HEIGHT)):
        self.image_loader = image_loader or ImageLoader()
        self.font = load_font(font_path)
        self.size = (int(round(size[0])), int(round(size[1])))

    def render(self, positions, content, debug_grid=False):
        """Render the card.

        Args:
            positions: Position map snapshot (ElementId -> Vec2)
            content: CardContent
            debug_grid: Overlay the layout debug grid

        Returns:
            RGBA PIL image of the card
        """
        card = Image.new('RGBA', self.size, CARD_BACKGROUND_COLOR)
        self._draw_template(card, content.template)

        for element in build_layout(positions, content):
            tile = self._element_tile(element)
            if tile is None:
                continue
            self._paste_rotated(card, tile, element)

        if debug_grid:
            self._draw_debug_grid(card)
        return card

    def save(self, positions, content, output_path, debug_grid=False):
        """Render and write a PNG.

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image = self.render(positions, content, debug_grid=debug_grid)
        image.save(output_path, 'PNG')
        logger.info("Card rendered to %s", output_path)
        return output_path

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _draw_template(self, card, template_uri):
        template = self.image_loader.load(template_uri) if template_uri else None
        if template is None:
            card.paste(Image.new('RGBA', self.size, TEMPLATE_PLACEHOLDER_COLOR), (0, 0))
            return
        fitted = fit_image(template, self.size, 'contain')
        card.alpha_composite(fitted)

    def _element_tile(self, element):
        """Unrotated RGBA tile for an element, None when it cannot be drawn"""
        width, height = max(1, int(round(element.size[0]))), max(1, int(round(element.size[1])))

        if element.kind is ElementKind.TEXT:
            tile = Image.new('RGBA', (width, height), (0, 0, 0, 0))
            draw = ImageDraw.Draw(tile)
            # Left aligned, vertically centred, single line (overflow clipped)
            left, top, right, bottom = draw.textbbox((0, 0), element.text, font=self.font)
            y = (height - (bottom - top)) / 2 - top
            draw.text((0, y), element.text, font=self.font, fill=TEXT_COLOR)
            return tile

        source = self.image_loader.load(element.image)
        if source is None:
            logger.warning("Skipping %s, image unavailable", element.element_id.value)
            return None
        tile = fit_image(source, (width, height), element.fit)
        if element.element_id is ElementId.PHOTO:
            framed = Image.new('RGBA', (width, height), PHOTO_BORDER_COLOR)
            framed.alpha_composite(tile)
            ImageDraw.Draw(framed).rectangle(
                (0, 0, width - 1, height - 1),
                outline=PHOTO_BORDER_COLOR,
                width=PHOTO_BORDER_WIDTH,
            )
            tile = framed
        return tile

    def _paste_rotated(self, card, tile, element):
        # Rotation is clockwise-positive on screen; PIL rotates counter-clockwise
        rotated = tile.rotate(-element.rotation, resample=Image.Resampling.BICUBIC, expand=True)
        # The expanded tile can be a pixel larger than the exact bounds
        left, top, right, bottom = element.bounds
        left = int(round(left - (rotated.width - (right - left)) / 2.0))
        top = int(round(top - (rotated.height - (bottom - top)) / 2.0))
        composite(card, rotated, left, top)

    def _draw_debug_grid(self, card):
        overlay = Image.new('RGBA', card.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        width, height = card.size
        horizontal, vertical = grid_lines(width, height, DEBUG_GRID_DIVISIONS)
        for y, label in horizontal:
            draw.line((0, y, width, y), fill=DEBUG_GRID_COLOR, width=1)
            draw.text((2, y + 1), label, fill=DEBUG_GRID_LABEL_COLOR)
        for x, label in vertical:
            draw.line((x, 0, x, height), fill=DEBUG_GRID_COLOR, width=1)
            draw.text((x + 2, 2), label, fill=DEBUG_GRID_LABEL_COLOR)
        card.alpha_composite(overlay)
