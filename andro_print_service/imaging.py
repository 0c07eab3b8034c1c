"""
Raster helpers for image and document jobs.
"""

import logging
from pathlib import Path
from typing import List, Union

from PIL import Image
from pdf2image import convert_from_path
from pdf2image.exceptions import PDFPageCountError, PDFSyntaxError

from .exceptions import PayloadInvalidError

logger = logging.getLogger(__name__)

# Thermal head resolution
PRINTER_DPI = 203


def prepare_image(img: Image.Image, max_width: int) -> Image.Image:
    """Scale down to ``max_width`` keeping aspect ratio, then convert to 1-bit."""
    if img.mode in ('RGBA', 'LA', 'P'):
        img = img.convert('RGBA')
        background = Image.new('RGBA', img.size, (255, 255, 255, 255))
        img = Image.alpha_composite(background, img)

    if img.width > max_width:
        ratio = max_width / img.width
        img = img.resize((max_width, max(1, int(img.height * ratio))), Image.Resampling.LANCZOS)

    return img.convert('1')


def load_image(path: Union[str, Path], max_width: int) -> Image.Image:
    """
    Open a stored image ready for printing.

    Raises:
        PayloadInvalidError: file is not a readable image
    """
    try:
        with Image.open(path) as img:
            img.load()
            return prepare_image(img, max_width)
    except OSError as e:
        raise PayloadInvalidError(f'Unreadable image: {Path(path).name}', {'cause': str(e)})


def rasterize_pdf(path: Union[str, Path], max_width: int) -> List[Image.Image]:
    """
    Render every page of a PDF to a printable image.

    Raises:
        PayloadInvalidError: file is not a readable PDF
    """
    try:
        pages = convert_from_path(str(path), dpi=PRINTER_DPI)
    except (PDFPageCountError, PDFSyntaxError) as e:
        raise PayloadInvalidError(f'Unreadable PDF: {Path(path).name}', {'cause': str(e)})

    if not pages:
        raise PayloadInvalidError(f'PDF has no pages: {Path(path).name}')

    logger.debug(f"Rasterized {len(pages)} page(s) from {path}")
    return [prepare_image(page, max_width) for page in pages]
