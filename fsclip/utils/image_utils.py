"""
Image utilities for fs-clip
"""
import io
import logging

from PIL import Image, UnidentifiedImageError

from ..errors import PublishError

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# BITMAPFILEHEADER precedes the DIB in a .bmp file
BMP_FILE_HEADER_SIZE = 14


def _open_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        return img
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise PublishError(f"cannot decode image data: {e}") from e


def to_png(data: bytes) -> bytes:
    """
    Convert any image Pillow can read to PNG bytes
    
    Args:
        data: Encoded image (PNG, JPEG, GIF, BMP, WebP, ICO, ...)
        
    Returns:
        PNG encoded bytes; PNG input is returned unchanged
        
    Raises:
        PublishError: if the data cannot be decoded
    """
    if data.startswith(PNG_SIGNATURE):
        return data

    img = _open_image(data)
    if img.mode not in ('RGB', 'RGBA', 'L', 'LA'):
        img = img.convert('RGBA')

    output = io.BytesIO()
    img.save(output, format='PNG')
    logger.debug(f"Converted {img.format or 'image'} ({img.width}x{img.height}) to PNG")
    return output.getvalue()


def to_dib(data: bytes) -> bytes:
    """
    Convert image bytes to a device independent bitmap (CF_DIB payload)
    
    Transparency is flattened onto white; DIBs on the clipboard are
    commonly read without alpha.
    """
    img = _open_image(data)

    if img.mode in ('RGBA', 'LA', 'P'):
        if img.mode != 'RGBA':
            img = img.convert('RGBA')
        background = Image.new('RGB', img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    output = io.BytesIO()
    img.save(output, format='BMP')
    bmp_data = output.getvalue()

    if len(bmp_data) <= BMP_FILE_HEADER_SIZE:
        raise PublishError("bitmap conversion produced no data")
    return bmp_data[BMP_FILE_HEADER_SIZE:]

