"""Image payloads for upload and thumbnail tests."""
import base64
import io

from PIL import Image

HELLO_WORLD_B64 = "SGVsbG8gd29ybGQ="
HELLO_WORLD = b"Hello world"


def make_png(width: int = 800, height: int = 600, color=(200, 30, 30)) -> bytes:
    """Return the bytes of a solid-colour PNG"""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


def make_png_b64(width: int = 800, height: int = 600) -> str:
    return base64.b64encode(make_png(width, height)).decode()


def image_size(content: bytes):
    with Image.open(io.BytesIO(content)) as image:
        return image.size
