import io

import pytest
from PIL import Image


@pytest.fixture
def png_bytes():
    """A real PNG file, as produced by Pillow"""
    image = Image.new('RGB', (5, 5), color='red')
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')

    return buffer.getvalue()
