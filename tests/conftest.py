import pytest
from PIL import Image


@pytest.fixture
def blank_png(tmp_path):
    """A white image with nothing to find in it."""
    path = tmp_path / "blank.png"
    Image.new("L", (64, 64), 255).save(path)
    return str(path)
