"""
Pytest fixtures for respimg tests.
"""

import pytest


@pytest.fixture
def catalog():
    """Fixture providing the default Large/Medium/Small catalog."""
    from respimg.variant_catalog import default_catalog

    return default_catalog()


@pytest.fixture
def input_dir(tmp_path):
    """Fixture providing an empty source directory."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    """Fixture providing a (not yet created) output directory."""
    return tmp_path / "out"


@pytest.fixture
def config(input_dir, output_dir, catalog):
    """Fixture providing a fail-fast pipeline configuration."""
    from respimg.pipeline_config import PipelineConfig

    return PipelineConfig(
        input_dir=str(input_dir),
        output_dir=str(output_dir),
        catalog=catalog,
    )


@pytest.fixture
def make_image():
    """Fixture providing a factory that writes a test image to disk."""
    from PIL import Image

    def _make(path, size=(100, 100), mode='RGB', color='red', format=None):
        if mode == 'RGBA' and isinstance(color, str):
            color = (255, 0, 0, 128)
        img = Image.new(mode, size, color=color)
        # Add some detail so resampling and encoding have work to do
        for x in range(0, size[0], max(1, size[0] // 10)):
            img.putpixel((x, x * size[1] // size[0]), (0, 0, 255) if mode == 'RGB' else (0, 0, 255, 255))
        img.save(str(path), format=format)
        return path

    return _make


@pytest.fixture
def corrupt_jpeg(input_dir):
    """Fixture providing a .jpg file that is not an image."""
    path = input_dir / "broken.L.jpg"
    path.write_bytes(b'\xff\xd8\xff\xe0 definitely not a jpeg')
    return path


@pytest.fixture
def logger():
    """Fixture providing a logger."""
    import logging
    return logging.getLogger('test')
