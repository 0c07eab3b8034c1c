import pytest
from PIL import Image

from andro_print_service.app import create_app
from andro_print_service.storage import MemoryStorage

from tests.helpers import TcpSink


@pytest.fixture
def make_app(tmp_path):
    """Factory for apps with in-memory stores and a temp data dir."""

    def _make(**overrides):
        config = {
            'TESTING': True,
            'DATA_DIR': str(tmp_path / 'data'),
            'UPLOAD_DIR': str(tmp_path / 'uploads'),
            'PRINTER_STORAGE': MemoryStorage(),
            'CLIENT_STORAGE': MemoryStorage(),
            'PRINT_TRANSPORT': 'raw',
            'ENABLE_AUTH': False,
            'ADMIN_API_KEY': None,
            'DEFAULT_PRINTER': None,
            'PROBE_BEFORE_PRINT': True,
            'PROBE_TIMEOUT': 0.5,
            'PRINT_TIMEOUT': 2,
        }
        config.update(overrides)
        (tmp_path / 'uploads').mkdir(exist_ok=True)
        return create_app(config)

    return _make


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def sink():
    with TcpSink() as sink:
        yield sink


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / 'uploads'
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture
def logo(upload_dir):
    """A small RGB image in the upload directory."""
    path = upload_dir / 'logo.png'
    img = Image.new('RGB', (40, 10), (255, 255, 255))
    for x in range(20):
        for y in range(10):
            img.putpixel((x, y), (0, 0, 0))
    img.save(path)
    return path

