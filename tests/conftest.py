import pypandoc
import pytest

from vaultview.markdown.models import RenderState


@pytest.fixture
def pandoc():
    """Skip tests that need the pandoc executable when it is not installed."""
    try:
        return pypandoc.get_pandoc_version()
    except OSError:
        pytest.skip("pandoc is not installed")


@pytest.fixture
def state():
    return RenderState(current_file_path="/Trips/Visited-Places.md")
