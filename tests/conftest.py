import pytest
from PIL import Image

from errors import SymbolRenderError


@pytest.fixture
def sample_csv():
    return "LOCALIZACAO;QUANTIDADE\nA-01-01;1\nA-01-02;2\nB-05-10;1\n".encode("utf-8")


@pytest.fixture
def fake_render():
    """Tiny renderer that records calls and rejects codes starting with '!'."""
    calls = []

    def render(code):
        calls.append(code)
        if code.startswith("!"):
            raise SymbolRenderError(code, "inválido")
        return Image.new("RGB", (60, 20), "white")

    render.calls = calls
    return render
