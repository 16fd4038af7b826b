# tests/conftest.py
import json, pathlib, pytest

SAMPLES = pathlib.Path(__file__).parent / "samples"

def load(folder: str, filename: str, binary: bool = False):
    """
    Read a fixture from tests/samples/.
    Set binary=True to return bytes, else str.
    """
    fp = SAMPLES / folder / filename
    mode = "rb" if binary else "r"
    with open(fp, mode) as f:
        return f.read()


@pytest.fixture
def splunk_sample():
    """Loader for tests/samples/splunk/<name>; returns (body, parsed)."""
    def _load(filename: str):
        body = load("splunk", filename)
        return body, json.loads(body)
    return _load
