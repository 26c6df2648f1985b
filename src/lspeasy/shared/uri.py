from pathlib import Path
from urllib.parse import quote, unquote, urlparse
from urllib.request import url2pathname


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` document URI to a local path.

    Raises:
        ValueError: if ``uri`` does not use the ``file`` scheme
    """
    parsed = urlparse(uri)
    if parsed.scheme != "file":
        raise ValueError(f"Not a file URI: {uri!r}")
    path = url2pathname(unquote(parsed.path))
    if parsed.netloc and parsed.netloc != "localhost":
        path = f"//{parsed.netloc}{path}"
    return Path(path)


def path_to_uri(path: str | Path) -> str:
    return "file://" + quote(Path(path).absolute().as_posix())
