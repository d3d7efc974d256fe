from urllib.parse import parse_qs, urlsplit


def redirect_target(response):
    """Split a redirect Location into (path, {param: value})."""
    parts = urlsplit(response.headers["Location"])
    return parts.path, {k: v[0] for k, v in parse_qs(parts.query).items()}
