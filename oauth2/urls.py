from __future__ import annotations

import urllib.parse


def compose(base_uri: str, parameters: dict[str, str | None]) -> str:
    """Append ``parameters`` to the query of ``base_uri``.

    Existing query values with the same key are replaced. ``None`` values are
    left out.
    """
    parsed = urllib.parse.urlparse(base_uri)
    existing = urllib.parse.parse_qs(parsed.query, keep_blank_values=True)
    for key, value in parameters.items():
        if value is None:
            continue
        existing[key] = [value]

    new_query = urllib.parse.urlencode(existing, doseq=True)
    return urllib.parse.urlunparse(parsed._replace(query=new_query))


def parse(uri: str) -> tuple[str, dict[str, str]]:
    parsed = urllib.parse.urlparse(uri)
    # Repeated keys keep the last value.
    query = dict(urllib.parse.parse_qsl(parsed.query, keep_blank_values=True))
    return parsed.path, query


def resolve(base_uri: str, reference: str) -> str:
    return urllib.parse.urljoin(base_uri, reference)
