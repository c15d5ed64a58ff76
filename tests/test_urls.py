from oauth2.urls import compose, parse, resolve


def test_compose_appends_parameters() -> None:
    uri = compose("https://login.example.com/authorize", {"a": "1", "b": "x y"})

    assert uri == "https://login.example.com/authorize?a=1&b=x+y"


def test_compose_replaces_existing_keys() -> None:
    uri = compose("https://login.example.com/authorize?a=0&keep=yes", {"a": "1"})

    assert parse(uri)[1] == {"a": "1", "keep": "yes"}


def test_compose_skips_none() -> None:
    uri = compose("https://login.example.com/authorize", {"a": "1", "scope": None})

    assert "scope" not in uri


def test_parse_returns_path_and_query() -> None:
    path, query = parse("https://app.example.com/callback?code=ABC&state=s1")

    assert path == "/callback"
    assert query == {"code": "ABC", "state": "s1"}


def test_parse_keeps_blank_values() -> None:
    _, query = parse("https://app.example.com/callback?code=&state=s1")

    assert query["code"] == ""


def test_resolve_relative_reference() -> None:
    assert resolve("https://login.example.com/tenant", "token") == "https://login.example.com/token"
    assert resolve("https://login.example.com/tenant/", "token") == (
        "https://login.example.com/tenant/token"
    )
