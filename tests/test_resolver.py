from resolver import Outcome, PageResolver
from settings import RELAY_BASE
from transport import DirectTransport, RelayTransport

HREF = "/20260212/qgur/abc123/"


def test_local_copy_opens_directly(local_config, surface, fake_fetch, probe):
    probe.present.add("http://localhost:8000" + HREF)
    resolver = PageResolver(DirectTransport(local_config), surface)

    assert resolver.open(HREF) is Outcome.LOCAL
    assert surface.views == [HREF]
    assert fake_fetch.calls == []
    assert surface.blanks == []


def test_missing_page_falls_back_to_companion(local_config, surface, fake_fetch, probe):
    fake_fetch.routes["http://localhost:8081/api/page"] = {"ok": True, "html": "<p>live copy</p>"}
    resolver = PageResolver(DirectTransport(local_config), surface)

    assert resolver.open(HREF) is Outcome.LIVE
    assert probe.calls == ["http://localhost:8000" + HREF]
    assert fake_fetch.calls == ["http://localhost:8081/api/page?path=%2Fqgur%2Fabc123%2F"]
    assert surface.blanks == ["<p>live copy</p>"]
    assert surface.views == []


def test_missing_page_falls_back_to_relay_with_transform(remote_config, surface, fake_fetch, probe,
                                                         search_page):
    fake_fetch.routes[RELAY_BASE] = {"contents": search_page}
    resolver = PageResolver(RelayTransport(remote_config), surface)

    assert resolver.open(HREF) is Outcome.LIVE
    assert fake_fetch.calls == [RELAY_BASE + "https%3A%2F%2Fwww.qtes9gu0k.xyz%2Fqgur%2Fabc123%2F"]
    assert len(surface.blanks) == 1
    assert "app.bundle.js\" id=\"bundle\"></script> -->" in surface.blanks[0]


def test_live_failure_raises_alert(remote_config, surface, fake_fetch, probe):
    fake_fetch.routes[RELAY_BASE] = {}
    resolver = PageResolver(RelayTransport(remote_config), surface)

    assert resolver.open(HREF) is Outcome.FAILED
    assert surface.alerts == ["Failed to fetch page: relay returned no contents"]
    assert surface.blanks == []


def test_live_url_only_replaces_first_prefix(local_config, surface):
    resolver = PageResolver(DirectTransport(local_config), surface)

    assert resolver.live_url("/20260212/a/20260212/b/") == "https://www.qtes9gu0k.xyz/a/20260212/b/"


def test_open_many_runs_each_independently(local_config, surface, fake_fetch, probe):
    probe.present.add("http://localhost:8000/20260212/local/")
    fake_fetch.routes["http://localhost:8081/"] = {"ok": True, "html": "<p>live</p>"}
    resolver = PageResolver(DirectTransport(local_config), surface)

    outcomes = resolver.open_many(["/20260212/local/", "/20260212/a/", "/20260212/b/"])

    assert outcomes == [Outcome.LOCAL, Outcome.LIVE, Outcome.LIVE]
    assert surface.views == ["/20260212/local/"]
    assert len(surface.blanks) == 2
    assert len(fake_fetch.calls) == 2


def test_non_string_page_payload_raises_alert(local_config, surface, fake_fetch, probe):
    fake_fetch.routes["http://localhost:8081/api/page"] = {"ok": True, "html": {"nested": "x"}}
    resolver = PageResolver(DirectTransport(local_config), surface)

    assert resolver.open(HREF) is Outcome.FAILED
    assert surface.alerts == ["Failed to fetch page: malformed companion API response"]
