import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from settings import SiteConfig  # noqa: E402
from surface import Surface  # noqa: E402


class RecordingSurface(Surface):
    """Surface that remembers what it was asked to open instead of opening it."""

    def __init__(self, soup=None):
        super().__init__(soup)
        self.views = []
        self.blanks = []
        self.alerts = []

    def open_view(self, url):
        self.views.append(url)

    def open_blank(self, html):
        self.blanks.append(html)

    def alert(self, message):
        self.alerts.append(message)


class FakeFetch:
    """Stands in for fetcher.fetch_json; answers by URL prefix, records calls."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def __call__(self, url, timeout=10):
        self.calls.append(url)
        for prefix, answer in self.routes.items():
            if url.startswith(prefix):
                if isinstance(answer, Exception):
                    raise answer
                return answer
        raise AssertionError(f"unexpected fetch {url}")


@pytest.fixture
def local_config():
    return SiteConfig(mirror_origin="http://localhost:8000")


@pytest.fixture
def remote_config():
    return SiteConfig(mirror_origin="https://mirror.example.github.io")


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def fake_fetch(monkeypatch):
    import fetcher

    fake = FakeFetch()
    monkeypatch.setattr(fetcher, "fetch_json", fake)
    return fake


@pytest.fixture
def probe(monkeypatch):
    """Controls fetcher.page_exists; set `probe.present` to the hrefs that exist."""
    import fetcher

    class Probe:
        present = set()
        calls = []

        def __call__(self, url, timeout=5):
            self.calls.append(url)
            return url in self.present

    p = Probe()
    p.present, p.calls = set(), []
    monkeypatch.setattr(fetcher, "page_exists", p)
    return p


SEARCH_PAGE = """<!DOCTYPE html>
<html lang="ja">
<head>
<link rel="stylesheet" href="https://www.qtes9gu0k.xyz/wp-content/themes/qtes9gu0k/assets/css/app.css?ver=1.4.2">
<script src="https://www.qtes9gu0k.xyz/wp-content/themes/qtes9gu0k/assets/js/app.bundle.js" id="bundle"></script>
<script src="https://www.qtes9gu0k.xyz/wp-includes/js/jquery.js"></script>
</head>
<body>
<main class="l-main">
  <div class="l-page__body">
    <div class="l-container--middle">
      <div class="p-5djb21-result">
        <ul>
          <li class="p-5djb21-result__item"><a class="p-5djb21-result__link" href="https://www.qtes9gu0k.xyz/qgur/abc123/">水の話</a></li>
          <li class="p-5djb21-result__item"><a class="p-5djb21-result__link" href="https://www.qtes9gu0k.xyz/qgur/def456/">水辺</a></li>
        </ul>
      </div>
    </div>
  </div>
</main>
</body>
</html>"""

EMPTY_RESULTS_PAGE = """<html><body><main class="l-main"><div><div>
<div class="p-5djb21-result"><p>0 results</p></div>
</div></div></main></body></html>"""


@pytest.fixture
def search_page():
    return SEARCH_PAGE


@pytest.fixture
def deactivated_search_page(search_page):
    from markup import transform

    return transform(search_page)


@pytest.fixture
def empty_results_page():
    return EMPTY_RESULTS_PAGE


@pytest.fixture
def make_surface():
    return RecordingSurface
