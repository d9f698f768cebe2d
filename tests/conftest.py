import pytest

from leadscan.config import load_config


CONTACT_PAGE = """
<html>
  <head><title>Example Co</title></head>
  <body>
    <div class="intercom-launcher"></div>
    <form action="/contact">
      <label>Name</label><input type="text">
      <label>Email</label><input type="text">
      <label>Message</label><textarea></textarea>
    </form>
    <p>Call us at (212) 555-0134 or write to contact@example-co.com</p>
  </body>
</html>
"""

PLAIN_PAGE = "<html><head><title>Plain</title></head><body><h1>Hello</h1><p>Welcome to our shop.</p></body></html>"


class FakeResponse:
    def __init__(self, status_code=200, text="", headers=None):
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}
        self.closed = False

    def close(self):
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; unknown URLs answer 404."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.responses = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        route = self.routes.get(url)
        if isinstance(route, Exception):
            raise route
        resp = route if isinstance(route, FakeResponse) else FakeResponse(404)
        self.responses.append(resp)
        return resp

    def close(self):
        pass


@pytest.fixture
def cfg():
    conf = load_config(None)
    conf["pipeline"]["request_delay_s"] = 0
    return conf


@pytest.fixture
def page(cfg):
    from leadscan.detectors import DetectorTables, detect
    from leadscan.parse import parse

    tables = DetectorTables.from_config(cfg)

    def _signals(html):
        return detect(parse(html), tables)

    return _signals
