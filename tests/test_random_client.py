"""
Testing the random.org client without the network
- monkeypatch replaces requests.get with a fake for one test at a time.
"""

import pytest
import requests

import mastermind.random_client as random_client
from mastermind.errors import SecretUnavailable


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def patch_get(monkeypatch, response=None, error=None):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append({"url": url, "params": params, "timeout": timeout})
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(random_client.requests, "get", fake_get)
    return calls


def test_fetch_code_parses_plain_text(monkeypatch):
    calls = patch_get(monkeypatch, FakeResponse("0\n3\n7\n2\n"))

    assert random_client.fetch_code() == [0, 3, 7, 2]

    params = calls[0]["params"]
    assert params["num"] == 4
    assert params["min"] == 0
    assert params["max"] == 7
    assert params["format"] == "plain"
    assert calls[0]["timeout"] > 0


def test_fetch_code_network_error(monkeypatch):
    patch_get(monkeypatch, error=requests.ConnectionError("offline"))
    with pytest.raises(SecretUnavailable):
        random_client.fetch_code()


def test_fetch_code_http_error(monkeypatch):
    patch_get(monkeypatch, FakeResponse("Error: quota exceeded", status_code=503))
    with pytest.raises(SecretUnavailable):
        random_client.fetch_code()


@pytest.mark.parametrize("body", [
    "1\n2\n3\n",          # too few
    "1\n2\n3\n4\n5\n",    # too many
    "1\n2\n3\n8\n",       # out of range
    "1\n2\nx\n4\n",       # not a number
    "",
])
def test_fetch_code_malformed_body(monkeypatch, body):
    patch_get(monkeypatch, FakeResponse(body))
    with pytest.raises(SecretUnavailable):
        random_client.fetch_code()
