from blockgate.app.blockchain import TransportError
from blockgate.app.main import VERSION


def test_health_ok(api_client):
    r = api_client.get("/health")
    assert r.status_code == 200
    assert r.json() == {
        "status": "ok",
        "version": VERSION,
        "blockchain": "ok",
        "rpcUrl": "fake://node",
    }


def test_health_degraded(api_client, fake_source):
    fake_source.error = TransportError("unexpected status code: 502")

    r = api_client.get("/health")
    assert r.status_code == 200
    # Upstream failures never fail the health check itself
    assert r.json()["status"] == "degraded"
    assert r.json()["blockchain"] == "error: unexpected status code: 502"
