from beautibook import __version__

from tests.factories.builders import WORKDAY, local_instant


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "beautibook-api", "version": __version__}


def test_prometheus_exposes_hold_counters(client, staff, service):
    client.post(
        "/api/v1/holds",
        json={
            "sessionId": "session-a",
            "staffId": staff.id,
            "serviceId": service.id,
            "slotDateTime": local_instant(WORKDAY, "10:00").isoformat(),
        },
    )

    response = client.get("/api/v1/metrics/prometheus")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert 'beautibook_hold_events_total{event="created"}' in response.text
