def test_summary_defaults_to_booking_window(client, today) -> None:
    response = client.get('/availability/summary')

    assert response.status_code == 200
    body = response.json()
    assert body['start'] == '2024-06-01'
    assert body['end'] == '2024-07-31'
    assert len(body['days']) == 61
    assert body['days'][0] == {
        'date': '2024-06-01',
        'slots': {'Morning': True, 'Afternoon': True},
        'blocked_by_admin': False,
        'fully_booked': False,
        'reason': None,
    }


def test_summary_rejects_reversed_range(client, today) -> None:
    response = client.get('/availability/summary', params={'start': '2024-06-10', 'end': '2024-06-01'})

    assert response.status_code == 422
    assert response.json()['error'] == 'VALIDATION_FAILED'


def test_summary_rejects_oversized_range(client, today) -> None:
    response = client.get('/availability/summary', params={'start': '2024-06-01', 'end': '2025-06-01'})

    assert response.status_code == 422
    assert response.json()['details'] == {'field': 'end'}


def test_block_day_closes_both_slots(client, today, admin_headers, booking_payload) -> None:
    response = client.post(
        '/availability/block-day',
        json={'date': '2024-06-10', 'reason': 'vacation'},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json() == {'date': '2024-06-10', 'reason': 'vacation'}

    summary = client.get('/availability/summary', params={'start': '2024-06-10', 'end': '2024-06-10'}).json()
    assert summary['days'] == [{
        'date': '2024-06-10',
        'slots': {'Morning': False, 'Afternoon': False},
        'blocked_by_admin': True,
        'fully_booked': False,
        'reason': 'vacation',
    }]

    booking = client.post('/appointments', json={**booking_payload, 'date': '2024-06-10'})
    assert booking.status_code == 409
    assert booking.json()['error'] == 'SLOT_UNAVAILABLE'


def test_block_day_twice_keeps_latest_reason(client, today, admin_headers) -> None:
    client.post('/availability/block-day', json={'date': '2024-06-10', 'reason': 'vacation'}, headers=admin_headers)
    client.post('/availability/block-day', json={'date': '2024-06-10', 'reason': 'hail storm'}, headers=admin_headers)

    response = client.get('/availability/blocked-dates', headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {'blocked_dates': [{'date': '2024-06-10', 'reason': 'hail storm'}]}


def test_block_day_defaults_reason(client, today, admin_headers) -> None:
    response = client.post('/availability/block-day', json={'date': '2024-06-10'}, headers=admin_headers)

    assert response.json()['reason'] == 'Unavailable'


def test_block_day_rejects_past_date(client, today, admin_headers) -> None:
    response = client.post('/availability/block-day', json={'date': '2024-05-20'}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()['error'] == 'INVALID_DATE'


def test_unblock_day_reopens_date(client, today, admin_headers) -> None:
    client.post('/availability/block-day', json={'date': '2024-06-10'}, headers=admin_headers)

    response = client.delete('/availability/block-day/2024-06-10', headers=admin_headers)

    assert response.status_code == 204
    day = client.get('/availability/summary', params={'start': '2024-06-10', 'end': '2024-06-10'}).json()['days'][0]
    assert day['slots'] == {'Morning': True, 'Afternoon': True}
    assert day['blocked_by_admin'] is False


def test_unblock_day_that_is_not_blocked(client, today, admin_headers) -> None:
    response = client.delete('/availability/block-day/2024-06-10', headers=admin_headers)

    assert response.status_code == 404
    assert response.json()['error'] == 'NOT_BLOCKED'


def test_blackout_management_requires_admin(client, today, client_headers) -> None:
    assert client.post('/availability/block-day', json={'date': '2024-06-10'}).status_code == 401
    assert client.post(
        '/availability/block-day',
        json={'date': '2024-06-10'},
        headers=client_headers,
    ).status_code == 403
    assert client.get('/availability/blocked-dates', headers=client_headers).status_code == 403
    assert client.delete('/availability/block-day/2024-06-10', headers=client_headers).status_code == 403


def test_blocked_dates_hide_past_entries_unless_requested(client, today, admin_headers, monkeypatch) -> None:
    client.post('/availability/block-day', json={'date': '2024-06-03'}, headers=admin_headers)
    client.post('/availability/block-day', json={'date': '2024-06-20'}, headers=admin_headers)

    monkeypatch.setattr('backend.services.booking_window.current_date', lambda: today.replace(day=10))

    upcoming = client.get('/availability/blocked-dates', headers=admin_headers).json()['blocked_dates']
    everything = client.get(
        '/availability/blocked-dates',
        params={'include_past': True},
        headers=admin_headers,
    ).json()['blocked_dates']

    assert [entry['date'] for entry in upcoming] == ['2024-06-20']
    assert [entry['date'] for entry in everything] == ['2024-06-03', '2024-06-20']
