def test_catalog_lists_packages_addons_and_slots(client) -> None:
    response = client.get('/catalog')

    assert response.status_code == 200
    body = response.json()
    assert {'id': 'full-detail', 'name': 'Full Detail'}.items() <= next(
        item for item in body['packages'] if item['id'] == 'full-detail'
    ).items()
    assert any(item['name'] == 'Interior Shampoo' and item['price'] == 40 for item in body['addons'])
    assert body['conditions'] == ['Daily Driver', 'Well Maintained', 'Needs Extra Love']
    assert body['slots'] == [
        {'slot': 'Morning', 'hours': '7am-12pm'},
        {'slot': 'Afternoon', 'hours': '12pm-5pm'},
    ]
    assert body['booking_window_days'] == 60


def test_root_reports_running(client) -> None:
    assert client.get('/').json() == {'status': 'Divine Detailing API Running'}
