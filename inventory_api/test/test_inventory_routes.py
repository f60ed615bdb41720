"""
Test the inventory, store and auth HTTP endpoints.
"""
from inventory_api.test.helpers import quantity_at, transfer_payload

ADJUST_URL = '/api/inventory/adjust'


def _adjust(client, headers, seed, **fields):
    payload = {'product_variant_id': seed.variant_id, 'store_id': seed.north_id}
    payload.update(fields)
    return client.post(ADJUST_URL, json=payload, headers=headers)


# Inventory records

def test_list_inventory(client, seed, headers):
    body = client.get('/api/inventory', headers=headers['viewer']).get_json()

    assert body['meta']['total'] == 2
    first = body['data'][0]
    assert first['store']['name'] == 'North'
    assert first['quantity'] == 100
    assert first['is_low_stock'] is False
    assert first['product_variant']['product']['name'] == 'Blue Widget'


def test_list_inventory_filters(client, seed, headers):
    body = client.get(f'/api/inventory?store_id={seed.south_id}', headers=headers['viewer']).get_json()
    assert [row['id'] for row in body['data']] == [seed.destination_inventory_id]

    body = client.get('/api/inventory?low_stock=true', headers=headers['viewer']).get_json()
    assert [row['id'] for row in body['data']] == [seed.destination_inventory_id]

    body = client.get('/api/inventory?product_variant_id=999', headers=headers['viewer']).get_json()
    assert body['data'] == []


def test_show_inventory(client, seed, headers):
    response = client.get(f'/api/inventory/{seed.source_inventory_id}', headers=headers['viewer'])
    assert response.status_code == 200
    assert response.get_json()['data']['quantity'] == 100

    response = client.get('/api/inventory/999', headers=headers['viewer'])
    assert response.status_code == 404
    assert response.get_json() == {'message': 'Inventory 999 not found'}


# Adjustments

def test_adjust_add_reduce_set(app, client, seed, headers):
    response = _adjust(client, headers['admin'], seed, action='add', quantity=20, notes='Delivery')
    assert response.status_code == 200
    assert response.get_json()['data']['quantity'] == 120

    response = _adjust(client, headers['admin'], seed, action='reduce', quantity=50)
    assert response.get_json()['data']['quantity'] == 70

    response = _adjust(client, headers['admin'], seed, action='set', quantity=0)
    assert response.get_json()['data']['quantity'] == 0
    assert response.get_json()['data']['is_low_stock'] is True

    with app.app_context():
        assert quantity_at(seed.variant_id, seed.north_id) == 0


def test_adjust_reduce_below_zero(app, client, seed, headers):
    response = _adjust(client, headers['admin'], seed, action='reduce', quantity=101)

    assert response.status_code == 400
    with app.app_context():
        assert quantity_at(seed.variant_id, seed.north_id) == 100


def test_adjust_validation(client, seed, headers):
    response = client.post(ADJUST_URL, json={'store_id': 999, 'quantity': -1}, headers=headers['admin'])

    assert response.status_code == 422
    errors = response.get_json()['errors']
    assert set(errors) == {'product_variant_id', 'store_id', 'action', 'quantity'}

    response = _adjust(client, headers['admin'], seed, action='add', quantity=0)
    assert response.status_code == 422
    assert 'quantity' in response.get_json()['errors']


def test_adjust_permissions(client, seed, headers):
    assert _adjust(client, headers['viewer'], seed, action='add', quantity=1).status_code == 403
    assert _adjust(client, headers['eaststaff'], seed, action='add', quantity=1).status_code == 403
    assert _adjust(client, headers['staff'], seed, action='add', quantity=1).status_code == 200


# Ledger

def test_inventory_history(client, seed, headers):
    _adjust(client, headers['admin'], seed, action='add', quantity=5)
    _adjust(client, headers['admin'], seed, action='reduce', quantity=3)
    url = f'/api/inventory/{seed.source_inventory_id}/history'

    body = client.get(url, headers=headers['viewer']).get_json()
    assert [(e['type'], e['quantity']) for e in body['data']] == [
        ('reduction', -3), ('addition', 5), ('addition', 100),
    ]
    assert body['data'][0]['user'] == {'id': seed.user_ids['admin'], 'name': 'Admin'}
    assert body['data'][0]['before_quantity'] == 105
    assert body['data'][0]['after_quantity'] == 102

    body = client.get(f'{url}?type=addition', headers=headers['viewer']).get_json()
    assert body['meta']['total'] == 2

    body = client.get(f'{url}?type=all', headers=headers['viewer']).get_json()
    assert body['meta']['total'] == 3

    assert client.get('/api/inventory/999/history', headers=headers['viewer']).status_code == 404


def test_all_transactions(client, seed, headers):
    client.post('/api/inventory/transfers', json=transfer_payload(seed), headers=headers['admin'])

    body = client.get('/api/inventory/transactions', headers=headers['viewer']).get_json()
    assert body['meta']['total'] == 3

    body = client.get(f'/api/inventory/transactions?store_id={seed.south_id}', headers=headers['viewer']).get_json()
    assert [(e['type'], e['store_id']) for e in body['data']] == [('transfer_in', seed.south_id)]

    body = client.get('/api/inventory/transactions?type=transfer_out', headers=headers['viewer']).get_json()
    assert [e['quantity'] for e in body['data']] == [-25]

    response = client.get('/api/inventory/transactions?type=theft', headers=headers['viewer'])
    assert response.status_code == 422


# Stores

def test_list_stores(client, seed, headers):
    body = client.get('/api/stores', headers=headers['viewer']).get_json()
    assert [store['name'] for store in body['data']] == ['East', 'North', 'South']


# Authentication

def test_login_user_logout(client, seed):
    response = client.post('/api/login', json={'username': 'staff', 'password': 'password123'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['user']['username'] == 'staff'
    assert body['user']['store_ids'] == [seed.north_id]
    assert 'password_hash' not in body['user']
    assert 'api_token_hash' not in body['user']

    auth = {'Authorization': f"Bearer {body['token']}"}
    response = client.get('/api/user', headers=auth)
    assert response.status_code == 200
    assert response.get_json()['data']['role'] == 'staff'

    assert client.post('/api/logout', headers=auth).status_code == 200
    assert client.get('/api/user', headers=auth).status_code == 401


def test_login_failures(app, client, seed):
    response = client.post('/api/login', json={'username': 'staff', 'password': 'wrong'})
    assert response.status_code == 401

    response = client.post('/api/login', json={'username': 'staff'})
    assert response.status_code == 422
    assert 'password' in response.get_json()['errors']

    from inventory_api import db
    from inventory_api.data.core.user import User

    with app.app_context():
        user = User.query.filter_by(username='viewer').first()
        user.is_active = False
        db.session.commit()

    response = client.post('/api/login', json={'username': 'viewer', 'password': 'password123'})
    assert response.status_code == 403


def test_disabled_user_token_is_rejected(app, client, seed, headers):
    from inventory_api import db
    from inventory_api.data.core.user import User

    with app.app_context():
        db.session.get(User, seed.user_ids['viewer']).is_active = False
        db.session.commit()

    assert client.get('/api/stores', headers=headers['viewer']).status_code == 401


# Application

def test_health_and_unknown_routes(client, seed):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json() == {'status': 'ok'}
    assert response.headers['X-Content-Type-Options'] == 'nosniff'

    response = client.get('/api/nothing-here')
    assert response.status_code == 404
    assert 'message' in response.get_json()


def test_adjust_rejects_quantities_beyond_column_range(app, client, seed, headers):
    response = _adjust(client, headers['admin'], seed, action='add', quantity=10**20)
    assert response.status_code == 422
    assert 'quantity' in response.get_json()['errors']

    response = _adjust(client, headers['admin'], seed, action='add', quantity=2**31 - 1)
    assert response.status_code == 422
    assert response.get_json()['errors']['quantity'] == [
        f"The resulting stock may not be greater than {2**31 - 1}."
    ]

    response = _adjust(client, headers['admin'], seed, action='add', quantity='--5')
    assert response.status_code == 422

    with app.app_context():
        assert quantity_at(seed.variant_id, seed.north_id) == 100


def test_history_rejects_unknown_type(client, seed, headers):
    url = f'/api/inventory/{seed.source_inventory_id}/history'

    response = client.get(f'{url}?type=theft', headers=headers['viewer'])
    assert response.status_code == 422
    assert response.get_json()['errors']['type'] == ["The selected type is invalid."]

    response = client.get(f'{url}?type=transfer_in', headers=headers['viewer'])
    assert response.status_code == 200
    assert response.get_json()['data'] == []
