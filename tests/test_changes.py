import json

from storefront.models import db, Category


def feed(app):
    return app.extensions['change_feed']


def test_commit_publishes_to_matching_subscribers(app, admin_client):
    categories = feed(app).subscribe(['categories'])
    everything = feed(app).subscribe()
    orders = feed(app).subscribe(['orders'])

    category_id = admin_client.post('/api/admin/categories', json={'name': 'Garden'}).get_json()['category']['id']

    assert categories.get(timeout=1) == {'table': 'categories', 'event': 'INSERT', 'id': category_id}
    seen = []
    while True:
        message = everything.get(timeout=0.01)
        if message is None:
            break
        seen.append(message['table'])
    assert 'categories' in seen
    assert orders.get(timeout=0.01) is None


def test_update_and_delete_events(app, admin_client, make_category):
    category_id = make_category('Tools')
    sub = feed(app).subscribe(['categories'])

    admin_client.put(f'/api/admin/categories/{category_id}', json={'name': 'Hardware'})
    admin_client.delete(f'/api/admin/categories/{category_id}')

    assert sub.get(timeout=1)['event'] == 'UPDATE'
    assert sub.get(timeout=1) == {'table': 'categories', 'event': 'DELETE', 'id': category_id}


def test_rollback_publishes_nothing(app):
    sub = feed(app).subscribe(['categories'])
    with app.app_context():
        db.session.add(Category(name='Temp'))
        db.session.flush()
        db.session.rollback()
    assert sub.get(timeout=0.01) is None


def test_closed_subscription_stops_receiving(app, make_category):
    sub = feed(app).subscribe()
    sub.close()
    make_category('Late')
    assert sub.get(timeout=0.01) is None
    assert feed(app).subscriber_count == 0


def test_event_stream_endpoint(app, client, make_category):
    resp = client.get('/api/changes?tables=categories', buffered=False)
    assert resp.status_code == 200
    assert resp.mimetype == 'text/event-stream'
    assert feed(app).subscriber_count == 1

    category_id = make_category('Streamed')
    data_line = None
    for chunk in resp.response:
        chunk = chunk.decode() if isinstance(chunk, bytes) else chunk
        if chunk.startswith('data: '):
            data_line = chunk
            break
    assert json.loads(data_line[len('data: '):].strip())['id'] == category_id

    resp.close()
    assert feed(app).subscriber_count == 0
