import io
import os
from decimal import Decimal

from storefront.models import db, Order, OrderItem, Review, ProductInquiry


def test_category_crud(admin_client):
    resp = admin_client.post('/api/admin/categories', json={'name': '  Audio '})
    assert resp.status_code == 201
    category_id = resp.get_json()['category']['id']
    assert resp.get_json()['category']['name'] == 'Audio'

    assert admin_client.post('/api/admin/categories', json={'name': 'Audio'}).status_code == 400
    resp = admin_client.post('/api/admin/categories', json={'name': '   '})
    assert resp.get_json()['error'] == 'Category name is required.'

    resp = admin_client.put(f'/api/admin/categories/{category_id}', json={'name': 'Sound'})
    assert resp.get_json()['category']['name'] == 'Sound'
    # renaming to its own name is fine
    assert admin_client.put(f'/api/admin/categories/{category_id}', json={'name': 'Sound'}).status_code == 200

    assert admin_client.delete(f'/api/admin/categories/{category_id}').status_code == 200
    assert admin_client.get('/api/admin/categories').get_json() == []
    assert admin_client.delete(f'/api/admin/categories/{category_id}').status_code == 404


def test_deleting_category_keeps_products(admin_client, client, make_product, make_category):
    category_id = make_category('Misc')
    make_product(name='Thing', category_id=category_id)
    admin_client.delete(f'/api/admin/categories/{category_id}')
    products = client.get('/api/products').get_json()
    assert [(p['name'], p['category_id']) for p in products] == [('Thing', None)]


def test_product_form(admin_client, client, make_category):
    category_id = make_category('Kitchen')
    resp = admin_client.post('/api/admin/products', json={
        'name': 'Pan',
        'category_id': category_id,
        'price_retail': '45000',
        'price_wholesale': '40000',
        'discount_price': '',
        'stock': '12',
        'flash_sale_end': '2099-01-01T12:00:00Z',
        'is_featured': True,
    })
    assert resp.status_code == 201
    product = resp.get_json()['product']
    assert product['is_approved'] is True
    assert product['discount_price'] is None
    assert product['price_wholesale'] == 40000
    assert product['flash_sale_end'] == '2099-01-01T12:00:00'
    assert product['is_featured'] is True

    resp = admin_client.put(f"/api/admin/products/{product['id']}", json={
        'name': 'Frying Pan', 'price_retail': 50000, 'discount_price': 42000, 'stock': 3,
    })
    assert resp.get_json()['product']['effective_price'] == 42000
    assert client.get(f"/api/products/{product['id']}").get_json()['name'] == 'Frying Pan'

    assert admin_client.post('/api/admin/products', json={'name': 'X', 'price_retail': 'abc', 'stock': 1}).status_code == 400
    assert admin_client.post('/api/admin/products', json={
        'name': 'X', 'price_retail': 1, 'stock': 1, 'category_id': 'missing',
    }).status_code == 404
    assert admin_client.post('/api/admin/products', json={
        'name': 'X', 'price_retail': 1, 'stock': 1, 'flash_sale_end': 'soon',
    }).status_code == 400

    assert admin_client.delete(f"/api/admin/products/{product['id']}").status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_variants(admin_client, client, make_product):
    product_id = make_product()
    resp = admin_client.post(f'/api/admin/products/{product_id}/variants',
                             json={'color': 'Black', 'size': 'XL', 'stock': 2, 'price_adjustment': '-10'})
    assert resp.status_code == 201
    variant = resp.get_json()
    assert variant['price_adjustment'] == -10

    detail = client.get(f'/api/products/{product_id}').get_json()
    assert [v['id'] for v in detail['variants']] == [variant['id']]

    assert admin_client.delete(f"/api/admin/variants/{variant['id']}").status_code == 200
    assert client.get(f'/api/products/{product_id}').get_json()['variants'] == []


def test_delivery_zones(admin_client):
    resp = admin_client.post('/api/admin/delivery-zones', json={
        'zone_name': 'Central', 'locations': 'Kampala, Entebbe, ,Wakiso', 'delivery_charge': '5000',
    })
    assert resp.status_code == 201
    zone = resp.get_json()['zone']
    assert zone['locations'] == ['Kampala', 'Entebbe', 'Wakiso']
    assert (zone['min_days'], zone['max_days'], zone['is_active']) == (1, 3, True)

    resp = admin_client.post('/api/admin/delivery-zones', json={'zone_name': 'Empty', 'delivery_charge': 1})
    assert resp.get_json()['error'] == 'Please fill all required fields'

    resp = admin_client.put(f"/api/admin/delivery-zones/{zone['id']}", json={
        'zone_name': 'Central', 'locations': ['Kampala'], 'delivery_charge': 6000,
        'min_days': 2, 'max_days': 1,
    })
    assert resp.status_code == 400

    resp = admin_client.put(f"/api/admin/delivery-zones/{zone['id']}", json={
        'zone_name': 'Central', 'locations': ['Kampala'], 'delivery_charge': 6000, 'is_active': False,
    })
    assert resp.get_json()['zone']['is_active'] is False

    admin_client.post('/api/admin/delivery-zones', json={
        'zone_name': 'Arua', 'locations': ['Arua'], 'delivery_charge': 9000,
    })
    names = [z['zone_name'] for z in admin_client.get('/api/admin/delivery-zones').get_json()]
    assert names == ['Arua', 'Central']

    assert admin_client.delete(f"/api/admin/delivery-zones/{zone['id']}").status_code == 200


def test_order_status_updates(app, admin_client, make_product):
    product_id = make_product()
    with app.app_context():
        order = Order(guest_name='G', phone='1', address='A', total_amount=Decimal('100'))
        order.items.append(OrderItem(product_id=product_id, quantity=1, price=Decimal('100')))
        db.session.add(order)
        db.session.commit()
        order_id = order.id

    orders = admin_client.get('/api/admin/orders').get_json()
    assert orders[0]['items'][0]['product']['id'] == product_id

    for status in ('paid', 'shipped', 'completed'):
        resp = admin_client.put(f'/api/admin/orders/{order_id}/status', json={'status': status})
        assert resp.get_json()['order']['status'] == status

    assert admin_client.put(f'/api/admin/orders/{order_id}/status', json={'status': 'lost'}).status_code == 400
    assert admin_client.put('/api/admin/orders/missing/status', json={'status': 'paid'}).status_code == 404


def test_review_and_inquiry_moderation(app, admin_client, make_product):
    product_id = make_product(name='Fan')
    with app.app_context():
        review = Review(product_id=product_id, rating=1, reviewer_name='Troll')
        inquiry = ProductInquiry(product_id=product_id, name='Q', email='q@x.io', message='In stock?')
        db.session.add_all([review, inquiry])
        db.session.commit()
        review_id, inquiry_id = review.id, inquiry.id

    reviews = admin_client.get('/api/admin/reviews').get_json()
    assert reviews[0]['product_name'] == 'Fan'
    assert admin_client.delete(f'/api/admin/reviews/{review_id}').status_code == 200
    assert admin_client.get('/api/admin/reviews').get_json() == []

    resp = admin_client.put(f'/api/admin/inquiries/{inquiry_id}', json={'status': 'contacted'})
    assert resp.get_json()['inquiry']['status'] == 'contacted'
    assert admin_client.put(f'/api/admin/inquiries/{inquiry_id}', json={'status': 'ignored'}).status_code == 400
    assert admin_client.get('/api/admin/inquiries').get_json()[0]['product_name'] == 'Fan'
    assert admin_client.delete(f'/api/admin/inquiries/{inquiry_id}').status_code == 200


def test_seller_request_delete(user_client, admin_client):
    request_id = user_client.post('/api/seller/requests', json={
        'business_name': 'B', 'business_description': 'D', 'contact_email': 'b@d.io',
    }).get_json()['request']['id']
    assert len(admin_client.get('/api/admin/seller-requests').get_json()) == 1
    assert admin_client.delete(f'/api/admin/seller-requests/{request_id}').status_code == 200
    assert user_client.get('/api/seller/requests/mine').get_json() == []


def upload(client, product_id, filename, display_order=None):
    data = {'image': (io.BytesIO(b'img:' + filename.encode()), filename)}
    if display_order is not None:
        data['display_order'] = str(display_order)
    return client.post(f'/api/admin/products/{product_id}/images', data=data,
                       content_type='multipart/form-data')


def test_product_gallery(app, admin_client, client, make_product):
    product_id = make_product()

    resp = upload(admin_client, product_id, 'front.webp', display_order=5)
    assert resp.status_code == 201
    webp = resp.get_json()
    assert webp['display_order'] == 5 and webp['image_url'].endswith('.webp')

    resp = upload(admin_client, product_id, 'side.jpg')
    assert resp.status_code == 201
    jpg = resp.get_json()
    assert jpg['display_order'] == 1

    gallery = client.get(f'/api/products/{product_id}').get_json()['images']
    assert [i['id'] for i in gallery] == [jpg['id'], webp['id']]

    jpg_path = os.path.join(app.config['UPLOAD_FOLDER'], os.path.basename(jpg['image_url']))
    assert os.path.exists(jpg_path)
    assert admin_client.delete(f"/api/admin/images/{jpg['id']}").status_code == 200
    assert not os.path.exists(jpg_path)
    gallery = client.get(f'/api/products/{product_id}').get_json()['images']
    assert [i['id'] for i in gallery] == [webp['id']]

    assert admin_client.delete(f"/api/admin/images/{jpg['id']}").status_code == 404
    assert upload(admin_client, 'missing', 'x.jpg').status_code == 404


def test_zone_update_keeps_active_flag(admin_client):
    zone = admin_client.post('/api/admin/delivery-zones', json={
        'zone_name': 'North', 'locations': ['Gulu'], 'delivery_charge': 7000, 'is_active': False,
    }).get_json()['zone']
    assert zone['is_active'] is False

    resp = admin_client.put(f"/api/admin/delivery-zones/{zone['id']}", json={
        'zone_name': 'North', 'locations': ['Gulu'], 'delivery_charge': 8000,
    })
    assert resp.get_json()['zone']['delivery_charge'] == 8000
    assert resp.get_json()['zone']['is_active'] is False


def test_variant_price_adjustment_parsing(admin_client, make_product):
    product_id = make_product()
    url = f'/api/admin/products/{product_id}/variants'
    assert admin_client.post(url, json={'color': 'Red', 'price_adjustment': '--5'}).status_code == 400
    assert admin_client.post(url, json={'color': 'Red', 'price_adjustment': '-'}).status_code == 400
    resp = admin_client.post(url, json={'color': 'Blue', 'price_adjustment': '2.50'})
    assert resp.get_json()['price_adjustment'] == 2.5


def test_non_object_body_is_rejected(admin_client):
    resp = admin_client.post('/api/admin/categories', json=['Audio'])
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Request body must be a JSON object.'
