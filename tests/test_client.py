import pytest
import requests

from bigcommerce import (
    BigCommerceClient,
    ClientConfig,
    NoContentError,
    RemoteError,
    ResourceNotFoundError,
    RetryMode,
    TransportError,
    ValidationError,
)
from bigcommerce.catalog import ProductFilter
from bigcommerce.models import (
    Checkout,
    GiftCertificate,
    Metafield,
    Product,
    ProductInventory,
    TaxZone,
    Variant,
    VariantSalePrice,
)

from conftest import envelope, http_response, sent

BASE = 'https://api.bigcommerce.com/stores/abc123'


def page_response(items, current, total):
    return http_response(envelope(items, current, total))


def test_fetch_all_uses_configured_budget(client, session):
    # max_retries=1 in the fixture: first failure is abandoned quietly
    session.request.side_effect = [page_response([{'id': 1}], 1, 2), http_response(b'garbage', 500)]
    result = client.fetch_all('/v3/catalog/products', target=Product)
    assert [p.id for p in result] == [1]
    assert result.error is None


def test_fetch_all_budget_override(client, session):
    session.request.side_effect = [page_response([{'id': 1}], 1, 2), http_response(b'garbage', 500)]
    result = client.fetch_all('/v3/catalog/products', target=Product, max_retries=0)
    assert [p.id for p in result] == [1]
    assert result.error is not None


def test_reattempt_mode_from_config(session):
    config = ClientConfig(store_hash='abc123', access_token='t', client_id='c', max_retries=2,
                          retry_mode='reattempt')
    assert config.retry_mode is RetryMode.REATTEMPT
    client = BigCommerceClient(config, session=session)
    session.request.side_effect = [
        page_response([{'id': 1}], 1, 2),
        http_response(b'garbage', 500),
        page_response([{'id': 2}], 2, 2),
    ]
    result = client.fetch_all('/v3/catalog/products', target=Product)
    assert result.ok
    assert [p.id for p in result] == [1, 2]


def test_get_all_products_sends_filter(client, session):
    session.request.side_effect = [page_response([{'id': 1, 'sku': 'A'}], 1, 1)]
    f = ProductFilter(include_fields=('name', 'sku'), include=('variants',), args={'is_visible': 'true'})
    result = client.get_all_products(f)
    _, url, _ = sent(session)
    assert url == f"{BASE}/v3/catalog/products?page=1&include_fields=name,sku&include=variants&is_visible=true"
    assert result[0].sku == 'A'


def test_get_products_single_page(client, session):
    session.request.return_value = page_response([{'id': 1}], 2, 3)
    items, more = client.get_products({'limit': '1'}, 2)
    assert [p.id for p in items] == [1]
    assert more is True
    assert sent(session)[1] == f"{BASE}/v3/catalog/products?page=2&limit=1"


def test_get_all_variants_and_channels(client, session):
    session.request.side_effect = [
        page_response([{'id': 11, 'product_id': 1}], 1, 1),
        page_response([{'id': 1, 'name': 'Storefront', 'type': 'storefront'}], 1, 1),
    ]
    variants = client.get_all_variants({'sku': 'X'})
    channels = client.get_all_channels()
    assert isinstance(variants[0], Variant) and variants[0].product_id == 1
    assert channels[0].name == 'Storefront'
    assert sent(session, 1)[1] == f"{BASE}/v3/channels?page=1"


def test_fetch_one_is_repeatable(client, session):
    body = {'data': {'id': 5, 'name': 'Mug', 'variants': [{'id': 50, 'sku': 'MUG-1'}]}}
    session.request.side_effect = [http_response(body), http_response(body)]
    first = client.get_product_by_id(5)
    second = client.get_product_by_id(5)
    assert first == second
    assert sent(session)[1] == (f"{BASE}/v3/catalog/products/5?include=variants,images,custom_fields,"
                                "bulk_pricing_rules,primary_image,modifiers,options,videos")


def test_fetch_one_surfaces_errors_without_retry(client, session):
    session.request.return_value = http_response({'status': 404, 'title': 'Not found'}, 404)
    with pytest.raises(RemoteError):
        client.get_product_by_id(1)
    assert session.request.call_count == 1


def test_fetch_one_transport_error(client, session):
    session.request.side_effect = requests.ConnectionError('down')
    with pytest.raises(TransportError):
        client.get_checkout('abc')


def test_create_product_validation_error_is_not_retried(client, session):
    session.request.return_value = http_response({'errors': {'sku': 'already exists'}}, 422)
    with pytest.raises(ValidationError) as info:
        client.create_product(Product(name='Mug', sku='MUG', price=9.5))
    assert str(info.value) == 'already exists'
    assert session.request.call_count == 1
    method, url, body = sent(session)
    assert (method, url) == ('POST', f"{BASE}/v3/catalog/products")
    assert body == {'name': 'Mug', 'sku': 'MUG', 'price': 9.5}


def test_mutate_no_content_returns_none(client, session):
    session.request.return_value = http_response(b'', 204)
    assert client.mutate('DELETE', '/v3/catalog/products/1', None) is None


def test_update_product_by_sku(client, session):
    session.request.side_effect = [
        page_response([{'id': 42, 'sku': 'MUG'}], 1, 1),
        http_response({'data': {'id': 42, 'sku': 'MUG', 'price': 11.0}}),
    ]
    updated = client.update_product_by_sku(Product(sku='MUG', price=11.0))
    assert updated.id == 42
    assert sent(session, 0)[1] == f"{BASE}/v3/catalog/products?page=1&sku=MUG"
    method, url, body = sent(session, 1)
    assert (method, url, body) == ('PUT', f"{BASE}/v3/catalog/products/42", {'sku': 'MUG', 'price': 11.0})


def test_update_product_by_sku_not_found(client, session):
    session.request.return_value = page_response([], 1, 0)
    with pytest.raises(ResourceNotFoundError):
        client.update_product_by_sku(Product(sku='NOPE'))


def test_update_product_by_sku_lookup_failure_is_raised(session):
    config = ClientConfig(store_hash='abc123', access_token='t', client_id='c', max_retries=0)
    client = BigCommerceClient(config, session=session)
    session.request.return_value = http_response(b'', 204)
    with pytest.raises(NoContentError):
        client.update_product_by_sku(Product(sku='MUG'))


def test_update_product_by_sku_network_failure_is_not_a_miss(client, session):
    # the fixture's budget of 1 would abandon a listing quietly; the lookup must not
    session.request.side_effect = requests.ConnectionError('down')
    with pytest.raises(TransportError):
        client.update_product_by_sku(Product(sku='MUG'))
    assert session.request.call_count == 1


def test_update_product_inventory(client, session):
    session.request.return_value = http_response({'data': {'id': 3, 'inventory_level': 8}})
    client.update_product_inventory(ProductInventory(id=3, inventory_level=8, inventory_tracking='product'))
    method, url, body = sent(session)
    assert (method, url) == ('PUT', f"{BASE}/v3/catalog/products/3")
    assert body == {'id': 3, 'inventory_level': 8, 'inventory_tracking': 'product'}


def test_update_variant_by_sku(client, session):
    session.request.side_effect = [
        page_response([{'id': 7, 'product_id': 3, 'sku': 'V'}], 1, 1),
        http_response({'data': {'id': 7, 'product_id': 3, 'sku': 'V', 'price': 2.0}}),
    ]
    variant = client.update_variant_by_sku(Variant(sku='V', price=2.0))
    assert variant.price == 2.0
    assert sent(session, 0)[1] == f"{BASE}/v3/catalog/variants?page=1&sku=V"
    assert sent(session, 1)[:2] == ('PUT', f"{BASE}/v3/catalog/products/3/variants/7")


def test_update_variant_sale_price(client, session):
    session.request.return_value = http_response({'data': {'id': 7, 'product_id': 3, 'sale_price': 1.5}})
    client.update_variant_sale_price(VariantSalePrice(id=7, product_id=3, sale_price=1.5))
    assert sent(session)[1] == f"{BASE}/v3/catalog/products/3/variants/7"


def test_product_metafields_keyed_by_key(client, session):
    session.request.return_value = http_response({'data': [
        {'id': 1, 'key': 'color', 'value': 'red', 'namespace': 'ns'},
        {'id': 2, 'key': 'size', 'value': 'L', 'namespace': 'ns'},
    ]})
    fields = client.get_product_metafields(9)
    assert set(fields) == {'color', 'size'}
    assert isinstance(fields['size'], Metafield) and fields['size'].value == 'L'


def test_channel_assignments(client, session):
    session.request.side_effect = [http_response(b'', 204), http_response(b'', 204), http_response(b'{}', 404)]
    assert client.add_product_to_channel(1, 2) is True
    assert client.delete_product_from_channel(1, 2) is True
    assert client.delete_product_from_channel(1, 99) is False
    method, url, body = sent(session, 0)
    assert (method, url, body) == ('PUT', f"{BASE}/v3/catalog/products/channel-assignments",
                                   [{'product_id': 1, 'channel_id': 2}])
    assert sent(session, 1)[1] == f"{BASE}/v3/catalog/products/channel-assignments?product_id:in=1&channel_id:in=2"


def test_checkout_and_discount(client, session):
    checkout = {'data': {'id': 'c-1', 'grand_total': 10.0, 'cart': {'id': 'c-1', 'cart_amount': 10.0}}}
    session.request.side_effect = [http_response(checkout), http_response(checkout)]
    got = client.get_checkout('c-1')
    assert isinstance(got, Checkout) and got.cart.cart_amount == 10.0
    assert sent(session)[1] == f"{BASE}/v3/checkouts/c-1?include=consignments.available_shipping_options"
    client.add_discount_to_checkout('c-1', 2.5, 'loyalty')
    method, url, body = sent(session, 1)
    assert (method, url) == ('POST', f"{BASE}/v3/checkouts/c-1/discounts")
    assert body == {'cart': {'discounts': [{'discounted_amount': 2.5, 'name': 'loyalty'}]}}


def test_gift_certificate_lookup(client, session):
    session.request.side_effect = [
        http_response([{'id': 1, 'code': 'GC-1', 'amount': '10.0000', 'balance': '10.0000'}]),
        http_response(b'', 204),
        http_response([]),
    ]
    gc = client.get_gift_certificate_by_code('GC-1')
    assert gc.code == 'GC-1' and gc.amount == '10.0000'
    assert sent(session)[1] == f"{BASE}/v2/gift_certificates?code=GC-1"
    assert client.get_gift_certificate_by_code('missing') is None
    assert client.get_gift_certificate_by_code('empty') is None


def test_gift_certificate_create_and_update(client, session):
    session.request.side_effect = [
        http_response({'id': 5, 'code': 'GC-5', 'amount': '25.00'}, 201),
        http_response({'id': 5, 'code': 'GC-5', 'amount': '30.00'}),
    ]
    created = client.create_gift_certificate(GiftCertificate(code='GC-5', amount='25.00', to_name='Ana'))
    assert created.id == 5
    assert sent(session)[2] == {'code': 'GC-5', 'amount': '25.00', 'to_name': 'Ana'}
    updated = client.update_gift_certificate(GiftCertificate(id=5, amount='30.00'))
    assert updated.amount == '30.00'
    assert sent(session, 1)[:2] == ('PUT', f"{BASE}/v2/gift_certificates/5")


def test_tax_zones_and_rates(client, session):
    session.request.side_effect = [
        http_response({'data': [{'id': 1, 'name': 'EU', 'enabled': True}]}),
        http_response({'data': [{'id': 3, 'tax_zone_id': 1, 'class_rates': [{'rate': 20, 'tax_class_id': 0}]}]}),
        http_response({'data': []}),
    ]
    zones = client.get_tax_zones([1, 2])
    assert isinstance(zones[0], TaxZone) and zones[0].name == 'EU'
    assert sent(session)[1] == f"{BASE}/v3/tax/zones?id:in=1,2"
    rates = client.get_tax_rates([1])
    assert rates[0].class_rates[0].rate == 20
    assert sent(session, 1)[1] == f"{BASE}/v3/tax/rates?tax_zone_id:in=1"
    assert client.get_tax_zones() == []
    assert sent(session, 2)[1] == f"{BASE}/v3/tax/zones"


def test_client_holds_no_per_call_state(client, session):
    session.request.side_effect = [page_response([{'id': 1}], 1, 1), page_response([{'id': 2}], 1, 1)]
    first = client.fetch_all('/v3/channels')
    second = client.fetch_all('/v3/channels')
    assert first.items == [{'id': 1}] and second.items == [{'id': 2}]
