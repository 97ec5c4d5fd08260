"""Canonical resource schemas.

One model per resource; every field is optional so partial payloads
(inventory-only or sale-price-only updates) share the same shape.
Unknown fields are kept (``extra='allow'``) so decoding then re-encoding
a record never drops data the API sent. Values are normalised on the way
through: float fields encode integral numbers as floats (``10`` becomes
``10.0``) and timestamps are re-emitted by ``datetime.isoformat()``.
"""
from __future__ import annotations
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_serializer, field_validator

# v3 timestamps keep their numeric offset on the way out ("+00:00", not "Z").
Timestamp = Annotated[datetime, PlainSerializer(lambda v: v.isoformat(), return_type=str, when_used='json')]


class Resource(BaseModel):
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict holding only the fields that were set."""
        return self.model_dump(mode='json', exclude_unset=True)


class Pagination(Resource):
    total: int = 0
    count: int = 0
    per_page: int = 0
    current_page: int = 0
    total_pages: int = 0
    links: Dict[str, Any] = Field(default_factory=dict)

    @property
    def has_more(self) -> bool:
        return self.current_page < self.total_pages


# Catalog

class CustomURL(Resource):
    url: Optional[str] = None
    is_customized: Optional[bool] = None


class CustomField(Resource):
    id: Optional[int] = None
    name: Optional[str] = None
    value: Optional[str] = None


class Image(Resource):
    id: Optional[int] = None
    product_id: Optional[int] = None
    is_thumbnail: Optional[bool] = None
    sort_order: Optional[int] = None
    description: Optional[str] = None
    image_file: Optional[str] = None
    url_zoom: Optional[str] = None
    url_standard: Optional[str] = None
    url_thumbnail: Optional[str] = None
    url_tiny: Optional[str] = None
    date_modified: Optional[Timestamp] = None


class Variant(Resource):
    id: Optional[int] = None
    product_id: Optional[int] = None
    sku: Optional[str] = None
    sku_id: Optional[Any] = None
    price: Optional[float] = None
    calculated_price: Optional[float] = None
    sale_price: Optional[float] = None
    retail_price: Optional[float] = None
    map_price: Optional[float] = None
    weight: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    is_free_shipping: Optional[bool] = None
    fixed_cost_shipping_price: Optional[float] = None
    calculated_weight: Optional[float] = None
    purchasing_disabled: Optional[bool] = None
    purchasing_disabled_message: Optional[str] = None
    image_url: Optional[str] = None
    cost_price: Optional[float] = None
    upc: Optional[str] = None
    mpn: Optional[str] = None
    gtin: Optional[str] = None
    inventory_level: Optional[int] = None
    inventory_warning_level: Optional[int] = None
    bin_picking_number: Optional[str] = None
    option_values: Optional[List[Any]] = None


class Product(Resource):
    id: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    weight: Optional[float] = None
    width: Optional[float] = None
    depth: Optional[float] = None
    height: Optional[float] = None
    price: Optional[float] = None
    cost_price: Optional[float] = None
    retail_price: Optional[float] = None
    sale_price: Optional[float] = None
    map_price: Optional[float] = None
    tax_class_id: Optional[int] = None
    product_tax_code: Optional[str] = None
    calculated_price: Optional[float] = None
    categories: Optional[List[Any]] = None
    brand_id: Optional[int] = None
    option_set_id: Optional[Any] = None
    option_set_display: Optional[str] = None
    inventory_level: Optional[int] = None
    inventory_warning_level: Optional[int] = None
    inventory_tracking: Optional[str] = None
    reviews_rating_sum: Optional[int] = None
    reviews_count: Optional[int] = None
    total_sold: Optional[int] = None
    fixed_cost_shipping_price: Optional[float] = None
    is_free_shipping: Optional[bool] = None
    is_visible: Optional[bool] = None
    is_featured: Optional[bool] = None
    related_products: Optional[List[int]] = None
    warranty: Optional[str] = None
    bin_picking_number: Optional[str] = None
    layout_file: Optional[str] = None
    upc: Optional[str] = None
    mpn: Optional[str] = None
    gtin: Optional[str] = None
    search_keywords: Optional[str] = None
    availability: Optional[str] = None
    availability_description: Optional[str] = None
    gift_wrapping_options_type: Optional[str] = None
    gift_wrapping_options_list: Optional[List[Any]] = None
    sort_order: Optional[int] = None
    condition: Optional[str] = None
    is_condition_shown: Optional[bool] = None
    order_quantity_minimum: Optional[int] = None
    order_quantity_maximum: Optional[int] = None
    page_title: Optional[str] = None
    meta_keywords: Optional[List[Any]] = None
    meta_description: Optional[str] = None
    date_created: Optional[Timestamp] = None
    date_modified: Optional[Timestamp] = None
    view_count: Optional[int] = None
    preorder_release_date: Optional[Any] = None
    preorder_message: Optional[str] = None
    is_preorder_only: Optional[bool] = None
    is_price_hidden: Optional[bool] = None
    price_hidden_label: Optional[str] = None
    custom_url: Optional[CustomURL] = None
    base_variant_id: Optional[int] = None
    open_graph_type: Optional[str] = None
    open_graph_title: Optional[str] = None
    open_graph_description: Optional[str] = None
    open_graph_use_meta_description: Optional[bool] = None
    open_graph_use_product_name: Optional[bool] = None
    open_graph_use_image: Optional[bool] = None
    variants: Optional[List[Variant]] = None
    images: Optional[List[Image]] = None
    primary_image: Optional[Any] = None
    videos: Optional[List[Any]] = None
    custom_fields: Optional[List[CustomField]] = None
    bulk_pricing_rules: Optional[List[Any]] = None
    options: Optional[List[Any]] = None
    modifiers: Optional[List[Any]] = None


class ProductInventory(Resource):
    id: Optional[int] = None
    inventory_level: Optional[int] = None
    inventory_warning_level: Optional[int] = None
    inventory_tracking: Optional[str] = None
    is_visible: Optional[bool] = None
    availability: Optional[str] = None
    availability_description: Optional[str] = None


class ProductSalePrice(Resource):
    id: Optional[int] = None
    sale_price: Optional[float] = None


class VariantInventory(Resource):
    id: Optional[int] = None
    product_id: Optional[int] = None
    inventory_level: Optional[int] = None
    inventory_warning_level: Optional[int] = None


class VariantSalePrice(Resource):
    id: Optional[int] = None
    product_id: Optional[int] = None
    sale_price: Optional[float] = None


class Metafield(Resource):
    id: Optional[int] = None
    key: Optional[str] = None
    value: Optional[str] = None
    resource_id: Optional[int] = None
    resource_type: Optional[str] = None
    description: Optional[str] = None
    date_created: Optional[Timestamp] = None
    date_modified: Optional[Timestamp] = None
    namespace: Optional[str] = None
    permission_set: Optional[str] = None


class ChannelAssignment(Resource):
    product_id: Optional[int] = None
    channel_id: Optional[int] = None


# Channels

class Channel(Resource):
    id: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None
    platform: Optional[str] = None
    status: Optional[str] = None
    external_id: Optional[str] = None
    icon_url: Optional[str] = None
    is_listable_from_ui: Optional[bool] = None
    is_visible: Optional[bool] = None
    is_enabled: Optional[bool] = None
    date_created: Optional[Timestamp] = None
    date_modified: Optional[Timestamp] = None


# Checkouts

class Address(Resource):
    id: Optional[Union[str, int]] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state_or_province: Optional[str] = None
    state_or_province_code: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    postal_code: Optional[str] = None
    phone: Optional[str] = None
    custom_fields: Optional[List[Any]] = None


class Coupon(Resource):
    id: Optional[int] = None
    code: Optional[str] = None
    coupon_type: Optional[Union[str, int]] = None
    discounted_amount: Optional[float] = None
    display_name: Optional[str] = None


class Tax(Resource):
    name: Optional[str] = None
    amount: Optional[float] = None


class Cart(Resource):
    id: Optional[str] = None
    customer_id: Optional[int] = None
    channel_id: Optional[int] = None
    email: Optional[str] = None
    currency: Optional[Dict[str, Any]] = None
    tax_included: Optional[bool] = None
    base_amount: Optional[float] = None
    discount_amount: Optional[float] = None
    cart_amount: Optional[float] = None
    coupons: Optional[List[Coupon]] = None
    discounts: Optional[List[Any]] = None
    line_items: Optional[Dict[str, Any]] = None
    created_time: Optional[Timestamp] = None
    updated_time: Optional[Timestamp] = None


class Checkout(Resource):
    id: Optional[str] = None
    cart: Optional[Cart] = None
    billing_address: Optional[Address] = None
    consignments: Optional[List[Any]] = None
    taxes: Optional[List[Tax]] = None
    coupons: Optional[List[Coupon]] = None
    order_id: Optional[Union[str, int]] = None
    shipping_cost_total_inc_tax: Optional[float] = None
    shipping_cost_total_ex_tax: Optional[float] = None
    handling_cost_total_inc_tax: Optional[float] = None
    handling_cost_total_ex_tax: Optional[float] = None
    tax_total: Optional[float] = None
    subtotal_inc_tax: Optional[float] = None
    subtotal_ex_tax: Optional[float] = None
    grand_total: Optional[float] = None
    created_time: Optional[Timestamp] = None
    updated_time: Optional[Timestamp] = None
    customer_message: Optional[str] = None
    staff_note: Optional[str] = None
    fees: Optional[List[Any]] = None


class Discount(Resource):
    discounted_amount: float
    name: str


class DiscountCart(Resource):
    discounts: List[Discount] = Field(default_factory=list)


class DiscountRequest(Resource):
    cart: DiscountCart


# Gift certificates (v2 API: unwrapped bodies, RFC 2822 dates)

def _parse_v2_date(value: Any) -> Any:
    if value is None or value == '' or value == 0:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, str):
        try:
            return parsedate_to_datetime(value)
        except (TypeError, ValueError):
            return value  # ISO strings are left to pydantic
    return value


class GiftCertificate(Resource):
    model_config = ConfigDict(extra='allow', coerce_numbers_to_str=True)

    id: Optional[int] = None
    code: Optional[str] = None
    amount: Optional[str] = None
    status: Optional[str] = None
    balance: Optional[str] = None
    to_name: Optional[str] = None
    order_id: Optional[int] = None
    template: Optional[str] = None
    message: Optional[str] = None
    to_email: Optional[str] = None
    from_name: Optional[str] = None
    from_email: Optional[str] = None
    customer_id: Optional[int] = None
    expiry_date: Optional[datetime] = None
    purchase_date: Optional[datetime] = None
    currency_code: Optional[str] = None

    @field_validator('expiry_date', 'purchase_date', mode='before')
    @classmethod
    def _v2_dates(cls, v: Any) -> Any:
        return _parse_v2_date(v)

    @field_serializer('expiry_date', 'purchase_date', when_used='json')
    def _rfc2822(self, v: Optional[datetime]) -> Optional[str]:
        if v is None:
            return None
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return format_datetime(v)


# Tax

class Location(Resource):
    country_code: Optional[str] = None
    subdivision_codes: Optional[List[str]] = None
    postal_codes: Optional[List[str]] = None


class ShopperTargetSetting(Resource):
    locations: Optional[List[Location]] = None
    customer_groups: Optional[List[int]] = None


class TaxZone(Resource):
    id: Optional[int] = None
    name: Optional[str] = None
    enabled: Optional[bool] = None
    shopper_target_settings: Optional[List[ShopperTargetSetting]] = None


class ClassRate(Resource):
    rate: Optional[float] = None
    tax_class_id: Optional[int] = None


class TaxClassRate(Resource):
    id: Optional[int] = None
    tax_zone_id: Optional[int] = None
    class_rates: Optional[List[ClassRate]] = None


# OAuth

class AuthTokenRequest(Resource):
    client_id: str
    client_secret: str
    redirect_uri: str
    grant_type: str = 'authorization_code'
    code: str = ''
    scope: str = ''
    context: str = ''


class AuthUser(Resource):
    id: Optional[int] = None
    username: Optional[str] = None
    email: Optional[str] = None


class AuthContext(Resource):
    access_token: Optional[str] = None
    scope: Optional[str] = None
    user: Optional[AuthUser] = None
    owner: Optional[AuthUser] = None
    context: Optional[str] = None
    account_uuid: Optional[str] = None
    error: Optional[str] = None

    @property
    def store_hash(self) -> Optional[str]:
        """Store hash from a ``stores/{hash}`` context."""
        if not self.context:
            return None
        return self.context.split('/', 1)[-1]
