from __future__ import annotations

from .models import Checkout, Discount, DiscountCart, DiscountRequest

CHECKOUTS_PATH = '/v3/checkouts'


class CheckoutsMixin:

    def get_checkout(self, checkout_id: str) -> Checkout:
        path = f"{CHECKOUTS_PATH}/{checkout_id}?include=consignments.available_shipping_options"
        return self.fetch_one(path, Checkout)

    def add_discount_to_checkout(self, checkout_id: str, discount_amount: float, discount_name: str) -> Checkout:
        """Apply a single manual discount to the checkout's cart."""
        payload = DiscountRequest(
            cart=DiscountCart(discounts=[Discount(discounted_amount=discount_amount, name=discount_name)])
        )
        return self.mutate('POST', f"{CHECKOUTS_PATH}/{checkout_id}/discounts", payload, Checkout)
