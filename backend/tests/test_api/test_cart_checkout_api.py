"""
API tests for the cart, checkout and order history endpoints
"""
from unittest.mock import Mock, patch

import pytest

from storefront.api.cart import get_cart_service
from storefront.api.checkout import get_checkout_service
from storefront.domain.cart import CartItem, CartSummary
from storefront.domain.order import Order
from storefront.domain.payment import get_payment_method
from storefront.main import app
from storefront.services.cart_service import CartError, CartItemNotFound
from storefront.services.checkout_service import CheckoutError, CheckoutResult

from conftest import CART_ITEM_ID, CUSTOMER_ID, ORDER_ID, PRODUCT_ID


@pytest.fixture
def cart_service():
    service = Mock()
    app.dependency_overrides[get_cart_service] = lambda: service
    return service


@pytest.fixture
def checkout_service():
    service = Mock()
    app.dependency_overrides[get_checkout_service] = lambda: service
    return service


class TestCart:

    def test_requires_login(self, client):
        assert client.get("/api/v1/cart/").status_code == 401

    def test_admins_cannot_shop(self, admin_client):
        response = admin_client.get("/api/v1/cart/")

        assert response.status_code == 403
        assert response.json()['detail'] == "Admins cannot make purchases"

    def test_get_cart(self, customer_client, cart_service, sample_cart_row):
        items = [CartItem(**sample_cart_row)]
        cart_service.get_cart.return_value = (items, CartSummary.from_items(items))

        response = customer_client.get("/api/v1/cart/")

        body = response.json()
        assert response.status_code == 200
        assert body['count'] == 1
        assert body['summary']['total'] == 1499700.0
        assert body['summary']['has_free_shipping'] is True
        cart_service.get_cart.assert_called_once_with(CUSTOMER_ID)

    def test_add_item(self, customer_client, cart_service, sample_cart_row):
        cart_service.add_product.return_value = CartItem(**sample_cart_row)

        response = customer_client.post("/api/v1/cart/items", json={"product_id": PRODUCT_ID, "quantity": 2})

        assert response.status_code == 201
        assert "added to cart" in response.json()['message']

    def test_add_item_over_stock(self, customer_client, cart_service):
        cart_service.add_product.side_effect = CartError("Only 1 units of Cable available")

        response = customer_client.post("/api/v1/cart/items", json={"product_id": PRODUCT_ID, "quantity": 5})

        assert response.status_code == 400
        assert response.json()['detail'] == "Only 1 units of Cable available"

    def test_decrement_to_zero_removes_line(self, customer_client, cart_service):
        cart_service.change_quantity.return_value = None

        response = customer_client.patch(f"/api/v1/cart/items/{CART_ITEM_ID}", json={"delta": -1})

        assert response.json()['removed'] is True
        cart_service.change_quantity.assert_called_once_with(CUSTOMER_ID, CART_ITEM_ID, -1)

    def test_remove_unknown_line(self, customer_client, cart_service):
        cart_service.remove_item.side_effect = CartItemNotFound("Cart item not found")

        response = customer_client.delete(f"/api/v1/cart/items/{CART_ITEM_ID}")

        assert response.status_code == 404

    def test_count_badge(self, customer_client, cart_service):
        cart_service.count.return_value = 120

        data = customer_client.get("/api/v1/cart/count").json()['data']

        assert data == {'count': 120, 'badge': '99+'}

    def test_admin_count_is_zero(self, admin_client, cart_service):
        data = admin_client.get("/api/v1/cart/count").json()['data']

        assert data == {'count': 0, 'badge': None}
        cart_service.count.assert_not_called()


class TestCheckout:

    def test_payment_methods_are_public(self, client):
        response = client.get("/api/v1/checkout/payment-methods")

        assert response.status_code == 200
        assert [m['id'] for m in response.json()['data']] == ['transfer', 'ewallet']

    def test_checkout(self, customer_client, checkout_service, sample_order_row):
        checkout_service.checkout.return_value = CheckoutResult(
            order=Order(**sample_order_row),
            payment_method=get_payment_method('transfer'),
        )

        response = customer_client.post("/api/v1/checkout/", json={"payment_method": "transfer"})

        assert response.status_code == 201
        body = response.json()
        assert body['data']['order']['order_number'] == 'A1B2C3D4'
        assert len(body['data']['payment']['info']['banks']) == 4
        checkout_service.checkout.assert_called_once_with(CUSTOMER_ID, 'transfer')

    def test_payment_method_is_required(self, customer_client, checkout_service):
        response = customer_client.post("/api/v1/checkout/", json={})

        assert response.status_code == 422
        checkout_service.checkout.assert_not_called()

    def test_empty_cart(self, customer_client, checkout_service):
        checkout_service.checkout.side_effect = CheckoutError("Cart is empty")

        response = customer_client.post("/api/v1/checkout/", json={"payment_method": "transfer"})

        assert response.status_code == 400
        assert response.json()['detail'] == "Cart is empty"

    def test_admin_cannot_checkout(self, admin_client, checkout_service):
        response = admin_client.post("/api/v1/checkout/", json={"payment_method": "transfer"})

        assert response.status_code == 403
        checkout_service.checkout.assert_not_called()


class TestOrders:

    @patch('storefront.api.orders.OrderRepository')
    def test_order_history(self, mock_repo_cls, customer_client, sample_order_row):
        mock_repo_cls.return_value.find_by_user.return_value = [Order(**sample_order_row, item_count=2)]

        response = customer_client.get("/api/v1/orders/")

        body = response.json()
        assert body['count'] == 1
        assert body['data'][0]['total_quantity'] == 2
        assert body['data'][0]['status_label'] == 'Selesai'

    @patch('storefront.api.orders.OrderRepository')
    def test_other_customers_order_is_not_found(self, mock_repo_cls, customer_client):
        mock_repo_cls.return_value.find_for_user.return_value = None

        response = customer_client.get(f"/api/v1/orders/{ORDER_ID}")

        assert response.status_code == 404
        mock_repo_cls.return_value.find_for_user.assert_called_once_with(ORDER_ID, CUSTOMER_ID)
