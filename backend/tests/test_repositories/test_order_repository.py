"""
Unit tests for OrderRepository

place_order is the one multi-statement transaction, so its commit and
rollback paths are checked explicitly.
"""
from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest

from storefront.domain.cart import CartItem
from storefront.repositories.order_repository import OrderRepository

from conftest import CART_ITEM_ID, CUSTOMER_ID, ORDER_ID


@pytest.fixture
def cart_items(sample_cart_row):
    return [CartItem(**sample_cart_row)]


class TestPlaceOrder:

    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_writes_order_items_stock_and_cart_in_one_commit(
        self, mock_get_conn, mock_db, sample_order_row, cart_items
    ):
        # Arrange
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.side_effect = [
            sample_order_row,
            {
                'id': 'item-1',
                'order_id': ORDER_ID,
                'product_name': 'Premium Leather Case',
                'product_image': None,
                'price': Decimal('749850'),
                'quantity': 2,
            },
        ]

        # Act
        order = OrderRepository().place_order(
            user_id=CUSTOMER_ID,
            items=cart_items,
            shipping_cost=Decimal('0'),
            total_amount=Decimal('1499700'),
            payment_method='transfer',
        )

        # Assert
        assert order.id == ORDER_ID
        assert len(order.items) == 1
        assert order.items[0].quantity == 2

        statements = [c[0][0] for c in mock_cursor.execute.call_args_list]
        assert len(statements) == 4
        assert "INSERT INTO orders" in statements[0]
        assert "INSERT INTO order_items" in statements[1]
        assert "GREATEST(stock - %s, 0)" in statements[2]
        assert "DELETE FROM cart_items" in statements[3]

        stock_params = mock_cursor.execute.call_args_list[2][0][1]
        assert stock_params == (2, 'Premium Leather Case')
        cleanup_params = mock_cursor.execute.call_args_list[3][0][1]
        assert cleanup_params == (CUSTOMER_ID, [CART_ITEM_ID])

        mock_conn.commit.assert_called_once()
        mock_conn.rollback.assert_not_called()

    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_rolls_back_everything_on_failure(
        self, mock_get_conn, mock_db, sample_order_row, cart_items
    ):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.side_effect = [sample_order_row]
        mock_cursor.execute.side_effect = [None, Exception("connection lost")]

        with pytest.raises(Exception, match="connection lost"):
            OrderRepository().place_order(
                user_id=CUSTOMER_ID,
                items=cart_items,
                shipping_cost=Decimal('0'),
                total_amount=Decimal('1499700'),
                payment_method='transfer',
            )

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()


class TestOrderQueries:

    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_find_for_user_loads_items(self, mock_get_conn, mock_db, sample_order_row):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = sample_order_row
        mock_cursor.fetchall.return_value = [{
            'id': 'item-1',
            'order_id': ORDER_ID,
            'product_name': 'Premium Leather Case',
            'product_image': None,
            'price': Decimal('749850'),
            'quantity': 2,
        }]

        order = OrderRepository().find_for_user(ORDER_ID, CUSTOMER_ID)

        assert order.total_quantity == 2
        first_params = mock_cursor.execute.call_args_list[0][0][1]
        assert first_params == (ORDER_ID, CUSTOMER_ID)

    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_find_for_user_other_customer(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = None

        assert OrderRepository().find_for_user(ORDER_ID, "someone-else") is None
        assert mock_cursor.execute.call_count == 1

    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_find_all_includes_customer_name(self, mock_get_conn, mock_db, sample_order_row):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [{**sample_order_row, 'customer_name': 'Budi Santoso'}]

        orders, total = OrderRepository().find_all(status='completed')

        assert total == 1
        assert orders[0].customer_name == 'Budi Santoso'
        select_query, params = mock_cursor.execute.call_args_list[1][0]
        assert "LEFT JOIN profiles" in select_query
        assert params == ['completed', 100, 0]

    @patch('storefront.repositories.order_repository.datetime')
    @patch('storefront.repositories.order_repository.get_db_connection_dict')
    def test_monthly_revenue_fills_empty_months(self, mock_get_conn, mock_datetime, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_datetime.now.return_value = datetime(2025, 3, 15, 10, 30)
        mock_cursor.fetchall.return_value = [
            {'month': datetime(2025, 2, 1), 'revenue': Decimal('1499700'), 'orders': 1},
        ]

        series = OrderRepository().get_monthly_revenue(months=3)

        assert series == [
            {'month': '2025-01', 'revenue': 0.0, 'orders': 0},
            {'month': '2025-02', 'revenue': 1499700.0, 'orders': 1},
            {'month': '2025-03', 'revenue': 0.0, 'orders': 0},
        ]
        start = mock_cursor.execute.call_args[0][1][0]
        assert start == datetime(2025, 1, 1)
