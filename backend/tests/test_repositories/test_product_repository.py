"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.
"""
from unittest.mock import patch

import pytest

from storefront.domain.product import Product, ProductCreate, ProductUpdate
from storefront.repositories.product_repository import ProductRepository

from conftest import PRODUCT_ID


class TestProductRepository:
    """Test ProductRepository methods"""

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_returns_product(self, mock_get_conn, mock_db, sample_product_row):
        """Test find_by_id returns a Product domain model"""
        # Arrange: Mock database connection
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = sample_product_row

        # Act
        product = ProductRepository().find_by_id(PRODUCT_ID)

        # Assert
        assert isinstance(product, Product)
        assert product.id == PRODUCT_ID
        assert product.name == 'Premium Leather Case'
        assert product.discount_percent == 38

        mock_cursor.execute.assert_called_once()
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_find_by_id_active_only_filters_inactive(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = None

        product = ProductRepository().find_by_id(PRODUCT_ID, active_only=True)

        assert product is None
        query = mock_cursor.execute.call_args[0][0]
        assert "is_active = true" in query

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_find_all_returns_products_and_count(self, mock_get_conn, mock_db, sample_product_row):
        """Test find_all returns list of products and total count"""
        # Arrange
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.side_effect = [{'total': 1}]
        mock_cursor.fetchall.return_value = [sample_product_row]

        # Act
        products, total = ProductRepository().find_all(
            category='cases', is_active=True, search='leather', limit=10, offset=0
        )

        # Assert
        assert total == 1
        assert len(products) == 1
        assert mock_cursor.execute.call_count == 2

        select_query, select_params = mock_cursor.execute.call_args_list[1][0]
        assert "ORDER BY created_at DESC" in select_query
        assert select_params == ['cases', True, '%leather%', 10, 0]

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_find_all_without_filters(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = {'total': 0}
        mock_cursor.fetchall.return_value = []

        products, total = ProductRepository().find_all()

        assert products == []
        assert total == 0
        count_query = mock_cursor.execute.call_args_list[0][0][0]
        assert "WHERE 1=1" in count_query

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_create_commits_and_returns_row(self, mock_get_conn, mock_db, sample_product_row):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = sample_product_row

        product = ProductRepository().create(
            ProductCreate(name='Premium Leather Case', price=749850, category='cases', stock=12)
        )

        assert product.id == PRODUCT_ID
        mock_conn.commit.assert_called_once()
        query = mock_cursor.execute.call_args[0][0]
        assert "INSERT INTO products" in query
        assert "RETURNING" in query

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_create_rolls_back_on_error(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.execute.side_effect = Exception("duplicate key")

        with pytest.raises(Exception, match="duplicate key"):
            ProductRepository().create(ProductCreate(name='Cable', price=1000, category='cables'))

        mock_conn.rollback.assert_called_once()
        mock_conn.commit.assert_not_called()
        mock_conn.close.assert_called_once()

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_update_writes_only_sent_fields(self, mock_get_conn, mock_db, sample_product_row):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        sample_product_row['stock'] = 3
        mock_cursor.fetchone.return_value = sample_product_row

        product = ProductRepository().update(PRODUCT_ID, ProductUpdate(stock=3))

        assert product.stock == 3
        query, params = mock_cursor.execute.call_args[0]
        assert "SET stock = %s, updated_at = NOW()" in query
        assert params == [3, PRODUCT_ID]
        mock_conn.commit.assert_called_once()

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_update_missing_product_returns_none(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.return_value = None

        assert ProductRepository().update(PRODUCT_ID, ProductUpdate(price=1)) is None
        mock_conn.rollback.assert_called_once()

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_delete(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchone.side_effect = [{'id': PRODUCT_ID}, None]

        repo = ProductRepository()
        assert repo.delete(PRODUCT_ID) is True
        assert repo.delete(PRODUCT_ID) is False

    @patch('storefront.repositories.product_repository.get_db_connection_dict')
    def test_get_categories(self, mock_get_conn, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_get_conn.return_value = mock_conn
        mock_cursor.fetchall.return_value = [
            {'category': 'cases', 'count': 2},
            {'category': 'audio', 'count': 2},
        ]

        categories = ProductRepository().get_categories()

        assert [c.category for c in categories] == ['cases', 'audio']
        assert categories[0].count == 2
