"""Tests for :mod:`catalog_admin.services.products`."""

from unittest import TestCase, mock
from datetime import datetime, timedelta
from typing import Any

import sqlalchemy
from sqlalchemy.orm import sessionmaker

from catalog_admin.domain import Product, ProductFields
from catalog_admin.exceptions import NotFound, UpstreamFailure
from catalog_admin.services import products
from catalog_admin.services.database import DBProduct, create_all, \
    drop_all, make_engine


def raise_op_error(*args: Any, **kwargs: Any) -> None:
    raise sqlalchemy.exc.OperationalError('statement', {}, None)


class ProductStoreTestCase(TestCase):
    def setUp(self) -> None:
        """Initialize an in-memory SQLite database."""
        self.engine = make_engine('sqlite://')
        create_all(self.engine)
        self.db = sessionmaker(bind=self.engine)()

        base = datetime(2024, 1, 1)
        self.db.add_all([
            DBProduct(name='Old active', status='active', images=['a'],
                      created_at=base, updated_at=base),
            DBProduct(name='Hidden', status='inactive', images=[],
                      created_at=base + timedelta(hours=1),
                      updated_at=base + timedelta(hours=1)),
            DBProduct(name='New active', status='active', images=None,
                      created_at=base + timedelta(hours=2),
                      updated_at=base + timedelta(hours=2)),
        ])
        self.db.commit()

    def tearDown(self) -> None:
        """Clear the database and tear down all tables."""
        self.db.close()
        drop_all(self.engine)


class TestListing(ProductStoreTestCase):
    def test_list_public(self) -> None:
        """Only active products, newest first."""
        listed = products.list_public(self.db)
        self.assertEqual([p.name for p in listed], ['New active', 'Old active'])
        self.assertTrue(all(isinstance(p, Product) for p in listed))

    def test_list_admin(self) -> None:
        """Every product, newest first."""
        listed = products.list_admin(self.db)
        self.assertEqual([p.name for p in listed],
                         ['New active', 'Hidden', 'Old active'])

    @mock.patch.object(products, 'logger')
    def test_list_when_db_is_unavailable(self, _logger: Any) -> None:
        """When the database squawks, raises an UpstreamFailure."""
        with mock.patch.object(self.db, 'query', side_effect=raise_op_error):
            with self.assertRaises(UpstreamFailure):
                products.list_public(self.db)
            with self.assertRaises(UpstreamFailure):
                products.list_admin(self.db)


class TestCreate(ProductStoreTestCase):
    def test_create(self) -> None:
        """A new row is added with an id and timestamps."""
        created = products.create(self.db, ProductFields(
            name='Belt', status='active', images=['b'], price=3.5))
        self.assertGreater(created.id, 0)
        self.assertIsNotNone(created.created_at)
        self.assertIsNotNone(created.updated_at)
        row = self.db.get(DBProduct, created.id)
        self.assertEqual(row.name, 'Belt')
        self.assertEqual(row.price, 3.5)

    def test_create_stores_absent_fields_as_null(self) -> None:
        created = products.create(self.db, ProductFields())
        self.assertIsNone(created.name)
        self.assertIsNone(created.description)
        self.assertIsNone(created.images)

    def test_create_failure_rolls_back(self) -> None:
        """A refused write surfaces as UpstreamFailure."""
        with mock.patch.object(self.db, 'commit', side_effect=raise_op_error), \
                mock.patch.object(self.db, 'rollback') as mock_rollback:
            with self.assertRaises(UpstreamFailure):
                products.create(self.db, ProductFields(name='Nope'))
            mock_rollback.assert_called_once()


class TestUpdate(ProductStoreTestCase):
    def test_update_merges(self) -> None:
        """Only the given fields change, and updated_at moves forward."""
        row = self.db.query(DBProduct).filter_by(name='Hidden').one()
        before = row.updated_at
        updated = products.update(self.db, row.id,
                                  ProductFields(status='active'))
        self.assertEqual(updated.status, 'active')
        self.assertEqual(updated.name, 'Hidden')
        self.assertGreater(updated.updated_at, before)

    def test_update_can_null_a_field(self) -> None:
        row = self.db.query(DBProduct).filter_by(name='Hidden').one()
        updated = products.update(self.db, row.id,
                                  ProductFields(description=None))
        self.assertIsNone(updated.description)

    def test_update_unknown(self) -> None:
        """No upsert: an unknown id raises NotFound and adds nothing."""
        with self.assertRaises(NotFound):
            products.update(self.db, 555, ProductFields(name='Whoops'))
        self.assertEqual(self.db.query(DBProduct).count(), 3)

    def test_update_when_db_is_unavailable(self) -> None:
        with mock.patch.object(self.db, 'get', side_effect=raise_op_error):
            with self.assertRaises(UpstreamFailure):
                products.update(self.db, 1, ProductFields(name='Whoops'))


class TestDelete(ProductStoreTestCase):
    def test_delete(self) -> None:
        row_id = self.db.query(DBProduct).filter_by(name='Hidden').one().id
        products.delete(self.db, row_id)
        self.assertIsNone(self.db.get(DBProduct, row_id))
        self.assertEqual(self.db.query(DBProduct).count(), 2)

    def test_delete_unknown(self) -> None:
        """Deleting a nonexistent id is not a success."""
        with self.assertRaises(NotFound):
            products.delete(self.db, 555)
        self.assertEqual(self.db.query(DBProduct).count(), 3)
