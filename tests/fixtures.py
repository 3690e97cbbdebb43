"""Database fixtures for geneql tests (shared)."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Order, OrderItem, Product, ProductGroup


async def create_sample_data(session: AsyncSession):
    """Create and commit a small catalog with three orders."""
    furniture = ProductGroup(name='Furniture')
    lighting = ProductGroup(name='Lighting')
    session.add_all([furniture, lighting])
    await session.flush()

    products = [
        Product(name='Chair', color='Gray', price=49.5, group_id=furniture.id),
        Product(name='Table', color='Oak', price=199.0, group_id=furniture.id),
        Product(name='Lamp', color='White', price=25.0, group_id=lighting.id),
        Product(name='Shelf', color=None, price=80.0, group_id=furniture.id),
    ]
    session.add_all(products)
    await session.flush()
    chair, table, lamp, shelf = products

    orders = [
        Order(status='paid', reference='A-1'),
        Order(status='pending', reference='A-2'),
        Order(status='paid', reference=None),
    ]
    session.add_all(orders)
    await session.flush()
    first, second, third = orders

    items = [
        OrderItem(order_id=first.id, product_id=chair.id, quantity=4),
        OrderItem(order_id=first.id, product_id=table.id, quantity=1),
        OrderItem(order_id=first.id, product_id=lamp.id, quantity=2),
        OrderItem(order_id=second.id, product_id=shelf.id, quantity=1),
        OrderItem(order_id=third.id, product_id=lamp.id, quantity=3),
    ]
    session.add_all(items)
    await session.commit()
    return {
        'groups': [furniture, lighting],
        'products': products,
        'orders': orders,
        'items': items,
    }


@pytest.fixture(scope="function")
async def populated_db(db_session: AsyncSession):
    return await create_sample_data(db_session)
