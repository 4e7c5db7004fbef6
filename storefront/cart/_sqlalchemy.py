"""
SQLAlchemy cart repository.

Usage:
    engine = create_async_engine("postgresql+asyncpg://...")
    await create_schema(engine)
    repo = SQLAlchemyCartRepository(async_sessionmaker(engine, expire_on_commit=False))
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from storefront._types import CustomerId, ItemId, SkuId
from storefront.errors import NotFoundError, StorefrontError, TransportError, ValidationError
from storefront.cart._types import CartLine


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════

class CartBase(DeclarativeBase):
    pass


class CartLineRow(CartBase):
    """One (customer, SKU) line."""

    __tablename__ = "cart_lines"
    __table_args__ = (UniqueConstraint("customer", "sku_id", name="uq_cart_customer_sku"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer: Mapped[str] = mapped_column(String(64), index=True)
    item_id: Mapped[str] = mapped_column(String(64))
    sku_id: Mapped[str] = mapped_column(String(64))
    quantity: Mapped[int] = mapped_column(Integer)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    def to_line(self) -> CartLine:
        return CartLine(
            line_id=str(self.id),
            customer=self.customer,
            item_id=self.item_id,
            sku_id=self.sku_id,
            quantity=self.quantity,
        )


async def create_schema(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(CartBase.metadata.create_all)


# ═══════════════════════════════════════════════════════════════════════════════
# Repository
# ═══════════════════════════════════════════════════════════════════════════════

def _storage_error(action: str, exc: SQLAlchemyError) -> TransportError:
    return TransportError(f"Failed to {action}: {exc}")


class SQLAlchemyCartRepository:
    """CartRepository backed by the cart_lines table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def _find(self, session: AsyncSession, customer: CustomerId, sku_id: SkuId) -> CartLineRow | None:
        return await session.scalar(
            select(CartLineRow).where(
                CartLineRow.customer == customer,
                CartLineRow.sku_id == sku_id,
            )
        )

    async def lines(self, customer: CustomerId) -> Result[tuple[CartLine, ...], StorefrontError]:
        try:
            async with self._session_factory() as session:
                rows = await session.scalars(
                    select(CartLineRow)
                    .where(CartLineRow.customer == customer)
                    .order_by(CartLineRow.id)
                )
                return Ok(tuple(row.to_line() for row in rows))
        except SQLAlchemyError as e:
            return Error(_storage_error("load cart", e))

    async def add(
        self,
        customer: CustomerId,
        item_id: ItemId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        if quantity < 1:
            return Error(ValidationError("quantity must be at least 1"))
        try:
            async with self._session_factory() as session, session.begin():
                row = await self._find(session, customer, sku_id)
                if row is None:
                    row = CartLineRow(customer=customer, item_id=item_id, sku_id=sku_id, quantity=quantity)
                    session.add(row)
                else:
                    row.quantity += quantity
                await session.flush()
                return Ok(row.to_line())
        except SQLAlchemyError as e:
            return Error(_storage_error("add to cart", e))

    async def set_quantity(
        self,
        customer: CustomerId,
        sku_id: SkuId,
        quantity: int,
    ) -> Result[CartLine, StorefrontError]:
        if quantity < 1:
            return Error(ValidationError("quantity must be at least 1"))
        try:
            async with self._session_factory() as session, session.begin():
                row = await self._find(session, customer, sku_id)
                if row is None:
                    return Error(NotFoundError("cart line", sku_id))
                row.quantity = quantity
                await session.flush()
                return Ok(row.to_line())
        except SQLAlchemyError as e:
            return Error(_storage_error("update cart", e))

    async def remove(self, customer: CustomerId, sku_id: SkuId) -> Result[CartLine, StorefrontError]:
        try:
            async with self._session_factory() as session, session.begin():
                row = await self._find(session, customer, sku_id)
                if row is None:
                    return Error(NotFoundError("cart line", sku_id))
                line = row.to_line()
                await session.delete(row)
                return Ok(line)
        except SQLAlchemyError as e:
            return Error(_storage_error("remove from cart", e))


__all__ = ("CartBase", "CartLineRow", "create_schema", "SQLAlchemyCartRepository")
