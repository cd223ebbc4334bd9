"""Cart aggregate: one live cart per user, priced from the catalogue.

Line prices are never trusted from storage. Every mutation re-prices the
remaining lines from the Catalog Store before it is written, and every read
re-prices them again (see ``commerce.ordering.cart.view``).

Each user has exactly one cart record, whose identity is derived from the
user id. Two writers that both find no cart therefore create the same
aggregate, and the second write is rejected as stale. Clearing empties the
cart and flags it deleted; the next add reopens the same record.
"""

from datetime import UTC, datetime
from uuid import NAMESPACE_URL, uuid5

from protean import atomic_change, invariant
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String

from commerce.domain import commerce
from commerce.exceptions import InsufficientStockError
from commerce.ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated


def line_amount(price, quantity):
    return round(price * quantity, 2)


def cart_id_for(user_id):
    return str(uuid5(NAMESPACE_URL, f"commerce:cart:{user_id}"))


def ensure_positive_quantity(quantity):
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValidationError({"quantity": ["Quantity must be a positive integer"]})


@commerce.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    total_price = Float(required=True, min_value=0.0)

    def reprice(self, price, name=None):
        self.price = price
        self.total_price = line_amount(price, self.quantity)
        if name is not None:
            self.name = name


@commerce.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    total_amount = Float(default=0.0, min_value=0.0)
    is_deleted = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(item.product_id) for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    @invariant.post
    def totals_must_match_lines(self):
        for item in self.items:
            if abs(item.total_price - line_amount(item.price, item.quantity)) > 0.005:
                raise ValidationError({"items": [f"Line total for product {item.product_id} is inconsistent"]})
        if abs((self.total_amount or 0.0) - round(sum(i.total_price for i in self.items), 2)) > 0.005:
            raise ValidationError({"total_amount": ["Cart total does not match its lines"]})

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(id=cart_id_for(user_id), user_id=user_id, total_amount=0.0, created_at=now, updated_at=now)

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def require_line(self, product_id):
        item = self.line_for(product_id)
        if item is None:
            raise ObjectNotFoundError({"product": [f"Product {product_id} is not in the cart"]})
        return item

    def _recalculate_total(self):
        self.total_amount = round(sum(item.total_price for item in self.items), 2)

    def reprice(self, snapshots):
        """Refresh every line whose product the catalogue still knows.

        ``snapshots`` maps product id to ``ProductSnapshot``. Lines for products
        that have disappeared keep their last known price.
        """
        with atomic_change(self):
            self._reprice_lines(snapshots)

    def _reprice_lines(self, snapshots):
        for item in self.items:
            snapshot = snapshots.get(str(item.product_id))
            if snapshot is not None:
                item.reprice(snapshot.price, snapshot.name)
        self._recalculate_total()

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add_item(self, product, quantity, snapshots=None):
        """Add ``quantity`` of ``product`` (a ``ProductSnapshot``), merging into an existing line."""
        ensure_positive_quantity(quantity)
        if not product.is_available:
            raise ObjectNotFoundError({"product": [f"Product {product.product_id} not found"]})

        existing = self.line_for(product.product_id)
        line_quantity = quantity + (existing.quantity if existing else 0)
        if line_quantity > product.stock:
            raise InsufficientStockError(
                {"stock": [f"Insufficient stock for product {product.name}: available {product.stock}"]}
            )

        with atomic_change(self):
            if existing:
                existing.quantity = line_quantity
                existing.reprice(product.price, product.name)
            else:
                self.add_items(
                    CartItem(
                        product_id=product.product_id,
                        name=product.name,
                        price=product.price,
                        quantity=quantity,
                        total_price=line_amount(product.price, quantity),
                    )
                )
            self._reprice_lines({**(snapshots or {}), product.product_id: product})
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                user_id=str(self.user_id),
                product_id=product.product_id,
                quantity=quantity,
                line_quantity=line_quantity,
                unit_price=product.price,
            )
        )

    def update_quantity(self, product, quantity, snapshots=None):
        ensure_positive_quantity(quantity)
        item = self.require_line(product.product_id)
        if not product.is_available:
            raise ObjectNotFoundError({"product": [f"Product {product.product_id} not found"]})
        if quantity > product.stock:
            raise InsufficientStockError(
                {"stock": [f"Insufficient stock for product {product.name}: available {product.stock}"]}
            )

        previous_quantity = item.quantity
        with atomic_change(self):
            item.quantity = quantity
            item.reprice(product.price, product.name)
            self._reprice_lines({**(snapshots or {}), product.product_id: product})
            self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=product.product_id,
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, snapshots=None):
        item = self.require_line(product_id)

        with atomic_change(self):
            self.remove_items(item)
            self._reprice_lines(snapshots or {})
            self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def reopen(self):
        """Bring a cleared cart back into use for the next add."""
        if self.is_deleted:
            self.is_deleted = False
            self.updated_at = datetime.now(UTC)

    def clear(self):
        """Empty the cart and retire it."""
        with atomic_change(self):
            for item in list(self.items):
                self.remove_items(item)
            self.total_amount = 0.0
            self.is_deleted = True
            self.updated_at = datetime.now(UTC)

        self.raise_(CartCleared(cart_id=str(self.id), user_id=str(self.user_id)))


@commerce.repository(part_of=Cart)
class CartRepository:
    def cart_for(self, user_id) -> Cart | None:
        """The user's cart record, live or cleared, or None if they never had one."""
        try:
            return self.get(cart_id_for(user_id))
        except ObjectNotFoundError:
            return None

    def live_cart_for(self, user_id) -> Cart | None:
        """The user's current cart, or None if they have none."""
        cart = self.cart_for(user_id)
        if cart is None or cart.is_deleted:
            return None
        return cart

    def claim(self, cart: Cart) -> None:
        """Reject the first write of ``cart`` if another writer has already stored it."""
        if self._dao.query.filter(id=cart.id).all().items:
            raise ExpectedVersionError(f"Cart {cart.id} was created by a concurrent write")
