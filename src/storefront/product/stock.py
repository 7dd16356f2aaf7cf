"""Stock management — administrator corrections to units in stock."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.product.management import load_product
from storefront.product.product import Product


@storefront.command(part_of="Product")
class AdjustStock:
    """Add (positive delta) or remove (negative delta) units."""

    product_id: Identifier(required=True)
    delta: Integer(required=True)


@storefront.command(part_of="Product")
class SetStock:
    """Overwrite the stock level after a physical count."""

    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Product)
class ManageStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        product = load_product(command.product_id)
        product.adjust_stock(command.delta)
        current_domain.repository_for(Product).add(product)
        logger.info("stock_adjusted", product_id=str(product.id), delta=command.delta, stock=product.stock)
        return product.stock

    @handle(SetStock)
    def set_stock(self, command):
        product = load_product(command.product_id)
        product.set_stock(command.quantity)
        current_domain.repository_for(Product).add(product)
        logger.info("stock_adjusted", product_id=str(product.id), stock=product.stock)
        return product.stock
