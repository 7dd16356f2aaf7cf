"""Sale management — apply and remove percentage discounts, singly or in bulk."""

import json

from protean import handle
from protean.fields import Float, Identifier, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import InvalidRequest
from storefront.product.management import load_product
from storefront.product.product import Product


@storefront.command(part_of="Product")
class ApplySale:
    product_id: Identifier(required=True)
    sale_percentage: Float(required=True)


@storefront.command(part_of="Product")
class RemoveSale:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class ApplyBulkSale:
    product_ids: Text(required=True)  # JSON array of product ids
    sale_percentage: Float(required=True)


@storefront.command_handler(part_of=Product)
class ManageSalesHandler:
    @handle(ApplySale)
    def apply_sale(self, command):
        product = load_product(command.product_id)
        product.apply_sale(command.sale_percentage)
        current_domain.repository_for(Product).add(product)
        logger.info(
            "sale_applied",
            product_id=str(product.id),
            sale_percentage=command.sale_percentage,
            sale_price=product.sale_price,
        )

    @handle(RemoveSale)
    def remove_sale(self, command):
        product = load_product(command.product_id)
        product.remove_sale()
        current_domain.repository_for(Product).add(product)

    @handle(ApplyBulkSale)
    def apply_bulk_sale(self, command):
        product_ids = json.loads(command.product_ids) if isinstance(command.product_ids, str) else command.product_ids
        if not product_ids or not isinstance(product_ids, list):
            raise InvalidRequest("Product IDs are required")
        if not 0 <= command.sale_percentage <= 100:
            raise InvalidRequest("Sale percentage must be between 0 and 100")

        repo = current_domain.repository_for(Product)
        updated = []
        for product_id in product_ids:
            product = repo.find_by_id(product_id)
            if product is None:
                continue
            product.apply_sale(command.sale_percentage)
            repo.add(product)
            updated.append(str(product.id))

        logger.info("bulk_sale_applied", sale_percentage=command.sale_percentage, product_count=len(updated))
        return updated
