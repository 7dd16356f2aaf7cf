"""Product catalogue management — create, update and delete commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.errors import NotFound
from storefront.product.product import Product


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=255)
    description: Text(required=True)
    price: Float(required=True, min_value=0.0)
    category: String(required=True, max_length=100)
    image_url: String(max_length=500)
    stock: Integer(default=0, min_value=0)
    is_available: Boolean(default=True)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    price: Float(min_value=0.0)
    category: String(max_length=100)
    image_url: String(max_length=500)
    stock: Integer(min_value=0)
    is_available: Boolean()


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id) -> Product:
    """Fetch a product or fail with NotFound."""
    product = current_domain.repository_for(Product).find_by_id(product_id)
    if product is None:
        raise NotFound("Product not found")
    return product


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            image_url=command.image_url,
            stock=command.stock,
            is_available=command.is_available,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_created", product_id=str(product.id), name=product.name, stock=product.stock)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category=command.category,
            image_url=command.image_url,
            stock=command.stock,
            is_available=command.is_available,
        )
        current_domain.repository_for(Product).add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("product_deleted", product_id=str(product.id))
