from .catalog import Brand, Product, ProductVariant
from .orders import Order, OrderItem
from .content import HeroBanner, BrandHeroBanner
from .reporting import SalesData

__all__ = [
    'Brand', 'Product', 'ProductVariant',
    'Order', 'OrderItem',
    'HeroBanner', 'BrandHeroBanner',
    'SalesData',
]
