from product_catalog.database.session import Base

# Importing the models registers their tables on Base.metadata,
# which init_db relies on before calling create_all
from product_catalog.models.product import Product  # noqa: F401
