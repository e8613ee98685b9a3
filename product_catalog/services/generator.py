import logging
import random
import uuid
from datetime import timedelta
from typing import Dict, List, Optional, Set

from product_catalog.models.product import Product, utcnow
from product_catalog.schemas.product import ProductTemplate

# Configure logging
logger = logging.getLogger(__name__)

CATEGORIES = [
    "Electronics", "Clothing", "Home & Garden", "Books", "Sports & Outdoors",
    "Health & Beauty", "Toys & Games", "Automotive", "Food & Beverages",
    "Office Supplies", "Jewelry", "Pet Supplies", "Tools & Hardware",
]

BRANDS = [
    "TechCorp", "StyleMax", "HomeComfort", "ReadMore", "SportsPro",
    "BeautyPlus", "PlayTime", "AutoParts Inc", "FreshTaste",
    "OfficeSpace", "GlamRock", "PetLove", "BuildIt",
]

COLORS = [
    "Red", "Blue", "Green", "Black", "White", "Gray", "Yellow", "Pink",
    "Purple", "Orange", "Brown", "Navy", "Beige", "Silver", "Gold",
]

SIZES = ["XS", "S", "M", "L", "XL", "XXL", "One Size", "Small", "Medium", "Large"]

AVAILABILITY_STATUSES = ["Available", "Out of Stock", "Limited Stock", "Discontinued", "Pre-order"]

CATEGORY_PRODUCTS: Dict[str, List[str]] = {
    "Electronics": ["Smartphone", "Laptop", "Tablet", "Headphones", "Smart Watch", "Camera", "Speaker", "Keyboard", "Mouse", "Monitor"],
    "Clothing": ["T-Shirt", "Jeans", "Dress", "Jacket", "Sweater", "Shoes", "Hat", "Scarf", "Gloves", "Socks"],
    "Home & Garden": ["Sofa", "Table", "Chair", "Lamp", "Vase", "Plant Pot", "Curtains", "Rug", "Picture Frame", "Candle"],
    "Books": ["Novel", "Cookbook", "Biography", "Textbook", "Comic Book", "Poetry", "Self-Help", "History Book", "Science Fiction", "Mystery"],
    "Sports & Outdoors": ["Basketball", "Tennis Racket", "Running Shoes", "Yoga Mat", "Bicycle", "Camping Tent", "Backpack", "Water Bottle", "Fitness Tracker", "Dumbbells"],
    "Health & Beauty": ["Face Cream", "Shampoo", "Lipstick", "Perfume", "Vitamins", "Moisturizer", "Sunscreen", "Hair Dryer", "Makeup Brush", "Nail Polish"],
    "Toys & Games": ["Action Figure", "Board Game", "Puzzle", "Doll", "RC Car", "Building Blocks", "Card Game", "Video Game", "Stuffed Animal", "Art Supplies"],
    "Automotive": ["Car Battery", "Oil Filter", "Brake Pads", "Tire", "Car Cover", "Floor Mats", "Air Freshener", "GPS Navigation", "Phone Mount", "Jump Starter"],
    "Food & Beverages": ["Organic Coffee", "Green Tea", "Protein Bar", "Olive Oil", "Honey", "Pasta", "Rice", "Spices", "Chocolate", "Wine"],
    "Office Supplies": ["Pen", "Notebook", "Stapler", "Paper Clips", "Folder", "Printer Paper", "Desk Organizer", "Calculator", "Scissors", "Tape"],
    "Jewelry": ["Necklace", "Ring", "Bracelet", "Earrings", "Watch", "Brooch", "Cufflinks", "Pendant", "Chain", "Anklet"],
    "Pet Supplies": ["Dog Food", "Cat Toy", "Pet Bed", "Leash", "Collar", "Fish Tank", "Bird Cage", "Pet Carrier", "Grooming Brush", "Litter Box"],
    "Tools & Hardware": ["Hammer", "Screwdriver", "Drill", "Saw", "Wrench", "Pliers", "Level", "Measuring Tape", "Nails", "Screws"],
}

ADJECTIVES = ["Premium", "High-quality", "Durable", "Innovative", "Stylish", "Comfortable", "Reliable", "Advanced"]
FEATURES = ["easy to use", "long-lasting", "versatile", "ergonomic", "eco-friendly", "cutting-edge", "user-friendly", "efficient"]


class ProductGenerator:
    """
    Produces syntactically valid, SKU-unique sample products for demos and
    load testing. Products are returned unsaved; persisting them is up to
    the caller.
    """

    MIN_PRICE = 5.00
    MAX_PRICE = 1000.00
    MAX_STOCK = 1000
    RELEASE_WINDOW_DAYS = 365 * 3

    PRICE_JITTER = 0.2
    STOCK_JITTER = 50
    RELEASE_JITTER_DAYS = 30
    RATING_JITTER = 0.5

    MAX_SKU_ATTEMPTS = 1000

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize the generator.

        Args:
            rng: Random source; pass a seeded ``random.Random`` for reproducible output
        """
        self.rng = rng or random.Random()

    def generate(
        self,
        count: int,
        template: Optional[ProductTemplate] = None,
        reserved: Optional[Set[str]] = None,
    ) -> List[Product]:
        """
        Generate ``count`` products.

        Args:
            count: Number of products to produce (bounds are enforced by the caller)
            template: Optional seed values; present fields are reused with jitter
            reserved: SKUs that must not be produced, typically those already stored

        Returns:
            Exactly ``count`` Product instances with distinct SKUs
        """
        if count <= 0:
            return []

        products: List[Product] = []
        used_skus: Set[str] = set(reserved or ())
        now = utcnow()

        for i in range(count):
            variant = i + 1
            category = self._category(template)
            brand = self._brand(template)
            name = self._name(template, category, brand, variant)
            sku = self._unique_sku(template, category, brand, variant, used_skus)
            used_skus.add(sku)

            products.append(
                Product(
                    id=str(uuid.uuid4()),
                    name=name,
                    description=self._description(template, name, brand, variant),
                    category=category,
                    brand=brand,
                    price=self._price(template),
                    stock_quantity=self._stock(template),
                    sku=sku,
                    release_date=self._release_date(template),
                    availability_status=(
                        template.availability_status
                        if template is not None and template.availability_status
                        else self.rng.choice(AVAILABILITY_STATUSES)
                    ),
                    customer_rating=self._rating(template),
                    available_colors=(
                        template.available_colors
                        if template is not None and template.available_colors
                        else ", ".join(self._pick(COLORS, 1, 4))
                    ),
                    available_sizes=(
                        template.available_sizes
                        if template is not None and template.available_sizes
                        else ", ".join(self._pick(SIZES, 1, 3))
                    ),
                    created_at=now,
                    updated_at=now,
                )
            )

        logger.info(f"Generated {len(products)} sample products{' from template' if template else ''}")
        return products

    # --- Field generators -------------------------------------------------------

    def _category(self, template: Optional[ProductTemplate]) -> str:
        if template is not None and template.category:
            return template.category
        return self.rng.choice(CATEGORIES)

    def _brand(self, template: Optional[ProductTemplate]) -> str:
        if template is not None and template.brand:
            return template.brand
        return self.rng.choice(BRANDS)

    def _name(self, template, category: str, brand: str, variant: int) -> str:
        if template is not None and template.name:
            return f"{template.name} - Variant {variant}"
        nouns = CATEGORY_PRODUCTS.get(category, CATEGORY_PRODUCTS["Electronics"])
        return f"{brand} {self.rng.choice(nouns)}"

    def _unique_sku(self, template, category: str, brand: str, variant: int, used: Set[str]) -> str:
        if template is not None and template.sku:
            sku = f"{template.sku}-{variant:04d}"
            suffix = 1
            while sku in used:
                sku = f"{template.sku}-{variant:04d}-{suffix}"
                suffix += 1
            return sku

        prefix = f"{category[:3].upper()}-{brand[:3].upper()}"
        for _ in range(self.MAX_SKU_ATTEMPTS):
            sku = f"{prefix}-{self.rng.randint(10000, 99999)}"
            if sku not in used:
                return sku
        # Five digits ran out for this prefix; widen the random part
        while True:
            sku = f"{prefix}-{self.rng.randint(100000, 999999)}"
            if sku not in used:
                return sku

    def _description(self, template, name: str, brand: str, variant: int) -> str:
        if template is not None and template.description:
            return f"{template.description} (Generated variant {variant})"
        adjective = self.rng.choice(ADJECTIVES)
        feature = self.rng.choice(FEATURES)
        return (
            f"{adjective} {name} from {brand}. This product is {feature} and designed "
            "to meet your needs with exceptional quality and performance."
        )

    def _price(self, template) -> float:
        if template is not None and template.price is not None and template.price > 0:
            variation = self.rng.uniform(-self.PRICE_JITTER, self.PRICE_JITTER)
            return max(0.01, round(template.price * (1 + variation), 2))
        return round(self.rng.uniform(self.MIN_PRICE, self.MAX_PRICE), 2)

    def _stock(self, template) -> int:
        if template is not None and template.stock_quantity is not None:
            variation = self.rng.randint(-self.STOCK_JITTER, self.STOCK_JITTER)
            return max(0, template.stock_quantity + variation)
        return self.rng.randrange(0, self.MAX_STOCK)

    def _release_date(self, template):
        if template is not None and template.release_date is not None:
            days = self.rng.randint(-self.RELEASE_JITTER_DAYS, self.RELEASE_JITTER_DAYS)
            return template.release_date + timedelta(days=days)
        return utcnow().date() - timedelta(days=self.rng.randrange(0, self.RELEASE_WINDOW_DAYS))

    def _rating(self, template) -> float:
        if template is not None and template.customer_rating is not None:
            variation = self.rng.uniform(-self.RATING_JITTER, self.RATING_JITTER)
            return round(max(1.0, min(5.0, template.customer_rating + variation)), 2)
        return round(self.rng.uniform(1.0, 5.0), 2)

    def _pick(self, source: List[str], min_count: int, max_count: int) -> List[str]:
        count = self.rng.randint(min_count, min(max_count, len(source)))
        return self.rng.sample(source, count)
