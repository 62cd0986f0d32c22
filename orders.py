from datetime import datetime, timezone
from typing import List

from pymongo.database import Database

from catalog import Catalog
from config import logger
from database import ORDERS


def serialize_order(doc) -> dict:
    return {
        "id": str(doc["_id"]),
        "product_id": doc.get("productId"),
        "product_name": doc.get("productName"),
        "product_price": doc.get("productPrice"),
        "product_image": doc.get("productImage") or "",
        "product_description": doc.get("productDescription") or "",
        "seller_email": doc.get("sellerEmail"),
        "customer_email": doc.get("customerEmail"),
        "purchased_at": doc.get("purchasedAt"),
    }


class OrderLedger:
    """Append-only purchase records holding a copy of the product as bought."""

    def __init__(self, db: Database):
        self.orders = db[ORDERS]
        self.catalog = Catalog(db)

    def buy(self, customer_email: str, product_id: str) -> str:
        # Cart entries are left alone and there is no stock to decrement.
        product = self.catalog.get_product(product_id)
        res = self.orders.insert_one({
            "productId": product["id"],
            "productName": product["name"],
            "productPrice": product["price"],
            "productImage": product["image"],
            "productDescription": product["description"],
            "sellerEmail": product["seller_email"],
            "customerEmail": customer_email,
            "purchasedAt": datetime.now(timezone.utc),
        })
        logger.info("%s bought product %s from %s", customer_email, product["id"], product["seller_email"])
        return str(res.inserted_id)

    def purchases_of(self, customer_email: str) -> List[dict]:
        return [serialize_order(o) for o in self.orders.find({"customerEmail": customer_email})]

    def orders_for(self, seller_email: str) -> List[dict]:
        return [serialize_order(o) for o in self.orders.find({"sellerEmail": seller_email})]
