from typing import List, Optional

from pymongo.database import Database

from config import logger
from database import PRODUCTS, to_object_id
from errors import NotFoundOrNotOwned, ProductNotFound


def serialize_product(doc) -> dict:
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "description": doc.get("description") or "",
        "price": doc.get("price"),
        "image": doc.get("image") or "",
        "seller_email": doc.get("sellerEmail"),
    }


class Catalog:
    """Seller-owned products, readable by everyone."""

    def __init__(self, db: Database):
        self.products = db[PRODUCTS]

    def add_product(self, seller_email: str, name: str, description: Optional[str], price: float, image: Optional[str]) -> str:
        res = self.products.insert_one({
            "name": name,
            "description": description,
            "price": price,
            "image": image,
            "sellerEmail": seller_email,
        })
        logger.info("Seller %s added product %s", seller_email, res.inserted_id)
        return str(res.inserted_id)

    def list_for_seller(self, seller_email: str) -> List[dict]:
        return [serialize_product(p) for p in self.products.find({"sellerEmail": seller_email})]

    def list_all(self) -> List[dict]:
        return [serialize_product(p) for p in self.products.find({})]

    def get_product(self, product_id: str) -> dict:
        doc = self.products.find_one({"_id": to_object_id(product_id)})
        if not doc:
            raise ProductNotFound()
        return serialize_product(doc)

    def find_many(self, object_ids) -> List[dict]:
        return [serialize_product(p) for p in self.products.find({"_id": {"$in": list(object_ids)}})]

    def delete_product(self, seller_email: str, product_id: str) -> None:
        # Missing and foreign products are reported the same way.
        res = self.products.delete_one({"_id": to_object_id(product_id), "sellerEmail": seller_email})
        if res.deleted_count != 1:
            raise NotFoundOrNotOwned()
        logger.info("Seller %s deleted product %s", seller_email, product_id)
