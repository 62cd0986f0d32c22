from typing import List

from pymongo.database import Database

from catalog import Catalog
from database import CARTS, to_object_id
from errors import NotFoundInCart


class Cart:
    """
    Per-customer pending selections.

    Adding the same product twice stores two entries; each remove call takes
    out one of them. Viewing the cart joins entries against the catalog, so
    entries whose product was deleted are left out and repeated entries show
    the product once.
    """

    def __init__(self, db: Database):
        self.entries = db[CARTS]
        self.catalog = Catalog(db)

    def add(self, customer_email: str, product_id: str) -> None:
        self.entries.insert_one({"customerEmail": customer_email, "productId": to_object_id(product_id)})

    def view(self, customer_email: str) -> List[dict]:
        product_ids = [e["productId"] for e in self.entries.find({"customerEmail": customer_email})]
        if not product_ids:
            return []
        return self.catalog.find_many(product_ids)

    def remove(self, customer_email: str, product_id: str) -> None:
        res = self.entries.delete_one({"customerEmail": customer_email, "productId": to_object_id(product_id)})
        if res.deleted_count != 1:
            raise NotFoundInCart()
