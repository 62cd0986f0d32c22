import pytest
from bson import ObjectId

from accounts import AccountStore
from cart import Cart
from catalog import Catalog
from errors import (
    AccountNotFound,
    DuplicateAccount,
    InvalidCredential,
    InvalidIdentifier,
    NotFoundInCart,
    NotFoundOrNotOwned,
    ProductNotFound,
)
from orders import OrderLedger
from schemas import Role


# ---------- Accounts ----------

def test_signup_and_login(db):
    accounts = AccountStore(db)
    accounts.signup("Sam", "s@x.com", "555", "1 Main St", "pw", Role.SELLER)

    stored = db["accounts"].find_one({"email": "s@x.com"})
    assert stored["password"] != "pw"
    assert stored["role"] == "seller"

    account = accounts.login("s@x.com", "pw")
    assert account == {"name": "Sam", "email": "s@x.com", "phone": "555", "address": "1 Main St", "role": "seller"}


def test_signup_duplicate_email(db):
    accounts = AccountStore(db)
    accounts.signup("Sam", "s@x.com", "", "", "pw", Role.SELLER)
    with pytest.raises(DuplicateAccount):
        accounts.signup("Other", "s@x.com", "", "", "pw2", Role.CUSTOMER)
    assert db["accounts"].count_documents({"email": "s@x.com"}) == 1


def test_login_failures(db):
    accounts = AccountStore(db)
    accounts.signup("Cat", "c@x.com", "", "", "pw", Role.CUSTOMER)
    with pytest.raises(AccountNotFound):
        accounts.login("nobody@x.com", "pw")
    with pytest.raises(InvalidCredential):
        accounts.login("c@x.com", "nope")


# ---------- Catalog ----------

def test_catalog_ownership(db):
    catalog = Catalog(db)
    mine = catalog.add_product("s@x.com", "Widget", "", 10, "")
    catalog.add_product("s2@x.com", "Gadget", "", 5, "")

    assert [p["name"] for p in catalog.list_for_seller("s@x.com")] == ["Widget"]
    assert sorted(p["name"] for p in catalog.list_all()) == ["Gadget", "Widget"]

    with pytest.raises(NotFoundOrNotOwned):
        catalog.delete_product("s2@x.com", mine)
    catalog.delete_product("s@x.com", mine)
    with pytest.raises(NotFoundOrNotOwned):
        catalog.delete_product("s@x.com", mine)
    with pytest.raises(ProductNotFound):
        catalog.get_product(mine)


def test_catalog_accepts_unvalidated_fields(db):
    catalog = Catalog(db)
    product_id = catalog.add_product("s@x.com", "", None, -3, None)
    product = catalog.get_product(product_id)
    assert product["name"] == ""
    assert product["price"] == -3


def test_malformed_product_id(db):
    with pytest.raises(InvalidIdentifier):
        Catalog(db).get_product("not-an-id")


# ---------- Cart ----------

def test_cart_keeps_duplicates_and_removes_one_at_a_time(db):
    product_id = Catalog(db).add_product("s@x.com", "Widget", "", 10, "")
    cart = Cart(db)
    cart.add("c@x.com", product_id)
    cart.add("c@x.com", product_id)

    assert db["carts"].count_documents({"customerEmail": "c@x.com"}) == 2
    assert [p["name"] for p in cart.view("c@x.com")] == ["Widget"]

    cart.remove("c@x.com", product_id)
    cart.remove("c@x.com", product_id)
    with pytest.raises(NotFoundInCart):
        cart.remove("c@x.com", product_id)
    assert cart.view("c@x.com") == []


def test_cart_omits_deleted_products(db):
    catalog = Catalog(db)
    kept = catalog.add_product("s@x.com", "Widget", "", 10, "")
    gone = catalog.add_product("s@x.com", "Gadget", "", 5, "")
    cart = Cart(db)
    cart.add("c@x.com", kept)
    cart.add("c@x.com", gone)
    cart.add("c@x.com", str(ObjectId()))
    catalog.delete_product("s@x.com", gone)

    assert [p["id"] for p in cart.view("c@x.com")] == [kept]


def test_cart_is_per_customer(db):
    product_id = Catalog(db).add_product("s@x.com", "Widget", "", 10, "")
    cart = Cart(db)
    cart.add("c@x.com", product_id)
    assert cart.view("d@x.com") == []
    with pytest.raises(NotFoundInCart):
        cart.remove("d@x.com", product_id)


# ---------- Orders ----------

def test_buy_snapshots_product(db):
    catalog = Catalog(db)
    product_id = catalog.add_product("s@x.com", "Widget", "Blue", 10, "w.png")
    ledger = OrderLedger(db)
    ledger.buy("c@x.com", product_id)
    catalog.delete_product("s@x.com", product_id)

    [order] = ledger.purchases_of("c@x.com")
    assert order["product_id"] == product_id
    assert order["product_name"] == "Widget"
    assert order["product_price"] == 10
    assert order["product_image"] == "w.png"
    assert order["product_description"] == "Blue"
    assert order["seller_email"] == "s@x.com"
    assert order["purchased_at"] is not None
    assert ledger.orders_for("s@x.com") == [order]


def test_buy_leaves_cart_untouched_and_allows_repeats(db):
    product_id = Catalog(db).add_product("s@x.com", "Widget", "", 10, "")
    Cart(db).add("c@x.com", product_id)
    ledger = OrderLedger(db)
    ledger.buy("c@x.com", product_id)
    ledger.buy("c@x.com", product_id)

    assert len(ledger.purchases_of("c@x.com")) == 2
    assert len(Cart(db).view("c@x.com")) == 1


def test_buy_missing_product(db):
    with pytest.raises(ProductNotFound):
        OrderLedger(db).buy("c@x.com", str(ObjectId()))
    assert OrderLedger(db).purchases_of("c@x.com") == []
