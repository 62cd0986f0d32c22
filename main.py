from contextlib import asynccontextmanager
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import EmailStr
from pymongo.database import Database

from accounts import AccountStore
from cart import Cart
from catalog import Catalog
from config import CORS_ORIGINS, PORT, logger
from database import ensure_indexes, get_db
from errors import MarketplaceError
from orders import OrderLedger
from schemas import OrderRecord, Product, Role, WireModel
from security import AccessGuard, TokenCodec, build_codec


def _resolve(fastapi_app: FastAPI, dependency):
    return fastapi_app.dependency_overrides.get(dependency, dependency)()


@asynccontextmanager
async def lifespan(fastapi_app: FastAPI):
    # Refuse to start without a signing secret rather than failing every login.
    _resolve(fastapi_app, get_codec)
    ensure_indexes(_resolve(fastapi_app, get_db))
    yield


# App setup
app = FastAPI(title="Marketplace API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


# Dependencies
@lru_cache(maxsize=1)
def get_codec() -> TokenCodec:
    return build_codec()


def get_guard(codec: TokenCodec = Depends(get_codec)) -> AccessGuard:
    return AccessGuard(codec)


def get_accounts(db: Database = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_catalog(db: Database = Depends(get_db)) -> Catalog:
    return Catalog(db)


def get_cart(db: Database = Depends(get_db)) -> Cart:
    return Cart(db)


def get_ledger(db: Database = Depends(get_db)) -> OrderLedger:
    return OrderLedger(db)


# Request models
class SignupRequest(WireModel):
    name: str
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = None
    password: str
    role: Role


class LoginRequest(WireModel):
    email: EmailStr
    password: str


class LoginResponse(WireModel):
    message: str = "Login successful"
    token: str
    role: Role
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None


class TokenRequest(WireModel):
    # Missing tokens are rejected by the guard as invalid, not by validation.
    token: Optional[str] = None


class ProductIn(TokenRequest):
    name: str
    description: Optional[str] = ""
    price: float
    image: Optional[str] = ""


class ProductRef(TokenRequest):
    product_id: str


# Routes
@app.get("/")
def root():
    return {"message": "Marketplace API"}


@app.get("/health")
def health(db: Database = Depends(get_db)):
    try:
        db.command("ping")
        return {"backend": "ok", "database": "ok"}
    except Exception as e:
        logger.error("Database ping failed: %s", e)
        return {"backend": "ok", "database": f"error: {str(e)[:80]}"}


# Auth
@app.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, accounts: AccountStore = Depends(get_accounts)):
    accounts.signup(payload.name, payload.email, payload.phone, payload.address, payload.password, payload.role)
    return {"message": "Signup successful"}


@app.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, accounts: AccountStore = Depends(get_accounts), codec: TokenCodec = Depends(get_codec)):
    account = accounts.login(payload.email, payload.password)
    token = codec.issue(account["email"], account["role"])
    return LoginResponse(token=token, **account)


# Catalog
@app.post("/add-product", status_code=status.HTTP_201_CREATED)
def add_product(payload: ProductIn, guard: AccessGuard = Depends(get_guard), catalog: Catalog = Depends(get_catalog)):
    seller = guard.require_role(payload.token, Role.SELLER)
    product_id = catalog.add_product(seller.email, payload.name, payload.description, payload.price, payload.image)
    return {"message": "Product added successfully", "id": product_id}


@app.post("/my-products", response_model=List[Product])
def my_products(payload: TokenRequest, guard: AccessGuard = Depends(get_guard), catalog: Catalog = Depends(get_catalog)):
    seller = guard.require_role(payload.token, Role.SELLER)
    return catalog.list_for_seller(seller.email)


@app.get("/products", response_model=List[Product])
def list_products(catalog: Catalog = Depends(get_catalog)):
    return catalog.list_all()


@app.post("/delete-product")
def delete_product(payload: ProductRef, guard: AccessGuard = Depends(get_guard), catalog: Catalog = Depends(get_catalog)):
    seller = guard.require_role(payload.token, Role.SELLER)
    catalog.delete_product(seller.email, payload.product_id)
    return {"message": "Product deleted successfully"}


# Cart
@app.post("/add-to-cart")
def add_to_cart(payload: ProductRef, guard: AccessGuard = Depends(get_guard), cart: Cart = Depends(get_cart)):
    customer = guard.require_role(payload.token, Role.CUSTOMER)
    cart.add(customer.email, payload.product_id)
    return {"message": "Added to cart"}


@app.post("/cart", response_model=List[Product])
def view_cart(payload: TokenRequest, guard: AccessGuard = Depends(get_guard), cart: Cart = Depends(get_cart)):
    user = guard.authenticate(payload.token)
    return cart.view(user.email)


@app.post("/remove-from-cart")
def remove_from_cart(payload: ProductRef, guard: AccessGuard = Depends(get_guard), cart: Cart = Depends(get_cart)):
    user = guard.authenticate(payload.token)
    cart.remove(user.email, payload.product_id)
    return {"message": "Removed from cart"}


# Orders
@app.post("/buy-product")
def buy_product(payload: ProductRef, guard: AccessGuard = Depends(get_guard), ledger: OrderLedger = Depends(get_ledger)):
    user = guard.authenticate(payload.token)
    ledger.buy(user.email, payload.product_id)
    return {"message": "Purchase successful"}


@app.post("/my-purchases", response_model=List[OrderRecord])
def my_purchases(payload: TokenRequest, guard: AccessGuard = Depends(get_guard), ledger: OrderLedger = Depends(get_ledger)):
    user = guard.authenticate(payload.token)
    return ledger.purchases_of(user.email)


@app.post("/my-orders", response_model=List[OrderRecord])
def my_orders(payload: TokenRequest, guard: AccessGuard = Depends(get_guard), ledger: OrderLedger = Depends(get_ledger)):
    user = guard.authenticate(payload.token)
    return ledger.orders_for(user.email)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
