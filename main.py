import json
import logging
import os
import shutil
import time
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from pymongo.errors import PyMongoError

import database
from database import create_document, get_documents, replace_collection, serialize_doc
from schemas import Order as OrderSchema, Product as ProductSchema, SeedPayload

logger = logging.getLogger(__name__)

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
os.makedirs(UPLOAD_DIR, exist_ok=True)

# App init
app = FastAPI(title="F1 Marketplace API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


# Utils
def _now_ms() -> str:
    return str(int(time.time() * 1000))


def _error_message(e: Exception) -> str:
    if isinstance(e, ValidationError):
        return "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
    return str(e)


def store_upload(image: UploadFile) -> str:
    """Write an uploaded file into UPLOAD_DIR and return the stored filename."""
    filename = f"{_now_ms()}-{os.path.basename(image.filename or 'upload')}"
    with open(os.path.join(UPLOAD_DIR, filename), "wb") as out:
        shutil.copyfileobj(image.file, out)
    return filename


# Routes
@app.get("/")
def root():
    return {"message": "F1 Marketplace API running"}


@app.get("/test")
def test_database():
    response = {"backend": "✅ Running", "database_name": None, "collections": []}
    try:
        response["database_name"] = database.db.name
        response["collections"] = database.db.list_collection_names()[:10]
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        response["database"] = f"❌ Error: {str(e)[:50]}"
    return response


# Products
@app.get("/api/products")
def list_products():
    try:
        products = get_documents("product")
    except PyMongoError as e:
        logger.exception("Listing products failed")
        raise HTTPException(status_code=500, detail=str(e))
    return [serialize_doc(p) for p in products]


@app.post("/api/products", status_code=201)
def create_product(request: Request, productData: str = Form(...), image: Optional[UploadFile] = File(None)):
    try:
        data = json.loads(productData)
        if not isinstance(data, dict):
            raise ValueError("productData must be a JSON object")
        product = ProductSchema(**data)
    except (ValueError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=_error_message(e))

    image_path = ""
    if image is not None and image.filename:
        filename = store_upload(image)
        # Built from the incoming request so links survive a different hostname or proxy
        image_path = f"{str(request.base_url).rstrip('/')}/uploads/{filename}"
    elif product.images:
        image_path = product.images[0]

    product.id = product.id or _now_ms()
    product.images = [image_path] if image_path else []

    try:
        doc = create_document("product", product)
    except PyMongoError as e:
        logger.exception("Creating product %s failed", product.id)
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Created product %s", product.id)
    return serialize_doc(doc)


@app.delete("/api/products/{product_id}")
def delete_product(product_id: str):
    # Match on the external "id" field, not Mongo's _id
    try:
        result = database.db["product"].delete_one({"id": product_id})
    except PyMongoError as e:
        logger.exception("Deleting product %s failed", product_id)
        raise HTTPException(status_code=500, detail=str(e))
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Product not found")
    logger.info("Deleted product %s", product_id)
    return {"message": "Product deleted successfully"}


# Seed
@app.post("/api/seed")
async def seed_database(request: Request):
    try:
        payload = await request.json()
        if isinstance(payload, list):
            seed = SeedPayload(products=payload)
        elif isinstance(payload, dict):
            seed = SeedPayload(**payload)
        else:
            raise ValueError("Seed body must be an array of products or an object with products")
        count = replace_collection("product", seed.products)
        message = f"Database seeded with {count} products"
        if seed.orders is not None:
            order_count = replace_collection("order", seed.orders)
            message += f" and {order_count} orders"
    except (ValueError, PyMongoError) as e:
        logger.exception("Seeding failed")
        raise HTTPException(status_code=500, detail=_error_message(e))
    logger.info(message)
    return {"message": message + "!"}


# Orders
@app.post("/api/orders", status_code=201)
def create_order(payload: Dict[str, Any] = Body(...), idempotency_key: Optional[str] = Header(None)):
    if idempotency_key:
        try:
            previous = database.db["order"].find_one({"idempotencyKey": idempotency_key})
        except PyMongoError as e:
            logger.exception("Idempotency lookup failed")
            raise HTTPException(status_code=400, detail=str(e))
        if previous is not None:
            logger.info("Replaying order %s for key %s", previous.get("orderNumber"), idempotency_key)
            return JSONResponse(status_code=200, content=serialize_doc(previous))

    try:
        order = OrderSchema(**payload)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=_error_message(e))
    if idempotency_key:
        order.idempotencyKey = idempotency_key

    try:
        doc = create_document("order", order)
    except PyMongoError as e:
        logger.exception("Saving order %s failed", order.orderNumber)
        raise HTTPException(status_code=400, detail=str(e))
    logger.info("Created order %s (total %s)", order.orderNumber, order.totalAmount)
    return serialize_doc(doc)


@app.get("/api/orders")
def list_orders():
    try:
        orders = get_documents("order", sort=[("orderDate", -1)])
    except PyMongoError as e:
        logger.exception("Listing orders failed")
        raise HTTPException(status_code=500, detail=str(e))
    return [serialize_doc(o) for o in orders]


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
