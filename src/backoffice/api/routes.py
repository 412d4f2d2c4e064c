"""FastAPI endpoints for customers, products, orders and the event queue."""

import base64
import binascii

from fastapi import APIRouter, Query, Response
from protean.exceptions import ValidationError

from backoffice.api.schemas import (
    ContractFileResponse,
    CreateProductRequest,
    CustomerRequest,
    CustomerResponse,
    EventsResponse,
    LineItemResponse,
    OrderResponse,
    OrderStatusRequest,
    PlaceOrderRequest,
    ProductResponse,
    StatusResponse,
    UpdateCustomerRequest,
    UpdateProductRequest,
    UploadContractRequest,
    UploadedContractResponse,
)
from backoffice.contracts.files import delete_contract, download_contract, list_contracts, upload_contract
from backoffice.customer.customer import Customer
from backoffice.customer.management import delete_customer, list_customers, load_customer, update_customer
from backoffice.customer.registration import register_customer
from backoffice.customer.repository import CustomerRepository
from backoffice.events import get_publisher
from backoffice.order.management import delete_order, list_orders, load_order, update_order_status
from backoffice.order.order import Order
from backoffice.order.placement import place_order
from backoffice.order.repository import OrderRepository
from backoffice.product.creation import create_product
from backoffice.product.management import delete_product, list_products, load_product, update_product
from backoffice.product.product import Product
from backoffice.product.repository import ProductRepository

customer_router = APIRouter(prefix="/customers", tags=["customers"])
product_router = APIRouter(prefix="/products", tags=["products"])
order_router = APIRouter(prefix="/orders", tags=["orders"])
contract_router = APIRouter(prefix="/contracts", tags=["contracts"])
event_router = APIRouter(prefix="/events", tags=["events"])


def _customer_response(customer: Customer) -> CustomerResponse:
    return CustomerResponse(
        partition_id=customer.partition_id,
        unique_id=customer.unique_id,
        etag=customer.etag,
        last_modified=customer.last_modified,
        first_name=customer.first_name,
        last_name=customer.last_name,
        email=customer.email,
        phone=customer.phone,
        city=customer.city,
    )


def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        partition_id=product.partition_id,
        unique_id=product.unique_id,
        etag=product.etag,
        last_modified=product.last_modified,
        category=product.category,
        name=product.name,
        description=product.description,
        price=product.price,
        stock_quantity=product.stock_quantity,
        image_url=product.image_url,
        has_image=product.has_image,
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        partition_id=order.partition_id,
        unique_id=order.unique_id,
        etag=order.etag,
        last_modified=order.last_modified,
        customer_id=order.customer_id,
        items=[LineItemResponse(**line.to_dict()) for line in order.lines],
        total=order.total,
        status=order.status,
    )


def _decode_base64(encoded: str | None, field: str = "image_base64") -> bytes | None:
    if not encoded:
        return None
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError({field: ["Content must be base64 encoded"]}) from None


# --- Customer endpoints ---


@customer_router.get("", response_model=list[CustomerResponse])
async def get_customers(city: str | None = None) -> list[CustomerResponse]:
    return [_customer_response(c) for c in await list_customers(city=city)]


@customer_router.post("", status_code=201, response_model=CustomerResponse)
async def post_customer(body: CustomerRequest) -> CustomerResponse:
    customer = await register_customer(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        city=body.city,
        phone=body.phone,
    )
    return _customer_response(customer)


@customer_router.get("/{partition_id}/{unique_id}", response_model=CustomerResponse)
async def get_customer(partition_id: str, unique_id: str) -> CustomerResponse:
    return _customer_response(await load_customer(CustomerRepository(), partition_id, unique_id))


@customer_router.put("/{partition_id}/{unique_id}", response_model=CustomerResponse)
async def put_customer(partition_id: str, unique_id: str, body: UpdateCustomerRequest) -> CustomerResponse:
    customer = await update_customer(
        partition_id,
        unique_id,
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        city=body.city,
        phone=body.phone,
        etag=body.etag,
    )
    return _customer_response(customer)


@customer_router.delete("/{partition_id}/{unique_id}", response_model=StatusResponse)
async def remove_customer(partition_id: str, unique_id: str) -> StatusResponse:
    await delete_customer(partition_id, unique_id)
    return StatusResponse()


# --- Product endpoints ---


@product_router.get("", response_model=list[ProductResponse])
async def get_products(category: str | None = None) -> list[ProductResponse]:
    return [_product_response(p) for p in await list_products(category=category)]


@product_router.post("", status_code=201, response_model=ProductResponse)
async def post_product(body: CreateProductRequest) -> ProductResponse:
    product = await create_product(
        category=body.category,
        name=body.name,
        price=body.price,
        stock_quantity=body.stock_quantity,
        description=body.description,
        image=_decode_base64(body.image_base64),
        image_name=body.image_name,
    )
    return _product_response(product)


@product_router.get("/{partition_id}/{unique_id}", response_model=ProductResponse)
async def get_product(partition_id: str, unique_id: str) -> ProductResponse:
    return _product_response(await load_product(ProductRepository(), partition_id, unique_id))


@product_router.put("/{partition_id}/{unique_id}", response_model=ProductResponse)
async def put_product(partition_id: str, unique_id: str, body: UpdateProductRequest) -> ProductResponse:
    product = await update_product(
        partition_id,
        unique_id,
        name=body.name,
        price=body.price,
        stock_quantity=body.stock_quantity,
        description=body.description,
        category=body.category,
        image=_decode_base64(body.image_base64),
        image_name=body.image_name,
        etag=body.etag,
    )
    return _product_response(product)


@product_router.delete("/{partition_id}/{unique_id}", response_model=StatusResponse)
async def remove_product(partition_id: str, unique_id: str) -> StatusResponse:
    await delete_product(partition_id, unique_id)
    return StatusResponse()


# --- Order endpoints ---


@order_router.get("", response_model=list[OrderResponse])
async def get_orders(customer_id: str | None = None) -> list[OrderResponse]:
    return [_order_response(o) for o in await list_orders(customer_id=customer_id)]


@order_router.post("", status_code=201, response_model=OrderResponse)
async def post_order(body: PlaceOrderRequest) -> OrderResponse:
    order = await place_order(
        customer_id=body.customer_id,
        items=[(line.product_id, line.quantity) for line in body.items],
        status=body.status,
    )
    return _order_response(order)


@order_router.get("/{partition_id}/{unique_id}", response_model=OrderResponse)
async def get_order(partition_id: str, unique_id: str) -> OrderResponse:
    return _order_response(await load_order(OrderRepository(), partition_id, unique_id))


@order_router.put("/{partition_id}/{unique_id}/status", response_model=OrderResponse)
async def put_order_status(partition_id: str, unique_id: str, body: OrderStatusRequest) -> OrderResponse:
    order = await update_order_status(partition_id, unique_id, status=body.status, etag=body.etag)
    return _order_response(order)


@order_router.delete("/{partition_id}/{unique_id}", response_model=StatusResponse)
async def remove_order(partition_id: str, unique_id: str) -> StatusResponse:
    await delete_order(partition_id, unique_id)
    return StatusResponse()


# --- Event queue ---


@event_router.get("", response_model=EventsResponse)
async def peek_events(limit: int = Query(16, ge=1, le=32)) -> EventsResponse:
    return EventsResponse(messages=await get_publisher().peek(limit))



# --- Contract files ---


@contract_router.get("", response_model=list[ContractFileResponse])
async def get_contracts(limit: int = Query(500, ge=1, le=500)) -> list[ContractFileResponse]:
    return [
        ContractFileResponse(name=f.name, size=f.size, last_modified=f.last_modified)
        for f in await list_contracts(limit)
    ]


@contract_router.post("", status_code=201, response_model=UploadedContractResponse)
async def post_contract(body: UploadContractRequest) -> UploadedContractResponse:
    content = _decode_base64(body.content_base64, field="content_base64")
    name = await upload_contract(content, body.file_name, body.display_name)
    return UploadedContractResponse(name=name)


@contract_router.get("/{name}")
async def get_contract_file(name: str) -> Response:
    return Response(
        content=await download_contract(name),
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


@contract_router.delete("/{name}", response_model=StatusResponse)
async def remove_contract(name: str) -> StatusResponse:
    await delete_contract(name)
    return StatusResponse()
