"""Predefined admin reports.

Every report is a pure read: it builds a parameterized SQLAlchemy statement,
runs it through :func:`agrobuizz.executor.run` and shapes the rows for the
dashboard. Nothing here commits except :func:`update_order_status`.
"""
from collections import OrderedDict

from flask import current_app
from sqlalchemy import case, extract, func, or_, select

from .executor import run
from .extensions import db
from .models import (
    Crop,
    Customer,
    Farmer,
    FarmerCrop,
    FarmerCustomerDispute,
    FarmerCustomerOrder,
    FarmerCustomerTransaction,
    Product,
    User,
    Vendor,
    VendorFarmerDispute,
    VendorFarmerFeedback,
    VendorFarmerOrder,
    VendorFarmerTransaction,
    VendorInventory,
    VendorProduct,
)
from .shaping import (
    RowMapper,
    as_bool,
    as_date,
    as_int,
    as_money,
    as_rating,
    as_str,
    as_timestamp,
    percentage_shares,
)

CATALOG = OrderedDict()

ORDER_MODELS = {
    "farmer_customer": FarmerCustomerOrder,
    "vendor_farmer": VendorFarmerOrder,
}


def report(name, description):
    """Add a report function to the catalog under its endpoint name."""
    def decorator(func):
        CATALOG[name] = {"name": name, "description": description}
        return func
    return decorator


def describe_catalog():
    return [dict(entry) for entry in CATALOG.values()]


def _not_cancelled(status_col):
    return or_(status_col.is_(None), status_col != "cancelled")


# ---------------- Row Mappers ----------------
USER_ROW = RowMapper(
    id=("id", as_int),
    username=("username", as_str),
    email=("email", as_str),
    role=("role", as_str),
    userType=("user_type", as_str),
    darkMode=("dark_mode", as_bool),
    createdAt=("created_at", as_timestamp),
    lastLogin=("last_login", as_timestamp),
)

CUSTOMER_ORDERS_ROW = RowMapper(
    customerId=("customer_id", as_str),
    customerName=("customer_name", as_str),
    contactInfo=("contact_info", as_str),
    totalOrders=("total_orders", as_int),
    totalSpent=("total_spent", as_money),
    lastOrderDate=("last_order_date", as_date),
)

PRODUCT_ROW = RowMapper(
    productId=("product_id", as_str),
    name=("name", as_str),
    type=("type", as_str),
    description=("description", as_str),
    price=("price", as_money),
    quantity=("quantity", as_int),
    classification=("classification", as_str),
)

AVAILABLE_PRODUCT_ROW = RowMapper(
    productId=("product_id", as_str),
    name=("name", as_str),
    type=("type", as_str),
    price=("price", as_money),
    vendorId=("vendor_id", as_str),
    vendorName=("vendor_name", as_str),
    stockLevel=("stock_level", as_int),
)

RATED_PRODUCT_ROW = RowMapper(
    productId=("product_id", as_str),
    name=("name", as_str),
    vendorId=("vendor_id", as_str),
    vendorName=("vendor_name", as_str),
    averageRating=("average_rating", as_rating),
)

CROP_SALES_ROW = RowMapper(
    cropId=("crop_id", as_str),
    cropName=("crop_name", as_str),
    totalSales=("total_sales", as_int),
    totalRevenue=("total_revenue", as_money),
)

VENDOR_COUNTS_ROW = RowMapper(
    vendorId=("vendor_id", as_str),
    vendorName=("vendor_name", as_str),
    contactInfo=("contact_info", as_str),
    totalProducts=("total_products", as_int),
    avgRating=("avg_rating", as_rating),
)

FARMER_ORDER_ROW = RowMapper(
    orderId=("order_id", as_str),
    vendorId=("vendor_id", as_str),
    vendorName=("vendor_name", as_str),
    farmerId=("farmer_id", as_str),
    farmerName=("farmer_name", as_str),
    productId=("product_id", as_str),
    productName=("product_name", as_str),
    quantity=("quantity", as_int),
    totalAmount=("total_amount", as_money),
    status=("order_status", as_str),
    orderDate=("order_date", as_date),
)

DISPUTE_ROW = RowMapper(
    disputeId=("dispute_id", as_str),
    orderId=("order_id", as_str),
    disputeType=("dispute_type", as_str),
    status=("dispute_status", as_str),
    description=("details", as_str),
    resolutionDate=("resolution_date", as_date),
    farmerId=("farmer_id", as_str),
    farmerName=("farmer_name", as_str),
    counterpartyId=("counterparty_id", as_str),
    counterpartyName=("counterparty_name", as_str),
)

RATED_VENDOR_ROW = RowMapper(
    vendorId=("vendor_id", as_str),
    vendorName=("vendor_name", as_str),
    averageRating=("average_rating", as_rating),
    reviewCount=("review_count", as_int),
    positiveReviews=("positive_reviews", as_int),
)

ORDER_SUMMARY_ROW = RowMapper(
    orderId=("order_id", as_str),
    customerName=("buyer_name", as_str),
    sellerName=("seller_name", as_str),
    orderDate=("order_date", as_date),
    totalAmount=("total", as_money),
    status=("order_status", as_str),
    items=("quantity", as_int),
)

MULTI_DISPUTE_ROW = RowMapper(
    farmerId=("farmer_id", as_str),
    farmerName=("farmer_name", as_str),
    customerDisputes=("customer_disputes", as_int),
    vendorDisputes=("vendor_disputes", as_int),
    totalDisputes=("total_disputes", as_int),
)

TOP_ITEM_ROW = RowMapper(
    itemId=("item_id", as_str),
    itemName=("item_name", as_str),
    category=("category", as_str),
    totalSold=("total_sold", as_int),
    revenue=("revenue", as_money),
)

CROP_FOR_SALE_ROW = RowMapper(
    cropId=("crop_id", as_str),
    type=("type", as_str),
    quantity=("quantity", as_int),
    price=("price", as_money),
    description=("description", as_str),
)


# ---------------- People ----------------
@report("users", "All login identities with role and user type")
def users():
    stmt = select(
        User.id, User.username, User.email, User.role, User.user_type,
        User.dark_mode, User.created_at, User.last_login,
    ).order_by(User.id)
    return USER_ROW.map_rows(run(stmt))


@report("farmers-with-crops", "Each farmer with the crops they grow")
def farmers_with_crops():
    stmt = (
        select(
            Farmer.farmer_id,
            Farmer.name.label("farmer_name"),
            Farmer.contact_info,
            Crop.crop_id,
            Crop.type.label("crop_type"),
            Crop.quantity,
            Crop.price,
        )
        .join(FarmerCrop, FarmerCrop.farmer_id == Farmer.farmer_id)
        .join(Crop, Crop.crop_id == FarmerCrop.crop_id)
        .order_by(Farmer.farmer_id, Crop.type, Crop.crop_id)
    )

    farmers = OrderedDict()
    for row in run(stmt):
        entry = farmers.setdefault(row["farmer_id"], {
            "farmerId": row["farmer_id"],
            "farmerName": row["farmer_name"],
            "contactInfo": row["contact_info"],
            "totalCrops": 0,
            "cropsList": [],
        })
        entry["cropsList"].append({
            "id": row["crop_id"],
            "name": row["crop_type"],
            "quantity": as_int(row["quantity"]),
            "price": as_money(row["price"]),
        })
        entry["totalCrops"] += 1
    return list(farmers.values())


@report("customers-with-multiple-orders", "Customers with at least N orders (default 3)")
def customers_with_multiple_orders(min_orders=3):
    order_count = func.count(FarmerCustomerOrder.order_id)
    stmt = (
        select(
            Customer.customer_id,
            Customer.name.label("customer_name"),
            Customer.contact_info,
            order_count.label("total_orders"),
            func.coalesce(func.sum(FarmerCustomerOrder.quantity * Crop.price), 0).label("total_spent"),
            func.max(FarmerCustomerOrder.order_date).label("last_order_date"),
        )
        .join(FarmerCustomerOrder, FarmerCustomerOrder.customer_id == Customer.customer_id)
        .join(Crop, Crop.crop_id == FarmerCustomerOrder.crop_id)
        .group_by(Customer.customer_id, Customer.name, Customer.contact_info)
        .having(order_count >= min_orders)
        .order_by(order_count.desc(), Customer.customer_id)
    )
    return CUSTOMER_ORDERS_ROW.map_rows(run(stmt))


# ---------------- Products ----------------
def _product_columns():
    return (
        Product.product_id, Product.name, Product.type, Product.description,
        Product.price, Product.quantity, Product.classification,
    )


@report("products-by-type", "Products whose type matches, case-insensitively")
def products_by_type(product_type):
    stmt = (
        select(*_product_columns())
        .where(func.lower(Product.type) == product_type.strip().lower())
        .order_by(Product.name, Product.product_id)
    )
    return PRODUCT_ROW.map_rows(run(stmt))


@report("products-by-price-range", "Products priced within [min, max]")
def products_by_price_range(min_price=0, max_price=1000):
    stmt = (
        select(*_product_columns())
        .where(Product.price.between(min_price, max_price))
        .order_by(Product.price, Product.product_id)
    )
    return PRODUCT_ROW.map_rows(run(stmt))


@report("available-products", "Products with vendor stock on hand")
def available_products():
    stmt = (
        select(
            Product.product_id,
            Product.name,
            Product.type,
            Product.price,
            Vendor.vendor_id,
            Vendor.name.label("vendor_name"),
            VendorInventory.stock_level,
        )
        .join(VendorInventory, VendorInventory.product_id == Product.product_id)
        .join(Vendor, Vendor.vendor_id == VendorInventory.vendor_id)
        .where(VendorInventory.stock_level > 0)
        .order_by(Product.name, Vendor.vendor_id)
    )
    return AVAILABLE_PRODUCT_ROW.map_rows(run(stmt))


@report("products-by-vendor-ratings", "Products from vendors rated at least minRating (default 4)")
def products_by_vendor_ratings(min_rating=4):
    avg_rating = func.avg(VendorFarmerFeedback.rating)
    stmt = (
        select(
            Product.product_id,
            Product.name,
            Vendor.vendor_id,
            Vendor.name.label("vendor_name"),
            avg_rating.label("average_rating"),
        )
        .join(VendorProduct, VendorProduct.product_id == Product.product_id)
        .join(Vendor, Vendor.vendor_id == VendorProduct.vendor_id)
        .join(VendorFarmerFeedback, VendorFarmerFeedback.vendor_id == Vendor.vendor_id)
        .group_by(Product.product_id, Product.name, Vendor.vendor_id, Vendor.name)
        .having(avg_rating >= min_rating)
        .order_by(avg_rating.desc(), Product.product_id)
    )
    return RATED_PRODUCT_ROW.map_rows(run(stmt))


@report("crops-for-sale", "In-stock crops ordered by type, then price")
def crops_for_sale():
    stmt = (
        select(Crop.crop_id, Crop.type, Crop.quantity, Crop.price, Crop.description)
        .where(Crop.quantity > 0)
        .order_by(Crop.type, Crop.price, Crop.crop_id)
    )
    return CROP_FOR_SALE_ROW.map_rows(run(stmt))


# ---------------- Sales ----------------
@report("crop-sales", "Units sold and revenue per crop")
def crop_sales():
    total_sales = func.sum(FarmerCustomerOrder.quantity)
    total_revenue = func.sum(FarmerCustomerOrder.quantity * Crop.price)
    stmt = (
        select(
            Crop.crop_id,
            Crop.type.label("crop_name"),
            total_sales.label("total_sales"),
            total_revenue.label("total_revenue"),
        )
        .join(FarmerCustomerOrder, FarmerCustomerOrder.crop_id == Crop.crop_id)
        .where(_not_cancelled(FarmerCustomerOrder.order_status))
        .group_by(Crop.crop_id, Crop.type)
        .order_by(total_revenue.desc(), Crop.crop_id)
    )
    return CROP_SALES_ROW.map_rows(run(stmt))


@report("most-sold-items", "Top products by units sold with share of sales")
def most_sold_items(limit=None):
    limit = limit or current_app.config["TOP_ITEMS_LIMIT"]
    total_sold = func.sum(VendorFarmerOrder.quantity)
    revenue = func.sum(VendorFarmerOrder.quantity * Product.price)
    stmt = (
        select(
            Product.product_id.label("item_id"),
            Product.name.label("item_name"),
            Product.type.label("category"),
            total_sold.label("total_sold"),
            revenue.label("revenue"),
        )
        .join(VendorFarmerOrder, VendorFarmerOrder.product_id == Product.product_id)
        .where(_not_cancelled(VendorFarmerOrder.order_status))
        .group_by(Product.product_id, Product.name, Product.type)
        .order_by(total_sold.desc(), Product.product_id)
        .limit(limit)
    )
    items = TOP_ITEM_ROW.map_rows(run(stmt))
    shares = percentage_shares([item["totalSold"] for item in items])
    for item, share in zip(items, shares):
        item["percentageOfSales"] = share
    return items


# ---------------- Vendors ----------------
@report("vendor-product-counts", "Products offered and average rating per vendor")
def vendor_product_counts():
    product_counts = (
        select(VendorProduct.vendor_id, func.count(VendorProduct.product_id).label("total_products"))
        .group_by(VendorProduct.vendor_id)
        .subquery()
    )
    ratings = (
        select(VendorFarmerFeedback.vendor_id, func.avg(VendorFarmerFeedback.rating).label("avg_rating"))
        .group_by(VendorFarmerFeedback.vendor_id)
        .subquery()
    )
    total_products = func.coalesce(product_counts.c.total_products, 0)
    stmt = (
        select(
            Vendor.vendor_id,
            Vendor.name.label("vendor_name"),
            Vendor.contact_info,
            total_products.label("total_products"),
            func.coalesce(ratings.c.avg_rating, 0).label("avg_rating"),
        )
        .outerjoin(product_counts, product_counts.c.vendor_id == Vendor.vendor_id)
        .outerjoin(ratings, ratings.c.vendor_id == Vendor.vendor_id)
        .order_by(total_products.desc(), Vendor.vendor_id)
    )
    return VENDOR_COUNTS_ROW.map_rows(run(stmt))


@report("highly-rated-vendors", "Vendors whose average rating is at least minRating (default 4)")
def highly_rated_vendors(min_rating=4):
    avg_rating = func.avg(VendorFarmerFeedback.rating)
    comments = func.lower(VendorFarmerFeedback.comments)
    positive = func.sum(case((or_(comments.like("%excellent%"), comments.like("%good%")), 1), else_=0))
    stmt = (
        select(
            Vendor.vendor_id,
            Vendor.name.label("vendor_name"),
            avg_rating.label("average_rating"),
            func.count(VendorFarmerFeedback.feedback_id).label("review_count"),
            positive.label("positive_reviews"),
        )
        .join(VendorFarmerFeedback, VendorFarmerFeedback.vendor_id == Vendor.vendor_id)
        .group_by(Vendor.vendor_id, Vendor.name)
        .having(avg_rating >= min_rating)
        .order_by(avg_rating.desc(), Vendor.vendor_id)
    )
    return RATED_VENDOR_ROW.map_rows(run(stmt))


# ---------------- Orders ----------------
@report("farmer-orders", "Orders farmers placed with vendors")
def farmer_orders():
    stmt = (
        select(
            VendorFarmerOrder.order_id,
            Vendor.vendor_id,
            Vendor.name.label("vendor_name"),
            Farmer.farmer_id,
            Farmer.name.label("farmer_name"),
            Product.product_id,
            Product.name.label("product_name"),
            VendorFarmerOrder.quantity,
            (VendorFarmerOrder.quantity * Product.price).label("total_amount"),
            VendorFarmerOrder.order_status,
            VendorFarmerOrder.order_date,
        )
        .join(Vendor, Vendor.vendor_id == VendorFarmerOrder.vendor_id)
        .join(Farmer, Farmer.farmer_id == VendorFarmerOrder.farmer_id)
        .join(Product, Product.product_id == VendorFarmerOrder.product_id)
        .order_by(VendorFarmerOrder.order_date.desc(), VendorFarmerOrder.order_id)
    )
    return FARMER_ORDER_ROW.map_rows(run(stmt))


def _farmer_customer_orders():
    return (
        select(
            FarmerCustomerOrder.order_id,
            FarmerCustomerOrder.order_status,
            FarmerCustomerOrder.order_date,
            FarmerCustomerOrder.quantity,
            Customer.name.label("buyer_name"),
            Farmer.name.label("seller_name"),
            Crop.type.label("item_name"),
            (FarmerCustomerOrder.quantity * Crop.price).label("total"),
            FarmerCustomerTransaction.payment_mode,
        )
        .join(Customer, Customer.customer_id == FarmerCustomerOrder.customer_id)
        .join(Farmer, Farmer.farmer_id == FarmerCustomerOrder.farmer_id)
        .join(Crop, Crop.crop_id == FarmerCustomerOrder.crop_id)
        .outerjoin(FarmerCustomerTransaction, FarmerCustomerTransaction.order_id == FarmerCustomerOrder.order_id)
    )


def _vendor_farmer_orders():
    return (
        select(
            VendorFarmerOrder.order_id,
            VendorFarmerOrder.order_status,
            VendorFarmerOrder.order_date,
            VendorFarmerOrder.quantity,
            Farmer.name.label("buyer_name"),
            Vendor.name.label("seller_name"),
            Product.name.label("item_name"),
            (VendorFarmerOrder.quantity * Product.price).label("total"),
            VendorFarmerTransaction.payment_mode,
        )
        .join(Farmer, Farmer.farmer_id == VendorFarmerOrder.farmer_id)
        .join(Vendor, Vendor.vendor_id == VendorFarmerOrder.vendor_id)
        .join(Product, Product.product_id == VendorFarmerOrder.product_id)
        .outerjoin(VendorFarmerTransaction, VendorFarmerTransaction.order_id == VendorFarmerOrder.order_id)
    )


def _newest_first(tagged_rows):
    """Sort ``(tag, row)`` pairs by the full order timestamp, newest first, ties by order id."""
    tagged_rows.sort(key=lambda pair: pair[1]["order_id"])
    tagged_rows.sort(key=lambda pair: pair[1]["order_date"], reverse=True)
    return tagged_rows


@report("orders", "Every order from both order books, newest first")
def all_orders():
    sources = (
        (("farmer_customer", "customer"), _farmer_customer_orders()),
        (("vendor_farmer", "farmer"), _vendor_farmer_orders()),
    )
    tagged = [(tag, row) for tag, stmt in sources for row in run(stmt)]
    return [
        {
            "id": row["order_id"],
            "orderType": order_type,
            "customer": row["buyer_name"],
            "customerType": buyer_type,
            "seller": row["seller_name"],
            "items": [row["item_name"]],
            "quantity": as_int(row["quantity"]),
            "total": as_money(row["total"]),
            "status": row["order_status"],
            "date": as_date(row["order_date"]),
            "payment": row["payment_mode"],
        }
        for (order_type, buyer_type), row in _newest_first(tagged)
    ]


@report("orders-by-year", "Orders from both order books placed in a given year")
def orders_by_year(year):
    sources = (
        ("farmer_customer", FarmerCustomerOrder, _farmer_customer_orders()),
        ("vendor_farmer", VendorFarmerOrder, _vendor_farmer_orders()),
    )
    tagged = []
    for order_type, model, stmt in sources:
        stmt = stmt.where(extract("year", model.order_date) == year)
        tagged.extend((order_type, row) for row in run(stmt))

    orders = []
    for order_type, row in _newest_first(tagged):
        summary = ORDER_SUMMARY_ROW(row)
        summary["orderType"] = order_type
        orders.append(summary)
    return orders


def find_order(order_id, order_type=None):
    """Return ``(order_type, order)`` or ``(None, None)`` when no such order exists."""
    candidates = [order_type] if order_type else list(ORDER_MODELS)
    for candidate in candidates:
        order = db.session.get(ORDER_MODELS[candidate], order_id)
        if order is not None:
            return candidate, order
    return None, None


def update_order_status(order_id, status, order_type=None):
    """Set an order's status. Returns the updated order dict or None if missing."""
    order_type, order = find_order(order_id, order_type)
    if order is None:
        return None
    previous = order.order_status
    order.order_status = status
    db.session.commit()
    current_app.logger.info(
        "Order %s (%s) status changed from %s to %s", order_id, order_type, previous, status
    )
    return order.to_dict()


# ---------------- Disputes ----------------
def _dispute_rows(dispute, order, counterparty, counterparty_key):
    return (
        select(
            dispute.dispute_id,
            dispute.order_id,
            dispute.dispute_type,
            dispute.dispute_status,
            dispute.details,
            dispute.resolution_date,
            Farmer.farmer_id,
            Farmer.name.label("farmer_name"),
            getattr(counterparty, counterparty_key).label("counterparty_id"),
            counterparty.name.label("counterparty_name"),
        )
        .join(order, order.order_id == dispute.order_id)
        .join(Farmer, Farmer.farmer_id == order.farmer_id)
        .join(counterparty, getattr(counterparty, counterparty_key) == getattr(order, counterparty_key))
    )


@report("disputes", "Disputes from both order books, open ones first")
def disputes():
    sources = (
        ("farmer_customer", _dispute_rows(FarmerCustomerDispute, FarmerCustomerOrder, Customer, "customer_id")),
        ("vendor_farmer", _dispute_rows(VendorFarmerDispute, VendorFarmerOrder, Vendor, "vendor_id")),
    )
    results = []
    for source, stmt in sources:
        for shaped in DISPUTE_ROW.map_rows(run(stmt)):
            shaped["source"] = source
            results.append(shaped)
    results.sort(key=lambda d: d["disputeId"])
    # unresolved disputes (no resolution date) sort ahead of resolved ones
    results.sort(key=lambda d: (d["resolutionDate"] is None, d["resolutionDate"] or ""), reverse=True)
    return results


def _dispute_counts(dispute, order):
    return (
        select(order.farmer_id, func.count(dispute.dispute_id).label("disputes"))
        .join(dispute, dispute.order_id == order.order_id)
        .group_by(order.farmer_id)
        .subquery()
    )


@report("farmers-with-multiple-disputes", "Farmers with two or more disputes across both order books")
def farmers_with_multiple_disputes(min_disputes=2):
    fc_counts = _dispute_counts(FarmerCustomerDispute, FarmerCustomerOrder)
    vf_counts = _dispute_counts(VendorFarmerDispute, VendorFarmerOrder)
    customer_disputes = func.coalesce(fc_counts.c.disputes, 0)
    vendor_disputes = func.coalesce(vf_counts.c.disputes, 0)
    total = customer_disputes + vendor_disputes
    stmt = (
        select(
            Farmer.farmer_id,
            Farmer.name.label("farmer_name"),
            customer_disputes.label("customer_disputes"),
            vendor_disputes.label("vendor_disputes"),
            total.label("total_disputes"),
        )
        .outerjoin(fc_counts, fc_counts.c.farmer_id == Farmer.farmer_id)
        .outerjoin(vf_counts, vf_counts.c.farmer_id == Farmer.farmer_id)
        .where(total >= min_disputes)
        .order_by(total.desc(), Farmer.farmer_id)
    )
    farmers = MULTI_DISPUTE_ROW.map_rows(run(stmt))
    if not farmers:
        return farmers

    by_id = {f["farmerId"]: f for f in farmers}
    for farmer in farmers:
        farmer["details"] = []
    for dispute in disputes():
        if dispute["farmerId"] in by_id:
            by_id[dispute["farmerId"]]["details"].append({
                "disputeId": dispute["disputeId"],
                "source": dispute["source"],
                "counterpartyName": dispute["counterpartyName"],
                "details": dispute["description"],
            })
    return farmers
