import math
import re
from functools import wraps

from flask import Blueprint, abort, current_app, jsonify, make_response, request
from sqlalchemy.exc import SQLAlchemyError

from . import reports
from .auth import check_admin, json_body
from .executor import run_read_only
from .exports import most_sold_items_csv, most_sold_items_pdf
from .models import ORDER_STATUSES
from .query_guard import UnsafeQueryError, validate_read_only

# query-string numbers must fit a signed 32-bit INTEGER column
INT_LIMIT = 2 ** 31 - 1

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.before_request
def ensure_admin():
    # CORS preflight carries no session cookie
    if request.method == "OPTIONS":
        return None
    check_admin()


def ok(data, status=200):
    return jsonify({"success": True, "data": data}), status


def fail(message, status, **extra):
    return jsonify({"success": False, "message": message, **extra}), status


def report_endpoint(label):
    """Turn a database failure inside the view into a logged 500 with a per-report message."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except SQLAlchemyError:
                current_app.logger.exception("Error fetching %s", label)
                return fail(f"Failed to fetch {label}", 500)
        return decorated_function
    return decorator


def number_arg(name, default, cast=float):
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        abort(400, description=f"{name} must be a number")
    if abs(value) > INT_LIMIT or math.isnan(value):
        abort(400, description=f"{name} is out of range")
    return value


# ---------------- Catalog ----------------
@admin_bp.route("/reports", methods=["GET"])
def list_reports():
    return ok(reports.describe_catalog())


@admin_bp.route("/users", methods=["GET"])
@report_endpoint("users")
def users():
    return ok(reports.users())


# ---------------- Farmers & Customers ----------------
@admin_bp.route("/farmers-with-crops", methods=["GET"])
@report_endpoint("farmers with crops")
def farmers_with_crops():
    return ok(reports.farmers_with_crops())


@admin_bp.route("/customers-with-multiple-orders", methods=["GET"])
@report_endpoint("customers with multiple orders")
def customers_with_multiple_orders():
    min_orders = number_arg("minOrders", 3, int)
    return ok(reports.customers_with_multiple_orders(min_orders))


@admin_bp.route("/farmers-with-multiple-disputes", methods=["GET"])
@report_endpoint("farmers with multiple disputes")
def farmers_with_multiple_disputes():
    return ok(reports.farmers_with_multiple_disputes())


# ---------------- Products & Crops ----------------
@admin_bp.route("/products-by-type/<string:product_type>", methods=["GET"])
@report_endpoint("products by type")
def products_by_type(product_type):
    return ok(reports.products_by_type(product_type))


@admin_bp.route("/products-by-price-range", methods=["GET"])
@report_endpoint("products by price range")
def products_by_price_range():
    min_price = number_arg("min", 0)
    max_price = number_arg("max", 1000)
    return ok(reports.products_by_price_range(min_price, max_price))


@admin_bp.route("/available-products", methods=["GET"])
@report_endpoint("available products")
def available_products():
    return ok(reports.available_products())


@admin_bp.route("/products-by-vendor-ratings", methods=["GET"])
@report_endpoint("products by vendor ratings")
def products_by_vendor_ratings():
    min_rating = number_arg("minRating", 4)
    return ok(reports.products_by_vendor_ratings(min_rating))


@admin_bp.route("/crops-for-sale", methods=["GET"])
@report_endpoint("crops for sale")
def crops_for_sale():
    return ok(reports.crops_for_sale())


@admin_bp.route("/crop-sales", methods=["GET"])
@report_endpoint("crop sales")
def crop_sales():
    return ok(reports.crop_sales())


@admin_bp.route("/most-sold-items", methods=["GET"])
@report_endpoint("most sold items")
def most_sold_items():
    fmt = request.args.get("format", "json").lower()
    if fmt not in ("json", "csv", "pdf"):
        abort(400, description="format must be one of json, csv, pdf")

    items = reports.most_sold_items()
    if fmt == "csv":
        response = make_response(most_sold_items_csv(items))
        response.headers["Content-Type"] = "text/csv; charset=utf-8"
        response.headers["Content-Disposition"] = "attachment; filename=most-sold-items.csv"
        return response
    if fmt == "pdf":
        response = make_response(most_sold_items_pdf(items))
        response.headers["Content-Type"] = "application/pdf"
        response.headers["Content-Disposition"] = "attachment; filename=most-sold-items.pdf"
        return response
    return ok(items)


# ---------------- Vendors ----------------
@admin_bp.route("/vendor-product-counts", methods=["GET"])
@report_endpoint("vendor product counts")
def vendor_product_counts():
    return ok(reports.vendor_product_counts())


@admin_bp.route("/highly-rated-vendors", methods=["GET"])
@report_endpoint("highly rated vendors")
def highly_rated_vendors():
    min_rating = number_arg("minRating", 4)
    return ok(reports.highly_rated_vendors(min_rating))


# ---------------- Orders & Disputes ----------------
@admin_bp.route("/farmer-orders", methods=["GET"])
@report_endpoint("farmer orders")
def farmer_orders():
    return ok(reports.farmer_orders())


@admin_bp.route("/disputes", methods=["GET"])
@report_endpoint("disputes")
def disputes():
    return ok(reports.disputes())


@admin_bp.route("/orders", methods=["GET"])
@report_endpoint("orders")
def orders():
    return ok(reports.all_orders())


@admin_bp.route("/orders-by-year", defaults={"year": None}, methods=["GET"])
@admin_bp.route("/orders-by-year/<year>", methods=["GET"])
@report_endpoint("orders by year")
def orders_by_year(year):
    if year is None:
        year = current_app.config["DEFAULT_REPORT_YEAR"]
    elif not re.fullmatch(r"[0-9]{1,4}", year):
        abort(400, description="year must be a four digit number")
    return ok(reports.orders_by_year(int(year)))


@admin_bp.route("/update-order-status/<string:order_id>", methods=["POST"])
@report_endpoint("order status update")
def update_order_status(order_id):
    data = json_body()
    status = data.get("status")
    order_type = data.get("orderType")

    if status not in ORDER_STATUSES:
        abort(400, description=f"status must be one of: {', '.join(ORDER_STATUSES)}")
    if order_type:
        order_type = str(order_type).replace("-", "_").lower()
        if order_type not in reports.ORDER_MODELS:
            abort(400, description=f"orderType must be one of: {', '.join(reports.ORDER_MODELS)}")

    order = reports.update_order_status(order_id, status, order_type)
    if order is None:
        abort(404, description="Order not found")
    return ok(order)


# ---------------- Ad-hoc Query Console ----------------
@admin_bp.route("/execute-query", methods=["POST"])
def execute_query():
    data = json_body()
    query = data.get("query")

    try:
        sql = validate_read_only(query)
    except UnsafeQueryError as e:
        current_app.logger.warning("Rejected console query: %s", e)
        return fail(str(e), 400)

    try:
        columns, rows, truncated = run_read_only(sql)
    except SQLAlchemyError as e:
        return fail("Failed to execute custom query", 500, error=str(getattr(e, "orig", None) or e))

    current_app.logger.info("Console query returned %d rows: %.200s", len(rows), sql)
    return jsonify({
        "success": True,
        "result": rows,
        "columns": columns,
        "rowCount": len(rows),
        "truncated": truncated,
    }), 200
