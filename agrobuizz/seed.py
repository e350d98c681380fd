"""Sample data for local development and demos.

Run with ``flask --app agrobuizz.app seed-db``.
"""
from datetime import date, datetime
from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import (
    Crop,
    Customer,
    Farmer,
    FarmerCrop,
    FarmerCustomerDispute,
    FarmerCustomerFeedback,
    FarmerCustomerOrder,
    FarmerCustomerTransaction,
    FarmerInventory,
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

DEFAULT_ADMIN = {"username": "admin", "email": "admin@agrobuizz.com", "password": "admin123"}

LOGINS = [
    ("farmer1", "farmer1@agrobuizz.com", "farmer"),
    ("vendor1", "vendor1@agrobuizz.com", "vendor"),
    ("customer1", "customer1@agrobuizz.com", "customer"),
]

FARMERS = [
    ("F001", "John Farmer", "555-0101", "12 Orchard Lane, Springfield", "Organic"),
    ("F002", "Lisa Farmer", "555-0102", "101 Wheat Field Road, Countryside", "Grain"),
    ("F003", "Ravi Patel", "555-0103", "7 River Bend, Greenvale", "Mixed"),
]

VENDORS = [
    ("V001", "GreenGrow Supplies", "Seeds and fertilizer wholesaler", "555-0201", "456 Market Street, Commerce City"),
    ("V002", "AgriTech Equipment", "Farm machinery dealer", "555-0202", "88 Industrial Park, Millbrook"),
    ("V003", "Harvest Tools Co", "Hand tools and irrigation", "555-0203", "3 Depot Road, Fairview"),
]

CUSTOMERS = [
    ("C001", "Mike Customer", "555-0301", "789 Residential Ave, Hometown"),
    ("C002", "Anna Buyer", "555-0302", "14 Elm Street, Hometown"),
    ("C003", "Fresh Foods Cafe", "555-0303", "2 Main Square, Springfield"),
]

CROPS = [
    ("CR001", "Tomatoes", 500, "2.50", "Vine-ripened tomatoes"),
    ("CR002", "Lettuce", 300, "1.20", "Fresh green lettuce"),
    ("CR003", "Potatoes", 1000, "0.80", "Russet potatoes"),
    ("CR004", "Corn", 0, "0.60", "Sweet corn, sold out"),
    ("CR005", "Apples", 250, "3.10", "Organic apples"),
]

PRODUCTS = [
    ("P001", "Organic Tomato Seeds", "seeds", "Heirloom tomato seed pack", "4.50", 200, "organic"),
    ("P002", "Wheat Seeds", "seeds", "GMO-free wheat seeds", "6.75", 150, "conventional"),
    ("P003", "Fertilizer Pack", "fertilizer", "NPK 10-10-10", "25.00", 80, "chemical"),
    ("P004", "Irrigation System", "equipment", "Drip irrigation kit", "450.00", 10, "machinery"),
    ("P005", "Small Tractor", "equipment", "Compact 25hp tractor", "12000.00", 2, "machinery"),
    ("P006", "Pruning Shears", "tools", "Steel bypass shears", "18.00", 0, "hand tool"),
]

FARMER_CROPS = [("F001", "CR001"), ("F001", "CR005"), ("F002", "CR003"), ("F002", "CR004"), ("F003", "CR002")]
VENDOR_PRODUCTS = [("V001", "P001"), ("V001", "P002"), ("V001", "P003"), ("V002", "P004"), ("V002", "P005"), ("V003", "P006")]

FARMER_CUSTOMER_ORDERS = [
    ("FCO001", "F001", "C001", "CR001", "standard", "delivered", 20, datetime(2024, 6, 3)),
    ("FCO002", "F001", "C001", "CR005", "express", "delivered", 10, datetime(2024, 11, 20)),
    ("FCO003", "F002", "C001", "CR003", "standard", "shipped", 50, datetime(2025, 2, 14)),
    ("FCO004", "F003", "C002", "CR002", "standard", "pending", 15, datetime(2025, 3, 1)),
    ("FCO005", "F001", "C003", "CR001", "subscription", "processing", 40, datetime(2025, 3, 22)),
    ("FCO006", "F001", "C001", "CR001", "standard", "cancelled", 5, datetime(2025, 4, 2)),
]

VENDOR_FARMER_ORDERS = [
    ("VFO001", "V001", "F001", "P001", "standard", "delivered", 30, datetime(2024, 3, 12)),
    ("VFO002", "V001", "F002", "P002", "standard", "delivered", 25, datetime(2024, 9, 5)),
    ("VFO003", "V001", "F001", "P003", "express", "shipped", 12, datetime(2025, 1, 18)),
    ("VFO004", "V002", "F002", "P004", "rental", "processing", 1, datetime(2025, 2, 27)),
    ("VFO005", "V002", "F003", "P005", "rental", "pending", 1, datetime(2025, 3, 15)),
    ("VFO006", "V001", "F003", "P001", "standard", "delivered", 18, datetime(2025, 3, 20)),
]


def ensure_admin(username=None, email=None, password=None, reset_password=False):
    username = username or DEFAULT_ADMIN["username"]
    admin = User.query.filter_by(username=username).first()
    if admin is None:
        admin = User(username=username, email=email or DEFAULT_ADMIN["email"], role="admin", user_type="admin")
        admin.set_password(password or DEFAULT_ADMIN["password"])
        db.session.add(admin)
        current_app.logger.info("Admin user %s created", username)
    elif reset_password:
        admin.set_password(password or DEFAULT_ADMIN["password"])
        current_app.logger.info("Admin user %s password reset", username)
    db.session.commit()
    return admin


def _seed_logins():
    for username, email, user_type in LOGINS:
        if User.query.filter_by(username=username).first() is None:
            user = User(username=username, email=email, role="user", user_type=user_type)
            user.set_password("password123")
            db.session.add(user)


def _seed_catalog():
    for farmer_id, name, contact, address, farm_type in FARMERS:
        db.session.add(Farmer(farmer_id=farmer_id, name=name, contact_info=contact, address=address, farm_type=farm_type))
    for vendor_id, name, details, contact, address in VENDORS:
        db.session.add(Vendor(vendor_id=vendor_id, name=name, business_details=details, contact_info=contact, address=address))
    for customer_id, name, contact, address in CUSTOMERS:
        db.session.add(Customer(customer_id=customer_id, name=name, contact_info=contact, address=address))
    for crop_id, crop_type, quantity, price, description in CROPS:
        db.session.add(Crop(crop_id=crop_id, type=crop_type, quantity=quantity, price=Decimal(price), description=description))
    for product_id, name, product_type, description, price, quantity, classification in PRODUCTS:
        db.session.add(Product(
            product_id=product_id, name=name, type=product_type, description=description,
            price=Decimal(price), quantity=quantity, classification=classification,
        ))
    db.session.flush()

    for farmer_id, crop_id in FARMER_CROPS:
        db.session.add(FarmerCrop(farmer_id=farmer_id, crop_id=crop_id))
        stock = next(c[2] for c in CROPS if c[0] == crop_id)
        db.session.add(FarmerInventory(farmer_id=farmer_id, crop_id=crop_id, stock_level=stock, low_stock_notification=stock < 50))
    for vendor_id, product_id in VENDOR_PRODUCTS:
        db.session.add(VendorProduct(vendor_id=vendor_id, product_id=product_id))
        stock = next(p[5] for p in PRODUCTS if p[0] == product_id)
        db.session.add(VendorInventory(vendor_id=vendor_id, product_id=product_id, stock_level=stock, low_stock_notification=stock < 5))


def _seed_orders():
    crop_prices = {c[0]: Decimal(c[3]) for c in CROPS}
    product_prices = {p[0]: Decimal(p[4]) for p in PRODUCTS}

    for n, (order_id, farmer_id, customer_id, crop_id, order_type, status, qty, when) in enumerate(FARMER_CUSTOMER_ORDERS, 1):
        db.session.add(FarmerCustomerOrder(
            order_id=order_id, farmer_id=farmer_id, customer_id=customer_id, crop_id=crop_id,
            order_type=order_type, order_status=status, quantity=qty, order_date=when,
        ))
        amount = crop_prices[crop_id] * qty
        db.session.add(FarmerCustomerTransaction(
            transaction_id=f"FCT{n:03d}", order_id=order_id, payment_mode="card",
            amount=amount, commission=(amount * Decimal("0.05")).quantize(Decimal("0.01")), transaction_timestamp=when,
        ))

    for n, (order_id, vendor_id, farmer_id, product_id, order_type, status, qty, when) in enumerate(VENDOR_FARMER_ORDERS, 1):
        db.session.add(VendorFarmerOrder(
            order_id=order_id, vendor_id=vendor_id, farmer_id=farmer_id, product_id=product_id,
            order_type=order_type, order_status=status, quantity=qty, order_date=when,
        ))
        amount = product_prices[product_id] * qty
        db.session.add(VendorFarmerTransaction(
            transaction_id=f"VFT{n:03d}", order_id=order_id, payment_mode="bank transfer",
            amount=amount, commission=(amount * Decimal("0.03")).quantize(Decimal("0.01")), transaction_timestamp=when,
        ))
    db.session.flush()

    db.session.add_all([
        FarmerCustomerFeedback(feedback_id="FCF001", order_id="FCO001", farmer_id="F001", customer_id="C001",
                               rating=5, comments="Excellent tomatoes"),
        FarmerCustomerFeedback(feedback_id="FCF002", order_id="FCO004", farmer_id="F003", customer_id="C002",
                               rating=3, comments="Lettuce wilted a little"),
        VendorFarmerFeedback(feedback_id="VFF001", order_id="VFO001", farmer_id="F001", vendor_id="V001",
                             rating=5, comments="Excellent germination rate"),
        VendorFarmerFeedback(feedback_id="VFF002", order_id="VFO002", farmer_id="F002", vendor_id="V001",
                             rating=4, comments="Good seeds, slow shipping"),
        VendorFarmerFeedback(feedback_id="VFF003", order_id="VFO004", farmer_id="F002", vendor_id="V002",
                             rating=2, comments="Kit arrived with missing parts"),
    ])
    db.session.add_all([
        FarmerCustomerDispute(dispute_id="FCD001", order_id="FCO004", dispute_type="quality",
                              dispute_status="open", details="Lettuce delivered wilted"),
        FarmerCustomerDispute(dispute_id="FCD002", order_id="FCO002", dispute_type="delivery",
                              dispute_status="resolved", details="Apples arrived two days late",
                              resolution_date=date(2024, 12, 1)),
        VendorFarmerDispute(dispute_id="VFD001", order_id="VFO004", dispute_type="quality",
                            dispute_status="investigating", details="Irrigation kit missing parts"),
        VendorFarmerDispute(dispute_id="VFD002", order_id="VFO005", dispute_type="payment",
                            dispute_status="open", details="Rental deposit charged twice"),
        VendorFarmerDispute(dispute_id="VFD003", order_id="VFO003", dispute_type="delivery",
                            dispute_status="closed", details="Fertilizer delivered to wrong farm",
                            resolution_date=date(2025, 2, 2)),
    ])


def seed_database():
    """Create the admin login and sample marketplace data. Returns False if already seeded."""
    ensure_admin()
    if db.session.get(Product, PRODUCTS[0][0]) is not None:
        current_app.logger.info("Sample data already present, skipping seeding")
        return False

    _seed_logins()
    _seed_catalog()
    _seed_orders()
    db.session.commit()
    current_app.logger.info(
        "Seeded %d farmers, %d vendors, %d customers, %d orders",
        len(FARMERS), len(VENDORS), len(CUSTOMERS),
        len(FARMER_CUSTOMER_ORDERS) + len(VENDOR_FARMER_ORDERS),
    )
    return True


@click.command("seed-db")
@with_appcontext
def seed_db_command():
    """Create tables and load sample data."""
    db.create_all()
    if seed_database():
        click.echo("Database seeded.")
    else:
        click.echo("Database already seeded.")


@click.command("create-admin")
@click.option("--username", default=DEFAULT_ADMIN["username"], show_default=True)
@click.option("--email", default=DEFAULT_ADMIN["email"], show_default=True)
@click.password_option()
@with_appcontext
def create_admin_command(username, email, password):
    """Create the admin login, or reset its password if it exists."""
    db.create_all()
    ensure_admin(username, email, password, reset_password=True)
    click.echo(f"Admin user {username} is ready.")


def register_commands(app):
    app.cli.add_command(seed_db_command)
    app.cli.add_command(create_admin_command)
