from datetime import datetime

from sqlalchemy import CheckConstraint
from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db

USER_ROLES = ("user", "admin")
USER_TYPES = ("farmer", "customer", "vendor", "admin")
ORDER_TYPES = ("standard", "express", "rental", "subscription")
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
DISPUTE_TYPES = ("quality", "delivery", "payment", "other")
DISPUTE_STATUSES = ("open", "investigating", "resolved", "closed")

order_type_enum = db.Enum(*ORDER_TYPES, name="order_type")
order_status_enum = db.Enum(*ORDER_STATUSES, name="order_status")
dispute_type_enum = db.Enum(*DISPUTE_TYPES, name="dispute_type")
dispute_status_enum = db.Enum(*DISPUTE_STATUSES, name="dispute_status")


# ---------------- User Model ----------------
class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(100), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(*USER_ROLES, name="user_role"), nullable=False, default="user")
    user_type = db.Column(db.Enum(*USER_TYPES, name="user_type"), nullable=False, default="customer")
    dark_mode = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_login = db.Column(db.DateTime)

    def set_password(self, raw):
        self.password = generate_password_hash(raw)

    def check_password(self, raw):
        return check_password_hash(self.password, raw)

    @property
    def is_admin(self):
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "userType": self.user_type,
            "darkMode": bool(self.dark_mode),
        }


# ---------------- Profile Models ----------------
class Farmer(db.Model):
    __tablename__ = "farmers"
    farmer_id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    contact_info = db.Column(db.String(50), nullable=False)
    address = db.Column(db.Text, nullable=False)
    farm_type = db.Column(db.String(50))
    crops_grown = db.Column(db.Text)
    profile_creation_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Vendor(db.Model):
    __tablename__ = "vendors"
    vendor_id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    business_details = db.Column(db.Text, nullable=False)
    contact_info = db.Column(db.String(50), nullable=False)
    address = db.Column(db.Text, nullable=False)
    profile_creation_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Customer(db.Model):
    __tablename__ = "customers"
    customer_id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    contact_info = db.Column(db.String(50), nullable=False)
    address = db.Column(db.Text, nullable=False)
    profile_creation_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


# ---------------- Catalog Models ----------------
class Crop(db.Model):
    __tablename__ = "crops"
    crop_id = db.Column(db.String(50), primary_key=True)
    type = db.Column(db.String(50), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    description = db.Column(db.Text)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_crop_qty_nonneg"),
        CheckConstraint("price >= 0", name="ck_crop_price_nonneg"),
    )


class Product(db.Model):
    __tablename__ = "products"
    product_id = db.Column(db.String(50), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    classification = db.Column(db.String(50))

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_product_qty_nonneg"),
        CheckConstraint("price >= 0", name="ck_product_price_nonneg"),
    )


class FarmerCrop(db.Model):
    __tablename__ = "farmer_crops"
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="CASCADE"), primary_key=True)
    crop_id = db.Column(db.String(50), db.ForeignKey("crops.crop_id", ondelete="CASCADE"), primary_key=True)


class VendorProduct(db.Model):
    __tablename__ = "vendor_products"
    vendor_id = db.Column(db.String(50), db.ForeignKey("vendors.vendor_id", ondelete="CASCADE"), primary_key=True)
    product_id = db.Column(db.String(50), db.ForeignKey("products.product_id", ondelete="CASCADE"), primary_key=True)


class FarmerInventory(db.Model):
    __tablename__ = "farmer_inventories"
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="CASCADE"), primary_key=True)
    crop_id = db.Column(db.String(50), db.ForeignKey("crops.crop_id", ondelete="CASCADE"), primary_key=True)
    stock_level = db.Column(db.Integer, nullable=False, default=0)
    low_stock_notification = db.Column(db.Boolean, default=False)

    __table_args__ = (CheckConstraint("stock_level >= 0", name="ck_farmer_stock_nonneg"),)


class VendorInventory(db.Model):
    __tablename__ = "vendor_inventories"
    vendor_id = db.Column(db.String(50), db.ForeignKey("vendors.vendor_id", ondelete="CASCADE"), primary_key=True)
    product_id = db.Column(db.String(50), db.ForeignKey("products.product_id", ondelete="CASCADE"), primary_key=True)
    stock_level = db.Column(db.Integer, nullable=False, default=0)
    low_stock_notification = db.Column(db.Boolean, default=False)

    __table_args__ = (CheckConstraint("stock_level >= 0", name="ck_vendor_stock_nonneg"),)


# ---------------- Order Models ----------------
class FarmerCustomerOrder(db.Model):
    __tablename__ = "farmer_customer_orders"
    order_id = db.Column(db.String(50), primary_key=True)
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="CASCADE"), nullable=False)
    customer_id = db.Column(db.String(50), db.ForeignKey("customers.customer_id", ondelete="CASCADE"), nullable=False)
    crop_id = db.Column(db.String(50), db.ForeignKey("crops.crop_id", ondelete="CASCADE"), nullable=False)
    order_type = db.Column(order_type_enum, nullable=False)
    order_status = db.Column(order_status_enum)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    order_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_fc_order_qty_nonneg"),)

    def to_dict(self):
        return {
            "orderId": self.order_id,
            "orderType": "farmer_customer",
            "farmerId": self.farmer_id,
            "customerId": self.customer_id,
            "cropId": self.crop_id,
            "quantity": self.quantity,
            "status": self.order_status,
            "orderDate": self.order_date.strftime("%Y-%m-%d"),
        }


class VendorFarmerOrder(db.Model):
    __tablename__ = "vendor_farmer_orders"
    order_id = db.Column(db.String(50), primary_key=True)
    vendor_id = db.Column(db.String(50), db.ForeignKey("vendors.vendor_id", ondelete="CASCADE"), nullable=False)
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.String(50), db.ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False)
    order_type = db.Column(order_type_enum, nullable=False)
    order_status = db.Column(order_status_enum)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    order_date = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_vf_order_qty_nonneg"),)

    def to_dict(self):
        return {
            "orderId": self.order_id,
            "orderType": "vendor_farmer",
            "vendorId": self.vendor_id,
            "farmerId": self.farmer_id,
            "productId": self.product_id,
            "quantity": self.quantity,
            "status": self.order_status,
            "orderDate": self.order_date.strftime("%Y-%m-%d"),
        }


# ---------------- Transaction Models ----------------
class FarmerCustomerTransaction(db.Model):
    __tablename__ = "farmer_customer_transactions"
    transaction_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(
        db.String(50), db.ForeignKey("farmer_customer_orders.order_id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    payment_mode = db.Column(db.String(50))
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    transaction_timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    commission = db.Column(db.Numeric(10, 2))

    __table_args__ = (CheckConstraint("amount >= 0", name="ck_fc_txn_amount_nonneg"),)


class VendorFarmerTransaction(db.Model):
    __tablename__ = "vendor_farmer_transactions"
    transaction_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(
        db.String(50), db.ForeignKey("vendor_farmer_orders.order_id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    payment_mode = db.Column(db.String(50))
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    transaction_timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    commission = db.Column(db.Numeric(10, 2))

    __table_args__ = (CheckConstraint("amount >= 0", name="ck_vf_txn_amount_nonneg"),)


# ---------------- Feedback Models ----------------
class FarmerCustomerFeedback(db.Model):
    __tablename__ = "farmer_customer_feedbacks"
    feedback_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(db.String(50), db.ForeignKey("farmer_customer_orders.order_id", ondelete="CASCADE"), nullable=False)
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="SET NULL"))
    customer_id = db.Column(db.String(50), db.ForeignKey("customers.customer_id", ondelete="SET NULL"))
    rating = db.Column(db.Integer, nullable=False)
    comments = db.Column(db.Text)
    feedback_timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_fc_feedback_rating"),)


class VendorFarmerFeedback(db.Model):
    __tablename__ = "vendor_farmer_feedbacks"
    feedback_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(db.String(50), db.ForeignKey("vendor_farmer_orders.order_id", ondelete="CASCADE"), nullable=False)
    farmer_id = db.Column(db.String(50), db.ForeignKey("farmers.farmer_id", ondelete="SET NULL"))
    vendor_id = db.Column(db.String(50), db.ForeignKey("vendors.vendor_id", ondelete="SET NULL"))
    rating = db.Column(db.Integer, nullable=False)
    comments = db.Column(db.Text)
    feedback_timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="ck_vf_feedback_rating"),)


# ---------------- Dispute Models ----------------
class FarmerCustomerDispute(db.Model):
    __tablename__ = "farmer_customer_disputes"
    dispute_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(db.String(50), db.ForeignKey("farmer_customer_orders.order_id", ondelete="CASCADE"), nullable=False)
    dispute_type = db.Column(dispute_type_enum, nullable=False)
    dispute_status = db.Column(dispute_status_enum)
    details = db.Column(db.Text)
    resolution_date = db.Column(db.Date)


class VendorFarmerDispute(db.Model):
    __tablename__ = "vendor_farmer_disputes"
    dispute_id = db.Column(db.String(50), primary_key=True)
    order_id = db.Column(db.String(50), db.ForeignKey("vendor_farmer_orders.order_id", ondelete="CASCADE"), nullable=False)
    dispute_type = db.Column(dispute_type_enum, nullable=False)
    dispute_status = db.Column(dispute_status_enum)
    details = db.Column(db.Text)
    resolution_date = db.Column(db.Date)
