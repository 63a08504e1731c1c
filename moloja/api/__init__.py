"""
APIs REST
"""
from .auth import bp as auth_bp
from .profile import bp as profile_bp
from .products import bp as products_bp
from .meat_cuts import bp as meat_cuts_bp
from .supermarket_products import bp as supermarket_products_bp
from .sales import bp as sales_bp
from .expenses import bp as expenses_bp
from .credit_notes import bp as credit_notes_bp
from .dashboard import bp as dashboard_bp
from .reports import bp as reports_bp
from .voice import bp as voice_bp
from .voice_order_lists import bp as voice_order_lists_bp
from .images import bp as images_bp

__all__ = [
    "auth_bp",
    "profile_bp",
    "products_bp",
    "meat_cuts_bp",
    "supermarket_products_bp",
    "sales_bp",
    "expenses_bp",
    "credit_notes_bp",
    "dashboard_bp",
    "reports_bp",
    "voice_bp",
    "voice_order_lists_bp",
    "images_bp",
]
