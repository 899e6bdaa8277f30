# spendsense/web/routes/__init__.py

from .auth import bp as auth_bp
from .budget import bp as budget_bp
from .dashboard import bp as dashboard_bp
from .expenses import bp as expenses_bp
from .goals import bp as goals_bp
from .income import bp as income_bp
from .products import bp as products_bp
from .profile import bp as profile_bp
from .reports import bp as reports_bp

ALL_BLUEPRINTS = [
    auth_bp,
    dashboard_bp,
    expenses_bp,
    income_bp,
    budget_bp,
    goals_bp,
    products_bp,
    reports_bp,
    profile_bp,
]
