# spendsense/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Supabase settings
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Flask session signing
FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-secret-key-change-me")

# Open Food Facts catalog (barcode fallback)
CATALOG_BASE_URL = os.getenv("CATALOG_BASE_URL", "https://world.openfoodfacts.org")
# Kept between 10 and 15 seconds
CATALOG_TIMEOUT = min(max(float(os.getenv("CATALOG_TIMEOUT", "10")), 10.0), 15.0)
CATALOG_USER_AGENT = os.getenv("CATALOG_USER_AGENT", "SpendSense/1.0 (https://spendsense.com)")
CATALOG_FIELDS = "code,product_name,brands,categories_tags_en,image_url"

# Budget defaults
DEFAULT_BUDGET_AMOUNT = 10000
RECENT_ITEMS_LIMIT = int(os.getenv("RECENT_ITEMS_LIMIT", "5"))

# "all_time" keeps goal progress on lifetime category totals; "month" limits it to the current month
GOAL_SPENT_WINDOW = os.getenv("GOAL_SPENT_WINDOW", "all_time")
