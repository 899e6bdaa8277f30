# spendsense/main.py
import sys
import traceback

from dotenv import load_dotenv

from spendsense.web.app_setup import create_app

print("DEBUG: Starting spendsense/main.py")

# --- Application setup at module scope (runs once when the WSGI server imports it) ---
try:
    load_dotenv()
    print("DEBUG: Environment variables loaded.")

    flask_app = create_app()

    # Gunicorn serves this name: gunicorn spendsense.main:wsgi_app
    wsgi_app = flask_app
    print("DEBUG: wsgi_app ready.")

except Exception as e:
    print(f"ERROR: Critical error while initializing spendsense/main.py: {e}", file=sys.stderr)
    traceback.print_exc(file=sys.stderr)
    raise


if __name__ == "__main__":
    flask_app.run(debug=True)
