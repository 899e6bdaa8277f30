# spendsense/tests/test_web.py
import unittest
from unittest.mock import MagicMock, patch

from supabase import Client

from spendsense.web.app_setup import create_app
from spendsense.web.auth import ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY

BARCODE = "4800016644290"


class TestWebApp(unittest.TestCase):
    def setUp(self):
        self.mock_supabase_client = MagicMock(spec=Client)
        self.mock_supabase_client.auth = MagicMock()
        self.mock_supabase_client.postgrest = MagicMock()
        self.mock_table_methods = MagicMock()
        for method in ("insert", "upsert", "select", "delete", "eq", "gte", "lte", "order", "limit"):
            getattr(self.mock_table_methods, method).return_value = self.mock_table_methods
        self.mock_execute = MagicMock(data=[])
        self.mock_table_methods.execute.return_value = self.mock_execute
        self.mock_supabase_client.table.return_value = self.mock_table_methods

        self.app = create_app({
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "SUPABASE_CLIENT_FACTORY": lambda: self.mock_supabase_client,
        })
        self.client = self.app.test_client()

    def sign_in(self):
        user = MagicMock(id="user-1", email="ana@example.com", user_metadata={"username": "Ana"}, created_at=None)
        auth_session = MagicMock(access_token="access-1", refresh_token="refresh-1")
        self.mock_supabase_client.auth.set_session.return_value = MagicMock(user=user, session=auth_session)
        with self.client.session_transaction() as sess:
            sess[ACCESS_TOKEN_KEY] = "access-1"
            sess[REFRESH_TOKEN_KEY] = "refresh-1"

    def test_health(self):
        response = self.client.get("/health")
        self.assertEqual(response.status_code, 200)

    def test_writes_require_login(self):
        response = self.client.post("/expenses", json={"amount": 10, "description": "Lunch", "category": "food"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Not authenticated")

    def test_anonymous_dashboard_uses_default_budget(self):
        response = self.client.get("/dashboard")
        data = response.get_json()
        self.assertEqual(response.status_code, 200)
        self.assertFalse(data["authenticated"])
        self.assertEqual(data["total_budget"], 10000)
        self.assertEqual(data["total_spent"], 0)
        self.assertEqual(data["errors"], [])

    def test_json_keeps_field_order(self):
        self.assertFalse(self.app.json.sort_keys)
        response = self.client.get("/dashboard")
        self.assertEqual(list(response.get_json())[:3], ["authenticated", "month", "year"])

    def test_add_expense(self):
        self.sign_in()
        self.mock_execute.data = [{"id": "e1", "amount": 150.0}]

        response = self.client.post("/expenses", json={"amount": "150", "description": "Lunch", "category": "food"})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["expense"], {"id": "e1", "amount": 150.0})
        self.mock_supabase_client.auth.set_session.assert_called_once_with("access-1", "refresh-1")
        self.mock_supabase_client.postgrest.auth.assert_called_with("access-1")

    def test_invalid_goal_is_bad_request(self):
        self.sign_in()
        response = self.client.post("/budget-goals", json={"category": "food", "target_amount": "abc"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Target amount must be a positive number")

    def test_store_failure_is_server_error(self):
        self.sign_in()
        self.mock_table_methods.execute.side_effect = Exception("connection reset")
        response = self.client.post("/budget-goals", json={"category": "food", "target_amount": 500})
        self.assertEqual(response.status_code, 500)

    def test_expired_session_is_anonymous(self):
        self.sign_in()
        self.mock_supabase_client.auth.set_session.side_effect = Exception("refresh token revoked")
        response = self.client.get("/profile")
        self.assertEqual(response.status_code, 401)

    def test_profile(self):
        self.sign_in()
        response = self.client.get("/profile")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["profile"]["username"], "Ana")

    def test_lookup_requires_barcode(self):
        response = self.client.get("/products/lookup")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Barcode is required")

    def test_lookup_invalid_barcode(self):
        response = self.client.get("/products/lookup?barcode=12ab")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Invalid barcode format")

    @patch('requests.get')
    def test_lookup_not_found(self, mock_get):
        mock_get.return_value = MagicMock(status_code=404)
        response = self.client.get(f"/products/lookup?barcode={BARCODE}")
        data = response.get_json()
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(data["product"])
        self.assertEqual(data["message"], "Product not found")

    def test_lookup_from_user_cache(self):
        self.sign_in()
        self.mock_execute.data = [{"barcode": BARCODE, "name": "Lucky Me", "price": 25.5, "category": "food"}]
        with patch('requests.get') as mock_get:
            response = self.client.get(f"/products/lookup?barcode={BARCODE}")
        self.assertEqual(response.get_json()["source"], "user")
        mock_get.assert_not_called()

    def test_scan_saves_product_and_expense(self):
        self.sign_in()
        self.mock_execute.data = [{"id": "e1"}]

        response = self.client.post("/products/scan", json={
            "barcode": BARCODE, "name": "Rice 1kg", "price": "55", "quantity": 2, "category": "food",
        })

        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.get_json()["product_saved"])
        upserted = self.mock_table_methods.upsert.call_args[0][0]
        self.assertEqual(upserted["price"], 55.0)
        inserted = self.mock_table_methods.insert.call_args[0][0]
        self.assertEqual(inserted["description"], "Rice 1kg (x2)")
        self.assertEqual(inserted["amount"], 110.0)

    def test_scan_without_saving(self):
        self.sign_in()
        response = self.client.post("/products/scan", json={
            "barcode": BARCODE, "name": "Rice 1kg", "price": 55, "category": "food", "save_for_later": False,
        })
        self.assertEqual(response.status_code, 201)
        self.assertFalse(response.get_json()["product_saved"])
        self.mock_table_methods.upsert.assert_not_called()

    def test_failed_scan_expense_leaves_cache_untouched(self):
        self.sign_in()
        self.mock_table_methods.execute.side_effect = Exception("connection reset")

        response = self.client.post("/products/scan", json={
            "barcode": BARCODE, "name": "Rice 1kg", "price": 55, "category": "food",
        })

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json()["error"], "connection reset")
        self.mock_table_methods.insert.assert_called_once()
        self.mock_table_methods.upsert.assert_not_called()

    def test_scan_requires_price(self):
        self.sign_in()
        response = self.client.post("/products/scan", json={"barcode": BARCODE, "name": "Rice", "price": ""})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Please enter a valid price")

    def test_report_rejects_unknown_period(self):
        response = self.client.get("/reports?period=decade")
        self.assertEqual(response.status_code, 400)

    def test_empty_chart_has_no_content(self):
        response = self.client.get("/reports/charts/categories.png")
        self.assertEqual(response.status_code, 204)

    def test_unknown_chart(self):
        response = self.client.get("/reports/charts/pie.png")
        self.assertEqual(response.status_code, 404)

    def test_logout_clears_session(self):
        self.sign_in()
        response = self.client.post("/auth/logout")
        self.assertEqual(response.status_code, 200)
        self.mock_supabase_client.auth.sign_out.assert_called_once()
        with self.client.session_transaction() as sess:
            self.assertNotIn(ACCESS_TOKEN_KEY, sess)


if __name__ == '__main__':
    unittest.main()
