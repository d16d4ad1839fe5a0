import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from bson import ObjectId
from fastapi.testclient import TestClient

from app.config import settings
from app.core.security import create_session_token, hash_password
from app.database.mongo import get_db
from app.main import app
from app.services.payment_gateway import PaymentResult, get_payment_gateway


def user_doc(role="user", **overrides):
    doc = {
        "_id": ObjectId(),
        "name": "Meera",
        "email": "meera@example.com",
        "password": hash_password("cake1234"),
        "role": role,
        "login_count": 0,
        "created_at": datetime.now(timezone.utc),
    }
    doc.update(overrides)
    return doc


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.db = MagicMock()
        self.collections = {
            "users": MagicMock(),
            "orders": MagicMock(),
            "products": MagicMock(),
        }
        self.db.__getitem__.side_effect = lambda name: self.collections[name]
        app.dependency_overrides[get_db] = lambda: self.db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

        mail_patcher = patch("app.services.auth_service.mail_tasks")
        self.mail_tasks = mail_patcher.start()
        self.addCleanup(mail_patcher.stop)

    @property
    def users(self):
        return self.collections["users"]

    def store_users(self, *docs):
        """Serve `users.find_one` lookups by id or email from the given docs."""

        def find_one(query):
            for doc in docs:
                if all(doc.get(key) == value for key, value in query.items()):
                    return doc
            return None

        self.users.find_one.side_effect = find_one

    def sign_in_as(self, doc, *others):
        token = create_session_token(str(doc["_id"]), doc["role"])
        self.client.headers["Authorization"] = f"Bearer {token}"
        self.store_users(doc, *others)
        return token


class TestAuthRoutes(ApiTestCase):
    def test_signup_missing_fields_is_bad_request(self):
        response = self.client.post("/api/auth/signup", json={"email": "a@example.com"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"success": False, "message": "All fields are required"}
        )

    def test_signup_duplicate_email(self):
        self.users.find_one.return_value = user_doc()

        response = self.client.post(
            "/api/auth/signup",
            json={"name": "Meera", "email": "meera@example.com", "password": "cake1234"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "User already exists")
        self.users.insert_one.assert_not_called()

    def test_signup_creates_user_without_exposing_secrets(self):
        self.users.find_one.return_value = None
        self.users.insert_one.return_value = MagicMock(inserted_id=ObjectId())

        response = self.client.post(
            "/api/auth/signup",
            json={"name": "Meera", "email": "meera@example.com", "password": "cake1234"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["user"]["email"], "meera@example.com")
        self.assertNotIn("password", body["user"])
        self.assertNotIn("verify_token", body["user"])
        stored = self.users.insert_one.call_args.args[0]
        self.assertNotEqual(stored["password"], "cake1234")
        self.mail_tasks.send_verification_email.delay.assert_called_once()

    def test_signin_sets_session_cookie(self):
        doc = user_doc()
        self.users.find_one.return_value = doc
        self.users.find_one_and_update.return_value = {**doc, "login_count": 1}

        response = self.client.post(
            "/api/auth/signin",
            json={"email": "meera@example.com", "password": "cake1234"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["login_count"], 1)
        self.assertEqual(response.cookies.get("sign_in"), body["sign_in"])
        update = self.users.find_one_and_update.call_args.args[1]
        self.assertEqual(update, {"$inc": {"login_count": 1}})

    def test_signin_wrong_password(self):
        self.users.find_one.return_value = user_doc()

        response = self.client.post(
            "/api/auth/signin",
            json={"email": "meera@example.com", "password": "nope"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Invalid email or password.")

    def test_get_user_from_token_requires_session(self):
        response = self.client.get("/api/auth/getuserfromtoken")
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json()["success"])

    def test_get_user_from_token_accepts_cookie_and_bearer(self):
        doc = user_doc()
        self.store_users(doc)
        token = create_session_token(str(doc["_id"]), "user")

        response = self.client.get(
            "/api/auth/getuserfromtoken", headers={"Cookie": f"sign_in={token}"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["_id"], str(doc["_id"]))

        response = self.client.get(
            "/api/auth/getuserfromtoken", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 200)

    def test_expired_or_forged_token_is_unauthorized(self):
        response = self.client.get(
            "/api/auth/getuserfromtoken", headers={"Cookie": "sign_in=forged.token.value"}
        )
        self.assertEqual(response.status_code, 401)

    def test_signout_clears_cookie(self):
        response = self.client.post("/api/auth/signout")
        self.assertEqual(response.status_code, 200)
        self.assertIn("sign_in=", response.headers["set-cookie"])

    def test_update_password_on_someone_elses_account_is_forbidden(self):
        other = user_doc(email="other@example.com")
        self.sign_in_as(user_doc(), other)

        response = self.client.put(
            f"/api/auth/user/update/password/{other['_id']}",
            json={"old_password": "cake1234", "new_password": "newcake"},
        )

        self.assertEqual(response.status_code, 403)
        self.users.find_one_and_update.assert_not_called()

    def test_update_password_for_unknown_user(self):
        self.sign_in_as(user_doc())

        response = self.client.put(
            f"/api/auth/user/update/password/{ObjectId()}",
            json={"old_password": "cake1234", "new_password": "newcake"},
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "User not found")

    def test_update_own_password(self):
        doc = user_doc()
        self.sign_in_as(doc)
        self.users.find_one_and_update.return_value = doc

        response = self.client.put(
            f"/api/auth/user/update/password/{doc['_id']}",
            json={"old_password": "cake1234", "new_password": "newcake"},
        )

        self.assertEqual(response.status_code, 200)
        query, update = self.users.find_one_and_update.call_args.args
        self.assertEqual(query, {"_id": doc["_id"]})
        self.assertIn("password", update["$set"])
        self.assertEqual(
            update["$unset"], {"reset_password_token": "", "reset_password_expires": ""}
        )


class TestAdminRoutes(ApiTestCase):
    def test_non_admin_cannot_list_users(self):
        doc = self.sign_in_as_doc("user")

        response = self.client.get(f"/api/auth/admin/dashboard/{doc['_id']}/users")

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["message"], "Admin privileges required")

    def test_admin_id_must_match_session(self):
        self.sign_in_as_doc("admin")

        response = self.client.get(f"/api/auth/admin/dashboard/{ObjectId()}/users")

        self.assertEqual(response.status_code, 403)

    def test_admin_lists_users(self):
        doc = self.sign_in_as_doc("admin")
        self.users.find.return_value.sort.return_value = [doc, user_doc()]

        response = self.client.get(f"/api/auth/admin/dashboard/{doc['_id']}/users")

        self.assertEqual(response.status_code, 200)
        users = response.json()["users"]
        self.assertEqual(len(users), 2)
        self.assertTrue(all("password" not in u for u in users))

    def test_role_must_be_known(self):
        admin, target = user_doc(role="admin"), user_doc(email="t@example.com")
        self.sign_in_as(admin, target)

        response = self.client.put(
            f"/api/auth/admin/dashboard/{admin['_id']}/users/{target['_id']}/update/role",
            json={"role": "superuser"},
        )

        self.assertEqual(response.status_code, 400)
        self.users.find_one_and_update.assert_not_called()

    def test_admin_promotes_user(self):
        admin, target = user_doc(role="admin"), user_doc(email="t@example.com")
        self.sign_in_as(admin, target)
        self.users.find_one_and_update.return_value = {**target, "role": "admin"}

        response = self.client.put(
            f"/api/auth/admin/dashboard/{admin['_id']}/users/{target['_id']}/update/role",
            json={"role": "admin"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["role"], "admin")
        query, _ = self.users.find_one_and_update.call_args.args
        self.assertEqual(query, {"_id": target["_id"]})

    def sign_in_as_doc(self, role):
        doc = user_doc(role=role)
        self.sign_in_as(doc)
        return doc


class TestOrderRoutes(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.gateway = MagicMock()
        self.gateway.charge.return_value = PaymentResult(
            id="order_Q1", receipt="r", status="created"
        )
        app.dependency_overrides[get_payment_gateway] = lambda: self.gateway

    def test_create_order_requires_session(self):
        response = self.client.post("/api/orders", json={})
        self.assertEqual(response.status_code, 401)

    def test_create_order(self):
        doc = user_doc()
        self.sign_in_as(doc)
        product_id = ObjectId()
        self.collections["orders"].insert_one.return_value = MagicMock(
            inserted_id=ObjectId()
        )
        self.collections["products"].find_one_and_update.return_value = {
            "_id": product_id,
            "name": "Truffle",
            "stock": 7,
            "sold": 3,
        }

        response = self.client.post(
            "/api/orders",
            json={
                "shipping_info": {
                    "address": "4 MG Road",
                    "city": "Bengaluru",
                    "phone_no": "9876543210",
                    "postal_code": "560001",
                    "state": "KA",
                },
                "order_items": [
                    {"product_id": str(product_id), "name": "Truffle", "quantity": 3, "price": 350}
                ],
                "total_amount": 1050,
            },
        )

        self.assertEqual(response.status_code, 200)
        order = response.json()["order"]
        self.assertEqual(order["user"], str(doc["_id"]))
        self.assertEqual(order["payment_info"]["id"], "order_Q1")
        self.assertEqual(order["order_status"], "Processing")
        self.collections["products"].find_one_and_update.assert_called_once()
        query, update = self.collections["products"].find_one_and_update.call_args.args
        self.assertEqual(query, {"_id": product_id})
        self.assertEqual(update, {"$inc": {"sold": 3, "stock": -3}})

    def test_create_order_with_no_items_is_rejected(self):
        self.sign_in_as(user_doc())

        response = self.client.post(
            "/api/orders",
            json={
                "shipping_info": {
                    "address": "4 MG Road",
                    "city": "Bengaluru",
                    "phone_no": "9876543210",
                    "postal_code": "560001",
                    "state": "KA",
                },
                "order_items": [],
                "total_amount": 10,
            },
        )

        self.assertEqual(response.status_code, 400)
        self.gateway.charge.assert_not_called()

    def test_non_admin_cannot_update_status(self):
        self.sign_in_as(user_doc())

        response = self.client.put(
            f"/api/orders/{ObjectId()}/status", json={"order_status": "Shipped"}
        )

        self.assertEqual(response.status_code, 403)


class TestCheckoutWithoutPaymentCredentials(ApiTestCase):
    def setUp(self):
        super().setUp()
        for key in ("RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"):
            patcher = patch.object(settings, key, "")
            patcher.start()
            self.addCleanup(patcher.stop)
        self.sign_in_as(user_doc())

    def order_body(self, items):
        return {
            "shipping_info": {
                "address": "4 MG Road",
                "city": "Bengaluru",
                "phone_no": "9876543210",
                "postal_code": "560001",
                "state": "KA",
            },
            "order_items": items,
            "total_amount": 350,
        }

    def test_invalid_body_is_still_bad_request(self):
        response = self.client.post("/api/orders", json=self.order_body([]))

        self.assertEqual(response.status_code, 400)

    def test_checkout_reports_payment_failure(self):
        items = [{"product_id": str(ObjectId()), "quantity": 1, "price": 350}]

        response = self.client.post("/api/orders", json=self.order_body(items))

        self.assertEqual(response.status_code, 502)
        self.assertEqual(
            response.json(),
            {"success": False, "message": "Payment could not be initiated"},
        )
        self.collections["orders"].insert_one.assert_not_called()


class TestServiceRoutes(ApiTestCase):
    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertIn("X-Request-ID", response.headers)

    def test_database_health(self):
        self.db.command.return_value = {"ok": 1}
        response = self.client.get("/api/health/db")
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
