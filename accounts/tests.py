import json
from unittest.mock import Mock, patch

import requests
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.tokens import create_access_token, decode_access_token


PASSWORD = "Str0ng-Passw0rd!x"


class AuthApiTests(TestCase):
    def setUp(self):
        cache.clear()

    def _post(self, name, body):
        return self.client.post(reverse(name), data=json.dumps(body), content_type="application/json")

    def _signup(self, **overrides):
        body = {
            "email_inscrit": "Claire@Example.com",
            "mdp_inscrit": PASSWORD,
            "nom_inscrit": "Martin",
            "prenom_inscrit": "Claire",
            "civilite_inscrit": "Mme",
            "date_naissance": "1990-05-04",
        }
        body.update(overrides)
        return self._post("accounts:signup", body)

    def test_signup_returns_token_and_no_password(self):
        response = self._signup()
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data["user"]["email_inscrit"], "claire@example.com")
        self.assertEqual(data["user"]["type_inscrit"], "client")
        self.assertNotIn("mdp_inscrit", data["user"])
        payload = decode_access_token(data["token"])
        self.assertEqual(payload["sub"], str(data["user"]["id_inscrit"]))

    def test_short_password_rejected(self):
        response = self._signup(mdp_inscrit="court")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "mdp_inscrit")
        self.assertFalse(get_user_model().objects.exists())

    def test_duplicate_email_is_conflict(self):
        self._signup()
        response = self._signup(email_inscrit="claire@example.com")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()["error"], "CONFLICT")
        self.assertTrue(response.json()["retryable"])
        self.assertEqual(get_user_model().objects.count(), 1)

    def test_concurrent_signup_same_email_is_conflict(self):
        self._signup()
        # the other request passed the lookup before this one was saved
        with patch("accounts.forms.email_conflicts", return_value=False):
            response = self._signup(email_inscrit="claire@example.com")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(get_user_model().objects.count(), 1)

    def test_email_longer_than_username_rejected(self):
        email = "a" * 60 + "@" + "b" * 60 + "." + "c" * 25 + ".com"
        self.assertEqual(len(email), 151)
        response = self._signup(email_inscrit=email)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "email_inscrit")
        self.assertFalse(get_user_model().objects.exists())

    def test_login(self):
        self._signup()
        response = self._post("accounts:login", {"email_inscrit": "claire@example.com", "mdp_inscrit": PASSWORD})
        self.assertEqual(response.status_code, 200)
        self.assertIn("token", response.json())

    def test_login_wrong_password_is_generic(self):
        self._signup()
        response = self._post("accounts:login", {"email_inscrit": "claire@example.com", "mdp_inscrit": "x" * 12})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Email ou mot de passe incorrect")

    @override_settings(AUTH_RATE_LIMIT=2)
    def test_login_rate_limited(self):
        body = {"email_inscrit": "nobody@example.com", "mdp_inscrit": "x" * 12}
        self._post("accounts:login", body)
        self._post("accounts:login", body)
        response = self._post("accounts:login", body)
        self.assertEqual(response.status_code, 429)
        self.assertTrue(response.json()["retryable"])


@override_settings(RECAPTCHA_SECRET_KEY="secret")
class RecaptchaTests(TestCase):
    def setUp(self):
        cache.clear()

    def _login(self, token="tok"):
        body = {"email_inscrit": "nobody@example.com", "mdp_inscrit": "x" * 12}
        if token is not None:
            body["recaptchaToken"] = token
        return self.client.post(reverse("accounts:login"), data=json.dumps(body), content_type="application/json")

    def test_missing_token(self):
        response = self._login(token=None)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "recaptchaToken")

    @patch("core.recaptcha.requests.post")
    def test_rejected_token(self, post):
        post.return_value = Mock(json=Mock(return_value={"success": False, "error-codes": ["invalid-input-response"]}))
        response = self._login()
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "recaptchaToken")

    @patch("core.recaptcha.requests.post", side_effect=requests.Timeout)
    def test_upstream_down_is_retryable(self, post):
        response = self._login()
        self.assertEqual(response.status_code, 503)
        self.assertTrue(response.json()["retryable"])

    @patch("core.recaptcha.requests.post")
    def test_accepted_token_reaches_login(self, post):
        post.return_value = Mock(json=Mock(return_value={"success": True}))
        response = self._login()
        self.assertEqual(response.json()["message"], "Email ou mot de passe incorrect")
        self.assertEqual(post.call_args.kwargs["data"]["response"], "tok")


class ProfileApiTests(TestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            username="paul@example.com",
            email="paul@example.com",
            password=PASSWORD,
            first_name="Paul",
        )
        self.headers = {"HTTP_AUTHORIZATION": f"Bearer {create_access_token(self.user)}"}

    def _put(self, body):
        return self.client.put(
            reverse("accounts:profile"),
            data=json.dumps(body),
            content_type="application/json",
            **self.headers,
        )

    def test_get_profile(self):
        response = self.client.get(reverse("accounts:profile"), **self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["prenom_inscrit"], "Paul")

    def test_partial_update_keeps_other_fields(self):
        response = self._put({"phone": "0601020304", "adress": "1 rue de Paris"})
        self.assertEqual(response.status_code, 200)

        self.user.refresh_from_db()
        self.assertEqual(self.user.phone, "0601020304")
        self.assertEqual(self.user.address, "1 rue de Paris")
        self.assertEqual(self.user.first_name, "Paul")

    def test_password_is_rehashed(self):
        self._put({"password": "N0uveau-Passw0rd!"})
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("N0uveau-Passw0rd!"))

    def test_email_taken_by_someone_else(self):
        get_user_model().objects.create_user(username="anna@example.com", email="anna@example.com", password=PASSWORD)
        response = self._put({"email": "anna@example.com"})
        self.assertEqual(response.status_code, 409)
        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "paul@example.com")

    def test_inactive_member_token_rejected(self):
        self.user.is_active = False
        self.user.save(update_fields=["is_active"])
        response = self.client.get(reverse("accounts:profile"), **self.headers)
        self.assertEqual(response.status_code, 403)
