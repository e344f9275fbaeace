import json
import os
import unittest
from unittest.mock import patch

from backend import dependencies
from backend.config import Settings, get_settings
from backend.db import FirestoreDbClient, InMemoryDbClient
from backend.firebase import FirebaseConfigError, get_firebase_app, load_credential
from backend.identity import FirebaseIdentityClient, InMemoryIdentityClient


class SettingsTests(unittest.TestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 5000)
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertIsNone(settings.firebase_key)
        self.assertFalse(settings.use_in_memory_backends)
        self.assertEqual(settings.cors_origins, ["*"])

    @patch.dict(
        os.environ,
        {
            "PORT": "8080",
            "FIREBASE_KEY": '{"type": "service_account"}',
            "USE_IN_MEMORY_BACKENDS": "true",
            "CORS_ORIGINS": '["https://shop.example.com"]',
        },
        clear=True,
    )
    def test_environment(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 8080)
        self.assertEqual(settings.firebase_key, '{"type": "service_account"}')
        self.assertTrue(settings.use_in_memory_backends)
        self.assertEqual(settings.cors_origins, ["https://shop.example.com"])


class FirebaseBootstrapTests(unittest.TestCase):
    def test_no_key_uses_default_credentials(self):
        self.assertIsNone(load_credential(None))
        self.assertIsNone(load_credential(""))

    def test_invalid_json(self):
        with self.assertRaises(FirebaseConfigError):
            load_credential("{not json")

    @patch("backend.firebase.credentials.Certificate")
    def test_service_account_json(self, mock_certificate):
        key = {"type": "service_account", "project_id": "shop"}
        credential = load_credential(json.dumps(key))
        mock_certificate.assert_called_once_with(key)
        self.assertIs(credential, mock_certificate.return_value)

    @patch("backend.firebase.firebase_admin.initialize_app")
    @patch("backend.firebase.firebase_admin.get_app")
    def test_existing_app_is_reused(self, mock_get_app, mock_initialize):
        self.assertIs(get_firebase_app(None), mock_get_app.return_value)
        mock_initialize.assert_not_called()

    @patch("backend.firebase.firebase_admin.initialize_app")
    @patch("backend.firebase.firebase_admin.get_app", side_effect=ValueError)
    def test_app_initialized_when_missing(self, mock_get_app, mock_initialize):
        self.assertIs(get_firebase_app(None), mock_initialize.return_value)
        mock_initialize.assert_called_once_with(None)


class DependencyWiringTests(unittest.TestCase):
    def setUp(self):
        get_settings.cache_clear()
        dependencies._db_client = None
        dependencies._identity_client = None

    def tearDown(self):
        get_settings.cache_clear()
        dependencies._db_client = None
        dependencies._identity_client = None

    @patch.dict(os.environ, {"USE_IN_MEMORY_BACKENDS": "true"}, clear=True)
    def test_in_memory_singletons(self):
        db = dependencies.get_db_client()
        identity = dependencies.get_identity_client()
        self.assertIsInstance(db, InMemoryDbClient)
        self.assertIsInstance(identity, InMemoryIdentityClient)
        self.assertIs(dependencies.get_db_client(), db)
        self.assertIs(dependencies.get_identity_client(), identity)

    @patch.dict(os.environ, {}, clear=True)
    @patch("backend.db.firestore.client")
    @patch("backend.dependencies.get_firebase_app")
    def test_missing_key_uses_firebase_clients(self, mock_app, mock_firestore):
        db = dependencies.get_db_client()
        identity = dependencies.get_identity_client()
        self.assertIsInstance(db, FirestoreDbClient)
        self.assertIsInstance(identity, FirebaseIdentityClient)
        mock_app.assert_called_with(None)
        mock_firestore.assert_called_once_with(mock_app.return_value)
        self.assertIs(db.client, mock_firestore.return_value)
        self.assertIs(identity.app, mock_app.return_value)

    @patch.dict(os.environ, {"FIREBASE_KEY": "{}"}, clear=True)
    @patch("backend.db.firestore.client")
    @patch("backend.dependencies.get_firebase_app")
    def test_service_account_key_is_passed(self, mock_app, mock_firestore):
        self.assertIsInstance(dependencies.get_db_client(), FirestoreDbClient)
        mock_app.assert_called_once_with("{}")


if __name__ == "__main__":
    unittest.main()
