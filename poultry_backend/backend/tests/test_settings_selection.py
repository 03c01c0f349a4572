import os
from unittest import mock

from django.test import SimpleTestCase

from backend.settings import ensure_settings_module


class SettingsSelectionTests(SimpleTestCase):
    def test_explicit_module_wins(self):
        with mock.patch.dict(
            os.environ,
            {"DJANGO_SETTINGS_MODULE": "backend.settings.prod", "DJANGO_ENV": "dev"},
        ):
            self.assertEqual(ensure_settings_module(), "backend.settings.prod")

    def test_package_name_falls_back_to_env(self):
        with mock.patch.dict(
            os.environ,
            {"DJANGO_SETTINGS_MODULE": "backend.settings", "DJANGO_ENV": "prod"},
        ):
            self.assertEqual(ensure_settings_module(), "backend.settings.prod")
            self.assertEqual(os.environ["DJANGO_SETTINGS_MODULE"], "backend.settings.prod")

    def test_defaults_to_dev(self):
        with mock.patch.dict(os.environ, {"DJANGO_SETTINGS_MODULE": ""}):
            os.environ.pop("DJANGO_ENV", None)
            self.assertEqual(ensure_settings_module(), "backend.settings.dev")

    def test_unknown_env_is_rejected(self):
        with mock.patch.dict(
            os.environ,
            {"DJANGO_SETTINGS_MODULE": "", "DJANGO_ENV": "staging"},
        ):
            with self.assertRaises(RuntimeError):
                ensure_settings_module()
