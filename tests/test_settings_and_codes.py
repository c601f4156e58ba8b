import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from core.codes import FACULTY_CODE_ALPHABET, FACULTY_CODE_LENGTH, generate_faculty_code
from core.db import get_engine
from core.settings import DEFAULT_DB_URL, load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.db.url, DEFAULT_DB_URL)
        self.assertFalse(settings.db.echo)
        self.assertEqual(settings.admin.roles, ("superadmin",))
        self.assertEqual(settings.log_level, "INFO")

    def test_environment_overrides(self):
        env = {
            "APP_DB_URL": "sqlite:///tmp/x.db",
            "APP_DB_ECHO": "yes",
            "APP_ADMIN_EMAIL": " Boss@Example.org ",
            "APP_ADMIN_ROLES": "tech_admin, director ,",
            "APP_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.db.url, "sqlite:///tmp/x.db")
        self.assertTrue(settings.db.echo)
        self.assertEqual(settings.admin.email, "boss@example.org")
        self.assertEqual(settings.admin.roles, ("tech_admin", "director"))
        self.assertEqual(settings.log_level, "DEBUG")


class TestEngine(unittest.TestCase):
    def test_sqlite_directory_is_created(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "nested" / "app.db"
            engine = get_engine(f"sqlite:///{db_path}")
            try:
                self.assertTrue(db_path.parent.is_dir())
                self.assertIs(get_engine(f"sqlite:///{db_path}"), engine)
            finally:
                engine.dispose()


class TestFacultyCode(unittest.TestCase):
    def test_shape(self):
        for _ in range(100):
            code = generate_faculty_code()
            self.assertEqual(len(code), FACULTY_CODE_LENGTH)
            self.assertTrue(set(code) <= set(FACULTY_CODE_ALPHABET))
            self.assertEqual(code, code.upper())

    def test_custom_length(self):
        self.assertEqual(len(generate_faculty_code(8)), 8)


if __name__ == "__main__":
    unittest.main()
