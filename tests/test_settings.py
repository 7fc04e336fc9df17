from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from histsift import settings
from histsift.settings import SearchMode, Style


class SettingsLoadingTests(unittest.TestCase):
    def _load(self, payload: str | None, env: dict[str, str] | None = None) -> settings.Settings:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            if payload is not None:
                config_path.write_text(payload, encoding="utf-8")
            with mock.patch("histsift.settings.CONFIG_PATH", config_path), mock.patch.dict(
                "histsift.settings.os.environ", env or {}, clear=True
            ):
                return settings.load_settings()

    def test_missing_config_uses_defaults(self) -> None:
        loaded = self._load(None)
        self.assertEqual(loaded.search_mode, SearchMode.FUZZY)
        self.assertEqual(loaded.style, Style.AUTO)
        self.assertEqual(loaded.db_path, settings.DEFAULT_DB_PATH)

    def test_values_are_read_case_insensitively(self) -> None:
        loaded = self._load(json.dumps({"search_mode": "Prefix", "style": "COMPACT", "db_path": "/data/h.db"}))
        self.assertEqual(loaded.search_mode, SearchMode.PREFIX)
        self.assertEqual(loaded.style, Style.COMPACT)
        self.assertEqual(loaded.db_path, Path("/data/h.db"))

    def test_unknown_values_fall_back(self) -> None:
        loaded = self._load(json.dumps({"search_mode": "regex", "style": 3}))
        self.assertEqual(loaded.search_mode, SearchMode.FUZZY)
        self.assertEqual(loaded.style, Style.AUTO)

    def test_malformed_json_falls_back(self) -> None:
        self.assertEqual(self._load("{not json"), settings.Settings())
        self.assertEqual(self._load("[1, 2]"), settings.Settings())

    def test_environment_overrides_db_path(self) -> None:
        loaded = self._load(json.dumps({"db_path": "/data/h.db"}), env={settings.DB_PATH_ENV: "/env/h.db"})
        self.assertEqual(loaded.db_path, Path("/env/h.db"))


if __name__ == "__main__":
    unittest.main()
