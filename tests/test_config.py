"""Tests for the YAML TV registry."""

import os
import tempfile
import textwrap
import unittest

from lgtv_ipcontrol.client import DEFAULT_PORT, DEFAULT_SALT, LGTVClient
from lgtv_ipcontrol.config import TVRegistry
from lgtv_ipcontrol.errors import ValidationError


class TestTVRegistry(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "tvs.yaml")

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, content):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(textwrap.dedent(content))

    def test_load(self):
        self._write("""
            living_room:
              host: 192.168.0.2
              keycode: ABCDEFGH
              mac_address: "DE:AD:BE:EF:00:01"
              broadcast: 192.168.0.255
            Bedroom:
              host: 192.168.0.3
              port: 9762
              keycode: HGFEDCBA
              salt: 00-01-02-03-04-05-06-07-08-09-0a-0b-0c-0d-0e-0f
        """)
        registry = TVRegistry(self.path)

        self.assertEqual(sorted(registry.names()), ["bedroom", "living_room"])

        living_room = registry.get("living_room")
        self.assertEqual(living_room.host, "192.168.0.2")
        self.assertEqual(living_room.port, DEFAULT_PORT)
        self.assertEqual(living_room.salt, DEFAULT_SALT)
        self.assertEqual(living_room.mac_address, "DE:AD:BE:EF:00:01")
        self.assertEqual(living_room.broadcast, "192.168.0.255")

        bedroom = registry.get("BEDROOM")
        self.assertEqual(bedroom.name, "Bedroom")
        self.assertEqual(bedroom.port, 9762)
        self.assertEqual(bedroom.salt, bytes(range(16)))

    def test_missing_file(self):
        registry = TVRegistry(os.path.join(self.tmpdir.name, "missing.yaml"))
        self.assertEqual(registry.names(), [])

    def test_empty_file(self):
        self._write("")
        self.assertEqual(TVRegistry(self.path).names(), [])

    def test_malformed_yaml(self):
        self._write("tv: [unclosed\n")
        with self.assertRaises(ValidationError) as ctx:
            TVRegistry(self.path)
        self.assertIn("Cannot read", str(ctx.exception))

    def test_unreadable_path(self):
        with self.assertRaises(ValidationError):
            TVRegistry(self.tmpdir.name)

    def test_not_a_mapping(self):
        self._write("- just\n- a list\n")
        with self.assertRaises(ValidationError):
            TVRegistry(self.path)

    def test_incomplete_entries_skipped(self):
        self._write("""
            no_keycode:
              host: 192.168.0.2
            no_host:
              keycode: ABCDEFGH
            scalar: 42
            ok:
              host: 192.168.0.4
              keycode: ABCDEFGH
        """)
        self.assertEqual(TVRegistry(self.path).names(), ["ok"])

    def test_bad_salt(self):
        self._write("""
            tv:
              host: 192.168.0.2
              keycode: ABCDEFGH
              salt: 00-11
        """)
        with self.assertRaises(ValidationError) as ctx:
            TVRegistry(self.path)
        self.assertIn("TV 'tv'", str(ctx.exception))

    def test_bad_mac_address(self):
        self._write("""
            tv:
              host: 192.168.0.2
              keycode: ABCDEFGH
              mac_address: "GG:00:00:00:00:00"
        """)
        with self.assertRaises(ValidationError):
            TVRegistry(self.path)

    def test_bad_port(self):
        self._write("""
            tv:
              host: 192.168.0.2
              keycode: ABCDEFGH
              port: ninety
        """)
        with self.assertRaises(ValidationError):
            TVRegistry(self.path)

    def test_unknown_tv(self):
        self._write("""
            tv:
              host: 192.168.0.2
              keycode: ABCDEFGH
        """)
        with self.assertRaises(ValidationError) as ctx:
            TVRegistry(self.path).get("kitchen")
        self.assertIn("kitchen", str(ctx.exception))

    def test_create_client(self):
        self._write("""
            tv:
              host: 192.168.0.2
              keycode: ABCDEFGH
        """)
        lgtv = TVRegistry(self.path).get("tv").create_client()
        self.assertIsInstance(lgtv, LGTVClient)
        self.assertEqual((lgtv.host, lgtv.port), ("192.168.0.2", DEFAULT_PORT))


if __name__ == "__main__":
    unittest.main()
