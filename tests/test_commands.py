"""Tests for the command table and template resolution."""

import unittest

from lgtv_ipcontrol.commands import COMMANDS, get_command, resolve_command
from lgtv_ipcontrol.errors import ValidationError


class TestResolveCommand(unittest.TestCase):

    def test_table(self):
        cases = [
            ("power", "off", [], ("POWER off",)),
            ("query", "volume", [], ("CURRENT_VOL",)),
            ("query", "mute", [], ("MUTE_STATE",)),
            ("query", "current-app", [], ("CURRENT_APP",)),
            ("query", "mac-addresses", [], ("GET_MACADDRESS wired", "GET_MACADDRESS wifi")),
            ("set", "volume", ["12"], ("VOLUME_CONTROL 12",)),
            ("set", "mute", ["on"], ("VOLUME_MUTE on",)),
            ("set", "input", ["HDMI_1"], ("INPUT_SELECT HDMI_1",)),
            ("key", "press", ["volumeup"], ("KEY_ACTION volumeup",)),
            ("custom", "command", ["POWER", "off"], ("POWER off",)),
        ]
        for name, action, parameters, expected in cases:
            with self.subTest(name=name, action=action):
                self.assertEqual(resolve_command(name, action, parameters), expected)

    def test_extra_parameters_ignored_without_placeholder(self):
        self.assertEqual(resolve_command("power", "off", ["now"]), ("POWER off",))

    def test_missing_parameter(self):
        with self.assertRaises(ValidationError):
            resolve_command("set", "volume")
        with self.assertRaises(ValidationError):
            resolve_command("custom", "command", [])

    def test_unknown_command(self):
        with self.assertRaises(ValidationError) as ctx:
            resolve_command("reboot", "now")
        self.assertIn("power", str(ctx.exception))

    def test_unknown_action(self):
        with self.assertRaises(ValidationError) as ctx:
            resolve_command("power", "on")
        self.assertIn("'on'", str(ctx.exception))


class TestCommandTable(unittest.TestCase):

    def test_table_is_read_only(self):
        with self.assertRaises(TypeError):
            COMMANDS["power"] = None
        with self.assertRaises(TypeError):
            get_command("power").actions["on"] = ("POWER on",)

    def test_after_help_lists_actions(self):
        help_text = get_command("query").after_help
        for action in ("current-app", "mac-addresses", "mute", "volume"):
            self.assertIn(f"+ {action}", help_text)


if __name__ == "__main__":
    unittest.main()
