"""End-to-end tests for the command facade against a loopback TV."""

import logging
import unittest
from unittest import mock

from lgtv_ipcontrol import client
from lgtv_ipcontrol.client import (
    COMMAND_DELAY,
    DEFAULT_SALT,
    LGTVClient,
    build_magic_packet,
    send_command,
    send_wol_packet,
)
from lgtv_ipcontrol.errors import (
    CryptoError,
    LGTVError,
    ProtocolError,
    TransportError,
    ValidationError,
)
from lgtv_ipcontrol.models import TransportTimeouts

from tests.fake_tv import FakeTV, unused_port

TIMEOUTS = TransportTimeouts(connect=2.0, io=0.5, quiet=0.1)

STATUS = {
    "CURRENT_VOL": "VOL:12",
    "MUTE_STATE": "MUTE:off",
    "CURRENT_APP": "APP:com.webos.app.hdmi1",
}


class TestSendCommand(unittest.TestCase):

    def test_power_off(self):
        with FakeTV(keycode="ABCDEFGH") as tv:
            reply = send_command(tv.host, tv.port, "ABCDEFGH", DEFAULT_SALT, "POWER off",
                                 timeouts=TIMEOUTS)
        self.assertEqual(reply, "POWER off")
        self.assertEqual(tv.received, ["POWER off"])

    def test_custom_salt(self):
        salt = bytes(range(16))
        with FakeTV(keycode="ABCDEFGH", salt=salt, reply="OK") as tv:
            reply = send_command(tv.host, tv.port, "ABCDEFGH", salt, "VOLUME_MUTE on",
                                 timeouts=TIMEOUTS)
        self.assertEqual(reply, "OK")

    def test_connection_refused_is_transport_stage(self):
        with self.assertRaises(TransportError) as ctx:
            send_command("127.0.0.1", unused_port(), "ABCDEFGH", DEFAULT_SALT, "POWER off",
                         timeouts=TIMEOUTS)
        self.assertEqual(ctx.exception.stage, "transport")
        self.assertTrue(str(ctx.exception).startswith("[transport] "))

    def test_bad_salt_is_derive_key_stage(self):
        with self.assertRaises(ValidationError) as ctx:
            send_command("127.0.0.1", 9761, "ABCDEFGH", bytes(4), "POWER off")
        self.assertEqual(ctx.exception.stage, "derive_key")

    def test_bad_command_is_encode_stage(self):
        with self.assertRaises(ValidationError) as ctx:
            send_command("127.0.0.1", 9761, "ABCDEFGH", DEFAULT_SALT, "")
        self.assertEqual(ctx.exception.stage, "encode")

        with self.assertRaises(CryptoError) as ctx:
            send_command("127.0.0.1", 9761, "ABCDEFGH", DEFAULT_SALT, "x" * 300)
        self.assertEqual(ctx.exception.stage, "encode")

    def test_short_reply_is_decode_stage(self):
        with mock.patch.object(client, "request_reply", return_value=bytes(10)):
            with self.assertRaises(ProtocolError) as ctx:
                send_command("127.0.0.1", 9761, "ABCDEFGH", DEFAULT_SALT, "POWER off")
        self.assertEqual(ctx.exception.stage, "decode")

    def test_wrong_keycode_gets_no_answer(self):
        """The TV ignores requests it cannot decrypt."""
        with FakeTV(keycode="HGFEDCBA") as tv:
            with self.assertRaises(TransportError):
                send_command(tv.host, tv.port, "ABCDEFGH", DEFAULT_SALT, "POWER off",
                             timeouts=TIMEOUTS)
        self.assertEqual(tv.received, [])


class TestLGTVClient(unittest.TestCase):

    def test_send_command(self):
        with FakeTV(reply=STATUS.get) as tv:
            lgtv = LGTVClient(tv.host, "ABCDEFGH", port=tv.port, timeouts=TIMEOUTS)
            self.assertEqual(lgtv.send_command("CURRENT_VOL"), "VOL:12")

    def test_encode_with_fixed_iv(self):
        lgtv = LGTVClient("192.168.0.2", "ABCDEFGH")
        first = lgtv.encode("POWER off", iv=bytes(16))
        self.assertEqual(first, lgtv.encode("POWER off", iv=bytes(16)))
        self.assertNotEqual(first, lgtv.encode("POWER off"))
        self.assertEqual(len(first), 32)

    def test_send_commands_waits_between_commands(self):
        with FakeTV(reply=STATUS.get) as tv:
            lgtv = LGTVClient(tv.host, "ABCDEFGH", port=tv.port, timeouts=TIMEOUTS)
            with mock.patch.object(client, "time") as time_module:
                replies = lgtv.send_commands(list(STATUS))

        self.assertEqual(replies, list(STATUS.items()))
        self.assertEqual(tv.received, list(STATUS))
        self.assertEqual(time_module.sleep.call_args_list, [mock.call(COMMAND_DELAY)] * 2)

    def test_batch_stops_at_first_error(self):
        lgtv = LGTVClient("127.0.0.1", "ABCDEFGH", port=unused_port(), timeouts=TIMEOUTS)
        with mock.patch.object(client, "time") as time_module:
            with self.assertRaises(LGTVError):
                lgtv.send_commands(["CURRENT_VOL", "MUTE_STATE"])
        time_module.sleep.assert_not_called()

    def test_iter_commands_is_lazy(self):
        with FakeTV() as tv:
            lgtv = LGTVClient(tv.host, "ABCDEFGH", port=tv.port, timeouts=TIMEOUTS)
            commands = lgtv.iter_commands(["POWER off", "CURRENT_VOL"])
            self.assertEqual(next(commands), ("POWER off", "POWER off"))
            self.assertEqual(tv.received, ["POWER off"])

    def test_wake(self):
        lgtv = LGTVClient("192.168.0.2", "ABCDEFGH")
        with mock.patch.object(client, "send_broadcast", return_value=102) as broadcast:
            self.assertEqual(lgtv.wake("192.168.0.255", "DE:AD:BE:EF:00:01"), 102)
        broadcast.assert_called_once()


class _Collector(logging.Handler):

    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


class TestDebugLogging(unittest.TestCase):
    """debug=True shows the hex dumps without touching the root logger."""

    def setUp(self):
        self.root = logging.getLogger()
        self.saved_level = self.root.level
        self.root.setLevel(logging.WARNING)
        self.collector = _Collector()
        self.root.addHandler(self.collector)

    def tearDown(self):
        self.root.removeHandler(self.collector)
        self.root.setLevel(self.saved_level)

    def _send(self, debug):
        with FakeTV(reply=STATUS.get) as tv:
            lgtv = LGTVClient(tv.host, "ABCDEFGH", port=tv.port, timeouts=TIMEOUTS, debug=debug)
            self.assertEqual(lgtv.send_command("CURRENT_VOL"), "VOL:12")

    def test_debug_logs_tx_and_rx(self):
        self._send(debug=True)
        self.assertTrue(any(m.startswith("TX 32 bytes: ") for m in self.collector.messages))
        self.assertTrue(any(m.startswith("RX 32 bytes: ") for m in self.collector.messages))

    def test_no_dumps_without_debug(self):
        self._send(debug=False)
        self.assertFalse(any(m.startswith(("TX ", "RX ")) for m in self.collector.messages))


class TestWakeOnLan(unittest.TestCase):

    def test_magic_packet(self):
        mac = b"\xde\xad\xbe\xef\x00\x01"
        packet = build_magic_packet(mac)
        self.assertEqual(len(packet), 102)
        self.assertEqual(packet[:6], b"\xff" * 6)
        self.assertEqual(packet[6:], mac * 16)

    def test_magic_packet_bad_mac(self):
        with self.assertRaises(ValidationError):
            build_magic_packet(b"\x00" * 5)

    def test_send_wol_packet(self):
        with mock.patch.object(client, "send_broadcast", return_value=102) as broadcast:
            send_wol_packet("192.168.0.255", "DE:AD:BE:EF:00:01")
        target, packet = broadcast.call_args[0]
        self.assertEqual(target, "192.168.0.255")
        self.assertEqual(packet, build_magic_packet(b"\xde\xad\xbe\xef\x00\x01"))

    def test_send_wol_packet_bad_mac(self):
        with mock.patch.object(client, "send_broadcast") as broadcast:
            with self.assertRaises(ValidationError):
                send_wol_packet("192.168.0.255", "DE:AD:BE:EF:00")
        broadcast.assert_not_called()


if __name__ == "__main__":
    unittest.main()
