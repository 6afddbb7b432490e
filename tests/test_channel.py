import unittest

from chat_line.api import ChatEvent, Message
from chat_line.channel import ChatChannel
from chat_line.config import ChatConfig
from tests.mocks import FakeLineSource, RecordingStream


def make_channel(lines=(), username=None):
    stream = RecordingStream()
    source = FakeLineSource(lines, events=stream.events)
    config = ChatConfig(input=None, output=stream, terminal=False, username=username)
    return ChatChannel(config, line_source=source), source, stream


class TestEventBus(unittest.TestCase):

    def setUp(self):
        self.channel, _, _ = make_channel()

    def test_emit_without_handlers_returns_false(self):
        self.assertFalse(self.channel.emit(ChatEvent.MESSAGE_RECEIVED, Message("hi")))

    def test_emit_after_registration_returns_true(self):
        self.channel.on(ChatEvent.MESSAGE_RECEIVED, lambda message: None)
        self.assertTrue(self.channel.emit(ChatEvent.MESSAGE_RECEIVED, Message("hi")))
        self.assertFalse(self.channel.emit(ChatEvent.MESSAGE_SENT, Message("hi")))

    def test_string_and_enum_kinds_are_interchangeable(self):
        received = []
        self.channel.on("message-received", received.append)
        message = Message("hi")
        self.assertTrue(self.channel.emit(ChatEvent.MESSAGE_RECEIVED, message))
        self.assertEqual(self.channel.listener_count(ChatEvent.MESSAGE_RECEIVED), 1)
        self.assertIs(received[0], message)

    def test_unknown_kind_is_rejected(self):
        with self.assertRaises(ValueError):
            self.channel.on("message-deleted", lambda message: None)

    def test_handlers_run_in_registration_order(self):
        calls = []

        def first(message):
            calls.append("first:start")
            calls.append("first:end")

        def second(message):
            calls.append("second:start")

        self.channel.on(ChatEvent.MESSAGE_SENT, first)
        self.channel.on(ChatEvent.MESSAGE_SENT, second)
        self.channel.emit(ChatEvent.MESSAGE_SENT, Message("x"))
        self.assertEqual(calls, ["first:start", "first:end", "second:start"])

    def test_failing_handler_does_not_stop_others(self):
        received = []

        def broken(message):
            raise RuntimeError("boom")

        self.channel.on(ChatEvent.MESSAGE_SENT, broken)
        self.channel.on(ChatEvent.MESSAGE_SENT, received.append)
        with self.assertLogs('chat_line.events', level='ERROR') as logs:
            result = self.channel.emit(ChatEvent.MESSAGE_SENT, Message("x"))
        self.assertTrue(result)
        self.assertEqual(len(received), 1)
        self.assertEqual(len(logs.records), 1)
        self.assertIsInstance(logs.records[0].exc_info[1], RuntimeError)

    def test_once_and_off(self):
        received = []
        self.channel.once(ChatEvent.MESSAGE_RECEIVED, received.append)
        self.channel.emit(ChatEvent.MESSAGE_RECEIVED, Message("1"))
        self.assertFalse(self.channel.emit(ChatEvent.MESSAGE_RECEIVED, Message("2")))
        self.assertEqual([m.text for m in received], ["1"])

        self.channel.on(ChatEvent.MESSAGE_RECEIVED, received.append)
        self.channel.off(ChatEvent.MESSAGE_RECEIVED, received.append)
        self.assertEqual(self.channel.listener_count(ChatEvent.MESSAGE_RECEIVED), 0)


class TestSendMessage(unittest.TestCase):

    def test_send_message_does_not_attach_default_sender(self):
        channel, _, _ = make_channel(username="bot")
        received = []
        channel.on(ChatEvent.MESSAGE_SENT, received.append)
        self.assertTrue(channel.send_message(Message(text="hi")))
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].text, "hi")
        self.assertIsNone(received[0].sender)

    def test_send_message_without_listeners(self):
        channel, _, _ = make_channel()
        self.assertFalse(channel.send_message(Message(text="hi")))


class TestLineTranslation(unittest.IsolatedAsyncioTestCase):

    async def test_line_becomes_message_sent_with_username(self):
        channel, _, _ = make_channel(lines=["hello"], username="alice")
        received = []
        channel.on(ChatEvent.MESSAGE_SENT, received.append)
        await channel.start()
        self.assertEqual(len(received), 1)
        self.assertEqual(received[0].text, "hello")
        self.assertEqual(received[0].sender, "alice")
        self.assertIsNone(received[0].extra)

    async def test_lines_without_username_have_no_sender(self):
        channel, _, _ = make_channel(lines=["one", "", "two"])
        received = []
        channel.on(ChatEvent.MESSAGE_SENT, received.append)
        await channel.start()
        self.assertEqual([m.text for m in received], ["one", "", "two"])
        self.assertTrue(all(m.sender is None for m in received))

    async def test_closed_is_emitted_once_at_end_of_input(self):
        channel, _, _ = make_channel(lines=["one"])
        order = []
        channel.on(ChatEvent.MESSAGE_SENT, lambda message: order.append(message.text))
        channel.on(ChatEvent.CLOSED, lambda payload: order.append(payload))
        await channel.start()
        self.assertEqual(order, ["one", None])


class TestPrint(unittest.TestCase):

    def test_default_print_sequence(self):
        channel, _, stream = make_channel()
        channel.print("hello")
        self.assertEqual(stream.events, ["\x1b[2K", "\r", "hello", "\n", ("redraw", True)])

    def test_print_without_preserving_line(self):
        channel, source, stream = make_channel()
        source.insert_text("half typed")
        channel.print("hello", preserve_line=False)
        self.assertEqual(stream.events[-1], ("redraw", False))
        self.assertEqual(source.line, "")

    def test_print_without_reset_cursor(self):
        channel, _, stream = make_channel()
        channel.print("hello", reset_cursor=False)
        self.assertEqual(stream.events, ["hello"])

    def test_print_without_clear_line(self):
        channel, _, stream = make_channel()
        channel.print("hello", clear_line=False)
        self.assertEqual(stream.events, ["hello", "\n", ("redraw", True)])

    def test_output_is_flushed_before_redraw(self):
        channel, _, stream = make_channel()
        channel.print("hello")
        self.assertGreaterEqual(stream.flushes, 1)

    def test_print_without_output_is_noop(self):
        source = FakeLineSource()
        channel = ChatChannel(ChatConfig(input=None, output=None, terminal=False), line_source=source)
        channel.print("hello")
        self.assertEqual(source.events, [])

    def test_print_to_closed_output_is_noop(self):
        channel, source, stream = make_channel()
        stream.close()
        channel.print("hello")
        self.assertEqual(stream.events, [])

    def test_print_from_handler(self):
        channel, _, stream = make_channel()
        channel.on(ChatEvent.MESSAGE_RECEIVED, lambda message: channel.print(f"<{message.sender}>: {message.text}"))
        channel.emit(ChatEvent.MESSAGE_RECEIVED, Message("hi", sender="bob"))
        self.assertEqual(stream.text(), "\x1b[2K\r<bob>: hi\n")


if __name__ == '__main__':
    unittest.main()
