import os
import sys
import unittest
from datetime import datetime, timedelta

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from services import state_manager as sm


class MessageDedupTests(unittest.TestCase):
    def setUp(self):
        sm.clear_processed_messages()

    def tearDown(self):
        sm.clear_processed_messages()

    def test_second_delivery_is_duplicate(self):
        self.assertFalse(sm.is_message_duplicate("wamid.A"))
        self.assertTrue(sm.is_message_duplicate("wamid.A"))
        self.assertFalse(sm.is_message_duplicate("wamid.B"))

    def test_missing_id_is_never_duplicate(self):
        self.assertFalse(sm.is_message_duplicate(None))
        self.assertFalse(sm.is_message_duplicate(""))
        self.assertFalse(sm.is_message_duplicate(""))

    def test_forgotten_id_is_accepted_again(self):
        self.assertFalse(sm.is_message_duplicate("wamid.A"))
        sm.forget_message("wamid.A")
        self.assertFalse(sm.is_message_duplicate("wamid.A"))
        sm.forget_message(None)

    def test_entry_expires_after_window(self):
        start = datetime(2026, 1, 1, 8, 0)
        self.assertFalse(sm.is_message_duplicate("wamid.A", now=start))
        later = start + timedelta(seconds=sm.DEDUP_TTL_SECONDS + 1)
        self.assertFalse(sm.is_message_duplicate("wamid.A", now=later))

    def test_cache_is_bounded(self):
        start = datetime(2026, 1, 1, 8, 0)
        for i in range(sm.DEDUP_MAX_ENTRIES + 5):
            sm.is_message_duplicate(f"wamid.{i}", now=start + timedelta(microseconds=i))
        self.assertLessEqual(len(sm._processed_messages), sm.DEDUP_MAX_ENTRIES)
        # Oldest ids were evicted first
        self.assertNotIn("wamid.0", sm._processed_messages)


if __name__ == "__main__":
    unittest.main()
