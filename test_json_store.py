import json
import os
import tempfile
import threading
import unittest

from stores.json_store import DebouncedJsonFile, load_json_file


class TestDebouncedJsonFile(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "state", "doc.json")
        self.document = {'items': {f"Mint{i}": {"reason": "mc_crash", "mc": i} for i in range(5000)}}

    def tearDown(self):
        self.tmp.cleanup()

    def test_concurrent_flushes_are_serialized(self):
        writer = DebouncedJsonFile(self.path, lambda: self.document, delay_seconds=60)
        results = []
        start = threading.Event()

        def flush():
            start.wait()
            results.append(writer.flush())

        threads = [threading.Thread(target=flush) for _ in range(8)]
        for t in threads:
            t.start()
        start.set()
        for t in threads:
            t.join()

        self.assertEqual(results, [True] * 8)
        self.assertEqual(writer.writes, 8)
        self.assertFalse(os.path.exists(self.path + ".tmp"))
        with open(self.path) as f:
            self.assertEqual(len(json.load(f)['items']), 5000)

    def test_timer_write_and_flush_overlap(self):
        writer = DebouncedJsonFile(self.path, lambda: self.document, delay_seconds=0)
        writer.mark_dirty()
        self.assertTrue(writer.flush())
        writer.cancel()

        self.assertEqual(load_json_file(writer.path, {})['items']['Mint7']['mc'], 7)
        self.assertFalse(writer.dirty)

    def test_memory_only_without_path(self):
        writer = DebouncedJsonFile(None, lambda: self.document)
        writer.mark_dirty()
        self.assertTrue(writer.memory_only)
        self.assertFalse(writer.flush())
        self.assertEqual(writer.writes, 0)


if __name__ == '__main__':
    unittest.main()
