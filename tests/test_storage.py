"""Tests for the local tournament store."""

from __future__ import annotations

import json
import os
import tempfile
import threading
import unittest

from foodcup.storage import FileSlot, MemorySlot, TournamentStore, dumps, loads
from foodcup.tournament.bracket import select_winner
from foodcup.tournament.samples import seed_samples
from foodcup.tournament.services import build_tournament

KEY = "food-tournaments"


class PersistedFormatTestCase(unittest.TestCase):
    """Test case for the persisted representation."""

    def test_round_trip_reproduces_every_field(self) -> None:
        tournament = build_tournament(
            "Lunch",
            ["A", "B", "C", "D", "E"],
            reward_mode="weighted",
            description="Fast and cheap",
            location_tag="Gangnam-gu",
        )
        contested = tournament["rounds"][0][3]
        select_winner(tournament, contested["id"], "a")
        tournament["creatorName"] = "Kim"
        tournament["creatorEmail"] = "kim@example.com"

        self.assertEqual(loads(dumps([tournament])), [tournament])

    def test_round_trip_of_finished_tournament(self) -> None:
        tournament = build_tournament("Quick", ["A", "B", "C", "D"])
        while not tournament.get("isFinished"):
            round_ = tournament["rounds"][tournament["currentRoundIndex"]]
            match = next(m for m in round_ if not m["winner"])
            select_winner(tournament, match["id"], "b")
        self.assertEqual(loads(dumps([tournament])), [tournament])

    def test_non_ascii_names_survive(self) -> None:
        samples = seed_samples()
        self.assertIn("광화문국밥", dumps(samples))
        self.assertEqual(loads(dumps(samples)), samples)

    def test_missing_payload_is_empty(self) -> None:
        self.assertEqual(loads(None), [])
        self.assertEqual(loads(""), [])

    def test_malformed_payload_is_empty(self) -> None:
        with self.assertLogs("foodcup.storage", level="WARNING"):
            self.assertEqual(loads("{not json"), [])

    def test_payload_that_is_not_a_list_is_empty(self) -> None:
        with self.assertLogs("foodcup.storage", level="WARNING"):
            self.assertEqual(loads(json.dumps({"id": "x"})), [])
        with self.assertLogs("foodcup.storage", level="WARNING"):
            self.assertEqual(loads(json.dumps([1, 2])), [])

    def test_entries_missing_tournament_fields_are_dropped(self) -> None:
        good = build_tournament("Good", ["A", "B", "C", "D"])
        out_of_range = build_tournament("Pointer", ["A", "B", "C", "D"])
        out_of_range["currentRoundIndex"] = 5
        payload = json.dumps(
            [{"id": "x", "title": "Broken"}, good, out_of_range, {"rounds": []}]
        )
        with self.assertLogs("foodcup.storage", level="WARNING") as logs:
            self.assertEqual(loads(payload), [good])
        self.assertIn("Dropped 3", logs.output[0])

    def test_payload_of_only_broken_entries_is_empty(self) -> None:
        with self.assertLogs("foodcup.storage", level="WARNING"):
            self.assertEqual(loads(json.dumps([{"id": "x", "title": "Broken"}])), [])


class TournamentStoreTestCase(unittest.TestCase):
    """Test case for TournamentStore."""

    def setUp(self) -> None:
        self.slot = MemorySlot()

    def test_first_run_is_seeded_and_saved(self) -> None:
        store = TournamentStore(self.slot, seeder=seed_samples)
        loaded = store.load()
        self.assertEqual(len(loaded), 2)
        self.assertEqual([t["size"] for t in loaded], [32, 16])
        self.assertEqual([t["rewardMode"] for t in loaded], ["random", "weighted"])
        self.assertEqual(loads(self.slot.read(KEY)), loaded)

    def test_existing_list_is_not_reseeded(self) -> None:
        existing = [build_tournament("Mine", ["A", "B", "C", "D"])]
        self.slot.write(KEY, dumps(existing))
        store = TournamentStore(self.slot, seeder=seed_samples)
        self.assertEqual(store.load(), existing)

    def test_malformed_payload_falls_back_to_seeds(self) -> None:
        self.slot.write(KEY, "]]garbage")
        store = TournamentStore(self.slot, seeder=seed_samples)
        with self.assertLogs("foodcup.storage", level="WARNING"):
            loaded = store.load()
        self.assertEqual(len(loaded), 2)

    def test_without_seeder_an_empty_store_stays_empty(self) -> None:
        store = TournamentStore(self.slot)
        self.assertEqual(store.load(), [])
        self.assertIsNone(self.slot.read(KEY))

    def test_custom_seeding_policy(self) -> None:
        seeded = build_tournament("Seed", ["A", "B", "C", "D"])
        store = TournamentStore(self.slot, seeder=lambda: [seeded])
        self.assertEqual(store.load(), [seeded])

    def test_add_prepends_and_rewrites_the_slot(self) -> None:
        store = TournamentStore(self.slot)
        store.load()
        first = build_tournament("First", ["A", "B", "C", "D"])
        second = build_tournament("Second", ["A", "B", "C", "D"])
        store.add(first)
        store.add(second)
        self.assertEqual([t["title"] for t in store.all()], ["Second", "First"])
        self.assertEqual(loads(self.slot.read(KEY)), [second, first])

    def test_get(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Find me", ["A", "B", "C", "D"])
        store.add(tournament)
        self.assertEqual(store.get(tournament["id"]), tournament)
        self.assertIsNone(store.get("missing"))

    def test_search_matches_title_and_location(self) -> None:
        store = TournamentStore(self.slot, seeder=seed_samples)
        store.load()
        self.assertEqual(len(store.search("")), 2)
        self.assertEqual(len(store.search("   ")), 2)
        self.assertEqual(
            [t["title"] for t in store.search("gangnam")],
            ["Gangnam Office Lunch: Round of 16"],
        )
        self.assertEqual(len(store.search("JONGNO")), 1)
        self.assertEqual(store.search("busan"), [])

    def test_apply_saves_only_changes(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Play", ["A", "B", "C", "D"])
        store.add(tournament)
        saved = self.slot.read(KEY)
        match_id = tournament["rounds"][0][0]["id"]

        def ignored(t):
            return select_winner(t, "nope", "a")["applied"]

        self.assertFalse(store.apply(tournament["id"], ignored))
        self.assertEqual(self.slot.read(KEY), saved)

        def applied(t):
            return select_winner(t, match_id, "a")["applied"]

        self.assertTrue(store.apply(tournament["id"], applied))
        self.assertEqual(loads(self.slot.read(KEY))[0]["rounds"][0][0]["winner"], "A")

    def test_apply_to_unknown_tournament(self) -> None:
        store = TournamentStore(self.slot)
        self.assertFalse(store.apply("missing", lambda t: True))

    def test_reload_reproduces_state(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Persist", ["A", "B", "C", "D", "E", "F"])
        store.add(tournament)
        reloaded = TournamentStore(self.slot).load()
        self.assertEqual(reloaded, [tournament])

    def test_readers_cannot_change_stored_tournaments(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Mine", ["A", "B", "C", "D"])
        store.add(tournament)
        saved = self.slot.read(KEY)

        tournament["title"] = "changed after add"
        store.get(tournament["id"])["title"] = "changed through get"
        store.all()[0]["rounds"][0][0]["winner"] = "A"
        store.search("mine")[0]["isFinished"] = True

        stored = store.get(tournament["id"])
        self.assertEqual(stored["title"], "Mine")
        self.assertIsNone(stored["rounds"][0][0]["winner"])
        self.assertFalse(stored["isFinished"])
        self.assertEqual(self.slot.read(KEY), saved)

    def test_failed_transition_leaves_the_tournament_alone(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Mine", ["A", "B", "C", "D"])
        store.add(tournament)

        def broken(t):
            t["title"] = "half done"
            raise RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            store.apply(tournament["id"], broken)
        self.assertEqual(store.get(tournament["id"]), tournament)

    def test_reader_never_sees_a_transition_in_progress(self) -> None:
        store = TournamentStore(self.slot)
        tournament = build_tournament("Mine", ["A", "B", "C", "D"])
        store.add(tournament)
        first, second = tournament["rounds"][0]
        store.apply(
            tournament["id"], lambda t: select_winner(t, first["id"], "a")["applied"]
        )

        seen = []
        reader = threading.Thread(
            target=lambda: seen.append(store.get(tournament["id"]))
        )

        def completes_round(t):
            picked = select_winner(t, second["id"], "a")
            # Round 0 is decided and folded by now; let a reader try meanwhile
            reader.start()
            reader.join(timeout=0.2)
            self.assertTrue(reader.is_alive())
            return picked["applied"]

        self.assertTrue(store.apply(tournament["id"], completes_round))
        reader.join(timeout=5)

        snapshot = seen[0]
        self.assertEqual(snapshot["currentRoundIndex"], 1)
        final = snapshot["rounds"][1][0]
        self.assertEqual((final["a"], final["b"]), ("A", "C"))


class FileSlotTestCase(unittest.TestCase):
    """Test case for the file backed slot."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.directory = os.path.join(self.tmp.name, "instance")

    def test_missing_file_reads_as_none(self) -> None:
        self.assertIsNone(FileSlot(self.directory).read(KEY))

    def test_write_then_read(self) -> None:
        slot = FileSlot(self.directory)
        slot.write(KEY, "[]")
        slot.write(KEY, '[{"id": "x"}]')
        self.assertEqual(slot.read(KEY), '[{"id": "x"}]')
        self.assertEqual(os.listdir(self.directory), [f"{KEY}.json"])

    def test_store_survives_a_restart(self) -> None:
        store = TournamentStore(FileSlot(self.directory), seeder=seed_samples)
        first_run = store.load()
        second_run = TournamentStore(FileSlot(self.directory), seeder=seed_samples).load()
        self.assertEqual(first_run, second_run)


if __name__ == "__main__":
    unittest.main()
