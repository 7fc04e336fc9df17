"""Session state, requery, and loop orchestration tests.

Uses an in-memory store and scripted events so the loop runs without a
terminal; the terminal guard is mocked to check it is always released.
"""

from __future__ import annotations

import unittest
from unittest import mock

from fakes import FakeStore, make_record
from histsift.errors import StoreError
from histsift.input import Event
from histsift.session import loop
from histsift.session.query import RESULT_LIMIT, requery
from histsift.session.state import SessionState
from histsift.settings import SearchMode, Settings, Style


def _records(*commands: str):
    return [make_record(command) for command in commands]


class SessionStateTests(unittest.TestCase):
    def test_selection_outside_results_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SessionState(results=tuple(_records("a")), selection=1)
        with self.assertRaises(ValueError):
            SessionState(results=(), selection=0)

    def test_with_results_resets_selection(self) -> None:
        state = SessionState(results=tuple(_records("a", "b", "c")), selection=2)
        self.assertEqual(state.with_results(_records("x", "y")).selection, 0)
        self.assertIsNone(state.with_results([]).selection)

    def test_selected_record(self) -> None:
        records = _records("a", "b")
        state = SessionState(results=tuple(records), selection=1)
        self.assertEqual(state.selected_record(), records[1])
        self.assertIsNone(SessionState().selected_record())


class RequeryTests(unittest.TestCase):
    def test_empty_input_lists_recent_unique_history(self) -> None:
        store = FakeStore(_records("ls", "git status", "make"))
        state = requery(SessionState(), store, SearchMode.FUZZY)

        self.assertEqual(store.calls, [("list", RESULT_LIMIT, True)])
        self.assertEqual(len(state.results), 3)
        self.assertEqual(state.selection, 0)

    def test_typed_input_searches_with_mode(self) -> None:
        store = FakeStore(_records("ls", "git status", "git log"))
        state = requery(SessionState(input="git"), store, SearchMode.PREFIX)

        self.assertEqual(store.calls, [("search", RESULT_LIMIT, SearchMode.PREFIX, "git")])
        self.assertEqual([r.command for r in state.results], ["git status", "git log"])
        self.assertEqual(state.selection, 0)

    def test_no_matches_clears_selection(self) -> None:
        store = FakeStore(_records("ls"))
        state = requery(SessionState(input="zzz", results=tuple(_records("ls")), selection=0), store, SearchMode.FUZZY)
        self.assertEqual(state.results, ())
        self.assertIsNone(state.selection)

    def test_store_errors_propagate(self) -> None:
        store = FakeStore(_records("ls"))
        store.fail_on.add("list")
        with self.assertRaises(StoreError):
            requery(SessionState(), store, SearchMode.FUZZY)


class RunSessionTests(unittest.TestCase):
    def _run(self, store: FakeStore, keys: list[str], state: SessionState | None = None):
        events = iter([Event("key", key) if key != "TICK" else Event("tick") for key in keys])
        frames = []
        output = loop.run_session(
            state or SessionState(),
            Settings(search_mode=SearchMode.FUZZY, style=Style.AUTO),
            store,
            next_event=lambda: next(events),
            draw=frames.append,
            terminal_size=lambda: (80, 24),
        )
        return output, frames

    def test_typing_triggers_search_and_enter_returns_selection(self) -> None:
        store = FakeStore(_records("ls -la", "git status", "git log"))
        output, frames = self._run(store, ["g", "ENTER"])

        searches = [call for call in store.calls if call[0] != "count"]
        self.assertEqual(searches[0], ("list", RESULT_LIMIT, True))
        self.assertEqual(searches[1], ("search", RESULT_LIMIT, SearchMode.FUZZY, "g"))
        self.assertEqual(output, "git status")
        self.assertEqual(len(frames), 2)

    def test_navigation_then_enter(self) -> None:
        store = FakeStore(_records("a", "b", "c"))
        output, _ = self._run(store, ["UP", "UP", "DOWN", "ENTER"])
        self.assertEqual(output, "b")

    def test_ticks_redraw_without_changing_state(self) -> None:
        store = FakeStore(_records("a", "b"))
        output, frames = self._run(store, ["TICK", "TICK", "ESC"])
        self.assertEqual(output, "")
        self.assertEqual(len(frames), 3)

    def test_seeded_input_searches_first(self) -> None:
        store = FakeStore(_records("docker ps", "ls"))
        output, _ = self._run(store, ["ENTER"], SessionState(input="docker"))
        self.assertEqual(store.calls[0], ("search", RESULT_LIMIT, SearchMode.FUZZY, "docker"))
        self.assertEqual(output, "docker ps")

    def test_count_is_fetched_every_frame(self) -> None:
        store = FakeStore(_records("a"), total=1234)
        _, frames = self._run(store, ["TICK", "ESC"])
        self.assertEqual(sum(1 for call in store.calls if call[0] == "count"), 2)
        self.assertTrue(any("history count: 1234" in line for line in frames[0].lines))

    def test_store_failure_during_requery_ends_session(self) -> None:
        store = FakeStore(_records("a"))
        store.fail_on.add("search")
        with self.assertRaises(StoreError):
            self._run(store, ["x", "ENTER"])


class SelectHistoryTests(unittest.TestCase):
    def _patched(self):
        fake_sys = mock.MagicMock()
        fake_sys.stdin.fileno.return_value = 0
        fake_sys.stdout.fileno.return_value = 1
        return (
            mock.patch("histsift.session.loop.sys", fake_sys),
            mock.patch("histsift.session.loop.TerminalController"),
            mock.patch("histsift.session.loop.InputEvents"),
        )

    def test_returns_choice_and_releases_resources(self) -> None:
        sys_patch, terminal_patch, events_patch = self._patched()
        with sys_patch, terminal_patch as terminal_cls, events_patch as events_cls, mock.patch(
            "histsift.session.loop.run_session", return_value="git push"
        ) as run_session:
            terminal_cls.return_value.raw_mode.return_value.__exit__.return_value = False
            chosen = loop.select_history(["git", "pu"], Settings(), FakeStore([]))

        self.assertEqual(chosen, "git push")
        self.assertEqual(run_session.call_args.args[0].input, "git pu")
        terminal_cls.assert_called_once_with(0, 1)
        raw_mode = terminal_cls.return_value.raw_mode.return_value
        raw_mode.__exit__.assert_called_once()
        events_cls.return_value.close.assert_called_once()

    def test_errors_still_release_terminal(self) -> None:
        sys_patch, terminal_patch, events_patch = self._patched()
        with sys_patch, terminal_patch as terminal_cls, events_patch as events_cls, mock.patch(
            "histsift.session.loop.run_session", side_effect=StoreError("gone")
        ):
            terminal_cls.return_value.raw_mode.return_value.__exit__.return_value = False
            with self.assertRaises(StoreError):
                loop.select_history([], Settings(), FakeStore([]))

        raw_mode = terminal_cls.return_value.raw_mode.return_value
        raw_mode.__exit__.assert_called_once()
        events_cls.return_value.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()
