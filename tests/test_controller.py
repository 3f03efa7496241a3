import os
import sys

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
sys.path.append(os.path.dirname(__file__))
from controller import CLEARED_MESSAGE, ViewContext, WorkoutController
from fakes import InMemoryEntryStorage, make_entry
from workout_service import WorkoutService


class RecordingView:
    def __init__(self, confirm_answer: bool = True) -> None:
        self.rendered = []
        self.errors = []
        self.infos = []
        self.prompts = []
        self.confirm_answer = confirm_answer

    def confirm(self, message):
        self.prompts.append(message)
        return self.confirm_answer

    def context(self) -> ViewContext:
        return ViewContext(
            render=self.rendered.append,
            show_error=self.errors.append,
            show_info=self.infos.append,
            confirm=self.confirm,
        )


def _controller(entries=None, confirm_answer=True):
    storage = InMemoryEntryStorage(entries)
    view = RecordingView(confirm_answer)
    return WorkoutController(WorkoutService(storage), view.context()), view, storage


class TestWorkoutController:
    def test_initialize_renders_entries(self):
        controller, view, _ = _controller([make_entry("a", 1)])
        controller.initialize()
        assert [e.id for e in view.rendered[-1]] == ["a"]

    def test_submit_form_success_rerenders(self):
        controller, view, _ = _controller()
        ok = controller.submit_form(
            {"date": "2024-11-15", "type": "ランニング", "minutes": "30", "value": "5", "note": "test"}
        )
        assert ok
        assert view.errors == []
        assert len(view.rendered[-1]) == 1

    def test_submit_form_reports_warning(self):
        controller, view, _ = _controller()
        assert controller.submit_form({"date": "2024-11-15", "type": "筋トレ"})
        assert view.infos == ["consider entering minutes or a count/distance value"]

    def test_submit_form_validation_error(self):
        controller, view, storage = _controller()
        ok = controller.submit_form({"date": "", "type": "", "minutes": "1"})
        assert not ok
        assert view.errors == ["type is required, date is required"]
        assert view.rendered == []
        assert storage.writes == 0

    def test_submit_form_write_error(self):
        controller, view, storage = _controller()
        storage.fail_writes = True
        assert not controller.submit_form({"date": "2024-11-15", "type": "x", "minutes": "1"})
        assert "quota" in view.errors[0]

    def test_filter_and_clear_filter(self):
        controller, view, _ = _controller(
            [make_entry("a", 1), make_entry("b", 2, date="2024-11-14")]
        )
        controller.request_filter("2024-11-14")
        assert [e.id for e in view.rendered[-1]] == ["b"]
        controller.clear_filter()
        assert [e.id for e in view.rendered[-1]] == ["b", "a"]

    def test_delete_rerenders_with_filter(self):
        controller, view, _ = _controller(
            [make_entry("a", 1), make_entry("b", 2), make_entry("c", 3, date="2024-11-14")]
        )
        controller.request_filter("2024-11-15")
        controller.request_delete("a")
        assert [e.id for e in view.rendered[-1]] == ["b"]

    def test_clear_all_declined(self):
        controller, view, storage = _controller([make_entry("a", 1)], confirm_answer=False)
        assert not controller.request_clear_all()
        assert len(view.prompts) == 1
        assert [e.id for e in storage.read_all()] == ["a"]
        assert view.infos == []

    def test_clear_all_confirmed(self):
        controller, view, storage = _controller([make_entry("a", 1)])
        controller.request_filter("2024-11-15")
        assert controller.request_clear_all()
        assert storage.entries is None
        assert controller.filter_date is None
        assert view.rendered[-1] == []
        assert view.infos == [CLEARED_MESSAGE]

    def test_clear_all_write_error(self):
        controller, view, storage = _controller([make_entry("a", 1)])
        storage.fail_writes = True
        assert not controller.request_clear_all()
        assert len(view.errors) == 1
        assert view.infos == []
        assert [e.id for e in view.rendered[-1]] == ["a"]

    def test_read_error_renders_empty_list(self):
        controller, view, storage = _controller([make_entry("a", 1)])
        storage.fail_reads = True
        controller.refresh()
        assert view.rendered[-1] == []
        assert len(view.errors) == 1

    def test_default_date_uses_context_clock(self):
        storage = InMemoryEntryStorage()
        view = RecordingView()
        context = view.context()
        context.today = lambda: "2024-11-15"
        controller = WorkoutController(WorkoutService(storage), context)
        assert controller.default_date() == "2024-11-15"
