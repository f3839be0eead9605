"""Tests for the debounced file watcher."""
import threading
import time

from db_viewer.watcher import SourceWatcher
from db_viewer.web import ViewerContext


class _Recorder:
    def __init__(self):
        self.paths = []
        self.event = threading.Event()

    def __call__(self, path):
        self.paths.append(path)
        self.event.set()


class TestSourceWatcher:
    """Test change notification and debouncing."""

    def test_debounce_coalesces(self, write_source):
        """A burst of changes triggers one reload."""
        path = write_source("schema.ts", "")
        recorder = _Recorder()
        watcher = SourceWatcher(ViewerContext(path, None), debounce_seconds=0.1, on_reload=recorder)

        for _ in range(5):
            watcher.notify(path)

        assert recorder.event.wait(2)
        time.sleep(0.3)
        assert recorder.paths == [path.resolve()]

    def test_unwatched_path_ignored(self, write_source, tmp_path):
        """Changes to other files are ignored."""
        path = write_source("schema.ts", "")
        recorder = _Recorder()
        watcher = SourceWatcher(ViewerContext(path, None), debounce_seconds=0.05, on_reload=recorder)

        watcher.notify(tmp_path / "other.ts")
        time.sleep(0.2)

        assert recorder.paths == []

    def test_stop_cancels_pending(self, write_source):
        """Stopping drops reloads that have not fired yet."""
        path = write_source("schema.ts", "")
        recorder = _Recorder()
        watcher = SourceWatcher(ViewerContext(path, None), debounce_seconds=0.5, on_reload=recorder)

        watcher.notify(path)
        watcher.stop()
        time.sleep(0.7)

        assert recorder.paths == []

    def test_observer_reloads_context(self, write_source):
        """Editing a watched file re-parses it."""
        path = write_source("schema.ts", 'db.run("CREATE TABLE a (id INTEGER)");\n')
        context = ViewerContext(path, None)
        context.load()

        reloaded = threading.Event()

        def reload(changed):
            context.reload_path(changed)
            reloaded.set()

        watcher = SourceWatcher(context, debounce_seconds=0.1, on_reload=reload)
        watcher.start()
        try:
            path.write_text('db.run("CREATE TABLE b (id INTEGER)");\n')
            assert reloaded.wait(5)
        finally:
            watcher.stop()

        assert [t.name for t in context.schema.tables] == ["b"]

    def test_nothing_to_watch(self):
        """A context without files starts and stops cleanly."""
        watcher = SourceWatcher(ViewerContext())
        watcher.start()
        watcher.stop()

        assert watcher.observer is None
