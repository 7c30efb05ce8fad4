import asyncio
import logging
from concurrent.futures import CancelledError, Future
from io import BytesIO
from typing import Any, List, Optional

from PyQt5.QtCore import QObject, QSize, Qt, pyqtSignal
from PyQt5.QtGui import QIcon, QPixmap
from PyQt5.QtWidgets import (
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from OC_Libs.config import EditorConfig
from OC_Libs.constants import (
    DEFAULT_WINDOW_HEIGHT,
    DEFAULT_WINDOW_WIDTH,
    EXPORT_FILE_NAME,
    RESULT_THUMBNAIL_SIZE,
    SHAPE_CIRCLE,
    SHAPE_RECTANGLE,
    SHAPE_TRIANGLE,
)
from OC_Libs.errors import OpenCanvasError
from OC_Libs.SceneLib.bitmap_loader import BitmapLoader
from OC_Libs.SceneLib.editor_loop import EditorLoop
from OC_Libs.SceneLib.scene_editor import SceneEditor
from OC_Libs.SceneLib.scene_models import TextObject
from OC_Libs.SearchLib.search_adapter import PixabaySearchAdapter
from OC_Libs.SearchLib.search_models import SearchResult
from OC_Libs.SearchLib.search_session import SearchSession

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "Something went wrong. See the log for details."
CANCELLED_MESSAGE = "The command was cancelled."


def command_failure_message(done: Future) -> Optional[str]:
    """User-facing message for a finished command future, or None on success."""
    try:
        done.result()
    except OpenCanvasError as e:
        return e.message
    except CancelledError:
        return CANCELLED_MESSAGE
    except Exception:
        logger.exception("Editor command failed")
        return UNEXPECTED_ERROR_MESSAGE
    return None


class _LoopBridge(QObject):
    """Carries results from the editor loop thread back to the Qt thread."""

    surface_ready = pyqtSignal(object)
    search_finished = pyqtSignal()
    thumbnail_ready = pyqtSignal(int, object)
    command_failed = pyqtSignal(str)
    export_saved = pyqtSignal(str)


class OpenCanvasWindow(QMainWindow):
    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        super().__init__()
        self.config = config or EditorConfig()
        self.setWindowTitle("Open Canvas - Image Editor")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)

        self.results: List[SearchResult] = []
        self._search_generation = 0
        self._active_text: Optional[TextObject] = None

        self.bridge = _LoopBridge()
        self.editor_loop = EditorLoop().start()
        self.editor = SceneEditor(self.config)
        self.search_adapter = PixabaySearchAdapter.from_config(self.config)
        self.search_session = SearchSession(self.search_adapter)
        self.thumbnail_loader = BitmapLoader(timeout=self.config.request_timeout)

        self._build_ui()
        self._connect_signals()

        self.editor_loop.call(self.editor.add_redraw_listener, self._on_redraw).result()
        self.editor_loop.call(self.editor.open).result()
        self._on_redraw(self.editor.surface)

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)

        root = QHBoxLayout(central)

        search_col = QVBoxLayout()
        canvas_col = QVBoxLayout()
        search_bar = QHBoxLayout()
        controls_row = QHBoxLayout()
        caption_row = QHBoxLayout()

        self.query_input = QLineEdit()
        self.query_input.setPlaceholderText("Search for images...")
        self.btn_search = QPushButton("Search")
        self.results_list = QListWidget()
        self.results_list.setIconSize(QSize(RESULT_THUMBNAIL_SIZE, RESULT_THUMBNAIL_SIZE))
        self.btn_add_image = QPushButton("Add Selected Image")
        self.label_status = QLabel("")

        self.label_canvas = QLabel()
        self.label_canvas.setAlignment(Qt.AlignCenter)
        self.label_canvas.setFixedSize(self.config.canvas_width, self.config.canvas_height)
        self.label_canvas.setStyleSheet("border: 1px solid #888; background: #fff;")

        self.btn_add_text = QPushButton("Add Text")
        self.btn_add_circle = QPushButton("Add Circle")
        self.btn_add_rectangle = QPushButton("Add Rectangle")
        self.btn_add_triangle = QPushButton("Add Triangle")
        self.btn_download = QPushButton("Download")
        self.caption_input = QLineEdit()
        self.caption_input.setPlaceholderText("Caption for the last text box...")
        self.btn_update_text = QPushButton("Update Text")

        search_bar.addWidget(self.query_input)
        search_bar.addWidget(self.btn_search)
        search_col.addLayout(search_bar)
        search_col.addWidget(self.results_list)
        search_col.addWidget(self.btn_add_image)
        search_col.addWidget(self.label_status)

        for button in (
            self.btn_add_text,
            self.btn_add_circle,
            self.btn_add_rectangle,
            self.btn_add_triangle,
            self.btn_download,
        ):
            controls_row.addWidget(button)

        caption_row.addWidget(self.caption_input)
        caption_row.addWidget(self.btn_update_text)

        canvas_col.addWidget(self.label_canvas)
        canvas_col.addLayout(controls_row)
        canvas_col.addLayout(caption_row)
        canvas_col.addStretch(1)

        root.addLayout(search_col, stretch=1)
        root.addLayout(canvas_col, stretch=2)

    def _connect_signals(self) -> None:
        self.btn_search.clicked.connect(self.run_search)
        self.query_input.returnPressed.connect(self.run_search)
        self.btn_add_image.clicked.connect(self.add_selected_image)
        self.results_list.itemDoubleClicked.connect(lambda _item: self.add_selected_image())
        self.btn_add_text.clicked.connect(self.add_text)
        self.btn_add_circle.clicked.connect(lambda: self.add_shape(SHAPE_CIRCLE))
        self.btn_add_rectangle.clicked.connect(lambda: self.add_shape(SHAPE_RECTANGLE))
        self.btn_add_triangle.clicked.connect(lambda: self.add_shape(SHAPE_TRIANGLE))
        self.btn_download.clicked.connect(self.download)
        self.btn_update_text.clicked.connect(self.update_text)
        self.caption_input.returnPressed.connect(self.update_text)

        self.bridge.surface_ready.connect(self.refresh_canvas)
        self.bridge.search_finished.connect(self.refresh_results)
        self.bridge.thumbnail_ready.connect(self.set_thumbnail)
        self.bridge.command_failed.connect(self._show_error)
        self.bridge.export_saved.connect(
            lambda path: self._show_info("Success", f"Canvas saved to {path}")
        )

    # Editor commands, executed on the editor loop thread

    def add_text(self) -> None:
        self._watch(self.editor_loop.call(self.editor.add_text), on_success=self._set_active_text)

    def _set_active_text(self, text: TextObject) -> None:
        self._active_text = text

    def update_text(self) -> None:
        if self._active_text is None:
            self.label_status.setText("Add a text box first.")
            return

        future = self.editor_loop.call(
            self.editor.edit_text, self._active_text, self.caption_input.text()
        )
        self._watch(future)

    def add_shape(self, kind: str) -> None:
        self._watch(self.editor_loop.call(self.editor.add_shape, kind))

    def add_selected_image(self) -> None:
        row = self.results_list.currentRow()
        if row < 0 or row >= len(self.results):
            return

        result = self.results[row]
        self.label_status.setText("Loading image...")
        self._watch(self.editor_loop.submit(self.editor.add_image(result.full_url)))

    def download(self) -> None:
        save_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Canvas",
            EXPORT_FILE_NAME,
            "PNG Images (*.png)",
        )
        if not save_path:
            return

        future = self.editor_loop.call(self.editor.save_export, save_path)
        self._watch(future, on_success=lambda path: self.bridge.export_saved.emit(str(path)))

    def _watch(self, future: Future, on_success=None) -> None:
        def _done(done: Future) -> None:
            message = command_failure_message(done)
            if message is not None:
                self.bridge.command_failed.emit(message)
                return
            if on_success is not None:
                on_success(done.result())

        future.add_done_callback(_done)

    def _on_redraw(self, surface: Any) -> None:
        if surface is not None:
            self.bridge.surface_ready.emit(surface.copy())

    # Search

    def run_search(self) -> None:
        self.label_status.setText("Searching...")
        future = self.editor_loop.submit(self.search_session.run(self.query_input.text()))
        future.add_done_callback(lambda _done: self.bridge.search_finished.emit())

    def refresh_results(self) -> None:
        session = self.search_session
        self.label_status.setText(session.message or ("Searching..." if session.loading else ""))

        if session.results is self.results:
            return

        self.results = session.results
        self._search_generation += 1
        self.results_list.clear()

        for index, result in enumerate(self.results):
            item = QListWidgetItem(result.tags or result.id)
            item.setToolTip(result.full_url)
            self.results_list.addItem(item)
            self._request_thumbnail(self._search_generation, index, result.preview_url)

    def _request_thumbnail(self, generation: int, index: int, url: str) -> None:
        async def _load():
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self.thumbnail_loader.load, url)

        def _done(done: Future) -> None:
            if done.cancelled() or done.exception() is not None:
                logger.debug("Thumbnail unavailable for %s", url)
                return
            if generation == self._search_generation:
                self.bridge.thumbnail_ready.emit(index, done.result())

        self.editor_loop.submit(_load()).add_done_callback(_done)

    def set_thumbnail(self, index: int, image: Any) -> None:
        item = self.results_list.item(index)
        if item is None:
            return
        pixmap = self._to_pixmap(image)
        if pixmap is not None:
            item.setIcon(QIcon(pixmap))

    # Display

    def refresh_canvas(self, surface: Any) -> None:
        self.label_status.setText(self.search_session.message or "")
        pixmap = self._to_pixmap(surface)
        if pixmap is None:
            self.label_canvas.setText("Preview failed")
            return
        self.label_canvas.setPixmap(pixmap)

    def _to_pixmap(self, image: Any) -> Optional[QPixmap]:
        buffer = BytesIO()
        image.save(buffer, format="PNG")
        pixmap = QPixmap()
        if not pixmap.loadFromData(buffer.getvalue(), "PNG"):
            return None
        return pixmap

    def _show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self, title, message)

    def _show_error(self, message: str) -> None:
        self.label_status.setText(message)
        QMessageBox.warning(self, "Open Canvas", message)

    def closeEvent(self, event) -> None:
        try:
            self.editor_loop.call(self.editor.close).result()
        finally:
            self.search_adapter.close()
            self.thumbnail_loader.close()
            self.editor_loop.stop()
        super().closeEvent(event)
