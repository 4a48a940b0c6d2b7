"""
PyQt5 desktop client for the Agromet data manager.

It does the two things people mostly open the dashboard for:
- upload a station-month sheet (CSV/XLSX) into one of the climate tables,
- look at the daily series of one station over a chosen time range.

The sheet is parsed locally with pandas and posted as JSON rows, exactly
like the web upload page does. HTTP runs in worker threads so the window
does not freeze on big files.
"""
import sys
from dataclasses import dataclass
from typing import Any, Dict, List

from PyQt5.QtCore import QThread, pyqtSignal
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

import climate_client


@dataclass
class WorkerResult:
    ok: bool
    error_message: str | None
    payload: Any = None


class ApiWorker(QThread):
    """Runs one climate_client call in the background and reports back."""

    finished_with_result = pyqtSignal(object)

    def __init__(self, job, *args, **kwargs):
        super().__init__()
        self.job = job
        self.args = args
        self.kwargs = kwargs

    def run(self) -> None:
        try:
            result = WorkerResult(ok=True, error_message=None, payload=self.job(*self.args, **self.kwargs))
        except (climate_client.ApiError, ValueError, OSError) as exc:
            result = WorkerResult(ok=False, error_message=str(exc))
        except Exception as exc:  # noqa: BLE001
            # requests and pandas both have deep exception trees; the user only needs the text
            result = WorkerResult(ok=False, error_message=f"{type(exc).__name__}: {exc}")

        # Emit result back to the main (GUI) thread.
        self.finished_with_result.emit(result)


def parse_and_upload(slug: str, file_path: str, auth) -> Dict[str, Any]:
    rows = climate_client.read_rows(file_path)
    if not rows:
        raise ValueError("The selected file has no data rows.")
    return climate_client.upload_rows(slug, rows, auth=auth)


class SeriesCanvas(FigureCanvas):
    """Matplotlib canvas with one line for the selected station."""

    def __init__(self, parent: QWidget | None = None):
        self.fig = Figure(figsize=(6, 3), facecolor="#f8fafc")
        super().__init__(self.fig)
        self.setParent(parent)
        self.ax = self.fig.add_subplot(111)
        self.fig.tight_layout()

    def plot_series(self, points: List[List[float]], title: str, color: str, unit: str) -> None:
        self.ax.clear()

        if not points:
            self.ax.text(
                0.5,
                0.5,
                "No data for this station and range",
                ha="center",
                va="center",
                fontsize=10,
                transform=self.ax.transAxes,
            )
        else:
            df = climate_client.series_frame(points)
            self.ax.plot(df.index, df["value"], color=color, linewidth=1.2)
            self.ax.set_title(title)
            self.ax.set_ylabel(unit)
            self.ax.grid(True, alpha=0.3)
            self.fig.autofmt_xdate()

        self.draw()


class MainWindow(QWidget):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Agromet Data Manager - Desktop")
        self.setMinimumSize(960, 600)

        self.selected_file: str | None = None
        self.parameters: List[Dict[str, Any]] = []
        # keep references so running threads are not garbage collected
        self.workers: List[ApiWorker] = []

        self._build_ui()
        self.load_parameters()

    def _build_ui(self) -> None:
        main_layout = QVBoxLayout()
        main_layout.setContentsMargins(16, 16, 16, 16)
        main_layout.setSpacing(12)

        title = QLabel("Agromet Data Manager")
        title.setStyleSheet("color: #15803d; font-size: 20px; font-weight: 600;")
        main_layout.addWidget(title)

        # Parameter picker + optional credentials
        top_row = QHBoxLayout()
        form = QFormLayout()
        self.parameter_combo = QComboBox()
        self.parameter_combo.currentIndexChanged.connect(self.on_parameter_changed)
        form.addRow("Parameter:", self.parameter_combo)

        self.username_input = QLineEdit()
        self.username_input.setPlaceholderText("Mobile number (optional)")
        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("Password")
        self.password_input.setEchoMode(QLineEdit.Password)
        form.addRow("User:", self.username_input)
        form.addRow("Password:", self.password_input)
        top_row.addLayout(form, stretch=2)

        # Upload column
        upload_column = QVBoxLayout()
        select_button = QPushButton("Browse CSV/XLSX...")
        select_button.clicked.connect(self.on_select_file)
        self.file_path_label = QLabel("No file selected")
        self.file_path_label.setStyleSheet("color: #6b7280; font-size: 10px;")
        self.upload_button = QPushButton("Upload")
        self.upload_button.setStyleSheet(
            "background-color: #15803d; color: white; padding: 6px 14px; border-radius: 4px;"
        )
        self.upload_button.clicked.connect(self.on_upload_clicked)
        upload_column.addWidget(select_button)
        upload_column.addWidget(self.file_path_label)
        upload_column.addWidget(self.upload_button)
        top_row.addLayout(upload_column, stretch=2)

        main_layout.addLayout(top_row)

        self.info_label = QLabel("")
        self.info_label.setStyleSheet("color: #b91c1c; font-size: 11px;")
        main_layout.addWidget(self.info_label)

        self.results_label = QLabel("No upload yet.")
        self.results_label.setWordWrap(True)
        self.results_label.setStyleSheet("font-family: monospace; font-size: 11px;")
        main_layout.addWidget(self.results_label)

        # Historical chart controls
        chart_row = QHBoxLayout()
        self.station_combo = QComboBox()
        self.range_combo = QComboBox()
        self.range_combo.addItems(climate_client.RANGE_CHOICES)
        self.range_combo.setCurrentText("1Y")
        show_button = QPushButton("Show chart")
        show_button.clicked.connect(self.on_show_chart)
        chart_row.addWidget(QLabel("Station:"))
        chart_row.addWidget(self.station_combo, stretch=2)
        chart_row.addWidget(QLabel("Range:"))
        chart_row.addWidget(self.range_combo)
        chart_row.addWidget(show_button)
        main_layout.addLayout(chart_row)

        self.chart_canvas = SeriesCanvas(self)
        main_layout.addWidget(self.chart_canvas, stretch=1)

        self.setLayout(main_layout)

    # helpers

    def _auth(self):
        username = self.username_input.text().strip()
        password = self.password_input.text()
        return (username, password) if username and password else None

    def _current_parameter(self) -> Dict[str, Any] | None:
        index = self.parameter_combo.currentIndex()
        if 0 <= index < len(self.parameters):
            return self.parameters[index]
        return None

    def _start(self, callback, job, *args, **kwargs) -> None:
        worker = ApiWorker(job, *args, **kwargs)
        worker.finished_with_result.connect(callback)
        worker.finished.connect(lambda: self.workers.remove(worker))
        self.workers.append(worker)
        worker.start()

    def _show_error(self, message: str) -> None:
        self.info_label.setText(message)
        msg_box = QMessageBox(self)
        msg_box.setIcon(QMessageBox.Warning)
        msg_box.setWindowTitle("Error")
        msg_box.setText(message)
        msg_box.exec_()

    # parameters and stations

    def load_parameters(self) -> None:
        self._start(self.on_parameters_loaded, climate_client.fetch_parameters, self._auth())

    def on_parameters_loaded(self, result: WorkerResult) -> None:
        if not result.ok:
            self._show_error(f"Could not reach the server: {result.error_message}")
            return
        self.parameters = result.payload
        self.parameter_combo.clear()
        for parameter in self.parameters:
            self.parameter_combo.addItem(parameter["label"])

    def on_parameter_changed(self, _index: int) -> None:
        parameter = self._current_parameter()
        if parameter is None:
            return
        self.station_combo.clear()
        self._start(self.on_stations_loaded, climate_client.fetch_stations, parameter["value"], self._auth())

    def on_stations_loaded(self, result: WorkerResult) -> None:
        if not result.ok:
            self.info_label.setText(result.error_message or "Could not load stations.")
            return
        self.station_combo.clear()
        self.station_combo.addItems(result.payload)

    # upload

    def on_select_file(self) -> None:
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Select climate sheet", "", "Sheets (*.csv *.xlsx);;All files (*.*)"
        )
        if file_path:
            self.selected_file = file_path
            self.file_path_label.setText(file_path)
            self.info_label.setText("")

    def on_upload_clicked(self) -> None:
        parameter = self._current_parameter()
        if parameter is None:
            self._show_error("Parameters are not loaded yet.")
            return
        if not self.selected_file:
            self._show_error("Please select a CSV or XLSX file first.")
            return

        # Disable the button during the upload so it's harder to spam the API.
        self.upload_button.setEnabled(False)
        self.upload_button.setText("Uploading...")
        self.info_label.setText("")
        self._start(self.on_upload_finished, parse_and_upload, parameter["value"], self.selected_file, self._auth())

    def on_upload_finished(self, result: WorkerResult) -> None:
        self.upload_button.setEnabled(True)
        self.upload_button.setText("Upload")

        if not result.ok:
            self._show_error(result.error_message or "Upload failed.")
            return

        self.results_label.setText(climate_client.format_results(result.payload))
        self.info_label.setText("Upload complete.")
        # new stations may have appeared
        self.on_parameter_changed(self.parameter_combo.currentIndex())

    # chart

    def on_show_chart(self) -> None:
        parameter = self._current_parameter()
        station = self.station_combo.currentText()
        if parameter is None or not station:
            self._show_error("Pick a parameter and a station first.")
            return
        self._start(
            self.on_series_loaded,
            climate_client.fetch_series,
            parameter["value"],
            station,
            self.range_combo.currentText(),
            self._auth(),
        )

    def on_series_loaded(self, result: WorkerResult) -> None:
        if not result.ok:
            self._show_error(result.error_message or "Could not load the series.")
            return
        parameter = self._current_parameter() or {"name": "", "unit": "", "color": "#15803d"}
        self.chart_canvas.plot_series(
            result.payload,
            title=f"{parameter['name']} - {self.station_combo.currentText()}",
            color=parameter.get("color", "#15803d"),
            unit=parameter.get("unit", ""),
        )


def main() -> None:
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
