"""
ChaChaCrypt — Main Entry Point & PyQt6 GUI

Tabs
────
1. Stream Cipher    – ChaCha20 encrypt/decrypt playground, verify, benchmark
2. Text Encryption  – passphrase + nonce text encryption (hex output)
3. Logs             – live scrolling log output
"""

import sys
import os
import time
import logging
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QTabWidget,
    QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QLineEdit,
    QTextEdit, QComboBox, QGroupBox, QSpinBox, QFileDialog,
    QMessageBox, QTableWidget, QTableWidgetItem, QHeaderView,
    QStatusBar, QCheckBox, QPlainTextEdit,
)
from PyQt6.QtCore import pyqtSignal, QObject
from PyQt6.QtGui import QFont, QTextCursor

# ── ChaChaCrypt imports ──────────────────────────────────────────
from config.settings import Settings

from core.crypto_engine import CipherFactory, StreamSession, ChaChaError
from core.crypto_engine import chacha_block, serialize_block, ChaChaState

from utils.random_gen    import SecureRandom
from utils.nonce_tracker import NonceTracker

from GUI.text_encryption import TextEncryptionUI

# RFC 8439 §2.3.2 block test vector
KAT_KEY      = bytes(range(32))
KAT_NONCE    = bytes.fromhex("000000090000004a00000000")
KAT_COUNTER  = 1
KAT_EXPECTED = bytes.fromhex(
    "10f1e7e4d13b5915500fdd1fa32071c4c7d1f4c733c068030422aa9ac3d46c4e"
    "d2826446079faa0914c2d705d98b02a2b5129cd1de164eb9cbd083e8a2503c4e"
)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Qt Log Handler — routes Python logging into the GUI
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class QtLogSignal(QObject):
    """Bridge: Python logging → Qt signal."""
    log_message = pyqtSignal(str)


class QtLogHandler(logging.Handler):
    """Logging handler that emits a Qt signal for each record."""

    def __init__(self):
        super().__init__()
        self.signal_emitter = QtLogSignal()
        fmt = logging.Formatter(
            "[%(asctime)s] [%(levelname)-8s] %(name)-28s — %(message)s",
            datefmt="%H:%M:%S",
        )
        self.setFormatter(fmt)

    def emit(self, record):
        msg = self.format(record)
        self.signal_emitter.log_message.emit(msg)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Style Constants
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

STYLE_SHEET = """
QMainWindow {
    background-color: #1e1e2e;
}
QTabWidget::pane {
    border: 1px solid #313244;
    background-color: #1e1e2e;
}
QTabBar::tab {
    background-color: #313244;
    color: #cdd6f4;
    padding: 8px 20px;
    margin-right: 2px;
    border-top-left-radius: 6px;
    border-top-right-radius: 6px;
}
QTabBar::tab:selected {
    background-color: #45475a;
    color: #89b4fa;
    font-weight: bold;
}
QGroupBox {
    color: #89b4fa;
    border: 1px solid #45475a;
    border-radius: 8px;
    margin-top: 12px;
    padding-top: 16px;
    font-weight: bold;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 12px;
    padding: 0 6px;
}
QPushButton {
    background-color: #89b4fa;
    color: #1e1e2e;
    border: none;
    padding: 8px 18px;
    border-radius: 6px;
    font-weight: bold;
}
QPushButton:hover {
    background-color: #74c7ec;
}
QPushButton:pressed {
    background-color: #585b70;
}
QLineEdit, QSpinBox, QComboBox {
    background-color: #313244;
    color: #cdd6f4;
    border: 1px solid #45475a;
    border-radius: 5px;
    padding: 6px;
}
QLineEdit:focus, QSpinBox:focus, QComboBox:focus {
    border: 1px solid #89b4fa;
}
QTextEdit, QPlainTextEdit {
    background-color: #11111b;
    color: #a6e3a1;
    border: 1px solid #313244;
    border-radius: 5px;
    font-family: 'Consolas', 'Courier New', monospace;
    font-size: 12px;
}
QTableWidget {
    background-color: #1e1e2e;
    color: #cdd6f4;
    gridline-color: #313244;
    border: 1px solid #45475a;
    border-radius: 5px;
}
QHeaderView::section {
    background-color: #313244;
    color: #89b4fa;
    padding: 6px;
    border: 1px solid #45475a;
    font-weight: bold;
}
QLabel {
    color: #cdd6f4;
}
QStatusBar {
    background-color: #181825;
    color: #a6adc8;
}
QCheckBox {
    color: #cdd6f4;
}
"""

MONO_FONT = QFont("Consolas", 10)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Stream Cipher Tab
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class StreamCipherTab(QWidget):
    """Interactive ChaCha playground — every registered variant."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger("ChaChaCrypt.StreamTab")
        self.nonce_tracker = NonceTracker()
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        #  Cipher Comparison Table
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

        table_group = QGroupBox("📊  Available Engines")
        table_layout = QVBoxLayout(table_group)

        self.tbl_ciphers = QTableWidget()
        headers = ["Cipher", "Key Bits", "Rounds", "Engine", "Security",
                   "Speed"]
        self.tbl_ciphers.setColumnCount(len(headers))
        self.tbl_ciphers.setHorizontalHeaderLabels(headers)
        self.tbl_ciphers.horizontalHeader().setSectionResizeMode(
            QHeaderView.ResizeMode.Stretch
        )
        self.tbl_ciphers.setEditTriggers(
            QTableWidget.EditTrigger.NoEditTriggers
        )

        all_info = CipherFactory.get_all_info()
        self.tbl_ciphers.setRowCount(len(all_info))
        for row, info in enumerate(all_info):
            values = [
                info["name"], str(info["key_bits"]), str(info["rounds"]),
                info["category"], info["security"], info["speed"],
            ]
            for col, value in enumerate(values):
                self.tbl_ciphers.setItem(row, col, QTableWidgetItem(value))
        self.tbl_ciphers.setMaximumHeight(170)
        table_layout.addWidget(self.tbl_ciphers)
        layout.addWidget(table_group)

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        #  Encrypt / Decrypt Area
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

        enc_group = QGroupBox("🔒  Encrypt / Decrypt Playground")
        enc_layout = QVBoxLayout(enc_group)

        row1 = QHBoxLayout()
        row1.addWidget(QLabel("Cipher:"))
        self.cmb_cipher = QComboBox()
        self.cmb_cipher.addItems(CipherFactory.list_ciphers())
        self.cmb_cipher.currentTextChanged.connect(self._on_cipher_changed)
        row1.addWidget(self.cmb_cipher)

        row1.addWidget(QLabel("Key (hex):"))
        self.txt_key = QLineEdit()
        self.txt_key.setPlaceholderText("Click Generate")
        row1.addWidget(self.txt_key)

        self.btn_gen_key = QPushButton("🔑 Generate")
        self.btn_gen_key.clicked.connect(self._gen_key)
        row1.addWidget(self.btn_gen_key)
        enc_layout.addLayout(row1)

        row2 = QHBoxLayout()
        row2.addWidget(QLabel("Nonce (hex):"))
        self.txt_nonce = QLineEdit()
        self.txt_nonce.setPlaceholderText("Empty = random nonce per message")
        row2.addWidget(self.txt_nonce)

        row2.addWidget(QLabel("Counter:"))
        self.spn_counter = QSpinBox()
        self.spn_counter.setRange(0, 2**31 - 1)
        self.spn_counter.setValue(Settings.INITIAL_COUNTER)
        row2.addWidget(self.spn_counter)

        self.chk_track = QCheckBox("Refuse nonce reuse")
        self.chk_track.setChecked(True)
        row2.addWidget(self.chk_track)

        self.lbl_key_info = QLabel("")
        self.lbl_key_info.setStyleSheet("color: #6c7086;")
        row2.addWidget(self.lbl_key_info)
        enc_layout.addLayout(row2)

        self.txt_plain = QTextEdit()
        self.txt_plain.setPlaceholderText("Enter plaintext to encrypt…")
        self.txt_plain.setMaximumHeight(80)
        enc_layout.addWidget(self.txt_plain)

        btn_row = QHBoxLayout()
        self.btn_encrypt = QPushButton("🔒  Encrypt")
        self.btn_encrypt.clicked.connect(self._encrypt)
        btn_row.addWidget(self.btn_encrypt)

        self.btn_decrypt = QPushButton("🔓  Decrypt")
        self.btn_decrypt.clicked.connect(self._decrypt)
        btn_row.addWidget(self.btn_decrypt)
        enc_layout.addLayout(btn_row)

        self.txt_cipher_out = QTextEdit()
        self.txt_cipher_out.setPlaceholderText(
            "Encrypted output (hex; nonce prefix when generated)…"
        )
        self.txt_cipher_out.setMaximumHeight(80)
        enc_layout.addWidget(self.txt_cipher_out)

        layout.addWidget(enc_group)

        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
        #  Verify / Benchmark
        # ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

        bench_group = QGroupBox("⚡  Verification & Benchmark")
        bench_layout = QVBoxLayout(bench_group)

        bench_btn_row = QHBoxLayout()
        self.btn_verify = QPushButton("✅  Verify All Engines")
        self.btn_verify.clicked.connect(self._verify_all)
        bench_btn_row.addWidget(self.btn_verify)

        self.btn_benchmark = QPushButton("🏁  Run Benchmark")
        self.btn_benchmark.clicked.connect(self._run_benchmark)
        bench_btn_row.addWidget(self.btn_benchmark)
        bench_layout.addLayout(bench_btn_row)

        self.txt_bench = QPlainTextEdit()
        self.txt_bench.setReadOnly(True)
        self.txt_bench.setMaximumHeight(200)
        self.txt_bench.setFont(MONO_FONT)
        bench_layout.addWidget(self.txt_bench)
        layout.addWidget(bench_group)

        layout.addStretch()
        self._on_cipher_changed(self.cmb_cipher.currentText())

    # ── Key / nonce handling ─────────────────────────────────────

    def _on_cipher_changed(self, cipher_name: str):
        if not cipher_name:
            return
        info = CipherFactory.get_info(cipher_name)
        self.lbl_key_info.setText(
            f"{info['key_bits']}-bit | {info['rounds']} rounds | "
            f"{info['category']}"
        )

    def _gen_key(self):
        self.txt_key.setText(SecureRandom.generate_key().hex())

    def _get_key(self) -> bytes | None:
        hex_key = self.txt_key.text().strip()
        if not hex_key:
            QMessageBox.warning(self, "No Key", "Generate or enter a key first.")
            return None
        try:
            return bytes.fromhex(hex_key)
        except ValueError:
            QMessageBox.warning(self, "Bad Key", "Invalid hex.")
            return None

    def _get_nonce(self) -> bytes | None:
        """Explicit nonce from the field, or None for a random one."""
        hex_nonce = self.txt_nonce.text().strip()
        if not hex_nonce:
            return None
        return bytes.fromhex(hex_nonce)

    def _create_cipher(self, key: bytes):
        tracker = self.nonce_tracker if self.chk_track.isChecked() else None
        return CipherFactory.create(
            self.cmb_cipher.currentText(), key,
            counter=self.spn_counter.value(),
            nonce_tracker=tracker,
        )

    # ── Encrypt / Decrypt ────────────────────────────────────────

    def _encrypt(self):
        key = self._get_key()
        if not key:
            return
        pt = self.txt_plain.toPlainText().encode("utf-8")
        if not pt:
            return
        try:
            cipher = self._create_cipher(key)
            nonce  = self._get_nonce()
            if nonce is None:
                encrypted = cipher.encrypt(pt)
            else:
                encrypted = cipher.encrypt_with_nonce(pt, nonce)
            self.txt_cipher_out.setPlainText(encrypted.hex())
            self.logger.info(
                "Encrypted %d bytes with %s", len(pt), cipher.cipher_name
            )
        except (ChaChaError, ValueError, RuntimeError) as exc:
            QMessageBox.warning(self, "Encrypt Error", str(exc))

    def _decrypt(self):
        key = self._get_key()
        if not key:
            return
        hex_ct = self.txt_cipher_out.toPlainText().strip()
        if not hex_ct:
            return
        try:
            ct     = bytes.fromhex(hex_ct)
            cipher = self._create_cipher(key)
            nonce  = self._get_nonce()
            if nonce is None:
                pt = cipher.decrypt(ct)
            else:
                pt = cipher.decrypt_with_nonce(ct, nonce)
            self.txt_plain.setPlainText(pt.decode("utf-8"))
        except (ChaChaError, ValueError, RuntimeError) as exc:
            QMessageBox.warning(self, "Decrypt Error", str(exc))

    # ── Verify All Engines ───────────────────────────────────────

    def _verify_all(self):
        """Known-answer block test, then round-trip for every engine."""
        self.txt_bench.clear()
        self.txt_bench.appendPlainText(
            "═══ Engine Verification ══════════════════════"
        )

        state = ChaChaState.from_bytes(KAT_KEY, KAT_NONCE, KAT_COUNTER)
        block = serialize_block(chacha_block(state.to_words()))
        all_pass = block == KAT_EXPECTED
        self.txt_bench.appendPlainText(
            f"  {'✅' if all_pass else '❌'} RFC 8439 §2.3.2 block vector"
        )

        key       = SecureRandom.generate_key()
        test_data = "ChaChaCrypt verification test! 🔐".encode("utf-8")

        for name in CipherFactory.list_ciphers():
            try:
                cipher    = CipherFactory.create(name, key)
                encrypted = cipher.encrypt(test_data)
                decrypted = cipher.decrypt(encrypted)
                overhead  = len(encrypted) - len(test_data)

                if decrypted == test_data:
                    self.txt_bench.appendPlainText(
                        f"  ✅ {name:18s} — OK  (overhead: {overhead} bytes)"
                    )
                else:
                    self.txt_bench.appendPlainText(
                        f"  ❌ {name:18s} — DATA MISMATCH"
                    )
                    all_pass = False
            except (ChaChaError, RuntimeError) as exc:
                self.txt_bench.appendPlainText(
                    f"  ❌ {name:18s} — ERROR: {exc}"
                )
                all_pass = False

        self.txt_bench.appendPlainText(
            "═══════════════════════════════════════════════"
        )
        self.txt_bench.appendPlainText(
            "  🎉  ALL ENGINES PASSED" if all_pass
            else "  ⚠️   SOME ENGINES FAILED"
        )

    # ── Benchmark ────────────────────────────────────────────────

    def _run_benchmark(self):
        """Encrypt Settings.BENCHMARK_SIZE bytes with each engine."""
        self.txt_bench.clear()
        size      = Settings.BENCHMARK_SIZE
        key       = SecureRandom.generate_key()
        nonce     = SecureRandom.generate_nonce()
        test_data = SecureRandom.generate_bytes(size)

        self.txt_bench.appendPlainText(
            f"═══ Benchmark ({size // 1024} KB) ═══════════════════"
        )
        results = []
        for name in CipherFactory.list_ciphers():
            cipher = CipherFactory.create(name, key)
            t0 = time.perf_counter()
            cipher.encrypt_with_nonce(test_data, nonce)
            elapsed = time.perf_counter() - t0
            mbps = (size / (1024 * 1024)) / elapsed if elapsed > 0 else 9999
            results.append((name, mbps, elapsed * 1000))
            self.txt_bench.appendPlainText(
                f"  {name:<18s} {mbps:>9.2f} MB/s {elapsed * 1000:>9.1f} ms"
            )

        # parallel keystream over the pure engine
        session = StreamSession(key, nonce)
        t0 = time.perf_counter()
        session.process_parallel(test_data)
        elapsed = time.perf_counter() - t0
        mbps = (size / (1024 * 1024)) / elapsed if elapsed > 0 else 9999
        self.txt_bench.appendPlainText(
            f"  {'CHACHA20 ×' + str(Settings.PARALLEL_WORKERS):<18s} "
            f"{mbps:>9.2f} MB/s "
            f"{elapsed * 1000:>9.1f} ms"
        )

        results.sort(key=lambda x: x[2])
        if results:
            self.txt_bench.appendPlainText(f"\n  🏆 Fastest: {results[0][0]}")
            self.txt_bench.appendPlainText(
                f"  💡 Recommended: {CipherFactory.recommend()}"
            )


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Logs Tab
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class LogsTab(QWidget):
    def __init__(self, log_handler: QtLogHandler, parent=None):
        super().__init__(parent)
        self.log_handler = log_handler
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)

        toolbar = QHBoxLayout()
        self.chk_auto = QCheckBox("Auto-scroll")
        self.chk_auto.setChecked(True)
        toolbar.addWidget(self.chk_auto)

        self.btn_clear = QPushButton("🗑️  Clear")
        self.btn_clear.clicked.connect(self._clear)
        toolbar.addWidget(self.btn_clear)

        self.btn_save = QPushButton("💾  Save to File")
        self.btn_save.clicked.connect(self._save)
        toolbar.addWidget(self.btn_save)

        toolbar.addStretch()
        layout.addLayout(toolbar)

        self.txt_log = QPlainTextEdit()
        self.txt_log.setReadOnly(True)
        self.txt_log.setMaximumBlockCount(5000)
        self.txt_log.setFont(MONO_FONT)
        layout.addWidget(self.txt_log)

        self.log_handler.signal_emitter.log_message.connect(self._append_log)

    def _append_log(self, msg: str):
        self.txt_log.appendPlainText(msg)
        if self.chk_auto.isChecked():
            cursor = self.txt_log.textCursor()
            cursor.movePosition(QTextCursor.MoveOperation.End)
            self.txt_log.setTextCursor(cursor)

    def _clear(self):
        self.txt_log.clear()

    def _save(self):
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Log", "chachacrypt.log", "Log Files (*.log *.txt)"
        )
        if path:
            with open(path, "w") as f:
                f.write(self.txt_log.toPlainText())


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Logging setup
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def configure_logging(*extra_handlers: logging.Handler):
    """Root logger → console + log file (+ any GUI handler)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, Settings.LOG_LEVEL, logging.DEBUG))

    fmt = logging.Formatter(
        "[%(asctime)s] [%(levelname)-8s] %(name)s — %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(fmt)
    root_logger.addHandler(console_handler)

    log_dir = os.path.dirname(Settings.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.FileHandler(Settings.LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(fmt)
    root_logger.addHandler(file_handler)

    for handler in extra_handlers:
        root_logger.addHandler(handler)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Main Window
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.log_handler = QtLogHandler()
        configure_logging(self.log_handler)

        self.logger = logging.getLogger("ChaChaCrypt.Main")

        self._init_window()
        self._init_tabs()
        self._init_status_bar()

        self.logger.info(
            "%s v%s started", Settings.APP_NAME, Settings.APP_VERSION
        )

    def _init_window(self):
        self.setWindowTitle(f"{Settings.APP_NAME} — ChaCha20 Stream Cipher")
        self.setMinimumSize(900, 650)
        self.resize(1100, 780)

    def _init_tabs(self):
        self.tabs = QTabWidget()
        self.setCentralWidget(self.tabs)

        self.tab_stream = StreamCipherTab()
        self.tab_text   = TextEncryptionUI()
        self.tab_logs   = LogsTab(self.log_handler)

        self.tabs.addTab(self.tab_stream, "🔐 Stream Cipher")
        self.tabs.addTab(self.tab_text,   "📝 Text Encryption")
        self.tabs.addTab(self.tab_logs,   "📜 Logs")

    def _init_status_bar(self):
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        native = "native engine available" \
            if CipherFactory.is_available("CHACHA20-NATIVE") \
            else "pure-Python engine only"
        self.status_label = QLabel(f"Ready — {native}")
        self.status_bar.addPermanentWidget(self.status_label)

    def closeEvent(self, event):
        self.logger.info("Goodbye!")
        event.accept()


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Entry Point
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def main():
    app = QApplication(sys.argv)
    app.setApplicationName(Settings.APP_NAME)
    app.setApplicationVersion(Settings.APP_VERSION)
    app.setStyleSheet(STYLE_SHEET)

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
