import sys
import logging
from PyQt6.QtWidgets import (
    QApplication, QWidget, QLabel, QTextEdit, QLineEdit,
    QPushButton, QVBoxLayout, QHBoxLayout, QCheckBox,
    QComboBox, QGroupBox, QMessageBox
)

from core.crypto_engine import StreamSession, ChaChaError

logger = logging.getLogger("ChaChaCrypt.TextTab")

# label → double-rounds
VARIANTS = {
    "ChaCha20": 10,
    "ChaCha12": 6,
    "ChaCha8":  4,
}


class TextEncryptionUI(QWidget):
    """
    Passphrase / nonce text encryption.

    Text goes in as UTF-8, ciphertext comes out as hex. With "Strict
    lengths" unticked the passphrase and nonce are zero-padded or
    truncated to 32 and 12 bytes.
    """

    def __init__(self):
        super().__init__()
        self.setWindowTitle("ChaChaCrypt – Text Encryption")
        self.setGeometry(200, 100, 900, 600)

        main_layout = QVBoxLayout(self)

        # ---------- Header ----------
        title = QLabel("Text Encryption / Decryption")
        title.setStyleSheet("font-size: 20px; font-weight: bold;")
        main_layout.addWidget(title)

        subtitle = QLabel(
            "ChaCha stream cipher — a nonce must never repeat "
            "under the same passphrase"
        )
        subtitle.setStyleSheet("color: #b0b0b0;")
        main_layout.addWidget(subtitle)

        main_layout.addSpacing(15)

        # ---------- Controls ----------
        controls = QHBoxLayout()

        controls.addWidget(QLabel("Variant:"))
        self.algorithm_box = QComboBox()
        self.algorithm_box.addItems(list(VARIANTS))
        controls.addWidget(self.algorithm_box)

        controls.addSpacing(20)
        controls.addWidget(QLabel("Passphrase:"))
        self.key_edit = QLineEdit()
        self.key_edit.setEchoMode(QLineEdit.EchoMode.Password)
        controls.addWidget(self.key_edit)

        controls.addWidget(QLabel("Nonce:"))
        self.nonce_edit = QLineEdit()
        self.nonce_edit.setMaxLength(64)
        controls.addWidget(self.nonce_edit)

        self.strict_box = QCheckBox("Strict lengths")
        self.strict_box.setChecked(False)
        controls.addWidget(self.strict_box)

        main_layout.addLayout(controls)

        # ---------- Input Box ----------
        input_group = QGroupBox("Input Text")
        input_layout = QVBoxLayout()

        self.input_text = QTextEdit()
        self.input_text.setPlaceholderText(
            "Enter plain text (to encrypt) or hex cipher text (to decrypt)..."
        )
        input_layout.addWidget(self.input_text)
        input_group.setLayout(input_layout)
        main_layout.addWidget(input_group)

        # ---------- Buttons ----------
        btn_layout = QHBoxLayout()

        encrypt_btn = QPushButton("Encrypt")
        decrypt_btn = QPushButton("Decrypt")

        encrypt_btn.clicked.connect(self.encrypt_text)
        decrypt_btn.clicked.connect(self.decrypt_text)

        btn_layout.addStretch()
        btn_layout.addWidget(encrypt_btn)
        btn_layout.addWidget(decrypt_btn)
        btn_layout.addStretch()

        main_layout.addLayout(btn_layout)

        # ---------- Output Box ----------
        output_group = QGroupBox("Output")
        output_layout = QVBoxLayout()

        self.output_text = QTextEdit()
        self.output_text.setReadOnly(True)
        self.output_text.setPlaceholderText(
            "Encrypted or decrypted output will appear here..."
        )
        output_layout.addWidget(self.output_text)
        output_group.setLayout(output_layout)
        main_layout.addWidget(output_group)

        main_layout.addStretch()

    # ---------- Logic ----------
    def _session(self) -> StreamSession | None:
        passphrase = self.key_edit.text()
        nonce = self.nonce_edit.text()
        if not passphrase or not nonce:
            self.show_warning("Enter a passphrase and a nonce.")
            return None
        rounds = VARIANTS[self.algorithm_box.currentText()]
        try:
            return StreamSession.from_text(
                passphrase, nonce,
                double_rounds=rounds,
                allow_reduced_rounds=rounds < 10,
                strict=self.strict_box.isChecked(),
                continuous=False,
            )
        except ChaChaError as exc:
            self.show_warning(str(exc))
            return None

    def encrypt_text(self):
        text = self.input_text.toPlainText()
        if not text:
            self.show_warning("Please enter text to encrypt.")
            return
        session = self._session()
        if session is None:
            return
        self.output_text.setText(session.encrypt(text))
        logger.info(
            "Text encrypted (%s, %d chars)",
            self.algorithm_box.currentText(), len(text),
        )

    def decrypt_text(self):
        text = self.input_text.toPlainText()
        if not text:
            self.show_warning("Please enter hex cipher text to decrypt.")
            return
        session = self._session()
        if session is None:
            return
        try:
            self.output_text.setText(session.decrypt(text))
        except ChaChaError as exc:
            self.show_warning(str(exc))
            return
        logger.info("Text decrypted (%s)", self.algorithm_box.currentText())

    def show_warning(self, msg):
        QMessageBox.warning(self, "Input Required", msg)


# ---------- Run ----------
if __name__ == "__main__":
    app = QApplication(sys.argv)
    window = TextEncryptionUI()
    window.show()
    sys.exit(app.exec())
