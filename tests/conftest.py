"""Shared test fixtures."""
import pytest

from defcite.config import Settings
from defcite.documents import SQLiteStorage
from defcite.shared.llm import StaticGenerator


class FailingGenerator:
    """Generator whose every call raises, like an unreachable provider."""

    def __init__(self):
        self.calls = 0

    def generate(self, prompt, max_tokens=2000, temperature=0.3, top_p=0.85):
        self.calls += 1
        raise RuntimeError("provider unavailable")


@pytest.fixture
def ml_document():
    """Text with one explicit ``adalah`` definition of "machine learning"."""
    return (
        "Pembelajaran mesin berkembang pesat dalam dekade terakhir. "
        "Machine learning adalah cabang kecerdasan buatan yang memungkinkan komputer "
        "belajar dari data tanpa diprogram secara eksplisit. "
        "Banyak perusahaan memanfaatkannya untuk analisis."
    )


@pytest.fixture
def indicator_document():
    """Text where "algoritma" is only described through an indicator word."""
    return (
        "Buku ini membahas dasar pemrograman komputer. "
        "Dalam banyak buku teks, istilah algoritma pada dasarnya berarti urutan langkah yang sistematis. "
        "Contoh sederhana dibahas pada bab berikutnya."
    )


@pytest.fixture
def unrelated_document():
    """Text that never mentions the keyword used in not-found tests."""
    return (
        "Dokumen ini membahas sejarah komputasi. "
        "Perkembangan perangkat keras mempengaruhi desain sistem operasi."
    )


@pytest.fixture
def ml_paraphrase():
    return (
        "Machine learning merupakan bidang kecerdasan buatan yang membuat komputer mampu belajar dari data. "
        "Pendekatan ini memungkinkan sistem meningkatkan kinerja tanpa pemrograman eksplisit."
    )


@pytest.fixture
def static_generator(ml_paraphrase):
    return StaticGenerator(ml_paraphrase)


@pytest.fixture
def failing_generator():
    return FailingGenerator()


@pytest.fixture
def storage(tmp_path):
    store = SQLiteStorage(str(tmp_path / "defcite.db"))
    store.create_tables()
    return store


@pytest.fixture
def settings(tmp_path):
    return Settings(db_path=str(tmp_path / "service.db"), llm_model="test-owner/test-model")
