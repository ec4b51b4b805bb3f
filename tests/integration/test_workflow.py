"""End-to-end tests for document processing and manual paraphrasing."""
from defcite.config import CitationFormat, ProcessingOptions
from defcite.extraction import ConfidenceTier
from defcite.paraphrase import fallback_paraphrase
from defcite.shared.llm import StaticGenerator
from defcite.shared.text import count_sentences
from defcite.workflow import MANUAL_NOTE, paraphrase_text, process_document

NOT_FOUND_ANALYSIS = (
    "STATUS_PENCARIAN: TIDAK_DITEMUKAN\n"
    "DEFINISI_EKSPLISIT: Tidak ditemukan definisi eksplisit\n"
    "DEFINISI_IMPLISIT: Tidak dapat diidentifikasi dari konteks\n"
    "ANALISIS_KOMPREHENSIF: Dokumen tidak membahas istilah ini.\n"
    "TINGKAT_KEPASTIAN: RENDAH"
)
NOT_FOUND_EXPLANATION = (
    "Istilah blockchain tidak dibahas secara eksplisit dalam dokumen ini. "
    "Dokumen lebih berfokus pada sejarah komputasi dan perangkat keras."
)


class TestProcessDocument:
    """Tests for process_document."""

    def test_high_confidence_definition(self, ml_document, static_generator):
        """An explicit definition is paraphrased and cited without full analysis."""
        result = process_document(
            ml_document, "machine learning", "Smith, J.", 2020, "machine_learning-intro.pdf",
            generator=static_generator,
        )

        assert result.definition_found
        assert result.confidence is ConfidenceTier.HIGH
        assert result.top_score == 10
        assert result.original_definition.startswith("Machine learning adalah cabang")
        assert count_sentences(result.paraphrased) == 2
        assert result.citation.startswith("Menurut Smith (2020), machine learning merupakan")
        assert result.bibliography == "Smith, J. (2020). Machine Learning Intro. Dokumen Akademik."
        assert len(result.alternative_citations) == 2
        assert len(result.alternative_bibliographies) == 2
        assert result.sentence_analysis.processing_success
        assert "kepercayaan tinggi (skor: 10)" in result.processing_notes

        assert len(static_generator.calls) == 1
        assert "Machine learning adalah cabang" in static_generator.calls[0]["prompt"]

    def test_medium_confidence_uses_combined_context(self, indicator_document):
        generator = StaticGenerator(
            "Algoritma merupakan rangkaian langkah sistematis untuk menyelesaikan masalah."
        )
        result = process_document(
            indicator_document, "algoritma", "Knuth", 1968, "algoritma.txt",
            generator=generator, options=ProcessingOptions(sentence_count=1),
        )
        assert result.definition_found
        assert result.confidence is ConfidenceTier.MEDIUM
        assert "kepercayaan sedang (skor: 6)" in result.processing_notes
        assert count_sentences(result.paraphrased) == 1

    def test_definition_not_found(self, unrelated_document):
        """No candidates triggers full analysis, then a not-found explanation."""
        generator = StaticGenerator([NOT_FOUND_ANALYSIS, NOT_FOUND_EXPLANATION])
        result = process_document(
            unrelated_document, "blockchain", "Lee, A. & Kim, B.", 2019, "sejarah.pdf",
            generator=generator,
        )

        assert not result.definition_found
        assert result.confidence is ConfidenceTier.LOW
        assert result.original_definition == ""
        assert result.paraphrased.startswith("Istilah blockchain tidak dibahas")
        assert result.citation.startswith("Menurut Lee dan Kim (2019), ")
        assert result.processing_notes.startswith("Definisi eksplisit tidak ditemukan")

        assert len(generator.calls) == 2
        assert generator.calls[0]["temperature"] == 0.15
        assert generator.calls[1]["top_p"] == 0.9

    def test_definition_found_by_analysis(self, unrelated_document):
        generator = StaticGenerator([
            "STATUS_PENCARIAN: DITEMUKAN\n"
            "DEFINISI_EKSPLISIT: Tidak ditemukan definisi eksplisit\n"
            "DEFINISI_IMPLISIT: Perangkat keras dipahami sebagai komponen fisik komputer.\n"
            "ANALISIS_KOMPREHENSIF: Perangkat keras merupakan komponen fisik yang menjalankan sistem.\n"
            "TINGKAT_KEPASTIAN: SEDANG",
            "Perangkat keras merupakan komponen fisik yang menjalankan sistem komputer.",
        ])
        result = process_document(
            unrelated_document, "perangkat keras", "Tanenbaum", 2015, "sejarah.pdf",
            generator=generator, options=ProcessingOptions(sentence_count=1),
        )
        assert result.definition_found
        assert result.confidence is ConfidenceTier.MEDIUM
        assert result.original_definition == ""
        assert "Perangkat keras merupakan komponen fisik" in generator.calls[1]["prompt"]

    def test_generator_failure_falls_back(self, ml_document, failing_generator):
        """A failing generator still yields a complete, cited result."""
        result = process_document(
            ml_document, "machine learning", "Smith", 2020, "intro.pdf",
            generator=failing_generator, options=ProcessingOptions(sentence_count=3),
        )
        assert result.definition_found
        assert result.paraphrased == fallback_paraphrase("machine learning", 3)
        assert result.sentence_analysis.actual_sentences == 3
        assert result.citation.startswith("Menurut Smith (2020), ")

    def test_generator_failure_when_not_found(self, unrelated_document, failing_generator):
        result = process_document(
            unrelated_document, "blockchain", "Smith", 2020, "sejarah.pdf",
            generator=failing_generator,
        )
        assert not result.definition_found
        assert result.paraphrased == fallback_paraphrase("blockchain", 2)

    def test_mla_format(self, ml_document, static_generator):
        result = process_document(
            ml_document, "machine learning", "Smith", 2020, "intro.pdf",
            generator=static_generator,
            options=ProcessingOptions(citation_format=CitationFormat.MLA),
        )
        assert result.citation.endswith("(Smith 2020).")
        assert result.bibliography == 'Smith. "Intro." Dokumen Akademik, 2020.'
        assert result.citation_format == "MLA"

    def test_unknown_format_has_single_alternatives(self, ml_document, static_generator):
        result = process_document(
            ml_document, "machine learning", "Smith", 2020, "intro.pdf",
            generator=static_generator,
            options=ProcessingOptions(citation_format=CitationFormat.parse("harvard")),
        )
        assert result.alternative_citations == [result.citation]
        assert result.citation.startswith("Menurut Smith (2020), ")
        assert result.alternative_bibliographies == ["Smith (2020). Intro. Dokumen Akademik."]


class TestParaphraseText:
    """Tests for paraphrase_text."""

    def test_manual_definition(self, static_generator):
        definition = '"Machine learning adalah cabang kecerdasan buatan."'
        result = paraphrase_text(definition, "machine learning", "Smith, J.", 2020, generator=static_generator)

        assert result.definition_found
        assert result.confidence is ConfidenceTier.HIGH
        assert result.original_definition == "Machine learning adalah cabang kecerdasan buatan."
        assert result.processing_notes == MANUAL_NOTE
        assert result.bibliography == 'Smith, J. (2020). Definisi Untuk "Machine Learning". Dokumen Akademik.'
        assert result.sentence_analysis.original_sentences == 1
        assert count_sentences(result.paraphrased) == 2
