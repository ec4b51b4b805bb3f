"""Prompt templates for paraphrase, document analysis and not-found explanations."""

from defcite.shared.text import clean_text

SENTENCE_COUNT_WORDS = ["", "satu kalimat", "dua kalimat", "tiga kalimat", "empat kalimat", "lima kalimat"]

# Content plan per sentence position (1-based); only the first N are used.
SENTENCE_PLAN = (
    "Kalimat 1: Definisi inti dengan struktur berbeda",
    "Kalimat 2: Elaborasi atau karakteristik utama",
    "Kalimat 3: Fungsi atau penerapan praktis",
    "Kalimat 4: Konteks atau domain penggunaan",
    "Kalimat 5: Signifikansi atau implikasi",
)

# ---------------------------------------------------------------------------
# PARAPHRASE
# ---------------------------------------------------------------------------

PARAPHRASE_PROMPT = """\
Anda adalah ahli linguistik dan parafrase tingkat professor dengan keahlian dalam bahasa Indonesia akademis. \
Tugas Anda adalah memparafrase definisi berikut dengan presisi tinggi.

DEFINISI ASLI:
"{original}"

KATA KUNCI: {keyword}
KONTEKS: {context}

INSTRUKSI PARAFRASE:
1. Buat parafrase TEPAT {count} kalimat ({count_words})
2. Setiap kalimat harus utuh dan bermakna lengkap
3. Gunakan variasi struktur kalimat:
{plan}

4. Gunakan transformasi linguistik:
   - Ubah struktur aktif-pasif
   - Variasi sinonim akademik
   - Reorder klausa subordinat
   - Nominalisasi/denominalisasi strategis

5. Pertahankan register akademik Indonesia yang natural
6. Pastikan kohesi antar kalimat dengan penanda wacana yang tepat
7. JANGAN gunakan kata "saya", "kami", "kita" atau referensi diri
8. JANGAN jelaskan proses parafrase
9. LANGSUNG berikan hasil parafrase {count} kalimat

HASIL PARAFRASE ({count_words}):"""


def sentence_count_words(count: int) -> str:
    if 0 < count < len(SENTENCE_COUNT_WORDS):
        return SENTENCE_COUNT_WORDS[count]
    return f"{count} kalimat"


def build_paraphrase_prompt(original: str, keyword: str, context: str, sentence_count: int) -> str:
    plan = "\n".join(f"   - {line}" for line in SENTENCE_PLAN[:sentence_count])
    return PARAPHRASE_PROMPT.format(
        original=clean_text(original),
        keyword=clean_text(keyword),
        context=clean_text(context),
        count=sentence_count,
        count_words=sentence_count_words(sentence_count),
        plan=plan,
    )


# ---------------------------------------------------------------------------
# COMPREHENSIVE ANALYSIS (no pattern-derived definition)
# ---------------------------------------------------------------------------

ANALYSIS_PROMPT = """\
Anda adalah asisten AI ahli analisis dokumen akademik. Tugas Anda adalah melakukan analisis mendalam \
terhadap dokumen untuk mencari dan menganalisis definisi kata kunci.

INSTRUKSI ANALISIS:
1. Lakukan pencarian menyeluruh untuk kata kunci "{keyword}" dalam teks
2. Identifikasi definisi langsung, tersirat, dan kontekstual
3. Berikan analisis yang komprehensif dalam bahasa Indonesia yang baik
4. Gunakan pendekatan multi-perspektif untuk memahami konsep

TEKS DOKUMEN:
{text}

KATA KUNCI: {keyword}
FORMAT SITASI: {citation_format}

PANDUAN ANALISIS:
- Cari definisi eksplisit (menggunakan kata "adalah", "yaitu", dll.)
- Identifikasi definisi implisit (dari konteks dan penjelasan)
- Perhatikan sinonim dan variasi istilah
- Analisis hubungan konsep dengan ide-ide terkait
- Pertimbangkan definisi operasional dan teoritis

FORMAT JAWABAN YANG WAJIB DIIKUTI:
STATUS_PENCARIAN: [DITEMUKAN/TIDAK_DITEMUKAN]
DEFINISI_EKSPLISIT: [kutip langsung jika ada, atau "Tidak ditemukan definisi eksplisit"]
DEFINISI_IMPLISIT: [jelaskan pemahaman dari konteks, atau "Tidak dapat diidentifikasi dari konteks"]
ANALISIS_KOMPREHENSIF: [analisis mendalam dalam bahasa Indonesia akademis]
TINGKAT_KEPASTIAN: [TINGGI/SEDANG/RENDAH]

JAWABAN:"""

# ---------------------------------------------------------------------------
# NOT-FOUND EXPLANATION
# ---------------------------------------------------------------------------

NOT_FOUND_PROMPT = """\
Buatlah penjelasan akademis dalam bahasa Indonesia untuk situasi di mana definisi kata kunci tidak ditemukan dalam dokumen.

KATA KUNCI: "{keyword}"
NAMA FILE: "{filename}"
JUMLAH KALIMAT: {count}

Buat penjelasan yang:
1. TEPAT {count} kalimat
2. Profesional dan akademis
3. Menjelaskan hasil analisis yang telah dilakukan
4. Menyarankan kemungkinan penyebab
5. Memberikan kontribusi akademis

PENJELASAN ({count} kalimat):"""


def build_not_found_prompt(keyword: str, filename: str, sentence_count: int) -> str:
    return NOT_FOUND_PROMPT.format(
        keyword=clean_text(keyword),
        filename=clean_text(filename),
        count=sentence_count,
    )
