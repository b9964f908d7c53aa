"""End-to-end tests for the chord recognition pipeline."""

import logging
import sys

import numpy as np
import pytest

from chordsense import (
    ChordRecognizer,
    ConfigurationError,
    ExtractorConfig,
    PipelineConfig,
    SampleBuffer,
    recognize_chords,
)
from chordsense.extraction import SpectralExtractor
from chordsense.logging_config import get_logger, setup_logging
from generate_test_audio import (
    A_MINOR_LOW,
    A_SEVEN,
    C_MAJOR,
    G_MAJOR,
    generate_chord,
    generate_harmonic_tone,
    generate_sine_wave,
)

SR = 22050


@pytest.fixture(params=["grid", "spectral"])
def recognizer(request):
    return ChordRecognizer(PipelineConfig(strategy=request.param))


@pytest.fixture
def c_major_audio():
    return generate_chord(C_MAJOR, 1.0, SR)


class TestRoundTrip:
    """Synthetic chords come back as the chord that was played."""

    def test_c_major(self, recognizer, c_major_audio):
        result = recognizer.analyze(c_major_audio, SR)
        assert set(result.pitch_classes) == {"C", "E", "G"}
        assert result.best.chord_name == "C"
        assert result.best.confidence == 1.0

    def test_g_major(self, recognizer):
        result = recognizer.analyze(generate_chord(G_MAJOR, 1.0, SR), SR)
        assert result.best.chord_name == "G"

    def test_a_minor_low_voicing(self):
        candidates = recognize_chords(generate_chord(A_MINOR_LOW, 1.0, SR), SR)
        assert candidates[0].chord_name == "Am"

    def test_dominant_seventh(self):
        candidates = recognize_chords(generate_chord(A_SEVEN, 1.0, SR), SR)
        assert candidates[0].chord_name == "A7"
        assert candidates[0].root == "A"
        assert candidates[0].quality == "7"

    def test_overtones_do_not_add_notes(self):
        config = PipelineConfig(strategy="spectral")
        result = ChordRecognizer(config).analyze(generate_harmonic_tone(220.0, 1.0, SR), SR)
        assert result.pitch_classes == ["A"]
        assert len(result.peaks) > len(result.fundamentals)
        assert result.candidates == []


class TestDegenerateInput:
    """Silence, short and missing buffers give empty results."""

    def test_silence(self, recognizer):
        result = recognizer.analyze(np.zeros(SR), SR)
        assert result.peaks == []
        assert result.fundamentals == []
        assert result.pitch_classes == []
        assert result.candidates == []
        assert result.best is None

    def test_none(self, recognizer):
        assert recognizer.detect_chords(None, SR) == []

    def test_too_short(self, recognizer):
        assert recognizer.detect_chords(generate_chord(C_MAJOR, 0.05, SR), SR) == []

    def test_single_tone_is_not_a_chord(self, recognizer):
        assert recognizer.detect_chords(generate_sine_wave(440.0, 1.0, SR), SR) == []

    def test_invalid_sample_rate(self, recognizer, c_major_audio):
        with pytest.raises(ConfigurationError):
            recognizer.analyze(c_major_audio, -1)

    def test_multichannel(self, recognizer):
        with pytest.raises(ConfigurationError):
            recognizer.analyze(np.zeros((2, SR)), SR)


class TestRecognizer:
    def test_accepts_sample_buffer(self, c_major_audio):
        buffer = SampleBuffer(c_major_audio, SR)
        assert ChordRecognizer().detect_chords(buffer, buffer.sample_rate)[0].chord_name == "C"

    def test_custom_extractor(self, c_major_audio):
        recognizer = ChordRecognizer(extractor=SpectralExtractor(ExtractorConfig.guitar()))
        assert recognizer.extractor.name == "spectral"
        assert recognizer.detect_chords(c_major_audio, SR)[0].chord_name == "C"

    def test_top_n(self, c_major_audio):
        recognizer = ChordRecognizer()
        assert len(recognizer.detect_chords(c_major_audio, SR, top_n=1)) == 1
        assert len(recognizer.detect_chords(c_major_audio, SR, top_n=None)) > 1

    def test_unknown_strategy(self):
        with pytest.raises(ConfigurationError):
            ChordRecognizer(PipelineConfig(strategy="wavelet"))

    def test_result_helpers(self, c_major_audio):
        result = ChordRecognizer().analyze(c_major_audio, SR, top_n=None)
        assert result.chord_names[0] == "C"
        assert result.contains("C Major")
        assert not result.contains("F#m")

        data = result.to_dict()
        assert data["candidates"][0]["chord_name"] == "C"
        assert set(data["pitch_classes"]) == {"C", "E", "G"}
        assert all(p["frequency"] > 0 for p in data["peaks"])

    def test_logs_stages_at_debug(self, c_major_audio, caplog):
        logger = logging.getLogger("chordsense.tests.pipeline")
        caplog.set_level(logging.DEBUG, logger="chordsense.tests.pipeline")

        ChordRecognizer(logger=logger).analyze(c_major_audio, SR)

        messages = [r.getMessage() for r in caplog.records if r.name == logger.name]
        assert any("grid extractor" in m for m in messages)
        assert any("Best chord C" in m for m in messages)
        assert all(r.levelno == logging.DEBUG for r in caplog.records if r.name == logger.name)

    def test_logs_no_match(self, caplog):
        logger = logging.getLogger("chordsense.tests.pipeline")
        caplog.set_level(logging.DEBUG, logger="chordsense.tests.pipeline")

        ChordRecognizer(logger=logger).analyze(np.zeros(SR), SR)

        assert any("No chord matched" in r.getMessage() for r in caplog.records)


class TestLoggingSetup:
    @pytest.fixture(autouse=True)
    def reset_package_logger(self):
        yield
        package_logger = logging.getLogger("chordsense")
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers.clear()
        package_logger.setLevel(logging.NOTSET)

    def test_console_handler_on_stderr(self):
        logger = setup_logging("debug")
        assert logger.name == "chordsense"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        logger = setup_logging("WARNING")
        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_log_file(self, tmp_path):
        log_path = tmp_path / "chordsense.log"
        logger = setup_logging("INFO", log_file=str(log_path))
        get_logger("chordsense.pipeline").info("hello from the pipeline")
        for handler in logger.handlers:
            handler.flush()
        assert "[INFO] chordsense.pipeline - hello from the pipeline" in log_path.read_text()
