"""Tests del motor de clasificación de parámetros.

Ejecutar:
    pytest tests/test_classification.py -v
"""

import json
import math

import pytest

from aquarium_api.classification import (
    DisplayClass,
    FileTableProvider,
    FreshwaterTableProvider,
    ParameterClassifier,
    ParameterSpec,
    ParameterStatus,
    RangeShape,
    ReferenceTable,
    ReferenceTableError,
    classify,
    parse_reading_value,
    status_to_display_class,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def table() -> ReferenceTable:
    return FreshwaterTableProvider().load()


@pytest.fixture
def classifier(table) -> ParameterClassifier:
    return ParameterClassifier(table)


@pytest.fixture
def fixture_table() -> ReferenceTable:
    """Tabla con keys distintas a las de agua dulce (la forma decide la regla)."""
    return ReferenceTable([
        ParameterSpec(
            key="copper",
            label="Copper",
            unit="ppm",
            shape=RangeShape.ZERO_TOLERANCE,
            ideal_max=0.0,
            caution_above=0.1,
            danger_above=0.3,
        ),
        ParameterSpec(
            key="temp",
            label="Temperature",
            unit="C",
            shape=RangeShape.BOUNDED,
            min_value=24.0,
            max_value=28.0,
        ),
    ])


# =============================================================================
# TEST 1: VALORES AUSENTES / INVÁLIDOS
# =============================================================================

class TestMissingAndInvalidValues:
    """Parámetro desconocido o valor vacío → unknown; no numérico → invalid."""

    @pytest.mark.parametrize("key", ["ammonia", "nitrite", "nitrate", "ph", "gh", "kh"])
    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_value_is_unknown(self, classifier, key, raw):
        assert classifier.classify(key, raw) == ParameterStatus.UNKNOWN

    def test_unknown_parameter(self, classifier):
        assert classifier.classify("salinity", "1.02") == ParameterStatus.UNKNOWN

    def test_non_string_parameter_is_unknown(self, classifier):
        assert classifier.classify(None, "7") == ParameterStatus.UNKNOWN
        assert classifier.evaluate(["ph"], "7").status == ParameterStatus.UNKNOWN

    @pytest.mark.parametrize("raw", ["abc", "  ", "-", ".", "e5", True, object(), float("nan")])
    def test_non_numeric_is_invalid(self, classifier, raw):
        assert classifier.classify("ph", raw) == ParameterStatus.INVALID

    def test_never_raises(self, classifier):
        for raw in (None, "", "x", [], {}, 3, 2.5, "1e999"):
            status = classifier.classify("ammonia", raw)
            assert isinstance(status, ParameterStatus)

    def test_huge_integer_saturates_to_infinity(self, classifier):
        assert parse_reading_value(10**400) == math.inf
        assert classifier.classify("ph", 10**400) == ParameterStatus.HIGH
        assert classifier.classify("ph", -10**400) == ParameterStatus.LOW


# =============================================================================
# TEST 2: REGLAS POR FORMA DE RANGO
# =============================================================================

class TestZeroTolerance:
    """Ammonia / nitrite: ideal en 0, warning > 0.25, danger > 1.0."""

    @pytest.mark.parametrize("raw,expected", [
        ("0", ParameterStatus.IDEAL),
        ("0.1", ParameterStatus.ELEVATED),
        ("0.25", ParameterStatus.ELEVATED),
        ("0.3", ParameterStatus.WARNING),
        ("1.0", ParameterStatus.WARNING),
        ("1.5", ParameterStatus.DANGER),
        ("-1", ParameterStatus.IDEAL),
    ])
    def test_ammonia(self, classifier, raw, expected):
        assert classifier.classify("ammonia", raw) == expected

    def test_nitrite_same_rules(self, classifier):
        assert classifier.classify("nitrite", "0") == ParameterStatus.IDEAL
        assert classifier.classify("nitrite", "0.5") == ParameterStatus.WARNING
        assert classifier.classify("nitrite", "2") == ParameterStatus.DANGER


class TestNitrate:

    @pytest.mark.parametrize("raw,expected", [
        ("15", ParameterStatus.PREFERRED),
        ("20", ParameterStatus.PREFERRED),
        ("30", ParameterStatus.ACCEPTABLE),
        ("40", ParameterStatus.ACCEPTABLE),
        ("50", ParameterStatus.HIGH),
    ])
    def test_nitrate(self, classifier, raw, expected):
        assert classifier.classify("nitrate", raw) == expected


class TestPh:
    """pH 6.5-7.5, optimal a ±0.2 del punto medio (7.0)."""

    @pytest.mark.parametrize("raw,expected", [
        ("7.0", ParameterStatus.OPTIMAL),
        ("7.1", ParameterStatus.OPTIMAL),
        ("6.6", ParameterStatus.ACCEPTABLE),
        ("7.5", ParameterStatus.ACCEPTABLE),
        ("8.0", ParameterStatus.HIGH),
        ("6.0", ParameterStatus.LOW),
    ])
    def test_ph(self, classifier, raw, expected):
        assert classifier.classify("ph", raw) == expected


class TestHardness:

    def test_gh_uses_primary_unit_only(self, classifier):
        assert classifier.classify("gh", "3") == ParameterStatus.LOW
        assert classifier.classify("gh", "6") == ParameterStatus.ACCEPTABLE
        assert classifier.classify("gh", "9") == ParameterStatus.HIGH
        # 100 ppm sería aceptable en la unidad alternativa, pero se lee como dGH
        assert classifier.classify("gh", "100") == ParameterStatus.HIGH

    def test_kh_has_no_upper_bound(self, classifier):
        assert classifier.classify("kh", "2") == ParameterStatus.LOW
        assert classifier.classify("kh", "3") == ParameterStatus.ACCEPTABLE
        assert classifier.classify("kh", "10") == ParameterStatus.ACCEPTABLE
        assert classifier.classify("kh", "500") == ParameterStatus.ACCEPTABLE


class TestInjectedTable:
    """El clasificador usa la tabla inyectada y despacha por forma."""

    def test_fixture_table(self, fixture_table):
        c = ParameterClassifier(fixture_table)
        assert c.classify("copper", "0") == ParameterStatus.IDEAL
        assert c.classify("copper", "0.2") == ParameterStatus.WARNING
        assert c.classify("temp", "26") == ParameterStatus.OPTIMAL
        assert c.classify("temp", "29") == ParameterStatus.HIGH
        assert c.classify("ammonia", "0") == ParameterStatus.UNKNOWN

    def test_module_level_classify_uses_default_table(self):
        assert classify("ammonia", "0") == ParameterStatus.IDEAL
        assert classify("kh", "2") == ParameterStatus.LOW


# =============================================================================
# TEST 3: PARSEO
# =============================================================================

class TestParsing:

    @pytest.mark.parametrize("raw,expected", [
        ("12abc", 12.0),
        ("  7.2 ", 7.2),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("5.", 5.0),
        ("-0.3", -0.3),
        ("+2", 2.0),
        (7, 7.0),
        (6.8, 6.8),
    ])
    def test_lenient_prefix_parsing(self, raw, expected):
        assert parse_reading_value(raw) == pytest.approx(expected)

    def test_infinity(self):
        assert parse_reading_value("Infinity") == math.inf
        assert parse_reading_value("-Infinity") == -math.inf

    @pytest.mark.parametrize("raw", ["abc", "", "  ", "-", "x12", None, False, [1]])
    def test_lenient_rejects(self, raw):
        assert parse_reading_value(raw) is None

    def test_strict_rejects_trailing_garbage(self):
        assert parse_reading_value("12abc", strict=True) is None
        assert parse_reading_value(" 12 ", strict=True) == 12.0

    def test_lenient_prefix_classifies(self, classifier):
        assert classifier.classify("nitrate", "15ppm") == ParameterStatus.PREFERRED

    def test_strict_classifier_marks_invalid(self, table):
        strict = ParameterClassifier(table, strict=True)
        assert strict.classify("nitrate", "15ppm") == ParameterStatus.INVALID
        assert strict.classify("nitrate", "15") == ParameterStatus.PREFERRED


# =============================================================================
# TEST 4: DISPLAY CLASS
# =============================================================================

class TestDisplayClass:

    @pytest.mark.parametrize("status,expected", [
        (ParameterStatus.IDEAL, DisplayClass.OK),
        (ParameterStatus.PREFERRED, DisplayClass.OK),
        (ParameterStatus.OPTIMAL, DisplayClass.OK),
        (ParameterStatus.ACCEPTABLE, DisplayClass.ACCEPTABLE),
        (ParameterStatus.ELEVATED, DisplayClass.ELEVATED),
        (ParameterStatus.LOW, DisplayClass.ELEVATED),
        (ParameterStatus.WARNING, DisplayClass.WARNING),
        (ParameterStatus.HIGH, DisplayClass.DANGER),
        (ParameterStatus.DANGER, DisplayClass.DANGER),
        (ParameterStatus.UNKNOWN, DisplayClass.UNKNOWN),
        (ParameterStatus.INVALID, DisplayClass.UNKNOWN),
    ])
    def test_mapping(self, status, expected):
        assert status_to_display_class(status) == expected

    def test_total_over_enum(self):
        for status in ParameterStatus:
            assert isinstance(status_to_display_class(status), DisplayClass)

    def test_accepts_string_values(self):
        assert status_to_display_class("danger") == DisplayClass.DANGER
        assert status_to_display_class("param-ok") == DisplayClass.UNKNOWN
        assert status_to_display_class(None) == DisplayClass.UNKNOWN
        assert status_to_display_class(["x"]) == DisplayClass.UNKNOWN

    def test_css_values(self):
        assert DisplayClass.OK.value == "param-ok"
        assert DisplayClass.UNKNOWN.value == "param-unknown"


# =============================================================================
# TEST 5: EVALUATE
# =============================================================================

class TestEvaluate:

    def test_evaluate_numeric(self, classifier):
        result = classifier.evaluate("ammonia", "1.5")
        assert result.status == ParameterStatus.DANGER
        assert result.display_class == DisplayClass.DANGER
        assert result.value == 1.5
        assert "Ammonia" in result.reason

    def test_evaluate_unknown_parameter(self, classifier):
        result = classifier.evaluate("salinity", "1")
        assert result.status == ParameterStatus.UNKNOWN
        assert result.value is None
        assert "salinity" in result.reason

    def test_evaluate_invalid(self, classifier):
        result = classifier.evaluate("ph", "abc")
        assert result.status == ParameterStatus.INVALID
        assert result.display_class == DisplayClass.UNKNOWN


# =============================================================================
# TEST 6: TABLA DE REFERENCIA
# =============================================================================

class TestReferenceTable:

    def test_default_order(self, table):
        assert [s.key for s in table.as_list()] == ["ammonia", "nitrite", "nitrate", "ph", "gh", "kh"]

    def test_table_is_read_only(self, table):
        with pytest.raises(TypeError):
            table["ph"] = table["kh"]  # type: ignore[index]
        with pytest.raises(TypeError):
            table._entries["new"] = table["kh"]  # type: ignore[index]

    def test_spec_is_frozen(self, table):
        with pytest.raises(Exception):
            table["ph"].min_value = 5.0  # type: ignore[misc]

    def test_kh_has_no_max(self, table):
        assert table["kh"].max_value is None
        assert table["kh"].alt_min == 50.0

    def test_rejects_caution_above_danger(self):
        with pytest.raises(ReferenceTableError):
            ParameterSpec(
                key="bad", label="Bad", unit="ppm", shape=RangeShape.ZERO_TOLERANCE,
                ideal_max=0.0, caution_above=2.0, danger_above=1.0,
            )

    def test_rejects_min_above_max(self):
        with pytest.raises(ReferenceTableError):
            ParameterSpec(
                key="bad", label="Bad", unit="pH", shape=RangeShape.BOUNDED,
                min_value=8.0, max_value=6.0,
            )

    def test_rejects_missing_threshold(self):
        with pytest.raises(ReferenceTableError, match="preferred_below"):
            ParameterSpec(
                key="bad", label="Bad", unit="ppm",
                shape=RangeShape.UPPER_BOUNDED_PREFERRED, max_value=40.0,
            )

    def test_rejects_duplicated_key(self, table):
        with pytest.raises(ReferenceTableError):
            ReferenceTable([table["ph"], table["ph"]])

    def test_file_provider(self, tmp_path, table):
        path = tmp_path / "table.json"
        path.write_text(json.dumps([spec.to_dict() for spec in table.as_list()]))

        loaded = FileTableProvider(path).load()

        assert list(loaded) == list(table)
        assert loaded["gh"] == table["gh"]

    def test_file_provider_rejects_non_list(self, tmp_path):
        path = tmp_path / "table.json"
        path.write_text(json.dumps({"ph": {}}))

        with pytest.raises(ReferenceTableError):
            FileTableProvider(path).load()

    def test_rejects_non_numeric_threshold(self):
        with pytest.raises(ReferenceTableError, match="min_value"):
            ParameterSpec(
                key="bad", label="Bad", unit="pH", shape=RangeShape.BOUNDED,
                min_value="6.5", max_value=7.5,
            )
        with pytest.raises(ReferenceTableError, match="alt_max"):
            ParameterSpec(
                key="bad", label="Bad", unit="dGH", shape=RangeShape.DUAL_UNIT_BOUNDED,
                min_value=4.0, max_value=8.0, alt_min=70.0, alt_max=True,
            )

    def test_file_provider_rejects_string_thresholds(self, tmp_path):
        path = tmp_path / "table.json"
        path.write_text(json.dumps([
            {"key": "ph", "shape": "bounded", "min_value": "6.5", "max_value": "7.5"},
        ]))

        with pytest.raises(ReferenceTableError, match="must be numbers"):
            FileTableProvider(path).load()
