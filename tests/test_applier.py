"""Tests for metaprop.applier (coercion and single write)."""

import pytest

from metaprop.applier import (
    apply_value,
    coerce_value,
    parse_double,
    parse_int,
    write_value,
    zero_value,
)
from metaprop.config import INVALID_ELEMENT_ID
from metaprop.decoder import decode_csv_row
from metaprop.errors import (
    InvalidDoubleValueError,
    InvalidIntegerValueError,
    MetaPropErrorCode,
    StorageKindMismatchError,
    UnsupportedStorageKindError,
    WriteFailedError,
)
from metaprop.kinds import StorageKind


class TestParseInt:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("42", 42), ("-7", -7), ("+3", 3), (" 12 ", 12), ("007", 7), ("2147483647", 2**31 - 1)],
    )
    def test_valid(self, text, expected):
        assert parse_int(text) == expected

    @pytest.mark.parametrize(
        "text", ["", " ", "4.2", "1e3", "abc", "1_000", "2147483648", "-2147483649", "0x10"]
    )
    def test_invalid(self, text):
        with pytest.raises(InvalidIntegerValueError):
            parse_int(text)


class TestParseDouble:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("3.5", 3.5), ("-0.25", -0.25), (" 1e3 ", 1000.0), ("42", 42.0)],
    )
    def test_valid(self, text, expected):
        assert parse_double(text) == expected

    @pytest.mark.parametrize(
        "text", ["", "  ", "abc", "1_0", "1,5", "3.5m", ".", "\u0661\u0662", "1e"]
    )
    def test_invalid(self, text):
        with pytest.raises(InvalidDoubleValueError):
            parse_double(text)

    @pytest.mark.parametrize("text", ["NaN", "nan", "inf", "-Infinity", "1e999"])
    def test_non_finite_rejected(self, text):
        with pytest.raises(InvalidDoubleValueError):
            parse_double(text)

    @pytest.mark.parametrize(("text", "expected"), [("1.", 1.0), (".5", 0.5), ("2E-2", 0.02)])
    def test_decimal_forms(self, text, expected):
        assert parse_double(text) == expected


class TestZeroValue:
    @pytest.mark.parametrize(
        ("storage_kind", "expected"),
        [
            (StorageKind.FLOATING_POINT, 0.0),
            (StorageKind.IDENTIFIER_REFERENCE, INVALID_ELEMENT_ID),
            (StorageKind.INTEGER, 0),
            (StorageKind.TEXT, ""),
        ],
    )
    def test_zero_values(self, storage_kind, expected):
        value = zero_value(storage_kind)
        assert value == expected
        assert type(value) is type(expected)

    def test_unsupported(self):
        with pytest.raises(UnsupportedStorageKindError):
            zero_value(StorageKind.UNSUPPORTED)

    def test_unknown_string_is_unsupported(self):
        with pytest.raises(UnsupportedStorageKindError):
            zero_value("blob")


class TestCoerceValue:
    """metaType x storage kind."""

    def test_int_to_integer(self, make_row):
        assert coerce_value(decode_csv_row(make_row()), StorageKind.INTEGER) == 42

    def test_int_to_text_mismatch(self, make_row):
        with pytest.raises(StorageKindMismatchError) as exc_info:
            coerce_value(decode_csv_row(make_row()), StorageKind.TEXT)
        assert exc_info.value.error_code == MetaPropErrorCode.STORAGE_KIND_MISMATCH

    def test_int_to_floating_point_mismatch(self, make_row):
        with pytest.raises(StorageKindMismatchError):
            coerce_value(decode_csv_row(make_row()), StorageKind.FLOATING_POINT)

    def test_invalid_int(self, make_row):
        prop = decode_csv_row(make_row(display_value="forty-two"))
        with pytest.raises(InvalidIntegerValueError):
            coerce_value(prop, StorageKind.INTEGER)

    def test_double_to_floating_point(self, make_row):
        prop = decode_csv_row(make_row(meta_type="Double", display_value="2.5"))
        assert coerce_value(prop, "floating-point") == 2.5

    def test_invalid_double(self, make_row):
        prop = decode_csv_row(make_row(meta_type="Double", display_value="abc"))
        with pytest.raises(InvalidDoubleValueError):
            coerce_value(prop, StorageKind.FLOATING_POINT)

    @pytest.mark.parametrize(
        ("meta_type", "expected"),
        [("Text", "Spec"), ("Link", "link:Spec:http://x"), ("File", "file:Spec:fl1:d.pdf")],
    )
    def test_text_like_to_text(self, make_row, meta_type, expected):
        prop = decode_csv_row(
            make_row(
                meta_type=meta_type,
                display_value="Spec",
                filelink="fl1",
                filename="d.pdf",
                link="http://x",
            )
        )
        assert coerce_value(prop, StorageKind.TEXT) == expected

    @pytest.mark.parametrize("meta_type", ["Text", "Link", "File"])
    def test_text_like_to_integer_mismatch(self, make_row, meta_type):
        prop = decode_csv_row(make_row(meta_type=meta_type))
        with pytest.raises(StorageKindMismatchError):
            coerce_value(prop, StorageKind.INTEGER)

    def test_text_to_unsupported_is_mismatch(self, make_row):
        prop = decode_csv_row(make_row(meta_type="Text"))
        with pytest.raises(StorageKindMismatchError):
            coerce_value(prop, StorageKind.UNSUPPORTED)

    @pytest.mark.parametrize(
        ("storage_kind", "expected"),
        [
            (StorageKind.FLOATING_POINT, 0.0),
            (StorageKind.IDENTIFIER_REFERENCE, INVALID_ELEMENT_ID),
            (StorageKind.INTEGER, 0),
            (StorageKind.TEXT, ""),
        ],
    )
    def test_delete_override_resets(self, make_row, storage_kind, expected):
        prop = decode_csv_row(make_row(meta_type="DeleteOverride", display_value="x"))
        assert coerce_value(prop, storage_kind) == expected

    def test_delete_override_unsupported(self, make_row):
        prop = decode_csv_row(make_row(meta_type="DeleteOverride"))
        with pytest.raises(UnsupportedStorageKindError):
            coerce_value(prop, StorageKind.UNSUPPORTED)


class TestApplyValue:
    """One write per success, none on failure."""

    def test_success_writes_once(self, target, make_row):
        slot = target.add_slot("e1", "Name", StorageKind.INTEGER, component="c1")
        result = apply_value(decode_csv_row(make_row()), slot, target)

        assert result.ok is True
        assert result.value == 42
        assert target.writes == [(slot.handle, 42)]

    def test_failure_does_not_write(self, target, make_row):
        slot = target.add_slot("e1", "Name", StorageKind.TEXT, component="c1")
        result = apply_value(decode_csv_row(make_row()), slot, target)

        assert result.ok is False
        assert result.error_code == MetaPropErrorCode.STORAGE_KIND_MISMATCH
        assert target.writes == []

    def test_invalid_value_does_not_write_default(self, target, make_row):
        slot = target.add_slot("e1", "Name", StorageKind.INTEGER, component="c1")
        result = apply_value(decode_csv_row(make_row(display_value="")), slot, target)

        assert result.ok is False
        assert result.error_code == MetaPropErrorCode.INVALID_INTEGER_VALUE
        assert target.writes == []

    def test_rejected_write(self, target, make_row):
        slot = target.add_slot("e1", "Name", StorageKind.INTEGER, component="c1")
        target.accept_writes = False
        with pytest.raises(WriteFailedError):
            write_value(decode_csv_row(make_row()), slot, target)

    def test_writer_exception_becomes_write_failed(self, target, make_row):
        slot = target.add_slot("e1", "Name", StorageKind.INTEGER, component="c1")

        class FailingWriter:
            def write(self, slot, value):
                raise OSError("disk gone")

        with pytest.raises(WriteFailedError, match="disk gone") as exc_info:
            write_value(decode_csv_row(make_row()), slot, FailingWriter())
        assert isinstance(exc_info.value.__cause__, OSError)
