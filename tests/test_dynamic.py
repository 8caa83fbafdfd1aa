from __future__ import annotations

import copy
import pickle
from uuid import UUID

import pytest
from hypothesis import given

from strongid import (
    STRICT_PROFILE,
    U8,
    U16,
    U32,
    U64,
    U128,
    DynamicStrongId,
    InvalidCharacterError,
    InvalidPrefixError,
    LengthMismatchError,
    MalformedDelimiterError,
    MissingPrefixError,
    PrefixMismatchError,
    StrongIdError,
    SuffixOverflowError,
    UnsupportedVersionError,
    Uuid,
    UuidVersion,
)

from .conftest import prefix_strategy, uuid_suffix_strategy


KNOWN_UUID = UUID("01890a5d-ac96-774b-bcce-b302099a8057")
KNOWN_SUFFIX = "01h455vb4pex5vsknk084sn02q"


class TestConstruction:
    def test_prefix_and_value(self) -> None:
        dyn = DynamicStrongId("user", 3203, U16)
        assert dyn.prefix == "user"
        assert dyn.id == 3203
        assert dyn.id_type is U16
        assert dyn.suffix == "0343"
        assert str(dyn) == "user_0343"

    def test_plain(self) -> None:
        dyn = DynamicStrongId.plain(3203, U16)
        assert dyn.prefix is None
        assert str(dyn) == "0343"

    def test_uuid_is_default_payload(self) -> None:
        dyn = DynamicStrongId("user", KNOWN_UUID)
        assert dyn.id_type is Uuid
        assert str(dyn) == f"user_{KNOWN_SUFFIX}"

    def test_from_int(self) -> None:
        dyn = DynamicStrongId.from_int("user", int(KNOWN_UUID))
        assert dyn.id == KNOWN_UUID

    def test_from_int_rejects_overflow(self) -> None:
        with pytest.raises(SuffixOverflowError, match="16 bits"):
            DynamicStrongId.from_int("user", 1 << 16, U16)

    def test_invalid_prefix(self) -> None:
        with pytest.raises(InvalidPrefixError):
            DynamicStrongId("User", 1, U16)

    def test_value_too_wide(self) -> None:
        with pytest.raises(SuffixOverflowError):
            DynamicStrongId("user", 256, U8)

    def test_wrong_value_type(self) -> None:
        with pytest.raises(TypeError):
            DynamicStrongId("user", "0343", U16)

    def test_id_type_must_be_capability(self) -> None:
        with pytest.raises(TypeError, match="payload capability"):
            DynamicStrongId("user", 1, int)  # type: ignore[arg-type]

    def test_strict_profile_rejects_prefix(self) -> None:
        with pytest.raises(InvalidPrefixError):
            DynamicStrongId("user", 1, U16, profile=STRICT_PROFILE)

    def test_strict_profile_plain(self) -> None:
        dyn = DynamicStrongId(None, 1, U16, profile=STRICT_PROFILE)
        assert str(dyn) == "0001"


class TestGeneration:
    def test_generate_defaults_to_v7(self) -> None:
        dyn = DynamicStrongId.generate("user")
        assert dyn.id.version == 7
        assert str(dyn).startswith("user_")
        assert len(dyn.suffix) == 26

    def test_generate_without_prefix(self) -> None:
        dyn = DynamicStrongId.generate()
        assert dyn.prefix is None
        assert len(str(dyn)) == 26

    def test_now_v7(self) -> None:
        assert DynamicStrongId.now_v7("user").id.version == 7

    def test_new_v4(self) -> None:
        assert DynamicStrongId.new_v4("user").id.version == 4

    def test_generate_passes_arguments(self) -> None:
        from uuid import NAMESPACE_URL, uuid5

        dyn = DynamicStrongId.generate("doc", UuidVersion.V5, NAMESPACE_URL, "https://example.com")
        assert dyn.id == uuid5(NAMESPACE_URL, "https://example.com")

    def test_generate_unsupported_version(self) -> None:
        with pytest.raises(UnsupportedVersionError):
            DynamicStrongId.generate(None, UuidVersion.V4, profile=STRICT_PROFILE)

    def test_datetime_and_timestamp(self) -> None:
        dyn = DynamicStrongId.now_v7("user")
        assert dyn.datetime.timestamp() == pytest.approx(dyn.timestamp)

    def test_timestamp_requires_uuid_payload(self) -> None:
        with pytest.raises(TypeError, match="no timestamp"):
            _ = DynamicStrongId("user", 1, U16).timestamp


class TestParsing:
    def test_with_prefix(self) -> None:
        dyn = DynamicStrongId.from_string("user_0343", U16)
        assert dyn.prefix == "user"
        assert dyn.id == 3203
        assert dyn.suffix == "0343"

    def test_without_prefix(self) -> None:
        dyn = DynamicStrongId.from_string("0343", U16)
        assert dyn.prefix is None
        assert dyn.id == 3203

    def test_uuid_vector(self) -> None:
        dyn = DynamicStrongId.from_string(f"prefix_{KNOWN_SUFFIX}")
        assert dyn.id == KNOWN_UUID
        assert str(dyn) == f"prefix_{KNOWN_SUFFIX}"

    def test_expected_prefix_matches(self) -> None:
        dyn = DynamicStrongId.from_string("user_0343", U16, expected_prefix="user")
        assert dyn.prefix == "user"

    def test_expected_prefix_differs(self) -> None:
        with pytest.raises(PrefixMismatchError, match="Expected prefix 'org', got 'user'"):
            DynamicStrongId.from_string("user_0343", U16, expected_prefix="org")

    def test_mismatch_error_carries_plain_strings(self) -> None:
        with pytest.raises(PrefixMismatchError) as exc_info:
            DynamicStrongId.from_string("user_0343", U16, expected_prefix="org")
        assert type(exc_info.value.expected) is str
        assert type(exc_info.value.found) is str
        assert str(exc_info.value) == "Expected prefix 'org', got 'user'"

    def test_expected_prefix_missing(self) -> None:
        with pytest.raises(MissingPrefixError, match="found none"):
            DynamicStrongId.from_string("0343", U16, expected_prefix="user")

    def test_prefix_is_checked_before_suffix(self) -> None:
        with pytest.raises(PrefixMismatchError):
            DynamicStrongId.from_string("user_!!", U16, expected_prefix="org")

    @pytest.mark.parametrize("text", ["_0343", "user_", "user_id_0343"])
    def test_malformed_delimiter(self, text: str) -> None:
        with pytest.raises(MalformedDelimiterError):
            DynamicStrongId.from_string(text, U16)

    @pytest.mark.parametrize("text", ["Case_00", "00numeric_00", "case0_00"])
    def test_invalid_prefix(self, text: str) -> None:
        with pytest.raises(InvalidPrefixError):
            DynamicStrongId.from_string(text, U8)

    @pytest.mark.parametrize(
        ("text", "id_type", "error"),
        [
            ("dyn_000", U8, LengthMismatchError),
            ("dyn_0000000000", U64, LengthMismatchError),
            ("dyn_0l", U8, InvalidCharacterError),
            ("dyn_8f", U8, SuffixOverflowError),
            ("dyn_zzzz", U16, SuffixOverflowError),
            ("dyn_z000000", U32, SuffixOverflowError),
        ],
    )
    def test_invalid_suffix(self, text: str, id_type: type, error: type[Exception]) -> None:
        with pytest.raises(error):
            DynamicStrongId.from_string(text, id_type)

    def test_strict_profile(self) -> None:
        assert DynamicStrongId.from_string("0343", U16, profile=STRICT_PROFILE).id == 3203
        with pytest.raises(MalformedDelimiterError):
            DynamicStrongId.from_string("user_0343", U16, profile=STRICT_PROFILE)

    def test_non_string_is_rejected(self) -> None:
        with pytest.raises(TypeError, match="Expected str"):
            DynamicStrongId.from_string(123, U16)  # type: ignore[arg-type]

    def test_all_errors_are_strong_id_errors(self) -> None:
        with pytest.raises(StrongIdError):
            DynamicStrongId.from_string("not_a_valid_id", U16)

    @given(prefix_strategy, uuid_suffix_strategy)
    def test_text_roundtrip(self, prefix: str, suffix: str) -> None:
        text = f"{prefix}_{suffix}"
        assert str(DynamicStrongId.from_string(text)) == text


class TestEquality:
    def test_same_parts_are_equal(self) -> None:
        a = DynamicStrongId("user", 1, U16)
        b = DynamicStrongId.from_string("user_0001", U16)
        assert a == b
        assert hash(a) == hash(b)

    def test_different_prefix(self) -> None:
        assert DynamicStrongId("user", 1, U16) != DynamicStrongId("org", 1, U16)

    def test_different_payload_type(self) -> None:
        assert DynamicStrongId("user", 1, U16) != DynamicStrongId("user", 1, U32)

    def test_not_equal_to_string(self) -> None:
        assert DynamicStrongId("user", 1, U16) != "user_0001"

    def test_ordering_by_text(self) -> None:
        ids = [DynamicStrongId("user", v, U16) for v in (300, 2, 40)]
        assert [i.id for i in sorted(ids)] == [2, 40, 300]
        assert DynamicStrongId("aaa", 9, U16) < DynamicStrongId("bbb", 1, U16)

    def test_ordering_with_other_type(self) -> None:
        with pytest.raises(TypeError):
            _ = DynamicStrongId("user", 1, U16) < "user_0002"  # type: ignore[operator]


class TestRepresentation:
    def test_repr(self) -> None:
        assert repr(DynamicStrongId("user", 3203, U16)) == "DynamicStrongId[U16]('user_0343')"

    def test_pickle(self) -> None:
        dyn = DynamicStrongId("user", 3203, U16)
        restored = pickle.loads(pickle.dumps(dyn))
        assert restored == dyn
        assert restored.id_type is U16
        assert str(restored) == "user_0343"

    def test_pickle_uuid(self) -> None:
        dyn = DynamicStrongId.now_v7("user")
        assert pickle.loads(pickle.dumps(dyn)) == dyn

    def test_copy_returns_same_object(self) -> None:
        dyn = DynamicStrongId("user", 3203, U16)
        assert copy.copy(dyn) is dyn
        assert copy.deepcopy(dyn) is dyn


class TestSubscripted:
    def test_from_string_uses_bound_payload(self) -> None:
        dyn = DynamicStrongId[U16].from_string("user_0343")
        assert dyn.id == 3203
        assert dyn.id_type is U16

    def test_from_string_u128(self) -> None:
        dyn = DynamicStrongId[U128].from_string("0" * 25 + "1")
        assert dyn.id == 1
        assert dyn.id_type is U128

    def test_bound_suffix_length_is_enforced(self) -> None:
        with pytest.raises(LengthMismatchError):
            DynamicStrongId[U16].from_string(f"user_{KNOWN_SUFFIX}")

    def test_constructors_use_bound_payload(self) -> None:
        assert DynamicStrongId[U16]("user", 3203).id_type is U16
        assert DynamicStrongId[U16].plain(3203).id_type is U16
        assert str(DynamicStrongId[U32].from_int("user", 1)) == "user_0000001"

    def test_bound_class_is_cached(self) -> None:
        assert DynamicStrongId[U16] is DynamicStrongId[U16]
        assert DynamicStrongId[U16] is not DynamicStrongId[U32]
        assert issubclass(DynamicStrongId[U16], DynamicStrongId)

    def test_explicit_matching_id_type(self) -> None:
        assert DynamicStrongId[U16].from_string("user_0343", U16).id == 3203

    def test_conflicting_id_type(self) -> None:
        with pytest.raises(TypeError, match="carries U16, got U32"):
            DynamicStrongId[U16].from_string("user_0000001", U32)
        with pytest.raises(TypeError):
            DynamicStrongId[U16]("user", 1, U8)

    def test_generate_requires_uuid_binding(self) -> None:
        assert DynamicStrongId[Uuid].now_v7("user").id_type is Uuid
        with pytest.raises(TypeError):
            DynamicStrongId[U16].now_v7("user")

    def test_cannot_rebind(self) -> None:
        with pytest.raises(TypeError, match="already bound"):
            DynamicStrongId[U16][U32]  # type: ignore[misc]

    def test_equal_to_unbound(self) -> None:
        assert DynamicStrongId[U16]("user", 3203) == DynamicStrongId("user", 3203, U16)

    def test_pickle(self) -> None:
        dyn = DynamicStrongId[U16]("user", 3203)
        restored = pickle.loads(pickle.dumps(dyn))
        assert restored == dyn
        assert type(restored) is DynamicStrongId[U16]
