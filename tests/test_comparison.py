from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strongid import U16, U32, DynamicStrongId

from .conftest import OrgId, TicketNo, UserId, UserIdFactory


class TestGeneratedEquality:
    def test_equal_payloads(self) -> None:
        uid = UserIdFactory()
        same = UserId(uid.uid)
        assert uid == same
        assert hash(uid) == hash(same)

    def test_different_types_with_same_payload(self) -> None:
        uid = UserIdFactory()
        org = OrgId(uid.uid)
        assert uid != org
        assert len({uid, org}) == 2

    def test_not_equal_to_string(self) -> None:
        uid = UserIdFactory()
        assert uid != str(uid)

    def test_not_equal_to_dynamic(self) -> None:
        uid = UserIdFactory()
        assert uid != uid.to_dynamic()

    def test_usable_as_dict_key(self) -> None:
        uid = UserIdFactory()
        lookup = {uid: "alice"}
        assert lookup[UserId.from_string(str(uid))] == "alice"


class TestGeneratedOrdering:
    @given(st.lists(st.integers(min_value=0, max_value=(1 << 32) - 1), min_size=1))
    def test_sorting_matches_numeric_order(self, values: list[int]) -> None:
        ids = [TicketNo(v) for v in values]
        assert [i.id for i in sorted(ids)] == sorted(values)

    def test_total_ordering(self) -> None:
        low, high = TicketNo(1), TicketNo(2)
        assert low < high
        assert low <= high
        assert high > low
        assert high >= low
        assert low <= TicketNo(1)

    def test_cross_type_ordering_is_unsupported(self) -> None:
        with pytest.raises(TypeError):
            _ = UserIdFactory() < OrgId.now_v7()  # type: ignore[operator]


class TestDynamicOrdering:
    @given(st.lists(st.integers(min_value=0, max_value=(1 << 16) - 1), min_size=1))
    def test_same_prefix_sorts_numerically(self, values: list[int]) -> None:
        ids = [DynamicStrongId("n", v, U16) for v in values]
        assert [i.id for i in sorted(ids)] == sorted(values)

    def test_text_order_across_widths(self) -> None:
        # "n_0001" sorts after "n_0000002"
        assert DynamicStrongId("n", 1, U16) > DynamicStrongId("n", 2, U32)
        assert DynamicStrongId("n", 1, U16) >= DynamicStrongId("m", 2, U32)
