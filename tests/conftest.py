"""Shared test fixtures and Hypothesis strategies."""

from __future__ import annotations

from hypothesis import strategies as st

from strongid import ALPHABET, U8, U16, U32, U64, U128, StrongId, StrongUuid, USize, Uuid, factory


# =============================================================================
# Common Generated Types and Factories
# =============================================================================


class UserId(StrongUuid, prefix="user"):
    pass


class OrgId(StrongUuid, prefix="org"):
    pass


class ApiKeyId(StrongUuid, prefix="apikey"):
    pass


class PlainId(StrongUuid):
    pass


class TicketNo(StrongId, id_type=U32, prefix="ticket"):
    pass


UserIdFactory = factory(UserId)
OrgIdFactory = factory(OrgId)
ApiKeyIdFactory = factory(ApiKeyId)

INT_CAPABILITIES = [U8, U16, U32, U64, U128, USize]
ALL_CAPABILITIES = [*INT_CAPABILITIES, Uuid]


# =============================================================================
# Hypothesis Strategies
# =============================================================================

# Strategy for valid prefixes (lowercase ASCII letters only)
prefix_strategy = st.from_regex(r"[a-z]{1,20}", fullmatch=True)

# Strategy for valid base32 characters
base32_strategy = st.sampled_from(ALPHABET)

# Strategy for valid 26-char UUID suffixes (top two bits must be zero)
uuid_suffix_strategy = st.builds(
    lambda head, tail: head + tail,
    st.sampled_from(ALPHABET[:8]),
    st.text(base32_strategy, min_size=25, max_size=25),
)

uuid_int_strategy = st.integers(min_value=0, max_value=(1 << 128) - 1)
