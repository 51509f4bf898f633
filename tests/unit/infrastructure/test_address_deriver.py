"""
Unit tests for AddressDeriver.

Tests program address derivation, bump search and seed limits.

Usage:
    pytest tests/unit/infrastructure/test_address_deriver.py
"""

from unittest.mock import patch

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from greffier.domain.exceptions import DerivationExhaustedError, InvalidSeedsError
from greffier.infrastructure.blockchain.address_deriver import (
    MAX_SEED_LEN,
    AddressDeriver,
)
from tests.helpers.addresses import COLLECTION, PROGRAM_ID


class TestAddressDeriver:
    """Unit tests for AddressDeriver."""

    # ================================================================
    # derive
    # ================================================================

    def test_derive_is_deterministic(self):
        """Test the same inputs derive the same address."""
        deriver = AddressDeriver()
        user = Keypair().pubkey()

        first = deriver.derive(PROGRAM_ID, ["prereqs", user])
        second = deriver.derive(PROGRAM_ID, ["prereqs", user])

        assert first == second

    def test_derive_matches_runtime_algorithm(self):
        """Same address and bump as the runtime's find_program_address."""
        deriver = AddressDeriver()
        user = Keypair().pubkey()

        address, bump = deriver.derive(PROGRAM_ID, [b"prereqs", user])
        expected, expected_bump = Pubkey.find_program_address(
            [b"prereqs", bytes(user)], PROGRAM_ID
        )

        assert address == expected
        assert bump == expected_bump

    def test_collection_authority_matches_runtime_algorithm(self):
        """Test derivation matches solders find_program_address."""
        deriver = AddressDeriver()

        derived = deriver.derive(PROGRAM_ID, ["collection", COLLECTION])
        expected, _ = Pubkey.find_program_address(
            [b"collection", bytes(COLLECTION)], PROGRAM_ID
        )

        assert derived.address == expected

    def test_seed_order_matters(self):
        """Test swapping seeds changes the address."""
        deriver = AddressDeriver()
        user = Keypair().pubkey()

        forward = deriver.derive(PROGRAM_ID, ["prereqs", user])
        reverse = deriver.derive(PROGRAM_ID, [user, "prereqs"])

        assert forward.address != reverse.address

    def test_string_and_bytes_seeds_are_equivalent(self):
        """Test string seeds derive like their UTF-8 bytes."""
        deriver = AddressDeriver()
        user = Keypair().pubkey()

        from_str = deriver.derive(PROGRAM_ID, ["prereqs", user])
        from_bytes = deriver.derive(PROGRAM_ID, [b"prereqs", bytes(user)])

        assert from_str == from_bytes

    def test_derived_address_is_off_curve(self):
        """Test derived address is off the ed25519 curve."""
        derived = AddressDeriver().derive(PROGRAM_ID, ["prereqs"])

        assert not derived.address.is_on_curve()

    def test_different_programs_give_different_addresses(self):
        """Test program id is part of the derivation."""
        deriver = AddressDeriver()
        other_program = Keypair().pubkey()

        a = deriver.derive(PROGRAM_ID, ["prereqs"])
        b = deriver.derive(other_program, ["prereqs"])

        assert a.address != b.address

    def test_exhausted_when_every_candidate_is_on_curve(self):
        """Test exhaustion when no bump gives an off-curve address."""
        deriver = AddressDeriver()

        with patch(
            "greffier.infrastructure.blockchain.address_deriver._is_on_curve",
            return_value=True,
        ):
            with pytest.raises(DerivationExhaustedError):
                deriver.derive(PROGRAM_ID, ["prereqs"])

    # ================================================================
    # Seed limits
    # ================================================================

    def test_seed_longer_than_limit_rejected(self):
        """Test a seed over 32 bytes is rejected."""
        with pytest.raises(InvalidSeedsError):
            AddressDeriver().derive(PROGRAM_ID, [b"x" * (MAX_SEED_LEN + 1)])

    def test_seed_at_limit_accepted(self):
        """Test a 32-byte seed is accepted."""
        derived = AddressDeriver().derive(PROGRAM_ID, [b"x" * MAX_SEED_LEN])

        assert 0 <= derived.bump <= 255

    def test_too_many_seeds_rejected(self):
        """Test more than 15 seeds are rejected."""
        with pytest.raises(InvalidSeedsError):
            AddressDeriver().derive(PROGRAM_ID, [b"s"] * 16)

    # ================================================================
    # create / verify
    # ================================================================

    def test_create_with_canonical_bump_reproduces_address(self):
        """Test create with the found bump gives the same address."""
        deriver = AddressDeriver()
        user = Keypair().pubkey()
        address, bump = deriver.derive(PROGRAM_ID, ["prereqs", user])

        assert deriver.create(PROGRAM_ID, ["prereqs", user], bump) == address

    def test_create_rejects_out_of_range_bump(self):
        """Test create rejects bumps outside 0-255."""
        with pytest.raises(InvalidSeedsError):
            AddressDeriver().create(PROGRAM_ID, ["prereqs"], 256)

    def test_verify_accepts_matching_pair(self):
        """Test verify accepts a derived address and bump."""
        deriver = AddressDeriver()
        address, bump = deriver.derive(PROGRAM_ID, ["collection", COLLECTION])

        assert deriver.verify(PROGRAM_ID, ["collection", COLLECTION], bump, address)

    def test_verify_rejects_wrong_address(self):
        """Test verify rejects an address from other seeds."""
        deriver = AddressDeriver()
        _, bump = deriver.derive(PROGRAM_ID, ["collection", COLLECTION])

        assert not deriver.verify(
            PROGRAM_ID, ["collection", COLLECTION], bump, Keypair().pubkey()
        )
