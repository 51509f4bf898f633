"""
Instruction encoder for the enrollment (prereq) Anchor program.

Accounts are listed in the program IDL order with their mutability;
payloads are an 8-byte Anchor discriminator followed by borsh arguments.
"""

import hashlib
import struct

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey


def anchor_discriminator(instruction_name: str) -> bytes:
    """
    Anchor global instruction discriminator.

    Examples:
        >>> len(anchor_discriminator("initialize"))
        8
    """
    return hashlib.sha256(f"global:{instruction_name}".encode()).digest()[:8]


def borsh_string(value: str) -> bytes:
    """Borsh-encode a string: u32 little-endian length + utf-8 bytes."""
    encoded = value.encode("utf-8")
    return struct.pack("<I", len(encoded)) + encoded


class PrereqProgram:
    """Builds initialize / submit instructions for the enrollment program."""

    def __init__(
        self,
        program_id: Pubkey,
        system_program_id: Pubkey,
        mpl_core_program_id: Pubkey,
        initialize_instruction: str = "initialize",
        submit_instruction: str = "submit_ts",
    ):
        self.program_id = program_id
        self.system_program_id = system_program_id
        self.mpl_core_program_id = mpl_core_program_id
        self.initialize_instruction = initialize_instruction
        self.submit_instruction = submit_instruction

    def initialize(self, user: Pubkey, account: Pubkey, github: str) -> Instruction:
        """
        Create the per-user record at the derived account address.

        Args:
            user: Enrolling wallet (signer, writable, pays rent)
            account: Per-user record PDA (writable)
            github: GitHub handle stored in the record
        """
        data = anchor_discriminator(self.initialize_instruction) + borsh_string(github)
        accounts = [
            AccountMeta(user, is_signer=True, is_writable=True),
            AccountMeta(account, is_signer=False, is_writable=True),
            AccountMeta(self.system_program_id, is_signer=False, is_writable=False),
        ]
        return Instruction(self.program_id, data, accounts)

    def submit(
        self,
        user: Pubkey,
        account: Pubkey,
        mint: Pubkey,
        collection: Pubkey,
        authority: Pubkey,
    ) -> Instruction:
        """
        Mint the completion asset into the collection.

        Args:
            user: Enrolling wallet (signer, writable)
            account: Existing per-user record PDA (writable)
            mint: Fresh asset identity (signer, writable)
            collection: Collection asset (writable)
            authority: Collection authority PDA (readonly)
        """
        data = anchor_discriminator(self.submit_instruction)
        accounts = [
            AccountMeta(user, is_signer=True, is_writable=True),
            AccountMeta(account, is_signer=False, is_writable=True),
            AccountMeta(mint, is_signer=True, is_writable=True),
            AccountMeta(collection, is_signer=False, is_writable=True),
            AccountMeta(authority, is_signer=False, is_writable=False),
            AccountMeta(self.mpl_core_program_id, is_signer=False, is_writable=False),
            AccountMeta(self.system_program_id, is_signer=False, is_writable=False),
        ]
        return Instruction(self.program_id, data, accounts)
