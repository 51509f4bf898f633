"""
Transaction skeleton assembly.

No network access here: the lifetime anchor is fetched by the caller so
each workflow step decides when a fresh one is needed.
"""

from typing import Optional, Sequence

from solders.instruction import Instruction
from solders.pubkey import Pubkey

from greffier.domain.entities import TransactionSkeleton
from greffier.domain.exceptions import EmptyTransactionError
from greffier.domain.value_objects import LifetimeAnchor
from greffier.reporter import SystemReporter


class TransactionBuilder:
    """Builds TransactionSkeletons from ordered instruction lists."""

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter or SystemReporter(name="greffier.builder")

    def build(
        self,
        instructions: Sequence[Instruction],
        fee_payer: Pubkey,
        anchor: LifetimeAnchor,
    ) -> TransactionSkeleton:
        """
        Assemble a skeleton, preserving instruction order exactly.

        Args:
            instructions: Ordered instructions (execution order)
            fee_payer: Identity paying fees; always the first signer
            anchor: Lifetime anchor the transaction is bound to

        Returns:
            TransactionSkeleton in BUILT state

        Raises:
            EmptyTransactionError: If instructions is empty
        """
        if not instructions:
            raise EmptyTransactionError()

        skeleton = TransactionSkeleton(
            fee_payer=fee_payer,
            anchor=anchor,
            instructions=list(instructions),
        )

        self.reporter.debug(
            f"Built skeleton: {len(skeleton.instructions)} instruction(s), "
            f"payer {fee_payer}, anchor {anchor.blockhash}",
            context="TransactionBuilder",
        )
        return skeleton

    def rebuild(
        self, skeleton: TransactionSkeleton, anchor: LifetimeAnchor
    ) -> TransactionSkeleton:
        """
        Rebuild with the same instructions and payer but a fresh anchor.

        Used after an EXPIRED result; the new transaction serializes to
        different bytes while keeping identical instruction semantics.
        """
        self.reporter.info(
            f"Rebuilding transaction with fresh anchor {anchor.blockhash}",
            context="TransactionBuilder",
        )
        return self.build(skeleton.instructions, skeleton.fee_payer, anchor)
