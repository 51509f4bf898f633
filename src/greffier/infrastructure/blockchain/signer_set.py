"""
Required-signer tracking and signature attachment.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from solders.pubkey import Pubkey
from solders.transaction import Transaction

from greffier.domain.entities import SignedTransaction, TransactionSkeleton
from greffier.domain.exceptions import IncompleteSignersError, TransactionStateError
from greffier.domain.services import ISigner
from greffier.reporter import SystemReporter


class SignerSet:
    """
    Collects signatures for a skeleton.

    The required set is the fee payer plus every account flagged as a
    signer in any instruction. Signatures are emitted in the order the
    compiled message lists its signer keys (fee payer first), which is
    what the network verifier expects.
    """

    def __init__(self, reporter: Optional[SystemReporter] = None):
        self.reporter = reporter or SystemReporter(name="greffier.signers")

    @staticmethod
    def required_signers(skeleton: TransactionSkeleton) -> Tuple[Pubkey, ...]:
        """
        Identities that must sign, fee payer first then first-seen order.

        Args:
            skeleton: Transaction skeleton

        Returns:
            Ordered, de-duplicated tuple of identities
        """
        ordered: List[Pubkey] = [skeleton.fee_payer]
        seen = {skeleton.fee_payer}

        for instruction in skeleton.instructions:
            for meta in instruction.accounts:
                if meta.is_signer and meta.pubkey not in seen:
                    seen.add(meta.pubkey)
                    ordered.append(meta.pubkey)

        return tuple(ordered)

    def attach(
        self, skeleton: TransactionSkeleton, signers: Iterable[ISigner]
    ) -> SignedTransaction:
        """
        Sign the skeleton with the provided signers.

        Extra signers are ignored with a warning; instructions are never
        dropped to avoid needing a signer.

        Args:
            skeleton: Unsigned skeleton (consumed)
            signers: Signing capabilities, any order

        Returns:
            SignedTransaction in SIGNED state

        Raises:
            TransactionStateError: If the skeleton was already signed
            IncompleteSignersError: If a required identity has no signer
        """
        if skeleton.sealed:
            raise TransactionStateError(
                "Skeleton already consumed by signing",
                details={"state": skeleton.state.value},
            )

        provided: Dict[Pubkey, ISigner] = {}
        for signer in signers:
            provided.setdefault(signer.pubkey(), signer)

        required = self.required_signers(skeleton)
        missing = [key for key in required if key not in provided]
        if missing:
            raise IncompleteSignersError(missing)

        extraneous = [key for key in provided if key not in set(required)]
        if extraneous:
            self.reporter.warning(
                "Ignoring extraneous signer(s): "
                + ", ".join(str(k) for k in extraneous),
                context="SignerSet",
            )

        message = skeleton.compile_message()
        wire_order = message.account_keys[: message.header.num_required_signatures]
        unexpected = [key for key in wire_order if key not in provided]
        if unexpected:
            raise IncompleteSignersError(unexpected)

        payload = bytes(message)
        signatures = [provided[key].sign_message(payload) for key in wire_order]
        transaction = Transaction.populate(message, signatures)

        skeleton.seal()
        signed = SignedTransaction(skeleton=skeleton, transaction=transaction)

        self.reporter.debug(
            f"Signed {signed.signature} with {len(signatures)} signer(s)",
            context="SignerSet",
        )
        return signed
