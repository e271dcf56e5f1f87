"""Balance reconciliation: pin a leg to its pool accounts via post-trade balances."""

from __future__ import annotations

import logging

from solders.pubkey import Pubkey

from .context import TransactionContext
from .discriminators import add_discriminators, remove_discriminators, swap_discriminators
from .errors import ReconciliationError, UnknownProgramError
from .models import SwapLeg
from .pool_layouts import layout_for
from .transaction import CompiledInstruction

LOG = logging.getLogger(__name__)


def set_tx_pool_info(
    context: TransactionContext,
    program_id: Pubkey,
    leg: SwapLeg,
    instruction: CompiledInstruction,
) -> SwapLeg:
    """Fill ``leg``'s pool fields from the program's layout, validating mints.

    The leg is mutated in place and returned. Raises ``UnknownProgramError``
    when no layout is registered and ``ReconciliationError`` for every other
    mismatch; on failure the leg must be discarded.
    """
    layout = layout_for(program_id)
    if layout is None:
        LOG.error("unknown program %s reached reconciliation", program_id)
        raise UnknownProgramError(program_id)

    data = instruction.data
    if len(data) < layout.opcode_len:
        raise ReconciliationError("invalid instruction data length")

    opcode = bytes(data[: layout.opcode_len])
    accepted = layout.whitelist or swap_discriminators()
    if opcode not in accepted and opcode not in remove_discriminators() and opcode not in add_discriminators():
        raise ReconciliationError(f"discriminator unmatched: {opcode.hex()}")

    account_count = len(instruction.accounts)
    tx_type, positions = layout.select(data, account_count)
    pool_pos, in_pos, out_pos = positions.resolve(account_count)
    for position in (pool_pos, in_pos, out_pos):
        if position < 0 or position >= account_count:
            raise ReconciliationError(
                f"account index out of range {account_count}/{pool_pos}-{in_pos}-{out_pos}"
            )

    in_index = instruction.accounts[in_pos]
    out_index = instruction.accounts[out_pos]
    in_balance = context.post_balances.get(in_index)
    out_balance = context.post_balances.get(out_index)
    if in_balance is None or out_balance is None:
        raise ReconciliationError("no post balance for pool account")

    # vault order is not always the trade order
    if in_balance.mint == leg.output_mint:
        in_index, out_index = out_index, in_index
        in_balance, out_balance = out_balance, in_balance
    if in_balance.mint != leg.input_mint:
        raise ReconciliationError("pool input account does not hold the input mint")
    if out_balance.mint != leg.output_mint:
        raise ReconciliationError("pool output account does not hold the output mint")

    leg.tx_type = tx_type
    leg.pool = context.key(instruction.accounts[pool_pos])
    leg.pool_in = context.key(in_index)
    leg.pool_out = context.key(out_index)
    leg.pool_in_amount = in_balance.ui_token_amount.raw
    leg.pool_out_amount = out_balance.ui_token_amount.raw
    leg.protocol = layout.protocol
    return leg
